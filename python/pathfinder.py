"""
Minimum-risk path search over a grid of entry costs.

The grid is treated as an implicit undirected graph: every cell is a node and
adjacent cells are joined in both directions. Moving into a cell costs that
cell's value, so the weight of a move depends on its target only.
"""

from __future__ import annotations

import heapq
import logging

from grid_types import Cell, Direction, Edge, Grid, PathResult
from puzzle_errors import InvariantViolation, MalformedInputError

__all__ = [
    "MAX_RISK",
    "validate_grid",
    "scale",
    "edges",
    "adjacency",
    "manhattan",
    "find_path",
    "find_min_cost_path",
]

logger = logging.getLogger(__name__)

MAX_RISK = 9  # Costs wrap from 9 back to 1 when scaling

Adjacency = dict[tuple[int, int], list[Edge]]


def validate_grid(grid: Grid) -> None:
    """
    Check that a grid is non-empty, rectangular, and correctly indexed.

    Raises:
        MalformedInputError: If any of the checks fail
    """
    if grid.height == 0 or grid.width == 0:
        raise MalformedInputError("Grid must have at least one cell")

    width = grid.width
    for y, row in enumerate(grid.cells):
        if len(row) != width:
            raise MalformedInputError(
                f"Grid is not rectangular\n"
                f"  Expected: {width} columns (from row 0)\n"
                f"  Row {y}: {len(row)} columns"
            )
        for x, cell in enumerate(row):
            if (cell.x, cell.y) != (x, y):
                raise MalformedInputError(
                    f"Cell stored at ({x}, {y}) claims position ({cell.x}, {cell.y})"
                )


def scale(grid: Grid, factor: int) -> Grid:
    """
    Tile a grid factor x factor times, raising costs in each tile.

    The tile at block offset (bx, by) maps every original cost c to
    ((c - 1 + bx + by) mod 9) + 1, so costs wrap from 9 back to 1.

    Args:
        grid: The original grid
        factor: Number of tiles along each axis (1 returns an equal grid)

    Returns:
        A new Grid of size (width * factor) x (height * factor)

    Raises:
        MalformedInputError: If factor is less than 1 or the grid is invalid
    """
    if factor < 1:
        raise MalformedInputError(f"Scale factor must be at least 1, got {factor}")
    validate_grid(grid)

    width, height = grid.width, grid.height
    rows: list[tuple[Cell, ...]] = []
    for by in range(factor):
        for row in grid.cells:
            new_row: list[Cell] = []
            for bx in range(factor):
                for cell in row:
                    new_row.append(
                        Cell(
                            cell.x + width * bx,
                            cell.y + height * by,
                            (cell.cost - 1 + bx + by) % MAX_RISK + 1,
                        )
                    )
            rows.append(tuple(new_row))

    logger.debug("scale: %dx%d by %d -> %dx%d", width, height, factor, width * factor, height * factor)
    return Grid(tuple(rows))


def edges(grid: Grid) -> list[Edge]:
    """
    List one edge per pair of adjacent cells.

    Only the down and right neighbours of each cell are emitted, so each
    adjacent pair appears once, directed away from the top-left.
    """
    result: list[Edge] = []
    for cell in grid:
        for direction in (Direction.S, Direction.E):
            neighbour = grid.get(*direction.step(cell.x, cell.y))
            if neighbour is not None:
                result.append(Edge(cell, neighbour))
    return result


def adjacency(grid: Grid) -> Adjacency:
    """
    Build the undirected move graph for a grid.

    Every edge from edges() is added in both directions so a search can move
    up and left as well as down and right.
    """
    graph: Adjacency = {cell.pos: [] for cell in grid}
    for edge in edges(grid):
        graph[edge.source.pos].append(edge)
        graph[edge.target.pos].append(edge.reversed())
    return graph


def manhattan(a: tuple[int, int], b: tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def find_path(grid: Grid) -> PathResult:
    """
    Find the cheapest path from the top-left cell to the bottom-right cell.

    Uses A* with the remaining Manhattan distance as heuristic, which never
    overestimates because every move costs at least 1. The start cell's own
    cost is not counted.

    Args:
        grid: A non-empty rectangular grid

    Returns:
        PathResult with the total cost and the cells along the path

    Raises:
        MalformedInputError: If the grid is empty or not rectangular
        InvariantViolation: If the goal cannot be reached
    """
    validate_grid(grid)
    graph = adjacency(grid)

    start = grid.cells[0][0].pos
    goal = grid.cells[-1][-1].pos

    # Heap entries: (estimated total, cost so far, y, x)
    frontier: list[tuple[int, int, int, int]] = [(manhattan(start, goal), 0, start[1], start[0])]
    best: dict[tuple[int, int], int] = {start: 0}
    came_from: dict[tuple[int, int], tuple[int, int]] = {}
    expanded = 0

    while frontier:
        _, cost, y, x = heapq.heappop(frontier)
        pos = (x, y)
        if cost > best.get(pos, cost):
            continue  # Stale entry, a cheaper route was already found
        expanded += 1

        if pos == goal:
            path = _rebuild_path(grid, came_from, goal)
            logger.info(
                "find_path: %dx%d grid, cost=%d, path_len=%d, expanded=%d",
                grid.width,
                grid.height,
                cost,
                len(path),
                expanded,
            )
            return PathResult(cost, path)

        for edge in graph[pos]:
            target = edge.target.pos
            new_cost = cost + edge.weight
            if new_cost < best.get(target, new_cost + 1):
                best[target] = new_cost
                came_from[target] = pos
                heapq.heappush(
                    frontier,
                    (new_cost + manhattan(target, goal), new_cost, target[1], target[0]),
                )

    raise InvariantViolation(f"No path from {start} to {goal} after expanding {expanded} cells")


def _rebuild_path(
    grid: Grid, came_from: dict[tuple[int, int], tuple[int, int]], goal: tuple[int, int]
) -> tuple[Cell, ...]:
    path: list[Cell] = []
    current: tuple[int, int] | None = goal
    while current is not None:
        cell = grid.get(*current)
        if cell is None:
            raise InvariantViolation(f"Path runs through {current}, outside the grid")
        path.append(cell)
        current = came_from.get(current)
    path.reverse()
    return tuple(path)


def find_min_cost_path(grid: Grid) -> int:
    """Return only the cost of the cheapest top-left to bottom-right path."""
    return find_path(grid).cost
