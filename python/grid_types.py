"""
Shared type definitions for the risk grid path finder.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Direction(Enum):
    """Cardinal direction for moving between cells."""

    N = "N"  # Up (decreasing y)
    S = "S"  # Down (increasing y)
    E = "E"  # Right (increasing x)
    W = "W"  # Left (decreasing x)

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    def step(self, x: int, y: int) -> tuple[int, int]:
        """Return the coordinates one cell away in this direction."""
        dx, dy = _DELTAS[self]
        return (x + dx, y + dy)


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.N: (0, -1),
    Direction.S: (0, 1),
    Direction.E: (1, 0),
    Direction.W: (-1, 0),
}


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class Cell:
    """A grid location and the cost of entering it."""

    x: int
    y: int
    cost: int

    @property
    def pos(self) -> tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Grid:
    """A rectangular grid of cells stored row-major."""

    cells: tuple[tuple[Cell, ...], ...]

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def get(self, x: int, y: int) -> Cell | None:
        """Return the cell at (x, y), or None when outside the grid."""
        if 0 <= y < self.height and 0 <= x < self.width:
            return self.cells[y][x]
        return None

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def __len__(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class Edge:
    """A move from one cell into an adjacent one."""

    source: Cell
    target: Cell

    @property
    def weight(self) -> int:
        # Entering a cell costs that cell's value
        return self.target.cost

    def reversed(self) -> Edge:
        return Edge(self.target, self.source)


@dataclass(frozen=True)
class PathResult:
    """Outcome of a path search."""

    cost: int
    path: tuple[Cell, ...]  # Start cell first, goal cell last

    @property
    def steps(self) -> int:
        return len(self.path) - 1
