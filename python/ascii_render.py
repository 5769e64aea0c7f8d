"""
ASCII rendering for puzzle structures.

Provides three renderers:
1. Risk grids, with an optional path highlighted
2. Snail numbers in bracket notation, coloured by nesting depth
3. Packet trees as an indented outline
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_types import Cell, Grid
from packet_decoder import Literal, Operator, Packet
from snailfish import EXPLODE_DEPTH, SPLIT_THRESHOLD, SnailNumber

logger = logging.getLogger(__name__)

# Palette cycled by nesting depth
DEPTH_COLORS: list[Callable[[str], str]] = [
    chalk.blue,
    chalk.cyan,
    chalk.green,
    chalk.yellow,
    chalk.red,
    chalk.magenta,
]


def _depth_color(depth: int) -> Callable[[str], str]:
    return DEPTH_COLORS[depth % len(DEPTH_COLORS)]


# =============================================================================
# Risk Grids
# =============================================================================


def _cost_color(cost: int) -> Callable[[str], str]:
    """Low costs green, middling yellow, high red."""
    if cost <= 3:
        return chalk.green
    if cost <= 6:
        return chalk.yellow
    return chalk.red


def render_grid(grid: Grid, path: Iterable[Cell] | None = None, max_cols: int = 120) -> str:
    """
    Render a risk grid as rows of digits.

    Cells on the path are drawn in white; other cells are coloured by
    cost. Grids wider than max_cols are cut off on the right with a marker.

    Args:
        grid: The grid to render
        path: Optional cells to highlight
        max_cols: Maximum number of columns to draw

    Returns:
        Rendered string with ANSI color codes
    """
    on_path = {cell.pos for cell in path} if path is not None else set()
    lines: list[str] = []
    for row in grid.cells:
        chars: list[str] = []
        for cell in row[:max_cols]:
            if cell.pos in on_path:
                chars.append(chalk.white(str(cell.cost)))
            else:
                chars.append(_cost_color(cell.cost)(str(cell.cost)))
        if len(row) > max_cols:
            chars.append(chalk.white(">"))
        lines.append("".join(chars))

    logger.debug("render_grid: %dx%d, %d path cells", grid.width, grid.height, len(on_path))
    return "\n".join(lines)


def render_path_overlay(grid: Grid, path: Iterable[Cell]) -> str:
    """Plain-text view of a path: '#' on the path, '.' elsewhere."""
    on_path = {cell.pos for cell in path}
    return "\n".join(
        "".join("#" if cell.pos in on_path else "." for cell in row) for row in grid.cells
    )


# =============================================================================
# Snail Numbers
# =============================================================================


def render_snail(number: SnailNumber, highlight: int | None = None) -> str:
    """
    Render a snail number in bracket notation with colours.

    Brackets take the colour of their nesting depth. Numbers that are ready
    to split and pairs nested deep enough to explode are drawn bright red.
    The node with handle highlight, if given, is drawn in white.

    Returns:
        Rendered string with ANSI color codes
    """

    def walk(handle: int, depth: int) -> str:
        if number.is_leaf(handle):
            text = str(number.value(handle))
            if handle == highlight:
                return chalk.white(text)
            if number.value(handle) >= SPLIT_THRESHOLD:
                return chalk.redBright(text)
            return text

        left, right = number.children(handle)
        inner = f"{walk(left, depth + 1)},{walk(right, depth + 1)}"
        if handle == highlight:
            colorize = chalk.white
        elif depth >= EXPLODE_DEPTH:
            colorize = chalk.redBright
        else:
            colorize = _depth_color(depth)
        return f"{colorize('[')}{inner}{colorize(']')}"

    if number.root is None:
        return ""
    return walk(number.root, 0)


# =============================================================================
# Packet Trees
# =============================================================================


def render_packet_tree(packet: Packet) -> str:
    """
    Render a packet tree as an indented outline, one packet per line.

    Example output (colours omitted):
        v1 ==
          v2 +
            v2 1
            v4 3
          v6 *
            ...
    """
    lines: list[str] = []

    def walk(p: Packet, depth: int) -> None:
        indent = "  " * depth
        colorize = _depth_color(depth)
        version = colorize(f"v{p.version}")
        match p.body:
            case Literal(value=literal):
                lines.append(f"{indent}{version} {literal}")
            case Operator(kind=kind, children=children):
                lines.append(f"{indent}{version} {chalk.yellowBright(kind.symbol)}")
                for child in children:
                    walk(child, depth + 1)

    walk(packet, 0)
    return "\n".join(lines)
