"""
Input parsing utilities for the puzzle solvers.

Provides three parsers, one per input format:
1. Risk grids: one row per line, one digit per cell
2. Snail numbers: bracketed nested pairs such as "[[1,2],3]"
3. Packet transmissions: a line of hexadecimal digits, expanded to bits
"""

from __future__ import annotations

from grid_types import Cell, Grid
from packet_decoder import hex_to_bits
from puzzle_errors import MalformedInputError
from snailfish import SnailNumber

__all__ = ["parse_grid", "parse_snail_number", "parse_snail_numbers", "hex_to_bits", "parse_hex"]


def parse_grid(definition: str) -> Grid:
    """
    Parse a risk grid from text.

    Format:
    - One row per line, rows top to bottom
    - One digit (0-9) per cell, no separators
    - Leading/trailing whitespace on each line and blank lines are ignored

    Example:
        \"\"\"
        116
        138
        \"\"\"
        Creates a 3x2 grid where Cell(x=2, y=0, cost=6)

    Args:
        definition: Multi-line string with one grid row per line

    Returns:
        The parsed Grid

    Raises:
        MalformedInputError: If the grid is empty, has a non-digit character,
            or its rows differ in length
    """
    row_strings = [line.strip() for line in definition.strip().splitlines() if line.strip()]
    if not row_strings:
        raise MalformedInputError("Empty grid definition")

    rows: list[tuple[Cell, ...]] = []
    for y, row_str in enumerate(row_strings):
        cells: list[Cell] = []
        for x, char in enumerate(row_str):
            if not char.isdigit() or not char.isascii():
                raise MalformedInputError(
                    f"Invalid character '{char}' in grid\n"
                    f"  Row {y}, column {x}: \"{row_str}\"\n"
                    f"  Valid characters: digits (0-9)"
                )
            cells.append(Cell(x, y, int(char)))
        rows.append(tuple(cells))

    # Validate all rows have same length
    width = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != width]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in grid\n"
            f"  Expected: {width} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise MalformedInputError(error_msg)

    return Grid(tuple(rows))


# =============================================================================
# Snail Numbers
# =============================================================================


class _SnailScanner:
    """Recursive-descent reader over snail number text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, message: str) -> MalformedInputError:
        return MalformedInputError(
            f"{message}\n"
            f"  Offset {self.pos}: \"{self.text}\"\n"
            f"  Remaining: \"{self.text[self.pos:]}\""
        )

    def skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def expect(self, char: str) -> None:
        self.skip_space()
        if self.pos >= len(self.text):
            raise self.error(f"Expected '{char}' but input ended")
        if self.text[self.pos] != char:
            raise self.error(f"Expected '{char}' but found '{self.text[self.pos]}'")
        self.pos += 1

    def element(self):
        """Read a number or a pair, returned as nested lists."""
        self.skip_space()
        if self.pos >= len(self.text):
            raise self.error("Unexpected end of snail number")

        char = self.text[self.pos]
        if char == "[":
            self.pos += 1
            left = self.element()
            self.expect(",")
            right = self.element()
            self.expect("]")
            return [left, right]

        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isascii() and self.text[self.pos].isdigit():
            self.pos += 1
        if start == self.pos:
            raise self.error(f"Invalid character '{char}' in snail number")
        return int(self.text[start:self.pos])


def parse_snail_number(text: str) -> SnailNumber:
    """
    Parse one snail number from bracket notation.

    The outermost element must be a pair; whitespace around tokens is allowed.

    Examples:
        "[1,2]"            -> pair of leaves 1 and 2
        "[[1, 9], [8, 5]]" -> two nested pairs

    Raises:
        MalformedInputError: On unbalanced brackets, bad tokens, or trailing text
    """
    scanner = _SnailScanner(text.strip())
    scanner.skip_space()
    if scanner.pos >= len(scanner.text) or scanner.text[scanner.pos] != "[":
        raise scanner.error("Snail number must start with '['")

    nested = scanner.element()
    scanner.skip_space()
    if scanner.pos != len(scanner.text):
        raise scanner.error("Unexpected trailing text after snail number")

    return SnailNumber.from_nested(nested)


def parse_snail_numbers(definition: str) -> list[SnailNumber]:
    """Parse one snail number per non-blank line."""
    numbers: list[SnailNumber] = []
    for line_idx, line in enumerate(definition.splitlines()):
        if not line.strip():
            continue
        try:
            numbers.append(parse_snail_number(line))
        except MalformedInputError as e:
            raise MalformedInputError(f"Line {line_idx + 1}: {e}") from e
    return numbers


# =============================================================================
# Packet Transmissions
# =============================================================================


def parse_hex(definition: str) -> str:
    """Read the first non-blank line of a transmission file as bits."""
    for line in definition.splitlines():
        if line.strip():
            return hex_to_bits(line)
    raise MalformedInputError("Empty packet transmission")
