"""
Error types shared by the puzzle solvers.

Input problems derive from PuzzleError and are reported by the drivers.
InvariantViolation marks a bug and is never caught.
"""

from __future__ import annotations

__all__ = [
    "PuzzleError",
    "MalformedInputError",
    "TruncatedStreamError",
    "InvariantViolation",
]


class PuzzleError(Exception):
    """Base class for problems with puzzle input."""


class MalformedInputError(PuzzleError, ValueError):
    """Input failed structural parsing or an argument is out of range."""


class TruncatedStreamError(PuzzleError, ValueError):
    """The bit reader ran out of bits in the middle of a field."""

    def __init__(self, field: str, required: int, remaining: int) -> None:
        self.field = field
        self.required = required
        self.remaining = remaining
        super().__init__(
            f"Truncated bit stream while reading {field}\n"
            f"  Required: {required} bits\n"
            f"  Remaining: {remaining} bits"
        )


class InvariantViolation(AssertionError):
    """An internal guarantee was broken."""
