"""
Shared entry-point plumbing for the daily puzzle scripts.

Each day script supplies a solve function taking the raw input text and
returning its two answers. run() loads the input, calls it, and prints
"part1: <value>" and "part2: <value>".
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.text import Text

from puzzle_errors import PuzzleError

INPUT_DIR = Path(__file__).parent / "inputs"

Solver = Callable[[str], tuple[int, int]]

logger = logging.getLogger(__name__)


def input_path(day: int, argv: list[str]) -> Path:
    """The file named on the command line, else inputs/dayNN.txt."""
    if argv:
        return Path(argv[0])
    return INPUT_DIR / f"day{day:02d}.txt"


def run(day: int, solve: Solver, argv: list[str] | None = None, console: Console | None = None) -> int:
    """
    Solve one day's puzzle and print both answers.

    Args:
        day: Puzzle day, used to find the default input file
        solve: Function from input text to (part1, part2)
        argv: Command line arguments after the script name; at most one path
        console: Where diagnostics go (defaults to stderr)

    Returns:
        Process exit code: 0 on success, 1 on bad input, 2 on bad usage
    """
    if argv is None:
        argv = sys.argv[1:]
    if console is None:
        console = Console(stderr=True)

    if len(argv) > 1:
        console.print(Text(f"usage: day{day:02d}.py [INPUT_FILE]", style="bold red"))
        return 2

    path = input_path(day, argv)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        console.print(Text(f"day{day:02d}: cannot read {path}: {e.strerror}", style="bold red"))
        return 1
    except UnicodeDecodeError as e:
        console.print(Text(f"day{day:02d}: malformed input in {path}", style="bold red"))
        console.print(Text(f"Input is not valid UTF-8\n  Byte offset {e.start}", style="red"))
        return 1

    logger.info("day%02d: solving %s (%d bytes)", day, path, len(text))
    try:
        part1, part2 = solve(text)
    except PuzzleError as e:
        console.print(Text(f"day{day:02d}: malformed input in {path}", style="bold red"))
        console.print(Text(str(e), style="red"))
        return 1

    print(f"part1: {part1}")
    print(f"part2: {part2}")
    return 0


def main(day: int, solve: Solver) -> None:
    """Configure logging, run, and exit with run()'s status."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    sys.exit(run(day, solve))
