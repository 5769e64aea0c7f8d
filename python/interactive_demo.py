"""
Interactive demo for snail number addition.
Display a running sum and step through its reduction one rule at a time.
"""

from __future__ import annotations

import logging
import sys
from typing import Iterator

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_snail
from input_parser import parse_snail_numbers
from snailfish import ReductionStep, SnailNumber, StepKind, magnitude, pair, reduce_steps


class InteractiveReducer:
    """Interactive stepper over the reduction of a list of snail numbers."""

    def __init__(self, numbers: list[SnailNumber]) -> None:
        if not numbers:
            raise ValueError("Need at least one snail number")
        self.numbers = numbers
        self.console = Console()
        self.reset()

    def reset(self) -> None:
        """Start over from the first number."""
        self.total = self.numbers[0].copy()
        self.next_index = 1
        self.steps: Iterator[ReductionStep] | None = None
        self.last_step: ReductionStep | None = None
        self.step_count = 0
        self.status_message = "Ready"

    @property
    def reducing(self) -> bool:
        return self.steps is not None

    @property
    def finished(self) -> bool:
        return not self.reducing and self.next_index >= len(self.numbers)

    def add_next(self) -> None:
        """Pair the running total with the next number, leaving it unreduced."""
        if self.reducing:
            self.status_message = "Finish reducing before adding"
            return
        if self.finished:
            self.status_message = "All numbers added"
            return
        addend = self.numbers[self.next_index]
        self.total = pair(self.total, addend)
        self.next_index += 1
        self.steps = reduce_steps(self.total)
        self.last_step = None
        self.step_count = 0
        self.status_message = f"Added {addend}"

    def step(self) -> None:
        """Apply a single explode or split."""
        if self.steps is None:
            self.status_message = "Nothing to reduce; press A to add the next number"
            return
        step = next(self.steps, None)
        if step is None:
            self.steps = None
            self.last_step = None
            self.status_message = f"Reduced after {self.step_count} steps"
            return
        self.last_step = step
        self.step_count += 1
        verb = "Exploded" if step.kind is StepKind.EXPLODE else "Split into"
        self.status_message = f"{verb} [{step.values[0]},{step.values[1]}] at depth {step.depth}"

    def finish(self) -> None:
        """Run the current reduction to completion."""
        while self.reducing:
            self.step()

    def handle_key(self, key: str) -> bool:
        """Act on one key press. Returns False when the demo should stop."""
        match key.lower():
            case "q":
                self.status_message = "Quitting..."
                return False
            case "r":
                self.reset()
            case "a":
                self.add_next()
            case "n" | " ":
                self.step()
            case "f":
                self.finish()
            case _:
                self.status_message = f"Unknown key: {repr(key)}"
        return True

    def generate_display(self) -> Panel:
        """Generate the current display with the number and status."""
        highlight = self.last_step.handle if self.last_step is not None else None
        status = Text()
        status.append("Numbers added: ", style="bold")
        status.append(f"{self.next_index}/{len(self.numbers)}\n")
        status.append("State: ", style="bold")
        status.append("reducing" if self.reducing else "reduced")
        status.append(f" ({self.step_count} steps)\n\n")

        status.append(Text.from_ansi(render_snail(self.total, highlight=highlight)))
        status.append("\n\n")
        if not self.reducing:
            status.append("Magnitude: ", style="bold")
            status.append(f"{magnitude(self.total)}\n\n")

        status.append("Keys:\n", style="bold cyan")
        status.append("  A - Add next number\n")
        status.append("  N / Space - Apply one rule\n")
        status.append("  F - Finish reduction\n")
        status.append("  R - Reset\n")
        status.append("  Q - Quit\n\n")
        status.append(f"Status: {self.status_message}", style="italic")

        return Panel(status, title="Snailfish - Reduction", border_style="green")

    def run(self) -> None:
        """Run the interactive loop."""
        with Live(self.generate_display(), console=self.console, auto_refresh=False) as live:
            try:
                while True:
                    live.update(self.generate_display(), refresh=True)
                    key = readchar.readkey()
                    if not self.handle_key(key):
                        live.update(self.generate_display(), refresh=True)
                        break
            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display(), refresh=True)


HOMEWORK = dict(
    small="[1,1]\n[2,2]\n[3,3]\n[4,4]\n[5,5]\n[6,6]",
    explode="[[[[4,3],4],4],[7,[[8,4],9]]]\n[1,1]",
    larger=(
        "[[[0,[4,5]],[0,0]],[[[4,5],[2,6]],[9,5]]]\n"
        "[7,[[[3,7],[4,3]],[[6,3],[8,8]]]]\n"
        "[[2,[[0,8],[3,4]]],[[[6,7],1],[7,[1,6]]]]"
    ),
)


def main(numbers: list[SnailNumber]) -> None:
    """Run the interactive demo over a list of numbers."""
    InteractiveReducer(numbers).run()


def load_homework(argv: list[str], console: Console | None = None) -> list[SnailNumber] | None:
    """Numbers for the homework named in argv (default "explode"), or None after reporting a bad name."""
    if console is None:
        console = Console(stderr=True)
    name = argv[0] if argv else "explode"
    if len(argv) > 1 or name not in HOMEWORK:
        console.print(Text(f"usage: interactive_demo.py [{'|'.join(HOMEWORK)}]", style="bold red"))
        if name not in HOMEWORK:
            console.print(Text(f"Unknown homework: {name!r}", style="red"))
        return None
    return parse_snail_numbers(HOMEWORK[name])


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    numbers = load_homework(sys.argv[1:])
    if numbers is None:
        sys.exit(2)
    main(numbers)
