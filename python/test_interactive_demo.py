"""Tests for the interactive reduction stepper (without a terminal)."""

import io

import pytest
from rich.console import Console
from rich.panel import Panel

from input_parser import parse_snail_numbers
from interactive_demo import HOMEWORK, InteractiveReducer, load_homework
from snailfish import StepKind, sum_numbers


@pytest.fixture
def reducer() -> InteractiveReducer:
    return InteractiveReducer(parse_snail_numbers(HOMEWORK["explode"]))


class TestInteractiveReducer:
    """Tests for key handling and state."""

    def test_initial_state(self, reducer: InteractiveReducer) -> None:
        """Starts at the first number, not reducing."""
        assert str(reducer.total) == "[[[[4,3],4],4],[7,[[8,4],9]]]"
        assert not reducer.reducing
        assert not reducer.finished

    def test_add_then_step(self, reducer: InteractiveReducer) -> None:
        """Adding pairs the numbers; each step applies one rule."""
        reducer.handle_key("a")
        assert reducer.reducing
        assert str(reducer.total) == "[[[[[4,3],4],4],[7,[[8,4],9]]],[1,1]]"

        reducer.handle_key("n")
        assert reducer.last_step.kind is StepKind.EXPLODE
        assert str(reducer.total) == "[[[[0,7],4],[7,[[8,4],9]]],[1,1]]"
        assert "Exploded [4,3]" in reducer.status_message

    def test_step_to_completion(self, reducer: InteractiveReducer) -> None:
        """Five rules reduce the worked example, then the stepper stops."""
        reducer.handle_key("a")
        for _ in range(6):
            reducer.handle_key(" ")
        assert not reducer.reducing
        assert reducer.finished
        assert reducer.step_count == 5
        assert str(reducer.total) == "[[[[0,7],4],[[7,8],[6,0]]],[8,1]]"

    def test_finish(self) -> None:
        """Finishing every addition matches sum_numbers."""
        numbers = parse_snail_numbers(HOMEWORK["small"])
        reducer = InteractiveReducer(numbers)
        while not reducer.finished:
            reducer.handle_key("a")
            reducer.handle_key("f")
        assert reducer.total == sum_numbers(numbers)

    def test_cannot_add_while_reducing(self, reducer: InteractiveReducer) -> None:
        """A new number waits until the current reduction is done."""
        reducer.handle_key("a")
        reducer.handle_key("a")
        assert reducer.status_message == "Finish reducing before adding"

    def test_step_without_reduction(self, reducer: InteractiveReducer) -> None:
        """Stepping with nothing to reduce only updates the status."""
        reducer.handle_key("n")
        assert "Nothing to reduce" in reducer.status_message

    def test_reset(self, reducer: InteractiveReducer) -> None:
        """Reset returns to the first number."""
        reducer.handle_key("a")
        reducer.handle_key("f")
        reducer.handle_key("r")
        assert str(reducer.total) == "[[[[4,3],4],4],[7,[[8,4],9]]]"
        assert reducer.next_index == 1

    def test_quit_and_unknown_keys(self, reducer: InteractiveReducer) -> None:
        """Q stops the loop; other keys are reported."""
        assert reducer.handle_key("x") is True
        assert "Unknown key" in reducer.status_message
        assert reducer.handle_key("Q") is False

    def test_display(self, reducer: InteractiveReducer) -> None:
        """The display is a panel in every state."""
        assert isinstance(reducer.generate_display(), Panel)
        reducer.handle_key("a")
        reducer.handle_key("n")
        assert isinstance(reducer.generate_display(), Panel)

    def test_needs_numbers(self) -> None:
        """An empty list is rejected."""
        with pytest.raises(ValueError):
            InteractiveReducer([])


class TestLoadHomework:
    """Tests for choosing a homework from the command line."""

    @pytest.fixture
    def console(self) -> Console:
        return Console(file=io.StringIO(), width=1000)

    def test_default(self, console: Console) -> None:
        """No argument picks the explode example."""
        numbers = load_homework([], console=console)
        assert numbers == parse_snail_numbers(HOMEWORK["explode"])

    def test_named(self, console: Console) -> None:
        """A known name loads that homework."""
        numbers = load_homework(["small"], console=console)
        assert numbers is not None
        assert len(numbers) == 6

    def test_unknown_name(self, console: Console) -> None:
        """An unknown name lists the valid choices instead of raising."""
        assert load_homework(["huge"], console=console) is None
        output = console.file.getvalue()
        assert "Unknown homework: 'huge'" in output
        assert "small|explode|larger" in output

    def test_too_many_arguments(self, console: Console) -> None:
        """Only one name may be given."""
        assert load_homework(["small", "larger"], console=console) is None
        assert "usage" in console.file.getvalue()
