"""Tests for snail number arithmetic."""

import pytest

from input_parser import parse_snail_number, parse_snail_numbers
from puzzle_errors import InvariantViolation, MalformedInputError
from snailfish import (
    Side,
    SnailNumber,
    StepKind,
    combine,
    explode,
    largest_pair_magnitude,
    leaf,
    magnitude,
    pair,
    reduce,
    reduce_steps,
    split,
    sum_numbers,
)

HOMEWORK = """
[[[0,[5,8]],[[1,7],[9,6]]],[[4,[1,2]],[[1,4],2]]]
[[[5,[2,8]],4],[5,[[9,9],0]]]
[6,[[[6,2],[5,6]],[[7,6],[4,7]]]]
[[[6,[0,7]],[0,9]],[4,[9,[9,0]]]]
[[[7,[6,4]],[3,[1,3]]],[[[5,5],1],9]]
[[6,[[7,3],[3,2]]],[[[3,8],[5,7]],4]]
[[[[5,4],[7,7]],8],[[8,3],8]]
[[9,3],[[9,9],[6,[4,9]]]]
[[2,[[7,7],7]],[[5,8],[[9,3],[0,2]]]]
[[[[5,2],5],[8,[3,7]]],[[5,[7,5]],[4,4]]]
"""


def snail(text: str) -> SnailNumber:
    return parse_snail_number(text)


# =============================================================================
# Test Arena Structure
# =============================================================================


class TestArena:
    """Tests for the arena representation."""

    def test_from_nested_round_trip(self) -> None:
        """Nested lists go in and come back out unchanged."""
        number = SnailNumber.from_nested([[1, 2], [[3, 4], 5]])
        assert number.to_nested() == [[1, 2], [[3, 4], 5]]
        assert str(number) == "[[1,2],[[3,4],5]]"

    def test_leaf_and_pair_helpers(self) -> None:
        """pair() joins two numbers without reducing."""
        number = pair(leaf(11), pair(leaf(1), leaf(2)))
        assert str(number) == "[11,[1,2]]"

    def test_equality_ignores_arena_layout(self) -> None:
        """Two numbers with the same shape are equal however they were built."""
        built = pair(pair(leaf(1), leaf(2)), leaf(3))
        parsed = snail("[[1,2],3]")
        assert built == parsed
        assert built != snail("[[1,2],4]")

    def test_parents_and_sides(self) -> None:
        """Every node knows its parent and which side it hangs from."""
        number = snail("[[1,2],3]")
        root = number.root
        left, right = number.children(root)
        assert number.parent(root) is None
        assert number.side(root) is None
        assert number.parent(left) == root
        assert number.side(left) is Side.LEFT
        assert number.side(right) is Side.RIGHT
        one, two = number.children(left)
        assert number.depth(one) == 2
        assert number.value(two) == 2

    def test_leaves_in_reading_order(self) -> None:
        """Leaves come out left to right with their depths."""
        number = snail("[[1,2],[[3,4],5]]")
        assert [(value, depth) for _, value, depth in number.leaves()] == [
            (1, 2),
            (2, 2),
            (3, 3),
            (4, 3),
            (5, 2),
        ]
        assert number.leaf_count() == 5
        assert number.max_depth() == 3

    def test_copy_is_independent(self) -> None:
        """Mutating a copy leaves the original alone."""
        original = snail("[[[[[9,8],1],2],3],4]")
        copy = original.copy()
        explode(copy)
        assert original == snail("[[[[[9,8],1],2],3],4]")
        assert copy != original

    def test_graft_returns_copied_subtree_root(self) -> None:
        """Grafting a subtree copies it under the given parent and returns its new handle."""
        source = snail("[[1,2],[[3,4],5]]")
        _, right = source.children(source.root)
        target = SnailNumber()
        root = target.add_pair()
        target.add_leaf(9, root, Side.LEFT)
        top = target.graft(source, right, root, Side.RIGHT)
        assert target.children(root)[1] == top
        assert target.parent(top) == root
        assert target.side(top) is Side.RIGHT
        assert str(target) == "[9,[[3,4],5]]"

    def test_graft_empty_number(self) -> None:
        """An empty number has nothing to graft."""
        with pytest.raises(InvariantViolation, match="no root"):
            SnailNumber().graft(SnailNumber())

    def test_from_nested_rejects_triples(self) -> None:
        """Pairs have exactly two elements."""
        with pytest.raises(MalformedInputError, match="exactly 2"):
            SnailNumber.from_nested([1, 2, 3])

    def test_from_nested_rejects_other_types(self) -> None:
        """Only ints and lists are allowed."""
        with pytest.raises(MalformedInputError, match="Invalid snail number element"):
            SnailNumber.from_nested([1, "2"])

    def test_from_nested_rejects_negative(self) -> None:
        """Numbers are non-negative."""
        with pytest.raises(MalformedInputError, match="non-negative"):
            SnailNumber.from_nested([1, -2])


# =============================================================================
# Test Neighbour Lookup
# =============================================================================


class TestNeighbour:
    """Tests for finding the nearest number to either side."""

    def test_neighbours_of_leaves(self) -> None:
        """Neighbours cross subtree boundaries."""
        number = snail("[[1,2],[3,4]]")
        handles = [handle for handle, _, _ in number.leaves()]
        one, two, three, four = handles
        assert number.neighbour(two, Side.LEFT) == one
        assert number.neighbour(two, Side.RIGHT) == three
        assert number.neighbour(three, Side.LEFT) == two
        assert number.neighbour(one, Side.LEFT) is None
        assert number.neighbour(four, Side.RIGHT) is None

    def test_neighbours_of_pair(self) -> None:
        """A pair's neighbours are the numbers just outside it."""
        number = snail("[[1,[2,3]],[[4,5],6]]")
        left, right = number.children(number.root)
        inner = number.children(right)[0]  # [4,5]
        assert number.value(number.neighbour(inner, Side.LEFT)) == 3
        assert number.value(number.neighbour(inner, Side.RIGHT)) == 6
        assert number.neighbour(left, Side.LEFT) is None
        assert number.value(number.neighbour(left, Side.RIGHT)) == 4

    def test_neighbour_of_root(self) -> None:
        """The root has no neighbours."""
        number = snail("[1,2]")
        assert number.neighbour(number.root, Side.LEFT) is None
        assert number.neighbour(number.root, Side.RIGHT) is None


# =============================================================================
# Test Rewrite Rules
# =============================================================================


class TestExplode:
    """Tests for the explode rule."""

    @pytest.mark.parametrize(
        "before,after",
        [
            ("[[[[[9,8],1],2],3],4]", "[[[[0,9],2],3],4]"),
            ("[7,[6,[5,[4,[3,2]]]]]", "[7,[6,[5,[7,0]]]]"),
            ("[[6,[5,[4,[3,2]]]],1]", "[[6,[5,[7,0]]],3]"),
            ("[[3,[2,[1,[7,3]]]],[6,[5,[4,[3,2]]]]]", "[[3,[2,[8,0]]],[9,[5,[4,[3,2]]]]]"),
            ("[[3,[2,[8,0]]],[9,[5,[4,[3,2]]]]]", "[[3,[2,[8,0]]],[9,[5,[7,0]]]]"),
            ("[[[[1,[9,8]],2],3],4]", "[[[[10,0],10],3],4]"),
        ],
    )
    def test_explode(self, before: str, after: str) -> None:
        """Values move to the nearest numbers and the pair becomes 0."""
        number = snail(before)
        assert explode(number) is True
        assert number == snail(after)

    def test_nothing_to_explode(self) -> None:
        """Shallow numbers are left alone."""
        number = snail("[[[[1,2],3],4],5]")
        assert explode(number) is False
        assert number == snail("[[[[1,2],3],4],5]")

    def test_explode_reduces_depth(self) -> None:
        """Exploding the only deep pair brings the depth back to 4."""
        number = snail("[[[[[9,8],1],2],3],4]")
        assert number.max_depth() == 5
        explode(number)
        assert number.max_depth() == 4


class TestSplit:
    """Tests for the split rule."""

    @pytest.mark.parametrize(
        "value,expected",
        [(10, "[5,5]"), (11, "[5,6]"), (21, "[10,11]")],
    )
    def test_split_single_number(self, value: int, expected: str) -> None:
        """Halves round down on the left and up on the right; split once only."""
        number = leaf(value)
        assert split(number) is True
        assert number == snail(expected)

    def test_split_leftmost_only(self) -> None:
        """Only the first number of 10 or more splits."""
        number = SnailNumber.from_nested([[1, 15], 13])
        assert split(number) is True
        assert number.to_nested() == [[1, [7, 8]], 13]

    def test_nothing_to_split(self) -> None:
        """Small numbers are left alone."""
        number = snail("[9,[9,9]]")
        assert split(number) is False


# =============================================================================
# Test Reduction and Addition
# =============================================================================


class TestReduce:
    """Tests for reduction and addition."""

    def test_worked_example(self) -> None:
        """The worked addition reduces to the documented result."""
        total = combine(snail("[[[[4,3],4],4],[7,[[8,4],9]]]"), snail("[1,1]"))
        assert total == snail("[[[[0,7],4],[[7,8],[6,0]]],[8,1]]")
        assert magnitude(total) == 1384

    def test_worked_example_steps(self) -> None:
        """Explodes take priority; splits happen only when nothing explodes."""
        number = pair(snail("[[[[4,3],4],4],[7,[[8,4],9]]]"), snail("[1,1]"))
        kinds = [step.kind for step in reduce_steps(number)]
        assert kinds == [
            StepKind.EXPLODE,
            StepKind.EXPLODE,
            StepKind.SPLIT,
            StepKind.SPLIT,
            StepKind.EXPLODE,
        ]

    def test_combine_leaves_inputs_alone(self) -> None:
        """Addition copies its operands."""
        a = snail("[[[[4,3],4],4],[7,[[8,4],9]]]")
        b = snail("[1,1]")
        combine(a, b)
        assert a == snail("[[[[4,3],4],4],[7,[[8,4],9]]]")
        assert b == snail("[1,1]")

    def test_reduce_is_idempotent(self) -> None:
        """Reducing a reduced number changes nothing."""
        number = reduce(
            pair(
                snail("[[[0,[4,5]],[0,0]],[[[4,5],[2,6]],[9,5]]]"),
                snail("[7,[[[3,7],[4,3]],[[6,3],[8,8]]]]"),
            )
        )
        before = number.to_nested()
        assert reduce(number).to_nested() == before
        assert list(reduce_steps(number)) == []

    def test_larger_addition(self) -> None:
        """Addition of two deep numbers."""
        total = combine(
            snail("[[[0,[4,5]],[0,0]],[[[4,5],[2,6]],[9,5]]]"),
            snail("[7,[[[3,7],[4,3]],[[6,3],[8,8]]]]"),
        )
        assert total == snail("[[[[4,0],[5,4]],[[7,7],[6,0]]],[[8,[7,7]],[[7,9],[5,0]]]]")

    @pytest.mark.parametrize(
        "lines,expected",
        [
            ("[1,1]\n[2,2]\n[3,3]\n[4,4]", "[[[[1,1],[2,2]],[3,3]],[4,4]]"),
            ("[1,1]\n[2,2]\n[3,3]\n[4,4]\n[5,5]", "[[[[3,0],[5,3]],[4,4]],[5,5]]"),
            ("[1,1]\n[2,2]\n[3,3]\n[4,4]\n[5,5]\n[6,6]", "[[[[5,0],[7,4]],[5,5]],[6,6]]"),
        ],
    )
    def test_sum_small_lists(self, lines: str, expected: str) -> None:
        """Lists are added left to right."""
        assert sum_numbers(parse_snail_numbers(lines)) == snail(expected)

    def test_sum_homework(self) -> None:
        """The example homework sums to the documented number."""
        total = sum_numbers(parse_snail_numbers(HOMEWORK))
        assert total == snail("[[[[6,6],[7,6]],[[7,7],[7,0]]],[[[7,7],[7,7]],[[7,8],[9,9]]]]")
        assert magnitude(total) == 4140

    def test_sum_single_number(self) -> None:
        """A one-element list sums to a copy of that element."""
        number = snail("[1,2]")
        total = sum_numbers([number])
        assert total == number
        assert total is not number

    def test_sum_empty(self) -> None:
        """An empty list has no sum."""
        with pytest.raises(MalformedInputError, match="empty"):
            sum_numbers([])


# =============================================================================
# Test Magnitude
# =============================================================================


class TestMagnitude:
    """Tests for the magnitude fold."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("[9,1]", 29),
            ("[[9,1],[1,9]]", 129),
            ("[[1,2],[[3,4],5]]", 143),
            ("[[[[0,7],4],[[7,8],[6,0]]],[8,1]]", 1384),
            ("[[[[1,1],[2,2]],[3,3]],[4,4]]", 445),
            ("[[[[3,0],[5,3]],[4,4]],[5,5]]", 791),
            ("[[[[5,0],[7,4]],[5,5]],[6,6]]", 1137),
            ("[[[[8,7],[7,7]],[[8,6],[7,7]]],[[[0,7],[6,6]],[8,7]]]", 3488),
        ],
    )
    def test_magnitude(self, text: str, expected: int) -> None:
        """Three times the left plus twice the right."""
        assert magnitude(snail(text)) == expected

    def test_magnitude_of_single_number(self) -> None:
        """A lone number is its own magnitude."""
        assert magnitude(leaf(7)) == 7

    def test_magnitude_at_least_leaf_count(self) -> None:
        """Nested numbers are weighted by at least 2."""
        for number in parse_snail_numbers(HOMEWORK):
            assert magnitude(number) >= number.leaf_count()


class TestLargestPair:
    """Tests for the best pair query."""

    def test_homework(self) -> None:
        """The example homework's best pair has magnitude 3993."""
        assert largest_pair_magnitude(parse_snail_numbers(HOMEWORK)) == 3993

    def test_equal_entries_at_different_positions(self) -> None:
        """Two equal numbers may still be added to each other."""
        numbers = [snail("[1,1]"), snail("[1,1]")]
        assert largest_pair_magnitude(numbers) == magnitude(snail("[[1,1],[1,1]]"))

    def test_needs_two_numbers(self) -> None:
        """A single number cannot form a pair."""
        with pytest.raises(MalformedInputError, match="at least 2"):
            largest_pair_magnitude([snail("[1,2]")])
