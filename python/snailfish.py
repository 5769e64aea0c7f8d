"""
Snail numbers: binary trees of non-negative integers with a reduction rule set.

Trees are stored in an arena. Every node lives in a flat list and is addressed
by an integer handle; each node records its parent's handle and which side of
the parent it hangs from. Neighbour lookups for the explode rule are then just
walks over handles.

Reduction repeatedly applies, in order of preference:
- explode: the leftmost pair of two numbers nested four pairs deep adds its
  left value to the nearest number on its left, its right value to the nearest
  number on its right, and becomes 0
- split: the leftmost number of 10 or more becomes a pair of its halves
until neither rule applies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from puzzle_errors import InvariantViolation, MalformedInputError

__all__ = [
    "EXPLODE_DEPTH",
    "SPLIT_THRESHOLD",
    "Side",
    "StepKind",
    "ReductionStep",
    "SnailNumber",
    "leaf",
    "pair",
    "explode",
    "split",
    "reduce",
    "reduce_steps",
    "combine",
    "magnitude",
    "sum_numbers",
    "largest_pair_magnitude",
]

logger = logging.getLogger(__name__)

EXPLODE_DEPTH = 4
SPLIT_THRESHOLD = 10

Nested = Union[int, list, tuple]


class Side(Enum):
    """Which child slot of its parent a node occupies."""

    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> Side:
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


@dataclass
class _Node:
    """One arena slot. Leaves have a value, pairs have two child handles."""

    value: int | None = None
    left: int | None = None
    right: int | None = None
    parent: int | None = None
    side: Side | None = None

    @property
    def is_leaf(self) -> bool:
        return self.value is not None


class StepKind(Enum):
    """Rewrite rule applied during reduction."""

    EXPLODE = "explode"
    SPLIT = "split"


@dataclass(frozen=True)
class ReductionStep:
    """Record of a single rule application."""

    kind: StepKind
    handle: int  # Node that was rewritten
    values: tuple[int, int]  # Exploded pair values, or the split halves
    depth: int


# =============================================================================
# Arena
# =============================================================================


class SnailNumber:
    """A snail number stored as an arena of nodes with parent handles."""

    def __init__(self) -> None:
        self._nodes: list[_Node] = []
        self._free: list[int] = []
        self.root: int | None = None

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def _alloc(self, node: _Node) -> int:
        if self._free:
            handle = self._free.pop()
            self._nodes[handle] = node
        else:
            handle = len(self._nodes)
            self._nodes.append(node)
        return handle

    def _attach(self, handle: int, parent: int | None, side: Side | None) -> None:
        node = self._nodes[handle]
        node.parent = parent
        node.side = side
        if parent is None:
            self.root = handle
        elif side is Side.LEFT:
            self._nodes[parent].left = handle
        else:
            self._nodes[parent].right = handle

    def add_leaf(self, value: int, parent: int | None = None, side: Side | None = None) -> int:
        """Allocate a leaf and hang it under parent (or make it the root)."""
        if value < 0:
            raise MalformedInputError(f"Snail number values must be non-negative, got {value}")
        handle = self._alloc(_Node(value=value))
        self._attach(handle, parent, side)
        return handle

    def add_pair(self, parent: int | None = None, side: Side | None = None) -> int:
        """Allocate an empty pair; its children must be attached afterwards."""
        handle = self._alloc(_Node())
        self._attach(handle, parent, side)
        return handle

    def graft(self, other: SnailNumber, handle: int | None = None,
              parent: int | None = None, side: Side | None = None) -> int:
        """Copy a subtree of another arena into this one, returning the new handle."""
        if handle is None:
            handle = other._require_root()
        # Explicit stack of (source handle, destination parent, side)
        stack: list[tuple[int, int | None, Side | None]] = [(handle, parent, side)]
        created: list[int] = []
        while stack:
            src, dst_parent, dst_side = stack.pop()
            node = other._nodes[src]
            if node.is_leaf:
                new = self.add_leaf(node.value, dst_parent, dst_side)  # type: ignore[arg-type]
            else:
                new = self.add_pair(dst_parent, dst_side)
                stack.append((node.right, new, Side.RIGHT))  # type: ignore[arg-type]
                stack.append((node.left, new, Side.LEFT))  # type: ignore[arg-type]
            created.append(new)
        # Pre-order, so the subtree's own root was created first
        return created[0]

    @classmethod
    def from_nested(cls, obj: Nested) -> SnailNumber:
        """
        Build a snail number from nested two-element lists of integers.

        Example:
            SnailNumber.from_nested([[1, 2], 3])

        Raises:
            MalformedInputError: If an element is not an int or a 2-element list
        """
        number = cls()
        stack: list[tuple[Nested, int | None, Side | None]] = [(obj, None, None)]
        while stack:
            item, parent, side = stack.pop()
            if isinstance(item, bool) or not isinstance(item, (int, list, tuple)):
                raise MalformedInputError(f"Invalid snail number element: {item!r}")
            if isinstance(item, int):
                number.add_leaf(item, parent, side)
                continue
            if len(item) != 2:
                raise MalformedInputError(
                    f"Snail number pairs must have exactly 2 elements, got {len(item)}: {item!r}"
                )
            handle = number.add_pair(parent, side)
            stack.append((item[1], handle, Side.RIGHT))
            stack.append((item[0], handle, Side.LEFT))
        return number

    def copy(self) -> SnailNumber:
        """Return an independent, compacted copy."""
        result = SnailNumber()
        if self.root is not None:
            result.graft(self)
        return result

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _require_root(self) -> int:
        if self.root is None:
            raise InvariantViolation("Snail number has no root")
        return self.root

    def is_leaf(self, handle: int) -> bool:
        return self._nodes[handle].is_leaf

    def value(self, handle: int) -> int:
        node = self._nodes[handle]
        if node.value is None:
            raise InvariantViolation(f"Node {handle} is a pair, not a number")
        return node.value

    def children(self, handle: int) -> tuple[int, int]:
        node = self._nodes[handle]
        if node.left is None or node.right is None:
            raise InvariantViolation(f"Node {handle} is a number, not a pair")
        return (node.left, node.right)

    def parent(self, handle: int) -> int | None:
        return self._nodes[handle].parent

    def side(self, handle: int) -> Side | None:
        return self._nodes[handle].side

    def depth(self, handle: int) -> int:
        """Number of pairs enclosing this node (the root is at depth 0)."""
        depth = 0
        current = self._nodes[handle].parent
        while current is not None:
            depth += 1
            current = self._nodes[current].parent
        return depth

    def leaves(self) -> Iterator[tuple[int, int, int]]:
        """Yield (handle, value, depth) for every number, left to right."""
        stack: list[tuple[int, int]] = [(self._require_root(), 0)]
        while stack:
            handle, depth = stack.pop()
            node = self._nodes[handle]
            if node.is_leaf:
                yield (handle, node.value, depth)  # type: ignore[misc]
            else:
                stack.append((node.right, depth + 1))  # type: ignore[arg-type]
                stack.append((node.left, depth + 1))  # type: ignore[arg-type]

    def max_depth(self) -> int:
        """Nesting level of the most deeply nested number."""
        return max(depth for _, _, depth in self.leaves())

    def outermost_leaf(self, handle: int, side: Side) -> int:
        """Descend from handle along one side until reaching a number."""
        node = self._nodes[handle]
        while not node.is_leaf:
            handle = node.left if side is Side.LEFT else node.right  # type: ignore[assignment]
            node = self._nodes[handle]
        return handle

    def neighbour(self, handle: int, side: Side) -> int | None:
        """
        Find the nearest number strictly to one side of a node, in reading order.

        Walks parent handles upward while the current node hangs from the
        requested side. The first ancestor reached from the opposite side has
        a sibling subtree on the requested side; its outermost number facing
        back toward us is the neighbour. Reaching the root first means there
        is no neighbour.
        """
        current = handle
        while True:
            node = self._nodes[current]
            if node.parent is None:
                return None
            if node.side is side.opposite:
                parent = self._nodes[node.parent]
                sibling = parent.left if side is Side.LEFT else parent.right
                return self.outermost_leaf(sibling, side.opposite)  # type: ignore[arg-type]
            current = node.parent

    def to_nested(self, handle: int | None = None) -> Nested:
        """Convert a subtree back to nested lists of ints."""
        if handle is None:
            handle = self._require_root()
        node = self._nodes[handle]
        if node.is_leaf:
            return node.value  # type: ignore[return-value]
        return [self.to_nested(node.left), self.to_nested(node.right)]

    def leaf_count(self) -> int:
        """Number of regular numbers in the tree."""
        return sum(1 for _ in self.leaves())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnailNumber):
            return NotImplemented
        return self.to_nested() == other.to_nested()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return _format(self.to_nested())

    def __repr__(self) -> str:
        return f"SnailNumber({self})"

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_value(self, handle: int, value: int) -> None:
        node = self._nodes[handle]
        if node.value is None:
            raise InvariantViolation(f"Cannot set a value on pair {handle}")
        node.value = value

    def collapse(self, handle: int, value: int) -> None:
        """Replace a pair of two numbers with a single number, freeing the children."""
        left, right = self.children(handle)
        if not (self.is_leaf(left) and self.is_leaf(right)):
            raise InvariantViolation(f"Only a pair of two numbers can collapse, node {handle}")
        node = self._nodes[handle]
        node.left = node.right = None
        node.value = value
        self._free.extend((right, left))

    def expand(self, handle: int, left_value: int, right_value: int) -> None:
        """Replace a number with a pair of two numbers."""
        node = self._nodes[handle]
        if node.value is None:
            raise InvariantViolation(f"Node {handle} is already a pair")
        node.value = None
        self.add_leaf(left_value, handle, Side.LEFT)
        self.add_leaf(right_value, handle, Side.RIGHT)


def _format(nested: Nested) -> str:
    if isinstance(nested, int):
        return str(nested)
    return f"[{_format(nested[0])},{_format(nested[1])}]"


def leaf(value: int) -> SnailNumber:
    """Build a snail number consisting of a single regular number."""
    number = SnailNumber()
    number.add_leaf(value)
    return number


def pair(left: SnailNumber, right: SnailNumber) -> SnailNumber:
    """Build the pair [left, right] in a fresh arena, without reducing."""
    number = SnailNumber()
    root = number.add_pair()
    number.graft(left, parent=root, side=Side.LEFT)
    number.graft(right, parent=root, side=Side.RIGHT)
    return number


# =============================================================================
# Rewrite Rules
# =============================================================================


def _find_exploding_pair(number: SnailNumber) -> tuple[int, int] | None:
    """Pre-order search for the leftmost pair of two numbers at EXPLODE_DEPTH or deeper."""
    stack: list[tuple[int, int]] = [(number._require_root(), 0)]
    while stack:
        handle, depth = stack.pop()
        if number.is_leaf(handle):
            continue
        left, right = number.children(handle)
        if depth >= EXPLODE_DEPTH and number.is_leaf(left) and number.is_leaf(right):
            return (handle, depth)
        stack.append((right, depth + 1))
        stack.append((left, depth + 1))
    return None


def _explode(number: SnailNumber) -> ReductionStep | None:
    found = _find_exploding_pair(number)
    if found is None:
        return None
    handle, depth = found

    left, right = number.children(handle)
    left_value, right_value = number.value(left), number.value(right)

    before = number.neighbour(handle, Side.LEFT)
    if before is not None:
        number.set_value(before, number.value(before) + left_value)
    after = number.neighbour(handle, Side.RIGHT)
    if after is not None:
        number.set_value(after, number.value(after) + right_value)

    number.collapse(handle, 0)
    logger.debug(
        "explode: node %d [%d,%d] at depth %d (left=%s, right=%s)",
        handle, left_value, right_value, depth, before, after,
    )
    return ReductionStep(StepKind.EXPLODE, handle, (left_value, right_value), depth)


def _split(number: SnailNumber) -> ReductionStep | None:
    for handle, value, depth in number.leaves():
        if value >= SPLIT_THRESHOLD:
            halves = (value // 2, value - value // 2)
            number.expand(handle, *halves)
            logger.debug("split: node %d value %d -> [%d,%d]", handle, value, *halves)
            return ReductionStep(StepKind.SPLIT, handle, halves, depth)
    return None


def explode(number: SnailNumber) -> bool:
    """Apply the explode rule once, in place. Returns True if anything exploded."""
    return _explode(number) is not None


def split(number: SnailNumber) -> bool:
    """Apply the split rule once, in place. Returns True if anything split."""
    return _split(number) is not None


def reduce_steps(number: SnailNumber) -> Iterator[ReductionStep]:
    """
    Reduce a snail number in place, yielding each rule application.

    Explode is always preferred over split; after either rule the search
    starts again from explode. The generator finishes when neither applies.
    """
    while True:
        step = _explode(number) or _split(number)
        if step is None:
            return
        yield step


def reduce(number: SnailNumber) -> SnailNumber:
    """Reduce a snail number in place to its fixed point and return it."""
    explodes = splits = 0
    for step in reduce_steps(number):
        if step.kind is StepKind.EXPLODE:
            explodes += 1
        else:
            splits += 1
    logger.debug("reduce: %d explodes, %d splits", explodes, splits)
    return number


def combine(a: SnailNumber, b: SnailNumber) -> SnailNumber:
    """Add two snail numbers: pair them up, then reduce. Neither input is modified."""
    return reduce(pair(a, b))


def magnitude(number: SnailNumber, handle: int | None = None) -> int:
    """Weighted fold: a number is its value, a pair is 3 * left + 2 * right."""
    if handle is None:
        handle = number._require_root()
    if number.is_leaf(handle):
        return number.value(handle)
    left, right = number.children(handle)
    return 3 * magnitude(number, left) + 2 * magnitude(number, right)


# =============================================================================
# Homework Queries
# =============================================================================


def sum_numbers(numbers: list[SnailNumber]) -> SnailNumber:
    """Add a list of snail numbers left to right."""
    if not numbers:
        raise MalformedInputError("Cannot sum an empty list of snail numbers")
    total = numbers[0].copy()
    for number in numbers[1:]:
        total = combine(total, number)
    logger.info("sum_numbers: %d numbers, magnitude=%d", len(numbers), magnitude(total))
    return total


def largest_pair_magnitude(numbers: list[SnailNumber]) -> int:
    """
    Largest magnitude from adding any two different entries of the list.

    Addition is not commutative, so both orders of every pair are tried.
    An entry is never added to itself, though two equal entries at different
    positions may be.
    """
    if len(numbers) < 2:
        raise MalformedInputError(
            f"Need at least 2 snail numbers to form a pair, got {len(numbers)}"
        )
    best = 0
    for i, a in enumerate(numbers):
        for j, b in enumerate(numbers):
            if i != j:
                best = max(best, magnitude(combine(a, b)))
    logger.info("largest_pair_magnitude: %d numbers, best=%d", len(numbers), best)
    return best
