"""
Decoder and evaluator for packet transmissions.

A transmission is a bit stream holding one outermost packet, possibly followed
by zero padding. Every packet starts with a 3-bit version and a 3-bit type id:

- type id 4 is a literal: 5-bit groups, each a continuation flag followed by
  4 value bits, most significant group first, until a flag of 0
- any other type id is an operator: a length type bit, then either a 15-bit
  total length in bits (length type 0) or an 11-bit subpacket count (length
  type 1), followed by the subpackets

Decoding builds an immutable Packet tree, which is then queried for its
version sum or evaluated as an expression.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from puzzle_errors import InvariantViolation, MalformedInputError, TruncatedStreamError

__all__ = [
    "OperatorKind",
    "Literal",
    "Operator",
    "Packet",
    "TotalBits",
    "SubpacketCount",
    "BitReader",
    "hex_to_bits",
    "decode",
    "decode_hex",
    "iter_packets",
    "count_packets",
    "version_sum",
    "value",
    "to_expression",
]

logger = logging.getLogger(__name__)

VERSION_BITS = 3
TYPE_ID_BITS = 3
GROUP_VALUE_BITS = 4
TOTAL_LENGTH_BITS = 15
SUBPACKET_COUNT_BITS = 11
LITERAL_TYPE_ID = 4

# Header plus one literal group; fewer bits than this can only be padding
MIN_PACKET_BITS = VERSION_BITS + TYPE_ID_BITS + 1 + GROUP_VALUE_BITS


class OperatorKind(Enum):
    """Operator packet kinds, valued by their wire type id."""

    SUM = 0
    PRODUCT = 1
    MINIMUM = 2
    MAXIMUM = 3
    GREATER_THAN = 5
    LESS_THAN = 6
    EQUAL_TO = 7

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def is_comparison(self) -> bool:
        return self in (OperatorKind.GREATER_THAN, OperatorKind.LESS_THAN, OperatorKind.EQUAL_TO)


_SYMBOLS: dict[OperatorKind, str] = {
    OperatorKind.SUM: "+",
    OperatorKind.PRODUCT: "*",
    OperatorKind.MINIMUM: "min",
    OperatorKind.MAXIMUM: "max",
    OperatorKind.GREATER_THAN: ">",
    OperatorKind.LESS_THAN: "<",
    OperatorKind.EQUAL_TO: "==",
}


# =============================================================================
# Data Structures: Packet Tree
# =============================================================================


@dataclass(frozen=True)
class Literal:
    """Packet body holding a single number."""

    value: int


@dataclass(frozen=True)
class Operator:
    """Packet body applying an operator to ordered subpackets."""

    kind: OperatorKind
    children: tuple[Packet, ...]


PacketBody = Literal | Operator


@dataclass(frozen=True)
class Packet:
    """A decoded packet."""

    version: int
    body: PacketBody

    @property
    def children(self) -> tuple[Packet, ...]:
        return self.body.children if isinstance(self.body, Operator) else ()


@dataclass(frozen=True)
class TotalBits:
    """Subpackets fill exactly this many bits."""

    bits: int


@dataclass(frozen=True)
class SubpacketCount:
    """Exactly this many subpackets follow."""

    count: int


LengthSpec = TotalBits | SubpacketCount


# =============================================================================
# Bit Reader
# =============================================================================


class BitReader:
    """Cursor over a string of '0'/'1' characters."""

    def __init__(self, bits: str) -> None:
        self.bits = bits
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.bits) - self.pos

    def read(self, count: int, field: str) -> str:
        """Consume count bits, raising TruncatedStreamError if too few remain."""
        if count > self.remaining:
            raise TruncatedStreamError(field, count, self.remaining)
        chunk = self.bits[self.pos:self.pos + count]
        self.pos += count
        return chunk

    def read_int(self, count: int, field: str) -> int:
        return int(self.read(count, field), 2)

    def read_flag(self, field: str) -> bool:
        return self.read(1, field) == "1"

    def sub_reader(self, count: int, field: str) -> BitReader:
        """Consume count bits into a separate reader."""
        return BitReader(self.read(count, field))


# =============================================================================
# Decoding
# =============================================================================


def _read_literal(reader: BitReader) -> int:
    value = 0
    while True:
        more = reader.read_flag("literal group flag")
        value = (value << GROUP_VALUE_BITS) | reader.read_int(GROUP_VALUE_BITS, "literal group value")
        if not more:
            return value


def _read_length_spec(reader: BitReader) -> LengthSpec:
    if reader.read_flag("length type id"):
        return SubpacketCount(reader.read_int(SUBPACKET_COUNT_BITS, "subpacket count"))
    return TotalBits(reader.read_int(TOTAL_LENGTH_BITS, "subpacket length"))


def _read_children(reader: BitReader, spec: LengthSpec) -> tuple[Packet, ...]:
    children: list[Packet] = []
    match spec:
        case TotalBits(bits=bits):
            region = reader.sub_reader(bits, "subpacket bits")
            # Anything too short to hold a packet is padding and is dropped
            while region.remaining >= MIN_PACKET_BITS:
                children.append(_read_packet(region))
            if region.remaining:
                logger.debug("decode: discarding %d trailing bits in subpacket region", region.remaining)
        case SubpacketCount(count=count):
            for _ in range(count):
                children.append(_read_packet(reader))
    return tuple(children)


def _read_packet(reader: BitReader) -> Packet:
    version = reader.read_int(VERSION_BITS, "packet version")
    type_id = reader.read_int(TYPE_ID_BITS, "packet type id")

    if type_id == LITERAL_TYPE_ID:
        return Packet(version, Literal(_read_literal(reader)))

    kind = OperatorKind(type_id)
    spec = _read_length_spec(reader)
    return Packet(version, Operator(kind, _read_children(reader, spec)))


def decode(bits: str) -> tuple[Packet, int]:
    """
    Decode the outermost packet from a bit string.

    Args:
        bits: String of '0' and '1' characters

    Returns:
        (packet, consumed) where consumed is the number of bits the packet
        used; any bits after that are padding

    Raises:
        MalformedInputError: If bits holds a character other than '0' or '1'
        TruncatedStreamError: If the stream ends in the middle of a field
    """
    invalid = set(bits) - {"0", "1"}
    if invalid:
        raise MalformedInputError(
            f"Bit stream may only contain '0' and '1', found: {', '.join(sorted(map(repr, invalid)))}"
        )

    reader = BitReader(bits)
    packet = _read_packet(reader)
    logger.debug("decode: consumed %d of %d bits", reader.pos, len(bits))
    return (packet, reader.pos)


def hex_to_bits(text: str) -> str:
    """
    Expand hexadecimal text to a string of '0'/'1', four bits per digit.

    Each digit expands most-significant bit first, so "D2" -> "11010010".

    Raises:
        MalformedInputError: If the text is empty or holds a non-hex character
    """
    text = text.strip()
    if not text:
        raise MalformedInputError("Empty packet transmission")

    bits: list[str] = []
    for offset, char in enumerate(text):
        try:
            digit = int(char, 16)
        except ValueError:
            raise MalformedInputError(
                f"Invalid hexadecimal character '{char}'\n"
                f"  Offset {offset}: \"{text}\"\n"
                f"  Valid characters: 0-9, a-f, A-F"
            ) from None
        bits.append(f"{digit:04b}")
    return "".join(bits)


def decode_hex(text: str) -> Packet:
    """Decode the outermost packet of a hexadecimal transmission."""
    packet, consumed = decode(hex_to_bits(text))
    logger.info("decode_hex: %d hex digits, %d bits used, %d packets", len(text.strip()), consumed, count_packets(packet))
    return packet


# =============================================================================
# Queries
# =============================================================================


def iter_packets(packet: Packet) -> Iterator[Packet]:
    """Yield every packet in the tree, parents before children."""
    stack = [packet]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def count_packets(packet: Packet) -> int:
    return sum(1 for _ in iter_packets(packet))


def version_sum(packet: Packet) -> int:
    """Sum of the version numbers of a packet and all of its descendants."""
    return sum(p.version for p in iter_packets(packet))


def value(packet: Packet) -> int:
    """
    Evaluate a packet tree.

    Literals are their own value. Sum and product of no subpackets are 0 and
    1; minimum and maximum need at least one subpacket. Comparisons need
    exactly two subpackets and give 1 when the comparison holds, else 0.

    Raises:
        InvariantViolation: If an operator has an unusable number of subpackets
    """
    match packet.body:
        case Literal(value=literal):
            return literal
        case Operator(kind=kind, children=children):
            values = [value(child) for child in children]
            if kind.is_comparison:
                if len(values) != 2:
                    raise InvariantViolation(
                        f"Comparison packet '{kind.symbol}' needs exactly 2 subpackets, got {len(values)}"
                    )
                first, second = values
                match kind:
                    case OperatorKind.GREATER_THAN:
                        return int(first > second)
                    case OperatorKind.LESS_THAN:
                        return int(first < second)
                    case _:
                        return int(first == second)
            if kind in (OperatorKind.MINIMUM, OperatorKind.MAXIMUM) and not values:
                raise InvariantViolation(f"'{kind.symbol}' packet has no subpackets")
            match kind:
                case OperatorKind.SUM:
                    return sum(values)
                case OperatorKind.PRODUCT:
                    return math.prod(values)
                case OperatorKind.MINIMUM:
                    return min(values)
                case _:
                    return max(values)
    raise InvariantViolation(f"Unknown packet body: {packet.body!r}")


def to_expression(packet: Packet) -> str:
    """Render a packet tree as a prefix expression, e.g. '(== (+ 1 3) (* 2 2))'."""
    match packet.body:
        case Literal(value=literal):
            return str(literal)
        case Operator(kind=kind, children=children):
            args = " ".join(to_expression(child) for child in children)
            return f"({kind.symbol} {args})" if args else f"({kind.symbol})"
    raise InvariantViolation(f"Unknown packet body: {packet.body!r}")
