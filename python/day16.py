#!/usr/bin/env python3
"""
Day 16: packet decoder.

part1: sum of all packet versions
part2: value of the outermost packet
"""

from __future__ import annotations

import driver
from input_parser import parse_hex
from packet_decoder import decode, value, version_sum


def solve(text: str) -> tuple[int, int]:
    packet, _ = decode(parse_hex(text))
    return (version_sum(packet), value(packet))


if __name__ == "__main__":
    driver.main(16, solve)
