#!/usr/bin/env python3
"""
Day 18: snailfish homework.

part1: magnitude of the sum of every number, in order
part2: largest magnitude from adding any two different numbers
"""

from __future__ import annotations

import driver
from input_parser import parse_snail_numbers
from snailfish import largest_pair_magnitude, magnitude, sum_numbers


def solve(text: str) -> tuple[int, int]:
    numbers = parse_snail_numbers(text)
    return (magnitude(sum_numbers(numbers)), largest_pair_magnitude(numbers))


if __name__ == "__main__":
    driver.main(18, solve)
