#!/usr/bin/env python3
"""
Day 15: lowest total risk path through a cavern.

part1: cheapest path through the grid as given
part2: cheapest path through the grid tiled five times in each direction
"""

from __future__ import annotations

import driver
from input_parser import parse_grid
from pathfinder import find_min_cost_path, scale

SCALE_FACTOR = 5


def solve(text: str) -> tuple[int, int]:
    grid = parse_grid(text)
    return (find_min_cost_path(grid), find_min_cost_path(scale(grid, SCALE_FACTOR)))


if __name__ == "__main__":
    driver.main(15, solve)
