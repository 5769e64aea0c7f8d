"""
Demonstration scripts for the puzzle solvers.
"""

import logging

from ascii_render import render_grid, render_packet_tree, render_snail
from input_parser import parse_grid, parse_snail_number
from packet_decoder import decode_hex, to_expression, value, version_sum
from pathfinder import find_path, scale
from snailfish import combine, magnitude


def demo_grid() -> None:
    """Find and draw the cheapest path through a small cavern."""
    grid = parse_grid(
        """
        1163751742
        1381373672
        2136511328
        3694931569
        7463417111
        1319128137
        1359912421
        3125421639
        1293138521
        2311944581
        """
    )

    print("=" * 40)
    print("Cheapest path through a 10x10 cavern:")
    print("=" * 40)
    result = find_path(grid)
    print(render_grid(grid, result.path))
    print(f"cost={result.cost}, steps={result.steps}")
    print()

    print("=" * 40)
    print("Same cavern tiled 5x5:")
    print("=" * 40)
    big = scale(grid, 5)
    result = find_path(big)
    print(render_grid(big, result.path))
    print(f"cost={result.cost}, steps={result.steps}")
    print()


def demo_snail() -> None:
    """Add two snail numbers and show the reduced sum."""
    a = parse_snail_number("[[[[4,3],4],4],[7,[[8,4],9]]]")
    b = parse_snail_number("[1,1]")

    print("=" * 40)
    print("Snail number addition:")
    print("=" * 40)
    print(f"  {render_snail(a)}")
    print(f"+ {render_snail(b)}")
    total = combine(a, b)
    print(f"= {render_snail(total)}")
    print(f"magnitude={magnitude(total)}")
    print()


def demo_packets() -> None:
    """Decode a few transmissions and evaluate them."""
    transmissions = [
        "D2FE28",
        "38006F45291200",
        "EE00D40C823060",
        "9C0141080250320F1802104A08",
    ]

    for hex_text in transmissions:
        print("=" * 40)
        print(f"Transmission {hex_text}:")
        print("=" * 40)
        packet = decode_hex(hex_text)
        print(render_packet_tree(packet))
        print(f"expression={to_expression(packet)}")
        print(f"version_sum={version_sum(packet)}, value={value(packet)}")
        print()


def demo() -> None:
    demo_grid()
    demo_snail()
    demo_packets()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    demo()
