#!/usr/bin/env python3
"""
Example 1: Basic Weighted Picking

This example demonstrates the core picker functionality:
- Building a weight table
- Drawing non-repetitive and repetitive groups
- Reproducible draws with a seeded random source
- Exact inclusion probabilities for a group size
"""

import sys
import os

# The parent directory is added to the import path.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from picker import DrawEngine, SeededRandomSource, WeightTable, compute_inclusion_probabilities, format_table

# Approximate element abundance in the Earth's crust (percent).
TABLE = WeightTable({
    "oxygen": 47.0,
    "silicon": 28.0,
    "aluminium": 7.9,
    "iron": 5.0,
    "magnesium": 4.0,
    "calcium": 2.0,
    "potassium": 2.0,
    "sodium": 2.0,
    "others": 2.0,
})


def main():
    print("=" * 60)
    print("Example 1: Basic Weighted Picking")
    print("=" * 60)

    # Non-repetitive draws use the OS random source by default.
    engine = DrawEngine.build(TABLE)
    print("\nThree non-repetitive draws of 3 items:")
    for i in range(3):
        print(f"  {i + 1}. {engine.draw_many(3)}")

    # Repetitive draws may contain the same item more than once.
    rep = DrawEngine.build(TABLE, repetitive=True, random_source=SeededRandomSource(1))
    print("\nOne repetitive draw of 6 items (seed 1):")
    print(f"  {rep.draw_many(6)}")

    # The same seed gives the same sequence.
    a = DrawEngine.build(TABLE, random_source=SeededRandomSource(7)).draw_many(4)
    b = DrawEngine.build(TABLE, random_source=SeededRandomSource(7)).draw_many(4)
    print(f"\nSeeded draws agree: {a == b} ({a})")

    # Exact probability of each element being part of a group of 3.
    probs = compute_inclusion_probabilities(TABLE, k=3)
    print("\nInclusion probabilities for groups of 3 (percent):")
    print(format_table({k: v * 100.0 for k, v in probs.items()}), end="")
    print(f"\nSum of probabilities: {sum(probs.values()):.12f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
