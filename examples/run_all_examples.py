#!/usr/bin/env python3
"""
Run all example scripts and print a summary report.
"""

import os
import subprocess
import sys
import time

EXAMPLES = [
    ("example_1_basic_pick.py", "Example 1: Basic Weighted Picking"),
    ("example_exact_vs_monte_carlo.py", "Example: Exact probabilities versus Monte Carlo"),
    ("example_selection_tree.py", "Example: The non-repetitive selection tree"),
]


def run_example(script_name, description):
    """Run one example script; return (success, elapsed, error)."""
    print(f"\n{'=' * 70}\nRunning: {description}\nScript: {script_name}\n{'=' * 70}")
    here = os.path.dirname(os.path.abspath(__file__))
    start = time.time()
    try:
        result = subprocess.run(
            [sys.executable, os.path.join(here, script_name)],
            cwd=os.path.dirname(here),
            env={**os.environ, "PYTHONPATH": "."},
            capture_output=True,
            text=True,
            timeout=300,
        )
    except subprocess.TimeoutExpired:
        return False, time.time() - start, "Timeout after 5 minutes"
    elapsed = time.time() - start
    tail = (result.stdout if result.returncode == 0 else result.stderr).strip().splitlines()
    for line in tail[-5:]:
        print(f"  {line}")
    if result.returncode != 0:
        return False, elapsed, result.stderr
    return True, elapsed, None


def main():
    total_start = time.time()
    results = [(desc, *run_example(script, desc)) for script, desc in EXAMPLES]

    print("\n" + "=" * 70 + "\nExecution Summary\n" + "=" * 70)
    for desc, success, elapsed, error in results:
        print(f"{'Pass' if success else 'Fail':8} {desc:50} ({elapsed:6.2f}s)")
        if error:
            print(f"         Error: {error[:100]}...")
    passed = sum(1 for _, success, _, _ in results if success)
    print("-" * 70)
    print(f"Total: {passed}/{len(results)} examples passed ({time.time() - total_start:.2f}s)")
    return 0 if passed == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
