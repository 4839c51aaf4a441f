#!/usr/bin/env python
"""
Simple Test Runner for TreeViewLib
==================================

Runs all tests except slow ones.
Shows which tests are slow and why.

Usage:
    python run_tests.py           # Run all non-slow tests
    python run_tests.py --slow    # Show info about slow tests
    python run_tests.py --all     # Run everything including slow tests
    python run_tests.py --cov     # Add a coverage report for treeviewlib
"""

import subprocess
import sys
import argparse
from pathlib import Path


def run_tests(include_slow=False, coverage=False):
    """Run the test suite."""
    cmd = [
        sys.executable, "-m", "pytest",
        "tests",
        "--tb=short",               # Short traceback format
        "--durations=10",            # Show 10 slowest tests
        "-v"                         # Verbose output
    ]

    if coverage:
        cmd.extend(["--cov=treeviewlib", "--cov-report=term-missing"])

    if not include_slow:
        cmd.extend(["-m", "not slow"])
        print("Running all tests EXCEPT slow tests...")
        print("=" * 60)
    else:
        print("Running ALL tests including slow ones...")
        print("=" * 60)

    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def show_slow_tests():
    """Show information about slow tests."""
    print("=" * 60)
    print("SLOW TESTS ANALYSIS")
    print("=" * 60)
    print("\nThe following tests are marked as @pytest.mark.slow:")
    print("-" * 60)

    slow_tests = [
        ("test_performance.py::TestLargeTrees::test_build_expanded_tree",
         "Builds a fully expanded tree of 21,020 nodes",
         "~1-5s", "Exercises incremental inserts into a long visible sequence"),

        ("test_performance.py::TestLargeTrees::test_toggle_near_top_of_long_list",
         "Expands and collapses a node at the top of a 1,000+ row list 200 times",
         "~1-5s", "Each toggle shifts every row below it and forces a re-index"),

        ("test_performance.py::TestLargeTrees::test_deep_chain",
         "Collapses and re-expands a 5,000 level chain",
         "~1-3s", "Validates that nothing recurses per level"),
    ]

    for test_name, description, duration, reason in slow_tests:
        print(f"\n* {test_name}")
        print(f"   Description: {description}")
        print(f"   Duration: {duration}")
        print(f"   Why slow: {reason}")

    print("\n" + "=" * 60)
    print("HOW TO RUN SLOW TESTS")
    print("=" * 60)

    print("""
1. Run ALL slow tests:
   python -m pytest -m slow -v

2. Run a specific slow test:
   python -m pytest tests/test_performance.py::TestLargeTrees::test_deep_chain -v

3. Run everything including slow tests:
   python run_tests.py --all

They are excluded from regular test runs because they measure scale,
not behavior, and can be noisy on shared CI machines.
""")


def main():
    parser = argparse.ArgumentParser(description="Test runner for TreeViewLib")
    parser.add_argument("--slow", action="store_true", help="Show info about slow tests")
    parser.add_argument("--all", action="store_true", help="Run all tests including slow ones")
    parser.add_argument("--cov", action="store_true", help="Report coverage of treeviewlib")

    args = parser.parse_args()

    if args.slow:
        show_slow_tests()
        return 0

    return run_tests(include_slow=args.all, coverage=args.cov)


if __name__ == "__main__":
    sys.exit(main())
