#!/usr/bin/env python3
"""
Test runner script for the bookmark tree toolkit.

Wraps pytest with the marker selections declared in pytest.ini and an
optional coverage report over the bookmark_tree package.
"""

import argparse
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
TESTS_DIR = PROJECT_ROOT / "tests"


def available_modules():
    """Test module names without the test_ prefix, e.g. "tree_operations"."""
    return sorted(path.stem[len("test_"):] for path in TESTS_DIR.glob("test_*.py"))


def build_marker_expression(test_type: str, include_slow: bool):
    """Combine marker filters into a single -m expression (or None)."""
    clauses = []
    if test_type != "all":
        clauses.append(test_type)
    if not include_slow:
        clauses.append("not slow")
    return " and ".join(clauses) or None


def build_command(args) -> list:
    cmd = [sys.executable, "-m", "pytest"]

    if args.coverage:
        cmd.extend([
            "--cov=bookmark_tree",
            "--cov-report=html",
            "--cov-report=term-missing",
            f"--cov-fail-under={args.fail_under}",
        ])

    cmd.append("-vv" if args.verbose else "-q")

    expression = build_marker_expression(args.test_type, args.runslow)
    if expression:
        cmd.extend(["-m", expression])
    if args.runslow:
        cmd.append("--runslow")

    if args.module:
        cmd.extend(str(TESTS_DIR / f"test_{name}.py") for name in args.module)
    else:
        cmd.append(str(TESTS_DIR))

    if args.keyword:
        cmd.extend(["-k", args.keyword])

    cmd.append("--tb=short")
    return cmd


def main():
    parser = argparse.ArgumentParser(description="Run bookmark tree tests")
    parser.add_argument(
        "--test-type",
        choices=["unit", "integration", "all"],
        default="all",
        help="Marker selection to run",
    )
    parser.add_argument(
        "--module",
        action="append",
        choices=available_modules(),
        help="Run only this test module (repeatable)",
    )
    parser.add_argument("-k", "--keyword", help="pytest -k expression")
    parser.add_argument(
        "--coverage",
        action="store_true",
        help="Run tests with coverage reporting",
    )
    parser.add_argument(
        "--fail-under",
        type=int,
        default=85,
        help="Minimum coverage percentage (with --coverage)",
    )
    parser.add_argument(
        "--runslow",
        action="store_true",
        help="Include tests marked slow",
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose test output")
    parser.add_argument(
        "--install-deps",
        action="store_true",
        help="Install the package with its test extra first",
    )

    args = parser.parse_args()

    if args.install_deps:
        print("🔄 Installing bookmark-tree with test dependencies...")
        install = subprocess.run(
            [sys.executable, "-m", "pip", "install", "-e", ".[test]"], cwd=PROJECT_ROOT
        )
        if install.returncode != 0:
            print("❌ Installing test dependencies failed")
            return install.returncode

    cmd = build_command(args)
    print(f"🚀 Running tests: {' '.join(cmd)}")
    print("-" * 60)

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)

    print("-" * 60)
    if result.returncode != 0:
        print("❌ Some tests failed")
        return result.returncode

    print("🎉 All tests passed!")
    if args.coverage:
        print("\n📊 Coverage report generated in htmlcov/index.html")
    return 0


if __name__ == "__main__":
    sys.exit(main())
