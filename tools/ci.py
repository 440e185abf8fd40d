#!/usr/bin/env python3
# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally: format, lint, type check, tests with coverage, CLI smoke test, and build."""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=entdef", "--cov-report=term-missing"]),
    ("CLI smoke test", ["uv", "run", "entdef", "--help"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a summary."""
    parser = argparse.ArgumentParser(description="Run the EntDef CI checks.")
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="STEP",
        help="Name of a step to skip, case-insensitive (repeatable)",
    )
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    args = parser.parse_args()

    skipped = {name.lower() for name in args.skip}
    results: list[tuple[str, bool, float]] = []

    for name, cmd in STEPS:
        if name.lower() in skipped:
            continue
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))
        if args.fail_fast and proc.returncode != 0:
            break

    _banner("  Summary")
    for name, passed, elapsed in results:
        if passed:
            print(chalk.green(f"  PASS  {name} ({elapsed:.1f}s)"))
        else:
            print(chalk.red(f"  FAIL  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
