#!/usr/bin/env python3
# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the ecore-avro CI checks locally and print a colored summary.

Steps: format check, lint, type check, tests with coverage, a smoke run of
``ecoreavro check`` against the test fixtures, and the package build.
"""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

FIXTURE_MODELS = ["tests/data/models/shop.ecore", "tests/data/models/orders.genmodel"]

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=ecoreavro", "--cov-report=term-missing"]),
    ("Fixture check", ["uv", "run", "ecoreavro", "check", *[arg for m in FIXTURE_MODELS for arg in ("-m", m)]]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run every CI step, even after a failure, and return 1 if any failed."""
    results = [_run_step(name, cmd) for name, cmd in STEPS]
    _print_summary(results)
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_RULE = "=" * 60


def _run_step(name: str, cmd: list[str]) -> tuple[str, bool, float]:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue(name))
    print(chalk.blue(_RULE))
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=Path(__file__).parent.parent)
    return name, proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[str, bool, float]]) -> None:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(_RULE))
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        status = "PASS" if passed else "FAIL"
        print(color(f"  {status}  {name} ({elapsed:.1f}s)"))
    print()


if __name__ == "__main__":
    sys.exit(main())
