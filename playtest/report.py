#!/usr/bin/env python3
"""Generate aggregate report from all walkthrough JSON results."""

import json
import os
import sys
from collections import defaultdict

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from room_logic.config import load_settings


def load_runs(log_dir: str) -> list[dict]:
    """Load all JSON result files from the log directory."""
    runs = []
    for fname in sorted(os.listdir(log_dir)):
        if not fname.endswith(".json"):
            continue
        path = os.path.join(log_dir, fname)
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError:
            continue
        # Must have required fields
        if isinstance(data, dict) and "name" in data and "phase" in data and "passed" in data:
            data["_file"] = fname
            runs.append(data)
    return runs


def summarize(runs: list[dict]) -> dict:
    by_phase = defaultdict(int)
    for r in runs:
        by_phase[r["phase"]] += 1
    passed = sum(1 for r in runs if r["passed"])
    return {
        "runs": len(runs),
        "passed": passed,
        "failed": len(runs) - passed,
        "by_phase": dict(by_phase),
        "failures": [r["name"] for r in runs if not r["passed"]],
    }


def generate_report(log_dir: str):
    runs = load_runs(log_dir)
    if not runs:
        print("No walkthrough results found.")
        return

    summary = summarize(runs)

    print()
    print("=" * 72)
    print("  WALKTHROUGH REPORT")
    print("=" * 72)
    print()

    header = f"  {'Walkthrough':<28} {'Expect':<8} {'Phase':<12} {'Room':>4} {'Left':>6}  Pass"
    print(header)
    print("  " + "-" * (len(header) - 2))
    for r in runs:
        ok = "YES" if r["passed"] else "NO"
        print(
            f"  {r['name']:<28} {r.get('expected') or '-':<8} {r['phase']:<12}"
            f" {r.get('room_index', 0):>4} {r.get('time_remaining', 0):>6}  {ok}"
        )

    print("  " + "-" * (len(header) - 2))
    outcomes = ", ".join(f"{k}: {v}" for k, v in sorted(summary["by_phase"].items()))
    print(f"  Total runs: {summary['runs']}   Passed: {summary['passed']}   Failed: {summary['failed']}")
    print(f"  Outcomes: {outcomes}")
    if summary["failures"]:
        print(f"  Failing: {', '.join(summary['failures'])}")
    print()


def default_log_dir() -> str:
    settings = load_settings()
    return settings.resolve(settings.log_dir)


def main():
    if len(sys.argv) > 1:
        log_dir = sys.argv[1]
    else:
        try:
            log_dir = default_log_dir()
        except ValueError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

    if not os.path.isdir(log_dir):
        print(f"ERROR: Log directory not found: {log_dir}")
        sys.exit(1)

    generate_report(log_dir)


if __name__ == "__main__":
    main()
