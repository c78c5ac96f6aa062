#!/usr/bin/env python3
"""Walkthrough runner: plays scripted walkthroughs against a fresh GameSession and records results."""

import argparse
import glob
import json
import os
import sys
from datetime import datetime

import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from room_logic.catalog import HOTSPOTS, activate_hotspot
from room_logic.config import load_settings
from room_logic.logger import Logger
from room_logic.session import GameSession, Phase, format_time

SIMPLE_STEPS = {"start", "reset", "escape", "cancel", "wait_out"}
VALUE_STEPS = {"search", "code", "tick"}
OUTCOMES = {p.value for p in Phase}


class WalkthroughError(ValueError):
    """Raised when a walkthrough script is malformed."""


def parse_step(raw) -> tuple[str, object]:
    if isinstance(raw, str):
        if raw not in SIMPLE_STEPS:
            raise WalkthroughError(f"unknown step '{raw}'")
        return raw, None
    if isinstance(raw, dict) and len(raw) == 1:
        verb, arg = next(iter(raw.items()))
        if verb not in VALUE_STEPS:
            raise WalkthroughError(f"unknown step '{verb}'")
        if verb == "tick" and (not isinstance(arg, int) or isinstance(arg, bool) or arg < 0):
            raise WalkthroughError(f"tick needs a non-negative integer, got {arg!r}")
        if verb in ("search", "code"):
            arg = str(arg)
        return verb, arg
    raise WalkthroughError(f"malformed step {raw!r}")


def load_walkthrough(path: str) -> dict:
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict) or "steps" not in data:
        raise WalkthroughError(f"{path}: expected a mapping with 'steps'")
    expect = data.get("expect")
    if expect is not None and expect not in OUTCOMES:
        raise WalkthroughError(f"{path}: unknown expected outcome '{expect}'")
    return {
        "name": data.get("name", os.path.splitext(os.path.basename(path))[0]),
        "expect": expect,
        "steps": [parse_step(s) for s in data["steps"] or []],
    }


def _apply(session: GameSession, verb: str, arg) -> str:
    if verb == "start":
        session.start()
    elif verb == "reset":
        session.reset()
    elif verb == "escape":
        session.attempt_escape()
        if session.awaiting_code:
            return "code prompt open"
    elif verb == "cancel":
        session.cancel_code()
    elif verb == "search":
        if not activate_hotspot(session, arg, HOTSPOTS):
            return f"no hotspot '{arg}' here"
    elif verb == "code":
        session.submit_code(arg)
    elif verb == "tick":
        for _ in range(arg):
            session.tick()
    elif verb == "wait_out":
        while session.phase is Phase.PLAYING:
            session.tick()
    return ""


def run_walkthrough(script: dict, log: Logger, session: GameSession | None = None) -> dict:
    session = session or GameSession()
    notifications = []

    log.log(f"=== Walkthrough: {script['name']} ===")
    log.log(f"Expect: {script['expect'] or '(any)'}")
    log.log()

    for n, (verb, arg) in enumerate(script["steps"], 1):
        note = _apply(session, verb, arg)
        shown = verb if arg is None else f"{verb} {arg}"
        log.log(f"[Step {n}] {shown}  ({session.phase.value}, room {session.current_room_index}, "
                f"{format_time(session.time_remaining)})")
        if note:
            log.log(f"  {note}")
        for msg in session.drain_notifications():
            log.log(f"  ** {msg.title} ** {msg.body}")
            notifications.append({"step": n, "title": msg.title, "body": msg.body})

    phase = session.phase.value
    passed = script["expect"] is None or script["expect"] == phase

    log.log()
    log.log("=== Result ===")
    log.log(f"  Phase:          {phase}")
    log.log(f"  Room:           {session.current_room_index}")
    log.log(f"  Time remaining: {session.time_remaining}")
    log.log(f"  Passed:         {passed}")

    return {
        "name": script["name"],
        "expected": script["expect"],
        "phase": phase,
        "passed": passed,
        "room_index": session.current_room_index,
        "time_remaining": session.time_remaining,
        "steps": len(script["steps"]),
        "notifications": notifications,
        "timestamp": datetime.now().isoformat(),
    }


def save_result(result: dict, log_dir: str) -> str:
    os.makedirs(log_dir, exist_ok=True)
    safe = result["name"].replace(" ", "_").replace("/", "_")
    path = os.path.join(log_dir, f"{safe}_walkthrough.json")
    with open(path, "w") as f:
        json.dump(result, f, indent=2)
    return path


def _print_summary(results: list[dict]):
    print(f"\n{'='*60}")
    print("  WALKTHROUGHS")
    print(f"{'='*60}")
    print(f"  {'Name':<28} {'Expect':<8} {'Got':<8} {'Time':>6}  Pass")
    print(f"  {'-'*26}   {'-'*26}")
    for r in results:
        ok = "YES" if r["passed"] else "NO"
        expected = r["expected"] or "-"
        print(f"  {r['name']:<28} {expected:<8} {r['phase']:<8} {format_time(r['time_remaining']):>6}  {ok}")


def main():
    parser = argparse.ArgumentParser(description="Play scripted walkthroughs against the escape room")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--script", help="Path to a single walkthrough YAML file")
    group.add_argument("--all", action="store_true", help="Run every walkthrough in the walkthrough dir")
    parser.add_argument("--walkthrough-dir", default=None, help="Directory of walkthrough YAML files")
    parser.add_argument("--log-dir", default=None, help="Directory for log and JSON result files")
    args = parser.parse_args()

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    log_dir = args.log_dir or settings.resolve(settings.log_dir)
    walkthrough_dir = args.walkthrough_dir or settings.resolve(settings.walkthrough_dir)

    if args.all:
        paths = sorted(glob.glob(os.path.join(walkthrough_dir, "*.yaml")))
        if not paths:
            print(f"ERROR: No walkthroughs found in {walkthrough_dir}")
            sys.exit(1)
    else:
        paths = [args.script]

    results = []
    for path in paths:
        try:
            script = load_walkthrough(path)
        except (OSError, WalkthroughError) as e:
            print(f"ERROR: {e}")
            sys.exit(1)
        log = Logger(log_dir, script["name"], "walkthrough")
        result = run_walkthrough(script, log)
        log.close()
        save_result(result, log_dir)
        results.append(result)

    _print_summary(results)
    if not all(r["passed"] for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
