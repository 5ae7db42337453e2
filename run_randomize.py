#!/usr/bin/env python3
"""
Prompt Conflict Engine - Command Line Runner

Randomize a consistent configuration, check a hand-picked one, or measure how
often the sampler leaves a conflict behind.

Usage:
    python run_randomize.py randomize                          # Fully random
    python run_randomize.py randomize --seed 7 --lock camera   # Keep camera section
    python run_randomize.py randomize --safe-mode              # Safe subject texts
    python run_randomize.py check --set camera="VHS Camcorder" --set atmosphere=cyberpunk
    python run_randomize.py rate --trials 2000                 # Residual conflict rate
"""

import argparse
import json
import logging
import sys
from dataclasses import replace

from prompt_conflict_engine import (
    DEFAULT_CONFIG,
    LOCK_SECTIONS,
    Dimension,
    Selection,
    residual_conflict_rate,
    resolve_conflicts,
    sample_consistent_assignment,
)
from prompt_conflict_engine.dimensions import CUSTOM_FIELDS

logger = logging.getLogger(__name__)


def parse_assignments(pairs: list) -> Selection:
    """Build a Selection from ``dimension=value`` strings.

    ``custom_camera``, ``custom_lens`` and ``custom_shot`` set free-text
    overrides. An empty value clears the dimension.
    """
    values = {}
    custom = {}
    custom_names = set(CUSTOM_FIELDS.values())
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Expected dimension=value, got {pair!r}")
        name, value = pair.split("=", 1)
        name = name.strip()
        value = value.strip() or None
        if name in custom_names:
            custom[name] = value
        else:
            values[Dimension.parse(name)] = value
    selection = Selection.default().with_values(values)
    if custom:
        selection = replace(selection, **custom)
    return selection


def print_selection(selection: Selection) -> None:
    for dimension in Dimension:
        value = selection.effective(dimension)
        if value is not None:
            print(f"  {dimension.noun:<15} {value}")


def print_result(result) -> None:
    if result.fixed_lens:
        print(f"\nFixed lens: {result.fixed_lens}")
    if result.zoom_range:
        print(f"\nZoom: {result.zoom_range.range} ({', '.join(result.zoom_range.options)})")
    if result.warning_message:
        print(f"Camera note: {result.warning_message}")

    print(f"\nActive conflicts ({len(result.active_conflicts)}):")
    for message in result.active_conflicts:
        print(f"  - {message}")

    print(f"\nStacking warnings ({len(result.stacking_warnings)}):")
    for warning in result.stacking_warnings:
        print(f"  - [{warning.category}/{warning.severity}] {warning.message}")

    print("\nBlocked:")
    for dimension, values in result.blocked.items():
        if values:
            print(f"  {dimension.noun:<15} {len(values)} value(s)")


def cmd_randomize(args) -> int:
    current = parse_assignments(args.set or [])
    selection = sample_consistent_assignment(current, args.lock or [], seed=args.seed,
                                             safe_mode=args.safe_mode)
    result = resolve_conflicts(selection)

    if args.json:
        print(json.dumps({"selection": selection.to_dict(), "result": result.to_dict()}, indent=2))
        return 0

    print("=" * 60)
    print("RANDOMIZED SELECTION")
    print("=" * 60)
    print_selection(selection)
    print_result(result)
    return 0


def cmd_check(args) -> int:
    selection = parse_assignments(args.set or [])
    result = resolve_conflicts(selection)

    if args.json:
        print(json.dumps({"selection": selection.to_dict(), "result": result.to_dict()}, indent=2))
    else:
        print("=" * 60)
        print("CONFLICT CHECK")
        print("=" * 60)
        print_selection(selection)
        print_result(result)

    return 1 if result.has_conflicts else 0


def cmd_rate(args) -> int:
    trials = args.trials if args.trials is not None else DEFAULT_CONFIG["rate_trials"]
    rate = residual_conflict_rate(trials, args.lock or [], seed=args.seed, safe_mode=args.safe_mode)
    tolerance = DEFAULT_CONFIG["sampler_residual_tolerance"]

    print("=" * 60)
    print("SAMPLER RESIDUAL CONFLICT RATE")
    print("=" * 60)
    print(f"Trials:    {trials}")
    print(f"Locked:    {', '.join(args.lock) if args.lock else 'none'}")
    print(f"Rate:      {rate:.2%}")
    print(f"Tolerance: {tolerance:.2%}")

    if rate > tolerance:
        logger.warning("Residual conflict rate %.2f%% is above tolerance %.2f%%", rate * 100, tolerance * 100)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prompt Conflict Engine runner")
    parser.add_argument("--log-level", default=DEFAULT_CONFIG["log_level"],
                        help="Logging level (default from PROMPT_ENGINE_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    lock_help = f"Lock a section or dimension ({', '.join(LOCK_SECTIONS)})"

    randomize = sub.add_parser("randomize", help="Sample a consistent selection")
    randomize.add_argument("--seed", type=int, default=DEFAULT_CONFIG["seed"])
    randomize.add_argument("--lock", action="append", help=lock_help)
    randomize.add_argument("--set", action="append", metavar="DIM=VALUE",
                           help="Value for a locked dimension")
    randomize.add_argument("--json", action="store_true", help="Print JSON")
    randomize.add_argument("--safe-mode", action="store_true", default=DEFAULT_CONFIG["safe_mode"],
                           help="Use content-policy-safe subject texts")
    randomize.set_defaults(func=cmd_randomize)

    check = sub.add_parser("check", help="Resolve conflicts for a selection")
    check.add_argument("--set", action="append", metavar="DIM=VALUE")
    check.add_argument("--json", action="store_true", help="Print JSON")
    check.set_defaults(func=cmd_check)

    rate = sub.add_parser("rate", help="Measure the sampler's residual conflict rate")
    rate.add_argument("--trials", type=int, default=None)
    rate.add_argument("--seed", type=int, default=DEFAULT_CONFIG["seed"])
    rate.add_argument("--lock", action="append", help=lock_help)
    rate.add_argument("--safe-mode", action="store_true", default=DEFAULT_CONFIG["safe_mode"])
    rate.set_defaults(func=cmd_rate)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except ValueError as e:
        print(f"\nERROR: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
