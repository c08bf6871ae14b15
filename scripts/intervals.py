#!/usr/bin/env python3
"""Inspect or change monitoring interval settings in settings.json.

Usage examples:
    # Show every job's enabled flag and interval
    uv run python scripts/intervals.py

    # Run the signal warning check every 6 hours
    uv run python scripts/intervals.py set signalWarning 6

    # Same interval for all three jobs
    uv run python scripts/intervals.py set all 12

    # Turn the offline device check off
    uv run python scripts/intervals.py disable offlineCheck

A running service picks the new values up on its next restart_all().
"""

import argparse
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.monitoring.intervals import hours_to_ms, read_job_settings
from src.monitoring.models import JOB_SPECS, JobKind
from src.settings_store import JsonSettingsStore

KIND_CHOICES = [kind.value for kind in JobKind]


def show(store: JsonSettingsStore) -> None:
    print(f"Interval settings ({store.path}):")
    for spec in JOB_SPECS.values():
        job = read_job_settings(store, spec)
        state = "enabled" if job.enabled else "disabled"
        print(
            f"  - {spec.label:22s} {job.interval_hours:3d} hours"
            f" ({job.interval_ms} ms), {state}"
        )


def set_interval(store: JsonSettingsStore, target: str, hours: int) -> dict[str, str]:
    """Write *hours* for one job kind (or ``all``). Returns the written keys."""
    if hours <= 0:
        msg = "Hours must be a positive number"
        raise ValueError(msg)
    kinds = list(JobKind) if target == "all" else [JobKind(target)]
    ms = str(hours_to_ms(hours))
    changes = {JOB_SPECS[kind].interval_key: ms for kind in kinds}
    store.backup()
    store.update(changes)
    return changes


def set_enabled(store: JsonSettingsStore, target: str, enabled: bool) -> dict[str, bool]:
    changes = {JOB_SPECS[JobKind(target)].enable_key: enabled}
    store.backup()
    store.update(changes)
    return changes


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage monitoring interval settings")
    parser.add_argument("--settings", type=Path, help="Path to settings.json (default: from env)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("show", help="Show current interval settings (default)")

    set_parser = sub.add_parser("set", help="Set a job's interval in hours")
    set_parser.add_argument("kind", choices=[*KIND_CHOICES, "all"])
    set_parser.add_argument("hours", type=int)

    for name in ("enable", "disable"):
        toggle = sub.add_parser(name, help=f"{name.capitalize()} a monitoring job")
        toggle.add_argument("kind", choices=KIND_CHOICES)

    args = parser.parse_args(argv)
    store = JsonSettingsStore(path=args.settings) if args.settings else JsonSettingsStore.get_shared()

    if args.command == "set":
        try:
            changes = set_interval(store, args.kind, args.hours)
        except ValueError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        for key, value in changes.items():
            print(f"Updated {key} to {args.hours} hours ({value} ms)")
    elif args.command in ("enable", "disable"):
        set_enabled(store, args.kind, args.command == "enable")
        print(f"{JOB_SPECS[JobKind(args.kind)].label} monitoring {args.command}d")
    else:
        show(store)
        return 0

    print("Restart monitoring (or save settings in the admin panel) to apply.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
