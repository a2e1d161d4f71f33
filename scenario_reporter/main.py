"""Entry point for replaying a recorded event log as service messages.

Reads the events of a scenario test run from a YAML or JSON-lines log and
writes the TeamCity service messages the reporter would have printed
during the run.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from scenario_reporter.config import ReporterConfig
from scenario_reporter.events.event_log import EventLogError, load_event_log
from scenario_reporter.plugin import ServiceMessagePlugin


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Scenario reporter - replays test events as TeamCity "
                    "service messages"
    )
    parser.add_argument(
        "--events",
        required=True,
        type=Path,
        help="Path to the event log (.yaml/.yml list or JSON lines)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path to write service messages to (default: stdout)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to the reporter JSON config file",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config = ReporterConfig(args.config_file)

    try:
        events = load_event_log(args.events)
    except FileNotFoundError:
        print(f"Error: Event log not found: {args.events}", file=sys.stderr)
        return 1
    except EventLogError as e:
        print(f"Error: Invalid event log {args.events}: {e}", file=sys.stderr)
        return 1

    if args.output is None:
        ServiceMessagePlugin(sys.stdout, config).handle_all(events)
        return 0

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        ServiceMessagePlugin(f, config).handle_all(events)
    print(f"Service messages written to {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
