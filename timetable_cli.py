#!/usr/bin/env python3
"""Timetable viewer and iCalendar exporter.

Loads a course timetable, shows one semester week with its conflicting
sessions, and optionally writes the whole semester to an .ics file.
"""

import argparse
import logging
import sys
from datetime import date, datetime
from typing import Optional, Sequence
from zoneinfo import ZoneInfoNotFoundError

from importer import BaseImporter, HtmlTimetableImporter, JsonImporter
from timetable import ScheduleStore, config
from transformer import ICalTransformer, TextTransformer


def parse_date(date_str: str) -> date:
    """Parse date string in YYYY-MM-DD format."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: '{date_str}'. Expected YYYY-MM-DD."
        )


def get_importer(path: str, week_count: int) -> BaseImporter:
    """Pick an importer from the input file extension.

    Raises:
        ValueError: If the extension is not supported.
    """
    lowered = path.lower()
    if lowered.endswith(".json"):
        return JsonImporter()
    if lowered.endswith((".html", ".htm")):
        return HtmlTimetableImporter(week_count=week_count)
    raise ValueError(f"Unsupported input format: '{path}'. Expected .json or .html.")


def print_conflicts(store: ScheduleStore) -> None:
    """Print every stack of two or more sessions in the viewed week."""
    reported: set[tuple[int, int]] = set()
    for session in store.week_sessions:
        if session.slot_key in reported:
            continue
        stack = store.conflicts_for(session)
        if len(stack) > 1:
            reported.add(session.slot_key)
            titles = ", ".join(item.title for item in stack)
            print(f"Conflict on day {session.weekday}, slot {session.start_slot}: {titles}")
    if not reported:
        print("No conflicts this week.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show a timetable week and export the semester to iCalendar.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 timetable_cli.py --input courses.json --start-date 2026-02-23
  python3 timetable_cli.py --input timetable.html --start-date 2026-02-23 --week 3 --output semester.ics
        """
    )

    parser.add_argument(
        "-i", "--input",
        required=True,
        help="Timetable file to load (.json or .html)"
    )

    parser.add_argument(
        "--start-date",
        type=parse_date,
        required=True,
        help="Start date of the semester (format: YYYY-MM-DD)"
    )

    parser.add_argument(
        "--week",
        type=int,
        default=None,
        help="Week number to show, starting at 1 (default: the current week)"
    )

    parser.add_argument(
        "--week-count",
        type=int,
        default=config.DEFAULT_WEEK_COUNT,
        help=f"Number of weeks in the semester (default: {config.DEFAULT_WEEK_COUNT})"
    )

    parser.add_argument(
        "--palette",
        type=int,
        default=config.DEFAULT_PALETTE_INDEX,
        help="Color scheme index (default: %(default)s)"
    )

    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Write the semester to this iCalendar file"
    )

    parser.add_argument(
        "--timezone",
        default=config.ICAL_TIMEZONE,
        help="IANA time zone for exported events (default: floating local time)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the timetable CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    # Ensure output file has .ics extension
    output_path = args.output
    if output_path and not output_path.lower().endswith(".ics"):
        output_path = f"{output_path}.ics"

    try:
        importer = get_importer(args.input, args.week_count)
        sessions = importer.load(args.input)

        print(f"Loaded {len(sessions)} sessions from: {args.input}")

        if not sessions:
            print("Warning: No sessions found.")

        store = ScheduleStore(week_count=args.week_count, palette_index=args.palette)
        store.set_session_list(sessions)
        store.set_start_date(args.start_date)
        if args.week is not None:
            store.set_current_week(args.week - 1)

        print()
        print(TextTransformer(store.current_week_index).transform(store.sessions, store.start_date))
        print_conflicts(store)

        if output_path:
            transformer = ICalTransformer(timezone_name=args.timezone)
            transformer.transform(store.sessions, store.start_date)
            transformer.save(output_path)
            print(f"Timetable saved to: {output_path}")

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except (OSError, ValueError, ZoneInfoNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
