"""Command line interface for the reception seating plan."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .directory import GuestDirectory, SupabaseGuestDirectory, apply_assignments
from .errors import AllocationError
from .loader import load_attendees
from .names import count_duplicates, is_placeholder_name
from .pipeline import run_plan
from .plan import DEFAULT_INPUT_PATH, DIRECTORY_BATCH_SIZE, NAME_ALIASES, RENAME_RULES, REPORT_DIR, default_plan
from .report import build_summary, summarize, write_reports
from .settings import DEFAULT_ENV_FILE, load_settings


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate and apply the reception seating plan")
    parser.add_argument("input", nargs="?", type=Path, help="Path to the seating groups spreadsheet")
    parser.add_argument("--input", dest="input_override", type=Path,
                        help="Path to the seating groups spreadsheet (overrides the positional path)")
    parser.add_argument("--apply", dest="apply", action="store_true", default=False,
                        help="Write table labels to the guest directory.")
    parser.add_argument("--dry-run", dest="apply", action="store_false",
                        help="Validate and write reports only (default).")
    parser.add_argument("--report-dir", type=Path, default=REPORT_DIR,
                        help="Directory for the summary JSON and assignments CSV.")
    parser.add_argument("--env-file", type=Path, default=DEFAULT_ENV_FILE,
                        help="dotenv file with SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    return parser


def _input_path(args: argparse.Namespace) -> Path:
    return args.input_override or args.input or DEFAULT_INPUT_PATH


def run(args: argparse.Namespace, directory: Optional[GuestDirectory] = None) -> int:
    """Run one seating pass. ``directory`` defaults to Supabase in apply mode."""
    input_path = _input_path(args)
    plan = default_plan()
    result = run_plan(load_attendees(input_path), plan, RENAME_RULES)

    updated_count = None
    if args.apply:
        if directory is None:
            supabase = SupabaseGuestDirectory(load_settings(args.env_file))
            try:
                updated_count = apply_assignments(result.assignments, supabase, NAME_ALIASES, DIRECTORY_BATCH_SIZE)
            finally:
                supabase.close()
        else:
            updated_count = apply_assignments(result.assignments, directory, NAME_ALIASES, DIRECTORY_BATCH_SIZE)

    summary = build_summary(
        str(input_path),
        result.assignments,
        result.table_counts,
        plan.table_capacity,
        result.renames,
        updated_count=updated_count,
    )
    paths = write_reports(args.report_dir, summary, result.assignments)
    counts = summarize(result.assignments)

    print(f"Seating plan validated for {len(result.assignments)} attendees.")
    print(f"Input: {input_path}")
    print(f"Mode: {'apply' if args.apply else 'dry-run'}")
    print(f"Table counts: {json.dumps(counts['tableCounts'])}")
    print(f"Group counts: {json.dumps(counts['groupCounts'])}")
    if args.apply:
        print(f"Updated guests in Supabase: {updated_count}")
    print(f"Summary: {paths.summary_path}")
    print(f"Assignments: {paths.assignments_path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``python -m reception_seating.cli``."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return run(args)
    except AllocationError as exc:
        print(str(exc), file=sys.stderr)
        return 1


def build_check_names_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=(
        "Report duplicate guest names among reception attendees on the seating sheet "
        "and in the guest directory. Unnamed 'Guest' plus-one rows are ignored."
    ))
    parser.add_argument("input", nargs="?", type=Path, default=DEFAULT_INPUT_PATH,
                        help="Path to the seating groups spreadsheet")
    parser.add_argument("--skip-directory", action="store_true",
                        help="Only check the spreadsheet, not the guest directory.")
    parser.add_argument("--env-file", type=Path, default=DEFAULT_ENV_FILE)
    return parser


def check_names(args: argparse.Namespace, directory: Optional[GuestDirectory] = None) -> int:
    attendees = load_attendees(args.input)
    named = [a for a in attendees if a.full_name_norm and not is_placeholder_name(a)]
    sheet_duplicates = count_duplicates(a.full_name_norm for a in named)
    print(f"Spreadsheet duplicate names (attending): {len(sheet_duplicates)}")
    for name, count in sheet_duplicates:
        print(f" - {name} ({count})")

    directory_duplicates = []
    if not args.skip_directory:
        if directory is None:
            supabase = SupabaseGuestDirectory(load_settings(args.env_file))
            try:
                guests = supabase.fetch_guests()
            finally:
                supabase.close()
        else:
            guests = directory.fetch_guests()
        directory_duplicates = count_duplicates(g.full_name_norm for g in guests if g.full_name_norm)
        print(f"Directory duplicate full_name_norm values: {len(directory_duplicates)}")
        for name, count in directory_duplicates:
            print(f" - {name} ({count})")

    return 1 if sheet_duplicates or directory_duplicates else 0


def check_names_main(argv: Sequence[str] | None = None) -> int:
    args = build_check_names_parser().parse_args(argv)
    configure_logging(False)
    try:
        return check_names(args)
    except AllocationError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
