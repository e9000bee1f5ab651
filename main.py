"""CLI entrypoint for gitstat.

Usage:
    python main.py <repo_path> <start_date> <end_date> [options]

Prints, for every day in the inclusive range, how many distinct files
changed and how many lines were added/removed. Runs of days without
commits collapse into a single "no commits" row.

Example:
    python main.py /path/to/repo 2023-08-30 2023-09-01

Options:
    --branch REV       Revision to walk (default: HEAD)
    --utc              Bucket commits by their UTC date instead of the author's local date
    --no-color         Disable ANSI colours (also honoured: NO_COLOR env var, non-TTY stdout)
    --json             Emit a JSON report instead of the table
    --output FILE      Write the JSON report to FILE (implies --json)
    --summary          Print totals after the table
    -v, --verbose      Debug logging on stderr
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date, datetime, timezone
from pathlib import Path

from gitstat.aggregate import aggregate, summarize
from gitstat.errors import GitStatError, InputValidationError, OutputError
from gitstat.models import to_json
from gitstat.repo import iter_commit_records, open_repo
from gitstat.report import COLOR_CYAN, COLOR_RESET, iter_rows, render, rows_to_dicts

logger = logging.getLogger("gitstat")

DATE_FORMAT = "%Y-%m-%d"


class _Parser(argparse.ArgumentParser):
    # Usage errors share the exit code of every other failure.
    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_date(value: str, which: str) -> date:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise InputValidationError(f"Invalid {which} date format: {exc}")


def validate_range(start_str: str, end_str: str) -> tuple[date, date]:
    start = parse_date(start_str, "start")
    end = parse_date(end_str, "end")
    if end < start:
        raise InputValidationError("End date must be after start date")
    return start, end


def use_color(args: argparse.Namespace) -> bool:
    if args.no_color or os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def build_report(repo_path: str, rev: str | None, start: date, end: date, index) -> dict:
    rows = list(iter_rows(index, start, end))
    return {
        "repo": repo_path,
        "rev": rev or "HEAD",
        "start": start,
        "end": end,
        "summary": summarize(index),
        "days": {
            day.isoformat(): {
                "files_changed": stats.files_changed,
                "additions": stats.additions,
                "deletions": stats.deletions,
                "total_changes": stats.total_changes,
                "files": sorted(stats.changed_files),
            }
            for day, stats in sorted(index.items())
        },
        "rows": rows_to_dicts(rows),
    }


def _emit(text: str, output_path: str | None) -> None:
    if output_path:
        try:
            Path(output_path).write_text(text)
        except OSError as exc:
            raise OutputError(f"Cannot write {output_path}: {exc.strerror or exc}") from exc
        print(f"Output written to: {output_path}")
    else:
        print(text)


def run(args: argparse.Namespace) -> None:
    start, end = validate_range(args.start_date, args.end_date)
    repo = open_repo(args.repo_path)
    tz = timezone.utc if args.utc else None

    records = iter_commit_records(repo, start, end, rev=args.branch, tz=tz)
    index = aggregate(records, start, end, tz=tz)

    if args.json or args.output:
        report = build_report(str(repo.working_dir), args.branch, start, end, index)
        _emit(to_json(report), args.output)
        return

    color = use_color(args)
    for line in render(index, start, end, color=color):
        print(line)

    if args.summary:
        totals = summarize(index)
        line = (
            f"{totals['active_days']} active day(s), {totals['files_changed']} file(s), "
            f"+{totals['additions']}/-{totals['deletions']} ({totals['total_changes']} changes)"
        )
        print(f"{COLOR_CYAN}{line}{COLOR_RESET}" if color else line)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="git-stat",
        description="Summarise a git repository's daily change activity over a date range.",
        epilog="Example: git-stat /path/to/repo 2023-08-30 2023-09-01",
    )
    parser.add_argument("repo_path", help="Path to the git repository")
    parser.add_argument("start_date", help="First day, YYYY-MM-DD")
    parser.add_argument("end_date", help="Last day (inclusive), YYYY-MM-DD")
    parser.add_argument("--branch", default=None, metavar="REV", help="Revision to walk (default: HEAD)")
    parser.add_argument("--utc", action="store_true", help="Bucket commits by UTC date")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colours")
    parser.add_argument("--json", action="store_true", help="Emit a JSON report")
    parser.add_argument("--output", default=None, metavar="FILE", help="Write the JSON report to FILE")
    parser.add_argument("--summary", action="store_true", help="Print totals after the table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        run(args)
    except GitStatError as exc:
        logger.debug("Aborting", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
