"""Turn a day index into a gap-aware, fixed-width activity table."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date, timedelta

from gitstat.models import ActiveRow, ActivityRow, DayStatsIndex, GapRow

logger = logging.getLogger(__name__)

COLOR_RESET = "\033[0m"
COLOR_ORANGE = "\033[38;5;208m"
COLOR_CYAN = "\033[36m"

DATE_RANGE_WIDTH = 25
FILES_CHANGED_WIDTH = 15
ADDITIONS_WIDTH = 11
DELETIONS_WIDTH = 11
TOTAL_CHANGES_WIDTH = 15

SEPARATOR = "|"
RULE_CHAR = "-"

_WIDTHS = (DATE_RANGE_WIDTH, FILES_CHANGED_WIDTH, ADDITIONS_WIDTH, DELETIONS_WIDTH, TOTAL_CHANGES_WIDTH)
TOTAL_WIDTH = sum(_WIDTHS) + len(_WIDTHS) - 1
# Span of the four numeric columns and their separators; gap messages fill it.
MESSAGE_WIDTH = TOTAL_WIDTH - DATE_RANGE_WIDTH - 1

HEADERS = ("Date Range", "Files Changed", "Additions", "Deletions", "Total Changes")

ONE_DAY = timedelta(days=1)


def iter_rows(index: DayStatsIndex, start: date, end: date) -> Iterator[ActivityRow]:
    """Yield one row per active day and one per run of inactive days, oldest first."""
    gap_start: date | None = None
    # Counted, not stepped past end: end may be date.max.
    for offset in range((end - start).days + 1):
        day = start + timedelta(days=offset)
        stats = index.get(day)
        if stats is None:
            if gap_start is None:
                gap_start = day
        else:
            if gap_start is not None:
                yield GapRow(start=gap_start, end=day - ONE_DAY)
                gap_start = None
            yield ActiveRow(
                day=day,
                files_changed=stats.files_changed,
                additions=stats.additions,
                deletions=stats.deletions,
            )

    if gap_start is not None:
        yield GapRow(start=gap_start, end=end)


def format_date_range(start: date, end: date) -> str:
    """``2023-08-31 ~ 09-02``; the end keeps its year only when it differs."""
    end_str = end.strftime("%m-%d") if start.year == end.year else end.isoformat()
    return f"{start.isoformat()} ~ {end_str}"


def row_label(row: ActivityRow) -> str:
    if isinstance(row, GapRow):
        return format_date_range(row.start, row.end)
    return row.day.isoformat()


def center_text(text: str, width: int) -> str:
    if len(text) >= width:
        return text[:width]
    left = (width - len(text)) // 2
    right = width - len(text) - left
    return " " * left + text + " " * right


def pad_text(text: str, width: int) -> str:
    if len(text) >= width:
        return text[:width]
    return text + " " * (width - len(text))


def _paint(text: str, color: str | None) -> str:
    return f"{color}{text}{COLOR_RESET}" if color else text


def rule() -> str:
    return RULE_CHAR * TOTAL_WIDTH


def header_lines() -> list[str]:
    cells = [center_text(title, width) for title, width in zip(HEADERS, _WIDTHS)]
    return [SEPARATOR.join(cells), rule()]


def row_lines(row: ActivityRow, color: bool = True) -> list[str]:
    """Lines for a single row, including the rule(s) around it."""
    if isinstance(row, GapRow):
        accent = COLOR_ORANGE if color else None
        line = (
            _paint(pad_text(row_label(row), DATE_RANGE_WIDTH), accent)
            + SEPARATOR
            + _paint(center_text(row.message, MESSAGE_WIDTH), accent)
        )
        return [_paint(rule(), accent), line, rule()]

    cells = [pad_text(row_label(row), DATE_RANGE_WIDTH)]
    for value, width in zip(
        (row.files_changed, row.additions, row.deletions, row.total_changes),
        _WIDTHS[1:],
    ):
        cells.append(center_text(str(value), width))
    return [SEPARATOR.join(cells), rule()]


def render(index: DayStatsIndex, start: date, end: date, color: bool = True) -> Iterator[str]:
    """Yield every line of the report table: header first, then each row."""
    yield from header_lines()
    count = 0
    for row in iter_rows(index, start, end):
        count += 1
        yield from row_lines(row, color=color)
    logger.debug("Rendered %d rows for %s..%s", count, start, end)


def rows_to_dicts(rows: list[ActivityRow]) -> list[dict]:
    """JSON-ready form of *rows*."""
    out = []
    for row in rows:
        if isinstance(row, GapRow):
            out.append({
                "kind": "gap",
                "start": row.start.isoformat(),
                "end": row.end.isoformat(),
                "days": row.days,
                "label": row_label(row),
            })
        else:
            out.append({
                "kind": "active",
                "date": row.day.isoformat(),
                "files_changed": row.files_changed,
                "additions": row.additions,
                "deletions": row.deletions,
                "total_changes": row.total_changes,
            })
    return out
