"""Fold commit records into per-day change statistics."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from gitstat.models import CommitRecord, DayStats, DayStatsIndex

logger = logging.getLogger(__name__)


def local_day(timestamp: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of *timestamp*, optionally after converting it to *tz*."""
    if tz is not None and timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(tz)
    return timestamp.date()


def commit_day(record: CommitRecord, tz: tzinfo | None = None) -> date:
    return local_day(record.authored_at, tz)


def aggregate(
    commits: Iterable[CommitRecord],
    start: date,
    end: date,
    tz: tzinfo | None = None,
) -> DayStatsIndex:
    """Return a sparse ``{day: DayStats}`` index built from *commits*.

    A file touched several times on one day is counted once in
    ``changed_files``, but every touch adds to ``additions`` and
    ``deletions``. Days without commits get no entry.

    *start* and *end* describe the window the caller asked the collaborator
    for. Records outside it are bucketed like any other; filtering is the
    caller's job.

    Errors raised by a lazy *commits* iterable propagate unchanged and no
    index is returned.
    """
    index: DayStatsIndex = {}
    folded = 0
    for record in commits:
        day = commit_day(record, tz)
        if not start <= day <= end:
            logger.debug("Commit %s on %s lies outside %s..%s", record.sha[:8], day, start, end)
        stats = index.get(day)
        if stats is None:
            stats = index[day] = DayStats()
        for delta in record.deltas:
            stats.changed_files.add(delta.path)
            stats.additions += delta.added
            stats.deletions += delta.deleted
        folded += 1
        logger.debug("Folded %s into %s (%d files)", record.sha[:8], day, len(record.deltas))

    logger.info("Aggregated %d commits into %d active days", folded, len(index))
    return index


def summarize(index: DayStatsIndex) -> dict:
    """Return totals over every day in *index*."""
    files: set[str] = set()
    for stats in index.values():
        files |= stats.changed_files
    additions = sum(s.additions for s in index.values())
    deletions = sum(s.deletions for s in index.values())
    return {
        "active_days": len(index),
        "files_changed": len(files),
        "additions": additions,
        "deletions": deletions,
        "total_changes": additions + deletions,
    }
