"""Thin helpers for opening a repo and reading commit records from it."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from gitstat.aggregate import local_day
from gitstat.errors import HistoryRetrievalError, RepositoryAccessError
from gitstat.models import CommitRecord, FileDelta

logger = logging.getLogger(__name__)

# Widest UTC offset git records; a day there begins before it does anywhere else.
EARLIEST_OFFSET = timezone(timedelta(hours=14))


def open_repo(path: str | Path) -> Repo:
    """Open the git repository rooted at *path*."""
    resolved = Path(path).expanduser().resolve()
    try:
        repo = Repo(str(resolved))
    except NoSuchPathError:
        raise RepositoryAccessError(f"Path does not exist: {resolved}")
    except InvalidGitRepositoryError:
        raise RepositoryAccessError(f"Not a git repository: {resolved}")
    logger.info("Opened repository %s", resolved)
    return repo


def default_branch(repo: Repo) -> str | None:
    """Return 'main' or 'master' depending on what exists, else the first branch."""
    names = {branch.name for branch in repo.branches}
    for candidate in ("main", "master"):
        if candidate in names:
            return candidate
    branches = list(repo.branches)
    return branches[0].name if branches else None


def _start_rev(repo: Repo) -> str | None:
    if repo.head.is_valid():
        return "HEAD"
    # Detached at nothing or an unborn HEAD: fall back to a real branch if any.
    return default_branch(repo)


def since_bound(start: date) -> str | None:
    """Absolute ``--since`` value safe for every commit authored on or after *start*.

    Returned as git's raw ``@<epoch> +0000`` form so the machine's own time
    zone plays no part. A day of slack covers committer dates a little
    behind author dates. Dates before the epoch get no bound at all.
    """
    day = max(start, date.min + timedelta(days=1)) - timedelta(days=1)
    epoch = int(datetime.combine(day, time.min, EARLIEST_OFFSET).timestamp())
    if epoch <= 0:
        return None
    return f"@{epoch} +0000"


def commit_deltas(commit) -> tuple[FileDelta, ...]:
    """Per-file added/deleted line counts for *commit* (``git diff --numstat``)."""
    return tuple(
        FileDelta(path=str(path), added=counts["insertions"], deleted=counts["deletions"])
        for path, counts in commit.stats.files.items()
    )


def iter_commit_records(
    repo: Repo,
    start: date,
    end: date,
    rev: str | None = None,
    tz: tzinfo | None = None,
) -> Iterator[CommitRecord]:
    """Yield a :class:`CommitRecord` per commit authored on a day in ``[start, end]``.

    The day of a commit is the calendar date of its author timestamp, read
    in the offset it was recorded with (or converted to *tz* when given).

    ``git rev-list --since/--until`` filter on the committer date, so only a
    loose ``--since`` bound is handed to git; the author-date window is
    applied here.

    Parameters
    ----------
    repo:
        Open GitPython Repo object.
    start, end:
        Inclusive calendar-day window.
    rev:
        Revision to walk from. Defaults to ``HEAD``.
    tz:
        Zone to convert author timestamps into before taking the date.

    Raises
    ------
    HistoryRetrievalError
        If git fails while walking history or computing a commit's stats.
    """
    target = rev or _start_rev(repo)
    if target is None:
        logger.info("Repository has no commits")
        return

    since = since_bound(start)
    logger.info("Walking %s since %s for author dates %s..%s", target, since or "the root", start, end)
    kwargs: dict = {}
    if since is not None:
        kwargs["since"] = since

    sha = None
    try:
        for commit in repo.iter_commits(target, **kwargs):
            sha = commit.hexsha
            authored_at = commit.authored_datetime
            day = local_day(authored_at, tz)
            if day < start or day > end:
                continue
            yield CommitRecord(sha=sha, authored_at=authored_at, deltas=commit_deltas(commit))
    except (GitCommandError, ValueError) as exc:
        where = f" at {sha[:8]}" if sha else ""
        raise HistoryRetrievalError(f"Failed to read history{where}: {exc}") from exc
