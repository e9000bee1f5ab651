"""Shared fixtures: throwaway git repositories and in-memory commit records."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from git import Actor, Repo

from gitstat.models import CommitRecord, FileDelta

ACTOR = Actor("Test Author", "author@example.com")


def git_stamp(when: datetime) -> str:
    """GitPython's raw ``<epoch> <+HHMM>`` date form."""
    return f"{int(when.timestamp())} {when.strftime('%z')}"


def commit_files(
    repo: Repo,
    files: dict[str, str],
    when: datetime,
    committed: datetime | None = None,
    message: str = "change",
):
    """Write *files* into the working tree and commit them with fixed dates."""
    root = Path(repo.working_tree_dir)
    paths = []
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        paths.append(str(path))
    repo.index.add(paths)
    return repo.index.commit(
        message,
        author=ACTOR,
        committer=ACTOR,
        author_date=git_stamp(when),
        commit_date=git_stamp(committed or when),
    )


def lines(n: int, prefix: str = "line") -> str:
    return "".join(f"{prefix} {i}\n" for i in range(n))


def at(day: str, hour: int = 12, offset_hours: int = 0) -> datetime:
    tz = timezone(timedelta(hours=offset_hours))
    return datetime.strptime(day, "%Y-%m-%d").replace(hour=hour, tzinfo=tz)


def record(sha: str, when: datetime, *deltas: tuple[str, int, int]) -> CommitRecord:
    return CommitRecord(
        sha=sha,
        authored_at=when,
        deltas=tuple(FileDelta(path=p, added=a, deleted=d) for p, a, d in deltas),
    )


@pytest.fixture
def empty_repo(tmp_path):
    return Repo.init(tmp_path / "repo")


@pytest.fixture
def sample_repo(empty_repo):
    """History matching the README example.

    2023-08-20  b.txt created (outside the usual query window)
    2023-08-30  a.txt created (+8), two lines of b.txt rewritten (+2/-2)
    2023-09-01  c.txt created (+1)
    """
    repo = empty_repo
    commit_files(repo, {"b.txt": lines(5)}, at("2023-08-20"), message="initial")
    commit_files(
        repo,
        {"a.txt": lines(8), "b.txt": "line 0\nline 1\nline 2\nchanged 3\nchanged 4\n"},
        at("2023-08-30"),
    )
    commit_files(repo, {"c.txt": "hello\n"}, at("2023-09-01"))
    return repo
