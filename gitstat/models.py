"""Shared dataclasses for commit input, per-day stats and report rows."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Union


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, date):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def to_json(data: dict, indent: int = 2) -> str:
    return json.dumps(data, indent=indent, default=_default_serializer)


@dataclass(frozen=True)
class FileDelta:
    path: str
    added: int
    deleted: int


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    authored_at: datetime  # author timestamp, in the offset it was recorded with
    deltas: tuple[FileDelta, ...] = ()


@dataclass
class DayStats:
    changed_files: set[str] = field(default_factory=set)
    additions: int = 0
    deletions: int = 0

    @property
    def files_changed(self) -> int:
        return len(self.changed_files)

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions


# Sparse: a day is present only if at least one commit landed on it.
DayStatsIndex = dict[date, DayStats]


@dataclass(frozen=True)
class ActiveRow:
    day: date
    files_changed: int
    additions: int
    deletions: int

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class GapRow:
    start: date
    end: date  # inclusive

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def message(self) -> str:
        noun = "day" if self.days == 1 else "days"
        return f"{self.days} {noun} no commits"


ActivityRow = Union[ActiveRow, GapRow]
