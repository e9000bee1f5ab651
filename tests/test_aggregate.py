"""Tests for folding commit records into per-day stats."""

import random
from datetime import date, timezone

import pytest

from gitstat.aggregate import aggregate, commit_day, summarize
from gitstat.errors import HistoryRetrievalError

from tests.conftest import at, record

START = date(2023, 8, 30)
END = date(2023, 9, 1)


class TestAggregate:
    def test_same_file_counts_once_but_lines_accumulate(self):
        commits = [
            record("a1", at("2023-05-05", 9), ("src/app.py", 3, 1)),
            record("a2", at("2023-05-05", 17), ("src/app.py", 5, 0)),
        ]
        index = aggregate(commits, date(2023, 5, 5), date(2023, 5, 5))
        stats = index[date(2023, 5, 5)]
        assert stats.additions == 8
        assert stats.deletions == 1
        assert stats.files_changed == 1
        assert stats.total_changes == 9

    def test_distinct_files_across_commits(self):
        commits = [
            record("a1", at("2023-08-30", 9), ("a.txt", 1, 0), ("b.txt", 2, 2)),
            record("a2", at("2023-08-30", 10), ("b.txt", 1, 0), ("c.txt", 4, 0)),
        ]
        stats = aggregate(commits, START, END)[date(2023, 8, 30)]
        assert stats.changed_files == {"a.txt", "b.txt", "c.txt"}
        assert (stats.additions, stats.deletions) == (8, 2)

    def test_only_active_days_get_entries(self):
        commits = [
            record("a1", at("2023-08-30"), ("a.txt", 10, 2)),
            record("a2", at("2023-09-01"), ("c.txt", 1, 0)),
        ]
        index = aggregate(commits, START, END)
        assert set(index) == {date(2023, 8, 30), date(2023, 9, 1)}
        assert date(2023, 8, 31) not in index

    def test_commit_without_deltas_still_marks_day_active(self):
        index = aggregate([record("e1", at("2023-08-31"))], START, END)
        stats = index[date(2023, 8, 31)]
        assert stats.files_changed == 0
        assert stats.total_changes == 0

    def test_empty_input(self):
        assert aggregate([], START, END) == {}

    def test_out_of_range_commit_is_bucketed_not_rejected(self):
        index = aggregate([record("o1", at("2024-01-01"), ("x", 1, 1))], START, END)
        assert index[date(2024, 1, 1)].additions == 1

    def test_order_independent(self):
        commits = [
            record(f"c{i}", at(f"2023-08-{day}", hour), (f"f{i % 3}", i, i // 2))
            for i, (day, hour) in enumerate([(30, 1), (30, 5), (31, 2), (30, 23), (31, 7), (30, 8)])
        ]
        baseline = aggregate(commits, START, END)
        shuffled = commits[:]
        random.Random(7).shuffle(shuffled)
        assert aggregate(shuffled, START, END) == baseline
        assert aggregate(commits, START, END) == baseline

    def test_error_from_lazy_source_propagates(self):
        def source():
            yield record("a1", at("2023-08-30"), ("a.txt", 1, 0))
            raise HistoryRetrievalError("object not found")

        with pytest.raises(HistoryRetrievalError, match="object not found"):
            aggregate(source(), START, END)


class TestCommitDay:
    def test_uses_author_offset(self):
        late = record("tz", at("2023-05-05", 23, offset_hours=-5))
        assert commit_day(late) == date(2023, 5, 5)

    def test_utc_normalisation_can_move_the_day(self):
        late = record("tz", at("2023-05-05", 23, offset_hours=-5))
        assert commit_day(late, timezone.utc) == date(2023, 5, 6)

    def test_aggregate_respects_tz(self):
        commits = [record("tz", at("2023-05-05", 23, offset_hours=-5), ("a", 1, 0))]
        index = aggregate(commits, date(2023, 5, 5), date(2023, 5, 6), tz=timezone.utc)
        assert list(index) == [date(2023, 5, 6)]


def test_summarize_totals():
    commits = [
        record("a1", at("2023-08-30"), ("a.txt", 8, 0), ("b.txt", 2, 2)),
        record("a2", at("2023-09-01"), ("a.txt", 1, 0)),
    ]
    totals = summarize(aggregate(commits, START, END))
    assert totals == {
        "active_days": 2,
        "files_changed": 2,
        "additions": 11,
        "deletions": 2,
        "total_changes": 13,
    }
