"""
Unit tests for due-date grouping and matrix/priority views.
"""
from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta, timezone

from taskpilot.grouping import by_priority, by_quadrant, group
from taskpilot.hydrator import hydrate
from taskpilot.matrix import set_status
from taskpilot.models import DraftTask

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


def _task(name, **kw):
    return hydrate(DraftTask(name=name, **kw), now=NOW - timedelta(days=3))


def test_group_partitions_every_task_once():
    tasks = [
        _task("later today", due_date=NOW + timedelta(hours=3)),
        _task("this morning", due_date=NOW - timedelta(hours=3)),
        _task("next week", due_date=NOW + timedelta(days=7)),
        _task("last week", due_date=NOW - timedelta(days=7)),
        _task("someday"),
    ]
    grouped = group(tasks, NOW)

    assert [t.name for t in grouped.today] == ["later today", "this morning"]
    assert [t.name for t in grouped.upcoming] == ["next week"]
    assert [t.name for t in grouped.overdue] == ["last week"]
    assert [t.name for t in grouped.unscheduled] == ["someday"]

    ids = [t.id for bucket in (grouped.today, grouped.upcoming, grouped.overdue, grouped.unscheduled) for t in bucket]
    assert sorted(ids) == sorted(t.id for t in tasks)
    assert grouped.counts() == {"today": 2, "upcoming": 1, "overdue": 1, "unscheduled": 1}


def test_completed_past_due_task_is_not_overdue():
    task = set_status(_task("filed taxes", due_date=NOW - timedelta(days=2)), "Completed", NOW)
    grouped = group([task], NOW)
    assert grouped.overdue == ()
    assert grouped.upcoming == (task,)


def test_today_uses_now_timezone():
    helsinki = timezone(timedelta(hours=2))
    now = datetime(2024, 1, 10, 23, 30, tzinfo=helsinki)
    # 22:10 UTC is already Jan 11 in Helsinki
    task = _task("late call", due_date=datetime(2024, 1, 10, 22, 10, tzinfo=timezone.utc))
    assert group([task], now).upcoming == (task,)


def test_group_empty():
    assert group([], NOW).counts() == {"today": 0, "upcoming": 0, "overdue": 0, "unscheduled": 0}


def test_by_quadrant_has_all_keys_in_matrix_order():
    matrix = by_quadrant([])
    assert list(matrix) == [
        "Urgent & Important",
        "Important, Not Urgent",
        "Urgent, Not Important",
        "Neither",
    ]
    assert all(v == [] for v in matrix.values())


def test_by_quadrant_recomputes_with_now():
    task = _task("board deck", priority="High", due_date=NOW + timedelta(days=1))
    stale = dataclasses.replace(task, matrix_quadrant="Neither")

    assert by_quadrant([stale])["Neither"] == [stale]
    assert by_quadrant([stale], NOW)["Urgent & Important"] == [stale]


def test_by_priority_keeps_input_order():
    a = _task("a", priority="Low")
    b = _task("b", priority="Critical")
    c = _task("c", priority="Low")
    sections = by_priority([a, b, c])
    assert list(sections) == ["Critical", "High", "Medium", "Low"]
    assert sections["Low"] == [a, c]
    assert sections["Critical"] == [b]
