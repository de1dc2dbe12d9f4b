"""
Unit tests for hydration: override -> parsed -> default precedence.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from taskpilot.domain.common.errors import EmptyInputError, InvalidOverrideError, MalformedDurationError
from taskpilot.domain.tasks.ports import IdGenerator
from taskpilot.domain.tasks.rules import coerce_estimate, coerce_priority
from taskpilot.hydrator import hydrate, resolve_field
from taskpilot.models import DraftTask, TaskOverrides
from taskpilot.parser import parse

NOW = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


class _SeqIds(IdGenerator):
    def __init__(self) -> None:
        self._n = count(1)

    def new_id(self) -> str:
        return f"t{next(self._n)}"


def test_resolve_field_override_wins():
    assert resolve_field("low", "High", "Medium", coerce_priority) == "Low"


def test_resolve_field_invalid_override_falls_back_to_parsed():
    assert resolve_field("Urgentish", "High", "Medium", coerce_priority) == "High"


def test_resolve_field_everything_invalid_gives_default():
    assert resolve_field("abc", "-5", None, coerce_estimate) is None


def test_resolve_field_blank_override_is_not_chosen():
    assert resolve_field("   ", "High", "Medium", coerce_priority) == "High"


def test_hydrate_assigns_identity_and_defaults():
    draft = DraftTask(name="Water plants")
    task = hydrate(draft, now=NOW, ids=_SeqIds())

    assert task.id == "t1"
    assert task.created_at == NOW
    assert task.status == "Pending"
    assert task.priority == "Medium"
    assert task.category == "General"
    assert task.due_date is None
    assert task.estimated_minutes is None
    assert task.subtasks == ()
    assert task.notes is None
    assert task.matrix_quadrant == "Neither"


def test_hydrate_uses_parsed_values():
    due = NOW + timedelta(hours=2)
    draft = DraftTask(name="Ship release", priority="Critical", category="Work", due_date=due, estimated_minutes=30)
    task = hydrate(draft, now=NOW, ids=_SeqIds())

    assert task.priority == "Critical"
    assert task.category == "Work"
    assert task.due_date == due
    assert task.estimated_minutes == 30
    assert task.matrix_quadrant == "Urgent & Important"


def test_hydrate_overrides_win_per_field():
    draft = DraftTask(name="Ship release", priority="Critical", category="Work", estimated_minutes=30)
    overrides = TaskOverrides(
        priority="low",
        category="personal",
        due_date="2024-03-01T10:00:00+00:00",
        estimated_minutes="90",
        notes="  bring laptop  ",
    )
    task = hydrate(draft, overrides, now=NOW, ids=_SeqIds())

    assert task.priority == "Low"
    assert task.category == "Personal"
    assert task.due_date == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert task.estimated_minutes == 90
    assert task.notes == "bring laptop"
    assert task.matrix_quadrant == "Neither"


def test_hydrate_invalid_overrides_degrade_to_parsed():
    draft = DraftTask(name="Budget review", priority="High", category="Finance", estimated_minutes=45)
    overrides = TaskOverrides(priority="sometime", category="Hobbies", due_date="next-ish", estimated_minutes="lots")
    task = hydrate(draft, overrides, now=NOW, ids=_SeqIds())

    assert task.priority == "High"
    assert task.category == "Finance"
    assert task.due_date is None
    assert task.estimated_minutes == 45


def test_hydrate_naive_override_date_gets_now_timezone():
    task = hydrate(DraftTask(name="x"), TaskOverrides(due_date="2024-01-05T12:00"), now=NOW, ids=_SeqIds())
    assert task.due_date == datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)


def test_hydrate_offset_override_with_naive_clock_falls_back_to_parsed():
    now = datetime(2024, 1, 1, 9, 0)
    draft = parse("finalize deck tomorrow 3pm", now=now)
    task = hydrate(draft, TaskOverrides(due_date="2024-01-02T10:00Z"), now=now, ids=_SeqIds())

    assert task.due_date == datetime(2024, 1, 2, 15, 0)
    assert task.matrix_quadrant == "Urgent, Not Important"


def test_hydrate_subtasks_get_unique_ids_in_order():
    draft = DraftTask(name="Launch", subtasks=("draft", "review"))
    task = hydrate(draft, now=NOW, ids=_SeqIds())

    assert [s.title for s in task.subtasks] == ["draft", "review"]
    assert [s.id for s in task.subtasks] == ["t1-1", "t1-2"]
    assert not any(s.completed for s in task.subtasks)


def test_hydrate_subtask_override_string():
    draft = DraftTask(name="Launch", subtasks=("draft",))
    task = hydrate(draft, TaskOverrides(subtasks="plan, build | ship"), now=NOW, ids=_SeqIds())
    assert [s.title for s in task.subtasks] == ["plan", "build", "ship"]


def test_hydrate_does_not_mutate_draft():
    draft = DraftTask(name="Launch", priority="High", subtasks=("a",))
    before = draft
    hydrate(draft, TaskOverrides(priority="Low"), now=NOW, ids=_SeqIds())
    assert draft == before
    assert draft.priority == "High"


def test_hydrate_fresh_ids_per_call():
    ids = _SeqIds()
    first = hydrate(DraftTask(name="a"), now=NOW, ids=ids)
    second = hydrate(DraftTask(name="a"), now=NOW, ids=ids)
    assert first.id != second.id


def test_hydrate_default_ids_are_uuids():
    task = hydrate(DraftTask(name="a"), now=NOW)
    assert len(task.id) == 36


def test_hydrate_blank_name_raises():
    with pytest.raises(EmptyInputError):
        hydrate(DraftTask(name="  "), now=NOW)


@pytest.mark.parametrize("value", ["abc", 0, -10, True, float("nan")])
def test_coerce_estimate_rejects(value):
    with pytest.raises(MalformedDurationError):
        coerce_estimate(value)


def test_coerce_priority_rejects_unknown():
    with pytest.raises(InvalidOverrideError):
        coerce_priority("Whenever")
