"""
Task hydration: DraftTask (+ form overrides) -> Task.

Every field is resolved the same way: a valid override wins, else the
parsed value, else the type default. Invalid overrides are logged and
ignored; they never stop a task from being captured.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from taskpilot.constants import DEFAULT_CATEGORY, DEFAULT_PRIORITY
from taskpilot.domain.common.errors import EmptyInputError, ValidationError
from taskpilot.domain.common.time import utc_now
from taskpilot.domain.tasks.ports import IdGenerator
from taskpilot.domain.tasks.rules import (
    coerce_category,
    coerce_due_date,
    coerce_estimate,
    coerce_priority,
    coerce_subtask_titles,
)
from taskpilot.infra.ids.uuid_gen import UuidGenerator
from taskpilot.matrix import classify_task
from taskpilot.models import DraftTask, Subtask, Task, TaskOverrides

logger = logging.getLogger(__name__)

_DEFAULT_IDS = UuidGenerator()


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def resolve_field(
    override: Any,
    parsed: Any,
    default: Any,
    coerce: Optional[Callable[[Any], Any]] = None,
    field_name: str = "field",
) -> Any:
    """
    Resolve one task field: override -> parsed -> default.

    Args:
        override: Value chosen by hand (None / blank / empty means not chosen)
        parsed: Value inferred by the parser (None means not found)
        default: Type default
        coerce: Validator/normaliser; raises a ValidationError on bad input
        field_name: For log messages

    Returns:
        The first candidate that is present and valid
    """
    for source, value in (("override", override), ("parsed", parsed)):
        if not _is_present(value):
            continue
        if coerce is None:
            return value
        try:
            return coerce(value)
        except ValidationError as e:
            logger.warning("Ignoring %s %s value: %s", source, field_name, e)
    return default


def hydrate(
    draft: DraftTask,
    overrides: Optional[TaskOverrides] = None,
    now: Optional[datetime] = None,
    ids: Optional[IdGenerator] = None,
) -> Task:
    """
    Give a draft its identity and defaults.

    Assigns a fresh id and created_at=now, resolves every field and
    classifies the task before returning it. The draft is not modified.

    Raises:
        EmptyInputError: the draft has no name (the parser never produces one)
    """
    if not draft.name or not draft.name.strip():
        raise EmptyInputError("Task name is empty.")
    if now is None:
        now = utc_now()
    ids = ids or _DEFAULT_IDS
    ov = overrides or TaskOverrides()

    task_id = ids.new_id()

    priority = resolve_field(ov.priority, draft.priority, DEFAULT_PRIORITY, coerce_priority, "priority")
    category = resolve_field(ov.category, draft.category, DEFAULT_CATEGORY, coerce_category, "category")
    due_date = resolve_field(
        ov.due_date, draft.due_date, None, lambda v: coerce_due_date(v, now), "due_date"
    )
    estimated_minutes = resolve_field(
        ov.estimated_minutes, draft.estimated_minutes, None, coerce_estimate, "estimated_minutes"
    )
    titles = resolve_field(ov.subtasks, draft.subtasks, (), coerce_subtask_titles, "subtasks")
    notes = ov.notes.strip() if ov.notes and ov.notes.strip() else None

    task = Task(
        id=task_id,
        name=draft.name.strip(),
        created_at=now,
        priority=priority,
        category=category,
        due_date=due_date,
        estimated_minutes=estimated_minutes,
        subtasks=tuple(
            Subtask(id=f"{task_id}-{n}", title=title) for n, title in enumerate(titles, start=1)
        ),
        notes=notes,
    )
    return classify_task(task, now)
