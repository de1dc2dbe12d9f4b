"""
Eisenhower matrix classification.

Importance comes from priority (Critical/High), urgency from the due date
(overdue or due within URGENCY_HORIZON_HOURS). The quadrant is derived
state: every function here that changes priority or due date returns a new
Task with the quadrant recomputed.
"""
from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from taskpilot.constants import (
    IMPORTANT_PRIORITIES,
    QUADRANT_DELEGATE,
    QUADRANT_DO,
    QUADRANT_NEITHER,
    QUADRANT_SCHEDULE,
    STATUS_COMPLETED,
    URGENCY_HORIZON_HOURS,
)
from taskpilot.domain.common.errors import NotFoundError, ValidationError
from taskpilot.domain.tasks.rules import (
    coerce_category,
    coerce_due_date,
    coerce_estimate,
    coerce_priority,
    coerce_status,
)
from taskpilot.models import Task

logger = logging.getLogger(__name__)

_PROTECTED_FIELDS = frozenset({"id", "created_at", "matrix_quadrant", "completed_at"})
_URGENCY_HORIZON = timedelta(hours=URGENCY_HORIZON_HOURS)


def is_important(priority: str) -> bool:
    return priority in IMPORTANT_PRIORITIES


def is_urgent(due_date: Optional[datetime], now: datetime) -> bool:
    """Overdue or due within the urgency horizon. No due date is never urgent."""
    if due_date is None:
        return False
    return due_date <= now + _URGENCY_HORIZON


def classify(priority: str, due_date: Optional[datetime], now: datetime) -> str:
    """
    Map priority + due date to a matrix quadrant.

    Examples:
        Critical, due in 1 hour   -> "Urgent & Important"
        High, due in a week       -> "Important, Not Urgent"
        Low, overdue              -> "Urgent, Not Important"
        Low, no due date          -> "Neither"
    """
    important = is_important(priority)
    urgent = is_urgent(due_date, now)
    if important and urgent:
        return QUADRANT_DO
    if important:
        return QUADRANT_SCHEDULE
    if urgent:
        return QUADRANT_DELEGATE
    return QUADRANT_NEITHER


def classify_task(task: Task, now: datetime) -> Task:
    quadrant = classify(task.priority, task.due_date, now)
    if quadrant == task.matrix_quadrant:
        return task
    return dataclasses.replace(task, matrix_quadrant=quadrant)


def refresh(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Recompute quadrants for a collection snapshot at read time."""
    return [classify_task(task, now) for task in tasks]


def update_task(task: Task, now: datetime, **changes: Any) -> Task:
    """
    Whole-field replacement of one or more task fields.

    Values are validated, `completed_at` follows status transitions and the
    quadrant is recomputed before the new Task is returned.

    Raises:
        ValidationError: unknown field, protected field, or invalid value
            (InvalidOverrideError / MalformedDurationError for bad values)
    """
    forbidden = _PROTECTED_FIELDS.intersection(changes)
    if forbidden:
        raise ValidationError(f"Fields cannot be set directly: {', '.join(sorted(forbidden))}")
    known = {f.name for f in dataclasses.fields(Task)}
    unknown = set(changes) - known
    if unknown:
        raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")

    if "name" in changes:
        name = " ".join((changes["name"] or "").split())
        if not name:
            raise ValidationError("Task name cannot be empty.")
        changes["name"] = name
    if "priority" in changes:
        changes["priority"] = coerce_priority(changes["priority"])
    if "category" in changes:
        changes["category"] = coerce_category(changes["category"])
    if changes.get("due_date") is not None:
        changes["due_date"] = coerce_due_date(changes["due_date"], now)
    if changes.get("estimated_minutes") is not None:
        changes["estimated_minutes"] = coerce_estimate(changes["estimated_minutes"])
    if "subtasks" in changes:
        changes["subtasks"] = tuple(changes["subtasks"])
        ids = [s.id for s in changes["subtasks"]]
        if len(ids) != len(set(ids)):
            raise ValidationError("Subtask ids must be unique within a task.")
    if "status" in changes:
        status = coerce_status(changes["status"])
        changes["status"] = status
        if status == STATUS_COMPLETED and task.status != STATUS_COMPLETED:
            changes["completed_at"] = now
        elif status != STATUS_COMPLETED:
            changes["completed_at"] = None

    updated = dataclasses.replace(task, **changes)
    return classify_task(updated, now)


def set_status(task: Task, status: str, now: datetime) -> Task:
    return update_task(task, now, status=status)


def set_priority(task: Task, priority: str, now: datetime) -> Task:
    return update_task(task, now, priority=priority)


def set_due_date(task: Task, due_date: Optional[datetime], now: datetime) -> Task:
    return update_task(task, now, due_date=due_date)


def toggle_subtask(task: Task, subtask_id: str, now: datetime) -> Task:
    if not any(s.id == subtask_id for s in task.subtasks):
        raise NotFoundError(f"Subtask {subtask_id} not found on task {task.id}.")
    subtasks = tuple(
        dataclasses.replace(s, completed=not s.completed) if s.id == subtask_id else s
        for s in task.subtasks
    )
    logger.debug("Toggled subtask %s on task %s", subtask_id, task.id)
    return update_task(task, now, subtasks=subtasks)
