"""
Grouping of a task collection by due date, quadrant and priority.

Input order is preserved inside every bucket.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from taskpilot.constants import PRIORITIES, QUADRANT_NEITHER, QUADRANTS
from taskpilot.matrix import classify
from taskpilot.models import GroupedTasks, Task

logger = logging.getLogger(__name__)

BUCKET_TODAY = "today"
BUCKET_UPCOMING = "upcoming"
BUCKET_OVERDUE = "overdue"
BUCKET_UNSCHEDULED = "unscheduled"


def same_day(a: datetime, b: datetime) -> bool:
    """Same calendar day, as seen from b's timezone."""
    if a.tzinfo is not None and b.tzinfo is not None:
        a = a.astimezone(b.tzinfo)
    return a.date() == b.date()


def bucket_of(task: Task, now: datetime) -> str:
    """
    Due-date bucket for one task.

    Rules (first match wins):
    - no due date -> unscheduled
    - due on now's calendar day -> today
    - due in the past and not completed -> overdue
    - otherwise -> upcoming
    """
    if task.due_date is None:
        return BUCKET_UNSCHEDULED
    if same_day(task.due_date, now):
        return BUCKET_TODAY
    if task.due_date < now and not task.is_completed:
        return BUCKET_OVERDUE
    return BUCKET_UPCOMING


def group(tasks: Iterable[Task], now: datetime) -> GroupedTasks:
    buckets: dict[str, list[Task]] = {
        BUCKET_TODAY: [],
        BUCKET_UPCOMING: [],
        BUCKET_OVERDUE: [],
        BUCKET_UNSCHEDULED: [],
    }
    for task in tasks:
        buckets[bucket_of(task, now)].append(task)
    return GroupedTasks(
        today=tuple(buckets[BUCKET_TODAY]),
        upcoming=tuple(buckets[BUCKET_UPCOMING]),
        overdue=tuple(buckets[BUCKET_OVERDUE]),
        unscheduled=tuple(buckets[BUCKET_UNSCHEDULED]),
    )


def by_quadrant(tasks: Iterable[Task], now: Optional[datetime] = None) -> dict[str, list[Task]]:
    """
    Tasks per matrix quadrant; all four keys are always present.

    With `now` the quadrant is recomputed at read time instead of trusting
    the value carried by the task.
    """
    matrix: dict[str, list[Task]] = {quadrant: [] for quadrant in QUADRANTS}
    for task in tasks:
        quadrant = classify(task.priority, task.due_date, now) if now is not None else task.matrix_quadrant
        if quadrant not in matrix:
            logger.warning("Task %s has unknown quadrant %r", task.id, quadrant)
            quadrant = QUADRANT_NEITHER
        matrix[quadrant].append(task)
    return matrix


def by_priority(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Tasks per priority, Critical first; all four keys are always present."""
    sections: dict[str, list[Task]] = {priority: [] for priority in PRIORITIES}
    for task in tasks:
        sections.setdefault(task.priority, []).append(task)
    return sections
