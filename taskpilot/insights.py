"""
Weekly statistics, bottleneck heuristics and reminders.

Everything here is derived from counts over the task collection and the
caller's `now`; nothing is random and nothing reads external data.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from taskpilot.constants import (
    BOTTLENECK_CATEGORY_MIN_OPEN,
    BOTTLENECK_CATEGORY_SHARE,
    BOTTLENECK_DO_FIRST_MIN,
    BOTTLENECK_NO_ESTIMATE_MIN,
    BOTTLENECK_UNSCHEDULED_MIN,
    QUADRANT_DO,
    REMINDER_HORIZON_HOURS,
)
from taskpilot.grouping import group
from taskpilot.matrix import classify
from taskpilot.models import Task, WeeklySummary
from taskpilot.utils import humanize_delta, plural, start_of_day

STEADY_STATE_RECOMMENDATION = "Plan tomorrow's top three tasks before you wrap up today."
LOW_COMPLETION_MIN_CREATED = 5
LOW_COMPLETION_RATE = 50


def week_start(now: datetime) -> datetime:
    """Monday 00:00 of now's week, in now's timezone."""
    return start_of_day(now) - timedelta(days=now.weekday())


def completion_rate(completed: int, created: int) -> int:
    """Integer percentage in [0, 100]; 0 when nothing was created."""
    if created <= 0:
        return 0
    return max(0, min(100, round(completed * 100 / created)))


def _completed_in_window(task: Task, start: datetime, now: datetime) -> bool:
    if not task.is_completed:
        return False
    # records from before completed_at existed fall back to created_at
    finished = task.completed_at or task.created_at
    return start <= finished <= now


def summarize(tasks: Sequence[Task], now: datetime) -> WeeklySummary:
    """
    Weekly snapshot of the collection.

    Returns:
        WeeklySummary with created/completed counts for the current week,
        completion rate, bottlenecks and recommendations
    """
    start = week_start(now)
    created = sum(1 for t in tasks if start <= t.created_at <= now)
    completed = sum(1 for t in tasks if _completed_in_window(t, start, now))
    rate = completion_rate(completed, created)

    open_tasks = [t for t in tasks if t.is_open]
    overdue = len(group(open_tasks, now).overdue)

    bottlenecks: list[str] = []
    recommendations: list[str] = []

    if overdue:
        bottlenecks.append(f"{plural(overdue, 'task')} overdue")
        if overdue >= 3:
            recommendations.append("Block time today to clear the overdue backlog, or reschedule what can wait.")
        else:
            recommendations.append("Reschedule or finish overdue tasks before adding new ones.")

    per_category = Counter(t.category for t in open_tasks)
    for category, count in per_category.most_common():
        if count >= BOTTLENECK_CATEGORY_MIN_OPEN and count / len(open_tasks) >= BOTTLENECK_CATEGORY_SHARE:
            bottlenecks.append(f"{category} has {count} pending tasks ({round(count * 100 / len(open_tasks))}% of open work)")
            recommendations.append(f"Batch {category.lower()} tasks into one focused block to cut context switching.")

    do_first = sum(1 for t in open_tasks if classify(t.priority, t.due_date, now) == QUADRANT_DO)
    if do_first >= BOTTLENECK_DO_FIRST_MIN:
        bottlenecks.append(f"{do_first} tasks sitting in {QUADRANT_DO}")
        recommendations.append("Start with Urgent & Important work; delegate or drop what is only urgent.")

    unscheduled = sum(1 for t in open_tasks if t.due_date is None)
    if unscheduled >= BOTTLENECK_UNSCHEDULED_MIN:
        bottlenecks.append(f"{unscheduled} open tasks have no due date")
        recommendations.append("Give unscheduled tasks a due date so the planner can rank them.")

    no_estimate = sum(1 for t in open_tasks if t.estimated_minutes is None)
    if no_estimate >= BOTTLENECK_NO_ESTIMATE_MIN:
        bottlenecks.append(f"{no_estimate} open tasks have no time estimate")
        recommendations.append("Add time estimates so daily plans fit your focus budget.")

    if created >= LOW_COMPLETION_MIN_CREATED and rate < LOW_COMPLETION_RATE:
        bottlenecks.append(f"Completion rate is {rate}% this week")
        recommendations.append("Capture less, finish more: pick three tasks to close before adding new ones.")

    if not recommendations:
        recommendations.append(STEADY_STATE_RECOMMENDATION)

    return WeeklySummary(
        week_start=start,
        tasks_created=created,
        tasks_completed=completed,
        completion_rate=rate,
        bottlenecks=tuple(bottlenecks),
        recommendations=tuple(recommendations),
        open_tasks=len(open_tasks),
        overdue_tasks=overdue,
    )


def reminder_text(task: Task, now: datetime) -> str:
    if task.due_date < now:
        return f"{task.name} is overdue by {humanize_delta(now - task.due_date)}"
    if task.due_date == now:
        return f"{task.name} is due now"
    return f"{task.name} is due in {humanize_delta(task.due_date - now)}"


def reminders(tasks: Iterable[Task], now: datetime) -> list[str]:
    """
    One line per open task that is overdue or due within the reminder
    horizon, most urgent (earliest due) first.
    """
    horizon = now + timedelta(hours=REMINDER_HORIZON_HOURS)
    due = [t for t in tasks if t.is_open and t.due_date is not None and t.due_date <= horizon]
    due.sort(key=lambda t: t.due_date)
    return [reminder_text(t, now) for t in due]
