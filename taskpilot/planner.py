"""
Deterministic daily plan generation.

Scores every open task by combining:
- Priority weight (Critical=4 .. Low=1)
- Due date proximity (overdue highest, unscheduled neutral)
- Energy fit (long tasks for high energy, quick ones for low energy)

then fills the focus budget greedily in score order. A task that does not
fit the remaining minutes is skipped, never split. All weights live in
PLAN_WEIGHTS.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Union

from taskpilot.constants import (
    DEEP_WORK_MINUTES,
    DEFAULT_ESTIMATE_MINUTES,
    ENERGY_HIGH,
    ENERGY_LOW,
    ENERGY_MEDIUM,
    PLAN_WEIGHTS,
    PRIORITY_WEIGHT,
    SMALL_EFFORT_MINUTES,
    URGENCY_HORIZON_HOURS,
)
from taskpilot.domain.common.errors import ValidationError
from taskpilot.domain.common.time import utc_now
from taskpilot.domain.tasks.rules import coerce_energy_level
from taskpilot.models import PlanBudget, Task

logger = logging.getLogger(__name__)


class _Candidate(NamedTuple):
    score: float
    index: int
    task: Task


def _calculate_urgency_boost(hours_until: float, urgency_hours: float, base_boost: float, max_boost: float) -> float:
    """Calculate urgency boost factor. Returns boost value."""
    if hours_until <= 0:
        return max_boost
    if hours_until >= urgency_hours:
        return base_boost
    urgency_factor = 1.0 - (hours_until / urgency_hours)
    return base_boost + urgency_factor * (max_boost - base_boost)


def effective_minutes(task: Task) -> int:
    """Estimate used for budgeting; a missing estimate counts as the default."""
    return task.estimated_minutes or DEFAULT_ESTIMATE_MINUTES


def compute_urgency_bonus(due_date: Optional[datetime], now: datetime) -> float:
    """
    Urgency term of the composite score.

    Rules:
    - Overdue tasks get the maximum bonus
    - Inside the urgency horizon the bonus rises as the due date approaches
    - No due date, or a due date beyond the horizon = neutral baseline
    """
    neutral = PLAN_WEIGHTS["urgency_neutral"]
    if due_date is None:
        return neutral
    hours_until = (due_date - now).total_seconds() / 3600.0
    return _calculate_urgency_boost(hours_until, URGENCY_HORIZON_HOURS, neutral, PLAN_WEIGHTS["urgency_max"])


def compute_energy_fit(minutes: int, energy_level: str) -> float:
    """
    Energy term of the composite score.

    High energy rewards deep work (>= DEEP_WORK_MINUTES) and slightly
    penalises quick tasks; low energy rewards quick tasks
    (<= SMALL_EFFORT_MINUTES) and penalises long ones; medium is neutral.
    """
    if energy_level == ENERGY_HIGH:
        if minutes >= DEEP_WORK_MINUTES:
            return PLAN_WEIGHTS["energy_match"]
        if minutes <= SMALL_EFFORT_MINUTES:
            return PLAN_WEIGHTS["energy_deep_short_penalty"]
    elif energy_level == ENERGY_LOW:
        if minutes <= SMALL_EFFORT_MINUTES:
            return PLAN_WEIGHTS["energy_match"]
        if minutes >= DEEP_WORK_MINUTES:
            return PLAN_WEIGHTS["energy_low_long_penalty"]
    return 0.0


def score_task(task: Task, energy_level: str, now: datetime) -> float:
    """
    Composite score for one task.

    Formula:
    score = priority_weight * w_priority + urgency_bonus * w_urgency + energy_fit * w_energy
    """
    priority = PRIORITY_WEIGHT.get(task.priority, PRIORITY_WEIGHT["Medium"]) * PLAN_WEIGHTS["priority"]
    urgency = compute_urgency_bonus(task.due_date, now) * PLAN_WEIGHTS["urgency"]
    energy = compute_energy_fit(effective_minutes(task), energy_level) * PLAN_WEIGHTS["energy"]
    return priority + urgency + energy


def coerce_budget(budget: Union[PlanBudget, Mapping[str, Any]]) -> PlanBudget:
    """
    Accept a PlanBudget or a mapping with available_minutes / energy_level
    (camelCase keys also work). Bad values degrade: unknown energy -> Medium,
    non-numeric minutes -> 0.
    """
    if isinstance(budget, PlanBudget):
        raw_minutes, raw_energy = budget.available_minutes, budget.energy_level
    else:
        raw_minutes = budget.get("available_minutes", budget.get("availableMinutes", 0))
        raw_energy = budget.get("energy_level", budget.get("energyLevel", ENERGY_MEDIUM))

    try:
        minutes = int(raw_minutes)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Invalid focus budget %r, planning with 0 minutes", raw_minutes)
        minutes = 0

    try:
        energy = coerce_energy_level(raw_energy)
    except ValidationError as e:
        logger.warning("%s; planning with %s energy", e, ENERGY_MEDIUM)
        energy = ENERGY_MEDIUM

    return PlanBudget(available_minutes=minutes, energy_level=energy)


def _sort_key(candidate: _Candidate) -> tuple:
    due = candidate.task.due_date
    due_key = (0, due.timestamp()) if due is not None else (1, 0.0)
    return (-candidate.score, due_key, effective_minutes(candidate.task), candidate.index)


def rank(tasks: Iterable[Task], energy_level: str, now: datetime) -> list[Task]:
    """Open tasks in plan order (score desc, earlier due, shorter, input order)."""
    candidates = [
        _Candidate(score_task(task, energy_level, now), index, task)
        for index, task in enumerate(tasks)
        if task.is_open
    ]
    candidates.sort(key=_sort_key)
    return [c.task for c in candidates]


def plan(
    tasks: Iterable[Task],
    budget: Union[PlanBudget, Mapping[str, Any]],
    now: Optional[datetime] = None,
) -> list[Task]:
    """
    Select and order open tasks to fit the focus budget.

    Args:
        tasks: Task collection snapshot (completed tasks are ignored)
        budget: Available minutes and declared energy level
        now: Instant used for urgency (defaults to now in UTC)

    Returns:
        Accepted tasks in selection order. Their summed effective minutes
        never exceed the budget.
    """
    budget = coerce_budget(budget)
    if budget.available_minutes <= 0:
        return []
    if now is None:
        now = utc_now()

    remaining = budget.available_minutes
    selected: list[Task] = []
    for task in rank(tasks, budget.energy_level, now):
        minutes = effective_minutes(task)
        if minutes > remaining:
            continue
        selected.append(task)
        remaining -= minutes

    logger.debug(
        "Planned %d task(s), %d/%d min, energy=%s",
        len(selected),
        budget.available_minutes - remaining,
        budget.available_minutes,
        budget.energy_level,
    )
    return selected


def planned_minutes(tasks: Iterable[Task]) -> int:
    return sum(effective_minutes(task) for task in tasks)
