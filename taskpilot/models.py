# -*- coding: utf-8 -*-
"""Shared data models (Task, DraftTask, plan/summary values)."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Union

from taskpilot.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    ENERGY_MEDIUM,
    QUADRANT_NEITHER,
    STATUS_COMPLETED,
)


@dataclass(frozen=True)
class Subtask:
    id: str
    title: str
    completed: bool = False


@dataclass(frozen=True)
class DraftTask:
    """Parser output: structured attributes without identity."""

    name: str
    priority: str = DEFAULT_PRIORITY
    category: str = DEFAULT_CATEGORY
    due_date: Optional[datetime] = None
    estimated_minutes: Optional[int] = None
    subtasks: tuple[str, ...] = ()


@dataclass(frozen=True)
class Task:
    """
    A stored task.

    `matrix_quadrant` is derived from `priority` and `due_date`; build and
    change tasks through `taskpilot.hydrator.hydrate` and the helpers in
    `taskpilot.matrix` so it is recomputed on every mutation.
    """

    id: str
    name: str
    created_at: datetime
    priority: str = DEFAULT_PRIORITY
    category: str = DEFAULT_CATEGORY
    status: str = DEFAULT_STATUS
    due_date: Optional[datetime] = None
    estimated_minutes: Optional[int] = None
    subtasks: tuple[Subtask, ...] = ()
    notes: Optional[str] = None
    matrix_quadrant: str = QUADRANT_NEITHER
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @property
    def is_open(self) -> bool:
        return self.status != STATUS_COMPLETED


@dataclass(frozen=True)
class TaskOverrides:
    """
    Values chosen by hand in a form. `None` means "not chosen".

    Values are raw user input: priority/category may be any-case strings,
    due_date an ISO string or datetime, estimated_minutes a number or numeric
    string, subtasks a sequence or a comma/pipe separated string.
    """

    priority: Optional[str] = None
    category: Optional[str] = None
    due_date: Union[datetime, str, None] = None
    estimated_minutes: Union[int, float, str, None] = None
    subtasks: Union[Sequence[str], str, None] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PlanBudget:
    available_minutes: int = DEFAULT_FOCUS_MINUTES
    energy_level: str = ENERGY_MEDIUM


@dataclass(frozen=True)
class GroupedTasks:
    today: tuple[Task, ...] = ()
    upcoming: tuple[Task, ...] = ()
    overdue: tuple[Task, ...] = ()
    unscheduled: tuple[Task, ...] = ()

    def counts(self) -> dict[str, int]:
        return {
            "today": len(self.today),
            "upcoming": len(self.upcoming),
            "overdue": len(self.overdue),
            "unscheduled": len(self.unscheduled),
        }


@dataclass(frozen=True)
class WeeklySummary:
    week_start: datetime
    tasks_created: int = 0
    tasks_completed: int = 0
    completion_rate: int = 0
    bottlenecks: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    open_tasks: int = 0
    overdue_tasks: int = 0
