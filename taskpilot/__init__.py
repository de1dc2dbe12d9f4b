"""Taskpilot: free-text task capture, Eisenhower triage and daily planning."""
from __future__ import annotations

from taskpilot.domain.common.errors import (
    EmptyInputError,
    InvalidOverrideError,
    MalformedDurationError,
)
from taskpilot.grouping import by_priority, by_quadrant, group
from taskpilot.hydrator import hydrate
from taskpilot.insights import reminders, summarize
from taskpilot.matrix import classify
from taskpilot.models import (
    DraftTask,
    GroupedTasks,
    PlanBudget,
    Subtask,
    Task,
    TaskOverrides,
    WeeklySummary,
)
from taskpilot.parser import parse
from taskpilot.planner import plan

__version__ = "0.1.0"

__all__ = [
    "DraftTask",
    "EmptyInputError",
    "GroupedTasks",
    "InvalidOverrideError",
    "MalformedDurationError",
    "PlanBudget",
    "Subtask",
    "Task",
    "TaskOverrides",
    "WeeklySummary",
    "by_priority",
    "by_quadrant",
    "classify",
    "group",
    "hydrate",
    "parse",
    "plan",
    "reminders",
    "summarize",
]
