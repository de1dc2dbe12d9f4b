"""
Constants for task vocabularies, horizons and scoring weights.
"""
from __future__ import annotations

# Priority (strongest first)
PRIORITY_CRITICAL = "Critical"
PRIORITY_HIGH = "High"
PRIORITY_MEDIUM = "Medium"
PRIORITY_LOW = "Low"
PRIORITIES = (PRIORITY_CRITICAL, PRIORITY_HIGH, PRIORITY_MEDIUM, PRIORITY_LOW)
DEFAULT_PRIORITY = PRIORITY_MEDIUM
IMPORTANT_PRIORITIES = frozenset({PRIORITY_CRITICAL, PRIORITY_HIGH})

# Categories
CATEGORY_GENERAL = "General"
CATEGORIES = (
    "Work",
    "Personal",
    "Study",
    "Health",
    "Finance",
    "Errands",
    "Creative",
    "Learning",
    "Planning",
    CATEGORY_GENERAL,
)
DEFAULT_CATEGORY = CATEGORY_GENERAL

# Task status
STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"
STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)
DEFAULT_STATUS = STATUS_PENDING

# Eisenhower matrix quadrants (display order)
QUADRANT_DO = "Urgent & Important"
QUADRANT_SCHEDULE = "Important, Not Urgent"
QUADRANT_DELEGATE = "Urgent, Not Important"
QUADRANT_NEITHER = "Neither"
QUADRANTS = (QUADRANT_DO, QUADRANT_SCHEDULE, QUADRANT_DELEGATE, QUADRANT_NEITHER)

# Energy levels for the daily planner
ENERGY_LOW = "Low"
ENERGY_MEDIUM = "Medium"
ENERGY_HIGH = "High"
ENERGY_LEVELS = (ENERGY_LOW, ENERGY_MEDIUM, ENERGY_HIGH)

# Horizons
URGENCY_HORIZON_HOURS = 48.0  # due within this window (or overdue) => urgent
REMINDER_HORIZON_HOURS = 24.0  # reminders for tasks due within this window

# Due time used when only a day is given ("tomorrow", "next friday")
DEFAULT_DUE_HOUR = 23
DEFAULT_DUE_MINUTE = 59
TONIGHT_HOUR = 20

# Durations (minutes)
DEFAULT_ESTIMATE_MINUTES = 45  # stands in for a missing estimate when planning
SMALL_EFFORT_MINUTES = 30  # "quick win" threshold for low energy
DEEP_WORK_MINUTES = 60  # long enough to count as deep work for high energy
DEFAULT_FOCUS_MINUTES = 240

# Configurable weights for daily plan scoring
PLAN_WEIGHTS = {
    "priority": 1.0,  # Multiplier for priority weight (Critical=4 .. Low=1)
    "urgency": 1.0,  # Multiplier for urgency bonus
    "energy": 1.0,  # Multiplier for energy fit term
    "urgency_neutral": 1.0,  # Unscheduled / far-off due date
    "urgency_max": 4.0,  # Overdue
    "energy_match": 1.0,  # Task length suits the declared energy
    "energy_deep_short_penalty": -0.5,  # High energy spent on a short task
    "energy_low_long_penalty": -1.0,  # Low energy facing a long task
}

PRIORITY_WEIGHT = {
    PRIORITY_CRITICAL: 4,
    PRIORITY_HIGH: 3,
    PRIORITY_MEDIUM: 2,
    PRIORITY_LOW: 1,
}

# Insight thresholds
BOTTLENECK_CATEGORY_MIN_OPEN = 3
BOTTLENECK_CATEGORY_SHARE = 0.5
BOTTLENECK_DO_FIRST_MIN = 3
BOTTLENECK_UNSCHEDULED_MIN = 5
BOTTLENECK_NO_ESTIMATE_MIN = 3
