"""
Utility functions for time parsing and formatting.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional


def to_24h(hour: int, minute: int, meridiem: Optional[str]) -> Optional[tuple[int, int]]:
    """
    Convert a clock reading to 24h (hour, minute).

    Examples:
        >>> to_24h(3, 0, "pm")
        (15, 0)
        >>> to_24h(12, 30, "am")
        (0, 30)
        >>> to_24h(14, 0, None)
        (14, 0)
    """
    if minute > 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        meridiem = meridiem.lower().replace(".", "")
        if meridiem == "am":
            hour = 0 if hour == 12 else hour
        else:
            hour = 12 if hour == 12 else hour + 12
    elif hour > 23:
        return None
    return (hour, minute)

def at_time(day: datetime, hour: int, minute: int) -> datetime:
    """Same calendar day as `day` (and same tzinfo) at hour:minute."""
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)

def start_of_day(dt: datetime) -> datetime:
    return at_time(dt, 0, 0)

def parse_int_safe(value: str, default: Optional[int] = None) -> Optional[int]:
    """Safely parse integer, returns default on error."""
    try:
        return int(value)
    except (ValueError, TypeError):
        return default

def plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"

def humanize_delta(delta: timedelta) -> str:
    """
    Render a duration the way a person would say it.

    Examples:
        >>> humanize_delta(timedelta(minutes=45))
        '45 minutes'
        >>> humanize_delta(timedelta(hours=5, minutes=10))
        '5 hours'
        >>> humanize_delta(timedelta(days=3))
        '3 days'
    """
    seconds = abs(delta.total_seconds())
    minutes = int(seconds // 60)
    if minutes < 1:
        return "less than a minute"
    if minutes < 60:
        return plural(minutes, "minute")
    hours = minutes // 60
    if hours < 48:
        return plural(hours, "hour")
    return plural(hours // 24, "day")

def format_minutes(minutes: int) -> str:
    """90 -> '1h 30m', 45 -> '45m'."""
    hours, rest = divmod(int(minutes), 60)
    if hours and rest:
        return f"{hours}h {rest}m"
    if hours:
        return f"{hours}h"
    return f"{rest}m"
