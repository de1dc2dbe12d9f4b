"""
Free-text task parser.

Turns one line such as

    "Tomorrow by 3pm finalize presentation deck urgent 45 min"

into a DraftTask. Each extractor scans the text, removes the span it
recognised and returns the residual text; whatever is left at the end
becomes the task name.

Extraction order: priority, category, duration, due date, due time,
subtasks. Keyword and duration spans go first so their numbers are never
read as dates.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Optional

from taskpilot.constants import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    DEFAULT_DUE_HOUR,
    DEFAULT_DUE_MINUTE,
    DEFAULT_PRIORITY,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    TONIGHT_HOUR,
)
from taskpilot.domain.common.errors import EmptyInputError
from taskpilot.domain.common.time import utc_now
from taskpilot.models import DraftTask
from taskpilot.utils import at_time, to_24h

logger = logging.getLogger(__name__)

# Checked in order: the first rule that matches decides the priority.
# Every rule still strips its phrases from the name.
_PRIORITY_RULES = (
    (PRIORITY_CRITICAL, re.compile(r"\b(?:urgent(?:ly)?|critical|asap)\b", re.IGNORECASE)),
    (PRIORITY_HIGH, re.compile(r"\b(?:high[\s-]+priority|important)\b", re.IGNORECASE)),
    (PRIORITY_LOW, re.compile(r"\blow[\s-]+priority\b", re.IGNORECASE)),
    (PRIORITY_MEDIUM, re.compile(r"\b(?:medium|normal)[\s-]+priority\b", re.IGNORECASE)),
)

_CATEGORY_BY_WORD = {name.lower(): name for name in CATEGORIES}
_CATEGORY_BY_WORD["errand"] = "Errands"
_CATEGORY_PATTERN = re.compile(
    r"(?<![\w#])#?(" + "|".join(sorted(_CATEGORY_BY_WORD, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)

_DURATION_PATTERN = re.compile(
    r"\b(?:for\s+)?(\d+(?:\.\d+)?)\s*(hours?|hrs?|h|minutes?|mins?|m)\b",
    re.IGNORECASE,
)

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
_WEEKDAY_ALT = "|".join(_WEEKDAYS)

_MONTHS = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6, "jul": 7, "july": 7,
    "aug": 8, "august": 8, "sep": 9, "sept": 9, "september": 9, "oct": 10,
    "october": 10, "nov": 11, "november": 11, "dec": 12, "december": 12,
}
_MONTH_ALT = "|".join(sorted(_MONTHS, key=len, reverse=True))

_DATE_PREFIX = r"(?:\b(?:due|by|on|before)\s+)?"
_RELATIVE_DAY = re.compile(_DATE_PREFIX + r"\b(today|tonight|tomorrow)\b", re.IGNORECASE)
_NEXT_WEEKDAY = re.compile(_DATE_PREFIX + r"\bnext\s+(" + _WEEKDAY_ALT + r")\b", re.IGNORECASE)
_BARE_WEEKDAY = re.compile(_DATE_PREFIX + r"\b(?:this\s+)?(" + _WEEKDAY_ALT + r")\b", re.IGNORECASE)
_ISO_DATE = re.compile(_DATE_PREFIX + r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_SLASH_DATE = re.compile(_DATE_PREFIX + r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?\b")
_MONTH_DAY = re.compile(
    _DATE_PREFIX + r"\b(" + _MONTH_ALT + r")\.?\s+(\d{1,2})(?:st|nd|rd|th)?\b(?:,?\s+(\d{4})\b)?",
    re.IGNORECASE,
)
_DAY_MONTH = re.compile(
    _DATE_PREFIX + r"\b(\d{1,2})(?:st|nd|rd|th)?\s+(" + _MONTH_ALT + r")\b(?:,?\s+(\d{4})\b)?",
    re.IGNORECASE,
)

_TIME_PREFIX = r"(?:\b(?:by|at|before)\s+|@\s*)?"
_TIME_PATTERN = re.compile(
    _TIME_PREFIX
    + r"(?:\b(\d{1,2})(?::(\d{2}))?\s*([ap]\.?m\.?)(?!\w)"
    + r"|\b(\d{1,2}):(\d{2})\b"
    + r"|\b(noon|midnight)\b)",
    re.IGNORECASE,
)

_SUBTASK_SPLIT = re.compile(r"\s*\|\s*|\s*[,;]?\s*\b(?:and\s+)?then\b\s*", re.IGNORECASE)

_EDGE_JUNK = " \t,;:-–—|"


def _cut(text: str, match: re.Match) -> str:
    return text[: match.start()] + " " + text[match.end():]


def _tidy(text: str) -> str:
    """Collapse whitespace, glue punctuation to the preceding word, trim separators."""
    text = " ".join(text.split())
    text = re.sub(r"\s+([,;:.!?])", r"\1", text)
    text = re.sub(r"([,;:])(?:\s*[,;:])+", r"\1", text)
    return text.strip(_EDGE_JUNK)


def extract_priority(text: str) -> tuple[str, str]:
    """
    Detect priority keywords.

    Returns:
        Tuple of (priority, residual_text)

    Examples:
        >>> extract_priority("call bank urgent")
        ('Critical', 'call bank  ')
        >>> extract_priority("water plants")
        ('Medium', 'water plants')
    """
    priority: Optional[str] = None
    for level, pattern in _PRIORITY_RULES:
        if pattern.search(text):
            if priority is None:
                priority = level
            text = pattern.sub(" ", text)
    return (priority or DEFAULT_PRIORITY, text)


def extract_category(text: str) -> tuple[str, str]:
    """Earliest category word wins. Returns (category, residual_text)."""
    match = _CATEGORY_PATTERN.search(text)
    if not match:
        return (DEFAULT_CATEGORY, text)
    return (_CATEGORY_BY_WORD[match.group(1).lower()], _cut(text, match))


def extract_duration(text: str) -> tuple[Optional[int], str]:
    """
    Sum every "<N> min" / "<N> hours" span, in minutes.

    Zero-length spans are not durations and stay in the text.

    Examples:
        >>> extract_duration("deep work 1 hour 30 min")[0]
        90
        >>> extract_duration("review for 1.5h")[0]
        90
        >>> extract_duration("0 min warmup")[0] is None
        True
    """
    total = 0
    for match in reversed(list(_DURATION_PATTERN.finditer(text))):
        value = float(match.group(1))
        factor = 60 if match.group(2).lower().startswith("h") else 1
        minutes = int(round(value * factor))
        if minutes <= 0:
            continue
        total += minutes
        text = _cut(text, match)
    return (total or None, text)


def _shift_to_weekday(now: datetime, weekday: int, min_days: int) -> datetime:
    days = (weekday - now.weekday()) % 7
    if days < min_days:
        days += 7
    return now + timedelta(days=days)


def _calendar_day(now: datetime, year: Optional[int], month: int, day: int) -> Optional[datetime]:
    """now's clock on year/month/day; year-less dates already past roll to next year."""
    explicit_year = year is not None
    if year is None:
        year = now.year
    elif year < 100:
        year += 2000
    try:
        candidate = now.replace(year=year, month=month, day=day)
    except ValueError:
        return None
    if not explicit_year and candidate.date() < now.date():
        try:
            candidate = candidate.replace(year=year + 1)
        except ValueError:
            return None
    return candidate


def extract_due_day(text: str, now: datetime) -> tuple[Optional[datetime], Optional[tuple[int, int]], str]:
    """
    Find a day expression.

    Returns:
        Tuple of (day, implied_time, residual_text). `day` carries now's
        clock; `implied_time` is set for expressions such as "tonight".
    """
    match = _RELATIVE_DAY.search(text)
    if match:
        word = match.group(1).lower()
        if word == "tomorrow":
            return (now + timedelta(days=1), None, _cut(text, match))
        implied = (TONIGHT_HOUR, 0) if word == "tonight" else None
        return (now, implied, _cut(text, match))

    match = _NEXT_WEEKDAY.search(text)
    if match:
        weekday = _WEEKDAYS.index(match.group(1).lower())
        return (_shift_to_weekday(now, weekday, min_days=1), None, _cut(text, match))

    match = _BARE_WEEKDAY.search(text)
    if match:
        weekday = _WEEKDAYS.index(match.group(1).lower())
        return (_shift_to_weekday(now, weekday, min_days=0), None, _cut(text, match))

    for match in _ISO_DATE.finditer(text):
        year, month, day = (int(g) for g in match.groups())
        candidate = _calendar_day(now, year, month, day)
        if candidate is not None:
            return (candidate, None, _cut(text, match))

    for match in _SLASH_DATE.finditer(text):
        month, day = int(match.group(1)), int(match.group(2))
        year = int(match.group(3)) if match.group(3) else None
        candidate = _calendar_day(now, year, month, day)
        if candidate is not None:
            return (candidate, None, _cut(text, match))

    for match in _MONTH_DAY.finditer(text):
        month = _MONTHS[match.group(1).lower()]
        year = int(match.group(3)) if match.group(3) else None
        candidate = _calendar_day(now, year, month, int(match.group(2)))
        if candidate is not None:
            return (candidate, None, _cut(text, match))

    for match in _DAY_MONTH.finditer(text):
        month = _MONTHS[match.group(2).lower()]
        year = int(match.group(3)) if match.group(3) else None
        candidate = _calendar_day(now, year, month, int(match.group(1)))
        if candidate is not None:
            return (candidate, None, _cut(text, match))

    return (None, None, text)


def extract_time(text: str) -> tuple[Optional[tuple[int, int]], str]:
    """
    Find a clock time ("3pm", "at 14:00", "by 9:30 am", "noon").

    Examples:
        >>> extract_time("by 3pm finish deck")[0]
        (15, 0)
        >>> extract_time("standup at 09:15")[0]
        (9, 15)
        >>> extract_time("read 3 chapters")[0] is None
        True
    """
    for match in _TIME_PATTERN.finditer(text):
        hour12, minute12, meridiem, hour24, minute24, word = match.groups()
        if word:
            clock = (12, 0) if word.lower() == "noon" else (23, 59)
        elif meridiem:
            clock = to_24h(int(hour12), int(minute12 or 0), meridiem)
        else:
            clock = to_24h(int(hour24), int(minute24), None)
        if clock is not None:
            return (clock, _cut(text, match))
    return (None, text)


def resolve_due_date(
    day: Optional[datetime],
    clock: Optional[tuple[int, int]],
    now: datetime,
) -> Optional[datetime]:
    """
    Combine a day and a clock time into a due timestamp.

    - day + time: that day at that time
    - day only: that day at 23:59
    - time only: today, or tomorrow when the time has already passed
    """
    if day is None and clock is None:
        return None
    if day is None:
        candidate = at_time(now, *clock)
        if candidate <= now:
            candidate = candidate + timedelta(days=1)
        return candidate
    if clock is None:
        clock = (DEFAULT_DUE_HOUR, DEFAULT_DUE_MINUTE)
    return at_time(day, *clock)


def extract_subtasks(text: str) -> tuple[tuple[str, ...], str]:
    """
    Split a pipe list or a "then" sequence into subtasks.

    Pipes and "then" are interchangeable and may be mixed. The text before
    the first delimiter is the head; a colon in the head introduces the
    first item.

    Examples:
        >>> extract_subtasks("Launch prep: draft | review | submit")
        (('draft', 'review', 'submit'), 'Launch prep')
        >>> extract_subtasks("Clean kitchen then laundry and then vacuum")
        (('laundry', 'vacuum'), 'Clean kitchen')
        >>> extract_subtasks("Buy milk and then eggs | bread")
        (('eggs', 'bread'), 'Buy milk')
        >>> extract_subtasks("Water plants")
        ((), 'Water plants')
    """
    parts = _SUBTASK_SPLIT.split(text)
    if len(parts) == 1:
        return ((), text)

    head, items = parts[0], list(parts[1:])
    if ":" in head:
        head, first = head.split(":", 1)
        items.insert(0, first)

    titles = tuple(t for t in (_tidy(item) for item in items) if t)
    return (titles, head)


def parse(text: str, now: Optional[datetime] = None) -> DraftTask:
    """
    Parse one line of free text into a DraftTask.

    Args:
        text: Raw user input
        now: Instant relative expressions resolve against (defaults to now in UTC)

    Returns:
        DraftTask with priority, category, due_date, estimated_minutes,
        subtasks and a non-empty name

    Raises:
        EmptyInputError: text is empty or whitespace only
    """
    if text is None or not text.strip():
        raise EmptyInputError("Task text is empty.")
    if now is None:
        now = utc_now()

    priority, rest = extract_priority(text)
    category, rest = extract_category(rest)
    estimated_minutes, rest = extract_duration(rest)
    day, implied_clock, rest = extract_due_day(rest, now)
    clock, rest = extract_time(rest)
    due_date = resolve_due_date(day, clock or implied_clock, now)
    subtasks, rest = extract_subtasks(rest)

    name = _tidy(rest) or text.strip()

    draft = DraftTask(
        name=name,
        priority=priority,
        category=category,
        due_date=due_date,
        estimated_minutes=estimated_minutes,
        subtasks=subtasks,
    )
    logger.debug("Parsed %r -> %s", text, draft)
    return draft
