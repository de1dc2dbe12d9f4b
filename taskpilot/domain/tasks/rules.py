from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Optional, Sequence, Union

from taskpilot.constants import CATEGORIES, ENERGY_LEVELS, PRIORITIES, STATUSES
from taskpilot.domain.common.errors import InvalidOverrideError, MalformedDurationError
from taskpilot.domain.common.time import as_aware

_SUBTASK_SPLIT = re.compile(r"[,|]")


def _match_choice(value: Any, choices: Sequence[str], label: str) -> str:
    if isinstance(value, str):
        wanted = " ".join(value.split()).lower()
        for choice in choices:
            if choice.lower() == wanted:
                return choice
    raise InvalidOverrideError(f"Unknown {label}: {value!r}")


def coerce_priority(value: Any) -> str:
    return _match_choice(value, PRIORITIES, "priority")


def coerce_category(value: Any) -> str:
    return _match_choice(value, CATEGORIES, "category")


def coerce_status(value: Any) -> str:
    return _match_choice(value, STATUSES, "status")


def coerce_energy_level(value: Any) -> str:
    return _match_choice(value, ENERGY_LEVELS, "energy level")


def coerce_due_date(value: Union[datetime, str], now: Optional[datetime] = None) -> datetime:
    """
    ISO string or datetime, made comparable with `now`.

    With an aware `now`, naive values get now's timezone. With a naive `now`,
    values carrying a UTC offset are rejected.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidOverrideError(f"Unparsable due date: {value!r}") from None
    if not isinstance(value, datetime):
        raise InvalidOverrideError(f"Unsupported due date: {value!r}")
    if now is None:
        return value
    if now.tzinfo is not None:
        return as_aware(value, now.tzinfo)
    if value.tzinfo is not None:
        raise InvalidOverrideError(f"Due date {value.isoformat()} has a UTC offset but the current time has none")
    return value


def coerce_estimate(value: Union[int, float, str]) -> int:
    """Positive whole minutes from a number or numeric string."""
    if isinstance(value, bool):
        raise MalformedDurationError(f"Estimate is not a number: {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise MalformedDurationError(f"Estimate is not a number: {value!r}") from None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedDurationError(f"Estimate is not a number: {value!r}")
    minutes = int(round(value))
    if minutes <= 0:
        raise MalformedDurationError(f"Estimate must be positive, got {value!r}")
    return minutes


def coerce_subtask_titles(value: Union[Sequence[str], str]) -> tuple[str, ...]:
    if isinstance(value, str):
        items = _SUBTASK_SPLIT.split(value)
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        raise InvalidOverrideError(f"Unsupported subtasks value: {value!r}")
    titles = tuple(" ".join(item.split()) for item in items if item and item.strip())
    if not titles:
        raise InvalidOverrideError("Subtask list is empty.")
    return titles
