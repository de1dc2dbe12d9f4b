from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from taskpilot.domain.tasks.ports import Clock


class SystemClock(Clock):
    def __init__(self, tz_name: str) -> None:
        self._tz = ZoneInfo(tz_name)

    @property
    def tz_name(self) -> str:
        return self._tz.key

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock(Clock):
    """Clock pinned to one instant (tests, replays)."""

    def __init__(self, at: datetime) -> None:
        self._at = at

    def set(self, at: datetime) -> None:
        self._at = at

    def now(self) -> datetime:
        return self._at
