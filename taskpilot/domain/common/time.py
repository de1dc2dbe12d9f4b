from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def as_aware(dt: datetime, tz=None) -> datetime:
    """Attach `tz` (UTC when not given) to a naive datetime; aware values pass through."""
    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=tz or timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    ensure_aware(dt)
    # store as ISO 8601 with offset
    return dt.isoformat()


def from_iso(s: str) -> datetime:
    # Python can parse ISO with offset via fromisoformat
    return as_aware(datetime.fromisoformat(s.replace("Z", "+00:00")))


def from_iso_optional(s: Optional[str]) -> Optional[datetime]:
    return from_iso(s) if s else None
