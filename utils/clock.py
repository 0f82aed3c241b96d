"""
Time helpers.

All timestamps in the engine are naive UTC datetimes, matching what the
SQLite DateTime columns hand back.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def whole_hours_between(start: Optional[datetime], end: datetime) -> int:
    """Whole hours from start to end, truncated toward zero. Missing start counts as end."""
    if start is None:
        return 0
    return int((end - start).total_seconds() / 3600)
