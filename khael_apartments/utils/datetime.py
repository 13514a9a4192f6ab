"""UTC datetime utilities."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Use this instead of datetime.now() or datetime.utcnow() so every timestamp
    written to the store is timezone-aware and in UTC.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """
    Render a stored timestamp as an ISO-8601 string in UTC.

    SQLite hands timestamps back without tzinfo even when they were written as
    UTC, so naive values are treated as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
