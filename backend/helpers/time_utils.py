"""
UTC helpers.

SQLite returns naive datetimes even for values written timezone-aware, so
anything compared against "now" goes through `ensure_utc` first.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Make a datetime timezone-aware, treating naive values as UTC.

    Args:
        dt: Datetime read from the database or a request

    Returns:
        Aware datetime in UTC when the input was naive, unchanged otherwise
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def hours_from_now(hours: Optional[float]) -> Optional[datetime]:
    """
    End time of a span starting now.

    Returns:
        `utc_now() + hours`, or None when hours is missing or not positive
    """
    if hours is None or hours <= 0:
        return None
    return utc_now() + timedelta(hours=hours)
