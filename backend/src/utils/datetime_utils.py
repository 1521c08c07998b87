"""
Datetime utilities for consistent timezone handling across the application.

All times are UTC. Record timestamps are stored as integer epoch
milliseconds, so comparisons against them go through now_ms().
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC datetime.

    Returns:
        Current timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(utc_now().timestamp() * 1000)


def isoformat_utc(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Naive datetimes are assumed to already be UTC.

    Args:
        dt: Datetime to format, defaults to now

    Returns:
        String such as "2024-01-15T02:00:00.123Z"
    """
    if dt is None:
        dt = utc_now()
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
