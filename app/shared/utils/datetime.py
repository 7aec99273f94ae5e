"""
UTC datetime utilities for consistent timezone handling.

All task timestamps are timezone-aware UTC and travel as ISO 8601 strings.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() (naive, local timezone) or
    datetime.utcnow() (naive, deprecated in Python 3.12).

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def to_iso(dt: datetime | None) -> str | None:
    """
    Serialize a datetime for the wire.

    Naive values are assumed to be UTC.

    Args:
        dt: Datetime or None

    Returns:
        ISO 8601 string, or None when dt is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat()
