"""
Theme Park Wait Times - Timestamp Utilities
All persisted timestamps are UTC ISO-8601 strings with millisecond precision
and a trailing 'Z', so they sort lexicographically in time order.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso_utc(value: Union[datetime, str, None] = None) -> str:
    """
    Format a datetime as a UTC ISO-8601 string.

    Strings are passed through unchanged. Naive datetimes are assumed to be UTC.

    Examples:
        >>> to_iso_utc(datetime(2025, 7, 4, 16, 30, tzinfo=timezone.utc))
        '2025-07-04T16:30:00.000Z'
    """
    if value is None:
        value = utc_now()
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_iso_utc(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string (with 'Z' or offset) into an aware datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
