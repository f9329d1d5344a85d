"""Datetime utilities for timezone-aware UTC timestamps.

Labor cost calculations bucket work by UTC calendar day so that the same
input produces the same daily schedule regardless of the server timezone.

Usage:
    from src.utils.datetime_utils import utc_now, utc_date_range

    timestamp = utc_now()
    days = utc_date_range("2024-01-01", "2024-01-07")
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Union

from .constants import DATE_FORMAT

TimestampLike = Union[str, datetime, date]


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime.

    This is the replacement for the deprecated datetime.utcnow().

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def parse_timestamp(value: TimestampLike) -> datetime:
    """
    Parse a timestamp into a timezone-aware UTC datetime.

    Accepts ISO-8601 strings (a trailing "Z" is accepted), datetimes and
    dates. Naive values are assumed to already be in UTC.

    Args:
        value: Timestamp to parse

    Returns:
        Aware datetime in UTC

    Raises:
        ValueError: If a string cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_utc_date(value: TimestampLike) -> date:
    """Return the UTC calendar day of a timestamp."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str) and len(value.strip()) == 10:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    return parse_timestamp(value).date()


def format_date_utc(value: TimestampLike) -> str:
    """Format a timestamp as YYYY-MM-DD using its UTC calendar day."""
    return to_utc_date(value).strftime(DATE_FORMAT)


def utc_date_range(start: TimestampLike, end: TimestampLike) -> List[str]:
    """
    Build the inclusive list of UTC days between two timestamps.

    Args:
        start: First day of the range
        end: Last day of the range (inclusive)

    Returns:
        List of YYYY-MM-DD strings; empty if end precedes start

    Example:
        >>> utc_date_range("2024-01-30", "2024-02-01")
        ['2024-01-30', '2024-01-31', '2024-02-01']
    """
    current = to_utc_date(start)
    last = to_utc_date(end)

    days = []
    while current <= last:
        days.append(current.strftime(DATE_FORMAT))
        current += timedelta(days=1)
    return days
