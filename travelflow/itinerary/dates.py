"""Helpers for the wall-clock date and time strings used throughout trip data.

Dates are ``YYYY-MM-DD`` and times ``HH:MM``, with no timezone attached.
All helpers raise ``ValueError`` on malformed input.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Optional

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string (anything after the first 10 chars is ignored)."""
    if not isinstance(value, str) or len(value) < 10:
        raise ValueError(f"Invalid date: {value!r}")
    return datetime.strptime(value[:10], DATE_FORMAT).date()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def next_day(value: str) -> str:
    """Return the calendar day after ``value``."""
    return format_date(parse_date(value) + timedelta(days=1))


def days_between(start: str, end: str) -> int:
    return (parse_date(end) - parse_date(start)).days


def date_range(start: str, end: str) -> Iterator[str]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = parse_date(start)
    last = parse_date(end)
    while current <= last:
        yield format_date(current)
        current += timedelta(days=1)


def to_minutes(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight."""
    if not isinstance(value, str) or ":" not in value:
        raise ValueError(f"Invalid time: {value!r}")
    hours, minutes = value.split(":", 1)
    hours_int = int(hours)
    minutes_int = int(minutes[:2])
    if not (0 <= hours_int <= 23 and 0 <= minutes_int <= 59):
        raise ValueError(f"Invalid time: {value!r}")
    return hours_int * 60 + minutes_int


def today_string(now: datetime) -> str:
    return format_date(now.date())


def minutes_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


def is_valid_date(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        parse_date(value)
    except ValueError:
        return False
    return True
