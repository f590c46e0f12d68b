"""
Date and time utilities for the Chicken Road admin console.

This module provides helper functions for consistent datetime handling.
Calendar-day boundaries are computed in the console timezone and emitted
as UTC ISO8601 strings with millisecond precision and a ``Z`` suffix.
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Union

import pytz

from chicken_admin.core.config import Config

START_OF_DAY = time(0, 0, 0, 0)
END_OF_DAY = time(23, 59, 59, 999000)


def console_timezone(name: Optional[str] = None) -> pytz.BaseTzInfo:
    """Return the pytz timezone used to interpret calendar days."""
    return pytz.timezone(name or Config.CONSOLE_TIMEZONE)


def parse_utc_iso(iso_string: str) -> datetime:
    """
    Parse ISO8601 string with Z suffix to datetime object.

    Args:
        iso_string: ISO8601 string with 'Z' suffix.

    Returns:
        Datetime object in UTC timezone.
    """
    # Replace Z with +00:00 for proper parsing
    if iso_string.endswith("Z"):
        iso_string = iso_string[:-1] + "+00:00"

    parsed = datetime.fromisoformat(iso_string)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_utc_iso(dt: datetime) -> str:
    """
    Format datetime object as ISO8601 with millisecond precision and Z suffix.

    Args:
        dt: Datetime object (will be converted to UTC if not already).

    Returns:
        ISO8601 string with 'Z' suffix.
    """
    # Convert to UTC if not already
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_console_date(value: Union[str, date, datetime], tz_name: Optional[str] = None) -> date:
    """
    Resolve the calendar day a value falls on in the console timezone.

    Plain ``YYYY-MM-DD`` strings and ``date`` objects are taken as-is; full
    timestamps are converted into the console timezone first.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(console_timezone(tz_name)).date()
    if isinstance(value, date):
        return value

    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return parse_utc_iso(text).astimezone(console_timezone(tz_name)).date()


def start_of_day_iso(value: Union[str, date, datetime], tz_name: Optional[str] = None) -> str:
    """Return 00:00:00.000 of the value's console-timezone day, as UTC ISO."""
    day = to_console_date(value, tz_name)
    tz = console_timezone(tz_name)
    return format_utc_iso(tz.localize(datetime.combine(day, START_OF_DAY)))


def end_of_day_iso(value: Union[str, date, datetime], tz_name: Optional[str] = None) -> str:
    """Return 23:59:59.999 of the value's console-timezone day, as UTC ISO."""
    day = to_console_date(value, tz_name)
    tz = console_timezone(tz_name)
    return format_utc_iso(tz.localize(datetime.combine(day, END_OF_DAY)))


def console_now(tz_name: Optional[str] = None) -> datetime:
    """Current time in the console timezone."""
    return datetime.now(timezone.utc).astimezone(console_timezone(tz_name))
