"""
Quick date-range presets for the filter chips.

All ranges are computed on calendar days of the console timezone and
returned as UTC ISO8601 strings: ``from_date`` at 00:00:00.000 of its first
day and ``to_date`` at 23:59:59.999 of its last day.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Optional

from chicken_admin.utils.datetime_helpers import (
    console_now,
    console_timezone,
    end_of_day_iso,
    start_of_day_iso,
    to_console_date,
)


class QuickRange(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"
    THIS_YEAR = "this-year"
    LAST_MONTH = "last-month"
    LAST_TWO_MONTHS = "last-two-months"


QUICK_RANGE_LABELS: Dict[QuickRange, str] = {
    QuickRange.TODAY: "Today",
    QuickRange.THIS_WEEK: "This Week",
    QuickRange.THIS_MONTH: "This Month",
    QuickRange.THIS_YEAR: "This Year",
    QuickRange.LAST_MONTH: "Last Month",
    QuickRange.LAST_TWO_MONTHS: "Last 2 Months",
}


@dataclass(frozen=True)
class DateRange:
    from_date: str
    to_date: str

    @classmethod
    def between(cls, first_day: date, last_day: date, tz_name: Optional[str] = None) -> "DateRange":
        return cls(
            from_date=start_of_day_iso(first_day, tz_name),
            to_date=end_of_day_iso(last_day, tz_name),
        )

    def days(self, tz_name: Optional[str] = None) -> tuple[date, date]:
        return to_console_date(self.from_date, tz_name), to_console_date(self.to_date, tz_name)


def _today(now: Optional[datetime], tz_name: Optional[str]) -> date:
    if now is None:
        return console_now(tz_name).date()
    if now.tzinfo is None:
        now = console_timezone(tz_name).localize(now)
    return to_console_date(now, tz_name)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def today_range(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> DateRange:
    day = _today(now, tz_name)
    return DateRange.between(day, day, tz_name)


def this_week_range(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> DateRange:
    """Monday to Sunday of the current week."""
    day = _today(now, tz_name)
    monday = day - timedelta(days=day.weekday())
    return DateRange.between(monday, monday + timedelta(days=6), tz_name)


def this_month_range(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> DateRange:
    day = _today(now, tz_name)
    last = calendar.monthrange(day.year, day.month)[1]
    return DateRange.between(day.replace(day=1), day.replace(day=last), tz_name)


def this_year_range(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> DateRange:
    day = _today(now, tz_name)
    return DateRange.between(date(day.year, 1, 1), date(day.year, 12, 31), tz_name)


def last_month_range(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> DateRange:
    day = _today(now, tz_name)
    year, month = _shift_month(day.year, day.month, -1)
    last = calendar.monthrange(year, month)[1]
    return DateRange.between(date(year, month, 1), date(year, month, last), tz_name)


def last_two_months_range(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> DateRange:
    """First day of the month two months back, through the end of today."""
    day = _today(now, tz_name)
    year, month = _shift_month(day.year, day.month, -2)
    return DateRange.between(date(year, month, 1), day, tz_name)


_BUILDERS: Dict[QuickRange, Callable[..., DateRange]] = {
    QuickRange.TODAY: today_range,
    QuickRange.THIS_WEEK: this_week_range,
    QuickRange.THIS_MONTH: this_month_range,
    QuickRange.THIS_YEAR: this_year_range,
    QuickRange.LAST_MONTH: last_month_range,
    QuickRange.LAST_TWO_MONTHS: last_two_months_range,
}


def quick_range(
    name: QuickRange | str,
    now: Optional[datetime] = None,
    tz_name: Optional[str] = None,
) -> DateRange:
    """Resolve a preset by enum member or its slug (``"this-week"``)."""
    try:
        preset = QuickRange(name)
    except ValueError:
        raise ValueError(f"Unknown quick range: {name}") from None
    return _BUILDERS[preset](now, tz_name)


def matches_range(
    from_date: Optional[str],
    to_date: Optional[str],
    candidate: DateRange,
    tz_name: Optional[str] = None,
) -> bool:
    """True when both bounds fall on the candidate's first and last day."""
    if not from_date or not to_date:
        return False
    try:
        return (
            to_console_date(from_date, tz_name),
            to_console_date(to_date, tz_name),
        ) == candidate.days(tz_name)
    except ValueError:
        return False


def match_quick_range(
    from_date: Optional[str],
    to_date: Optional[str],
    now: Optional[datetime] = None,
    tz_name: Optional[str] = None,
) -> Optional[QuickRange]:
    """Return the first preset whose days match the given bounds."""
    for preset in QuickRange:
        if matches_range(from_date, to_date, quick_range(preset, now, tz_name), tz_name):
            return preset
    return None


def format_date_for_input(value: str, tz_name: Optional[str] = None) -> str:
    """Render an ISO timestamp as ``YYYY-MM-DD`` for a date picker."""
    return to_console_date(value, tz_name).strftime("%Y-%m-%d")


def date_input_to_iso(value: str | date, *, end: bool = False, tz_name: Optional[str] = None) -> str:
    """Convert a date-picker value to the start (or end) of that day."""
    return end_of_day_iso(value, tz_name) if end else start_of_day_iso(value, tz_name)
