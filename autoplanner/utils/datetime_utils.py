"""
Date and time helpers for the planner.

All planner datetimes are naive wall-clock values in the user's local
time. The current instant is always passed in by the caller; now_local()
exists only for callers at the outer edge.
"""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Optional

from autoplanner.core.exceptions import ValidationError

MIDNIGHT = time(0, 0)


def now_local() -> datetime:
    """Get the current local wall-clock time truncated to the minute."""
    return datetime.now().replace(second=0, microsecond=0)


def parse_time_of_day(value: str) -> time:
    """
    Parse an "HH:MM" string into a time.

    Raises:
        ValidationError: If the value is not a valid clock time
    """
    parts = value.split(":")
    if len(parts) != 2:
        raise ValidationError(f"Invalid time of day: {value!r}")
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        raise ValidationError(f"Invalid time of day: {value!r}") from None
    if hours < 0 or hours > 23 or minutes < 0 or minutes > 59:
        raise ValidationError(f"Invalid time of day: {value!r}")
    return time(hours, minutes)


def next_or_same_weekday(current: date, target_weekday: int) -> date:
    """Align a date forward to the target weekday (0=Monday)."""
    delta = (target_weekday - current.weekday()) % 7
    return current + timedelta(days=delta)


def start_of_week(current: date) -> date:
    """Monday of the week containing the date."""
    return current - timedelta(days=current.weekday())


def add_months(value: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the target month's length.

    Raises:
        OverflowError: If the result falls outside the supported date range
    """
    month_index = value.year * 12 + value.month - 1 + months
    year = month_index // 12
    month = month_index % 12 + 1
    if year < 1 or year > 9999:
        raise OverflowError(f"date out of range: {year}-{month:02d}")
    max_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, max_day))


def months_between(start: date, end: date) -> int:
    """Whole calendar-month index difference between two dates."""
    return (end.year * 12 + end.month) - (start.year * 12 + start.month)


def whole_hours_between(start: datetime, end: datetime) -> int:
    """Signed hours from start to end, truncated toward zero."""
    return int((end - start).total_seconds() / 3600)


def truncate_to_minute(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(second=0, microsecond=0)


def iter_dates(start: date, end: date):
    """Yield each date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
