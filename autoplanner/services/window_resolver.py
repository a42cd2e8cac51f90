"""
Scheduling window resolution.
"""

from datetime import date, datetime, timedelta
from typing import Union

from autoplanner.models.enums import ScheduleScope
from autoplanner.utils.datetime_utils import next_or_same_weekday

SUNDAY = 6


def resolve_window(scope: ScheduleScope, now: Union[date, datetime]) -> tuple[date, date]:
    """
    Turn a scope selector into a closed date range.

    Args:
        scope: TODAY, TOMORROW or THIS_WEEK
        now: Current instant (or date), supplied by the caller

    Returns:
        (start_date, end_date), both inclusive
    """
    today = now.date() if isinstance(now, datetime) else now

    if scope == ScheduleScope.TODAY:
        return today, today
    if scope == ScheduleScope.TOMORROW:
        tomorrow = today + timedelta(days=1)
        return tomorrow, tomorrow
    # THIS_WEEK runs from today through the coming Sunday
    return today, next_or_same_weekday(today, SUNDAY)
