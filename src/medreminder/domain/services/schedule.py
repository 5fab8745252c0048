"""
Pure schedule expansion: which timestamps a reminder fires at on a given day.
"""

from datetime import date, datetime, timedelta
from typing import List

from ...core.utils.datetime_utils import combine_date_and_time
from ..entities.reminder import Reminder


def scheduled_times_for_date(reminder: Reminder, day: date) -> List[datetime]:
    """
    Absolute dose times for ``day``, ascending.

    Times outside the reminder's [start_date, end_date] window are dropped;
    a reminder without times yields nothing.
    """
    if not reminder.times or not reminder.runs_on(day):
        return []

    scheduled = []
    for time_of_day in reminder.times:
        when = combine_date_and_time(day, time_of_day)
        if when < reminder.start_date:
            continue
        if reminder.end_date is not None and when > reminder.end_date:
            continue
        scheduled.append(when)
    return scheduled


def upcoming_days(start: date, count: int) -> List[date]:
    """``count`` consecutive calendar days beginning the day after ``start``."""
    return [start + timedelta(days=offset) for offset in range(1, count + 1)]


def date_range(start: date, end: date) -> List[date]:
    """Inclusive list of days from ``start`` to ``end``."""
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
