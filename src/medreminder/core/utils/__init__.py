"""
Utility functions for MedReminder application.
"""

from .datetime_utils import (
    combine_date_and_time,
    day_bounds,
    day_key,
    format_time_of_day,
    local_now,
    months_before,
    parse_day,
    parse_time_of_day,
    to_local_naive,
    WallClock,
    years_before,
)

__all__ = [
    "local_now",
    "to_local_naive",
    "parse_time_of_day",
    "format_time_of_day",
    "combine_date_and_time",
    "day_bounds",
    "day_key",
    "parse_day",
    "months_before",
    "years_before",
    "WallClock",
]
