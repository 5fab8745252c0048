"""
Date and time utility functions for MedReminder application.

Dose times are wall-clock values: every datetime handed to the domain is
naive and expressed in the configured reminder timezone.
"""

import calendar
import re
from datetime import date, datetime, time
from typing import Callable, Optional, Tuple
from zoneinfo import ZoneInfo

TIME_OF_DAY_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
DAY_KEY_FORMAT = "%Y-%m-%d"


def local_now(tz_name: str = "UTC") -> datetime:
    """Current wall-clock time in ``tz_name`` as a naive datetime."""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def to_local_naive(value: datetime, tz_name: str = "UTC") -> datetime:
    """Convert an aware datetime to naive wall-clock time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def parse_time_of_day(value: str) -> Tuple[int, int]:
    """Parse ``H:MM``/``HH:MM`` (24-hour) into (hour, minute)."""
    match = TIME_OF_DAY_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}. Expected HH:MM (24-hour)")
    return int(match.group(1)), int(match.group(2))


def format_time_of_day(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def combine_date_and_time(day: date, time_of_day: str) -> datetime:
    """Absolute timestamp for ``time_of_day`` on ``day``."""
    hour, minute = parse_time_of_day(time_of_day)
    return datetime.combine(day, time(hour=hour, minute=minute))


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Inclusive [start, end] of a calendar day."""
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time.max)
    return start, end


def day_key(value: datetime) -> str:
    """Calendar-day grouping key (YYYY-MM-DD)."""
    return value.strftime(DAY_KEY_FORMAT)


def parse_day(value: str) -> Optional[date]:
    """Parse a YYYY-MM-DD string, returning None when malformed."""
    try:
        return datetime.strptime(value, DAY_KEY_FORMAT).date()
    except ValueError:
        return None


def months_before(value: datetime, months: int = 1) -> datetime:
    """Same day ``months`` earlier, clamped to the end of the target month."""
    month_index = value.month - 1 - months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def years_before(value: datetime, years: int = 1) -> datetime:
    """Same date ``years`` earlier; Feb 29 falls back to Feb 28."""
    year = value.year - years
    if value.month == 2 and value.day == 29 and not calendar.isleap(year):
        return value.replace(year=year, day=28)
    return value.replace(year=year)


class WallClock:
    """Source of "now" as naive wall-clock time in one timezone."""

    def __init__(self, tz_name: str = "UTC", now_func: Optional[Callable[[], datetime]] = None):
        self.tz_name = tz_name
        self._now_func = now_func

    def now(self) -> datetime:
        if self._now_func is not None:
            return self._now_func()
        return local_now(self.tz_name)

    def today(self) -> date:
        return self.now().date()

    def localize(self, value: Optional[datetime]) -> Optional[datetime]:
        """Bring a caller-supplied datetime onto this clock's wall time."""
        if value is None:
            return None
        return to_local_naive(value, self.tz_name)
