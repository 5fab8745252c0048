"""
Reminder schedule and dose lifecycle enums.
"""

from enum import Enum
from typing import Optional


class Frequency(str, Enum):
    """Frequency class of a reminder schedule."""
    ONCE_DAILY = "once_daily"
    TWICE_DAILY = "twice_daily"
    THREE_TIMES_DAILY = "three_times_daily"
    FOUR_TIMES_DAILY = "four_times_daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class DoseStatus(str, Enum):
    """Dose instance lifecycle states."""
    PENDING = "pending"    # Initial state
    TAKEN = "taken"
    SKIPPED = "skipped"
    SNOOZED = "snoozed"    # Requested only; persisted back as pending
    MISSED = "missed"      # Set by the sweeper

    @classmethod
    def loggable(cls) -> tuple:
        """Statuses a user may log against a pending dose."""
        return (cls.TAKEN, cls.SKIPPED, cls.SNOOZED)


class ToggleField(str, Enum):
    """Boolean reminder flags that can be flipped."""
    IS_ACTIVE = "is_active"
    IS_PAUSED = "is_paused"

    @classmethod
    def parse(cls, value: str) -> Optional["ToggleField"]:
        """Accept snake_case or camelCase names."""
        aliases = {"isActive": cls.IS_ACTIVE, "isPaused": cls.IS_PAUSED}
        if value in aliases:
            return aliases[value]
        try:
            return cls(value)
        except ValueError:
            return None


class StatsPeriod(str, Enum):
    """Adherence statistics windows."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
