"""Reminder domain entity representing a recurring medication schedule."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from ...core.utils.datetime_utils import combine_date_and_time, format_time_of_day, parse_time_of_day
from ..enums.reminder import Frequency, ToggleField
from ..errors import InvalidReminderDataError
from ..value_objects.reminder_id import ReminderId

DEFAULT_COLOR = "#6366f1"
COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
MAX_MEDICINE_NAME_LENGTH = 200
MAX_NOTES_LENGTH = 500
MAX_REMINDER_OFFSET_MINUTES = 1440

# Fields a user may change after creation
UPDATABLE_FIELDS = (
    "medicine_name",
    "dosage",
    "instructions",
    "frequency",
    "times",
    "days_of_week",
    "start_date",
    "end_date",
    "is_active",
    "is_paused",
    "notification_settings",
    "color",
    "notes",
)


def normalize_times(times: Optional[Iterable[str]], required: bool = False) -> List[str]:
    """Zero-pad, de-duplicate and sort HH:MM strings."""
    if times is None or isinstance(times, str):
        if required or isinstance(times, str):
            raise InvalidReminderDataError("times", "Times must be a list of HH:MM strings")
        return []

    normalized = set()
    for value in times:
        try:
            hour, minute = parse_time_of_day(value)
        except ValueError:
            raise InvalidReminderDataError("times", f"Invalid time format '{value}'. Use HH:MM")
        normalized.add(format_time_of_day(hour, minute))

    if required and not normalized:
        raise InvalidReminderDataError("times", "At least one reminder time is required")
    return sorted(normalized)


def normalize_days_of_week(days: Optional[Iterable[int]]) -> List[int]:
    """Validate 0-6 weekday numbers (0 = Sunday)."""
    if not days:
        return []
    result = set()
    for day in days:
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise InvalidReminderDataError(
                "days_of_week", f"Invalid day '{day}'. Days must be integers 0 (Sunday) to 6 (Saturday)"
            )
        result.add(day)
    return sorted(result)


def weekday_number(day: date) -> int:
    """Weekday with Sunday as 0."""
    return (day.weekday() + 1) % 7


@dataclass
class NotificationSettings:
    """Per-reminder notification preferences."""

    push_enabled: bool = True
    email_enabled: bool = False
    sound_enabled: bool = True
    # Minutes before the scheduled time to notify
    reminder_offset: int = 0

    def __post_init__(self) -> None:
        for name in ("push_enabled", "email_enabled", "sound_enabled"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidReminderDataError(f"notification_settings.{name}", "Must be a boolean")
        offset = self.reminder_offset
        if isinstance(offset, bool) or not isinstance(offset, int) or not 0 <= offset <= MAX_REMINDER_OFFSET_MINUTES:
            raise InvalidReminderDataError(
                "notification_settings.reminder_offset",
                f"Must be between 0 and {MAX_REMINDER_OFFSET_MINUTES} minutes",
            )

    @classmethod
    def from_dict(
        cls, data: Optional[Dict[str, Any]], base: Optional["NotificationSettings"] = None
    ) -> "NotificationSettings":
        """Build settings from a partial mapping layered over ``base``."""
        if isinstance(data, NotificationSettings):
            return data
        values = asdict(base) if base else {}
        known = {f.name for f in fields(cls)}
        for key, value in (data or {}).items():
            if key in known and value is not None:
                values[key] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Reminder:
    """Reminder domain entity."""

    reminder_id: ReminderId
    user_id: str
    medicine_name: str
    times: List[str] = field(default_factory=list)
    frequency: Frequency = Frequency.ONCE_DAILY
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    days_of_week: List[int] = field(default_factory=list)
    start_date: datetime = field(default_factory=datetime.now)
    end_date: Optional[datetime] = None
    is_active: bool = True
    is_paused: bool = False
    prescription_id: Optional[str] = None
    family_member_id: Optional[str] = None
    notification_settings: NotificationSettings = field(default_factory=NotificationSettings)
    push_subscription: Optional[Dict[str, Any]] = None
    color: str = DEFAULT_COLOR
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        """Validate reminder data."""
        self._validate_reminder_data()

    def _validate_reminder_data(self) -> None:
        """Validate and normalise fields according to business rules."""
        if not isinstance(self.medicine_name, str) or not self.medicine_name.strip():
            raise InvalidReminderDataError("medicine_name", "Medicine name is required")
        self.medicine_name = self.medicine_name.strip()
        if len(self.medicine_name) > MAX_MEDICINE_NAME_LENGTH:
            raise InvalidReminderDataError(
                "medicine_name", f"Medicine name too long (max {MAX_MEDICINE_NAME_LENGTH} characters)"
            )

        self.dosage = self._clean_text("dosage", self.dosage)
        self.instructions = self._clean_text("instructions", self.instructions)

        try:
            self.frequency = Frequency(self.frequency)
        except ValueError:
            allowed = ", ".join(f.value for f in Frequency)
            raise InvalidReminderDataError("frequency", f"Must be one of: {allowed}")

        self.times = normalize_times(self.times)
        self.days_of_week = normalize_days_of_week(self.days_of_week)

        if not isinstance(self.start_date, datetime):
            raise InvalidReminderDataError("start_date", "Start date must be a datetime")
        if self.end_date is not None:
            if not isinstance(self.end_date, datetime):
                raise InvalidReminderDataError("end_date", "End date must be a datetime")
            if self.end_date < self.start_date:
                raise InvalidReminderDataError("end_date", "End date must not be before start date")

        if self.frequency == Frequency.WEEKLY and not self.days_of_week:
            # Weekly without explicit days repeats on the start weekday
            self.days_of_week = [weekday_number(self.start_date.date())]

        for flag in ("is_active", "is_paused"):
            if not isinstance(getattr(self, flag), bool):
                raise InvalidReminderDataError(flag, "Must be a boolean")

        if not isinstance(self.notification_settings, NotificationSettings):
            self.notification_settings = NotificationSettings.from_dict(self.notification_settings)

        if self.color is None:
            self.color = DEFAULT_COLOR
        if not isinstance(self.color, str) or not COLOR_PATTERN.match(self.color):
            raise InvalidReminderDataError("color", "Color must be a hex value such as #6366f1")

        self.notes = self._clean_text("notes", self.notes)
        if self.notes and len(self.notes) > MAX_NOTES_LENGTH:
            raise InvalidReminderDataError("notes", f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")

    @staticmethod
    def _clean_text(name: str, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise InvalidReminderDataError(name, "Must be a string")
        return value.strip() or None

    def require_times(self) -> None:
        """Reject schedules without any time of day."""
        if not self.times:
            raise InvalidReminderDataError("times", "At least one reminder time is required")

    def is_currently_active(self, now: datetime) -> bool:
        """Active, not paused, and ``now`` within [start_date, end_date]."""
        within_range = (self.start_date is None or now >= self.start_date) and (
            self.end_date is None or now <= self.end_date
        )
        return self.is_active and not self.is_paused and within_range

    def runs_on(self, day: date) -> bool:
        """Weekly reminders with days_of_week only fire on those weekdays."""
        if self.frequency == Frequency.WEEKLY and self.days_of_week:
            return weekday_number(day) in self.days_of_week
        return True

    def next_occurrence(self, now: datetime) -> Optional[datetime]:
        """Next absolute firing time after ``now``'s time of day, else first time tomorrow."""
        if not self.times:
            return None
        current = now.strftime("%H:%M")
        for time_of_day in sorted(self.times):
            if time_of_day > current:
                return combine_date_and_time(now.date(), time_of_day)
        return combine_date_and_time(now.date() + timedelta(days=1), sorted(self.times)[0])

    def apply_updates(self, updates: Dict[str, Any], now: datetime) -> List[str]:
        """Apply an allow-listed partial update; all-or-nothing. Returns changed field names."""
        changes = {key: value for key, value in updates.items() if key in UPDATABLE_FIELDS}
        if not changes:
            return []

        if "times" in changes:
            changes["times"] = normalize_times(changes["times"], required=True)
        if "notification_settings" in changes:
            if changes["notification_settings"] is None:
                raise InvalidReminderDataError("notification_settings", "Notification settings cannot be null")
            changes["notification_settings"] = NotificationSettings.from_dict(
                changes["notification_settings"], base=self.notification_settings
            )

        # replace() re-runs validation on the candidate before anything is touched
        candidate = replace(self, **changes)
        if candidate.days_of_week != self.days_of_week:
            changes.setdefault("days_of_week", candidate.days_of_week)
        for name in changes:
            setattr(self, name, getattr(candidate, name))
        self.updated_at = now
        return sorted(changes)

    def toggle(self, toggle_field: ToggleField, now: datetime) -> bool:
        """Flip is_active or is_paused; returns the new value."""
        name = toggle_field.value
        new_value = not getattr(self, name)
        setattr(self, name, new_value)
        self.updated_at = now
        return new_value
