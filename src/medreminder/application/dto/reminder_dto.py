"""Reminder and dose DTOs passed between the API and the use cases."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...domain.entities.dose import DoseInstance
from ...domain.entities.reminder import Reminder
from ...domain.services.adherence import DailyAdherence, MedicineAdherence, OverallStats


@dataclass
class CreateReminderRequest:
    """Request DTO for reminder creation."""

    user_id: str
    medicine_name: str
    times: List[str]
    frequency: str = "once_daily"
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    days_of_week: List[int] = field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    prescription_id: Optional[str] = None
    family_member_id: Optional[str] = None
    notification_settings: Optional[Dict[str, Any]] = None
    color: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class ReminderView:
    """Reminder plus the values derived from it at a point in time."""

    reminder: Reminder
    is_currently_active: bool
    next_occurrence: Optional[datetime]


@dataclass
class DoseView:
    """Dose plus derived flags for display."""

    dose: DoseInstance
    is_late: bool
    color: Optional[str] = None


@dataclass
class CreateReminderResponse:
    """Response DTO for reminder creation."""

    reminder: ReminderView
    doses: List[DoseView]


@dataclass
class ListRemindersRequest:
    user_id: str
    active_only: bool = False
    family_member_id: Optional[str] = None


@dataclass
class UpdateReminderRequest:
    """Partial update; unknown keys are ignored."""

    reminder_id: str
    user_id: str
    updates: Dict[str, Any]


@dataclass
class ToggleReminderRequest:
    reminder_id: str
    user_id: str
    field: str


@dataclass
class ToggleReminderResponse:
    reminder: ReminderView
    field: str
    value: bool


@dataclass
class DeleteReminderResponse:
    reminder_id: str
    deleted_doses: int


@dataclass
class LogDoseRequest:
    """
    Request DTO for logging a dose.

    With dose_id the dose is addressed directly; otherwise the newest
    pending dose of reminder_id is used.
    """

    user_id: str
    status: str
    reminder_id: Optional[str] = None
    dose_id: Optional[str] = None
    notes: Optional[str] = None
    snooze_minutes: Optional[int] = None


@dataclass
class TodaysDosesResponse:
    date: str
    doses: List[DoseView]
    # ISO scheduled_time -> doses at that time
    grouped: Dict[str, List[DoseView]]


@dataclass
class AdherenceStatsRequest:
    user_id: str
    period: str = "week"
    family_member_id: Optional[str] = None


@dataclass
class AdherenceStatsResponse:
    """Response DTO for adherence statistics."""

    period: str
    start_date: datetime
    end_date: datetime
    overall: OverallStats
    daily: List[DailyAdherence]
    by_medicine: List[MedicineAdherence]
    current_streak: int


@dataclass
class SweepSummary:
    """Counts from one sweeper pass."""

    reminders_scanned: int = 0
    doses_created: int = 0
    doses_missed: int = 0
    failures: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "reminders_scanned": self.reminders_scanned,
            "doses_created": self.doses_created,
            "doses_missed": self.doses_missed,
            "failures": self.failures,
        }
