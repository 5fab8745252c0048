"""Dose instance entity: one dated occurrence of a reminder's schedule."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from ..enums.reminder import DoseStatus
from ..errors import (
    DoseTransitionError,
    InvalidDoseNotesError,
    InvalidDoseStatusError,
    InvalidSnoozeDurationError,
)
from ..value_objects.dose_id import DoseId
from ..value_objects.reminder_id import ReminderId

if TYPE_CHECKING:
    from .reminder import Reminder

MAX_DOSE_NOTES_LENGTH = 200
DEFAULT_LATE_THRESHOLD_MINUTES = 30
DEFAULT_MAX_SNOOZE_MINUTES = 1440


@dataclass
class DoseInstance:
    """Dose instance domain entity."""

    dose_id: DoseId
    reminder_id: ReminderId
    user_id: str
    medicine_name: str
    scheduled_time: datetime
    dosage: Optional[str] = None
    family_member_id: Optional[str] = None
    status: DoseStatus = DoseStatus.PENDING
    taken_at: Optional[datetime] = None
    snoozed_until: Optional[datetime] = None
    snooze_count: int = 0
    notes: Optional[str] = None
    notification_sent: bool = False
    notification_sent_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        self.status = DoseStatus(self.status)
        if self.status == DoseStatus.SNOOZED:
            # Never persisted; a snooze is stored as pending
            self.status = DoseStatus.PENDING

    @classmethod
    def schedule(cls, reminder: "Reminder", scheduled_time: datetime, now: datetime) -> "DoseInstance":
        """New pending dose with medicine name and dosage copied from the reminder."""
        return cls(
            dose_id=DoseId.generate(),
            reminder_id=reminder.reminder_id,
            user_id=reminder.user_id,
            medicine_name=reminder.medicine_name,
            dosage=reminder.dosage,
            family_member_id=reminder.family_member_id,
            scheduled_time=scheduled_time,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == DoseStatus.PENDING

    @property
    def due_at(self) -> datetime:
        """When the dose should next be announced."""
        return self.snoozed_until or self.scheduled_time

    def is_late(self, now: datetime, threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES) -> bool:
        """Still pending more than ``threshold_minutes`` after the scheduled time."""
        if not self.is_pending:
            return False
        return now > self.scheduled_time + timedelta(minutes=threshold_minutes)

    def apply_status(
        self,
        requested: DoseStatus,
        now: datetime,
        notes: Optional[str] = None,
        snooze_minutes: Optional[int] = None,
        max_snooze_minutes: int = DEFAULT_MAX_SNOOZE_MINUTES,
    ) -> DoseStatus:
        """
        Transition a pending dose on user request.

        taken and skipped are terminal. snoozed is transient: it pushes
        snoozed_until forward, bumps snooze_count and writes the status back
        as pending so the dose stays actionable. Returns the stored status.
        """
        try:
            requested = DoseStatus(requested)
        except ValueError:
            raise InvalidDoseStatusError(requested)
        if requested not in DoseStatus.loggable():
            raise InvalidDoseStatusError(requested.value)
        if not self.is_pending:
            raise DoseTransitionError(self.dose_id.value, self.status.value, requested.value)

        if notes is not None and len(notes) > MAX_DOSE_NOTES_LENGTH:
            raise InvalidDoseNotesError(len(notes), MAX_DOSE_NOTES_LENGTH)

        if requested == DoseStatus.SNOOZED:
            if (
                snooze_minutes is None
                or isinstance(snooze_minutes, bool)
                or not 1 <= snooze_minutes <= max_snooze_minutes
            ):
                raise InvalidSnoozeDurationError(snooze_minutes, max_snooze_minutes)

        if notes:
            self.notes = notes

        if requested == DoseStatus.TAKEN:
            self.status = DoseStatus.TAKEN
            self.taken_at = now
        elif requested == DoseStatus.SKIPPED:
            self.status = DoseStatus.SKIPPED
        else:
            self.snoozed_until = now + timedelta(minutes=snooze_minutes)
            self.snooze_count += 1
            self.status = DoseStatus.PENDING
            # Re-announce once the snooze runs out
            self.notification_sent = False
            self.notification_sent_at = None

        self.updated_at = now
        return self.status

    def mark_missed(self, now: datetime) -> None:
        """Sweeper transition for an overdue pending dose."""
        if not self.is_pending:
            raise DoseTransitionError(self.dose_id.value, self.status.value, DoseStatus.MISSED.value)
        self.status = DoseStatus.MISSED
        self.updated_at = now

    def mark_notified(self, now: datetime) -> None:
        self.notification_sent = True
        self.notification_sent_at = now
        self.updated_at = now
