"""
Ownership-scoped lookups and view builders shared by the reminder use cases.

A malformed id, a missing record and a record owned by somebody else all
surface as the same not-found error.
"""

from datetime import datetime
from typing import Optional

from ...domain.entities.dose import DoseInstance
from ...domain.entities.reminder import Reminder
from ...domain.errors import DoseNotFoundError, ReminderNotFoundError
from ...domain.value_objects.dose_id import DoseId
from ...domain.value_objects.reminder_id import ReminderId
from ..dto.reminder_dto import DoseView, ReminderView
from ..ports.repositories.dose_repo import DoseRepository
from ..ports.repositories.reminder_repo import ReminderRepository


async def load_owned_reminder(
    repository: ReminderRepository, reminder_id: str, user_id: str
) -> Reminder:
    if not ReminderId.is_valid(reminder_id):
        raise ReminderNotFoundError(str(reminder_id))
    reminder = await repository.find_by_id(ReminderId(reminder_id), user_id)
    if reminder is None:
        raise ReminderNotFoundError(reminder_id)
    return reminder


async def load_owned_dose(repository: DoseRepository, dose_id: str, user_id: str) -> DoseInstance:
    if not DoseId.is_valid(dose_id):
        raise DoseNotFoundError(dose_id=str(dose_id))
    dose = await repository.find_by_id(DoseId(dose_id), user_id)
    if dose is None:
        raise DoseNotFoundError(dose_id=dose_id)
    return dose


def reminder_view(reminder: Reminder, now: datetime) -> ReminderView:
    return ReminderView(
        reminder=reminder,
        is_currently_active=reminder.is_currently_active(now),
        next_occurrence=reminder.next_occurrence(now),
    )


def dose_view(
    dose: DoseInstance, now: datetime, late_threshold_minutes: int, color: Optional[str] = None
) -> DoseView:
    return DoseView(dose=dose, is_late=dose.is_late(now, late_threshold_minutes), color=color)
