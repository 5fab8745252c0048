"""Backfill Doses use case: materialise a date range for all active reminders."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Tuple

from ...domain.services.schedule import date_range
from ..ports.repositories.reminder_repo import ReminderRepository
from .generate_doses import DoseGenerator

logger = logging.getLogger(__name__)


@dataclass
class BackfillResult:
    reminders: int = 0
    doses: int = 0
    # (reminder_id, scheduled_time) pairs, filled in dry runs
    planned: List[Tuple[str, datetime]] = field(default_factory=list)


class BackfillDosesUseCase:
    """Generate (or, in a dry run, list) missing doses between two days."""

    def __init__(self, reminder_repository: ReminderRepository, dose_generator: DoseGenerator):
        self._reminder_repository = reminder_repository
        self._dose_generator = dose_generator

    async def execute(self, start: date, end: date, dry_run: bool = True) -> BackfillResult:
        if end < start:
            raise ValueError("end date must not be before start date")

        result = BackfillResult()
        days = date_range(start, end)
        for reminder in await self._reminder_repository.find_active():
            result.reminders += 1
            for day in days:
                if reminder.end_date is not None and reminder.end_date.date() < day:
                    break
                if dry_run:
                    slots = await self._dose_generator.missing_slots(reminder, day)
                    result.planned.extend((reminder.reminder_id.value, slot) for slot in slots)
                    result.doses += len(slots)
                else:
                    created = await self._dose_generator.generate_for_date(reminder, day)
                    result.doses += len(created)

        logger.info(
            f"Backfill {'dry-run' if dry_run else 'execute'} {start}..{end}: "
            f"{result.reminders} reminder(s), {result.doses} dose(s)"
        )
        return result
