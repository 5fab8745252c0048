"""Dose-instance generation for a reminder and a calendar day."""

import logging
from datetime import date, datetime
from typing import List

from ...core.utils.datetime_utils import WallClock
from ...domain.entities.dose import DoseInstance
from ...domain.entities.reminder import Reminder
from ...domain.services.schedule import scheduled_times_for_date
from ..ports.repositories.dose_repo import DoseRepository

logger = logging.getLogger(__name__)


class DoseGenerator:
    """Materialises the dose instances a reminder should have on one day."""

    def __init__(self, dose_repository: DoseRepository, clock: WallClock):
        self._dose_repository = dose_repository
        self._clock = clock

    async def generate_for_date(self, reminder: Reminder, day: date) -> List[DoseInstance]:
        """
        Create the missing pending doses for ``day``.

        Slots that already have a dose are skipped, so calling this again
        for the same reminder and day creates nothing. Returns only the
        newly created doses.
        """
        now = self._clock.now()
        created: List[DoseInstance] = []
        for scheduled_time in scheduled_times_for_date(reminder, day):
            dose = DoseInstance.schedule(reminder, scheduled_time, now)
            if await self._dose_repository.create_if_absent(dose):
                created.append(dose)

        if created:
            logger.info(
                f"Generated {len(created)} dose(s) for reminder {reminder.reminder_id} on {day.isoformat()}"
            )
        return created

    async def missing_slots(self, reminder: Reminder, day: date) -> List[datetime]:
        """Scheduled times on ``day`` that have no dose yet (nothing is written)."""
        missing = []
        for scheduled_time in scheduled_times_for_date(reminder, day):
            if not await self._dose_repository.exists_for_slot(reminder.reminder_id, scheduled_time):
                missing.append(scheduled_time)
        return missing
