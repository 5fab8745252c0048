"""
Dose sweeper: materialises upcoming days and marks overdue doses missed.

Both halves are safe to re-run. Generation is create-if-absent per slot and
the missed transition is a conditional write that only lands on a dose that
is still pending.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from ...core.utils.datetime_utils import WallClock
from ...domain.enums.reminder import DoseStatus
from ...domain.services.schedule import upcoming_days
from ..dto.reminder_dto import SweepSummary
from ..ports.repositories.dose_repo import DoseRepository
from ..ports.repositories.reminder_repo import ReminderRepository
from .generate_doses import DoseGenerator

logger = logging.getLogger(__name__)


class DoseSweeper:
    """One pass of the periodic dose maintenance job."""

    def __init__(
        self,
        reminder_repository: ReminderRepository,
        dose_repository: DoseRepository,
        dose_generator: DoseGenerator,
        clock: WallClock,
        days_ahead: int = 1,
        missed_after_minutes: int = 180,
        batch_size: int = 500,
    ):
        self._reminder_repository = reminder_repository
        self._dose_repository = dose_repository
        self._dose_generator = dose_generator
        self._clock = clock
        self._days_ahead = days_ahead
        self._missed_after_minutes = missed_after_minutes
        self._batch_size = batch_size

    async def sweep_once(self, now: Optional[datetime] = None) -> SweepSummary:
        now = now or self._clock.now()
        summary = SweepSummary()
        await self._materialize_upcoming(now, summary)
        await self._mark_overdue_missed(now, summary)
        return summary

    async def _materialize_upcoming(self, now: datetime, summary: SweepSummary) -> None:
        today = now.date()
        days = [today] + upcoming_days(today, self._days_ahead)

        for reminder in await self._reminder_repository.find_active():
            if reminder.end_date is not None and reminder.end_date < now:
                continue
            summary.reminders_scanned += 1
            try:
                for day in days:
                    if reminder.end_date is not None and reminder.end_date.date() < day:
                        break
                    created = await self._dose_generator.generate_for_date(reminder, day)
                    summary.doses_created += len(created)
            except Exception as e:  # noqa: PERF203
                summary.failures += 1
                logger.error(
                    "[DoseSweeper] Generation failed for reminder=%s: %s",
                    reminder.reminder_id,
                    e,
                    exc_info=True,
                )

    async def _mark_overdue_missed(self, now: datetime, summary: SweepSummary) -> None:
        cutoff = now - timedelta(minutes=self._missed_after_minutes)
        overdue = await self._dose_repository.find_overdue_pending(cutoff, limit=self._batch_size)

        for dose in overdue:
            try:
                dose.mark_missed(now)
                if await self._dose_repository.save_transition(dose, expected_status=DoseStatus.PENDING):
                    summary.doses_missed += 1
                else:
                    logger.debug("[DoseSweeper] Dose %s changed before it could be marked missed", dose.dose_id)
            except Exception as e:  # noqa: PERF203
                summary.failures += 1
                logger.error(
                    "[DoseSweeper] Could not mark dose=%s missed: %s", dose.dose_id, e, exc_info=True
                )
