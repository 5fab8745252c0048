"""Use cases backing an external notification dispatcher."""

import logging
from typing import List

from ...core.utils.datetime_utils import WallClock
from ...domain.errors import DoseTransitionError
from ..dto.reminder_dto import DoseView
from ..ports.repositories.dose_repo import DoseRepository
from ..utils.lookups import dose_view, load_owned_dose

logger = logging.getLogger(__name__)


class ListDueDosesUseCase:
    """Pending doses due by now that have not been announced yet, oldest first."""

    def __init__(self, dose_repository: DoseRepository, clock: WallClock, late_threshold_minutes: int = 30):
        self._dose_repository = dose_repository
        self._clock = clock
        self._late_threshold_minutes = late_threshold_minutes

    async def execute(self, user_id: str) -> List[DoseView]:
        now = self._clock.now()
        doses = await self._dose_repository.find_due_for_notification(user_id, now)
        return [dose_view(d, now, self._late_threshold_minutes) for d in doses]


class MarkDoseNotifiedUseCase:
    """Record that a dose's notification went out."""

    def __init__(self, dose_repository: DoseRepository, clock: WallClock, late_threshold_minutes: int = 30):
        self._dose_repository = dose_repository
        self._clock = clock
        self._late_threshold_minutes = late_threshold_minutes

    async def execute(self, dose_id: str, user_id: str) -> DoseView:
        dose = await load_owned_dose(self._dose_repository, dose_id, user_id)
        status = dose.status
        now = self._clock.now()
        dose.mark_notified(now)

        if not await self._dose_repository.save_transition(dose, expected_status=status):
            current = await self._dose_repository.find_by_id(dose.dose_id, user_id)
            current_status = current.status.value if current else "deleted"
            raise DoseTransitionError(dose.dose_id.value, current_status, "notified")

        logger.debug(f"Dose {dose_id} marked notified")
        return dose_view(dose, now, self._late_threshold_minutes)
