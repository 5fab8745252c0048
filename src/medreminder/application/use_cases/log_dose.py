"""Log Dose use case: taken, skipped or snoozed on a pending dose."""

import logging
from typing import Optional

from ...core.utils.datetime_utils import WallClock
from ...domain.entities.dose import DoseInstance
from ...domain.enums.reminder import DoseStatus
from ...domain.errors import DoseNotFoundError, DoseTransitionError, InvalidDoseStatusError
from ...domain.value_objects.reminder_id import ReminderId
from ..dto.reminder_dto import DoseView, LogDoseRequest
from ..ports.repositories.dose_repo import DoseRepository
from ..utils.lookups import dose_view, load_owned_dose

logger = logging.getLogger(__name__)


class LogDoseUseCase:
    """Use case for recording what the user did with a dose."""

    def __init__(
        self,
        dose_repository: DoseRepository,
        clock: WallClock,
        default_snooze_minutes: int = 15,
        max_snooze_minutes: int = 1440,
        late_threshold_minutes: int = 30,
    ):
        self._dose_repository = dose_repository
        self._clock = clock
        self._default_snooze_minutes = default_snooze_minutes
        self._max_snooze_minutes = max_snooze_minutes
        self._late_threshold_minutes = late_threshold_minutes

    async def execute(self, request: LogDoseRequest) -> DoseView:
        """Execute the log dose use case."""
        status = self._parse_status(request.status)
        dose = await self._resolve_dose(request)

        snooze_minutes = request.snooze_minutes
        if status == DoseStatus.SNOOZED and snooze_minutes is None:
            snooze_minutes = self._default_snooze_minutes

        previous_status = dose.status
        now = self._clock.now()
        dose.apply_status(
            status,
            now,
            notes=request.notes,
            snooze_minutes=snooze_minutes,
            max_snooze_minutes=self._max_snooze_minutes,
        )

        if not await self._dose_repository.save_transition(dose, expected_status=previous_status):
            current = await self._dose_repository.find_by_id(dose.dose_id, request.user_id)
            if current is None:
                raise DoseNotFoundError(dose_id=dose.dose_id.value)
            raise DoseTransitionError(dose.dose_id.value, current.status.value, status.value)

        logger.info(
            f"Dose {dose.dose_id} logged as {status.value} (stored {dose.status.value}, "
            f"snooze_count={dose.snooze_count})"
        )
        return dose_view(dose, now, self._late_threshold_minutes)

    @staticmethod
    def _parse_status(value: str) -> DoseStatus:
        try:
            status = DoseStatus(value)
        except ValueError:
            raise InvalidDoseStatusError(value)
        if status not in DoseStatus.loggable():
            raise InvalidDoseStatusError(value)
        return status

    async def _resolve_dose(self, request: LogDoseRequest) -> DoseInstance:
        if request.dose_id:
            return await load_owned_dose(self._dose_repository, request.dose_id, request.user_id)

        # Newest pending dose by scheduled_time, which is not necessarily the most overdue one
        dose: Optional[DoseInstance] = None
        if ReminderId.is_valid(request.reminder_id):
            dose = await self._dose_repository.find_latest_pending_for_reminder(
                ReminderId(request.reminder_id), request.user_id
            )
        if dose is None:
            raise DoseNotFoundError(reminder_id=request.reminder_id)
        return dose
