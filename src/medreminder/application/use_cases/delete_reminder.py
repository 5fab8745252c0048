"""Delete Reminder use case (cascades to the reminder's doses)."""

import logging

from ..dto.reminder_dto import DeleteReminderResponse
from ..ports.repositories.dose_repo import DoseRepository
from ..ports.repositories.reminder_repo import ReminderRepository
from ..utils.lookups import load_owned_reminder

logger = logging.getLogger(__name__)


class DeleteReminderUseCase:
    """Use case for deleting a reminder and all of its dose instances."""

    def __init__(self, reminder_repository: ReminderRepository, dose_repository: DoseRepository):
        self._reminder_repository = reminder_repository
        self._dose_repository = dose_repository

    async def execute(self, reminder_id: str, user_id: str) -> DeleteReminderResponse:
        reminder = await load_owned_reminder(self._reminder_repository, reminder_id, user_id)

        # Doses before the reminder itself
        deleted_doses = await self._dose_repository.delete_by_reminder(reminder.reminder_id)
        await self._reminder_repository.delete(reminder.reminder_id, user_id)

        logger.info(f"Reminder {reminder_id} deleted with {deleted_doses} dose(s)")
        return DeleteReminderResponse(reminder_id=reminder_id, deleted_doses=deleted_doses)
