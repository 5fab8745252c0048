"""Read-side reminder use cases."""

from typing import List

from ...core.utils.datetime_utils import WallClock
from ..dto.reminder_dto import ListRemindersRequest, ReminderView
from ..ports.repositories.reminder_repo import ReminderRepository
from ..utils.lookups import load_owned_reminder, reminder_view


class ListRemindersUseCase:
    """List a user's reminders, newest first."""

    def __init__(self, reminder_repository: ReminderRepository, clock: WallClock):
        self._reminder_repository = reminder_repository
        self._clock = clock

    async def execute(self, request: ListRemindersRequest) -> List[ReminderView]:
        reminders = await self._reminder_repository.find_by_user(
            request.user_id,
            active_only=request.active_only,
            family_member_id=request.family_member_id,
        )
        now = self._clock.now()
        return [reminder_view(r, now) for r in reminders]


class GetReminderUseCase:
    """Fetch one reminder owned by the caller."""

    def __init__(self, reminder_repository: ReminderRepository, clock: WallClock):
        self._reminder_repository = reminder_repository
        self._clock = clock

    async def execute(self, reminder_id: str, user_id: str) -> ReminderView:
        reminder = await load_owned_reminder(self._reminder_repository, reminder_id, user_id)
        return reminder_view(reminder, self._clock.now())
