"""Reminder edit and flag-toggle use cases."""

import logging

from ...core.utils.datetime_utils import WallClock
from ...domain.enums.reminder import ToggleField
from ...domain.errors import InvalidToggleFieldError
from ..dto.reminder_dto import (
    ReminderView,
    ToggleReminderRequest,
    ToggleReminderResponse,
    UpdateReminderRequest,
)
from ..ports.repositories.reminder_repo import ReminderRepository
from ..utils.lookups import load_owned_reminder, reminder_view

logger = logging.getLogger(__name__)

_DATE_FIELDS = ("start_date", "end_date")


class UpdateReminderUseCase:
    """Apply an allow-listed partial update to a reminder."""

    def __init__(self, reminder_repository: ReminderRepository, clock: WallClock):
        self._reminder_repository = reminder_repository
        self._clock = clock

    async def execute(self, request: UpdateReminderRequest) -> ReminderView:
        reminder = await load_owned_reminder(
            self._reminder_repository, request.reminder_id, request.user_id
        )

        updates = dict(request.updates)
        for name in _DATE_FIELDS:
            if updates.get(name) is not None:
                updates[name] = self._clock.localize(updates[name])

        now = self._clock.now()
        changed = reminder.apply_updates(updates, now)
        if changed:
            await self._reminder_repository.save(reminder)
            logger.info(f"Reminder {reminder.reminder_id} updated: {', '.join(changed)}")
        return reminder_view(reminder, now)


class ToggleReminderUseCase:
    """Flip is_active or is_paused."""

    def __init__(self, reminder_repository: ReminderRepository, clock: WallClock):
        self._reminder_repository = reminder_repository
        self._clock = clock

    async def execute(self, request: ToggleReminderRequest) -> ToggleReminderResponse:
        toggle_field = ToggleField.parse(request.field) if isinstance(request.field, str) else None
        if toggle_field is None:
            raise InvalidToggleFieldError(request.field)

        reminder = await load_owned_reminder(
            self._reminder_repository, request.reminder_id, request.user_id
        )
        now = self._clock.now()
        value = reminder.toggle(toggle_field, now)
        await self._reminder_repository.save(reminder)

        logger.info(f"Reminder {reminder.reminder_id} {toggle_field.value} set to {value}")
        return ToggleReminderResponse(
            reminder=reminder_view(reminder, now), field=toggle_field.value, value=value
        )
