"""Create Reminder use case: store the schedule and materialise today's doses."""

import logging

from ...core.utils.datetime_utils import WallClock
from ...domain.entities.reminder import DEFAULT_COLOR, NotificationSettings, Reminder
from ...domain.value_objects.reminder_id import ReminderId
from ..dto.reminder_dto import CreateReminderRequest, CreateReminderResponse
from ..ports.repositories.reminder_repo import ReminderRepository
from ..utils.lookups import dose_view, reminder_view
from .generate_doses import DoseGenerator

logger = logging.getLogger(__name__)


class CreateReminderUseCase:
    """Use case for creating a reminder."""

    def __init__(
        self,
        reminder_repository: ReminderRepository,
        dose_generator: DoseGenerator,
        clock: WallClock,
        default_color: str = DEFAULT_COLOR,
        late_threshold_minutes: int = 30,
    ):
        self._reminder_repository = reminder_repository
        self._dose_generator = dose_generator
        self._clock = clock
        self._default_color = default_color
        self._late_threshold_minutes = late_threshold_minutes

    async def execute(self, request: CreateReminderRequest) -> CreateReminderResponse:
        """Execute the create reminder use case."""
        now = self._clock.now()

        reminder = Reminder(
            reminder_id=ReminderId.generate(),
            user_id=request.user_id,
            prescription_id=request.prescription_id,
            family_member_id=request.family_member_id,
            medicine_name=request.medicine_name,
            dosage=request.dosage,
            instructions=request.instructions,
            frequency=request.frequency or "once_daily",
            times=request.times,
            days_of_week=request.days_of_week,
            start_date=self._clock.localize(request.start_date) or now,
            end_date=self._clock.localize(request.end_date),
            notification_settings=NotificationSettings.from_dict(request.notification_settings),
            color=request.color or self._default_color,
            notes=request.notes,
            created_at=now,
            updated_at=now,
        )
        reminder.require_times()

        await self._reminder_repository.save(reminder)
        doses = await self._dose_generator.generate_for_date(reminder, now.date())

        logger.info(
            f"Reminder {reminder.reminder_id} created for user {reminder.user_id} "
            f"({len(reminder.times)} time(s), {len(doses)} dose(s) today)"
        )
        return CreateReminderResponse(
            reminder=reminder_view(reminder, now),
            doses=[dose_view(d, now, self._late_threshold_minutes, reminder.color) for d in doses],
        )
