"""Today's doses for a user, ordered and grouped by scheduled time."""

from typing import Dict, List, Optional

from ...core.utils.datetime_utils import WallClock, day_bounds
from ..dto.reminder_dto import DoseView, TodaysDosesResponse
from ..ports.repositories.dose_repo import DoseRepository
from ..ports.repositories.reminder_repo import ReminderRepository
from ..utils.lookups import dose_view


class GetTodaysDosesUseCase:
    """Use case answering "what is due today"."""

    def __init__(
        self,
        dose_repository: DoseRepository,
        reminder_repository: ReminderRepository,
        clock: WallClock,
        late_threshold_minutes: int = 30,
    ):
        self._dose_repository = dose_repository
        self._reminder_repository = reminder_repository
        self._clock = clock
        self._late_threshold_minutes = late_threshold_minutes

    async def execute(self, user_id: str, family_member_id: Optional[str] = None) -> TodaysDosesResponse:
        now = self._clock.now()
        start, end = day_bounds(now.date())

        doses = await self._dose_repository.find_for_user_between(
            user_id, start, end, family_member_id=family_member_id
        )
        reminders = await self._reminder_repository.find_by_user(user_id)
        colors = {r.reminder_id.value: r.color for r in reminders}

        views = [
            dose_view(d, now, self._late_threshold_minutes, colors.get(d.reminder_id.value))
            for d in doses
        ]
        grouped: Dict[str, List[DoseView]] = {}
        for view in views:
            grouped.setdefault(view.dose.scheduled_time.isoformat(), []).append(view)

        return TodaysDosesResponse(date=now.date().isoformat(), doses=views, grouped=grouped)
