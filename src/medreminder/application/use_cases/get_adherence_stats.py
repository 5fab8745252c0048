"""Adherence statistics over a week, month or year ending now."""

import logging
from datetime import datetime, timedelta
from typing import Tuple

from ...core.utils.datetime_utils import WallClock, months_before, years_before
from ...domain.enums.reminder import StatsPeriod
from ...domain.services.adherence import (
    DEFAULT_STREAK_THRESHOLD,
    current_streak,
    daily_breakdown,
    overall_stats,
    per_medicine_breakdown,
)
from ..dto.reminder_dto import AdherenceStatsRequest, AdherenceStatsResponse
from ..ports.repositories.dose_repo import DoseRepository

logger = logging.getLogger(__name__)


def period_window(period: StatsPeriod, now: datetime) -> Tuple[datetime, datetime]:
    """[start, end] of the statistics window ending at ``now``."""
    if period == StatsPeriod.MONTH:
        return months_before(now, 1), now
    if period == StatsPeriod.YEAR:
        return years_before(now, 1), now
    return now - timedelta(days=7), now


class GetAdherenceStatsUseCase:
    """Use case for the adherence dashboard."""

    def __init__(
        self,
        dose_repository: DoseRepository,
        clock: WallClock,
        streak_threshold: int = DEFAULT_STREAK_THRESHOLD,
    ):
        self._dose_repository = dose_repository
        self._clock = clock
        self._streak_threshold = streak_threshold

    async def execute(self, request: AdherenceStatsRequest) -> AdherenceStatsResponse:
        try:
            period = StatsPeriod(request.period)
        except ValueError:
            logger.debug(f"Unknown stats period {request.period!r}, using week")
            period = StatsPeriod.WEEK

        start, end = period_window(period, self._clock.now())
        doses = await self._dose_repository.find_for_user_between(
            request.user_id, start, end, family_member_id=request.family_member_id
        )

        daily = daily_breakdown(doses)
        return AdherenceStatsResponse(
            period=period.value,
            start_date=start,
            end_date=end,
            overall=overall_stats(doses),
            daily=daily,
            by_medicine=per_medicine_breakdown(doses),
            current_streak=current_streak(daily, self._streak_threshold),
        )
