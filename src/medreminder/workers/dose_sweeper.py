"""
Background dose sweeper loop.

Each pass materialises upcoming doses for active reminders and marks
overdue pending doses missed. Runs inside the API lifespan or standalone
via sweeper_startup.py.
"""

import asyncio
import logging
from typing import Optional

from medreminder.adapters.db.mongo.repositories.dose_repository import MongoDoseRepository
from medreminder.adapters.db.mongo.repositories.reminder_repository import MongoReminderRepository
from medreminder.application.dto.reminder_dto import SweepSummary
from medreminder.application.use_cases.generate_doses import DoseGenerator
from medreminder.application.use_cases.sweep_doses import DoseSweeper
from medreminder.core.config import Settings, get_settings
from medreminder.core.structured_logger import get_logger
from medreminder.core.utils.datetime_utils import WallClock

logger = logging.getLogger(__name__)
events = get_logger("medreminder.workers.dose_sweeper")


def build_sweeper(settings: Settings) -> DoseSweeper:
    clock = WallClock(settings.reminders.timezone)
    dose_repository = MongoDoseRepository()
    return DoseSweeper(
        reminder_repository=MongoReminderRepository(),
        dose_repository=dose_repository,
        dose_generator=DoseGenerator(dose_repository, clock),
        clock=clock,
        days_ahead=settings.sweeper.days_ahead,
        missed_after_minutes=settings.sweeper.missed_after_minutes,
        batch_size=settings.sweeper.batch_size,
    )


async def _sweep_once(sweeper: DoseSweeper) -> SweepSummary:
    """
    Perform a single sweep: materialise upcoming doses and mark overdue ones missed.
    """
    summary = await sweeper.sweep_once()
    events.info("[DoseSweeper] sweep completed", **summary.to_dict())
    return summary


async def run_dose_sweeper_forever(stop_event: Optional[asyncio.Event] = None) -> None:
    """
    Run the dose sweeper in a loop, controlled by DOSE_SWEEPER_* settings.

    Returns when the sweeper is disabled or ``stop_event`` is set.
    """
    settings = get_settings()
    if not settings.sweeper.enabled:
        logger.info("[DoseSweeper] Disabled via DOSE_SWEEPER_ENABLED")
        return

    interval = settings.sweeper.interval_seconds
    logger.info(
        "[DoseSweeper] Starting (interval=%ss, missed_after=%smin, days_ahead=%s, tz=%s)",
        interval,
        settings.sweeper.missed_after_minutes,
        settings.sweeper.days_ahead,
        settings.reminders.timezone,
    )

    sweeper = build_sweeper(settings)
    stop_event = stop_event or asyncio.Event()
    while not stop_event.is_set():
        try:
            await _sweep_once(sweeper)
        except Exception as e:  # noqa: PERF203
            logger.error("[DoseSweeper] Sweep iteration failed: %s", e, exc_info=True)
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
