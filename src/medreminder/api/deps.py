"""FastAPI dependency providers."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from ..adapters.db.mongo.repositories.dose_repository import MongoDoseRepository
from ..adapters.db.mongo.repositories.reminder_repository import MongoReminderRepository
from ..application.ports.repositories.dose_repo import DoseRepository
from ..application.ports.repositories.reminder_repo import ReminderRepository
from ..application.use_cases.create_reminder import CreateReminderUseCase
from ..application.use_cases.delete_reminder import DeleteReminderUseCase
from ..application.use_cases.generate_doses import DoseGenerator
from ..application.use_cases.get_adherence_stats import GetAdherenceStatsUseCase
from ..application.use_cases.get_todays_doses import GetTodaysDosesUseCase
from ..application.use_cases.list_reminders import GetReminderUseCase, ListRemindersUseCase
from ..application.use_cases.log_dose import LogDoseUseCase
from ..application.use_cases.notify_doses import ListDueDosesUseCase, MarkDoseNotifiedUseCase
from ..application.use_cases.save_push_subscription import SavePushSubscriptionUseCase
from ..application.use_cases.update_reminder import ToggleReminderUseCase, UpdateReminderUseCase
from ..core.config import ReminderSettings, get_settings
from ..core.utils.datetime_utils import WallClock


@lru_cache()
def get_reminder_repository() -> ReminderRepository:
    """Get reminder repository instance."""
    return MongoReminderRepository()


@lru_cache()
def get_dose_repository() -> DoseRepository:
    """Get dose repository instance."""
    return MongoDoseRepository()


def get_reminder_settings() -> ReminderSettings:
    return get_settings().reminders


def get_clock(settings: Annotated[ReminderSettings, Depends(get_reminder_settings)]) -> WallClock:
    """Wall clock in the configured reminder timezone."""
    return WallClock(settings.timezone)


def get_current_user(request: Request) -> str:
    """
    Get current authenticated user ID from request state.

    The authentication middleware sets it for every non-public path.
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not authenticated")
    return user_id


# Dependency annotations for FastAPI
ReminderRepositoryDep = Annotated[ReminderRepository, Depends(get_reminder_repository)]
DoseRepositoryDep = Annotated[DoseRepository, Depends(get_dose_repository)]
ReminderSettingsDep = Annotated[ReminderSettings, Depends(get_reminder_settings)]
ClockDep = Annotated[WallClock, Depends(get_clock)]
CurrentUserDep = Annotated[str, Depends(get_current_user)]


def get_create_reminder_use_case(
    reminders: ReminderRepositoryDep,
    doses: DoseRepositoryDep,
    clock: ClockDep,
    settings: ReminderSettingsDep,
) -> CreateReminderUseCase:
    return CreateReminderUseCase(
        reminders,
        DoseGenerator(doses, clock),
        clock,
        default_color=settings.default_color,
        late_threshold_minutes=settings.late_threshold_minutes,
    )


def get_list_reminders_use_case(reminders: ReminderRepositoryDep, clock: ClockDep) -> ListRemindersUseCase:
    return ListRemindersUseCase(reminders, clock)


def get_get_reminder_use_case(reminders: ReminderRepositoryDep, clock: ClockDep) -> GetReminderUseCase:
    return GetReminderUseCase(reminders, clock)


def get_update_reminder_use_case(reminders: ReminderRepositoryDep, clock: ClockDep) -> UpdateReminderUseCase:
    return UpdateReminderUseCase(reminders, clock)


def get_toggle_reminder_use_case(reminders: ReminderRepositoryDep, clock: ClockDep) -> ToggleReminderUseCase:
    return ToggleReminderUseCase(reminders, clock)


def get_delete_reminder_use_case(
    reminders: ReminderRepositoryDep, doses: DoseRepositoryDep
) -> DeleteReminderUseCase:
    return DeleteReminderUseCase(reminders, doses)


def get_log_dose_use_case(
    doses: DoseRepositoryDep, clock: ClockDep, settings: ReminderSettingsDep
) -> LogDoseUseCase:
    return LogDoseUseCase(
        doses,
        clock,
        default_snooze_minutes=settings.default_snooze_minutes,
        max_snooze_minutes=settings.max_snooze_minutes,
        late_threshold_minutes=settings.late_threshold_minutes,
    )


def get_todays_doses_use_case(
    doses: DoseRepositoryDep,
    reminders: ReminderRepositoryDep,
    clock: ClockDep,
    settings: ReminderSettingsDep,
) -> GetTodaysDosesUseCase:
    return GetTodaysDosesUseCase(doses, reminders, clock, settings.late_threshold_minutes)


def get_adherence_stats_use_case(
    doses: DoseRepositoryDep, clock: ClockDep, settings: ReminderSettingsDep
) -> GetAdherenceStatsUseCase:
    return GetAdherenceStatsUseCase(doses, clock, streak_threshold=settings.streak_threshold)


def get_save_push_subscription_use_case(reminders: ReminderRepositoryDep) -> SavePushSubscriptionUseCase:
    return SavePushSubscriptionUseCase(reminders)


def get_list_due_doses_use_case(
    doses: DoseRepositoryDep, clock: ClockDep, settings: ReminderSettingsDep
) -> ListDueDosesUseCase:
    return ListDueDosesUseCase(doses, clock, settings.late_threshold_minutes)


def get_mark_notified_use_case(
    doses: DoseRepositoryDep, clock: ClockDep, settings: ReminderSettingsDep
) -> MarkDoseNotifiedUseCase:
    return MarkDoseNotifiedUseCase(doses, clock, settings.late_threshold_minutes)
