"""
Reminder and dose endpoints.

Every route is scoped to the authenticated owner; a reminder or dose that
belongs to someone else is reported exactly like a missing one.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ...application.dto.reminder_dto import (
    AdherenceStatsRequest,
    CreateReminderRequest as CreateReminderDTO,
    ListRemindersRequest,
    LogDoseRequest as LogDoseDTO,
    ToggleReminderRequest as ToggleReminderDTO,
    UpdateReminderRequest as UpdateReminderDTO,
)
from ...application.use_cases.create_reminder import CreateReminderUseCase
from ...application.use_cases.delete_reminder import DeleteReminderUseCase
from ...application.use_cases.get_adherence_stats import GetAdherenceStatsUseCase
from ...application.use_cases.get_todays_doses import GetTodaysDosesUseCase
from ...application.use_cases.list_reminders import GetReminderUseCase, ListRemindersUseCase
from ...application.use_cases.log_dose import LogDoseUseCase
from ...application.use_cases.notify_doses import ListDueDosesUseCase, MarkDoseNotifiedUseCase
from ...application.use_cases.save_push_subscription import SavePushSubscriptionUseCase
from ...application.use_cases.update_reminder import ToggleReminderUseCase, UpdateReminderUseCase
from ...core.exceptions import DatabaseError
from ...domain.errors import DomainError
from ..deps import (
    CurrentUserDep,
    get_adherence_stats_use_case,
    get_create_reminder_use_case,
    get_delete_reminder_use_case,
    get_get_reminder_use_case,
    get_list_due_doses_use_case,
    get_list_reminders_use_case,
    get_log_dose_use_case,
    get_mark_notified_use_case,
    get_save_push_subscription_use_case,
    get_toggle_reminder_use_case,
    get_todays_doses_use_case,
    get_update_reminder_use_case,
)
from ..errors import domain_error_response, internal_error_response
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.reminders import (
    AdherenceStatsSchema,
    CreateReminderRequest,
    CreateReminderResponse,
    DeleteReminderResponse,
    DoseListResponse,
    DoseSchema,
    LogDoseRequest,
    PushSubscriptionRequest,
    PushSubscriptionResponse,
    ReminderListResponse,
    ReminderSchema,
    TodaysDosesSchema,
    ToggleReminderRequest,
    ToggleReminderResponse,
    UpdateReminderRequest,
)
from ..utils.responses import ok

router = APIRouter(prefix="/reminders", tags=["reminders"])
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
    404: {"model": ErrorResponse, "description": "Reminder or dose not found"},
    409: {"model": ErrorResponse, "description": "Dose is no longer pending"},
    422: {"model": ErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


@router.post(
    "",
    response_model=ApiResponse[CreateReminderResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_reminder(
    request: Request,
    body: CreateReminderRequest,
    user_id: CurrentUserDep,
    use_case: Annotated[CreateReminderUseCase, Depends(get_create_reminder_use_case)],
):
    """
    Create a reminder and materialise today's doses for it.

    Times are HH:MM in the configured reminder timezone. Doses earlier than
    the start date are not generated.
    """
    try:
        dto = CreateReminderDTO(
            user_id=user_id,
            medicine_name=body.medicine_name,
            times=body.times,
            frequency=body.frequency.value,
            dosage=body.dosage,
            instructions=body.instructions,
            days_of_week=body.days_of_week,
            start_date=body.start_date,
            end_date=body.end_date,
            prescription_id=body.prescription_id,
            family_member_id=body.family_member_id,
            notification_settings=(
                body.notification_settings.model_dump(exclude_none=True) if body.notification_settings else None
            ),
            color=body.color,
            notes=body.notes,
        )
        result = await use_case.execute(dto)
        data = CreateReminderResponse(
            reminder=ReminderSchema.from_view(result.reminder),
            doses=[DoseSchema.from_view(v) for v in result.doses],
        )
        return ok(request, data=data, message="Reminder created")
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception("Failed to create reminder")
        return internal_error_response(request)


@router.get("", response_model=ApiResponse[ReminderListResponse], responses=ERROR_RESPONSES)
async def list_reminders(
    request: Request,
    user_id: CurrentUserDep,
    use_case: Annotated[ListRemindersUseCase, Depends(get_list_reminders_use_case)],
    active: bool = Query(False, description="Only active, unpaused reminders"),
    family_member_id: Optional[str] = Query(None, description="Only this family member's reminders"),
):
    """List the owner's reminders, newest first."""
    try:
        views = await use_case.execute(
            ListRemindersRequest(user_id=user_id, active_only=active, family_member_id=family_member_id)
        )
        reminders = [ReminderSchema.from_view(v) for v in views]
        return ok(request, data=ReminderListResponse(count=len(reminders), reminders=reminders))
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception("Failed to list reminders")
        return internal_error_response(request)


@router.get("/today", response_model=ApiResponse[TodaysDosesSchema], responses=ERROR_RESPONSES)
async def get_todays_doses(
    request: Request,
    user_id: CurrentUserDep,
    use_case: Annotated[GetTodaysDosesUseCase, Depends(get_todays_doses_use_case)],
    family_member_id: Optional[str] = Query(None),
):
    """Today's doses in scheduled order, also grouped by scheduled time."""
    try:
        result = await use_case.execute(user_id, family_member_id=family_member_id)
        return ok(request, data=TodaysDosesSchema.from_result(result))
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception("Failed to load today's doses")
        return internal_error_response(request)


@router.get("/stats", response_model=ApiResponse[AdherenceStatsSchema], responses=ERROR_RESPONSES)
async def get_adherence_stats(
    request: Request,
    user_id: CurrentUserDep,
    use_case: Annotated[GetAdherenceStatsUseCase, Depends(get_adherence_stats_use_case)],
    period: str = Query("week", description="week, month or year; anything else is treated as week"),
    family_member_id: Optional[str] = Query(None),
):
    """Adherence over the chosen window ending now."""
    try:
        result = await use_case.execute(
            AdherenceStatsRequest(user_id=user_id, period=period, family_member_id=family_member_id)
        )
        return ok(request, data=AdherenceStatsSchema.from_result(result))
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception("Failed to compute adherence stats")
        return internal_error_response(request)


@router.get("/due", response_model=ApiResponse[DoseListResponse], responses=ERROR_RESPONSES)
async def list_due_doses(
    request: Request,
    user_id: CurrentUserDep,
    use_case: Annotated[ListDueDosesUseCase, Depends(get_list_due_doses_use_case)],
):
    """Pending doses due by now whose notification has not gone out, oldest first."""
    try:
        views = await use_case.execute(user_id)
        doses = [DoseSchema.from_view(v) for v in views]
        return ok(request, data=DoseListResponse(count=len(doses), doses=doses))
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception("Failed to list due doses")
        return internal_error_response(request)


@router.post("/subscribe", response_model=ApiResponse[PushSubscriptionResponse], responses=ERROR_RESPONSES)
async def save_push_subscription(
    request: Request,
    body: PushSubscriptionRequest,
    user_id: CurrentUserDep,
    use_case: Annotated[SavePushSubscriptionUseCase, Depends(get_save_push_subscription_use_case)],
):
    """Store a web push subscription on every active reminder of the owner."""
    try:
        updated = await use_case.execute(user_id, body.subscription)
        return ok(request, data=PushSubscriptionResponse(updated_reminders=updated), message="Subscription saved")
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception("Failed to save push subscription")
        return internal_error_response(request)


@router.post(
    "/doses/{dose_id}/notified", response_model=ApiResponse[DoseSchema], responses=ERROR_RESPONSES
)
async def mark_dose_notified(
    request: Request,
    dose_id: str,
    user_id: CurrentUserDep,
    use_case: Annotated[MarkDoseNotifiedUseCase, Depends(get_mark_notified_use_case)],
):
    try:
        view = await use_case.execute(dose_id, user_id)
        return ok(request, data=DoseSchema.from_view(view))
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception(f"Failed to mark dose {dose_id} notified")
        return internal_error_response(request)


@router.get("/{reminder_id}", response_model=ApiResponse[ReminderSchema], responses=ERROR_RESPONSES)
async def get_reminder(
    request: Request,
    reminder_id: str,
    user_id: CurrentUserDep,
    use_case: Annotated[GetReminderUseCase, Depends(get_get_reminder_use_case)],
):
    try:
        view = await use_case.execute(reminder_id, user_id)
        return ok(request, data=ReminderSchema.from_view(view))
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception(f"Failed to load reminder {reminder_id}")
        return internal_error_response(request)


@router.put("/{reminder_id}", response_model=ApiResponse[ReminderSchema], responses=ERROR_RESPONSES)
async def update_reminder(
    request: Request,
    reminder_id: str,
    body: UpdateReminderRequest,
    user_id: CurrentUserDep,
    use_case: Annotated[UpdateReminderUseCase, Depends(get_update_reminder_use_case)],
):
    """
    Partially update a reminder.

    Only fields present in the body are applied. Already generated doses are
    left as they are.
    """
    try:
        view = await use_case.execute(
            UpdateReminderDTO(reminder_id=reminder_id, user_id=user_id, updates=body.to_updates())
        )
        return ok(request, data=ReminderSchema.from_view(view), message="Reminder updated")
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception(f"Failed to update reminder {reminder_id}")
        return internal_error_response(request)


@router.delete("/{reminder_id}", response_model=ApiResponse[DeleteReminderResponse], responses=ERROR_RESPONSES)
async def delete_reminder(
    request: Request,
    reminder_id: str,
    user_id: CurrentUserDep,
    use_case: Annotated[DeleteReminderUseCase, Depends(get_delete_reminder_use_case)],
):
    """Delete a reminder together with all of its doses."""
    try:
        result = await use_case.execute(reminder_id, user_id)
        return ok(
            request,
            data=DeleteReminderResponse(reminder_id=result.reminder_id, deleted_doses=result.deleted_doses),
            message="Reminder deleted",
        )
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception(f"Failed to delete reminder {reminder_id}")
        return internal_error_response(request)


@router.patch(
    "/{reminder_id}/toggle", response_model=ApiResponse[ToggleReminderResponse], responses=ERROR_RESPONSES
)
async def toggle_reminder(
    request: Request,
    reminder_id: str,
    body: ToggleReminderRequest,
    user_id: CurrentUserDep,
    use_case: Annotated[ToggleReminderUseCase, Depends(get_toggle_reminder_use_case)],
):
    """Flip is_active or is_paused."""
    try:
        result = await use_case.execute(
            ToggleReminderDTO(reminder_id=reminder_id, user_id=user_id, field=body.field)
        )
        data = ToggleReminderResponse(
            field=result.field, value=result.value, reminder=ReminderSchema.from_view(result.reminder)
        )
        return ok(request, data=data)
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception(f"Failed to toggle reminder {reminder_id}")
        return internal_error_response(request)


@router.post("/{reminder_id}/log", response_model=ApiResponse[DoseSchema], responses=ERROR_RESPONSES)
async def log_dose(
    request: Request,
    reminder_id: str,
    body: LogDoseRequest,
    user_id: CurrentUserDep,
    use_case: Annotated[LogDoseUseCase, Depends(get_log_dose_use_case)],
):
    """
    Record a dose as taken, skipped or snoozed.

    With dose_id in the body that dose is logged; otherwise the reminder's
    newest pending dose is. A snooze keeps the dose pending and moves its
    due time forward.
    """
    try:
        view = await use_case.execute(
            LogDoseDTO(
                user_id=user_id,
                status=body.status,
                reminder_id=reminder_id,
                dose_id=body.dose_id,
                notes=body.notes,
                snooze_minutes=body.snooze_minutes,
            )
        )
        return ok(request, data=DoseSchema.from_view(view), message=f"Dose logged as {body.status}")
    except DomainError as e:
        return domain_error_response(request, e)
    except DatabaseError:
        logger.exception(f"Failed to log dose for reminder {reminder_id}")
        return internal_error_response(request)
