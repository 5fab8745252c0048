"""
Request and response schemas for reminder and dose endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ...application.dto.reminder_dto import (
    AdherenceStatsResponse,
    DoseView,
    ReminderView,
    TodaysDosesResponse,
)
from ...domain.enums.reminder import Frequency


# ============================================================================
# REQUESTS
# ============================================================================


class NotificationSettingsSchema(BaseModel):
    """Notification preferences; omitted fields keep their current value."""

    push_enabled: Optional[bool] = None
    email_enabled: Optional[bool] = None
    sound_enabled: Optional[bool] = None
    reminder_offset: Optional[int] = Field(None, ge=0, le=1440, description="Minutes before the dose")


class CreateReminderRequest(BaseModel):
    medicine_name: str = Field(..., description="Medicine name")
    times: List[str] = Field(..., description="Times of day, HH:MM (24-hour)")
    frequency: Frequency = Field(Frequency.ONCE_DAILY, description="Frequency class")
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    days_of_week: List[int] = Field(default_factory=list, description="0=Sunday .. 6=Saturday, weekly only; defaults to the start weekday")
    start_date: Optional[datetime] = Field(None, description="Defaults to now")
    end_date: Optional[datetime] = Field(None, description="Open-ended when absent")
    prescription_id: Optional[str] = None
    family_member_id: Optional[str] = None
    notification_settings: Optional[NotificationSettingsSchema] = None
    color: Optional[str] = Field(None, description="Hex color, defaults to indigo")
    notes: Optional[str] = Field(None, description="Up to 500 characters")


class UpdateReminderRequest(BaseModel):
    """Partial update; only fields present in the body are applied."""

    medicine_name: Optional[str] = None
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    frequency: Optional[Frequency] = None
    times: Optional[List[str]] = None
    days_of_week: Optional[List[int]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_paused: Optional[bool] = None
    notification_settings: Optional[NotificationSettingsSchema] = None
    color: Optional[str] = None
    notes: Optional[str] = None

    def to_updates(self) -> Dict[str, Any]:
        updates = self.model_dump(exclude_unset=True)
        if "notification_settings" in updates and updates["notification_settings"] is not None:
            updates["notification_settings"] = {
                k: v for k, v in updates["notification_settings"].items() if v is not None
            }
        if isinstance(updates.get("frequency"), Frequency):
            updates["frequency"] = updates["frequency"].value
        return updates


class ToggleReminderRequest(BaseModel):
    field: str = Field(..., description="is_active or is_paused (isActive/isPaused accepted)")


class LogDoseRequest(BaseModel):
    status: str = Field(..., description="taken, skipped or snoozed")
    dose_id: Optional[str] = Field(None, description="Dose to log; defaults to the newest pending dose")
    notes: Optional[str] = Field(None, description="Up to 200 characters")
    snooze_minutes: Optional[int] = Field(None, description="Snooze length, default 15")


class PushSubscriptionRequest(BaseModel):
    subscription: Optional[Dict[str, Any]] = Field(None, description="Web push subscription payload")


# ============================================================================
# RESPONSES
# ============================================================================


class NotificationSettingsOut(BaseModel):
    push_enabled: bool
    email_enabled: bool
    sound_enabled: bool
    reminder_offset: int


class ReminderSchema(BaseModel):
    reminder_id: str
    user_id: str
    prescription_id: Optional[str] = None
    family_member_id: Optional[str] = None
    medicine_name: str
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    frequency: str
    times: List[str]
    days_of_week: List[int]
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool
    is_paused: bool
    is_currently_active: bool
    next_occurrence: Optional[datetime] = None
    notification_settings: NotificationSettingsOut
    has_push_subscription: bool
    color: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: ReminderView) -> "ReminderSchema":
        r = view.reminder
        return cls(
            reminder_id=r.reminder_id.value,
            user_id=r.user_id,
            prescription_id=r.prescription_id,
            family_member_id=r.family_member_id,
            medicine_name=r.medicine_name,
            dosage=r.dosage,
            instructions=r.instructions,
            frequency=r.frequency.value,
            times=list(r.times),
            days_of_week=list(r.days_of_week),
            start_date=r.start_date,
            end_date=r.end_date,
            is_active=r.is_active,
            is_paused=r.is_paused,
            is_currently_active=view.is_currently_active,
            next_occurrence=view.next_occurrence,
            notification_settings=NotificationSettingsOut(**r.notification_settings.to_dict()),
            has_push_subscription=r.push_subscription is not None,
            color=r.color,
            notes=r.notes,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class DoseSchema(BaseModel):
    dose_id: str
    reminder_id: str
    user_id: str
    family_member_id: Optional[str] = None
    medicine_name: str
    dosage: Optional[str] = None
    scheduled_time: datetime
    status: str
    taken_at: Optional[datetime] = None
    snoozed_until: Optional[datetime] = None
    snooze_count: int
    notes: Optional[str] = None
    notification_sent: bool
    notification_sent_at: Optional[datetime] = None
    is_late: bool
    color: Optional[str] = None

    @classmethod
    def from_view(cls, view: DoseView) -> "DoseSchema":
        d = view.dose
        return cls(
            dose_id=d.dose_id.value,
            reminder_id=d.reminder_id.value,
            user_id=d.user_id,
            family_member_id=d.family_member_id,
            medicine_name=d.medicine_name,
            dosage=d.dosage,
            scheduled_time=d.scheduled_time,
            status=d.status.value,
            taken_at=d.taken_at,
            snoozed_until=d.snoozed_until,
            snooze_count=d.snooze_count,
            notes=d.notes,
            notification_sent=d.notification_sent,
            notification_sent_at=d.notification_sent_at,
            is_late=view.is_late,
            color=view.color,
        )


class CreateReminderResponse(BaseModel):
    reminder: ReminderSchema
    doses: List[DoseSchema]


class ReminderListResponse(BaseModel):
    count: int
    reminders: List[ReminderSchema]


class ToggleReminderResponse(BaseModel):
    field: str
    value: bool
    reminder: ReminderSchema


class DeleteReminderResponse(BaseModel):
    reminder_id: str
    deleted_doses: int


class TodaysDosesSchema(BaseModel):
    date: str
    count: int
    doses: List[DoseSchema]
    grouped: Dict[str, List[DoseSchema]]

    @classmethod
    def from_result(cls, result: TodaysDosesResponse) -> "TodaysDosesSchema":
        return cls(
            date=result.date,
            count=len(result.doses),
            doses=[DoseSchema.from_view(v) for v in result.doses],
            grouped={
                key: [DoseSchema.from_view(v) for v in views] for key, views in result.grouped.items()
            },
        )


class DoseListResponse(BaseModel):
    count: int
    doses: List[DoseSchema]


class OverallStatsSchema(BaseModel):
    total: int
    taken: int
    skipped: int
    missed: int
    pending: int
    completed_doses: int
    adherence_rate: int


class DailyAdherenceSchema(BaseModel):
    date: str
    total: int
    taken: int
    adherence_rate: int


class MedicineAdherenceSchema(BaseModel):
    medicine_name: str
    total: int
    taken: int
    adherence_rate: int


class AdherenceStatsSchema(BaseModel):
    period: str
    start_date: datetime
    end_date: datetime
    overall: OverallStatsSchema
    daily: List[DailyAdherenceSchema]
    by_medicine: List[MedicineAdherenceSchema]
    current_streak: int

    @classmethod
    def from_result(cls, result: AdherenceStatsResponse) -> "AdherenceStatsSchema":
        return cls(
            period=result.period,
            start_date=result.start_date,
            end_date=result.end_date,
            overall=OverallStatsSchema(**result.overall.to_dict()),
            daily=[DailyAdherenceSchema(**d.to_dict()) for d in result.daily],
            by_medicine=[MedicineAdherenceSchema(**m.to_dict()) for m in result.by_medicine],
            current_streak=result.current_streak,
        )


class PushSubscriptionResponse(BaseModel):
    updated_reminders: int
