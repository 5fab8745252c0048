"""
MongoDB Beanie models for reminders and their dose instances.

Datetimes are stored exactly as the domain holds them: naive wall-clock
values in the configured reminder timezone.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from beanie import Document
from pydantic import BaseModel, Field
from pymongo import ASCENDING, DESCENDING, IndexModel


class NotificationSettingsMongo(BaseModel):
    """Embedded notification preferences."""
    push_enabled: bool = Field(default=True)
    email_enabled: bool = Field(default=False)
    sound_enabled: bool = Field(default=True)
    reminder_offset: int = Field(default=0, description="Minutes before the scheduled time")


class ReminderMongo(Document):
    """MongoDB model for a recurring medication schedule."""
    reminder_id: str = Field(..., description="Reminder ID (rmd_...)")
    user_id: str = Field(..., description="Owner ID")
    prescription_id: Optional[str] = Field(None, description="Source prescription reference")
    family_member_id: Optional[str] = Field(None, description="Family member the reminder is for")
    medicine_name: str = Field(..., description="Medicine name")
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    frequency: str = Field(default="once_daily")
    times: List[str] = Field(default_factory=list, description="HH:MM times of day")
    days_of_week: List[int] = Field(default_factory=list, description="0=Sunday .. 6=Saturday")
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool = Field(default=True)
    is_paused: bool = Field(default=False)
    notification_settings: NotificationSettingsMongo = Field(default_factory=NotificationSettingsMongo)
    push_subscription: Optional[Dict[str, Any]] = None
    color: str = Field(default="#6366f1")
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    class Settings:
        name = "reminders"
        indexes = [
            IndexModel([("reminder_id", ASCENDING)], unique=True),
            IndexModel([("user_id", ASCENDING), ("is_active", ASCENDING)]),
            IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)]),  # Listing, newest first
            IndexModel([("is_active", ASCENDING), ("is_paused", ASCENDING)]),  # Sweeper scan
        ]


class DoseInstanceMongo(Document):
    """MongoDB model for one dated dose of a reminder."""
    dose_id: str = Field(..., description="Dose ID (dose_...)")
    reminder_id: str = Field(..., description="Owning reminder ID")
    user_id: str = Field(..., description="Owner ID")
    family_member_id: Optional[str] = None
    medicine_name: str = Field(..., description="Copied from the reminder at creation")
    dosage: Optional[str] = None
    scheduled_time: datetime
    status: str = Field(default="pending", description="pending, taken, skipped, missed")
    taken_at: Optional[datetime] = None
    snoozed_until: Optional[datetime] = None
    snooze_count: int = Field(default=0)
    notes: Optional[str] = None
    notification_sent: bool = Field(default=False)
    notification_sent_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    class Settings:
        name = "dose_instances"
        indexes = [
            IndexModel([("dose_id", ASCENDING)], unique=True),
            # One dose per reminder and scheduled time
            IndexModel([("reminder_id", ASCENDING), ("scheduled_time", ASCENDING)], unique=True),
            IndexModel([("user_id", ASCENDING), ("scheduled_time", ASCENDING)]),
            IndexModel([("status", ASCENDING), ("scheduled_time", ASCENDING)]),  # Overdue scan
        ]
