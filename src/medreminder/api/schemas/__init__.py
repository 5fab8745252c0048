"""
API schemas package.
"""

from .common import ApiResponse, ErrorResponse
from .reminders import (
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

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "CreateReminderRequest",
    "CreateReminderResponse",
    "UpdateReminderRequest",
    "ToggleReminderRequest",
    "ToggleReminderResponse",
    "LogDoseRequest",
    "PushSubscriptionRequest",
    "PushSubscriptionResponse",
    "ReminderSchema",
    "ReminderListResponse",
    "DeleteReminderResponse",
    "DoseSchema",
    "DoseListResponse",
    "TodaysDosesSchema",
    "AdherenceStatsSchema",
]
