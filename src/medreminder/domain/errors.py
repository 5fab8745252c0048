"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(DomainError):
    """Resource missing or owned by someone else (indistinguishable on purpose)."""


class ValidationError(DomainError):
    """Input rejected by a business rule."""


class ConflictError(DomainError):
    """Operation does not fit the current state of the resource."""


class ReminderNotFoundError(NotFoundError):
    """Reminder not found."""

    def __init__(self, reminder_id: str) -> None:
        message = f"Reminder with ID '{reminder_id}' not found"
        super().__init__(message, "REMINDER_NOT_FOUND", {"reminder_id": reminder_id})


class DoseNotFoundError(NotFoundError):
    """Dose instance not found."""

    def __init__(self, dose_id: Optional[str] = None, reminder_id: Optional[str] = None) -> None:
        if dose_id:
            message = f"Dose with ID '{dose_id}' not found"
            details = {"dose_id": dose_id}
        else:
            message = f"No pending dose found for reminder '{reminder_id}'"
            details = {"reminder_id": reminder_id}
        super().__init__(message, "DOSE_NOT_FOUND", details)


class InvalidReminderDataError(ValidationError):
    """Invalid reminder data."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            f"Invalid reminder data. Field: {field}. {message}",
            "INVALID_REMINDER_DATA",
            {"field": field},
        )


class InvalidDoseStatusError(ValidationError):
    """Status is not one a caller may log."""

    def __init__(self, status: Any, allowed: Optional[list] = None) -> None:
        allowed = allowed or ["taken", "skipped", "snoozed"]
        message = f"Invalid dose status: {status}. Must be one of: {', '.join(allowed)}"
        super().__init__(message, "INVALID_DOSE_STATUS", {"status": status, "allowed": allowed})


class InvalidToggleFieldError(ValidationError):
    """Toggle requested on a field that is not a reminder flag."""

    def __init__(self, field: Any) -> None:
        message = f"Invalid toggle field: {field}. Must be isActive or isPaused"
        super().__init__(message, "INVALID_TOGGLE_FIELD", {"field": field})


class InvalidSnoozeDurationError(ValidationError):
    """Snooze length outside the accepted range."""

    def __init__(self, minutes: Any, max_minutes: int) -> None:
        message = f"Snooze duration must be between 1 and {max_minutes} minutes, got {minutes}"
        super().__init__(
            message, "INVALID_SNOOZE_DURATION", {"minutes": minutes, "max_minutes": max_minutes}
        )


class InvalidDoseNotesError(ValidationError):
    """Dose notes exceed the allowed length."""

    def __init__(self, length: int, max_length: int) -> None:
        message = f"Dose notes cannot exceed {max_length} characters (got {length})"
        super().__init__(message, "INVALID_DOSE_NOTES", {"length": length, "max_length": max_length})


class DoseTransitionError(ConflictError):
    """Dose is no longer pending, so its status can not change."""

    def __init__(self, dose_id: str, current_status: str, requested_status: str) -> None:
        message = (
            f"Dose '{dose_id}' is {current_status} and can not be marked {requested_status}"
        )
        super().__init__(
            message,
            "DOSE_TRANSITION_NOT_ALLOWED",
            {
                "dose_id": dose_id,
                "current_status": current_status,
                "requested_status": requested_status,
            },
        )
