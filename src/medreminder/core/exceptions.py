"""
Exception handling for MedReminder application.

This module provides custom exception classes for the infrastructure side
of the application. Business rule violations live in domain.errors.
"""

from typing import Any, Dict, Optional


class MedReminderException(Exception):
    """Base exception class for MedReminder application."""

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


class DatabaseError(MedReminderException):
    """Raised when there's a database operation error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "DATABASE_ERROR", details)

