"""
Domain entities package.
"""

from .dose import DoseInstance
from .reminder import NotificationSettings, Reminder

__all__ = [
    "Reminder",
    "NotificationSettings",
    "DoseInstance",
]
