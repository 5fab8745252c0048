"""
Value objects package for domain layer.
"""

from .dose_id import DoseId
from .reminder_id import ReminderId

__all__ = [
    "ReminderId",
    "DoseId",
]
