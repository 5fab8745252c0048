"""
Reminder ID value object for type-safe reminder identification.
Format: rmd_<32 hex chars>
"""

import re
import uuid
from dataclasses import dataclass
from typing import Any

REMINDER_ID_PATTERN = re.compile(r"^rmd_[0-9a-f]{32}$")


@dataclass(frozen=True)
class ReminderId:
    """Immutable reminder identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate reminder ID format."""
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Reminder ID cannot be empty")

        if not REMINDER_ID_PATTERN.match(self.value):
            raise ValueError("Reminder ID must follow format: rmd_<32 hex chars>")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, ReminderId):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def generate(cls) -> "ReminderId":
        """Generate a new reminder ID."""
        return cls(f"rmd_{uuid.uuid4().hex}")

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return isinstance(value, str) and bool(REMINDER_ID_PATTERN.match(value))
