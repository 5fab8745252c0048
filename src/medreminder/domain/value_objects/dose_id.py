"""
Dose ID value object for type-safe dose identification.
Format: dose_<32 hex chars>
"""

import re
import uuid
from dataclasses import dataclass
from typing import Any

DOSE_ID_PATTERN = re.compile(r"^dose_[0-9a-f]{32}$")


@dataclass(frozen=True)
class DoseId:
    """Immutable dose identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate dose ID format."""
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Dose ID cannot be empty")

        if not DOSE_ID_PATTERN.match(self.value):
            raise ValueError("Dose ID must follow format: dose_<32 hex chars>")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, DoseId):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def generate(cls) -> "DoseId":
        """Generate a new dose ID."""
        return cls(f"dose_{uuid.uuid4().hex}")

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return isinstance(value, str) and bool(DOSE_ID_PATTERN.match(value))
