"""
Dose instance repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ....domain.entities.dose import DoseInstance
from ....domain.enums.reminder import DoseStatus
from ....domain.value_objects.dose_id import DoseId
from ....domain.value_objects.reminder_id import ReminderId


class DoseRepository(ABC):
    """Abstract repository for dose instance data access."""

    @abstractmethod
    async def create_if_absent(self, dose: DoseInstance) -> bool:
        """
        Insert the dose unless one already exists for the same
        (reminder_id, scheduled_time). Returns True when inserted.
        """
        pass

    @abstractmethod
    async def find_by_id(self, dose_id: DoseId, user_id: str) -> Optional[DoseInstance]:
        """Find a dose owned by ``user_id``."""
        pass

    @abstractmethod
    async def find_latest_pending_for_reminder(
        self, reminder_id: ReminderId, user_id: str
    ) -> Optional[DoseInstance]:
        """Pending dose of the reminder with the latest scheduled_time."""
        pass

    @abstractmethod
    async def find_for_user_between(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        family_member_id: Optional[str] = None,
    ) -> List[DoseInstance]:
        """Doses with scheduled_time in [start, end], ascending."""
        pass

    @abstractmethod
    async def exists_for_slot(self, reminder_id: ReminderId, scheduled_time: datetime) -> bool:
        """Whether a dose already exists for (reminder_id, scheduled_time)."""
        pass

    @abstractmethod
    async def save_transition(self, dose: DoseInstance, expected_status: DoseStatus) -> bool:
        """
        Persist a status change only if the stored dose still has
        ``expected_status``. Returns False when another writer got there first.
        """
        pass

    @abstractmethod
    async def find_overdue_pending(self, cutoff: datetime, limit: int = 500) -> List[DoseInstance]:
        """
        Pending doses scheduled before ``cutoff`` that are not snoozed past it,
        oldest first.
        """
        pass

    @abstractmethod
    async def find_due_for_notification(self, user_id: str, now: datetime) -> List[DoseInstance]:
        """Pending, not yet announced doses whose due time is at or before ``now``."""
        pass

    @abstractmethod
    async def delete_by_reminder(self, reminder_id: ReminderId) -> int:
        """Delete every dose of a reminder; returns how many were removed."""
        pass
