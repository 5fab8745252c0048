"""
Reminder repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ....domain.entities.reminder import Reminder
from ....domain.value_objects.reminder_id import ReminderId


class ReminderRepository(ABC):
    """Abstract repository for reminder data access."""

    @abstractmethod
    async def save(self, reminder: Reminder) -> Reminder:
        """Insert or replace a reminder."""
        pass

    @abstractmethod
    async def find_by_id(self, reminder_id: ReminderId, user_id: str) -> Optional[Reminder]:
        """Find a reminder owned by ``user_id``."""
        pass

    @abstractmethod
    async def find_by_user(
        self,
        user_id: str,
        active_only: bool = False,
        family_member_id: Optional[str] = None,
    ) -> List[Reminder]:
        """
        List a user's reminders, newest first.

        active_only keeps reminders that are active and not paused.
        """
        pass

    @abstractmethod
    async def find_active(self) -> List[Reminder]:
        """All reminders with is_active set and is_paused cleared, across users."""
        pass

    @abstractmethod
    async def delete(self, reminder_id: ReminderId, user_id: str) -> bool:
        """Delete a reminder owned by ``user_id``."""
        pass

    @abstractmethod
    async def set_push_subscription(self, user_id: str, subscription: Dict[str, Any]) -> int:
        """Store the subscription on every active reminder of the user; returns how many."""
        pass
