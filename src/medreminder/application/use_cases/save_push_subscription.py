"""Save Push Subscription use case."""

import logging
from typing import Any, Dict

from ...domain.errors import InvalidReminderDataError
from ..ports.repositories.reminder_repo import ReminderRepository

logger = logging.getLogger(__name__)


class SavePushSubscriptionUseCase:
    """Attach a web-push subscription to every active reminder of a user."""

    def __init__(self, reminder_repository: ReminderRepository):
        self._reminder_repository = reminder_repository

    async def execute(self, user_id: str, subscription: Dict[str, Any]) -> int:
        if not subscription or not isinstance(subscription, dict):
            raise InvalidReminderDataError("subscription", "Push subscription is required")

        updated = await self._reminder_repository.set_push_subscription(user_id, subscription)
        logger.info(f"Push subscription saved on {updated} reminder(s) for user {user_id}")
        return updated
