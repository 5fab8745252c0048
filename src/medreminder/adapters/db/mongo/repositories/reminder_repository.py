"""
MongoDB implementation of ReminderRepository.
"""

from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from medreminder.application.ports.repositories.reminder_repo import ReminderRepository
from medreminder.domain.entities.reminder import NotificationSettings, Reminder
from medreminder.domain.value_objects.reminder_id import ReminderId

from ..errors import mongo_errors
from ..models.reminder_m import NotificationSettingsMongo, ReminderMongo


class MongoReminderRepository(ReminderRepository):
    """MongoDB implementation of ReminderRepository."""

    async def save(self, reminder: Reminder) -> Reminder:
        """Insert the reminder or replace the stored copy."""
        with mongo_errors("save reminder"):
            reminder_mongo = self._domain_to_mongo(reminder)
            existing = await ReminderMongo.find_one(
                ReminderMongo.reminder_id == reminder.reminder_id.value
            )
            if existing:
                reminder_mongo.id = existing.id
            await reminder_mongo.save()
        return reminder

    async def find_by_id(self, reminder_id: ReminderId, user_id: str) -> Optional[Reminder]:
        with mongo_errors("find reminder"):
            reminder_mongo = await ReminderMongo.find_one(
                ReminderMongo.reminder_id == reminder_id.value,
                ReminderMongo.user_id == user_id,
            )
        if not reminder_mongo:
            return None
        return self._mongo_to_domain(reminder_mongo)

    async def find_by_user(
        self,
        user_id: str,
        active_only: bool = False,
        family_member_id: Optional[str] = None,
    ) -> List[Reminder]:
        query: Dict[str, Any] = {"user_id": user_id}
        if active_only:
            query["is_active"] = True
            query["is_paused"] = False
        if family_member_id:
            query["family_member_id"] = family_member_id

        with mongo_errors("list reminders"):
            reminders_mongo = await ReminderMongo.find(query).sort([("created_at", DESCENDING)]).to_list()
        return [self._mongo_to_domain(r) for r in reminders_mongo]

    async def find_active(self) -> List[Reminder]:
        with mongo_errors("list active reminders"):
            reminders_mongo = await ReminderMongo.find({"is_active": True, "is_paused": False}).to_list()
        return [self._mongo_to_domain(r) for r in reminders_mongo]

    async def delete(self, reminder_id: ReminderId, user_id: str) -> bool:
        with mongo_errors("delete reminder"):
            result = await ReminderMongo.get_motor_collection().delete_one(
                {"reminder_id": reminder_id.value, "user_id": user_id}
            )
        return result.deleted_count > 0

    async def set_push_subscription(self, user_id: str, subscription: Dict[str, Any]) -> int:
        with mongo_errors("save push subscription"):
            result = await ReminderMongo.get_motor_collection().update_many(
                {"user_id": user_id, "is_active": True},
                {"$set": {"push_subscription": subscription}},
            )
        return result.matched_count

    def _domain_to_mongo(self, reminder: Reminder) -> ReminderMongo:
        """Convert domain entity to MongoDB model."""
        return ReminderMongo(
            reminder_id=reminder.reminder_id.value,
            user_id=reminder.user_id,
            prescription_id=reminder.prescription_id,
            family_member_id=reminder.family_member_id,
            medicine_name=reminder.medicine_name,
            dosage=reminder.dosage,
            instructions=reminder.instructions,
            frequency=reminder.frequency.value,
            times=list(reminder.times),
            days_of_week=list(reminder.days_of_week),
            start_date=reminder.start_date,
            end_date=reminder.end_date,
            is_active=reminder.is_active,
            is_paused=reminder.is_paused,
            notification_settings=NotificationSettingsMongo(**reminder.notification_settings.to_dict()),
            push_subscription=reminder.push_subscription,
            color=reminder.color,
            notes=reminder.notes,
            created_at=reminder.created_at,
            updated_at=reminder.updated_at,
        )

    def _mongo_to_domain(self, reminder_mongo: ReminderMongo) -> Reminder:
        """Convert MongoDB model to domain entity."""
        return Reminder(
            reminder_id=ReminderId(reminder_mongo.reminder_id),
            user_id=reminder_mongo.user_id,
            prescription_id=reminder_mongo.prescription_id,
            family_member_id=reminder_mongo.family_member_id,
            medicine_name=reminder_mongo.medicine_name,
            dosage=reminder_mongo.dosage,
            instructions=reminder_mongo.instructions,
            frequency=reminder_mongo.frequency,
            times=list(reminder_mongo.times),
            days_of_week=list(reminder_mongo.days_of_week),
            start_date=reminder_mongo.start_date,
            end_date=reminder_mongo.end_date,
            is_active=reminder_mongo.is_active,
            is_paused=reminder_mongo.is_paused,
            notification_settings=NotificationSettings(**reminder_mongo.notification_settings.model_dump()),
            push_subscription=reminder_mongo.push_subscription,
            color=reminder_mongo.color,
            notes=reminder_mongo.notes,
            created_at=reminder_mongo.created_at,
            updated_at=reminder_mongo.updated_at,
        )
