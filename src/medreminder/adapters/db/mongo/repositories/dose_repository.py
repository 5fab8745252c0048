"""
MongoDB implementation of DoseRepository.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from medreminder.application.ports.repositories.dose_repo import DoseRepository
from medreminder.domain.entities.dose import DoseInstance
from medreminder.domain.enums.reminder import DoseStatus
from medreminder.domain.value_objects.dose_id import DoseId
from medreminder.domain.value_objects.reminder_id import ReminderId

from ..errors import mongo_errors
from ..models.reminder_m import DoseInstanceMongo

# Fields a status transition or notification update may change
_MUTABLE_FIELDS = (
    "status",
    "taken_at",
    "snoozed_until",
    "snooze_count",
    "notes",
    "notification_sent",
    "notification_sent_at",
    "updated_at",
)


class MongoDoseRepository(DoseRepository):
    """MongoDB implementation of DoseRepository."""

    async def create_if_absent(self, dose: DoseInstance) -> bool:
        with mongo_errors("create dose"):
            existing = await DoseInstanceMongo.find_one(
                {"reminder_id": dose.reminder_id.value, "scheduled_time": dose.scheduled_time}
            )
            if existing:
                return False
            try:
                await self._domain_to_mongo(dose).insert()
            except DuplicateKeyError:
                # Lost the race to a concurrent generator; the unique index kept one copy
                return False
        return True

    async def find_by_id(self, dose_id: DoseId, user_id: str) -> Optional[DoseInstance]:
        with mongo_errors("find dose"):
            dose_mongo = await DoseInstanceMongo.find_one({"dose_id": dose_id.value, "user_id": user_id})
        if not dose_mongo:
            return None
        return self._mongo_to_domain(dose_mongo)

    async def find_latest_pending_for_reminder(
        self, reminder_id: ReminderId, user_id: str
    ) -> Optional[DoseInstance]:
        with mongo_errors("find pending dose"):
            doses_mongo = (
                await DoseInstanceMongo.find(
                    {
                        "reminder_id": reminder_id.value,
                        "user_id": user_id,
                        "status": DoseStatus.PENDING.value,
                    }
                )
                .sort([("scheduled_time", DESCENDING)])
                .limit(1)
                .to_list()
            )
        if not doses_mongo:
            return None
        return self._mongo_to_domain(doses_mongo[0])

    async def find_for_user_between(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        family_member_id: Optional[str] = None,
    ) -> List[DoseInstance]:
        query: Dict[str, Any] = {
            "user_id": user_id,
            "scheduled_time": {"$gte": start, "$lte": end},
        }
        if family_member_id:
            query["family_member_id"] = family_member_id

        with mongo_errors("list doses"):
            doses_mongo = await DoseInstanceMongo.find(query).sort([("scheduled_time", ASCENDING)]).to_list()
        return [self._mongo_to_domain(d) for d in doses_mongo]

    async def exists_for_slot(self, reminder_id: ReminderId, scheduled_time: datetime) -> bool:
        with mongo_errors("check dose slot"):
            count = await DoseInstanceMongo.find(
                {"reminder_id": reminder_id.value, "scheduled_time": scheduled_time}
            ).count()
        return count > 0

    async def save_transition(self, dose: DoseInstance, expected_status: DoseStatus) -> bool:
        changes = {name: getattr(dose, name) for name in _MUTABLE_FIELDS}
        changes["status"] = dose.status.value
        with mongo_errors("update dose"):
            result = await DoseInstanceMongo.get_motor_collection().update_one(
                {"dose_id": dose.dose_id.value, "status": DoseStatus(expected_status).value},
                {"$set": changes},
            )
        return result.matched_count == 1

    async def find_overdue_pending(self, cutoff: datetime, limit: int = 500) -> List[DoseInstance]:
        query = {
            "status": DoseStatus.PENDING.value,
            "scheduled_time": {"$lt": cutoff},
            "$or": [{"snoozed_until": None}, {"snoozed_until": {"$lt": cutoff}}],
        }
        with mongo_errors("list overdue doses"):
            doses_mongo = (
                await DoseInstanceMongo.find(query)
                .sort([("scheduled_time", ASCENDING)])
                .limit(limit)
                .to_list()
            )
        return [self._mongo_to_domain(d) for d in doses_mongo]

    async def find_due_for_notification(self, user_id: str, now: datetime) -> List[DoseInstance]:
        query = {
            "user_id": user_id,
            "status": DoseStatus.PENDING.value,
            "notification_sent": False,
            "$or": [
                {"snoozed_until": None, "scheduled_time": {"$lte": now}},
                {"snoozed_until": {"$lte": now}},
            ],
        }
        with mongo_errors("list due doses"):
            doses_mongo = await DoseInstanceMongo.find(query).to_list()
        doses = [self._mongo_to_domain(d) for d in doses_mongo]
        return sorted(doses, key=lambda d: (d.due_at, d.scheduled_time))

    async def delete_by_reminder(self, reminder_id: ReminderId) -> int:
        with mongo_errors("delete doses"):
            result = await DoseInstanceMongo.get_motor_collection().delete_many(
                {"reminder_id": reminder_id.value}
            )
        return result.deleted_count

    def _domain_to_mongo(self, dose: DoseInstance) -> DoseInstanceMongo:
        """Convert domain entity to MongoDB model."""
        return DoseInstanceMongo(
            dose_id=dose.dose_id.value,
            reminder_id=dose.reminder_id.value,
            user_id=dose.user_id,
            family_member_id=dose.family_member_id,
            medicine_name=dose.medicine_name,
            dosage=dose.dosage,
            scheduled_time=dose.scheduled_time,
            status=dose.status.value,
            taken_at=dose.taken_at,
            snoozed_until=dose.snoozed_until,
            snooze_count=dose.snooze_count,
            notes=dose.notes,
            notification_sent=dose.notification_sent,
            notification_sent_at=dose.notification_sent_at,
            created_at=dose.created_at,
            updated_at=dose.updated_at,
        )

    def _mongo_to_domain(self, dose_mongo: DoseInstanceMongo) -> DoseInstance:
        """Convert MongoDB model to domain entity."""
        return DoseInstance(
            dose_id=DoseId(dose_mongo.dose_id),
            reminder_id=ReminderId(dose_mongo.reminder_id),
            user_id=dose_mongo.user_id,
            family_member_id=dose_mongo.family_member_id,
            medicine_name=dose_mongo.medicine_name,
            dosage=dose_mongo.dosage,
            scheduled_time=dose_mongo.scheduled_time,
            status=DoseStatus(dose_mongo.status),
            taken_at=dose_mongo.taken_at,
            snoozed_until=dose_mongo.snoozed_until,
            snooze_count=dose_mongo.snooze_count,
            notes=dose_mongo.notes,
            notification_sent=dose_mongo.notification_sent,
            notification_sent_at=dose_mongo.notification_sent_at,
            created_at=dose_mongo.created_at,
            updated_at=dose_mongo.updated_at,
        )
