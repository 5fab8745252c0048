"""
Shared fixtures: in-memory repositories behind the same ports as the Mongo
adapters, and a wall clock pinned to a known instant.
"""

import copy
import os
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest

# Settings are read when the app module is imported
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/medreminder_test")
os.environ.setdefault("APP_ENV", "testing")
os.environ["API_KEYS"] = "test-key:user_1,other-key:user_2"

from medreminder.application.ports.repositories.dose_repo import DoseRepository  # noqa: E402
from medreminder.application.ports.repositories.reminder_repo import ReminderRepository  # noqa: E402
from medreminder.application.use_cases.generate_doses import DoseGenerator  # noqa: E402
from medreminder.core.utils.datetime_utils import WallClock  # noqa: E402
from medreminder.domain.entities.dose import DoseInstance  # noqa: E402
from medreminder.domain.entities.reminder import Reminder  # noqa: E402
from medreminder.domain.enums.reminder import DoseStatus  # noqa: E402
from medreminder.domain.value_objects.dose_id import DoseId  # noqa: E402
from medreminder.domain.value_objects.reminder_id import ReminderId  # noqa: E402

# Wednesday
FIXED_NOW = datetime(2024, 3, 6, 10, 0)


class FixedClock(WallClock):
    """Wall clock that only moves when a test moves it."""

    def __init__(self, now: datetime = FIXED_NOW):
        super().__init__("UTC")
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


class InMemoryReminderRepository(ReminderRepository):
    def __init__(self):
        self.reminders: Dict[str, Reminder] = {}

    async def save(self, reminder: Reminder) -> Reminder:
        self.reminders[reminder.reminder_id.value] = copy.deepcopy(reminder)
        return reminder

    async def find_by_id(self, reminder_id: ReminderId, user_id: str) -> Optional[Reminder]:
        stored = self.reminders.get(reminder_id.value)
        if stored is None or stored.user_id != user_id:
            return None
        return copy.deepcopy(stored)

    async def find_by_user(
        self, user_id: str, active_only: bool = False, family_member_id: Optional[str] = None
    ) -> List[Reminder]:
        result = [
            r
            for r in self.reminders.values()
            if r.user_id == user_id
            and (not active_only or (r.is_active and not r.is_paused))
            and (not family_member_id or r.family_member_id == family_member_id)
        ]
        result.sort(key=lambda r: r.created_at, reverse=True)
        return [copy.deepcopy(r) for r in result]

    async def find_active(self) -> List[Reminder]:
        return [copy.deepcopy(r) for r in self.reminders.values() if r.is_active and not r.is_paused]

    async def delete(self, reminder_id: ReminderId, user_id: str) -> bool:
        stored = self.reminders.get(reminder_id.value)
        if stored is None or stored.user_id != user_id:
            return False
        del self.reminders[reminder_id.value]
        return True

    async def set_push_subscription(self, user_id: str, subscription: Dict[str, Any]) -> int:
        updated = 0
        for reminder in self.reminders.values():
            if reminder.user_id == user_id and reminder.is_active:
                reminder.push_subscription = copy.deepcopy(subscription)
                updated += 1
        return updated


class InMemoryDoseRepository(DoseRepository):
    def __init__(self):
        self.doses: Dict[str, DoseInstance] = {}

    def all(self) -> List[DoseInstance]:
        return sorted(self.doses.values(), key=lambda d: d.scheduled_time)

    async def create_if_absent(self, dose: DoseInstance) -> bool:
        if await self.exists_for_slot(dose.reminder_id, dose.scheduled_time):
            return False
        self.doses[dose.dose_id.value] = copy.deepcopy(dose)
        return True

    async def find_by_id(self, dose_id: DoseId, user_id: str) -> Optional[DoseInstance]:
        stored = self.doses.get(dose_id.value)
        if stored is None or stored.user_id != user_id:
            return None
        return copy.deepcopy(stored)

    async def find_latest_pending_for_reminder(
        self, reminder_id: ReminderId, user_id: str
    ) -> Optional[DoseInstance]:
        pending = [
            d
            for d in self.doses.values()
            if d.reminder_id == reminder_id and d.user_id == user_id and d.status == DoseStatus.PENDING
        ]
        if not pending:
            return None
        return copy.deepcopy(max(pending, key=lambda d: d.scheduled_time))

    async def find_for_user_between(
        self, user_id: str, start: datetime, end: datetime, family_member_id: Optional[str] = None
    ) -> List[DoseInstance]:
        return [
            copy.deepcopy(d)
            for d in self.all()
            if d.user_id == user_id
            and start <= d.scheduled_time <= end
            and (not family_member_id or d.family_member_id == family_member_id)
        ]

    async def exists_for_slot(self, reminder_id: ReminderId, scheduled_time: datetime) -> bool:
        return any(
            d.reminder_id == reminder_id and d.scheduled_time == scheduled_time for d in self.doses.values()
        )

    async def save_transition(self, dose: DoseInstance, expected_status: DoseStatus) -> bool:
        stored = self.doses.get(dose.dose_id.value)
        if stored is None or stored.status != expected_status:
            return False
        self.doses[dose.dose_id.value] = copy.deepcopy(dose)
        return True

    async def find_overdue_pending(self, cutoff: datetime, limit: int = 500) -> List[DoseInstance]:
        overdue = [
            d
            for d in self.all()
            if d.status == DoseStatus.PENDING
            and d.scheduled_time < cutoff
            and (d.snoozed_until is None or d.snoozed_until < cutoff)
        ]
        return [copy.deepcopy(d) for d in overdue[:limit]]

    async def find_due_for_notification(self, user_id: str, now: datetime) -> List[DoseInstance]:
        due = [
            d
            for d in self.doses.values()
            if d.user_id == user_id
            and d.status == DoseStatus.PENDING
            and not d.notification_sent
            and d.due_at <= now
        ]
        return [copy.deepcopy(d) for d in sorted(due, key=lambda d: (d.due_at, d.scheduled_time))]

    async def delete_by_reminder(self, reminder_id: ReminderId) -> int:
        doomed = [key for key, d in self.doses.items() if d.reminder_id == reminder_id]
        for key in doomed:
            del self.doses[key]
        return len(doomed)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def reminder_repo() -> InMemoryReminderRepository:
    return InMemoryReminderRepository()


@pytest.fixture
def dose_repo() -> InMemoryDoseRepository:
    return InMemoryDoseRepository()


@pytest.fixture
def generator(dose_repo, clock) -> DoseGenerator:
    return DoseGenerator(dose_repo, clock)


@pytest.fixture
def make_reminder():
    """Factory for valid reminders owned by user_1, starting at midnight on FIXED_NOW's day."""

    def _make(**overrides) -> Reminder:
        values = {
            "reminder_id": ReminderId.generate(),
            "user_id": "user_1",
            "medicine_name": "Aspirin",
            "times": ["08:00", "20:00"],
            "dosage": "100mg",
            "start_date": datetime(2024, 3, 6),
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        values.update(overrides)
        return Reminder(**values)

    return _make


@pytest.fixture
def make_dose():
    """Factory for pending doses; pass ``reminder`` to copy its identity."""

    def _make(reminder: Reminder, scheduled_time: datetime, **overrides) -> DoseInstance:
        dose = DoseInstance.schedule(reminder, scheduled_time, FIXED_NOW)
        for name, value in overrides.items():
            setattr(dose, name, value)
        return dose

    return _make
