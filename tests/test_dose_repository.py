"""
MongoDoseRepository tests against an in-process stand-in for the dose collection.

The Beanie class methods the repository calls are monkeypatched to read and
write a plain list of documents, so the Mongo filters themselves are exercised.
"""

import operator
from datetime import datetime
from types import SimpleNamespace

import pytest
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from medreminder.adapters.db.mongo.models.reminder_m import DoseInstanceMongo
from medreminder.adapters.db.mongo.repositories.dose_repository import MongoDoseRepository
from medreminder.core.exceptions import DatabaseError
from medreminder.domain.enums.reminder import DoseStatus

_COMPARISONS = {"$lt": operator.lt, "$lte": operator.le, "$gte": operator.ge}


def _matches(document, query) -> bool:
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(document, branch) for branch in condition):
                return False
            continue
        value = getattr(document, key)
        if isinstance(condition, dict):
            for op, operand in condition.items():
                # Range operators never match a null field
                if value is None or not _COMPARISONS[op](value, operand):
                    return False
        elif value != condition:
            return False
    return True


class FakeQuery:
    def __init__(self, documents):
        self._documents = list(documents)

    def sort(self, spec):
        for key, direction in reversed(spec):
            self._documents.sort(key=lambda d: getattr(d, key), reverse=direction == DESCENDING)
        return self

    def limit(self, count):
        self._documents = self._documents[:count]
        return self

    async def to_list(self):
        return list(self._documents)

    async def count(self):
        return len(self._documents)


class FakeDoseCollection:
    def __init__(self):
        self.documents = []

    def matching(self, query):
        return [d for d in self.documents if _matches(d, query)]

    async def update_one(self, query, update):
        matched = self.matching(query)[:1]
        for document in matched:
            for name, value in update["$set"].items():
                setattr(document, name, value)
        return SimpleNamespace(matched_count=len(matched))

    async def delete_many(self, query):
        doomed = {id(d) for d in self.matching(query)}
        self.documents = [d for d in self.documents if id(d) not in doomed]
        return SimpleNamespace(deleted_count=len(doomed))


@pytest.fixture
def collection(monkeypatch):
    collection = FakeDoseCollection()

    async def insert(self, *args, **kwargs):
        for existing in collection.documents:
            same_slot = (existing.reminder_id, existing.scheduled_time) == (self.reminder_id, self.scheduled_time)
            if existing.dose_id == self.dose_id or same_slot:
                raise DuplicateKeyError("E11000 duplicate key error collection: dose_instances", 11000)
        collection.documents.append(self)
        return self

    async def find_one(cls, query):
        found = collection.matching(query)
        return found[0] if found else None

    monkeypatch.setattr(DoseInstanceMongo, "get_motor_collection", classmethod(lambda cls: collection))
    monkeypatch.setattr(DoseInstanceMongo, "find_one", classmethod(find_one))
    monkeypatch.setattr(DoseInstanceMongo, "find", classmethod(lambda cls, query: FakeQuery(collection.matching(query))))
    monkeypatch.setattr(DoseInstanceMongo, "insert", insert)
    return collection


@pytest.fixture
def repository(collection):
    return MongoDoseRepository()


@pytest.fixture
def reminder(make_reminder):
    return make_reminder(start_date=datetime(2024, 3, 1))


@pytest.mark.asyncio
async def test_create_if_absent_keeps_one_dose_per_slot(repository, collection, reminder, make_dose):
    assert await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, 8, 0))) is True
    assert await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, 8, 0))) is False
    assert await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, 20, 0))) is True

    assert [d.scheduled_time for d in collection.documents] == [
        datetime(2024, 3, 6, 8, 0),
        datetime(2024, 3, 6, 20, 0),
    ]
    assert await repository.exists_for_slot(reminder.reminder_id, datetime(2024, 3, 6, 8, 0))
    assert not await repository.exists_for_slot(reminder.reminder_id, datetime(2024, 3, 7, 8, 0))


@pytest.mark.asyncio
async def test_duplicate_key_on_insert_means_already_created(
    repository, collection, reminder, make_dose, monkeypatch
):
    await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, 8, 0)))

    # A concurrent writer inserted between the existence check and our insert
    async def nothing_found(cls, query):
        return None

    monkeypatch.setattr(DoseInstanceMongo, "find_one", classmethod(nothing_found))

    assert await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, 8, 0))) is False
    assert len(collection.documents) == 1


@pytest.mark.asyncio
async def test_find_by_id_is_owner_scoped(repository, reminder, make_dose):
    dose = make_dose(reminder, datetime(2024, 3, 6, 8, 0), family_member_id="fm_1")
    await repository.create_if_absent(dose)

    found = await repository.find_by_id(dose.dose_id, "user_1")
    assert found.dose_id == dose.dose_id
    assert found.status == DoseStatus.PENDING
    assert found.family_member_id == "fm_1"
    assert await repository.find_by_id(dose.dose_id, "user_2") is None


@pytest.mark.asyncio
async def test_save_transition_only_from_expected_status(repository, reminder, make_dose):
    dose = make_dose(reminder, datetime(2024, 3, 6, 8, 0))
    await repository.create_if_absent(dose)

    taken = await repository.find_by_id(dose.dose_id, "user_1")
    taken.apply_status(DoseStatus.TAKEN, datetime(2024, 3, 6, 8, 5))
    assert await repository.save_transition(taken, DoseStatus.PENDING) is True

    # A second writer that still believes the dose is pending loses
    skipped = await repository.find_by_id(dose.dose_id, "user_1")
    skipped.status = DoseStatus.SKIPPED
    assert await repository.save_transition(skipped, DoseStatus.PENDING) is False

    stored = await repository.find_by_id(dose.dose_id, "user_1")
    assert stored.status == DoseStatus.TAKEN
    assert stored.taken_at == datetime(2024, 3, 6, 8, 5)


@pytest.mark.asyncio
async def test_latest_pending_is_by_scheduled_time(repository, reminder, make_dose):
    for hour in (8, 20):
        await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, hour, 0)))
    await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 7, 8, 0), status=DoseStatus.TAKEN))

    latest = await repository.find_latest_pending_for_reminder(reminder.reminder_id, "user_1")
    assert latest.scheduled_time == datetime(2024, 3, 6, 20, 0)


@pytest.mark.asyncio
async def test_overdue_pending_respects_active_snooze(repository, reminder, make_dose):
    cutoff = datetime(2024, 3, 6, 10, 0)
    plan = [
        (datetime(2024, 3, 6, 6, 0), {}),
        (datetime(2024, 3, 6, 6, 30), {"snoozed_until": datetime(2024, 3, 6, 12, 0)}),
        (datetime(2024, 3, 6, 7, 0), {"snoozed_until": datetime(2024, 3, 6, 7, 30)}),
        (datetime(2024, 3, 6, 7, 30), {"status": DoseStatus.TAKEN}),
        (datetime(2024, 3, 6, 11, 0), {}),
    ]
    for when, overrides in plan:
        await repository.create_if_absent(make_dose(reminder, when, **overrides))

    overdue = await repository.find_overdue_pending(cutoff)
    assert [d.scheduled_time for d in overdue] == [datetime(2024, 3, 6, 6, 0), datetime(2024, 3, 6, 7, 0)]

    assert len(await repository.find_overdue_pending(cutoff, limit=1)) == 1


@pytest.mark.asyncio
async def test_due_for_notification_uses_snooze_time(repository, reminder, make_dose):
    now = datetime(2024, 3, 6, 10, 0)
    plan = [
        (datetime(2024, 3, 6, 8, 0), {}),
        (datetime(2024, 3, 6, 8, 30), {"snoozed_until": datetime(2024, 3, 6, 11, 0)}),
        (datetime(2024, 3, 6, 7, 0), {"snoozed_until": datetime(2024, 3, 6, 9, 30)}),
        (datetime(2024, 3, 6, 9, 0), {"notification_sent": True}),
        (datetime(2024, 3, 6, 10, 30), {}),
    ]
    for when, overrides in plan:
        await repository.create_if_absent(make_dose(reminder, when, **overrides))

    due = await repository.find_due_for_notification("user_1", now)
    assert [d.due_at for d in due] == [datetime(2024, 3, 6, 8, 0), datetime(2024, 3, 6, 9, 30)]
    assert await repository.find_due_for_notification("user_2", now) == []


@pytest.mark.asyncio
async def test_delete_by_reminder_counts(repository, collection, reminder, make_reminder, make_dose):
    other = make_reminder(medicine_name="Zinc")
    for hour in (8, 20):
        await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, hour, 0)))
    await repository.create_if_absent(make_dose(other, datetime(2024, 3, 6, 8, 0)))

    assert await repository.delete_by_reminder(reminder.reminder_id) == 2
    assert [d.medicine_name for d in collection.documents] == ["Zinc"]


@pytest.mark.asyncio
async def test_driver_failure_becomes_database_error(repository, reminder, make_dose, monkeypatch):
    async def unreachable(cls, query):
        raise ServerSelectionTimeoutError("No servers found yet")

    monkeypatch.setattr(DoseInstanceMongo, "find_one", classmethod(unreachable))

    with pytest.raises(DatabaseError):
        await repository.create_if_absent(make_dose(reminder, datetime(2024, 3, 6, 8, 0)))
