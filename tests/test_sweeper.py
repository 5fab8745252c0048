"""
Dose sweeper tests: upcoming generation and the missed transition.
"""

from datetime import datetime

import pytest

from medreminder.application.use_cases.sweep_doses import DoseSweeper
from medreminder.domain.enums.reminder import DoseStatus


@pytest.fixture
def sweeper(reminder_repo, dose_repo, generator, clock):
    return DoseSweeper(reminder_repo, dose_repo, generator, clock, days_ahead=1, missed_after_minutes=180)


@pytest.mark.asyncio
async def test_sweep_creates_today_and_tomorrow(sweeper, reminder_repo, dose_repo, make_reminder):
    await reminder_repo.save(make_reminder(start_date=datetime(2024, 3, 1)))

    summary = await sweeper.sweep_once()

    assert summary.reminders_scanned == 1
    assert summary.doses_created == 4
    assert summary.doses_missed == 0
    assert [d.scheduled_time for d in dose_repo.all()] == [
        datetime(2024, 3, 6, 8, 0),
        datetime(2024, 3, 6, 20, 0),
        datetime(2024, 3, 7, 8, 0),
        datetime(2024, 3, 7, 20, 0),
    ]


@pytest.mark.asyncio
async def test_sweep_twice_changes_nothing(sweeper, reminder_repo, dose_repo, make_reminder):
    await reminder_repo.save(make_reminder(start_date=datetime(2024, 3, 1)))
    await sweeper.sweep_once()

    summary = await sweeper.sweep_once()

    assert summary.doses_created == 0
    assert summary.doses_missed == 0
    assert len(dose_repo.doses) == 4


@pytest.mark.asyncio
async def test_overdue_pending_doses_become_missed(sweeper, reminder_repo, dose_repo, clock, make_reminder):
    await reminder_repo.save(make_reminder(start_date=datetime(2024, 3, 1)))
    await sweeper.sweep_once()

    clock.advance(hours=1, minutes=1)
    summary = await sweeper.sweep_once()

    assert summary.doses_missed == 1
    statuses = [d.status for d in dose_repo.all()]
    assert statuses == [DoseStatus.MISSED, DoseStatus.PENDING, DoseStatus.PENDING, DoseStatus.PENDING]


@pytest.mark.asyncio
async def test_logged_doses_are_left_alone(sweeper, reminder_repo, dose_repo, clock, make_reminder):
    await reminder_repo.save(make_reminder(start_date=datetime(2024, 3, 1), times=["08:00"]))
    await sweeper.sweep_once()
    morning = dose_repo.all()[0]
    dose_repo.doses[morning.dose_id.value].status = DoseStatus.TAKEN

    clock.advance(hours=3)
    summary = await sweeper.sweep_once()

    assert summary.doses_missed == 0
    assert dose_repo.doses[morning.dose_id.value].status == DoseStatus.TAKEN


@pytest.mark.asyncio
async def test_active_snooze_postpones_missed(sweeper, reminder_repo, dose_repo, clock, make_reminder):
    await reminder_repo.save(make_reminder(start_date=datetime(2024, 3, 1), times=["08:00"]))
    await sweeper.sweep_once()
    morning = dose_repo.all()[0]
    dose_repo.doses[morning.dose_id.value].snoozed_until = datetime(2024, 3, 6, 12, 0)

    clock.advance(hours=2)
    assert (await sweeper.sweep_once()).doses_missed == 0

    clock.advance(hours=4)
    assert (await sweeper.sweep_once()).doses_missed == 1


@pytest.mark.asyncio
async def test_ended_paused_and_inactive_reminders_are_skipped(sweeper, reminder_repo, dose_repo, make_reminder):
    await reminder_repo.save(make_reminder(start_date=datetime(2024, 2, 1), end_date=datetime(2024, 3, 5)))
    await reminder_repo.save(make_reminder(is_paused=True))
    await reminder_repo.save(make_reminder(is_active=False))

    summary = await sweeper.sweep_once()

    assert summary.reminders_scanned == 0
    assert dose_repo.doses == {}


@pytest.mark.asyncio
async def test_reminder_ending_today_gets_no_tomorrow(sweeper, reminder_repo, dose_repo, make_reminder):
    await reminder_repo.save(
        make_reminder(start_date=datetime(2024, 3, 1), end_date=datetime(2024, 3, 6, 23, 0))
    )

    summary = await sweeper.sweep_once()

    assert summary.doses_created == 2
    assert {d.scheduled_time.date() for d in dose_repo.all()} == {datetime(2024, 3, 6).date()}


@pytest.mark.asyncio
async def test_no_doses_after_midday_end_date(sweeper, reminder_repo, dose_repo, clock, make_reminder):
    await reminder_repo.save(
        make_reminder(start_date=datetime(2024, 3, 1), end_date=datetime(2024, 3, 7, 12, 0))
    )

    summary = await sweeper.sweep_once()
    assert summary.doses_created == 3
    assert max(d.scheduled_time for d in dose_repo.all()) == datetime(2024, 3, 7, 8, 0)

    clock.advance(days=2)
    summary = await sweeper.sweep_once()

    assert summary.doses_created == 0
    assert summary.doses_missed == 3
    assert all(d.scheduled_time <= datetime(2024, 3, 7, 12, 0) for d in dose_repo.all())


@pytest.mark.asyncio
async def test_generation_failure_is_counted(sweeper, reminder_repo, generator, make_reminder):
    await reminder_repo.save(make_reminder(start_date=datetime(2024, 3, 1)))

    async def broken(reminder, day):
        raise RuntimeError("database unavailable")

    generator.generate_for_date = broken
    summary = await sweeper.sweep_once()

    assert summary.failures == 1
    assert summary.doses_created == 0
