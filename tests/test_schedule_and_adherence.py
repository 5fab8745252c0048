"""
Schedule expansion and adherence aggregation tests.
"""

from datetime import date, datetime

from medreminder.domain.enums.reminder import DoseStatus, Frequency
from medreminder.domain.services.adherence import (
    DailyAdherence,
    current_streak,
    daily_breakdown,
    overall_stats,
    per_medicine_breakdown,
    percentage,
)
from medreminder.domain.services.schedule import date_range, scheduled_times_for_date, upcoming_days


def test_scheduled_times_for_day(make_reminder):
    reminder = make_reminder(times=["08:00", "20:00"], start_date=datetime(2024, 3, 1))
    assert scheduled_times_for_date(reminder, date(2024, 3, 6)) == [
        datetime(2024, 3, 6, 8, 0),
        datetime(2024, 3, 6, 20, 0),
    ]


def test_times_before_start_date_are_dropped(make_reminder):
    reminder = make_reminder(times=["08:00", "20:00"], start_date=datetime(2024, 3, 6, 10, 0))
    assert scheduled_times_for_date(reminder, date(2024, 3, 6)) == [datetime(2024, 3, 6, 20, 0)]


def test_weekly_reminder_skips_other_days(make_reminder):
    reminder = make_reminder(
        frequency=Frequency.WEEKLY, times=["09:00"], days_of_week=[0], start_date=datetime(2024, 3, 1)
    )
    assert scheduled_times_for_date(reminder, date(2024, 3, 6)) == []
    assert scheduled_times_for_date(reminder, date(2024, 3, 10)) == [datetime(2024, 3, 10, 9, 0)]


def test_times_after_end_date_are_dropped(make_reminder):
    reminder = make_reminder(
        times=["08:00", "20:00"], start_date=datetime(2024, 3, 1), end_date=datetime(2024, 3, 7, 12, 0)
    )
    assert scheduled_times_for_date(reminder, date(2024, 3, 7)) == [datetime(2024, 3, 7, 8, 0)]
    assert scheduled_times_for_date(reminder, date(2024, 3, 8)) == []


def test_end_date_is_inclusive(make_reminder):
    reminder = make_reminder(
        times=["08:00", "20:00"], start_date=datetime(2024, 3, 1), end_date=datetime(2024, 3, 7, 20, 0)
    )
    assert scheduled_times_for_date(reminder, date(2024, 3, 7)) == [
        datetime(2024, 3, 7, 8, 0),
        datetime(2024, 3, 7, 20, 0),
    ]


def test_no_times_no_doses(make_reminder):
    assert scheduled_times_for_date(make_reminder(times=[]), date(2024, 3, 6)) == []


def test_day_helpers():
    assert upcoming_days(date(2024, 2, 28), 2) == [date(2024, 2, 29), date(2024, 3, 1)]
    assert date_range(date(2024, 3, 1), date(2024, 3, 3)) == [
        date(2024, 3, 1),
        date(2024, 3, 2),
        date(2024, 3, 3),
    ]
    assert date_range(date(2024, 3, 3), date(2024, 3, 1)) == []


def test_percentage_rounds_half_up():
    assert percentage(0, 0) == 0
    assert percentage(3, 4) == 75
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(1, 8) == 13


def _doses(make_reminder, make_dose, plan):
    """plan: list of (medicine, scheduled_time, status)."""
    reminders = {}
    doses = []
    for medicine, when, status in plan:
        reminder = reminders.setdefault(medicine, make_reminder(medicine_name=medicine))
        doses.append(make_dose(reminder, when, status=status))
    return doses


def test_overall_stats_with_no_doses():
    stats = overall_stats([])
    assert stats.total == 0
    assert stats.completed_doses == 0
    assert stats.adherence_rate == 0


def test_overall_rate_ignores_pending(make_reminder, make_dose):
    doses = _doses(
        make_reminder,
        make_dose,
        [
            ("Aspirin", datetime(2024, 3, 4, 8, 0), DoseStatus.TAKEN),
            ("Aspirin", datetime(2024, 3, 4, 20, 0), DoseStatus.TAKEN),
            ("Aspirin", datetime(2024, 3, 5, 8, 0), DoseStatus.TAKEN),
            ("Aspirin", datetime(2024, 3, 5, 20, 0), DoseStatus.MISSED),
            ("Aspirin", datetime(2024, 3, 6, 20, 0), DoseStatus.PENDING),
        ],
    )
    stats = overall_stats(doses)
    assert stats.total == 5
    assert stats.taken == 3
    assert stats.missed == 1
    assert stats.pending == 1
    assert stats.completed_doses == 4
    assert stats.adherence_rate == 75


def test_daily_rate_counts_every_dose(make_reminder, make_dose):
    doses = _doses(
        make_reminder,
        make_dose,
        [
            ("Aspirin", datetime(2024, 3, 6, 8, 0), DoseStatus.TAKEN),
            ("Aspirin", datetime(2024, 3, 6, 20, 0), DoseStatus.PENDING),
            ("Aspirin", datetime(2024, 3, 5, 8, 0), DoseStatus.SKIPPED),
        ],
    )
    daily = daily_breakdown(doses)
    assert [d.date for d in daily] == ["2024-03-05", "2024-03-06"]
    assert daily[0].adherence_rate == 0
    assert daily[1].total == 2
    assert daily[1].adherence_rate == 50


def test_per_medicine_ordering(make_reminder, make_dose):
    doses = _doses(
        make_reminder,
        make_dose,
        [
            ("Zinc", datetime(2024, 3, 6, 8, 0), DoseStatus.TAKEN),
            ("Aspirin", datetime(2024, 3, 6, 8, 0), DoseStatus.TAKEN),
            ("Metformin", datetime(2024, 3, 6, 8, 0), DoseStatus.MISSED),
            ("Metformin", datetime(2024, 3, 6, 20, 0), DoseStatus.TAKEN),
        ],
    )
    names = [m.medicine_name for m in per_medicine_breakdown(doses)]
    assert names == ["Aspirin", "Zinc", "Metformin"]


def test_current_streak_counts_from_most_recent_day():
    daily = [
        DailyAdherence(date="2024-03-02", total=2, taken=2),
        DailyAdherence(date="2024-03-03", total=2, taken=1),
        DailyAdherence(date="2024-03-04", total=2, taken=2),
        DailyAdherence(date="2024-03-05", total=5, taken=4),
    ]
    assert current_streak(daily) == 2
    assert current_streak(daily, threshold=90) == 0
    assert current_streak([]) == 0


def test_streak_stops_at_first_low_day():
    daily = [
        DailyAdherence(date="2024-03-04", total=1, taken=1),
        DailyAdherence(date="2024-03-05", total=2, taken=1),
    ]
    assert current_streak(daily) == 0


def test_streak_only_counts_days_after_last_low_day():
    daily = [
        DailyAdherence(date="2024-03-01", total=10, taken=9),
        DailyAdherence(date="2024-03-02", total=20, taken=17),
        DailyAdherence(date="2024-03-03", total=5, taken=3),
        DailyAdherence(date="2024-03-04", total=20, taken=19),
    ]
    assert [d.adherence_rate for d in daily] == [90, 85, 60, 95]
    assert current_streak(daily) == 1
