"""
Adherence aggregation over a window of dose instances.

Overall rate divides taken by completed doses (taken + skipped + missed),
while daily and per-medicine rates divide by every dose in the group.
Both formulas are kept as they are.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List

from ...core.utils.datetime_utils import day_key
from ..entities.dose import DoseInstance
from ..enums.reminder import DoseStatus

DEFAULT_STREAK_THRESHOLD = 80


def percentage(part: int, whole: int) -> int:
    """round(part / whole * 100) with halves rounded up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)


@dataclass
class OverallStats:
    total: int = 0
    taken: int = 0
    skipped: int = 0
    missed: int = 0
    pending: int = 0

    @property
    def completed_doses(self) -> int:
        return self.taken + self.skipped + self.missed

    @property
    def adherence_rate(self) -> int:
        return percentage(self.taken, self.completed_doses)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["completed_doses"] = self.completed_doses
        data["adherence_rate"] = self.adherence_rate
        return data


@dataclass
class DailyAdherence:
    date: str
    total: int = 0
    taken: int = 0

    @property
    def adherence_rate(self) -> int:
        return percentage(self.taken, self.total)

    def to_dict(self) -> Dict[str, Any]:
        return {**asdict(self), "adherence_rate": self.adherence_rate}


@dataclass
class MedicineAdherence:
    medicine_name: str
    total: int = 0
    taken: int = 0

    @property
    def adherence_rate(self) -> int:
        return percentage(self.taken, self.total)

    def to_dict(self) -> Dict[str, Any]:
        return {**asdict(self), "adherence_rate": self.adherence_rate}


def overall_stats(doses: Iterable[DoseInstance]) -> OverallStats:
    stats = OverallStats()
    for dose in doses:
        stats.total += 1
        if dose.status == DoseStatus.TAKEN:
            stats.taken += 1
        elif dose.status == DoseStatus.SKIPPED:
            stats.skipped += 1
        elif dose.status == DoseStatus.MISSED:
            stats.missed += 1
        else:
            stats.pending += 1
    return stats


def daily_breakdown(doses: Iterable[DoseInstance]) -> List[DailyAdherence]:
    """Per-day totals keyed by the dose's own scheduled date, oldest first."""
    days: Dict[str, DailyAdherence] = {}
    for dose in doses:
        key = day_key(dose.scheduled_time)
        entry = days.setdefault(key, DailyAdherence(date=key))
        entry.total += 1
        if dose.status == DoseStatus.TAKEN:
            entry.taken += 1
    return [days[key] for key in sorted(days)]


def per_medicine_breakdown(doses: Iterable[DoseInstance]) -> List[MedicineAdherence]:
    """Per-medicine totals, best adherence first (ties by name)."""
    medicines: Dict[str, MedicineAdherence] = {}
    for dose in doses:
        entry = medicines.setdefault(dose.medicine_name, MedicineAdherence(medicine_name=dose.medicine_name))
        entry.total += 1
        if dose.status == DoseStatus.TAKEN:
            entry.taken += 1
    return sorted(medicines.values(), key=lambda m: (-m.adherence_rate, m.medicine_name))


def current_streak(daily: List[DailyAdherence], threshold: int = DEFAULT_STREAK_THRESHOLD) -> int:
    """Consecutive most-recent days at or above ``threshold``."""
    streak = 0
    for day in reversed(daily):
        if day.adherence_rate < threshold:
            break
        streak += 1
    return streak
