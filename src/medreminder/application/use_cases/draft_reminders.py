"""
Draft reminders from a prescription photo.

Text extraction and analysis are injected collaborators; this use case only
maps the medicines they return onto reminder drafts with suggested times.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.enums.reminder import Frequency
from ..ports.services.prescription_service import PrescriptionAnalyzer, TextExtractor

logger = logging.getLogger(__name__)

SUGGESTED_TIMES = {
    Frequency.ONCE_DAILY: ["08:00"],
    Frequency.TWICE_DAILY: ["08:00", "20:00"],
    Frequency.THREE_TIMES_DAILY: ["08:00", "14:00", "20:00"],
    Frequency.FOUR_TIMES_DAILY: ["07:00", "12:00", "17:00", "22:00"],
    Frequency.WEEKLY: ["08:00"],
}

_COUNT_TO_FREQUENCY = {
    1: Frequency.ONCE_DAILY,
    2: Frequency.TWICE_DAILY,
    3: Frequency.THREE_TIMES_DAILY,
    4: Frequency.FOUR_TIMES_DAILY,
}

_WORD_PATTERNS = [
    (re.compile(r"\b(weekly|once\s+a\s+week|every\s+week)\b", re.I), Frequency.WEEKLY),
    (re.compile(r"\b(four\s+times|qid|qds)\b", re.I), Frequency.FOUR_TIMES_DAILY),
    (re.compile(r"\b(thrice|three\s+times|tid|tds)\b", re.I), Frequency.THREE_TIMES_DAILY),
    (re.compile(r"\b(twice|two\s+times|bid|bd)\b", re.I), Frequency.TWICE_DAILY),
    (re.compile(r"\b(once|od|daily|morning|evening|night|bedtime)\b", re.I), Frequency.ONCE_DAILY),
]
_TIMES_A_DAY = re.compile(r"(\d+)\s*times?\s*(?:a\s*)?(?:day|daily)", re.I)
# 1-0-1 style morning/noon/night schedules
_DOSE_GRID = re.compile(r"\b([01])\s*-\s*([01])\s*-\s*([01])(?:\s*-\s*([01]))?\b")


def infer_frequency(hint: Optional[str]) -> Frequency:
    """Best-effort frequency class from a free-text hint; once daily when unsure."""
    if not hint:
        return Frequency.ONCE_DAILY

    grid = _DOSE_GRID.search(hint)
    if grid:
        count = sum(int(g) for g in grid.groups() if g)
        return _COUNT_TO_FREQUENCY.get(count, Frequency.ONCE_DAILY)

    numeric = _TIMES_A_DAY.search(hint)
    if numeric:
        return _COUNT_TO_FREQUENCY.get(int(numeric.group(1)), Frequency.CUSTOM)

    for pattern, frequency in _WORD_PATTERNS:
        if pattern.search(hint):
            return frequency
    return Frequency.ONCE_DAILY


@dataclass
class ReminderDraft:
    """Unsaved reminder fields suggested for one medicine."""

    medicine_name: str
    dosage: Optional[str]
    instructions: Optional[str]
    frequency: str
    times: List[str] = field(default_factory=list)


class DraftRemindersFromPrescriptionUseCase:
    """Turn a prescription image into reminder drafts."""

    def __init__(self, text_extractor: TextExtractor, analyzer: PrescriptionAnalyzer):
        self._text_extractor = text_extractor
        self._analyzer = analyzer

    async def execute(self, image: bytes) -> List[ReminderDraft]:
        text = await self._text_extractor.extract(image)
        if not text or not text.strip():
            logger.warning("Prescription image produced no text")
            return []

        analysis = await self._analyzer.analyze(text)
        drafts = []
        for medicine in analysis.medicines:
            if not medicine.name or not medicine.name.strip():
                continue
            frequency = infer_frequency(medicine.frequency)
            drafts.append(
                ReminderDraft(
                    medicine_name=medicine.name.strip(),
                    dosage=medicine.dosage,
                    instructions=medicine.instructions,
                    frequency=frequency.value,
                    times=list(SUGGESTED_TIMES.get(frequency, ["08:00"])),
                )
            )

        logger.info(f"Drafted {len(drafts)} reminder(s) from prescription")
        return drafts
