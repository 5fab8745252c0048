"""
Prescription reading interfaces (OCR and text analysis collaborators).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ExtractedMedicine:
    """A medicine line as understood by the analyzer."""

    name: str
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    # Free-form hint such as "twice daily" or "1-0-1"
    frequency: Optional[str] = None


@dataclass
class PrescriptionAnalysis:
    """Structured result of analysing prescription text."""

    medicines: List[ExtractedMedicine] = field(default_factory=list)
    raw_text: str = ""


class TextExtractor(ABC):
    """Turns a prescription image into plain text."""

    @abstractmethod
    async def extract(self, image: bytes) -> str:
        """
        Extract text from a prescription image.

        Args:
            image: Raw image bytes

        Returns:
            Extracted text content (may be empty)
        """
        pass


class PrescriptionAnalyzer(ABC):
    """Turns prescription text into a list of medicines."""

    @abstractmethod
    async def analyze(self, text: str) -> PrescriptionAnalysis:
        """
        Parse raw prescription text into structured data.

        Args:
            text: Raw text extracted from a prescription image

        Returns:
            Structured analysis with the medicines found
        """
        pass
