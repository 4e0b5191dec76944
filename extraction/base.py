"""
Base abstract class for extraction strategies.

A strategy turns reconstructed document text into a normalized
ExtractedDocument carrying its provenance tag and confidence.
"""

from abc import ABC, abstractmethod

from core.schemas import ExtractedDocument


class ExtractionStrategy(ABC):
    """Pluggable text-to-record extraction algorithm."""

    name: str = ""

    @abstractmethod
    async def extract(self, text: str) -> ExtractedDocument:
        """
        Extract structured fields from document text.

        Implementations must pass their raw field map through
        `extraction.normalizer.normalize_document` before returning.
        """
