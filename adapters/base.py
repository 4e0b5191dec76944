"""
Source adapter interface.

An adapter turns one file into a SourceExtraction: positioned elements in
page-local top-down coordinates plus raw and spatially reconstructed text.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from core.constants import RECONSTRUCTION_PARAMS
from core.models import PositionedElement, SourceExtraction, drop_blank_elements, element_from_dict
from spatial.reconstruction import reconstruct_text


class SourceAdapter(ABC):
    """Base class for all source adapters."""

    name: str = "base"

    def __init__(self, reconstruction_params: Optional[Dict] = None):
        self.reconstruction_params = dict(RECONSTRUCTION_PARAMS)
        if reconstruction_params:
            self.reconstruction_params.update(reconstruction_params)

    @abstractmethod
    async def extract(self, path: str) -> SourceExtraction:
        """
        Read a file into positioned elements and text.

        Raises:
            AdapterFailure: If the file cannot be read or decoded
        """
        pass

    def to_elements(self, candidates: Iterable[dict]) -> List[PositionedElement]:
        """Validate raw element dicts, dropping blank fragments."""
        return [element_from_dict(c) for c in drop_blank_elements(candidates)]

    def build_extraction(
        self,
        elements: List[PositionedElement],
        raw_text: str,
        metadata: Dict,
        source_confidence: Optional[float] = None
    ) -> SourceExtraction:
        """Assemble an extraction, reconstructing spatial text from the elements."""
        return SourceExtraction(
            elements=elements,
            raw_text=raw_text,
            spatial_text=reconstruct_text(elements, **self.reconstruction_params),
            metadata=metadata,
            source_confidence=source_confidence,
        )

    @staticmethod
    def file_name(path: str) -> str:
        return Path(path).name
