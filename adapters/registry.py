"""
Adapter selection by MIME type and file extension.

Order: PDF, image, spreadsheet/CSV, then plain text for everything else.
"""
import mimetypes
import re
from pathlib import Path
from typing import Dict, Optional

from core.exceptions import AdapterFailure
from .base import SourceAdapter
from .ocr_adapter import VisionOcrAdapter
from .pdf_adapter import PdfTextAdapter
from .spreadsheet_adapter import SpreadsheetAdapter
from .text_adapter import PlainTextAdapter

SPREADSHEET_EXTENSIONS = re.compile(r'\.(xlsx?|csv)$', re.IGNORECASE)


def guess_mime_type(path: str) -> str:
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type or ""


def classify_source(path: str, mime_type: Optional[str] = None) -> str:
    """
    Source kind of a file: 'pdf', 'image', 'spreadsheet' or 'text'.
    """
    mime_type = mime_type or guess_mime_type(path)
    if mime_type == 'application/pdf' or Path(path).suffix.lower() == '.pdf':
        return 'pdf'
    if mime_type.startswith('image/'):
        return 'image'
    if 'sheet' in mime_type or 'excel' in mime_type or SPREADSHEET_EXTENSIONS.search(path):
        return 'spreadsheet'
    return 'text'


class AdapterRegistry:
    """Holds one adapter per source kind."""

    def __init__(self, adapters: Optional[Dict[str, SourceAdapter]] = None, ocr_adapter=None):
        """
        Args:
            adapters: Overrides keyed by source kind
            ocr_adapter: Adapter for images and text-less PDF pages
        """
        self.ocr_adapter = ocr_adapter
        self.adapters: Dict[str, SourceAdapter] = {
            'pdf': PdfTextAdapter(ocr_adapter=ocr_adapter),
            'spreadsheet': SpreadsheetAdapter(),
            'text': PlainTextAdapter(),
        }
        if ocr_adapter is not None:
            self.adapters['image'] = ocr_adapter
        self.adapters.update(adapters or {})

    @classmethod
    def from_settings(cls, settings, with_ocr: bool = True) -> "AdapterRegistry":
        params = settings.get_reconstruction_params()
        ocr_adapter = VisionOcrAdapter.from_settings(settings) if with_ocr else None
        return cls(
            adapters={
                'pdf': PdfTextAdapter(ocr_adapter=ocr_adapter, reconstruction_params=params),
                'spreadsheet': SpreadsheetAdapter(reconstruction_params=params),
                'text': PlainTextAdapter(reconstruction_params=params),
            },
            ocr_adapter=ocr_adapter,
        )

    def select(self, path: str, mime_type: Optional[str] = None) -> SourceAdapter:
        """
        Pick the adapter for a file.

        Raises:
            AdapterFailure: For images when no OCR adapter is configured
        """
        kind = classify_source(path, mime_type)
        if kind not in self.adapters:
            raise AdapterFailure(Path(path).name, f"No adapter configured for {kind} files")
        return self.adapters[kind]


def select_adapter(
    path: str,
    mime_type: Optional[str] = None,
    registry: Optional[AdapterRegistry] = None
) -> SourceAdapter:
    """Select an adapter from the given registry (default: no OCR)."""
    return (registry or AdapterRegistry()).select(path, mime_type)
