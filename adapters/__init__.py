"""Adapters package - Source files to positioned elements and text."""

from .base import SourceAdapter
from .pdf_adapter import PdfTextAdapter, read_pdf_spans
from .ocr_adapter import VisionOcrAdapter
from .spreadsheet_adapter import SpreadsheetAdapter
from .text_adapter import PlainTextAdapter
from .registry import AdapterRegistry, classify_source, select_adapter

__all__ = [
    'SourceAdapter',
    'PdfTextAdapter',
    'read_pdf_spans',
    'VisionOcrAdapter',
    'SpreadsheetAdapter',
    'PlainTextAdapter',
    'AdapterRegistry',
    'classify_source',
    'select_adapter',
]
