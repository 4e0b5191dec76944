"""Core package - Domain models, record schemas, exceptions and constants."""

from .models import (
    PositionedElement,
    SourceExtraction,
    drop_blank_elements,
    element_from_dict,
    round_coord,
)
from .schemas import ExtractedDocument, LineItem, Party, Totals, ProcessedDocument
from .exceptions import InvoflowError, AdapterFailure, LLMBackendError
from .constants import (
    RECONSTRUCTION_PARAMS,
    DEFAULT_LLM_PARAMS,
    DEFAULT_OCR_PARAMS,
    DOCUMENT_TYPES,
    CONFIDENCE,
    LLM_SYSTEM_PROMPT,
    GROUNDING_PATTERN,
)

__all__ = [
    'PositionedElement',
    'SourceExtraction',
    'drop_blank_elements',
    'element_from_dict',
    'round_coord',
    'ExtractedDocument',
    'LineItem',
    'Party',
    'Totals',
    'ProcessedDocument',
    'InvoflowError',
    'AdapterFailure',
    'LLMBackendError',
    'RECONSTRUCTION_PARAMS',
    'DEFAULT_LLM_PARAMS',
    'DEFAULT_OCR_PARAMS',
    'DOCUMENT_TYPES',
    'CONFIDENCE',
    'LLM_SYSTEM_PROMPT',
    'GROUNDING_PATTERN',
]
