"""Extraction package - Field normalization, extraction strategies and record assembly."""

from .normalizer import (
    parse_locale_number,
    parse_locale_date,
    normalize_document,
    normalize_party,
    normalize_item,
    normalize_totals,
    empty_document,
    conform_payload,
)
from .base import ExtractionStrategy
from .regex_strategy import RegexExtractionStrategy
from .llm_strategy import LLMExtractionStrategy, LLMOutcome, OutcomeStatus
from .analyzer import DocumentAnalyzer
from .assembler import (
    apply_field_edit,
    apply_document_edit,
    assemble_record,
    error_record,
    set_path,
    coerce_edit_value,
    is_numeric_path,
)

__all__ = [
    # Normalizer
    'parse_locale_number',
    'parse_locale_date',
    'normalize_document',
    'normalize_party',
    'normalize_item',
    'normalize_totals',
    'empty_document',
    'conform_payload',

    # Strategies
    'ExtractionStrategy',
    'RegexExtractionStrategy',
    'LLMExtractionStrategy',
    'LLMOutcome',
    'OutcomeStatus',
    'DocumentAnalyzer',

    # Assembler
    'apply_field_edit',
    'apply_document_edit',
    'assemble_record',
    'error_record',
    'set_path',
    'coerce_edit_value',
    'is_numeric_path',
]
