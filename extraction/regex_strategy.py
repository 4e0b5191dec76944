"""
Regex Extraction Strategy

Deterministic fallback extractor. Applies a configurable table of
locale-aware patterns to reconstructed text; fields without a match stay
None. Coverage is intentionally smaller than the LLM strategy.
"""
import logging
import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from core.constants import (
    CONFIDENCE,
    DEFAULT_DOCUMENT_TYPE,
    DOCUMENT_TYPE_KEYWORDS,
    METHOD_REGEX,
    REGEX_FIELD_PATTERNS,
)
from core.schemas import ExtractedDocument
from .assembler import is_numeric_path, set_path
from .base import ExtractionStrategy
from .normalizer import normalize_document

logger = logging.getLogger(__name__)


class RegexExtractionStrategy(ExtractionStrategy):
    """
    Pattern-table extractor.

    Custom patterns are tried before the defaults for the same field path;
    pass `include_defaults=False` to use only the given table.
    """

    name = "regex"

    def __init__(
        self,
        patterns: Optional[Dict[str, Sequence[str]]] = None,
        type_keywords: Optional[Iterable[Tuple[str, Sequence[str]]]] = None,
        include_defaults: bool = True
    ):
        table: Dict[str, List[str]] = {}
        if include_defaults:
            table = {path: list(pats) for path, pats in REGEX_FIELD_PATTERNS.items()}
        for path, pats in (patterns or {}).items():
            table[path] = list(pats) + table.get(path, [])

        self.patterns: Dict[str, List[Pattern]] = {
            path: [re.compile(p, re.IGNORECASE) for p in pats]
            for path, pats in table.items()
        }
        self.type_keywords = list(type_keywords or DOCUMENT_TYPE_KEYWORDS)

    def detect_document_type(self, text: str) -> str:
        """Coarse type detection by lowercase keyword containment."""
        lower = text.lower()
        for doc_type, keywords in self.type_keywords:
            if any(keyword in lower for keyword in keywords):
                return doc_type
        return DEFAULT_DOCUMENT_TYPE

    def match_field(self, text: str, path: str) -> Optional[str]:
        """First capture group (or whole match) of the first matching pattern."""
        for pattern in self.patterns.get(path, []):
            match = pattern.search(text)
            if not match:
                continue
            value = match.group(1) if match.groups() and match.group(1) is not None else match.group(0)
            value = value.strip()
            if is_numeric_path(path):
                value = value.rstrip('.,')
            if value:
                return value
        return None

    def analyze(self, text: str) -> ExtractedDocument:
        """
        Run every pattern against the text.

        Never raises; unmatched fields are None.
        """
        text = text or ""
        raw: dict = {'documentType': self.detect_document_type(text)}

        for path in self.patterns:
            value = self.match_field(text, path)
            if value is not None:
                set_path(raw, path, value)

        logger.debug("Regex extraction matched fields: %s", sorted(k for k in raw if k != 'documentType'))
        return normalize_document(raw, METHOD_REGEX, CONFIDENCE[METHOD_REGEX])

    async def extract(self, text: str) -> ExtractedDocument:
        return self.analyze(text)
