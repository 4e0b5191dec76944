"""
Pydantic schemas for the canonical extraction record.

Every field is optional/nullable; `extraction.normalizer` is the only place that
coerces loosely-typed backend output into these models. Records are frozen and
serialize with camelCase keys.
"""
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .constants import DEFAULT_CURRENCY, DEFAULT_UNIT, DOCUMENT_TYPES


class RecordModel(BaseModel):
    """Base for immutable, camelCase-serialized record models."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra='allow',
    )

    def to_payload(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode='json')


class Party(RecordModel):
    """Supplier or buyer identification."""
    name: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    iban: Optional[str] = None


class LineItem(RecordModel):
    """One row of the document's item table."""
    position: Optional[int] = None
    code: Optional[str] = None
    description: str = ""
    quantity: Optional[float] = None
    unit: str = DEFAULT_UNIT
    unit_price: Optional[float] = None
    discount_percent: Optional[float] = None
    total_price: Optional[float] = None

    @field_validator('position', mode='before')
    @classmethod
    def _coerce_position(cls, value):
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return None


class Totals(RecordModel):
    """Document totals."""
    subtotal: Optional[float] = None
    vat_amount: Optional[float] = None
    total_amount: Optional[float] = None


class ExtractedDocument(RecordModel):
    """Normalized analysis payload of one document."""
    document_type: str = 'other'
    document_number: Optional[str] = None
    date: Optional[str] = None
    due_date: Optional[str] = None
    currency: str = DEFAULT_CURRENCY
    supplier: Party = Party()
    buyer: Party = Party()
    items: Tuple[LineItem, ...] = ()
    totals: Totals = Totals()
    confidence: float = 0.0
    analysis_method: str = ""

    @field_validator('document_type', mode='before')
    @classmethod
    def _known_document_type(cls, value):
        if isinstance(value, str) and value.strip().lower() in DOCUMENT_TYPES:
            return value.strip().lower()
        return 'other'

    @field_validator('confidence', mode='before')
    @classmethod
    def _clamp_confidence(cls, value):
        try:
            value = float(value)
        except (TypeError, ValueError):
            return 0.0
        if value != value:
            return 0.0
        return min(1.0, max(0.0, value))


class ProcessedDocument(RecordModel):
    """Per-file result of one processing run."""
    id: str
    file_name: str
    file_type: str = ""
    file_size: int = 0
    upload_date: str
    status: Literal['processed', 'error'] = 'processed'
    error: Optional[str] = None
    document_type: str = 'other'
    analysis: ExtractedDocument = ExtractedDocument()
    raw_text: str = ""
    spatial_text: str = ""
    element_count: int = 0

    @property
    def is_error(self) -> bool:
        return self.status == 'error'

    def with_analysis(self, analysis: ExtractedDocument) -> "ProcessedDocument":
        """Return a copy carrying a replaced analysis record."""
        return self.model_copy(update={
            'analysis': analysis,
            'document_type': analysis.document_type,
        })
