"""
Unit tests for core.schemas module.
"""
import pytest
from pydantic import ValidationError

from core.constants import DOCUMENT_TYPES
from core.schemas import ExtractedDocument, LineItem, Party, ProcessedDocument, Totals


class TestExtractedDocument:
    """Tests for ExtractedDocument schema."""

    def test_defaults(self):
        doc = ExtractedDocument()

        assert doc.document_type == 'other'
        assert doc.currency == 'EUR'
        assert doc.items == ()
        assert doc.confidence == 0.0
        assert doc.totals == Totals()

    def test_unknown_document_type_becomes_other(self):
        assert ExtractedDocument(document_type='unknown').document_type == 'other'
        assert ExtractedDocument(document_type=' Invoice ').document_type == 'invoice'

    @pytest.mark.parametrize("document_type", sorted(DOCUMENT_TYPES))
    def test_known_document_types_kept(self, document_type):
        doc = ExtractedDocument(document_type=f" {document_type.upper()} ")

        assert doc.document_type == document_type

    def test_confidence_clamped(self):
        assert ExtractedDocument(confidence=1.7).confidence == 1.0
        assert ExtractedDocument(confidence=-2).confidence == 0.0
        assert ExtractedDocument(confidence='high').confidence == 0.0

    def test_payload_uses_camel_case(self):
        doc = ExtractedDocument(
            document_number="R-1",
            due_date="2025-07-08",
            supplier=Party(tax_id="12345678901"),
            totals=Totals(vat_amount=250.0),
        )

        payload = doc.to_payload()

        assert payload['documentNumber'] == "R-1"
        assert payload['dueDate'] == "2025-07-08"
        assert payload['supplier']['taxId'] == "12345678901"
        assert payload['totals']['vatAmount'] == 250.0

    def test_payload_round_trip(self):
        doc = ExtractedDocument(items=(LineItem(position=1, description="Screws", unit_price=4.25),))

        assert ExtractedDocument.model_validate(doc.to_payload()) == doc

    def test_frozen(self):
        doc = ExtractedDocument()

        with pytest.raises(ValidationError):
            doc.currency = 'BAM'

    def test_extra_keys_kept(self):
        doc = ExtractedDocument.model_validate({'projectNote': 'site B'})

        assert doc.to_payload()['projectNote'] == 'site B'


class TestLineItem:
    """Tests for LineItem schema."""

    def test_defaults(self):
        item = LineItem()

        assert item.unit == 'kom'
        assert item.description == ""
        assert item.quantity is None

    def test_position_coerced(self):
        assert LineItem(position="3").position == 3
        assert LineItem(position=2.0).position == 2
        assert LineItem(position="x").position is None


class TestProcessedDocument:
    """Tests for ProcessedDocument schema."""

    def test_with_analysis_syncs_type(self):
        record = ProcessedDocument(id="DOC-1", file_name="a.pdf", upload_date="2025-01-01T00:00:00+00:00")

        updated = record.with_analysis(ExtractedDocument(document_type='quote'))

        assert updated.document_type == 'quote'
        assert record.document_type == 'other'
        assert not updated.is_error
