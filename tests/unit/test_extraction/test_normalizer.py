"""
Unit tests for extraction.normalizer module.
"""
from datetime import date

import pytest

from extraction.normalizer import (
    conform_payload,
    empty_document,
    normalize_document,
    normalize_item,
    normalize_party,
    parse_locale_date,
    parse_locale_number,
)


class TestParseLocaleNumber:
    """Tests for parse_locale_number function."""

    @pytest.mark.parametrize("raw, expected", [
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("4,25", 4.25),
        ("1234.5", 1234.5),
        ("1 234,56", 1234.56),
        ("150,00 EUR", 150.0),
        ("EUR 99,90", 99.9),
        ("€12,50", 12.5),
        ("-3,5", -3.5),
        (1234.5, 1234.5),
        (7, 7.0),
    ])
    def test_parses(self, raw, expected):
        assert parse_locale_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["abc", "", "   ", None, True, float('nan'), float('inf')])
    def test_unparseable_is_none(self, raw):
        assert parse_locale_number(raw) is None


class TestParseLocaleDate:
    """Tests for parse_locale_date function."""

    @pytest.mark.parametrize("raw, expected", [
        ("08.07.25", "2025-07-08"),
        ("8.7.2025.", "2025-07-08"),
        ("08/07/2025", "2025-07-08"),
        ("8-7-25", "2025-07-08"),
        ("Datum: 15.03.2024", "2024-03-15"),
        ("2025-07-08", "2025-07-08"),
        ("2025-07-08T10:30:00", "2025-07-08"),
        ("31.02.2025", "2025-02-31"),
    ])
    def test_parses(self, raw, expected):
        assert parse_locale_date(raw) == expected

    @pytest.mark.parametrize("raw", ["32.13.99", "15.03.1850", "no date", "", None, 20250708])
    def test_invalid_is_none(self, raw):
        assert parse_locale_date(raw) is None

    def test_date_object(self):
        assert parse_locale_date(date(2025, 7, 8)) == "2025-07-08"


class TestNormalizeParty:
    """Tests for normalize_party function."""

    def test_tax_id_aliases(self):
        assert normalize_party({'oib': '12345678901'}).tax_id == '12345678901'
        assert normalize_party({'vatId': 'HR12345678901'}).tax_id == 'HR12345678901'
        assert normalize_party({'taxId': 12345678901}).tax_id == '12345678901'

    def test_iban_compacted(self):
        assert normalize_party({'iban': 'hr12 1001 0051 8630 0016 0'}).iban == 'HR1210010051863000160'

    def test_bare_name(self):
        assert normalize_party("ACME d.o.o.").name == "ACME d.o.o."

    def test_wrong_type(self):
        assert normalize_party(42).name is None


class TestNormalizeItem:
    """Tests for normalize_item function."""

    def test_numbers_routed_through_parser(self):
        item = normalize_item({'quantity': '2', 'unitPrice': '1.234,56', 'totalPrice': '2.469,12'}, 0)

        assert item.quantity == 2.0
        assert item.unit_price == pytest.approx(1234.56)
        assert item.total_price == pytest.approx(2469.12)

    def test_position_defaults_to_source_index(self):
        assert normalize_item({}, 4).position == 5
        assert normalize_item({'position': '2'}, 4).position == 2

    def test_defaults(self):
        item = normalize_item({'description': None}, 0)

        assert item.description == ""
        assert item.unit == 'kom'


class TestNormalizeDocument:
    """Tests for normalize_document function."""

    def test_none_gives_empty_record(self):
        doc = normalize_document(None, "LLM (Spatial)", 0.98)

        assert doc.confidence == 0.0
        assert doc.analysis_method == "LLM (Spatial)"
        assert doc.items == ()

    def test_full_record(self):
        raw = {
            'documentType': 'quote',
            'documentNumber': 'P-17/2025',
            'date': '08.07.25',
            'dueDate': None,
            'currency': '€',
            'supplier': {'name': 'ACME d.o.o.', 'oib': '12345678901'},
            'buyer': {'name': 'Buyer Ltd'},
            'items': [
                {'description': 'Screws', 'quantity': '100', 'unitPrice': '0,25'},
                {'description': 'Nuts', 'quantity': 50, 'unitPrice': 0.1, 'position': 7},
            ],
            'totals': {'subtotal': '30,00', 'vatAmount': '7,50', 'totalAmount': '37,50'},
        }

        doc = normalize_document(raw, "LLM (Spatial)", 0.98)

        assert doc.document_type == 'quote'
        assert doc.date == '2025-07-08'
        assert doc.due_date is None
        assert doc.currency == 'EUR'
        assert doc.supplier.tax_id == '12345678901'
        assert [i.position for i in doc.items] == [1, 7]
        assert doc.items[0].unit_price == 0.25
        assert doc.totals.total_amount == 37.5
        assert doc.confidence == 0.98

    def test_wrong_types_become_none(self):
        raw = {'items': 'not a list', 'totals': ['x'], 'supplier': None, 'date': 12}

        doc = normalize_document(raw, "Regex (Fallback)", 0.6)

        assert doc.items == ()
        assert doc.totals.subtotal is None
        assert doc.supplier.name is None
        assert doc.date is None

    def test_unknown_type_becomes_other(self):
        assert normalize_document({'documentType': 'memo'}, "x", 0.5).document_type == 'other'

    def test_items_mapping_ordered_by_key(self):
        raw = {'items': {'2': {'description': 'second'}, '1': {'description': 'first'}}}

        doc = normalize_document(raw, "x", 0.5)

        assert [i.description for i in doc.items] == ['first', 'second']

    def test_snake_case_keys(self):
        doc = normalize_document({'document_number': 'R-1', 'due_date': '01.02.2025'}, "x", 0.5)

        assert doc.document_number == 'R-1'
        assert doc.due_date == '2025-02-01'

    def test_confidence_clamped(self):
        assert normalize_document({}, "x", 3.0).confidence == 1.0

    def test_empty_document(self):
        doc = empty_document("Disabled")

        assert doc.analysis_method == "Disabled"
        assert doc.confidence == 0.0


class TestConformPayload:
    """Tests for conform_payload function."""

    def test_bare_party_string_becomes_name(self):
        payload = conform_payload({'buyer': 'Kupac d.o.o.'})

        assert payload['buyer']['name'] == 'Kupac d.o.o.'

    def test_strings_kept_verbatim(self):
        payload = conform_payload({'documentNumber': ' R-1 ', 'supplier': {'name': ' ACME '}})

        assert payload['documentNumber'] == ' R-1 '
        assert payload['supplier']['name'] == ' ACME '

    def test_items_get_positions(self):
        payload = conform_payload({'items': [{'position': 7}, {}, 'Washers']})

        assert [item['position'] for item in payload['items']] == [7, 2, 3]
        assert payload['items'][2]['description'] == 'Washers'

    def test_wrong_shapes_replaced(self):
        payload = conform_payload({'items': 'none', 'totals': 5, 'currency': None})

        assert payload['items'] == []
        assert payload['totals'] == {}
        assert payload['currency'] == 'EUR'

    def test_unknown_keys_untouched(self):
        assert conform_payload({'projectNote': 'site B'}) == {'projectNote': 'site B'}
