"""
Field Normalizer

Converts locale-formatted numbers and dates into canonical numeric/ISO forms and
coerces loosely-typed extraction output into an ExtractedDocument. Every
extraction strategy passes its raw field map through `normalize_document`.
Values that cannot be parsed become None; nothing here raises on bad data.
"""
import math
import re
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from core.constants import CURRENCY_SYMBOLS, DEFAULT_CURRENCY, DEFAULT_UNIT
from core.schemas import ExtractedDocument, LineItem, Party, Totals

_WHITESPACE = re.compile(r'\s')
_CURRENCY_PREFIX = re.compile(r'^(?:EUR|BAM|HRK|USD|GBP|CHF|KM|€|\$|£)', re.IGNORECASE)
# Leading numeric prefix, mirroring how lenient float parsers read "150.00EUR"
_NUMERIC_PREFIX = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')

_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
_ISO_DATETIME = re.compile(r'^(\d{4}-\d{2}-\d{2})[T ]\d{2}:\d{2}')
_LOCALE_DATE = re.compile(r'(\d{1,2})[./-](\d{1,2})[./-](\d{2,4})\.?')


def parse_locale_number(raw: Any) -> Optional[float]:
    """
    Parse a locale-formatted number.

    When both '.' and ',' occur, the one appearing first is the thousands
    separator ("1.234,56" and "1,234.56" both give 1234.56). A lone ',' is the
    decimal point. Numbers pass through unchanged.

    Returns:
        The parsed float, or None for empty/unparseable input
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = _WHITESPACE.sub('', str(raw))
    text = _CURRENCY_PREFIX.sub('', text)
    if not text:
        return None

    if '.' in text and ',' in text:
        if text.index('.') < text.index(','):
            text = text.replace('.', '').replace(',', '.', 1)
        else:
            text = text.replace(',', '')
    elif ',' in text:
        text = text.replace(',', '.', 1)

    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return None

    value = float(match.group(0))
    return value if math.isfinite(value) else None


def parse_locale_date(raw: Any) -> Optional[str]:
    """
    Parse a D.M.Y style date into an ISO 'YYYY-MM-DD' string.

    Accepts '.', '/' or '-' separators and an optional trailing dot. Two-digit
    years are read as 20xx. Only range checks are applied (31.02. passes).

    Returns:
        ISO date string, or None if the value cannot be parsed
    """
    if isinstance(raw, date):
        return raw.strftime('%Y-%m-%d')
    if not isinstance(raw, str) or not raw:
        return None

    if _ISO_DATE.match(raw):
        return raw
    iso_prefix = _ISO_DATETIME.match(raw.strip())
    if iso_prefix:
        return iso_prefix.group(1)

    match = _LOCALE_DATE.search(raw)
    if not match:
        return None

    day = match.group(1).zfill(2)
    month = match.group(2).zfill(2)
    year = match.group(3)
    if len(year) == 2:
        year = f"20{year}"

    if int(year) > 1900 and 1 <= int(month) <= 12 and 1 <= int(day) <= 31:
        return f"{year}-{month}-{day}"
    return None


def _pick(mapping: Mapping, *keys: str) -> Any:
    """First non-None value among the given keys."""
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> Optional[str]:
    """Coerce a loosely-typed value into a stripped string or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, Mapping):
        value = ", ".join(str(v) for v in value.values() if v not in (None, ''))
    elif isinstance(value, (list, tuple)):
        value = ", ".join(str(v) for v in value if v not in (None, ''))
    text = str(value).strip()
    return text or None


def _currency(value: Any) -> str:
    text = _text(value)
    if not text:
        return DEFAULT_CURRENCY
    return CURRENCY_SYMBOLS.get(text, text.upper())


def _iban(value: Any) -> Optional[str]:
    text = _text(value)
    if not text:
        return None
    return _WHITESPACE.sub('', text).upper()


def normalize_party(raw: Any) -> Party:
    """Coerce a supplier/buyer value (mapping or bare name) into a Party."""
    if isinstance(raw, str):
        return Party(name=_text(raw))
    if not isinstance(raw, Mapping):
        return Party()
    return Party(
        name=_text(_pick(raw, 'name', 'companyName', 'company')),
        address=_text(raw.get('address')),
        tax_id=_text(_pick(raw, 'taxId', 'tax_id', 'oib', 'vatId', 'vat_id', 'idNumber')),
        iban=_iban(raw.get('iban')),
    )


def normalize_item(raw: Mapping, index: int) -> LineItem:
    """Coerce one raw item; `index` is its 0-based place in the source order."""
    position = parse_locale_number(_pick(raw, 'position', 'pos'))
    return LineItem(
        position=int(position) if position is not None else index + 1,
        code=_text(_pick(raw, 'code', 'sku', 'articleCode')),
        description=_text(_pick(raw, 'description', 'name')) or "",
        quantity=parse_locale_number(_pick(raw, 'quantity', 'qty')),
        unit=_text(_pick(raw, 'unit', 'uom')) or DEFAULT_UNIT,
        unit_price=parse_locale_number(_pick(raw, 'unitPrice', 'unit_price', 'price')),
        discount_percent=parse_locale_number(_pick(raw, 'discountPercent', 'discount_percent', 'discount')),
        total_price=parse_locale_number(_pick(raw, 'totalPrice', 'total_price', 'total', 'amount')),
    )


def _ordered_items(raw: Any) -> List[Mapping]:
    """Raw items in source order; keyed mappings are ordered by numeric key."""
    if isinstance(raw, Mapping):
        def key_order(key):
            number = parse_locale_number(key)
            return (number is None, number if number is not None else 0.0, str(key))
        raw = [raw[key] for key in sorted(raw, key=key_order)]
    if not isinstance(raw, (list, tuple)):
        return []
    return [item for item in raw if isinstance(item, Mapping)]


def normalize_totals(raw: Any) -> Totals:
    """Coerce a totals mapping into Totals."""
    if not isinstance(raw, Mapping):
        return Totals()
    return Totals(
        subtotal=parse_locale_number(_pick(raw, 'subtotal', 'netAmount', 'net')),
        vat_amount=parse_locale_number(_pick(raw, 'vatAmount', 'vat_amount', 'vat', 'tax')),
        total_amount=parse_locale_number(_pick(raw, 'totalAmount', 'total_amount', 'total')),
    )


def empty_document(method: str, confidence: float = 0.0) -> ExtractedDocument:
    """Record with no extracted fields."""
    return ExtractedDocument(analysis_method=method, confidence=confidence)


def normalize_document(raw: Any, method: str, confidence: float) -> ExtractedDocument:
    """
    Coerce a loosely-typed extraction result into an ExtractedDocument.

    Args:
        raw: Field map from an extraction strategy (camelCase or snake_case keys)
        method: Provenance tag stored as analysis_method
        confidence: Strategy confidence, clamped to [0, 1]

    Returns:
        Normalized, immutable record. A missing/non-mapping `raw` yields an
        empty record with confidence 0.
    """
    if not isinstance(raw, Mapping):
        return empty_document(method)

    items: Iterable[Mapping] = _ordered_items(raw.get('items'))

    return ExtractedDocument(
        document_type=_pick(raw, 'documentType', 'document_type', 'type'),
        document_number=_text(_pick(raw, 'documentNumber', 'document_number', 'number')),
        date=parse_locale_date(_pick(raw, 'date', 'issueDate')),
        due_date=parse_locale_date(_pick(raw, 'dueDate', 'due_date')),
        currency=_currency(raw.get('currency')),
        supplier=normalize_party(raw.get('supplier')),
        buyer=normalize_party(raw.get('buyer')),
        items=tuple(normalize_item(item, index) for index, item in enumerate(items)),
        totals=normalize_totals(raw.get('totals')),
        confidence=confidence,
        analysis_method=method,
    )


def _keep_text(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Strings pass through verbatim; anything else is coerced like extracted text."""
    if isinstance(value, str):
        return value
    return _text(value) or default


def _keep_number(value: Any) -> Optional[float]:
    return parse_locale_number(value) if isinstance(value, (str, Mapping, list)) else value


def _conform_section(section: Any, text_fields: Mapping[str, Optional[str]],
                     number_fields: Iterable[str] = ()) -> dict:
    section = dict(section) if isinstance(section, Mapping) else {}
    for key, default in text_fields.items():
        if key in section and not isinstance(section[key], str):
            section[key] = _keep_text(section[key], default)
    for key in number_fields:
        if key in section:
            section[key] = _keep_number(section[key])
    return section


_PARTY_TEXT = {'name': None, 'address': None, 'taxId': None, 'iban': None}
_ITEM_TEXT = {'code': None, 'description': "", 'unit': DEFAULT_UNIT}
_ITEM_NUMBERS = ('quantity', 'unitPrice', 'discountPercent', 'totalPrice')
_TOTAL_NUMBERS = ('subtotal', 'vatAmount', 'totalAmount')
_DOCUMENT_TEXT = {
    'documentNumber': None,
    'date': None,
    'dueDate': None,
    'currency': DEFAULT_CURRENCY,
    'analysisMethod': "",
}


def _conform_item(raw: Any, index: int) -> dict:
    if isinstance(raw, str):
        raw = {'description': raw}
    item = _conform_section(raw, _ITEM_TEXT, _ITEM_NUMBERS)
    if item.get('position') is None:
        item['position'] = index + 1
    return item


def conform_payload(payload: Mapping) -> dict:
    """
    Repair the shape of an edited camelCase payload so it validates again.

    Unlike `normalize_document` this keeps string values verbatim and leaves
    unknown keys alone; it only replaces values whose type cannot fill the
    field they sit in. A bare string at 'supplier' or 'buyer' becomes the
    party name, non-mapping items become description-only rows and every
    item gets a position.
    """
    document = _conform_section(payload, _DOCUMENT_TEXT)

    for party in ('supplier', 'buyer'):
        if party not in document:
            continue
        value = document[party]
        if isinstance(value, Mapping):
            document[party] = _conform_section(value, _PARTY_TEXT)
        else:
            document[party] = normalize_party(value).to_payload()

    if 'items' in document:
        items = document['items']
        if isinstance(items, Mapping):
            items = _ordered_items(items)
        elif not isinstance(items, (list, tuple)):
            items = []
        document['items'] = [_conform_item(item, index) for index, item in enumerate(items)]

    if 'totals' in document:
        document['totals'] = _conform_section(document['totals'], {}, _TOTAL_NUMBERS)

    return document
