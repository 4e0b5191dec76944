"""
Document Record Assembler

Wraps normalized analysis output into per-file records and applies manual
field corrections. Records are never mutated: every edit returns a new record
built from a fresh payload copy.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, List, MutableMapping, Optional, Union

from core.constants import DATE_FIELDS, METHOD_FAILED, NUMERIC_PATH_MARKERS
from core.models import SourceExtraction
from core.schemas import ExtractedDocument, ProcessedDocument
from .normalizer import conform_payload, empty_document, parse_locale_date, parse_locale_number

Container = Union[MutableMapping, List]


def new_document_id(prefix: str = "DOC") -> str:
    """Generate a unique record id."""
    return f"{prefix}-{uuid.uuid4().hex}"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_numeric_path(path: str) -> bool:
    """Paths naming totals, prices, amounts, quantities or percentages hold numbers."""
    return any(marker in path for marker in NUMERIC_PATH_MARKERS)


def is_date_path(path: str) -> bool:
    return path.split('.')[-1] in DATE_FIELDS


def coerce_edit_value(path: str, raw_value: Any) -> Any:
    """
    Route an edited value through the normalizer when the path is numeric or a date.

    An explicitly empty string clears the field (None), it never becomes 0.
    """
    if is_numeric_path(path):
        return None if raw_value == '' else parse_locale_number(raw_value)
    if is_date_path(path):
        return None if raw_value in ('', None) else parse_locale_date(raw_value)
    return raw_value


def _step(node: Container, key: str) -> Container:
    """Descend one level, creating the intermediate mapping if needed."""
    if isinstance(node, list):
        if not key.isdecimal():
            # detached scratch mapping; the edit has nowhere to land
            return {}
        index = int(key)
        while len(node) <= index:
            node.append({})
        if not isinstance(node[index], (dict, list)):
            node[index] = {}
        return node[index]

    child = node.get(key)
    if not isinstance(child, (dict, list)):
        child = {}
        node[key] = child
    return child


def set_path(target: MutableMapping, path: str, value: Any) -> None:
    """
    Assign `value` at a dotted path inside nested dicts/lists.

    Numeric segments index into lists ('items.0.unitPrice'); any other
    segment under a list is ignored. Missing intermediate levels are created
    as dicts.
    """
    keys = path.split('.')
    node: Container = target
    for key in keys[:-1]:
        node = _step(node, key)

    last = keys[-1]
    if isinstance(node, list):
        if not last.isdecimal():
            return
        index = int(last)
        while len(node) <= index:
            node.append(None)
        node[index] = value
    else:
        node[last] = value


def apply_field_edit(doc: ExtractedDocument, path: str, raw_value: Any) -> ExtractedDocument:
    """
    Return a new record with one field replaced.

    Args:
        doc: Current record (left untouched)
        path: Dotted camelCase path, e.g. 'totals.subtotal', 'supplier.name', 'items.0.quantity'
        raw_value: Value as typed by the user

    Returns:
        New ExtractedDocument reflecting the edit
    """
    payload = doc.to_payload()
    set_path(payload, path, coerce_edit_value(path, raw_value))
    return ExtractedDocument.model_validate(conform_payload(payload))


def apply_document_edit(record: ProcessedDocument, path: str, raw_value: Any) -> ProcessedDocument:
    """Apply a field edit to a processed record's analysis; keeps document_type in sync."""
    return record.with_analysis(apply_field_edit(record.analysis, path, raw_value))


def assemble_record(
    extraction: SourceExtraction,
    analysis: ExtractedDocument,
    file_name: str,
    file_type: str = "",
    file_size: int = 0
) -> ProcessedDocument:
    """Combine adapter output, analysis and file metadata into one record."""
    return ProcessedDocument(
        id=new_document_id(),
        file_name=file_name,
        file_type=file_type,
        file_size=file_size,
        upload_date=_utc_now(),
        status='processed',
        document_type=analysis.document_type,
        analysis=analysis,
        raw_text=extraction.raw_text,
        spatial_text=extraction.spatial_text,
        element_count=len(extraction.elements),
    )


def error_record(
    file_name: str,
    message: str,
    file_type: str = "",
    file_size: int = 0,
    analysis: Optional[ExtractedDocument] = None
) -> ProcessedDocument:
    """Per-document failure record: empty analysis, confidence 0, explicit error marker."""
    return ProcessedDocument(
        id=new_document_id("DOC-ERR"),
        file_name=file_name,
        file_type=file_type,
        file_size=file_size,
        upload_date=_utc_now(),
        status='error',
        error=message,
        document_type='other',
        analysis=analysis or empty_document(METHOD_FAILED),
    )
