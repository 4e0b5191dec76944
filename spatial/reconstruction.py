"""
Spatial Text Reconstruction Module

Converts an unordered set of positioned text elements into one linear string
that preserves row/column structure:
- newline between rows, blank line between paragraphs and pages
- tab between table columns, single space between words
Thresholds are relative to the average element height so the same algorithm
works for PDF point space and OCR pixel space.
"""
from collections import defaultdict
from functools import cmp_to_key
from typing import Callable, Dict, List, Sequence

from core.constants import RECONSTRUCTION_PARAMS
from core.models import PositionedElement


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def average_height(elements: Sequence[PositionedElement]) -> float:
    """
    Mean height over elements with a positive height.

    Returns:
        Average height, or 0.0 if no element has a usable height
    """
    heights = [el.height for el in elements if el.height > 0]
    if not heights:
        return 0.0
    return sum(heights) / len(heights)


def alignment_tolerance(
    avg_height: float,
    min_tolerance: float = RECONSTRUCTION_PARAMS['min_tolerance'],
    tolerance_ratio: float = RECONSTRUCTION_PARAMS['tolerance_ratio']
) -> float:
    """Maximum vertical offset for two elements to share a line."""
    return max(min_tolerance, avg_height * tolerance_ratio)


def reading_order_comparator(tolerance: float) -> Callable[[PositionedElement, PositionedElement], int]:
    """
    Build the row-major comparator used for sorting.

    Elements on different pages are ordered by page. On the same page, elements
    whose y differs by less than `tolerance` are on one line and ordered by x,
    otherwise by y.
    """
    def compare(a: PositionedElement, b: PositionedElement) -> int:
        if a.page != b.page:
            return _sign(a.page - b.page)
        if abs(a.y - b.y) < tolerance:
            return _sign(a.x - b.x)
        return _sign(a.y - b.y)

    return compare


def sort_reading_order(
    elements: Sequence[PositionedElement],
    tolerance: float
) -> List[PositionedElement]:
    """Stable sort into top-to-bottom, left-to-right reading order."""
    return sorted(elements, key=cmp_to_key(reading_order_comparator(tolerance)))


def reconstruct_text(
    elements: Sequence[PositionedElement],
    min_tolerance: float = RECONSTRUCTION_PARAMS['min_tolerance'],
    tolerance_ratio: float = RECONSTRUCTION_PARAMS['tolerance_ratio'],
    paragraph_gap_ratio: float = RECONSTRUCTION_PARAMS['paragraph_gap_ratio'],
    column_gap_ratio: float = RECONSTRUCTION_PARAMS['column_gap_ratio'],
    min_space_gap: float = RECONSTRUCTION_PARAMS['min_space_gap']
) -> str:
    """
    Reconstruct a linear text representation from positioned elements.

    Main entry point for spatial reconstruction. Pure and deterministic.

    Args:
        elements: Positioned elements in any order
        min_tolerance: Lower bound of the same-line tolerance
        tolerance_ratio: Same-line tolerance as a fraction of average height
        paragraph_gap_ratio: Vertical gap (in average heights) that starts a paragraph
        column_gap_ratio: Horizontal gap (in average heights) that marks a column boundary
        min_space_gap: Horizontal gap above which words are separated by a space

    Returns:
        Text with '\\n' row breaks, '\\n\\n' paragraph breaks and '\\t' column breaks
    """
    if not elements:
        return ""

    avg_height = average_height(elements)
    if avg_height <= 0:
        # No usable geometry: keep input order
        return " ".join(el.text for el in elements)

    tolerance = alignment_tolerance(avg_height, min_tolerance, tolerance_ratio)
    ordered = sort_reading_order(elements, tolerance)

    parts: List[str] = [ordered[0].text]
    last = ordered[0]

    for el in ordered[1:]:
        if el.page != last.page:
            parts.append('\n\n')
        else:
            y_diff = abs(el.y - last.y)
            if y_diff > tolerance:
                if y_diff > avg_height * paragraph_gap_ratio:
                    parts.append('\n\n')
                else:
                    parts.append('\n')
            else:
                x_diff = el.x - last.x_end
                if x_diff > avg_height * column_gap_ratio:
                    parts.append('\t')
                elif x_diff > min_space_gap:
                    parts.append(' ')

        parts.append(el.text)
        last = el

    return "".join(parts).strip()


def reconstruct_pages(
    elements: Sequence[PositionedElement],
    **params
) -> Dict[int, str]:
    """
    Reconstruct each page separately.

    Args:
        elements: Positioned elements from any number of pages
        **params: Tolerances forwarded to reconstruct_text

    Returns:
        Dict mapping page number to its reconstructed text
    """
    pages: Dict[int, List[PositionedElement]] = defaultdict(list)
    for el in elements:
        pages[el.page].append(el)

    return {
        page_num: reconstruct_text(pages[page_num], **params)
        for page_num in sorted(pages)
    }
