"""Spatial analysis package - Layout-preserving text reconstruction."""

from .reconstruction import (
    average_height,
    alignment_tolerance,
    reading_order_comparator,
    sort_reading_order,
    reconstruct_text,
    reconstruct_pages,
)

__all__ = [
    'average_height',
    'alignment_tolerance',
    'reading_order_comparator',
    'sort_reading_order',
    'reconstruct_text',
    'reconstruct_pages',
]
