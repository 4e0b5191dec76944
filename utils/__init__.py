"""Utilities package - Helper functions for images, OCR grounding tags and JSON recovery."""

from .image_utils import (
    encode_png,
    render_pdf_page,
    load_image,
    get_image_dimensions,
)

from .bbox_utils import (
    extract_grounding_references,
    parse_boxes,
    denormalize_boxes,
    grounded_words_to_elements,
    strip_grounding_tags,
)

from .json_utils import (
    find_balanced_object,
    load_json_object,
    recover_json_object,
)

__all__ = [
    # Image utils
    'encode_png',
    'render_pdf_page',
    'load_image',
    'get_image_dimensions',

    # Grounding utils
    'extract_grounding_references',
    'parse_boxes',
    'denormalize_boxes',
    'grounded_words_to_elements',
    'strip_grounding_tags',

    # JSON utils
    'find_balanced_object',
    'load_json_object',
    'recover_json_object',
]
