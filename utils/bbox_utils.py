"""
Grounding-tag utilities for vision OCR output.

Grounded OCR responses tag every recognized text run as
<|ref|>text<|/ref|><|det|>[[x1,y1,x2,y2], ...]<|/det|>
with box corners normalized to 0-999.
"""
import json
import logging
import re
from typing import Dict, List, Optional

import numpy as np

from core.constants import GROUNDING_COORD_SCALE, GROUNDING_PATTERN
from core.models import round_coord

logger = logging.getLogger(__name__)


def extract_grounding_references(text: str) -> List[tuple]:
    """
    Extract grounding references.

    Returns:
        List of tuples: (full_match, label, coords_str)
    """
    return re.findall(GROUNDING_PATTERN, text, re.DOTALL)


def parse_boxes(coords_str: str) -> Optional[np.ndarray]:
    """
    Parse a coordinate list such as "[[10, 20, 110, 40]]".

    Returns:
        (n, 4) float array, or None if the string is not a list of 4-number boxes
    """
    try:
        boxes = np.asarray(json.loads(coords_str), dtype=float)
    except (ValueError, TypeError):
        return None
    if boxes.ndim == 1 and boxes.size == 4:
        boxes = boxes.reshape(1, 4)
    if boxes.ndim != 2 or boxes.shape[1] != 4:
        return None
    return boxes


def denormalize_boxes(boxes: np.ndarray, img_width: int, img_height: int) -> np.ndarray:
    """Scale 0-999 normalized boxes to pixel coordinates, clamped to the image."""
    scale = np.array([img_width, img_height, img_width, img_height], dtype=float) / GROUNDING_COORD_SCALE
    pixels = np.clip(boxes, 0, GROUNDING_COORD_SCALE) * scale
    # Corners may arrive swapped
    x1 = np.minimum(pixels[:, 0], pixels[:, 2])
    x2 = np.maximum(pixels[:, 0], pixels[:, 2])
    y1 = np.minimum(pixels[:, 1], pixels[:, 3])
    y2 = np.maximum(pixels[:, 1], pixels[:, 3])
    return np.stack([x1, y1, x2, y2], axis=1)


def grounded_words_to_elements(
    text: str,
    img_width: int,
    img_height: int,
    page: int = 1
) -> List[Dict]:
    """
    Convert grounded OCR output into raw element dicts in pixel space.

    Args:
        text: OCR output with grounding tags
        img_width: Width of the image sent to OCR
        img_height: Height of the image sent to OCR
        page: Page number for these elements

    Returns:
        List of dicts with text, x, y, width, height, page
    """
    elements = []
    for _, label, coords_str in extract_grounding_references(text):
        boxes = parse_boxes(coords_str)
        if boxes is None:
            logger.warning("Could not parse coordinates for '%s': %s", label.strip(), coords_str)
            continue

        for x1, y1, x2, y2 in denormalize_boxes(boxes, img_width, img_height):
            elements.append({
                'text': label.strip(),
                'x': round_coord(x1),
                'y': round_coord(y1),
                'width': round_coord(x2 - x1),
                'height': round_coord(y2 - y1),
                'page': page,
            })

    return elements


def strip_grounding_tags(text: str) -> str:
    """
    Plain text of a grounded response: tagged runs become their text.
    """
    cleaned = re.sub(GROUNDING_PATTERN, lambda m: m.group(2), text, flags=re.DOTALL)
    cleaned = re.sub(r'<\|[^|]*\|>', '', cleaned)
    return re.sub(r'\n{3,}', '\n\n', cleaned).strip()
