"""
Image utilities for the OCR adapter.

Rasterizes PDF pages and loads image files as base64 PNG payloads together
with the pixel dimensions the OCR coordinates are scaled to.
"""
import base64
from io import BytesIO
from typing import Tuple

import fitz  # PyMuPDF
from PIL import Image, ImageOps


def encode_png(img: Image.Image) -> str:
    """Encode a PIL image as a base64 PNG string."""
    buf = BytesIO()
    img.save(buf, format='PNG')
    return base64.b64encode(buf.getvalue()).decode()


def render_pdf_page(pdf_path: str, page_num: int, target_dpi: int = 200) -> Tuple[str, int, int]:
    """
    Rasterize a PDF page.

    Args:
        pdf_path: Path to the PDF file
        page_num: 1-indexed page number
        target_dpi: Rendering resolution

    Returns:
        Tuple of (base64 PNG, width, height)
    """
    with fitz.open(pdf_path) as doc:
        page = doc.load_page(page_num - 1)  # 0-indexed
        mat = fitz.Matrix(target_dpi / 72, target_dpi / 72)
        pix = page.get_pixmap(matrix=mat, alpha=False)
        img = Image.open(BytesIO(pix.tobytes("png")))
        img.load()

    return encode_png(img), img.width, img.height


def load_image(image_path: str, max_size: int = 2048) -> Tuple[str, int, int]:
    """
    Load an image file, fix orientation and downscale it.

    Args:
        image_path: Path to the image file
        max_size: Maximum dimension (width or height) before resizing

    Returns:
        Tuple of (base64 PNG, width, height) of the image sent to OCR
    """
    with Image.open(image_path) as source:
        # Fix EXIF orientation
        img = ImageOps.exif_transpose(source)
        if img.mode not in ('RGB', 'L'):
            img = img.convert('RGB')

        if max(img.size) > max_size:
            img.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)

        return encode_png(img), img.width, img.height


def get_image_dimensions(image_or_path) -> Tuple[int, int]:
    """
    Get image dimensions (width, height).

    Args:
        image_or_path: PIL Image or path to image file
    """
    if isinstance(image_or_path, str):
        with Image.open(image_or_path) as img:
            return img.size
    return image_or_path.size
