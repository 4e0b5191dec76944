"""
PDF text-layer adapter.

Uses PyMuPDF text spans, which are already in top-down page coordinates.
Pages without a text layer are handed to an OCR adapter when one is
configured.
"""
import asyncio
import logging
from typing import Dict, List

import fitz  # PyMuPDF

from core.exceptions import AdapterFailure
from core.models import PositionedElement, SourceExtraction, round_coord
from .base import SourceAdapter

logger = logging.getLogger(__name__)


def read_pdf_spans(path: str) -> List[Dict]:
    """
    Read text spans page by page.

    A span is a run of text in one font on one line; its bbox is already
    top-down in PDF points.

    Returns:
        One dict per page: {'page', 'spans': [element dicts], 'text'}
    """
    pages = []
    with fitz.open(path) as doc:
        for index, page in enumerate(doc):
            page_num = index + 1
            spans = []
            for block in page.get_text("dict")["blocks"]:
                if block.get("type") != 0:  # image block
                    continue
                for line in block["lines"]:
                    for span in line["spans"]:
                        x0, y0, x1, y1 = span["bbox"]
                        spans.append({
                            'text': span["text"],
                            'x': round_coord(x0),
                            'y': round_coord(y0),
                            'width': round_coord(x1 - x0),
                            'height': round_coord(y1 - y0),
                            'page': page_num,
                            'font_name': span.get("font"),
                        })
            pages.append({
                'page': page_num,
                'spans': spans,
                'text': " ".join(s['text'] for s in spans if s['text'].strip()),
            })
    return pages


class PdfTextAdapter(SourceAdapter):
    """Digital PDFs via the embedded text layer."""

    name = "pdf"

    def __init__(self, ocr_adapter=None, **kwargs):
        """
        Args:
            ocr_adapter: Optional VisionOcrAdapter for pages without text
        """
        super().__init__(**kwargs)
        self.ocr_adapter = ocr_adapter

    async def extract(self, path: str) -> SourceExtraction:
        file_name = self.file_name(path)
        try:
            pages = await asyncio.to_thread(read_pdf_spans, path)
        except (RuntimeError, ValueError, OSError) as e:
            # fitz raises FileDataError (a RuntimeError) for corrupt files
            raise AdapterFailure(file_name, f"Could not open PDF: {e}") from e
        if not pages:
            raise AdapterFailure(file_name, "PDF has no pages")

        elements: List[PositionedElement] = []
        raw_parts = []
        ocr_pages = []
        for page in pages:
            page_elements = self.to_elements(page['spans'])
            page_text = page['text']

            if not page_elements and self.ocr_adapter is not None:
                logger.info("Page %d of %s has no text layer, running OCR", page['page'], file_name)
                page_elements, page_text = await self._ocr_page(path, page['page'])
                ocr_pages.append(page['page'])

            elements.extend(page_elements)
            raw_parts.append(f"\n--- PAGE {page['page']} (Raw) ---\n{page_text}\n")

        metadata = {'file_name': file_name, 'num_pages': len(pages)}
        if ocr_pages:
            metadata['ocr_pages'] = ocr_pages

        return self.build_extraction(elements, "".join(raw_parts), metadata)

    async def _ocr_page(self, path: str, page_num: int):
        try:
            return await self.ocr_adapter.ocr_page(path, page_num)
        except Exception as e:
            raise AdapterFailure(self.file_name(path), f"OCR of page {page_num} failed: {e}") from e
