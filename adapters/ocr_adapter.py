"""
Vision OCR adapter.

Rasterizes an image or PDF page and sends it to an OpenAI-compatible vision
OCR server (DeepSeek-OCR served by vLLM) with a grounding prompt. The
grounded response is parsed into word-level elements in pixel space.
"""
import asyncio
import logging
from pathlib import Path
from typing import List, Tuple

import fitz  # PyMuPDF
from openai import AsyncOpenAI, OpenAIError

from core.constants import DEFAULT_OCR_PARAMS, OCR_PROMPTS
from core.exceptions import AdapterFailure
from core.models import PositionedElement, SourceExtraction
from utils.bbox_utils import grounded_words_to_elements, strip_grounding_tags
from utils.image_utils import load_image, render_pdf_page
from .base import SourceAdapter

logger = logging.getLogger(__name__)


class VisionOcrAdapter(SourceAdapter):
    """OCR for scanned images and image-only PDF pages."""

    name = "ocr"

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "ocr",
        prompt: str = OCR_PROMPTS['grounded_words'],
        max_tokens: int = DEFAULT_OCR_PARAMS['max_tokens'],
        temperature: float = DEFAULT_OCR_PARAMS['temperature'],
        target_dpi: int = DEFAULT_OCR_PARAMS['target_dpi'],
        max_image_size: int = DEFAULT_OCR_PARAMS['max_image_size'],
        **kwargs
    ):
        """
        Initialize OCR adapter.

        Args:
            client: AsyncOpenAI client pointed at the OCR server
            model: Served model name
            prompt: Grounding prompt
            max_tokens: Completion token limit per page
            temperature: Sampling temperature
            target_dpi: Rasterization resolution for PDF pages
            max_image_size: Maximum image dimension before downscaling
        """
        super().__init__(**kwargs)
        self.client = client
        self.model = model
        self.prompt = prompt
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.target_dpi = target_dpi
        self.max_image_size = max_image_size

    @classmethod
    def from_settings(cls, settings) -> "VisionOcrAdapter":
        client = AsyncOpenAI(api_key=settings.ocr_api_key, base_url=settings.ocr_server_url)
        return cls(
            client,
            model=settings.ocr_model,
            **settings.get_ocr_params(),
            reconstruction_params=settings.get_reconstruction_params(),
        )

    async def _call_ocr(self, img_b64: str) -> str:
        """Call the OCR server with image and prompt."""
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{
                "role": "user",
                "content": [
                    {"type": "text", "text": self.prompt},
                    {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{img_b64}"}}
                ]
            }],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            extra_body={
                "skip_special_tokens": False,
            },
        )
        return response.choices[0].message.content or ""

    async def ocr_page(self, path: str, page_num: int = 1) -> Tuple[List[PositionedElement], str]:
        """
        OCR a single page.

        Args:
            path: Path to PDF or image file
            page_num: 1-indexed page number (ignored for images)

        Returns:
            Tuple of (elements, plain page text)
        """
        if Path(path).suffix.lower() == '.pdf':
            img_b64, width, height = await asyncio.to_thread(render_pdf_page, path, page_num, self.target_dpi)
        else:
            img_b64, width, height = await asyncio.to_thread(load_image, path, self.max_image_size)

        content = await self._call_ocr(img_b64)
        if '<|ref|>' not in content:
            logger.warning("OCR response for page %d has no grounding tags", page_num)

        candidates = grounded_words_to_elements(content, width, height, page=page_num)
        return self.to_elements(candidates), strip_grounding_tags(content)

    async def extract(self, path: str) -> SourceExtraction:
        file_name = self.file_name(path)
        try:
            if Path(path).suffix.lower() == '.pdf':
                num_pages = await asyncio.to_thread(_count_pages, path)
            else:
                num_pages = 1

            elements: List[PositionedElement] = []
            texts = []
            for page_num in range(1, num_pages + 1):
                page_elements, page_text = await self.ocr_page(path, page_num)
                elements.extend(page_elements)
                texts.append(page_text)
        except AdapterFailure:
            raise
        except (OpenAIError, OSError, ValueError, RuntimeError) as e:
            raise AdapterFailure(file_name, f"OCR failed: {e}") from e

        logger.info("OCR produced %d elements from %s", len(elements), file_name)
        return self.build_extraction(
            elements,
            raw_text="\n\n".join(texts),
            metadata={'file_name': file_name, 'num_pages': num_pages, 'ocr_model': self.model},
        )

    async def close(self):
        await self.client.close()


def _count_pages(path: str) -> int:
    with fitz.open(path) as doc:
        return doc.page_count
