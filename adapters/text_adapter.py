"""
Plain text adapter.
"""
import asyncio
from pathlib import Path

from core.exceptions import AdapterFailure
from core.models import SourceExtraction
from .base import SourceAdapter


class PlainTextAdapter(SourceAdapter):
    """Reads a text file as-is; there is no geometry to reconstruct."""

    name = "text"

    def __init__(self, encoding: str = "utf-8", **kwargs):
        super().__init__(**kwargs)
        self.encoding = encoding

    async def extract(self, path: str) -> SourceExtraction:
        file_name = self.file_name(path)
        try:
            text = await asyncio.to_thread(Path(path).read_text, encoding=self.encoding, errors="replace")
        except OSError as e:
            raise AdapterFailure(file_name, f"Could not read text file: {e}") from e

        return SourceExtraction(
            elements=[],
            raw_text=text,
            spatial_text=text,
            metadata={'file_name': file_name},
        )
