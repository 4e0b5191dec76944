"""
Spreadsheet adapter.

The first sheet is flattened to CSV, which is already structured enough for
extraction, so no elements are produced.
"""
import asyncio
import logging
from pathlib import Path
from typing import List, Tuple

import pandas as pd

from core.exceptions import AdapterFailure
from core.models import SourceExtraction
from .base import SourceAdapter

logger = logging.getLogger(__name__)


class SpreadsheetAdapter(SourceAdapter):
    """XLSX/XLS/CSV to CSV text via pandas."""

    name = "spreadsheet"

    def _read(self, path: str) -> Tuple[str, List[str]]:
        if Path(path).suffix.lower() == '.csv':
            frame = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
            sheets = [Path(path).stem]
        else:
            with pd.ExcelFile(path) as workbook:
                sheets = [str(name) for name in workbook.sheet_names]
                frame = workbook.parse(sheets[0], header=None, dtype=str).fillna("")

        csv_text = frame.to_csv(index=False, header=False, lineterminator="\n")
        return csv_text.rstrip("\n"), sheets

    async def extract(self, path: str) -> SourceExtraction:
        file_name = self.file_name(path)
        try:
            csv_text, sheets = await asyncio.to_thread(self._read, path)
        except Exception as e:
            raise AdapterFailure(file_name, f"Could not read spreadsheet: {e}") from e

        logger.debug("Read sheet '%s' from %s (%d sheets)", sheets[0], file_name, len(sheets))
        return SourceExtraction(
            elements=[],
            raw_text=csv_text,
            spatial_text=csv_text,
            metadata={'file_name': file_name, 'sheets': sheets},
        )
