"""
Document Pipeline - Orchestrates file -> positioned elements -> text -> record.

Per document:
1. Select a source adapter and extract elements/text
2. Pick the analysis strategy (disabled / LLM / regex)
3. Assemble the processed record, optionally persisting it for audit

Adapter failures and unexpected errors become error records, so a batch of
N files always yields N records.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import AsyncGenerator, Dict, List, Optional, Sequence

from adapters.registry import AdapterRegistry, guess_mime_type
from config.logging_config import setup_logging
from core.exceptions import AdapterFailure
from core.models import SourceExtraction
from core.schemas import ExtractedDocument, ProcessedDocument
from data.database import DatabaseManager, init_database
from data.repositories import ProcessedDocumentRepository
from extraction.analyzer import DocumentAnalyzer
from extraction.assembler import assemble_record, error_record
from serving.batch import run_all, stream_tasks

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Processes files into ProcessedDocument records."""

    def __init__(
        self,
        registry: Optional[AdapterRegistry] = None,
        analyzer: Optional[DocumentAnalyzer] = None,
        auto_analyze: bool = True,
        use_llm: bool = True,
        db_manager: Optional[DatabaseManager] = None
    ):
        """
        Initialize pipeline.

        Args:
            registry: Source adapters (default: no OCR)
            analyzer: Extraction strategies (default: regex only)
            auto_analyze: Run extraction at all; off yields 'Disabled' records
            use_llm: Prefer the LLM strategy when its backend is reachable
            db_manager: Audit store; records are not persisted when None
        """
        self.registry = registry or AdapterRegistry()
        self.analyzer = analyzer or DocumentAnalyzer()
        self.auto_analyze = auto_analyze
        self.use_llm = use_llm
        self.db_manager = db_manager

    @classmethod
    def from_settings(cls, settings, llm_client=None, with_ocr: bool = True) -> "DocumentPipeline":
        setup_logging(settings.log_level)
        db_manager = init_database(settings.database_url) if settings.store_results else None
        return cls(
            registry=AdapterRegistry.from_settings(settings, with_ocr=with_ocr),
            analyzer=DocumentAnalyzer.from_settings(settings, client=llm_client),
            auto_analyze=settings.auto_analyze,
            use_llm=settings.use_llm,
            db_manager=db_manager,
        )

    async def choose_strategy(self) -> Optional[str]:
        """
        Strategy for the next run: None when analysis is disabled, 'llm' when
        enabled and reachable, otherwise 'regex'.
        """
        if not self.auto_analyze:
            return None
        if self.use_llm and self.analyzer.has_llm:
            if await self.analyzer.llm_available():
                return 'llm'
            logger.warning("LLM backend not reachable, using regex extraction")
        return 'regex'

    async def analyze(self, extraction: SourceExtraction, strategy: Optional[str]) -> ExtractedDocument:
        if strategy is None:
            return self.analyzer.disabled_document()
        return await self.analyzer.extract(extraction.text_for_analysis, strategy=strategy)

    async def process_file(
        self,
        path: str,
        mime_type: Optional[str] = None,
        strategy: Optional[str] = "auto"
    ) -> ProcessedDocument:
        """
        Process one file into a record. Never raises for per-file failures.

        Args:
            path: File path
            mime_type: Optional MIME type (guessed from the name otherwise)
            strategy: 'auto' to decide via choose_strategy(), 'llm', 'regex',
                or None for no analysis
        """
        file_name = Path(path).name
        file_type = mime_type or guess_mime_type(path)
        file_size = os.path.getsize(path) if os.path.exists(path) else 0

        try:
            if strategy == "auto":
                strategy = await self.choose_strategy()
            adapter = self.registry.select(path, file_type)
            extraction = await adapter.extract(path)
            analysis = await self.analyze(extraction, strategy)
            record = assemble_record(extraction, analysis, file_name, file_type, file_size)
        except AdapterFailure as e:
            logger.error("Could not read %s: %s", file_name, e.message)
            record = error_record(file_name, e.message, file_type, file_size)
            extraction = None
        except Exception as e:
            logger.exception("Processing failed for %s", file_name)
            record = error_record(file_name, str(e) or type(e).__name__, file_type, file_size)
            extraction = None

        if self.db_manager is not None:
            await asyncio.to_thread(self._store, record, extraction)

        logger.info(
            "Processed %s: status=%s type=%s method=%s",
            file_name, record.status, record.document_type, record.analysis.analysis_method
        )
        return record

    def _store(self, record: ProcessedDocument, extraction: Optional[SourceExtraction]):
        elements = extraction.elements if extraction is not None else ()
        with self.db_manager.session() as session:
            ProcessedDocumentRepository(session).save(record, elements)

    async def process_files(self, paths: Sequence[str]) -> List[ProcessedDocument]:
        """
        Process files concurrently and wait for all of them.

        Returns:
            One record per path, in input order
        """
        strategy = await self.choose_strategy()
        outcomes = await run_all([
            lambda p=path: self.process_file(p, strategy=strategy) for path in paths
        ])
        return [
            outcome.result if outcome.ok else error_record(Path(paths[outcome.index]).name, outcome.error_message)
            for outcome in outcomes
        ]

    async def stream_files(self, paths: Sequence[str]) -> AsyncGenerator[Dict, None]:
        """
        Process files concurrently, yielding batch events as each completes.

        'result' events carry the record under "document" and every per-file
        event names its file; see serving.batch.stream_tasks for the event shapes.
        """
        strategy = await self.choose_strategy()
        events = stream_tasks([
            lambda p=path: self.process_file(p, strategy=strategy) for path in paths
        ])
        try:
            async for event in events:
                if 'task_index' in event:
                    event = dict(event, file_name=Path(paths[event['task_index']]).name)
                    if event['type'] == 'result':
                        event['document'] = event.pop('result')
                yield event
        finally:
            await events.aclose()

    async def close(self):
        await self.analyzer.close()
        if self.registry.ocr_adapter is not None:
            await self.registry.ocr_adapter.close()
