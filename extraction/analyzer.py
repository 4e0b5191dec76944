"""
Document Analyzer

Facade over the two extraction strategies. Strategy selection policy (LLM
enabled, backend reachable) belongs to the caller; the analyzer only runs the
requested variant.
"""
import logging
from typing import Optional

from core.constants import METHOD_DISABLED
from core.schemas import ExtractedDocument
from llm.client_factory import LLMClientFactory
from llm.llm_client_base import BaseLLMClient
from .llm_strategy import LLMExtractionStrategy
from .normalizer import empty_document
from .regex_strategy import RegexExtractionStrategy

logger = logging.getLogger(__name__)

STRATEGIES = ('llm', 'regex')


class DocumentAnalyzer:
    """Runs LLM or regex extraction over reconstructed text."""

    def __init__(
        self,
        llm_strategy: Optional[LLMExtractionStrategy] = None,
        regex_strategy: Optional[RegexExtractionStrategy] = None
    ):
        self.regex_strategy = regex_strategy or RegexExtractionStrategy()
        self.llm_strategy = llm_strategy

    @classmethod
    def from_settings(cls, settings, client: Optional[BaseLLMClient] = None) -> "DocumentAnalyzer":
        """
        Build an analyzer from Settings.

        The LLM strategy is only created when `settings.use_llm` is on.
        """
        regex_strategy = RegexExtractionStrategy()
        llm_strategy = None
        if settings.use_llm:
            llm_strategy = LLMExtractionStrategy(
                client or LLMClientFactory.from_settings(settings),
                fallback=regex_strategy,
                text_budget=settings.llm_text_budget,
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
            )
        return cls(llm_strategy, regex_strategy)

    @property
    def has_llm(self) -> bool:
        return self.llm_strategy is not None

    async def llm_available(self) -> bool:
        """Reachability of the LLM backend (False when no LLM is configured)."""
        if self.llm_strategy is None:
            return False
        return await self.llm_strategy.client.is_available()

    async def extract(self, text: str, strategy: str = "llm") -> ExtractedDocument:
        """
        Extract a normalized record from text.

        Args:
            text: Reconstructed document text
            strategy: 'llm' or 'regex'; 'llm' without a configured client runs regex

        Returns:
            ExtractedDocument tagged with the strategy that produced it
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown extraction strategy: '{strategy}'. Supported: {', '.join(STRATEGIES)}")

        if strategy == 'llm':
            if self.llm_strategy is not None:
                return await self.llm_strategy.extract(text)
            logger.info("No LLM backend configured, using regex extraction")

        return await self.regex_strategy.extract(text)

    @staticmethod
    def disabled_document() -> ExtractedDocument:
        """Record used when automatic analysis is switched off."""
        return empty_document(METHOD_DISABLED)

    async def close(self):
        if self.llm_strategy is not None:
            await self.llm_strategy.client.close()
