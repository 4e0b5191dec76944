"""
LLM Extraction Strategy

Sends reconstructed text with a schema-describing system prompt to a
structured-completion backend. The backend call ends in one of three
outcomes:

- PARSED: the response is a JSON object
- RECOVERED: a JSON object was recovered from a malformed response
- FAILED: transport error, empty content or unrecoverable JSON

FAILED triggers the degrade transition to the fallback strategy; the
caller always receives a record and never sees the backend exception.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.constants import (
    CONFIDENCE,
    DEFAULT_LLM_PARAMS,
    LLM_SYSTEM_PROMPT,
    LLM_USER_PREFIX,
    METHOD_LLM,
    METHOD_LLM_RECOVERED,
)
from core.exceptions import LLMBackendError
from core.schemas import ExtractedDocument
from llm.llm_client_base import BaseLLMClient
from utils.json_utils import load_json_object, recover_json_object
from .base import ExtractionStrategy
from .normalizer import normalize_document
from .regex_strategy import RegexExtractionStrategy

logger = logging.getLogger(__name__)


class OutcomeStatus(Enum):
    """Result category of one backend call."""
    PARSED = "parsed"
    RECOVERED = "recovered"
    FAILED = "failed"


@dataclass(frozen=True)
class LLMOutcome:
    """Tagged result of one backend call."""
    status: OutcomeStatus
    payload: Optional[dict] = None
    reason: str = ""


class LLMExtractionStrategy(ExtractionStrategy):
    """
    Schema-constrained extraction through an LLM backend with regex fallback.
    """

    name = "llm"

    def __init__(
        self,
        client: BaseLLMClient,
        fallback: Optional[ExtractionStrategy] = None,
        text_budget: int = DEFAULT_LLM_PARAMS['text_budget'],
        temperature: float = DEFAULT_LLM_PARAMS['temperature'],
        max_tokens: int = DEFAULT_LLM_PARAMS['max_tokens'],
        system_prompt: str = LLM_SYSTEM_PROMPT
    ):
        """
        Initialize the strategy.

        Args:
            client: Structured-completion backend
            fallback: Strategy used when the backend fails (default: regex)
            text_budget: Maximum number of document characters sent to the backend
            temperature: Sampling temperature
            max_tokens: Completion token limit
            system_prompt: Schema-describing instructions
        """
        self.client = client
        self.fallback = fallback or RegexExtractionStrategy()
        self.text_budget = text_budget
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt

    def build_user_prompt(self, text: str) -> str:
        """Document text truncated to the character budget."""
        return LLM_USER_PREFIX + (text or "")[:self.text_budget]

    def _log_prompt_size(self, prompt: str) -> None:
        """Token count for debug output only; a tokenizer failure never blocks the request."""
        try:
            tokens = self.client.count_tokens(prompt)
        except Exception as e:
            logger.debug("Token count unavailable (%s: %s)", type(e).__name__, e)
            return
        logger.debug("Sending %d characters (~%d tokens) to %s", len(prompt), tokens, self.client.provider)

    async def request(self, text: str) -> LLMOutcome:
        """Call the backend once and classify the response."""
        prompt = self.build_user_prompt(text)
        if logger.isEnabledFor(logging.DEBUG):
            self._log_prompt_size(prompt)

        try:
            content = await self.client.complete_json(
                self.system_prompt,
                prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )
        except LLMBackendError as e:
            return LLMOutcome(OutcomeStatus.FAILED, reason=str(e))
        except Exception as e:
            logger.exception("Unexpected error from %s", self.client.provider)
            return LLMOutcome(OutcomeStatus.FAILED, reason=f"{type(e).__name__}: {e}")

        payload = load_json_object(content)
        if payload is not None:
            return LLMOutcome(OutcomeStatus.PARSED, payload=payload)

        logger.warning("LLM returned invalid JSON, attempting recovery")
        payload = recover_json_object(content)
        if payload is not None:
            return LLMOutcome(OutcomeStatus.RECOVERED, payload=payload)

        return LLMOutcome(OutcomeStatus.FAILED, reason="Invalid LLM response format")

    def resolve(self, outcome: LLMOutcome) -> Optional[ExtractedDocument]:
        """Normalize a successful outcome; None for FAILED."""
        if outcome.status is OutcomeStatus.PARSED:
            return normalize_document(outcome.payload, METHOD_LLM, CONFIDENCE[METHOD_LLM])
        if outcome.status is OutcomeStatus.RECOVERED:
            return normalize_document(outcome.payload, METHOD_LLM_RECOVERED, CONFIDENCE[METHOD_LLM_RECOVERED])
        return None

    async def degrade(self, text: str, reason: str) -> ExtractedDocument:
        """Transition to the fallback strategy on the full, untruncated text."""
        logger.warning("LLM analysis failed (%s); falling back to %s", reason, self.fallback.name)
        return await self.fallback.extract(text)

    async def extract(self, text: str) -> ExtractedDocument:
        outcome = await self.request(text)
        document = self.resolve(outcome)
        if document is None:
            return await self.degrade(text, outcome.reason)
        return document
