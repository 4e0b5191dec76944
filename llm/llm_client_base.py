"""
Base abstract class for structured-completion clients.

This defines the interface that every backend (OpenAI-compatible servers,
Ollama, test fakes) must follow. Clients raise LLMBackendError on transport,
HTTP status and empty-content failures; callers decide how to degrade.
"""

from abc import ABC, abstractmethod


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM clients.

    All provider implementations inherit from this class and implement the
    abstract methods.
    """

    def __init__(self, model: str, **kwargs):
        """
        Initialize the LLM client.

        Args:
            model: Model name/identifier
            **kwargs: Additional provider-specific configuration
        """
        self.model = model
        self.config = kwargs

    @property
    def provider(self) -> str:
        """Short provider name used in log messages."""
        return type(self).__name__

    @abstractmethod
    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        **kwargs
    ) -> str:
        """
        Request a completion that should contain one JSON object.

        Args:
            system_prompt: Fixed instructions describing the response schema
            user_prompt: Document text to analyze
            **kwargs: Additional parameters (temperature, max_tokens)

        Returns:
            Raw response text, expected (not guaranteed) to parse as JSON

        Raises:
            LLMBackendError: If the request fails or returns no content
        """

    @abstractmethod
    async def is_available(self) -> bool:
        """Check whether the backend is reachable."""

    def count_tokens(self, text: str) -> int:
        """
        Estimate the number of tokens in the given text.

        Default heuristic: approximately 4 characters per token.
        """
        return len(text) // 4

    async def close(self):
        """Release network resources held by the client."""
