"""
OpenAI-compatible client implementation.

Works against OpenAI itself and against local OpenAI-compatible servers such as
LM Studio or vLLM (pass `base_url`).
"""

import logging
import os
from typing import Optional

import tiktoken
from openai import AsyncOpenAI, OpenAIError

from core.constants import DEFAULT_LLM_PARAMS
from core.exceptions import LLMBackendError
from .llm_client_base import BaseLLMClient

logger = logging.getLogger(__name__)


class OpenAIClient(BaseLLMClient):
    """
    LLM client for the OpenAI chat completions API.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 120,
        client: Optional[AsyncOpenAI] = None,
        **kwargs
    ):
        """
        Initialize OpenAI-compatible client.

        Args:
            model: Model name (e.g., 'gpt-4o-mini' or 'local-model' for LM Studio)
            api_key: API key (defaults to OPENAI_API_KEY; local servers accept any value)
            base_url: Server URL for OpenAI-compatible servers
            timeout: Request timeout in seconds
            client: Preconfigured AsyncOpenAI instance (mainly for tests)
            **kwargs: Additional configuration
        """
        super().__init__(model, **kwargs)

        self.base_url = base_url
        self.api_key = api_key or os.getenv('OPENAI_API_KEY')
        if not self.api_key:
            if not base_url:
                raise ValueError(
                    "OpenAI API key not found. Please set OPENAI_API_KEY environment variable "
                    "or pass api_key parameter."
                )
            # Local servers ignore the key but the SDK requires one
            self.api_key = "not-needed"

        self.client = client or AsyncOpenAI(
            api_key=self.api_key,
            base_url=base_url,
            timeout=timeout
        )
        self._encoding = None

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        **kwargs
    ) -> str:
        """
        Call the chat completions API in JSON mode.

        Args:
            system_prompt: Schema-describing instructions
            user_prompt: Document text
            **kwargs: temperature, max_tokens, json_mode

        Returns:
            Model response text
        """
        params = {
            'temperature': kwargs.get('temperature', DEFAULT_LLM_PARAMS['temperature']),
            'max_tokens': kwargs.get('max_tokens', DEFAULT_LLM_PARAMS['max_tokens']),
        }
        if kwargs.get('json_mode', True):
            params['response_format'] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **params
            )
        except OpenAIError as e:
            raise LLMBackendError(f"Completion request to {self.base_url or 'OpenAI'} failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMBackendError("Completion response contained no content")

        return content.strip()

    async def is_available(self) -> bool:
        """List models to check that the server answers."""
        try:
            await self.client.models.list()
        except OpenAIError as e:
            logger.warning("LLM server %s not reachable: %s", self.base_url or 'OpenAI', e)
            return False
        return True

    def count_tokens(self, text: str) -> int:
        """
        Count tokens using tiktoken.

        Args:
            text: Text to count tokens for

        Returns:
            Number of tokens
        """
        if self._encoding is None:
            try:
                self._encoding = tiktoken.encoding_for_model(self.model)
            except KeyError:
                # Fallback to cl100k_base for unknown/local models
                self._encoding = tiktoken.get_encoding("cl100k_base")
        return len(self._encoding.encode(text))

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()
