"""
Ollama client implementation.

This wraps the Ollama chat API and implements the BaseLLMClient interface.
"""

import json
import logging
from typing import Optional

import httpx

from core.constants import DEFAULT_LLM_PARAMS
from core.exceptions import LLMBackendError
from .llm_client_base import BaseLLMClient

logger = logging.getLogger(__name__)


class OllamaClient(BaseLLMClient):
    """
    LLM client for Ollama (local LLM server).
    """

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:11434",
        timeout: int = 300,
        client: Optional[httpx.AsyncClient] = None,
        **kwargs
    ):
        """
        Initialize Ollama client.

        Args:
            model: Ollama model name (e.g., 'qwen3:30b', 'llama3:latest')
            base_url: Ollama server URL (default: http://localhost:11434)
            timeout: Request timeout in seconds (default: 300)
            client: Preconfigured httpx.AsyncClient (mainly for tests)
            **kwargs: Additional configuration
        """
        super().__init__(model, **kwargs)

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout)
        )

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        **kwargs
    ) -> str:
        """
        Call Ollama chat API with JSON output format.

        Raises:
            LLMBackendError: On connection errors, error statuses or malformed envelopes
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "stream": False,
            "options": {
                "temperature": kwargs.get('temperature', DEFAULT_LLM_PARAMS['temperature']),
                "num_predict": kwargs.get('max_tokens', DEFAULT_LLM_PARAMS['max_tokens']),
            },
        }
        if kwargs.get('json_mode', True):
            payload["format"] = "json"

        try:
            response = await self.client.post("/api/chat", json=payload)
            response.raise_for_status()
            result = response.json()
        except httpx.ConnectError as e:
            raise LLMBackendError(
                f"Could not connect to Ollama server at {self.base_url}. "
                f"Please ensure Ollama is running and the model '{self.model}' is pulled. "
                f"Error: {e}"
            ) from e
        except httpx.HTTPStatusError as e:
            raise LLMBackendError(
                f"Ollama server returned error: {e.response.status_code} - {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise LLMBackendError(f"Ollama request failed: {e}") from e
        except json.JSONDecodeError as e:
            raise LLMBackendError(f"Invalid JSON envelope from Ollama: {response.text[:200]}") from e

        content = (result.get('message') or {}).get('content')
        if not content:
            raise LLMBackendError("Ollama response contained no content")

        return content.strip()

    async def is_available(self) -> bool:
        """Query the model list endpoint."""
        try:
            response = await self.client.get("/api/tags")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Ollama server %s not reachable: %s", self.base_url, e)
            return False
        return True

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
