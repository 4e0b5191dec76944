"""
LLM client abstraction layer.

Provides a unified structured-completion interface over different providers
(OpenAI-compatible servers, Ollama) using the Strategy Pattern.
"""

from .llm_client_base import BaseLLMClient
from .openai_client import OpenAIClient
from .ollama_client import OllamaClient
from .client_factory import LLMClientFactory

__all__ = [
    'BaseLLMClient',
    'OpenAIClient',
    'OllamaClient',
    'LLMClientFactory',
]
