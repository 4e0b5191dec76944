"""
Factory for creating LLM clients.

This provides a centralized way to instantiate the correct LLM client
based on the provider configuration.
"""

from .llm_client_base import BaseLLMClient
from .openai_client import OpenAIClient
from .ollama_client import OllamaClient

# Providers served through the OpenAI-compatible API
OPENAI_COMPATIBLE = ('openai', 'lmstudio', 'vllm')


class LLMClientFactory:
    """
    Factory class for creating LLM clients.
    """

    @staticmethod
    def create_client(
        provider: str,
        model: str,
        **kwargs
    ) -> BaseLLMClient:
        """
        Create an LLM client based on the provider.

        Args:
            provider: Provider name ('openai', 'lmstudio', 'vllm' or 'ollama')
            model: Model name/identifier
            **kwargs: Provider-specific configuration
                - base_url: Server URL
                - api_key: Optional API key (OpenAI-compatible providers)
                - timeout: Request timeout in seconds

        Returns:
            Configured LLM client instance

        Raises:
            ValueError: If provider is not supported
        """
        provider = provider.lower().strip()

        if provider in OPENAI_COMPATIBLE:
            return OpenAIClient(
                model=model,
                api_key=kwargs.get('api_key'),
                base_url=kwargs.get('base_url'),
                timeout=kwargs.get('timeout', 120),
            )
        elif provider == 'ollama':
            return OllamaClient(
                model=model,
                base_url=kwargs.get('base_url') or 'http://localhost:11434',
                timeout=kwargs.get('timeout', 300),
            )
        else:
            raise ValueError(
                f"Unsupported LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(LLMClientFactory.get_supported_providers())}"
            )

    @staticmethod
    def from_settings(settings) -> BaseLLMClient:
        """Create the client described by a Settings instance."""
        config = settings.get_llm_config()
        provider = config.pop('provider')
        model = config.pop('model')
        return LLMClientFactory.create_client(provider, model, **config)

    @staticmethod
    def get_supported_providers():
        """
        Get list of supported providers.

        Returns:
            List of provider names
        """
        return list(OPENAI_COMPATIBLE) + ['ollama']
