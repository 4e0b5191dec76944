"""
Unit tests for the llm package.
"""
import asyncio
import json

import httpx
import pytest
from openai import AsyncOpenAI

from config.settings import Settings
from core.exceptions import LLMBackendError
from llm.client_factory import LLMClientFactory
from llm.ollama_client import OllamaClient
from llm.openai_client import OpenAIClient


def ollama_client(handler):
    transport = httpx.MockTransport(handler)
    http = httpx.AsyncClient(base_url="http://ollama.test", transport=transport)
    return OllamaClient("qwen3:8b", base_url="http://ollama.test", client=http)


def openai_client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    sdk = AsyncOpenAI(api_key="test", base_url="http://llm.test/v1", http_client=http, max_retries=0)
    return OpenAIClient("local-model", base_url="http://llm.test/v1", client=sdk)


def completion_body(content):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "local-model",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
    }


class TestOllamaClient:
    """Tests for OllamaClient against a mocked HTTP transport."""

    def test_complete_json(self):
        seen = {}

        def handler(request):
            seen['path'] = request.url.path
            seen['body'] = json.loads(request.content)
            return httpx.Response(200, json={"message": {"role": "assistant", "content": ' {"a": 1} '}})

        client = ollama_client(handler)
        content = asyncio.run(client.complete_json("system", "user", temperature=0.01, max_tokens=100))

        assert content == '{"a": 1}'
        assert seen['path'] == "/api/chat"
        assert seen['body']['format'] == "json"
        assert seen['body']['stream'] is False
        assert seen['body']['options'] == {"temperature": 0.01, "num_predict": 100}
        assert seen['body']['messages'][0] == {"role": "system", "content": "system"}

    def test_http_error(self):
        client = ollama_client(lambda request: httpx.Response(500, text="model not found"))

        with pytest.raises(LLMBackendError, match="500"):
            asyncio.run(client.complete_json("s", "u"))

    def test_empty_content(self):
        client = ollama_client(lambda request: httpx.Response(200, json={"message": {"content": ""}}))

        with pytest.raises(LLMBackendError):
            asyncio.run(client.complete_json("s", "u"))

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = ollama_client(handler)

        with pytest.raises(LLMBackendError, match="Could not connect"):
            asyncio.run(client.complete_json("s", "u"))

    def test_is_available(self):
        up = ollama_client(lambda request: httpx.Response(200, json={"models": []}))
        down = ollama_client(lambda request: httpx.Response(503))

        assert asyncio.run(up.is_available()) is True
        assert asyncio.run(down.is_available()) is False


class TestOpenAIClient:
    """Tests for OpenAIClient against a mocked HTTP transport."""

    def test_complete_json(self):
        seen = {}

        def handler(request):
            seen['path'] = request.url.path
            seen['body'] = json.loads(request.content)
            return httpx.Response(200, json=completion_body('{"documentNumber": "INV-1"}'))

        client = openai_client(handler)
        content = asyncio.run(client.complete_json("system", "user", temperature=0.01, max_tokens=8000))

        assert content == '{"documentNumber": "INV-1"}'
        assert seen['path'] == "/v1/chat/completions"
        assert seen['body']['response_format'] == {"type": "json_object"}
        assert seen['body']['temperature'] == 0.01
        assert seen['body']['max_tokens'] == 8000

    def test_server_error_wrapped(self):
        client = openai_client(lambda request: httpx.Response(500, json={"error": {"message": "boom"}}))

        with pytest.raises(LLMBackendError):
            asyncio.run(client.complete_json("s", "u"))

    def test_empty_content(self):
        client = openai_client(lambda request: httpx.Response(200, json=completion_body("")))

        with pytest.raises(LLMBackendError):
            asyncio.run(client.complete_json("s", "u"))

    def test_is_available(self):
        up = openai_client(lambda request: httpx.Response(200, json={"object": "list", "data": []}))
        down = openai_client(lambda request: httpx.Response(500, json={"error": {"message": "down"}}))

        assert asyncio.run(up.is_available()) is True
        assert asyncio.run(down.is_available()) is False

    def test_local_server_needs_no_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        client = OpenAIClient("local-model", base_url="http://localhost:1234/v1")

        assert client.api_key == "not-needed"

    def test_hosted_api_requires_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ValueError):
            OpenAIClient("gpt-4o-mini")


class TestLLMClientFactory:
    """Tests for LLMClientFactory."""

    @pytest.mark.parametrize("provider", ["openai", "lmstudio", "vllm", " LMStudio "])
    def test_openai_compatible(self, provider):
        client = LLMClientFactory.create_client(provider, "local-model", base_url="http://localhost:1234/v1")

        assert isinstance(client, OpenAIClient)
        assert client.base_url == "http://localhost:1234/v1"

    def test_ollama(self):
        client = LLMClientFactory.create_client("ollama", "qwen3:8b")

        assert isinstance(client, OllamaClient)
        assert client.base_url == "http://localhost:11434"

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported"):
            LLMClientFactory.create_client("gemini", "x")

    def test_from_settings(self):
        settings = Settings(llm_provider="lmstudio", llm_model="local-model", llm_base_url="http://localhost:1234/v1")

        client = LLMClientFactory.from_settings(settings)

        assert isinstance(client, OpenAIClient)
        assert client.model == "local-model"

    def test_supported_providers(self):
        assert set(LLMClientFactory.get_supported_providers()) == {"openai", "lmstudio", "vllm", "ollama"}
