"""Tests for provider registry and base class."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from site_intel.config import Settings
from site_intel.errors import ExtractionError, ServiceUnavailableError
from site_intel.providers import get_provider, list_providers
from site_intel.providers.base import SYSTEM_PROMPT, AIProvider


class TestProviderRegistry:
    def test_list_providers(self):
        providers = list_providers()
        assert "anthropic" in providers
        assert "openai" in providers
        assert "ollama" in providers
        assert "groq" in providers
        assert "gemini" in providers

    def test_list_providers_returns_sorted(self):
        providers = list_providers()
        assert providers == sorted(providers)

    def test_get_provider_unknown_raises(self, settings):
        with pytest.raises(ValueError, match="Unknown provider 'nonexistent'"):
            get_provider("nonexistent", settings)

    def test_get_provider_unknown_shows_available(self, settings):
        with pytest.raises(ValueError, match="Available:"):
            get_provider("bad", settings)

    @pytest.mark.parametrize("name", ["openai", "anthropic", "ollama", "groq", "gemini"])
    def test_get_provider_by_name(self, settings, name):
        provider = get_provider(name, settings)
        assert provider.name == name
        assert isinstance(provider, AIProvider)


class TestParseResponse:
    @pytest.fixture()
    def provider(self, settings):
        return get_provider("ollama", settings)

    def test_valid_json(self, provider):
        assert provider._parse_response('{"name": "Acme"}') == {"name": "Acme"}

    def test_code_fences(self, provider):
        raw = '```json\n{"categories": ["restaurants"]}\n```'
        assert provider._parse_response(raw) == {"categories": ["restaurants"]}

    def test_trailing_prose(self, provider):
        raw = 'Here you go: {"email": "info@acmecafe.co.il"} Hope this helps!'
        assert provider._parse_response(raw) == {"email": "info@acmecafe.co.il"}

    def test_concatenated_objects_keeps_first(self, provider):
        assert provider._parse_response('{"a": 1} {"b": 2}') == {"a": 1}

    def test_invalid_json_raises(self, provider):
        with pytest.raises(ExtractionError, match="Failed to parse"):
            provider._parse_response("not json at all")

    def test_non_object_raises(self, provider):
        with pytest.raises(ExtractionError):
            provider._parse_response('["restaurants"]')

    def test_empty_raises(self, provider):
        with pytest.raises(ExtractionError):
            provider._parse_response("")


class TestCompleteJson:
    def test_request_failure_becomes_service_unavailable(self, fake_provider):
        provider = fake_provider(identity=ConnectionError("connection refused"))
        with pytest.raises(ServiceUnavailableError, match="fake request failed: connection refused"):
            provider.complete_json("Extract the business name")

    def test_bad_answer_is_extraction_error_only(self, fake_provider):
        provider = fake_provider(identity="I cannot help with that")
        with pytest.raises(ExtractionError) as exc_info:
            provider.complete_json("Extract the business name")
        assert not isinstance(exc_info.value, ServiceUnavailableError)

    def test_passes_system_prompt_and_max_tokens(self, settings):
        provider = get_provider("openai", settings)
        provider._client = MagicMock()
        provider._client.chat.completions.create.return_value.choices = [
            MagicMock(message=MagicMock(content='{"name": "Acme"}'))
        ]

        assert provider.complete_json("Extract", max_tokens=300) == {"name": "Acme"}

        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 300
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert kwargs["response_format"] == {"type": "json_object"}


class TestProviderInit:
    """Test provider-specific initialization requirements."""

    def test_anthropic_requires_api_key(self):
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
            get_provider("anthropic", Settings())

    def test_openai_requires_api_key(self):
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            get_provider("openai", Settings())

    def test_groq_requires_api_key(self):
        with pytest.raises(ValueError, match="GROQ_API_KEY"):
            get_provider("groq", Settings())

    def test_gemini_requires_api_key(self):
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            get_provider("gemini", Settings())

    def test_ollama_no_key_required(self):
        provider = get_provider("ollama", Settings())
        assert provider.name == "ollama"


class TestAnthropicProvider:
    def test_joins_text_blocks(self, settings):
        provider = get_provider("anthropic", settings)
        provider._client = MagicMock()
        provider._client.messages.create.return_value.content = [
            MagicMock(type="text", text='{"name": '),
            MagicMock(type="tool_use", text="ignored"),
            MagicMock(type="text", text='"Acme"}'),
        ]
        assert provider.complete_json("Extract") == {"name": "Acme"}
        assert provider._client.messages.create.call_args.kwargs["system"] == SYSTEM_PROMPT


class TestOllamaProvider:
    def test_posts_chat_in_json_mode(self):
        provider = get_provider("ollama", Settings(ollama_base_url="http://ollama:11434/"))
        with respx.mock:
            route = respx.post("http://ollama:11434/api/chat").mock(
                return_value=httpx.Response(200, json={"message": {"content": '{"categories": []}'}})
            )
            assert provider.complete_json("Categorize", max_tokens=500) == {"categories": []}

        body = json.loads(route.calls.last.request.content)
        assert body["model"] == "phi4-mini"
        assert body["format"] == "json"
        assert body["stream"] is False
        assert body["options"]["num_predict"] == 500

    def test_http_error_is_service_unavailable(self):
        provider = get_provider("ollama", Settings())
        with respx.mock:
            respx.post("http://localhost:11434/api/chat").mock(return_value=httpx.Response(500))
            with pytest.raises(ServiceUnavailableError):
                provider.complete_json("Categorize")
