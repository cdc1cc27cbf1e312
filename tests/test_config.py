"""Tests for site_intel.config module."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from site_intel.config import Settings


class TestSettings:
    def test_default_values(self):
        s = Settings()
        assert s.openai_api_key == ""
        assert s.openai_model == "gpt-4o"
        assert s.anthropic_api_key == ""
        assert s.claude_model == "claude-haiku-4-5-20251001"
        assert s.ollama_base_url == "http://localhost:11434"
        assert s.ollama_model == "phi4-mini"
        assert s.groq_model == "llama-3.1-8b-instant"
        assert s.gemini_model == "gemini-2.5-flash"
        assert s.default_provider == "openai"
        assert s.temperature == 0.1
        assert s.headless is True
        assert s.navigation_timeout == 30.0
        assert s.evaluation_timeout == 10.0
        assert s.page_retries == 2
        assert s.http_fallback is True
        assert s.http_timeout == 10.0
        assert s.categories_path == ""

    def test_frozen_dataclass(self):
        s = Settings()
        with pytest.raises(AttributeError):
            s.openai_api_key = "new-key"  # type: ignore[misc]

    def test_from_env_reads_env_vars(self):
        env = {
            "OPENAI_API_KEY": "my-openai-key",
            "OPENAI_MODEL": "gpt-4o-mini",
            "ANTHROPIC_API_KEY": "my-anthropic-key",
            "CLAUDE_MODEL": "claude-sonnet-4-20250514",
            "OLLAMA_BASE_URL": "http://myhost:11434",
            "OLLAMA_MODEL": "llama3",
            "GROQ_API_KEY": "my-groq-key",
            "GEMINI_API_KEY": "my-gemini-key",
            "DEFAULT_PROVIDER": "anthropic",
            "TEMPERATURE": "0.4",
            "HEADLESS": "false",
            "NAVIGATION_TIMEOUT": "15",
            "PAGE_RETRIES": "3",
            "HTTP_FALLBACK": "no",
            "CATEGORIES_PATH": "/etc/site-intel/categories.json",
        }
        with patch.dict("os.environ", env, clear=True), \
             patch("site_intel.config.load_dotenv"):
            s = Settings.from_env()
        assert s.openai_api_key == "my-openai-key"
        assert s.openai_model == "gpt-4o-mini"
        assert s.anthropic_api_key == "my-anthropic-key"
        assert s.claude_model == "claude-sonnet-4-20250514"
        assert s.ollama_base_url == "http://myhost:11434"
        assert s.ollama_model == "llama3"
        assert s.groq_api_key == "my-groq-key"
        assert s.gemini_api_key == "my-gemini-key"
        assert s.default_provider == "anthropic"
        assert s.temperature == 0.4
        assert s.headless is False
        assert s.navigation_timeout == 15.0
        assert s.page_retries == 3
        assert s.http_fallback is False
        assert s.categories_path == "/etc/site-intel/categories.json"

    def test_from_env_defaults_without_env(self):
        with patch.dict("os.environ", {}, clear=True), \
             patch("site_intel.config.load_dotenv"):
            s = Settings.from_env()
        assert s == Settings()

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_truthy_booleans(self, raw):
        with patch.dict("os.environ", {"HEADLESS": raw}, clear=True), \
             patch("site_intel.config.load_dotenv"):
            assert Settings.from_env().headless is True

    def test_invalid_number_raises(self):
        with patch.dict("os.environ", {"NAVIGATION_TIMEOUT": "soon"}, clear=True), \
             patch("site_intel.config.load_dotenv"):
            with pytest.raises(ValueError, match="NAVIGATION_TIMEOUT must be a number"):
                Settings.from_env()

    def test_invalid_integer_raises(self):
        with patch.dict("os.environ", {"PAGE_RETRIES": "2.5"}, clear=True), \
             patch("site_intel.config.load_dotenv"):
            with pytest.raises(ValueError, match="PAGE_RETRIES must be an integer"):
                Settings.from_env()
