"""Centralized configuration loaded from .env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def _load_env() -> None:
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "")
    if not raw:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    # AI provider keys
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    anthropic_api_key: str = ""
    claude_model: str = "claude-haiku-4-5-20251001"

    # Gemini config (generous free tier, large context)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Groq config (OpenAI-compatible, free tier)
    groq_api_key: str = ""
    groq_model: str = "llama-3.1-8b-instant"

    # Ollama config
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "phi4-mini"

    default_provider: str = "openai"
    temperature: float = 0.1

    # Browser tuning (seconds)
    headless: bool = True
    navigation_timeout: float = 30.0
    evaluation_timeout: float = 10.0
    page_retries: int = 2

    # Plain HTTP fetch used when the browser gets nothing
    http_fallback: bool = True
    http_timeout: float = 10.0

    categories_path: str = ""  # empty = bundled catalog

    @classmethod
    def from_env(cls) -> Settings:
        _load_env()
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            claude_model=os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001"),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            groq_model=os.getenv("GROQ_MODEL", "llama-3.1-8b-instant"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            ollama_model=os.getenv("OLLAMA_MODEL", "phi4-mini"),
            default_provider=os.getenv("DEFAULT_PROVIDER", "openai"),
            temperature=_env_float("TEMPERATURE", 0.1),
            headless=_env_bool("HEADLESS", True),
            navigation_timeout=_env_float("NAVIGATION_TIMEOUT", 30.0),
            evaluation_timeout=_env_float("EVALUATION_TIMEOUT", 10.0),
            page_retries=_env_int("PAGE_RETRIES", 2),
            http_fallback=_env_bool("HTTP_FALLBACK", True),
            http_timeout=_env_float("HTTP_TIMEOUT", 10.0),
            categories_path=os.getenv("CATEGORIES_PATH", ""),
        )
