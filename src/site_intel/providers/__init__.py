"""Provider registry and factory with lazy imports."""

from __future__ import annotations

import importlib

from site_intel.config import Settings
from site_intel.providers.base import AIProvider

_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "site_intel.providers.openai.OpenAIProvider",
    "anthropic": "site_intel.providers.anthropic.AnthropicProvider",
    "ollama": "site_intel.providers.ollama.OllamaProvider",
    "groq": "site_intel.providers.groq.GroqProvider",
    "gemini": "site_intel.providers.gemini.GeminiProvider",
}


def get_provider(name: str, settings: Settings) -> AIProvider:
    """Instantiate an AI provider by name. Uses lazy imports."""
    if name not in _PROVIDER_REGISTRY:
        available = ", ".join(sorted(_PROVIDER_REGISTRY))
        raise ValueError(f"Unknown provider '{name}'. Available: {available}")

    module_path, class_name = _PROVIDER_REGISTRY[name].rsplit(".", 1)
    module = importlib.import_module(module_path)
    provider_class = getattr(module, class_name)
    return provider_class(settings)


def list_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)
