"""Ollama provider for local model inference (e.g., phi4-mini)."""

from __future__ import annotations

import httpx

from site_intel.config import Settings
from site_intel.providers.base import AIProvider

OLLAMA_TIMEOUT = 300


class OllamaProvider(AIProvider):
    name = "ollama"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self._base_url = settings.ollama_base_url.rstrip("/")
        self._model = settings.ollama_model

    def _chat(self, system: str, user: str, *, max_tokens: int) -> str:
        """Send a chat request to Ollama and return the response text."""
        payload: dict = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
            "format": "json",
            "options": {
                "temperature": self.settings.temperature,
                "num_ctx": 16384,
                "num_predict": max_tokens,
            },
        }

        with httpx.Client(timeout=OLLAMA_TIMEOUT) as client:
            response = client.post(f"{self._base_url}/api/chat", json=payload)
            response.raise_for_status()

        return response.json().get("message", {}).get("content", "")
