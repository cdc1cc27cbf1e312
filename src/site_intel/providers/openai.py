"""OpenAI provider (GPT-4o by default)."""

from __future__ import annotations

from openai import OpenAI

from site_intel.config import Settings
from site_intel.providers.base import AIProvider


class OpenAIProvider(AIProvider):
    name = "openai"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for the OpenAI provider")
        self._client = OpenAI(api_key=settings.openai_api_key)

    def _chat(self, system: str, user: str, *, max_tokens: int) -> str:
        """Send a chat request to OpenAI and return the response text."""
        response = self._client.chat.completions.create(
            model=self.settings.openai_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=self.settings.temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""
