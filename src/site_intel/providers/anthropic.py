"""Anthropic Claude provider."""

from __future__ import annotations

import anthropic

from site_intel.config import Settings
from site_intel.providers.base import AIProvider


class AnthropicProvider(AIProvider):
    name = "anthropic"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required for the Anthropic provider")
        self._client = anthropic.Anthropic(api_key=settings.anthropic_api_key)

    def _chat(self, system: str, user: str, *, max_tokens: int) -> str:
        """Send a chat request to Anthropic and return the response text."""
        response = self._client.messages.create(
            model=self.settings.claude_model,
            max_tokens=max_tokens,
            system=system,
            messages=[{"role": "user", "content": user}],
            temperature=self.settings.temperature,
        )
        # No JSON mode; base parser strips fences and trailing prose.
        return "".join(block.text for block in response.content if block.type == "text")
