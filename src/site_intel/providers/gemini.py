"""Google Gemini provider: generous free tier, large context window."""

from __future__ import annotations

from google import genai
from google.genai import types

from site_intel.config import Settings
from site_intel.providers.base import AIProvider


class GeminiProvider(AIProvider):
    name = "gemini"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required for the Gemini provider")
        self._client = genai.Client(api_key=settings.gemini_api_key)
        self._model = settings.gemini_model

    def _chat(self, system: str, user: str, *, max_tokens: int) -> str:
        """Send a request to Gemini and return the response text."""
        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=self.settings.temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json",
        )
        response = self._client.models.generate_content(
            model=self._model,
            config=config,
            contents=user,
        )
        return response.text or ""
