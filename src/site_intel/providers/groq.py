"""Groq provider: free, fast inference via OpenAI-compatible API."""

from __future__ import annotations

import logging
import threading
import time

from openai import OpenAI

from site_intel.config import Settings
from site_intel.providers.base import AIProvider

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

# Seconds between API calls to stay inside the free tier's TPM limit.
GROQ_RATE_LIMIT_DELAY = 4


class GroqProvider(AIProvider):
    name = "groq"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.groq_api_key:
            raise ValueError("GROQ_API_KEY is required for the Groq provider")
        self._client = OpenAI(
            api_key=settings.groq_api_key,
            base_url=GROQ_BASE_URL,
        )
        self._model = settings.groq_model
        self._last_call: float = 0
        self._lock = threading.Lock()

    def _rate_limit(self) -> None:
        """Wait if needed to respect Groq's TPM limit."""
        elapsed = time.time() - self._last_call
        if self._last_call and elapsed < GROQ_RATE_LIMIT_DELAY:
            wait = GROQ_RATE_LIMIT_DELAY - elapsed
            logger.info("Groq rate limit: waiting %.1fs", wait)
            time.sleep(wait)

    def _chat(self, system: str, user: str, *, max_tokens: int) -> str:
        """Send a chat request to Groq and return the response text."""
        # Passes run in worker threads; serialise so the spacing holds.
        with self._lock:
            self._rate_limit()
            try:
                response = self._client.chat.completions.create(
                    model=self._model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                    temperature=self.settings.temperature,
                    max_tokens=max_tokens,
                    response_format={"type": "json_object"},
                )
            finally:
                self._last_call = time.time()
        return response.choices[0].message.content or ""
