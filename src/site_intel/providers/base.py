"""Abstract base class for all AI providers."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

from site_intel.config import Settings
from site_intel.errors import ExtractionError, ServiceUnavailableError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You extract structured business information from website content. \
Only report facts that appear in the content; never invent data. \
Return ONLY one valid JSON object, with no commentary and no code fences."""


class AIProvider(ABC):
    """Contract for language-model backends used by the analyzer."""

    name: str

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def _chat(self, system: str, user: str, *, max_tokens: int) -> str:
        """Send one request in JSON mode and return the raw response text."""
        ...

    def complete_json(self, prompt: str, *, max_tokens: int = 1000) -> dict:
        """
        Run one extraction prompt and return the parsed JSON object.

        Raises:
            ServiceUnavailableError: the request itself failed (network, auth, quota).
            ExtractionError: the service answered but not with a JSON object.
        """
        try:
            raw = self._chat(SYSTEM_PROMPT, prompt, max_tokens=max_tokens)
        except Exception as exc:
            logger.error("%s request failed: %s", self.name, exc)
            raise ServiceUnavailableError(f"{self.name} request failed: {exc}") from exc
        return self._parse_response(raw)

    def _parse_response(self, raw_json: str) -> dict:
        """Parse a model response into a dict, tolerating fences and trailing text."""
        text = (raw_json or "").strip()

        # Strip markdown code fences if present (```json ... ```)
        if text.startswith("```"):
            first_nl = text.find("\n")
            if first_nl != -1:
                text = text[first_nl + 1:]
            if text.rstrip().endswith("```"):
                text = text.rstrip()[:-3].rstrip()

        # Try direct parse first
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            # Models sometimes add prose after the object; keep the first object.
            start = text.find("{")
            try:
                parsed, _ = json.JSONDecoder().raw_decode(text[start:]) if start != -1 else (None, 0)
            except json.JSONDecodeError:
                parsed = None

        if not isinstance(parsed, dict):
            raise ExtractionError(f"Failed to parse AI response: {text[:200]}")
        return parsed
