"""Turns ScrapedContent into an AIAnalysisResult.

Four independent passes read the same ScrapedContent and fill disjoint parts
of the result:
  identity: name, descriptions, launch year, address (model)
  category: up to 3 catalog ids (model, validated against the catalog)
  contact: best email / phone / WhatsApp (model)
  social: platform URLs bucketed by hostname (no model call)

The model passes run concurrently. A failing pass contributes defaults and a
warning; only when every model pass fails to reach the service does
analyze_website() raise.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar
from urllib.parse import urlparse

from site_intel.catalog import CategoryCatalog, load_catalog
from site_intel.errors import AnalysisError, ServiceUnavailableError
from site_intel.extractors import dedupe
from site_intel.models import (
    MAX_CATEGORIES,
    AIAnalysisResult,
    CategorySelection,
    ContactExtraction,
    ContactInfo,
    IdentityExtraction,
    ScrapedContent,
    SocialUrls,
)
from site_intel.prompts import CATEGORY_PROMPT, CONTACT_PROMPT, IDENTITY_PROMPT
from site_intel.providers.base import AIProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

IDENTITY_CONTENT_LIMIT = 8000
CATEGORY_CONTENT_LIMIT = 5000
CONTACT_CONTENT_LIMIT = 6000

IDENTITY_MAX_TOKENS = 1500
CATEGORY_MAX_TOKENS = 500
CONTACT_MAX_TOKENS = 300

MODEL_PASSES = 3

# hostname suffixes per SocialUrls slot
SOCIAL_HOSTS: dict[str, tuple[str, ...]] = {
    "facebook": ("facebook.com", "fb.com"),
    "instagram": ("instagram.com",),
    "twitter": ("twitter.com", "x.com"),
    "linkedin": ("linkedin.com",),
    "youtube": ("youtube.com", "youtu.be"),
    "tiktok": ("tiktok.com",),
}

# Confidence rubric, 100 points total
POINTS_TITLE = 10
POINTS_META_DESCRIPTION = 10
POINTS_RICH_CONTENT = 10
RICH_CONTENT_CHARS = 500
POINTS_NAME = 15
POINTS_SHORT_DESCRIPTION = 10
POINTS_DESCRIPTION = 15
POINTS_EMAIL = 8
POINTS_PHONE = 6
POINTS_WHATSAPP = 6
POINTS_ABOUT_PAGE = 5
POINTS_CONTACT_PAGE = 5
MAX_POINTS = 100


def _join(parts: list[str], limit: int) -> str:
    return "\n\n".join(parts)[:limit]


def _social_slot(link: str) -> str | None:
    try:
        host = (urlparse(link).hostname or "").lower()
    except ValueError:
        return None
    if not host:
        return None
    for slot, domains in SOCIAL_HOSTS.items():
        if any(host == domain or host.endswith("." + domain) for domain in domains):
            return slot
    return None


class ContentAnalyzer:
    """Runs the extraction passes against one AI provider and a category catalog."""

    def __init__(self, provider: AIProvider, catalog: CategoryCatalog | None = None) -> None:
        self._provider = provider
        self._catalog = catalog if catalog is not None else load_catalog()

    async def analyze_website(self, content: ScrapedContent) -> AIAnalysisResult:
        warnings: list[str] = []
        if content.error:
            warnings.append(f"Scraping issue: {content.error}")

        passes = await asyncio.gather(
            self._run_pass("Business info", self.analyze_basic_content(content), IdentityExtraction()),
            self._run_pass("Category", self.categorize_website(content), []),
            self._run_pass("Contact", self.extract_contact_info(content), ContactInfo()),
        )
        (identity, identity_error), (categories, category_error), (contact, contact_error) = passes
        social_urls = self.extract_social_urls(content)

        failures = [(label, exc) for label, exc in (
            ("Business info", identity_error),
            ("Category", category_error),
            ("Contact", contact_error),
        ) if exc is not None]
        if len(failures) == MODEL_PASSES and all(isinstance(exc, ServiceUnavailableError) for _, exc in failures):
            first = failures[0][1]
            raise AnalysisError(f"AI analysis failed: {first}") from first
        warnings.extend(f"{label} extraction failed: {exc}" for label, exc in failures)

        confidence = self.calculate_confidence(content, identity, contact)
        result = AIAnalysisResult(
            name=identity.name,
            name_english=identity.name_english,
            short_description=identity.short_description,
            description=identity.description,
            categories=categories,
            launch_year=identity.launch_year,
            address=identity.address,
            contact=contact,
            social_urls=social_urls,
            confidence=confidence,
            warnings=warnings,
        )
        logger.info(
            "Analysis done: confidence=%.2f, %d categories, %d warnings",
            result.confidence, len(result.categories), len(result.warnings),
        )
        return result

    async def _run_pass(
        self,
        label: str,
        pass_coro: Awaitable[T],
        default: T,
    ) -> tuple[T, Exception | None]:
        """Await one pass; on failure return the default and the error."""
        try:
            return await pass_coro, None
        except Exception as exc:
            logger.warning("%s pass failed: %s", label, exc)
            return default, exc

    async def _complete(self, prompt: str, max_tokens: int) -> dict:
        # Provider SDKs are blocking; keep them off the event loop.
        return await asyncio.to_thread(self._provider.complete_json, prompt, max_tokens=max_tokens)

    async def analyze_basic_content(self, content: ScrapedContent) -> IdentityExtraction:
        """Business name, English name, descriptions, launch year and address."""
        text = _join(
            [
                content.main_page.title,
                content.main_page.description,
                content.main_page.content,
                content.about_page.content if content.about_page else "",
                content.contact_page.content if content.contact_page else "",
            ],
            IDENTITY_CONTENT_LIMIT,
        )
        data = await self._complete(IDENTITY_PROMPT.format(content=text), IDENTITY_MAX_TOKENS)
        return IdentityExtraction.model_validate(data)

    async def categorize_website(self, content: ScrapedContent) -> list[str]:
        """Up to 3 category ids, each guaranteed to exist in the catalog."""
        text = _join(
            [
                content.main_page.title,
                content.main_page.description,
                content.main_page.content,
                content.about_page.content if content.about_page else "",
            ],
            CATEGORY_CONTENT_LIMIT,
        )
        prompt = CATEGORY_PROMPT.format(categories=self._catalog.prompt_listing(), content=text)
        data = await self._complete(prompt, CATEGORY_MAX_TOKENS)

        selection = CategorySelection.model_validate(data)
        resolved = {cat_id: self._catalog.get(cat_id) for cat_id in dedupe(selection.categories)}
        dropped = [cat_id for cat_id, category in resolved.items() if category is None]
        if dropped:
            logger.debug("Dropped unknown category ids: %s", dropped)
        chosen = [category for category in resolved.values() if category is not None][:MAX_CATEGORIES]
        logger.info("Categorized as: %s", ", ".join(f"{c.id} ({c.name})" for c in chosen) or "none")
        return [category.id for category in chosen]

    async def extract_contact_info(self, content: ScrapedContent) -> ContactInfo:
        """The single best email, phone and WhatsApp contact."""
        text = _join(
            [
                content.contact_page.content if content.contact_page else "",
                content.main_page.content,
                content.about_page.content if content.about_page else "",
            ],
            CONTACT_CONTENT_LIMIT,
        )
        prompt = CONTACT_PROMPT.format(
            content=text,
            emails=", ".join(content.emails) or "none",
            phones=", ".join(content.phones) or "none",
        )
        data = await self._complete(prompt, CONTACT_MAX_TOKENS)
        extracted = ContactExtraction.model_validate(data)
        return ContactInfo(email=extracted.email, phone=extracted.phone, whatsapp=extracted.whatsapp)

    @staticmethod
    def extract_social_urls(content: ScrapedContent) -> SocialUrls:
        """Bucket crawled social links by platform. Unparseable links are skipped."""
        slots: dict[str, str] = {}
        for link in content.social_links:
            slot = _social_slot(link)
            if slot is not None:
                slots[slot] = link
        return SocialUrls(**slots)

    @staticmethod
    def calculate_confidence(
        content: ScrapedContent,
        identity: IdentityExtraction,
        contact: ContactInfo,
    ) -> float:
        """Deterministic 0-1 score of how much usable signal was found."""
        score = 0

        # Main content quality
        if content.main_page.title:
            score += POINTS_TITLE
        if content.main_page.description:
            score += POINTS_META_DESCRIPTION
        if len(content.main_page.content) > RICH_CONTENT_CHARS:
            score += POINTS_RICH_CONTENT

        # Business info
        if identity.name:
            score += POINTS_NAME
        if identity.short_description:
            score += POINTS_SHORT_DESCRIPTION
        if identity.description:
            score += POINTS_DESCRIPTION

        # Contact info
        if contact.email:
            score += POINTS_EMAIL
        if contact.phone:
            score += POINTS_PHONE
        if contact.whatsapp:
            score += POINTS_WHATSAPP

        # Secondary pages
        if content.about_page is not None:
            score += POINTS_ABOUT_PAGE
        if content.contact_page is not None:
            score += POINTS_CONTACT_PAGE

        return round(score / MAX_POINTS, 2)
