"""Crawl-then-analyze for one URL."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from site_intel.analyzer import ContentAnalyzer
from site_intel.browser import BrowserHandle
from site_intel.catalog import CategoryCatalog, load_catalog
from site_intel.config import Settings
from site_intel.crawler import SiteCrawler
from site_intel.errors import ContentUnavailableError
from site_intel.extractors import normalize_url
from site_intel.models import AnalysisReport, ScrapedContent, SourcePages
from site_intel.providers import get_provider
from site_intel.providers.base import AIProvider

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = (
    "Could not extract meaningful content from the website. The site might be "
    "protected, require JavaScript, or be temporarily unavailable."
)


async def scrape_url(
    url: str,
    settings: Settings | None = None,
    browser: BrowserHandle | None = None,
) -> ScrapedContent:
    """Crawl one site. A browser created here is released before returning."""
    crawler = SiteCrawler(settings or Settings.from_env(), browser=browser)
    try:
        return await crawler.scrape_website(url)
    finally:
        await crawler.close()


async def analyze_url(
    url: str,
    settings: Settings | None = None,
    *,
    provider_name: str | None = None,
    provider: AIProvider | None = None,
    catalog: CategoryCatalog | None = None,
    browser: BrowserHandle | None = None,
    require_content: bool = True,
) -> AnalysisReport:
    """
    Crawl a site and analyze what was found.

    Args:
        provider_name: AI provider to use. Defaults to settings.default_provider.
        provider: Ready-made provider; overrides provider_name.
        catalog: Category catalog. Defaults to settings.categories_path or the bundled one.
        browser: Shared browser handle. When omitted a private browser is launched and released.
        require_content: Raise ContentUnavailableError instead of analyzing an empty crawl.

    Raises:
        ContentUnavailableError: require_content is set and the crawl found no title or content.
        AnalysisError: the AI service could not be reached for any pass.
    """
    if settings is None:
        settings = Settings.from_env()
    if provider is None:
        provider = get_provider(provider_name or settings.default_provider, settings)
    if catalog is None:
        catalog = load_catalog(settings.categories_path or None)

    scraped = await scrape_url(url, settings, browser=browser)
    logger.info(
        "Scraping completed: main=%d chars, about=%s, contact=%s, social=%d, emails=%d, phones=%d",
        len(scraped.main_page.content),
        scraped.about_page is not None,
        scraped.contact_page is not None,
        len(scraped.social_links),
        len(scraped.emails),
        len(scraped.phones),
    )

    if require_content and not scraped.has_content:
        raise ContentUnavailableError(NO_CONTENT_MESSAGE, scraping_error=scraped.error)

    analysis = await ContentAnalyzer(provider, catalog).analyze_website(scraped)

    return AnalysisReport(
        url=normalize_url(url),
        analysis=analysis,
        analyzed_at=datetime.now(timezone.utc),
        source_pages=SourcePages(
            main=bool(scraped.main_page.content),
            about=scraped.about_page is not None,
            contact=scraped.contact_page is not None,
        ),
    )
