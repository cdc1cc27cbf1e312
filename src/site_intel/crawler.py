"""Single-site crawl: home page, then best-effort about and contact pages.

Stages, strictly in order:
  1. Main page:  render in the browser, extract title/meta/content/links
  2. Fallback:   plain HTTP fetch when the browser got nothing
  3. Discovery:  score same-host links for about/contact, path patterns as fallback
  4. Secondary:  render the top candidates in order (shorter caps)
  5. Heuristics: social links, emails and phones over all gathered text
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from site_intel.browser import BrowserHandle
from site_intel.cleaner import parse_html
from site_intel.config import Settings
from site_intel.extractors import (
    ABOUT_PATTERNS,
    ABOUT_RULES,
    CONTACT_PATTERNS,
    CONTACT_RULES,
    DiscoveryRules,
    LinkInfo,
    dedupe,
    extract_emails,
    extract_phones,
    extract_social_links,
    find_secondary_page,
    is_followable_href,
    normalize_url,
    rank_secondary_pages,
)
from site_intel.fetcher import fetch_html
from site_intel.models import MainPage, ScrapedContent, SecondaryPage

logger = logging.getLogger(__name__)

MAIN_SELECTORS = ("main", '[role="main"]', ".main-content", ".content", "#content", ".container", "body")
ABOUT_SELECTORS = ("main", '[role="main"]', ".content", "#content", ".about", ".about-content", "body")
CONTACT_SELECTORS = ("main", '[role="main"]', ".content", "#content", ".contact", ".contact-content", "body")

MAIN_CONTENT_LIMIT = 5000
MAIN_MIN_LENGTH = 200
ABOUT_CONTENT_LIMIT = 3000
ABOUT_MIN_LENGTH = 100
CONTACT_CONTENT_LIMIT = 2000
CONTACT_MIN_LENGTH = 50
HTTP_CONTENT_LIMIT = 3000
RETRY_WAIT_SECONDS = 1

# Runs inside the page. Returns the first content root whose cleaned text is
# longer than minLength (else the last root found), plus links, footer text and
# per-link text and context (nav/footer/header/menu ancestry, plus the parent's
# text when the parent wraps only that link).
EXTRACT_PAGE_JS = """
([selectors, minLength, maxLength]) => {
  if (!document || !document.documentElement) {
    throw new Error('Document not available');
  }
  const STRIP = 'script, style, noscript, nav, header, footer, .navigation, .menu';
  const squash = (s) => (s || '').replace(/\\s+/g, ' ').trim();
  const textOf = (el) => {
    const clone = el.cloneNode(true);
    clone.querySelectorAll(STRIP).forEach((n) => n.remove());
    return squash(clone.textContent);
  };

  let content = '';
  for (const selector of selectors) {
    const el = document.querySelector(selector);
    if (!el) continue;
    content = textOf(el);
    if (content.length > minLength) break;
  }

  const links = [];
  const linkData = [];
  document.querySelectorAll('a[href]').forEach((a) => {
    const href = a.getAttribute('href');
    links.push(href);
    let context = '';
    let el = a.parentElement;
    for (let depth = 0; depth < 3 && el; depth++) {
      const tag = el.tagName.toLowerCase();
      const cls = (typeof el.className === 'string' ? el.className : '').toLowerCase();
      const id = (el.id || '').toLowerCase();
      if (tag === 'nav' || cls.includes('nav') || id.includes('nav')) context += ' navigation';
      if (tag === 'footer' || cls.includes('footer') || id.includes('footer')) context += ' footer';
      if (tag === 'header' || cls.includes('header') || id.includes('header')) context += ' header';
      if (cls.includes('menu') || id.includes('menu')) context += ' menu';
      el = el.parentElement;
    }
    const parent = a.parentElement;
    if (parent && parent.querySelectorAll('a').length === 1) {
      context += ' ' + squash(parent.textContent).slice(0, 150);
    }
    linkData.push({href: href, text: squash(a.textContent), context: squash(context)});
  });

  const footer = [];
  document
    .querySelectorAll('footer, .footer, #footer, [class*="footer"], .contact-info, .contact-details')
    .forEach((el) => footer.push(squash(el.textContent)));

  const meta = document.querySelector('meta[name="description"]');
  return {
    title: squash(document.title),
    description: squash(meta ? meta.getAttribute('content') : ''),
    content: content.slice(0, maxLength),
    links: links,
    linkData: linkData,
    footer: footer.join(' '),
  };
}
"""

_BROWSER_ERRORS = (PlaywrightError, asyncio.TimeoutError)


@dataclass(frozen=True)
class PageSnapshot:
    """What the in-page script returned, sanitised."""

    title: str = ""
    description: str = ""
    content: str = ""
    links: list[str] = field(default_factory=list)
    footer: str = ""
    link_data: list[LinkInfo] = field(default_factory=list)

    def anchors(self) -> list[LinkInfo]:
        """Link details for discovery; bare hrefs when the script sent none."""
        return self.link_data or [LinkInfo(href) for href in self.links]

    @property
    def is_empty(self) -> bool:
        return not self.content and not self.links

    @classmethod
    def from_js(cls, raw: Any) -> PageSnapshot:
        if not isinstance(raw, dict):
            return cls()

        def string(value: Any) -> str:
            return value.strip() if isinstance(value, str) else ""

        def text(key: str) -> str:
            return string(raw.get(key))

        raw_links = raw.get("links") if isinstance(raw.get("links"), list) else []
        links = dedupe(
            href.strip() for href in raw_links if isinstance(href, str) and is_followable_href(href)
        )
        raw_data = raw.get("linkData") if isinstance(raw.get("linkData"), list) else []
        link_data = [
            LinkInfo(string(item.get("href")), string(item.get("text")), string(item.get("context")))
            for item in raw_data
            if isinstance(item, dict) and is_followable_href(string(item.get("href")))
        ]
        return cls(
            title=text("title"),
            description=text("description"),
            content=text("content"),
            links=links,
            footer=text("footer"),
            link_data=link_data,
        )


class SiteCrawler:
    """Turns a URL into ScrapedContent. scrape_website() never raises."""

    def __init__(self, settings: Settings | None = None, browser: BrowserHandle | None = None) -> None:
        self.settings = settings or Settings()
        self._owns_browser = browser is None
        self._browser = browser or BrowserHandle(self.settings)

    async def scrape_website(self, url: str) -> ScrapedContent:
        try:
            return await self._scrape(url)
        except Exception as exc:
            logger.exception("Scraping failed for %s", url)
            return ScrapedContent.failed(str(exc) or exc.__class__.__name__)

    async def close(self) -> None:
        """Release the browser if this crawler launched it."""
        if self._owns_browser:
            await self._browser.release()

    async def __aenter__(self) -> SiteCrawler:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _scrape(self, url: str) -> ScrapedContent:
        normalized = normalize_url(url)
        logger.info("Crawling %s", normalized)

        browser_error: Exception | None = None
        try:
            main = await self._scrape_main_page(normalized)
        except _BROWSER_ERRORS as exc:
            logger.warning("Browser could not load %s: %s", normalized, exc)
            browser_error = exc
            main = PageSnapshot()

        if main.is_empty:
            if not self.settings.http_fallback:
                if browser_error is not None:
                    raise browser_error
                return ScrapedContent(error=f"No content could be extracted from {normalized}")
            return await self._http_fallback(normalized, browser_error)

        about = await self._scrape_secondary(
            normalized, main, ABOUT_RULES, ABOUT_PATTERNS, ABOUT_SELECTORS,
            ABOUT_CONTENT_LIMIT, ABOUT_MIN_LENGTH, "about",
        )
        contact = await self._scrape_secondary(
            normalized, main, CONTACT_RULES, CONTACT_PATTERNS, CONTACT_SELECTORS,
            CONTACT_CONTENT_LIMIT, CONTACT_MIN_LENGTH, "contact",
        )

        gathered = " ".join(
            part for part in (
                main.content,
                about.content if about else "",
                contact.content if contact else "",
                main.footer,
            ) if part
        )
        social_links = extract_social_links(gathered + " " + " ".join(main.links))
        emails = extract_emails(gathered)
        phones = extract_phones(gathered)

        logger.info(
            "Crawl of %s done: %d chars main, about=%s, contact=%s, %d social, %d emails, %d phones",
            normalized, len(main.content), about is not None, contact is not None,
            len(social_links), len(emails), len(phones),
        )

        return ScrapedContent(
            main_page=MainPage(
                title=main.title,
                description=main.description,
                content=main.content,
                links=main.links,
            ),
            about_page=about,
            contact_page=contact,
            social_links=social_links,
            emails=emails,
            phones=phones,
        )

    async def _scrape_main_page(self, url: str) -> PageSnapshot:
        """Render the home page, on a fresh page per attempt."""
        return await self._retrying()(self._render_main_page, url)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(max(self.settings.page_retries, 1)),
            wait=wait_fixed(RETRY_WAIT_SECONDS),
            retry=retry_if_exception_type(_BROWSER_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _render_main_page(self, url: str) -> PageSnapshot:
        async with self._browser.new_page() as page:
            return await self._load_page(page, url, MAIN_SELECTORS, MAIN_MIN_LENGTH, MAIN_CONTENT_LIMIT)

    async def _scrape_secondary(
        self,
        base_url: str,
        main: PageSnapshot,
        rules: DiscoveryRules,
        patterns: tuple[str, ...],
        selectors: tuple[str, ...],
        limit: int,
        min_length: int,
        label: str,
    ) -> SecondaryPage | None:
        """
        Try the best-scored candidates in order; the first with enough content wins.

        When no link scores, fall back to plain path patterns. Each candidate
        gets the same retry budget as the main page.
        """
        candidates = rank_secondary_pages(main.anchors(), base_url, rules)
        if not candidates:
            target = find_secondary_page(main.links, base_url, patterns)
            candidates = [target] if target else []
        if not candidates:
            logger.debug("No %s page linked from %s", label, base_url)
            return None
        logger.debug("%s page candidates for %s: %s", label, base_url, candidates)

        for target in candidates:
            try:
                snapshot = await self._retrying()(
                    self._render_secondary, target, selectors, min_length, limit,
                )
            except _BROWSER_ERRORS as exc:
                logger.warning("Could not load %s page %s: %s", label, target, exc)
                continue
            if len(snapshot.content) > min_length:
                logger.info("Using %s page %s (%d chars)", label, target, len(snapshot.content))
                return SecondaryPage(content=snapshot.content, url=target)
            logger.debug("%s page %s too short (%d chars)", label, target, len(snapshot.content))
        return None

    async def _render_secondary(
        self, url: str, selectors: tuple[str, ...], min_length: int, limit: int,
    ) -> PageSnapshot:
        async with self._browser.new_page() as page:
            return await self._load_page(page, url, selectors, min_length, limit)

    async def _load_page(
        self,
        page: Page,
        url: str,
        selectors: tuple[str, ...],
        min_length: int,
        limit: int,
    ) -> PageSnapshot:
        timeout_ms = self.settings.navigation_timeout * 1000
        try:
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightError as exc:
            # Sites with long-polling never go idle; settle for the DOM.
            logger.debug("networkidle wait failed for %s (%s), retrying with domcontentloaded", url, exc)
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)

        raw = await asyncio.wait_for(
            page.evaluate(EXTRACT_PAGE_JS, [list(selectors), min_length, limit]),
            timeout=self.settings.evaluation_timeout,
        )
        return PageSnapshot.from_js(raw)

    async def _http_fallback(self, url: str, browser_error: Exception | None) -> ScrapedContent:
        logger.info("Browser returned nothing for %s, trying plain HTTP", url)
        raw_html = await fetch_html(url, self.settings)
        snapshot = parse_html(raw_html, content_limit=HTTP_CONTENT_LIMIT)

        text = snapshot.full_text
        social_links = dedupe(
            extract_social_links(text + " " + " ".join(snapshot.links)) + snapshot.social_links
        )
        error = None
        if browser_error is not None:
            error = f"Browser rendering failed ({browser_error}); used plain HTTP fallback"

        return ScrapedContent(
            main_page=MainPage(
                title=snapshot.title,
                description=snapshot.description,
                content=snapshot.text,
                links=snapshot.links,
            ),
            social_links=social_links,
            emails=extract_emails(text),
            phones=extract_phones(text),
            error=error,
        )
