"""Owned headless-browser resource shared by all crawls in one process."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Browser, Page, Playwright, Route, async_playwright
from playwright.async_api import Error as PlaywrightError

from site_intel.config import Settings
from site_intel.fetcher import USER_AGENT

logger = logging.getLogger(__name__)

VIEWPORT = {"width": 1920, "height": 1080}

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
]

# Heavy resources that never carry text
BLOCKED_RESOURCE_TYPES = frozenset({"font", "image", "media", "websocket"})


async def _block_heavy_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class BrowserHandle:
    """
    One lazily-launched Chromium process, handed out as isolated pages.

    Construct once per worker process and pass it to every SiteCrawler.
    Concurrent callers each get their own browser context from new_page(),
    so no page state is shared. Call release() (or use `async with`) at
    shutdown so the browser process does not outlive its owner.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def acquire(self) -> Browser:
        """Launch the browser on first use; relaunch it if it has died."""
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser
            if self._browser is not None:
                logger.warning("Browser connection lost, relaunching")
                await self._shutdown()

            self._playwright = await async_playwright().start()
            try:
                self._browser = await self._playwright.chromium.launch(
                    headless=self.settings.headless,
                    args=LAUNCH_ARGS,
                )
            except Exception:
                # The driver process outlives a failed launch unless stopped here.
                await self._playwright.stop()
                self._playwright = None
                raise
            logger.info("Launched headless Chromium (headless=%s)", self.settings.headless)
            return self._browser

    @asynccontextmanager
    async def new_page(self, *, block_resources: bool = True) -> AsyncIterator[Page]:
        """Yield a fresh page in its own context; the context is closed on exit."""
        browser = await self.acquire()
        context = await browser.new_context(
            user_agent=USER_AGENT,
            viewport=VIEWPORT,
            ignore_https_errors=True,
        )
        try:
            page = await context.new_page()
            timeout_ms = self.settings.navigation_timeout * 1000
            page.set_default_timeout(timeout_ms)
            page.set_default_navigation_timeout(timeout_ms)
            if block_resources:
                await page.route("**/*", _block_heavy_resources)
            yield page
        finally:
            try:
                await context.close()
            except PlaywrightError as exc:
                logger.debug("Failed to close browser context: %s", exc)

    async def release(self) -> None:
        """Close the browser process. Safe to call more than once."""
        async with self._lock:
            await self._shutdown()

    async def _shutdown(self) -> None:
        browser, playwright = self._browser, self._playwright
        self._browser = None
        self._playwright = None
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.warning("Error closing browser: %s", exc)
        if playwright is not None:
            await playwright.stop()
            logger.info("Browser released")

    async def __aenter__(self) -> BrowserHandle:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.release()
