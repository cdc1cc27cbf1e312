"""Plain HTTP fetch of a page's HTML, used when the browser comes back empty."""

from __future__ import annotations

import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from site_intel.config import Settings
from site_intel.errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@retry(
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.HTTPStatusError)),
    reraise=True,
)
async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    response = await client.get(url)
    response.raise_for_status()
    return response


async def fetch_html(url: str, settings: Settings) -> str:
    """
    Fetch the raw (unrendered) HTML for a URL.

    Timeouts and HTTP error statuses are retried once; anything that still
    fails is raised as FetchError.
    """
    try:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            response = await _get(client, url)
    except Exception as exc:
        logger.error("Fetch failed for %s: %s", url, exc)
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc

    logger.info("Fetched %d bytes from %s", len(response.text), url)
    return response.text
