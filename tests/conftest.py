"""Shared fixtures for site_intel tests."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager

import pytest
from playwright.async_api import Error as PlaywrightError

from site_intel.catalog import load_catalog
from site_intel.config import Settings
from site_intel.providers.base import AIProvider


@pytest.fixture()
def settings() -> Settings:
    """Dummy keys and a single page attempt so failing tests don't sleep."""
    return Settings(
        openai_api_key="test-openai-key",
        anthropic_api_key="test-anthropic-key",
        groq_api_key="test-groq-key",
        gemini_api_key="test-gemini-key",
        page_retries=1,
        evaluation_timeout=1.0,
    )


@pytest.fixture()
def catalog():
    return load_catalog()


# --- Browser fake ---


class FakePage:
    def __init__(self, browser: FakeBrowser) -> None:
        self._browser = browser
        self.url: str | None = None

    async def goto(self, url: str, wait_until: str = "load", timeout: float | None = None) -> None:
        self._browser.visited.append(url)
        self.url = url
        result = self._browser.pages.get(url)
        if isinstance(result, Exception):
            raise result
        if result is None:
            raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")

    async def evaluate(self, script: str, arg=None):
        return self._browser.pages[self.url]


class FakeBrowser:
    """Stands in for BrowserHandle; serves canned in-page script results by URL."""

    def __init__(self, pages: dict | None = None) -> None:
        self.pages = pages or {}
        self.visited: list[str] = []
        self.opened = 0
        self.closed = 0
        self.released = False

    @asynccontextmanager
    async def new_page(self, *, block_resources: bool = True):
        self.opened += 1
        try:
            yield FakePage(self)
        finally:
            self.closed += 1

    async def release(self) -> None:
        self.released = True


@pytest.fixture()
def fake_browser():
    return FakeBrowser


ACME_MAIN_CONTENT = (
    "Acme Cafe is a neighbourhood coffee shop in the heart of Tel Aviv. "
    "We roast our own beans every morning and serve fresh pastries, sandwiches "
    "and seasonal salads. Open Sunday to Friday. Write to info@acmecafe.co.il "
    "or call 03-5551234 to book the back room for private events and workshops."
)

ACME_ABOUT_CONTENT = (
    "Founded in 2015 by two baristas, Acme Cafe started as a tiny kiosk and grew "
    "into a full cafe with a bakery, a roastery and a small event space."
)

ACME_CONTACT_CONTENT = "Visit us at Dizengoff 100, Tel Aviv. Email hello@acmecafe.co.il for catering."


@pytest.fixture()
def acme_pages() -> dict:
    """In-page script results for a small three-page cafe site."""
    return {
        "https://acmecafe.co.il": {
            "title": "Acme Cafe | Tel Aviv",
            "description": "Specialty coffee and pastries in Tel Aviv",
            "content": ACME_MAIN_CONTENT,
            "links": [
                "/",
                "/about",
                "/contact",
                "/about",
                "https://facebook.com/acmecafe",
                "https://other.com/about",
                "#top",
                "javascript:void(0)",
            ],
            "footer": "Call 050-1234567 WhatsApp: 050-7654321",
        },
        "https://acmecafe.co.il/about": {
            "title": "About",
            "description": "",
            "content": ACME_ABOUT_CONTENT,
            "links": [],
            "footer": "",
        },
        "https://acmecafe.co.il/contact": {
            "title": "Contact",
            "description": "",
            "content": ACME_CONTACT_CONTENT,
            "links": [],
            "footer": "",
        },
    }


# --- AI provider fake ---


def _pass_for(prompt: str) -> str:
    if "Available categories" in prompt:
        return "category"
    if "Already detected emails" in prompt:
        return "contact"
    return "identity"


class FakeProvider(AIProvider):
    """Answers each extraction pass from a canned dict, raw string, or exception."""

    name = "fake"

    def __init__(self, identity=None, category=None, contact=None) -> None:
        super().__init__(Settings())
        self.responses = {
            "identity": identity if identity is not None else {},
            "category": category if category is not None else {},
            "contact": contact if contact is not None else {},
        }
        self.calls: list[tuple[str, str, int]] = []

    def _chat(self, system: str, user: str, *, max_tokens: int) -> str:
        kind = _pass_for(user)
        self.calls.append((kind, user, max_tokens))
        response = self.responses[kind]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)


@pytest.fixture()
def fake_provider():
    return FakeProvider


SAMPLE_HTML = """\
<!DOCTYPE html>
<html>
<head>
    <title>Acme Cafe &amp; Bakery</title>
    <meta name="description" content="Coffee, pastries &amp; events">
    <script>var x = 1; console.log("hello");</script>
    <style>body { color: red; }</style>
</head>
<body>
    <nav><a href="/home">Home</a><a href="/about">About</a></nav>
    <div class="content">
        <h1>Welcome to Acme</h1>
        <p>Fresh coffee every day. Contact <a href="/contact">us</a>.</p>
        <p>Email info@acmecafe.co.il or call 03-5551234.</p>
        <a href="https://www.instagram.com/acmecafe">Instagram</a>
        <a href="#top">Back to top</a>
    </div>
    <footer>Copyright 2024</footer>
    <!-- This is a comment -->
    <noscript>Please enable JavaScript</noscript>
    <iframe src="https://ads.example.com"></iframe>
</body>
</html>
"""


@pytest.fixture()
def sample_html() -> str:
    return SAMPLE_HTML
