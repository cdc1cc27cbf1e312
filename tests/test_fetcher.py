"""Tests for site_intel.fetcher module."""

from __future__ import annotations

import httpx
import pytest
import respx
from tenacity import wait_none

from site_intel.errors import FetchError
from site_intel.fetcher import USER_AGENT, _get, fetch_html

URL = "https://acmecafe.co.il/"


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(_get.retry, "wait", wait_none())


class TestFetchHtml:
    async def test_returns_body_and_sends_user_agent(self, settings):
        with respx.mock:
            route = respx.get(URL).mock(return_value=httpx.Response(200, text="<html>Hello</html>"))
            result = await fetch_html(URL, settings)

        assert result == "<html>Hello</html>"
        assert route.calls.last.request.headers["user-agent"] == USER_AGENT

    async def test_retries_once_on_server_error(self, settings):
        with respx.mock:
            route = respx.get(URL).mock(side_effect=[
                httpx.Response(503),
                httpx.Response(200, text="<html>ok</html>"),
            ])
            result = await fetch_html(URL, settings)

        assert result == "<html>ok</html>"
        assert route.call_count == 2

    async def test_persistent_error_raises_fetch_error(self, settings):
        with respx.mock:
            route = respx.get(URL).mock(return_value=httpx.Response(500))
            with pytest.raises(FetchError, match="Failed to fetch"):
                await fetch_html(URL, settings)

        assert route.call_count == 2

    async def test_connection_error_not_retried(self, settings):
        with respx.mock:
            route = respx.get(URL).mock(side_effect=httpx.ConnectError("connection refused"))
            with pytest.raises(FetchError, match="connection refused"):
                await fetch_html(URL, settings)

        assert route.call_count == 1

    async def test_follows_redirects(self, settings):
        with respx.mock:
            respx.get(URL).mock(return_value=httpx.Response(301, headers={"Location": "https://www.acmecafe.co.il/"}))
            respx.get("https://www.acmecafe.co.il/").mock(return_value=httpx.Response(200, text="moved"))
            assert await fetch_html(URL, settings) == "moved"
