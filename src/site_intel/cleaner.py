"""Regex-based HTML reduction for pages fetched without a browser.

The browser path extracts text in the page itself. When it comes back empty
the crawler falls back to raw HTML, and this module turns that HTML into the
same title/description/text/links shape.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field

from site_intel.extractors import dedupe, is_followable_href

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_META_TAG_RE = re.compile(r"<meta\b[^>]*>", re.IGNORECASE)
_ATTR_RE = re.compile(r"""([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_HREF_RE = re.compile(r"""<a\b[^>]*?\bhref\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_SOCIAL_HREF_RE = re.compile(
    r"""href\s*=\s*["']([^"']*(?:facebook|instagram|twitter|linkedin|youtube|tiktok)\.com[^"']*)["']""",
    re.IGNORECASE,
)
_BLOCK_END_RE = re.compile(r"<br\s*/?>|</p>|</div>|</li>|</h[1-6]>", re.IGNORECASE)


@dataclass(frozen=True)
class HtmlSnapshot:
    title: str = ""
    description: str = ""
    text: str = ""
    full_text: str = ""  # uncapped, for contact extraction
    links: list[str] = field(default_factory=list)
    social_links: list[str] = field(default_factory=list)


def clean_html(raw_html: str) -> str:
    """Strip script/style bodies, boilerplate elements and comments."""
    text = raw_html
    # Remove script bodies
    text = re.sub(r"<script[^>]*>.*?</script>", "", text, flags=re.DOTALL | re.IGNORECASE)
    # Remove style bodies
    text = re.sub(r"<style[^>]*>.*?</style>", "", text, flags=re.DOTALL | re.IGNORECASE)
    # Remove HTML comments
    text = re.sub(r"<!--.*?-->", "", text, flags=re.DOTALL)
    # Remove boilerplate elements (nav, header, iframe, noscript)
    text = re.sub(r"<nav[^>]*>.*?</nav>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<header[^>]*>.*?</header>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<iframe[^>]*>.*?</iframe>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<noscript[^>]*>.*?</noscript>", "", text, flags=re.DOTALL | re.IGNORECASE)
    return text.strip()


def html_to_text(raw_html: str) -> str:
    """Visible text of an HTML document, whitespace collapsed."""
    text = clean_html(raw_html)
    text = _BLOCK_END_RE.sub("\n", text)
    text = re.sub(r"<[^>]+>", " ", text)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def _meta_description(raw_html: str) -> str:
    for tag in _META_TAG_RE.findall(raw_html):
        attrs = {name.lower(): a or b for name, a, b in _ATTR_RE.findall(tag)}
        if attrs.get("name", "").lower() == "description":
            return html.unescape(attrs.get("content", "")).strip()
    return ""


def parse_html(raw_html: str, *, content_limit: int = 3000, link_limit: int = 50) -> HtmlSnapshot:
    """Pull title, meta description, text, links and social hrefs out of raw HTML."""
    title_match = _TITLE_RE.search(raw_html)
    title = html.unescape(re.sub(r"\s+", " ", title_match.group(1))).strip() if title_match else ""

    full_text = html_to_text(raw_html)
    links = dedupe(href.strip() for href in _HREF_RE.findall(raw_html) if is_followable_href(href))

    return HtmlSnapshot(
        title=title,
        description=_meta_description(raw_html),
        text=full_text[:content_limit],
        full_text=full_text,
        links=links[:link_limit],
        social_links=dedupe(_SOCIAL_HREF_RE.findall(raw_html)),
    )
