"""Pure text heuristics: URL helpers, page discovery and scoring, social/email/phone matching.

Nothing here touches the browser or the network, so every function can be
called on any text the crawler aggregated.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from urllib.parse import quote, unquote, urljoin, urlparse

ABOUT_PATTERNS: tuple[str, ...] = (
    "/about",
    "/about-us",
    "/אודות",
    "/עלינו",
    "/מי-אנחנו",
    "/about.html",
    "/about-us.html",
    "about",
    "אודות",
)

CONTACT_PATTERNS: tuple[str, ...] = (
    "/contact",
    "/contact-us",
    "/צור-קשר",
    "/צרו-קשר",
    "/יצירת-קשר",
    "/contact.html",
    "/contact-us.html",
    "contact",
    "צור-קשר",
)

_URL_TAIL = r"/[^\s\"'<>]+"

SOCIAL_PATTERNS: dict[str, re.Pattern[str]] = {
    "facebook": re.compile(r"https?://(?:[a-z0-9-]+\.)?facebook\.com" + _URL_TAIL, re.IGNORECASE),
    "instagram": re.compile(r"https?://(?:www\.)?instagram\.com" + _URL_TAIL, re.IGNORECASE),
    "twitter": re.compile(r"https?://(?:www\.|mobile\.)?(?:twitter|x)\.com" + _URL_TAIL, re.IGNORECASE),
    "linkedin": re.compile(r"https?://(?:[a-z0-9-]+\.)?linkedin\.com" + _URL_TAIL, re.IGNORECASE),
    "youtube": re.compile(r"https?://(?:(?:www\.|m\.)?youtube\.com|youtu\.be)" + _URL_TAIL, re.IGNORECASE),
    "tiktok": re.compile(r"https?://(?:www\.)?tiktok\.com" + _URL_TAIL, re.IGNORECASE),
}

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Placeholder addresses that show up in templates and forms
EMAIL_DENYLIST: tuple[str, ...] = ("example.", "test@", "noreply@", "no-reply@")

# Most specific first; matches from every pattern are merged in order.
_PHONE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b0\d{1,2}-?\d{7}\b"),  # 02-1234567, 050-1234567
    re.compile(r"(?<![\w+])\+972-?\d{1,2}-?\d{7}\b"),  # +972-2-1234567
    re.compile(r"\b\d{3}-\d{7}\b"),  # 050-1234567 without a leading-zero context
    re.compile(r"\b0\d{8,9}\b"),  # 0501234567
    re.compile(r"(?<![\w+])\+972\d{8,9}\b"),  # +972501234567
)

_WHATSAPP_RE = re.compile(
    r"(?:whatsapp|וואטסאפ|\bwa\b)[:\s]*(\+?\d[\d\s\-()]{7,}\d)",
    re.IGNORECASE,
)

_TRAILING_PUNCT = ".,;:!?)]}"


def normalize_url(url: str) -> str:
    """Prepend https:// when the URL has no http(s) scheme."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        return f"https://{url}"
    return url


def hostname(url: str) -> str:
    """Lower-cased hostname with any leading www. removed ("" if unparseable)."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host.lower().removeprefix("www.")


def same_host(url: str, base_url: str) -> bool:
    host = hostname(url)
    return bool(host) and host == hostname(base_url)


def dedupe(items: Iterable[str]) -> list[str]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(items))


def is_followable_href(href: str) -> bool:
    href = href.strip()
    return bool(href) and not href.startswith("#") and not href.lower().startswith("javascript:")


def _resolve_same_host(link: str, base_url: str) -> str | None:
    """Absolute http(s) URL for link when it stays on base_url's host."""
    if not is_followable_href(link):
        return None
    try:
        full_url = urljoin(base_url, link.strip())
        scheme = urlparse(full_url).scheme
    except ValueError:
        return None
    if scheme not in ("http", "https") or not same_host(full_url, base_url):
        return None
    return full_url


def find_secondary_page(
    links: Iterable[str],
    base_url: str,
    patterns: Sequence[str],
) -> str | None:
    """
    Return the first same-host link whose path matches a pattern.

    Patterns are tried in order, so an earlier pattern beats an earlier link.
    Relative links are resolved against base_url; paths are percent-decoded so
    Hebrew slugs match in either form. Off-host links never match.
    """
    candidates: list[tuple[str, str]] = []
    for link in links:
        full_url = _resolve_same_host(link, base_url)
        if full_url is not None:
            candidates.append((full_url, unquote(urlparse(full_url).path).lower()))

    for pattern in patterns:
        needle = pattern.lower()
        for full_url, path in candidates:
            if needle in path:
                return full_url
    return None


@dataclass(frozen=True)
class LinkInfo:
    """An anchor as seen on the page: href, visible text, surrounding context."""

    href: str
    text: str = ""
    context: str = ""


@dataclass(frozen=True)
class DiscoveryRules:
    """Scoring vocabulary for one kind of secondary page."""

    exact: tuple[str, ...]
    phrases: tuple[str, ...]
    keywords: tuple[str, ...]
    encoded_slugs: tuple[str, ...]
    footer_bonus: int = 0


EXACT_SCORE = 100
PHRASE_SCORE = 50
PHRASE_TEXT_BONUS = 25
KEYWORD_SCORE = 20
KEYWORD_TEXT_BONUS = 10
ENCODED_SLUG_SCORE = 120
FALSE_POSITIVE_PENALTY = 30
NAVIGATION_BONUS = 15
MAX_CANDIDATES = 3

FALSE_POSITIVE_WORDS: tuple[str, ...] = (
    "blog", "news", "products", "services", "home",
    "portfolio", "gallery", "shop", "store", "cart",
)

ABOUT_RULES = DiscoveryRules(
    exact=("/about", "/about-us", "/אודות", "/עלינו", "/about.html", "/about-us.html", "/מי-אנחנו"),
    phrases=(
        "about", "אודות", "עלינו", "קצת עלינו", "עלי", "מי אנחנו", "מי אני",
        "our story", "who we are", "מי-אנחנו",
    ),
    keywords=(
        "story", "team", "history", "mission", "vision", "company",
        "סיפור", "צוות", "היסטוריה", "משימה", "חזון", "חברה",
    ),
    encoded_slugs=(
        quote("אודות").lower(), quote("מי-אנחנו").lower(), quote("עלינו").lower(),
    ),
)

CONTACT_RULES = DiscoveryRules(
    exact=(
        "/contact", "/contact-us", "/צור-קשר", "/יצירת-קשר",
        "/contact.html", "/contact-us.html", "/צרו-קשר",
    ),
    phrases=(
        "contact", "צור-קשר", "יצירת-קשר", "צרו קשר", "בואו נדבר", "דברו איתנו",
        "reach out", "get in touch", "צור קשר", "צרו-קשר", "יצירת קשר",
        "ליצירת קשר", "פרטי התקשרות", "דרכי התקשרות",
    ),
    keywords=(
        "phone", "email", "address", "location", "reach",
        "טלפון", "אימייל", "כתובת", "מיקום", "הגעה", "התקשרות", "פרטים",
        "מידע נוסף", "פניות", "שאלות", "עזרה", "תמיכה", "support", "help",
    ),
    encoded_slugs=(
        quote("צור-קשר").lower(), quote("צרו-קשר").lower(), quote("יצירת-קשר").lower(),
    ),
    footer_bonus=10,
)


def _text_from_path(path: str) -> str:
    """Stand-in link text for bare hrefs: "/about-us/team" -> "about us team"."""
    return " ".join(seg for seg in re.split(r"[/\-_]+", path) if seg)


def score_link(url: str, text: str, context: str, rules: DiscoveryRules) -> int:
    """Score an absolute URL as a candidate for the page described by rules."""
    raw_path = urlparse(url).path.lower()
    path = unquote(raw_path)
    decoded_url = unquote(url).lower()
    text = (text or _text_from_path(path)).lower()
    context = context.lower()
    combined = f"{path} {text} {context}"

    score = 0
    if any(p in path or p in decoded_url for p in rules.exact):
        score += EXACT_SCORE
    for phrase in rules.phrases:
        if phrase in combined or phrase in decoded_url:
            score += PHRASE_SCORE
            if phrase in text:
                score += PHRASE_TEXT_BONUS
    for keyword in rules.keywords:
        if keyword in combined:
            score += KEYWORD_SCORE
            if keyword in text:
                score += KEYWORD_TEXT_BONUS
    if any(slug in raw_path for slug in rules.encoded_slugs):
        score += ENCODED_SLUG_SCORE

    score -= FALSE_POSITIVE_PENALTY * sum(1 for word in FALSE_POSITIVE_WORDS if word in combined)
    if score <= 0:
        # placement alone never makes a candidate
        return score
    if "nav" in context or "menu" in context:
        score += NAVIGATION_BONUS
    if "footer" in context:
        score += rules.footer_bonus
    return score


def _is_home(url: str) -> bool:
    parsed = urlparse(url)
    return not parsed.path.strip("/") and not parsed.query


def rank_secondary_pages(
    links: Iterable[LinkInfo],
    base_url: str,
    rules: DiscoveryRules,
    limit: int = MAX_CANDIDATES,
) -> list[str]:
    """
    Best same-host candidates for a secondary page, highest score first.

    Only positive scores qualify and the home page never does. A URL linked
    more than once keeps its best score; ties keep document order.
    """
    best: dict[str, int] = {}
    for link in links:
        full_url = _resolve_same_host(link.href, base_url)
        if full_url is None or _is_home(full_url):
            continue
        score = score_link(full_url, link.text, link.context, rules)
        if score > best.get(full_url, 0):
            best[full_url] = score
    ranked = sorted(best, key=best.__getitem__, reverse=True)
    return ranked[:limit]


def _strip_tail(url: str) -> str:
    return url.rstrip(_TRAILING_PUNCT)


def extract_social_links(text: str) -> list[str]:
    """Social profile URLs for the known platforms, deduplicated."""
    found: list[str] = []
    for pattern in SOCIAL_PATTERNS.values():
        found.extend(_strip_tail(match) for match in pattern.findall(text))
    return dedupe(found)


def extract_emails(text: str) -> list[str]:
    """Email-like strings minus obvious placeholders, deduplicated."""
    emails = []
    for match in _EMAIL_RE.findall(text):
        lowered = match.lower()
        if any(bad in lowered for bad in EMAIL_DENYLIST):
            continue
        emails.append(match)
    return dedupe(emails)


def extract_phones(text: str) -> list[str]:
    """Israeli-format phone numbers plus WhatsApp-labelled numbers, deduplicated."""
    phones: list[str] = []
    for pattern in _PHONE_PATTERNS:
        phones.extend(pattern.findall(text))
    for match in _WHATSAPP_RE.findall(text):
        phones.append(re.sub(r"[\s\-()]", "", match))
    return dedupe(phones)
