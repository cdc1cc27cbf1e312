"""Pydantic models for the crawl and analysis pipeline."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SHORT_DESCRIPTION_MAX = 100
DESCRIPTION_MAX = 1000
MAX_CATEGORIES = 3
DEFAULT_BUSINESS_NAME = "עסק ללא שם"
EARLIEST_LAUNCH_YEAR = 1800


class _Snapshot(BaseModel):
    """Immutable model that serialises with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# --- Crawler output ---


class MainPage(_Snapshot):
    title: str = ""
    description: str = ""
    content: str = ""
    links: list[str] = Field(default_factory=list)


class SecondaryPage(_Snapshot):
    content: str
    url: str


class ScrapedContent(_Snapshot):
    """Everything one crawl found. Returned even when the crawl failed."""

    main_page: MainPage = Field(default_factory=MainPage)
    about_page: SecondaryPage | None = None
    contact_page: SecondaryPage | None = None
    social_links: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> ScrapedContent:
        return cls(error=error or "Unknown scraping error")

    @property
    def has_content(self) -> bool:
        return bool(self.main_page.title or self.main_page.content)


# --- Analyzer output ---


class ContactInfo(_Snapshot):
    email: str | None = None
    phone: str | None = None
    whatsapp: str | None = None


class SocialUrls(_Snapshot):
    facebook: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    tiktok: str | None = None
    linkedin: str | None = None
    youtube: str | None = None


class AIAnalysisResult(_Snapshot):
    """Final structured record for one analyzed website."""

    name: str = DEFAULT_BUSINESS_NAME
    name_english: str | None = None
    short_description: str = ""
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    launch_year: int | None = None
    address: str | None = None
    contact: ContactInfo = Field(default_factory=ContactInfo)
    social_urls: SocialUrls = Field(default_factory=SocialUrls)
    confidence: float = 0.0
    warnings: list[str] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return DEFAULT_BUSINESS_NAME

    @field_validator("short_description")
    @classmethod
    def _cap_short(cls, value: str) -> str:
        return value[:SHORT_DESCRIPTION_MAX]

    @field_validator("description")
    @classmethod
    def _cap_long(cls, value: str) -> str:
        return value[:DESCRIPTION_MAX]

    @field_validator("categories")
    @classmethod
    def _cap_categories(cls, value: list[str]) -> list[str]:
        return value[:MAX_CATEGORIES]

    @field_validator("confidence")
    @classmethod
    def _bound_confidence(cls, value: float) -> float:
        return round(min(max(value, 0.0), 1.0), 2)


class SourcePages(_Snapshot):
    main: bool = False
    about: bool = False
    contact: bool = False


class AnalysisReport(_Snapshot):
    """Analysis plus the metadata a caller shows next to it."""

    url: str
    analysis: AIAnalysisResult
    analyzed_at: datetime
    source_pages: SourcePages


# --- Model responses, one schema per extraction pass ---


def _clean_str(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class _ModelResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class IdentityExtraction(_ModelResponse):
    name: str | None = None
    name_english: str | None = None
    short_description: str = ""
    description: str = ""
    launch_year: int | None = None
    address: str | None = None

    @field_validator("name", "name_english", "address", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return None
        return _clean_str(value)

    @field_validator("short_description", mode="before")
    @classmethod
    def _short(cls, value: Any) -> str:
        text = _clean_str(value) if isinstance(value, str) else None
        return (text or "")[:SHORT_DESCRIPTION_MAX]

    @field_validator("description", mode="before")
    @classmethod
    def _long(cls, value: Any) -> str:
        text = _clean_str(value) if isinstance(value, str) else None
        return (text or "")[:DESCRIPTION_MAX]

    @field_validator("launch_year", mode="before")
    @classmethod
    def _year(cls, value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int):
            return None
        if EARLIEST_LAUNCH_YEAR <= value <= date.today().year:
            return value
        return None


class CategorySelection(_ModelResponse):
    categories: list[str] = Field(default_factory=list)

    @field_validator("categories", mode="before")
    @classmethod
    def _ids(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []
        ids = []
        for item in value:
            text = _clean_str(item) if isinstance(item, str) else None
            if text:
                ids.append(text)
        return ids


class ContactExtraction(_ModelResponse):
    email: str | None = None
    phone: str | None = None
    whatsapp: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value: Any) -> str | None:
        text = _clean_str(value) if isinstance(value, str) else None
        if text and "@" in text:
            return text
        return None

    @field_validator("phone", "whatsapp", mode="before")
    @classmethod
    def _number(cls, value: Any) -> str | None:
        if isinstance(value, float):
            return None
        return _clean_str(value)


# --- Category catalog ---


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
