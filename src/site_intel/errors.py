"""Exception hierarchy for the crawl and analysis pipeline."""

from __future__ import annotations


class SiteIntelError(Exception):
    """Base class for all site_intel errors."""


class FetchError(SiteIntelError):
    """Raised when plain HTML fetching fails after all retries."""


class ExtractionError(SiteIntelError):
    """Raised when the model's response cannot be turned into a result."""


class ServiceUnavailableError(ExtractionError):
    """Raised when the model service itself fails (network, auth, quota)."""


class AnalysisError(SiteIntelError):
    """Raised when analysis cannot produce any result at all."""


class ContentUnavailableError(SiteIntelError):
    """Raised when a crawl yields nothing worth analyzing."""

    def __init__(self, message: str, scraping_error: str | None = None) -> None:
        super().__init__(message)
        self.scraping_error = scraping_error
