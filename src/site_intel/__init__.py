"""site-intel - crawl a business website and extract structured business facts."""

__version__ = "0.1.0"

from site_intel.analyzer import ContentAnalyzer
from site_intel.browser import BrowserHandle
from site_intel.crawler import SiteCrawler
from site_intel.models import AIAnalysisResult, AnalysisReport, ScrapedContent
from site_intel.pipeline import analyze_url, scrape_url

__all__ = [
    "AIAnalysisResult",
    "AnalysisReport",
    "BrowserHandle",
    "ContentAnalyzer",
    "ScrapedContent",
    "SiteCrawler",
    "analyze_url",
    "scrape_url",
]
