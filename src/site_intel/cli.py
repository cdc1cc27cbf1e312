"""Command-line interface for site-intel."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace

from site_intel.config import Settings
from site_intel.errors import AnalysisError, ContentUnavailableError
from site_intel.models import AnalysisReport
from site_intel.pipeline import analyze_url, scrape_url
from site_intel.providers import list_providers

EXIT_OK = 0
EXIT_ANALYSIS_FAILED = 1
EXIT_NO_CONTENT = 2

LINE = "=" * 60


def _out(msg: str = "") -> None:
    """Print a status message to stderr so it doesn't mix with JSON output."""
    print(msg, file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-intel",
        description="Crawl a business website and extract structured business information.",
    )
    parser.add_argument("url", help="Website to analyze (scheme optional, e.g. acmecafe.co.il)")
    parser.add_argument(
        "-p", "--provider",
        choices=list_providers(),
        default=None,
        help="AI provider to use (default: from .env DEFAULT_PROVIDER)",
    )
    parser.add_argument(
        "--categories",
        default=None,
        help="Path to a categories JSON file (default: bundled catalog)",
    )
    parser.add_argument(
        "--scrape-only",
        action="store_true",
        help="Only crawl the site and print the scraped content; no AI calls",
    )
    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Show the browser window while crawling",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Navigation timeout per page in seconds (default: 30)",
    )
    parser.add_argument(
        "--allow-empty",
        action="store_true",
        help="Analyze even when the crawl found no title or content",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file path (default: stdout)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def _print_summary(report: AnalysisReport) -> None:
    analysis = report.analysis
    _out(LINE)
    _out(f"  {analysis.name}")
    _out(LINE)
    _out(f"  URL:         {report.url}")
    _out(f"  Confidence:  {analysis.confidence * 100:.0f}%")
    _out(f"  Categories:  {', '.join(analysis.categories) or '-'}")
    pages = report.source_pages
    _out(f"  Pages:       main={pages.main} about={pages.about} contact={pages.contact}")
    for warning in analysis.warnings:
        _out(f"  [!] {warning}")
    _out(LINE)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = Settings.from_env()

    # Apply CLI overrides
    overrides = {}
    if args.no_headless:
        overrides["headless"] = False
    if args.timeout is not None:
        overrides["navigation_timeout"] = args.timeout
    if args.categories:
        overrides["categories_path"] = args.categories
    if overrides:
        settings = replace(settings, **overrides)

    if args.scrape_only:
        scraped = asyncio.run(scrape_url(args.url, settings))
        payload = scraped.model_dump(by_alias=True, mode="json")
    else:
        try:
            report = asyncio.run(analyze_url(
                args.url,
                settings,
                provider_name=args.provider,
                require_content=not args.allow_empty,
            ))
        except ContentUnavailableError as exc:
            _out(f"[!] {exc}")
            if exc.scraping_error:
                _out(f"    Scraping error: {exc.scraping_error}")
            return EXIT_NO_CONTENT
        except AnalysisError as exc:
            _out(f"[!] {exc}")
            return EXIT_ANALYSIS_FAILED
        except ValueError as exc:
            # Missing API key or unknown provider
            _out(f"[!] Provider setup failed: {exc}")
            return EXIT_ANALYSIS_FAILED
        _print_summary(report)
        payload = report.model_dump(by_alias=True, mode="json")

    output = json.dumps(payload, indent=2, ensure_ascii=False)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        _out(f"Output written to {args.output}")
    else:
        print(output)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
