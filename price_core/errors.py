"""Failure types raised inside the scraping pipeline.

None of these escape the public scrape entry points; they are converted into
empty offer lists by :class:`price_core.scraper.PriceScraper`.
"""
from __future__ import annotations

from typing import Optional


class ScrapeError(Exception):
    """Base class for recoverable scraping failures."""


class FetchFailure(ScrapeError):
    """A page could not be retrieved (network error or non-2xx status)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "network error")
        super().__init__(f"Fetching {url} failed: {detail}")


class ParseFailure(ScrapeError):
    """An embedded structured-data block was not valid JSON."""
