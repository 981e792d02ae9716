"""High level lookups built on top of :class:`~price_core.scraper.PriceScraper`."""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List, Optional

from .models import LookupResult
from .normalizer import filter_store
from .scraper import PriceScraper

LOGGER = logging.getLogger(__name__)

_VERSION_SUFFIX = re.compile(r"\s+ver\s+[\d.]+", re.IGNORECASE)


def clean_module_number(module_number: str) -> str:
    """Strip firmware-style suffixes such as ``" ver 5.53.13"``."""

    return _VERSION_SUFFIX.sub("", module_number).strip()


def lookup_prices(module_number: str, scraper: Optional[PriceScraper] = None) -> LookupResult:
    """Search prices for one module identifier.

    A search that narrows down to a single offer is refined by scraping that
    product's page, which lists every store instead of only the cheapest one.
    """

    scraper = scraper or PriceScraper()
    query = clean_module_number(module_number)
    result = LookupResult(module_number=module_number, query=query)
    if not query:
        return result

    offers = scraper.scrape_search(query)
    if len(offers) == 1:
        refined = filter_store(
            scraper.scrape_product(offers[0].store_url), scraper.config.host_brand
        )
        if refined:
            result.offers = refined
            result.refined = True
            return result
    result.offers = offers
    return result


def refresh_prices(
    module_numbers: Iterable[str],
    scraper: Optional[PriceScraper] = None,
    retries: int = 1,
    on_result: Optional[Callable[[LookupResult], None]] = None,
) -> List[LookupResult]:
    """Look up every module sequentially, retrying empty results.

    ``on_result`` is invoked after each module so callers can update their
    state incrementally.
    """

    scraper = scraper or PriceScraper()
    results: List[LookupResult] = []
    for module_number in module_numbers:
        result = lookup_prices(module_number, scraper)
        attempts = 1
        while not result.offers and attempts <= retries and result.query:
            LOGGER.info("No offers for %s, retrying (%d/%d)", module_number, attempts, retries)
            result = lookup_prices(module_number, scraper)
            attempts += 1
        result.attempts = attempts
        results.append(result)
        if on_result is not None:
            on_result(result)
    return results
