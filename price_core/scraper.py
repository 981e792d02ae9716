"""Orchestration of page fetching and the ordered extraction fallbacks."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .cache import OfferCache
from .config import ScraperConfig, create_config
from .errors import FetchFailure
from .fetcher import Fetcher, build_fetcher
from .models import Offer
from .normalizer import filter_store
from .sources import (
    PRODUCT_STRATEGIES,
    SEARCH_STRATEGIES,
    Extractor,
    extract_heading_price,
    find_first_product_link,
)


LOGGER = logging.getLogger(__name__)


class PriceScraper:
    """Scrape Prisjakt search and product pages into normalised offers.

    Both entry points never raise: fetch failures, malformed markup and
    unexpected errors all end up as an empty list.
    """

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        fetcher: Optional[Fetcher] = None,
        cache: Optional[OfferCache] = None,
        search_strategies: Sequence[Tuple[str, Extractor]] = SEARCH_STRATEGIES,
        product_strategies: Sequence[Tuple[str, Extractor]] = PRODUCT_STRATEGIES,
    ) -> None:
        self.config = create_config(config)
        self.fetcher = fetcher or build_fetcher(self.config)
        self.cache = cache
        self.search_strategies = tuple(search_strategies)
        self.product_strategies = tuple(product_strategies)

    def _fetch(self, url: str) -> Optional[str]:
        try:
            return self.fetcher.fetch(url)
        except FetchFailure as exc:
            LOGGER.warning("%s", exc)
            return None

    def _run_strategies(
        self, strategies: Sequence[Tuple[str, Extractor]], html: str, page_url: str
    ) -> List[Offer]:
        for name, extractor in strategies:
            offers = filter_store(extractor(html, page_url, self.config), self.config.host_brand)
            if offers:
                LOGGER.info("Strategy %s found %d offers on %s", name, len(offers), page_url)
                return offers
        return []

    def _cached(self, key: str) -> Optional[List[Offer]]:
        if self.cache is None:
            return None
        return self.cache.get(key)

    def _remember(self, key: str, offers: List[Offer]) -> None:
        if self.cache is not None and offers:
            self.cache.set(key, offers)

    def scrape_search(self, query: str) -> List[Offer]:
        """Search for ``query`` and return the offers of the best matching route."""

        try:
            key = f"search:{query.strip()}"
            cached = self._cached(key)
            if cached is not None:
                return cached

            offers = self._scrape_search(query)
        except Exception as exc:
            LOGGER.warning("Search scraping failed for %r: %s", query, exc)
            return []
        self._remember(key, offers)
        return offers

    def _scrape_search(self, query: str) -> List[Offer]:
        url = self.config.search_url(query)
        html = self._fetch(url)
        if html is None:
            return []

        offers = self._run_strategies(self.search_strategies, html, url)
        if offers:
            return offers

        product_link = find_first_product_link(html, self.config)
        if not product_link:
            LOGGER.info("No offers or product links found for %r", query)
            return []
        LOGGER.info("Following product link %s for %r", product_link, query)
        return filter_store(self.scrape_product(product_link), self.config.host_brand)

    def scrape_product(self, url_or_id: str) -> List[Offer]:
        """Return the offers of one product page given its URL or numeric id."""

        try:
            url = self.config.product_url(url_or_id.strip())
            if url is None:
                LOGGER.warning("Cannot build a product URL from %r", url_or_id)
                return []

            key = f"product:{url}"
            cached = self._cached(key)
            if cached is not None:
                return cached

            offers = self._scrape_product(url)
        except Exception as exc:
            LOGGER.warning("Product scraping failed for %r: %s", url_or_id, exc)
            return []
        self._remember(key, offers)
        return offers

    def _scrape_product(self, url: str) -> List[Offer]:
        html = self._fetch(url)
        if html is None:
            return []

        offers = self._run_strategies(self.product_strategies, html, url)
        if offers:
            return offers
        return extract_heading_price(html, url, self.config)


def scrape_search(query: str, config: Optional[ScraperConfig] = None) -> List[Offer]:
    """Convenience wrapper running a single search with a fresh scraper."""

    return PriceScraper(config).scrape_search(query)


def scrape_product(url_or_id: str, config: Optional[ScraperConfig] = None) -> List[Offer]:
    """Convenience wrapper scraping a single product page with a fresh scraper."""

    return PriceScraper(config).scrape_product(url_or_id)
