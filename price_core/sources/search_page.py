"""Extractors for Prisjakt search result listings."""
from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from bs4 import NavigableString, Tag

from ..config import ScraperConfig
from ..models import AvailabilityStatus, Offer
from ..normalizer import dedupe
from .markup_common import (
    PRODUCT_LINK_PATTERN,
    absolute_url,
    clean_text,
    extract_text,
    host_brand_patterns,
    is_noise_label,
    make_soup,
    parse_labelled_price,
    parse_price_from_text,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchCardSelectors:
    """Selectors describing the highlighted best-offer card of a search page."""

    product_link: Sequence[str]
    price: Sequence[str]
    store: Sequence[str]
    store_prefix: str = "hos"


@dataclass(frozen=True)
class ListingSelectors:
    """Selectors used when scanning arbitrary anchors of a listing page."""

    title: Sequence[str]
    store: Sequence[str]


PRIMARY_CARD = SearchCardSelectors(
    product_link=("a[class*='productName'][href]",),
    price=("p[class*='text-m'][class*='font-heaviest']",),
    store=("span[class*='font-heaviest']",),
)

LISTING = ListingSelectors(
    title=("h3", "h2"),
    store=("span[class*='font-heaviest']",),
)

CARD_NOISE_PATTERNS = (
    re.compile(r"\bbutik\b", re.IGNORECASE),
    re.compile(r"\bannons\b", re.IGNORECASE),
    re.compile(r"\bkr\b", re.IGNORECASE),
)

_CARD_SEARCH_DEPTH = 8


def _card_noise(config: ScraperConfig) -> Tuple[re.Pattern[str], ...]:
    return CARD_NOISE_PATTERNS + host_brand_patterns(config.host_brand)


def _sold_by(scope: Tag, selectors: SearchCardSelectors | ListingSelectors, prefix: str = "hos") -> Optional[str]:
    """Return the store named in a ``hos <span>Store</span>`` block."""

    for selector in selectors.store:
        for span in scope.select(selector):
            previous = span.previous_sibling
            if not isinstance(previous, NavigableString):
                continue
            if not clean_text(str(previous)).lower().endswith(prefix):
                continue
            store = clean_text(span.get_text(" "))
            if store:
                return store
    return None


def _card_scope(link: Tag, document: Tag, selectors: SearchCardSelectors) -> Tag:
    """Return the nearest ancestor of the product link holding a price block."""

    for depth, parent in enumerate(link.parents):
        if depth >= _CARD_SEARCH_DEPTH:
            break
        if any(parent.select_one(selector) for selector in selectors.price):
            return parent
    return document


def _find_product_link(soup: Tag, selectors: SearchCardSelectors) -> Optional[Tag]:
    for selector in selectors.product_link:
        for link in soup.select(selector):
            if PRODUCT_LINK_PATTERN.match(link.get("href", "")):
                return link
    return None


def _card_price(scope: Tag, selectors: SearchCardSelectors) -> Optional[float]:
    for selector in selectors.price:
        for element in scope.select(selector):
            price = parse_labelled_price(element.get_text(" "))
            if price is not None:
                return price
    return None


def extract_primary_card(html: str, page_url: str, config: ScraperConfig) -> List[Offer]:
    """Extract the single highlighted best offer of a search page."""

    soup = make_soup(html)
    link = _find_product_link(soup, PRIMARY_CARD)
    if link is None:
        return []

    href = link["href"]
    title = clean_text(link.get_text(" "))
    scope = _card_scope(link, soup, PRIMARY_CARD)

    price = _card_price(scope, PRIMARY_CARD)
    if price is None:
        return []

    store = _sold_by(scope, PRIMARY_CARD, PRIMARY_CARD.store_prefix) or _sold_by(
        soup, PRIMARY_CARD, PRIMARY_CARD.store_prefix
    )
    if not store or is_noise_label(store, _card_noise(config)):
        LOGGER.debug("Primary card store label rejected: %r", store)
        return []
    if not title:
        return []

    return [
        Offer(
            id=href,
            name=title,
            price=price,
            currency=config.currency,
            store=store,
            store_url=absolute_url(config.base_url, href),
            availability=AvailabilityStatus.IN_STOCK,
        )
    ]


def _listing_store(block: Tag, href: str, config: ScraperConfig) -> str:
    store = _sold_by(block, LISTING)
    if store and not is_noise_label(store, _card_noise(config)):
        return store
    host = urlparse(href).netloc
    base_host = urlparse(config.base_url).netloc
    if host and host != base_host:
        return host[4:] if host.startswith("www.") else host
    return config.host_brand


def extract_naive_listing(html: str, page_url: str, config: ScraperConfig) -> List[Offer]:
    """Last-resort scan of every anchor for a heading and a ``kr`` price."""

    soup = make_soup(html)
    offers: List[Offer] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        name = extract_text(anchor, LISTING.title)
        if not name:
            continue
        price = parse_price_from_text(anchor.get_text(" "))
        if price is None:
            continue
        offers.append(
            Offer(
                id=href or name,
                name=name,
                price=price,
                currency=config.currency,
                store=_listing_store(anchor, href, config),
                store_url=absolute_url(config.base_url, href),
                availability=AvailabilityStatus.IN_STOCK,
            )
        )
    return dedupe(offers)[: config.naive_result_limit]


def find_first_product_link(html: str, config: ScraperConfig) -> Optional[str]:
    """Return the absolute URL of the first product page linked from ``html``."""

    soup = make_soup(html)
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if PRODUCT_LINK_PATTERN.match(href):
            return absolute_url(config.base_url, href)
    return None
