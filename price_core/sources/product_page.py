"""Extractors for Prisjakt product detail pages."""
from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import List, Optional, Sequence

from bs4 import Tag

from ..config import ScraperConfig
from ..models import AvailabilityStatus, Offer
from ..normalizer import lowest_price_per_store
from .markup_common import (
    absolute_url,
    clean_text,
    extract_attribute,
    extract_text,
    host_brand_patterns,
    is_noise_label,
    make_soup,
    parse_labelled_price,
    parse_price_from_text,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfferRowSelectors:
    """Selectors describing one per-store offer row on a product page."""

    shop_link_path: str
    store_title: Sequence[str]
    store_image: Sequence[str]
    price: Sequence[str]
    in_stock_token: str = "iconstockinstock"
    incoming_token: str = "iconstockincoming"


OFFER_ROW = OfferRowSelectors(
    shop_link_path="/go-to-shop/",
    store_title=("span[class*='StoreInfoTitle']",),
    store_image=("picture[alt]", "img[alt]"),
    price=("[data-test='PriceLabel']",),
)

OFFER_NOISE_PATTERNS = (
    re.compile(r"gå till butik", re.IGNORECASE),
    re.compile(r"\bbutik\b", re.IGNORECASE),
    re.compile(r"\brank\b", re.IGNORECASE),
    re.compile(r"omdöme", re.IGNORECASE),
    re.compile(r"\bprodukt\b", re.IGNORECASE),
    re.compile(r"\bkr\b", re.IGNORECASE),
    re.compile(r"\bannons\b", re.IGNORECASE),
    re.compile(r"visa\s+\d+", re.IGNORECASE),
)


def _page_heading(soup: Tag) -> str:
    return extract_text(soup, ("h1",)) or ""


def _is_shop_link(href: str, config: ScraperConfig, selectors: OfferRowSelectors) -> bool:
    return href.startswith(selectors.shop_link_path) or href.startswith(
        config.base_url + selectors.shop_link_path
    )


def _store_label(row: Tag, selectors: OfferRowSelectors) -> str:
    label = extract_text(row, selectors.store_title)
    if not label:
        label = extract_attribute(row, selectors.store_image, "alt")
    return clean_text(label)


def _row_price(row: Tag, selectors: OfferRowSelectors) -> Optional[float]:
    for selector in selectors.price:
        for element in row.select(selector):
            price = parse_labelled_price(element.get_text(" "))
            if price is not None:
                return price
    return None


def _row_availability(row: Tag, selectors: OfferRowSelectors) -> AvailabilityStatus:
    markup = str(row).lower()
    if selectors.in_stock_token in markup:
        return AvailabilityStatus.IN_STOCK
    if selectors.incoming_token in markup:
        return AvailabilityStatus.INCOMING
    return AvailabilityStatus.NOT_AVAILABLE


def extract_product_offers(html: str, page_url: str, config: ScraperConfig) -> List[Offer]:
    """Collect the per-store offers listed on a product page."""

    soup = make_soup(html)
    name = _page_heading(soup)
    if not name:
        return []

    noise_patterns = OFFER_NOISE_PATTERNS + host_brand_patterns(config.host_brand)
    offers: List[Offer] = []
    for row in soup.find_all("a", href=True):
        href = row["href"]
        if not _is_shop_link(href, config, OFFER_ROW):
            continue

        store = _store_label(row, OFFER_ROW)
        if is_noise_label(store, noise_patterns):
            LOGGER.debug("Skipping offer row with store label %r", store)
            continue

        price = _row_price(row, OFFER_ROW)
        if price is None:
            continue

        offers.append(
            Offer(
                id=f"{page_url}::{store}",
                name=name,
                price=price,
                currency=config.currency,
                store=store,
                store_url=absolute_url(config.base_url, href),
                availability=_row_availability(row, OFFER_ROW),
            )
        )

    offers = lowest_price_per_store(offers)

    page_text = clean_text(soup.get_text(" ")).lower()
    if config.out_of_stock_marker and config.out_of_stock_marker.lower() in page_text:
        for offer in offers:
            offer.availability = AvailabilityStatus.NOT_AVAILABLE
    return offers


def extract_heading_price(html: str, page_url: str, config: ScraperConfig) -> List[Offer]:
    """Best-effort single price taken from the page heading and first ``kr`` amount."""

    soup = make_soup(html)
    name = _page_heading(soup)
    price = parse_price_from_text(clean_text(soup.get_text(" ")))
    if not name or price is None:
        return []
    return [
        Offer(
            id=page_url,
            name=name,
            price=price,
            currency=config.currency,
            store=config.host_brand,
            store_url=page_url,
            availability=AvailabilityStatus.IN_STOCK,
        )
    ]
