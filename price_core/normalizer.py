"""Normalisation helpers shared by every extraction route."""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Set, Union

from .models import AvailabilityStatus, Offer

_NOT_AVAILABLE_TOKENS = (
    "outofstock",
    "out of stock",
    "out_of_stock",
    "soldout",
    "sold out",
    "discontinued",
    "unavailable",
    "not_available",
    "not available",
)
_IN_STOCK_TOKENS = (
    "instock",
    "in_stock",
    "in stock",
    "available",
    "limitedavailability",
    "instoreonly",
    "onlineonly",
)
_INCOMING_TOKENS = ("preorder", "pre-order", "backorder", "incoming")


def to_availability(raw: Union[str, AvailabilityStatus, None]) -> AvailabilityStatus:
    """Map any availability hint onto :class:`AvailabilityStatus`.

    Matching is a case-insensitive substring test. Negative phrases are checked
    first so that values such as ``"not_available"`` or
    ``"https://schema.org/OutOfStock"`` never count as available.
    """

    if isinstance(raw, AvailabilityStatus):
        return raw
    if not raw:
        return AvailabilityStatus.NOT_AVAILABLE
    value = str(raw).lower()
    if any(token in value for token in _NOT_AVAILABLE_TOKENS):
        return AvailabilityStatus.NOT_AVAILABLE
    if any(token in value for token in _IN_STOCK_TOKENS):
        return AvailabilityStatus.IN_STOCK
    if any(token in value for token in _INCOMING_TOKENS):
        return AvailabilityStatus.INCOMING
    return AvailabilityStatus.NOT_AVAILABLE


def filter_store(offers: Iterable[Offer], host_brand: str) -> List[Offer]:
    """Drop offers attributed to the comparison site itself."""

    pattern = re.compile(re.escape(host_brand), re.IGNORECASE)
    return [offer for offer in offers if not pattern.search(offer.store)]


def dedupe(offers: Iterable[Offer]) -> List[Offer]:
    """Remove duplicates by name, store and store URL; first occurrence wins."""

    seen: Set[str] = set()
    unique: List[Offer] = []
    for offer in offers:
        key = f"{offer.name}|{offer.store}|{offer.store_url}"
        if key in seen:
            continue
        seen.add(key)
        unique.append(offer)
    return unique


def lowest_price_per_store(offers: Iterable[Offer]) -> List[Offer]:
    """Keep the cheapest offer per store (case-insensitive)."""

    by_store: Dict[str, Offer] = {}
    for offer in offers:
        key = offer.store.lower()
        previous: Optional[Offer] = by_store.get(key)
        if previous is None or offer.price < previous.price:
            by_store[key] = offer
    return list(by_store.values())
