"""Ordered extraction strategies for search and product pages."""
from __future__ import annotations

from typing import Callable, List, Tuple

from ..config import ScraperConfig
from ..models import Offer
from .product_page import extract_heading_price, extract_product_offers
from .search_page import extract_naive_listing, extract_primary_card, find_first_product_link
from .structured_data import extract_structured_offers

Extractor = Callable[[str, str, ScraperConfig], List[Offer]]

SEARCH_STRATEGIES: Tuple[Tuple[str, Extractor], ...] = (
    ("primary-card", extract_primary_card),
    ("structured-data", extract_structured_offers),
    ("naive-listing", extract_naive_listing),
)

PRODUCT_STRATEGIES: Tuple[Tuple[str, Extractor], ...] = (
    ("structured-data", extract_structured_offers),
    ("product-offers", extract_product_offers),
)

__all__ = [
    "Extractor",
    "PRODUCT_STRATEGIES",
    "SEARCH_STRATEGIES",
    "extract_heading_price",
    "extract_naive_listing",
    "extract_primary_card",
    "extract_product_offers",
    "extract_structured_offers",
    "find_first_product_link",
]
