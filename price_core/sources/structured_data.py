"""Offer extraction from embedded JSON-LD product descriptions."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

from ..config import ScraperConfig
from ..errors import ParseFailure
from ..models import Offer
from ..normalizer import dedupe, to_availability
from .markup_common import make_soup, parse_price

LOGGER = logging.getLogger(__name__)


def _load_block(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ParseFailure(f"Malformed JSON-LD block: {exc}") from exc


def iter_structured_blocks(html: str) -> Iterator[Any]:
    """Yield every parseable ``application/ld+json`` payload in the page."""

    soup = make_soup(html)
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        text = (script.string or "").strip()
        if not text:
            continue
        try:
            yield _load_block(text)
        except ParseFailure as exc:
            LOGGER.debug("Skipping structured-data block: %s", exc)


def _is_product(node: Dict[str, Any]) -> bool:
    node_type = node.get("@type")
    if isinstance(node_type, list):
        return "Product" in node_type
    return node_type == "Product"


def _normalise_offers(offers: Any) -> List[Dict[str, Any]]:
    if not offers:
        return []
    if isinstance(offers, list):
        return [offer for offer in offers if isinstance(offer, dict)]
    if isinstance(offers, dict):
        return [offers]
    return []


def _first_image(image: Any) -> str | None:
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get("url")
    return str(image) if image else None


def _offers_for_product(product: Dict[str, Any], config: ScraperConfig) -> List[Offer]:
    name = str(product.get("name") or "").strip()
    if not name:
        return []

    offers: List[Offer] = []
    identity = product.get("sku") or product.get("url") or name
    for raw in _normalise_offers(product.get("offers")):
        amount = raw.get("price")
        if amount is None or amount == "":
            amount = raw.get("lowPrice")
        price = parse_price(amount)
        if price is None:
            continue

        seller = raw.get("seller")
        seller_name = seller.get("name") if isinstance(seller, dict) else None
        offer_url = raw.get("url") or ""
        offers.append(
            Offer(
                id=f"{identity}::{offer_url or seller_name or ''}",
                name=name,
                price=price,
                currency=raw.get("priceCurrency") or config.currency,
                store=str(seller_name or "Unknown").strip() or "Unknown",
                store_url=offer_url or product.get("url") or "",
                availability=to_availability(raw.get("availability")),
                image_url=_first_image(product.get("image")),
            )
        )
    return offers


def collect_products(node: Any, config: ScraperConfig, out: List[Offer]) -> None:
    """Walk a JSON-LD graph and append offers for every product node found."""

    if isinstance(node, list):
        for item in node:
            collect_products(item, config, out)
        return
    if not isinstance(node, dict):
        return

    if _is_product(node) and node.get("name"):
        out.extend(_offers_for_product(node, config))

    for value in node.values():
        if isinstance(value, (dict, list)):
            collect_products(value, config, out)


def extract_structured_offers(html: str, page_url: str, config: ScraperConfig) -> List[Offer]:
    offers: List[Offer] = []
    for block in iter_structured_blocks(html):
        collect_products(block, config, offers)
    return dedupe(offers)
