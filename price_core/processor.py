"""Tabular processing of scraped offers and module price tables."""
from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, List, Optional

import pandas as pd

from .models import AvailabilityStatus, LookupResult, Offer

OFFER_COLUMNS = [
    "id",
    "name",
    "price",
    "currency",
    "store",
    "store_url",
    "availability",
    "image_url",
]

PRICE_COLUMNS = ["price", "currency", "store", "store_url", "availability", "offer_count"]


def offers_to_dataframe(offers: Iterable[Offer]) -> pd.DataFrame:
    """Convert offers into a :class:`~pandas.DataFrame` with one row per offer."""

    records: List[Dict[str, object]] = []
    for offer in offers:
        records.append(
            {
                "id": offer.id,
                "name": offer.name,
                "price": offer.price,
                "currency": offer.currency,
                "store": offer.store,
                "store_url": offer.store_url,
                "availability": offer.availability.value,
                "image_url": offer.image_url,
            }
        )
    return pd.DataFrame.from_records(records, columns=OFFER_COLUMNS)


def cheapest_offer(offers: Iterable[Offer], in_stock_first: bool = True) -> Optional[Offer]:
    """Return the lowest priced offer, preferring in-stock offers when asked."""

    offer_list = [offer for offer in offers if math.isfinite(offer.price)]
    if not offer_list:
        return None
    if in_stock_first:
        in_stock = [o for o in offer_list if o.availability is AvailabilityStatus.IN_STOCK]
        if in_stock:
            offer_list = in_stock
    return min(offer_list, key=lambda offer: offer.price)


def summarise_offers(offers: Iterable[Offer]) -> Dict[str, float]:
    """Return simple statistics across all offers."""

    df = offers_to_dataframe(offers)
    if df.empty:
        return {"count": 0, "average_price": 0.0, "min_price": 0.0, "in_stock_count": 0}

    return {
        "count": int(len(df)),
        "average_price": float(df["price"].mean()),
        "min_price": float(df["price"].min()),
        "in_stock_count": int((df["availability"] == AvailabilityStatus.IN_STOCK.value).sum()),
    }


def enrich_modules(
    modules: pd.DataFrame,
    column: str,
    lookup: Callable[[str], LookupResult],
) -> pd.DataFrame:
    """Add price columns to a table of modules, one lookup per row.

    Rows are processed in order; a row whose lookup yields nothing keeps
    empty price columns.
    """

    if column not in modules.columns:
        raise KeyError(f"Column {column!r} not found in module table")

    enriched = modules.copy()
    rows: List[Dict[str, object]] = []
    for value in enriched[column].tolist():
        row: Dict[str, object] = {name: None for name in PRICE_COLUMNS}
        row["offer_count"] = 0
        if isinstance(value, str) and value.strip():
            result = lookup(value)
            best = cheapest_offer(result.offers)
            row["offer_count"] = len(result.offers)
            if best is not None:
                row.update(
                    price=best.price,
                    currency=best.currency,
                    store=best.store,
                    store_url=best.store_url,
                    availability=best.availability.value,
                )
        rows.append(row)

    prices = pd.DataFrame.from_records(rows, columns=PRICE_COLUMNS, index=enriched.index)
    for name in PRICE_COLUMNS:
        enriched[name] = prices[name]
    return enriched
