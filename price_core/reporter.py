"""Reporting helpers for price lookups."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import AvailabilityStatus, LookupResult, Offer
from .processor import summarise_offers

_AVAILABILITY_LABELS = {
    AvailabilityStatus.IN_STOCK: "In stock",
    AvailabilityStatus.INCOMING: "Incoming",
    AvailabilityStatus.NOT_AVAILABLE: "Not available",
}


def _format_price(offer: Offer) -> str:
    return f"{offer.price:,.0f} {offer.currency}".replace(",", " ")


def generate_offer_table(offers: Iterable[Offer]) -> str:
    """Return a markdown-style table of offers, cheapest first."""

    offer_list = sorted(offers, key=lambda offer: offer.price)
    headers = ["Store", "Price", "Availability", "Product"]
    rows: List[str] = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join(["---"] * len(headers)) + " |",
    ]

    if not offer_list:
        rows.append("| No offers |" + " |" * (len(headers) - 1))
        return "\n".join(rows)

    for offer in offer_list:
        columns = [
            offer.store,
            _format_price(offer),
            _AVAILABILITY_LABELS[offer.availability],
            offer.name,
        ]
        rows.append("| " + " | ".join(columns) + " |")
    return "\n".join(rows)


def build_report(result: LookupResult, warnings: Sequence[str] | None = None) -> str:
    """Create a text report for one module lookup."""

    summary = summarise_offers(result.offers)
    lines: List[str] = [
        f"Price report: {result.module_number}",
        "=" * (len("Price report: ") + len(result.module_number)),
    ]
    for message in warnings or []:
        if message:
            lines.append(f"WARNING: {message.strip()}")

    if result.query != result.module_number:
        lines.append(f"Query: {result.query}")
    if result.refined:
        lines.append("Offers taken from the product page.")

    lines.append("")
    lines.append("Summary:")
    if summary["count"] == 0:
        lines.append("- No offers found")
    else:
        currency = result.offers[0].currency
        lines.append(f"- {summary['count']} offers, {summary['in_stock_count']} in stock")
        lines.append(f"- Lowest price: {summary['min_price']:.0f} {currency}")
        lines.append(f"- Average price: {summary['average_price']:.0f} {currency}")

    lines.append("")
    lines.append(generate_offer_table(result.offers))

    links = [offer for offer in result.offers if offer.store_url]
    if links:
        lines.append("")
        lines.append("Links:")
        for offer in links[:5]:
            lines.append(f"- {offer.store}: {offer.store_url}")
    return "\n".join(lines)
