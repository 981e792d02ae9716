"""Reusable markup helpers shared by the page extractors."""
from __future__ import annotations

import math
import re
from typing import Any, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

PRICE_PATTERN = re.compile(
    r"(?<![\w.,])(\d{1,3}(?:\s?\d{3})*(?:[.,]\d{2})?)\s*(?:kr|sek)\b", re.IGNORECASE
)
LABELLED_PRICE_PATTERN = re.compile(r"^\s*([0-9][0-9\s]*)\s*(?:kr|sek)\s*$", re.IGNORECASE)
PRODUCT_LINK_PATTERN = re.compile(r"^/produkt\.php\?p=\d+$")
WHITESPACE_PATTERN = re.compile(r"\s+")


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace (including non-breaking spaces) and trim."""

    if not text:
        return ""
    return WHITESPACE_PATTERN.sub(" ", text.replace("\xa0", " ")).strip()


def parse_price(value: Any) -> Optional[float]:
    """Return a positive finite price from a number or loosely formatted string."""

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    else:
        cleaned = re.sub(r"[^0-9.,]", "", str(value))
        if not cleaned:
            return None
        if "," in cleaned and "." in cleaned:
            decimal = "," if cleaned.rfind(",") > cleaned.rfind(".") else "."
            thousands = "." if decimal == "," else ","
            cleaned = cleaned.replace(thousands, "").replace(decimal, ".")
        elif "," in cleaned:
            if re.fullmatch(r"\d{1,3}(?:,\d{3})+", cleaned):
                cleaned = cleaned.replace(",", "")
            else:
                cleaned = cleaned.replace(",", ".")
        else:
            cleaned = re.sub(r"(?<=\d)\.(?=\d{3}(?:\D|$))", "", cleaned)
        try:
            price = float(cleaned)
        except ValueError:
            return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def parse_price_from_text(text: str) -> Optional[float]:
    """Extract the first ``<amount> kr`` price from free text."""

    match = PRICE_PATTERN.search(text or "")
    if not match:
        return None
    return parse_price(match.group(1))


def parse_labelled_price(text: str) -> Optional[float]:
    """Parse a price label whose whole text is ``<digits> kr``."""

    match = LABELLED_PRICE_PATTERN.match(clean_text(text))
    if not match:
        return None
    return parse_price(match.group(1))


def extract_text(handle: Tag, selectors: Sequence[str]) -> Optional[str]:
    """Return the first non-empty text found using the provided selectors."""

    for selector in selectors:
        element = handle.select_one(selector)
        if element is None:
            continue
        text = clean_text(element.get_text(" "))
        if text:
            return text
    return None


def extract_attribute(handle: Tag, selectors: Sequence[str], attribute: str) -> Optional[str]:
    """Return the first non-empty attribute value for the selectors provided."""

    for selector in selectors:
        for element in handle.select(selector):
            value = element.get(attribute)
            if isinstance(value, list):
                value = " ".join(value)
            if value and value.strip():
                return value.strip()
    return None


def host_brand_patterns(host_brand: str) -> Tuple[re.Pattern[str], ...]:
    """Noise pattern rejecting store labels that name the comparison site itself."""

    brand = clean_text(host_brand)
    if not brand:
        return ()
    return (re.compile(re.escape(brand), re.IGNORECASE),)


def is_noise_label(label: str, patterns: Sequence[re.Pattern[str]]) -> bool:
    """Whether a store label is a generic site label rather than a retailer."""

    if not label:
        return True
    return any(pattern.search(label) for pattern in patterns)


def absolute_url(base_url: str, href: str) -> str:
    if href.startswith("http"):
        return href
    return f"{base_url}{href if href.startswith('/') else '/' + href}"
