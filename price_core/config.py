"""Configuration helpers for the price scraping core."""
from __future__ import annotations

from dataclasses import dataclass, fields
import os
import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote_plus

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0 Safari/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

_ENV_PREFIX = "PRICE_AGENT_"
_RENDERERS = {"requests", "playwright"}


@dataclass
class ScraperConfig:
    """Canonical configuration used by the scraper and its extractors."""

    base_url: str = "https://www.prisjakt.nu"
    host_brand: str = "Prisjakt"
    currency: str = "SEK"
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    timeout: float = 15.0
    cache_ttl: float = 3600.0
    cache_max_entries: int = 256
    renderer: str = "requests"
    naive_result_limit: int = 10
    locale: str = "sv-SE"
    out_of_stock_marker: str = "Ingen butik har produkten i lager"

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}

    def search_url(self, query: str) -> str:
        return f"{self.base_url}/search?query={quote_plus(query)}"

    def product_url(self, url_or_id: str) -> Optional[str]:
        """Return the canonical product page URL, or ``None`` for an empty id."""

        if url_or_id.startswith("http"):
            return url_or_id
        product_id = re.sub(r"[^0-9]", "", url_or_id)
        if not product_id:
            return None
        return f"{self.base_url}/produkt.php?p={product_id}"

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable version of the configuration."""

        return {item.name: getattr(self, item.name) for item in fields(self)}


def _parse_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = re.sub(r"[^\d.,-]", "", str(value))
    cleaned = re.sub(r"(?<=\d)\.(?=\d{3}(?:\D|$))", "", cleaned)
    cleaned = cleaned.replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def _parse_int(value: Any) -> Optional[int]:
    number = _parse_float(value)
    if number is None:
        return None
    return int(number)


def create_config_from_mapping(data: Mapping[str, Any]) -> ScraperConfig:
    """Create a configuration from a loosely typed mapping.

    Unknown keys are ignored and values that cannot be parsed keep their
    defaults, so partially filled payloads still produce a usable config.
    """

    config = ScraperConfig()
    for key in ("base_url", "host_brand", "currency", "user_agent", "accept", "locale",
                "out_of_stock_marker"):
        value = data.get(key)
        if value:
            setattr(config, key, str(value).strip())
    config.base_url = config.base_url.rstrip("/")

    for key in ("timeout", "cache_ttl"):
        number = _parse_float(data.get(key))
        if number is not None and number >= 0:
            setattr(config, key, number)

    for key in ("cache_max_entries", "naive_result_limit"):
        count = _parse_int(data.get(key))
        if count is not None and count > 0:
            setattr(config, key, count)

    renderer = str(data.get("renderer") or "").strip().lower()
    if renderer in _RENDERERS:
        config.renderer = renderer
    return config


def create_config_from_env(environ: Optional[Mapping[str, str]] = None) -> ScraperConfig:
    """Read ``PRICE_AGENT_*`` variables, e.g. ``PRICE_AGENT_CACHE_TTL=600``."""

    environ = os.environ if environ is None else environ
    data = {
        key[len(_ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(_ENV_PREFIX)
    }
    return create_config_from_mapping(data)


def create_config(data: Mapping[str, Any] | ScraperConfig | None = None) -> ScraperConfig:
    """Unified helper that accepts a ready config, a mapping or nothing."""

    if data is None:
        return ScraperConfig()
    if isinstance(data, ScraperConfig):
        return data
    if isinstance(data, Mapping):
        return create_config_from_mapping(data)
    raise TypeError("Unsupported configuration payload type")
