"""Shared data structures used across scraping and processing."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class AvailabilityStatus(str, Enum):
    """Stock status derived for every offer."""

    IN_STOCK = "in_stock"
    INCOMING = "incoming"
    NOT_AVAILABLE = "not_available"


@dataclass
class Offer:
    """One retailer's priced listing for a product."""

    id: str
    name: str
    price: float
    currency: str
    store: str
    store_url: str
    availability: AvailabilityStatus
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the offer using the external JSON field names."""

        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "currency": self.currency,
            "store": self.store,
            "storeUrl": self.store_url,
            "availability": self.availability.value,
            "imageUrl": self.image_url,
        }


@dataclass
class CacheEntry:
    """Offers remembered for a query fingerprint."""

    data: List[Offer]
    timestamp: float
    ttl: float

    def is_stale(self, now: float) -> bool:
        return now - self.timestamp >= self.ttl


@dataclass
class LookupResult:
    """Outcome of looking up prices for one module identifier."""

    module_number: str
    query: str
    offers: List[Offer] = field(default_factory=list)
    refined: bool = False
    attempts: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "moduleNumber": self.module_number,
            "query": self.query,
            "refined": self.refined,
            "attempts": self.attempts,
            "products": [offer.to_dict() for offer in self.offers],
        }
