"""Bounded, time-expiring cache for scraped offers."""
from __future__ import annotations

from collections import OrderedDict
import threading
import time
from typing import Callable, Dict, List, Optional

from .models import CacheEntry, Offer


class OfferCache:
    """Map of query fingerprints to offers with expiry and a size cap.

    Expiry is checked on read; stale entries are dropped when they are looked
    up. When the cache is full the oldest stored entry is evicted first.
    """

    def __init__(
        self,
        ttl: float = 3600.0,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[List[Offer]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_stale(self._clock()):
                del self._entries[key]
                return None
            return list(entry.data)

    def set(self, key: str, offers: List[Offer], ttl: Optional[float] = None) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                data=list(offers),
                timestamp=self._clock(),
                ttl=self.ttl if ttl is None else ttl,
            )
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, object]:
        with self._lock:
            return {"size": len(self._entries), "entries": list(self._entries.keys())}

    def __len__(self) -> int:
        return len(self._entries)
