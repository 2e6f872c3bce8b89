# nouxis_core/cache.py
from __future__ import annotations
import threading, time
from typing import Callable, Dict, Hashable, Optional, Tuple

from nouxis_core.models import CacheEntry, ResolvedAgent

CacheKey = Tuple[str, str]


def cache_key(subject: str, category: str) -> CacheKey:
    # a pair, not a joined string: categories are free text and may hold any separator
    return (subject, category)


class ResolverCache:
    """
    TTL memoization for resolved PaymentRequirements.

    - get() serves an entry only while now < expires_at
    - stale entries stay in place until put() overwrites them or clear() runs
    - put() replaces the whole entry; nothing is merged

    The lock only covers the dict access itself, so callers never hold it
    across an RPC round trip.
    """

    def __init__(self, ttl: float, clock: Optional[Callable[[], float]] = None):
        if ttl <= 0:
            raise ValueError(f"cache ttl must be positive, got {ttl!r}")
        self.ttl = ttl
        self._clock = clock or time.monotonic
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[ResolvedAgent]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry.record

    def put(self, key: Hashable, record: ResolvedAgent, ttl: Optional[float] = None) -> CacheEntry:
        entry = CacheEntry(record=record, expires_at=self._clock() + (self.ttl if ttl is None else ttl))
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries
