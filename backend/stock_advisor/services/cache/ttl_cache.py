"""
In-process TTL cache with an injectable clock.

Used for analytics composites and market data, and as the fallback
store when Redis is unavailable.
"""

import time
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

V = TypeVar("V")

Clock = Callable[[], float]


class TTLCache(Generic[V]):
    """
    Dict-backed cache whose entries expire `ttl` seconds after being set.

    `ttl=None` (or 0) keeps entries until invalidated. Expired entries are
    dropped lazily on read.
    """

    def __init__(self, ttl: Optional[float] = None, clock: Clock = time.monotonic):
        self.ttl = ttl or None
        self._clock = clock
        self._entries: Dict[str, Tuple[V, Optional[float]]] = {}

    def get(self, key: str) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: V, ttl: Optional[float] = None) -> None:
        """
        Store a value.

        `ttl` overrides the cache default for this entry; an explicit 0 keeps
        the entry until invalidated.
        """
        effective_ttl = self.ttl if ttl is None else ttl
        expires_at = self._clock() + effective_ttl if effective_ttl else None
        self._entries[key] = (value, expires_at)

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)
