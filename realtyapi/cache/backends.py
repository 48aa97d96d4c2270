# cache/backends.py
"""Cache backend implementations."""

import time
from typing import Any, Callable, Dict, Optional
from .core import CacheBackend

class InMemoryBackend(CacheBackend):
    """In-memory cache backend using dictionaries.

    Expired entries are dropped when read. When ``max_size`` is exceeded the
    least recently used entry is evicted.
    """

    def __init__(
        self,
        max_size: int = 1000,
        clock: Callable[[], float] = time.time,
        **config
    ):
        super().__init__(**config)
        self.max_size = max_size
        self._clock = clock
        self._data: Dict[str, Any] = {}
        self._expiry: Dict[str, float] = {}
        self._access_times: Dict[str, float] = {}

    def _drop(self, key: str) -> None:
        self._data.pop(key, None)
        self._expiry.pop(key, None)
        self._access_times.pop(key, None)

    def _is_expired(self, key: str, now: float) -> bool:
        return key in self._expiry and self._expiry[key] <= now

    def _evict_if_full(self) -> None:
        while len(self._data) > self.max_size:
            oldest = min(self._access_times.items(), key=lambda x: x[1])[0]
            self._drop(oldest)

    async def get(self, key: str) -> Optional[Any]:
        """Get value from in-memory cache."""
        now = self._clock()
        if key not in self._data:
            return None
        if self._is_expired(key, now):
            self._drop(key)
            return None
        # Update access time for LRU
        self._access_times[key] = now
        return self._data[key]

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Set value in in-memory cache."""
        now = self._clock()
        self._data[key] = value
        self._access_times[key] = now

        if ttl is not None:
            self._expiry[key] = now + ttl
        else:
            self._expiry.pop(key, None)

        self._evict_if_full()
        return True

    async def delete(self, key: str) -> bool:
        """Delete key from in-memory cache."""
        if key in self._data:
            self._drop(key)
            return True
        return False

    async def clear(self) -> bool:
        """Clear all entries from in-memory cache."""
        self._data.clear()
        self._expiry.clear()
        self._access_times.clear()
        return True

    async def ttl(self, key: str) -> Optional[float]:
        """Get TTL for key; -1 means no expiration."""
        if key not in self._data or self._is_expired(key, self._clock()):
            return None
        if key not in self._expiry:
            return -1
        return max(self._expiry[key] - self._clock(), 0.0)
