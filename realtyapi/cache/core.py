# cache/core.py
"""Core caching functionality."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional
from contextlib import asynccontextmanager
from dataclasses import dataclass

logger = logging.getLogger(__name__)

@dataclass
class CacheStats:
    """Cache statistics tracking."""
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    errors: int = 0
    total_time: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

class CacheBackend(ABC):
    """Abstract base class for cache backends."""

    def __init__(self, **config):
        self.config = config
        self.stats = CacheStats()

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Set value in cache with optional TTL in seconds."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """Clear all cache entries."""
        pass

    @abstractmethod
    async def ttl(self, key: str) -> Optional[float]:
        """Get remaining TTL for key."""
        pass

    async def close(self):
        """Close backend connections."""
        pass

class Cache:
    """High-level cache interface with key prefixing and stats."""

    def __init__(
        self,
        backend: CacheBackend,
        key_prefix: str = "realty:",
        default_ttl: Optional[float] = 3600,
        enable_stats: bool = True
    ):
        self.backend = backend
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl
        self.enable_stats = enable_stats

    def _make_key(self, key: str) -> str:
        """Create full cache key with prefix."""
        return f"{self.key_prefix}{key}"

    @asynccontextmanager
    async def _with_stats(self):
        start_time = time.perf_counter()
        try:
            yield
        except Exception:
            if self.enable_stats:
                self.backend.stats.errors += 1
            raise
        finally:
            if self.enable_stats:
                self.backend.stats.total_time += time.perf_counter() - start_time

    async def get(self, key: str, default: Any = None) -> Any:
        """Get value from cache, or ``default`` when missing or expired."""
        async with self._with_stats():
            value = await self.backend.get(self._make_key(key))
        if self.enable_stats:
            if value is None:
                self.backend.stats.misses += 1
            else:
                self.backend.stats.hits += 1
        return default if value is None else value

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        """Set value in cache."""
        ttl = ttl if ttl is not None else self.default_ttl
        async with self._with_stats():
            result = await self.backend.set(self._make_key(key), value, ttl)
        if self.enable_stats:
            self.backend.stats.sets += 1
        return result

    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        async with self._with_stats():
            result = await self.backend.delete(self._make_key(key))
        if self.enable_stats and result:
            self.backend.stats.deletes += 1
        return result

    async def ttl(self, key: str) -> Optional[float]:
        """Remaining lifetime of key in seconds, None when absent."""
        return await self.backend.ttl(self._make_key(key))

    async def clear(self) -> bool:
        """Clear all cache entries."""
        try:
            return await self.backend.clear()
        except Exception as e:
            logger.warning(f"Error clearing cache: {e}")
            return False

    @property
    def stats(self) -> CacheStats:
        return self.backend.stats
