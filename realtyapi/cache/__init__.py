"""
In-process caching for the Realty API.

Used by the client-side CRMLS service to hold the bearer token until shortly
before it expires.
"""
from .core import Cache, CacheBackend, CacheStats
from .backends import InMemoryBackend


def create_memory_cache(key_prefix: str = "realty:", default_ttl=None, **backend_options) -> Cache:
    """Build a cache over a fresh in-memory backend."""
    return Cache(
        backend=InMemoryBackend(**backend_options),
        key_prefix=key_prefix,
        default_ttl=default_ttl,
    )


__all__ = ["Cache", "CacheBackend", "CacheStats", "InMemoryBackend", "create_memory_cache"]
