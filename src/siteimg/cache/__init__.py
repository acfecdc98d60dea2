"""Cache subsystem — write-once memory store keyed by effective request."""

from siteimg.cache.keys import PLACEHOLDER, generate_cache_key
from siteimg.cache.memory import MemoryCache
from siteimg.cache.stats import CacheStats

__all__ = [
    "MemoryCache",
    "CacheStats",
    "PLACEHOLDER",
    "generate_cache_key",
]
