"""Cache services - chunked storage and topic invalidation."""

from app.services.cache.chunker import join, split
from app.services.cache.invalidation import CacheCategory, InvalidationBus, parse_category
from app.services.cache.store import CacheBackend, CacheResult, CacheSource, CacheStore

__all__ = [
    "split",
    "join",
    "CacheBackend",
    "CacheStore",
    "CacheResult",
    "CacheSource",
    "CacheCategory",
    "InvalidationBus",
    "parse_category",
]
