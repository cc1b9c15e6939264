"""Invalidation bus - expire cache keys by topic.

Producers register the keys they write under a category. Write actions then
invalidate whole categories without knowing individual keys. Registrations
live in process memory only and are rebuilt by producers at startup.
"""

from enum import StrEnum

from loguru import logger

from app.services.cache.store import CacheStore


class CacheCategory(StrEnum):
    DASHBOARD = "dashboard"
    VENTAS = "ventas"
    OPERACIONES = "operaciones"
    CONFIG = "config"
    ALL = "all"


def parse_category(category: str) -> CacheCategory:
    try:
        return CacheCategory(category)
    except ValueError:
        valid = ", ".join(c.value for c in CacheCategory)
        raise ValueError(f"Unknown cache category '{category}'. Valid: {valid}") from None


class InvalidationBus:
    """Category -> registered cache keys."""

    def __init__(self, store: CacheStore):
        self._store = store
        # dict as an ordered set
        self._keys: dict[CacheCategory, dict[str, None]] = {}

    def register(self, category: str, key: str) -> None:
        """Associate key with category. Registering a pair twice is a no-op."""
        category = parse_category(category)
        if category is CacheCategory.ALL:
            raise ValueError("Keys cannot be registered under 'all'")
        self._keys.setdefault(category, {})[key] = None

    def keys(self, category: str) -> list[str]:
        """Keys registered under category (every key, once, for 'all')."""
        category = parse_category(category)
        if category is CacheCategory.ALL:
            seen: dict[str, None] = {}
            for keys in self._keys.values():
                seen.update(keys)
            return list(seen)
        return list(self._keys.get(category, {}))

    def invalidate(self, category: str) -> int:
        """Invalidate every key under category. Returns how many keys were processed."""
        keys = self.keys(category)
        for key in keys:
            self._store.invalidate(key)
        logger.info("Invalidated {} cache keys for category '{}'", len(keys), category)
        return len(keys)
