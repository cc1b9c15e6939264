"""Cache API."""

from web.api.cache.views import invalidate_cache, rebuild_cache

__all__ = [
    "invalidate_cache",
    "rebuild_cache",
]
