"""Common repositories - host cache backends and host locks."""

from app.repositories.common.cache import CacheRepository, MemoryCache, ValueTooLargeError
from app.repositories.common.lock import FileLock, HostLock, ThreadLock, hold

__all__ = [
    "CacheRepository",
    "MemoryCache",
    "ValueTooLargeError",
    "HostLock",
    "ThreadLock",
    "FileLock",
    "hold",
]
