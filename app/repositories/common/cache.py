"""Host cache backends - plain string key/value storage with TTL.

Both backends reject values larger than ``max_value_size``; splitting large
payloads is the job of the chunking layer above them.
"""

import threading
import time
from collections.abc import Callable

import duckdb
from loguru import logger

from app.repositories.base import BaseRepository

DEFAULT_MAX_VALUE_SIZE = 100_000


class ValueTooLargeError(ValueError):
    """Value exceeds the backend's per-entry size limit."""


def _check_size(key: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise ValueTooLargeError(f"Cache value for '{key}' is {len(value)} chars (limit {limit})")


class MemoryCache:
    """In-process cache. Entries live as long as the process does."""

    def __init__(
        self,
        max_value_size: int = DEFAULT_MAX_VALUE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_value_size = max_value_size
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: int) -> None:
        """Save an entry, dropping any that already expired."""
        _check_size(key, value, self.max_value_size)
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries[key] = (value, now + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Delete expired entries. Returns how many were removed."""
        with self._lock:
            removed = self._sweep(self._clock())
        if removed:
            logger.info("Purged {} expired cache entries", removed)
        return removed

    def _sweep(self, now: float) -> int:
        expired = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class CacheRepository(BaseRepository):
    """Cache stored in DuckDB, shared by every process opening the same file."""

    def __init__(
        self,
        conn: duckdb.DuckDBPyConnection,
        max_value_size: int = DEFAULT_MAX_VALUE_SIZE,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(conn)
        self.max_value_size = max_value_size
        self._clock = clock

    def get(self, key: str) -> str | None:
        """Load an unexpired entry."""
        row = self.fetchone(
            "SELECT value FROM cache_entry WHERE key = ? AND expires_at > ?",
            [key, self._clock()],
        )
        if row:
            return row[0]
        return None

    def set(self, key: str, value: str, ttl: int) -> None:
        """Save an entry with ttl seconds to live."""
        _check_size(key, value, self.max_value_size)
        self.execute(
            "INSERT OR REPLACE INTO cache_entry (key, value, expires_at) VALUES (?, ?, ?)",
            [key, value, self._clock() + ttl],
        )

    def delete(self, key: str) -> None:
        self.execute("DELETE FROM cache_entry WHERE key = ?", [key])

    def purge_expired(self) -> int:
        """Delete expired entries. Returns how many were removed."""
        now = self._clock()
        row = self.fetchone("SELECT COUNT(*) FROM cache_entry WHERE expires_at <= ?", [now])
        self.execute("DELETE FROM cache_entry WHERE expires_at <= ?", [now])
        if row[0]:
            logger.info("Purged {} expired cache entries", row[0])
        return row[0]

    def count(self) -> int:
        row = self.fetchone("SELECT COUNT(*) FROM cache_entry WHERE expires_at > ?", [self._clock()])
        return row[0]
