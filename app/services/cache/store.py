"""Cache store - chunked, TTL-bounded storage on top of a host cache.

The host cache only holds strings up to a fixed size. Values are stored as
JSON; anything longer than ``max_entry_size`` is split into parts under the
same logical key (see chunker). A chunked entry with any part missing reads
as a miss, never as a truncated value.

Reads and writes are not locked: concurrent rebuilds of the same key both
write, and the last write wins.
"""

import json
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any, Protocol

from loguru import logger

from app.errors import StoreError
from app.repositories.common.cache import ValueTooLargeError
from app.services.cache import chunker


class CacheBackend(Protocol):
    """Host key/value cache: one string per key, bounded in size."""

    max_value_size: int

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: int) -> None: ...

    def delete(self, key: str) -> None: ...


class CacheSource(StrEnum):
    CACHE = "cache"
    REBUILD = "rebuild"
    NO_CACHE = "no-cache"


@dataclass
class CacheResult:
    """Value served by get_or_rebuild and where it came from."""

    value: Any
    source: CacheSource
    timings: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"source": str(self.source), "timings": self.timings, "data": self.value}


_MISS = object()


def _json_default(obj: Any) -> Any:
    if isinstance(obj, datetime | date):
        return obj.isoformat()
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def serialize(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=_json_default)


class CacheStore:
    """Chunked cache over a host backend."""

    def __init__(
        self,
        backend: CacheBackend,
        max_entry_size: int | None = None,
        max_part_size: int | None = None,
        default_ttl: int = 900,
        max_ttl: int = 21600,
        prefix: str = "",
    ):
        limit = backend.max_value_size
        self.max_entry_size = max_entry_size or limit
        self.max_part_size = max_part_size or self.max_entry_size
        if self.max_entry_size > limit:
            raise ValueError(f"max_entry_size {self.max_entry_size} exceeds backend limit {limit}")
        if not 0 < self.max_part_size <= self.max_entry_size:
            raise ValueError(f"max_part_size must be in 1..{self.max_entry_size}, got {self.max_part_size}")
        if default_ttl <= 0 or max_ttl <= 0:
            raise ValueError("TTLs must be positive")

        self._backend = backend
        self.default_ttl = min(default_ttl, max_ttl)
        self.max_ttl = max_ttl
        self.prefix = prefix

    def _full_key(self, key: str) -> str:
        return self.prefix + key

    def _ttl(self, ttl: int | None) -> int:
        if ttl is None:
            return self.default_ttl
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        if ttl > self.max_ttl:
            logger.debug("TTL {}s clamped to {}s", ttl, self.max_ttl)
            return self.max_ttl
        return ttl

    def _delete_parts(self, full_key: str, start: int, stop: int) -> None:
        for i in range(start, stop):
            self._backend.delete(chunker.part_key(full_key, i))

    def _lookup(self, key: str) -> Any:
        """Cached value or _MISS."""
        full_key = self._full_key(key)
        raw = self._backend.get(full_key)
        if raw is None:
            return _MISS

        part_count = chunker.parse_manifest(raw)
        if part_count is not None:
            parts = []
            for i in range(part_count):
                part = self._backend.get(chunker.part_key(full_key, i))
                if part is None:
                    logger.warning("Partial chunked entry {}: part {}/{} missing", key, i, part_count)
                    return _MISS
                parts.append(part)
            raw = chunker.join(parts)

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.error("Corrupt cache entry {}, removing it", key)
            self.invalidate(key)
            return _MISS

    def get(self, key: str, default: Any = None) -> Any:
        """Cached value for key, or default on a miss."""
        value = self._lookup(key)
        if value is _MISS:
            logger.debug("Cache miss: {}", key)
            return default
        logger.debug("Cache hit: {}", key)
        return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> int:
        """Store value under key. Returns the number of parts (0 when simple)."""
        ttl = self._ttl(ttl)
        full_key = self._full_key(key)
        payload = serialize(value)
        size = len(payload)

        old_parts = chunker.parse_manifest(self._backend.get(full_key)) or 0

        if size <= self.max_entry_size:
            self._backend.set(full_key, payload, ttl)
            self._delete_parts(full_key, 0, old_parts)
            logger.debug("Cache saved: {} ({} chars)", key, size)
            return 0

        part_count = math.ceil(size / self.max_part_size)
        parts = chunker.split(payload, self.max_part_size)
        for i, part in enumerate(parts):
            self._backend.set(chunker.part_key(full_key, i), part, ttl)
        self._backend.set(full_key, chunker.manifest(part_count), ttl)
        self._delete_parts(full_key, part_count, old_parts)

        logger.debug("Cache saved: {} ({} chars in {} parts)", key, size, part_count)
        return part_count

    def invalidate(self, key: str) -> bool:
        """Delete key and any parts it owns. Returns whether it was present."""
        full_key = self._full_key(key)
        raw = self._backend.get(full_key)
        part_count = chunker.parse_manifest(raw) or 0

        self._backend.delete(full_key)
        self._delete_parts(full_key, 0, part_count)
        if raw is not None:
            logger.debug("Cache invalidated: {}", key)
        return raw is not None

    def get_or_rebuild(
        self,
        key: str,
        compute_fn: Callable[[], Any],
        ttl: int | None = None,
    ) -> CacheResult:
        """Serve key from cache, or compute, store and return it."""
        started = time.perf_counter()
        value = self._lookup(key)
        if value is not _MISS:
            logger.debug("Cache hit: {}", key)
            return CacheResult(
                value=value,
                source=CacheSource.CACHE,
                timings={"total_ms": _elapsed_ms(started)},
            )

        logger.info("Cache miss: {}, rebuilding", key)
        calc_started = time.perf_counter()
        value = compute_fn()
        calc_ms = _elapsed_ms(calc_started)

        try:
            self.set(key, value, ttl)
        except (StoreError, ValueTooLargeError) as e:
            logger.error("Could not cache {}: {}", key, e)

        return CacheResult(
            value=value,
            source=CacheSource.REBUILD,
            timings={"calc_ms": calc_ms, "total_ms": _elapsed_ms(started)},
        )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
