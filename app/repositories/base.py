"""Base repository over a DuckDB connection with error wrapping."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import duckdb
from loguru import logger

from app.errors import StoreError


class BaseRepository:
    """Base repository over an injected DuckDB connection."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        self._db = conn
        self._cache: dict[str, Any] = {}
        logger.debug("{} initialized", self.__class__.__name__)

    def _cached(self, key: str, fn: Callable[[], Any]) -> Any:
        """Memoize fn under key for the lifetime of this repository."""
        if key not in self._cache:
            self._cache[key] = fn()
            logger.debug("Cache miss: {}", key)
        return self._cache[key]

    def _forget(self, prefix: str) -> None:
        """Drop cached values whose key starts with prefix."""
        for key in [k for k in self._cache if k.startswith(prefix)]:
            del self._cache[key]

    def execute(self, query: str, params: list | None = None) -> Any:
        """Run one statement; driver errors become StoreError."""
        try:
            if params:
                return self._db.execute(query, params)
            return self._db.execute(query)
        except duckdb.Error as e:
            raise StoreError(f"Store query failed: {e}") from e

    def executemany(self, query: str, params: list[list]) -> None:
        """Execute SQL statement for each parameter row."""
        if not params:
            return
        try:
            self._db.executemany(query, params)
        except duckdb.Error as e:
            raise StoreError(f"Store write failed: {e}") from e

    def fetchall(self, query: str, params: list | None = None) -> list:
        """Run and return every row."""
        return self.execute(query, params).fetchall()

    def fetchone(self, query: str, params: list | None = None) -> Any:
        """Run and return the first row."""
        return self.execute(query, params).fetchone()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed statements atomically."""
        self.execute("BEGIN TRANSACTION")
        try:
            yield
            self.execute("COMMIT")
        except Exception:
            self.execute("ROLLBACK")
            raise
