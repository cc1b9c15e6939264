"""Dependency Injection container - built once per process at startup."""

import duckdb
from loguru import logger

from app.models import SchemaRegistry, default_registry
from app.repositories import db
from app.repositories.common.cache import CacheRepository, MemoryCache
from app.repositories.common.lock import FileLock, HostLock, ThreadLock
from app.repositories.sheets import SheetStore
from app.services.cache import CacheStore, InvalidationBus
from app.services.dashboard.service import DashboardService
from app.services.schema import SchemaReconciler
from settings import Settings


class Container:
    """Holds the wired instances for one process.

    Nothing here is a module-level singleton: build a Container, call init(),
    and pass it (or its members) to whoever needs them.
    """

    def __init__(self, settings: Settings | None = None, registry: SchemaRegistry | None = None):
        self.settings = settings or Settings.from_env()
        self.registry = registry or default_registry()
        self._conn: duckdb.DuckDBPyConnection | None = None
        self._cache_conn: duckdb.DuckDBPyConnection | None = None
        self._initialized = False

    def connection(self) -> duckdb.DuckDBPyConnection:
        """Backing store connection, opened on first use."""
        if self._conn is None:
            self._conn = db.connect(self.settings.db_path)
        return self._conn

    def open_sheets(self) -> SheetStore:
        return SheetStore(self.connection())

    def _host_cache(self) -> CacheRepository | MemoryCache:
        s = self.settings
        if not s.cache_path:
            return MemoryCache(max_value_size=s.cache_max_entry_size)
        if s.cache_path == s.db_path:
            return CacheRepository(self.connection(), max_value_size=s.cache_max_entry_size)
        self._cache_conn = db.connect(s.cache_path)
        return CacheRepository(self._cache_conn, max_value_size=s.cache_max_entry_size)

    def _host_lock(self) -> HostLock:
        if self.settings.lock_path:
            return FileLock(self.settings.lock_path)
        return ThreadLock()

    def init(self) -> "Container":
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return self

        s = self.settings
        self.lock = self._host_lock()
        self.host_cache = self._host_cache()

        self.cache = CacheStore(
            self.host_cache,
            max_entry_size=s.cache_max_entry_size,
            max_part_size=s.cache_part_size,
            default_ttl=s.cache_ttl,
            max_ttl=s.cache_max_ttl,
            prefix=s.cache_prefix,
        )
        self.bus = InvalidationBus(self.cache)

        self.reconciler = SchemaReconciler(
            registry=self.registry,
            open_store=self.open_sheets,
            lock=self.lock,
            lock_timeout=s.lock_timeout,
        )

        self.dashboard = DashboardService(
            sheets=self.open_sheets(),
            cache=self.cache,
            bus=self.bus,
        )

        self._initialized = True
        logger.info("Container initialized (store={}, cache={})", s.db_path, type(self.host_cache).__name__)
        return self

    def close(self) -> None:
        db.close(self._cache_conn)
        db.close(self._conn)
        self._cache_conn = None
        self._conn = None
        self._initialized = False
