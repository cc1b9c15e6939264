"""Repositories package - data access layer for the backing store and host services."""

from app.repositories.base import BaseRepository
from app.repositories.common import (
    CacheRepository,
    FileLock,
    HostLock,
    MemoryCache,
    ThreadLock,
    ValueTooLargeError,
    hold,
)
from app.repositories.db import close, connect, db_exists, init_tables
from app.repositories.sheets import HeaderMap, Row, SheetStore, TableStore

__all__ = [
    # DB
    "connect",
    "close",
    "db_exists",
    "init_tables",
    # Base
    "BaseRepository",
    # Sheets
    "TableStore",
    "SheetStore",
    "HeaderMap",
    "Row",
    # Common
    "CacheRepository",
    "MemoryCache",
    "ValueTooLargeError",
    "HostLock",
    "ThreadLock",
    "FileLock",
    "hold",
]
