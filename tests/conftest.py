"""Shared fixtures: in-memory store, fake clock, wired container."""

import pytest

from app.container import Container
from app.repositories import MemoryCache, SheetStore, ThreadLock, connect
from app.services.cache import CacheStore
from settings import Settings


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def conn():
    conn = connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def sheets(conn):
    return SheetStore(conn)


@pytest.fixture
def backend(clock):
    return MemoryCache(max_value_size=100_000, clock=clock)


@pytest.fixture
def cache(backend):
    return CacheStore(backend, max_entry_size=100_000, max_part_size=100_000, default_ttl=300)


@pytest.fixture
def lock():
    return ThreadLock()


@pytest.fixture
def settings():
    return Settings(db_path=":memory:", cache_path="", lock_path="", lock_timeout=0.1)


@pytest.fixture
def container(settings):
    container = Container(settings).init()
    yield container
    container.close()
