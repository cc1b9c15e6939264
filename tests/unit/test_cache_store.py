"""Tests for the chunked cache store and host cache backends."""

import pytest

from app.errors import StoreError
from app.repositories import CacheRepository, MemoryCache, ValueTooLargeError
from app.services.cache import CacheSource, CacheStore

# Serializes to exactly 250_000 chars (the JSON string adds two quotes)
BIG = "x" * 249_998


class FailingCache(MemoryCache):
    def set(self, key, value, ttl):
        raise StoreError("host cache unavailable")


class TestSimpleEntries:
    def test_roundtrip(self, cache, backend):
        assert cache.set("k", {"a": 1, "b": "ñ"}) == 0
        assert backend.get("k") == '{"a":1,"b":"ñ"}'
        assert cache.get("k") == {"a": 1, "b": "ñ"}

    def test_miss_returns_default(self, cache):
        assert cache.get("missing") is None
        assert cache.get("missing", default=[]) == []

    def test_prefix(self, backend):
        store = CacheStore(backend, prefix="ICONNECT_")
        store.set("k", 1)
        assert backend.get("ICONNECT_k") == "1"
        assert store.get("k") == 1

    def test_invalidate(self, cache):
        cache.set("k", 1)
        assert cache.invalidate("k") is True
        assert cache.get("k") is None
        assert cache.invalidate("k") is False

    def test_corrupt_entry_is_a_miss(self, cache, backend):
        backend.set("k", "{not json", 60)
        assert cache.get("k") is None
        assert backend.get("k") is None


class TestChunkedEntries:
    def test_large_value_is_chunked(self, cache, backend):
        assert cache.set("dashboardStats", BIG, ttl=300) == 3
        assert backend.get("dashboardStats") == "##CHUNKS##|3"
        for i in range(3):
            assert backend.get(f"dashboardStats__part{i}") is not None
        assert backend.get("dashboardStats__part3") is None
        assert cache.get("dashboardStats") == BIG

    def test_missing_part_is_a_miss(self, cache, backend):
        cache.set("dashboardStats", BIG, ttl=300)
        backend.delete("dashboardStats__part1")
        assert cache.get("dashboardStats") is None

    def test_expired_part_is_a_miss(self, cache, backend, clock):
        cache.set("dashboardStats", BIG, ttl=300)
        backend.set("dashboardStats", "##CHUNKS##|3", 3600)
        clock.advance(301)
        assert cache.get("dashboardStats") is None

    def test_shrinking_removes_orphan_parts(self, cache, backend):
        cache.set("k", BIG)
        assert cache.set("k", "x" * 150_000) == 2
        assert backend.get("k") == "##CHUNKS##|2"
        assert backend.get("k__part2") is None

    def test_simple_overwrite_removes_parts(self, cache, backend):
        cache.set("k", BIG)
        cache.set("k", "small")
        assert backend.get("k") == '"small"'
        assert all(backend.get(f"k__part{i}") is None for i in range(3))

    def test_invalidate_removes_parts(self, cache, backend):
        cache.set("k", BIG)
        cache.invalidate("k")
        assert len(backend) == 0

    def test_smaller_part_size(self, backend):
        store = CacheStore(backend, max_entry_size=100_000, max_part_size=90_000)
        assert store.set("k", BIG) == 3
        assert store.get("k") == BIG


class TestTTL:
    def test_expires(self, cache, clock):
        cache.set("k", 1, ttl=10)
        clock.advance(9)
        assert cache.get("k") == 1
        clock.advance(2)
        assert cache.get("k") is None

    def test_default_ttl(self, cache, clock):
        cache.set("k", 1)
        clock.advance(299)
        assert cache.get("k") == 1
        clock.advance(2)
        assert cache.get("k") is None

    def test_clamped_to_max(self, backend, clock):
        store = CacheStore(backend, default_ttl=60, max_ttl=100)
        store.set("k", 1, ttl=10_000)
        clock.advance(101)
        assert store.get("k") is None

    def test_non_positive(self, cache):
        with pytest.raises(ValueError):
            cache.set("k", 1, ttl=0)


class TestLimits:
    def test_entry_size_above_backend(self, backend):
        with pytest.raises(ValueError):
            CacheStore(backend, max_entry_size=200_000)

    def test_part_size_above_entry_size(self, backend):
        with pytest.raises(ValueError):
            CacheStore(backend, max_entry_size=50_000, max_part_size=60_000)


class TestGetOrRebuild:
    def test_rebuild_then_cache(self, cache):
        calls = []

        def compute():
            calls.append(1)
            return {"total": 10}

        first = cache.get_or_rebuild("stats", compute)
        assert first.source == CacheSource.REBUILD
        assert first.value == {"total": 10}
        assert "calc_ms" in first.timings

        second = cache.get_or_rebuild("stats", compute)
        assert second.source == CacheSource.CACHE
        assert second.value == {"total": 10}
        assert len(calls) == 1

    def test_partial_entry_rebuilds(self, cache, backend):
        cache.set("stats", BIG)
        backend.delete("stats__part2")
        result = cache.get_or_rebuild("stats", lambda: "fresh")
        assert result.source == CacheSource.REBUILD
        assert cache.get("stats") == "fresh"

    def test_cache_write_failure_still_serves(self, clock):
        store = CacheStore(FailingCache(clock=clock))
        result = store.get_or_rebuild("stats", lambda: [1, 2])
        assert result.source == CacheSource.REBUILD
        assert result.value == [1, 2]

    def test_to_dict(self, cache):
        result = cache.get_or_rebuild("stats", lambda: 1).to_dict()
        assert result["source"] == "rebuild"
        assert result["data"] == 1


class TestMemoryCache:
    def test_rejects_large_values(self, backend):
        with pytest.raises(ValueTooLargeError):
            backend.set("k", "x" * 100_001, 60)

    def test_set_sweeps_expired_entries(self, backend, clock):
        backend.set("old__part0", "a", 10)
        backend.set("old__part1", "b", 10)
        clock.advance(11)
        backend.set("new", "c", 60)
        assert len(backend) == 1

    def test_purge_expired(self, backend, clock):
        backend.set("a", "1", 10)
        backend.set("b", "2", 100)
        clock.advance(50)
        assert backend.purge_expired() == 1
        assert len(backend) == 1
        assert backend.get("b") == "2"


class TestCacheRepository:
    @pytest.fixture
    def repo(self, conn, clock):
        return CacheRepository(conn, max_value_size=1_000, clock=clock)

    def test_roundtrip(self, repo):
        repo.set("k", "v", 60)
        assert repo.get("k") == "v"
        repo.set("k", "w", 60)
        assert repo.get("k") == "w"
        assert repo.count() == 1

    def test_expiry_and_purge(self, repo, clock):
        repo.set("a", "1", 10)
        repo.set("b", "2", 100)
        clock.advance(50)
        assert repo.get("a") is None
        assert repo.purge_expired() == 1
        assert repo.count() == 1

    def test_delete(self, repo):
        repo.set("k", "v", 60)
        repo.delete("k")
        assert repo.get("k") is None

    def test_rejects_large_values(self, repo):
        with pytest.raises(ValueTooLargeError):
            repo.set("k", "x" * 1_001, 60)

    def test_chunked_store_on_duckdb(self, repo):
        store = CacheStore(repo, max_part_size=400)
        assert store.set("k", "y" * 1_198) == 3
        assert store.get("k") == "y" * 1_198
