"""Tests for the in-memory TTL cache."""

import threading

from portfolio.core.cache import DEFAULT_EXPIRY, CacheEntry, MemoryCache


class TestCacheEntry:
    def test_not_expired_at_deadline(self):
        entry = CacheEntry(data="x", timestamp=100.0, expiry=10.0)
        assert entry.is_expired(110.0) is False

    def test_expired_after_deadline(self):
        entry = CacheEntry(data="x", timestamp=100.0, expiry=10.0)
        assert entry.is_expired(110.01) is True


class TestMemoryCache:
    def test_set_and_get(self, cache):
        cache.set("key1", "value1", 60)
        assert cache.get("key1") == "value1"

    def test_missing_key_returns_none(self, cache):
        assert cache.get("nonexistent") is None

    def test_expiry_window(self, cache, clock):
        cache.set("a", 1, 1)
        clock.advance(0.5)
        assert cache.get("a") == 1
        clock.advance(1.0)
        assert cache.get("a") is None

    def test_expired_entry_is_removed_on_read(self, cache, clock):
        cache.set("key2", "value2", 5)
        clock.advance(6)
        assert len(cache) == 1  # not swept until read
        assert cache.get("key2") is None
        assert len(cache) == 0
        cache.clear("key2")  # no-op, no error

    def test_default_expiry_is_five_minutes(self, cache, clock):
        assert DEFAULT_EXPIRY == 300
        cache.set("k", "v")
        clock.advance(299)
        assert cache.get("k") == "v"
        clock.advance(2)
        assert cache.get("k") is None

    def test_overwrite_resets_timestamp(self, cache, clock):
        cache.set("key3", "old", 10)
        clock.advance(8)
        cache.set("key3", "new", 10)
        clock.advance(8)
        assert cache.get("key3") == "new"

    def test_stores_any_type(self, cache):
        cache.set("dict", {"a": 1}, 60)
        cache.set("list", [1, 2, 3], 60)
        cache.set("bool", True, 60)
        assert cache.get("dict") == {"a": 1}
        assert cache.get("list") == [1, 2, 3]
        assert cache.get("bool") is True

    def test_clear_removes_only_that_key(self, cache):
        cache.set("a", 1, 60)
        cache.set("b", 2, 60)
        cache.clear("a")
        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_clear_missing_key_is_noop(self, cache):
        cache.clear("never-set")
        assert len(cache) == 0

    def test_clear_all(self, cache):
        for i in range(5):
            cache.set(f"k{i}", i, 60)
        cache.clear_all()
        assert all(cache.get(f"k{i}") is None for i in range(5))
        assert len(cache) == 0

    def test_contains_honours_expiry(self, cache, clock):
        cache.set("k", "v", 1)
        assert "k" in cache
        clock.advance(2)
        assert "k" not in cache

    def test_stats_counts_expired_without_evicting(self, cache, clock):
        cache.set("short", 1, 1)
        cache.set("long", 2, 100)
        clock.advance(5)
        assert cache.stats() == {"total_items": 2, "valid_items": 1}
        assert len(cache) == 2

    def test_instances_are_independent(self):
        first, second = MemoryCache(), MemoryCache()
        first.set("k", "v", 60)
        assert second.get("k") is None

    def test_concurrent_writers(self):
        cache = MemoryCache()

        def writer(n: int):
            for i in range(200):
                cache.set(f"{n}:{i}", i, 60)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 800
