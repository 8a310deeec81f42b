import pytest

from cache import TTLCache


class TestTTLCache:
    def test_get_set(self, clock):
        cache = TTLCache(60, clock=clock)
        cache.set("k", 1)
        assert cache.get("k") == 1
        assert "k" in cache
        assert len(cache) == 1

    def test_expiry(self, clock):
        cache = TTLCache(60, clock=clock)
        cache.set("k", 1)
        clock.advance(60)
        assert cache.get("k", "gone") == "gone"
        assert "k" not in cache

    def test_per_entry_ttl(self, clock):
        cache = TTLCache(60, clock=clock)
        cache.set("short", 1, ttl_seconds=5)
        cache.set("long", 2)
        clock.advance(10)
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_get_or_set_calls_factory_once(self, clock):
        cache = TTLCache(60, clock=clock)
        calls = []

        def factory():
            calls.append(1)
            return "value"

        assert cache.get_or_set("k", factory) == "value"
        assert cache.get_or_set("k", factory) == "value"
        assert len(calls) == 1

        clock.advance(61)
        cache.get_or_set("k", factory)
        assert len(calls) == 2

    def test_factory_errors_are_not_cached(self, clock):
        cache = TTLCache(60, clock=clock)

        def failing():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            cache.get_or_set("k", failing)
        assert "k" not in cache
        assert cache.get_or_set("k", lambda: 5) == 5

    def test_clear(self, clock):
        cache = TTLCache(60, clock=clock)
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0
