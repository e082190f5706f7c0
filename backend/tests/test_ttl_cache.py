from stock_advisor.services.cache.ttl_cache import TTLCache


def test_entry_expires_after_ttl(clock):
    cache = TTLCache(ttl=900, clock=clock)
    cache.set("AAPL-1Y", "record")

    clock.advance(899)
    assert cache.get("AAPL-1Y") == "record"

    clock.advance(1)
    assert cache.get("AAPL-1Y") is None
    assert len(cache) == 0


def test_zero_ttl_never_expires(clock):
    cache = TTLCache(ttl=0, clock=clock)
    cache.set("k", 1)
    clock.advance(10 ** 9)
    assert cache.get("k") == 1


def test_per_entry_ttl_override(clock):
    cache = TTLCache(ttl=60, clock=clock)
    cache.set("short", "a", ttl=5)
    cache.set("default", "b")

    clock.advance(10)
    assert "short" not in cache
    assert "default" in cache


def test_invalidate_and_clear(clock):
    cache = TTLCache(clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.invalidate("a") is True
    assert cache.invalidate("a") is False
    assert len(cache) == 1

    cache.clear()
    assert cache.get("b") is None


def test_len_ignores_expired_entries(clock):
    cache = TTLCache(ttl=60, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2, ttl=300)

    clock.advance(61)
    assert len(cache) == 1
    assert "b" in cache


def test_explicit_zero_ttl_overrides_default(clock):
    cache = TTLCache(ttl=10, clock=clock)
    cache.set("pinned", "x", ttl=0)
    cache.set("default", "y")

    clock.advance(3600)
    assert cache.get("pinned") == "x"
    assert cache.get("default") is None


def test_purge_expired_counts_removed(clock):
    cache = TTLCache(ttl=30, clock=clock)
    for key in ("a", "b", "c"):
        cache.set(key, key)
    cache.set("d", "d", ttl=0)

    clock.advance(30)
    assert cache.purge_expired() == 3
    assert cache.purge_expired() == 0
    assert len(cache) == 1
