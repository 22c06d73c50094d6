from roampedia.services.response_cache import ResponseCache


def test_value_returned_within_ttl(clock):
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    payload = {"name": "Japan"}
    cache.set("country:japan", payload)

    clock.advance(10)
    assert cache.get("country:japan") is payload


def test_expired_entry_is_evicted_on_read(clock):
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    cache.set("country:japan", {"name": "Japan"})

    clock.advance(10.01)
    assert len(cache) == 1
    assert cache.get("country:japan") is None
    assert len(cache) == 0


def test_set_refreshes_timestamp(clock):
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    cache.set("k", 1)
    clock.advance(8)
    cache.set("k", 2)
    clock.advance(8)
    assert cache.get("k") == 2


def test_missing_key_and_clear(clock):
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    assert cache.get("nope") is None
    cache.set("a", 1)
    assert "a" in cache
    cache.clear()
    assert "a" not in cache
