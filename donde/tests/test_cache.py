from __future__ import annotations

from donde.recommendations.cache import ResponseCache
from donde.recommendations.models import RecommendationRequest
from donde.tests.helpers import FakeClock


def test_cache_miss_then_hit():
    cache = ResponseCache(ttl=300, clock=FakeClock())
    key = ("date night", "wicker park", "$$", "tacos")
    assert cache.get(key) is None
    cache.put(key, {"success": True})
    assert cache.get(key) == {"success": True}

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 50.0


def test_entries_expire_lazily():
    clock = FakeClock()
    cache = ResponseCache(ttl=300, clock=clock)
    cache.put("k", "v")

    clock.now += 299
    assert cache.get("k") == "v"
    assert cache.stats()["size"] == 1

    clock.now += 1
    assert cache.get("k") is None
    assert cache.stats()["size"] == 0


def test_request_key_is_case_and_space_insensitive():
    cache = ResponseCache(clock=FakeClock())
    a = RecommendationRequest(occasion="Date Night", neighborhood="Wicker Park", special_request="Spicy  Tacos")
    b = RecommendationRequest(occasion="Date Night", neighborhood="wicker park", special_request="spicy tacos ")
    cache.put(a.cache_key(), "answer")
    assert cache.get(b.cache_key()) == "answer"


def test_different_requests_miss():
    cache = ResponseCache(clock=FakeClock())
    cache.put(RecommendationRequest(neighborhood="Wicker Park").cache_key(), "a")
    assert cache.get(RecommendationRequest(neighborhood="Logan Square").cache_key()) is None


def test_clear_resets_stats():
    cache = ResponseCache(clock=FakeClock())
    cache.put("k", "v")
    cache.get("k")
    cache.clear()
    assert cache.stats() == {"size": 0, "hits": 0, "misses": 0, "hit_rate": 0.0}


def test_put_sweeps_expired_entries():
    clock = FakeClock()
    cache = ResponseCache(ttl=300, clock=clock)
    for n in range(100):
        cache.put(f"craving {n}", n)
        clock.now += 301
    assert cache.stats()["size"] == 1

    cache.put("fresh", "a")
    clock.now += 100
    cache.put("newer", "b")
    assert cache.stats()["size"] == 2
    assert cache.get("fresh") == "a"


def test_per_entry_ttl():
    clock = FakeClock()
    cache = ResponseCache(ttl=300, clock=clock)
    cache.put("short", "s", ttl=60)
    cache.put("long", "l")

    clock.now += 60
    assert cache.get("short") is None
    assert cache.get("long") == "l"
