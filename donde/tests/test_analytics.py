from __future__ import annotations

from collections import deque

from donde.analytics import store
from donde.analytics.aggregator import compute_analytics
from donde.analytics.store import clear_events, get_events, record_event


def _query(**overrides):
    event = {
        "type": "query",
        "occasion": "Date Night",
        "area": "Wicker Park",
        "outcome": "success",
        "restaurant_id": "r1",
        "donde_match": 80,
        "fallback": False,
        "cache_hit": False,
        "response_time_ms": 100.0,
        "unmatched_keywords": [],
    }
    event.update(overrides)
    return event


def test_empty_analytics():
    body = compute_analytics([])
    assert body["total_queries"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["fallback_rate"] == 0.0
    assert body["top_occasions"] == []


def test_analytics_summarises_queries():
    events = [
        _query(),
        _query(restaurant_id="r2", donde_match=90, fallback=True, outcome="fallback", response_time_ms=300.0),
        _query(cache_hit=True, unmatched_keywords=["qwyxz"]),
        _query(outcome="no_results", restaurant_id=None, donde_match=None, area="Pilsen"),
        _query(outcome="error", restaurant_id=None, donde_match=None, unmatched_keywords=["qwyxz"]),
        {"type": "other"},
    ]
    body = compute_analytics(events)

    assert body["total_queries"] == 5
    assert body["avg_response_time_ms"] == 140.0
    assert body["avg_donde_match"] == 83.3
    assert body["outcomes"] == {"success": 2, "fallback": 1, "no_results": 1, "error": 1}
    assert body["fallback_rate"] == 20.0
    assert body["cache_hit_rate"] == 20.0
    assert body["no_results"] == 1
    assert body["errors"] == 1
    assert body["top_recommended"][0] == {"name": "r1", "count": 2}
    assert body["top_areas"][0] == {"name": "Wicker Park", "count": 4}
    assert body["top_unmatched_keywords"] == [{"name": "qwyxz", "count": 2}]


def test_event_store_filters_by_type():
    clear_events()
    record_event("query", {"outcome": "success"})
    record_event("other", {})
    assert len(get_events()) == 2
    assert [e["outcome"] for e in get_events("query")] == ["success"]
    assert "timestamp" in get_events("query")[0]
    clear_events()
    assert get_events() == []


def test_event_store_keeps_a_fixed_window(monkeypatch):
    monkeypatch.setattr(store, "_events", deque(maxlen=3))
    for n in range(5):
        record_event("query", {"restaurant_id": f"r{n}"})
    assert [e["restaurant_id"] for e in get_events("query")] == ["r2", "r3", "r4"]


def test_get_events_since():
    clear_events()
    old = record_event("query", {"outcome": "success"})
    new = record_event("query", {"outcome": "fallback"})
    assert get_events(since=new["timestamp"])[-1]["outcome"] == "fallback"
    assert len(get_events(since=old["timestamp"])) == 2
    clear_events()
