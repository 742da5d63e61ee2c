from __future__ import annotations

from collections import Counter
from typing import Any


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": k, "count": c} for k, c in counter.most_common(n)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    queries = [e for e in events if e["type"] == "query"]
    total = len(queries)

    # Average response time
    times = [q["response_time_ms"] for q in queries if "response_time_ms" in q]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Average confidence over answered queries
    matches = [q["donde_match"] for q in queries if q.get("donde_match") is not None]
    avg_match = round(sum(matches) / len(matches), 1) if matches else 0.0

    outcomes = Counter(q.get("outcome", "unknown") for q in queries)
    fallbacks = sum(1 for q in queries if q.get("fallback"))
    cache_hits = sum(1 for q in queries if q.get("cache_hit"))

    occasions = Counter(q.get("occasion", "Any") for q in queries)
    areas = Counter(q.get("area", "Anywhere") for q in queries)
    picks = Counter(q["restaurant_id"] for q in queries if q.get("restaurant_id"))

    # Craving words no dictionary entry recognised
    unmatched: Counter[str] = Counter()
    for q in queries:
        for word in q.get("unmatched_keywords", []) or []:
            unmatched[word] += 1

    return {
        "total_queries": total,
        "avg_response_time_ms": avg_time,
        "avg_donde_match": avg_match,
        "outcomes": dict(outcomes),
        "fallback_rate": round(fallbacks / total * 100, 1) if total else 0.0,
        "no_results": outcomes.get("no_results", 0),
        "errors": outcomes.get("error", 0),
        "cache_hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        "top_occasions": _top(occasions),
        "top_areas": _top(areas),
        "top_recommended": _top(picks),
        "top_unmatched_keywords": _top(unmatched, 20),
    }
