from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Any, Callable, Hashable

from .config import DEFAULT_ENGINE_CONFIG


def _make_key(key: Hashable) -> str:
    normalized = json.dumps(key, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


class ResponseCache:
    """
    TTL cache for finished responses, keyed by the normalized request tuple.

    Each entry carries its own absolute expiry. Expired entries are evicted
    lazily: on read of the same key, and in bulk whenever a new entry is
    written. ``clock`` returns seconds and defaults to ``time.monotonic``.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_ENGINE_CONFIG.cache_ttl,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, Any]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: Hashable) -> Any | None:
        digest = _make_key(key)
        with self._lock:
            entry = self._entries.get(digest)
            if entry and self._clock() < entry[0]:
                self._hits += 1
                return entry[1]
            if entry:
                del self._entries[digest]
            self._misses += 1
            return None

    def put(self, key: Hashable, value: Any, ttl: float | None = None) -> None:
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires, _) in self._entries.items() if expires <= now]
            for k in expired:
                del self._entries[k]
            self._entries[_make_key(key)] = (now + (self._ttl if ttl is None else ttl), value)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
