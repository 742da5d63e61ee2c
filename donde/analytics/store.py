"""
In-process outcome log behind ``GET /analytics``.

Only the most recent ``MAX_EVENTS`` outcomes are kept; older rows fall off
the front so a long-running server holds a fixed window.
"""
from __future__ import annotations

import os
import threading
import time
from collections import deque
from typing import Any

MAX_EVENTS = int(os.getenv("DONDE_ANALYTICS_WINDOW", "5000"))

_events: deque[dict[str, Any]] = deque(maxlen=MAX_EVENTS)
_lock = threading.Lock()


def record_event(event_type: str, data: dict[str, Any]) -> dict[str, Any]:
    event = {"type": event_type, "timestamp": time.time(), **data}
    with _lock:
        _events.append(event)
    return event


def get_events(event_type: str | None = None, since: float | None = None) -> list[dict[str, Any]]:
    """Snapshot of the window, optionally narrowed to one type or to rows after ``since``."""
    with _lock:
        snapshot = list(_events)
    return [
        e for e in snapshot
        if (event_type is None or e["type"] == event_type)
        and (since is None or e["timestamp"] >= since)
    ]


def clear_events() -> None:
    with _lock:
        _events.clear()
