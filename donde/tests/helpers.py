from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd

from donde.places.models import PlaceDetails
from donde.recommendations.data_store import StoreTables
from donde.recommendations.models import (
    ANY_BUDGET,
    ANYWHERE,
    Candidate,
    CandidateTag,
    DeepProfile,
)
from donde.scoring.occasions import weighted_occasion_score

# 2025-10-17 19:30 in Chicago: dinner, fall
FIXED_NOW = datetime(2025, 10, 18, 0, 30, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


class FakeClock:
    """Monotonic seconds that only move when a test moves them."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def cid(n: int) -> str:
    return f"00000000-0000-4000-8000-{n:012d}"


def make_candidate(n: int, **overrides: Any) -> Candidate:
    tags = overrides.pop("tags", [])
    data: dict[str, Any] = {
        "id": cid(n),
        "name": f"Spot {n}",
        "address": f"{n} W Division St",
        "area": "Wicker Park",
        "place_id": f"place-{n}",
        "price_tier": "$$",
        "noise_level": "Moderate",
        "lighting": "warm",
        "dress_code": "Casual",
        "outdoor_seating": False,
        "live_music": False,
        "pet_friendly": False,
        "cuisine": "American",
        "pitch": "Neighborhood favorite with a short menu",
        "insider_tip": "Sit at the bar.",
        "date_friendly_score": 7.0,
        "group_friendly_score": 6.0,
        "family_friendly_score": 5.0,
        "romantic_rating": 6.0,
        "business_lunch_score": 5.0,
        "solo_dining_score": 5.0,
        "hole_in_wall_factor": 4.0,
        "tags": [CandidateTag(text=t) if isinstance(t, str) else t for t in tags],
    }
    data.update(overrides)
    return Candidate(**data)


def make_profile(**overrides: Any) -> DeepProfile:
    return DeepProfile(**overrides)


class FakeStore:
    """In-memory candidate store with the same ranked-read semantics."""

    def __init__(self, candidates: list[Candidate], *, fail: bool = False) -> None:
        self.candidates = list(candidates)
        self.fail = fail
        self.calls: list[tuple[str, str, str, int, str | None]] = []
        self.rows: list[dict[str, Any]] = []

    def ranked_candidates(self, area, budget, occasion, limit, cuisine_hint=None):
        self.calls.append((area, budget, occasion, limit, cuisine_hint))
        if self.fail:
            raise OSError("store offline")
        pool = [
            c for c in self.candidates
            if (area == ANYWHERE or c.area.lower() == area.lower())
            and (budget == ANY_BUDGET or c.price_tier == budget)
        ]
        pool.sort(key=lambda c: (weighted_occasion_score(c, occasion), c.total_score()), reverse=True)
        window = pool[:limit]
        if cuisine_hint and not any(c.cuisine == cuisine_hint for c in window):
            hinted = [c for c in pool[limit:] if c.cuisine == cuisine_hint][:3]
            if hinted:
                window = window[: limit - len(hinted)] + hinted
        return window

    def load_tables(self) -> StoreTables:
        raise OSError("bulk read offline")

    def record_query(self, row: dict[str, Any]) -> None:
        self.rows.append(row)

    def areas(self) -> list[str]:
        return sorted({c.area for c in self.candidates})


class FakePlaces:
    def __init__(self, details: dict[str, PlaceDetails] | None = None, delay: float = 0.0) -> None:
        self.details = details or {}
        self.delay = delay
        self.looked_up: list[str] = []

    @property
    def enabled(self) -> bool:
        return True

    async def lookup(self, place_id: str) -> PlaceDetails | None:
        self.looked_up.append(place_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.details.get(place_id)


# ---------------------------------------------------------------------------
# CSV fixtures for the file-backed store
# ---------------------------------------------------------------------------

AREAS = [
    {"id": "n1", "name": "Wicker Park", "description": "Six-corner bars and indie shops"},
    {"id": "n2", "name": "Logan Square", "description": "Boulevards and cocktail dens"},
]


def restaurant_row(n: int, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": cid(n),
        "name": f"Spot {n}",
        "address": f"{n} N Milwaukee Ave",
        "area_id": "n1",
        "place_id": f"place-{n}",
        "price_tier": "$$",
        "noise_level": "Moderate",
        "lighting": "warm",
        "dress_code": "Casual",
        "outdoor_seating": False,
        "live_music": False,
        "pet_friendly": False,
        "parking": "Street",
        "cuisine": "American",
        "pitch": "A reliable neighborhood pick",
        "insider_tip": "Go early.",
        "best_times": "dinner|late_night|lunch",
        "dietary_options": "",
        "good_for": "Dates|Groups",
        "trending_score": 5.0,
        "is_active": True,
    }
    row.update(overrides)
    return row


def score_row(n: int, date: float = 5.0, **overrides: Any) -> dict[str, Any]:
    row = {
        "restaurant_id": cid(n),
        "date_friendly_score": date,
        "group_friendly_score": 5.0,
        "family_friendly_score": 5.0,
        "romantic_rating": 5.0,
        "business_lunch_score": 5.0,
        "solo_dining_score": 5.0,
        "hole_in_wall_factor": 5.0,
    }
    row.update(overrides)
    return row


def write_tables(
    root: Path,
    restaurants: list[dict[str, Any]],
    scores: list[dict[str, Any]],
    tags: list[dict[str, Any]] | None = None,
    profiles: list[str] | None = None,
) -> Path:
    pd.DataFrame(restaurants).to_csv(root / "restaurants.csv", index=False)
    pd.DataFrame(scores).to_csv(root / "occasion_scores.csv", index=False)
    pd.DataFrame(
        tags or [], columns=["restaurant_id", "tag_text", "tag_category"]
    ).to_csv(root / "tags.csv", index=False)
    pd.DataFrame(AREAS).to_csv(root / "neighborhoods.csv", index=False)
    if profiles is not None:
        (root / "deep_profiles.jsonl").write_text("\n".join(profiles) + "\n", encoding="utf-8")
    return root
