"""Per-occasion expectation tables and the weighted occasion-fit baseline."""
from __future__ import annotations

from dataclasses import dataclass

from ..recommendations.models import ANY_OCCASION, SCORE_FIELDS, Candidate

# Each blend is convex: weights sum to 1.0
OCCASION_WEIGHTS: dict[str, dict[str, float]] = {
    "Date Night": {"date_friendly_score": 1.0},
    "Group Hangout": {"group_friendly_score": 1.0},
    "Family Dinner": {"family_friendly_score": 1.0},
    "Business Lunch": {"business_lunch_score": 1.0},
    "Solo Dining": {"solo_dining_score": 1.0},
    "Special Occasion": {"romantic_rating": 0.7, "date_friendly_score": 0.3},
    "Treat Myself": {
        "solo_dining_score": 0.5,
        "romantic_rating": 0.3,
        "hole_in_wall_factor": 0.2,
    },
    "Adventure": {
        "hole_in_wall_factor": 0.6,
        "group_friendly_score": 0.2,
        "solo_dining_score": 0.2,
    },
    "Chill Hangout": {
        "group_friendly_score": 0.6,
        "solo_dining_score": 0.3,
        "hole_in_wall_factor": 0.1,
    },
}

_MAX_TOTAL = 10.0 * len(SCORE_FIELDS)


def normalized_total(candidate: Candidate) -> float:
    """Sum of all sub-scores rescaled to 0-10."""
    return candidate.total_score() / _MAX_TOTAL * 10


def weighted_occasion_score(candidate: Candidate, occasion: str) -> float:
    if occasion == ANY_OCCASION:
        return normalized_total(candidate)
    weights = OCCASION_WEIGHTS.get(occasion)
    if weights is None:
        return candidate.date_friendly_score or 0.0
    return sum((getattr(candidate, field) or 0.0) * w for field, w in weights.items())


# ---------------------------------------------------------------------------
# Vibe expectations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VibeExpectation:
    noise: tuple[str, ...]
    lighting: tuple[str, ...]
    dress_min: str
    outdoor_bonus: bool
    live_music_bonus: bool

    @property
    def any_lighting(self) -> bool:
        return "any" in self.lighting


OCCASION_VIBE_MAP: dict[str, VibeExpectation] = {
    "Date Night": VibeExpectation(
        ("Quiet", "Moderate"), ("dim", "intimate", "warm", "candlelit", "romantic"),
        "Smart Casual", True, True,
    ),
    "Group Hangout": VibeExpectation(
        ("Moderate", "Loud"), ("bright", "lively", "modern", "warm", "vibrant"),
        "Casual", True, True,
    ),
    "Family Dinner": VibeExpectation(
        ("Quiet", "Moderate"), ("bright", "warm", "modern", "welcoming"),
        "Casual", True, False,
    ),
    "Business Lunch": VibeExpectation(
        ("Quiet",), ("bright", "modern", "warm", "elegant"),
        "Business Casual", False, False,
    ),
    "Solo Dining": VibeExpectation(
        ("Quiet", "Moderate"), ("warm", "cozy", "bright", "relaxed"),
        "Casual", True, False,
    ),
    "Special Occasion": VibeExpectation(
        ("Quiet",), ("dim", "intimate", "elegant", "warm", "candlelit"),
        "Smart Casual", True, True,
    ),
    "Treat Myself": VibeExpectation(
        ("Quiet", "Moderate"), ("warm", "cozy", "intimate", "elegant"),
        "Casual", True, False,
    ),
    "Adventure": VibeExpectation(
        ("Moderate", "Loud", "Quiet"), ("any",), "Casual", True, True,
    ),
    "Chill Hangout": VibeExpectation(
        ("Moderate", "Quiet"), ("warm", "cozy", "dim", "relaxed"),
        "Casual", True, True,
    ),
    ANY_OCCASION: VibeExpectation(
        ("Quiet", "Moderate"), ("any",), "Casual", False, False,
    ),
}

DRESS_LEVELS: dict[str, int] = {
    "Casual": 1,
    "Smart Casual": 2,
    "Business Casual": 3,
    "Formal": 4,
}

# ---------------------------------------------------------------------------
# Deep-profile fit tables
# ---------------------------------------------------------------------------

SERVICE_FIT: dict[str, tuple[str, ...]] = {
    "Business Lunch": ("Full Table Service",),
    "Date Night": ("Full Table Service", "Omakase", "Tasting Menu", "Bar Service"),
    "Group Hangout": ("Full Table Service", "Family Style", "Fast Casual", "Bar Service"),
    "Family Dinner": ("Full Table Service", "Family Style"),
    "Solo Dining": ("Counter", "Bar Service", "Fast Casual", "Full Table Service"),
    "Special Occasion": ("Tasting Menu", "Omakase", "Full Table Service"),
    "Treat Myself": ("Full Table Service", "Omakase", "Tasting Menu", "Counter"),
    "Adventure": ("Counter", "Family Style", "Omakase", "Full Table Service"),
    "Chill Hangout": ("Full Table Service", "Bar Service", "Fast Casual"),
}

PACING_FIT: dict[str, tuple[str, ...]] = {
    "Business Lunch": ("quick_bite", "relaxed"),
    "Date Night": ("relaxed", "leisurely"),
    "Group Hangout": ("relaxed", "leisurely"),
    "Solo Dining": ("quick_bite", "relaxed"),
    "Special Occasion": ("leisurely", "ceremonial"),
    "Treat Myself": ("relaxed", "leisurely", "ceremonial"),
    "Adventure": ("quick_bite", "relaxed", "ceremonial"),
    "Family Dinner": ("relaxed",),
}

# Occasions where being able to talk matters
CONVERSATION_OCCASIONS = frozenset({"Date Night", "Business Lunch", "Special Occasion"})

OCCASION_ENERGY: dict[str, tuple[float, float]] = {
    "Date Night": (4, 7),
    "Group Hangout": (6, 9),
    "Family Dinner": (3, 6),
    "Business Lunch": (2, 5),
    "Solo Dining": (2, 6),
    "Special Occasion": (4, 7),
    "Treat Myself": (3, 7),
    "Adventure": (4, 10),
    "Chill Hangout": (3, 6),
}
DEFAULT_ENERGY_BAND = (3.0, 7.0)

MUSIC_FIT: dict[str, tuple[str, ...]] = {
    "Date Night": ("live-jazz", "curated-playlist", "ambient"),
    "Business Lunch": ("ambient", "no-music"),
    "Group Hangout": ("curated-playlist", "DJ", "live-jazz", "live-band"),
    "Family Dinner": ("ambient", "no-music", "curated-playlist"),
    "Solo Dining": ("curated-playlist", "ambient", "no-music"),
    "Special Occasion": ("live-jazz", "curated-playlist", "ambient"),
    "Chill Hangout": ("curated-playlist", "ambient", "live-jazz"),
    "Adventure": ("live-jazz", "live-band", "DJ", "curated-playlist"),
}

# Occasions where the vibe matters more than a specific cuisine
VIBE_OCCASIONS = frozenset({"Date Night", "Special Occasion", "Business Lunch"})
