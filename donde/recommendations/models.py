from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

OCCASIONS = (
    "Date Night",
    "Group Hangout",
    "Family Dinner",
    "Business Lunch",
    "Solo Dining",
    "Special Occasion",
    "Treat Myself",
    "Adventure",
    "Chill Hangout",
)
ANY_OCCASION = "Any"

# Ordered cheapest to most expensive
BUDGET_TIERS = ("$", "$$", "$$$", "$$$$")
ANY_BUDGET = "Any"

ANYWHERE = "Anywhere"

MAX_EXCLUSIONS = 15
_IDENTIFIER_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

SCORE_FIELDS = (
    "date_friendly_score",
    "group_friendly_score",
    "family_friendly_score",
    "romantic_rating",
    "business_lunch_score",
    "solo_dining_score",
    "hole_in_wall_factor",
)

FEATURE_FIELDS = ("outdoor_seating", "live_music", "pet_friendly")

SubScore = Annotated[float, Field(ge=0.0, le=10.0)]


# ---------------------------------------------------------------------------
# Candidate
# ---------------------------------------------------------------------------


class SignatureDish(BaseModel):
    model_config = ConfigDict(frozen=True)

    dish: str
    why: str | None = None


class DeepProfile(BaseModel):
    """Optional enrichment bundle; any field may be missing on a thin profile."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    flavor_profiles: list[str] = Field(default_factory=list)
    cuisine_subcategory: str | None = None
    menu_depth: str | None = None
    spice_level: str | None = None
    dietary_depth: str | None = None
    service_style: str | None = None
    meal_pacing: str | None = None
    reservation_difficulty: str | None = None
    typical_wait_minutes: int | None = None
    group_size_min: int | None = None
    group_size_max: int | None = None
    check_average_per_person: float | None = None
    kid_friendliness: SubScore | None = None
    music_vibe: str | None = None
    decor_style: str | None = None
    conversation_friendliness: SubScore | None = None
    energy_level: SubScore | None = None
    seating_options: list[str] = Field(default_factory=list)
    instagram_worthiness: SubScore | None = None
    seasonal_relevance: dict[str, float] | None = None
    cultural_authenticity: SubScore | None = None
    crowd_profile: list[str] = Field(default_factory=list)
    neighborhood_integration: str | None = None
    chef_notable: bool = False
    awards_recognition: list[str] = Field(default_factory=list)
    wow_factors: list[str] = Field(default_factory=list)
    date_progression: str | None = None
    byob_policy: str | None = None
    payment_notes: str | None = None
    origin_story: str | None = None
    signature_dishes: list[SignatureDish] = Field(default_factory=list)
    best_seat_in_house: str | None = None
    unique_selling_point: str | None = None


class CandidateTag(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    category: str | None = None


class Candidate(BaseModel):
    """One recommendable restaurant, read fresh from the store per request."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    address: str = ""
    area: str = "Unknown"
    area_id: str | None = None
    area_description: str | None = None
    place_id: str | None = None
    price_tier: str | None = None
    noise_level: str | None = None
    lighting: str | None = None
    dress_code: str | None = None
    outdoor_seating: bool | None = None
    live_music: bool | None = None
    pet_friendly: bool | None = None
    parking: str | None = None
    cuisine: str | None = None
    pitch: str | None = None
    insider_tip: str | None = None
    best_times: list[str] = Field(default_factory=list)
    dietary_options: list[str] = Field(default_factory=list)
    good_for: list[str] = Field(default_factory=list)
    tags: list[CandidateTag] = Field(default_factory=list)

    date_friendly_score: SubScore | None = None
    group_friendly_score: SubScore | None = None
    family_friendly_score: SubScore | None = None
    romantic_rating: SubScore | None = None
    business_lunch_score: SubScore | None = None
    solo_dining_score: SubScore | None = None
    hole_in_wall_factor: SubScore | None = None

    trending_score: SubScore | None = None
    is_active: bool | None = True
    deep_profile: DeepProfile | None = None

    @property
    def tag_texts(self) -> list[str]:
        return [t.text for t in self.tags]

    def has_feature(self, feature: str) -> bool:
        return feature in FEATURE_FIELDS and bool(getattr(self, feature))

    def occasion_scores(self) -> dict[str, float | None]:
        return {f: getattr(self, f) for f in SCORE_FIELDS}

    def total_score(self) -> float:
        """Sum of all seven sub-scores, unknowns counted as 0."""
        return sum(getattr(self, f) or 0.0 for f in SCORE_FIELDS)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


def _normalize_text(text: str) -> str:
    return " ".join(text.lower().split())


class RecommendationRequest(BaseModel):
    occasion: str = Field(default=ANY_OCCASION, description="Enumerated occasion or 'Any'")
    price_level: str = Field(default=ANY_BUDGET, description='Budget tier, e.g. "$$", or "Any"')
    neighborhood: str = Field(default=ANYWHERE, max_length=80)
    special_request: str = Field(default="", max_length=500)
    exclude: list[str] = Field(
        default_factory=list,
        description="Identifiers of previously rejected picks",
    )

    @field_validator("occasion", mode="before")
    @classmethod
    def _check_occasion(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return ANY_OCCASION
        value = str(value).strip()
        if value != ANY_OCCASION and value not in OCCASIONS:
            raise ValueError(f"unknown occasion: {value}")
        return value

    @field_validator("price_level", mode="before")
    @classmethod
    def _check_budget(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return ANY_BUDGET
        value = str(value).strip()
        if value != ANY_BUDGET and value not in BUDGET_TIERS:
            raise ValueError(f"unknown budget tier: {value}")
        return value

    @field_validator("neighborhood", mode="before")
    @classmethod
    def _default_area(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return ANYWHERE
        return str(value).strip()

    @field_validator("special_request", mode="before")
    @classmethod
    def _strip_request(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("exclude", mode="before")
    @classmethod
    def _clean_exclusions(cls, value: Any) -> list[str]:
        # Malformed and duplicate identifiers are dropped, never rejected
        if not isinstance(value, (list, tuple)):
            return []
        seen: list[str] = []
        for item in value:
            if not isinstance(item, str):
                continue
            item = item.strip().lower()
            if _IDENTIFIER_RE.match(item) and item not in seen:
                seen.append(item)
            if len(seen) >= MAX_EXCLUSIONS:
                break
        return seen

    def cache_key(self) -> tuple[str, str, str, str]:
        return (
            self.occasion.lower(),
            self.neighborhood.lower(),
            self.price_level.lower(),
            _normalize_text(self.special_request),
        )


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class RestaurantOut(BaseModel):
    id: str
    name: str
    address: str
    neighborhood: str
    cuisine: str | None = None
    price_level: str | None = None
    noise_level: str | None = None
    lighting: str | None = None
    dress_code: str | None = None
    outdoor_seating: bool | None = None
    live_music: bool | None = None
    pet_friendly: bool | None = None
    parking: str | None = None
    best_for: str | None = None
    place_id: str | None = None
    phone: str | None = None
    website: str | None = None
    rating: float | None = None
    review_count: int | None = None
    business_status: str | None = None


class OccasionScoresOut(BaseModel):
    date_friendly_score: float | None = None
    group_friendly_score: float | None = None
    family_friendly_score: float | None = None
    romantic_rating: float | None = None
    business_lunch_score: float | None = None
    solo_dining_score: float | None = None
    hole_in_wall_factor: float | None = None


class DeepContext(BaseModel):
    signature_dishes: list[str] = Field(default_factory=list)
    origin_story: str | None = None
    best_seat: str | None = None
    wow_factors: list[str] = Field(default_factory=list)
    service_style: str | None = None
    reservation_difficulty: str | None = None
    byob_policy: str | None = None


class ScoringBreakdown(BaseModel):
    generation: str
    dimensions: dict[str, float]
    weights: dict[str, float]
    quality: float
    generative_relevance: float | None = None
    sentiment_penalty: float = 0.0
    raw: float


class RecommendationResponse(BaseModel):
    success: bool
    recommendation: str
    restaurant: RestaurantOut | None = None
    insider_tip: str | None = None
    donde_match: int | None = None
    match_verdict: str | None = None
    scores: OccasionScoresOut | None = None
    tags: list[str] = Field(default_factory=list)
    deep_context: DeepContext | None = None
    scoring: ScoringBreakdown | None = None
    sentiment_breakdown: str | None = None
    sentiment_summary: str | None = None
    fallback: bool = False
    timestamp: str
