from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from ..intent.models import IntentClassification
from ..recommendations.models import (
    ANY_BUDGET,
    ANYWHERE,
    Candidate,
    DeepProfile,
    RecommendationRequest,
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Time context
# ---------------------------------------------------------------------------


def local_time(now: datetime, tz_name: str) -> datetime:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name))


def time_of_day(local: datetime) -> str:
    hour = local.hour
    if 6 <= hour < 11:
        return "breakfast"
    if 11 <= hour < 15:
        return "lunch"
    if 15 <= hour < 21:
        return "dinner"
    return "late_night"


def season_of(local: datetime) -> str:
    month = local.month
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "fall"
    return "winter"


# ---------------------------------------------------------------------------
# Request-scoped signals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RejectionSignals:
    avoid_cuisines: tuple[str, ...] = ()
    avoid_price_tiers: tuple[str, ...] = ()
    rejected_count: int = 0

    @property
    def active(self) -> bool:
        return bool(self.avoid_cuisines or self.avoid_price_tiers)


NO_REJECTIONS = RejectionSignals()


@dataclass(frozen=True)
class RequestSignals:
    """Everything about the request that scoring needs, computed once."""

    occasion: str
    area: str = ANYWHERE
    budget: str = ANY_BUDGET
    free_text: str = ""
    intent: IntentClassification | None = None
    rejections: RejectionSignals = field(default=NO_REJECTIONS)
    time_of_day: str = "dinner"
    season: str = "fall"

    @property
    def text(self) -> str:
        return self.free_text.lower()

    @property
    def has_text(self) -> bool:
        return len(self.free_text.strip()) >= 3

    @property
    def importance(self) -> str | None:
        return self.intent.cuisine_importance if self.intent else None

    @classmethod
    def from_request(
        cls,
        request: RecommendationRequest,
        *,
        now: datetime,
        tz_name: str,
        intent: IntentClassification | None = None,
        rejections: RejectionSignals = NO_REJECTIONS,
    ) -> RequestSignals:
        local = local_time(now, tz_name)
        return cls(
            occasion=request.occasion,
            area=request.neighborhood,
            budget=request.price_level,
            free_text=request.special_request,
            intent=intent,
            rejections=rejections,
            time_of_day=time_of_day(local),
            season=season_of(local),
        )


# ---------------------------------------------------------------------------
# Scoring context variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BasicContext:
    candidate: Candidate


@dataclass(frozen=True)
class EnrichedContext:
    candidate: Candidate
    profile: DeepProfile


ScoringContext = BasicContext | EnrichedContext


def scoring_context(candidate: Candidate) -> ScoringContext:
    if candidate.deep_profile is not None:
        return EnrichedContext(candidate, candidate.deep_profile)
    return BasicContext(candidate)
