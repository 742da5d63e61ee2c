"""
Donde Match: one confidence percentage per candidate.

Candidates with a Deep Profile use the five-dimension composite with dynamic
weights; the rest use the fixed-weight blend of occasion fit, request
relevance, external quality, vibe and filter precision. Both paths end in the
same 60-99 mapping.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..recommendations.models import ANY_BUDGET, ANYWHERE, Candidate, ScoringBreakdown
from .context import EnrichedContext, RequestSignals, ScoringContext, scoring_context
from .dimensions import ScoringDimensions, clamp, compute_dimensions, dimension_weights

MIN_MATCH = 60
MAX_MATCH = 99

# Basic generation weights; sum to 1.0
BASIC_WEIGHTS: dict[str, float] = {
    "occasion": 0.30,
    "request": 0.30,
    "quality": 0.15,
    "vibe": 0.15,
    "filter": 0.10,
}

NEUTRAL_QUALITY = 6.5
QUALITY_SHARE = 0.15
GENERATIVE_SHARE = 0.6

VERDICTS = (
    (93, "Perfect Match"),
    (85, "Great Match"),
    (75, "Good Match"),
    (MIN_MATCH, "Worth Exploring"),
)


@dataclass(frozen=True)
class MatchInputs:
    """Live, per-request signals that are not part of the candidate record."""

    rating: float | None = None
    review_count: int | None = None
    generative_relevance: float | None = None
    sentiment_negative: float | None = None


NO_INPUTS = MatchInputs()


@dataclass(frozen=True)
class MatchResult:
    percent: int
    breakdown: ScoringBreakdown

    @property
    def verdict(self) -> str:
        return match_verdict(self.percent)


def quality_score(rating: float | None, review_count: int | None) -> float:
    if rating is None:
        return NEUTRAL_QUALITY
    count = review_count or 0
    if count >= 100:
        confidence = 1.0
    elif count >= 20:
        confidence = 0.9
    else:
        confidence = 0.8
    return clamp((rating - 2.5) * 4) * confidence


def sentiment_penalty(negative_share: float | None) -> float:
    """0 up to 15% negative reviews, then linear to -3 at 50% and beyond."""
    if negative_share is None or negative_share <= 15:
        return 0.0
    return -min(3.0, (negative_share - 15) / 35 * 3)


def filter_precision(candidate: Candidate, area: str, budget: str) -> float:
    score = 10.0
    applied = 0
    if area and area != ANYWHERE:
        applied += 1
        if candidate.area.lower() != area.lower():
            score -= 5
    if budget and budget != ANY_BUDGET:
        applied += 1
        if candidate.price_tier != budget:
            score -= 5
    if applied == 0:
        return 8.0
    return max(0.0, score)


def to_percent(raw: float) -> int:
    percent = round(MIN_MATCH + clamp(raw) * 3.9)
    return max(MIN_MATCH, min(MAX_MATCH, percent))


def match_verdict(percent: int) -> str:
    for floor, label in VERDICTS:
        if percent >= floor:
            return label
    return VERDICTS[-1][1]


def _basic_match(
    ctx: ScoringContext,
    dims: ScoringDimensions,
    signals: RequestSignals,
    inputs: MatchInputs,
) -> MatchResult:
    quality = quality_score(inputs.rating, inputs.review_count)
    request = (
        clamp(inputs.generative_relevance)
        if inputs.generative_relevance is not None
        else dims.craving_match
    )
    precision = filter_precision(ctx.candidate, signals.area, signals.budget)
    raw = (
        BASIC_WEIGHTS["occasion"] * dims.occasion_fit
        + BASIC_WEIGHTS["request"] * request
        + BASIC_WEIGHTS["quality"] * quality
        + BASIC_WEIGHTS["vibe"] * dims.vibe_alignment
        + BASIC_WEIGHTS["filter"] * precision
    )
    penalty = sentiment_penalty(inputs.sentiment_negative)
    raw += penalty

    dimensions = dims.as_dict()
    dimensions["request_relevance"] = round(request, 3)
    dimensions["filter_precision"] = round(precision, 3)
    return MatchResult(
        percent=to_percent(raw),
        breakdown=ScoringBreakdown(
            generation="basic",
            dimensions=dimensions,
            weights=dict(BASIC_WEIGHTS),
            quality=round(quality, 3),
            generative_relevance=inputs.generative_relevance,
            sentiment_penalty=round(penalty, 3),
            raw=round(raw, 3),
        ),
    )


def _enriched_match(
    dims: ScoringDimensions,
    signals: RequestSignals,
    inputs: MatchInputs,
) -> MatchResult:
    weights = dimension_weights(signals.occasion, signals.importance)
    quality = quality_score(inputs.rating, inputs.review_count)

    raw = weights.combine(dims) * (1 - QUALITY_SHARE) + quality * QUALITY_SHARE
    if inputs.generative_relevance is not None:
        relevance = clamp(inputs.generative_relevance)
        raw = raw * (1 - GENERATIVE_SHARE) + relevance * GENERATIVE_SHARE
    penalty = sentiment_penalty(inputs.sentiment_negative)
    raw += penalty

    return MatchResult(
        percent=to_percent(raw),
        breakdown=ScoringBreakdown(
            generation="enriched",
            dimensions=dims.as_dict(),
            weights=weights.as_dict(),
            quality=round(quality, 3),
            generative_relevance=inputs.generative_relevance,
            sentiment_penalty=round(penalty, 3),
            raw=round(raw, 3),
        ),
    )


def donde_match(
    candidate: Candidate,
    signals: RequestSignals,
    inputs: MatchInputs = NO_INPUTS,
) -> MatchResult:
    ctx = scoring_context(candidate)
    dims = compute_dimensions(ctx, signals)
    if isinstance(ctx, EnrichedContext):
        return _enriched_match(dims, signals, inputs)
    return _basic_match(ctx, dims, signals, inputs)
