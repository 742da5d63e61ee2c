"""
The five scoring dimensions.

Each dimension function takes a ``ScoringContext`` and dispatches on its
variant: a ``BasicContext`` gets the older keyword/expectation rules, an
``EnrichedContext`` layers Deep Profile signals on top. All dimensions are
bounded to 0-10.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass

from ..recommendations.models import ANY_OCCASION, DeepProfile
from .context import BasicContext, EnrichedContext, RequestSignals, ScoringContext
from .keywords import (
    has_tag,
    intent_hits,
    offers_dietary,
    requested_cuisine,
    requested_dietary,
    requested_features,
    requested_flavors,
    requested_tags,
    same_cuisine,
)
from .occasions import (
    CONVERSATION_OCCASIONS,
    DEFAULT_ENERGY_BAND,
    DRESS_LEVELS,
    MUSIC_FIT,
    OCCASION_ENERGY,
    OCCASION_VIBE_MAP,
    PACING_FIT,
    SERVICE_FIT,
    VIBE_OCCASIONS,
    weighted_occasion_score,
)

NEUTRAL_CRAVING = 7.0
NEUTRAL_PRACTICAL = 8.0
NEUTRAL_DISCOVERY = 5.0

_SPONTANEOUS_RE = re.compile(r"tonight|right now|last minute|walk.?in|spontaneous")
_WALK_IN_RE = re.compile(r"tonight|right now|walk.?in")
_LARGE_GROUP_RE = re.compile(r"large.?group|big.?group|party of \d{2}|10\+|12\+|15\+")


def clamp(value: float, low: float = 0.0, high: float = 10.0) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class ScoringDimensions:
    occasion_fit: float
    craving_match: float
    vibe_alignment: float
    practical_fit: float
    discovery_value: float

    def as_dict(self) -> dict[str, float]:
        return {k: round(v, 3) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class DimensionWeights:
    occasion: float
    craving: float
    vibe: float
    practical: float
    discovery: float

    def total(self) -> float:
        return self.occasion + self.craving + self.vibe + self.practical + self.discovery

    def combine(self, dims: ScoringDimensions) -> float:
        return (
            dims.occasion_fit * self.occasion
            + dims.craving_match * self.craving
            + dims.vibe_alignment * self.vibe
            + dims.practical_fit * self.practical
            + dims.discovery_value * self.discovery
        )

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


BASE_WEIGHTS = DimensionWeights(0.25, 0.25, 0.20, 0.15, 0.15)
HIGH_INTENT_WEIGHTS = DimensionWeights(0.15, 0.45, 0.15, 0.15, 0.10)
MEDIUM_INTENT_WEIGHTS = DimensionWeights(0.20, 0.35, 0.20, 0.15, 0.10)
VIBE_WEIGHTS = DimensionWeights(0.30, 0.10, 0.30, 0.15, 0.15)
ADVENTURE_WEIGHTS = DimensionWeights(0.10, 0.20, 0.15, 0.15, 0.40)
FAMILY_WEIGHTS = DimensionWeights(0.25, 0.20, 0.15, 0.25, 0.15)


def dimension_weights(occasion: str, importance: str | None) -> DimensionWeights:
    """Pick the weight vector; later rules override earlier ones."""
    weights = BASE_WEIGHTS
    if importance == "high":
        weights = HIGH_INTENT_WEIGHTS
    elif importance == "medium":
        weights = MEDIUM_INTENT_WEIGHTS

    if occasion in VIBE_OCCASIONS and importance in (None, "low"):
        weights = VIBE_WEIGHTS
    if occasion == "Adventure":
        weights = ADVENTURE_WEIGHTS
    if occasion == "Family Dinner":
        weights = FAMILY_WEIGHTS
    return weights


# ---------------------------------------------------------------------------
# Occasion fit
# ---------------------------------------------------------------------------


def occasion_fit(ctx: ScoringContext, signals: RequestSignals) -> float:
    occasion = signals.occasion
    base = weighted_occasion_score(ctx.candidate, occasion)
    if isinstance(ctx, BasicContext):
        return clamp(base)

    dp = ctx.profile
    if dp.service_style:
        fits = SERVICE_FIT.get(occasion, ())
        if fits:
            base += 0.5 if dp.service_style in fits else -0.3

    if dp.meal_pacing and dp.meal_pacing in PACING_FIT.get(occasion, ()):
        base += 0.3

    if occasion in CONVERSATION_OCCASIONS and dp.conversation_friendliness is not None:
        base += (dp.conversation_friendliness - 5) * 0.1

    if occasion == "Family Dinner" and dp.kid_friendliness is not None:
        base += (dp.kid_friendliness - 5) * 0.1

    return clamp(base)


# ---------------------------------------------------------------------------
# Craving match
# ---------------------------------------------------------------------------

_KEYWORD_MAX_POINTS = 16.0


def _keyword_relevance(ctx: BasicContext, signals: RequestSignals) -> float:
    candidate = ctx.candidate
    text = signals.text
    points = 0.0

    if same_cuisine(requested_cuisine(text), candidate.cuisine):
        points += 4

    tag_hits = sum(1 for tag in requested_tags(text) if has_tag(candidate, tag))
    points += min(3, tag_hits)

    if candidate.pitch:
        pitch_words = candidate.pitch.lower().split()
        request_words = [w for w in text.split() if len(w) > 3]
        overlap = sum(1 for w in request_words if any(w in pw for pw in pitch_words))
        points += min(3, overlap)

    points += sum(1 for f in requested_features(text) if candidate.has_feature(f))

    if any(offers_dietary(candidate, kw) for kw in requested_dietary(text)):
        points += 2

    intent_points = 0.0
    for _, signal in intent_hits(text):
        if any(same_cuisine(c, candidate.cuisine) for c in signal.cuisines):
            intent_points += 1
        intent_points += 0.5 * sum(1 for tag in signal.tags if has_tag(candidate, tag))
    points += min(2, intent_points)

    return min(_KEYWORD_MAX_POINTS, points) / _KEYWORD_MAX_POINTS * 10


def _cuisine_points(ctx: EnrichedContext, signals: RequestSignals) -> float:
    cuisine = ctx.candidate.cuisine
    intent = signals.intent
    if intent is not None and intent.target_cuisines:
        if intent.wants_cuisine(cuisine):
            return 4
        sub = (ctx.profile.cuisine_subcategory or "").lower()
        if sub and any(c.lower() in sub for c in intent.target_cuisines):
            return 3
        return 0
    if same_cuisine(requested_cuisine(signals.text), cuisine):
        return 4
    return 0


def _spice_points(dp: DeepProfile, text: str) -> float:
    if not dp.spice_level:
        return 0
    if "spicy" in text or "hot" in text or "fiery" in text:
        return 1 if dp.spice_level in ("hot", "volcanic") else 0
    if "mild" in text or "not spicy" in text:
        return 1 if dp.spice_level == "mild" else 0
    return 0


def _dish_points(dp: DeepProfile, text: str) -> float:
    for sd in dp.signature_dishes:
        if any(len(w) > 3 and w in text for w in sd.dish.lower().split()):
            return 2
    return 0


_DIETARY_DEPTH_POINTS = {"dedicated": 2.0, "solid": 1.5, "token": 0.5}


def _dietary_points(ctx: EnrichedContext, text: str) -> float:
    asked = requested_dietary(text)
    if not asked:
        return 0
    if ctx.profile.dietary_depth:
        return _DIETARY_DEPTH_POINTS.get(ctx.profile.dietary_depth, 0.0)
    if any(offers_dietary(ctx.candidate, kw) for kw in asked):
        return 1.5
    return 0


_CRAVING_MAX_POINTS = 4 + 3 + 1 + 2 + 3 + 2 + 1


def _enriched_craving(ctx: EnrichedContext, signals: RequestSignals) -> float:
    dp = ctx.profile
    text = signals.text
    score = _cuisine_points(ctx, signals)

    flavors = requested_flavors(text)
    if flavors and dp.flavor_profiles:
        matched = [
            f for f in flavors
            if any(f.lower() in fp.lower() for fp in dp.flavor_profiles)
        ]
        score += min(3, len(matched) * 1.5)

    score += _spice_points(dp, text)
    score += _dish_points(dp, text)
    score += min(3, sum(1 for tag in requested_tags(text) if has_tag(ctx.candidate, tag)))
    score += _dietary_points(ctx, text)

    if "byob" in text and dp.byob_policy == "full_byob":
        score += 1

    return min(10.0, score / _CRAVING_MAX_POINTS * 10)


def craving_match(ctx: ScoringContext, signals: RequestSignals) -> float:
    if not signals.has_text:
        return NEUTRAL_CRAVING
    if isinstance(ctx, EnrichedContext):
        return _enriched_craving(ctx, signals)
    return _keyword_relevance(ctx, signals)


# ---------------------------------------------------------------------------
# Vibe alignment
# ---------------------------------------------------------------------------


def _expectation_vibe(ctx: ScoringContext, occasion: str) -> float:
    candidate = ctx.candidate
    expected = OCCASION_VIBE_MAP.get(occasion) or OCCASION_VIBE_MAP[ANY_OCCASION]
    score = 0.0

    if candidate.noise_level:
        score += 3 if candidate.noise_level in expected.noise else 1
    else:
        score += 1.5

    if candidate.lighting and not expected.any_lighting:
        lighting = candidate.lighting.lower()
        matches = sum(1 for kw in expected.lighting if kw in lighting)
        score += min(3, matches * 1.5)
    else:
        score += 1.5

    if candidate.dress_code:
        level = DRESS_LEVELS.get(candidate.dress_code, 1)
        score += 2 if level >= DRESS_LEVELS.get(expected.dress_min, 1) else 1
    else:
        score += 1

    available = earned = 0
    if expected.outdoor_bonus:
        available += 1
        earned += 1 if candidate.outdoor_seating else 0
    if expected.live_music_bonus:
        available += 1
        earned += 1 if candidate.live_music else 0
    score += earned / available * 2 if available else 1

    return score


def _enriched_vibe(ctx: EnrichedContext, signals: RequestSignals) -> float:
    dp = ctx.profile
    occasion = signals.occasion
    score = _expectation_vibe(ctx, occasion) / 2

    if dp.energy_level is not None:
        low, high = OCCASION_ENERGY.get(occasion, DEFAULT_ENERGY_BAND)
        if low <= dp.energy_level <= high:
            score += 2
        else:
            score -= min(1.5, abs(dp.energy_level - (low + high) / 2) * 0.3)

    if dp.music_vibe and dp.music_vibe in MUSIC_FIT.get(occasion, ()):
        score += 1

    text = signals.text
    if text:
        if any(w in text for w in ("instagram", "aesthetic", "cute", "photogenic")):
            if dp.instagram_worthiness is not None and dp.instagram_worthiness >= 7:
                score += 1
        if any(w in text for w in ("authentic", "real", "legit")):
            if dp.cultural_authenticity is not None and dp.cultural_authenticity >= 8:
                score += 1
        decor = dp.decor_style or ""
        if any(w in text for w in ("fancy", "upscale", "elegant")):
            if any(d in decor for d in ("classic", "elegant", "white-tablecloth")):
                score += 1
        if any(w in text for w in ("cozy", "intimate", "warm")):
            if "cozy" in decor or "warm" in decor:
                score += 0.5

    if dp.seasonal_relevance:
        score += (dp.seasonal_relevance.get(signals.season, 5) - 5) * 0.2

    return clamp(score)


def vibe_alignment(ctx: ScoringContext, signals: RequestSignals) -> float:
    if isinstance(ctx, EnrichedContext):
        return _enriched_vibe(ctx, signals)
    return clamp(_expectation_vibe(ctx, signals.occasion))


# ---------------------------------------------------------------------------
# Practical fit
# ---------------------------------------------------------------------------


def practical_fit(ctx: ScoringContext, signals: RequestSignals) -> float:
    if isinstance(ctx, BasicContext):
        return NEUTRAL_PRACTICAL

    dp = ctx.profile
    occasion = signals.occasion
    text = signals.text
    score = NEUTRAL_PRACTICAL

    if dp.reservation_difficulty == "hard_to_get":
        if _SPONTANEOUS_RE.search(text):
            score -= 3
    elif dp.reservation_difficulty == "walk_in_friendly":
        if _WALK_IN_RE.search(text):
            score += 1

    if dp.meal_pacing == "ceremonial" and occasion == "Business Lunch":
        score -= 2
    if dp.meal_pacing == "quick_bite":
        if occasion in ("Special Occasion", "Date Night"):
            score -= 2
        if "quick" in text:
            score += 1

    if dp.group_size_max is not None and dp.group_size_max <= 6 and _LARGE_GROUP_RE.search(text):
        score -= 2
    if occasion == "Solo Dining" and dp.group_size_min is not None and dp.group_size_min > 2:
        score -= 1

    if dp.byob_policy == "full_byob" and "byob" in text:
        score += 1.5
    if dp.payment_notes and "cash" in dp.payment_notes.lower():
        score -= 0.5

    return clamp(score)


# ---------------------------------------------------------------------------
# Discovery value
# ---------------------------------------------------------------------------


def discovery_value(ctx: ScoringContext, signals: RequestSignals) -> float:
    if isinstance(ctx, BasicContext):
        return NEUTRAL_DISCOVERY

    dp = ctx.profile
    occasion = signals.occasion
    upscale = occasion in ("Special Occasion", "Treat Myself")
    score = NEUTRAL_DISCOVERY

    if dp.wow_factors:
        score += min(2, len(dp.wow_factors) * 0.7)
    if dp.origin_story:
        score += 0.5
    if dp.unique_selling_point:
        score += 1
    if occasion == "Adventure" and dp.neighborhood_integration == "hidden_local":
        score += 2
    if occasion == "Special Occasion" and dp.neighborhood_integration == "destination":
        score += 1
    if upscale and dp.awards_recognition:
        score += 1.5
    if occasion == "Adventure" and (dp.cultural_authenticity or 0) >= 8:
        score += 1
    if upscale and dp.chef_notable:
        score += 0.5

    return clamp(score)


def compute_dimensions(ctx: ScoringContext, signals: RequestSignals) -> ScoringDimensions:
    return ScoringDimensions(
        occasion_fit=occasion_fit(ctx, signals),
        craving_match=craving_match(ctx, signals),
        vibe_alignment=vibe_alignment(ctx, signals),
        practical_fit=practical_fit(ctx, signals),
        discovery_value=discovery_value(ctx, signals),
    )
