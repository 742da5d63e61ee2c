from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

from ..recommendations.models import Candidate
from .context import RejectionSignals, RequestSignals
from .keywords import (
    good_for_matches,
    has_tag,
    intent_hits,
    offers_dietary,
    requested_cuisine,
    requested_dietary,
    requested_features,
    requested_good_for,
    requested_tags,
    same_cuisine,
)
from .occasions import weighted_occasion_score

logger = logging.getLogger(__name__)

CUISINE_REJECTION_PENALTY = -2.0
PRICE_REJECTION_PENALTY = -1.0

# (occasion, boost, trend) re-sort weights keyed by cuisine importance
_RERANK_WEIGHTS: dict[str | None, tuple[float, float, float]] = {
    "high": (0.35, 0.55, 0.10),
    "medium": (0.45, 0.45, 0.10),
}
_DEFAULT_RERANK_WEIGHTS = (0.55, 0.35, 0.10)


def analyze_rejections(
    excluded_ids: Sequence[str],
    pool: Iterable[Candidate],
    threshold: int = 2,
) -> RejectionSignals:
    """
    Cuisines and price tiers that keep getting turned down.

    Needs at least ``threshold`` excluded candidates that are actually in the
    pool; a single rejection says nothing.
    """
    if len(excluded_ids) < threshold:
        return RejectionSignals(rejected_count=len(excluded_ids))

    wanted = set(excluded_ids)
    excluded = [c for c in pool if c.id in wanted]
    if len(excluded) < threshold:
        return RejectionSignals(rejected_count=len(excluded_ids))

    cuisines = Counter(c.cuisine for c in excluded if c.cuisine)
    tiers = Counter(c.price_tier for c in excluded if c.price_tier)
    signals = RejectionSignals(
        avoid_cuisines=tuple(k for k, n in cuisines.items() if n >= threshold),
        avoid_price_tiers=tuple(k for k, n in tiers.items() if n >= threshold),
        rejected_count=len(excluded_ids),
    )
    if signals.active:
        logger.info(
            "Rejection pattern: avoiding cuisines=%s tiers=%s",
            signals.avoid_cuisines,
            signals.avoid_price_tiers,
        )
    return signals


def _rejection_penalty(candidate: Candidate, rejections: RejectionSignals) -> float:
    penalty = 0.0
    if candidate.cuisine and candidate.cuisine in rejections.avoid_cuisines:
        penalty += CUISINE_REJECTION_PENALTY
    if candidate.price_tier and candidate.price_tier in rejections.avoid_price_tiers:
        penalty += PRICE_REJECTION_PENALTY
    return penalty


def _intent_dictionary_boost(candidate: Candidate, text: str) -> float:
    """
    Phrase-dictionary hits; repeat hits on one target shrink as weight / n.
    """
    seen: Counter[tuple[str, str]] = Counter()
    boost = 0.0

    def hit(kind: str, target: str, weight: float) -> float:
        seen[(kind, target)] += 1
        return weight / seen[(kind, target)]

    for _, signal in intent_hits(text):
        if candidate.cuisine and any(same_cuisine(c, candidate.cuisine) for c in signal.cuisines):
            boost += hit("cuisine", candidate.cuisine.lower(), 1.0)
        for tag in signal.tags:
            if has_tag(candidate, tag):
                boost += hit("tag", tag, 0.5)
        for feature in signal.features:
            if candidate.has_feature(feature):
                boost += hit("feature", feature, 0.5)
    return boost


def _time_of_day_boost(candidate: Candidate, time_of_day: str) -> float:
    if not candidate.best_times:
        return 0.0
    if time_of_day in candidate.best_times:
        return 1.5
    # Only narrowly focused places (e.g. brunch-only) lose points off-hours
    if len(candidate.best_times) <= 2:
        return -1.0
    return 0.0


def _classified_intent_boost(candidate: Candidate, signals: RequestSignals) -> float:
    intent = signals.intent
    if intent is None:
        return 0.0
    boost = 0.0
    if intent.target_cuisines and candidate.cuisine:
        if intent.wants_cuisine(candidate.cuisine):
            boost += 5 if intent.is_high else 3
        elif intent.is_high:
            boost -= 2
    boost += 1.5 * sum(1 for tag in intent.target_tags if has_tag(candidate, tag))
    boost += 1.5 * sum(1 for f in intent.target_features if candidate.has_feature(f))
    return boost


def compute_boost(candidate: Candidate, signals: RequestSignals) -> float:
    boost = _rejection_penalty(candidate, signals.rejections)
    if not signals.has_text:
        return boost

    text = signals.text
    if same_cuisine(requested_cuisine(text), candidate.cuisine):
        boost += 3
    boost += 1.5 * sum(1 for tag in requested_tags(text) if has_tag(candidate, tag))
    boost += 1.5 * sum(1 for f in requested_features(text) if candidate.has_feature(f))
    boost += _intent_dictionary_boost(candidate, text)

    if candidate.dietary_options:
        boost += 2.0 * sum(1 for kw in requested_dietary(text) if offers_dietary(candidate, kw))
    if candidate.good_for:
        boost += 1.0 * sum(1 for kw in requested_good_for(text) if good_for_matches(candidate, kw))

    boost += _time_of_day_boost(candidate, signals.time_of_day)
    boost += _classified_intent_boost(candidate, signals)
    return boost


def rerank(candidates: Sequence[Candidate], signals: RequestSignals) -> list[Candidate]:
    """
    Re-sort by occasion fit, boost and trending score.

    Returns the input order untouched when nothing moved and there was no
    craving text.
    """
    boosts = {c.id: compute_boost(c, signals) for c in candidates}
    any_boost = any(b != 0 for b in boosts.values())
    any_trend = any((c.trending_score or 0) > 0 for c in candidates)
    if not any_boost and not any_trend and not signals.has_text:
        return list(candidates)

    w_occasion, w_boost, w_trend = _RERANK_WEIGHTS.get(
        signals.importance, _DEFAULT_RERANK_WEIGHTS
    )

    def composite(c: Candidate) -> float:
        return (
            weighted_occasion_score(c, signals.occasion) * w_occasion
            + boosts[c.id] * w_boost
            + (c.trending_score or 0) / 10 * w_trend
        )

    return sorted(candidates, key=composite, reverse=True)
