"""
Response shaping for every terminal outcome.

Success and fallback share ``_restaurant_fields``; the fallback paragraph and
tip are built only from structured fields so nothing is invented when the
generative call is unavailable.
"""
from __future__ import annotations

from datetime import datetime, timezone

from ..places.models import PlaceDetails
from ..scoring.donde_match import MatchResult
from .models import (
    ANY_BUDGET,
    ANY_OCCASION,
    ANYWHERE,
    Candidate,
    DeepContext,
    OccasionScoresOut,
    RecommendationResponse,
    RestaurantOut,
)

NO_RESULTS_MESSAGE = (
    "No restaurants found matching your criteria. Try a different neighborhood or price range!"
)
ERROR_MESSAGE = "The engine took a nap. Try again in a moment."

_OPENINGS: dict[str, str] = {
    "Date Night": "For a date night in {area}, we'd point you to {name}.",
    "Group Hangout": "Rounding up the crew? {name} in {area} handles a group well.",
    "Family Dinner": "For dinner with the family, {name} in {area} is an easy call.",
    "Business Lunch": "For a lunch that needs to go smoothly, {name} in {area} delivers.",
    "Solo Dining": "Eating solo? {name} in {area} is a great seat for one.",
    "Special Occasion": "For a night worth marking, {name} in {area} rises to it.",
    "Treat Myself": "If today calls for a treat, {name} in {area} is the move.",
    "Adventure": "Feeling curious? {name} in {area} is worth the detour.",
    "Chill Hangout": "For a low-key night, {name} in {area} keeps it easy.",
}
_DEFAULT_OPENING = "Our top pick in {area} is {name}."


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _restaurant_fields(candidate: Candidate, details: PlaceDetails | None) -> RestaurantOut:
    return RestaurantOut(
        id=candidate.id,
        name=candidate.name,
        address=(details.address if details and details.address else candidate.address),
        neighborhood=candidate.area,
        cuisine=candidate.cuisine,
        price_level=candidate.price_tier,
        noise_level=candidate.noise_level,
        lighting=candidate.lighting,
        dress_code=candidate.dress_code,
        outdoor_seating=candidate.outdoor_seating,
        live_music=candidate.live_music,
        pet_friendly=candidate.pet_friendly,
        parking=candidate.parking,
        best_for=candidate.pitch,
        place_id=candidate.place_id,
        phone=details.phone if details else None,
        website=details.website if details else None,
        rating=details.rating if details else None,
        review_count=details.review_count if details else None,
        business_status=details.business_status if details else None,
    )


def deep_context(candidate: Candidate) -> DeepContext | None:
    dp = candidate.deep_profile
    if dp is None:
        return None
    return DeepContext(
        signature_dishes=[sd.dish for sd in dp.signature_dishes],
        origin_story=dp.origin_story,
        best_seat=dp.best_seat_in_house,
        wow_factors=list(dp.wow_factors),
        service_style=dp.service_style,
        reservation_difficulty=dp.reservation_difficulty,
        byob_policy=dp.byob_policy,
    )


# ---------------------------------------------------------------------------
# Structured-field synthesis
# ---------------------------------------------------------------------------


def fallback_paragraph(candidate: Candidate, occasion: str) -> str:
    area = candidate.area if candidate.area != "Unknown" else "town"
    template = _OPENINGS.get(occasion, _DEFAULT_OPENING)
    parts = [template.format(name=candidate.name, area=area)]
    if candidate.pitch:
        parts.append(candidate.pitch.rstrip(".") + ".")

    dp = candidate.deep_profile
    if dp is not None:
        if dp.unique_selling_point:
            parts.append(dp.unique_selling_point.rstrip(".") + ".")
        if dp.signature_dishes:
            parts.append(f"People come back for the {dp.signature_dishes[0].dish}.")
    elif candidate.cuisine and candidate.price_tier:
        parts.append(f"Expect {candidate.cuisine} at {candidate.price_tier} prices.")
    return " ".join(parts)


def fallback_tip(candidate: Candidate) -> str | None:
    """Best seat, then a signature dish, then BYOB or a wow factor, then the stored tip."""
    dp = candidate.deep_profile
    if dp is not None:
        if dp.best_seat_in_house:
            return f"Ask for {dp.best_seat_in_house}."
        if dp.signature_dishes:
            dish = dp.signature_dishes[0]
            return f"Order the {dish.dish}." + (f" {dish.why}" if dish.why else "")
        if dp.byob_policy == "full_byob":
            return "It's BYOB, so bring a bottle."
        if dp.wow_factors:
            return f"Don't miss the {dp.wow_factors[0]}."
    return candidate.insider_tip or None


# ---------------------------------------------------------------------------
# Terminal responses
# ---------------------------------------------------------------------------


def success_response(
    candidate: Candidate,
    *,
    recommendation: str,
    insider_tip: str | None,
    match: MatchResult,
    details: PlaceDetails | None = None,
    sentiment_breakdown: str | None = None,
    sentiment_summary: str | None = None,
    fallback: bool = False,
) -> RecommendationResponse:
    return RecommendationResponse(
        success=True,
        recommendation=recommendation,
        restaurant=_restaurant_fields(candidate, details),
        insider_tip=insider_tip,
        donde_match=match.percent,
        match_verdict=match.verdict,
        scores=OccasionScoresOut(**candidate.occasion_scores()),
        tags=candidate.tag_texts,
        deep_context=deep_context(candidate),
        scoring=match.breakdown,
        sentiment_breakdown=sentiment_breakdown,
        sentiment_summary=sentiment_summary,
        fallback=fallback,
        timestamp=_timestamp(),
    )


def fallback_response(
    candidate: Candidate,
    occasion: str,
    match: MatchResult,
    details: PlaceDetails | None = None,
) -> RecommendationResponse:
    return success_response(
        candidate,
        recommendation=fallback_paragraph(candidate, occasion),
        insider_tip=fallback_tip(candidate),
        match=match,
        details=details,
        fallback=True,
    )


def no_results_message(area: str, budget: str, occasion: str) -> str:
    if area != ANYWHERE:
        return f"No spots matched in {area}. Try a different neighborhood or search Anywhere!"
    if budget != ANY_BUDGET:
        return f"No {budget} spots matched. Try a different price range!"
    if occasion != ANY_OCCASION:
        return f"No spots matched for {occasion}. Try a different occasion!"
    return NO_RESULTS_MESSAGE


def no_results_response(area: str, budget: str, occasion: str) -> RecommendationResponse:
    return RecommendationResponse(
        success=False,
        recommendation=no_results_message(area, budget, occasion),
        timestamp=_timestamp(),
    )


def error_response() -> RecommendationResponse:
    return RecommendationResponse(
        success=False,
        recommendation=ERROR_MESSAGE,
        timestamp=_timestamp(),
    )
