from __future__ import annotations

from typing import Mapping, Sequence

from ..places.models import PlaceReview
from ..recommendations.models import ANYWHERE, Candidate, DeepProfile
from ..scoring.context import RejectionSignals
from ..scoring.occasions import weighted_occasion_score

# ---------------------------------------------------------------------------
# System prompt
# ---------------------------------------------------------------------------

_VOICE_DIRECTIVES: dict[str, str] = {
    "Adventure": (
        "Street-smart Chicago food explorer. You sound like you found this place by "
        "accident and now can't stop going back. Casual, insider-y, slightly conspiratorial."
    ),
    "Special Occasion": (
        "Confident and warm with a touch of refinement, like a friend who knows wine "
        "and can get you a table. Never stuffy, never pretentious."
    ),
    "Group Hangout": (
        "The friend who always picks the right dinner spot for the group. Energetic, "
        "practical, fun."
    ),
    "Business Lunch": (
        "Efficient, credible, no-frills. A colleague who knows the good spots near the office."
    ),
    "Solo Dining": (
        "Gentle and knowing, like a friend who understands the art of eating alone well. "
        "No pity, just appreciation."
    ),
    "Family Dinner": (
        "Warm and practical. A parent-friend who knows which restaurants actually work with kids."
    ),
    "Chill Hangout": "Low-key, easy, no pressure. A no-agenda kind of recommendation.",
}
_VOICE_DIRECTIVES["Treat Myself"] = _VOICE_DIRECTIVES["Solo Dining"]
_DEFAULT_VOICE = (
    "Sharp, opinionated, warm. Your most food-obsessed friend. Confident but never "
    "condescending, culturally literate across all cuisines."
)


def voice_directive(occasion: str, budget: str) -> str:
    if occasion == "Adventure":
        return _VOICE_DIRECTIVES["Adventure"]
    if budget == "$$$$":
        return _VOICE_DIRECTIVES["Special Occasion"]
    return _VOICE_DIRECTIVES.get(occasion, _DEFAULT_VOICE)


_SYSTEM_TEMPLATE = """\
You are Donde, an opinionated Chicago dining guide who sounds like a well-connected \
local friend. Speak as "we".

TASK: Pick THE ONE BEST restaurant from the candidates for this user. Priority:
1. Special request match (cuisine, vibe, features)
2. Occasion fit (noise, lighting, dress code)
3. Quality (scores, reviews, trending)
4. Deep profile signals (service style, pacing, conversation friendliness, wow factors)
Match the ask, not the score.

OCCASION VIBE GUIDE:
- Date Night: Quiet/Moderate, dim/intimate, Smart Casual+
- Group Hangout: Moderate/Loud, bright/lively, Casual
- Family Dinner: Quiet/Moderate, bright/warm, Casual
- Business Lunch: Quiet, bright/modern, Business Casual+
- Solo Dining: Quiet/Moderate, warm/cozy, Casual
- Special Occasion: Quiet, dim/elegant, Smart Casual+
- Treat Myself: Quiet/Moderate, warm/cozy, Casual
- Adventure: Any vibe, Casual, hidden gems preferred
- Chill Hangout: Moderate/Quiet, warm/dim, Casual

VOICE DIRECTIVE: {voice}

GROUNDING (mandatory):
- Only reference facts present in the candidate data, deep profile fields and provided reviews.
- Paraphrase reviews, never quote them. If there are no reviews, do not invent details.
- Never open with the restaurant name. No rhetorical questions. Never parrot the request back.

OUTPUT FORMAT: respond ONLY with this JSON (no markdown):
{{
  "restaurant_index": 0,
  "recommendation": "50-80 word paragraph explaining why this spot fits their request",
  "insider_tip": "One practical, grounded sentence under 25 words",
  "relevance_score": 8.5,
  "sentiment_score": 7.5,
  "sentiment_positive": 80,
  "sentiment_negative": 10,
  "sentiment_neutral": 10,
  "sentiment_breakdown": "80% positive, 10% neutral, 10% negative",
  "sentiment_summary": "One or two sentences on what diners love and common complaints."
}}

INSIDER TIP priority: best seat in the house, then a signature dish, then review \
advice, then BYOB/wow factors, then practical metadata. Never fabricate menu items.

SCORING:
- relevance_score (0-10): how well the pick matches this specific request.
- sentiment fields: only when reviews are provided, otherwise null. Classify reviews by \
stars (4-5 positive, 3 neutral, 1-2 negative); the three percentages must sum to 100."""


def build_system_prompt(occasion: str, budget: str) -> str:
    return _SYSTEM_TEMPLATE.format(voice=voice_directive(occasion, budget))


# ---------------------------------------------------------------------------
# User prompt
# ---------------------------------------------------------------------------


def _deep_profile_extras(dp: DeepProfile) -> list[str]:
    extras: list[str] = []
    if dp.flavor_profiles:
        extras.append(f"Flavors: {', '.join(dp.flavor_profiles)}")
    if dp.cuisine_subcategory:
        extras.append(f"Sub: {dp.cuisine_subcategory}")
    if dp.service_style:
        extras.append(f"Service: {dp.service_style}")
    if dp.meal_pacing:
        extras.append(f"Pace: {dp.meal_pacing}")
    if dp.music_vibe:
        extras.append(f"Music: {dp.music_vibe}")
    if dp.conversation_friendliness is not None:
        extras.append(f"Talk: {dp.conversation_friendliness:g}/10")
    if dp.energy_level is not None:
        extras.append(f"Energy: {dp.energy_level:g}/10")
    if dp.reservation_difficulty:
        extras.append(f"Rez: {dp.reservation_difficulty}")
    if dp.byob_policy and dp.byob_policy not in ("full_bar", "no_byob"):
        extras.append(f"BYOB: {dp.byob_policy}")
    if dp.cultural_authenticity is not None and dp.cultural_authenticity >= 7:
        extras.append(f"Auth: {dp.cultural_authenticity:g}/10")
    if dp.decor_style:
        extras.append(f"Decor: {dp.decor_style}")
    if dp.origin_story:
        extras.append(f"Story: {dp.origin_story}")
    if dp.signature_dishes:
        extras.append(f"Known for: {', '.join(sd.dish for sd in dp.signature_dishes[:3])}")
    if dp.wow_factors:
        extras.append(f"Wow: {', '.join(dp.wow_factors)}")
    if dp.best_seat_in_house:
        extras.append(f"Best seat: {dp.best_seat_in_house}")
    if dp.unique_selling_point:
        extras.append(f"USP: {dp.unique_selling_point}")
    if dp.awards_recognition:
        extras.append(f"Awards: {', '.join(dp.awards_recognition)}")
    if dp.crowd_profile:
        extras.append(f"Crowd: {', '.join(dp.crowd_profile)}")
    if dp.seating_options:
        extras.append(f"Seating: {', '.join(dp.seating_options)}")
    if dp.date_progression:
        extras.append(f"Date type: {dp.date_progression}")
    if dp.neighborhood_integration:
        extras.append(f"Nbhd role: {dp.neighborhood_integration}")
    return extras


def format_reviews(reviews: Sequence[PlaceReview]) -> str:
    if not reviews:
        return "No reviews available."
    return "\n".join(f"{r.rating:g}/5: {r.text}" for r in reviews)


def _candidate_entry(
    index: int,
    candidate: Candidate,
    occasion: str,
    reviews: Sequence[PlaceReview] | None,
) -> str:
    features = ",".join(
        label
        for label, on in (
            ("Outdoor", candidate.outdoor_seating),
            ("LiveMusic", candidate.live_music),
            ("PetFriendly", candidate.pet_friendly),
        )
        if on
    ) or "-"
    occasion_score = weighted_occasion_score(candidate, occasion)
    trending = f" T:{candidate.trending_score:.1f}" if candidate.trending_score else ""
    dietary = f" | Diet:{','.join(candidate.dietary_options)}" if candidate.dietary_options else ""
    tags = ", ".join(candidate.tag_texts) or "-"

    entry = (
        f"{index}. {candidate.name} | {candidate.area} | {candidate.cuisine or 'N/A'} "
        f"| {candidate.price_tier or '?'} | {occasion}:{occasion_score:.1f}/10{trending} "
        f"| {candidate.noise_level or '?'} noise, {candidate.lighting or '?'} "
        f"| {candidate.dress_code or '?'} | {features}{dietary} "
        f'| "{candidate.pitch or "N/A"}" | Tags: {tags}'
    )

    if candidate.deep_profile is not None:
        extras = _deep_profile_extras(candidate.deep_profile)
        if extras:
            entry += f"\n  Deep profile: {' | '.join(extras)}"

    if reviews:
        body = format_reviews(reviews).replace("\n", "\n  ")
        entry += f"\n  Recent diner reviews (use for grounding):\n  {body}"
    else:
        entry += "\n  [No reviews available. Use the profile and metadata above; do not invent details.]"
    return entry


def rejection_context(rejections: RejectionSignals) -> str | None:
    if not rejections.active:
        return None
    parts = []
    if rejections.avoid_cuisines:
        parts.append(f"cuisines: {', '.join(rejections.avoid_cuisines)}")
    if rejections.avoid_price_tiers:
        parts.append(f"price tiers: {', '.join(rejections.avoid_price_tiers)}")
    return (
        f"PREVIOUSLY DECLINED: the user already passed on {rejections.rejected_count} picks. "
        f"Steer away from {'; '.join(parts)} unless nothing else fits."
    )


def build_user_prompt(
    candidates: Sequence[Candidate],
    *,
    occasion: str,
    budget: str,
    area: str,
    free_text: str,
    reviews_by_index: Mapping[int, Sequence[PlaceReview]] | None = None,
    area_description: str | None = None,
    rejections: RejectionSignals | None = None,
) -> str:
    reviews_by_index = reviews_by_index or {}
    lines = [
        "USER REQUEST:",
        f"- Occasion: {occasion}",
        f"- Budget: {budget}",
        f"- Neighborhood: {area}",
        f"- Special Request: {free_text or 'None'}",
    ]
    if area_description and area != ANYWHERE:
        lines.append(f"- Neighborhood Character: {area_description}")

    note = rejection_context(rejections) if rejections else None
    if note:
        lines.extend(["", note])

    entries = "\n\n".join(
        _candidate_entry(i, c, occasion, reviews_by_index.get(i))
        for i, c in enumerate(candidates)
    )
    lines.extend([
        "",
        "CANDIDATES (pick the best match; only reference facts from this data):",
        "",
        entries,
        "",
        'REMINDER: Write 50-80 words. Use "we". Ground every claim in the data above.',
    ])
    return "\n".join(lines)
