from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import complete
from ..llm.parsing import strip_code_fences
from ..scoring.vocabulary import CUISINES, FEATURES, TAGS
from .models import IntentClassification

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 3

FLAVORS = (
    "smoky", "spicy", "fresh", "rich", "sweet", "tangy", "earthy", "savory",
    "umami", "bright", "crispy", "charred", "herbaceous", "creamy", "bold",
    "delicate", "fermented",
)
VIBES = (
    "intimate", "lively", "cozy", "elegant", "casual", "buzzing", "chill",
    "refined", "rustic", "modern", "industrial", "classic", "funky", "warm",
    "minimalist",
)

INTENT_SYSTEM_PROMPT = f"""\
You classify restaurant search intent for a Chicago dining recommendation app. \
Given a user's request, extract structured search criteria.

Available cuisines: {", ".join(CUISINES)}

Available tags: {", ".join(TAGS)}

Available features: {", ".join(FEATURES)}

Available flavors: {", ".join(FLAVORS)}

Available vibe keywords: {", ".join(VIBES)}

Rules:
- cuisine_importance "high": user clearly wants a specific cuisine (pizza, sushi, tacos, deep dish, mole, pho, dim sum, BBQ ribs)
- cuisine_importance "medium": implied cuisine preference (comfort food, spicy, noodles)
- cuisine_importance "low": request is about vibe, occasion, or location only (cozy date night, bustling atmosphere)
- Map food items to their cuisine: pizza/pasta/gnocchi → Italian, sushi/ramen/udon → Japanese, \
tacos/mole/birria → Mexican, pho/banh mi → Vietnamese, dim sum/hotpot/bao → Chinese, \
brisket/ribs/pulled pork → BBQ, bulgogi/bibimbap → Korean, beer/IPA/taproom → Brewery/Beer Bar, \
pierogi → Polish, mofongo → Puerto Rican, injera → Ethiopian, ceviche → Peruvian, \
picanha → Brazilian, shawarma/falafel → Middle Eastern, gyro → Greek, \
fried chicken/gumbo → Southern/Soul Food, biryani/samosa → Indian, pad thai/tom yum → Thai, \
espresso/latte → Coffee/Cafe, coq au vin → French
- Only include tags/features/flavors/vibes that are clearly implied by the request
- emotional_intent: "impress", "comfort", "explore", "celebrate", "casual" or "indulge"
- date_type: "first_date", "anniversary", "casual_weeknight", or null
- group_size_hint: "solo", "couple", "small_group" (3-5), "large_group" (6+), or null
- spontaneity: "spontaneous" if it mentions tonight/now/walk-in/last-minute, \
"planned" if it mentions reservation/book/next week, "unknown" otherwise

Respond ONLY in JSON (no markdown, no explanation):
{{"target_cuisines":[],"target_tags":[],"target_features":[],"cuisine_importance":"low",\
"flavor_preferences":[],"vibe_keywords":[],"practical_constraints":[],\
"emotional_intent":"casual","date_type":null,"group_size_hint":null,"spontaneity":"unknown"}}"""


async def classify(
    free_text: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> IntentClassification | None:
    """
    Classify a craving into structured intent.

    Returns None for near-empty text (without calling out) and on any failure.
    """
    if not free_text or len(free_text.strip()) < MIN_TEXT_LENGTH:
        return None

    try:
        content = await complete(
            INTENT_SYSTEM_PROMPT,
            f'Classify: "{free_text.strip()}"',
            model=config.intent_model,
            max_tokens=config.intent_max_tokens,
            temperature=config.intent_temperature,
            timeout=config.intent_timeout,
            config=config,
        )
        parsed = json.loads(strip_code_fences(content))
        if not isinstance(parsed, dict):
            logger.warning("Intent reply was not a JSON object, continuing without")
            return None
        return IntentClassification.model_validate(parsed)

    except (json.JSONDecodeError, ValidationError):
        logger.warning("Intent reply was malformed, continuing without", exc_info=True)
        return None
    except Exception:
        logger.warning("Intent classification failed, continuing without", exc_info=True)
        return None
