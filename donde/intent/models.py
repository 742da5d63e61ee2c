from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

IMPORTANCE_TIERS = ("high", "medium", "low")
SPONTANEITY_VALUES = ("planned", "spontaneous", "unknown")


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


class IntentClassification(BaseModel):
    """
    Structured craving signal for one request.

    Every field coerces bad input to a safe default instead of raising,
    since the payload comes straight from a generative model.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    target_cuisines: list[str] = Field(default_factory=list)
    target_tags: list[str] = Field(default_factory=list)
    target_features: list[str] = Field(default_factory=list)
    cuisine_importance: str = "low"
    flavor_preferences: list[str] = Field(default_factory=list)
    vibe_keywords: list[str] = Field(default_factory=list)
    practical_constraints: list[str] = Field(default_factory=list)
    emotional_intent: str = "casual"
    date_type: str | None = None
    group_size_hint: str | None = None
    spontaneity: str = "unknown"

    @field_validator(
        "target_cuisines",
        "target_tags",
        "target_features",
        "flavor_preferences",
        "vibe_keywords",
        "practical_constraints",
        mode="before",
    )
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator("cuisine_importance", mode="before")
    @classmethod
    def _coerce_importance(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in IMPORTANCE_TIERS:
            return value.strip().lower()
        return "low"

    @field_validator("emotional_intent", mode="before")
    @classmethod
    def _coerce_emotion(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return "casual"

    @field_validator("date_type", "group_size_hint", mode="before")
    @classmethod
    def _coerce_optional(cls, value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @field_validator("spontaneity", mode="before")
    @classmethod
    def _coerce_spontaneity(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in SPONTANEITY_VALUES:
            return value.strip().lower()
        return "unknown"

    @property
    def is_high(self) -> bool:
        return self.cuisine_importance == "high"

    def wants_cuisine(self, cuisine: str | None) -> bool:
        if not cuisine:
            return False
        lowered = cuisine.lower()
        return any(c.lower() == lowered for c in self.target_cuisines)
