"""
Parsing of the generative recommendation reply.

The reply is untrusted. ``parse_recommendation`` tries a strict JSON parse
first and, when that fails, a regex pass that pulls the essential fields out
of truncated or chatty output. Both raise ``RecommendationParseError``.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


class RecommendationParseError(ValueError):
    """The generative reply could not be turned into a recommendation."""


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def _bounded(value: Any, high: float) -> float | None:
    # Out-of-range numbers are clamped; anything non-numeric is dropped
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    return max(0.0, min(high, float(value)))


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class GeneratedRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    restaurant_index: int = Field(ge=0)
    recommendation: str = Field(min_length=1)
    insider_tip: str | None = None
    relevance_score: float | None = None
    sentiment_score: float | None = None
    sentiment_positive: float | None = None
    sentiment_negative: float | None = None
    sentiment_neutral: float | None = None
    sentiment_breakdown: str | None = None
    sentiment_summary: str | None = None

    @field_validator("restaurant_index", mode="before")
    @classmethod
    def _coerce_index(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @field_validator("recommendation", mode="before")
    @classmethod
    def _strip_recommendation(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("insider_tip", "sentiment_breakdown", "sentiment_summary", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("relevance_score", "sentiment_score", mode="before")
    @classmethod
    def _coerce_ten_scale(cls, value: Any) -> float | None:
        return _bounded(value, 10.0)

    @field_validator(
        "sentiment_positive", "sentiment_negative", "sentiment_neutral", mode="before"
    )
    @classmethod
    def _coerce_percent(cls, value: Any) -> float | None:
        return _bounded(value, 100.0)


def parse_strict(text: str) -> GeneratedRecommendation:
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise RecommendationParseError(f"reply is not JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise RecommendationParseError("reply is not a JSON object")
    try:
        return GeneratedRecommendation.model_validate(data)
    except ValidationError as exc:
        raise RecommendationParseError(f"reply has invalid fields: {exc.error_count()} errors") from exc


# ---------------------------------------------------------------------------
# Regex recovery
# ---------------------------------------------------------------------------

_STRING = r'"((?:[^"\\]|\\.)*)"?'
_NUMBER = r'"?(-?\d+(?:\.\d+)?)"?'

_INDEX_RE = re.compile(r'"?restaurant_index"?\s*:\s*"?(\d+)')
_RECOMMENDATION_RE = re.compile(r'"recommendation"\s*:\s*' + _STRING, re.DOTALL)
_TIP_RE = re.compile(r'"insider_tip"\s*:\s*' + _STRING, re.DOTALL)
_RELEVANCE_RE = re.compile(r'"relevance_score"\s*:\s*' + _NUMBER)
_NEGATIVE_RE = re.compile(r'"sentiment_negative"\s*:\s*' + _NUMBER)


def _unescape(raw: str) -> str:
    try:
        return json.loads(f'"{raw}"')
    except json.JSONDecodeError:
        return raw.replace('\\"', '"').replace("\\n", "\n")


def parse_recovered(text: str) -> GeneratedRecommendation:
    """Pull the essential fields out of a reply that is not valid JSON."""
    index = _INDEX_RE.search(text or "")
    recommendation = _RECOMMENDATION_RE.search(text or "")
    if not index or not recommendation:
        raise RecommendationParseError("reply lacks a recoverable index or recommendation")

    fields: dict[str, Any] = {
        "restaurant_index": int(index.group(1)),
        "recommendation": _unescape(recommendation.group(1)),
    }
    tip = _TIP_RE.search(text)
    if tip:
        fields["insider_tip"] = _unescape(tip.group(1))
    relevance = _RELEVANCE_RE.search(text)
    if relevance:
        fields["relevance_score"] = relevance.group(1)
    negative = _NEGATIVE_RE.search(text)
    if negative:
        fields["sentiment_negative"] = negative.group(1)

    try:
        return GeneratedRecommendation.model_validate(fields)
    except ValidationError as exc:
        raise RecommendationParseError("recovered fields are invalid") from exc


def parse_recommendation(text: str) -> GeneratedRecommendation:
    try:
        return parse_strict(text)
    except RecommendationParseError as exc:
        logger.warning("Strict parse failed (%s), trying regex recovery", exc)
    return parse_recovered(text)
