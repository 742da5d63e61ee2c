from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from donde.intent.classifier import INTENT_SYSTEM_PROMPT, classify
from donde.intent.models import IntentClassification
from donde.llm.config import LLMConfig

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)


def _mock_groq_response(content: str) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _wire(mock_groq_cls: MagicMock, content: str | None = None, error: Exception | None = None) -> AsyncMock:
    create = AsyncMock()
    if error is not None:
        create.side_effect = error
    else:
        create.return_value = _mock_groq_response(content or "")
    client = mock_groq_cls.return_value
    client.__aenter__.return_value = client
    client.chat.completions.create = create
    return create


@pytest.mark.asyncio
@patch("donde.llm.groq_client.AsyncGroq")
async def test_classify_parses_intent(mock_groq_cls):
    create = _wire(mock_groq_cls, json.dumps({
        "target_cuisines": ["Mexican"],
        "target_tags": ["rooftop"],
        "cuisine_importance": "high",
        "spontaneity": "spontaneous",
    }))

    intent = await classify("tacos on a rooftop tonight", ENABLED_CONFIG)

    assert intent is not None
    assert intent.target_cuisines == ["Mexican"]
    assert intent.is_high
    assert intent.spontaneity == "spontaneous"
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == ENABLED_CONFIG.intent_model
    assert kwargs["messages"][0]["content"] == INTENT_SYSTEM_PROMPT


@pytest.mark.asyncio
@patch("donde.llm.groq_client.AsyncGroq")
async def test_short_text_skips_call(mock_groq_cls):
    create = _wire(mock_groq_cls, "{}")
    assert await classify("  a ", ENABLED_CONFIG) is None
    create.assert_not_awaited()


@pytest.mark.asyncio
@patch("donde.llm.groq_client.AsyncGroq")
async def test_malformed_json_is_no_intent(mock_groq_cls):
    _wire(mock_groq_cls, "not valid json{{{")
    assert await classify("cozy italian", ENABLED_CONFIG) is None


@pytest.mark.asyncio
@patch("donde.llm.groq_client.AsyncGroq")
async def test_non_object_reply_is_no_intent(mock_groq_cls):
    _wire(mock_groq_cls, '["Italian"]')
    assert await classify("cozy italian", ENABLED_CONFIG) is None


@pytest.mark.asyncio
@patch("donde.llm.groq_client.AsyncGroq")
async def test_provider_error_is_no_intent(mock_groq_cls):
    _wire(mock_groq_cls, error=RuntimeError("API timeout"))
    assert await classify("cozy italian", ENABLED_CONFIG) is None


@pytest.mark.asyncio
async def test_disabled_config_is_no_intent():
    assert await classify("cozy italian", DISABLED_CONFIG) is None


@pytest.mark.asyncio
@patch("donde.llm.groq_client.AsyncGroq")
async def test_code_fenced_reply_is_accepted(mock_groq_cls):
    _wire(mock_groq_cls, '```json\n{"target_cuisines": ["Thai"], "cuisine_importance": "medium"}\n```')
    intent = await classify("something spicy", ENABLED_CONFIG)
    assert intent is not None
    assert intent.cuisine_importance == "medium"


def test_bad_fields_coerce_to_defaults():
    intent = IntentClassification.model_validate({
        "target_cuisines": "Mexican",
        "target_tags": ["rooftop", 3, "  "],
        "cuisine_importance": "EXTREME",
        "emotional_intent": None,
        "date_type": "",
        "spontaneity": 7,
        "unknown_field": True,
    })
    assert intent.target_cuisines == []
    assert intent.target_tags == ["rooftop"]
    assert intent.cuisine_importance == "low"
    assert intent.emotional_intent == "casual"
    assert intent.date_type is None
    assert intent.spontaneity == "unknown"


def test_wants_cuisine_is_case_insensitive():
    intent = IntentClassification(target_cuisines=["mexican"])
    assert intent.wants_cuisine("Mexican")
    assert not intent.wants_cuisine(None)
