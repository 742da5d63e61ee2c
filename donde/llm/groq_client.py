from __future__ import annotations

import asyncio
import logging

from groq import AsyncGroq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)


class LLMUnavailableError(RuntimeError):
    """The generative provider is switched off or has no credentials."""


async def complete(
    system_prompt: str,
    user_prompt: str,
    *,
    model: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
    timeout: float | None = None,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    """
    Send one chat completion to Groq and return the raw reply text.

    Raises:
        LLMUnavailableError when the config is disabled or has no key
        asyncio.TimeoutError when the call outlives ``timeout``
        groq.APIError on provider errors
    """
    if not config.enabled or not config.api_key:
        raise LLMUnavailableError("Groq is disabled or GROQ_API_KEY is not set")

    timeout = config.timeout if timeout is None else timeout
    async with AsyncGroq(api_key=config.api_key, timeout=timeout) as client:
        response = await asyncio.wait_for(
            client.chat.completions.create(
                model=model or config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens or config.max_tokens,
                temperature=config.temperature if temperature is None else temperature,
                response_format={"type": "json_object"},
            ),
            timeout=timeout,
        )
    content = response.choices[0].message.content or ""
    logger.debug("Groq reply: %d chars from %s", len(content), model or config.model)
    return content
