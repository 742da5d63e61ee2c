from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, Hashable, Mapping, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class TimedOut:
    after: float


async def bounded_wait(aw: Awaitable[T], timeout: float) -> Ok[T] | TimedOut:
    """
    Await ``aw`` for at most ``timeout`` seconds.

    The awaitable is cancelled on timeout. Exceptions it raises propagate.
    """
    try:
        return Ok(await asyncio.wait_for(aw, timeout))
    except asyncio.TimeoutError:
        return TimedOut(timeout)


async def race_all(aws: Mapping[K, Awaitable[T]], timeout: float) -> dict[K, T]:
    """
    Run every awaitable concurrently and keep what finished within ``timeout``.

    Stragglers are cancelled; failures are logged and left out.
    """
    if not aws:
        return {}
    tasks = {key: asyncio.ensure_future(aw) for key, aw in aws.items()}
    done, pending = await asyncio.wait(tasks.values(), timeout=timeout)
    for task in pending:
        task.cancel()
    if pending:
        logger.info("%d of %d lookups missed the %.1fs window", len(pending), len(tasks), timeout)

    results: dict[K, T] = {}
    for key, task in tasks.items():
        if task not in done or task.cancelled():
            continue
        exc = task.exception()
        if exc is not None:
            logger.warning("Lookup %r failed", key, exc_info=exc)
            continue
        results[key] = task.result()
    return results
