"""
Request-scoped orchestration.

Retrieving -> scoring/boosting/diversifying -> external enrichment ->
synthesizing -> responding. Terminal outcomes are success, fallback,
no-results and error; the HTTP layer turns a raised error into the generic
payload.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from typing import Any, Awaitable, Callable, Sequence

from ..intent.classifier import classify
from ..intent.models import IntentClassification
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import complete
from ..llm.parsing import GeneratedRecommendation, RecommendationParseError, parse_recommendation
from ..llm.prompts import build_system_prompt, build_user_prompt
from ..places.client import PlacesClient
from ..places.models import PlaceDetails
from ..scoring.boost import analyze_rejections, rerank
from ..scoring.context import Clock, RequestSignals, utc_now
from ..scoring.diversity import ensure_diversity
from ..scoring.donde_match import MatchInputs, donde_match
from ..scoring.keywords import extract_unmatched_keywords
from .cache import ResponseCache
from .candidates import CandidateStoreAdapter
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .models import Candidate, RecommendationRequest, RecommendationResponse
from .responses import (
    fallback_paragraph,
    fallback_response,
    fallback_tip,
    no_results_response,
    success_response,
)
from .timing import Ok, bounded_wait, race_all

logger = logging.getLogger(__name__)

Classifier = Callable[[str], Awaitable[IntentClassification | None]]
Completer = Callable[..., Awaitable[str]]


def _outcome(response: RecommendationResponse) -> str:
    if not response.success:
        return "no_results"
    return "fallback" if response.fallback else "success"


def match_inputs(
    details: PlaceDetails | None,
    generated: GeneratedRecommendation | None = None,
) -> MatchInputs:
    negative = generated.sentiment_negative if generated else None
    if negative is None and details is not None:
        negative = details.negative_share()
    return MatchInputs(
        rating=details.rating if details else None,
        review_count=details.review_count if details else None,
        generative_relevance=generated.relevance_score if generated else None,
        sentiment_negative=negative,
    )


class RecommendationEngine:
    """
    One best-fit restaurant per request.

    Usage:
        engine = RecommendationEngine(CandidateStoreAdapter(FrameCandidateStore()))
        response = await engine.recommend(RecommendationRequest(occasion="Date Night"))
    """

    def __init__(
        self,
        adapter: CandidateStoreAdapter,
        *,
        places: PlacesClient | None = None,
        cache: ResponseCache | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
        clock: Clock = utc_now,
        classifier: Classifier | None = None,
        completer: Completer = complete,
    ) -> None:
        self._adapter = adapter
        self._places = places or PlacesClient()
        self._cache = cache or ResponseCache(ttl=config.cache_ttl)
        self._config = config
        self._llm_config = llm_config
        self._clock = clock
        self._classifier = classifier or (lambda text: classify(text, llm_config))
        self._complete = completer
        self._pending_logs: set[asyncio.Task[None]] = set()

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    def areas(self) -> list[str]:
        return self._adapter.store.areas()

    async def recommend(self, request: RecommendationRequest) -> RecommendationResponse:
        started = time.time()
        use_cache = not request.exclude
        key = request.cache_key()

        if use_cache:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                self._log_outcome(request, cached, started, cache_hit=True)
                return cached

        try:
            response = await self._run(request)
        except Exception:
            self._log_outcome(request, None, started)
            raise

        # Fallback answers live for the shorter fallback TTL
        if use_cache and response.success:
            ttl = self._config.fallback_cache_ttl if response.fallback else None
            self._cache.put(key, response, ttl=ttl)
        self._log_outcome(request, response, started)
        return response

    # -----------------------------------------------------------------------
    # Pipeline
    # -----------------------------------------------------------------------

    async def _classify(self, free_text: str) -> IntentClassification | None:
        if len(free_text.strip()) < 3:
            return None
        return await self._classifier(free_text)

    def _cuisine_hint(
        self, intent: IntentClassification | None, pool: Sequence[Candidate]
    ) -> str | None:
        if intent is None or not intent.is_high or len(intent.target_cuisines) != 1:
            return None
        if any(intent.wants_cuisine(c.cuisine) for c in pool):
            return None
        return intent.target_cuisines[0]

    async def _run(self, request: RecommendationRequest) -> RecommendationResponse:
        cfg = self._config
        exclusions = request.exclude[: cfg.max_exclusions]
        base = RequestSignals.from_request(
            request, now=self._clock(), tz_name=cfg.local_timezone
        )
        pool_size = cfg.pool_size + len(exclusions)

        intent, fetched = await asyncio.gather(
            self._classify(request.special_request),
            asyncio.to_thread(self._adapter.fetch, base, pool_size),
        )

        # Rejection patterns are read from the pool before the excluded rows go
        rejections = analyze_rejections(exclusions, fetched.candidates, cfg.rejection_threshold)
        signals = replace(base, intent=intent, rejections=rejections)
        excluded = set(exclusions)
        pool = [c for c in fetched.candidates if c.id not in excluded]

        hint = self._cuisine_hint(intent, pool)
        if hint:
            refetched = await asyncio.to_thread(self._adapter.fetch, signals, pool_size, hint)
            hinted = [c for c in refetched.candidates if c.id not in excluded]
            if hinted:
                logger.info("Refetched with cuisine hint %r", hint)
                pool = hinted

        if not pool:
            logger.info(
                "No candidates for area=%r budget=%r occasion=%r",
                signals.area, signals.budget, signals.occasion,
            )
            return no_results_response(signals.area, signals.budget, signals.occasion)

        ranked = rerank(pool, signals)
        top = ensure_diversity(
            ranked[: cfg.top_n],
            ranked[cfg.top_n:],
            max_per_cuisine=cfg.max_per_cuisine,
            max_per_area=cfg.max_per_area,
            protected=cfg.protected_positions,
            target=cfg.top_n,
        )
        area_description = self._adapter.area_description(pool, signals.area)
        return await self._enrich_and_respond(top, signals, area_description)

    async def _lookup_metadata(self, candidates: Sequence[Candidate]) -> dict[str, PlaceDetails]:
        if not self._places.enabled:
            return {}
        lookups = {c.id: self._places.lookup(c.place_id) for c in candidates if c.place_id}
        results = await race_all(lookups, self._config.metadata_timeout)
        return {cid: details for cid, details in results.items() if details is not None}

    async def _generate(
        self,
        top: Sequence[Candidate],
        signals: RequestSignals,
        metadata: asyncio.Task[dict[str, PlaceDetails]],
        area_description: str | None,
    ) -> GeneratedRecommendation:
        details = await metadata
        reviews_by_index = {
            i: details[c.id].reviews
            for i, c in enumerate(top)
            if c.id in details and details[c.id].reviews
        }
        user_prompt = build_user_prompt(
            top,
            occasion=signals.occasion,
            budget=signals.budget,
            area=signals.area,
            free_text=signals.free_text,
            reviews_by_index=reviews_by_index,
            area_description=area_description,
            rejections=signals.rejections,
        )
        text = await self._complete(
            build_system_prompt(signals.occasion, signals.budget),
            user_prompt,
            config=self._llm_config,
        )
        parsed = parse_recommendation(text)
        if parsed.restaurant_index >= len(top):
            raise RecommendationParseError(
                f"restaurant_index {parsed.restaurant_index} outside {len(top)} candidates"
            )
        return parsed

    async def _details_for(
        self, candidate: Candidate, known: dict[str, PlaceDetails]
    ) -> PlaceDetails | None:
        if candidate.id in known:
            return known[candidate.id]
        if not candidate.place_id or not self._places.enabled:
            return None
        result = await bounded_wait(
            self._places.lookup(candidate.place_id), self._config.metadata_timeout
        )
        return result.value if isinstance(result, Ok) else None

    async def _next_open(
        self,
        top: Sequence[Candidate],
        known: dict[str, PlaceDetails],
        start: int = 0,
    ) -> tuple[Candidate, PlaceDetails | None] | None:
        """
        Walk the ranking from ``start`` (wrapping to the head) and return the
        first candidate not known to be closed for good, with its metadata.
        Lookups made along the way are folded into ``known``.
        """
        for offset in range(len(top)):
            candidate = top[(start + offset) % len(top)]
            details = await self._details_for(candidate, known)
            if details is not None and details.closed_for_good:
                known[candidate.id] = details
                logger.info("%s is closed for good, skipping", candidate.id)
                continue
            return candidate, details
        return None

    async def _enrich_and_respond(
        self,
        top: list[Candidate],
        signals: RequestSignals,
        area_description: str | None,
    ) -> RecommendationResponse:
        metadata = asyncio.create_task(self._lookup_metadata(top[: self._config.metadata_top_n]))
        generation = asyncio.create_task(
            self._generate(top, signals, metadata, area_description)
        )
        known = await metadata

        generated: GeneratedRecommendation | None = None
        try:
            result = await bounded_wait(
                generation, self._llm_config.timeout + self._config.metadata_timeout
            )
            if isinstance(result, Ok):
                generated = result.value
            else:
                logger.warning("Generative call exceeded %.1fs, using fallback", result.after)
        except Exception:
            logger.warning("Generative call failed, using fallback", exc_info=True)

        if generated is None:
            return await self._fallback(top, signals, known)

        index = generated.restaurant_index
        found = await self._next_open(top, known, start=index)
        if found is None:
            logger.info("Every ranked candidate is closed, returning no results")
            return no_results_response(signals.area, signals.budget, signals.occasion)

        chosen, details = found
        if chosen is not top[index]:
            # The generated text describes the closed place, so the substitute gets its own
            logger.info("Substituting %s for closed %s", chosen.id, top[index].id)
            match = donde_match(chosen, signals, match_inputs(details))
            return success_response(
                chosen,
                recommendation=fallback_paragraph(chosen, signals.occasion),
                insider_tip=fallback_tip(chosen),
                match=match,
                details=details,
            )

        match = donde_match(chosen, signals, match_inputs(details, generated))
        return success_response(
            chosen,
            recommendation=generated.recommendation,
            insider_tip=generated.insider_tip or chosen.insider_tip,
            match=match,
            details=details,
            sentiment_breakdown=generated.sentiment_breakdown,
            sentiment_summary=generated.sentiment_summary,
        )

    async def _fallback(
        self,
        top: list[Candidate],
        signals: RequestSignals,
        known: dict[str, PlaceDetails],
    ) -> RecommendationResponse:
        found = await self._next_open(top, known)
        if found is None:
            return no_results_response(signals.area, signals.budget, signals.occasion)
        chosen, details = found
        match = donde_match(chosen, signals, match_inputs(details))
        return fallback_response(chosen, signals.occasion, match, details)

    # -----------------------------------------------------------------------
    # Outcome logging
    # -----------------------------------------------------------------------

    def _log_outcome(
        self,
        request: RecommendationRequest,
        response: RecommendationResponse | None,
        started: float,
        *,
        cache_hit: bool = False,
    ) -> None:
        row: dict[str, Any] = {
            "occasion": request.occasion,
            "area": request.neighborhood,
            "budget": request.price_level,
            "special_request": request.special_request,
            "excluded": len(request.exclude),
            "outcome": _outcome(response) if response is not None else "error",
            "restaurant_id": response.restaurant.id if response and response.restaurant else None,
            "donde_match": response.donde_match if response else None,
            "fallback": bool(response and response.fallback),
            "cache_hit": cache_hit,
            "response_time_ms": round((time.time() - started) * 1000, 1),
            "unmatched_keywords": extract_unmatched_keywords(request.special_request),
        }
        task = asyncio.create_task(self._record(row))
        self._pending_logs.add(task)
        task.add_done_callback(self._pending_logs.discard)

    async def _record(self, row: dict[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._adapter.store.record_query, row)
        except Exception:
            logger.warning("Failed to log query outcome", exc_info=True)

    async def drain(self) -> None:
        """Wait for in-flight outcome logging; used on shutdown and in tests."""
        if self._pending_logs:
            await asyncio.gather(*list(self._pending_logs))
