from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from ..scoring.boost import compute_boost
from ..scoring.context import NO_REJECTIONS, RequestSignals
from ..scoring.occasions import normalized_total, weighted_occasion_score
from .data_store import CandidateStore, frame_to_candidates, merge_tables
from .models import ANY_BUDGET, ANYWHERE, BUDGET_TIERS, Candidate

logger = logging.getLogger(__name__)


class CandidateStoreError(RuntimeError):
    """Both the ranked read and the bulk fallback failed."""


@dataclass(frozen=True)
class CandidateFetch:
    candidates: list[Candidate]
    relaxed: bool = False
    degraded: bool = False


def adjacent_tiers(budget: str) -> tuple[str, ...]:
    if budget not in BUDGET_TIERS:
        return ()
    i = BUDGET_TIERS.index(budget)
    return tuple(BUDGET_TIERS[j] for j in (i - 1, i + 1) if 0 <= j < len(BUDGET_TIERS))


def _by_occasion(candidates: list[Candidate], occasion: str) -> list[Candidate]:
    return sorted(
        candidates,
        key=lambda c: (weighted_occasion_score(c, occasion), c.total_score()),
        reverse=True,
    )


# ---------------------------------------------------------------------------
# Degraded in-process ranking
# ---------------------------------------------------------------------------


def _usable(candidate: Candidate) -> bool:
    return candidate.noise_level is not None and candidate.is_active is not False


def _budget_filtered(pool: list[Candidate], budget: str) -> list[Candidate]:
    if budget == ANY_BUDGET:
        return pool
    exact = [c for c in pool if c.price_tier == budget]
    if exact:
        return exact
    near = adjacent_tiers(budget)
    adjacent = [c for c in pool if c.price_tier in near]
    return adjacent or pool


def fallback_rank(
    candidates: list[Candidate],
    signals: RequestSignals,
    limit: int,
) -> list[Candidate]:
    """
    Filter and sort a bulk read without the store's ranking.

    Composite is 0.6 occasion fit, 0.2 normalized total and 0.2 keyword boost.
    """
    pool = [c for c in candidates if _usable(c)]
    if signals.area != ANYWHERE:
        in_area = [c for c in pool if c.area.lower() == signals.area.lower()]
        pool = in_area or pool
    pool = _budget_filtered(pool, signals.budget)

    def composite(c: Candidate) -> float:
        return (
            0.6 * weighted_occasion_score(c, signals.occasion)
            + 0.2 * normalized_total(c)
            + 0.2 * compute_boost(c, signals)
        )

    return sorted(pool, key=composite, reverse=True)[:limit]


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class CandidateStoreAdapter:
    """
    Ranked candidate reads with filter relaxation and a degraded path.

    Usage:
        adapter = CandidateStoreAdapter(FrameCandidateStore())
        fetched = adapter.fetch(signals, limit=30)
    """

    def __init__(self, store: CandidateStore) -> None:
        self._store = store

    @property
    def store(self) -> CandidateStore:
        return self._store

    def _ranked(
        self, area: str, budget: str, occasion: str, limit: int, hint: str | None
    ) -> list[Candidate]:
        return self._store.ranked_candidates(area, budget, occasion, limit, hint)

    def _with_relaxation(
        self, signals: RequestSignals, limit: int, hint: str | None
    ) -> CandidateFetch:
        area, budget, occasion = signals.area, signals.budget, signals.occasion
        found = self._ranked(area, budget, occasion, limit, hint)
        if found:
            return CandidateFetch(found)

        if budget != ANY_BUDGET:
            nearby: list[Candidate] = []
            for tier in adjacent_tiers(budget):
                nearby.extend(self._ranked(area, tier, occasion, limit, hint))
            if nearby:
                logger.info("No %s results in %s, widened to adjacent tiers", budget, area)
                return CandidateFetch(_by_occasion(nearby, occasion)[:limit], relaxed=True)
            found = self._ranked(area, ANY_BUDGET, occasion, limit, hint)
            if found:
                logger.info("No %s results in %s, dropped the budget filter", budget, area)
                return CandidateFetch(found, relaxed=True)

        if area != ANYWHERE:
            found = self._ranked(ANYWHERE, ANY_BUDGET, occasion, limit, hint)
            if found:
                logger.info("Nothing in %s, searched everywhere", area)
                return CandidateFetch(found, relaxed=True)

        return CandidateFetch([])

    def fetch(
        self,
        signals: RequestSignals,
        limit: int,
        cuisine_hint: str | None = None,
    ) -> CandidateFetch:
        try:
            return self._with_relaxation(signals, limit, cuisine_hint)
        except Exception:
            logger.warning("Ranked candidate read failed, using bulk fallback", exc_info=True)

        try:
            tables = self._store.load_tables()
            candidates = frame_to_candidates(merge_tables(tables))
        except Exception as exc:
            raise CandidateStoreError("candidate store unavailable") from exc

        # Keyword boost only; no intent or rejection history in degraded mode
        plain = replace(signals, intent=None, rejections=NO_REJECTIONS)
        return CandidateFetch(fallback_rank(candidates, plain, limit), degraded=True)

    def area_description(self, candidates: list[Candidate], area: str) -> str | None:
        if area == ANYWHERE:
            return None
        for c in candidates:
            if c.area.lower() == area.lower() and c.area_description:
                return c.area_description
        return None
