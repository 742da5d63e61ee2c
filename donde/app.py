from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .recommendations.candidates import CandidateStoreAdapter
from .recommendations.data_store import FrameCandidateStore
from .recommendations.models import (
    ANY_BUDGET,
    ANY_OCCASION,
    BUDGET_TIERS,
    OCCASIONS,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.responses import error_response
from .recommendations.retrieval import RecommendationEngine

logger = logging.getLogger(__name__)

app = FastAPI(title="Donde Recommendation API", version="3.0.0")


@lru_cache(maxsize=1)
def get_engine() -> RecommendationEngine:
    return RecommendationEngine(CandidateStoreAdapter(FrameCandidateStore()))


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata(engine: RecommendationEngine = Depends(get_engine)) -> dict:
    return {
        "occasions": [ANY_OCCASION, *OCCASIONS],
        "price_levels": [ANY_BUDGET, *BUDGET_TIERS],
        "neighborhoods": engine.areas(),
    }


@app.post("/recommend", response_model=RecommendationResponse)
async def recommend(
    body: RecommendationRequest,
    engine: RecommendationEngine = Depends(get_engine),
):
    try:
        return await engine.recommend(body)
    except Exception:
        logger.exception("Recommendation engine error")
        return JSONResponse(status_code=500, content=error_response().model_dump())


# ── Operational endpoints ────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats(engine: RecommendationEngine = Depends(get_engine)) -> dict:
    return engine.cache.stats()


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
