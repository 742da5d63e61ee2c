from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import numpy as np
import pandas as pd
from pydantic import ValidationError

from ..analytics.store import record_event
from ..scoring.occasions import OCCASION_WEIGHTS
from .config import DEFAULT_ENGINE_CONFIG
from .models import ANY_BUDGET, ANY_OCCASION, ANYWHERE, SCORE_FIELDS, Candidate

logger = logging.getLogger(__name__)

LIST_SEPARATOR = "|"
_LIST_COLUMNS = ("best_times", "dietary_options", "good_for")
_BOOL_COLUMNS = ("outdoor_seating", "live_music", "pet_friendly", "is_active")
_ID_DTYPES = {"id": str, "area_id": str, "restaurant_id": str}

# Hinted-cuisine rows swapped into the tail of a ranked window
HINT_SLOTS = 3


class CandidateStore(Protocol):
    def ranked_candidates(
        self,
        area: str,
        budget: str,
        occasion: str,
        limit: int,
        cuisine_hint: str | None = None,
    ) -> list[Candidate]: ...

    def load_tables(self) -> StoreTables: ...

    def record_query(self, row: dict[str, Any]) -> None: ...

    def areas(self) -> list[str]: ...


@dataclass(frozen=True)
class StoreTables:
    restaurants: pd.DataFrame
    scores: pd.DataFrame
    tags: pd.DataFrame
    areas: pd.DataFrame
    deep_profiles: dict[str, dict[str, Any]]


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------


def _is_missing(value: Any) -> bool:
    if isinstance(value, (list, dict, tuple)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_bool(value: Any) -> bool | None:
    if _is_missing(value):
        return None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    text = str(value).strip().lower()
    if text in ("true", "t", "yes", "1"):
        return True
    if text in ("false", "f", "no", "0"):
        return False
    return None


def _as_list(value: Any) -> list[str]:
    if _is_missing(value):
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def row_to_candidate(row: dict[str, Any]) -> Candidate:
    data = {k: (None if _is_missing(v) else v) for k, v in row.items()}
    for col in _LIST_COLUMNS:
        data[col] = _as_list(row.get(col))
    for col in _BOOL_COLUMNS:
        if col in data:
            data[col] = _as_bool(row.get(col))
    if data.get("is_active") is None:
        data.pop("is_active", None)
    data["id"] = str(data["id"]).lower()
    data["area"] = data.get("area") or "Unknown"
    data["address"] = data.get("address") or ""
    data["tags"] = row.get("tags") or []
    return Candidate.model_validate(data)


def merge_tables(tables: StoreTables) -> pd.DataFrame:
    """Join restaurants with scores, areas, tags and deep profiles, one row each."""
    df = tables.restaurants.copy()
    df["id"] = df["id"].astype(str)

    scores = tables.scores.rename(columns={"restaurant_id": "id"})
    score_cols = [c for c in SCORE_FIELDS if c in scores.columns]
    df = df.merge(scores[["id", *score_cols]], on="id", how="left")

    areas = tables.areas.rename(
        columns={"id": "area_id", "name": "area", "description": "area_description"}
    )
    area_cols = [c for c in ("area_id", "area", "area_description") if c in areas.columns]
    if "area_id" in df.columns:
        df = df.merge(areas[area_cols], on="area_id", how="left")
    df["area"] = df.get("area", pd.Series(index=df.index, dtype=object)).fillna("Unknown")

    tag_map: dict[str, list[dict[str, Any]]] = {}
    for row in tables.tags.itertuples(index=False):
        text = getattr(row, "tag_text", None)
        if _is_missing(text) or str(text).strip() in ("", "null"):
            continue
        category = getattr(row, "tag_category", None)
        tag_map.setdefault(str(row.restaurant_id), []).append(
            {"text": str(text).strip(), "category": None if _is_missing(category) else category}
        )
    df["tags"] = df["id"].map(lambda rid: tag_map.get(rid, []))
    df["deep_profile"] = df["id"].map(lambda rid: tables.deep_profiles.get(rid))

    for col in SCORE_FIELDS:
        if col not in df.columns:
            df[col] = np.nan
    return df


def frame_to_candidates(df: pd.DataFrame) -> list[Candidate]:
    """Convert merged rows, skipping (with a warning) rows that fail validation."""
    candidates: list[Candidate] = []
    for row in df.to_dict(orient="records"):
        try:
            candidates.append(row_to_candidate(row))
        except ValidationError as exc:
            logger.warning(
                "Skipping candidate %s: %d invalid fields",
                row.get("id"),
                exc.error_count(),
            )
    return candidates


def occasion_column(df: pd.DataFrame, occasion: str) -> pd.Series:
    """Vectorised weighted occasion score, nulls counted as 0."""
    scores = df[list(SCORE_FIELDS)].astype(float).fillna(0.0)
    if occasion == ANY_OCCASION:
        return scores.sum(axis=1) / (10.0 * len(SCORE_FIELDS)) * 10
    weights = OCCASION_WEIGHTS.get(occasion, {"date_friendly_score": 1.0})
    total = pd.Series(0.0, index=df.index)
    for field, weight in weights.items():
        total = total + scores[field] * weight
    return total


# ---------------------------------------------------------------------------
# File-backed store
# ---------------------------------------------------------------------------


class FrameCandidateStore:
    """
    Candidate store over four CSV tables (and optional deep profiles).

    Files are read on first use and kept in memory; list columns are
    ``|``-separated strings.
    """

    def __init__(self, data_dir: Path | str = DEFAULT_ENGINE_CONFIG.data_dir) -> None:
        self._data_dir = Path(data_dir)
        self._lock = threading.Lock()
        self._tables: StoreTables | None = None
        self._frame: pd.DataFrame | None = None
        self._by_id: dict[str, Candidate] = {}

    def _read_tables(self) -> StoreTables:
        root = self._data_dir
        profiles: dict[str, dict[str, Any]] = {}
        profile_path = root / "deep_profiles.jsonl"
        if profile_path.exists():
            with profile_path.open(encoding="utf-8") as fh:
                for line in fh:
                    if not line.strip():
                        continue
                    record = json.loads(line)
                    rid = str(record.pop("restaurant_id", "")).lower()
                    if rid:
                        profiles[rid] = record
        return StoreTables(
            restaurants=pd.read_csv(root / "restaurants.csv", dtype=_ID_DTYPES),
            scores=pd.read_csv(root / "occasion_scores.csv", dtype=_ID_DTYPES),
            tags=pd.read_csv(root / "tags.csv", dtype=_ID_DTYPES),
            areas=pd.read_csv(root / "neighborhoods.csv", dtype=_ID_DTYPES),
            deep_profiles=profiles,
        )

    def load_tables(self) -> StoreTables:
        with self._lock:
            if self._tables is None:
                self._tables = self._read_tables()
            return self._tables

    def _ensure_frame(self) -> pd.DataFrame:
        tables = self.load_tables()
        with self._lock:
            if self._frame is None:
                merged = merge_tables(tables)
                merged["id"] = merged["id"].str.lower()
                candidates = frame_to_candidates(merged)
                self._by_id = {c.id: c for c in candidates}
                self._frame = merged[merged["id"].isin(list(self._by_id))].reset_index(drop=True)
                logger.info("Loaded %d candidates from %s", len(self._by_id), self._data_dir)
            return self._frame

    def ranked_candidates(
        self,
        area: str,
        budget: str,
        occasion: str,
        limit: int,
        cuisine_hint: str | None = None,
    ) -> list[Candidate]:
        df = self._ensure_frame()
        mask = df["is_active"].map(lambda v: _as_bool(v) is not False) if "is_active" in df else True
        if area and area != ANYWHERE:
            mask = mask & (df["area"].str.lower() == area.lower())
        if budget and budget != ANY_BUDGET:
            mask = mask & (df["price_tier"] == budget)
        subset = df.loc[mask].copy() if not isinstance(mask, bool) else df.copy()
        if subset.empty:
            return []

        subset["_occasion"] = occasion_column(subset, occasion)
        subset["_total"] = subset[list(SCORE_FIELDS)].astype(float).fillna(0.0).sum(axis=1)
        subset = subset.sort_values(["_occasion", "_total"], ascending=False, kind="mergesort")
        ids = subset["id"].tolist()

        window = ids[:limit]
        if cuisine_hint:
            hint = cuisine_hint.lower()
            in_window = any((self._by_id[i].cuisine or "").lower() == hint for i in window)
            if not in_window:
                hinted = [i for i in ids[limit:] if (self._by_id[i].cuisine or "").lower() == hint]
                hinted = hinted[: min(HINT_SLOTS, limit)]
                if hinted:
                    window = window[: limit - len(hinted)] + hinted
        return [self._by_id[i] for i in window]

    def record_query(self, row: dict[str, Any]) -> None:
        record_event("query", row)

    def areas(self) -> list[str]:
        tables = self.load_tables()
        if "name" not in tables.areas.columns:
            return []
        return sorted(tables.areas["name"].dropna().astype(str).unique().tolist())
