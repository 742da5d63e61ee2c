from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .config import DEFAULT_PLACES_CONFIG, PlacesConfig
from .models import PlaceDetails, PlaceReview

logger = logging.getLogger(__name__)


def _parse_details(place_id: str, result: dict[str, Any], config: PlacesConfig) -> PlaceDetails:
    reviews: list[PlaceReview] = []
    for raw in (result.get("reviews") or [])[: config.max_reviews]:
        if not isinstance(raw, dict):
            continue
        try:
            reviews.append(
                PlaceReview(
                    rating=raw.get("rating", 0),
                    text=str(raw.get("text") or "")[: config.max_review_chars],
                )
            )
        except ValidationError:
            logger.debug("Skipping malformed review for %s", place_id)

    return PlaceDetails(
        place_id=place_id,
        name=result.get("name") or "",
        address=result.get("formatted_address") or "",
        phone=result.get("formatted_phone_number") or None,
        website=result.get("website") or None,
        rating=result.get("rating") or None,
        review_count=result.get("user_ratings_total") or None,
        reviews=reviews,
        business_status=result.get("business_status") or None,
    )


class PlacesClient:
    """
    Google Place Details lookups.

    Usage:
        client = PlacesClient()
        details = await client.lookup("ChIJ...")

    ``transport`` lets tests swap in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: PlacesConfig = DEFAULT_PLACES_CONFIG,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self._config.enabled and bool(self._config.api_key)

    async def lookup(self, place_id: str) -> PlaceDetails | None:
        """
        Fetch live details for one place.

        Returns None when disabled, on HTTP or payload errors, or when the
        provider has no result. Callers must handle None.
        """
        if not place_id or not self.enabled:
            return None

        params = {
            "place_id": place_id,
            "fields": ",".join(self._config.fields),
            "key": self._config.api_key,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout, transport=self._transport
            ) as client:
                resp = await client.get(self._config.details_url, params=params)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Place Details returned %d for place_id=%r",
                exc.response.status_code,
                place_id,
            )
            return None
        except (httpx.HTTPError, ValueError):
            logger.warning("Place Details fetch failed for place_id=%r", place_id, exc_info=True)
            return None

        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, dict):
            return None
        try:
            return _parse_details(place_id, result, self._config)
        except ValidationError:
            logger.warning("Place Details payload invalid for place_id=%r", place_id, exc_info=True)
            return None
