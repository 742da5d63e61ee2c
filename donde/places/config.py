from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

PLACE_DETAILS_FIELDS = (
    "name",
    "formatted_address",
    "formatted_phone_number",
    "website",
    "rating",
    "user_ratings_total",
    "reviews",
    "business_status",
)


@dataclass(frozen=True)
class PlacesConfig:
    api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
    details_url: str = "https://maps.googleapis.com/maps/api/place/details/json"
    fields: tuple[str, ...] = PLACE_DETAILS_FIELDS
    timeout: float = 3.0
    max_reviews: int = 5
    max_review_chars: int = 300
    enabled: bool = os.getenv("DONDE_PLACES_ENABLED", "1") != "0"


DEFAULT_PLACES_CONFIG = PlacesConfig()
