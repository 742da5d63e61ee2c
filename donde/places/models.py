from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

CLOSED_PERMANENTLY = "CLOSED_PERMANENTLY"


class PlaceReview(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: float = Field(ge=0, le=5)
    text: str = ""


class PlaceDetails(BaseModel):
    """Transient metadata for one place; lives for a single request."""

    model_config = ConfigDict(frozen=True)

    place_id: str
    name: str = ""
    address: str = ""
    phone: str | None = None
    website: str | None = None
    rating: float | None = None
    review_count: int | None = None
    reviews: list[PlaceReview] = Field(default_factory=list)
    business_status: str | None = None

    @property
    def closed_for_good(self) -> bool:
        return self.business_status == CLOSED_PERMANENTLY

    def negative_share(self) -> float | None:
        """Percent of reviews at 1-2 stars, or None without reviews."""
        if not self.reviews:
            return None
        negative = sum(1 for r in self.reviews if r.rating <= 2)
        return negative / len(self.reviews) * 100
