from __future__ import annotations

import httpx
import pytest

from donde.places.client import PlacesClient
from donde.places.config import PlacesConfig
from donde.places.models import PlaceDetails, PlaceReview

ENABLED_CONFIG = PlacesConfig(api_key="test-key", enabled=True, max_reviews=2, max_review_chars=10)

SAMPLE_RESULT = {
    "name": "Spot 1",
    "formatted_address": "1 W Division St, Chicago",
    "formatted_phone_number": "(312) 555-0100",
    "website": "https://spot1.example.com",
    "rating": 4.6,
    "user_ratings_total": 812,
    "business_status": "OPERATIONAL",
    "reviews": [
        {"rating": 5, "text": "Incredible bread and service"},
        {"rating": 2, "text": "Too loud"},
        {"rating": 4, "text": "Cut off by max_reviews"},
    ],
}


def _client(handler, config: PlacesConfig = ENABLED_CONFIG) -> PlacesClient:
    return PlacesClient(config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_lookup_parses_details():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "OK", "result": SAMPLE_RESULT})

    details = await _client(handler).lookup("place-1")

    assert details is not None
    assert details.rating == 4.6
    assert details.review_count == 812
    assert details.phone == "(312) 555-0100"
    assert len(details.reviews) == 2
    assert details.reviews[0].text == "Incredible"
    assert not details.closed_for_good
    assert seen[0].url.params["place_id"] == "place-1"
    assert "business_status" in seen[0].url.params["fields"]


@pytest.mark.asyncio
async def test_lookup_http_error_is_none():
    details = await _client(lambda request: httpx.Response(500)).lookup("place-1")
    assert details is None


@pytest.mark.asyncio
async def test_lookup_connection_error_is_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert await _client(handler).lookup("place-1") is None


@pytest.mark.asyncio
async def test_lookup_missing_result_is_none():
    details = await _client(lambda request: httpx.Response(200, json={"status": "NOT_FOUND"})).lookup("x")
    assert details is None


@pytest.mark.asyncio
async def test_lookup_non_json_is_none():
    details = await _client(lambda request: httpx.Response(200, text="<html>")).lookup("place-1")
    assert details is None


@pytest.mark.asyncio
async def test_disabled_client_makes_no_request():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"result": SAMPLE_RESULT})

    client = _client(handler, PlacesConfig(api_key="", enabled=True))
    assert not client.enabled
    assert await client.lookup("place-1") is None
    assert await _client(handler).lookup("") is None
    assert calls == []


@pytest.mark.asyncio
async def test_malformed_reviews_are_skipped():
    result = dict(SAMPLE_RESULT, reviews=[{"rating": 9, "text": "bad"}, "nope", {"rating": 1}])
    client = _client(
        lambda request: httpx.Response(200, json={"result": result}),
        PlacesConfig(api_key="test-key", enabled=True),
    )
    details = await client.lookup("p")
    assert details is not None
    assert [r.rating for r in details.reviews] == [1]


def test_closed_and_negative_share():
    details = PlaceDetails(
        place_id="p",
        business_status="CLOSED_PERMANENTLY",
        reviews=[PlaceReview(rating=1), PlaceReview(rating=5), PlaceReview(rating=2), PlaceReview(rating=4)],
    )
    assert details.closed_for_good
    assert details.negative_share() == 50.0
    assert PlaceDetails(place_id="p").negative_share() is None
