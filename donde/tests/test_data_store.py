from __future__ import annotations

import json

import pytest

from donde.analytics.store import clear_events, get_events
from donde.recommendations.candidates import (
    CandidateStoreAdapter,
    CandidateStoreError,
    adjacent_tiers,
    fallback_rank,
)
from donde.recommendations.data_store import FrameCandidateStore, row_to_candidate
from donde.scoring.context import RequestSignals
from donde.tests.helpers import (
    FakeStore,
    cid,
    make_candidate,
    restaurant_row,
    score_row,
    write_tables,
)


@pytest.fixture
def store(tmp_path):
    restaurants = [
        restaurant_row(1),
        restaurant_row(2, area_id="n2", price_tier="$$$"),
        restaurant_row(3),
        restaurant_row(4, is_active=False),
        restaurant_row(5),
        restaurant_row(6, cuisine="Ethiopian"),
    ]
    scores = [
        score_row(1, date=6.0),
        score_row(2, date=9.0),
        score_row(3, date=8.0),
        score_row(4, date=10.0),
        score_row(5, date=11.0),  # out of range, row is skipped
        score_row(6, date=3.0),
    ]
    tags = [
        {"restaurant_id": cid(1), "tag_text": "cozy", "tag_category": "vibe"},
        {"restaurant_id": cid(1), "tag_text": "null", "tag_category": "vibe"},
        {"restaurant_id": cid(3), "tag_text": "rooftop", "tag_category": "feature"},
    ]
    profiles = [
        json.dumps({
            "restaurant_id": cid(1).upper(),
            "best_seat_in_house": "Window two-top",
            "signature_dishes": [{"dish": "Pierogi", "why": "Hand-pinched daily"}],
        }),
    ]
    write_tables(tmp_path, restaurants, scores, tags, profiles)
    return FrameCandidateStore(tmp_path)


def _ids(candidates) -> list[str]:
    return [c.id for c in candidates]


# ---------------------------------------------------------------------------
# File-backed store
# ---------------------------------------------------------------------------


class TestFrameCandidateStore:
    def test_ranks_by_occasion_and_skips_inactive(self, store):
        ranked = store.ranked_candidates("Anywhere", "Any", "Date Night", 10)
        assert _ids(ranked) == [cid(2), cid(3), cid(1), cid(6)]

    def test_area_filter_is_case_insensitive(self, store):
        ranked = store.ranked_candidates("logan square", "Any", "Date Night", 10)
        assert _ids(ranked) == [cid(2)]
        assert ranked[0].area == "Logan Square"
        assert ranked[0].area_description == "Boulevards and cocktail dens"

    def test_budget_filter(self, store):
        ranked = store.ranked_candidates("Anywhere", "$$", "Date Night", 10)
        assert cid(2) not in _ids(ranked)

    def test_no_match_is_empty(self, store):
        assert store.ranked_candidates("Pilsen", "Any", "Date Night", 10) == []

    def test_limit_applies(self, store):
        assert len(store.ranked_candidates("Anywhere", "Any", "Date Night", 2)) == 2

    def test_cuisine_hint_swaps_into_window(self, store):
        ranked = store.ranked_candidates("Anywhere", "Any", "Date Night", 2, cuisine_hint="ethiopian")
        assert _ids(ranked) == [cid(2), cid(6)]

    def test_cuisine_hint_already_present_is_noop(self, store):
        ranked = store.ranked_candidates("Anywhere", "Any", "Date Night", 10, cuisine_hint="Ethiopian")
        assert _ids(ranked) == [cid(2), cid(3), cid(1), cid(6)]

    def test_tags_and_profile_attached(self, store):
        by_id = {c.id: c for c in store.ranked_candidates("Anywhere", "Any", "Any", 10)}
        first = by_id[cid(1)]
        assert first.tag_texts == ["cozy"]
        assert first.best_times == ["dinner", "late_night", "lunch"]
        assert first.dietary_options == []
        assert first.deep_profile is not None
        assert first.deep_profile.best_seat_in_house == "Window two-top"
        assert first.deep_profile.signature_dishes[0].dish == "Pierogi"
        assert by_id[cid(3)].deep_profile is None

    def test_areas(self, store):
        assert store.areas() == ["Logan Square", "Wicker Park"]

    def test_record_query_logs_event(self, store):
        clear_events()
        store.record_query({"occasion": "Date Night", "outcome": "success"})
        events = get_events("query")
        assert len(events) == 1
        assert events[0]["outcome"] == "success"
        clear_events()


def test_row_to_candidate_coerces_flags_and_lists():
    row = dict(restaurant_row(1, outdoor_seating="yes", live_music="0", best_times="dinner| |lunch"))
    row.update({"id": cid(1).upper(), "area": "Wicker Park", "tags": []})
    candidate = row_to_candidate(row)
    assert candidate.id == cid(1)
    assert candidate.outdoor_seating is True
    assert candidate.live_music is False
    assert candidate.best_times == ["dinner", "lunch"]


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


def test_adjacent_tiers():
    assert adjacent_tiers("$") == ("$$",)
    assert adjacent_tiers("$$") == ("$", "$$$")
    assert adjacent_tiers("$$$$") == ("$$$",)
    assert adjacent_tiers("Any") == ()


class TestCandidateStoreAdapter:
    def test_exact_match_is_not_relaxed(self):
        fake = FakeStore([make_candidate(1)])
        fetched = CandidateStoreAdapter(fake).fetch(
            RequestSignals(occasion="Date Night", area="Wicker Park", budget="$$"), 30
        )
        assert _ids(fetched.candidates) == [cid(1)]
        assert not fetched.relaxed
        assert not fetched.degraded
        assert len(fake.calls) == 1

    def test_budget_widens_to_adjacent_tiers_first(self):
        fake = FakeStore([
            make_candidate(1, price_tier="$$$", date_friendly_score=6.0),
            make_candidate(2, price_tier="$", date_friendly_score=8.0),
        ])
        fetched = CandidateStoreAdapter(fake).fetch(
            RequestSignals(occasion="Date Night", area="Wicker Park", budget="$$"), 30
        )
        assert fetched.relaxed
        assert _ids(fetched.candidates) == [cid(2), cid(1)]
        assert [call[1] for call in fake.calls] == ["$$", "$", "$$$"]

    def test_budget_dropped_when_adjacent_tiers_empty(self):
        fake = FakeStore([make_candidate(1, price_tier="$$$$")])
        fetched = CandidateStoreAdapter(fake).fetch(
            RequestSignals(occasion="Date Night", area="Wicker Park", budget="$"), 30
        )
        assert fetched.relaxed
        assert _ids(fetched.candidates) == [cid(1)]
        assert [call[1] for call in fake.calls] == ["$", "$$", "Any"]

    def test_area_dropped_last(self):
        fake = FakeStore([make_candidate(1, area="Logan Square")])
        fetched = CandidateStoreAdapter(fake).fetch(
            RequestSignals(occasion="Date Night", area="Pilsen", budget="$$"), 30
        )
        assert fetched.relaxed
        assert _ids(fetched.candidates) == [cid(1)]
        assert fake.calls[-1][:2] == ("Anywhere", "Any")

    def test_empty_store_is_empty_fetch(self):
        fetched = CandidateStoreAdapter(FakeStore([])).fetch(RequestSignals(occasion="Any"), 30)
        assert fetched.candidates == []
        assert not fetched.relaxed

    def test_cuisine_hint_is_forwarded(self):
        fake = FakeStore([make_candidate(1)])
        CandidateStoreAdapter(fake).fetch(RequestSignals(occasion="Any"), 30, cuisine_hint="Thai")
        assert fake.calls[0][4] == "Thai"

    def test_degraded_bulk_fallback(self, tmp_path):
        class BrokenRankedStore(FrameCandidateStore):
            def ranked_candidates(self, *args, **kwargs):
                raise OSError("ranked read offline")

        write_tables(
            tmp_path,
            [restaurant_row(1), restaurant_row(2, noise_level=None), restaurant_row(3, price_tier="$$$")],
            [score_row(1, date=5.0), score_row(2, date=9.0), score_row(3, date=7.0)],
        )
        fetched = CandidateStoreAdapter(BrokenRankedStore(tmp_path)).fetch(
            RequestSignals(occasion="Date Night", area="Wicker Park", budget="$$"), 30
        )
        assert fetched.degraded
        assert _ids(fetched.candidates) == [cid(1)]

    def test_both_paths_failing_raises(self):
        adapter = CandidateStoreAdapter(FakeStore([make_candidate(1)], fail=True))
        with pytest.raises(CandidateStoreError):
            adapter.fetch(RequestSignals(occasion="Any"), 30)

    def test_area_description(self):
        adapter = CandidateStoreAdapter(FakeStore([]))
        candidates = [make_candidate(1, area_description="Six corners")]
        assert adapter.area_description(candidates, "wicker park") == "Six corners"
        assert adapter.area_description(candidates, "Anywhere") is None


# ---------------------------------------------------------------------------
# Degraded ranking
# ---------------------------------------------------------------------------


class TestFallbackRank:
    def test_drops_unusable_rows(self):
        pool = [make_candidate(1, noise_level=None), make_candidate(2, is_active=False), make_candidate(3)]
        ranked = fallback_rank(pool, RequestSignals(occasion="Any"), 10)
        assert _ids(ranked) == [cid(3)]

    def test_unknown_area_keeps_everything(self):
        pool = [make_candidate(1, area="Logan Square"), make_candidate(2, area="Pilsen")]
        ranked = fallback_rank(pool, RequestSignals(occasion="Any", area="Hyde Park"), 10)
        assert len(ranked) == 2

    def test_budget_prefers_exact_then_adjacent(self):
        pool = [
            make_candidate(1, price_tier="$"),
            make_candidate(2, price_tier="$$$$"),
        ]
        ranked = fallback_rank(pool, RequestSignals(occasion="Any", budget="$$"), 10)
        assert _ids(ranked) == [cid(1)]

    def test_orders_by_composite(self):
        pool = [
            make_candidate(1, date_friendly_score=4.0),
            make_candidate(2, date_friendly_score=9.0),
            make_candidate(3, date_friendly_score=6.0, cuisine="Mexican"),
        ]
        ranked = fallback_rank(pool, RequestSignals(occasion="Date Night", free_text="tacos"), 2)
        # taco boost lifts 3 over 1 but not over 2
        assert _ids(ranked) == [cid(2), cid(3)]
