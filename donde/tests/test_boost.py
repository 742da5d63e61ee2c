from __future__ import annotations

import pytest

from donde.intent.models import IntentClassification
from donde.scoring.boost import (
    _intent_dictionary_boost,
    analyze_rejections,
    compute_boost,
    rerank,
)
from donde.scoring.context import RejectionSignals, RequestSignals
from donde.tests.helpers import cid, make_candidate


def _signals(text="", **kwargs) -> RequestSignals:
    return RequestSignals(occasion=kwargs.pop("occasion", "Date Night"), free_text=text, **kwargs)


class TestRejections:
    def test_single_exclusion_carries_no_signal(self):
        pool = [make_candidate(1, cuisine="Thai")]
        signals = analyze_rejections([cid(1)], pool)
        assert not signals.active
        assert signals.rejected_count == 1

    def test_repeated_cuisine_becomes_avoided(self):
        pool = [
            make_candidate(1, cuisine="Thai", price_tier="$"),
            make_candidate(2, cuisine="Thai", price_tier="$$"),
            make_candidate(3, cuisine="Italian"),
        ]
        signals = analyze_rejections([cid(1), cid(2)], pool)
        assert signals.avoid_cuisines == ("Thai",)
        assert signals.avoid_price_tiers == ()
        assert signals.rejected_count == 2

    def test_exclusions_missing_from_pool_are_ignored(self):
        pool = [make_candidate(1, cuisine="Thai")]
        signals = analyze_rejections([cid(1), cid(9)], pool)
        assert not signals.active

    def test_threshold_is_configurable(self):
        pool = [make_candidate(n, cuisine="Thai") for n in (1, 2, 3)]
        assert not analyze_rejections([cid(1), cid(2)], pool, threshold=3).active
        assert analyze_rejections([cid(1), cid(2), cid(3)], pool, threshold=3).active


class TestComputeBoost:
    def test_no_text_no_rejections_is_zero(self):
        assert compute_boost(make_candidate(1), _signals()) == 0.0

    def test_rejection_penalty_applies_without_text(self):
        rejections = RejectionSignals(avoid_cuisines=("Thai",), avoid_price_tiers=("$$",), rejected_count=2)
        thai = make_candidate(1, cuisine="Thai", price_tier="$$")
        italian = make_candidate(2, cuisine="Italian", price_tier="$$$")
        assert compute_boost(thai, _signals(rejections=rejections)) == pytest.approx(-3.0)
        assert compute_boost(italian, _signals(rejections=rejections)) == 0.0

    def test_cuisine_keyword(self):
        taqueria = make_candidate(1, cuisine="Mexican")
        diner = make_candidate(2, cuisine="American")
        signals = _signals("craving tacos")
        assert compute_boost(taqueria, signals) == pytest.approx(3.0)
        assert compute_boost(diner, signals) == 0.0

    def test_tag_and_feature_keywords(self):
        rooftop = make_candidate(1, tags=["scenic view"], outdoor_seating=True)
        assert compute_boost(rooftop, _signals("something with a view")) == pytest.approx(3.0)

    def test_dietary_and_good_for(self):
        c = make_candidate(1, dietary_options=["Vegan Options"], good_for=["Groups"])
        plain = make_candidate(2)
        signals = _signals("vegan group")
        assert compute_boost(c, signals) - compute_boost(plain, signals) == pytest.approx(3.0)

    def test_time_of_day(self):
        brunch_only = make_candidate(1, best_times=["breakfast"])
        dinner_spot = make_candidate(2, best_times=["dinner"])
        all_day = make_candidate(3, best_times=["breakfast", "lunch", "dinner"])
        signals = _signals("anything works", time_of_day="late_night")
        assert compute_boost(brunch_only, signals) == pytest.approx(-1.0)
        assert compute_boost(dinner_spot, _signals("anything works", time_of_day="dinner")) == pytest.approx(1.5)
        assert compute_boost(all_day, signals) == 0.0

    def test_classified_intent(self):
        intent = IntentClassification(target_cuisines=["Ethiopian"], cuisine_importance="high")
        signals = _signals("anything works", intent=intent)
        assert compute_boost(make_candidate(1, cuisine="Ethiopian"), signals) == pytest.approx(5.0)
        assert compute_boost(make_candidate(2, cuisine="American"), signals) == pytest.approx(-2.0)

    def test_intent_dictionary_diminishes(self):
        c = make_candidate(1, tags=["rooftop", "scenic view"])
        # Two phrases hit the same two tags: 0.5 + 0.5, then 0.25 + 0.25
        assert _intent_dictionary_boost(c, "rooftop skyline") == pytest.approx(1.5)


class TestRerank:
    def test_noop_without_signals(self):
        low = make_candidate(1, date_friendly_score=2.0)
        high = make_candidate(2, date_friendly_score=9.0)
        assert rerank([low, high], _signals()) == [low, high]

    def test_trending_alone_triggers_sort(self):
        low = make_candidate(1, date_friendly_score=2.0, trending_score=1.0)
        high = make_candidate(2, date_friendly_score=9.0)
        assert rerank([low, high], _signals()) == [high, low]

    def test_boost_lifts_matching_cuisine(self):
        diner = make_candidate(1, cuisine="American", date_friendly_score=8.0)
        taqueria = make_candidate(2, cuisine="Mexican", date_friendly_score=7.0)
        assert rerank([diner, taqueria], _signals("craving tacos"))[0] is taqueria

    def test_rejected_cuisine_sinks(self):
        rejections = RejectionSignals(avoid_cuisines=("Thai",), rejected_count=2)
        thai = make_candidate(1, cuisine="Thai", date_friendly_score=8.0)
        diner = make_candidate(2, cuisine="American", date_friendly_score=7.0)
        assert rerank([thai, diner], _signals(rejections=rejections)) == [diner, thai]
