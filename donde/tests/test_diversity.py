from __future__ import annotations

from collections import Counter

from donde.scoring.diversity import ensure_diversity
from donde.tests.helpers import make_candidate

CUISINES = ["Thai", "Italian", "Mexican", "Korean", "French", "Greek", "Polish", "Peruvian"]


def _spread(start: int, count: int) -> list:
    return [
        make_candidate(start + i, cuisine=CUISINES[i % len(CUISINES)], area=f"Area {i}")
        for i in range(count)
    ]


def test_small_lists_unchanged():
    top = [make_candidate(n, cuisine="Thai") for n in range(1, 6)]
    assert ensure_diversity(top, _spread(100, 5)) == top


def test_cuisine_cap_with_backfill():
    top = [make_candidate(n, cuisine="American", area=f"Area {n}") for n in range(1, 11)]
    result = ensure_diversity(top, _spread(100, 10))

    assert len(result) == 10
    assert result[:3] == top[:3]
    assert Counter(c.cuisine for c in result)["American"] == 3


def test_area_cap_with_backfill():
    top = [make_candidate(n, cuisine=CUISINES[n % 8], area="Wicker Park") for n in range(1, 11)]
    result = ensure_diversity(top, _spread(100, 10))

    assert len(result) == 10
    assert Counter(c.area for c in result)["Wicker Park"] == 4


def test_protected_head_is_exempt():
    top = [make_candidate(n, cuisine="Thai", area="Wicker Park") for n in range(1, 8)]
    result = ensure_diversity(top, _spread(100, 10), max_per_cuisine=1, max_per_area=1)
    assert result[:3] == top[:3]
    assert all(c.cuisine != "Thai" for c in result[3:])


def test_demoted_readmitted_in_order_when_short():
    top = [make_candidate(n, cuisine="American", area=f"Area {n}") for n in range(1, 9)]
    backfill = [make_candidate(100, cuisine="Thai", area="Area 100")]
    result = ensure_diversity(top, backfill)

    # 3 protected + 1 backfill, then demoted in original order up to the target
    assert [c.id for c in result] == [c.id for c in top[:3] + backfill + top[3:]]


def test_backfill_skips_ids_already_in_top():
    top = [make_candidate(n, cuisine="American", area=f"Area {n}") for n in range(1, 8)]
    result = ensure_diversity(top, top + _spread(100, 5))
    assert len({c.id for c in result}) == len(result)
