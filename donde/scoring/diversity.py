from __future__ import annotations

from collections import Counter
from typing import Sequence

from ..recommendations.models import Candidate

_UNKNOWN = "Unknown"


def ensure_diversity(
    top: Sequence[Candidate],
    backfill: Sequence[Candidate],
    *,
    max_per_cuisine: int = 3,
    max_per_area: int = 4,
    protected: int = 3,
    target: int = 10,
) -> list[Candidate]:
    """
    Cap cuisine and area repeats in a ranked list.

    The first ``protected`` positions are kept as-is. Candidates over a cap are
    demoted; the gap is filled from ``backfill`` with candidates that respect
    the caps, then from the demoted ones in their original order. Lists of
    five or fewer come back unchanged.
    """
    if len(top) <= 5:
        return list(top)

    result: list[Candidate] = []
    demoted: list[Candidate] = []
    cuisines: Counter[str] = Counter()
    areas: Counter[str] = Counter()

    def fits(c: Candidate) -> bool:
        return (
            cuisines[c.cuisine or _UNKNOWN] < max_per_cuisine
            and areas[c.area or _UNKNOWN] < max_per_area
        )

    def take(c: Candidate) -> None:
        result.append(c)
        cuisines[c.cuisine or _UNKNOWN] += 1
        areas[c.area or _UNKNOWN] += 1

    for i, candidate in enumerate(top):
        if i < protected or fits(candidate):
            take(candidate)
        else:
            demoted.append(candidate)

    used = {c.id for c in top}
    for candidate in backfill:
        if len(result) >= target:
            break
        if candidate.id in used or not fits(candidate):
            continue
        used.add(candidate.id)
        take(candidate)

    for candidate in demoted:
        if len(result) >= target:
            break
        result.append(candidate)

    return result[:target]
