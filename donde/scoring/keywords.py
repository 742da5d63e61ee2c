"""
Keyword lookups over lower-cased free text.

Matching is plain substring containment, so "view" also fires on "overview".
That looseness is accepted; the tables are tuned around it.
"""
from __future__ import annotations

import logging
import re

from ..recommendations.models import Candidate
from .vocabulary import (
    CUISINE_KEYWORDS,
    DIETARY_KEYWORDS,
    FEATURE_KEYWORDS,
    FLAVOR_KEYWORDS,
    GOOD_FOR_KEYWORDS,
    INTENT_MAP,
    STOP_WORDS,
    TAG_KEYWORDS,
    IntentSignal,
    known_phrases,
)

logger = logging.getLogger(__name__)

_KNOWN_PHRASES = known_phrases()
_WORD_SPLIT_RE = re.compile(r"\s+")


def mentions(text: str, keywords: tuple[str, ...]) -> bool:
    return any(kw in text for kw in keywords)


def requested_cuisine(text: str) -> str | None:
    """First cuisine whose keywords appear in ``text``; later ones are ignored."""
    for cuisine, keywords in CUISINE_KEYWORDS.items():
        if mentions(text, keywords):
            return cuisine
    return None


def same_cuisine(a: str | None, b: str | None) -> bool:
    return bool(a and b and a.lower() == b.lower())


def requested_tags(text: str) -> list[str]:
    return [tag for tag, keywords in TAG_KEYWORDS.items() if mentions(text, keywords)]


def requested_features(text: str) -> list[str]:
    return [f for f, keywords in FEATURE_KEYWORDS.items() if mentions(text, keywords)]


def has_tag(candidate: Candidate, tag: str) -> bool:
    needle = tag.lower()
    return any(needle in t.lower() for t in candidate.tag_texts)


def requested_dietary(text: str) -> list[str]:
    return [kw for kw in DIETARY_KEYWORDS if kw in text]


def offers_dietary(candidate: Candidate, keyword: str) -> bool:
    wanted = [v.lower() for v in DIETARY_KEYWORDS.get(keyword, ())]
    return any(
        w in option.lower()
        for option in candidate.dietary_options
        for w in wanted
    )


def requested_good_for(text: str) -> list[str]:
    return [kw for kw in GOOD_FOR_KEYWORDS if kw in text]


def good_for_matches(candidate: Candidate, keyword: str) -> bool:
    wanted = [v.lower() for v in GOOD_FOR_KEYWORDS.get(keyword, ())]
    return any(w in gf.lower() for gf in candidate.good_for for w in wanted)


def intent_hits(text: str) -> list[tuple[str, IntentSignal]]:
    return [(phrase, signal) for phrase, signal in INTENT_MAP.items() if phrase in text]


def requested_flavors(text: str) -> list[str]:
    """Flavor descriptors implied by mood words in ``text``, de-duplicated in order."""
    flavors: list[str] = []
    for word, descriptors in FLAVOR_KEYWORDS.items():
        if word in text:
            for d in descriptors:
                if d not in flavors:
                    flavors.append(d)
    return flavors


def extract_unmatched_keywords(free_text: str) -> list[str]:
    """
    Words in a craving that no lookup table reacts to.

    Logged with request outcomes so gaps in the tables can be spotted.
    """
    if not free_text or len(free_text.strip()) < 3:
        return []
    words = [
        w for w in _WORD_SPLIT_RE.split(free_text.lower())
        if len(w) > 2 and w not in STOP_WORDS
    ]
    unmatched = [
        w for w in words
        if not any(known in w or w in known for known in _KNOWN_PHRASES)
    ]
    if unmatched:
        logger.debug("Unmatched craving words: %s", unmatched)
    return unmatched
