"""
Interest overlap scoring.

Score Formula:
    exact  = |normalized(A) & normalized(B)|
    fuzzy  = 0.5 points per related (A, B) tag pair, from the synonym table
    score  = min(1, (exact + 0.5 * fuzzy) / max(|A|, |B|))

Tags are stripped and lower-cased before both the exact and the fuzzy
comparison, so "Hiking" and "hiking" are the same interest.
"""

import math
from typing import Iterable, Optional, Tuple

from ..configs.tables import ScoringTables
from ..schema import InterestScore

FUZZY_POINTS_PER_PAIR = 0.5
FUZZY_POINT_VALUE = 0.5


def normalize_interests(interests: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """Lower-case, strip, de-duplicate; keeps first-seen order."""
    if not interests:
        return ()
    seen = []
    for tag in interests:
        if not isinstance(tag, str):
            continue
        key = " ".join(tag.strip().lower().split())
        if key and key not in seen:
            seen.append(key)
    return tuple(seen)


class InterestScorer:
    """
    Set-similarity scorer for interest tags with fuzzy partial credit.

    Attributes:
        tables: Scoring tables providing the interest synonym lookup
    """

    def __init__(self, tables: ScoringTables):
        self.tables = tables

    def score(
        self,
        interests_a: Optional[Iterable[str]],
        interests_b: Optional[Iterable[str]]
    ) -> InterestScore:
        """
        Score the overlap between two interest collections.

        Args:
            interests_a: Tags for person A (may be None or empty)
            interests_b: Tags for person B (may be None or empty)

        Returns:
            InterestScore; all zeros if either side has no tags
        """
        tags_a = normalize_interests(interests_a)
        tags_b = normalize_interests(interests_b)
        if not tags_a or not tags_b:
            return InterestScore(exact_matches=0, fuzzy_matches=0, score=0.0)

        set_b = set(tags_b)
        shared = tuple(t for t in tags_a if t in set_b)

        fuzzy_points = 0.0
        for a in tags_a:
            for b in tags_b:
                if a != b and self.tables.are_synonyms(a, b):
                    fuzzy_points += FUZZY_POINTS_PER_PAIR

        total_possible = max(len(tags_a), len(tags_b))
        raw = (len(shared) + FUZZY_POINT_VALUE * fuzzy_points) / total_possible

        return InterestScore(
            exact_matches=len(shared),
            fuzzy_matches=int(math.floor(fuzzy_points)),
            score=min(1.0, raw),
            shared=shared,
        )
