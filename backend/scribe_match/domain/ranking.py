"""
Ranking Policies

Total orders over MatchResult selectable at query time. All orderings use
Python's stable sort, so ties keep the evaluator's insertion order.
"""

from enum import Enum
from typing import Iterable, List

from scribe_match.domain.models import MatchResult


class RankingPolicy(str, Enum):
    """Available result orderings."""
    SCORE = "score"
    DISTANCE = "distance"
    RATING = "rating"
    EXPERIENCE = "experience"


def _rating_key(result: MatchResult):
    rating = result.scribe.average_rating
    # Unrated scribes sort after every rated one
    return (rating is None, -(rating or 0.0))


_SORT_KEYS = {
    RankingPolicy.SCORE: lambda r: -r.score,
    RankingPolicy.DISTANCE: lambda r: r.distance_km,
    RankingPolicy.RATING: _rating_key,
    RankingPolicy.EXPERIENCE: lambda r: -r.scribe.years_of_experience,
}


def rank_results(
    results: Iterable[MatchResult],
    policy: RankingPolicy = RankingPolicy.SCORE,
) -> List[MatchResult]:
    """Return a new list ordered by the given policy."""
    return sorted(results, key=_SORT_KEYS[RankingPolicy(policy)])
