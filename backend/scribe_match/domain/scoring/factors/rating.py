"""
Rating Factor
"""

from typing import Sequence

from scribe_match.domain.models import MAX_RATING
from scribe_match.domain.scoring.interfaces import BaseScoringFactor, MatchContext


def rating_match(ratings: Sequence[float]) -> float:
    """
    Mean star rating scaled to 0-100.

    A scribe with no ratings scores 0 here; display layers show "new".
    """
    if not ratings:
        return 0.0
    mean = sum(ratings) / len(ratings)
    return min(100.0, max(0.0, mean / MAX_RATING * 100))


class RatingFactor(BaseScoringFactor):
    """
    Historical rating scoring factor.

    Weight: 10% base
    """

    @property
    def name(self) -> str:
        return "rating_match"

    @property
    def default_weight(self) -> float:
        return 0.10

    def calculate(self, context: MatchContext) -> float:
        return rating_match(context.scribe.ratings)
