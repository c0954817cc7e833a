"""
Availability Factor

The calendar lookup happens in the evaluator; this factor only maps
the answer onto the 0-100 scale.
"""

from scribe_match.domain.scoring.interfaces import BaseScoringFactor, MatchContext


def availability_match(is_available: bool) -> float:
    return 100.0 if is_available else 0.0


class AvailabilityFactor(BaseScoringFactor):
    """
    Live availability scoring factor.

    Weight: 20% base
    """

    @property
    def name(self) -> str:
        return "availability_match"

    @property
    def default_weight(self) -> float:
        return 0.20

    def calculate(self, context: MatchContext) -> float:
        return availability_match(context.is_available)
