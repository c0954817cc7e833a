"""
Location Factor

Linear falloff from the student's position to their distance ceiling.
"""

from scribe_match.domain.scoring.interfaces import BaseScoringFactor, MatchContext


def location_match(distance_km: float, max_distance_km: float) -> float:
    """
    100 at zero distance, 0 at or beyond max_distance_km. Never negative.
    """
    if max_distance_km <= 0:
        return 0.0
    return max(0.0, 100.0 - distance_km / max_distance_km * 100)


class LocationFactor(BaseScoringFactor):
    """
    Proximity scoring factor.

    Weight: 25% base
    """

    @property
    def name(self) -> str:
        return "location_match"

    @property
    def default_weight(self) -> float:
        return 0.25

    def calculate(self, context: MatchContext) -> float:
        return min(100.0, location_match(context.distance_km, context.max_distance_km))
