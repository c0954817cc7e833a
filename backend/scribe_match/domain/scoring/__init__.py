# Scoring module for Scribe Match
from scribe_match.domain.scoring.interfaces import (
    MatchContext,
    ScoreBreakdown,
    ScoringFactor,
    BaseScoringFactor,
)
from scribe_match.domain.scoring.geo import distance_km, travel_time_minutes
from scribe_match.domain.scoring.match_scorer import MatchScorer

__all__ = [
    "MatchContext",
    "ScoreBreakdown",
    "ScoringFactor",
    "BaseScoringFactor",
    "MatchScorer",
    "distance_km",
    "travel_time_minutes",
]
