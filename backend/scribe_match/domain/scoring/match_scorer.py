"""
Match Scorer

Central scoring engine that aggregates all factor scores.
Implements dynamic weight normalization when factors are not applicable.
"""

from typing import Dict, List, Mapping, Optional

from scribe_match.domain.scoring.interfaces import (
    MatchContext,
    ScoreBreakdown,
    ScoringFactor,
)
from scribe_match.domain.scoring.factors import (
    AvailabilityFactor,
    ExperienceFactor,
    LanguageMatchFactor,
    LocationFactor,
    PreferenceFactor,
    RatingFactor,
    SubjectMatchFactor,
)


class MatchScorer:
    """
    Scribe compatibility scoring engine.

    Follows Single Responsibility - only calculates scores.
    Uses Strategy pattern for pluggable factors.
    The composite score is a function of the factor vector only.
    """

    def __init__(
        self,
        factors: Optional[List[ScoringFactor]] = None,
        weights: Optional[Mapping[str, float]] = None,
    ):
        """
        Initialize scorer with factors.

        Args:
            factors: List of scoring factors. If None, uses defaults.
            weights: Optional base weight overrides keyed by factor name
                (ignored when explicit factors are given).
        """
        self._factors = factors or self._default_factors(weights or {})

    @property
    def factors(self) -> List[ScoringFactor]:
        return list(self._factors)

    def _default_factors(self, weights: Mapping[str, float]) -> List[ScoringFactor]:
        """Get default scoring factors."""
        return [
            LocationFactor(weights.get("location_match")),
            AvailabilityFactor(weights.get("availability_match")),
            SubjectMatchFactor(weights.get("subject_match")),
            LanguageMatchFactor(weights.get("language_match")),
            ExperienceFactor(weights.get("experience_match")),
            RatingFactor(weights.get("rating_match")),
            PreferenceFactor(weights.get("preference_match")),
        ]

    def score(self, context: MatchContext) -> ScoreBreakdown:
        """
        Score a single (student, exam, scribe) pair.

        Args:
            context: Resolved match context

        Returns:
            ScoreBreakdown with per-factor scores and the composite
        """
        applicable_factors = self._get_applicable_factors(context)
        normalized_weights = self._normalize_weights(applicable_factors)

        factor_scores: Dict[str, float] = {}
        for factor in applicable_factors:
            factor_scores[factor.name] = _clamp(factor.calculate(context))

        total_score = sum(
            factor_scores[f.name] * normalized_weights[f.name]
            for f in applicable_factors
        )

        return ScoreBreakdown(
            factor_scores=factor_scores,
            weights_used=normalized_weights,
            composite=round(_clamp(total_score), 1),
        )

    def _get_applicable_factors(self, context: MatchContext) -> List[ScoringFactor]:
        """Get factors that apply to this pair."""
        return [f for f in self._factors if f.is_applicable(context)]

    def _normalize_weights(self, factors: List[ScoringFactor]) -> Dict[str, float]:
        """
        Normalize weights so they sum to 1.0.

        Dynamic normalization: if a factor doesn't apply,
        its weight is redistributed proportionally.
        """
        total_weight = sum(f.base_weight for f in factors)

        if total_weight == 0:
            equal_weight = 1.0 / len(factors) if factors else 0
            return {f.name: equal_weight for f in factors}

        return {
            f.name: f.base_weight / total_weight
            for f in factors
        }


def _clamp(value: float) -> float:
    return min(100.0, max(0.0, value))
