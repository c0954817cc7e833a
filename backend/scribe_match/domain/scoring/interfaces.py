"""
Scoring Interfaces for Scribe Match

Defines protocols and data models for the scoring engine.
Follows Interface Segregation and Dependency Inversion principles.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, runtime_checkable

from scribe_match.domain.models import (
    ExamRequest,
    MatchFactors,
    ScribeProfile,
    StudentProfile,
)


@dataclass
class MatchContext:
    """
    Everything a factor may look at for one (student, exam, scribe) pair.

    Distance and availability are resolved by the evaluator before scoring
    so factors stay pure and synchronous.
    """
    student: StudentProfile
    exam: ExamRequest
    scribe: ScribeProfile

    distance_km: float = 0.0
    max_distance_km: float = 25.0
    is_available: bool = False


@dataclass
class ScoreBreakdown:
    """
    Factor scores plus the composite computed from them.

    Single source of truth for both the headline score and the
    per-axis breakdown shown to the student.
    """
    factor_scores: Dict[str, float] = field(default_factory=dict)
    weights_used: Dict[str, float] = field(default_factory=dict)
    composite: float = 0.0

    def to_factors(self) -> MatchFactors:
        """Convert to the MatchFactors value object."""
        return MatchFactors(
            subject_match=self.factor_scores.get("subject_match", 0.0),
            language_match=self.factor_scores.get("language_match", 0.0),
            experience_match=self.factor_scores.get("experience_match", 0.0),
            availability_match=self.factor_scores.get("availability_match", 0.0),
            location_match=self.factor_scores.get("location_match", 0.0),
            rating_match=self.factor_scores.get("rating_match", 0.0),
            preference_match=self.factor_scores.get("preference_match"),
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for API response."""
        return {name: round(score, 1) for name, score in self.factor_scores.items()}


@runtime_checkable
class ScoringFactor(Protocol):
    """
    Protocol for scoring factors.

    Each factor calculates a 0-100 score for a specific aspect.
    Follows Open/Closed principle - new factors can be added easily.
    """

    @property
    def name(self) -> str:
        """Factor name for transparency."""
        ...

    @property
    def base_weight(self) -> float:
        """Base weight (0.0-1.0) before normalization."""
        ...

    def is_applicable(self, context: MatchContext) -> bool:
        """Check if this factor applies to the pair."""
        ...

    def calculate(self, context: MatchContext) -> float:
        """
        Calculate score for this factor.

        Returns: Score from 0-100
        """
        ...


class BaseScoringFactor(ABC):
    """Base class for scoring factors with common functionality."""

    def __init__(self, weight: Optional[float] = None):
        self._weight = weight

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def default_weight(self) -> float:
        pass

    @property
    def base_weight(self) -> float:
        return self.default_weight if self._weight is None else self._weight

    def is_applicable(self, context: MatchContext) -> bool:
        """Default: always applicable. Override for optional factors."""
        return True

    @abstractmethod
    def calculate(self, context: MatchContext) -> float:
        pass
