"""
Experience Factor

Step function over years of scribing experience.
"""

from scribe_match.domain.scoring.interfaces import BaseScoringFactor, MatchContext


# (minimum years, score), checked top-down
EXPERIENCE_TIERS = (
    (5, 100.0),
    (3, 80.0),
    (1, 60.0),
)
NEW_SCRIBE_SCORE = 40.0


def experience_match(years_of_experience: float) -> float:
    """
    Map years to a tier score.

    Tiers are discrete: differences under a year are treated as noise.
    """
    for min_years, score in EXPERIENCE_TIERS:
        if years_of_experience >= min_years:
            return score
    return NEW_SCRIBE_SCORE


class ExperienceFactor(BaseScoringFactor):
    """
    Experience scoring factor.

    Weight: 10% base
    """

    @property
    def name(self) -> str:
        return "experience_match"

    @property
    def default_weight(self) -> float:
        return 0.10

    def calculate(self, context: MatchContext) -> float:
        return experience_match(context.scribe.years_of_experience)
