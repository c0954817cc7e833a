"""
Preference Factor

Soft personal preferences that are not hard filters. Currently the
student's preferred scribe age range.
"""

from datetime import date
from typing import Optional, Tuple

from scribe_match.domain.scoring.interfaces import BaseScoringFactor, MatchContext


AGE_MISMATCH_PENALTY = 20.0


def preference_match(
    scribe_age: Optional[int],
    age_range: Optional[Tuple[int, int]],
) -> float:
    """
    Start at 100 and subtract a penalty for each unmet preference.

    Unknown ages or missing preferences are not penalized.
    """
    score = 100.0

    if age_range is not None and scribe_age is not None:
        min_age, max_age = age_range
        if scribe_age < min_age or scribe_age > max_age:
            score -= AGE_MISMATCH_PENALTY

    return max(score, 0.0)


class PreferenceFactor(BaseScoringFactor):
    """
    Personal preference scoring factor.

    Weight: 5% base. Only applies when the student states an age range
    and the scribe's date of birth is known, so it never dilutes the
    score of pairs it cannot judge.
    """

    @property
    def name(self) -> str:
        return "preference_match"

    @property
    def default_weight(self) -> float:
        return 0.05

    def is_applicable(self, context: MatchContext) -> bool:
        return (
            context.student.scribe_age_range is not None
            and context.scribe.date_of_birth is not None
        )

    def calculate(self, context: MatchContext) -> float:
        age = context.scribe.age_on(self._reference_date(context))
        return preference_match(age, context.student.scribe_age_range)

    def _reference_date(self, context: MatchContext) -> date:
        # Age at the exam, not at scoring time, so reruns are deterministic
        return context.exam.exam_date
