"""
Subject & Language Overlap Factors

Share of the student's wanted items that the scribe covers.
"""

from typing import Sequence

from scribe_match.domain.scoring.interfaces import BaseScoringFactor, MatchContext


def overlap_ratio(wanted: Sequence[str], offered: Sequence[str]) -> float:
    """
    |wanted ∩ offered| / |wanted| * 100.

    Returns 0 when nothing is wanted, never NaN.
    """
    wanted_set = set(wanted)
    if not wanted_set:
        return 0.0
    return len(wanted_set & set(offered)) / len(wanted_set) * 100


def subject_match(student_subjects: Sequence[str], scribe_subjects: Sequence[str]) -> float:
    return overlap_ratio(student_subjects, scribe_subjects)


def language_match(student_languages: Sequence[str], scribe_languages: Sequence[str]) -> float:
    return overlap_ratio(student_languages, scribe_languages)


class SubjectMatchFactor(BaseScoringFactor):
    """
    Subject coverage scoring factor.

    Weight: 15% base
    """

    @property
    def name(self) -> str:
        return "subject_match"

    @property
    def default_weight(self) -> float:
        return 0.15

    def calculate(self, context: MatchContext) -> float:
        return subject_match(
            context.student.preferred_subjects,
            context.scribe.subjects,
        )


class LanguageMatchFactor(BaseScoringFactor):
    """
    Language coverage scoring factor.

    Weight: 15% base
    """

    @property
    def name(self) -> str:
        return "language_match"

    @property
    def default_weight(self) -> float:
        return 0.15

    def calculate(self, context: MatchContext) -> float:
        return language_match(
            context.student.language_preferences,
            context.scribe.languages,
        )
