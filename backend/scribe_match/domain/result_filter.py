"""
Result Filter

Pure predicate over MatchResult lists, re-applied whenever the student
changes filter controls. Never triggers re-scoring.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from scribe_match.domain.models import (
    AvailabilityMode,
    ExperienceLevel,
    FilterCriteria,
    GenderPreference,
    MatchResult,
)


# Inclusive (min_years, max_years) bands. The overlap between beginner and
# intermediate (1-2 years) is part of the tier definition.
EXPERIENCE_BANDS = {
    ExperienceLevel.BEGINNER: (0.0, 2.0),
    ExperienceLevel.INTERMEDIATE: (1.0, 5.0),
    ExperienceLevel.EXPERT: (5.0, float("inf")),
}

DAYS_IN_WEEK = 7


def apply_filters(
    results: Iterable[MatchResult],
    criteria: FilterCriteria,
    today: Optional[date] = None,
) -> List[MatchResult]:
    """
    Keep results that satisfy every active criterion, preserving order.

    Args:
        results: Match results from the latest run
        criteria: Current filter state
        today: Reference date for the "today"/"this_week" modes

    Returns:
        New list; the input is not modified
    """
    reference = today or date.today()
    return [r for r in results if matches_criteria(r, criteria, reference)]


def matches_criteria(result: MatchResult, criteria: FilterCriteria, today: date) -> bool:
    """Conjunction of all filter predicates for a single result."""
    scribe = result.scribe

    if result.distance_km > criteria.max_distance_km:
        return False

    if (scribe.average_rating or 0.0) < criteria.min_rating:
        return False

    if criteria.subjects and not set(criteria.subjects) & set(scribe.subjects):
        return False

    if criteria.languages and not set(criteria.languages) & set(scribe.languages):
        return False

    if not _availability_ok(result, criteria.availability, today):
        return False

    if not _experience_ok(scribe.years_of_experience, criteria.experience_level):
        return False

    if (
        criteria.gender_preference != GenderPreference.ANY
        and scribe.gender.value != criteria.gender_preference.value
    ):
        return False

    if criteria.remote_capable and not scribe.availability.remote_capable:
        return False

    if criteria.search_text and not _text_matches(result, criteria.search_text):
        return False

    return True


def _availability_ok(result: MatchResult, mode: AvailabilityMode, today: date) -> bool:
    if mode == AvailabilityMode.ANY:
        return True

    if mode == AvailabilityMode.AVAILABLE_NOW:
        return result.is_available

    available_on = result.available_on
    if available_on is None:
        return False

    if mode == AvailabilityMode.TODAY:
        return available_on == today

    # THIS_WEEK: rolling seven-day window starting today
    return today <= available_on < today + timedelta(days=DAYS_IN_WEEK)


def _experience_ok(years: float, level: ExperienceLevel) -> bool:
    if level == ExperienceLevel.ANY:
        return True
    low, high = EXPERIENCE_BANDS[level]
    return low <= years <= high


def _text_matches(result: MatchResult, text: str) -> bool:
    """Case-insensitive substring match over name, subjects and languages."""
    needle = text.lower()
    scribe = result.scribe
    haystack = [scribe.name.lower(), *scribe.subjects, *scribe.languages]
    return any(needle in field for field in haystack)
