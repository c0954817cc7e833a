"""
Unit tests for scoring factors.

Tests the per-axis factor functions and their BaseScoringFactor wrappers.
"""

from datetime import date

import pytest

from scribe_match.domain.scoring.interfaces import MatchContext
from scribe_match.domain.scoring.factors import (
    AvailabilityFactor,
    ExperienceFactor,
    LanguageMatchFactor,
    LocationFactor,
    PreferenceFactor,
    RatingFactor,
    SubjectMatchFactor,
    availability_match,
    experience_match,
    language_match,
    location_match,
    preference_match,
    rating_match,
    subject_match,
)


# ============== Test Fixtures ==============

@pytest.fixture
def context(student, exam, make_scribe):
    """Context for the strong candidate at 5 km."""
    return MatchContext(
        student=student,
        exam=exam,
        scribe=make_scribe(),
        distance_km=5.0,
        max_distance_km=25.0,
        is_available=True,
    )


# ============== Subject & Language Tests ==============

class TestOverlapFactors:
    """Tests for subject and language overlap."""

    def test_identical_sets_score_full(self):
        assert subject_match(["mathematics", "physics"], ["mathematics", "physics"]) == 100.0

    def test_empty_scribe_list_scores_zero(self):
        assert subject_match(["mathematics"], []) == 0.0

    def test_empty_student_list_scores_zero_not_nan(self):
        assert language_match([], ["english"]) == 0.0

    def test_partial_overlap(self):
        assert subject_match(["mathematics", "chemistry"], ["mathematics"]) == 50.0

    def test_extra_scribe_subjects_do_not_dilute(self):
        assert subject_match(["mathematics"], ["mathematics", "physics", "arts"]) == 100.0

    def test_duplicates_count_once(self):
        assert language_match(["english", "english"], ["english"]) == 100.0

    def test_bounds(self):
        for offered in ([], ["a"], ["a", "b"], ["c"], ["a", "b", "c", "d"]):
            score = subject_match(["a", "b", "c"], offered)
            assert 0.0 <= score <= 100.0, f"Overlap score {score} out of range for {offered}"

    def test_zero_overlap_scenario(self, context, make_scribe):
        """Arts-only scribe for a mathematics student scores 0 on subjects."""
        context.scribe = make_scribe(subjects=["arts"])
        assert SubjectMatchFactor().calculate(context) == 0.0

    def test_no_preferred_subjects_scores_zero(self, context, make_scribe):
        """Nothing wanted means 0, even when the scribe teaches the exam subject."""
        context.student = context.student.model_copy(update={"preferred_subjects": []})
        context.scribe = make_scribe(subjects=["mathematics"])
        assert SubjectMatchFactor().calculate(context) == 0.0

    def test_exam_subject_is_not_added_to_preferences(self, context, make_scribe):
        """Preferred mathematics, chemistry exam, mathematics scribe: full overlap."""
        context.exam = context.exam.model_copy(update={"subject": "chemistry"})
        context.scribe = make_scribe(subjects=["mathematics"])
        assert SubjectMatchFactor().calculate(context) == 100.0

    def test_language_factor_uses_student_preferences(self, context):
        assert LanguageMatchFactor().calculate(context) == 100.0


# ============== Experience Tests ==============

class TestExperienceFactor:
    """Tests for the experience step function."""

    @pytest.mark.parametrize("years,expected", [
        (0, 40.0),
        (0.9, 40.0),
        (1, 60.0),
        (2.5, 60.0),
        (3, 80.0),
        (4.99, 80.0),
        (5, 100.0),
        (12, 100.0),
    ])
    def test_tiers(self, years, expected):
        assert experience_match(years) == expected, f"{years} years should score {expected}"

    def test_factor_reads_scribe_years(self, context):
        assert ExperienceFactor().calculate(context) == 100.0


# ============== Rating Tests ==============

class TestRatingFactor:
    """Tests for rating scaling."""

    def test_perfect_rating(self):
        assert rating_match([5, 5, 5]) == 100.0

    def test_mean_is_scaled(self):
        assert rating_match([5.0, 4.6]) == pytest.approx(96.0)

    def test_no_ratings_score_zero(self):
        """A new scribe scores 0 here; presenting them as "new" is a UI concern."""
        assert rating_match([]) == 0.0

    def test_factor_reads_scribe_ratings(self, context, make_scribe):
        context.scribe = make_scribe(ratings=[])
        assert RatingFactor().calculate(context) == 0.0


# ============== Location Tests ==============

class TestLocationFactor:
    """Tests for the linear distance falloff."""

    def test_zero_distance_is_full(self):
        assert location_match(0.0, 25.0) == 100.0

    def test_five_km_of_twenty_five(self):
        assert location_match(5.0, 25.0) == pytest.approx(80.0)

    def test_at_cap_is_zero(self):
        assert location_match(25.0, 25.0) == 0.0

    def test_beyond_cap_is_clamped(self):
        """15 km against a 10 km cap never goes negative."""
        assert location_match(15.0, 10.0) == 0.0

    def test_non_positive_cap(self):
        assert location_match(1.0, 0.0) == 0.0

    def test_monotonic_in_distance(self):
        scores = [location_match(d, 25.0) for d in range(0, 40)]
        assert scores == sorted(scores, reverse=True), "Location score must not increase with distance"

    def test_factor_uses_context_cap(self, context):
        context.max_distance_km = 10.0
        context.distance_km = 15.0
        assert LocationFactor().calculate(context) == 0.0


# ============== Availability Tests ==============

class TestAvailabilityFactor:

    def test_binary(self):
        assert availability_match(True) == 100.0
        assert availability_match(False) == 0.0

    def test_factor_reads_context(self, context):
        context.is_available = False
        assert AvailabilityFactor().calculate(context) == 0.0


# ============== Preference Tests ==============

class TestPreferenceFactor:
    """Tests for the soft age-range preference."""

    def test_within_range(self):
        assert preference_match(30, (25, 35)) == 100.0

    def test_outside_range_is_penalized(self):
        assert preference_match(45, (25, 35)) == 80.0

    def test_unknown_age_is_not_penalized(self):
        assert preference_match(None, (25, 35)) == 100.0

    def test_not_applicable_without_age_range(self, context):
        assert PreferenceFactor().is_applicable(context) is False

    def test_not_applicable_without_date_of_birth(self, context, make_scribe):
        context.student = context.student.model_copy(update={"scribe_age_range": (20, 30)})
        context.scribe = make_scribe(date_of_birth=None)
        assert PreferenceFactor().is_applicable(context) is False

    def test_age_measured_at_exam_date(self, context, make_scribe):
        """Scribe turns 31 after the exam, so they are still 30 on the day."""
        context.student = context.student.model_copy(update={"scribe_age_range": (25, 30)})
        context.scribe = make_scribe(date_of_birth=date(1995, 6, 15))
        factor = PreferenceFactor()
        assert factor.is_applicable(context) is True
        assert factor.calculate(context) == 100.0


# ============== Weight Overrides ==============

class TestFactorWeights:

    def test_default_weight(self):
        assert LocationFactor().base_weight == 0.25

    def test_override_weight(self):
        assert LocationFactor(0.5).base_weight == 0.5

    def test_zero_override_is_respected(self):
        assert RatingFactor(0.0).base_weight == 0.0
