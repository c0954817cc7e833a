"""
Unit tests for domain model validation.
"""

from datetime import date, time

import pytest
from pydantic import ValidationError

from scribe_match.domain.models import (
    AvailabilityMode,
    ExamRequest,
    ExperienceLevel,
    FilterCriteria,
    GenderPreference,
    ScribeAvailability,
    StudentProfile,
    TimeSlot,
)
from scribe_match.domain.result_filter import apply_filters


class TestFilterCriteria:
    """Filters clamp and fall back instead of rejecting."""

    def test_defaults(self):
        criteria = FilterCriteria()
        assert criteria.max_distance_km == 25.0
        assert criteria.min_rating == 0.0
        assert criteria.availability == AvailabilityMode.ANY

    def test_distance_is_clamped(self):
        assert FilterCriteria(max_distance_km=-5).max_distance_km == 0.0
        assert FilterCriteria(max_distance_km=50_000).max_distance_km == 1000.0

    def test_rating_is_clamped(self):
        assert FilterCriteria(min_rating=9).min_rating == 5.0
        assert FilterCriteria(min_rating=-1).min_rating == 0.0

    def test_non_finite_values_use_defaults(self):
        """NaN would make every distance comparison false and disable the filter."""
        criteria = FilterCriteria(max_distance_km=float("nan"), min_rating=float("nan"))
        assert criteria.max_distance_km == 25.0
        assert criteria.min_rating == 0.0
        assert FilterCriteria(max_distance_km=float("inf")).max_distance_km == 25.0

    def test_nan_distance_still_filters(self, make_result):
        criteria = FilterCriteria(max_distance_km=float("nan"))
        far = make_result(distance_km=40.0)
        assert apply_filters([far], criteria) == []

    def test_unknown_modes_fall_back_to_any(self):
        criteria = FilterCriteria(
            availability="tomorrow",
            experience_level="grandmaster",
            gender_preference="robot",
        )
        assert criteria.availability == AvailabilityMode.ANY
        assert criteria.experience_level == ExperienceLevel.ANY
        assert criteria.gender_preference == GenderPreference.ANY

    def test_mode_from_another_field_is_not_accepted(self):
        """Experience levels are not valid availability modes."""
        assert FilterCriteria(availability="expert").availability == AvailabilityMode.ANY

    def test_modes_are_case_insensitive(self):
        assert FilterCriteria(availability="This_Week").availability == AvailabilityMode.THIS_WEEK

    def test_terms_are_normalized(self):
        criteria = FilterCriteria(subjects=[" Mathematics ", "mathematics", ""], search_text="  asha ")
        assert criteria.subjects == ["mathematics"]
        assert criteria.search_text == "asha"

    def test_seeded_from_student(self, student):
        student = student.model_copy(update={
            "max_travel_distance_km": 10.0,
            "scribe_gender_preference": GenderPreference.FEMALE,
        })
        criteria = FilterCriteria.for_student(student)
        assert criteria.max_distance_km == 10.0
        assert criteria.gender_preference == GenderPreference.FEMALE


class TestProfiles:

    def test_student_terms_lowercased(self, student):
        assert student.preferred_subjects == ["mathematics"]
        assert student.language_preferences == ["english"]

    def test_student_age_range_order(self):
        with pytest.raises(ValidationError):
            StudentProfile(
                id="s",
                location={"latitude": 0, "longitude": 0},
                scribe_age_range=(40, 20),
            )

    def test_rejects_out_of_range_rating(self, make_scribe):
        with pytest.raises(ValidationError):
            make_scribe(ratings=[6.0])

    def test_average_rating_none_without_history(self, make_scribe):
        assert make_scribe(ratings=[]).average_rating is None
        assert make_scribe().average_rating == pytest.approx(4.8)

    def test_age_on(self, make_scribe):
        scribe = make_scribe(date_of_birth=date(2000, 3, 3))
        assert scribe.age_on(date(2026, 3, 2)) == 25
        assert scribe.age_on(date(2026, 3, 3)) == 26

    def test_unknown_weekday_rejected(self):
        with pytest.raises(ValidationError):
            ScribeAvailability(days_available=["funday"])

    def test_time_slot_order(self):
        with pytest.raises(ValidationError):
            TimeSlot(day_of_week=0, start_time=time(12, 0), end_time=time(9, 0))


class TestExamRequest:

    def test_window(self, exam):
        assert exam.starts_at.hour == 10
        assert exam.ends_at.hour == 13

    def test_subject_normalized(self):
        exam = ExamRequest(subject=" Physics ", exam_date=date(2026, 3, 2), start_time=time(9, 0))
        assert exam.subject == "physics"
        assert exam.exam_type == "written"

    def test_blank_subject_rejected(self):
        with pytest.raises(ValidationError):
            ExamRequest(subject="  ", exam_date=date(2026, 3, 2), start_time=time(9, 0))

    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError):
            ExamRequest(subject="maths", exam_date=date(2026, 3, 2), start_time=time(9, 0), duration_minutes=0)
