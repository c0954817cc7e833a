"""
Test configuration and fixtures for Scribe Match.

Provides shared fixtures for unit and integration tests.
"""

import asyncio
from datetime import date, time
from typing import Dict, Optional, Set

import pytest
from fastapi.testclient import TestClient

from scribe_match.domain.models import (
    ExamRequest,
    MatchFactors,
    MatchResult,
    ScribeAvailability,
    ScribeProfile,
    StudentProfile,
    TimeSlot,
)
from scribe_match.infrastructure.availability.probe import AvailabilityProbe


# Monday. The default scribe declares Monday and Wednesday 09:00-17:00.
EXAM_DATE = date(2026, 3, 2)
STUDENT_LAT = 19.0760
STUDENT_LON = 72.8777

# Kilometres per degree of latitude on the haversine sphere (R = 6371 km)
KM_PER_DEGREE = 111.19492664455873


def north_of_student(km: float) -> Dict[str, float]:
    """Location `km` kilometres due north of the sample student."""
    return {"latitude": STUDENT_LAT + km / KM_PER_DEGREE, "longitude": STUDENT_LON}


# =============================================================================
# Stub Collaborators
# =============================================================================

class StubProbe(AvailabilityProbe):
    """
    Configurable availability probe.

    available: default answer for every scribe
    unavailable: scribe ids that are busy
    delays: per-scribe sleep before answering (seconds)
    failing: scribe ids whose lookup raises
    """

    def __init__(self):
        self.available = True
        self.unavailable: Set[str] = set()
        self.delays: Dict[str, float] = {}
        self.failing: Set[str] = set()
        self.next_slot: Optional[date] = None
        self.calls = 0

    async def is_available(self, scribe, exam_date, start_time, duration_minutes=180):
        self.calls += 1
        delay = self.delays.get(scribe.id)
        if delay:
            await asyncio.sleep(delay)
        if scribe.id in self.failing:
            raise RuntimeError(f"calendar unreachable for {scribe.id}")
        return self.available and scribe.id not in self.unavailable

    async def next_available_slot(self, scribe, after):
        return self.next_slot


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Get the FastAPI application."""
    from scribe_match.main import app
    return app


@pytest.fixture
def client(app):
    """Synchronous test client with a fresh session registry per test."""
    from scribe_match.api.dependencies import get_session_registry
    from scribe_match.infrastructure.services.matching_session import MatchingSessionRegistry

    registry = MatchingSessionRegistry()
    app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def student():
    """Student wanting a mathematics scribe who speaks English, 25 km cap."""
    return StudentProfile(
        id="stu-1",
        name="Ravi Kumar",
        location={"latitude": STUDENT_LAT, "longitude": STUDENT_LON},
        preferred_subjects=["Mathematics"],
        language_preferences=["English"],
        max_travel_distance_km=25.0,
    )


@pytest.fixture
def exam():
    """Three-hour written mathematics exam at 10:00 on a Monday."""
    return ExamRequest(
        subject="mathematics",
        exam_date=EXAM_DATE,
        start_time=time(10, 0),
        duration_minutes=180,
        venue="Exam Hall B",
    )


@pytest.fixture
def weekday_availability():
    """Monday and Wednesday, 09:00-17:00."""
    return ScribeAvailability(
        days_available=["monday", "wednesday"],
        time_slots=[
            TimeSlot(day_of_week=0, start_time=time(9, 0), end_time=time(17, 0)),
            TimeSlot(day_of_week=2, start_time=time(9, 0), end_time=time(17, 0)),
        ],
        exam_types_willing=["written", "oral"],
    )


@pytest.fixture
def make_scribe(weekday_availability):
    """
    Factory for scribe profiles.

    Defaults describe the strong candidate: mathematics/physics, English/Hindi,
    5 km away, 5 years, 4.8 average rating, verified.
    """
    def _make(scribe_id: str = "scr-1", km: float = 5.0, **overrides) -> ScribeProfile:
        data = {
            "id": scribe_id,
            "name": "Asha Rao",
            "gender": "female",
            "date_of_birth": date(1995, 6, 15),
            "location": north_of_student(km),
            "subjects": ["mathematics", "physics"],
            "languages": ["english", "hindi"],
            "years_of_experience": 5,
            "total_exams_scribed": 42,
            "ratings": [5.0, 4.6],
            "availability": weekday_availability,
            "is_verified": True,
        }
        data.update(overrides)
        return ScribeProfile(**data)

    return _make


@pytest.fixture
def make_result(make_scribe):
    """Factory for MatchResult values used by filter and ranking tests."""
    def _make(
        scribe: Optional[ScribeProfile] = None,
        score: float = 50.0,
        distance_km: Optional[float] = None,
        is_available: bool = True,
        next_available_date: Optional[date] = None,
        exam_date: date = EXAM_DATE,
    ) -> MatchResult:
        scribe = scribe or make_scribe()
        return MatchResult(
            scribe=scribe,
            exam_date=exam_date,
            score=score,
            distance_km=5.0 if distance_km is None else distance_km,
            factors=MatchFactors(),
            estimated_travel_time_minutes=10,
            is_available=is_available,
            next_available_date=next_available_date,
        )

    return _make


@pytest.fixture
def stub_probe():
    """Availability probe that says yes unless configured otherwise."""
    return StubProbe()


@pytest.fixture
def session_payload(student, exam, make_scribe, weekday_availability):
    """JSON body for POST /api/matching/sessions."""
    near = make_scribe("scr-near", km=5.0, name="Asha Rao")
    arts = make_scribe("scr-arts", km=3.0, name="Meera Shah", subjects=["arts"], ratings=[])
    # Willing to travel 50 km, so only the student's distance filter hides them
    far = make_scribe(
        "scr-far",
        km=40.0,
        name="Vikram Joshi",
        availability=weekday_availability.model_copy(update={"max_distance_willing_km": 50.0}),
    )
    return {
        "student": student.model_dump(mode="json"),
        "exam": exam.model_dump(mode="json"),
        "candidates": [s.model_dump(mode="json") for s in (near, arts, far)],
    }
