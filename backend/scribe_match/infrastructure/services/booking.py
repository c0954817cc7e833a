"""
Booking Hand-off

When the student commits to a candidate, the chosen match and exam are
packaged into a BookingRequest for the external booking service.
The engine never creates or persists bookings itself.
"""

from datetime import datetime, timezone
from typing import Any, Protocol

from pydantic import BaseModel, Field

from scribe_match.domain.models import ExamRequest, MatchResult, StudentProfile


class BookingRequest(BaseModel):
    """Payload handed to the booking collaborator."""
    student_id: str
    scribe_id: str
    scribe_name: str
    exam: ExamRequest
    match_score: float
    distance_km: float
    estimated_travel_time_minutes: int
    requested_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class BookingGateway(Protocol):
    """External booking-creation service."""

    async def create_booking(self, request: BookingRequest) -> Any:
        ...


def build_booking_request(
    student: StudentProfile,
    exam: ExamRequest,
    result: MatchResult,
) -> BookingRequest:
    return BookingRequest(
        student_id=student.id,
        scribe_id=result.scribe.id,
        scribe_name=result.scribe.name,
        exam=exam,
        match_score=result.score,
        distance_km=round(result.distance_km, 2),
        estimated_travel_time_minutes=result.estimated_travel_time_minutes,
    )
