"""
Matching Routes

Endpoints hosting matching sessions: create, view with filters and
ranking, manual refresh, real-time toggle, selection and close.
Changing filters or ranking never re-runs matching.
"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from scribe_match.config.settings import get_settings
from scribe_match.domain.models import (
    ExamRequest,
    FilterCriteria,
    MatchFactors,
    MatchResult,
    ScribeProfile,
    StudentProfile,
)
from scribe_match.domain.ranking import RankingPolicy
from scribe_match.api.dependencies import (
    get_announcer,
    get_orchestrator,
    get_session_registry,
)
from scribe_match.infrastructure.services.announcements import Announcer
from scribe_match.infrastructure.services.booking import BookingRequest
from scribe_match.infrastructure.services.matching_orchestrator import MatchingOrchestrator
from scribe_match.infrastructure.services.matching_session import (
    MatchingSession,
    MatchingSessionRegistry,
    MatchView,
)


router = APIRouter(prefix="/matching", tags=["matching"])


# ============================================================================
# Request/Response Models
# ============================================================================

class CreateSessionRequest(BaseModel):
    """Start a matching session for one student and exam."""
    student: StudentProfile
    exam: ExamRequest
    candidates: List[ScribeProfile] = Field(default_factory=list)
    criteria: Optional[FilterCriteria] = None
    ranking: RankingPolicy = RankingPolicy.SCORE
    realtime: bool = False


class RankingRequest(BaseModel):
    ranking: RankingPolicy


class RealtimeRequest(BaseModel):
    enabled: bool


class SelectRequest(BaseModel):
    scribe_id: str = Field(..., min_length=1)


class MatchResultResponse(BaseModel):
    """One ranked candidate."""
    scribe_id: str
    name: str
    gender: str
    subjects: List[str]
    languages: List[str]
    years_of_experience: float
    average_rating: Optional[float] = None  # None renders as "new"
    score: float
    distance_km: float
    estimated_travel_time_minutes: int
    is_available: bool
    next_available_date: Optional[date] = None
    match_factors: MatchFactors


class SessionViewResponse(BaseModel):
    """Filtered, ranked results and run status."""
    session_id: str
    status: Optional[str] = None
    is_running: bool
    realtime: bool
    generation: int
    total: int
    shown: int
    results: List[MatchResultResponse]
    criteria: FilterCriteria
    ranking: RankingPolicy
    announcement: Optional[str] = None
    error: Optional[str] = None
    last_updated: Optional[datetime] = None


class SelectResponse(BaseModel):
    booking: BookingRequest
    submitted: bool


def _result_to_response(result: MatchResult) -> MatchResultResponse:
    scribe = result.scribe
    rating = scribe.average_rating
    return MatchResultResponse(
        scribe_id=scribe.id,
        name=scribe.name,
        gender=scribe.gender.value,
        subjects=scribe.subjects,
        languages=scribe.languages,
        years_of_experience=scribe.years_of_experience,
        average_rating=round(rating, 2) if rating is not None else None,
        score=result.score,
        distance_km=round(result.distance_km, 2),
        estimated_travel_time_minutes=result.estimated_travel_time_minutes,
        is_available=result.is_available,
        next_available_date=result.next_available_date,
        match_factors=result.factors,
    )


def _view_to_response(view: MatchView) -> SessionViewResponse:
    return SessionViewResponse(
        session_id=view.session_id,
        status=view.status.value if view.status else None,
        is_running=view.is_running,
        realtime=view.realtime,
        generation=view.generation,
        total=view.total,
        shown=len(view.results),
        results=[_result_to_response(r) for r in view.results],
        criteria=view.criteria,
        ranking=view.ranking,
        announcement=view.announcement,
        error=view.error,
        last_updated=view.last_updated,
    )


# ============================================================================
# Routes
# ============================================================================

@router.post("/sessions", response_model=SessionViewResponse, status_code=201)
async def create_session(
    request: CreateSessionRequest,
    registry: MatchingSessionRegistry = Depends(get_session_registry),
    orchestrator: MatchingOrchestrator = Depends(get_orchestrator),
    announcer: Announcer = Depends(get_announcer),
):
    """
    Open a session and run the initial match.

    The response already contains the first ranked result set.
    """
    settings = get_settings()
    session = registry.add(
        MatchingSession(
            student=request.student,
            exam=request.exam,
            candidates=request.candidates,
            orchestrator=orchestrator,
            criteria=request.criteria,
            ranking=request.ranking,
            announcer=announcer,
            refresh_interval_seconds=settings.refresh_interval_seconds,
            announce_results=settings.announce_results,
        )
    )

    await session.refresh()
    if request.realtime:
        session.start_realtime_updates()

    return _view_to_response(session.view())


@router.get("/sessions/{session_id}", response_model=SessionViewResponse)
async def get_session_view(
    session_id: str,
    as_of: Optional[date] = Query(None, description="Reference date for today/this_week filters"),
    registry: MatchingSessionRegistry = Depends(get_session_registry),
):
    """Current filtered and ranked results."""
    session = registry.get(session_id)
    return _view_to_response(session.view(today=as_of))


@router.put("/sessions/{session_id}/filters", response_model=SessionViewResponse)
async def update_filters(
    session_id: str,
    criteria: FilterCriteria,
    registry: MatchingSessionRegistry = Depends(get_session_registry),
):
    """Replace filter criteria. Out-of-range values are clamped."""
    session = registry.get(session_id)
    session.set_criteria(criteria)
    return _view_to_response(session.view())


@router.put("/sessions/{session_id}/ranking", response_model=SessionViewResponse)
async def update_ranking(
    session_id: str,
    request: RankingRequest,
    registry: MatchingSessionRegistry = Depends(get_session_registry),
):
    session = registry.get(session_id)
    session.set_ranking(request.ranking)
    return _view_to_response(session.view())


@router.post("/sessions/{session_id}/refresh", response_model=SessionViewResponse)
async def refresh_session(
    session_id: str,
    registry: MatchingSessionRegistry = Depends(get_session_registry),
):
    """Manual refresh. Joins the in-flight run if there is one."""
    session = registry.get(session_id)
    await session.refresh()
    return _view_to_response(session.view())


@router.put("/sessions/{session_id}/realtime", response_model=SessionViewResponse)
async def toggle_realtime(
    session_id: str,
    request: RealtimeRequest,
    registry: MatchingSessionRegistry = Depends(get_session_registry),
):
    session = registry.get(session_id)
    if request.enabled:
        session.start_realtime_updates()
    else:
        session.stop_realtime_updates()
    return _view_to_response(session.view())


@router.post("/sessions/{session_id}/select", response_model=SelectResponse)
async def select_scribe(
    session_id: str,
    request: SelectRequest,
    registry: MatchingSessionRegistry = Depends(get_session_registry),
):
    """
    Hand the chosen match to booking.

    Without a configured booking gateway the prepared request is returned
    for the caller to forward.
    """
    session = registry.get(session_id)
    booking, receipt = await session.select(request.scribe_id)
    return SelectResponse(booking=booking, submitted=receipt is not None)


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    registry: MatchingSessionRegistry = Depends(get_session_registry),
):
    """Close the session and stop its real-time updates."""
    await registry.remove(session_id)
