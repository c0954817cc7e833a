"""
Matching Session

State for one student's visit to the matching screen: the exam request,
candidate pool, filters, ranking and the latest published run.

Run discipline:
- At most one match run in flight per session
- Refresh requests during a run coalesce into a single follow-up run
- A generation counter discards any outcome older than the published one

Real-time updates are a cancellable asyncio task owned by the session and
torn down by close().
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from scribe_match.domain.models import (
    ExamRequest,
    FilterCriteria,
    MatchResult,
    ScribeProfile,
    StudentProfile,
)
from scribe_match.domain.ranking import RankingPolicy, rank_results
from scribe_match.domain.result_filter import apply_filters
from scribe_match.infrastructure.exceptions import (
    NotFoundError,
    SessionClosedError,
    ValidationError,
)
from scribe_match.infrastructure.services.announcements import (
    Announcer,
    build_announcement,
)
from scribe_match.infrastructure.services.booking import (
    BookingGateway,
    BookingRequest,
    build_booking_request,
)
from scribe_match.infrastructure.services.matching_orchestrator import (
    MatchingOrchestrator,
    MatchRunOutcome,
    RunStatus,
)


logger = logging.getLogger(__name__)


def _coerce_ranking(ranking: Any) -> RankingPolicy:
    try:
        return RankingPolicy(ranking)
    except ValueError as e:
        raise ValidationError(
            f"Unknown ranking policy: {ranking}",
            details={"allowed": [p.value for p in RankingPolicy]},
            original_error=e,
        ) from e


@dataclass
class MatchView:
    """What the matching screen renders: filtered, ranked results plus status."""
    session_id: str
    status: Optional[RunStatus]
    is_running: bool
    realtime: bool
    generation: int
    total: int
    results: List[MatchResult] = field(default_factory=list)
    criteria: Optional[FilterCriteria] = None
    ranking: RankingPolicy = RankingPolicy.SCORE
    announcement: Optional[str] = None
    error: Optional[str] = None
    last_updated: Optional[datetime] = None


class MatchingSession:
    """One matching session. Must be used from a single event loop."""

    def __init__(
        self,
        student: StudentProfile,
        exam: ExamRequest,
        candidates: Iterable[ScribeProfile],
        orchestrator: MatchingOrchestrator,
        criteria: Optional[FilterCriteria] = None,
        ranking: RankingPolicy = RankingPolicy.SCORE,
        announcer: Optional[Announcer] = None,
        booking_gateway: Optional[BookingGateway] = None,
        refresh_interval_seconds: float = 30.0,
        announce_results: bool = True,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or uuid4().hex
        self._student = student
        self._exam = exam
        self._candidates: Tuple[ScribeProfile, ...] = tuple(candidates)
        self._orchestrator = orchestrator
        self._criteria = criteria or FilterCriteria.for_student(student)
        self._ranking = _coerce_ranking(ranking)
        self._announcer = announcer
        self._booking_gateway = booking_gateway
        self._refresh_interval = refresh_interval_seconds
        self._announce_results = announce_results

        self._generation = 0
        self._outcome: Optional[MatchRunOutcome] = None
        self._last_updated: Optional[datetime] = None
        self._last_announcement: Optional[str] = None
        self._inflight: Optional[asyncio.Task] = None
        self._rerun_requested = False
        self._timer: Optional[asyncio.Task] = None
        self._closed = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def student(self) -> StudentProfile:
        return self._student

    @property
    def exam(self) -> ExamRequest:
        return self._exam

    @property
    def candidates(self) -> Tuple[ScribeProfile, ...]:
        return self._candidates

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def ranking(self) -> RankingPolicy:
        return self._ranking

    @property
    def outcome(self) -> Optional[MatchRunOutcome]:
        """Latest published run, or None before the first run finishes."""
        return self._outcome

    @property
    def is_running(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    @property
    def realtime_enabled(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_announcement(self) -> Optional[str]:
        return self._last_announcement

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    async def refresh(self) -> MatchRunOutcome:
        """
        Run matching now, or join the run already in flight.

        A request arriving mid-run schedules exactly one follow-up run;
        further requests before it starts are folded into it.
        """
        self._ensure_open()

        if self.is_running:
            self._rerun_requested = True
            logger.debug(f"Session {self.id}: run in flight, coalescing refresh")
        else:
            self._inflight = asyncio.create_task(self._run_until_settled())

        # Shield so a cancelled caller does not abort the shared run
        return await asyncio.shield(self._inflight)

    async def update_exam(self, exam: ExamRequest) -> MatchRunOutcome:
        """Replace the exam request and re-run."""
        self._ensure_open()
        self._exam = exam
        return await self.refresh()

    async def update_candidates(self, candidates: Iterable[ScribeProfile]) -> MatchRunOutcome:
        """Replace the candidate pool and re-run."""
        self._ensure_open()
        self._candidates = tuple(candidates)
        return await self.refresh()

    async def _run_until_settled(self) -> MatchRunOutcome:
        while True:
            self._rerun_requested = False
            self._generation += 1
            outcome = await self._orchestrator.run(
                self._student,
                self._exam,
                self._candidates,
                criteria=self._criteria,
                ranking=self._ranking,
                generation=self._generation,
            )
            self._publish(outcome)

            if not self._rerun_requested or self._closed:
                return self._outcome or outcome

    def _publish(self, outcome: MatchRunOutcome) -> None:
        if self._outcome is not None and outcome.generation <= self._outcome.generation:
            logger.debug(
                f"Session {self.id}: discarding stale run {outcome.generation} "
                f"(published {self._outcome.generation})"
            )
            return

        self._outcome = outcome
        self._last_updated = outcome.finished_at or datetime.now(timezone.utc)

        if outcome.succeeded and self._announce_results:
            message = build_announcement(outcome.results)
            if message:
                self._announce(message)

    def _announce(self, message: str) -> None:
        self._last_announcement = message
        if self._announcer is None:
            return
        try:
            self._announcer.announce(message)
        except Exception:
            # Side channel only; a broken speech surface must not fail the run
            logger.exception(f"Session {self.id}: announcer failed")

    # ------------------------------------------------------------------
    # Filters and ranking (never re-run matching)
    # ------------------------------------------------------------------

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self._criteria = criteria

    def set_ranking(self, ranking: RankingPolicy) -> None:
        self._ranking = _coerce_ranking(ranking)

    def view(self, today: Optional[date] = None) -> MatchView:
        """Filtered and ranked snapshot of the latest run."""
        outcome = self._outcome
        results = outcome.results if outcome else []
        visible = rank_results(apply_filters(results, self._criteria, today), self._ranking)

        return MatchView(
            session_id=self.id,
            status=outcome.status if outcome else None,
            is_running=self.is_running,
            realtime=self.realtime_enabled,
            generation=outcome.generation if outcome else 0,
            total=len(results),
            results=visible,
            criteria=self._criteria,
            ranking=self._ranking,
            announcement=self._last_announcement,
            error=outcome.error if outcome else None,
            last_updated=self._last_updated,
        )

    # ------------------------------------------------------------------
    # Real-time updates
    # ------------------------------------------------------------------

    def start_realtime_updates(self) -> None:
        """Re-run matching every refresh interval until stopped."""
        self._ensure_open()
        if self.realtime_enabled:
            return
        self._timer = asyncio.create_task(self._periodic_refresh())
        logger.info(f"Session {self.id}: real-time updates every {self._refresh_interval}s")

    def stop_realtime_updates(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.info(f"Session {self.id}: real-time updates stopped")

    async def _periodic_refresh(self) -> None:
        while True:
            await asyncio.sleep(self._refresh_interval)
            try:
                await self.refresh()
            except SessionClosedError:
                return
            except Exception:
                logger.exception(f"Session {self.id}: periodic refresh failed")

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def prepare_booking(self, scribe_id: str) -> BookingRequest:
        """Build the booking hand-off for a scribe in the latest results."""
        results = self._outcome.results if self._outcome else []
        for result in results:
            if result.scribe.id == scribe_id:
                return build_booking_request(self._student, self._exam, result)

        raise NotFoundError(
            f"Scribe {scribe_id} is not in the current match results",
            resource="match",
            identifier=scribe_id,
        )

    async def select(self, scribe_id: str) -> Tuple[BookingRequest, Any]:
        """
        Commit to a candidate.

        Hands the request to the booking gateway when one is configured.

        Returns:
            (booking request, gateway receipt or None)
        """
        self._ensure_open()
        request = self.prepare_booking(scribe_id)

        if self._booking_gateway is None:
            self._announce(
                f"Selected {request.scribe_name}. "
                "Please confirm exam details to proceed with booking."
            )
            return request, None

        receipt = await self._booking_gateway.create_booking(request)
        self._announce(
            f"Booking confirmed with {request.scribe_name}. "
            "You will receive confirmation details shortly."
        )
        return request, receipt

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Cancel the timer and any in-flight run."""
        if self._closed:
            return
        self._closed = True

        tasks = [t for t in (self._timer, self._inflight) if t is not None and not t.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._timer = None
        logger.info(f"Session {self.id} closed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(
                f"Matching session {self.id} is closed",
                details={"session_id": self.id},
            )


class MatchingSessionRegistry:
    """In-memory registry of open sessions for the HTTP host."""

    def __init__(self):
        self._sessions: Dict[str, MatchingSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def add(self, session: MatchingSession) -> MatchingSession:
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> MatchingSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(
                f"Matching session {session_id} not found",
                resource="session",
                identifier=session_id,
            )
        return session

    async def remove(self, session_id: str) -> None:
        session = self.get(session_id)
        del self._sessions[session_id]
        await session.close()

    async def close_all(self) -> None:
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await session.close()
