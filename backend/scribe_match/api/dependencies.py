"""
API Dependencies

FastAPI dependency providers for the matching engine's collaborators.
Each provider is cached with @lru_cache so the app shares one instance;
tests override them through app.dependency_overrides.
"""

import logging
from functools import lru_cache

from scribe_match.config.settings import get_settings
from scribe_match.infrastructure.availability import (
    AvailabilityProbe,
    CalendarAvailabilityProbe,
    InMemoryBookingCalendar,
)
from scribe_match.infrastructure.services.announcements import Announcer, LoggingAnnouncer
from scribe_match.infrastructure.services.candidate_evaluator import CandidateEvaluator
from scribe_match.infrastructure.services.matching_orchestrator import MatchingOrchestrator
from scribe_match.infrastructure.services.matching_session import MatchingSessionRegistry


logger = logging.getLogger(__name__)


@lru_cache
def get_booking_calendar() -> InMemoryBookingCalendar:
    """Booking calendar consulted for availability."""
    return InMemoryBookingCalendar()


@lru_cache
def get_availability_probe() -> AvailabilityProbe:
    """Calendar-backed availability probe."""
    settings = get_settings()
    return CalendarAvailabilityProbe(
        calendar=get_booking_calendar(),
        horizon_days=settings.next_slot_horizon_days,
    )


@lru_cache
def get_orchestrator() -> MatchingOrchestrator:
    """Orchestrator wired with evaluator, weights and timeouts from Settings."""
    settings = get_settings()
    evaluator = CandidateEvaluator.from_settings(get_availability_probe(), settings)
    return MatchingOrchestrator.from_settings(evaluator, settings)


@lru_cache
def get_announcer() -> Announcer:
    """Announcement sink; the speech surface reads announcements from views."""
    return LoggingAnnouncer()


@lru_cache
def get_session_registry() -> MatchingSessionRegistry:
    """Process-wide registry of open matching sessions."""
    logger.info("Matching session registry created")
    return MatchingSessionRegistry()
