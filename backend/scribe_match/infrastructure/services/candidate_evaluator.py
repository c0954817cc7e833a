"""
Candidate Evaluator

Turns one (student, exam, scribe) triple into a MatchResult.

Pipeline:
1. Distance and travel-time estimate
2. Hard eligibility checks (verification, exam type, blackout dates,
   the scribe's willing travel distance)
3. Availability lookup (and next free date when busy)
4. Factor scores and composite from the MatchScorer
5. Assemble the MatchResult

Any failure surfaces as CandidateEvaluationError so the orchestrator can
skip the candidate without aborting the batch.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from scribe_match.config.settings import Settings
from scribe_match.domain.models import (
    ExamRequest,
    FilterCriteria,
    MatchResult,
    ScribeProfile,
    StudentProfile,
)
from scribe_match.domain.scoring import (
    MatchContext,
    MatchScorer,
    distance_km,
    travel_time_minutes,
)
from scribe_match.infrastructure.availability.probe import AvailabilityProbe
from scribe_match.infrastructure.exceptions import (
    CandidateEvaluationError,
    IneligibleCandidateError,
)


logger = logging.getLogger(__name__)


@contextmanager
def _stage(scribe_id: str, stage: str) -> Iterator[None]:
    """Wrap unexpected errors of one pipeline stage."""
    try:
        yield
    except CandidateEvaluationError:
        raise
    except Exception as e:
        raise CandidateEvaluationError(
            f"Evaluation of scribe {scribe_id} failed during {stage}: {e}",
            scribe_id=scribe_id,
            stage=stage,
            original_error=e,
        ) from e


class CandidateEvaluator:
    """
    Scores a single candidate for a student's exam.

    Stateless apart from its collaborators, so one instance can serve
    concurrent evaluations.
    """

    def __init__(
        self,
        probe: AvailabilityProbe,
        scorer: Optional[MatchScorer] = None,
        average_speed_kmh: float = 30.0,
        enforce_eligibility: bool = True,
    ):
        self._probe = probe
        self._scorer = scorer or MatchScorer()
        self._average_speed_kmh = average_speed_kmh
        self._enforce_eligibility = enforce_eligibility

    @classmethod
    def from_settings(cls, probe: AvailabilityProbe, settings: Settings) -> "CandidateEvaluator":
        """Build an evaluator with weights and toggles from Settings."""
        return cls(
            probe=probe,
            scorer=MatchScorer(weights=settings.factor_weights),
            average_speed_kmh=settings.average_travel_speed_kmh,
            enforce_eligibility=settings.enforce_eligibility,
        )

    def check_eligibility(
        self,
        exam: ExamRequest,
        scribe: ScribeProfile,
        distance: float,
    ) -> None:
        """
        Raise IneligibleCandidateError when a hard constraint fails.

        A scribe with no declared exam types is assumed to accept any.
        The student's own travel cap is not checked here; it is the
        adjustable distance filter applied to results.
        """
        if not scribe.is_verified:
            raise IneligibleCandidateError(
                f"Scribe {scribe.id} is not verified",
                scribe_id=scribe.id,
                stage="eligibility",
            )

        willing = scribe.availability.exam_types_willing
        if willing and exam.exam_type not in willing:
            raise IneligibleCandidateError(
                f"Scribe {scribe.id} does not take {exam.exam_type} exams",
                scribe_id=scribe.id,
                stage="eligibility",
            )

        if exam.exam_date in scribe.availability.blackout_dates:
            raise IneligibleCandidateError(
                f"Scribe {scribe.id} is blacked out on {exam.exam_date}",
                scribe_id=scribe.id,
                stage="eligibility",
            )

        willing_km = scribe.availability.max_distance_willing_km
        if distance > willing_km:
            raise IneligibleCandidateError(
                f"Scribe {scribe.id} travels at most {willing_km} km, "
                f"student is {distance:.1f} km away",
                scribe_id=scribe.id,
                stage="eligibility",
            )

    async def evaluate(
        self,
        student: StudentProfile,
        exam: ExamRequest,
        scribe: ScribeProfile,
        criteria: Optional[FilterCriteria] = None,
    ) -> MatchResult:
        """
        Evaluate one candidate.

        Args:
            student: Student profile
            exam: Exam request being matched
            scribe: Candidate scribe
            criteria: Current filters; max_distance_km sets the
                location falloff (defaults to the student's travel cap)

        Returns:
            MatchResult for this candidate

        Raises:
            CandidateEvaluationError: the candidate must be skipped
        """
        max_distance = (
            criteria.max_distance_km if criteria is not None
            else student.max_travel_distance_km
        )

        with _stage(scribe.id, "distance"):
            distance = distance_km(student.location, scribe.location)
            travel_minutes = travel_time_minutes(distance, self._average_speed_kmh)

        if self._enforce_eligibility:
            self.check_eligibility(exam, scribe, distance)

        with _stage(scribe.id, "availability"):
            is_available = await self._probe.is_available(
                scribe,
                exam.exam_date,
                exam.start_time,
                exam.duration_minutes,
            )
            next_available = None
            if not is_available:
                next_available = await self._probe.next_available_slot(
                    scribe, after=exam.exam_date
                )

        with _stage(scribe.id, "scoring"):
            context = MatchContext(
                student=student,
                exam=exam,
                scribe=scribe,
                distance_km=distance,
                max_distance_km=max_distance,
                is_available=is_available,
            )
            breakdown = self._scorer.score(context)

            result = MatchResult(
                scribe=scribe,
                exam_date=exam.exam_date,
                score=breakdown.composite,
                distance_km=distance,
                factors=breakdown.to_factors(),
                estimated_travel_time_minutes=travel_minutes,
                is_available=is_available,
                next_available_date=next_available,
            )

        logger.debug(
            f"Scribe {scribe.id}: score={result.score} distance={distance:.1f}km "
            f"available={is_available}"
        )
        return result
