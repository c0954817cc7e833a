"""
Matching Orchestrator

Runs the CandidateEvaluator over a candidate pool and publishes one ranked
MatchResult snapshot per run.

Production features:
- Concurrent evaluation bounded by a semaphore
- Per-candidate timeout so one slow calendar lookup cannot stall the batch
- Per-run deadline with partial results
- Failed runs are reported as FAILED, never as "zero matches"
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from scribe_match.config.settings import Settings
from scribe_match.domain.models import (
    ExamRequest,
    FilterCriteria,
    MatchResult,
    ScribeProfile,
    StudentProfile,
)
from scribe_match.domain.ranking import RankingPolicy, rank_results
from scribe_match.infrastructure.exceptions import (
    CandidateEvaluationError,
    IneligibleCandidateError,
    OrchestratorRunError,
)
from scribe_match.infrastructure.services.candidate_evaluator import CandidateEvaluator


logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Outcome of a match run."""
    COMPLETED = "completed"
    PARTIAL = "partial"  # Run deadline hit; finished results only
    FAILED = "failed"


@dataclass
class MatchRunOutcome:
    """
    Result set of one match run plus bookkeeping.

    Created fresh per run and replaced, never patched.
    """
    status: RunStatus
    results: List[MatchResult] = field(default_factory=list)
    generation: int = 0
    candidates: int = 0
    evaluated: int = 0
    skipped: int = 0
    ineligible: int = 0
    timed_out: int = 0
    error: Optional[str] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    @property
    def succeeded(self) -> bool:
        return self.status != RunStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Run metadata for API responses (results are rendered separately)."""
        return {
            "status": self.status.value,
            "generation": self.generation,
            "candidates": self.candidates,
            "evaluated": self.evaluated,
            "skipped": self.skipped,
            "ineligible": self.ineligible,
            "timed_out": self.timed_out,
            "error": self.error,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


class MatchingOrchestrator:
    """
    Evaluates a whole candidate pool for one (student, exam) pair.

    The orchestrator is stateless between runs; the one-run-at-a-time
    discipline lives in MatchingSession.
    """

    def __init__(
        self,
        evaluator: CandidateEvaluator,
        candidate_timeout_seconds: float = 5.0,
        run_deadline_seconds: float = 20.0,
        max_concurrency: int = 10,
    ):
        self._evaluator = evaluator
        self._candidate_timeout = candidate_timeout_seconds
        self._run_deadline = run_deadline_seconds
        self._max_concurrency = max_concurrency

    @classmethod
    def from_settings(cls, evaluator: CandidateEvaluator, settings: Settings) -> "MatchingOrchestrator":
        return cls(
            evaluator=evaluator,
            candidate_timeout_seconds=settings.candidate_timeout_seconds,
            run_deadline_seconds=settings.run_deadline_seconds,
            max_concurrency=settings.max_concurrent_evaluations,
        )

    async def run(
        self,
        student: StudentProfile,
        exam: ExamRequest,
        pool: Iterable[ScribeProfile],
        criteria: Optional[FilterCriteria] = None,
        ranking: RankingPolicy = RankingPolicy.SCORE,
        generation: int = 0,
    ) -> MatchRunOutcome:
        """
        Evaluate every candidate and return the ranked snapshot.

        Never raises for candidate or run failures; those are reported
        through the outcome status.
        """
        outcome = MatchRunOutcome(status=RunStatus.COMPLETED, generation=generation)

        # Snapshot: candidates added mid-run wait for the next run
        candidates = list(pool)
        outcome.candidates = len(candidates)

        if not candidates:
            outcome.finished_at = datetime.now(timezone.utc)
            return outcome

        try:
            results = await self._evaluate_all(student, exam, candidates, criteria, outcome)
            outcome.results = rank_results(results, ranking)
            outcome.evaluated = len(results)

            eligible = outcome.candidates - outcome.ineligible
            if eligible > 0 and not results:
                raise OrchestratorRunError(
                    f"All {eligible} eligible candidates failed evaluation",
                    generation=generation,
                )
        except OrchestratorRunError as e:
            logger.error(f"Match run {generation} failed: {e.message}")
            outcome.status = RunStatus.FAILED
            outcome.results = []
            outcome.error = e.message
        except Exception as e:
            logger.exception(f"Match run {generation} failed unexpectedly")
            outcome.status = RunStatus.FAILED
            outcome.results = []
            outcome.error = str(e) or e.__class__.__name__
        finally:
            outcome.finished_at = datetime.now(timezone.utc)

        logger.info(
            f"Match run {generation} {outcome.status.value}: {outcome.evaluated}/"
            f"{outcome.candidates} scored, {outcome.skipped} skipped, "
            f"{outcome.ineligible} ineligible"
        )
        return outcome

    async def _evaluate_all(
        self,
        student: StudentProfile,
        exam: ExamRequest,
        candidates: List[ScribeProfile],
        criteria: Optional[FilterCriteria],
        outcome: MatchRunOutcome,
    ) -> List[MatchResult]:
        """Evaluate concurrently; results keep pool order."""
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def evaluate_one(scribe: ScribeProfile) -> MatchResult:
            async with semaphore:
                return await asyncio.wait_for(
                    self._evaluator.evaluate(student, exam, scribe, criteria),
                    timeout=self._candidate_timeout,
                )

        tasks = [asyncio.create_task(evaluate_one(s)) for s in candidates]
        try:
            _, pending = await asyncio.wait(tasks, timeout=self._run_deadline)
            if pending:
                logger.warning(
                    f"Match run deadline of {self._run_deadline}s reached with "
                    f"{len(pending)} candidates outstanding"
                )
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                outcome.status = RunStatus.PARTIAL
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        results: List[MatchResult] = []
        for scribe, task in zip(candidates, tasks):
            if task.cancelled():
                outcome.skipped += 1
                outcome.timed_out += 1
                continue

            error = task.exception()
            if error is None:
                results.append(task.result())
            elif isinstance(error, IneligibleCandidateError):
                outcome.ineligible += 1
                logger.debug(f"Skipping ineligible scribe {scribe.id}: {error.message}")
            elif isinstance(error, asyncio.TimeoutError):
                outcome.skipped += 1
                outcome.timed_out += 1
                logger.warning(
                    f"Skipping scribe {scribe.id}: evaluation exceeded "
                    f"{self._candidate_timeout}s"
                )
            elif isinstance(error, CandidateEvaluationError):
                outcome.skipped += 1
                logger.warning(f"Skipping scribe {scribe.id}: {error.message}")
            else:
                outcome.skipped += 1
                logger.warning(f"Skipping scribe {scribe.id}: unexpected error {error!r}")

        return results
