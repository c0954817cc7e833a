"""
Availability Probe Interface

Answers "is this scribe free for this exam?" and, if not, "when next?".
Implementations consult a booking calendar and may suspend on I/O.
"""

from abc import ABC, abstractmethod
from datetime import date, time
from typing import Optional

from scribe_match.domain.models import ScribeProfile


DEFAULT_EXAM_DURATION_MINUTES = 180


class AvailabilityProbe(ABC):
    """Async availability lookup used by the candidate evaluator."""

    @abstractmethod
    async def is_available(
        self,
        scribe: ScribeProfile,
        exam_date: date,
        start_time: time,
        duration_minutes: int = DEFAULT_EXAM_DURATION_MINUTES,
    ) -> bool:
        """Whether the scribe can cover the whole exam window."""
        pass

    @abstractmethod
    async def next_available_slot(
        self,
        scribe: ScribeProfile,
        after: date,
    ) -> Optional[date]:
        """
        First date after `after` with a free slot.

        Only called when is_available() returned False.
        Returns None when nothing is free within the search horizon.
        """
        pass
