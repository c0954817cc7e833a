"""
Result Announcements

Plain-text summaries of a finished match run for the accessibility layer's
speech surface. The engine only produces the text; speaking it is the
Announcer's job.
"""

import logging
import math
from typing import List, Optional, Protocol, Sequence

from scribe_match.domain.models import MatchResult


logger = logging.getLogger(__name__)


class Announcer(Protocol):
    """Receives announcement text (e.g. a text-to-speech queue)."""

    def announce(self, message: str) -> None:
        ...


class LoggingAnnouncer:
    """Announcer that logs messages and keeps a short history."""

    def __init__(self, history_size: int = 20):
        self._history_size = history_size
        self.messages: List[str] = []

    def announce(self, message: str) -> None:
        logger.info(f"Announcement: {message}")
        self.messages.append(message)
        del self.messages[:-self._history_size]


def _percent(score: float) -> int:
    # Half-up, so 72.5 reads as 73 rather than banker's 72
    return int(math.floor(score + 0.5))


def build_announcement(results: Sequence[MatchResult]) -> Optional[str]:
    """
    Summarize a ranked result list, or None when there is nothing to say.
    """
    if not results:
        return None

    top = results[0]
    return (
        f"Found {len(results)} matching scribes. "
        f"Top match: {top.scribe.name} with {_percent(top.score)}% compatibility."
    )
