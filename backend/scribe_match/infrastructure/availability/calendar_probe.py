"""
Calendar Availability Probe

Checks a scribe's declared weekly availability, blackout dates and
existing bookings to decide whether an exam window is free.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Protocol, Tuple

from scribe_match.domain.models import WEEKDAY_NAMES, ScribeProfile
from scribe_match.infrastructure.availability.probe import (
    AvailabilityProbe,
    DEFAULT_EXAM_DURATION_MINUTES,
)
from scribe_match.infrastructure.exceptions import AvailabilityProbeError, ConfigurationError


logger = logging.getLogger(__name__)

Window = Tuple[datetime, datetime]


@dataclass(frozen=True)
class BookedSlot:
    """A window already committed to another exam."""
    scribe_id: str
    starts_at: datetime
    ends_at: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.starts_at < end and start < self.ends_at


class BookingCalendar(Protocol):
    """Read side of the booking store."""

    async def booked_slots(self, scribe_id: str, on: date) -> List[BookedSlot]:
        ...


class InMemoryBookingCalendar:
    """Booking calendar held in process memory."""

    def __init__(self, slots: Optional[List[BookedSlot]] = None):
        self._slots: Dict[str, List[BookedSlot]] = defaultdict(list)
        for slot in slots or []:
            self.add(slot)

    def add(self, slot: BookedSlot) -> None:
        self._slots[slot.scribe_id].append(slot)

    async def booked_slots(self, scribe_id: str, on: date) -> List[BookedSlot]:
        day_start = datetime.combine(on, time.min)
        day_end = day_start + timedelta(days=1)
        return [s for s in self._slots.get(scribe_id, []) if s.overlaps(day_start, day_end)]


class CalendarAvailabilityProbe(AvailabilityProbe):
    """
    Availability from declared slots plus the booking calendar.

    A scribe is free for an exam when:
    - the exam date is not a blackout date
    - the weekday is one they declared (if they declared days)
    - one of their slots on that weekday covers the whole exam window
      (a declared day without explicit slots counts as the whole day)
    - no existing booking overlaps the window
    """

    def __init__(
        self,
        calendar: Optional[BookingCalendar] = None,
        horizon_days: int = 30,
    ):
        if horizon_days < 1:
            raise ConfigurationError(
                f"Availability search horizon must be at least one day, got {horizon_days}",
                missing_keys=["NEXT_SLOT_HORIZON_DAYS"],
            )
        self._calendar = calendar or InMemoryBookingCalendar()
        self._horizon_days = horizon_days

    async def is_available(
        self,
        scribe: ScribeProfile,
        exam_date: date,
        start_time: time,
        duration_minutes: int = DEFAULT_EXAM_DURATION_MINUTES,
    ) -> bool:
        if exam_date in scribe.availability.blackout_dates:
            return False

        start = datetime.combine(exam_date, start_time)
        end = start + timedelta(minutes=duration_minutes)

        covering = [
            (ws, we) for ws, we in self._declared_windows(scribe, exam_date)
            if ws <= start and end <= we
        ]
        if not covering:
            return False

        booked = await self._booked(scribe, exam_date)
        return not any(slot.overlaps(start, end) for slot in booked)

    async def next_available_slot(
        self,
        scribe: ScribeProfile,
        after: date,
    ) -> Optional[date]:
        for offset in range(1, self._horizon_days + 1):
            day = after + timedelta(days=offset)
            if day in scribe.availability.blackout_dates:
                continue

            windows = self._declared_windows(scribe, day)
            if not windows:
                continue

            booked = await self._booked(scribe, day)
            for ws, we in windows:
                if not any(slot.overlaps(ws, we) for slot in booked):
                    return day

        logger.debug(
            f"No free slot for scribe {scribe.id} within {self._horizon_days} days of {after}"
        )
        return None

    def _declared_windows(self, scribe: ScribeProfile, day: date) -> List[Window]:
        """Windows the scribe declared for the weekday of `day`."""
        availability = scribe.availability
        weekday = day.weekday()

        if availability.days_available and WEEKDAY_NAMES[weekday] not in availability.days_available:
            return []

        if availability.time_slots:
            return [
                (datetime.combine(day, slot.start_time), datetime.combine(day, slot.end_time))
                for slot in availability.time_slots
                if slot.day_of_week == weekday
            ]

        if availability.days_available:
            day_start = datetime.combine(day, time.min)
            return [(day_start, day_start + timedelta(days=1))]

        return []

    async def _booked(self, scribe: ScribeProfile, day: date) -> List[BookedSlot]:
        try:
            return await self._calendar.booked_slots(scribe.id, day)
        except Exception as e:
            raise AvailabilityProbeError(
                f"Booking calendar lookup failed for scribe {scribe.id}",
                scribe_id=scribe.id,
                original_error=e,
            ) from e
