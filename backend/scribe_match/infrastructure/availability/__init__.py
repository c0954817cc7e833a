# Availability lookup
from scribe_match.infrastructure.availability.probe import AvailabilityProbe
from scribe_match.infrastructure.availability.calendar_probe import (
    BookedSlot,
    BookingCalendar,
    CalendarAvailabilityProbe,
    InMemoryBookingCalendar,
)

__all__ = [
    "AvailabilityProbe",
    "BookedSlot",
    "BookingCalendar",
    "CalendarAvailabilityProbe",
    "InMemoryBookingCalendar",
]
