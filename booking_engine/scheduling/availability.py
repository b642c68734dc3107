"""
Availability resolver: merges generated slots, the booking buffer, admin
blocks and existing bookings into per-date unavailable labels.

The read is advisory. Booking creation must re-check at write time; the
store enforces uniqueness of a date and slot among live bookings.

Read failures on the bookings projection fail open: the day is computed as
if nothing were booked and a warning is logged. The buffer and admin
blocks still apply.

Usage:
    resolver = AvailabilityResolver(calendar, store.bookings_between, clock=fixed_clock(now))
    unavailable = resolver.get_availability(date(2025, 3, 17), date(2025, 3, 23))
    resolver.is_slot_available(date(2025, 3, 17), "9:30 PM")
"""

from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Iterator, Optional

from booking_engine.clock import Clock
from booking_engine.errors import ConfigurationError, TransientReadFailure
from booking_engine.logging_context import get_request_logger
from booking_engine.scheduling.buffer import BufferLike, buffer_excluded
from booking_engine.scheduling.calendar import BusinessCalendar
from booking_engine.scheduling.slots import DEFAULT_INTERVAL_MINUTES, generate_slots
from booking_engine.schemas.scheduling_schema import (
    BookingBufferSetting,
    DayAvailability,
    ExistingBooking,
    TimeBlock,
    TimeSlot,
)
from booking_engine.utils import normalize_slot_label

logger = get_request_logger(__name__)

BookingsSource = Callable[[date, date], Iterable[ExistingBooking]]
BlocksSource = Callable[[date, date], Iterable[TimeBlock]]

REASON_CLOSED = "closed"
REASON_MISCONFIGURED = "misconfigured"
REASON_BLOCKED = "blocked"


def date_range(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def _canonical_label(label: str) -> str:
    try:
        return normalize_slot_label(label)
    except ValueError:
        return label.strip()


class AvailabilityResolver:
    """
    Computes unavailable slot labels for a date range.

    All inputs are injected: the calendar snapshot, the bookings projection,
    the buffer setting and the clock. Nothing is cached between calls.
    """

    def __init__(
        self,
        calendar: BusinessCalendar,
        bookings_source: BookingsSource,
        *,
        clock: Clock,
        buffer: BufferLike = BookingBufferSetting(),
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
        service_duration_minutes: Optional[int] = None,
        blocks_source: Optional[BlocksSource] = None,
    ) -> None:
        self.calendar = calendar
        self.buffer = buffer
        self.interval_minutes = interval_minutes
        self.service_duration_minutes = service_duration_minutes
        self._bookings_source = bookings_source
        self._blocks_source = blocks_source
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_availability(self, start_date: date, end_date: date) -> dict[date, DayAvailability]:
        """Map each date with any unavailable slot (or closed) to its details.

        Dates missing from the result offer every generated slot. An
        inverted range returns an empty mapping.
        """
        if start_date > end_date:
            return {}

        now = self._clock()
        booked = self._booked_labels(start_date, end_date)
        blocked_days, blocked_slots = self._blocks(start_date, end_date)

        result: dict[date, DayAvailability] = {}
        for target in date_range(start_date, end_date):
            day = self._evaluate_day(
                target,
                now,
                booked.get(target, set()) | blocked_slots.get(target, set()),
                blocked_days.get(target),
            )
            if day.closed or day.unavailable:
                result[target] = day
        return result

    def is_slot_available(self, target: date, label: str) -> bool:
        """Point check built on get_availability for the same single date."""
        wanted = _canonical_label(label)
        day = self.get_availability(target, target).get(target)
        if day is not None and day.closed:
            return False
        if wanted not in {slot.label for slot in self.generated_slots(target)}:
            return False
        return day is None or wanted not in day.unavailable

    def available_slots(self, target: date) -> list[TimeSlot]:
        """Slots that can be offered on ``target``, chronologically."""
        day = self.get_availability(target, target).get(target)
        if day is not None and day.closed:
            return []
        taken = set(day.unavailable) if day else set()
        return [slot for slot in self.generated_slots(target) if slot.label not in taken]

    def generated_slots(self, target: date) -> list[TimeSlot]:
        """Every slot the weekly hours produce for ``target``, before filtering."""
        try:
            window = self.calendar.resolve_window(target)
        except ConfigurationError:
            return []
        if window is None:
            return []
        return generate_slots(window, self.interval_minutes, self.service_duration_minutes)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _evaluate_day(
        self,
        target: date,
        now: datetime,
        taken_labels: set[str],
        blocked_reason: Optional[str],
    ) -> DayAvailability:
        if blocked_reason is not None:
            return DayAvailability(date=target, closed=True, reason=blocked_reason)

        try:
            window = self.calendar.resolve_window(target)
        except ConfigurationError as exc:
            logger.warning("Hours misconfigured for %s, treating as closed: %s", target, exc)
            return DayAvailability(date=target, closed=True, reason=REASON_MISCONFIGURED)

        if window is None:
            return DayAvailability(date=target, closed=True, reason=REASON_CLOSED)

        slots = generate_slots(window, self.interval_minutes, self.service_duration_minutes)
        too_soon = {slot.label for slot in buffer_excluded(slots, now, self.buffer)}
        unavailable = [
            slot.label for slot in slots if slot.label in too_soon or slot.label in taken_labels
        ]
        return DayAvailability(date=target, unavailable=unavailable)

    def _booked_labels(self, start_date: date, end_date: date) -> dict[date, set[str]]:
        try:
            bookings = list(self._bookings_source(start_date, end_date))
        except TransientReadFailure as exc:
            logger.warning(
                "Bookings projection unavailable for %s..%s, failing open: %s",
                start_date,
                end_date,
                exc,
            )
            return {}

        booked: dict[date, set[str]] = {}
        for booking in bookings:
            if booking.occupies_slot:
                booked.setdefault(booking.date, set()).add(_canonical_label(booking.time_slot_label))
        return booked

    def _blocks(
        self, start_date: date, end_date: date
    ) -> tuple[dict[date, str], dict[date, set[str]]]:
        blocked_days: dict[date, str] = {}
        blocked_slots: dict[date, set[str]] = {}
        if self._blocks_source is None:
            return blocked_days, blocked_slots
        for block in self._blocks_source(start_date, end_date):
            if block.time_slot_label is None:
                blocked_days[block.date] = block.reason or REASON_BLOCKED
            else:
                blocked_slots.setdefault(block.date, set()).add(
                    _canonical_label(block.time_slot_label)
                )
        return blocked_days, blocked_slots
