"""Shared test fixtures and helpers."""

from datetime import date, datetime
from typing import Iterable, Optional

import pytest

from booking_engine.clock import fixed_clock
from booking_engine.scheduling.availability import AvailabilityResolver
from booking_engine.scheduling.calendar import DEFAULT_WEEKLY_HOURS, BusinessCalendar
from booking_engine.schemas.scheduling_schema import (
    BookingStatus,
    ExistingBooking,
    WeeklyHoursRule,
)
from booking_engine.store import BookingStore

# 2025-03-17 is a Monday; default hours are 18:30-22:30 on weekdays.
MONDAY = date(2025, 3, 17)
SATURDAY = date(2025, 3, 22)
SUNDAY = date(2025, 3, 23)
FAR_PAST = datetime(2025, 1, 1, 0, 0)


@pytest.fixture
def calendar():
    return BusinessCalendar(DEFAULT_WEEKLY_HOURS)


@pytest.fixture
def store():
    return BookingStore(weekly_hours=DEFAULT_WEEKLY_HOURS)


def make_booking(
    day: date = MONDAY,
    label: str = "7:30 PM",
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> ExistingBooking:
    """Helper to create an ExistingBooking."""
    return ExistingBooking(date=day, time_slot_label=label, status=status)


def static_source(bookings: Iterable[ExistingBooking]):
    """A bookings source that returns the given bookings for any range."""
    bookings = list(bookings)

    def source(start: date, end: date) -> list[ExistingBooking]:
        return [b for b in bookings if start <= b.date <= end]

    return source


def make_resolver(
    bookings: Iterable[ExistingBooking] = (),
    now: datetime = FAR_PAST,
    buffer: float = 2,
    rules: Optional[list[WeeklyHoursRule]] = None,
    interval_minutes: int = 60,
    **kwargs,
) -> AvailabilityResolver:
    """Create a resolver over static inputs with sensible defaults."""
    return AvailabilityResolver(
        BusinessCalendar(rules if rules is not None else DEFAULT_WEEKLY_HOURS),
        static_source(bookings),
        clock=fixed_clock(now),
        buffer=buffer,
        interval_minutes=interval_minutes,
        **kwargs,
    )
