"""Error taxonomy for the availability and pricing engine."""

from typing import Optional


class BookingEngineError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(BookingEngineError):
    """A weekly-hours rule is missing a sane shape for the requested day.

    The resolver treats the affected day as closed instead of failing.
    """

    def __init__(self, message: str, day_of_week: Optional[int] = None) -> None:
        super().__init__(message)
        self.day_of_week = day_of_week


class TransientReadFailure(BookingEngineError):
    """The existing-bookings projection could not be read."""


class ValidationError(BookingEngineError):
    """An input was outside its allowed range. Never silently clamped."""

    def __init__(self, reason: str, field: Optional[str] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.field = field


class SlotConflictError(BookingEngineError):
    """A non-cancelled booking already holds the requested date and slot."""

    def __init__(self, date: str, time_slot_label: str) -> None:
        super().__init__(f"{date} at {time_slot_label} is already booked")
        self.date = date
        self.time_slot_label = time_slot_label
