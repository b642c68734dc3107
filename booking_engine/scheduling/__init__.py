from booking_engine.scheduling.availability import AvailabilityResolver
from booking_engine.scheduling.buffer import apply_buffer, buffer_excluded
from booking_engine.scheduling.calendar import (
    DEFAULT_WEEKLY_HOURS,
    BusinessCalendar,
    day_of_week,
)
from booking_engine.scheduling.slots import generate_slots

__all__ = [
    "AvailabilityResolver",
    "BusinessCalendar",
    "DEFAULT_WEEKLY_HOURS",
    "apply_buffer",
    "buffer_excluded",
    "day_of_week",
    "generate_slots",
]
