"""Minimum-notice policy: drop slots that start too soon after now."""

from datetime import datetime, timedelta
from typing import Iterable, Union

from booking_engine.errors import ValidationError
from booking_engine.schemas.scheduling_schema import BookingBufferSetting, TimeSlot

BufferLike = Union[BookingBufferSetting, float, int]


def buffer_hours_of(buffer: BufferLike) -> float:
    if isinstance(buffer, BookingBufferSetting):
        return buffer.booking_buffer_hours
    if buffer < 0:
        raise ValidationError(f"buffer_hours must be >= 0, got {buffer}", field="buffer_hours")
    return float(buffer)


def buffer_cutoff(now: datetime, buffer: BufferLike) -> datetime:
    """Earliest slot start that may still be offered."""
    return now + timedelta(hours=buffer_hours_of(buffer))


def apply_buffer(slots: Iterable[TimeSlot], now: datetime, buffer: BufferLike) -> list[TimeSlot]:
    """Keep slots starting at or after ``now + buffer``.

    A zero buffer still drops slots that have already started.
    """
    cutoff = buffer_cutoff(now, buffer)
    return [slot for slot in slots if slot.start >= cutoff]


def buffer_excluded(slots: Iterable[TimeSlot], now: datetime, buffer: BufferLike) -> list[TimeSlot]:
    """The complement of apply_buffer, in the original order."""
    slots = list(slots)
    kept = set(apply_buffer(slots, now, buffer))
    return [slot for slot in slots if slot not in kept]
