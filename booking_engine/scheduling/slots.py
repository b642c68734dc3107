"""Slot generation inside an operating window."""

from datetime import timedelta
from typing import Optional

from booking_engine.errors import ValidationError
from booking_engine.schemas.scheduling_schema import OperatingWindow, TimeSlot
from booking_engine.utils import format_slot_label

DEFAULT_INTERVAL_MINUTES = 60


def generate_slots(
    window: OperatingWindow,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    service_duration_minutes: Optional[int] = None,
) -> list[TimeSlot]:
    """
    Enumerate slot starts from ``window.start`` in ``interval_minutes`` steps.

    A slot is kept only if the service fits before the window closes
    (``start + duration <= window.end``). The duration defaults to the
    interval, so a window shorter than one interval yields no slots.
    """
    if interval_minutes <= 0:
        raise ValidationError(
            f"interval_minutes must be positive, got {interval_minutes}", field="interval_minutes"
        )
    duration = timedelta(minutes=service_duration_minutes or interval_minutes)
    step = timedelta(minutes=interval_minutes)
    midnight = window.start.replace(hour=0, minute=0, second=0, microsecond=0)

    slots: list[TimeSlot] = []
    current = window.start
    while current + duration <= window.end:
        slots.append(
            TimeSlot(
                date=window.date,
                label=format_slot_label(current),
                start_offset_minutes=int((current - midnight).total_seconds() // 60),
            )
        )
        current += step
    return slots
