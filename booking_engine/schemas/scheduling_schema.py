"""Scheduling data models: hours rules, windows, slots, bookings, blocks."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from booking_engine.config import BUFFER_STEP_HOURS, MAX_BUFFER_HOURS, is_valid_buffer_hours
from booking_engine.errors import ValidationError

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
DEFAULT_BUFFER_HOURS = 2.0


class WeeklyHoursRule(BaseModel):
    """Recurring open hours for one day of the week (0 = Sunday)."""

    day_of_week: int = Field(ge=0, le=6)
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)
    is_available: bool = True


class OperatingWindow(BaseModel):
    """A weekly rule resolved against a concrete date."""

    model_config = ConfigDict(frozen=True)

    date: date
    start: datetime
    end: datetime


class TimeSlot(BaseModel):
    """A discrete bookable start time inside an operating window."""

    model_config = ConfigDict(frozen=True)

    date: date
    label: str
    start_offset_minutes: int

    @property
    def start(self) -> datetime:
        return datetime.combine(self.date, time()) + timedelta(minutes=self.start_offset_minutes)


@dataclass(frozen=True)
class BookingBufferSetting:
    """Minimum notice, in hours, between now and the earliest bookable slot."""

    booking_buffer_hours: float = DEFAULT_BUFFER_HOURS

    def __post_init__(self) -> None:
        if not is_valid_buffer_hours(self.booking_buffer_hours):
            raise ValidationError(
                f"booking_buffer_hours must be between 0 and {MAX_BUFFER_HOURS:g} "
                f"in {BUFFER_STEP_HOURS:g}-hour steps, got {self.booking_buffer_hours}",
                field="booking_buffer_hours",
            )

    @classmethod
    def from_value(cls, value: Union[float, int, str, None]) -> "BookingBufferSetting":
        """Build a setting from untrusted input. ``None`` means the default."""
        if value is None:
            return cls()
        if isinstance(value, bool):
            raise ValidationError("booking_buffer_hours must be a number", field="booking_buffer_hours")
        try:
            hours = float(value)
        except (TypeError, ValueError):
            raise ValidationError(
                f"booking_buffer_hours must be a number, got {value!r}",
                field="booking_buffer_hours",
            ) from None
        return cls(hours)


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ExistingBooking(BaseModel):
    """Projection of a stored booking as seen by the resolver."""

    date: date
    time_slot_label: str
    status: BookingStatus = BookingStatus.CONFIRMED

    @property
    def occupies_slot(self) -> bool:
        return self.status != BookingStatus.CANCELLED


class TimeBlock(BaseModel):
    """Admin-entered block. No time label means the whole day is blocked."""

    date: date
    time_slot_label: Optional[str] = None
    reason: Optional[str] = None


class DayAvailability(BaseModel):
    """Unavailable labels for one date, in chronological order.

    ``closed`` separates "nothing offered today" from "every slot taken".
    """

    date: date
    closed: bool = False
    reason: Optional[str] = None
    unavailable: list[str] = Field(default_factory=list)
