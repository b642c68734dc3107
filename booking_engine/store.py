"""
In-memory booking, block and settings store.

In production these records live in the relational database behind the
admin CRUD screens. This store is the reference collaborator the API wires
into the resolver, and it enforces the write-time rule the resolver relies
on: at most one live booking per date and slot.
"""

import logging
import threading
import uuid
from datetime import date, datetime, timezone
from typing import Iterable, Optional, TypedDict

from booking_engine.errors import SlotConflictError, ValidationError
from booking_engine.schemas.pricing_schema import PriceBreakdown
from booking_engine.schemas.scheduling_schema import (
    BookingBufferSetting,
    BookingStatus,
    ExistingBooking,
    TimeBlock,
    WeeklyHoursRule,
)
from booking_engine.utils import normalize_slot_label

logger = logging.getLogger(__name__)


class BookingRecord(TypedDict):
    """Full booking record stored in the system."""

    booking_ref: str
    date: str
    time_slot_label: str
    status: str
    total: int
    created_at: str


class BookingStore:
    """Thread-safe in-memory store for bookings, blocks and admin settings."""

    def __init__(
        self,
        weekly_hours: Iterable[WeeklyHoursRule] = (),
        buffer: Optional[BookingBufferSetting] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._bookings: dict[str, BookingRecord] = {}
        self._blocks: list[TimeBlock] = []
        self._weekly_hours: list[WeeklyHoursRule] = list(weekly_hours)
        self._buffer = buffer or BookingBufferSetting()

    # ------------------------------------------------------------------ #
    # Bookings
    # ------------------------------------------------------------------ #

    def create_booking(
        self,
        target: date,
        time_slot_label: str,
        breakdown: Optional[PriceBreakdown] = None,
    ) -> BookingRecord:
        """Persist a booking, rejecting a second live booking for the same slot."""
        try:
            label = normalize_slot_label(time_slot_label)
        except ValueError as exc:
            raise ValidationError(str(exc), field="time_slot_label") from None

        with self._lock:
            for record in self._bookings.values():
                if (
                    record["date"] == target.isoformat()
                    and record["time_slot_label"] == label
                    and record["status"] != BookingStatus.CANCELLED.value
                ):
                    raise SlotConflictError(target.isoformat(), label)

            ref = f"BK-{uuid.uuid4().hex[:6].upper()}"
            booking: BookingRecord = {
                "booking_ref": ref,
                "date": target.isoformat(),
                "time_slot_label": label,
                "status": BookingStatus.CONFIRMED.value,
                "total": breakdown.total if breakdown else 0,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            self._bookings[ref] = booking

        logger.info("Booking created: %s on %s at %s", ref, booking["date"], label)
        return booking

    def cancel_booking(self, booking_ref: str) -> bool:
        """Cancel a booking by reference. Returns False if it does not exist."""
        with self._lock:
            record = self._bookings.get(booking_ref)
            if record is None:
                return False
            record["status"] = BookingStatus.CANCELLED.value
        logger.info("Booking cancelled: %s", booking_ref)
        return True

    def get_booking(self, booking_ref: str) -> Optional[BookingRecord]:
        return self._bookings.get(booking_ref)

    def bookings_between(self, start_date: date, end_date: date) -> list[ExistingBooking]:
        """Projection consumed by the availability resolver."""
        with self._lock:
            records = list(self._bookings.values())
        return [
            ExistingBooking(
                date=record["date"],
                time_slot_label=record["time_slot_label"],
                status=record["status"],
            )
            for record in records
            if start_date.isoformat() <= record["date"] <= end_date.isoformat()
        ]

    # ------------------------------------------------------------------ #
    # Admin blocks
    # ------------------------------------------------------------------ #

    def block(self, target: date, time_slot_label: Optional[str] = None,
              reason: Optional[str] = None) -> TimeBlock:
        """Block a single slot, or the whole day when no label is given."""
        label = normalize_slot_label(time_slot_label) if time_slot_label else None
        block = TimeBlock(date=target, time_slot_label=label, reason=reason)
        with self._lock:
            self._blocks = [
                b for b in self._blocks
                if not (b.date == target and b.time_slot_label == label)
            ]
            self._blocks.append(block)
        logger.info("Blocked %s %s", target, label or "(whole day)")
        return block

    def unblock(self, target: date, time_slot_label: Optional[str] = None) -> None:
        label = normalize_slot_label(time_slot_label) if time_slot_label else None
        with self._lock:
            self._blocks = [
                b for b in self._blocks
                if not (b.date == target and b.time_slot_label == label)
            ]

    def blocks_between(self, start_date: date, end_date: date) -> list[TimeBlock]:
        with self._lock:
            return [b for b in self._blocks if start_date <= b.date <= end_date]

    # ------------------------------------------------------------------ #
    # Settings
    # ------------------------------------------------------------------ #

    @property
    def weekly_hours(self) -> list[WeeklyHoursRule]:
        return list(self._weekly_hours)

    def replace_weekly_hours(self, rules: Iterable[WeeklyHoursRule]) -> None:
        with self._lock:
            self._weekly_hours = list(rules)
        logger.info("Weekly hours replaced (%d rules)", len(self._weekly_hours))

    @property
    def buffer(self) -> BookingBufferSetting:
        return self._buffer

    def update_buffer(self, value: float) -> BookingBufferSetting:
        """Admin update path. Validates range; last write wins."""
        setting = BookingBufferSetting.from_value(value)
        self._buffer = setting
        logger.info("Booking buffer set to %.1f hours", setting.booking_buffer_hours)
        return setting

    def reset(self) -> None:
        """Clear bookings and blocks. Used by test fixtures for isolation."""
        with self._lock:
            self._bookings.clear()
            self._blocks.clear()
