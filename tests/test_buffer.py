"""Tests for the minimum-notice booking buffer."""

from datetime import datetime

import pytest

from booking_engine.errors import ValidationError
from booking_engine.scheduling.buffer import apply_buffer, buffer_cutoff, buffer_excluded
from booking_engine.scheduling.calendar import BusinessCalendar, DEFAULT_WEEKLY_HOURS
from booking_engine.scheduling.slots import generate_slots
from booking_engine.schemas.scheduling_schema import BookingBufferSetting
from tests.conftest import MONDAY


@pytest.fixture
def monday_slots():
    window = BusinessCalendar(DEFAULT_WEEKLY_HOURS).resolve_window(MONDAY)
    return generate_slots(window, 60)


class TestApplyBuffer:
    def test_monday_evening_scenario(self, monday_slots):
        now = datetime(2025, 3, 17, 19, 0)
        kept = apply_buffer(monday_slots, now, 2)
        assert [s.label for s in kept] == ["9:30 PM"]

    def test_excluded_complement(self, monday_slots):
        now = datetime(2025, 3, 17, 19, 0)
        excluded = buffer_excluded(monday_slots, now, 2)
        assert [s.label for s in excluded] == ["6:30 PM", "7:30 PM", "8:30 PM"]

    def test_zero_buffer_keeps_future_slots(self, monday_slots):
        now = datetime(2025, 3, 17, 17, 0)
        assert apply_buffer(monday_slots, now, 0) == monday_slots

    def test_zero_buffer_drops_started_slots(self, monday_slots):
        now = datetime(2025, 3, 17, 20, 0)
        kept = apply_buffer(monday_slots, now, 0)
        assert [s.label for s in kept] == ["8:30 PM", "9:30 PM"]

    def test_zero_buffer_drops_slots_after_close(self, monday_slots):
        now = datetime(2025, 3, 17, 23, 0)
        assert apply_buffer(monday_slots, now, 0) == []

    def test_slot_exactly_at_cutoff_is_kept(self, monday_slots):
        now = datetime(2025, 3, 17, 18, 30)
        kept = apply_buffer(monday_slots, now, 1)
        assert kept[0].label == "7:30 PM"

    def test_half_hour_buffer(self, monday_slots):
        now = datetime(2025, 3, 17, 19, 0)
        kept = apply_buffer(monday_slots, now, BookingBufferSetting(0.5))
        assert [s.label for s in kept] == ["7:30 PM", "8:30 PM", "9:30 PM"]

    @pytest.mark.parametrize("hours", [0, 0.5, 1, 2, 3.5, 24, 72])
    def test_nothing_before_cutoff_survives(self, monday_slots, hours):
        now = datetime(2025, 3, 17, 17, 0)
        cutoff = buffer_cutoff(now, hours)
        assert all(slot.start >= cutoff for slot in apply_buffer(monday_slots, now, hours))

    def test_negative_buffer_rejected(self, monday_slots):
        with pytest.raises(ValidationError):
            apply_buffer(monday_slots, datetime(2025, 3, 17, 12, 0), -1)


class TestBookingBufferSetting:
    def test_default_is_two_hours(self):
        assert BookingBufferSetting().booking_buffer_hours == 2
        assert BookingBufferSetting.from_value(None).booking_buffer_hours == 2

    def test_from_string(self):
        assert BookingBufferSetting.from_value("4.5").booking_buffer_hours == 4.5

    @pytest.mark.parametrize("value", [-1, 73, 1.25, "soon", True])
    def test_rejected_not_clamped(self, value):
        with pytest.raises(ValidationError) as exc_info:
            BookingBufferSetting.from_value(value)
        assert exc_info.value.field == "booking_buffer_hours"
