"""Tests for the in-memory booking store and its write-time conflict check."""

import threading
from datetime import timedelta

import pytest

from booking_engine.errors import SlotConflictError, ValidationError
from booking_engine.pricing.aggregator import compute_breakdown
from booking_engine.schemas.pricing_schema import SmartDeviceItem
from booking_engine.schemas.scheduling_schema import BookingStatus
from tests.conftest import MONDAY


class TestCreateBooking:
    def test_creates_confirmed_booking(self, store):
        record = store.create_booking(MONDAY, "7:30 pm")
        assert record["booking_ref"].startswith("BK-")
        assert record["time_slot_label"] == "7:30 PM"
        assert record["status"] == BookingStatus.CONFIRMED.value

    def test_records_quote_total(self, store):
        breakdown = compute_breakdown([SmartDeviceItem(kind="smart_device", device="floodlight")])
        record = store.create_booking(MONDAY, "7:30 PM", breakdown)
        assert record["total"] == 125

    def test_double_booking_rejected(self, store):
        store.create_booking(MONDAY, "7:30 PM")
        with pytest.raises(SlotConflictError):
            store.create_booking(MONDAY, "7:30 PM")

    def test_same_label_other_day_allowed(self, store):
        store.create_booking(MONDAY, "7:30 PM")
        store.create_booking(MONDAY + timedelta(days=1), "7:30 PM")

    def test_rebook_after_cancel(self, store):
        first = store.create_booking(MONDAY, "7:30 PM")
        assert store.cancel_booking(first["booking_ref"])
        second = store.create_booking(MONDAY, "7:30 PM")
        assert second["booking_ref"] != first["booking_ref"]

    def test_bad_label_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create_booking(MONDAY, "19:30")

    def test_cancel_unknown(self, store):
        assert store.cancel_booking("BK-NOPE") is False

    def test_concurrent_creates_only_one_wins(self, store):
        results: list[str] = []
        barrier = threading.Barrier(8)

        def attempt():
            barrier.wait()
            try:
                store.create_booking(MONDAY, "8:30 PM")
                results.append("ok")
            except SlotConflictError:
                results.append("conflict")

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results.count("ok") == 1
        assert results.count("conflict") == 7


class TestProjection:
    def test_bookings_between_filters_range(self, store):
        store.create_booking(MONDAY, "7:30 PM")
        store.create_booking(MONDAY + timedelta(days=3), "7:30 PM")
        projection = store.bookings_between(MONDAY, MONDAY + timedelta(days=1))
        assert len(projection) == 1
        assert projection[0].date == MONDAY

    def test_cancelled_bookings_are_projected_but_do_not_occupy(self, store):
        record = store.create_booking(MONDAY, "7:30 PM")
        store.cancel_booking(record["booking_ref"])
        (booking,) = store.bookings_between(MONDAY, MONDAY)
        assert booking.occupies_slot is False


class TestBlocksAndSettings:
    def test_block_and_unblock(self, store):
        store.block(MONDAY, "8:30 PM", reason="Truck service")
        store.block(MONDAY + timedelta(days=1))
        assert len(store.blocks_between(MONDAY, MONDAY + timedelta(days=1))) == 2
        store.unblock(MONDAY, "8:30 pm")
        assert [b.time_slot_label for b in store.blocks_between(MONDAY, MONDAY)] == []

    def test_reblocking_replaces_reason(self, store):
        store.block(MONDAY, reason="Holiday")
        store.block(MONDAY, reason="Training day")
        (block,) = store.blocks_between(MONDAY, MONDAY)
        assert block.reason == "Training day"

    def test_update_buffer(self, store):
        assert store.update_buffer(4.5).booking_buffer_hours == 4.5
        assert store.buffer.booking_buffer_hours == 4.5

    def test_update_buffer_rejects_out_of_range(self, store):
        with pytest.raises(ValidationError):
            store.update_buffer(100)
        assert store.buffer.booking_buffer_hours == 2

    def test_reset(self, store):
        store.create_booking(MONDAY, "7:30 PM")
        store.block(MONDAY)
        store.reset()
        assert store.bookings_between(MONDAY, MONDAY) == []
        assert store.blocks_between(MONDAY, MONDAY) == []
