"""Tests for correlation ID propagation into log records."""

import contextvars
import logging

from booking_engine.logging_context import (
    NO_REQUEST_ID,
    RequestIdFilter,
    get_request_id,
    get_request_logger,
    new_request_id,
    reset_request_id,
    set_request_id,
)


class TestRequestId:
    def test_default_outside_request(self):
        ctx = contextvars.Context()
        assert ctx.run(get_request_id) == "NO_REQUEST_ID"

    def test_set_and_get(self):
        def run():
            set_request_id("REQ-12345678")
            return get_request_id()

        assert contextvars.copy_context().run(run) == "REQ-12345678"

    def test_reset_restores_previous_id(self):
        def run():
            outer = set_request_id("REQ-outer000")
            inner = set_request_id("REQ-inner000")
            reset_request_id(inner)
            seen = get_request_id()
            reset_request_id(outer)
            return seen, get_request_id()

        assert contextvars.Context().run(run) == ("REQ-outer000", NO_REQUEST_ID)

    def test_new_ids_are_unique(self):
        ids = {new_request_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(i.startswith("REQ-") and len(i) == 12 for i in ids)


class TestRequestLogger:
    def test_filter_attached_once(self):
        logger = get_request_logger("booking_engine.tests.once")
        get_request_logger("booking_engine.tests.once")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1

    def test_record_carries_request_id(self, caplog):
        def run():
            set_request_id("REQ-abcdef01")
            logger = get_request_logger("booking_engine.tests.record")
            with caplog.at_level(logging.INFO, logger="booking_engine.tests.record"):
                logger.info("resolving availability")

        contextvars.copy_context().run(run)
        (record,) = [r for r in caplog.records if r.name == "booking_engine.tests.record"]
        assert record.request_id == "REQ-abcdef01"
