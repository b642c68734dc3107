"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""

import pytest


class TestSchemaImports:
    def test_import_scheduling_schema(self):
        from booking_engine.schemas.scheduling_schema import (
            BookingBufferSetting, BookingStatus, DayAvailability, TimeSlot,
        )
        assert BookingStatus.CANCELLED == "cancelled"
        assert BookingBufferSetting().booking_buffer_hours == 2

    def test_import_pricing_schema(self):
        from booking_engine.schemas.pricing_schema import (
            BreakdownEntry, LineItem, PriceBreakdown, cart_adapter,
        )
        assert PriceBreakdown().total == 0


class TestSchedulingImports:
    def test_import_scheduling_package(self):
        from booking_engine.scheduling import (
            AvailabilityResolver, BusinessCalendar, DEFAULT_WEEKLY_HOURS,
            apply_buffer, buffer_excluded, day_of_week, generate_slots,
        )
        assert len(DEFAULT_WEEKLY_HOURS) == 7
        assert callable(generate_slots)

    def test_package_all_matches_exports(self):
        import booking_engine.scheduling as scheduling
        for name in scheduling.__all__:
            assert hasattr(scheduling, name)


class TestPricingImports:
    def test_import_pricing_package(self):
        from booking_engine.pricing import CATALOG, compute_breakdown, quote_cart
        assert len(CATALOG) >= 7
        assert callable(quote_cart)

    def test_package_all_matches_exports(self):
        import booking_engine.pricing as pricing
        for name in pricing.__all__:
            assert hasattr(pricing, name)


class TestSupportImports:
    def test_import_errors(self):
        from booking_engine.errors import (
            BookingEngineError, ConfigurationError, SlotConflictError,
            TransientReadFailure, ValidationError,
        )
        for exc in (ConfigurationError, SlotConflictError, TransientReadFailure, ValidationError):
            assert issubclass(exc, BookingEngineError)

    def test_import_store(self):
        from booking_engine.store import BookingStore
        assert BookingStore().buffer.booking_buffer_hours == 2

    def test_import_api(self):
        from booking_engine.api import create_app
        app = create_app()
        paths = {route.path for route in app.routes}
        assert "/api/calendar/availability" in paths
        assert "/api/price-quote" in paths


class TestConfigImport:
    def test_import_config(self):
        from booking_engine.config import settings
        assert settings.scheduling.slot_interval_minutes > 0

    @pytest.mark.parametrize("module", [
        "booking_engine.clock",
        "booking_engine.logging_context",
        "booking_engine.utils",
    ])
    def test_import_support_modules(self, module):
        import importlib
        assert importlib.import_module(module) is not None
