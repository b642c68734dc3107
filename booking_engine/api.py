"""
HTTP surface for the availability and pricing engine.

GET  /api/calendar/availability      - unavailable slot labels per date
GET  /api/calendar/checkTimeSlot     - point check for one date and slot
GET  /api/calendar/slots             - offerable slots for one date
POST /api/price-quote                - itemized price for a cart
GET  /api/pricing/catalog            - public price list
GET  /api/system-settings/booking-buffer
PUT  /api/system-settings/booking-buffer
"""

from datetime import date, timedelta
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from booking_engine.clock import Clock, business_clock
from booking_engine.config import AppConfig, settings
from booking_engine.errors import ValidationError
from booking_engine.logging_context import (
    get_request_logger,
    new_request_id,
    reset_request_id,
    set_request_id,
)
from booking_engine.pricing.aggregator import quote_cart
from booking_engine.pricing.catalog import list_catalog, list_discounts
from booking_engine.scheduling.availability import AvailabilityResolver
from booking_engine.scheduling.calendar import DEFAULT_WEEKLY_HOURS, BusinessCalendar
from booking_engine.schemas.pricing_schema import PriceQuoteRequest
from booking_engine.schemas.scheduling_schema import BookingBufferSetting
from booking_engine.store import BookingStore

logger = get_request_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class BufferUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_buffer_hours: Any = Field(default=None, alias="bookingBufferHours")


def _parse_query_date(value: str, name: str) -> date:
    """Accept plain dates and the ISO timestamps browser clients send."""
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValidationError(f"{name} must be an ISO date, got {value!r}", field=name) from None


def build_resolver(store: BookingStore, clock: Clock, config: AppConfig = settings) -> AvailabilityResolver:
    """Snapshot the store's hours and buffer into a resolver for one request."""
    return AvailabilityResolver(
        BusinessCalendar(store.weekly_hours or DEFAULT_WEEKLY_HOURS),
        store.bookings_between,
        clock=clock,
        buffer=store.buffer,
        interval_minutes=config.scheduling.slot_interval_minutes,
        blocks_source=store.blocks_between,
    )


def create_app(
    store: Optional[BookingStore] = None,
    clock: Optional[Clock] = None,
    config: AppConfig = settings,
) -> FastAPI:
    """Build the API around an injected store and clock."""
    store = store or BookingStore(
        weekly_hours=DEFAULT_WEEKLY_HOURS,
        buffer=BookingBufferSetting(config.scheduling.booking_buffer_hours),
    )
    clock = clock or business_clock(config.business.timezone)

    app = FastAPI(title=f"{config.business.name} Booking Engine")
    app.state.store = store

    def get_resolver() -> AvailabilityResolver:
        return build_resolver(store, clock, config)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.reason)
        return JSONResponse(
            status_code=422,
            content={"success": False, "message": exc.reason, "field": exc.field},
        )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/calendar/availability")
    def get_availability(
        start_date: str = Query(..., alias="startDate"),
        end_date: str = Query(..., alias="endDate"),
        resolver: AvailabilityResolver = Depends(get_resolver),
    ) -> dict:
        start = _parse_query_date(start_date, "startDate")
        end = _parse_query_date(end_date, "endDate")
        horizon_end = start + timedelta(days=config.scheduling.horizon_days)
        if end > horizon_end:
            end = horizon_end

        days = resolver.get_availability(start, end)
        logger.info("Availability %s..%s: %d dates with restrictions", start, end, len(days))
        return {
            "success": True,
            "unavailableSlots": [
                {
                    "date": day.date.isoformat(),
                    "timeSlots": day.unavailable,
                    "closed": day.closed,
                    "reason": day.reason,
                }
                for day in sorted(days.values(), key=lambda d: d.date)
            ],
        }

    @app.get("/api/calendar/checkTimeSlot")
    def check_time_slot(
        target: str = Query(..., alias="date"),
        time_slot: str = Query(..., alias="timeSlot"),
        resolver: AvailabilityResolver = Depends(get_resolver),
    ) -> dict:
        day = _parse_query_date(target, "date")
        return {
            "success": True,
            "date": day.isoformat(),
            "timeSlot": time_slot,
            "isAvailable": resolver.is_slot_available(day, time_slot),
        }

    @app.get("/api/calendar/slots")
    def list_slots(
        target: str = Query(..., alias="date"),
        resolver: AvailabilityResolver = Depends(get_resolver),
    ) -> dict:
        day = _parse_query_date(target, "date")
        return {
            "success": True,
            "date": day.isoformat(),
            "timeSlots": [slot.label for slot in resolver.available_slots(day)],
        }

    @app.post("/api/price-quote")
    def price_quote(payload: PriceQuoteRequest) -> dict:
        breakdown = quote_cart(payload.items, config.pricing.per_additional_device_discount)
        return {"success": True, **breakdown.model_dump()}

    @app.get("/api/pricing/catalog")
    def pricing_catalog() -> dict:
        return {
            "success": True,
            "services": list_catalog(),
            "discounts": list_discounts(config.pricing.per_additional_device_discount),
        }

    @app.get("/api/system-settings/booking-buffer")
    def get_booking_buffer() -> dict:
        return {"success": True, "bookingBufferHours": store.buffer.booking_buffer_hours}

    @app.put("/api/system-settings/booking-buffer")
    def update_booking_buffer(payload: BufferUpdateRequest) -> dict:
        setting = store.update_buffer(payload.booking_buffer_hours)
        return {"success": True, "bookingBufferHours": setting.booking_buffer_hours}

    return app
