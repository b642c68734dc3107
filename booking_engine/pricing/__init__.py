from booking_engine.pricing.aggregator import compute_breakdown, hourly_price, parse_cart, quote_cart
from booking_engine.pricing.catalog import (
    CATALOG,
    VOLUME_DISCOUNTS,
    Category,
    get_catalog_entry,
    list_catalog,
    list_discounts,
)

__all__ = [
    "CATALOG",
    "VOLUME_DISCOUNTS",
    "Category",
    "compute_breakdown",
    "get_catalog_entry",
    "hourly_price",
    "list_catalog",
    "list_discounts",
    "parse_cart",
    "quote_cart",
]
