"""
Price aggregator: turns a cart of line items into an itemized breakdown.

Entries for each item follow input order (base charge, then one entry per
surcharge). Discounts are appended afterwards: one multi-device discount per
eligible category in the fixed Category order, then the outlet and mount
bundle discounts in catalog order. Any permutation of the same cart produces
the same total and the same set of entries.
"""

import logging
import math
from collections import Counter
from typing import Any, Iterable, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from booking_engine.errors import ValidationError
from booking_engine.pricing.catalog import (
    CATEGORY_LABELS,
    MULTI_DEVICE_CATEGORIES,
    PER_ADDITIONAL_DEVICE_DISCOUNT,
    SINGLE_LINE_VARIANTS,
    VOLUME_DISCOUNTS,
    CatalogEntry,
    Category,
    get_catalog_entry,
)
from booking_engine.schemas.pricing_schema import (
    BreakdownEntry,
    LineItem,
    PriceBreakdown,
    cart_adapter,
)

logger = logging.getLogger(__name__)


def _with_quantity(label: str, quantity: int) -> str:
    return f"{label} ({quantity})" if quantity > 1 else label


def multi_device_discount(unit_count: int, per_additional: int) -> int:
    """Discount for ``unit_count`` units in one category (0 for a single unit)."""
    if unit_count <= 1:
        return 0
    return (unit_count - 1) * per_additional


def hourly_price(hours: float, first_hour: int, half_hour_rate: int) -> int:
    """First hour at ``first_hour``, then every started half hour at ``half_hour_rate``."""
    extra_half_hours = math.ceil(max(hours - 1, 0) * 2)
    return first_hour + extra_half_hours * half_hour_rate


def _base_entries(entry: CatalogEntry, item: LineItem) -> list[BreakdownEntry]:
    if entry.half_hour_rate is not None:
        hours = item.hours
        unit = "hour" if hours == 1 else "hours"
        return [
            BreakdownEntry(
                label=f"{entry.label} ({hours:g} {unit})",
                amount=hourly_price(hours, entry.base_price, entry.half_hour_rate),
                note=entry.note,
            )
        ]

    if entry.additional_unit_price is not None and item.quantity > 1:
        extra = item.quantity - 1
        return [
            BreakdownEntry(label=entry.label, amount=entry.base_price, note=entry.note),
            BreakdownEntry(
                label=f"{entry.additional_label} ({extra})",
                amount=entry.additional_unit_price * extra,
            ),
        ]

    return [
        BreakdownEntry(
            label=_with_quantity(entry.label, item.quantity),
            amount=entry.base_price * item.quantity,
            note=entry.note,
        )
    ]


def _check_single_lines(cart: Sequence[LineItem]) -> None:
    seen = Counter(item.variant for item in cart if item.variant in SINGLE_LINE_VARIANTS)
    for variant, count in seen.items():
        if count > 1:
            raise ValidationError(
                f"'{variant}' may appear once per cart, got {count} lines", field=variant
            )


def compute_breakdown(
    cart: Sequence[LineItem],
    per_additional_device_discount: Optional[int] = None,
) -> PriceBreakdown:
    """Price a validated cart. An empty cart is a zero total, not an error."""
    per_additional = (
        PER_ADDITIONAL_DEVICE_DISCOUNT
        if per_additional_device_discount is None
        else per_additional_device_discount
    )
    if per_additional < 0:
        raise ValidationError(
            f"per_additional_device_discount must be >= 0, got {per_additional}",
            field="per_additional_device_discount",
        )
    _check_single_lines(cart)

    entries: list[BreakdownEntry] = []
    units: Counter[Category] = Counter()
    volume: Counter[str] = Counter()

    for item in cart:
        catalog_entry = get_catalog_entry(item.variant)
        units[catalog_entry.category] += item.quantity
        for rule in VOLUME_DISCOUNTS:
            volume[rule.label] += rule.counts(item)

        entries.extend(_base_entries(catalog_entry, item))
        for rule in catalog_entry.surcharges:
            if rule.applies(item):
                entries.append(
                    BreakdownEntry(
                        label=_with_quantity(rule.label, item.quantity),
                        amount=rule.amount * item.quantity,
                        note=rule.note,
                    )
                )

    for category in MULTI_DEVICE_CATEGORIES:
        discount = multi_device_discount(units[category], per_additional)
        if discount:
            entries.append(
                BreakdownEntry(
                    label=f"Multi-Device Discount ({CATEGORY_LABELS[category]})",
                    amount=-discount,
                    note=f"${per_additional} off each additional device",
                    is_discount=True,
                )
            )

    for rule in VOLUME_DISCOUNTS:
        discount = multi_device_discount(volume[rule.label], rule.per_additional)
        if discount:
            entries.append(
                BreakdownEntry(label=rule.label, amount=-discount, note=rule.note, is_discount=True)
            )

    total = sum(entry.amount for entry in entries)
    logger.debug("Priced %d line items: total=%d", len(cart), total)
    return PriceBreakdown(entries=entries, total=total)


def parse_cart(raw_items: Iterable[Any]) -> list[LineItem]:
    """Validate raw cart payloads into line items.

    Raises:
        ValidationError: with the first problem found, naming the item index.
    """
    try:
        return cart_adapter.validate_python(list(raw_items))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid cart at {location}: {first['msg']}", field=location) from None


def quote_cart(
    raw_items: Iterable[Any],
    per_additional_device_discount: Optional[int] = None,
) -> PriceBreakdown:
    """Validate then price a raw cart payload."""
    return compute_breakdown(parse_cart(raw_items), per_additional_device_discount)
