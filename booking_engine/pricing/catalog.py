"""Static price list for installable line items, with surcharge rules.

Each variant tag owns its base price and an explicit list of surcharge
rules. Adding a device type is a new CATALOG entry; changing a price is an
edit here, never a formula change in the aggregator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from booking_engine.errors import ValidationError

PER_ADDITIONAL_DEVICE_DISCOUNT = 10


class Category(str, Enum):
    """Breakdown grouping. Only the first three earn the multi-device discount."""

    TV = "tv"
    SMART_HOME = "smart_home"
    SOUND_SYSTEM = "sound_system"
    TV_SERVICE = "tv_service"
    WIRING = "wiring"
    HANDYMAN = "handyman"


CATEGORY_LABELS: dict[Category, str] = {
    Category.TV: "TV Mounting",
    Category.SMART_HOME: "Smart Home",
    Category.SOUND_SYSTEM: "Sound System",
    Category.TV_SERVICE: "TV Services",
    Category.WIRING: "Wire Concealment & Outlet Installation",
    Category.HANDYMAN: "Handyman Services",
}

MULTI_DEVICE_CATEGORIES: tuple[Category, ...] = (
    Category.TV,
    Category.SMART_HOME,
    Category.SOUND_SYSTEM,
)


@dataclass(frozen=True)
class SurchargeRule:
    """An add-on charged per unit when ``applies(item)`` is true."""

    label: str
    amount: int
    applies: Callable[[Any], bool]
    note: Optional[str] = None


@dataclass(frozen=True)
class CatalogEntry:
    """Price list row.

    ``additional_unit_price`` prices every unit after the first of a line
    item at a lower rate, shown as a separate ``additional_label`` entry.
    ``half_hour_rate`` makes the entry hourly: ``base_price`` covers the first
    hour and each started half hour after it costs ``half_hour_rate``.
    """

    label: str
    base_price: int
    category: Category
    note: Optional[str] = None
    surcharges: tuple[SurchargeRule, ...] = ()
    additional_label: Optional[str] = None
    additional_unit_price: Optional[int] = None
    half_hour_rate: Optional[int] = None


@dataclass(frozen=True)
class VolumeDiscount:
    """Flat amount off each counted unit after the first, across the whole cart."""

    label: str
    per_additional: int
    counts: Callable[[Any], int]
    note: Optional[str] = None


def _flag(name: str) -> Callable[[Any], bool]:
    return lambda item: bool(getattr(item, name, False))


def _mount_purchase(mount_type: str, tv_size: str) -> Callable[[Any], bool]:
    return lambda item: (
        not item.mount_provided_by_customer
        and item.mount_type == mount_type
        and item.tv_size == tv_size
    )


def _purchased_mounts(item: Any) -> int:
    if item.variant == "tv_mount" and not item.mount_provided_by_customer:
        return item.quantity
    return 0


def _outlets(item: Any) -> int:
    return item.quantity if item.variant == "outlet" else 0


# Variants priced per line rather than per unit, so a cart may hold one of each.
SINGLE_LINE_VARIANTS = frozenset({"outlet", "handyman"})

_MASONRY_NOTE = "Brick, stone or other non-drywall surface"

CATALOG: dict[str, CatalogEntry] = {
    "tv_mount": CatalogEntry(
        label="TV Mounting",
        base_price=100,
        category=Category.TV,
        note="Drywall mounting, any TV size",
        surcharges=(
            SurchargeRule("Over Fireplace Mounting", 100, _flag("over_fireplace"),
                          "Mounting above a fireplace"),
            SurchargeRule("Non-Drywall Surface (Brick, Masonry, etc.)", 50,
                          _flag("masonry_surface"), _MASONRY_NOTE),
            SurchargeRule("High-Rise/Steel Stud Mounting", 25, _flag("high_rise")),
            SurchargeRule("Outlet Relocation & Wire Concealment", 100,
                          _flag("outlet_relocation"), "New outlet installed behind the TV"),
            SurchargeRule("TV Unmounting", 50, _flag("unmount_existing"),
                          "Removing the TV currently on the wall"),
            SurchargeRule('Fixed Mount (32"-55")', 50, _mount_purchase("fixed", "small")),
            SurchargeRule('Fixed Mount (56"+)', 65, _mount_purchase("fixed", "large")),
            SurchargeRule('Tilting Mount (32"-55")', 65, _mount_purchase("tilting", "small")),
            SurchargeRule('Tilting Mount (56"+)', 80, _mount_purchase("tilting", "large")),
            SurchargeRule('Full Motion Mount (32"-55")', 90,
                          _mount_purchase("full_motion", "small")),
            SurchargeRule('Full Motion Mount (56"+)', 120, _mount_purchase("full_motion", "large")),
        ),
    ),
    "unmount": CatalogEntry(
        label="TV Unmounting",
        base_price=50,
        category=Category.TV_SERVICE,
        note="Removing a mounted TV from the wall",
    ),
    "remount": CatalogEntry(
        label="Remount on Existing Mount",
        base_price=50,
        category=Category.TV_SERVICE,
        note="Customer provides matching arms",
    ),
    "outlet": CatalogEntry(
        label="Standard Wire Concealment (New Outlet Behind TV)",
        base_price=100,
        category=Category.WIRING,
        additional_label="Additional Outlet Installation (Same Visit)",
        additional_unit_price=90,
    ),
    "doorbell": CatalogEntry(
        label="Smart Doorbell Installation",
        base_price=75,
        category=Category.SMART_HOME,
        note="Please ensure device is charged if wireless",
        surcharges=(
            SurchargeRule("Brick/Masonry Surface", 10, _flag("masonry_surface"), _MASONRY_NOTE),
        ),
    ),
    "floodlight": CatalogEntry(
        label="Smart Floodlight Installation",
        base_price=125,
        category=Category.SMART_HOME,
        note="Wireless or existing wiring required",
    ),
    "camera": CatalogEntry(
        label="Smart Security Camera Installation",
        base_price=75,
        category=Category.SMART_HOME,
        surcharges=(
            SurchargeRule("Height Fee (above 8 ft)", 25, _flag("height_above_eight_feet"),
                          "Additional fee for installations above 8ft"),
        ),
    ),
    "soundbar": CatalogEntry(
        label="Soundbar Installation",
        base_price=125,
        category=Category.SOUND_SYSTEM,
        note="Mounting, wiring and audio calibration",
        surcharges=(
            SurchargeRule("Brick/Masonry Surface", 25, _flag("masonry_surface"), _MASONRY_NOTE),
        ),
    ),
    "surround_sound": CatalogEntry(
        label="5.1 Surround Sound Installation",
        base_price=350,
        category=Category.SOUND_SYSTEM,
        note="Speaker placement and calibration",
        surcharges=(
            SurchargeRule("Brick/Masonry Surface", 25, _flag("masonry_surface"), _MASONRY_NOTE),
        ),
    ),
    "speaker_mount": CatalogEntry(
        label="Speaker Wall Mount",
        base_price=75,
        category=Category.SOUND_SYSTEM,
        surcharges=(
            SurchargeRule("Brick/Masonry Surface", 25, _flag("masonry_surface"), _MASONRY_NOTE),
        ),
    ),
    "handyman": CatalogEntry(
        label="General Handyman Work",
        base_price=100,
        category=Category.HANDYMAN,
        note="Shelves, mirrors, furniture assembly. $50 for every additional 30 minutes",
        half_hour_rate=50,
    ),
}

VOLUME_DISCOUNTS: tuple[VolumeDiscount, ...] = (
    VolumeDiscount("Multi-Outlet Discount", 10, _outlets, "$10 off each additional outlet"),
    VolumeDiscount("Mount Bundle Discount", 5, _purchased_mounts,
                   "$5 off each additional mount purchased"),
)


def get_catalog_entry(variant: str) -> CatalogEntry:
    """Look up a variant tag, rejecting anything not in the catalog."""
    entry = CATALOG.get(variant)
    if entry is None:
        known = ", ".join(sorted(CATALOG))
        raise ValidationError(f"Unknown line item '{variant}'. Known: {known}.", field="variant")
    return entry


def list_catalog() -> list[dict]:
    """Return the public price list."""
    return [
        {
            "id": variant,
            "name": entry.label,
            "category": entry.category.value,
            "base_price": entry.base_price,
            "note": entry.note,
            "surcharges": [{"label": s.label, "amount": s.amount} for s in entry.surcharges],
            "additional_unit_price": entry.additional_unit_price,
            "half_hour_rate": entry.half_hour_rate,
        }
        for variant, entry in CATALOG.items()
    ]


def list_discounts(per_additional_device: int = PER_ADDITIONAL_DEVICE_DISCOUNT) -> list[dict]:
    """Return the public discount rules, multi-device first."""
    discounts = [
        {
            "label": f"Multi-Device Discount ({CATEGORY_LABELS[category]})",
            "per_additional": per_additional_device,
        }
        for category in MULTI_DEVICE_CATEGORIES
    ]
    discounts.extend(
        {"label": d.label, "per_additional": d.per_additional} for d in VOLUME_DISCOUNTS
    )
    return discounts
