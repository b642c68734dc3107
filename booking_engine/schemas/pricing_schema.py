"""Cart line items and price breakdown models."""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

MAX_QUANTITY = 20

TVSize = Literal["small", "large"]
MountType = Literal["fixed", "tilting", "full_motion"]
SmartDevice = Literal["doorbell", "floodlight", "camera"]
SoundSystem = Literal["soundbar", "surround_sound", "speaker_mount"]
TVService = Literal["unmount", "remount"]

MAX_HANDYMAN_HOURS = 12

# Prices are looked up, never supplied, so unknown keys are rejected.
_ITEM_CONFIG = ConfigDict(extra="forbid", frozen=True)


class TVMountItem(BaseModel):
    model_config = _ITEM_CONFIG

    kind: Literal["tv_mount"]
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    tv_size: TVSize = "small"
    over_fireplace: bool = False
    masonry_surface: bool = False
    high_rise: bool = False
    outlet_relocation: bool = False
    unmount_existing: bool = False
    mount_provided_by_customer: bool = True
    mount_type: Optional[MountType] = None

    @model_validator(mode="after")
    def _check_mount_choice(self) -> "TVMountItem":
        if not self.mount_provided_by_customer and self.mount_type is None:
            raise ValueError("mount_type is required when the customer is not providing a mount")
        if self.mount_provided_by_customer and self.mount_type is not None:
            raise ValueError("mount_type must be omitted when the customer provides the mount")
        return self

    @property
    def variant(self) -> str:
        return "tv_mount"


class TVServiceItem(BaseModel):
    """Standalone unmounting, or remounting onto a mount already on the wall."""

    model_config = _ITEM_CONFIG

    kind: Literal["tv_service"]
    service: TVService
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)

    @property
    def variant(self) -> str:
        return self.service


class OutletItem(BaseModel):
    """New outlets behind TVs with wire concealment. ``quantity`` counts outlets."""

    model_config = _ITEM_CONFIG

    kind: Literal["outlet"]
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)

    @property
    def variant(self) -> str:
        return "outlet"


class SmartDeviceItem(BaseModel):
    model_config = _ITEM_CONFIG

    kind: Literal["smart_device"]
    device: SmartDevice
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    masonry_surface: bool = False
    height_above_eight_feet: bool = False

    @property
    def variant(self) -> str:
        return self.device


class SoundSystemItem(BaseModel):
    model_config = _ITEM_CONFIG

    kind: Literal["sound_system"]
    system: SoundSystem
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    masonry_surface: bool = False

    @property
    def variant(self) -> str:
        return self.system


class HandymanItem(BaseModel):
    model_config = _ITEM_CONFIG

    kind: Literal["handyman"]
    hours: float = Field(gt=0, le=MAX_HANDYMAN_HOURS)

    @property
    def quantity(self) -> int:
        return 1

    @property
    def variant(self) -> str:
        return "handyman"


LineItem = Annotated[
    Union[TVMountItem, TVServiceItem, OutletItem, SmartDeviceItem, SoundSystemItem, HandymanItem],
    Field(discriminator="kind"),
]

cart_adapter: TypeAdapter[list[LineItem]] = TypeAdapter(list[LineItem])


class BreakdownEntry(BaseModel):
    """One priced line: a base charge, a surcharge, or a discount."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: int
    note: Optional[str] = None
    is_discount: bool = False


class PriceBreakdown(BaseModel):
    entries: list[BreakdownEntry] = Field(default_factory=list)
    total: int = 0


class PriceQuoteRequest(BaseModel):
    """Raw cart payload. Items are validated by the aggregator."""

    items: list[dict[str, Any]] = Field(default_factory=list)
