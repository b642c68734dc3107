"""
Centralized configuration with environment variable overrides.

Business hours defaults, slot granularity, the booking buffer and the
pricing discount are all configurable here. Engine functions take these
values as arguments; only the application wiring reads ``settings``.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

MAX_BUFFER_HOURS = 72.0
BUFFER_STEP_HOURS = 0.5


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Business identity and locale."""

    name: str = os.getenv("BUSINESS_NAME", "Picture Perfect TV Install")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "America/New_York")


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot grid and minimum-notice settings."""

    slot_interval_minutes: int = _safe_int("SLOT_INTERVAL_MINUTES", "60")
    booking_buffer_hours: float = _safe_float("BOOKING_BUFFER_HOURS", "2")
    horizon_days: int = _safe_int("AVAILABILITY_HORIZON_DAYS", "30")


@dataclass(frozen=True)
class PricingConfig:
    """Quote-time pricing knobs. Catalog prices live in pricing.catalog."""

    per_additional_device_discount: int = _safe_int("PER_ADDITIONAL_DEVICE_DISCOUNT", "10")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "booking-engine")


def is_valid_buffer_hours(value: float) -> bool:
    """Buffer must sit in [0, 72] on a half-hour grid."""
    if not 0.0 <= value <= MAX_BUFFER_HOURS:
        return False
    return (value / BUFFER_STEP_HOURS).is_integer()


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not is_valid_buffer_hours(config.scheduling.booking_buffer_hours):
        raise ValueError(
            "BOOKING_BUFFER_HOURS must be between 0 and 72 in 0.5 steps, "
            f"got {config.scheduling.booking_buffer_hours}"
        )
    if not 5 <= config.scheduling.slot_interval_minutes <= 240:
        raise ValueError(
            "SLOT_INTERVAL_MINUTES must be between 5 and 240, "
            f"got {config.scheduling.slot_interval_minutes}"
        )
    if config.scheduling.horizon_days < 1:
        raise ValueError(
            f"AVAILABILITY_HORIZON_DAYS must be >= 1, got {config.scheduling.horizon_days}"
        )
    if config.pricing.per_additional_device_discount < 0:
        raise ValueError(
            "PER_ADDITIONAL_DEVICE_DISCOUNT must be >= 0, "
            f"got {config.pricing.per_additional_device_discount}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
