"""Shared time helpers used across the engine."""

import re
from datetime import datetime, time

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_LABEL_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")


def parse_hhmm(value: str) -> time:
    """Parse a 24-hour ``HH:MM`` string.

    Examples:
        >>> parse_hhmm("18:30")
        datetime.time(18, 30)
    """
    match = _HHMM_RE.match(value.strip())
    if not match:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return time(int(match.group(1)), int(match.group(2)))


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


def format_slot_label(value: datetime) -> str:
    """Format a slot start the way customers see it.

    Examples:
        >>> format_slot_label(datetime(2025, 3, 17, 14, 0))
        '2:00 PM'
        >>> format_slot_label(datetime(2025, 3, 17, 9, 30))
        '9:30 AM'
    """
    hour = value.hour % 12 or 12
    period = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {period}"


def parse_slot_label(label: str) -> time:
    """Inverse of format_slot_label. Accepts loose spacing and case."""
    match = _LABEL_RE.match(label)
    if not match:
        raise ValueError(f"Expected a label like '2:00 PM', got {label!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if not 1 <= hour <= 12 or minute > 59:
        raise ValueError(f"Expected a label like '2:00 PM', got {label!r}")
    period = match.group(3).upper()
    if period == "PM" and hour < 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0
    return time(hour, minute)


def normalize_slot_label(label: str) -> str:
    """Canonicalize a label so ' 2:00 pm' and '2:00 PM' compare equal."""
    parsed = parse_slot_label(label)
    return format_slot_label(datetime.combine(datetime.min.date(), parsed))
