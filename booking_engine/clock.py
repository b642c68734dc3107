"""
Clock abstraction for availability computations.

Slot times are naive datetimes in the business's local timezone, so "now"
must be produced in that same frame. Callers inject a clock instead of the
engine reading the system time directly.
"""

from datetime import datetime
from typing import Callable

import pytz

Clock = Callable[[], datetime]


def business_clock(timezone_name: str) -> Clock:
    """Return a clock yielding naive local time in ``timezone_name``."""
    tz = pytz.timezone(timezone_name)

    def now() -> datetime:
        return datetime.now(pytz.UTC).astimezone(tz).replace(tzinfo=None)

    return now


def fixed_clock(moment: datetime) -> Clock:
    """Return a clock frozen at ``moment``. Used by tests and replays."""

    def now() -> datetime:
        return moment

    return now
