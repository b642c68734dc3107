"""
Business calendar: weekly open hours resolved into dated operating windows.

Days of the week are numbered the way the admin hours table stores them,
0 = Sunday through 6 = Saturday.

Usage:
    calendar = BusinessCalendar(DEFAULT_WEEKLY_HOURS)
    window = calendar.resolve_window(date(2025, 3, 17))
    if window is None:
        ...  # closed
"""

import logging
from datetime import date, datetime, time
from typing import Iterable, Optional

from booking_engine.errors import ConfigurationError
from booking_engine.schemas.scheduling_schema import OperatingWindow, WeeklyHoursRule
from booking_engine.utils import minutes_since_midnight, parse_hhmm

logger = logging.getLogger(__name__)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

DEFAULT_WEEKLY_HOURS: list[WeeklyHoursRule] = [
    WeeklyHoursRule(day_of_week=0, start_time="11:00", end_time="19:00"),
    WeeklyHoursRule(day_of_week=1, start_time="18:30", end_time="22:30"),
    WeeklyHoursRule(day_of_week=2, start_time="18:30", end_time="22:30"),
    WeeklyHoursRule(day_of_week=3, start_time="18:30", end_time="22:30"),
    WeeklyHoursRule(day_of_week=4, start_time="18:30", end_time="22:30"),
    WeeklyHoursRule(day_of_week=5, start_time="18:30", end_time="22:30"),
    WeeklyHoursRule(day_of_week=6, start_time="11:00", end_time="19:00"),
]


def day_of_week(value: date) -> int:
    """Sunday-based weekday index (Python's weekday() is Monday-based)."""
    return (value.weekday() + 1) % 7


class BusinessCalendar:
    """Read-only snapshot of the weekly hours table."""

    def __init__(self, rules: Iterable[WeeklyHoursRule]) -> None:
        self._rules: dict[int, list[WeeklyHoursRule]] = {}
        for rule in rules:
            self._rules.setdefault(rule.day_of_week, []).append(rule)

    @property
    def rules(self) -> list[WeeklyHoursRule]:
        return [rule for day in sorted(self._rules) for rule in self._rules[day]]

    def rule_for(self, day: int) -> Optional[WeeklyHoursRule]:
        """Return the active rule for ``day``, or None when the day is closed.

        Raises:
            ConfigurationError: more than one active rule for the day.
        """
        active = [r for r in self._rules.get(day, []) if r.is_available]
        if len(active) > 1:
            raise ConfigurationError(
                f"{len(active)} active hours rules for {DAY_NAMES[day]}", day_of_week=day
            )
        return active[0] if active else None

    def resolve_window(self, target: date) -> Optional[OperatingWindow]:
        """Resolve the operating window for ``target``; None means closed.

        Raises:
            ConfigurationError: the day's rule is malformed.
        """
        day = day_of_week(target)
        rule = self.rule_for(day)
        if rule is None:
            return None

        start = _parse_rule_time(rule.start_time, day)
        end = _parse_rule_time(rule.end_time, day)
        if minutes_since_midnight(start) >= minutes_since_midnight(end):
            raise ConfigurationError(
                f"{DAY_NAMES[day]} hours start at {rule.start_time} but end at {rule.end_time}",
                day_of_week=day,
            )

        return OperatingWindow(
            date=target,
            start=datetime.combine(target, start),
            end=datetime.combine(target, end),
        )


def _parse_rule_time(value: str, day: int) -> time:
    try:
        return parse_hhmm(value)
    except ValueError as exc:
        raise ConfigurationError(f"{DAY_NAMES[day]}: {exc}", day_of_week=day) from None
