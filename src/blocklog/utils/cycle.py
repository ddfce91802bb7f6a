"""Training cycle resolution.

Maps any calendar date onto a repeating 7-week mesocycle:

- Weeks 1-6: progressive training, each with its own prescription
- Week 7: deload week, reusing the week 6 prescription

The cycle is anchored at a fixed Monday (the first day of week 1). Dates
before the anchor wrap backwards, so the day before the anchor is the Sunday
of a deload week.

Example:
```
>>> resolve("2026-01-12")
CycleDay(weekday=1, prescription_week=1, is_deload=False, week_in_cycle=1)
>>> resolve("2026-02-23")
CycleDay(weekday=1, prescription_week=6, is_deload=True, week_in_cycle=7)
```
"""

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..errors import ValidationError

logger = logging.getLogger(__name__)

# Monday, January 12, 2026
DEFAULT_CYCLE_START = date(2026, 1, 12)

CYCLE_WEEKS = 7
PRESCRIPTION_WEEKS = 6
DAYS_PER_WEEK = 7

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]
SHORT_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass(frozen=True)
class CycleDay:
    """Where a calendar date falls in the training cycle."""

    weekday: int  # 1=Monday ... 7=Sunday
    prescription_week: int  # 1-6
    is_deload: bool
    week_in_cycle: int  # 1-7

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "weekday": self.weekday,
            "prescription_week": self.prescription_week,
            "is_deload": self.is_deload,
            "week_in_cycle": self.week_in_cycle,
        }


def parse_date(value: str | date) -> date:
    """Parse a YYYY-MM-DD string (or pass a date through).

    Raises:
        ValidationError: If the string is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValidationError(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value} ({e})") from e


class CycleResolver:
    """Resolves dates to cycle positions relative to a fixed Monday epoch."""

    def __init__(self, cycle_start: date = DEFAULT_CYCLE_START):
        if cycle_start.isoweekday() != 1:
            raise ValidationError(
                f"Cycle start {cycle_start.isoformat()} must be a Monday"
            )
        self.cycle_start = cycle_start

    def resolve(self, day: str | date) -> CycleDay:
        """Determine weekday, prescription week and deload status for a date."""
        day = parse_date(day)

        days_since_start = (day - self.cycle_start).days
        # Floor division keeps negative offsets on the correct side of week boundaries
        weeks_since_start = days_since_start // DAYS_PER_WEEK
        week_in_cycle = weeks_since_start % CYCLE_WEEKS + 1

        is_deload = week_in_cycle == CYCLE_WEEKS
        prescription_week = min(week_in_cycle, PRESCRIPTION_WEEKS)

        result = CycleDay(
            weekday=day.isoweekday(),
            prescription_week=prescription_week,
            is_deload=is_deload,
            week_in_cycle=week_in_cycle,
        )
        logger.debug("Resolved %s to %s", day.isoformat(), result)
        return result

    def month_days(self, year: int, month: int) -> list[tuple[date, CycleDay]]:
        """Get every date of a month with its cycle position."""
        if month < 1 or month > 12:
            raise ValidationError(f"Invalid month: {month}")
        days_in_month = calendar.monthrange(year, month)[1]
        return [
            (day, self.resolve(day))
            for day in (date(year, month, n) for n in range(1, days_in_month + 1))
        ]


_default_resolver = CycleResolver()


def resolve(day: str | date) -> CycleDay:
    """Convenience function to resolve a date against the default epoch."""
    return _default_resolver.resolve(day)


def day_name(day_number: int) -> str:
    """Get the day name for a day number (1-7)."""
    if 1 <= day_number <= 7:
        return DAY_NAMES[day_number - 1]
    return "Unknown"


def short_day_name(day_number: int) -> str:
    """Get the short day name for a day number (1-7)."""
    if 1 <= day_number <= 7:
        return SHORT_DAY_NAMES[day_number - 1]
    return "???"


def week_start(day: str | date) -> date:
    """Get the Monday of the week containing the given date."""
    day = parse_date(day)
    return day - timedelta(days=day.isoweekday() - 1)


def week_dates(day: str | date) -> list[date]:
    """Get Monday through Sunday of the week containing the given date."""
    start = week_start(day)
    return [start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]
