"""Day-granularity date helpers for the fertility calculators.

All arithmetic is on :class:`datetime.date`; any ``datetime`` input has its
time of day dropped first, so there is no DST or timezone drift.

Formatting is locale independent: month and weekday names are fixed
English tables, never the process locale.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def to_day(value: date | datetime) -> date:
    """Normalise a ``date`` or ``datetime`` to a plain ``date``."""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_days(start: date | datetime, days: int) -> date:
    return to_day(start) + timedelta(days=days)


def format_date(value: date) -> str:
    """``DD/MM/YYYY``, e.g. ``08/01/2024``."""
    return f"{value.day:02d}/{value.month:02d}/{value.year}"


def format_long_date(value: date) -> str:
    """e.g. ``Monday, March 15, 2027``."""
    return f"{WEEKDAYS[value.weekday()]}, {MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_short_day(value: date) -> str:
    """Abbreviated weekday and day of month, e.g. ``Mon 15``."""
    return f"{WEEKDAYS[value.weekday()][:3]} {value.day}"
