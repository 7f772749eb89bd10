"""Cycle statistics and fertility window calculators.

Pure helpers used by the Calendar Method and Standard Days Method engines.
Cycle days are 1-based: day 1 is the LMP date, so cycle day ``n`` falls on
``LMP + (n - 1)`` days.
"""

from __future__ import annotations

import math
from datetime import date
from typing import NamedTuple, Optional, Sequence

from contrasafe_rulesets.constants import (
    CALENDAR_LONGEST_OFFSET,
    CALENDAR_MAX_CYCLE,
    CALENDAR_MIN_CYCLE,
    CALENDAR_SHORTEST_OFFSET,
    REQUIRED_CYCLE_COUNT,
    SDM_FERTILE_FIRST_DAY,
    SDM_FERTILE_LAST_DAY,
)
from contrasafe_rulesets.dates import add_days, format_date, format_long_date, format_short_day
from contrasafe_rulesets.models.answer import CycleLength
from contrasafe_rulesets.models.result import (
    CalendarDay,
    DateWindow,
    FertilityResult,
    PredictedDate,
    SafeWindow,
)


class CycleStatistics(NamedTuple):
    shortest: CycleLength
    longest: CycleLength
    # Mean rounded half-up to a whole day
    average: int


class FertileDays(NamedTuple):
    earliest: CycleLength
    latest: CycleLength
    # False when earliest > latest (cycle variability too high)
    valid: bool


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (25.5 -> 26)."""
    return math.floor(value + 0.5)


def complete_cycles(cycle_lengths: Sequence[Optional[CycleLength]]) -> list[CycleLength] | None:
    """The answered cycle lengths, or ``None`` unless exactly six are present."""
    answered = [c for c in cycle_lengths if c is not None]
    if len(answered) != REQUIRED_CYCLE_COUNT:
        return None
    return answered


def cycle_statistics(cycle_lengths: Sequence[Optional[CycleLength]]) -> CycleStatistics | None:
    cycles = complete_cycles(cycle_lengths)
    if cycles is None:
        return None
    return CycleStatistics(
        shortest=min(cycles),
        longest=max(cycles),
        average=round_half_up(sum(cycles) / len(cycles)),
    )


def cycles_in_calendar_range(cycles: Sequence[CycleLength]) -> bool:
    return all(CALENDAR_MIN_CYCLE <= c <= CALENDAR_MAX_CYCLE for c in cycles)


def calendar_fertile_days(shortest: CycleLength, longest: CycleLength) -> FertileDays:
    """Calendar Method formula: ``shortest - 18`` to ``longest - 11``.

    The earliest day is clamped to day 1.
    """
    earliest = max(1, shortest - CALENDAR_SHORTEST_OFFSET)
    latest = longest - CALENDAR_LONGEST_OFFSET
    return FertileDays(earliest=earliest, latest=latest, valid=earliest <= latest)


# ---------------------------------------------------------------------------
# Date windows
# ---------------------------------------------------------------------------

def cycle_day_date(lmp: date, day: CycleLength) -> date:
    """Calendar date of cycle day *day* (day 1 = LMP)."""
    return add_days(lmp, int(day) - 1)


def make_window(start: date, end: date | None = None) -> DateWindow:
    return DateWindow(
        start=start,
        end=end,
        start_display=format_date(start),
        end_display=format_date(end) if end is not None else None,
    )


def fertile_window(lmp: date, first_day: CycleLength, last_day: CycleLength) -> DateWindow:
    return make_window(cycle_day_date(lmp, first_day), cycle_day_date(lmp, last_day))


def sdm_fertile_window(lmp: date) -> DateWindow:
    """Days 8-19: LMP+7 through LMP+18."""
    return fertile_window(lmp, SDM_FERTILE_FIRST_DAY, SDM_FERTILE_LAST_DAY)


def sdm_safe_window(lmp: date, avg_cycle_length: int) -> SafeWindow:
    """Days 1-7, and day 20 through the day before the predicted period."""
    return SafeWindow(
        before_fertile=make_window(lmp, cycle_day_date(lmp, SDM_FERTILE_FIRST_DAY - 1)),
        after_fertile=make_window(
            cycle_day_date(lmp, SDM_FERTILE_LAST_DAY + 1),
            add_days(lmp, avg_cycle_length - 1),
        ),
    )


def calendar_safe_window(lmp: date, earliest: CycleLength, latest: CycleLength) -> SafeWindow:
    """Day 1 to ``earliest - 1``, and ``latest + 1`` onward (open-ended).

    There is no "before" window when the fertile window starts on day 1.
    """
    before = None
    if earliest > 1:
        before = make_window(lmp, cycle_day_date(lmp, earliest - 1))
    return SafeWindow(
        before_fertile=before,
        after_fertile=make_window(cycle_day_date(lmp, latest + 1)),
    )


def predicted_date(lmp: date, avg_cycle_length: int) -> PredictedDate:
    """The date ``avg_cycle_length`` days after the LMP, e.g. the next period."""
    when = add_days(lmp, avg_cycle_length)
    return PredictedDate(predicted_date=when, formatted_date=format_long_date(when))


next_period = predicted_date


def calendar_days(
    lmp: date,
    avg_cycle_length: int,
    earliest: CycleLength,
    latest: CycleLength,
) -> list[CalendarDay]:
    """One entry per cycle day 1..avg, typed fertile / expected-period / safe."""
    days: list[CalendarDay] = []
    for day in range(1, avg_cycle_length + 1):
        when = cycle_day_date(lmp, day)
        if earliest <= day <= latest:
            day_type = "fertile"
        elif day == avg_cycle_length:
            day_type = "expected-period"
        else:
            day_type = "safe"
        days.append(
            CalendarDay(
                calendar_date=when,
                formatted_date=format_short_day(when),
                day_type=day_type,
                day_number=day,
            )
        )
    return days


# ---------------------------------------------------------------------------
# Day lookups against a full result
# ---------------------------------------------------------------------------

def is_fertile_day(result: FertilityResult, day: date) -> bool:
    """True when *day* lies in the result's fertile window."""
    if result.fertile_window is None:
        return False
    return result.fertile_window.contains(day)


def is_safe_day(result: FertilityResult, day: date) -> bool:
    """True when *day* lies in either safe window of the result."""
    safe = result.safe_window
    if safe is None:
        return False
    if safe.before_fertile is not None and safe.before_fertile.contains(day):
        return True
    return safe.after_fertile.contains(day)
