"""Calendar Method (rhythm method) eligibility and fertile-window engine.

Every one of the six cycles must lie within ``CALENDAR_MIN_CYCLE`` to
``CALENDAR_MAX_CYCLE`` days.  The fertile window runs from
``shortest - 18`` (at least day 1) to ``longest - 11``; when that range is
empty the method is reported as unreliable with a variability warning,
which is a different outcome from an out-of-range cycle.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from contrasafe_rulesets.constants import CALENDAR_MAX_CYCLE, CALENDAR_MIN_CYCLE
from contrasafe_rulesets.cycles import (
    calendar_days,
    calendar_fertile_days,
    calendar_safe_window,
    complete_cycles,
    cycle_statistics,
    cycles_in_calendar_range,
    fertile_window,
    next_period,
    predicted_date,
)
from contrasafe_rulesets.models.answer import CycleAnswers
from contrasafe_rulesets.models.result import FertilityResult

logger = logging.getLogger(__name__)

METHOD = "calendar"

EDUCATIONAL_MESSAGE = (
    "Fertility awareness methods require consistent tracking and correct use.\n\n"
    "Typical-use effectiveness: ~76–88%.\n\n"
    "Perfect-use effectiveness: up to ~95%.\n\n"
    "Does not protect against sexually transmitted infections."
)

INCOMPLETE_MESSAGE = "Please provide all 6 cycle lengths to calculate your fertile window."
IRREGULAR_MESSAGE = "Your cycles may be irregular. Calendar-based methods may not be reliable."
IRREGULAR_WARNING = (
    f"One or more of your cycles is outside the typical range "
    f"({CALENDAR_MIN_CYCLE}-{CALENDAR_MAX_CYCLE} days)."
)
VARIABILITY_MESSAGE = "Cycle variability is high. Calendar method may not be reliable."
VARIABILITY_WARNING = (
    "The difference between your shortest and longest cycles is too large for "
    "accurate prediction."
)


def evaluate_calendar_method(answers: CycleAnswers | Mapping[str, Any]) -> FertilityResult:
    """Evaluate Calendar Method eligibility and, given an LMP, the cycle dates.

    Args:
        answers: a :class:`CycleAnswers`, or a flat answer state with
                 ``cycle-1``..``cycle-6`` and ``lmp-date``

    Returns:
        A :class:`FertilityResult` with ``method="calendar"``.
    """
    if not isinstance(answers, CycleAnswers):
        answers = CycleAnswers.from_answers(answers)

    stats = cycle_statistics(answers.cycle_lengths)
    if stats is None:
        return FertilityResult(
            method=METHOD,
            eligible=False,
            message=INCOMPLETE_MESSAGE,
            educational_message=EDUCATIONAL_MESSAGE,
        )

    shortest, longest, avg = stats
    lmp = answers.lmp_date

    if not cycles_in_calendar_range(complete_cycles(answers.cycle_lengths)):
        logger.debug("Calendar method: cycle outside %d-%d", CALENDAR_MIN_CYCLE, CALENDAR_MAX_CYCLE)
        return FertilityResult(
            method=METHOD,
            eligible=False,
            shortest_cycle=shortest,
            longest_cycle=longest,
            avg_cycle_length=avg,
            lmp_date=lmp,
            message=IRREGULAR_MESSAGE,
            educational_message=EDUCATIONAL_MESSAGE,
            warning=IRREGULAR_WARNING,
        )

    earliest, latest, valid = calendar_fertile_days(shortest, longest)
    if not valid:
        logger.debug("Calendar method: empty fertile range %s > %s", earliest, latest)
        return FertilityResult(
            method=METHOD,
            eligible=False,
            shortest_cycle=shortest,
            longest_cycle=longest,
            avg_cycle_length=avg,
            earliest_fertile_day=earliest,
            latest_fertile_day=latest,
            lmp_date=lmp,
            message=VARIABILITY_MESSAGE,
            educational_message=EDUCATIONAL_MESSAGE,
            warning=VARIABILITY_WARNING,
        )

    if lmp is None:
        return FertilityResult(
            method=METHOD,
            eligible=True,
            shortest_cycle=shortest,
            longest_cycle=longest,
            avg_cycle_length=avg,
            earliest_fertile_day=earliest,
            latest_fertile_day=latest,
            message=(
                f"Based on your cycles (shortest: {shortest} days, longest: {longest} days), "
                "you are eligible for the Calendar Method!"
            ),
            educational_message=EDUCATIONAL_MESSAGE,
        )

    logger.debug("Calendar method: fertile days %s-%s, LMP %s", earliest, latest, lmp.isoformat())
    return FertilityResult(
        method=METHOD,
        eligible=True,
        shortest_cycle=shortest,
        longest_cycle=longest,
        avg_cycle_length=avg,
        earliest_fertile_day=earliest,
        latest_fertile_day=latest,
        lmp_date=lmp,
        fertile_window=fertile_window(lmp, earliest, latest),
        safe_window=calendar_safe_window(lmp, earliest, latest),
        next_period=next_period(lmp, avg),
        recalculation_date=predicted_date(lmp, avg),
        calendar_days=calendar_days(lmp, avg, earliest, latest),
        message=(
            f"Based on your cycles, your fertile window is from Day {earliest} "
            f"to Day {latest} of your cycle."
        ),
        educational_message=EDUCATIONAL_MESSAGE,
    )


def calendar_cycles_eligible(answers: Mapping[str, Any]) -> bool:
    """Navigator hook: do the answered cycles qualify for the Calendar Method?"""
    return evaluate_calendar_method(answers).eligible
