"""Standard Days Method (SDM) eligibility and fertile-window engine.

Eligibility needs all six cycle lengths and a rounded average between
``SDM_MIN_AVG_CYCLE`` and ``SDM_MAX_AVG_CYCLE`` days (inclusive).  The
fertile window is always cycle days 8-19; concrete dates are produced only
once an LMP date is known.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from contrasafe_rulesets.constants import SDM_MAX_AVG_CYCLE, SDM_MIN_AVG_CYCLE
from contrasafe_rulesets.cycles import cycle_statistics, next_period, sdm_fertile_window, sdm_safe_window
from contrasafe_rulesets.models.answer import CycleAnswers
from contrasafe_rulesets.models.result import FertilityResult

logger = logging.getLogger(__name__)

METHOD = "sdm"

INCOMPLETE_MESSAGE = "Please provide all 6 cycle lengths to determine eligibility."


def build_educational_message(eligible: bool) -> str:
    base = (
        f"Standard Days Method requires consistent tracking and cycles "
        f"{SDM_MIN_AVG_CYCLE}–{SDM_MAX_AVG_CYCLE} days long.\n\n"
    )
    protection = "Does not protect against sexually transmitted infections."
    if not eligible:
        return (
            base
            + "You may want to consider other contraceptive methods that are more "
            "suitable for irregular cycles. "
            + protection
        )
    return base + "Typical-use effectiveness is approximately 87%.\n\n" + protection


def is_sdm_eligible(avg_cycle_length: int | None) -> bool:
    if avg_cycle_length is None:
        return False
    return SDM_MIN_AVG_CYCLE <= avg_cycle_length <= SDM_MAX_AVG_CYCLE


def evaluate_standard_days(answers: CycleAnswers | Mapping[str, Any]) -> FertilityResult:
    """Evaluate SDM eligibility and, given an LMP date, the fertile window.

    Args:
        answers: a :class:`CycleAnswers`, or a flat answer state with
                 ``cycle-1``..``cycle-6`` and ``lmp-date``

    Returns:
        A statistics-only result while cycles are incomplete or ineligible,
        an eligible dateless result while the LMP is missing, and a full
        result otherwise.
    """
    if not isinstance(answers, CycleAnswers):
        answers = CycleAnswers.from_answers(answers)

    stats = cycle_statistics(answers.cycle_lengths)
    if stats is None:
        return FertilityResult(
            method=METHOD,
            eligible=False,
            message=INCOMPLETE_MESSAGE,
            educational_message=build_educational_message(False),
        )

    avg = stats.average
    if not is_sdm_eligible(avg):
        logger.debug("SDM: average cycle %d outside %d-%d", avg, SDM_MIN_AVG_CYCLE, SDM_MAX_AVG_CYCLE)
        return FertilityResult(
            method=METHOD,
            eligible=False,
            avg_cycle_length=avg,
            message=(
                f"Your average cycle length is {avg} days. The Standard Days Method is "
                f"validated only for women with cycles between {SDM_MIN_AVG_CYCLE} and "
                f"{SDM_MAX_AVG_CYCLE} days."
            ),
            educational_message=build_educational_message(False),
        )

    lmp = answers.lmp_date
    if lmp is None:
        return FertilityResult(
            method=METHOD,
            eligible=True,
            avg_cycle_length=avg,
            message=(
                f"Your average cycle length is {avg} days. "
                "You are eligible for the Standard Days Method!"
            ),
            educational_message=build_educational_message(True),
        )

    logger.debug("SDM: eligible, average cycle %d, LMP %s", avg, lmp.isoformat())
    return FertilityResult(
        method=METHOD,
        eligible=True,
        avg_cycle_length=avg,
        lmp_date=lmp,
        fertile_window=sdm_fertile_window(lmp),
        safe_window=sdm_safe_window(lmp, avg),
        next_period=next_period(lmp, avg),
        message=(
            f"Based on your average cycle length of {avg} days and your last "
            "menstrual period, your fertile window has been calculated."
        ),
        educational_message=build_educational_message(True),
    )


def sdm_cycles_eligible(answers: Mapping[str, Any]) -> bool:
    """Navigator hook: do the answered cycles qualify for SDM?"""
    return evaluate_standard_days(answers).eligible
