"""Answer validator — checks one candidate answer against its question.

Validation never raises: every failure comes back as a
:class:`~contrasafe_rulesets.models.answer.ValidationResult` with a
human-readable ``error``.  The required check runs first; type-specific
rules are dispatched through ``_TYPE_VALIDATORS``, which covers every
:class:`QuestionType` member.

Numbers and dates are read with the same coercion helpers the engines use
(:mod:`contrasafe_rulesets.answers`), so an accepted value is interpreted
identically downstream.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Mapping

from contrasafe_rulesets.answers import field, is_empty, to_date, to_number
from contrasafe_rulesets.constants import REQUIRED_CYCLE_COUNT
from contrasafe_rulesets.models.answer import ValidationResult
from contrasafe_rulesets.models.question import DateBound, Question, QuestionType, Section
from contrasafe_rulesets.visibility import visible_questions

logger = logging.getLogger(__name__)

# Blood pressure bounds (mmHg), inclusive
SYSTOLIC_RANGE = (60, 250)
DIASTOLIC_RANGE = (40, 150)

# (field, label, min, max) in mg/dL, checked in this order
LIPID_RANGES = (
    ("ldl", "LDL", 0, 500),
    ("hdl", "HDL", 0, 150),
    ("cholesterol", "Cholesterol", 0, 500),
    ("triglyceride", "Triglyceride", 0, 1000),
)


def _fmt(bound: float) -> str:
    # 21.0 -> "21", 7.5 -> "7.5"
    return f"{bound:g}"


def _resolve_bound(bound: DateBound | None, today: date) -> date | None:
    if bound == "today":
        return today
    return bound


# ---------------------------------------------------------------------------
# Type-specific validators
# ---------------------------------------------------------------------------

def _validate_numeric(question: Question, value: Any, today: date) -> ValidationResult:
    num = to_number(value)
    if num is None:
        return ValidationResult.fail("Please enter a valid number")
    rule = question.validation
    if rule is not None:
        if rule.min is not None and num < rule.min:
            return ValidationResult.fail(f"Value must be at least {_fmt(rule.min)}")
        if rule.max is not None and num > rule.max:
            return ValidationResult.fail(f"Value must be at most {_fmt(rule.max)}")
    return ValidationResult.ok()


def _validate_date(question: Question, value: Any, today: date) -> ValidationResult:
    day = to_date(value)
    if day is None:
        return ValidationResult.fail("Please select a valid date")
    rule = question.validation
    if rule is not None:
        min_date = _resolve_bound(rule.min_date, today)
        max_date = _resolve_bound(rule.max_date, today)
        if min_date is not None and day < min_date:
            return ValidationResult.fail("Date is too early")
        if max_date is not None and day > max_date:
            return ValidationResult.fail("Date is too late")
    return ValidationResult.ok()


def _validate_blood_pressure(question: Question, value: Any, today: date) -> ValidationResult:
    if isinstance(value, (str, int, float, list, tuple)):
        return ValidationResult.fail("Please enter both systolic and diastolic values")
    sys_ = to_number(field(value, "systolic"))
    dia = to_number(field(value, "diastolic"))
    if sys_ is None or dia is None:
        return ValidationResult.fail("Please enter both systolic and diastolic values")

    lo, hi = SYSTOLIC_RANGE
    if not lo <= sys_ <= hi:
        return ValidationResult.fail(f"Systolic pressure should be between {lo} and {hi} mmHg")
    lo, hi = DIASTOLIC_RANGE
    if not lo <= dia <= hi:
        return ValidationResult.fail(f"Diastolic pressure should be between {lo} and {hi} mmHg")
    # Equal readings are not a valid measurement
    if sys_ <= dia:
        return ValidationResult.fail("Systolic should be higher than diastolic")
    return ValidationResult.ok()


def _validate_lipid_profile(question: Question, value: Any, today: date) -> ValidationResult:
    if isinstance(value, (str, int, float, list, tuple)):
        return ValidationResult.fail("Please enter all lipid values")
    for name, label, lo, hi in LIPID_RANGES:
        num = to_number(field(value, name))
        if num is None or not lo <= num <= hi:
            return ValidationResult.fail(f"{label} should be between {lo} and {hi} mg/dL")
    return ValidationResult.ok()


def _validate_cycle_durations(question: Question, value: Any, today: date) -> ValidationResult:
    if not isinstance(value, (list, tuple)):
        return ValidationResult.fail(f"Please enter all {REQUIRED_CYCLE_COUNT} cycle lengths")
    lengths = [to_number(v) for v in value]
    populated = [n for n in lengths if n is not None]
    # Count first: a short list fails even when every entry is in range
    if len(populated) != REQUIRED_CYCLE_COUNT or len(lengths) != REQUIRED_CYCLE_COUNT:
        return ValidationResult.fail(f"Please enter all {REQUIRED_CYCLE_COUNT} cycle lengths")

    rule = question.validation
    if rule is not None:
        for n in populated:
            if (rule.min is not None and n < rule.min) or (rule.max is not None and n > rule.max):
                lo = _fmt(rule.min) if rule.min is not None else "0"
                hi = _fmt(rule.max) if rule.max is not None else "any"
                return ValidationResult.fail(
                    f"Each cycle length should be between {lo} and {hi} days"
                )
    return ValidationResult.ok()


def _no_structural_check(question: Question, value: Any, today: date) -> ValidationResult:
    return ValidationResult.ok()


_TYPE_VALIDATORS: dict[QuestionType, Callable[[Question, Any, date], ValidationResult]] = {
    QuestionType.YES_NO: _no_structural_check,
    QuestionType.NUMERIC: _validate_numeric,
    QuestionType.DATE: _validate_date,
    QuestionType.SELECT_ONE: _no_structural_check,
    QuestionType.SELECT_MULTIPLE: _no_structural_check,
    QuestionType.BLOOD_PRESSURE: _validate_blood_pressure,
    QuestionType.LIPID_PROFILE: _validate_lipid_profile,
    QuestionType.CYCLE_DURATIONS: _validate_cycle_durations,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_answer(
    question: Question,
    value: Any,
    *,
    today: date | None = None,
) -> ValidationResult:
    """Validate a single candidate answer.

    Args:
        question: the question definition (type, required flag, bounds)
        value: the raw candidate answer; ``None`` or ``""`` means unanswered
        today: the date the ``today`` bound resolves to (defaults to
               :meth:`date.today`)

    Returns:
        ``ValidationResult(valid=True)`` or ``valid=False`` with an error.
    """
    if is_empty(value):
        if question.required:
            return ValidationResult.fail("This question is required")
        return ValidationResult.ok()

    validator = _TYPE_VALIDATORS.get(question.question_type)
    if validator is None:
        logger.warning("No validator for question type %s (%s)", question.question_type, question.qid)
        return ValidationResult.ok()
    return validator(question, value, today or date.today())


def validate_section(
    section: Section,
    answers: Mapping[str, Any],
    *,
    today: date | None = None,
) -> dict[str, str]:
    """Validate every *visible* question of a section.

    Hidden conditional questions are skipped, so a stale answer to a
    question that is no longer shown never blocks the section.

    Returns:
        ``{qid: error}`` for each failing question; empty when the section
        may be advanced.
    """
    errors: dict[str, str] = {}
    for q in visible_questions(section.questions, answers):
        result = validate_answer(q, answers.get(q.qid), today=today)
        if not result.valid:
            errors[q.qid] = result.error
    return errors


# ---------------------------------------------------------------------------
# Standalone checks
#
# Not wired to any table question: the tables carry their own numeric
# bounds.  Callers that collect age or weight/height outside the flow use
# these directly.
# ---------------------------------------------------------------------------

def validate_age(age: Any) -> ValidationResult:
    """Age check used by personal-characteristics screens (10-70 years)."""
    if is_empty(age):
        return ValidationResult.fail("Age is required")
    num = to_number(age)
    if num is None or not 10 <= num <= 70:
        return ValidationResult.fail("Age should be between 10 and 70")
    return ValidationResult.ok()


def validate_bmi(weight_kg: Any, height_cm: Any) -> ValidationResult:
    """Check weight/height plausibility and the derived BMI.

    Unanswered or non-numeric inputs fail; nothing here raises.
    """
    weight = to_number(weight_kg)
    height = to_number(height_cm)
    if weight is None or height is None:
        return ValidationResult.fail("Weight and height are required")
    if weight <= 0 or height <= 0:
        return ValidationResult.fail("Weight and height must be positive")
    if not 30 <= weight <= 200:
        return ValidationResult.fail("Weight should be between 30 and 200 kg")
    if not 100 <= height <= 250:
        return ValidationResult.fail("Height should be between 100 and 250 cm")
    bmi = weight / (height / 100) ** 2
    if not 10 <= bmi <= 70:
        return ValidationResult.fail("Calculated BMI is outside expected range")
    return ValidationResult.ok()
