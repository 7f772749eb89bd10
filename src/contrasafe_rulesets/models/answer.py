"""Answer value models.

An ``AnswerState`` is the plain ``{qid: value}`` snapshot owned by the
caller.  The core only reads it.  Structured answers have dedicated models
but plain dicts with the same keys are accepted everywhere.

``CycleAnswers`` is the fixed-shape input of the fertility calculators:
six ordered cycle-length slots plus the last menstrual period date.
"""

from __future__ import annotations

from datetime import date
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from contrasafe_rulesets.answers import get_date, to_number
from contrasafe_rulesets.constants import REQUIRED_CYCLE_COUNT


class BloodPressure(BaseModel):
    """Answer shape for blood-pressure questions (mmHg)."""

    model_config = ConfigDict(frozen=True)

    systolic: Optional[float] = None
    diastolic: Optional[float] = None


class LipidProfile(BaseModel):
    """Answer shape for lipid-profile questions (mg/dL)."""

    model_config = ConfigDict(frozen=True)

    ldl: Optional[float] = None
    hdl: Optional[float] = None
    cholesterol: Optional[float] = None
    triglyceride: Optional[float] = None


AnswerValue = Union[
    bool,
    int,
    float,
    str,
    date,
    List[str],
    List[Optional[float]],
    BloodPressure,
    LipidProfile,
]

AnswerState = Mapping[str, Any]

CycleLength = Union[int, float]

# Flat AnswerState keys used by the fertility questionnaires.
CYCLE_QIDS: tuple[str, ...] = tuple(f"cycle-{i}" for i in range(1, REQUIRED_CYCLE_COUNT + 1))
LMP_QID = "lmp-date"


def _as_length(value: Any) -> CycleLength | None:
    num = to_number(value)
    if num is None:
        return None
    return int(num) if num.is_integer() else num


class CycleAnswers(BaseModel):
    """Six ordered cycle-length slots and the LMP date.

    A slot holds ``None`` until answered.
    """

    model_config = ConfigDict(frozen=True)

    cycle_lengths: List[Optional[CycleLength]] = [None] * REQUIRED_CYCLE_COUNT
    lmp_date: Optional[date] = None

    @field_validator("cycle_lengths")
    @classmethod
    def _six_slots(cls, v: List[Optional[CycleLength]]) -> List[Optional[CycleLength]]:
        if len(v) != REQUIRED_CYCLE_COUNT:
            raise ValueError(
                f"cycle_lengths must have exactly {REQUIRED_CYCLE_COUNT} slots, got {len(v)}"
            )
        return v

    @classmethod
    def from_answers(cls, answers: AnswerState) -> "CycleAnswers":
        """Build from a flat answer state (``cycle-1``..``cycle-6``, ``lmp-date``).

        A list stored under ``cycle-durations`` is used when none of the
        per-cycle keys are present.  Values that cannot be read as a number
        or date are treated as unanswered.
        """
        if "cycle-durations" in answers and not any(q in answers for q in CYCLE_QIDS):
            raw = answers.get("cycle-durations")
            slots = list(raw)[:REQUIRED_CYCLE_COUNT] if isinstance(raw, (list, tuple)) else []
            slots += [None] * (REQUIRED_CYCLE_COUNT - len(slots))
        else:
            slots = [answers.get(qid) for qid in CYCLE_QIDS]

        return cls(
            cycle_lengths=[_as_length(s) for s in slots],
            lmp_date=get_date(answers, LMP_QID),
        )


class ValidationResult(BaseModel):
    """Outcome of validating one answer; ``error`` is set iff not ``valid``."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)
