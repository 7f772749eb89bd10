"""Question and section models for the eligibility questionnaires.

Each question type maps to a specific UI input and validation rule:

    - yes-no: boolean toggle
    - numeric: number input bounded by ``validation.min`` / ``validation.max``
    - date: date picker bounded by ``validation.min_date`` / ``validation.max_date``
    - select-one: pick one option from ``metadata.options``
    - select-multiple: pick zero or more options from ``metadata.options``
    - blood-pressure: {systolic, diastolic} pair
    - lipid-profile: {ldl, hdl, cholesterol, triglyceride}
    - cycle-durations: the last 6 menstrual cycle lengths

Questions and sections are defined once in ``tables/*.yaml`` and never
mutated at runtime, so both models are frozen.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuestionType(str, Enum):
    """Closed set of question input types."""

    YES_NO = "yes-no"
    NUMERIC = "numeric"
    DATE = "date"
    SELECT_ONE = "select-one"
    SELECT_MULTIPLE = "select-multiple"
    BLOOD_PRESSURE = "blood-pressure"
    LIPID_PROFILE = "lipid-profile"
    CYCLE_DURATIONS = "cycle-durations"


# A date bound is either a fixed date or "today", resolved at validation time.
DateBound = Union[date, Literal["today"]]


class Option(BaseModel):
    """A selectable option for select-one / select-multiple questions."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class QuestionMetadata(BaseModel):
    """Display hints; never consulted by the engines."""

    model_config = ConfigDict(frozen=True)

    unit: Optional[str] = None
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    options: Optional[List[Option]] = None


class ValidationRule(BaseModel):
    """Inclusive bounds for numeric, date, and cycle-durations questions."""

    model_config = ConfigDict(frozen=True)

    min: Optional[float] = None
    max: Optional[float] = None
    min_date: Optional[DateBound] = None
    max_date: Optional[DateBound] = None

    @model_validator(mode="after")
    def _chk(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min must be <= max")
        return self


class Conditional(BaseModel):
    """Show the owning question only when ``depends_on`` was answered with
    exactly ``expected_value``.

    See :mod:`contrasafe_rulesets.visibility` for the equality rule.
    """

    model_config = ConfigDict(frozen=True)

    depends_on: str
    expected_value: Any


class Question(BaseModel):
    """A single question inside a section."""

    model_config = ConfigDict(frozen=True)

    qid: str
    text: str
    question_type: QuestionType
    required: bool = True
    conditional: Optional[Conditional] = None
    validation: Optional[ValidationRule] = None
    metadata: Optional[QuestionMetadata] = None

    @property
    def option_values(self) -> list[str]:
        """Option values for select questions, empty for other types."""
        if self.metadata is None or not self.metadata.options:
            return []
        return [o.value for o in self.metadata.options]


class Section(BaseModel):
    """An ordered group of questions presented together."""

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    questions: List[Question] = Field(default_factory=list)

    def get_question(self, qid: str) -> Question:
        """Return the question with ``qid``.

        Raises:
            KeyError: if the section has no such question.
        """
        for q in self.questions:
            if q.qid == qid:
                return q
        raise KeyError(qid)
