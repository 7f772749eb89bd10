"""Step models — the contract between the questionnaire flow and callers.

These models define what :class:`~contrasafe_rulesets.questionnaire.QuestionnaireFlow`
returns at each step of a questionnaire.  The flow holds no session; the
caller keeps the answer snapshot and passes it back on every call.

Step types:
  - SectionStep: present a section's visible questions (with any validation
    errors from a rejected advance)
  - ResultStep: the navigator reached the end and the engine produced a result

The ``StepResult`` union covers both cases so callers can dispatch on ``type``.
"""

from typing import Literal, Union

from pydantic import BaseModel

from contrasafe_rulesets.models.question import Question
from contrasafe_rulesets.models.result import (
    FABEligibilityResult,
    FemaleSterilizationResult,
    FertilityResult,
    MaleSterilizationResult,
)


class SectionStep(BaseModel):
    """Flow step: present a section and wait for answers."""

    type: Literal["section"] = "section"
    questionnaire: str
    questionnaire_name: str
    section_key: str
    title: str
    # Only the questions visible under the current answers, in table order
    questions: list[Question]
    # Position of this section in the current section order, 0-100
    progress: int
    is_last: bool
    # {qid: message} for visible questions that failed validation
    errors: dict[str, str] = {}


EngineResult = Union[
    FemaleSterilizationResult, MaleSterilizationResult, FertilityResult, FABEligibilityResult
]


class ResultStep(BaseModel):
    """Flow step: the questionnaire finished with an engine result."""

    type: Literal["result"] = "result"
    questionnaire: str
    questionnaire_name: str
    result: EngineResult


# Callers can match on step.type to dispatch rendering logic.
StepResult = SectionStep | ResultStep
