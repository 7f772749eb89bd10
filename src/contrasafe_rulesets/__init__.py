"""contrasafe_rulesets — Rule-based contraceptive eligibility SDK.

Public API:
    QuestionnaireFlow — drives a questionnaire section by section
    SectionStore      — loads the YAML section tables into typed models
    StepResult        — union type returned by the flow's step methods
    SectionStep       — step: present a section's visible questions
    ResultStep        — step: questionnaire finished with an engine result

Building blocks:
    validate_answer / validate_section — per-question answer validation
    is_question_visible / visible_questions — conditional visibility
    NAVIGATORS        — section navigators keyed by questionnaire id

Engines:
    evaluate_female_sterilization — WHO-MEC style female sterilization
    evaluate_male_sterilization   — WHO-MEC style male sterilization
    evaluate_calendar_method      — Calendar Method fertile window
    evaluate_standard_days        — Standard Days Method fertile window
    evaluate_fab_eligibility      — natural method (SYM / CAL) eligibility
"""

from contrasafe_rulesets.engines import (
    evaluate_calendar_method,
    evaluate_fab_eligibility,
    evaluate_female_sterilization,
    evaluate_male_sterilization,
    evaluate_standard_days,
)
from contrasafe_rulesets.models.answer import CycleAnswers, ValidationResult
from contrasafe_rulesets.models.result import (
    Category,
    FABEligibilityResult,
    FemaleSterilizationResult,
    FertilityResult,
    MaleSterilizationResult,
)
from contrasafe_rulesets.models.session import ResultStep, SectionStep, StepResult
from contrasafe_rulesets.navigation import NAVIGATORS, SectionNavigator
from contrasafe_rulesets.questionnaire import QuestionnaireFlow
from contrasafe_rulesets.sections import SectionStore
from contrasafe_rulesets.validator import validate_answer, validate_section
from contrasafe_rulesets.visibility import is_question_visible, visible_questions

__all__ = [
    # Flow & store
    "QuestionnaireFlow",
    "SectionStore",
    # Steps
    "ResultStep",
    "SectionStep",
    "StepResult",
    # Building blocks
    "NAVIGATORS",
    "SectionNavigator",
    "is_question_visible",
    "validate_answer",
    "validate_section",
    "visible_questions",
    # Engines
    "evaluate_calendar_method",
    "evaluate_fab_eligibility",
    "evaluate_female_sterilization",
    "evaluate_male_sterilization",
    "evaluate_standard_days",
    # Models
    "Category",
    "CycleAnswers",
    "FABEligibilityResult",
    "FemaleSterilizationResult",
    "FertilityResult",
    "MaleSterilizationResult",
    "ValidationResult",
]
