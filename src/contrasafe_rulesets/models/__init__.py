"""Public model re-exports for contrasafe_rulesets.

Consumers should import from ``contrasafe_rulesets.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions ---
from contrasafe_rulesets.models.question import (
    Conditional,
    DateBound,
    Option,
    Question,
    QuestionMetadata,
    QuestionType,
    Section,
    ValidationRule,
)

# --- Answers ---
from contrasafe_rulesets.models.answer import (
    CYCLE_QIDS,
    LMP_QID,
    AnswerState,
    AnswerValue,
    BloodPressure,
    CycleAnswers,
    CycleLength,
    LipidProfile,
    ValidationResult,
)

# --- Results ---
from contrasafe_rulesets.models.result import (
    CalendarDay,
    Category,
    ContributingFactor,
    DateWindow,
    DayType,
    FABAdvisory,
    FABEligibilityResult,
    FABMethodResult,
    FemaleSterilizationResult,
    FertilityMethod,
    FertilityResult,
    MaleSterilizationResult,
    PredictedDate,
    SafeWindow,
    SterilizationResult,
)

# --- Steps ---
from contrasafe_rulesets.models.session import (
    EngineResult,
    ResultStep,
    SectionStep,
    StepResult,
)

__all__ = [
    # Questions
    "Conditional",
    "DateBound",
    "Option",
    "Question",
    "QuestionMetadata",
    "QuestionType",
    "Section",
    "ValidationRule",
    # Answers
    "CYCLE_QIDS",
    "LMP_QID",
    "AnswerState",
    "AnswerValue",
    "BloodPressure",
    "CycleAnswers",
    "CycleLength",
    "LipidProfile",
    "ValidationResult",
    # Results
    "CalendarDay",
    "Category",
    "ContributingFactor",
    "DateWindow",
    "DayType",
    "FABAdvisory",
    "FABEligibilityResult",
    "FABMethodResult",
    "FemaleSterilizationResult",
    "FertilityMethod",
    "FertilityResult",
    "MaleSterilizationResult",
    "PredictedDate",
    "SafeWindow",
    "SterilizationResult",
    # Steps
    "EngineResult",
    "ResultStep",
    "SectionStep",
    "StepResult",
]
