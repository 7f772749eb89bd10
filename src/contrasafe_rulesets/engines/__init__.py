"""Eligibility and fertility engines.

Every engine is a pure function ``answers -> result``; calling it twice
with the same snapshot yields equal results.
"""

from contrasafe_rulesets.engines.calendar_method import evaluate_calendar_method
from contrasafe_rulesets.engines.categories import CATEGORY_PRIORITY, Findings, most_restrictive
from contrasafe_rulesets.engines.fab_eligibility import evaluate_fab_eligibility
from contrasafe_rulesets.engines.female_sterilization import evaluate_female_sterilization
from contrasafe_rulesets.engines.male_sterilization import evaluate_male_sterilization
from contrasafe_rulesets.engines.standard_days import evaluate_standard_days

__all__ = [
    "CATEGORY_PRIORITY",
    "Findings",
    "most_restrictive",
    "evaluate_calendar_method",
    "evaluate_fab_eligibility",
    "evaluate_female_sterilization",
    "evaluate_male_sterilization",
    "evaluate_standard_days",
]
