"""Eligibility constants shared across the SDK.

These values are referenced by the validator, navigators, and engines.
They mirror the WHO Medical Eligibility Criteria and the WHO Fertility
Awareness Methods handbook conventions encoded in ``tables/*.yaml``.

Several constants can be overridden via environment variables so that
deployments can adjust method thresholds without code changes.
"""

import os

# Number of past cycles both fertility calculators require.
REQUIRED_CYCLE_COUNT = 6

# Standard Days Method: rounded average cycle length must fall in this
# inclusive range.
# Overridable via SDM_MIN_AVG_CYCLE / SDM_MAX_AVG_CYCLE env vars.
SDM_MIN_AVG_CYCLE = int(os.getenv("SDM_MIN_AVG_CYCLE", "26"))
SDM_MAX_AVG_CYCLE = int(os.getenv("SDM_MAX_AVG_CYCLE", "32"))

# SDM fertile days are a fixed cycle-day range, 1-based and inclusive.
SDM_FERTILE_FIRST_DAY = 8
SDM_FERTILE_LAST_DAY = 19

# Calendar Method: every individual cycle must fall in this inclusive range.
# Overridable via CALENDAR_MIN_CYCLE / CALENDAR_MAX_CYCLE env vars.
CALENDAR_MIN_CYCLE = int(os.getenv("CALENDAR_MIN_CYCLE", "21"))
CALENDAR_MAX_CYCLE = int(os.getenv("CALENDAR_MAX_CYCLE", "35"))

# Calendar Method formula: earliest fertile day = shortest - 18,
# latest fertile day = longest - 11.
CALENDAR_SHORTEST_OFFSET = 18
CALENDAR_LONGEST_OFFSET = 11

# BMI at or above this value adds a caution (C) finding for female
# sterilization.  Overridable via BMI_CAUTION_THRESHOLD env var.
BMI_CAUTION_THRESHOLD = float(os.getenv("BMI_CAUTION_THRESHOLD", "30"))

# Upper bound on navigator walks when building the section order for
# progress display.  Overridable via SECTION_ORDER_MAX_ITERATIONS env var.
SECTION_ORDER_MAX_ITERATIONS = int(os.getenv("SECTION_ORDER_MAX_ITERATIONS", "20"))

# Questionnaire identifiers, matching the YAML file stems under tables/.
FEMALE_STERILIZATION = "female_sterilization"
MALE_STERILIZATION = "male_sterilization"
CALENDAR_METHOD = "calendar_method"
STANDARD_DAYS = "standard_days"
FAB_ELIGIBILITY = "fab_eligibility"

QUESTIONNAIRES: tuple[str, ...] = (
    FEMALE_STERILIZATION,
    MALE_STERILIZATION,
    CALENDAR_METHOD,
    STANDARD_DAYS,
    FAB_ELIGIBILITY,
)

# Human-readable questionnaire names for step payloads and logging.
QUESTIONNAIRE_NAMES: dict[str, str] = {
    FEMALE_STERILIZATION: "Female Sterilization Eligibility",
    MALE_STERILIZATION: "Male Sterilization (Vasectomy) Eligibility",
    CALENDAR_METHOD: "Calendar Method Calculator",
    STANDARD_DAYS: "Standard Days Method Calculator",
    FAB_ELIGIBILITY: "Natural Method (FAB) Eligibility",
}
