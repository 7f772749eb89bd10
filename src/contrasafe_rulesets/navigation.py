"""Section navigators — per-questionnaire state machines over section keys.

Each questionnaire has a closed set of section keys (a ``str`` enum) and a
:class:`SectionNavigator` built from:

  - an ordered tuple of sections, giving the default next/previous
    adjacency (the last section's successor is the end, ``None``)
  - optional branch rules for the few sections whose successor or
    predecessor depends on the answers

Navigators are pure and never raise: an unknown section key logs a
warning and yields ``None``, which callers treat as "no further section".

Branch points:

  - female sterilization: any immediate-delay answer skips from
    ``fs-exclude-delay`` straight to ``fs-sti-risk`` (and back)
  - male sterilization: an explicit "no" to wanting permanent
    contraception ends the questionnaire after the first section
  - Calendar Method / SDM: the LMP section is reached only when the
    method's engine accepts the cycle lengths
  - natural-method (FAB) screen: a "yes" to current pregnancy ends the
    questionnaire after the first section
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from contrasafe_rulesets.constants import (
    CALENDAR_METHOD,
    FAB_ELIGIBILITY,
    FEMALE_STERILIZATION,
    MALE_STERILIZATION,
    SECTION_ORDER_MAX_ITERATIONS,
    STANDARD_DAYS,
)
from contrasafe_rulesets.cycles import round_half_up
from contrasafe_rulesets.engines.calendar_method import calendar_cycles_eligible
from contrasafe_rulesets.engines.fab_eligibility import is_pregnant
from contrasafe_rulesets.engines.female_sterilization import has_early_delay
from contrasafe_rulesets.engines.male_sterilization import DESIRE_QID
from contrasafe_rulesets.engines.standard_days import sdm_cycles_eligible

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section keys
# ---------------------------------------------------------------------------

class FemaleSterilizationSection(str, Enum):
    EXCLUDE_DELAY = "fs-exclude-delay"
    POSTPARTUM = "fs-postpartum"
    POST_ABORTION = "fs-post-abortion"
    CARDIOVASCULAR = "fs-cardiovascular"
    THROMBOEMBOLISM = "fs-thromboembolism"
    HIV_IMMUNOLOGY = "fs-hiv-immunology"
    ENDOCRINE = "fs-endocrine"
    HAEMATOLOGY = "fs-haematology"
    RESPIRATORY = "fs-respiratory"
    GYNECOLOGIC = "fs-gynecologic"
    STI_RISK = "fs-sti-risk"
    COUNSELLING_CHECK = "fs-counselling-check"


class MaleSterilizationSection(str, Enum):
    REPRODUCTIVE_INTENT = "ms-reproductive-intent"
    PERSONAL_CHARACTERISTICS = "ms-personal-characteristics"
    HIV_STATUS = "ms-hiv-status"
    ENDOCRINE = "ms-endocrine"
    ANAEMIA = "ms-anaemia"
    GENITAL_CONDITIONS = "ms-genital-conditions"
    SYSTEMIC_CONDITIONS = "ms-systemic-conditions"
    SCROTAL_STRUCTURAL = "ms-scrotal-structural"


class FABSection(str, Enum):
    CURRENT_PREGNANCY = "fab-current-pregnancy"
    POSTPARTUM = "fab-postpartum"
    RECENT_ABORTION = "fab-recent-abortion"
    LIFE_STAGE = "fab-life-stage"
    MENSTRUAL_INFECTION = "fab-menstrual-infection"
    DRUGS_MEDICAL = "fab-drugs-medical"
    STI_RISK = "fab-sti-risk"
    PREGNANCY_RISK = "fab-pregnancy-risk"


class FertilitySection(str, Enum):
    """Shared by the Calendar Method and Standard Days Method calculators."""

    ELIGIBILITY_INFO = "eligibility-info"
    CYCLE_LENGTHS = "cycle-lengths"
    LMP_DATE = "lmp-date"


SectionKey = Union[
    FemaleSterilizationSection, MaleSterilizationSection, FertilitySection, FABSection
]

# (answers, default neighbour) -> neighbour actually taken
BranchRule = Callable[[Mapping[str, Any], Optional[Enum]], Optional[Enum]]


# ---------------------------------------------------------------------------
# Navigator
# ---------------------------------------------------------------------------

class SectionNavigator:
    """Next/previous transitions over one questionnaire's sections.

    Args:
        name: questionnaire id, used in log messages
        order: sections in their default order; the first is the start
        next_rules: per-section overrides of the default successor
        previous_rules: per-section overrides of the default predecessor
    """

    def __init__(
        self,
        name: str,
        order: tuple[Enum, ...],
        *,
        next_rules: Mapping[Enum, BranchRule] | None = None,
        previous_rules: Mapping[Enum, BranchRule] | None = None,
    ) -> None:
        self.name = name
        self.order = order
        self._key_type = type(order[0])
        self._next: dict[Enum, Optional[Enum]] = {
            key: order[i + 1] if i + 1 < len(order) else None for i, key in enumerate(order)
        }
        self._previous: dict[Enum, Optional[Enum]] = {
            key: order[i - 1] if i > 0 else None for i, key in enumerate(order)
        }
        self._next_rules = dict(next_rules or {})
        self._previous_rules = dict(previous_rules or {})

    @property
    def first(self) -> Enum:
        return self.order[0]

    def _coerce(self, section: Enum | str) -> Optional[Enum]:
        try:
            return self._key_type(section)
        except (TypeError, ValueError):
            logger.warning("%s: unknown section key %r", self.name, section)
            return None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def next_section(
        self, current: Enum | str | None, answers: Mapping[str, Any]
    ) -> Optional[Enum]:
        """Section after *current*; ``None`` at the end.

        ``current=None`` means "not started" and yields the first section.
        """
        if current is None:
            return self.first
        key = self._coerce(current)
        if key is None:
            return None
        default = self._next[key]
        rule = self._next_rules.get(key)
        return rule(answers, default) if rule else default

    def previous_section(
        self, current: Enum | str | None, answers: Mapping[str, Any]
    ) -> Optional[Enum]:
        """Section before *current*; ``None`` at (or before) the start."""
        if current is None:
            return None
        key = self._coerce(current)
        if key is None:
            return None
        default = self._previous[key]
        rule = self._previous_rules.get(key)
        return rule(answers, default) if rule else default

    def is_last(self, current: Enum | str, answers: Mapping[str, Any]) -> bool:
        """True when advancing from *current* would end the questionnaire."""
        if self._coerce(current) is None:
            return False
        return self.next_section(current, answers) is None

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def section_order(self, answers: Mapping[str, Any]) -> list[Enum]:
        """Sections that will be shown under *answers*, starting from the first.

        Recomputed on every call; the walk is capped at
        ``SECTION_ORDER_MAX_ITERATIONS`` steps.
        """
        order: list[Enum] = []
        current: Optional[Enum] = self.first
        while current is not None and len(order) < SECTION_ORDER_MAX_ITERATIONS:
            order.append(current)
            current = self.next_section(current, answers)
        return order

    def progress(self, current: Enum | str, answers: Mapping[str, Any]) -> int:
        """Percentage (0-100) of the current section order reached at *current*."""
        key = self._coerce(current)
        order = self.section_order(answers)
        if key is None or key not in order:
            return 0
        return round_half_up((order.index(key) + 1) / len(order) * 100)


# ---------------------------------------------------------------------------
# Branch rules
# ---------------------------------------------------------------------------

def _skip_to_sti_on_early_delay(answers: Mapping[str, Any], default: Optional[Enum]) -> Optional[Enum]:
    if has_early_delay(answers):
        return FemaleSterilizationSection.STI_RISK
    return default


def _back_to_screening_on_early_delay(answers: Mapping[str, Any], default: Optional[Enum]) -> Optional[Enum]:
    if has_early_delay(answers):
        return FemaleSterilizationSection.EXCLUDE_DELAY
    return default


def _end_without_desire(answers: Mapping[str, Any], default: Optional[Enum]) -> Optional[Enum]:
    # Only an explicit "no" ends early; unanswered continues
    if answers.get(DESIRE_QID) is False:
        return None
    return default


def _end_if_pregnant(answers: Mapping[str, Any], default: Optional[Enum]) -> Optional[Enum]:
    return None if is_pregnant(answers) else default


def _lmp_only_if(eligible: Callable[[Mapping[str, Any]], bool]) -> BranchRule:
    def rule(answers: Mapping[str, Any], default: Optional[Enum]) -> Optional[Enum]:
        return default if eligible(answers) else None

    return rule


# ---------------------------------------------------------------------------
# Navigator instances
# ---------------------------------------------------------------------------

FEMALE_STERILIZATION_NAVIGATOR = SectionNavigator(
    FEMALE_STERILIZATION,
    tuple(FemaleSterilizationSection),
    next_rules={FemaleSterilizationSection.EXCLUDE_DELAY: _skip_to_sti_on_early_delay},
    previous_rules={FemaleSterilizationSection.STI_RISK: _back_to_screening_on_early_delay},
)

MALE_STERILIZATION_NAVIGATOR = SectionNavigator(
    MALE_STERILIZATION,
    tuple(MaleSterilizationSection),
    next_rules={MaleSterilizationSection.REPRODUCTIVE_INTENT: _end_without_desire},
)

CALENDAR_METHOD_NAVIGATOR = SectionNavigator(
    CALENDAR_METHOD,
    tuple(FertilitySection),
    next_rules={FertilitySection.CYCLE_LENGTHS: _lmp_only_if(calendar_cycles_eligible)},
)

STANDARD_DAYS_NAVIGATOR = SectionNavigator(
    STANDARD_DAYS,
    tuple(FertilitySection),
    next_rules={FertilitySection.CYCLE_LENGTHS: _lmp_only_if(sdm_cycles_eligible)},
)

FAB_NAVIGATOR = SectionNavigator(
    FAB_ELIGIBILITY,
    tuple(FABSection),
    next_rules={FABSection.CURRENT_PREGNANCY: _end_if_pregnant},
)

NAVIGATORS: dict[str, SectionNavigator] = {
    FEMALE_STERILIZATION: FEMALE_STERILIZATION_NAVIGATOR,
    MALE_STERILIZATION: MALE_STERILIZATION_NAVIGATOR,
    CALENDAR_METHOD: CALENDAR_METHOD_NAVIGATOR,
    STANDARD_DAYS: STANDARD_DAYS_NAVIGATOR,
    FAB_ELIGIBILITY: FAB_NAVIGATOR,
}
