"""QuestionnaireFlow — ties sections, validation, navigation and engines together.

Stateless flow pattern: the caller owns the answer snapshot and passes it
on every call.  Each call computes the requested step from the section
tables, the questionnaire's navigator and (at the end) its engine.  No
state is kept between calls.

Flow of one questionnaire:

    start()            -> SectionStep for the first section
    advance(section)   -> same SectionStep with errors, the next
                          SectionStep, or a ResultStep at the end
    step_back(section) -> SectionStep for the previous section
"""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any, Callable, Mapping

from contrasafe_rulesets.constants import (
    CALENDAR_METHOD,
    FAB_ELIGIBILITY,
    FEMALE_STERILIZATION,
    MALE_STERILIZATION,
    QUESTIONNAIRE_NAMES,
    STANDARD_DAYS,
)
from contrasafe_rulesets.engines import (
    evaluate_calendar_method,
    evaluate_fab_eligibility,
    evaluate_female_sterilization,
    evaluate_male_sterilization,
    evaluate_standard_days,
)
from contrasafe_rulesets.models.question import Section
from contrasafe_rulesets.models.session import EngineResult, ResultStep, SectionStep, StepResult
from contrasafe_rulesets.navigation import NAVIGATORS, SectionNavigator
from contrasafe_rulesets.sections import SectionStore
from contrasafe_rulesets.validator import validate_section
from contrasafe_rulesets.visibility import visible_questions

logger = logging.getLogger(__name__)

ENGINES: dict[str, Callable[[Mapping[str, Any]], EngineResult]] = {
    FEMALE_STERILIZATION: evaluate_female_sterilization,
    MALE_STERILIZATION: evaluate_male_sterilization,
    CALENDAR_METHOD: evaluate_calendar_method,
    STANDARD_DAYS: evaluate_standard_days,
    FAB_ELIGIBILITY: evaluate_fab_eligibility,
}


class QuestionnaireFlow:
    """Drives any of the five questionnaires one section at a time.

    Args:
        store: a loaded :class:`SectionStore` instance
    """

    def __init__(self, store: SectionStore) -> None:
        self._store = store

    # ==================================================================
    # Step API
    # ==================================================================

    def start(self, questionnaire: str, answers: Mapping[str, Any]) -> SectionStep:
        """Return the first section of *questionnaire*."""
        nav = self._navigator(questionnaire)
        return self._section_step(questionnaire, nav.first, answers)

    def get_step(
        self, questionnaire: str, section_key: str, answers: Mapping[str, Any]
    ) -> SectionStep:
        """Return *section_key* with the questions visible under *answers*.

        Raises:
            ValueError: if the questionnaire or section key is unknown.
        """
        return self._section_step(questionnaire, section_key, answers)

    def advance(
        self,
        questionnaire: str,
        section_key: str,
        answers: Mapping[str, Any],
        *,
        today: date | None = None,
    ) -> StepResult:
        """Validate *section_key* and move past it.

        Returns:
            - the same section with ``errors`` filled when any visible
              question fails validation
            - the next section otherwise
            - a :class:`ResultStep` when the navigator reaches the end; the
              engine runs exactly once, on the full answer snapshot

        Raises:
            ValueError: if the questionnaire or section key is unknown.
        """
        nav = self._navigator(questionnaire)
        section = self._section(questionnaire, section_key)

        errors = validate_section(section, answers, today=today)
        if errors:
            logger.debug("%s/%s: %d validation errors", questionnaire, section_key, len(errors))
            return self._section_step(questionnaire, section_key, answers, errors=errors)

        nxt = nav.next_section(section_key, answers)
        if nxt is None:
            return ResultStep(
                questionnaire=questionnaire,
                questionnaire_name=self._name(questionnaire),
                result=self.evaluate(questionnaire, answers),
            )
        return self._section_step(questionnaire, nxt, answers)

    def step_back(
        self, questionnaire: str, section_key: str, answers: Mapping[str, Any]
    ) -> SectionStep:
        """Go back one section, reproducing any branch skip.

        Answers are untouched; the caller decides whether to keep them.

        Raises:
            ValueError: if already at the first section, or the
                questionnaire or section key is unknown.
        """
        nav = self._navigator(questionnaire)
        self._section(questionnaire, section_key)

        prev = nav.previous_section(section_key, answers)
        if prev is None:
            raise ValueError(
                f"Cannot step back: '{section_key}' is the first section of {questionnaire}"
            )
        return self._section_step(questionnaire, prev, answers)

    def evaluate(self, questionnaire: str, answers: Mapping[str, Any]) -> EngineResult:
        """Run the questionnaire's engine directly on *answers*."""
        self._navigator(questionnaire)
        result = ENGINES[questionnaire](answers)
        logger.info("%s evaluated", questionnaire)
        return result

    # ==================================================================
    # Internal: helpers
    # ==================================================================

    def _navigator(self, questionnaire: str) -> SectionNavigator:
        nav = NAVIGATORS.get(questionnaire)
        if nav is None:
            raise ValueError(f"Unknown questionnaire: {questionnaire}")
        return nav

    def _name(self, questionnaire: str) -> str:
        return self._store.names.get(questionnaire) or QUESTIONNAIRE_NAMES[questionnaire]

    def _section(self, questionnaire: str, section_key: str | Enum) -> Section:
        key = section_key.value if isinstance(section_key, Enum) else section_key
        try:
            return self._store.get_section(questionnaire, key)
        except KeyError:
            raise ValueError(f"Unknown section '{key}' in {questionnaire}") from None

    def _section_step(
        self,
        questionnaire: str,
        section_key: str | Enum,
        answers: Mapping[str, Any],
        *,
        errors: dict[str, str] | None = None,
    ) -> SectionStep:
        nav = self._navigator(questionnaire)
        section = self._section(questionnaire, section_key)
        return SectionStep(
            questionnaire=questionnaire,
            questionnaire_name=self._name(questionnaire),
            section_key=section.key,
            title=section.title,
            questions=visible_questions(section.questions, answers),
            progress=nav.progress(section.key, answers),
            is_last=nav.is_last(section.key, answers),
            errors=errors or {},
        )
