"""SectionStore — loads the questionnaire section tables into typed models.

Each questionnaire is one YAML file under ``tables/`` (shipped inside the
package) holding a display name and an ordered list of sections.  The store
is loaded once and is read-only afterwards.

Usage::

    store = SectionStore()          # defaults to the bundled tables/
    store.load()                    # parse all YAML files

    section = store.get_section("female_sterilization", "fs-postpartum")
    q = store.get_question("calendar_method", "lmp-date")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from contrasafe_rulesets.constants import QUESTIONNAIRES
from contrasafe_rulesets.models.question import Question, QuestionType, Section

logger = logging.getLogger(__name__)

DEFAULT_SECTION_DIR = Path(__file__).resolve().parent / "tables"

_QUESTION_TYPES = {t.value for t in QuestionType}


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class SectionStore:
    """Loads every questionnaire's sections and provides typed lookup.

    Attributes populated after :meth:`load`:

        names     — dict[questionnaire, display name]
        sections  — dict[questionnaire, list[Section]] in YAML order
    """

    def __init__(self, section_dir: str | Path | None = None) -> None:
        self._base = Path(section_dir) if section_dir is not None else DEFAULT_SECTION_DIR

        # Populated by load()
        self.names: dict[str, str] = {}
        self.sections: dict[str, list[Section]] = {}
        self._by_key: dict[str, dict[str, Section]] = {}
        self._questions: dict[str, dict[str, Question]] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse all questionnaire YAML files into typed models.

        Raises:
            FileNotFoundError: if a questionnaire file is missing.
            ValueError: on an unknown ``question_type``, a duplicate
                section key or qid, or any field that fails model validation.
        """
        for questionnaire in QUESTIONNAIRES:
            self._load_questionnaire(questionnaire)
        logger.info(
            "SectionStore loaded: %d questionnaires, %d sections, %d questions",
            len(self.sections),
            sum(len(s) for s in self.sections.values()),
            sum(len(q) for q in self._questions.values()),
        )

    def _load_questionnaire(self, questionnaire: str) -> None:
        raw = load_yaml(self._base / f"{questionnaire}.yaml")
        if not isinstance(raw, dict) or not isinstance(raw.get("sections"), list):
            raise ValueError(f"{questionnaire}.yaml must contain a 'sections' list")

        sections: list[Section] = []
        by_key: dict[str, Section] = {}
        questions: dict[str, Question] = {}

        for s_dict in raw["sections"]:
            key = s_dict.get("key")
            for q_dict in s_dict.get("questions") or []:
                qtype = q_dict.get("question_type")
                if qtype not in _QUESTION_TYPES:
                    raise ValueError(
                        f"Unknown question_type '{qtype}' in {questionnaire}/{key}"
                    )
            section = Section(**s_dict)

            if section.key in by_key:
                raise ValueError(f"Duplicate section key '{section.key}' in {questionnaire}")
            for q in section.questions:
                if q.qid in questions:
                    raise ValueError(f"Duplicate qid '{q.qid}' in {questionnaire}")
                questions[q.qid] = q

            sections.append(section)
            by_key[section.key] = section

        self.names[questionnaire] = raw.get("name", questionnaire)
        self.sections[questionnaire] = sections
        self._by_key[questionnaire] = by_key
        self._questions[questionnaire] = questions

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def get_sections(self, questionnaire: str) -> list[Section]:
        """Return a questionnaire's sections in YAML order.

        Raises:
            KeyError: if the questionnaire is unknown.
        """
        return self.sections[questionnaire]

    def get_section(self, questionnaire: str, key: str) -> Section:
        """Look up one section by questionnaire and section key.

        Raises:
            KeyError: if the questionnaire or section key is unknown.
        """
        return self._by_key[questionnaire][key]

    def get_question(self, questionnaire: str, qid: str) -> Question:
        """Look up one question by questionnaire and qid.

        Raises:
            KeyError: if the questionnaire or qid is unknown.
        """
        return self._questions[questionnaire][qid]

    def section_keys(self, questionnaire: str) -> list[str]:
        return [s.key for s in self.sections[questionnaire]]
