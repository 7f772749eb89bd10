"""Answer coercion helpers shared by the validator and the engines.

The validator and every engine read answers through these functions, so a
value the validator accepts is read identically downstream.  Coercion is
deliberately narrow:

  - numbers: ``int``/``float`` and numeric strings; booleans, NaN and
    infinities are rejected
  - dates: ``date``/``datetime`` objects and ISO-8601 strings
  - flags: only the literal ``True`` counts as a yes
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Mapping

from contrasafe_rulesets.dates import to_day


def is_empty(value: Any) -> bool:
    """True for an unanswered value (``None`` or the empty string)."""
    return value is None or value == ""


def to_number(value: Any) -> float | None:
    """Coerce *value* to a finite float, or ``None`` if it is not a number."""
    # bool is an int subclass; a yes/no answer is never a number
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def to_date(value: Any) -> date | None:
    """Coerce *value* to a :class:`datetime.date`, or ``None`` if invalid.

    Accepts ``date``/``datetime`` objects and ISO strings (``2024-01-01`` or
    ``2024-01-01T09:30:00``).  Time of day is always dropped.
    """
    if isinstance(value, (date, datetime)):
        return to_day(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return to_day(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def field(value: Any, name: str) -> Any:
    """Read *name* from a structured answer (model or plain mapping)."""
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


# ---------------------------------------------------------------------------
# AnswerState accessors
# ---------------------------------------------------------------------------

def is_true(answers: Mapping[str, Any], qid: str) -> bool:
    return answers.get(qid) is True


def get_number(answers: Mapping[str, Any], qid: str) -> float | None:
    return to_number(answers.get(qid))


def get_date(answers: Mapping[str, Any], qid: str) -> date | None:
    return to_date(answers.get(qid))


def get_str(answers: Mapping[str, Any], qid: str) -> str | None:
    value = answers.get(qid)
    return value if isinstance(value, str) else None


def get_list(answers: Mapping[str, Any], qid: str) -> list[str]:
    """Selected values of a select-multiple answer; empty when unanswered."""
    value = answers.get(qid)
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []
