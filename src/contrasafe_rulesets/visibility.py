"""Visibility resolver — filters a section's questions by their conditionals.

A question with a ``conditional`` is shown only when the answer to
``depends_on`` is *strictly* equal to ``expected_value``:

  - primitives (bool, numbers, strings, None) match by value and kind, so
    ``True`` never matches ``1`` and ``"1"`` never matches ``1``
  - anything else (lists, dicts, dates, models) matches only when it is
    the very same object

Resolution is single-pass: a conditional looks only at the raw answer of
the question it depends on, never at whether that question is visible.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from contrasafe_rulesets.models.question import Question

_PRIMITIVES = (bool, int, float, str, type(None))


def strict_equals(answer: Any, expected: Any) -> bool:
    """Identity-or-same-primitive comparison used by conditionals."""
    if answer is expected:
        return True
    if not isinstance(answer, _PRIMITIVES) or not isinstance(expected, _PRIMITIVES):
        return False
    # bool is an int subclass; keep yes/no answers apart from numbers
    if isinstance(answer, bool) or isinstance(expected, bool):
        return isinstance(answer, bool) and isinstance(expected, bool) and answer == expected
    if isinstance(answer, str) or isinstance(expected, str):
        return isinstance(answer, str) and isinstance(expected, str) and answer == expected
    # int and float are one number kind
    return answer == expected


def is_question_visible(question: Question, answers: Mapping[str, Any]) -> bool:
    cond = question.conditional
    if cond is None:
        return True
    return strict_equals(answers.get(cond.depends_on), cond.expected_value)


def visible_questions(
    questions: Iterable[Question], answers: Mapping[str, Any]
) -> list[Question]:
    """Return the visible questions, preserving their original order."""
    return [q for q in questions if is_question_visible(q, answers)]
