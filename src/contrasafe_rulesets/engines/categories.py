"""Category ordering and the findings accumulator shared by both
sterilization engines.

Each engine runs a fixed list of independent rule groups.  A rule group is
a plain function ``(answers) -> Findings``; groups never look at each
other's output.  The engine merges the findings in group order and reduces
the collected categories with :func:`most_restrictive`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from contrasafe_rulesets.models.result import Category

# Higher value = more restrictive
CATEGORY_PRIORITY: dict[Category, int] = {
    Category.S: 4,
    Category.D: 3,
    Category.C: 2,
    Category.A: 1,
}


def most_restrictive(categories: Iterable[Category]) -> Category:
    """Reduce categories to the most restrictive one; ``A`` when empty."""
    return max(categories, key=CATEGORY_PRIORITY.__getitem__, default=Category.A)


@dataclass
class Findings:
    """What one rule group (or a whole run) found.

    ``categories`` and ``reasons`` are parallel; ``alerts`` are extra
    counselling notes some groups attach.
    """

    categories: list[Category] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)
    alerts: list[str] = field(default_factory=list)

    def add(self, category: Category, reason: str, *alerts: str) -> None:
        self.categories.append(category)
        self.reasons.append(reason)
        self.alerts.extend(alerts)

    def merge(self, other: "Findings") -> None:
        self.categories.extend(other.categories)
        self.reasons.extend(other.reasons)
        self.alerts.extend(other.alerts)

    @property
    def category(self) -> Category:
        return most_restrictive(self.categories)


RuleGroup = Callable[[Mapping[str, Any]], Findings]


def run_rule_groups(groups: Iterable[RuleGroup], answers: Mapping[str, Any]) -> Findings:
    """Run every group against *answers* and merge their findings in order."""
    total = Findings()
    for group in groups:
        total.merge(group(answers))
    return total


def explain(base: str, reasons: list[str]) -> str:
    """Append the bulleted reasons list to a category explanation."""
    if not reasons:
        return base
    return base + "\n\nConditions identified:\n• " + "\n• ".join(reasons)
