"""Natural method (FAB) eligibility engine.

Rates the symptoms-based method (SYM) and the calendar-based method (CAL)
separately.  Each rule group reports factors as ``(condition, sym, cal)``
triples, so one condition can restrict the two methods differently.  Each
method then takes its own most restrictive category (``D > C > A``,
``A`` when nothing fired).

A "yes" to current pregnancy short-circuits to a not-applicable result.
STI/HIV risk and high-risk pregnancy only add advisories; they never
change a category.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, NamedTuple

from contrasafe_rulesets.answers import get_number, get_str, is_true
from contrasafe_rulesets.engines.categories import Findings
from contrasafe_rulesets.models.result import (
    Category,
    ContributingFactor,
    FABAdvisory,
    FABEligibilityResult,
    FABMethod,
    FABMethodResult,
)

logger = logging.getLogger(__name__)

A, C, D = Category.A, Category.C, Category.D

PREGNANT_QID = "fab-currently-pregnant"

NOT_APPLICABLE_MESSAGE = "FAB methods are not relevant during pregnancy."

METHOD_NAMES: dict[str, str] = {
    "SYM": "Symptoms-Based Method (SYM)",
    "CAL": "Calendar-Based Method (CAL)",
}

CATEGORY_LABELS: dict[Category, str] = {
    A: "Accept (no restriction)",
    C: "Caution (enhanced counselling required)",
    D: "Delay (temporary method recommended until condition resolved)",
}

ACTIONS_REQUIRED: dict[Category, str] = {
    C: "Enhanced counselling required before use.",
    D: "Recommend temporary method until condition resolved.",
}

EXPLANATIONS: dict[tuple[str, Category], str] = {
    ("SYM", A): (
        "No identified restrictions for symptoms-based tracking. "
        "Client may use SYM with standard counselling."
    ),
    ("CAL", A): (
        "No identified restrictions for calendar-based tracking. "
        "Client may use CAL with standard counselling."
    ),
    ("SYM", C): (
        "One or more caution conditions present (e.g., postpartum, perimenopause, "
        "medications). Enhanced counselling and cycle stability evaluation recommended."
    ),
    ("CAL", C): (
        "One or more caution conditions present (e.g., irregular cycles, perimenopause). "
        "Enhanced counselling recommended."
    ),
    ("SYM", D): (
        "Conditions present that temporarily limit reliability of fertility signs "
        "(e.g., recent delivery, irregular bleeding, acute illness). Recommend "
        "alternative method until resolved."
    ),
    ("CAL", D): (
        "Conditions present that limit calendar method reliability. Recommend "
        "alternative method until resolved."
    ),
}

MEDICATION_ADVISORY = FABAdvisory(
    id="medication-evaluation",
    type="medication-evaluation",
    message="Further evaluation of cycle stability required.",
)
STI_ADVISORY = FABAdvisory(
    id="sti-advisory",
    type="sti",
    message=(
        "FAB methods do NOT protect against STIs/HIV. "
        "Recommend correct and consistent condom use."
    ),
)
HIGH_RISK_PREGNANCY_ADVISORY = FABAdvisory(
    id="high-risk-pregnancy",
    type="high-risk-pregnancy",
    message=(
        "FAB methods may not be appropriate due to relatively higher "
        "typical-use failure rates."
    ),
)


class Factor(NamedTuple):
    condition: str
    sym: Category
    cal: Category


def is_pregnant(answers: Mapping[str, Any]) -> bool:
    """Only an explicit "yes" counts; "unsure" continues the screen."""
    return get_str(answers, PREGNANT_QID) == "yes"


# ---------------------------------------------------------------------------
# Rule groups
# ---------------------------------------------------------------------------

def postpartum_factor(answers: Mapping[str, Any]) -> Factor | None:
    """Postpartum factor, or ``None`` unless delivered in the last 6 months.

    Unknown weeks since delivery fall through to the conservative
    default for each feeding status.
    """
    if not is_true(answers, "fab-delivered-last-6-months"):
        return None

    weeks = get_number(answers, "fab-weeks-since-delivery")
    menses_resumed = is_true(answers, "fab-menses-resumed")

    if is_true(answers, "fab-currently-breastfeeding"):
        if weeks is not None and weeks < 6:
            return Factor("Postpartum (<6 weeks, breastfeeding)", D, D)
        if weeks is not None and not menses_resumed:
            return Factor("Postpartum (≥6 weeks, breastfeeding, menses not resumed)", C, D)
        if menses_resumed:
            return Factor("Postpartum (breastfeeding, menses resumed)", C, C)
        return Factor("Postpartum (breastfeeding)", C, D)

    if weeks is not None and weeks < 4:
        return Factor("Postpartum (<4 weeks, not breastfeeding)", D, D)
    if weeks is not None:
        return Factor("Postpartum (≥4 weeks, not breastfeeding)", A, D)
    return Factor("Postpartum (not breastfeeding)", C, D)


def evaluate_postpartum(answers: Mapping[str, Any]) -> list[Factor]:
    factor = postpartum_factor(answers)
    return [factor] if factor is not None else []


def evaluate_recent_abortion(answers: Mapping[str, Any]) -> list[Factor]:
    if is_true(answers, "fab-abortion-last-4-weeks"):
        return [Factor("Recent abortion (<4 weeks)", C, D)]
    return []


def evaluate_life_stage(answers: Mapping[str, Any]) -> list[Factor]:
    factors = []
    years = get_number(answers, "fab-years-since-menarche")
    if years is not None and years <= 2:
        factors.append(Factor("≤2 years since menarche", C, C))
    if is_true(answers, "fab-perimenopausal-symptoms"):
        factors.append(Factor("Perimenopausal symptoms", C, C))
    return factors


# (qid, condition, sym, cal) for the yes/no findings, in report order
_CONDITION_RULES: tuple[tuple[str, str, Category, Category], ...] = (
    ("fab-irregular-vaginal-bleeding", "Irregular vaginal bleeding", D, D),
    ("fab-abnormal-vaginal-discharge", "Abnormal vaginal discharge", D, A),
    ("fab-medications-affect-cycle", "Medications affecting cycle/fertility signs", C, C),
    ("fab-chronic-elevated-temperature", "Chronic elevated temperature", C, A),
    ("fab-acute-febrile-illness", "Acute febrile illness", D, A),
)


def evaluate_conditions(answers: Mapping[str, Any]) -> list[Factor]:
    return [
        Factor(condition, sym, cal)
        for qid, condition, sym, cal in _CONDITION_RULES
        if is_true(answers, qid)
    ]


RULE_GROUPS: tuple[Callable[[Mapping[str, Any]], list[Factor]], ...] = (
    evaluate_postpartum,
    evaluate_recent_abortion,
    evaluate_life_stage,
    evaluate_conditions,
)


def collect_advisories(answers: Mapping[str, Any]) -> list[FABAdvisory]:
    advisories = []
    if is_true(answers, "fab-medications-affect-cycle"):
        advisories.append(MEDICATION_ADVISORY)
    if is_true(answers, "fab-sti-hiv-risk"):
        advisories.append(STI_ADVISORY)
    if is_true(answers, "fab-high-risk-pregnancy"):
        advisories.append(HIGH_RISK_PREGNANCY_ADVISORY)
    return advisories


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_method_result(method: FABMethod, findings: Findings) -> FABMethodResult:
    """Reduce one method's findings; only factors at the final category are kept."""
    category = findings.category
    factors = []
    if category != A:
        factors = [
            ContributingFactor(condition=reason, category=c)
            for c, reason in zip(findings.categories, findings.reasons)
            if c == category
        ]
    return FABMethodResult(
        method=method,
        method_name=METHOD_NAMES[method],
        category=category,
        category_label=CATEGORY_LABELS[category],
        explanation=EXPLANATIONS[(method, category)],
        action_required=ACTIONS_REQUIRED.get(category),
        contributing_factors=factors,
    )


def evaluate_fab_eligibility(answers: Mapping[str, Any]) -> FABEligibilityResult:
    """Classify SYM and CAL eligibility from an answer snapshot."""
    if is_pregnant(answers):
        logger.debug("FAB eligibility: pregnant, not applicable")
        return FABEligibilityResult(
            not_applicable=True,
            not_applicable_message=NOT_APPLICABLE_MESSAGE,
        )

    sym, cal = Findings(), Findings()
    for group in RULE_GROUPS:
        for factor in group(answers):
            sym.add(factor.sym, factor.condition)
            cal.add(factor.cal, factor.condition)

    logger.debug(
        "FAB eligibility verdict: SYM=%s CAL=%s (%d factors)",
        sym.category.value,
        cal.category.value,
        len(sym.reasons),
    )

    return FABEligibilityResult(
        sym=build_method_result("SYM", sym),
        cal=build_method_result("CAL", cal),
        advisories=collect_advisories(answers),
    )
