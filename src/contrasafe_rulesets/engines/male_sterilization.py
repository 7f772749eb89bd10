"""Male sterilization (vasectomy) eligibility engine.

Unless the client has explicitly confirmed wanting permanent
contraception, the engine short-circuits to a fixed "Not Eligible" result
in category ``D`` without running any rule group.

Otherwise seven independent rule groups run and the most restrictive
category wins.  Some groups also attach counselling alerts, which are
listed in the recommendation and always followed by the two mandatory
alerts.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from contrasafe_rulesets.answers import get_list, get_number, get_str, is_true
from contrasafe_rulesets.engines.categories import Findings, RuleGroup, explain, run_rule_groups
from contrasafe_rulesets.models.result import Category, MaleSterilizationResult

logger = logging.getLogger(__name__)

A, C, D, S = Category.A, Category.C, Category.D, Category.S

DESIRE_QID = "ms-desires-permanent-contraception"

CATEGORY_LABELS: dict[Category, str] = {
    A: "Accept - Procedure can proceed",
    C: "Caution - Special counselling required",
    D: "Delay - Treat condition first, provide temporary contraception",
    S: "Special Setting - Referral to higher-level facility required",
}

EXPLANATIONS: dict[Category, str] = {
    A: (
        "No significant restrictions identified. Client is eligible for male "
        "sterilization (vasectomy) with standard procedure."
    ),
    C: (
        "One or more caution conditions present. Client may proceed with enhanced "
        "counselling and special considerations."
    ),
    D: (
        "Conditions present that require delaying the procedure. The underlying "
        "condition should be treated first, and temporary contraception should be provided."
    ),
    S: (
        "Conditions present that require referral to a higher-level facility with "
        "specialized capabilities and experienced surgical team."
    ),
}

STI_ADVISORY = (
    "Sterilization does NOT protect against STIs/HIV. "
    "Recommend consistent condom use if STI risk present."
)

MANDATORY_ALERTS = (
    "Sterilization is permanent",
    "Discuss alternative long-acting reversible methods",
)

NO_RESTRICTIONS = "No restrictions identified"

NOT_ELIGIBLE = MaleSterilizationResult(
    category=D,
    category_label="Not Eligible",
    explanation=(
        "Client does not desire permanent contraception. Male sterilization is "
        "not appropriate at this time."
    ),
    clinical_recommendation=(
        "Counsel client on alternative contraceptive methods including long-acting "
        "reversible contraceptives (LARCs)."
    ),
    reasons=("Does not desire permanent contraception",),
    sti_advisory=(
        "Remember: Sterilization does NOT protect against STIs/HIV. "
        "Condom use recommended if STI risk present."
    ),
    counselling_alerts=(
        "Discuss alternative long-acting reversible methods",
        "Explore reasons for seeking contraception",
    ),
    temporary_contraception_recommended=True,
    referral_required=False,
)


def desires_permanent_contraception(answers: Mapping[str, Any]) -> bool:
    return is_true(answers, DESIRE_QID)


# ---------------------------------------------------------------------------
# Rule groups
# ---------------------------------------------------------------------------

def evaluate_personal_characteristics(answers: Mapping[str, Any]) -> Findings:
    f = Findings()

    age = get_number(answers, "ms-age")
    if age is not None and age < 30:
        f.add(
            C,
            f"Young age ({age:g} years)",
            "Young men should be counselled regarding permanence and possibility of regret.",
        )
    if is_true(answers, "ms-depressive-disorder"):
        f.add(
            C,
            "Diagnosed depressive disorder",
            "Additional counselling recommended for mental health considerations.",
        )
    return f


def evaluate_hiv_status(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if not is_true(answers, "ms-hiv-positive"):
        return f

    stage = get_str(answers, "ms-who-hiv-stage")
    if stage in ("stage-1", "stage-2"):
        f.add(A, "HIV Stage 1-2 (acceptable)")
    elif stage in ("stage-3", "stage-4"):
        f.add(S, "HIV Stage 3-4 (special setting required)")
    return f


def evaluate_endocrine(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if not is_true(answers, "ms-has-diabetes"):
        return f

    # Only an explicit "no" counts as uncontrolled
    if answers.get("ms-diabetes-controlled") is False:
        f.add(
            C,
            "Diabetes mellitus (uncontrolled)",
            "Recommend referral for glucose optimization before procedure.",
        )
    else:
        f.add(C, "Diabetes mellitus (controlled)")
    return f


def evaluate_anaemia(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if is_true(answers, "ms-sickle-cell-disease"):
        f.add(A, "Sickle cell disease (acceptable)")
    return f


def evaluate_genital_conditions(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if not is_true(answers, "ms-local-infection"):
        return f

    infections = get_list(answers, "ms-infection-type")
    if infections:
        names = ", ".join(i.replace("-", " ") for i in infections)
        f.add(
            D,
            f"Local genital infection: {names}",
            "Delay procedure until infection treated.",
            "Provide temporary contraception.",
        )
    return f


def evaluate_systemic_conditions(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if is_true(answers, "ms-systemic-infection"):
        f.add(D, "Systemic infection or gastroenteritis")
    if is_true(answers, "ms-coagulation-disorder"):
        f.add(S, "Coagulation disorder (special setting required)")
    return f


# (qid, category, reason) for the yes/no scrotal findings, in report order
_SCROTAL_RULES: tuple[tuple[str, Category, str], ...] = (
    ("ms-previous-scrotal-injury", C, "Previous scrotal injury"),
    ("ms-large-varicocele", C, "Large varicocele"),
    ("ms-large-hydrocele", C, "Large hydrocele"),
    ("ms-filariasis", D, "Filariasis (elephantiasis)"),
    ("ms-intrascrotal-mass", D, "Intrascrotal mass"),
    ("ms-cryptorchidism", S, "Cryptorchidism (special setting required)"),
    ("ms-inguinal-hernia", S, "Inguinal hernia (special setting required)"),
)


def evaluate_scrotal_structural(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    for qid, category, reason in _SCROTAL_RULES:
        if is_true(answers, qid):
            f.add(category, reason)
    return f


RULE_GROUPS: tuple[RuleGroup, ...] = (
    evaluate_personal_characteristics,
    evaluate_hiv_status,
    evaluate_endocrine,
    evaluate_anaemia,
    evaluate_genital_conditions,
    evaluate_systemic_conditions,
    evaluate_scrotal_structural,
)


# ---------------------------------------------------------------------------
# Recommendation text
# ---------------------------------------------------------------------------

def build_clinical_recommendation(category: Category, alerts: list[str]) -> str:
    """Category-specific recommendation, listing alerts for C and D."""
    if category == A:
        lines = [
            "Procedure can proceed with standard vasectomy protocol.",
            "Provide standard pre-operative counselling.",
        ]
    elif category == C:
        lines = [
            "Procedure can proceed with caution.",
            "Enhanced counselling required before proceeding.",
        ]
        if alerts:
            lines.append("\nSpecific considerations:")
            lines.extend(f"• {a}" for a in alerts)
    elif category == D:
        lines = [
            "Delay procedure until condition resolved.",
            "Treat underlying condition first.",
            "Provide temporary contraception method.",
        ]
        if alerts:
            lines.append("\nRequired actions:")
            lines.extend(f"• {a}" for a in alerts)
    else:
        lines = [
            "Refer to higher-level facility with:",
            "• Experienced surgeon",
            "• Advanced surgical capabilities",
            "• Full anesthesia support",
            "• Emergency backup available",
        ]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def evaluate_male_sterilization(answers: Mapping[str, Any]) -> MaleSterilizationResult:
    """Classify male sterilization eligibility from an answer snapshot.

    Returns the fixed not-eligible result unless
    ``ms-desires-permanent-contraception`` is exactly ``True``.
    """
    if not desires_permanent_contraception(answers):
        logger.debug("Male sterilization: no desire for permanent contraception")
        return NOT_ELIGIBLE

    findings = run_rule_groups(RULE_GROUPS, answers)
    category = findings.category

    logger.debug(
        "Male sterilization verdict: %s (%d findings)", category.value, len(findings.reasons)
    )

    return MaleSterilizationResult(
        category=category,
        category_label=CATEGORY_LABELS[category],
        explanation=explain(EXPLANATIONS[category], findings.reasons),
        clinical_recommendation=build_clinical_recommendation(category, findings.alerts),
        reasons=findings.reasons or (NO_RESTRICTIONS,),
        sti_advisory=STI_ADVISORY,
        counselling_alerts=(*findings.alerts, *MANDATORY_ALERTS),
        temporary_contraception_recommended=category == D,
        referral_required=category == S,
    )
