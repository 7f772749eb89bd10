"""Female sterilization eligibility engine (WHO MEC categories A/C/D/S).

Ten independent rule groups inspect the answer snapshot.  Every group
always runs; the final category is the most restrictive one any group
emitted (``A`` when none fired).  Reasons keep group order and are not
de-duplicated.

The STI advisory and the counselling confirmation are computed
separately and never affect the category.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from contrasafe_rulesets.answers import get_list, get_number, get_str, is_true
from contrasafe_rulesets.constants import BMI_CAUTION_THRESHOLD
from contrasafe_rulesets.engines.categories import Findings, RuleGroup, explain, run_rule_groups
from contrasafe_rulesets.models.result import Category, FemaleSterilizationResult

logger = logging.getLogger(__name__)

A, C, D, S = Category.A, Category.C, Category.D, Category.S

CATEGORY_LABELS: dict[Category, str] = {
    A: "Accept - Proceed",
    C: "Caution - Proceed with precautions",
    D: "Delay - Temporary method recommended until condition resolved",
    S: "Special - Refer to experienced surgeon and higher-level facility",
}

CLINICAL_ACTIONS: dict[Category, str] = {
    A: "Proceed with standard sterilization procedure and counselling.",
    C: "Proceed with enhanced precautions and specialized counselling.",
    D: "Delay procedure. Treat underlying condition and provide temporary contraception.",
    S: (
        "Refer to higher-level facility with experienced surgeon, general anesthesia "
        "capability, and full surgical backup."
    ),
}

EXPLANATIONS: dict[Category, str] = {
    A: (
        "No significant restrictions identified. Client is eligible for female "
        "sterilization with standard procedure and counselling."
    ),
    C: (
        "One or more caution conditions present. Client may proceed with enhanced "
        "precautions and specialized counselling."
    ),
    D: (
        "Conditions present that require delaying the procedure. The underlying "
        "condition should be treated first. Provide temporary contraception until resolved."
    ),
    S: (
        "Conditions present that require referral to a higher-level facility with "
        "experienced surgeon, general anesthesia capability, and full surgical backup."
    ),
}

STI_ADVISORY = "Sterilization does NOT protect against STIs or HIV. Recommend consistent condom use."

# Any of these answered yes sends the navigator straight to the STI section
EARLY_DELAY_QIDS = (
    "fs-currently-pregnant",
    "fs-unexplained-vaginal-bleeding",
    "fs-systemic-infection",
)

COUNSELLING_QIDS = (
    "fs-understands-permanence",
    "fs-alternatives-discussed",
    "fs-informed-consent",
)


def _num(value: float) -> str:
    # 7.0 -> "7", 8.5 -> "8.5"
    return f"{value:g}"


def has_early_delay(answers: Mapping[str, Any]) -> bool:
    """True when any immediate-delay screening answer is yes."""
    return any(is_true(answers, qid) for qid in EARLY_DELAY_QIDS)


# ---------------------------------------------------------------------------
# Rule groups
# ---------------------------------------------------------------------------

def evaluate_exclude_delay(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if is_true(answers, "fs-currently-pregnant"):
        f.add(D, "Currently pregnant")
    if is_true(answers, "fs-unexplained-vaginal-bleeding"):
        f.add(D, "Unexplained vaginal bleeding suspicious for serious disease")
    if is_true(answers, "fs-systemic-infection"):
        f.add(D, "Current systemic or severe infection")
    return f


def evaluate_postpartum(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if not is_true(answers, "fs-is-postpartum"):
        return f

    days = get_number(answers, "fs-days-since-delivery")
    if days is not None:
        if days < 7:
            f.add(A, "Postpartum <7 days (acceptable timing)")
        elif days < 42:
            f.add(D, "Postpartum 7-41 days (delay until >42 days)")
        else:
            f.add(A, "Postpartum ≥42 days (acceptable timing)")

    if is_true(answers, "fs-severe-preeclampsia"):
        f.add(D, "Severe pre-eclampsia/eclampsia")
    if is_true(answers, "fs-severe-postpartum-hemorrhage"):
        f.add(D, "Severe postpartum hemorrhage")
    if is_true(answers, "fs-uterine-rupture"):
        f.add(S, "Uterine rupture (requires specialist referral)")
    return f


def evaluate_post_abortion(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if not is_true(answers, "fs-is-post-abortion"):
        return f

    complications = get_list(answers, "fs-post-abortion-complications")
    if not complications:
        f.add(A, "Post-abortion without complications")
        return f

    if "uterine-perforation" in complications:
        f.add(S, "Post-abortion uterine perforation (requires specialist referral)")
    # Perforation is reported on its own; every other complication delays
    delaying = [c for c in complications if c != "uterine-perforation"]
    if delaying:
        names = ", ".join(c.replace("-", " ") for c in delaying)
        f.add(D, f"Post-abortion complications: {names}")
    return f


def evaluate_cardiovascular(answers: Mapping[str, Any]) -> Findings:
    f = Findings()

    systolic = get_number(answers, "fs-bp-systolic")
    diastolic = get_number(answers, "fs-bp-diastolic")
    if systolic is not None and diastolic is not None:
        reading = f"BP: {_num(systolic)}/{_num(diastolic)} mmHg"
        if systolic >= 160 or diastolic >= 100:
            f.add(S, f"Severe hypertension ({reading})")
        elif systolic >= 140 or diastolic >= 90:
            f.add(C, f"Moderate hypertension ({reading})")

    if is_true(answers, "fs-vascular-disease"):
        f.add(S, "Vascular disease (requires specialist referral)")
    if is_true(answers, "fs-ischemic-heart-disease"):
        f.add(D, "Current ischemic heart disease")
    if is_true(answers, "fs-history-of-stroke"):
        f.add(C, "History of stroke")

    valvular = get_str(answers, "fs-valvular-disease")
    if valvular == "complicated":
        f.add(S, "Complicated valvular disease (requires specialist referral)")
    elif valvular == "uncomplicated":
        f.add(C, "Uncomplicated valvular disease")
    return f


def evaluate_thromboembolism(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if is_true(answers, "fs-acute-dvt-pe"):
        f.add(D, "Acute DVT/PE")
    if is_true(answers, "fs-on-anticoagulant"):
        f.add(S, "On anticoagulant therapy (requires specialist referral)")
    return f


def evaluate_hiv_immunology(answers: Mapping[str, Any]) -> Findings:
    f = Findings()

    hiv = get_str(answers, "fs-hiv-status")
    if hiv == "stage-1-2":
        f.add(A, "HIV Stage 1-2")
    elif hiv == "stage-3-4":
        f.add(S, "HIV Stage 3-4 (requires specialist referral)")

    if is_true(answers, "fs-has-sle"):
        if get_list(answers, "fs-sle-complications"):
            f.add(S, "SLE with complications (requires specialist referral)")
        else:
            f.add(C, "SLE without complications")
    return f


def evaluate_endocrine(answers: Mapping[str, Any]) -> Findings:
    f = Findings()

    if is_true(answers, "fs-has-diabetes"):
        complication = get_str(answers, "fs-diabetes-complications")
        if complication in ("vascular", "duration-over-20"):
            f.add(S, "Diabetes with vascular complications or >20 years duration")
        else:
            f.add(C, "Diabetes without complications")

    thyroid = get_str(answers, "fs-thyroid-disorder")
    if thyroid == "hyperthyroid":
        f.add(S, "Hyperthyroid disorder (requires specialist referral)")
    elif thyroid == "hypothyroid":
        f.add(C, "Hypothyroid disorder")
    elif thyroid == "simple-goitre":
        f.add(A, "Simple goitre")
    return f


def evaluate_haematology(answers: Mapping[str, Any]) -> Findings:
    f = Findings()

    hb = get_number(answers, "fs-haemoglobin")
    if hb is not None:
        if hb < 7:
            f.add(D, f"Severe anaemia (Hb: {_num(hb)} g/dL)")
        elif hb < 10:
            f.add(C, f"Moderate anaemia (Hb: {_num(hb)} g/dL)")

    if is_true(answers, "fs-coagulation-disorder"):
        f.add(S, "Coagulation disorder (requires specialist referral)")
    return f


def evaluate_respiratory(answers: Mapping[str, Any]) -> Findings:
    f = Findings()
    if is_true(answers, "fs-acute-respiratory"):
        f.add(D, "Acute bronchitis or pneumonia")
    if is_true(answers, "fs-chronic-lung-disease"):
        f.add(S, "Chronic severe lung disease (requires specialist referral)")
    return f


def evaluate_gynecologic(answers: Mapping[str, Any]) -> Findings:
    f = Findings()

    if is_true(answers, "fs-gynecologic-cancer"):
        f.add(D, "Gynecologic cancer awaiting treatment")
    if is_true(answers, "fs-endometriosis"):
        f.add(S, "Endometriosis (requires specialist referral)")
    if is_true(answers, "fs-previous-abdominal-surgery"):
        f.add(C, "Previous abdominal or pelvic surgery")

    bmi = compute_bmi(get_number(answers, "fs-weight"), get_number(answers, "fs-height"))
    if bmi is not None and bmi >= BMI_CAUTION_THRESHOLD:
        f.add(C, f"BMI ≥{_num(BMI_CAUTION_THRESHOLD)} ({bmi:.1f})")

    if is_true(answers, "fs-fixed-uterus"):
        f.add(S, "Fixed uterus due to surgery or infection (requires specialist referral)")
    return f


def compute_bmi(weight_kg: float | None, height_cm: float | None) -> float | None:
    """BMI from kg and cm; ``None`` when either is missing or height is not positive."""
    if weight_kg is None or height_cm is None or height_cm <= 0:
        return None
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


# Evaluation order; also the order reasons appear in the result
RULE_GROUPS: tuple[RuleGroup, ...] = (
    evaluate_exclude_delay,
    evaluate_postpartum,
    evaluate_post_abortion,
    evaluate_cardiovascular,
    evaluate_thromboembolism,
    evaluate_hiv_immunology,
    evaluate_endocrine,
    evaluate_haematology,
    evaluate_respiratory,
    evaluate_gynecologic,
)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def evaluate_female_sterilization(answers: Mapping[str, Any]) -> FemaleSterilizationResult:
    """Classify female sterilization eligibility from an answer snapshot.

    Args:
        answers: ``{qid: value}`` for the ``fs-*`` questions; missing
                 answers simply do not trigger their rules.

    Returns:
        A :class:`FemaleSterilizationResult`.  Never raises on incomplete
        answers.
    """
    findings = run_rule_groups(RULE_GROUPS, answers)
    category = findings.category

    counselling_confirmed = all(is_true(answers, qid) for qid in COUNSELLING_QIDS)
    sti_advisory = STI_ADVISORY if is_true(answers, "fs-sti-risk") else None

    logger.debug(
        "Female sterilization verdict: %s (%d findings)", category.value, len(findings.reasons)
    )

    return FemaleSterilizationResult(
        category=category,
        category_label=CATEGORY_LABELS[category],
        explanation=explain(EXPLANATIONS[category], findings.reasons),
        clinical_action=CLINICAL_ACTIONS[category],
        reasons=findings.reasons,
        sti_advisory=sti_advisory,
        counselling_confirmed=counselling_confirmed,
    )
