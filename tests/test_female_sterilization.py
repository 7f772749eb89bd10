"""Female sterilization engine tests — one class per rule group.

Every group is exercised on its own; the combination tests check that the
most restrictive category wins (S > D > C > A) and that reasons keep group
order.
"""

import pytest

from contrasafe_rulesets.engines.female_sterilization import (
    CATEGORY_LABELS,
    CLINICAL_ACTIONS,
    EXPLANATIONS,
    STI_ADVISORY,
    compute_bmi,
    evaluate_female_sterilization,
)
from contrasafe_rulesets.models.result import Category

A, C, D, S = Category.A, Category.C, Category.D, Category.S


def _eval(**answers):
    """Evaluate with keyword answers; ``fs_x_y`` maps to qid ``fs-x-y``."""
    return evaluate_female_sterilization({k.replace("_", "-"): v for k, v in answers.items()})


# =====================================================================
# Baseline
# =====================================================================


class TestBaseline:
    def test_no_answers_is_accept(self):
        result = evaluate_female_sterilization({})
        assert result.category == A
        assert result.category_label == CATEGORY_LABELS[A]
        assert result.clinical_action == CLINICAL_ACTIONS[A]
        assert result.explanation == EXPLANATIONS[A]
        assert result.reasons == ()
        assert result.sti_advisory is None
        assert result.counselling_confirmed is False

    def test_deterministic(self):
        answers = {"fs-currently-pregnant": True, "fs-history-of-stroke": True}
        assert evaluate_female_sterilization(answers) == evaluate_female_sterilization(answers)

    def test_answers_not_mutated(self):
        answers = {"fs-is-postpartum": True, "fs-days-since-delivery": 10}
        snapshot = dict(answers)
        evaluate_female_sterilization(answers)
        assert answers == snapshot

    def test_only_literal_true_triggers(self):
        assert _eval(fs_currently_pregnant="yes").category == A
        assert _eval(fs_currently_pregnant=1).category == A


# =====================================================================
# Exclusion / immediate delay
# =====================================================================


class TestExcludeDelay:
    @pytest.mark.parametrize(
        "qid, reason",
        [
            ("fs-currently-pregnant", "Currently pregnant"),
            (
                "fs-unexplained-vaginal-bleeding",
                "Unexplained vaginal bleeding suspicious for serious disease",
            ),
            ("fs-systemic-infection", "Current systemic or severe infection"),
        ],
    )
    def test_each_delays(self, qid, reason):
        result = evaluate_female_sterilization({qid: True})
        assert result.category == D
        assert result.reasons == (reason,)


# =====================================================================
# Postpartum
# =====================================================================


class TestPostpartum:
    @pytest.mark.parametrize(
        "days, category, reason",
        [
            (3, A, "Postpartum <7 days (acceptable timing)"),
            (6.9, A, "Postpartum <7 days (acceptable timing)"),
            (7, D, "Postpartum 7-41 days (delay until >42 days)"),
            (41, D, "Postpartum 7-41 days (delay until >42 days)"),
            (41.5, D, "Postpartum 7-41 days (delay until >42 days)"),
            (42, A, "Postpartum ≥42 days (acceptable timing)"),
            ("120", A, "Postpartum ≥42 days (acceptable timing)"),
        ],
    )
    def test_timing(self, days, category, reason):
        result = _eval(fs_is_postpartum=True, fs_days_since_delivery=days)
        assert result.category == category
        assert result.reasons == (reason,)

    def test_ignored_unless_postpartum(self):
        result = _eval(fs_is_postpartum=False, fs_days_since_delivery=10, fs_uterine_rupture=True)
        assert result.category == A
        assert result.reasons == ()

    def test_complications(self):
        result = _eval(
            fs_is_postpartum=True,
            fs_severe_preeclampsia=True,
            fs_severe_postpartum_hemorrhage=True,
        )
        assert result.category == D
        assert result.reasons == ("Severe pre-eclampsia/eclampsia", "Severe postpartum hemorrhage")

    def test_uterine_rupture_refers(self):
        result = _eval(fs_is_postpartum=True, fs_days_since_delivery=50, fs_uterine_rupture=True)
        assert result.category == S
        assert result.reasons[-1] == "Uterine rupture (requires specialist referral)"


# =====================================================================
# Post-abortion
# =====================================================================


class TestPostAbortion:
    def test_no_complications(self):
        result = evaluate_female_sterilization({"fs-is-post-abortion": True})
        assert result.category == A
        assert result.reasons == ("Post-abortion without complications",)

    def test_perforation_alone(self):
        result = evaluate_female_sterilization(
            {"fs-is-post-abortion": True, "fs-post-abortion-complications": ["uterine-perforation"]}
        )
        assert result.category == S
        assert result.reasons == (
            "Post-abortion uterine perforation (requires specialist referral)",
        )

    def test_other_complications_delay(self):
        result = evaluate_female_sterilization(
            {
                "fs-is-post-abortion": True,
                "fs-post-abortion-complications": ["sepsis", "severe-hemorrhage"],
            }
        )
        assert result.category == D
        assert result.reasons == ("Post-abortion complications: sepsis, severe hemorrhage",)

    def test_perforation_with_others_reports_both(self):
        result = evaluate_female_sterilization(
            {
                "fs-is-post-abortion": True,
                "fs-post-abortion-complications": ["sepsis", "uterine-perforation"],
            }
        )
        assert result.category == S
        assert result.reasons == (
            "Post-abortion uterine perforation (requires specialist referral)",
            "Post-abortion complications: sepsis",
        )


# =====================================================================
# Cardiovascular
# =====================================================================


class TestCardiovascular:
    def test_severe_hypertension(self):
        result = _eval(fs_bp_systolic=165, fs_bp_diastolic=95)
        assert result.category == S
        assert result.reasons == ("Severe hypertension (BP: 165/95 mmHg)",)

    def test_severe_by_diastolic(self):
        assert _eval(fs_bp_systolic=130, fs_bp_diastolic=100).category == S

    def test_moderate_hypertension(self):
        result = _eval(fs_bp_systolic=145, fs_bp_diastolic=85)
        assert result.category == C
        assert result.reasons == ("Moderate hypertension (BP: 145/85 mmHg)",)

    def test_normal_bp(self):
        assert _eval(fs_bp_systolic=120, fs_bp_diastolic=80).reasons == ()

    def test_partial_bp_ignored(self):
        assert _eval(fs_bp_systolic=200).reasons == ()

    @pytest.mark.parametrize(
        "answers, category",
        [
            ({"fs-vascular-disease": True}, S),
            ({"fs-ischemic-heart-disease": True}, D),
            ({"fs-history-of-stroke": True}, C),
            ({"fs-valvular-disease": "complicated"}, S),
            ({"fs-valvular-disease": "uncomplicated"}, C),
            ({"fs-valvular-disease": "none"}, A),
        ],
    )
    def test_conditions(self, answers, category):
        assert evaluate_female_sterilization(answers).category == category


# =====================================================================
# Thromboembolism / HIV / endocrine / haematology / respiratory
# =====================================================================


class TestOtherSystems:
    @pytest.mark.parametrize(
        "answers, category",
        [
            ({"fs-acute-dvt-pe": True}, D),
            ({"fs-on-anticoagulant": True}, S),
            ({"fs-hiv-status": "stage-1-2"}, A),
            ({"fs-hiv-status": "stage-3-4"}, S),
            ({"fs-hiv-status": "negative"}, A),
            ({"fs-has-sle": True}, C),
            ({"fs-has-sle": True, "fs-sle-complications": ["antiphospholipid"]}, S),
            ({"fs-has-diabetes": True}, C),
            ({"fs-has-diabetes": True, "fs-diabetes-complications": "none"}, C),
            ({"fs-has-diabetes": True, "fs-diabetes-complications": "vascular"}, S),
            ({"fs-has-diabetes": True, "fs-diabetes-complications": "duration-over-20"}, S),
            ({"fs-thyroid-disorder": "hyperthyroid"}, S),
            ({"fs-thyroid-disorder": "hypothyroid"}, C),
            ({"fs-coagulation-disorder": True}, S),
            ({"fs-acute-respiratory": True}, D),
            ({"fs-chronic-lung-disease": True}, S),
        ],
    )
    def test_category(self, answers, category):
        assert evaluate_female_sterilization(answers).category == category

    def test_simple_goitre_reason(self):
        result = evaluate_female_sterilization({"fs-thyroid-disorder": "simple-goitre"})
        assert result.category == A
        assert result.reasons == ("Simple goitre",)

    @pytest.mark.parametrize(
        "hb, category, reasons",
        [
            (6.5, D, ("Severe anaemia (Hb: 6.5 g/dL)",)),
            (9, C, ("Moderate anaemia (Hb: 9 g/dL)",)),
            (10, A, ()),
        ],
    )
    def test_haemoglobin(self, hb, category, reasons):
        result = evaluate_female_sterilization({"fs-haemoglobin": hb})
        assert result.category == category
        assert result.reasons == reasons


# =====================================================================
# Gynecologic / BMI
# =====================================================================


class TestGynecologic:
    @pytest.mark.parametrize(
        "qid, category",
        [
            ("fs-gynecologic-cancer", D),
            ("fs-endometriosis", S),
            ("fs-previous-abdominal-surgery", C),
            ("fs-fixed-uterus", S),
        ],
    )
    def test_conditions(self, qid, category):
        assert evaluate_female_sterilization({qid: True}).category == category

    def test_high_bmi_caution(self):
        result = _eval(fs_weight=90, fs_height=170)
        assert result.category == C
        assert result.reasons == ("BMI ≥30 (31.1)",)

    def test_normal_bmi(self):
        assert _eval(fs_weight=60, fs_height=170).reasons == ()

    def test_bmi_needs_both_values(self):
        assert _eval(fs_weight=150).reasons == ()

    def test_compute_bmi(self):
        assert compute_bmi(90, 150) == pytest.approx(40.0)
        assert compute_bmi(None, 170) is None
        assert compute_bmi(70, 0) is None


# =====================================================================
# Combination, advisory, counselling
# =====================================================================


class TestCombination:
    def test_most_restrictive_wins_and_reasons_keep_group_order(self):
        result = evaluate_female_sterilization(
            {
                "fs-on-anticoagulant": True,
                "fs-history-of-stroke": True,
                "fs-currently-pregnant": True,
            }
        )
        assert result.category == S
        assert result.category_label == CATEGORY_LABELS[S]
        assert result.clinical_action == CLINICAL_ACTIONS[S]
        assert result.reasons == (
            "Currently pregnant",
            "History of stroke",
            "On anticoagulant therapy (requires specialist referral)",
        )

    def test_explanation_lists_reasons(self):
        result = evaluate_female_sterilization(
            {"fs-currently-pregnant": True, "fs-acute-respiratory": True}
        )
        assert result.explanation == (
            EXPLANATIONS[D]
            + "\n\nConditions identified:\n• Currently pregnant\n• Acute bronchitis or pneumonia"
        )

    def test_accept_reasons_do_not_raise_category(self):
        result = evaluate_female_sterilization(
            {"fs-hiv-status": "stage-1-2", "fs-has-sle": True}
        )
        assert result.category == C
        assert result.reasons == ("HIV Stage 1-2", "SLE without complications")


class TestAdvisoryAndCounselling:
    def test_sti_advisory(self):
        result = evaluate_female_sterilization({"fs-sti-risk": True})
        assert result.sti_advisory == STI_ADVISORY
        assert result.category == A

    def test_counselling_confirmed(self):
        answers = {
            "fs-understands-permanence": True,
            "fs-alternatives-discussed": True,
            "fs-informed-consent": True,
        }
        assert evaluate_female_sterilization(answers).counselling_confirmed is True

    def test_counselling_incomplete(self):
        answers = {
            "fs-understands-permanence": True,
            "fs-alternatives-discussed": False,
            "fs-informed-consent": True,
        }
        result = evaluate_female_sterilization(answers)
        assert result.counselling_confirmed is False
        assert result.category == A
