"""Male sterilization (vasectomy) engine tests.

Covers the desire short-circuit, each rule group, the counselling alert
ordering, and the category-specific recommendation text.
"""

import pytest
from pydantic import ValidationError

from contrasafe_rulesets.engines.male_sterilization import (
    CATEGORY_LABELS,
    DESIRE_QID,
    MANDATORY_ALERTS,
    NO_RESTRICTIONS,
    NOT_ELIGIBLE,
    STI_ADVISORY,
    evaluate_male_sterilization,
)
from contrasafe_rulesets.models.result import Category

A, C, D, S = Category.A, Category.C, Category.D, Category.S


def _eval(answers):
    """Evaluate with the desire question already answered yes."""
    return evaluate_male_sterilization({DESIRE_QID: True, **answers})


# =====================================================================
# Desire short-circuit
# =====================================================================


class TestNotEligible:
    @pytest.mark.parametrize("desire", [None, False, "yes", 1])
    def test_anything_but_true_short_circuits(self, desire):
        answers = {"ms-coagulation-disorder": True}
        if desire is not None:
            answers[DESIRE_QID] = desire
        result = evaluate_male_sterilization(answers)
        assert result == NOT_ELIGIBLE
        assert result.category == D
        assert result.category_label == "Not Eligible"
        assert result.temporary_contraception_recommended is True
        assert result.referral_required is False

    def test_result_cannot_be_changed(self):
        result = evaluate_male_sterilization({})
        with pytest.raises(AttributeError):
            result.reasons.append("changed")
        with pytest.raises(ValidationError):
            result.category = A
        assert NOT_ELIGIBLE.reasons == ("Does not desire permanent contraception",)


# =====================================================================
# Accept baseline
# =====================================================================


class TestAccept:
    def test_no_findings(self):
        result = _eval({})
        assert result.category == A
        assert result.category_label == CATEGORY_LABELS[A]
        assert result.reasons == (NO_RESTRICTIONS,)
        assert result.counselling_alerts == MANDATORY_ALERTS
        assert result.sti_advisory == STI_ADVISORY
        assert result.temporary_contraception_recommended is False
        assert result.referral_required is False
        assert result.clinical_recommendation == (
            "Procedure can proceed with standard vasectomy protocol.\n"
            "Provide standard pre-operative counselling."
        )

    def test_accept_findings_keep_their_reason(self):
        result = _eval({"ms-sickle-cell-disease": True})
        assert result.category == A
        assert result.reasons == ("Sickle cell disease (acceptable)",)


# =====================================================================
# Rule groups
# =====================================================================


class TestPersonalCharacteristics:
    def test_young_age(self):
        result = _eval({"ms-age": 25})
        assert result.category == C
        assert result.reasons == ("Young age (25 years)",)
        assert result.counselling_alerts == (
            "Young men should be counselled regarding permanence and possibility of regret.",
            *MANDATORY_ALERTS,
        )

    def test_age_thirty_not_young(self):
        assert _eval({"ms-age": 30}).category == A

    def test_depressive_disorder(self):
        result = _eval({"ms-depressive-disorder": True})
        assert result.category == C
        assert result.reasons == ("Diagnosed depressive disorder",)


class TestHivStatus:
    @pytest.mark.parametrize("stage", ["stage-1", "stage-2"])
    def test_early_stage_accept(self, stage):
        result = _eval({"ms-hiv-positive": True, "ms-who-hiv-stage": stage})
        assert result.category == A
        assert result.reasons == ("HIV Stage 1-2 (acceptable)",)

    @pytest.mark.parametrize("stage", ["stage-3", "stage-4"])
    def test_late_stage_special(self, stage):
        result = _eval({"ms-hiv-positive": True, "ms-who-hiv-stage": stage})
        assert result.category == S
        assert result.referral_required is True

    def test_stage_ignored_unless_positive(self):
        assert _eval({"ms-who-hiv-stage": "stage-4"}).category == A


class TestEndocrine:
    def test_uncontrolled(self):
        result = _eval({"ms-has-diabetes": True, "ms-diabetes-controlled": False})
        assert result.category == C
        assert result.reasons == ("Diabetes mellitus (uncontrolled)",)
        assert result.counselling_alerts[0] == (
            "Recommend referral for glucose optimization before procedure."
        )

    @pytest.mark.parametrize("controlled", [True, None])
    def test_controlled_or_unanswered(self, controlled):
        answers = {"ms-has-diabetes": True}
        if controlled is not None:
            answers["ms-diabetes-controlled"] = controlled
        result = _eval(answers)
        assert result.category == C
        assert result.reasons == ("Diabetes mellitus (controlled)",)
        assert result.counselling_alerts == MANDATORY_ALERTS


class TestGenitalConditions:
    def test_infection_delays(self):
        result = _eval(
            {"ms-local-infection": True, "ms-infection-type": ["active-sti", "balanitis"]}
        )
        assert result.category == D
        assert result.reasons == ("Local genital infection: active sti, balanitis",)
        assert result.temporary_contraception_recommended is True
        assert result.counselling_alerts == (
            "Delay procedure until infection treated.",
            "Provide temporary contraception.",
            *MANDATORY_ALERTS,
        )
        assert "Required actions:" in result.clinical_recommendation
        assert "• Delay procedure until infection treated." in result.clinical_recommendation

    def test_infection_without_type(self):
        assert _eval({"ms-local-infection": True}).category == A


class TestSystemicAndScrotal:
    @pytest.mark.parametrize(
        "qid, category",
        [
            ("ms-systemic-infection", D),
            ("ms-coagulation-disorder", S),
            ("ms-previous-scrotal-injury", C),
            ("ms-large-varicocele", C),
            ("ms-large-hydrocele", C),
            ("ms-filariasis", D),
            ("ms-intrascrotal-mass", D),
            ("ms-cryptorchidism", S),
            ("ms-inguinal-hernia", S),
        ],
    )
    def test_single_condition(self, qid, category):
        result = _eval({qid: True})
        assert result.category == category
        assert len(result.reasons) == 1


# =====================================================================
# Combination and recommendation text
# =====================================================================


class TestCombination:
    def test_most_restrictive_wins(self):
        result = _eval(
            {"ms-age": 22, "ms-filariasis": True, "ms-inguinal-hernia": True}
        )
        assert result.category == S
        assert result.referral_required is True
        assert result.temporary_contraception_recommended is False
        assert result.reasons == (
            "Young age (22 years)",
            "Filariasis (elephantiasis)",
            "Inguinal hernia (special setting required)",
        )
        assert result.clinical_recommendation.startswith("Refer to higher-level facility with:")

    def test_caution_recommendation_lists_alerts(self):
        result = _eval({"ms-depressive-disorder": True})
        assert result.clinical_recommendation == (
            "Procedure can proceed with caution.\n"
            "Enhanced counselling required before proceeding.\n"
            "\nSpecific considerations:\n"
            "• Additional counselling recommended for mental health considerations."
        )

    def test_explanation_lists_reasons(self):
        result = _eval({"ms-large-hydrocele": True})
        assert result.explanation.endswith("\n\nConditions identified:\n• Large hydrocele")

    def test_deterministic(self):
        answers = {"ms-age": 22, "ms-cryptorchidism": True}
        assert _eval(answers) == _eval(answers)
