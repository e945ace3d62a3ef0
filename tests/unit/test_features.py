"""
Unit Tests for the Feature-Rule Toolkit

Tests for weight accumulation, missing-key bookkeeping, mutually exclusive
alternatives, gating and clamping.
"""
import pytest

from resus.core.reasoning.base import DifferentialCategory, clamp_probability
from resus.core.reasoning.features import (
    FeatureRule,
    FirstOf,
    PatternScorer,
    always,
    evaluate,
    render_evidence,
    survey_facts,
)


def _never(_s):
    return False


class TestEvaluate:
    """Tests for evaluate()."""

    def test_matched_rules_keep_table_order(self, well_child):
        features = (
            FeatureRule("a", always, 0.1, "A"),
            FeatureRule("b", _never, 0.2, "B", missing="b_key"),
            FeatureRule("c", always, 0.3, "C"),
        )
        matched, missing = evaluate(features, well_child)
        assert [r.name for r in matched] == ["a", "c"]
        assert missing == ["b_key"]

    def test_absent_feature_without_key_records_nothing(self, well_child):
        matched, missing = evaluate((FeatureRule("x", _never, 0.5),), well_child)
        assert matched == []
        assert missing == []

    def test_first_of_takes_only_first_match(self, well_child):
        group = FirstOf("g", (
            FeatureRule("first", always, 0.4),
            FeatureRule("second", always, 0.2),
        ))
        matched, _ = evaluate((group,), well_child)
        assert [r.name for r in matched] == ["first"]

    def test_first_of_records_group_missing_key(self, well_child):
        group = FirstOf("g", (FeatureRule("only", _never, 0.4),), missing="group_key")
        _, missing = evaluate((group,), well_child)
        assert missing == ["group_key"]


class TestRenderEvidence:
    """Tests for evidence rendering."""

    def test_templates_use_survey_facts(self, survey_factory):
        survey = survey_factory(disability={"blood_glucose": 14})
        rule = FeatureRule("g", always, 0.4, "Hyperglycemia ({glucose} mmol/L)")
        assert render_evidence([rule], survey) == ("Hyperglycemia (14 mmol/L)",)

    def test_rules_without_template_are_silent(self, well_child):
        assert render_evidence([FeatureRule("silent", always, 0.05)], well_child) == ()

    def test_facts_placeholder_for_missing_blood_pressure(self, survey_factory):
        survey = survey_factory(circulation={"blood_pressure": None})
        facts = survey_facts(survey)
        assert facts["systolic"] == "?"
        assert facts["mechanism"] == "unknown"


class TestPatternScorer:
    """Tests for PatternScorer."""

    def test_probability_is_sum_of_matched_weights(self, well_child):
        scorer = PatternScorer(
            id="x", diagnosis="X", category=DifferentialCategory.URGENT,
            features=(
                FeatureRule("a", always, 0.25, "A"),
                FeatureRule("b", always, 0.2, "B"),
                FeatureRule("c", _never, 0.3, "C", missing="c"),
            ),
            always_missing=("never_captured",),
        )
        d = scorer(well_child)
        assert d.probability == pytest.approx(0.45)
        assert d.evidence == ("A", "B")
        assert d.missing == ("c", "never_captured")

    def test_probability_clamped_to_ceiling(self, well_child):
        scorer = PatternScorer(
            id="x", diagnosis="X", category=DifferentialCategory.URGENT,
            features=(FeatureRule("a", always, 0.8), FeatureRule("b", always, 0.8)),
        )
        assert scorer(well_child).probability == 0.99

    def test_negative_weight_clamped_to_zero(self, well_child):
        scorer = PatternScorer(
            id="x", diagnosis="X", category=DifferentialCategory.URGENT,
            features=(FeatureRule("penalty", always, -0.3),),
        )
        assert scorer(well_child).probability == 0.0

    def test_unmet_gate_short_circuits(self, well_child):
        scorer = PatternScorer(
            id="gated", diagnosis="Gated", category=DifferentialCategory.CRITICAL,
            gate=FirstOf("gate", (FeatureRule("g", _never, 0.5),), missing="gate_key"),
            features=(FeatureRule("a", always, 0.4, "A", missing="a"),),
            next_questions=("Q?",),
        )
        d = scorer(well_child)
        assert d.probability == 0.0
        assert d.missing == ("gate_key",)
        assert d.evidence == ()

    def test_met_gate_contributes_weight_and_evidence(self, well_child):
        scorer = PatternScorer(
            id="gated", diagnosis="Gated", category=DifferentialCategory.CRITICAL,
            gate=FirstOf("gate", (FeatureRule("g", always, 0.5, "Gate"),), missing="gate_key"),
            features=(FeatureRule("a", always, 0.2, "A"),),
        )
        d = scorer(well_child)
        assert d.probability == pytest.approx(0.7)
        assert d.evidence == ("Gate", "A")


def test_clamp_probability_rounds_float_noise():
    assert clamp_probability(0.1 + 0.2) == 0.3
    assert clamp_probability(1.4) == 0.99
    assert clamp_probability(-0.2) == 0.0
