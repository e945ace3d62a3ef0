"""
Unit Tests for the Shock Sub-Classifier
"""
import pytest

from resus.core.reasoning.base import DifferentialCategory
from resus.core.reasoning.shock import (
    CARDIOGENIC,
    HYPOVOLEMIC,
    classify,
    in_shock,
    to_differential,
)


class TestShockGate:
    """The classifier only runs with shock physiology."""

    def test_no_shock_no_candidates(self, well_child):
        assert not in_shock(well_child)
        assert classify(well_child) == []

    @pytest.mark.parametrize("overrides", [
        {"physiologic_state": "shock"},
        {"circulation": {"perfusion": {"capillary_refill": "delayed"}}},
        {"circulation": {"perfusion": {"skin_temperature": "cool"}}},
    ])
    def test_any_shock_sign_opens_gate(self, survey_factory, overrides):
        survey = survey_factory(**overrides)
        assert in_shock(survey)
        assert len(classify(survey)) == 6


class TestShockSubtypes:
    """Tests for individual subtype tables."""

    def test_hypovolemic_from_losses(self, survey_factory):
        survey = survey_factory(
            physiologic_state="shock",
            circulation={
                "heart_rate": 150,
                "jvp": "not_visible",
                "perfusion": {"capillary_refill": "very_delayed", "skin_temperature": "cool"},
                "history": {"diarrhea": True, "vomiting": True},
            },
        )
        candidates = classify(survey)
        top = candidates[0]
        assert top.category == "hypovolemic"
        assert top.fluid_recommendation == "bolus"
        assert top.probability == pytest.approx(0.75)
        assert "Fluid losses (diarrhea/vomiting)" in top.evidence

    def test_cardiogenic_avoids_fluids(self, survey_factory):
        survey = survey_factory(
            physiologic_state="shock",
            breathing={"auscultation": {"crackles": True}},
            circulation={
                "jvp": "elevated",
                "murmur": True,
                "perfusion": {"skin_temperature": "cold"},
                "signs_of_heart_failure": {"hepatomegaly": True},
            },
        )
        candidate = CARDIOGENIC(survey)
        assert candidate.probability == 0.99
        assert candidate.fluid_recommendation == "avoid"
        assert candidate.immediate_actions[0].startswith("DO NOT GIVE FLUID BOLUSES")
        assert classify(survey)[0].category == "cardiogenic"

    def test_candidates_sorted_descending(self, survey_factory):
        survey = survey_factory(physiologic_state="shock",
                                exposure={"temperature": 39.5},
                                disability={"avpu": "voice"})
        probabilities = [c.probability for c in classify(survey)]
        assert probabilities == sorted(probabilities, reverse=True)

    def test_probability_bounded(self, survey_factory):
        survey = survey_factory(
            physiologic_state="shock",
            circulation={"history": {"bleeding": True, "diarrhea": True}, "heart_rate": 160,
                         "jvp": "normal", "perfusion": {"capillary_refill": "delayed"}},
            exposure={"visible_injuries": {"burns": True}},
        )
        assert HYPOVOLEMIC(survey).probability == 0.99


def test_adapter_produces_immediate_threat(survey_factory):
    survey = survey_factory(physiologic_state="shock")
    candidate = classify(survey)[0]
    d = to_differential(candidate)
    assert d.id == f"shock_{candidate.category}"
    assert d.category == DifferentialCategory.IMMEDIATE_THREAT
    assert d.probability == candidate.probability
