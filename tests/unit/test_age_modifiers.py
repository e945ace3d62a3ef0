"""
Unit Tests for Age-Specific Modifiers
"""
import pytest

from resus.core.reasoning.age_modifiers import (
    AGE_MODIFIERS,
    DEFAULT_AGE_MODIFIERS,
    adjust,
    lookup,
    modifier_for,
)
from resus.core.reasoning.base import Differential, DifferentialCategory
from resus.core.reasoning.vitals import AgeGroup


def _differential(diagnosis_id: str, probability: float) -> Differential:
    return Differential(
        id=diagnosis_id,
        diagnosis=diagnosis_id.replace("_", " ").title(),
        probability=probability,
        category=DifferentialCategory.CRITICAL,
        evidence=("Observed finding",),
    )


class TestModifierTable:

    def test_keys_follow_id_and_group(self):
        for key, modifier in AGE_MODIFIERS.items():
            assert key == f"{modifier.condition_id}_{modifier.age_group.value}"

    @pytest.mark.parametrize("diagnosis_id,group,expected", [
        ("septic_shock", AgeGroup.NEONATE, 0.2),
        ("myocardial_infarction", AgeGroup.PREGNANT, -0.3),
        ("stroke", AgeGroup.CHILD, -0.4),
        ("bronchiolitis", AgeGroup.INFANT, 0.3),
    ])
    def test_adjustments(self, diagnosis_id, group, expected):
        assert modifier_for(diagnosis_id, group).probability_adjustment == expected

    def test_unknown_pair(self):
        assert modifier_for("dka", AgeGroup.ELDERLY) is None


class TestAdjust:

    def test_adds_adjustment_and_notes(self):
        adjusted = adjust(_differential("septic_shock", 0.5), AgeGroup.NEONATE)
        assert adjusted.probability == pytest.approx(0.7)
        assert adjusted.evidence[0] == "Observed finding"
        assert "[Age-specific] Lethargy/poor feeding primary signs" in adjusted.evidence

    def test_clamps_to_ceiling(self):
        adjusted = adjust(_differential("croup", 0.9), AgeGroup.CHILD)
        assert adjusted.probability == 0.99

    def test_clamps_to_floor(self):
        adjusted = adjust(_differential("stroke", 0.2), AgeGroup.CHILD)
        assert adjusted.probability == 0.0

    def test_no_modifier_returns_input(self):
        original = _differential("dka", 0.6)
        assert adjust(original, AgeGroup.ADULT) is original

    def test_input_not_mutated(self):
        original = _differential("pneumonia", 0.4)
        adjust(original, AgeGroup.ELDERLY)
        assert original.probability == 0.4
        assert original.evidence == ("Observed finding",)


class TestLookup:

    def test_returns_intervention_modifications(self):
        mods = lookup("dka", AgeGroup.CHILD)
        assert mods[0] == "CRITICAL: Cerebral edema risk (1-2%)"
        assert "Fluid resuscitation: 10 ml/kg bolus (NOT 20 ml/kg)" in mods

    def test_unknown_pair_is_empty(self):
        assert lookup("svt", AgeGroup.ADULT) == []

    def test_default_lookup_delegates(self):
        assert DEFAULT_AGE_MODIFIERS.lookup("stroke", AgeGroup.PREGNANT) == lookup("stroke", AgeGroup.PREGNANT)
