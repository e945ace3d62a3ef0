"""
Unit Tests for the Differential Generator
"""
import pytest

from resus.core.reasoning import INCLUSION_THRESHOLD, DifferentialGenerator, generate
from resus.core.reasoning.base import DifferentialCategory, ShockCandidate
from resus.core.reasoning.engine import admits
from resus.core.reasoning.vitals import AgeGroup


class _RecordingModifiers:
    """Age modifier stand-in that records the group it was asked about."""

    def __init__(self):
        self.groups = []

    def lookup(self, diagnosis_id, age_group):
        return []

    def adjust(self, differential, age_group):
        self.groups.append(age_group)
        return differential


class TestGenerate:
    """Ranking, filtering and gating."""

    def test_well_child_has_no_differentials(self, well_child):
        assert generate(well_child) == []

    def test_dka_adult(self, dka_adult):
        differentials = generate(dka_adult)
        assert [d.id for d in differentials] == ["dka"]
        assert differentials[0].probability == pytest.approx(0.85)
        assert differentials[0].evidence == (
            "Hyperglycemia (14 mmol/L)",
            "Kussmaul breathing (deep, rapid)",
            "Shock/poor perfusion",
        )

    def test_hypoglycemic_child(self, hypoglycemic_child):
        top = generate(hypoglycemic_child)[0]
        assert top.id == "hypoglycemia"
        assert top.probability == pytest.approx(0.9)

    @pytest.mark.parametrize("fixture_name", [
        "dka_adult", "hypoglycemic_child", "sepsis_dka_adult", "eclamptic_patient", "febrile_neonate",
    ])
    def test_invariants(self, request, fixture_name):
        differentials = generate(request.getfixturevalue(fixture_name))
        probabilities = [d.probability for d in differentials]
        assert probabilities == sorted(probabilities, reverse=True)
        assert all(INCLUSION_THRESHOLD < p <= 0.99 for p in probabilities)
        assert len({d.id for d in differentials}) == len(differentials)

    def test_sepsis_dka_ranking(self, sepsis_dka_adult):
        ids = [d.id for d in generate(sepsis_dka_adult)]
        assert ids[:2] == ["septic_shock", "dka"]

    def test_ties_keep_invocation_order(self, febrile_neonate):
        differentials = generate(febrile_neonate)
        assert [d.id for d in differentials[:2]] == ["septic_shock", "neonatal_sepsis"]
        assert differentials[0].probability == differentials[1].probability

    def test_age_modifier_applied(self, febrile_neonate):
        septic = next(d for d in generate(febrile_neonate) if d.id == "septic_shock")
        assert any(e.startswith("[Age-specific]") for e in septic.evidence)

    def test_eclampsia_only_for_pregnant(self, survey_factory, eclamptic_patient):
        assert "eclampsia" in [d.id for d in generate(eclamptic_patient)]

        same_findings_adult = survey_factory(
            patient_type="adult",
            physiologic_state="seizure",
            circulation={"blood_pressure": {"systolic": 165, "diastolic": 110}},
            disability={"seizure": {"active": True}},
            exposure={"age_years": 28, "pregnancy_related": {"currently_pregnant": True}},
        )
        assert "eclampsia" not in [d.id for d in generate(same_findings_adult)]

    def test_neonatal_sepsis_only_for_neonates(self, survey_factory):
        survey = survey_factory(
            circulation={"history": {"poor_feeding": True}},
            disability={"avpu": "voice"},
            exposure={"temperature": 35.5},
        )
        assert "neonatal_sepsis" not in [d.id for d in generate(survey)]


class TestGeneratorWiring:

    def test_shock_classifier_can_be_disabled(self, sepsis_dka_adult):
        generator = DifferentialGenerator(shock_classifier=None)
        assert not any(d.id.startswith("shock_") for d in generator.generate(sepsis_dka_adult))

    def test_shock_candidates_filtered_and_adapted(self, well_child):
        def fake_classifier(survey):
            return [
                ShockCandidate(category="cardiogenic", probability=0.6, fluid_recommendation="avoid"),
                ShockCandidate(category="neurogenic", probability=0.3, fluid_recommendation="cautious"),
            ]

        differentials = DifferentialGenerator(shock_classifier=fake_classifier).generate(well_child)
        assert [d.id for d in differentials] == ["shock_cardiogenic"]
        assert differentials[0].category == DifferentialCategory.IMMEDIATE_THREAT

    def test_age_group_passed_to_modifiers(self, hypoglycemic_child, eclamptic_patient):
        modifiers = _RecordingModifiers()
        generator = DifferentialGenerator(age_modifiers=modifiers)
        generator.generate(hypoglycemic_child)
        generator.generate(eclamptic_patient)
        assert AgeGroup.CHILD in modifiers.groups
        assert AgeGroup.PREGNANT in modifiers.groups


class TestRegistry:

    def test_registered_diagnoses(self):
        ids = DifferentialGenerator.registered_diagnoses()
        assert len(ids) == 31
        assert ids[0] == "dka"
        assert "maternal_cardiac_arrest" in ids

    def test_patient_type_gates(self):
        gates = DifferentialGenerator.patient_type_gates()
        assert gates["neonatal_sepsis"] == ["neonate"]
        assert admits("eclampsia", "pregnant_postpartum")
        assert not admits("eclampsia", "adult")
        assert admits("dka", "neonate")

    def test_summarise(self, dka_adult):
        summary = DifferentialGenerator.summarise(generate(dka_adult))
        assert summary["total"] == 1
        assert summary["top"] == "dka"
        assert summary["differentials"][0]["category"] == "critical"

    def test_summarise_empty(self):
        assert DifferentialGenerator.summarise([]) == {
            "total": 0, "top": None, "immediate_threat_count": 0, "differentials": [],
        }
