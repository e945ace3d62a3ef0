"""
Unit Tests for the Assessment Service

End-to-end pipeline scenarios on the in-process service.
"""
import pytest

from resus.core.reasoning.base import Differential, DifferentialCategory
from resus.services import AssessmentService, analyze
from resus.utils import NoDifferentialError


class _FixedGenerator:
    """Generator stand-in returning a preset differential list."""

    def __init__(self, differentials):
        self._differentials = differentials

    def generate(self, survey):
        return list(self._differentials)


class TestScenarios:

    def test_dka_adult(self, dka_adult):
        result = analyze(dka_adult)
        assert result.top_differential.id == "dka"
        assert result.bundled
        assert [i.id for i in result.immediate_interventions] == ["dka_fluid_bolus", "dka_monitoring"]
        assert result.confirmatory_interventions[0].id == "dka_insulin"
        assert result.overlapping_conditions == [result.top_differential]
        assert result.system_interaction_warnings == []
        assert result.protocol_recommendation == "dka"

    def test_hypoglycemic_child(self, hypoglycemic_child):
        result = analyze(hypoglycemic_child)
        assert result.top_differential.id == "hypoglycemia"
        assert result.immediate_interventions[0].name == "Dextrose 10%: 100 mL (5 mL/kg) IV push"
        assert result.smart_questions[0].question_type == "confirmatory"

    def test_sepsis_with_dka(self, sepsis_dka_adult):
        result = analyze(sepsis_dka_adult)

        assert [d.id for d in result.overlapping_conditions] == ["septic_shock", "dka"]
        assert [o.name for o in result.dangerous_overlaps] == ["Sepsis + DKA"]
        assert [i.id for i in result.immediate_interventions] == [
            "sepsis_dka_integrated", "sepsis_fluid_bolus",
        ]
        assert result.conflict_resolutions == ["Fluids first (shock takes priority), then insulin (DKA)"]
        assert result.system_interaction_warnings[-1].startswith(
            "Multiple life-threatening conditions detected (2)"
        )
        assert [s.value for s in result.systems_involved] == ["infectious", "cardiovascular", "metabolic"]
        assert result.protocol_recommendation == "sepsis_dka_protocol"
        assert result.urgent_interventions[0].id == "sepsis_antibiotics"

    def test_well_child_raises(self, well_child):
        with pytest.raises(NoDifferentialError) as exc_info:
            analyze(well_child)
        error = exc_info.value
        assert error.code == "NO_DIFFERENTIAL"
        assert error.details["threshold"] == 0.3
        assert error.details["patient_type"] == "child"

    def test_febrile_neonate_age_specific_entry(self, febrile_neonate):
        result = analyze(febrile_neonate)
        assert result.top_differential.id == "septic_shock"
        assert "septic_shock_age_specific" in [i.id for i in result.immediate_interventions]


class TestServiceWiring:

    def test_unbundled_top_differential(self, survey_factory):
        croup = Differential("croup", "Croup", 0.7, DifferentialCategory.URGENT,
                             next_questions=("Barky cough?",))
        service = AssessmentService(generator=_FixedGenerator([croup]))
        result = service.analyze(survey_factory(exposure={"age_years": 2}))
        assert result.bundled is False
        assert result.immediate_interventions == []
        assert result.protocol_recommendation is None
        assert result.smart_questions[0].text == "Barky cough?"

    def test_uncatalogued_overlap_gets_generic_warning(self, survey_factory):
        differentials = [
            Differential("svt", "SVT", 0.8, DifferentialCategory.IMMEDIATE_THREAT),
            Differential("croup", "Croup", 0.7, DifferentialCategory.URGENT),
        ]
        service = AssessmentService(generator=_FixedGenerator(differentials))
        result = service.analyze(survey_factory())
        assert result.dangerous_overlaps == []
        assert result.system_interaction_warnings == [
            "Multiple life-threatening conditions detected (2). "
            "Treat all simultaneously with integrated protocol."
        ]
        assert result.bundled is False
        assert result.protocol_recommendation is None

    def test_to_dict_is_json_ready(self, sepsis_dka_adult):
        data = analyze(sepsis_dka_adult).to_dict()
        assert data["survey_data"]["patient_type"] == "adult"
        assert data["top_differential"]["category"] == "critical"
        assert data["dangerous_overlaps"][0]["conditions"] == ["dka", "septic_shock"]
        assert data["systems_involved"][0] == "infectious"
