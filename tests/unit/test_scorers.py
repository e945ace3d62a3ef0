"""
Unit Tests for the Diagnosis Pattern Scorers

Each scorer is exercised directly through DifferentialGenerator.score so the
inclusion filter and age modifiers do not interfere.
"""
import pytest

from resus.core.reasoning import DifferentialCategory, DifferentialGenerator
from resus.utils.exceptions import UnknownDiagnosisError


@pytest.fixture
def generator() -> DifferentialGenerator:
    return DifferentialGenerator()


class TestMetabolicScorers:
    """Tests for dka, hypoglycemia and hyperkalemia."""

    def test_dka_classic_triad(self, generator, dka_adult):
        d = generator.score("dka", dka_adult)
        assert d.probability == pytest.approx(0.85)
        assert d.evidence == (
            "Hyperglycemia (14 mmol/L)",
            "Kussmaul breathing (deep, rapid)",
            "Shock/poor perfusion",
        )
        assert "polyuria_history" in d.missing

    def test_dka_missing_glucose_is_recorded(self, generator, survey_factory):
        d = generator.score("dka", survey_factory(disability={"blood_glucose": None}))
        assert "blood_glucose" in d.missing
        assert d.probability < 0.3

    def test_hypoglycemia_severe(self, generator, hypoglycemic_child):
        d = generator.score("hypoglycemia", hypoglycemic_child)
        assert d.probability == pytest.approx(0.9)
        assert d.category == DifferentialCategory.IMMEDIATE_THREAT

    def test_hypoglycemia_low_normal(self, generator, survey_factory):
        d = generator.score("hypoglycemia", survey_factory(disability={"blood_glucose": 3.5}))
        assert d.probability == pytest.approx(0.5)

    def test_hyperkalemia_always_asks_for_ecg(self, generator, well_child):
        d = generator.score("hyperkalemia", well_child)
        assert d.missing == ("urine_output", "ecg_changes", "renal_history")


class TestGatedScorers:
    """Gated scorers return exactly 0 and one specific missing key."""

    @pytest.mark.parametrize("diagnosis_id,gate_key", [
        ("eclampsia", "seizure"),
        ("status_epilepticus", "seizure"),
        ("postpartum_hemorrhage", "postpartum_status"),
        ("severe_burns", "visible_burns"),
        ("maternal_cardiac_arrest", "cardiac_arrest"),
    ])
    def test_gate_absent(self, generator, well_child, diagnosis_id, gate_key):
        d = generator.score(diagnosis_id, well_child)
        assert d.probability == 0
        assert d.missing == (gate_key,)
        assert d.evidence == ()

    def test_eclampsia_full_picture(self, generator, eclamptic_patient):
        d = generator.score("eclampsia", eclamptic_patient)
        assert d.probability == 0.99
        assert "Hypertension (165/110)" in d.evidence
        assert "Gestational age 32 weeks" in d.evidence

    def test_status_epilepticus_duration(self, generator, survey_factory):
        survey = survey_factory(disability={"seizure": {"active": True, "duration_minutes": 12}})
        d = generator.score("status_epilepticus", survey)
        assert d.probability == pytest.approx(0.8)
        assert "Seizure duration 12 minutes" in d.evidence

    def test_status_epilepticus_reported_seizure_opens_gate(self, generator, survey_factory):
        d = generator.score("status_epilepticus", survey_factory(physiologic_state="seizure"))
        assert d.probability == pytest.approx(0.4)
        assert d.missing == ("seizure_duration",)

    def test_postpartum_hemorrhage(self, generator, survey_factory):
        survey = survey_factory(
            patient_type="pregnant_postpartum",
            physiologic_state="severe_bleeding",
            exposure={"age_years": 30, "pregnancy_related": {"postpartum": True, "days_postpartum": 0}},
        )
        d = generator.score("postpartum_hemorrhage", survey)
        assert d.probability == pytest.approx(0.9)

    def test_severe_burns(self, generator, survey_factory):
        survey = survey_factory(
            exposure={"visible_injuries": {"burns": True}, "trauma_history": {"mechanism": "burn"}},
        )
        d = generator.score("severe_burns", survey)
        assert d.probability == pytest.approx(0.8)
        assert d.evidence[0] == "Visible burns"


class TestRespiratoryScorers:
    """Tests for airway and breathing scorers."""

    def test_foreign_body_in_toddler(self, generator, survey_factory):
        survey = survey_factory(
            airway={"status": "obstructed", "observations": {"stridor": True}},
            exposure={"age_years": 2},
        )
        d = generator.score("foreign_body_aspiration", survey)
        assert d.probability == pytest.approx(0.9)
        assert "High-risk age group (<5 years)" in d.evidence

    def test_status_asthmaticus(self, generator, survey_factory):
        survey = survey_factory(
            physiologic_state="severe_respiratory_distress",
            breathing={"spo2": 89, "auscultation": {"wheezing": True, "silent_chest": True}},
        )
        assert generator.score("status_asthmaticus", survey).probability == 0.99

    def test_bronchiolitis_age_penalty(self, generator, survey_factory):
        findings = dict(breathing={"effort": "increased", "auscultation": {"wheezing": True}})
        infant = survey_factory(exposure={"age_years": None, "age_months": 8}, **findings)
        school_age = survey_factory(**findings)
        assert generator.score("bronchiolitis", infant).probability == pytest.approx(0.7)
        assert generator.score("bronchiolitis", school_age).probability == pytest.approx(0.2)

    def test_croup(self, generator, survey_factory):
        survey = survey_factory(airway={"observations": {"stridor": True}}, exposure={"age_years": 2})
        assert generator.score("croup", survey).probability == pytest.approx(0.6)


class TestCardiovascularScorers:
    """Tests for cardiovascular scorers."""

    def test_pe_penalised_in_young_children(self, generator, survey_factory):
        child = survey_factory(breathing={"spo2": 90}, circulation={"heart_rate": 130})
        adult = survey_factory(
            patient_type="adult", breathing={"spo2": 90},
            circulation={"heart_rate": 130}, exposure={"age_years": 35},
        )
        assert generator.score("pulmonary_embolism", child).probability == pytest.approx(0.3)
        assert generator.score("pulmonary_embolism", adult).probability == pytest.approx(0.6)

    def test_pe_always_lists_unobservable_history(self, generator, well_child):
        d = generator.score("pulmonary_embolism", well_child)
        assert {"chest_pain", "leg_pain_swelling", "risk_factors"} <= set(d.missing)

    def test_mi_fixed_prior_in_children(self, generator, survey_factory):
        d = generator.score("myocardial_infarction", survey_factory(physiologic_state="shock"))
        assert d.probability == 0.05
        assert d.evidence == ("Rare in pediatric population",)

    def test_mi_older_adult_in_shock(self, generator, survey_factory):
        survey = survey_factory(
            patient_type="adult", physiologic_state="shock",
            circulation={"jvp": "elevated"}, exposure={"age_years": 58},
        )
        assert generator.score("myocardial_infarction", survey).probability == pytest.approx(0.7)

    def test_tamponade_penetrating_trauma(self, generator, survey_factory):
        survey = survey_factory(
            physiologic_state="shock",
            circulation={"jvp": "elevated", "heart_rate": 140},
            exposure={"trauma_history": {"mechanism": "penetrating"}},
        )
        d = generator.score("cardiac_tamponade", survey)
        assert d.probability == 0.99
        assert "Penetrating chest trauma" in d.evidence

    def test_svt(self, generator, survey_factory):
        survey = survey_factory(circulation={"heart_rate": 230, "blood_pressure": {"systolic": 80, "diastolic": 50}})
        assert generator.score("svt", survey).probability == pytest.approx(0.6)


class TestToxicologyScorers:
    def test_opioid_overdose(self, generator, survey_factory):
        survey = survey_factory(
            patient_type="adult",
            breathing={"rate": 6, "spo2": 85},
            disability={"avpu": "pain", "pupils": {"size_left": 1, "size_right": 1}},
            exposure={"age_years": 25, "toxin_exposure": {"substance": "heroin"}},
        )
        d = generator.score("opioid_overdose", survey)
        assert d.probability == 0.99
        assert d.evidence[0] == "Toxin exposure: heroin"


def test_unknown_scorer_raises(generator, well_child):
    with pytest.raises(UnknownDiagnosisError) as exc_info:
        generator.score("not_a_diagnosis", well_child)
    assert exc_info.value.details["registry"] == "scorers"
