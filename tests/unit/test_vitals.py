"""
Unit Tests for Vital-Sign Reference Ranges and Age Groups
"""
import pytest

from resus.core.reasoning.vitals import (
    AgeGroup,
    age_group_for,
    classify_age_group,
    heart_rate_range,
    is_bradycardic,
    is_tachycardic,
    is_tachypneic,
    respiratory_rate_range,
)


class TestReferenceRanges:
    """Tests for age-banded normal ranges."""

    @pytest.mark.parametrize("age,expected", [
        (0.02, (30, 60)),
        (0.5, (24, 40)),
        (2, (22, 30)),
        (8, (18, 25)),
        (30, (12, 20)),
    ])
    def test_respiratory_rate_bands(self, age, expected):
        assert tuple(respiratory_rate_range(age)) == expected

    def test_heart_rate_adult_band(self):
        assert tuple(heart_rate_range(40)) == (60, 100)

    def test_tachypnea_judged_against_age(self, survey_factory):
        assert not is_tachypneic(survey_factory(breathing={"rate": 24}))
        assert is_tachypneic(survey_factory(breathing={"rate": 24}, patient_type="adult",
                                            exposure={"age_years": 30}))

    def test_tachypnea_margin(self, survey_factory):
        adult = survey_factory(patient_type="adult", breathing={"rate": 28}, exposure={"age_years": 30})
        assert is_tachypneic(adult)
        assert not is_tachypneic(adult, margin=10)

    def test_heart_rate_flags(self, survey_factory):
        assert is_tachycardic(survey_factory(circulation={"heart_rate": 130}))
        assert is_bradycardic(survey_factory(circulation={"heart_rate": 50}))

    def test_unknown_age_uses_patient_type_nominal(self, survey_factory):
        survey = survey_factory(patient_type="adult", breathing={"rate": 22},
                                exposure={"age_years": None})
        assert is_tachypneic(survey)


class TestAgeGroups:
    """Tests for classify_age_group()."""

    @pytest.mark.parametrize("age,group", [
        (0.01, AgeGroup.NEONATE),
        (0.5, AgeGroup.INFANT),
        (5, AgeGroup.CHILD),
        (15, AgeGroup.ADOLESCENT),
        (40, AgeGroup.ADULT),
        (70, AgeGroup.ELDERLY),
    ])
    def test_bands(self, age, group):
        assert classify_age_group(age) == group

    def test_pregnancy_overrides_age(self):
        assert classify_age_group(16, is_pregnant_or_postpartum=True) == AgeGroup.PREGNANT

    def test_unknown_age_falls_back_to_patient_type(self):
        assert classify_age_group(None, patient_type="neonate") == AgeGroup.NEONATE
        assert classify_age_group(None, patient_type="child") == AgeGroup.CHILD
        assert classify_age_group(None, patient_type="adult") == AgeGroup.ADULT

    def test_survey_age_from_days(self, febrile_neonate):
        assert age_group_for(febrile_neonate) == AgeGroup.NEONATE

    def test_pregnant_survey(self, eclamptic_patient):
        assert age_group_for(eclamptic_patient) == AgeGroup.PREGNANT
