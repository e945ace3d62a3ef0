"""
Unit Tests for the Primary Survey Schema
"""
import pytest
from pydantic import ValidationError

from resus.models.survey import PrimarySurveyData, parse_survey
from resus.utils.exceptions import SurveyValidationError


class TestPrimarySurvey:
    """Tests for PrimarySurveyData."""

    def test_optional_sections_default_to_not_observed(self, well_child):
        assert well_child.breathing.auscultation is None
        assert well_child.circulation.history is None
        assert well_child.disability.seizure is None
        assert well_child.airway.observations.stridor is False

    def test_age_in_years_prefers_most_specific_field(self, payload_factory):
        survey = parse_survey(payload_factory(exposure={"age_years": None, "age_months": 6}))
        assert survey.age_in_years == pytest.approx(0.5)

    def test_age_unknown(self, payload_factory):
        survey = parse_survey(payload_factory(exposure={"age_years": None}))
        assert survey.age_in_years is None

    def test_survey_is_frozen(self, well_child):
        with pytest.raises(ValidationError):
            well_child.patient_type = "adult"

    def test_pregnant_flag(self, eclamptic_patient, well_child):
        assert eclamptic_patient.is_pregnant_or_postpartum
        assert not well_child.is_pregnant_or_postpartum


class TestParseSurvey:
    """Tests for parse_survey()."""

    def test_rejects_unknown_patient_type(self, payload_factory):
        with pytest.raises(SurveyValidationError) as exc_info:
            parse_survey(payload_factory(patient_type="martian"))
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.errors

    def test_rejects_out_of_range_spo2(self, payload_factory):
        with pytest.raises(SurveyValidationError):
            parse_survey(payload_factory(breathing={"spo2": 140}))

    def test_missing_required_section(self, payload_factory):
        payload = payload_factory()
        del payload["breathing"]
        with pytest.raises(SurveyValidationError):
            parse_survey(payload)

    def test_valid_payload(self, payload_factory):
        assert isinstance(parse_survey(payload_factory()), PrimarySurveyData)
