"""
Pytest Configuration and Fixtures

Shared survey builders for the reasoning pipeline tests.  Every builder
starts from a well child (nothing abnormal) and overlays the findings a
scenario needs.
"""
import copy
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from resus.models.survey import PrimarySurveyData  # noqa: E402


WELL_CHILD: Dict[str, Any] = {
    "patient_type": "child",
    "physiologic_state": "other_emergency",
    "airway": {"status": "patent"},
    "breathing": {"rate": 20, "pattern": "normal", "effort": "normal", "spo2": 98},
    "circulation": {
        "heart_rate": 90,
        "blood_pressure": {"systolic": 100, "diastolic": 60},
        "perfusion": {"capillary_refill": "normal", "skin_temperature": "warm"},
    },
    "disability": {"avpu": "alert", "blood_glucose": 5.5},
    "exposure": {"temperature": 37.0, "weight": 25, "age_years": 8},
}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def build_payload(**overrides: Any) -> Dict[str, Any]:
    """Well-child payload with nested overrides, e.g. ``disability={"avpu": "pain"}``."""
    return _merge(WELL_CHILD, overrides)


def build_survey(**overrides: Any) -> PrimarySurveyData:
    return PrimarySurveyData.model_validate(build_payload(**overrides))


# ── Scenario payloads ─────────────────────────────────────────────────────────

def dka_adult_payload() -> Dict[str, Any]:
    """Scenario A: hyperglycemia, Kussmaul breathing, cold skin."""
    return build_payload(
        patient_type="adult",
        breathing={"rate": 28, "pattern": "deep_kussmaul"},
        circulation={
            "heart_rate": 96,
            "blood_pressure": {"systolic": 110, "diastolic": 70},
            "perfusion": {"skin_temperature": "cold"},
        },
        disability={"blood_glucose": 14},
        exposure={"weight": 70, "age_years": 30},
    )


def hypoglycemic_child_payload() -> Dict[str, Any]:
    """Scenario B: 20 kg child with glucose 2.5 mmol/L."""
    return build_payload(
        breathing={"rate": 24},
        circulation={"heart_rate": 110, "blood_pressure": {"systolic": 95, "diastolic": 60}},
        disability={"blood_glucose": 2.5},
        exposure={"weight": 20, "age_years": 4},
    )


def sepsis_dka_payload() -> Dict[str, Any]:
    """Scenario C: septic shock (0.7) with DKA (0.65) in an adult."""
    return build_payload(
        patient_type="adult",
        physiologic_state="sepsis_suspected",
        breathing={"rate": 28},
        circulation={
            "heart_rate": 145,
            "perfusion": {"capillary_refill": "delayed", "skin_temperature": "cool"},
            "history": {"polyuria": True},
        },
        disability={"blood_glucose": 20},
        exposure={"temperature": 39.0, "weight": 70, "age_years": 30},
    )


def eclampsia_payload() -> Dict[str, Any]:
    return build_payload(
        patient_type="pregnant_postpartum",
        physiologic_state="seizure",
        breathing={"rate": 18},
        circulation={"heart_rate": 95, "blood_pressure": {"systolic": 165, "diastolic": 110}},
        disability={"seizure": {"active": True}},
        exposure={
            "weight": 70,
            "age_years": 28,
            "pregnancy_related": {"currently_pregnant": True, "gestational_age_weeks": 32},
        },
    )


def febrile_neonate_payload() -> Dict[str, Any]:
    return build_payload(
        patient_type="neonate",
        breathing={"rate": 50},
        circulation={"heart_rate": 150, "history": {"poor_feeding": True}},
        disability={"avpu": "voice"},
        exposure={"temperature": 35.5, "weight": 3.5, "age_years": None, "age_days": 10},
    )


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def survey_factory() -> Callable[..., PrimarySurveyData]:
    """Build a survey from the well child plus nested overrides."""
    return build_survey


@pytest.fixture
def payload_factory() -> Callable[..., Dict[str, Any]]:
    return build_payload


@pytest.fixture
def well_child() -> PrimarySurveyData:
    """Scenario D: nothing should clear the inclusion threshold."""
    return build_survey()


@pytest.fixture
def dka_adult() -> PrimarySurveyData:
    return PrimarySurveyData.model_validate(dka_adult_payload())


@pytest.fixture
def hypoglycemic_child() -> PrimarySurveyData:
    return PrimarySurveyData.model_validate(hypoglycemic_child_payload())


@pytest.fixture
def sepsis_dka_adult() -> PrimarySurveyData:
    return PrimarySurveyData.model_validate(sepsis_dka_payload())


@pytest.fixture
def eclamptic_patient() -> PrimarySurveyData:
    return PrimarySurveyData.model_validate(eclampsia_payload())


@pytest.fixture
def febrile_neonate() -> PrimarySurveyData:
    return PrimarySurveyData.model_validate(febrile_neonate_payload())


@pytest.fixture
def scenario_payloads() -> Dict[str, Dict[str, Any]]:
    """Raw JSON bodies for API tests."""
    return {
        "dka": dka_adult_payload(),
        "hypoglycemia": hypoglycemic_child_payload(),
        "sepsis_dka": sepsis_dka_payload(),
        "eclampsia": eclampsia_payload(),
        "well_child": build_payload(),
    }
