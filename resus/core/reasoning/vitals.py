"""
Age-appropriate vital sign reference ranges and age-group classification.

Pediatric normals shift sharply in the first years of life, so "tachycardia"
or "tachypnea" must be judged against the band for the patient's age.
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from resus.models.survey import PrimarySurveyData


class Range(NamedTuple):
    min: float
    max: float


class AgeGroup(str, Enum):
    NEONATE    = "neonate"      # < 28 days
    INFANT     = "infant"       # 28 days – 1 year
    CHILD      = "child"        # 1 – 12 years
    ADOLESCENT = "adolescent"   # 12 – 18 years
    ADULT      = "adult"        # 18 – 65 years
    ELDERLY    = "elderly"      # > 65 years
    PREGNANT   = "pregnant"     # overrides age


# ── Age bands (upper bound in years, exclusive) ──────────────────────────────
NEONATE_MAX_YEARS = 0.08

_RR_BANDS = (
    (0.08, Range(30, 60)),   # neonate
    (1,    Range(24, 40)),   # infant
    (3,    Range(22, 30)),   # toddler
    (6,    Range(20, 28)),   # preschool
    (12,   Range(18, 25)),   # school age
)
_RR_ADULT = Range(12, 20)

_HR_BANDS = (
    (0.08, Range(120, 160)),
    (1,    Range(100, 150)),
    (3,    Range(90, 140)),
    (6,    Range(80, 120)),
    (12,   Range(70, 110)),
)
_HR_ADULT = Range(60, 100)

# Nominal age used when the survey records none
_DEFAULT_AGE_BY_PATIENT_TYPE = {
    "neonate": 0.04,
    "child": 6.0,
    "pregnant_postpartum": 30.0,
    "adult": 30.0,
}


def _lookup(age_years: float, bands, adult: Range) -> Range:
    for upper, rng in bands:
        if age_years < upper:
            return rng
    return adult


def respiratory_rate_range(age_years: float) -> Range:
    """Normal respiratory rate band (breaths/min) for an age in years."""
    return _lookup(age_years, _RR_BANDS, _RR_ADULT)


def heart_rate_range(age_years: float) -> Range:
    """Normal heart rate band (beats/min) for an age in years."""
    return _lookup(age_years, _HR_BANDS, _HR_ADULT)


def reference_age(survey: "PrimarySurveyData") -> float:
    """Recorded age, or a nominal age for the patient type when none was recorded."""
    age = survey.age_in_years
    if age is not None:
        return age
    return _DEFAULT_AGE_BY_PATIENT_TYPE[survey.patient_type]


def classify_age_group(age_years: Optional[float], is_pregnant_or_postpartum: bool = False,
                       patient_type: Optional[str] = None) -> AgeGroup:
    """
    Map an age in years to an AgeGroup.

    Pregnancy overrides age.  When the age is unknown the group is taken from
    the patient type (``child`` and ``adult`` map directly).
    """
    if is_pregnant_or_postpartum:
        return AgeGroup.PREGNANT
    if age_years is None:
        if patient_type == "neonate":
            return AgeGroup.NEONATE
        if patient_type == "child":
            return AgeGroup.CHILD
        return AgeGroup.ADULT
    if age_years < NEONATE_MAX_YEARS:
        return AgeGroup.NEONATE
    if age_years < 1:
        return AgeGroup.INFANT
    if age_years < 12:
        return AgeGroup.CHILD
    if age_years < 18:
        return AgeGroup.ADOLESCENT
    if age_years < 65:
        return AgeGroup.ADULT
    return AgeGroup.ELDERLY


def age_group_for(survey: "PrimarySurveyData") -> AgeGroup:
    return classify_age_group(
        survey.age_in_years,
        survey.is_pregnant_or_postpartum,
        survey.patient_type,
    )


def is_tachypneic(survey: "PrimarySurveyData", margin: float = 0) -> bool:
    return survey.breathing.rate > respiratory_rate_range(reference_age(survey)).max + margin


def is_tachycardic(survey: "PrimarySurveyData") -> bool:
    return survey.circulation.heart_rate > heart_rate_range(reference_age(survey)).max


def is_bradycardic(survey: "PrimarySurveyData") -> bool:
    return survey.circulation.heart_rate < heart_rate_range(reference_age(survey)).min
