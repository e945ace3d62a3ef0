"""
Primary survey schema (ABCDE snapshot).

One frozen model per assessment submission.  Every enumerated finding is a
``Literal`` so malformed payloads are rejected here, before the reasoning
core sees them.  Optional sections default to "not observed".
"""
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from resus.utils.exceptions import SurveyValidationError

PatientType = Literal["neonate", "child", "pregnant_postpartum", "adult"]

PhysiologicState = Literal[
    "cardiac_arrest",
    "respiratory_arrest",
    "severe_bleeding",
    "unresponsive",
    "seizure",
    "shock",
    "severe_respiratory_distress",
    "stroke_symptoms",
    "sepsis_suspected",
    "poisoning",
    "severe_pain",
    "other_emergency",
]

PulseStrength = Literal["strong", "weak", "absent"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# ── Airway ────────────────────────────────────────────────────────────────────

class AirwayObservations(_Frozen):
    vomiting: bool = False
    blood_secretions: bool = False
    foreign_body: bool = False
    stridor: bool = False
    snoring: bool = False
    gurgling: bool = False


class AirwayInterventions(_Frozen):
    suctioning: bool = False
    head_positioning: bool = False
    oropharyngeal_airway: bool = False
    nasopharyngeal_airway: bool = False
    lma_igel: bool = False
    ett: bool = False


class Airway(_Frozen):
    status: Literal["patent", "obstructed", "secured"] = "patent"
    observations: AirwayObservations = Field(default_factory=AirwayObservations)
    interventions: AirwayInterventions = Field(default_factory=AirwayInterventions)
    notes: str = ""


# ── Breathing ─────────────────────────────────────────────────────────────────

class EffortSigns(_Frozen):
    retractions: bool = False
    nasal_flaring: bool = False
    grunting: bool = False
    head_bobbing: bool = False


class OxygenTherapy(_Frozen):
    type: str
    flow: Optional[float] = Field(default=None, ge=0)
    fio2: Optional[float] = Field(default=None, ge=0.21, le=1.0)


class Auscultation(_Frozen):
    wheezing: bool = False
    crackles: bool = False
    decreased_air_entry: bool = False
    stridor: bool = False
    silent_chest: bool = False


class Breathing(_Frozen):
    rate: float = Field(..., ge=0, le=150, description="Respiratory rate (breaths/min)")
    pattern: Literal["normal", "deep_kussmaul", "shallow", "irregular", "apneic"] = "normal"
    effort: Literal["normal", "increased", "minimal"] = "normal"
    effort_signs: EffortSigns = Field(default_factory=EffortSigns)
    spo2: float = Field(..., ge=0, le=100, description="Peripheral oxygen saturation (%)")
    oxygen_therapy: Optional[OxygenTherapy] = None
    auscultation: Optional[Auscultation] = None
    notes: str = ""


# ── Circulation ───────────────────────────────────────────────────────────────

class BloodPressure(_Frozen):
    systolic: float = Field(..., ge=0, le=300)
    diastolic: float = Field(..., ge=0, le=250)


class Perfusion(_Frozen):
    capillary_refill: Literal["normal", "delayed", "very_delayed"] = "normal"
    peripheral_pulses: PulseStrength = "strong"
    central_pulses: PulseStrength = "strong"
    skin_temperature: Literal["warm", "cool", "cold"] = "warm"
    skin_color: Literal["pink", "pale", "mottled", "cyanotic"] = "pink"


class HeartFailureSigns(_Frozen):
    hepatomegaly: bool = False
    jugular_venous_distension: bool = False
    peripheral_edema: bool = False
    pulmonary_edema: bool = False


class CirculationHistory(_Frozen):
    polyuria: bool = False
    oliguria: bool = False
    diarrhea: bool = False
    vomiting: bool = False
    bleeding: bool = False
    poor_feeding: bool = False


class Circulation(_Frozen):
    heart_rate: float = Field(..., ge=0, le=350, description="Heart rate (beats/min)")
    blood_pressure: Optional[BloodPressure] = None
    perfusion: Perfusion = Field(default_factory=Perfusion)
    rhythm: Optional[Literal["regular", "irregular", "svt", "bradycardia"]] = None
    jvp: Optional[Literal["not_visible", "normal", "elevated"]] = None
    murmur: bool = False
    signs_of_heart_failure: Optional[HeartFailureSigns] = None
    history: Optional[CirculationHistory] = None
    notes: str = ""


# ── Disability ────────────────────────────────────────────────────────────────

class GlasgowComaScale(_Frozen):
    eye: int = Field(..., ge=1, le=4)
    verbal: int = Field(..., ge=1, le=5)
    motor: int = Field(..., ge=1, le=6)
    total: int = Field(..., ge=3, le=15)


class Pupils(_Frozen):
    size_left: float = Field(3.0, ge=0, le=10, description="mm")
    size_right: float = Field(3.0, ge=0, le=10, description="mm")
    reactive_left: bool = True
    reactive_right: bool = True


class Seizure(_Frozen):
    active: bool = False
    just_stopped: bool = False
    duration_minutes: Optional[float] = Field(default=None, ge=0)


class Disability(_Frozen):
    avpu: Literal["alert", "voice", "pain", "unresponsive"] = "alert"
    gcs: Optional[GlasgowComaScale] = None
    pupils: Pupils = Field(default_factory=Pupils)
    blood_glucose: Optional[float] = Field(default=None, ge=0, le=100, description="mmol/L")
    seizure: Optional[Seizure] = None
    posturing: Literal["none", "decorticate", "decerebrate"] = "none"
    notes: str = ""


# ── Exposure ──────────────────────────────────────────────────────────────────

class VisibleInjuries(_Frozen):
    bruising: bool = False
    burns: bool = False
    bleeding: bool = False
    deformities: bool = False
    rash: bool = False


class SkinFindings(_Frozen):
    petechiae: bool = False
    purpura: bool = False
    flushing: bool = False
    edema: bool = False
    pallor: bool = False


class TraumaHistory(_Frozen):
    mechanism: Optional[Literal["blunt", "penetrating", "fall", "burn", "aspiration", "other"]] = None


class ToxinExposure(_Frozen):
    substance: Optional[str] = None


class PregnancyStatus(_Frozen):
    currently_pregnant: bool = False
    gestational_age_weeks: Optional[float] = Field(default=None, ge=0, le=45)
    postpartum: bool = False
    days_postpartum: Optional[int] = Field(default=None, ge=0)


class Exposure(_Frozen):
    temperature: float = Field(..., ge=20, le=45, description="Core temperature (°C)")
    weight: float = Field(..., gt=0, le=300, description="kg")
    age_years: Optional[float] = Field(default=None, ge=0, le=120)
    age_months: Optional[float] = Field(default=None, ge=0)
    age_days: Optional[float] = Field(default=None, ge=0)
    visible_injuries: Optional[VisibleInjuries] = None
    skin_findings: Optional[SkinFindings] = None
    trauma_history: Optional[TraumaHistory] = None
    toxin_exposure: Optional[ToxinExposure] = None
    pregnancy_related: Optional[PregnancyStatus] = None
    notes: str = ""


# ── Snapshot ──────────────────────────────────────────────────────────────────

class PrimarySurveyData(_Frozen):
    """Immutable ABCDE snapshot for one assessment."""
    patient_type: PatientType
    physiologic_state: PhysiologicState
    airway: Airway = Field(default_factory=Airway)
    breathing: Breathing
    circulation: Circulation
    disability: Disability = Field(default_factory=Disability)
    exposure: Exposure
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def age_in_years(self) -> Optional[float]:
        """Age from the most specific field recorded, or None when unknown."""
        exp = self.exposure
        if exp.age_years is not None:
            return exp.age_years
        if exp.age_months is not None:
            return exp.age_months / 12
        if exp.age_days is not None:
            return exp.age_days / 365
        return None

    @property
    def is_pregnant_or_postpartum(self) -> bool:
        return self.patient_type == "pregnant_postpartum"


def parse_survey(payload: Dict[str, Any]) -> PrimarySurveyData:
    """Build a survey from a raw dict, raising SurveyValidationError on bad input."""
    try:
        return PrimarySurveyData.model_validate(payload)
    except ValidationError as exc:
        raise SurveyValidationError(
            f"Primary survey failed validation ({exc.error_count()} error(s))",
            errors=exc.errors(include_url=False),
        ) from exc
