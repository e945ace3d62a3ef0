"""
Neurological Pattern Scorers

Consumes:
  disability (avpu, pupils, posturing, seizure), circulation.blood_pressure,
  circulation.heart_rate, exposure.temperature, patient_type, age

Scorers:
  status_epilepticus  — gated on active / just-stopped / reported seizure
  stroke              — altered mental status + focal signs + hypertension
  encephalitis        — altered mental status + seizure + fever
  increased_icp       — altered mental status + Cushing's response
"""
from __future__ import annotations

from .base import DifferentialCategory
from .features import (
    FeatureRule,
    FirstOf,
    PatternScorer,
    altered_mental_status,
    patient_is,
    seizure_observed,
    systolic,
    systolic_above,
)
from .rules_obstetric import SEIZURE_REPORTED
from .vitals import is_bradycardic

# ── Thresholds ────────────────────────────────────────────────────────────────
STATUS_DURATION_MIN = 5
STROKE_SBP = 180
ICP_SBP = 140
ECLAMPSIA_SBP = 140
STROKE_AGE_YEARS = 60
ENCEPHALITIS_FEVER_C = 38.5


def _seizure_flag(flag: str):
    def predicate(s) -> bool:
        seizure = s.disability.seizure
        return seizure is not None and getattr(seizure, flag)
    return predicate


def _prolonged_seizure(s) -> bool:
    seizure = s.disability.seizure
    return (
        seizure is not None
        and seizure.duration_minutes is not None
        and seizure.duration_minutes >= STATUS_DURATION_MIN
    )


def _pregnant_without_hypertension(s) -> bool:
    if s.patient_type != "pregnant_postpartum":
        return False
    sbp = systolic(s)
    return sbp is None or sbp < ECLAMPSIA_SBP


def _asymmetric_pupils(s) -> bool:
    p = s.disability.pupils
    return p.size_left != p.size_right or p.reactive_left != p.reactive_right


def _older_adult(s) -> bool:
    age = s.age_in_years
    return s.patient_type == "adult" and age is not None and age > STROKE_AGE_YEARS


# ── Status epilepticus ────────────────────────────────────────────────────────

score_status_epilepticus = PatternScorer(
    id="status_epilepticus",
    diagnosis="Status Epilepticus",
    category=DifferentialCategory.CRITICAL,
    gate=FirstOf("seizure", (
        FeatureRule("active", _seizure_flag("active"), 0.5, "Seizure active now"),
        FeatureRule("just_stopped", _seizure_flag("just_stopped"), 0.3, "Seizure just stopped"),
        SEIZURE_REPORTED,
    ), missing="seizure"),
    features=(
        FeatureRule("duration", _prolonged_seizure, 0.3,
                    "Seizure duration {seizure_duration} minutes", missing="seizure_duration"),
        FeatureRule("post_ictal",
                    lambda s: _seizure_flag("just_stopped")(s) and altered_mental_status(s),
                    0.1, "Not waking up after seizure"),
        FeatureRule("no_hypertension", _pregnant_without_hypertension, 0.1,
                    "No hypertension (less likely eclampsia)"),
    ),
    next_questions=(
        "Known epilepsy or seizure disorder?",
        "Recent head injury?",
        "Medication non-compliance?",
        "Fever present (febrile seizure)?",
        "For pregnant patients: High BP, headache, or vision changes (eclampsia)?",
    ),
)


# ── Stroke ────────────────────────────────────────────────────────────────────

score_stroke = PatternScorer(
    id="stroke",
    diagnosis="Stroke (Ischemic/Hemorrhagic)",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("altered_mental_status", altered_mental_status, 0.3,
                    "Altered mental status ({avpu})"),
        FeatureRule("pupils", _asymmetric_pupils, 0.3, "Unequal/unreactive pupils"),
        FeatureRule("posturing", lambda s: s.disability.posturing != "none", 0.2,
                    "Posturing ({posturing})"),
        FeatureRule("severe_hypertension", systolic_above(STROKE_SBP), 0.2, "Severe hypertension"),
        FeatureRule("age", _older_adult, 0.1, "Age >60 years"),
        FeatureRule("pregnancy", patient_is("pregnant_postpartum"), 0.1,
                    "Pregnancy (increased stroke risk)"),
    ),
    next_questions=(
        "Sudden onset of symptoms?",
        "Facial droop?",
        "Arm/leg weakness (one-sided)?",
        "Speech difficulty?",
        "Severe headache (worst of life)?",
        "Time of symptom onset? (Critical for tPA eligibility)",
    ),
)


# ── Encephalitis ──────────────────────────────────────────────────────────────

score_encephalitis = PatternScorer(
    id="encephalitis",
    diagnosis="Encephalitis (Viral/Autoimmune)",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("altered_mental_status", altered_mental_status, 0.3, "Altered mental status"),
        FeatureRule("seizure", seizure_observed, 0.25, "Seizures"),
        FeatureRule("fever", lambda s: s.exposure.temperature > ENCEPHALITIS_FEVER_C, 0.25,
                    "Fever ({temperature}°C)"),
    ),
    next_questions=(
        "Severe headache?",
        "Behavioral changes or confusion?",
        "Focal neurological signs?",
    ),
)


# ── Raised intracranial pressure ──────────────────────────────────────────────

score_increased_icp = PatternScorer(
    id="increased_icp",
    diagnosis="Increased Intracranial Pressure (ICP)",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("altered_mental_status", altered_mental_status, 0.3, "Altered mental status"),
        FeatureRule("hypertension", systolic_above(ICP_SBP), 0.2, "Hypertension"),
        FeatureRule("bradycardia", is_bradycardic, 0.2, "Bradycardia"),
    ),
    next_questions=(
        "Severe headache?",
        "Vomiting?",
        "Papilledema?",
        "Abnormal posturing (decorticate/decerebrate)?",
    ),
)

