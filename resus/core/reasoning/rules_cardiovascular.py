"""
Cardiovascular Pattern Scorers

Consumes:
  circulation (heart_rate, blood_pressure, jvp, signs_of_heart_failure),
  breathing (spo2, effort, auscultation), exposure (temperature, skin_findings,
  trauma_history), disability.avpu, patient_type, age

Scorers:
  pulmonary_embolism, cardiac_tamponade, myocardial_infarction,
  heart_failure, svt, ventricular_tachycardia, myocarditis
"""
from __future__ import annotations

from .base import Differential, DifferentialCategory
from .features import (
    FeatureRule,
    FirstOf,
    PatternScorer,
    altered_mental_status,
    auscultation,
    heart_failure_sign,
    hypotensive_or_shocked,
    patient_is,
    skin_finding,
    state_is,
    systolic_below,
    trauma_mechanism,
)
from .vitals import is_tachycardic, is_tachypneic

# ── Thresholds ────────────────────────────────────────────────────────────────
HYPOXIA_SPO2 = 92
PE_SPO2 = 94
PE_CHILD_AGE_YEARS = 12
MI_AGE_YEARS = 40
SVT_RATE_BPM = 180
VT_RATE_BPM = 150
MI_PEDIATRIC_PROBABILITY = 0.05


def _jvp_elevated(s) -> bool:
    return s.circulation.jvp == "elevated"


def _spo2_below(threshold: float):
    return lambda s: s.breathing.spo2 < threshold


def _crackles(s) -> bool:
    return auscultation(s, "crackles")


def _young_child(s) -> bool:
    age = s.age_in_years
    return s.patient_type == "child" and age is not None and age < PE_CHILD_AGE_YEARS


def _adult_over(years: float):
    def predicate(s) -> bool:
        age = s.age_in_years
        return s.patient_type == "adult" and age is not None and age > years
    return predicate


# ── Pulmonary embolism ────────────────────────────────────────────────────────

score_pulmonary_embolism = PatternScorer(
    id="pulmonary_embolism",
    diagnosis="Pulmonary Embolism",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("distress",
                    lambda s: state_is("severe_respiratory_distress")(s) or _spo2_below(PE_SPO2)(s),
                    0.3, "Respiratory distress/hypoxia", missing="respiratory_distress"),
        FeatureRule("tachycardia", lambda s: s.circulation.heart_rate > 100, 0.2, "Tachycardia"),
        FirstOf("age", (
            FeatureRule("young_child", _young_child, -0.2),
            FeatureRule("adult", patient_is("adult", "pregnant_postpartum"), 0.1),
        )),
        FeatureRule("pregnancy", patient_is("pregnant_postpartum"), 0.1, "Pregnancy (risk factor)"),
    ),
    always_missing=("chest_pain", "leg_pain_swelling", "risk_factors"),
    next_questions=(
        "Chest pain (sharp, worse with breathing)?",
        "Unilateral leg pain or swelling (calf pain)?",
        "Recent surgery or immobilization?",
        "Oral contraceptives or hormone therapy?",
        "Recent long travel (plane, car)?",
    ),
)


# ── Cardiac tamponade ─────────────────────────────────────────────────────────

score_cardiac_tamponade = PatternScorer(
    id="cardiac_tamponade",
    diagnosis="Cardiac Tamponade",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("jvp", _jvp_elevated, 0.4, "Elevated JVP", missing="jvp_assessment"),
        FeatureRule("hypotension", hypotensive_or_shocked, 0.3, "Hypotension/shock"),
        FirstOf("trauma", (
            FeatureRule("penetrating", lambda s: trauma_mechanism(s) == "penetrating", 0.3,
                        "Penetrating chest trauma"),
            FeatureRule("other_trauma", lambda s: trauma_mechanism(s) is not None, 0.1,
                        "Trauma ({mechanism})"),
        )),
        FeatureRule("clear_lungs", lambda s: not _crackles(s), 0.1, "Clear lung fields"),
        FeatureRule("tachycardia", lambda s: s.circulation.heart_rate > 120, 0.05, "Tachycardia"),
    ),
    next_questions=(
        "Muffled/distant heart sounds?",
        "Pulsus paradoxus (BP drops >10 mmHg on inspiration)?",
        "Recent chest trauma or cardiac procedure?",
        "History of pericarditis or malignancy?",
    ),
)


# ── Myocardial infarction ─────────────────────────────────────────────────────

_mi_scorer = PatternScorer(
    id="myocardial_infarction",
    diagnosis="Acute Myocardial Infarction (STEMI/NSTEMI)",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("age", _adult_over(MI_AGE_YEARS), 0.2, "Age >40 years"),
        FeatureRule("shock", state_is("shock"), 0.3, "Shock (possible cardiogenic)"),
        FeatureRule("jvp", _jvp_elevated, 0.2, "Elevated JVP (heart failure)"),
        FeatureRule("pulmonary_edema", _crackles, 0.2, "Pulmonary edema"),
    ),
    always_missing=("chest_pain",),
    next_questions=(
        "Chest pain (crushing, radiating to arm/jaw)?",
        "Shortness of breath?",
        "Nausea/vomiting?",
        "Diaphoresis (sweating)?",
        "Risk factors (diabetes, hypertension, smoking, family history)?",
    ),
)


def score_myocardial_infarction(survey) -> Differential:
    """Acute MI; children get a fixed low prior instead of the adult pattern."""
    if survey.patient_type == "child":
        return Differential(
            id=_mi_scorer.id,
            diagnosis="Acute Myocardial Infarction",
            probability=MI_PEDIATRIC_PROBABILITY,
            category=DifferentialCategory.CRITICAL,
            evidence=("Rare in pediatric population",),
        )
    return _mi_scorer(survey)


# ── Heart failure ─────────────────────────────────────────────────────────────

score_heart_failure = PatternScorer(
    id="heart_failure",
    diagnosis="Acute Decompensated Heart Failure",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("crackles", _crackles, 0.3, "Pulmonary crackles (pulmonary edema)"),
        FeatureRule("hypoxia", _spo2_below(HYPOXIA_SPO2), 0.2, "Hypoxia (SpO2 {spo2}%)"),
        FeatureRule("effort", lambda s: s.breathing.effort == "increased", 0.15,
                    "Increased work of breathing"),
        FeatureRule("jvp", _jvp_elevated, 0.3, "Elevated JVP (volume overload)"),
        FeatureRule("tachycardia", is_tachycardic, 0.15, "Tachycardia"),
        FeatureRule("edema",
                    lambda s: skin_finding(s, "edema") or heart_failure_sign(s, "peripheral_edema"),
                    0.2, "Peripheral edema"),
    ),
    next_questions=(
        "Orthopnea (difficulty breathing when lying flat)?",
        "Paroxysmal nocturnal dyspnea (waking up short of breath)?",
        "History of heart disease or cardiomyopathy?",
        "High fever?",
    ),
)


# ── Arrhythmias ───────────────────────────────────────────────────────────────

score_svt = PatternScorer(
    id="svt",
    diagnosis="Supraventricular Tachycardia (SVT)",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("rate", lambda s: s.circulation.heart_rate > SVT_RATE_BPM, 0.4,
                    "Severe tachycardia (HR {heart_rate})"),
        FeatureRule("hypotension", systolic_below(90), 0.2, "Hypotension"),
        FeatureRule("tachypnea", is_tachypneic, 0.1, "Tachypnea"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.15, "Altered mental status"),
    ),
    next_questions=(
        "Sudden onset of palpitations?",
        "Regular rhythm (narrow complex on ECG)?",
        "Chest pain or discomfort?",
        "Irregular rhythm?",
        "Wide complex on ECG?",
    ),
)

score_ventricular_tachycardia = PatternScorer(
    id="ventricular_tachycardia",
    diagnosis="Ventricular Tachycardia (VT)",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("rate", lambda s: s.circulation.heart_rate > VT_RATE_BPM, 0.3,
                    "Tachycardia (HR {heart_rate})"),
        FeatureRule("hypotension", systolic_below(80), 0.3, "Severe hypotension"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.2, "Altered mental status"),
        FeatureRule("hypoxia", _spo2_below(HYPOXIA_SPO2), 0.15, "Hypoxia"),
    ),
    next_questions=(
        "Wide complex tachycardia on ECG?",
        "Chest pain?",
        "History of heart disease or structural abnormality?",
        "Narrow complex on ECG?",
    ),
)


# ── Myocarditis ───────────────────────────────────────────────────────────────

score_myocarditis = PatternScorer(
    id="myocarditis",
    diagnosis="Myocarditis (Viral/Inflammatory)",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("tachycardia", is_tachycardic, 0.2, "Tachycardia"),
        FeatureRule("hypotension", systolic_below(90), 0.2, "Hypotension"),
        FeatureRule("hypoxia", _spo2_below(HYPOXIA_SPO2), 0.15, "Hypoxia"),
        FeatureRule("crackles", _crackles, 0.2, "Pulmonary crackles"),
        FeatureRule("fever", lambda s: s.exposure.temperature > 38, 0.15, "Fever or recent fever"),
    ),
    next_questions=(
        "Recent viral illness (flu-like symptoms)?",
        "Chest pain?",
        "Severe fatigue or exercise intolerance?",
    ),
)

