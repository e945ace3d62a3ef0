"""
Respiratory and Airway Pattern Scorers

Consumes:
  airway.status, airway.observations.stridor, breathing (rate, effort, spo2,
  auscultation), circulation (heart_rate, blood_pressure, jvp),
  exposure (temperature, trauma_history), disability.avpu, age

Scorers:
  anaphylaxis              — respiratory distress + shock + stridor
  status_asthmaticus       — wheeze + distress + silent chest
  foreign_body_aspiration  — obstructed airway + stridor in a young child
  tension_pneumothorax     — absent air entry + obstructive shock
  pneumonia, bronchiolitis, croup, epiglottitis, ards
"""
from __future__ import annotations

from .base import DifferentialCategory
from .features import (
    FeatureRule,
    FirstOf,
    PatternScorer,
    altered_mental_status,
    auscultation,
    hypotensive_or_shocked,
    shock_state,
    state_is,
    stridor,
    trauma_mechanism,
)
from .vitals import is_tachycardic, is_tachypneic

# ── Thresholds ────────────────────────────────────────────────────────────────
HYPOXIA_SPO2 = 92
SEVERE_HYPOXIA_SPO2 = 90
CRITICAL_HYPOXIA_SPO2 = 85
ARDS_SPO2 = 88
ARDS_TACHYPNEA_MARGIN = 10
FBA_HIGH_RISK_AGE_YEARS = 5
BRONCHIOLITIS_MAX_AGE_YEARS = 2
CROUP_AGE_YEARS = (0.5, 3)
PNEUMONIA_FEVER_C = 38.5
EPIGLOTTITIS_FEVER_C = 39.0


def _spo2_below(threshold: float):
    return lambda s: s.breathing.spo2 < threshold


def _increased_effort(s) -> bool:
    return s.breathing.effort == "increased"


def _respiratory_distress(s) -> bool:
    return (
        s.physiologic_state == "severe_respiratory_distress"
        or _increased_effort(s)
        or auscultation(s, "wheezing")
    )


def _obstructed(s) -> bool:
    return s.airway.status == "obstructed"


def _young_child(s) -> bool:
    age = s.age_in_years
    return s.patient_type == "child" and age is not None and age < FBA_HIGH_RISK_AGE_YEARS


def _age_between(low: float, high: float):
    def predicate(s) -> bool:
        age = s.age_in_years
        return age is not None and low <= age <= high
    return predicate


def _age_below(limit: float):
    def predicate(s) -> bool:
        age = s.age_in_years
        return age is not None and age < limit
    return predicate


def _fever_above(threshold: float):
    return lambda s: s.exposure.temperature > threshold


# ── Anaphylaxis ───────────────────────────────────────────────────────────────

score_anaphylaxis = PatternScorer(
    id="anaphylaxis",
    diagnosis="Anaphylaxis",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("respiratory_distress", _respiratory_distress, 0.3,
                    "Respiratory distress", missing="respiratory_distress"),
        FeatureRule("shock", shock_state, 0.3, "Shock/poor perfusion"),
        FeatureRule("stridor", stridor, 0.2, "Stridor (upper airway swelling)"),
    ),
    always_missing=("skin_findings", "allergen_exposure"),
    next_questions=(
        "Swelling of face, lips, or tongue?",
        "Rash, hives, or itching?",
        "Recent exposure to allergen (food, medication, bee sting)?",
        "Known allergies?",
    ),
)


# ── Status asthmaticus ────────────────────────────────────────────────────────

score_status_asthmaticus = PatternScorer(
    id="status_asthmaticus",
    diagnosis="Asthma / Status Asthmaticus",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("wheeze", lambda s: auscultation(s, "wheezing"), 0.4, "Wheezing",
                    missing="wheezing"),
        FeatureRule("respiratory_distress",
                    lambda s: state_is("severe_respiratory_distress")(s) or _increased_effort(s),
                    0.3, "Respiratory distress"),
        FeatureRule("silent_chest", lambda s: auscultation(s, "silent_chest"), 0.2,
                    "Silent chest (severe obstruction)"),
        FeatureRule("hypoxia", _spo2_below(HYPOXIA_SPO2), 0.1, "Hypoxia"),
    ),
    always_missing=("asthma_history", "trigger"),
    next_questions=(
        "Known asthma history?",
        "Recent trigger (infection, allergen, exercise)?",
        "Medications used (bronchodilators, steroids)?",
        "Previous ICU admissions for asthma?",
    ),
)


# ── Foreign body aspiration ───────────────────────────────────────────────────

score_foreign_body_aspiration = PatternScorer(
    id="foreign_body_aspiration",
    diagnosis="Foreign Body Aspiration (Choking)",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("obstructed", _obstructed, 0.5, "Airway obstructed"),
        FeatureRule("stridor", stridor, 0.3, "Stridor (partial airway obstruction)"),
        FeatureRule("distress", state_is("severe_respiratory_distress"), 0.2,
                    "Severe respiratory distress"),
        FeatureRule("age", _young_child, 0.1, "High-risk age group (<5 years)"),
        FeatureRule("hypoxia", _spo2_below(SEVERE_HYPOXIA_SPO2), 0.1, "Severe hypoxia"),
    ),
    next_questions=(
        "Witnessed choking episode?",
        "Eating or playing with small objects before onset?",
        "Sudden onset of symptoms?",
        "Able to speak/cry?",
    ),
)


# ── Tension pneumothorax ──────────────────────────────────────────────────────

score_tension_pneumothorax = PatternScorer(
    id="tension_pneumothorax",
    diagnosis="Tension Pneumothorax",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("air_entry",
                    lambda s: auscultation(s, "decreased_air_entry") or auscultation(s, "silent_chest"),
                    0.4, "Decreased/absent air entry"),
        FeatureRule("hypotension", hypotensive_or_shocked, 0.3, "Hypotension/shock"),
        FeatureRule("jvp", lambda s: s.circulation.jvp == "elevated", 0.2, "Elevated JVP"),
        FeatureRule("trauma", lambda s: trauma_mechanism(s) is not None, 0.2, "Trauma ({mechanism})"),
        FeatureRule("hypoxia", _spo2_below(CRITICAL_HYPOXIA_SPO2), 0.1, "Severe hypoxia"),
        FeatureRule("tachycardia", lambda s: s.circulation.heart_rate > 120, 0.05, "Tachycardia"),
    ),
    next_questions=(
        "Tracheal deviation?",
        "Recent chest trauma or procedure?",
        "On mechanical ventilation?",
        "Subcutaneous emphysema?",
    ),
)


# ── Severe pneumonia ──────────────────────────────────────────────────────────

score_pneumonia = PatternScorer(
    id="pneumonia",
    diagnosis="Severe Pneumonia",
    category=DifferentialCategory.URGENT,
    features=(
        FeatureRule("tachypnea", is_tachypneic, 0.25, "Tachypnea"),
        FeatureRule("hypoxia", _spo2_below(HYPOXIA_SPO2), 0.25, "Hypoxia (SpO2 {spo2}%)"),
        FeatureRule("crackles", lambda s: auscultation(s, "crackles"), 0.3, "Crackles on auscultation"),
        FeatureRule("fever", _fever_above(PNEUMONIA_FEVER_C), 0.2, "Fever ({temperature}°C)"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.1, "Altered mental status"),
        FeatureRule("effort", _increased_effort, 0.15, "Increased work of breathing"),
    ),
    next_questions=(
        "Productive cough?",
        "Chest pain or pleuritic pain?",
        "Symptoms >3 days?",
        "Recent trauma?",
        "Witnessed aspiration event?",
    ),
)


# ── Bronchiolitis ─────────────────────────────────────────────────────────────

score_bronchiolitis = PatternScorer(
    id="bronchiolitis",
    diagnosis="Severe Bronchiolitis (RSV)",
    category=DifferentialCategory.URGENT,
    features=(
        FirstOf("age", (
            FeatureRule("infant", _age_below(BRONCHIOLITIS_MAX_AGE_YEARS), 0.2, "Age <2 years"),
            FeatureRule("older", lambda s: s.age_in_years is not None, -0.3),
        )),
        FeatureRule("tachypnea", is_tachypneic, 0.2, "Tachypnea"),
        FeatureRule("wheeze", lambda s: auscultation(s, "wheezing"), 0.3, "Wheezing"),
        FeatureRule("crackles", lambda s: auscultation(s, "crackles"), 0.2, "Crackles"),
        FeatureRule("effort", _increased_effort, 0.2,
                    "Increased work of breathing (nasal flaring, retractions)"),
        FeatureRule("hypoxia", _spo2_below(HYPOXIA_SPO2), 0.2, "Hypoxia (SpO2 {spo2}%)"),
    ),
    next_questions=(
        "Runny nose (rhinorrhea)?",
        "Difficulty feeding?",
        "Winter/early spring season?",
        "Age >2 years?",
        "Sudden onset (<1 hour)?",
    ),
)


# ── Croup ─────────────────────────────────────────────────────────────────────

score_croup = PatternScorer(
    id="croup",
    diagnosis="Severe Croup (Laryngotracheobronchitis)",
    category=DifferentialCategory.URGENT,
    features=(
        FeatureRule("age", _age_between(*CROUP_AGE_YEARS), 0.2, "Age 6 months - 3 years"),
        FeatureRule("stridor", stridor, 0.4, "Stridor (inspiratory)"),
        FeatureRule("effort", _increased_effort, 0.2, "Increased work of breathing"),
        FeatureRule("hypoxia", _spo2_below(HYPOXIA_SPO2), 0.2, "Hypoxia (SpO2 {spo2}%)"),
    ),
    next_questions=(
        "Barky/seal-like cough?",
        "Hoarse voice?",
        "Symptoms worse at night?",
        "Drooling or unable to swallow?",
        "Toxic appearance?",
    ),
)


# ── Epiglottitis ──────────────────────────────────────────────────────────────

score_epiglottitis = PatternScorer(
    id="epiglottitis",
    diagnosis="Epiglottitis (Airway Emergency)",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("obstructed", _obstructed, 0.4, "Airway obstruction"),
        FeatureRule("stridor", stridor, 0.3, "Stridor"),
        FeatureRule("hypoxia", _spo2_below(SEVERE_HYPOXIA_SPO2), 0.2, "Severe hypoxia (SpO2 {spo2}%)"),
        FeatureRule("fever", _fever_above(EPIGLOTTITIS_FEVER_C), 0.2, "High fever ({temperature}°C)"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.1, "Altered mental status"),
    ),
    next_questions=(
        "Drooling or unable to swallow?",
        "Tripod positioning (sitting forward, mouth open)?",
        "Toxic appearance?",
        "Muffled/hot potato voice?",
        "Barky cough?",
        "Gradual onset over days?",
    ),
)


# ── ARDS ──────────────────────────────────────────────────────────────────────

score_ards = PatternScorer(
    id="ards",
    diagnosis="ARDS (Acute Respiratory Distress Syndrome)",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("hypoxia", _spo2_below(ARDS_SPO2), 0.3, "Severe hypoxia (SpO2 {spo2}%)"),
        FeatureRule("tachypnea", lambda s: is_tachypneic(s, margin=ARDS_TACHYPNEA_MARGIN), 0.2,
                    "Severe tachypnea"),
        FeatureRule("crackles", lambda s: auscultation(s, "crackles"), 0.2, "Bilateral crackles"),
        FeatureRule("effort", _increased_effort, 0.2, "Severe respiratory distress"),
        FeatureRule("tachycardia", is_tachycardic, 0.1, "Tachycardia"),
    ),
    next_questions=(
        "Bilateral infiltrates on chest X-ray?",
        "Acute onset (<1 week)?",
        "Risk factor present (sepsis, pneumonia, aspiration, trauma)?",
        "Known heart failure?",
    ),
)

