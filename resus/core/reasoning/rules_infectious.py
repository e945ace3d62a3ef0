"""
Infectious Pattern Scorers

Consumes:
  exposure.temperature, exposure.skin_findings (petechiae, purpura),
  circulation.perfusion, circulation.heart_rate, circulation.history.poor_feeding,
  breathing.rate, breathing.effort, disability.avpu, disability.seizure,
  physiologic_state

Scorers:
  septic_shock          — fever/hypothermia + shock + altered mental status
  neonatal_sepsis       — neonate-only; temperature instability + poor feeding
  bacterial_meningitis  — fever + altered mental status + petechiae/purpura
"""
from __future__ import annotations

from .base import DifferentialCategory
from .features import (
    FeatureRule,
    PatternScorer,
    abnormal_temperature,
    altered_mental_status,
    always,
    history,
    seizure_observed,
    shock_state,
    skin_finding,
    state_is,
)

# ── Thresholds ────────────────────────────────────────────────────────────────
FEVER_C = 38.0
SEPSIS_TACHYCARDIA_BPM = 140
SEPSIS_TACHYPNEA_RPM = 40
NEONATE_TACHYPNEA_RPM = 60


# ── Septic shock ──────────────────────────────────────────────────────────────

score_septic_shock = PatternScorer(
    id="septic_shock",
    diagnosis="Septic Shock",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("temperature", abnormal_temperature, 0.3,
                    "Temperature {temperature}°C", missing="fever"),
        FeatureRule("shock", shock_state, 0.3, "Shock/poor perfusion"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.2,
                    "Altered mental status ({avpu})"),
        FeatureRule("tachycardia", lambda s: s.circulation.heart_rate > SEPSIS_TACHYCARDIA_BPM, 0.1,
                    "Tachycardia"),
        FeatureRule("tachypnea", lambda s: s.breathing.rate > SEPSIS_TACHYPNEA_RPM, 0.1, "Tachypnea"),
    ),
    next_questions=(
        "Source of infection (pneumonia, UTI, meningitis)?",
        "Recent illness or surgery?",
        "Immunocompromised?",
        "Rash or petechiae?",
    ),
)


# ── Neonatal sepsis ───────────────────────────────────────────────────────────
# Registered for neonates only; the engine never calls it for other patient types.

score_neonatal_sepsis = PatternScorer(
    id="neonatal_sepsis",
    diagnosis="Neonatal Sepsis",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("neonate", always, 0.2, "Neonate (0-28 days)"),
        FeatureRule("temperature", abnormal_temperature, 0.3,
                    "Temperature {temperature}°C", missing="fever"),
        FeatureRule("poor_feeding", lambda s: history(s, "poor_feeding"), 0.2,
                    "Poor feeding", missing="feeding_history"),
        FeatureRule("lethargy", altered_mental_status, 0.2, "Lethargy"),
        FeatureRule("respiratory_distress",
                    lambda s: s.breathing.effort == "increased" or s.breathing.rate > NEONATE_TACHYPNEA_RPM,
                    0.1, "Respiratory distress"),
    ),
    next_questions=(
        "Maternal risk factors (prolonged rupture of membranes, chorioamnionitis)?",
        "Jaundice present?",
        "Seizures or abnormal movements?",
        "Umbilical stump infection?",
    ),
)


# ── Bacterial meningitis ──────────────────────────────────────────────────────

score_bacterial_meningitis = PatternScorer(
    id="bacterial_meningitis",
    diagnosis="Bacterial Meningitis",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("fever", lambda s: s.exposure.temperature > FEVER_C, 0.3,
                    "Fever ({temperature}°C)", missing="fever"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.3,
                    "Altered mental status ({avpu})"),
        FeatureRule("petechiae",
                    lambda s: skin_finding(s, "petechiae") or skin_finding(s, "purpura"),
                    0.3, "Petechiae/purpura (meningococcemia)"),
        FeatureRule("shock", state_is("shock"), 0.2, "Shock"),
        FeatureRule("seizure", seizure_observed, 0.1, "Seizure"),
    ),
    always_missing=("neck_stiffness",),
    next_questions=(
        "Neck stiffness/pain with neck flexion?",
        "Severe headache?",
        "Photophobia (light sensitivity)?",
        "Recent upper respiratory infection?",
        "Immunization status (Hib, pneumococcal, meningococcal)?",
    ),
)

