"""
Trauma and Toxicology Pattern Scorers

Consumes:
  exposure (toxin_exposure, visible_injuries, trauma_history), breathing
  (rate, spo2), disability (pupils, avpu), airway, physiologic_state

Scorers:
  opioid_overdose  — toxin exposure + respiratory depression + miosis
  severe_burns     — gated on visible burns
"""
from __future__ import annotations

from .base import DifferentialCategory
from .features import (
    FeatureRule,
    FirstOf,
    PatternScorer,
    altered_mental_status,
    state_is,
    stridor,
    trauma_mechanism,
    visible_injury,
)

# ── Thresholds ────────────────────────────────────────────────────────────────
RESPIRATORY_DEPRESSION_RPM = 10
MIOSIS_MM = 2.0
HYPOXIA_SPO2 = 90


def _toxin_reported(s) -> bool:
    toxin = s.exposure.toxin_exposure
    return toxin is not None and bool(toxin.substance)


def _respiratory_depression(s) -> bool:
    return s.breathing.rate < RESPIRATORY_DEPRESSION_RPM or s.physiologic_state == "respiratory_arrest"


def _pinpoint_pupils(s) -> bool:
    p = s.disability.pupils
    return p.size_left < MIOSIS_MM and p.size_right < MIOSIS_MM


def _airway_compromise(s) -> bool:
    return s.airway.status == "obstructed" or stridor(s)


# ── Opioid overdose ───────────────────────────────────────────────────────────

score_opioid_overdose = PatternScorer(
    id="opioid_overdose",
    diagnosis="Opioid Overdose",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("toxin", _toxin_reported, 0.4, "Toxin exposure: {substance}",
                    missing="toxin_exposure_history"),
        FeatureRule("respiratory_depression", _respiratory_depression, 0.4,
                    "Severe respiratory depression"),
        FeatureRule("miosis", _pinpoint_pupils, 0.3, "Pinpoint pupils (miosis)"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.2,
                    "Altered mental status ({avpu})"),
        FeatureRule("hypoxia", lambda s: s.breathing.spo2 < HYPOXIA_SPO2, 0.1, "Hypoxia"),
    ),
    next_questions=(
        "Known opioid use (prescribed or recreational)?",
        "Found with drug paraphernalia?",
        "Witnessed ingestion/injection?",
        "Time since exposure?",
    ),
)


# ── Severe burns ──────────────────────────────────────────────────────────────

score_severe_burns = PatternScorer(
    id="severe_burns",
    diagnosis="Severe Burns",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    gate=FirstOf("burns", (
        FeatureRule("burns", lambda s: visible_injury(s, "burns"), 0.5, "Visible burns"),
    ), missing="visible_burns"),
    features=(
        FeatureRule("mechanism", lambda s: trauma_mechanism(s) == "burn", 0.3,
                    "Burn mechanism confirmed"),
        FeatureRule("shock", state_is("shock"), 0.2, "Shock (fluid losses)"),
        FeatureRule("airway", _airway_compromise, 0.2, "Airway compromise (inhalation injury)"),
        FeatureRule("hypoxia", lambda s: s.breathing.spo2 < HYPOXIA_SPO2, 0.1,
                    "Hypoxia (smoke inhalation)"),
    ),
    next_questions=(
        "Burn mechanism (flame, scald, chemical, electrical)?",
        "Enclosed space fire (smoke inhalation)?",
        "Estimated body surface area burned (%)?",
        "Depth of burns (superficial, partial thickness, full thickness)?",
        "Circumferential burns (chest, limbs)?",
    ),
)

