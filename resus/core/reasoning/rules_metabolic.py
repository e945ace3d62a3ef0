"""
Metabolic Pattern Scorers

Consumes:
  disability.blood_glucose (mmol/L), breathing.pattern, circulation.perfusion,
  circulation.history (polyuria, oliguria, vomiting), circulation.rhythm,
  airway.observations.vomiting, physiologic_state

Scorers:
  dka           — hyperglycemia + Kussmaul breathing + poor perfusion
  hypoglycemia  — low glucose + altered mental status
  hyperkalemia  — oliguria + rhythm disturbance + arrest
"""
from __future__ import annotations

from .base import DifferentialCategory
from .features import (
    FeatureRule,
    FirstOf,
    PatternScorer,
    altered_mental_status,
    history,
    poor_perfusion,
    seizure_observed,
    state_is,
)

# ── Thresholds ────────────────────────────────────────────────────────────────
HYPERGLYCEMIA_MMOL = 11.0
HYPOGLYCEMIA_MMOL = 3.0
LOW_NORMAL_GLUCOSE_MMOL = 4.0
DKA_PEAK_AGE_YEARS = 5


def _glucose_above(threshold: float):
    return lambda s: s.disability.blood_glucose is not None and s.disability.blood_glucose > threshold


def _glucose_below(threshold: float):
    return lambda s: s.disability.blood_glucose is not None and s.disability.blood_glucose < threshold


def _older_child(s) -> bool:
    age = s.age_in_years
    return s.patient_type == "child" and age is not None and age > DKA_PEAK_AGE_YEARS


# ── DKA ───────────────────────────────────────────────────────────────────────

score_dka = PatternScorer(
    id="dka",
    diagnosis="Diabetic Ketoacidosis (DKA)",
    category=DifferentialCategory.CRITICAL,
    features=(
        FeatureRule("hyperglycemia", _glucose_above(HYPERGLYCEMIA_MMOL), 0.4,
                    "Hyperglycemia ({glucose} mmol/L)", missing="blood_glucose"),
        FeatureRule("kussmaul", lambda s: s.breathing.pattern == "deep_kussmaul", 0.3,
                    "Kussmaul breathing (deep, rapid)", missing="kussmaul_breathing"),
        FeatureRule("poor_perfusion", poor_perfusion, 0.15, "Shock/poor perfusion"),
        FeatureRule("polyuria", lambda s: history(s, "polyuria"), 0.1,
                    "Polyuria (osmotic diuresis)", missing="polyuria_history"),
        FeatureRule("vomiting",
                    lambda s: s.airway.observations.vomiting or history(s, "vomiting"),
                    0.05, "Vomiting"),
        FeatureRule("older_child", _older_child, 0.05),
    ),
    next_questions=(
        "Fruity/sweet breath smell (ketones)?",
        "Abdominal pain?",
        "Known diabetes or new diagnosis?",
        "Recent illness or infection?",
    ),
)


# ── Hypoglycemia ──────────────────────────────────────────────────────────────

score_hypoglycemia = PatternScorer(
    id="hypoglycemia",
    diagnosis="Hypoglycemia",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FirstOf("glucose", (
            FeatureRule("hypoglycemia", _glucose_below(HYPOGLYCEMIA_MMOL), 0.9,
                        "Hypoglycemia ({glucose} mmol/L)"),
            FeatureRule("low_normal_glucose", _glucose_below(LOW_NORMAL_GLUCOSE_MMOL), 0.5,
                        "Low-normal glucose ({glucose} mmol/L)"),
        ), missing="blood_glucose"),
        FeatureRule("altered_mental_status",
                    lambda s: altered_mental_status(s) or s.physiologic_state == "unresponsive",
                    0.1, "Altered mental status"),
        FeatureRule("seizure", seizure_observed, 0.05, "Seizure (possible hypoglycemic cause)"),
    ),
    next_questions=(
        "Known diabetes?",
        "Missed meals or prolonged fasting?",
        "Recent insulin or oral hypoglycemic medication?",
        "Sweating, tremor, or palpitations?",
    ),
)


# ── Hyperkalemia ──────────────────────────────────────────────────────────────

score_hyperkalemia = PatternScorer(
    id="hyperkalemia",
    diagnosis="Hyperkalemia",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    features=(
        FeatureRule("arrest", state_is("cardiac_arrest"), 0.3, "Cardiac arrest (PEA)"),
        FeatureRule("oliguria", lambda s: history(s, "oliguria"), 0.3,
                    "Reduced urine output", missing="urine_output"),
        FeatureRule("rhythm", lambda s: s.circulation.rhythm in ("bradycardia", "irregular"), 0.2,
                    "Cardiac rhythm abnormality"),
    ),
    always_missing=("ecg_changes", "renal_history"),
    next_questions=(
        "ECG shows peaked T waves, wide QRS, or other changes?",
        "History of kidney disease or dialysis?",
        "Recent crush injury or rhabdomyolysis?",
        "Medications (ACE inhibitors, potassium supplements)?",
    ),
)

