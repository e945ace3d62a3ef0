"""
Obstetric Pattern Scorers (pregnant / postpartum patients only)

Consumes:
  disability.seizure, circulation.blood_pressure, circulation.perfusion,
  exposure.pregnancy_related (gestational_age_weeks, postpartum),
  physiologic_state

Scorers:
  eclampsia                — gated on seizure activity
  postpartum_hemorrhage    — gated on postpartum status
  maternal_cardiac_arrest  — gated on arrest in a pregnant/postpartum patient
"""
from __future__ import annotations

from .base import DifferentialCategory
from .features import (
    FeatureRule,
    FirstOf,
    PatternScorer,
    always,
    pregnancy_field,
    seizure_observed,
    shock_state,
    state_is,
    systolic_above,
)

# ── Thresholds ────────────────────────────────────────────────────────────────
ECLAMPSIA_SBP = 140
VIABLE_GESTATION_WEEKS = 20


def _gestation_over(weeks: float):
    def predicate(s) -> bool:
        ga = pregnancy_field(s, "gestational_age_weeks")
        return ga is not None and ga > weeks
    return predicate


# Shared by eclampsia and status epilepticus
SEIZURE_REPORTED = FeatureRule("seizure_reported", state_is("seizure"), 0.4, "Seizure reported")


# ── Eclampsia ─────────────────────────────────────────────────────────────────

score_eclampsia = PatternScorer(
    id="eclampsia",
    diagnosis="Eclampsia",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    gate=FirstOf("seizure", (
        FeatureRule("seizure_activity", seizure_observed, 0.4, "Seizure activity"),
        SEIZURE_REPORTED,
    ), missing="seizure"),
    features=(
        FeatureRule("hypertension", systolic_above(ECLAMPSIA_SBP), 0.3,
                    "Hypertension ({systolic}/{diastolic})", missing="blood_pressure"),
        FeatureRule("pregnancy", always, 0.2, "Pregnant or postpartum"),
        FeatureRule("gestation", _gestation_over(VIABLE_GESTATION_WEEKS), 0.1,
                    "Gestational age {gestational_age} weeks"),
    ),
    next_questions=(
        "Severe headache?",
        "Vision changes (blurred, spots)?",
        "Swelling (hands, face, feet)?",
        "Right upper quadrant pain?",
        "Known preeclampsia diagnosis?",
    ),
)


# ── Postpartum hemorrhage ─────────────────────────────────────────────────────

score_postpartum_hemorrhage = PatternScorer(
    id="postpartum_hemorrhage",
    diagnosis="Postpartum Hemorrhage",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    gate=FirstOf("postpartum", (
        FeatureRule("postpartum", lambda s: bool(pregnancy_field(s, "postpartum")), 0.4,
                    "Postpartum status"),
    ), missing="postpartum_status"),
    features=(
        FeatureRule("severe_bleeding", state_is("severe_bleeding"), 0.5,
                    "Severe bleeding reported", missing="bleeding_assessment"),
        FeatureRule("shock", shock_state, 0.1, "Shock/poor perfusion"),
    ),
    next_questions=(
        "How much blood loss (estimated)?",
        "Uterus firm or soft (boggy)?",
        "Placenta delivered completely?",
        "Perineal or vaginal lacerations?",
    ),
)


# ── Maternal cardiac arrest ───────────────────────────────────────────────────

score_maternal_cardiac_arrest = PatternScorer(
    id="maternal_cardiac_arrest",
    diagnosis="Maternal Cardiac Arrest",
    category=DifferentialCategory.IMMEDIATE_THREAT,
    gate=FirstOf("arrest", (
        FeatureRule("arrest", state_is("cardiac_arrest"), 0.6, "Cardiac arrest in pregnant/postpartum patient"),
    ), missing="cardiac_arrest"),
    features=(
        FeatureRule("gestation", _gestation_over(VIABLE_GESTATION_WEEKS), 0.2,
                    "Gestational age {gestational_age} weeks (aortocaval compression)"),
        FeatureRule("postpartum", lambda s: bool(pregnancy_field(s, "postpartum")), 0.1,
                    "Postpartum"),
        FeatureRule("shock", shock_state, 0.1, "Shock/poor perfusion preceding arrest"),
    ),
    next_questions=(
        "Time of collapse and CPR start?",
        "Fundal height at or above the umbilicus?",
        "Vaginal bleeding or suspected hemorrhage?",
        "Magnesium or anesthetic given before collapse?",
    ),
)

