"""
Shock Sub-Classifier

Fluid management hinges on the shock type: hypovolemic and distributive
shock need boluses, cardiogenic shock is worsened by them, obstructive shock
needs the obstruction removed.  Each subtype is a feature table scored with the
same accumulation discipline as the diagnosis scorers.

Usage:
    from resus.core.reasoning.shock import classify, to_differential

    for candidate in classify(survey):
        print(candidate.category, candidate.probability, candidate.fluid_recommendation)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, TYPE_CHECKING

from .base import Differential, DifferentialCategory, ShockCandidate, clamp_probability
from .features import (
    Feature,
    FeatureRule,
    abnormal_temperature,
    altered_mental_status,
    auscultation,
    evaluate,
    heart_failure_sign,
    history,
    render_evidence,
    skin_finding,
    state_is,
    stridor,
    systolic_below,
    trauma_mechanism,
    visible_injury,
    warm_shock,
)

if TYPE_CHECKING:
    from resus.models.survey import PrimarySurveyData

# ── Display names ─────────────────────────────────────────────────────────────
SHOCK_NAMES = {
    "hypovolemic":               "Hypovolemic Shock",
    "cardiogenic":               "Cardiogenic Shock",
    "obstructive":               "Obstructive Shock",
    "distributive_septic":       "Septic Shock",
    "distributive_anaphylactic": "Anaphylactic Shock",
    "neurogenic":                "Neurogenic Shock",
}


def in_shock(survey: "PrimarySurveyData") -> bool:
    """Shock physiology: reported shock, delayed refill, or skin not warm."""
    perfusion = survey.circulation.perfusion
    return (
        survey.physiologic_state == "shock"
        or perfusion.capillary_refill != "normal"
        or perfusion.skin_temperature != "warm"
    )


@dataclass(frozen=True)
class ShockPattern:
    category: str
    fluid_recommendation: str                 # "bolus" | "cautious" | "avoid"
    features: Tuple[Feature, ...]
    immediate_actions: Tuple[str, ...]

    def __call__(self, survey: "PrimarySurveyData") -> ShockCandidate:
        matched, missing = evaluate(self.features, survey)
        return ShockCandidate(
            category=self.category,
            probability=clamp_probability(sum(rule.weight for rule in matched)),
            fluid_recommendation=self.fluid_recommendation,
            evidence=render_evidence(matched, survey),
            missing=tuple(missing),
            immediate_actions=self.immediate_actions,
        )


def _crackles_or_edema(s) -> bool:
    return auscultation(s, "crackles") or heart_failure_sign(s, "pulmonary_edema")


# ── Subtype tables ────────────────────────────────────────────────────────────

HYPOVOLEMIC = ShockPattern(
    category="hypovolemic",
    fluid_recommendation="bolus",
    features=(
        FeatureRule("bleeding", lambda s: history(s, "bleeding"), 0.4, "Active bleeding"),
        FeatureRule("fluid_losses", lambda s: history(s, "diarrhea") or history(s, "vomiting"), 0.3,
                    "Fluid losses (diarrhea/vomiting)"),
        FeatureRule("burns", lambda s: visible_injury(s, "burns"), 0.3, "Burns (fluid losses)"),
        FeatureRule("flat_jvp", lambda s: s.circulation.jvp in ("not_visible", "normal"), 0.2,
                    "JVP not elevated"),
        FeatureRule("clear_lungs", lambda s: not _crackles_or_edema(s), 0.1, "Clear lung fields"),
        FeatureRule("capillary_refill", lambda s: s.circulation.perfusion.capillary_refill != "normal",
                    0.1, "Delayed capillary refill"),
        FeatureRule("tachycardia", lambda s: s.circulation.heart_rate > 120, 0.05, "Tachycardia"),
    ),
    immediate_actions=(
        "20 mL/kg bolus of crystalloid (NS or Ringer's lactate)",
        "Repeat boluses as needed (up to 60 mL/kg)",
        "Control bleeding if hemorrhagic",
        "Monitor for fluid overload (lung sounds, work of breathing)",
    ),
)

CARDIOGENIC = ShockPattern(
    category="cardiogenic",
    fluid_recommendation="avoid",
    features=(
        FeatureRule("jvp", lambda s: s.circulation.jvp == "elevated", 0.4, "Elevated JVP"),
        FeatureRule("pulmonary_edema", _crackles_or_edema, 0.3, "Pulmonary edema (crackles)"),
        FeatureRule("hepatomegaly", lambda s: heart_failure_sign(s, "hepatomegaly"), 0.2, "Hepatomegaly"),
        FeatureRule("peripheral_edema", lambda s: heart_failure_sign(s, "peripheral_edema"), 0.1,
                    "Peripheral edema"),
        FeatureRule("murmur", lambda s: s.circulation.murmur, 0.1, "Heart murmur"),
        FeatureRule("age",
                    lambda s: s.patient_type == "adult" and (s.age_in_years or 0) > 40,
                    0.05),
    ),
    immediate_actions=(
        "DO NOT GIVE FLUID BOLUSES (will worsen pulmonary edema)",
        "Furosemide 1 mg/kg IV (diuretic)",
        "Consider inotropes (dobutamine, milrinone)",
        "Oxygen to maintain SpO2 >94%",
        "ECG (rule out MI, arrhythmia)",
        "Urgent cardiology consult",
    ),
)

OBSTRUCTIVE = ShockPattern(
    category="obstructive",
    fluid_recommendation="cautious",
    features=(
        FeatureRule("jvp", lambda s: s.circulation.jvp == "elevated", 0.3, "Elevated JVP"),
        FeatureRule("clear_lungs", lambda s: not auscultation(s, "crackles"), 0.1, "Clear lung fields"),
        FeatureRule("air_entry",
                    lambda s: auscultation(s, "decreased_air_entry") or auscultation(s, "silent_chest"),
                    0.3, "Decreased air entry (tension pneumothorax?)"),
        FeatureRule("trauma", lambda s: trauma_mechanism(s) is not None, 0.2, "Trauma ({mechanism})"),
        FeatureRule("hypoxia", lambda s: s.breathing.spo2 < 90, 0.1, "Severe hypoxia"),
    ),
    immediate_actions=(
        "Identify and remove obstruction:",
        "  - Tension pneumothorax → Needle decompression (2nd intercostal space, midclavicular line)",
        "  - Cardiac tamponade → Pericardiocentesis",
        "  - Massive PE → Thrombolysis (if confirmed)",
        "Cautious fluid bolus (10 mL/kg) while preparing definitive treatment",
        "Urgent imaging (CXR, ultrasound, CTPA)",
    ),
)

DISTRIBUTIVE_SEPTIC = ShockPattern(
    category="distributive_septic",
    fluid_recommendation="bolus",
    features=(
        FeatureRule("temperature", abnormal_temperature, 0.3, "Temperature {temperature}°C"),
        FeatureRule("warm_shock", warm_shock, 0.2, "Warm shock (early septic)"),
        FeatureRule("altered_mental_status", altered_mental_status, 0.2, "Altered mental status ({avpu})"),
        FeatureRule("tachycardia", lambda s: s.circulation.heart_rate > 140, 0.1, "Tachycardia"),
        FeatureRule("tachypnea", lambda s: s.breathing.rate > 40, 0.1, "Tachypnea"),
        FeatureRule("petechiae",
                    lambda s: skin_finding(s, "petechiae") or skin_finding(s, "purpura"),
                    0.2, "Petechiae/purpura (meningococcemia?)"),
    ),
    immediate_actions=(
        "20 mL/kg bolus of crystalloid (repeat up to 60 mL/kg in first hour)",
        "Broad-spectrum antibiotics within 1 hour (ceftriaxone + vancomycin)",
        "Blood cultures BEFORE antibiotics (but don't delay antibiotics)",
        "Source control (drain abscess, remove infected catheter)",
        "Consider vasopressors if fluid-refractory (norepinephrine)",
    ),
)

DISTRIBUTIVE_ANAPHYLACTIC = ShockPattern(
    category="distributive_anaphylactic",
    fluid_recommendation="bolus",
    features=(
        FeatureRule("distress",
                    lambda s: state_is("severe_respiratory_distress")(s) or s.breathing.effort == "increased",
                    0.3, "Respiratory distress"),
        FeatureRule("wheeze", lambda s: auscultation(s, "wheezing"), 0.2, "Wheezing (bronchospasm)"),
        FeatureRule("stridor", stridor, 0.2, "Stridor (upper airway edema)"),
        FeatureRule("urticaria",
                    lambda s: skin_finding(s, "flushing") or visible_injury(s, "rash"),
                    0.2, "Urticaria/flushing"),
    ),
    immediate_actions=(
        "Epinephrine 0.01 mg/kg IM (max 0.5 mg) - IMMEDIATE, DO NOT DELAY",
        "Repeat epinephrine every 5-15 minutes if no improvement",
        "20 mL/kg bolus of crystalloid",
        "H1 blocker: Diphenhydramine 1 mg/kg IV",
        "H2 blocker: Ranitidine 1 mg/kg IV",
        "Corticosteroids: Methylprednisolone 1-2 mg/kg IV",
        "Bronchodilators if wheezing: Salbutamol nebulizer",
    ),
)

NEUROGENIC = ShockPattern(
    category="neurogenic",
    fluid_recommendation="cautious",
    features=(
        FeatureRule("trauma", lambda s: trauma_mechanism(s) is not None, 0.3, "Trauma ({mechanism})"),
        FeatureRule("brady_hypotension",
                    lambda s: s.circulation.heart_rate < 60 and systolic_below(90)(s),
                    0.4, "Bradycardia + hypotension (neurogenic pattern)"),
        FeatureRule("warm_peripheries", warm_shock, 0.2, "Warm peripheries despite shock"),
    ),
    immediate_actions=(
        "Spinal immobilization (C-collar, backboard)",
        "Cautious fluid bolus (10 mL/kg) - avoid overload",
        "Vasopressors if fluid-refractory (norepinephrine)",
        "Atropine if severe bradycardia (<40 bpm)",
        "Urgent neurosurgery consult",
        "MRI spine to identify level of injury",
    ),
)

SHOCK_PATTERNS = (
    HYPOVOLEMIC,
    CARDIOGENIC,
    OBSTRUCTIVE,
    DISTRIBUTIVE_SEPTIC,
    DISTRIBUTIVE_ANAPHYLACTIC,
    NEUROGENIC,
)


# ── Public interface ──────────────────────────────────────────────────────────

def classify(survey: "PrimarySurveyData") -> List[ShockCandidate]:
    """
    Score every shock subtype.

    Returns an empty list when the survey shows no shock physiology; otherwise
    one candidate per subtype, most probable first.
    """
    if not in_shock(survey):
        return []
    candidates = [pattern(survey) for pattern in SHOCK_PATTERNS]
    candidates.sort(key=lambda c: c.probability, reverse=True)
    return candidates


def to_differential(candidate: ShockCandidate) -> Differential:
    return Differential(
        id=f"shock_{candidate.category}",
        diagnosis=SHOCK_NAMES[candidate.category],
        probability=candidate.probability,
        category=DifferentialCategory.IMMEDIATE_THREAT,
        evidence=candidate.evidence,
        missing=candidate.missing,
    )
