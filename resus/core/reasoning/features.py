"""
Declarative feature rules for pattern scorers.

A scorer is a table of ``FeatureRule`` rows (predicate, weight, evidence
template, missing key) plus an optional gate.  ``PatternScorer`` evaluates the
table against a survey and renders the evidence strings in a separate step, so
the clinical table can be tested without caring about message wording.

Scoring discipline:
  - probability starts at 0
  - a matching rule adds its weight and contributes its evidence line
  - a non-matching rule with a ``missing`` key records that key (never
    subtracts)
  - ``FirstOf`` groups are mutually exclusive alternatives (if / elif / else)
  - a gated scorer whose gate is unmet returns exactly 0 with only the gate's
    missing key
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union, TYPE_CHECKING

from .base import Differential, DifferentialCategory, clamp_probability

if TYPE_CHECKING:
    from resus.models.survey import PrimarySurveyData

Predicate = Callable[["PrimarySurveyData"], bool]


# ── Rule types ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FeatureRule:
    """One independent clinical feature and its contribution."""
    name: str
    predicate: Predicate
    weight: float
    evidence: Optional[str] = None     # str.format template over survey_facts()
    missing: Optional[str] = None      # recorded when the feature is absent

    def matches(self, survey: "PrimarySurveyData") -> bool:
        return bool(self.predicate(survey))


@dataclass(frozen=True)
class FirstOf:
    """Mutually exclusive alternatives; only the first match contributes."""
    name: str
    alternatives: Tuple[FeatureRule, ...]
    missing: Optional[str] = None

    def first_match(self, survey: "PrimarySurveyData") -> Optional[FeatureRule]:
        for rule in self.alternatives:
            if rule.matches(survey):
                return rule
        return None


Feature = Union[FeatureRule, FirstOf]


def evaluate(features: Tuple[Feature, ...], survey: "PrimarySurveyData") -> Tuple[List[FeatureRule], List[str]]:
    """Return (matched rules in table order, missing keys in table order)."""
    matched: List[FeatureRule] = []
    missing: List[str] = []
    for feature in features:
        if isinstance(feature, FirstOf):
            hit = feature.first_match(survey)
            if hit is not None:
                matched.append(hit)
            elif feature.missing:
                missing.append(feature.missing)
        elif feature.matches(survey):
            matched.append(feature)
        elif feature.missing:
            missing.append(feature.missing)
    return matched, missing


# ── Presentation ──────────────────────────────────────────────────────────────

def _num(value) -> str:
    return f"{value:g}" if isinstance(value, (int, float)) else str(value)


def survey_facts(survey: "PrimarySurveyData") -> Dict[str, str]:
    """Flat, pre-formatted values available to evidence templates."""
    bp = survey.circulation.blood_pressure
    seizure = survey.disability.seizure
    pregnancy = survey.exposure.pregnancy_related
    trauma = survey.exposure.trauma_history
    toxin = survey.exposure.toxin_exposure
    return {
        "glucose": _num(survey.disability.blood_glucose),
        "temperature": _num(survey.exposure.temperature),
        "avpu": survey.disability.avpu,
        "posturing": survey.disability.posturing,
        "systolic": _num(bp.systolic) if bp else "?",
        "diastolic": _num(bp.diastolic) if bp else "?",
        "heart_rate": _num(survey.circulation.heart_rate),
        "rate": _num(survey.breathing.rate),
        "spo2": _num(survey.breathing.spo2),
        "gestational_age": _num(pregnancy.gestational_age_weeks) if pregnancy and pregnancy.gestational_age_weeks is not None else "?",
        "seizure_duration": _num(seizure.duration_minutes) if seizure and seizure.duration_minutes is not None else "?",
        "mechanism": (trauma.mechanism if trauma and trauma.mechanism else "unknown"),
        "substance": (toxin.substance if toxin and toxin.substance else "unknown"),
    }


def render_evidence(matched: List[FeatureRule], survey: "PrimarySurveyData") -> Tuple[str, ...]:
    facts = survey_facts(survey)
    return tuple(rule.evidence.format_map(facts) for rule in matched if rule.evidence)


# ── Scorer ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PatternScorer:
    """
    A pure scorer built from a feature table.

    Calling the scorer with a survey returns one Differential.  The
    probability is the clamped sum of matched weights.
    """
    id: str
    diagnosis: str
    category: DifferentialCategory
    features: Tuple[Feature, ...]
    next_questions: Tuple[str, ...] = ()
    gate: Optional[FirstOf] = None
    always_missing: Tuple[str, ...] = ()   # data the survey never captures

    def __call__(self, survey: "PrimarySurveyData") -> Differential:
        matched: List[FeatureRule] = []
        if self.gate is not None:
            gate_hit = self.gate.first_match(survey)
            if gate_hit is None:
                return Differential(
                    id=self.id,
                    diagnosis=self.diagnosis,
                    probability=0.0,
                    category=self.category,
                    missing=(self.gate.missing,) if self.gate.missing else (),
                )
            matched.append(gate_hit)

        rest, missing = evaluate(self.features, survey)
        matched.extend(rest)

        return Differential(
            id=self.id,
            diagnosis=self.diagnosis,
            probability=clamp_probability(sum(rule.weight for rule in matched)),
            category=self.category,
            evidence=render_evidence(matched, survey),
            missing=tuple(missing) + self.always_missing,
            next_questions=self.next_questions,
        )


# ── Shared predicates ─────────────────────────────────────────────────────────
# Absent optional sections read as "not observed", never as an error.

def altered_mental_status(s: "PrimarySurveyData") -> bool:
    return s.disability.avpu != "alert"


def shock_state(s: "PrimarySurveyData") -> bool:
    return s.physiologic_state == "shock" or s.circulation.perfusion.capillary_refill != "normal"


def poor_perfusion(s: "PrimarySurveyData") -> bool:
    return shock_state(s) or s.circulation.perfusion.skin_temperature == "cold"


def warm_shock(s: "PrimarySurveyData") -> bool:
    perfusion = s.circulation.perfusion
    return perfusion.skin_temperature == "warm" and perfusion.capillary_refill != "normal"


def abnormal_temperature(s: "PrimarySurveyData") -> bool:
    return s.exposure.temperature > 38 or s.exposure.temperature < 36


def auscultation(s: "PrimarySurveyData", finding: str) -> bool:
    ausc = s.breathing.auscultation
    return ausc is not None and getattr(ausc, finding)


def stridor(s: "PrimarySurveyData") -> bool:
    return s.airway.observations.stridor or auscultation(s, "stridor")


def seizure_observed(s: "PrimarySurveyData") -> bool:
    seizure = s.disability.seizure
    return seizure is not None and (seizure.active or seizure.just_stopped)


def systolic(s: "PrimarySurveyData") -> Optional[float]:
    bp = s.circulation.blood_pressure
    return bp.systolic if bp is not None else None


def systolic_above(threshold: float) -> Predicate:
    return lambda s: systolic(s) is not None and systolic(s) > threshold


def systolic_below(threshold: float) -> Predicate:
    return lambda s: systolic(s) is not None and systolic(s) < threshold


def hypotensive_or_shocked(s: "PrimarySurveyData") -> bool:
    return s.physiologic_state == "shock" or systolic_below(90)(s)


def history(s: "PrimarySurveyData", flag: str) -> bool:
    hx = s.circulation.history
    return hx is not None and getattr(hx, flag)


def heart_failure_sign(s: "PrimarySurveyData", flag: str) -> bool:
    signs = s.circulation.signs_of_heart_failure
    return signs is not None and getattr(signs, flag)


def skin_finding(s: "PrimarySurveyData", flag: str) -> bool:
    findings = s.exposure.skin_findings
    return findings is not None and getattr(findings, flag)


def visible_injury(s: "PrimarySurveyData", flag: str) -> bool:
    injuries = s.exposure.visible_injuries
    return injuries is not None and getattr(injuries, flag)


def trauma_mechanism(s: "PrimarySurveyData") -> Optional[str]:
    trauma = s.exposure.trauma_history
    return trauma.mechanism if trauma is not None else None


def pregnancy_field(s: "PrimarySurveyData", name: str):
    pregnancy = s.exposure.pregnancy_related
    return getattr(pregnancy, name) if pregnancy is not None else None


def state_is(*states: str) -> Predicate:
    return lambda s: s.physiologic_state in states


def patient_is(*types: str) -> Predicate:
    return lambda s: s.patient_type in types


def always(_s: "PrimarySurveyData") -> bool:
    return True
