"""
Differential Generator

Central dispatcher.  Runs every registered pattern scorer against a primary
survey, adds shock subtypes from the shock sub-classifier, applies age
modifiers and returns the ranked differential list.

Usage:
    from resus.core.reasoning import DifferentialGenerator

    generator = DifferentialGenerator()
    differentials = generator.generate(survey)
    for d in differentials:
        print(d.id, d.probability, d.evidence)

Adding a new diagnosis:
    1. Add a scorer to the matching  resus/core/reasoning/rules_<group>.py
    2. Register it in _SCORERS below (and _PATIENT_TYPE_GATES if restricted).
    3. Author a bundle in resus/core/interventions/bundles.py if one exists.
"""
from __future__ import annotations

from typing import Callable, Dict, FrozenSet, List, Optional, TYPE_CHECKING

from resus.utils import UnknownDiagnosisError, get_logger
from .age_modifiers import DEFAULT_AGE_MODIFIERS, AgeModifierLookup
from .base import Differential, ShockCandidate
from .shock import classify, to_differential
from .vitals import age_group_for
from . import (
    rules_cardiovascular as cardio,
    rules_infectious as infectious,
    rules_metabolic as metabolic,
    rules_neurological as neuro,
    rules_obstetric as obstetric,
    rules_respiratory as respiratory,
    rules_trauma_toxicology as trauma,
)

if TYPE_CHECKING:
    from resus.models.survey import PrimarySurveyData

logger = get_logger(__name__)

Scorer = Callable[["PrimarySurveyData"], Differential]
ShockClassifier = Callable[["PrimarySurveyData"], List[ShockCandidate]]

# Keep a differential only above this probability
INCLUSION_THRESHOLD = 0.3

# ── Registry: diagnosis id → scorer (invocation order) ───────────────────────
_SCORERS: Dict[str, Scorer] = {
    # Metabolic
    "dka":                     metabolic.score_dka,
    "hyperkalemia":            metabolic.score_hyperkalemia,
    "hypoglycemia":            metabolic.score_hypoglycemia,
    # Infectious
    "septic_shock":            infectious.score_septic_shock,
    "neonatal_sepsis":         infectious.score_neonatal_sepsis,
    "bacterial_meningitis":    infectious.score_bacterial_meningitis,
    # Obstetric
    "eclampsia":               obstetric.score_eclampsia,
    "postpartum_hemorrhage":   obstetric.score_postpartum_hemorrhage,
    "maternal_cardiac_arrest": obstetric.score_maternal_cardiac_arrest,
    # Neurological
    "status_epilepticus":      neuro.score_status_epilepticus,
    "stroke":                  neuro.score_stroke,
    "encephalitis":            neuro.score_encephalitis,
    "increased_icp":           neuro.score_increased_icp,
    # Respiratory / airway
    "anaphylaxis":             respiratory.score_anaphylaxis,
    "status_asthmaticus":      respiratory.score_status_asthmaticus,
    "foreign_body_aspiration": respiratory.score_foreign_body_aspiration,
    "tension_pneumothorax":    respiratory.score_tension_pneumothorax,
    "pneumonia":               respiratory.score_pneumonia,
    "bronchiolitis":           respiratory.score_bronchiolitis,
    "croup":                   respiratory.score_croup,
    "epiglottitis":            respiratory.score_epiglottitis,
    "ards":                    respiratory.score_ards,
    # Cardiovascular
    "pulmonary_embolism":      cardio.score_pulmonary_embolism,
    "cardiac_tamponade":       cardio.score_cardiac_tamponade,
    "myocardial_infarction":   cardio.score_myocardial_infarction,
    "heart_failure":           cardio.score_heart_failure,
    "svt":                     cardio.score_svt,
    "ventricular_tachycardia": cardio.score_ventricular_tachycardia,
    "myocarditis":             cardio.score_myocarditis,
    # Trauma / toxicology
    "opioid_overdose":         trauma.score_opioid_overdose,
    "severe_burns":            trauma.score_severe_burns,
}

# Scorers restricted to certain patient types; absent ids run for everyone
_PATIENT_TYPE_GATES: Dict[str, FrozenSet[str]] = {
    "eclampsia":               frozenset({"pregnant_postpartum"}),
    "postpartum_hemorrhage":   frozenset({"pregnant_postpartum"}),
    "maternal_cardiac_arrest": frozenset({"pregnant_postpartum"}),
    "neonatal_sepsis":         frozenset({"neonate"}),
}


def admits(diagnosis_id: str, patient_type: str) -> bool:
    """True when the scorer for ``diagnosis_id`` applies to ``patient_type``."""
    allowed = _PATIENT_TYPE_GATES.get(diagnosis_id)
    return allowed is None or patient_type in allowed


class DifferentialGenerator:
    """
    Transforms a PrimarySurveyData into ranked Differentials.

    Stateless — safe to call from multiple threads / concurrent requests.
    """

    def __init__(
        self,
        shock_classifier: Optional[ShockClassifier] = classify,
        age_modifiers: AgeModifierLookup = DEFAULT_AGE_MODIFIERS,
    ):
        self._shock_classifier = shock_classifier
        self._age_modifiers = age_modifiers

    def generate(self, survey: "PrimarySurveyData") -> List[Differential]:
        """
        Score every applicable diagnosis against the survey.

        Returns:
            Differentials with probability > 0.3, most probable first.  Ties
            keep scorer invocation order.  Returns an empty list when nothing
            qualifies; deciding whether that is an error is left to the caller.
        """
        kept: List[Differential] = []

        for diagnosis_id, scorer in _SCORERS.items():
            if not admits(diagnosis_id, survey.patient_type):
                logger.debug(
                    f"DifferentialGenerator: {diagnosis_id} gated out for {survey.patient_type}"
                )
                continue
            differential = scorer(survey)
            if differential.probability > INCLUSION_THRESHOLD:
                kept.append(differential)
            elif differential.probability == 0 and differential.missing:
                logger.debug(
                    f"DifferentialGenerator: {diagnosis_id} gate unmet "
                    f"(missing {', '.join(differential.missing)})"
                )

        if self._shock_classifier is not None:
            for candidate in self._shock_classifier(survey):
                if candidate.probability > INCLUSION_THRESHOLD:
                    kept.append(to_differential(candidate))

        age_group = age_group_for(survey)
        adjusted = [self._age_modifiers.adjust(d, age_group) for d in kept]
        ranked = [d for d in adjusted if d.probability > INCLUSION_THRESHOLD]

        # list.sort is stable: equal probabilities keep invocation order
        ranked.sort(key=lambda d: d.probability, reverse=True)

        if ranked:
            logger.info(
                f"DifferentialGenerator [{survey.patient_type}/{age_group.value}]: "
                f"{len(ranked)} differential(s): "
                + ", ".join(f"{d.id}={d.probability:.2f}" for d in ranked)
            )
        else:
            logger.info(
                f"DifferentialGenerator [{survey.patient_type}/{age_group.value}]: "
                f"no differential above {INCLUSION_THRESHOLD}"
            )
        return ranked

    def score(self, diagnosis_id: str, survey: "PrimarySurveyData") -> Differential:
        """
        Run a single registered scorer without filtering or age adjustment.
        Useful for unit-testing individual scorers.
        """
        scorer = _SCORERS.get(diagnosis_id)
        if scorer is None:
            raise UnknownDiagnosisError(diagnosis_id, registry="scorers")
        return scorer(survey)

    @staticmethod
    def registered_diagnoses() -> List[str]:
        """Return the ids of every registered scorer in invocation order."""
        return list(_SCORERS.keys())

    @staticmethod
    def patient_type_gates() -> Dict[str, List[str]]:
        return {k: sorted(v) for k, v in _PATIENT_TYPE_GATES.items()}

    @staticmethod
    def summarise(differentials: List[Differential]) -> Dict:
        """
        Build a compact summary dict suitable for JSON API responses.

        Example output:
        {
            "total": 2,
            "top": "dka",
            "immediate_threat_count": 1,
            "differentials": [{...}, {...}]
        }
        """
        immediate = sum(1 for d in differentials if d.category.value == "immediate_threat")
        return {
            "total": len(differentials),
            "top": differentials[0].id if differentials else None,
            "immediate_threat_count": immediate,
            "differentials": [d.to_dict() for d in differentials],
        }


_default_generator = DifferentialGenerator()


def generate(survey: "PrimarySurveyData") -> List[Differential]:
    """Rank differentials with the default shock classifier and age modifiers."""
    return _default_generator.generate(survey)
