"""
Clinical Reasoning Layer

Pattern scorers, shock sub-classification and age modifiers that turn a
primary survey into ranked differentials.
"""
from .base import (
    ClinicalQuestion,
    Differential,
    DifferentialCategory,
    ShockCandidate,
    PROBABILITY_CEILING,
)
from .vitals import AgeGroup, classify_age_group, age_group_for
from .age_modifiers import AgeModifier, AgeModifierLookup, adjust, lookup
from .shock import classify, to_differential
from .engine import DifferentialGenerator, INCLUSION_THRESHOLD, generate
from .questions import build_questions

__all__ = [
    "ClinicalQuestion",
    "Differential",
    "DifferentialCategory",
    "ShockCandidate",
    "PROBABILITY_CEILING",
    "AgeGroup",
    "classify_age_group",
    "age_group_for",
    "AgeModifier",
    "AgeModifierLookup",
    "adjust",
    "lookup",
    "classify",
    "to_differential",
    "DifferentialGenerator",
    "INCLUSION_THRESHOLD",
    "generate",
    "build_questions",
]
