"""
Clinical Reasoning Layer — Base Types

Defines the data contracts produced by every pattern scorer and consumed by
the recommender, the overlap detector and the API layer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

# Probabilities are heuristic accumulated weights, never certainty.
PROBABILITY_CEILING = 0.99
PROBABILITY_FLOOR = 0.0


class DifferentialCategory(str, Enum):
    """
    Severity class of a candidate diagnosis.

    IMMEDIATE_THREAT – death within minutes without action
    CRITICAL         – organ-threatening, act within the hour
    URGENT           – needs treatment but can wait for confirmation
    NON_URGENT       – listed for completeness
    """
    IMMEDIATE_THREAT = "immediate_threat"
    CRITICAL         = "critical"
    URGENT           = "urgent"
    NON_URGENT       = "non_urgent"


def clamp_probability(value: float) -> float:
    """Clamp to [0, 0.99] and round away float noise from weight sums."""
    return round(min(max(value, PROBABILITY_FLOOR), PROBABILITY_CEILING), 4)


@dataclass(frozen=True)
class Differential:
    """
    One candidate diagnosis.

    Produced fresh on every scorer call and never mutated; any adjustment
    (e.g. age modifiers) returns a new instance via ``dataclasses.replace``.
    """
    # ── Core identity ─────────────────────────────────────────────────────
    id: str                                   # stable key, e.g. "dka"
    diagnosis: str                            # display name
    probability: float
    category: DifferentialCategory

    # ── Evidence ──────────────────────────────────────────────────────────
    evidence: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()             # unobserved data keys
    next_questions: Tuple[str, ...] = ()

    # ── Serialisation ─────────────────────────────────────────────────────
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "diagnosis": self.diagnosis,
            "probability": self.probability,
            "category": self.category.value,
            "evidence": list(self.evidence),
            "missing": list(self.missing),
            "next_questions": list(self.next_questions),
        }


@dataclass(frozen=True)
class ClinicalQuestion:
    """A clarifying question surfaced to the clinician."""
    id: str
    text: str
    question_type: str                        # "confirmatory" | "exclusionary"
    differential_id: str
    impact: float = 0.0                       # probability of the source differential

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "type": self.question_type,
            "differential_id": self.differential_id,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class ShockCandidate:
    """Output of one shock-subtype scorer before adaptation to a Differential."""
    category: str                             # e.g. "hypovolemic"
    probability: float
    fluid_recommendation: str                 # "bolus" | "cautious" | "avoid"
    evidence: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()
    immediate_actions: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "probability": self.probability,
            "fluid_recommendation": self.fluid_recommendation,
            "evidence": list(self.evidence),
            "missing": list(self.missing),
            "immediate_actions": list(self.immediate_actions),
        }
