"""
Intervention Layer — Base Types

Data contracts produced by the bundle builders and consumed by the
prioritizer, the integrated protocol generator and the API response models.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Tier(str, Enum):
    """
    When an intervention should be delivered.

    IMMEDIATE    – start now, before any test result
    URGENT       – within the hour
    CONFIRMATORY – only once the named tests confirm the diagnosis
    """
    IMMEDIATE    = "immediate"
    URGENT       = "urgent"
    CONFIRMATORY = "confirmatory"


class Risk(str, Enum):
    """Harm done if the intervention is given and the diagnosis is wrong."""
    NONE     = "none"
    LOW      = "low"
    MODERATE = "moderate"
    HIGH     = "high"
    CRITICAL = "critical"


class Benefit(str, Enum):
    """Gain if the intervention is given and the diagnosis is right."""
    LOW         = "low"
    MODERATE    = "moderate"
    HIGH        = "high"
    LIFE_SAVING = "life_saving"


class TimeWindow(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS   = "hours"
    DAYS    = "days"


class TestPriority(str, Enum):
    STAT    = "stat"
    URGENT  = "urgent"
    ROUTINE = "routine"


@dataclass(frozen=True)
class RequiredTest:
    """A test that must be sent, optionally with the result that confirms."""
    name: str
    priority: TestPriority = TestPriority.STAT
    threshold: Optional[str] = None          # e.g. "pH <7.3"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "threshold": self.threshold,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class Dosing:
    calculation: str                         # human-readable, e.g. "10 mL/kg"
    route: str
    max_dose: Optional[float] = None
    min_dose: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "calculation": self.calculation,
            "route": self.route,
            "max_dose": self.max_dose,
            "min_dose": self.min_dose,
        }


@dataclass(frozen=True)
class Intervention:
    """
    One actionable step of a treatment bundle.

    Weight-scaled bundles render the computed dose into ``name`` at
    recommendation time, so two patients can receive differently named
    instances of the same intervention id.
    """
    # ── Core identity ─────────────────────────────────────────────────────
    id: str                                  # e.g. "dka_fluid_bolus"
    name: str
    category: Tier
    indication: str

    # ── Safety ────────────────────────────────────────────────────────────
    contraindications: Tuple[str, ...] = ()
    required_tests: Tuple[RequiredTest, ...] = ()
    risk_if_wrong: Risk = Risk.LOW
    benefit_if_right: Benefit = Benefit.HIGH
    time_window: TimeWindow = TimeWindow.MINUTES

    # ── Delivery ──────────────────────────────────────────────────────────
    dosing: Optional[Dosing] = None
    monitoring: Tuple[str, ...] = ()         # ordered steps

    # ── Serialisation ─────────────────────────────────────────────────────
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "indication": self.indication,
            "contraindications": list(self.contraindications),
            "required_tests": [t.to_dict() for t in self.required_tests],
            "risk_if_wrong": self.risk_if_wrong.value,
            "benefit_if_right": self.benefit_if_right.value,
            "time_window": self.time_window.value,
            "dosing": self.dosing.to_dict() if self.dosing else None,
            "monitoring": list(self.monitoring),
        }
