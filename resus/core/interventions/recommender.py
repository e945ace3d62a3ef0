"""
Intervention Recommender

Turns the leading differential into a tiered treatment plan: the registered
bundle for its diagnosis id plus, when the patient's age group calls for it,
one extra immediate entry listing the age-specific modifications.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, TYPE_CHECKING

from resus.core.reasoning.age_modifiers import DEFAULT_AGE_MODIFIERS, AgeModifierLookup
from resus.core.reasoning.base import Differential
from resus.core.reasoning.vitals import AgeGroup, age_group_for
from resus.utils import get_logger
from .base import Benefit, Dosing, Intervention, RequiredTest, Risk, Tier, TimeWindow
from .bundles import get_bundle_builder

if TYPE_CHECKING:
    from resus.models.survey import PrimarySurveyData

logger = get_logger(__name__)


@dataclass
class Recommendation:
    """Tiered plan for one diagnosis.  ``bundled`` is False when none is authored."""
    diagnosis_id: str
    immediate: List[Intervention] = field(default_factory=list)
    urgent: List[Intervention] = field(default_factory=list)
    confirmatory: List[Intervention] = field(default_factory=list)
    required_tests: List[RequiredTest] = field(default_factory=list)
    bundled: bool = True

    def to_dict(self) -> dict:
        return {
            "diagnosis_id": self.diagnosis_id,
            "immediate": [i.to_dict() for i in self.immediate],
            "urgent": [i.to_dict() for i in self.urgent],
            "confirmatory": [i.to_dict() for i in self.confirmatory],
            "required_tests": [t.to_dict() for t in self.required_tests],
            "bundled": self.bundled,
        }


def age_specific_entry(diagnosis_id: str, age_group: AgeGroup, modifications: List[str]) -> Intervention:
    return Intervention(
        id=f"{diagnosis_id}_age_specific",
        name="Age-Specific Modifications",
        category=Tier.IMMEDIATE,
        indication=f"{age_group.value} population",
        risk_if_wrong=Risk.LOW,
        benefit_if_right=Benefit.HIGH,
        time_window=TimeWindow.MINUTES,
        dosing=Dosing("See modifications below", "Various"),
        monitoring=tuple(modifications),
    )


def recommend(
    top: Differential,
    survey: "PrimarySurveyData",
    age_modifiers: AgeModifierLookup = DEFAULT_AGE_MODIFIERS,
) -> Recommendation:
    """
    Build the treatment plan for ``top``.

    Unknown diagnosis ids are not an error: the plan comes back empty with
    ``bundled=False`` and a warning is logged.
    """
    builder = get_bundle_builder(top.id)
    if builder is None:
        logger.warning(f"Recommender: no bundle authored for '{top.id}', returning unbundled plan")
        return Recommendation(diagnosis_id=top.id, bundled=False)

    plan = builder(survey)
    immediate = list(plan.immediate)

    age_group = age_group_for(survey)
    modifications = age_modifiers.lookup(top.id, age_group)
    if modifications:
        immediate.append(age_specific_entry(top.id, age_group, modifications))

    recommendation = Recommendation(
        diagnosis_id=top.id,
        immediate=immediate,
        urgent=list(plan.urgent),
        confirmatory=list(plan.confirmatory),
        required_tests=list(plan.required_tests),
    )
    logger.info(
        f"Recommender [{top.id}/{age_group.value}]: "
        f"{len(recommendation.immediate)} immediate, {len(recommendation.urgent)} urgent, "
        f"{len(recommendation.confirmatory)} confirmatory, {len(recommendation.required_tests)} test(s)"
    )
    return recommendation
