"""
Assessment Service

Runs the full reasoning pipeline for one primary survey:

    generate → recommend(top) → detect overlaps → synthesize (2+ overlapping)
    → prioritize → smart questions

Every stage is pure over the immutable survey, so one service instance can
serve concurrent requests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from resus.core.interventions import Intervention, RequiredTest, recommend
from resus.core.multisystem import DangerousOverlap, SystemCategory, detect, prioritize, synthesize
from resus.core.reasoning import (
    INCLUSION_THRESHOLD,
    ClinicalQuestion,
    Differential,
    DifferentialGenerator,
    build_questions,
)
from resus.core.reasoning.age_modifiers import DEFAULT_AGE_MODIFIERS, AgeModifierLookup
from resus.models.survey import PrimarySurveyData
from resus.utils import NoDifferentialError, get_logger

logger = get_logger(__name__)


@dataclass
class AssessmentResult:
    """Everything the caller needs to act on one survey."""
    # ── Input / reasoning ─────────────────────────────────────────────────
    survey_data: PrimarySurveyData
    differentials: List[Differential]
    top_differential: Differential
    smart_questions: List[ClinicalQuestion] = field(default_factory=list)

    # ── Treatment plan ────────────────────────────────────────────────────
    immediate_interventions: List[Intervention] = field(default_factory=list)
    urgent_interventions: List[Intervention] = field(default_factory=list)
    confirmatory_interventions: List[Intervention] = field(default_factory=list)
    required_tests: List[RequiredTest] = field(default_factory=list)
    bundled: bool = True

    # ── Multi-system ──────────────────────────────────────────────────────
    overlapping_conditions: List[Differential] = field(default_factory=list)
    dangerous_overlaps: List[DangerousOverlap] = field(default_factory=list)
    systems_involved: List[SystemCategory] = field(default_factory=list)
    system_interaction_warnings: List[str] = field(default_factory=list)
    priority_sequence: List[str] = field(default_factory=list)
    conflict_resolutions: List[str] = field(default_factory=list)
    protocol_recommendation: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "survey_data": self.survey_data.model_dump(mode="json"),
            "differentials": [d.to_dict() for d in self.differentials],
            "top_differential": self.top_differential.to_dict(),
            "smart_questions": [q.to_dict() for q in self.smart_questions],
            "immediate_interventions": [i.to_dict() for i in self.immediate_interventions],
            "urgent_interventions": [i.to_dict() for i in self.urgent_interventions],
            "confirmatory_interventions": [i.to_dict() for i in self.confirmatory_interventions],
            "required_tests": [t.to_dict() for t in self.required_tests],
            "bundled": self.bundled,
            "overlapping_conditions": [d.to_dict() for d in self.overlapping_conditions],
            "dangerous_overlaps": [o.to_dict() for o in self.dangerous_overlaps],
            "systems_involved": [s.value for s in self.systems_involved],
            "system_interaction_warnings": list(self.system_interaction_warnings),
            "priority_sequence": list(self.priority_sequence),
            "conflict_resolutions": list(self.conflict_resolutions),
            "protocol_recommendation": self.protocol_recommendation,
        }


class AssessmentService:
    """
    Orchestrates differential generation, treatment selection and
    multi-system synthesis.

    Stateless — safe to call from multiple threads / concurrent requests.
    """

    def __init__(
        self,
        generator: Optional[DifferentialGenerator] = None,
        age_modifiers: AgeModifierLookup = DEFAULT_AGE_MODIFIERS,
    ):
        self._age_modifiers = age_modifiers
        self._generator = generator or DifferentialGenerator(age_modifiers=age_modifiers)

    @property
    def generator(self) -> DifferentialGenerator:
        return self._generator

    def analyze(self, survey: PrimarySurveyData) -> AssessmentResult:
        """
        Assess one survey.

        Raises:
            NoDifferentialError: no differential cleared the inclusion
                threshold.  Nothing partial is returned.
        """
        differentials = self._generator.generate(survey)
        if not differentials:
            logger.warning(
                f"AssessmentService [{survey.patient_type}]: no differential above {INCLUSION_THRESHOLD}"
            )
            raise NoDifferentialError(
                threshold=INCLUSION_THRESHOLD,
                details={
                    "patient_type": survey.patient_type,
                    "physiologic_state": survey.physiologic_state,
                },
            )

        top = differentials[0]
        recommendation = recommend(top, survey, age_modifiers=self._age_modifiers)
        report = detect(differentials)

        immediate = list(recommendation.immediate)
        warnings: List[str] = []
        priority_sequence: List[str] = []
        conflict_resolutions: List[str] = []

        if report.is_multi_system:
            protocol = synthesize(report.overlapping, report.dangerous_overlaps, survey)
            immediate = prioritize(protocol.interventions + immediate)
            warnings = protocol.warnings
            priority_sequence = protocol.priority_sequence
            conflict_resolutions = protocol.conflict_resolutions

        if report.dangerous_overlaps:
            protocol_recommendation: Optional[str] = report.dangerous_overlaps[0].integrated_protocol
        elif recommendation.bundled:
            protocol_recommendation = top.id
        else:
            protocol_recommendation = None

        logger.info(
            f"AssessmentService [{survey.patient_type}]: top={top.id} ({top.probability:.2f}), "
            f"{len(differentials)} differential(s), {len(report.overlapping)} overlapping, "
            f"protocol={protocol_recommendation}"
        )

        return AssessmentResult(
            survey_data=survey,
            differentials=differentials,
            top_differential=top,
            smart_questions=build_questions(differentials),
            immediate_interventions=immediate,
            urgent_interventions=recommendation.urgent,
            confirmatory_interventions=recommendation.confirmatory,
            required_tests=recommendation.required_tests,
            bundled=recommendation.bundled,
            overlapping_conditions=report.overlapping,
            dangerous_overlaps=report.dangerous_overlaps,
            systems_involved=report.systems_involved,
            system_interaction_warnings=warnings,
            priority_sequence=priority_sequence,
            conflict_resolutions=conflict_resolutions,
            protocol_recommendation=protocol_recommendation,
        )


_default_service = AssessmentService()


def analyze(survey: PrimarySurveyData) -> AssessmentResult:
    """Assess one survey with the default pipeline."""
    return _default_service.analyze(survey)
