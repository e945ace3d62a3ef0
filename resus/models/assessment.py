"""
API response models.

Mirrors the dataclasses' ``to_dict()`` output so responses are validated
and documented in the OpenAPI schema.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .survey import PrimarySurveyData


class DifferentialResponse(BaseModel):
    id: str
    diagnosis: str
    probability: float = Field(..., ge=0, le=0.99)
    category: Literal["immediate_threat", "critical", "urgent", "non_urgent"]
    evidence: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    next_questions: List[str] = Field(default_factory=list)


class ClinicalQuestionResponse(BaseModel):
    id: str
    text: str
    type: Literal["confirmatory", "exclusionary"]
    differential_id: str
    impact: float


class RequiredTestResponse(BaseModel):
    name: str
    threshold: Optional[str] = None
    priority: Literal["stat", "urgent", "routine"]


class DosingResponse(BaseModel):
    calculation: str
    route: str
    max_dose: Optional[float] = None
    min_dose: Optional[float] = None


class InterventionResponse(BaseModel):
    id: str
    name: str
    category: Literal["immediate", "urgent", "confirmatory"]
    indication: str
    contraindications: List[str] = Field(default_factory=list)
    required_tests: List[RequiredTestResponse] = Field(default_factory=list)
    risk_if_wrong: Literal["none", "low", "moderate", "high", "critical"]
    benefit_if_right: Literal["low", "moderate", "high", "life_saving"]
    time_window: Literal["seconds", "minutes", "hours", "days"]
    dosing: Optional[DosingResponse] = None
    monitoring: List[str] = Field(default_factory=list)


class DangerousOverlapResponse(BaseModel):
    conditions: List[str]
    name: str
    priority: Literal["critical", "high", "moderate"]
    interactions: List[str]
    integrated_protocol: str


class AssessmentResponse(BaseModel):
    """Full analysis of one primary survey."""
    survey_data: PrimarySurveyData
    differentials: List[DifferentialResponse]
    top_differential: DifferentialResponse
    smart_questions: List[ClinicalQuestionResponse] = Field(default_factory=list)
    immediate_interventions: List[InterventionResponse] = Field(default_factory=list)
    urgent_interventions: List[InterventionResponse] = Field(default_factory=list)
    confirmatory_interventions: List[InterventionResponse] = Field(default_factory=list)
    required_tests: List[RequiredTestResponse] = Field(default_factory=list)
    bundled: bool = True
    overlapping_conditions: List[DifferentialResponse] = Field(default_factory=list)
    dangerous_overlaps: List[DangerousOverlapResponse] = Field(default_factory=list)
    systems_involved: List[str] = Field(default_factory=list)
    system_interaction_warnings: List[str] = Field(default_factory=list)
    priority_sequence: List[str] = Field(default_factory=list)
    conflict_resolutions: List[str] = Field(default_factory=list)
    protocol_recommendation: Optional[str] = None


class DifferentialsResponse(BaseModel):
    total: int
    top: Optional[str] = None
    immediate_threat_count: int
    differentials: List[DifferentialResponse] = Field(default_factory=list)


class DiagnosisInfo(BaseModel):
    id: str
    bundled: bool
    systems: List[str] = Field(default_factory=list)
    patient_types: Optional[List[str]] = Field(
        default=None, description="Patient types the scorer runs for; null means all"
    )


class DiagnosesResponse(BaseModel):
    diagnoses: List[DiagnosisInfo]


class OverlapCatalogueResponse(BaseModel):
    threshold: float
    overlaps: List[DangerousOverlapResponse]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
