"""Pydantic request and response models."""
from .survey import PrimarySurveyData, parse_survey
from .assessment import (
    AssessmentResponse,
    ClinicalQuestionResponse,
    DangerousOverlapResponse,
    DiagnosesResponse,
    DiagnosisInfo,
    DifferentialResponse,
    DifferentialsResponse,
    HealthResponse,
    InterventionResponse,
    OverlapCatalogueResponse,
    RequiredTestResponse,
)

__all__ = [
    "PrimarySurveyData",
    "parse_survey",
    "AssessmentResponse",
    "ClinicalQuestionResponse",
    "DangerousOverlapResponse",
    "DiagnosesResponse",
    "DiagnosisInfo",
    "DifferentialResponse",
    "DifferentialsResponse",
    "HealthResponse",
    "InterventionResponse",
    "OverlapCatalogueResponse",
    "RequiredTestResponse",
]
