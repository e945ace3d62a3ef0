"""Application services."""
from .assessment import AssessmentResult, AssessmentService, analyze

__all__ = ["AssessmentResult", "AssessmentService", "analyze"]
