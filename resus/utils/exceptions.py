"""
Custom Exception Hierarchy

Specific exception types for the failure modes of the reasoning pipeline,
each carrying a machine-readable code for API responses.
"""
from typing import Optional, Dict, Any, List


class ClinicalReasoningError(Exception):
    """Base exception for all clinical reasoning errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class NoDifferentialError(ClinicalReasoningError):
    """No candidate diagnosis cleared the inclusion threshold."""

    status_code = 422

    def __init__(
        self,
        message: str = "No differential diagnosis exceeded the inclusion threshold",
        threshold: float = 0.3,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="NO_DIFFERENTIAL",
            details={"threshold": threshold, **(details or {})}
        )
        self.threshold = threshold


class UnknownDiagnosisError(ClinicalReasoningError):
    """A strict lookup referenced a diagnosis id with no registered entry."""

    status_code = 404

    def __init__(
        self,
        diagnosis_id: str,
        registry: str = "bundles",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"Unknown diagnosis id '{diagnosis_id}' in {registry}",
            code="UNKNOWN_DIAGNOSIS",
            details={"diagnosis_id": diagnosis_id, "registry": registry, **(details or {})}
        )
        self.diagnosis_id = diagnosis_id


class SurveyValidationError(ClinicalReasoningError):
    """A raw survey payload failed schema validation."""

    status_code = 422

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"errors": errors or [], **(details or {})}
        )
        self.errors = errors or []
