"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ClinicalReasoningError,
    NoDifferentialError,
    UnknownDiagnosisError,
    SurveyValidationError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ClinicalReasoningError",
    "NoDifferentialError",
    "UnknownDiagnosisError",
    "SurveyValidationError",
]
