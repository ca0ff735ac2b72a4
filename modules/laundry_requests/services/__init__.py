"""
Request Services Module

Contains specialized services for customer request submission:
- RequestValidationService: Field rules, selection check and sanitization
- RequestSubmissionService: Pricing and ordered writes of a submission
"""

from .request_validation_service import (
    RequestValidationService,
    ValidationResult,
    ValidationError,
    NO_SERVICES_FIELD,
    NO_SERVICES_MESSAGE,
    QUANTITY_LIMIT_MESSAGE,
)
from .request_submission_service import (
    RequestSubmissionService,
    SubmissionResult,
    SubmissionState,
    PartialSubmissionError,
    TOTAL_LIMIT_MESSAGE,
)

__all__ = [
    "RequestValidationService",
    "ValidationResult",
    "ValidationError",
    "NO_SERVICES_FIELD",
    "NO_SERVICES_MESSAGE",
    "QUANTITY_LIMIT_MESSAGE",
    "RequestSubmissionService",
    "SubmissionResult",
    "SubmissionState",
    "PartialSubmissionError",
    "TOTAL_LIMIT_MESSAGE",
]
