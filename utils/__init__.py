from utils.validation import (
    PATTERNS,
    ValidationRule,
    FieldValidationResult,
    validate_field,
    validate_form,
)

__all__ = [
    "PATTERNS",
    "ValidationRule",
    "FieldValidationResult",
    "validate_field",
    "validate_form",
]
