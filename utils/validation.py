"""
Field Validation Rules

A small declarative rule engine shared by the request form and the
service catalog editor.

Usage:
    rule = ValidationRule(required=True, min_length=2, pattern=PATTERNS["name"])
    result = validate_field("customer_name", value, rule)
    if not result.is_valid:
        errors[field] = result.error
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Pattern


# Common validation patterns
PATTERNS: Dict[str, Pattern] = {
    "email": re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"),
    # (555) 123-4567, 555-123-4567, 555.123.4567, 5551234567, +1 555 123 4567
    "phone": re.compile(r"^(\+?1[-. ]?)?\(?([0-9]{3})\)?[-. ]?([0-9]{3})[-. ]?([0-9]{4})$"),
    "name": re.compile(r"^[a-zA-Z\s\-'.]+$"),
    # catalog display names: "Wash & Fold", "Shirts (Pressed)", "2-Day Express"
    "service_name": re.compile(r"^[a-zA-Z0-9\s\-'.&(),/+]+$"),
    "address": re.compile(r"^[a-zA-Z0-9\s\-.,#/]+$"),
}

# Common validation messages
MESSAGES = {
    "required": "This field is required",
    "email": "Please enter a valid email address",
    "phone": "Please enter a valid phone number",
    "pattern": "Please enter a valid format",
    "min_length": "Must be at least {} characters long",
    "max_length": "Must be no more than {} characters long",
    "min": "Must be at least {}",
    "max": "Must be no more than {}",
    "number": "Must be a number",
}


@dataclass(frozen=True)
class ValidationRule:
    """
    Constraints for a single field.

    `message` replaces every built-in message for the field. `custom`
    receives the raw value and returns an error message or None.
    """

    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Pattern] = None
    min: Optional[float] = None
    max: Optional[float] = None
    custom: Optional[Callable[[Any], Optional[str]]] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class FieldValidationResult:
    is_valid: bool
    error: Optional[str] = None


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def validate_field(
    field_name: str, value: Any, rule: ValidationRule
) -> FieldValidationResult:
    """
    Validate one value against one rule.

    Checks run in order: required, length, numeric range, pattern, custom.
    The first failing check decides the error.
    """

    def fail(default: str) -> FieldValidationResult:
        return FieldValidationResult(is_valid=False, error=rule.message or default)

    if is_blank(value):
        if rule.required:
            return fail(MESSAGES["required"])
        return FieldValidationResult(is_valid=True)

    text = str(value).strip()

    if rule.min_length is not None and len(text) < rule.min_length:
        return fail(MESSAGES["min_length"].format(rule.min_length))

    if rule.max_length is not None and len(text) > rule.max_length:
        return fail(MESSAGES["max_length"].format(rule.max_length))

    if rule.min is not None or rule.max is not None:
        number = _to_number(value)
        if number is None:
            return fail(MESSAGES["number"])
        if rule.min is not None and number < rule.min:
            return fail(MESSAGES["min"].format(rule.min))
        if rule.max is not None and number > rule.max:
            return fail(MESSAGES["max"].format(rule.max))

    if rule.pattern is not None and not rule.pattern.match(text):
        return fail(MESSAGES["pattern"])

    if rule.custom is not None:
        error = rule.custom(value)
        if error:
            return FieldValidationResult(is_valid=False, error=error)

    return FieldValidationResult(is_valid=True)


def validate_form(
    data: Dict[str, Any], rules: Dict[str, ValidationRule]
) -> Dict[str, str]:
    """Validate every field that has a rule; returns field -> message"""
    errors = {}
    for field_name, rule in rules.items():
        result = validate_field(field_name, data.get(field_name), rule)
        if not result.is_valid:
            errors[field_name] = result.error
    return errors
