"""
Request Validation Service

Validation and sanitization of customer pickup requests.

Validation Categories:
1. Field rules (required, length, charset, shape)
2. Pickup window (today up to one year ahead)
3. Selection (at least one service with quantity > 0, none above
   MAX_QUANTITY), checked only once every field rule passes

Validation is synchronous and never touches the store. Sanitization runs
after validation passes and before anything is persisted.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from modules.pricing import MAX_QUANTITY, PricingService
from utils.datetime import add_years, business_today, parse_date
from utils.validation import PATTERNS, ValidationRule, validate_field

from ..laundry_request_schema import RequestDraft, TimeSlot


NO_SERVICES_FIELD = "services"
NO_SERVICES_MESSAGE = "Please select at least one service"
QUANTITY_LIMIT_MESSAGE = f"Quantity cannot exceed {MAX_QUANTITY} per service"


@dataclass
class ValidationError:
    """Represents a single validation error"""

    field: str
    message: str
    code: str
    value: Any = None


@dataclass
class ValidationResult:
    """Result of validation operation"""

    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)

    def add_error(self, field: str, message: str, code: str, value: Any = None):
        self.errors.append(ValidationError(field, message, code, value))
        self.is_valid = False

    @property
    def error_map(self) -> Dict[str, str]:
        """field -> message, first error per field"""
        errors = {}
        for error in self.errors:
            errors.setdefault(error.field, error.message)
        return errors

    def to_dict(self) -> Dict:
        return {
            "is_valid": self.is_valid,
            "errors": self.error_map,
        }


def _pickup_date_check(today: date):
    def check(value: Any) -> Optional[str]:
        pickup_date = parse_date(value)
        if pickup_date is None:
            return "Please select a valid date"
        if pickup_date < today:
            return "Pickup date must be today or in the future"
        if pickup_date > add_years(today, 1):
            return "Pickup date cannot be more than 1 year in the future"
        return None

    return check


def _time_slot_check(value: Any) -> Optional[str]:
    slots = [slot.value for slot in TimeSlot]
    if str(value).strip().lower() not in slots:
        return f"Pickup time slot must be one of: {', '.join(slots)}"
    return None


class RequestValidationService:
    """
    Usage:
        validator = RequestValidationService()
        result = validator.validate_request(draft)
        if not result.is_valid:
            return result.error_map
        clean = validator.sanitize_request(draft)
    """

    def build_rules(self, today: date) -> Dict[str, ValidationRule]:
        return {
            "customer_name": ValidationRule(
                required=True,
                min_length=2,
                max_length=100,
                pattern=PATTERNS["name"],
                message="Please enter your full name",
            ),
            "customer_email": ValidationRule(
                required=True,
                max_length=150,
                pattern=PATTERNS["email"],
                message="Please enter a valid email address",
            ),
            "customer_phone": ValidationRule(
                required=True,
                pattern=PATTERNS["phone"],
                message="Please enter a valid phone number",
            ),
            "pickup_address": ValidationRule(
                required=True,
                min_length=10,
                max_length=200,
                pattern=PATTERNS["address"],
                message="Please enter a complete address",
            ),
            "pickup_date": ValidationRule(
                required=True,
                custom=_pickup_date_check(today),
            ),
            "pickup_time_slot": ValidationRule(
                required=True,
                custom=_time_slot_check,
            ),
            "special_instructions": ValidationRule(
                max_length=500,
                message="Special instructions cannot exceed 500 characters",
            ),
        }

    # ============================================
    # MAIN VALIDATION METHODS
    # ============================================

    def validate_request(
        self, draft: RequestDraft, today: Optional[date] = None
    ) -> ValidationResult:
        """
        Validate a complete draft.

        Field errors are reported together. The "no services selected"
        error is only reported when every field is valid.
        """
        today = today or business_today()
        result = ValidationResult(is_valid=True)

        values = draft.contact_fields()
        for field_name, rule in self.build_rules(today).items():
            value = values.get(field_name)
            check = validate_field(field_name, value, rule)
            if not check.is_valid:
                result.add_error(field_name, check.error, "INVALID_FIELD", value)

        if not result.is_valid:
            return result

        selected = self.selected_quantities(draft)
        if not selected:
            result.add_error(NO_SERVICES_FIELD, NO_SERVICES_MESSAGE, "NO_SERVICES_SELECTED")
        elif max(selected.values()) > MAX_QUANTITY:
            result.add_error(
                NO_SERVICES_FIELD, QUANTITY_LIMIT_MESSAGE, "QUANTITY_LIMIT_EXCEEDED", selected
            )

        return result

    @staticmethod
    def selected_quantities(draft: RequestDraft) -> Dict[str, int]:
        """service id -> coerced quantity, for quantities > 0 only"""
        selected = {}
        for service_id, quantity in draft.quantities.items():
            qty = PricingService.coerce_quantity(quantity)
            if qty > 0:
                selected[str(service_id)] = qty
        return selected

    # ============================================
    # SANITIZATION
    # ============================================

    @staticmethod
    def sanitize_string(value: Optional[str]) -> Optional[str]:
        """Trim and strip < and > characters"""
        if value is None:
            return None
        return re.sub(r"[<>]", "", str(value).strip())

    @staticmethod
    def sanitize_email(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return str(value).strip().lower()

    @staticmethod
    def sanitize_phone(value: Optional[str]) -> Optional[str]:
        """Keep digits, +, parentheses, hyphens and spaces"""
        if value is None:
            return None
        return re.sub(r"[^\d\-()\s+]", "", str(value).strip())

    def sanitize_request(self, draft: RequestDraft) -> RequestDraft:
        """Return a new draft with every field cleaned for persistence"""
        pickup_date = parse_date(draft.pickup_date)
        instructions = self.sanitize_string(draft.special_instructions)

        return draft.with_fields(
            customer_name=self.sanitize_string(draft.customer_name),
            customer_email=self.sanitize_email(draft.customer_email),
            customer_phone=self.sanitize_phone(draft.customer_phone),
            pickup_address=self.sanitize_string(draft.pickup_address),
            pickup_date=pickup_date.isoformat() if pickup_date else draft.pickup_date,
            pickup_time_slot=str(draft.pickup_time_slot).strip().lower(),
            special_instructions=instructions or None,
        )
