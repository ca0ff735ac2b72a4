"""
Request Submission Service

Orchestrates a customer's pickup request submission:

    idle -> validating -> rejected
                       -> submitting -> committed
                                     -> partially_failed

1. Validate and sanitize the draft (no writes on failure)
2. Price the selected services
3. Create the request record (status "pending", total snapshot)
4. Create one line per selected service, all concurrently

The store has no multi-record transaction. If the request record is
written but some lines are not, the submission ends in partially_failed
and names the request so the customer can be told it may be incomplete.
Nothing is rolled back and a resubmission creates a second request.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from database.store import Store, StoreError, StoreWriteError
from logger import logger
from modules.pricing import MAX_AMOUNT, PricingService, PricingResult

from ..laundry_request_schema import RequestDraft, RequestStatus
from .request_validation_service import (
    NO_SERVICES_FIELD,
    NO_SERVICES_MESSAGE,
    RequestValidationService,
    ValidationResult,
)


REQUESTS_TABLE = "laundry_requests"
LINES_TABLE = "request_services"

TOTAL_LIMIT_MESSAGE = "Estimated total is too large, please contact us for this request"


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    SUBMITTING = "submitting"
    COMMITTED = "committed"
    PARTIALLY_FAILED = "partially_failed"


class PartialSubmissionError(Exception):
    """
    The request record exists but not every line was written.

    Retrying the submission would create a duplicate request.
    """

    def __init__(
        self,
        request_id: str,
        line_ids: List[str],
        failures: List[Tuple[str, str]],
    ):
        self.request_id = request_id
        self.line_ids = line_ids
        self.failures = failures
        super().__init__(
            f"Request {request_id} was saved but {len(failures)} of "
            f"{len(failures) + len(line_ids)} services could not be attached"
        )


@dataclass
class SubmissionResult:
    state: SubmissionState
    errors: Dict[str, str] = field(default_factory=dict)
    request: Optional[Dict[str, Any]] = None
    pricing: Optional[PricingResult] = None
    line_ids: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)
    error: Optional[Exception] = None
    history: List[SubmissionState] = field(default_factory=list)

    @property
    def request_id(self) -> Optional[str]:
        return self.request["id"] if self.request else None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "state": self.state.value,
            "request_id": self.request_id,
            "line_ids": self.line_ids,
        }
        if self.errors:
            data["errors"] = self.errors
        if self.failures:
            data["failures"] = [
                {"service_id": service_id, "reason": reason}
                for service_id, reason in self.failures
            ]
        if self.pricing is not None:
            data["pricing"] = self.pricing.to_dict()
        if self.error is not None:
            data["error"] = str(self.error)
        return data


class RequestSubmissionService:
    """
    Usage:
        service = RequestSubmissionService(store)
        result = await service.submit(draft, active_services)
        if result.state is SubmissionState.PARTIALLY_FAILED:
            warn_customer(result.request_id)
    """

    def __init__(
        self,
        store: Store,
        validator: RequestValidationService = None,
    ):
        self.store = store
        self.validator = validator or RequestValidationService()

    # ============================================
    # MAIN SUBMISSION METHOD
    # ============================================

    async def submit(
        self,
        draft: RequestDraft,
        services: Iterable[Dict[str, Any]],
        today: Optional[date] = None,
    ) -> SubmissionResult:
        """
        Submit a draft against the offered services.

        Validation errors and store failures are returned in the result,
        never raised.
        """
        history = [SubmissionState.IDLE, SubmissionState.VALIDATING]

        # Step 1: Validate input
        validation: ValidationResult = self.validator.validate_request(draft, today)
        if not validation.is_valid:
            return self._rejected(history, errors=validation.error_map)

        clean = self.validator.sanitize_request(draft)

        # Step 2: Price the selection against the offered catalog
        selected = self.validator.selected_quantities(clean)
        offered = list(services)
        offered_ids = {str(service["id"]) for service in offered}

        unknown = sorted(set(selected) - offered_ids)
        if unknown:
            logger.warning(
                msg=f"Ignoring quantities for services not on offer: {unknown}",
            )

        pricing = PricingService.compute_total(offered, selected)
        if not pricing.lines:
            return self._rejected(history, errors={NO_SERVICES_FIELD: NO_SERVICES_MESSAGE})
        if PricingService.to_currency(pricing.total) > MAX_AMOUNT:
            return self._rejected(history, errors={NO_SERVICES_FIELD: TOTAL_LIMIT_MESSAGE})

        history.append(SubmissionState.SUBMITTING)

        # Step 3: Create the request record
        try:
            request = await self.store.create(
                REQUESTS_TABLE, self._build_request_record(clean, pricing)
            )
        except StoreError as e:
            error = StoreWriteError("create_request", REQUESTS_TABLE, getattr(e, "reason", e.message))
            logger.error(msg=f"Request submission rejected: {error}")
            return self._rejected(history, error=error, pricing=pricing)

        request_id = request["id"]

        # Step 4: Attach every line concurrently
        outcomes = await asyncio.gather(
            *[self._create_line(request_id, line) for line in pricing.lines],
            return_exceptions=True,
        )

        line_ids = []
        failures = []
        for line, outcome in zip(pricing.lines, outcomes):
            if isinstance(outcome, Exception):
                failures.append((line.service_id, str(outcome)))
            else:
                line_ids.append(outcome["id"])

        if failures:
            history.append(SubmissionState.PARTIALLY_FAILED)
            error = PartialSubmissionError(request_id, line_ids, failures)
            logger.error(
                msg=str(error),
                extra={"request_id": request_id, "failures": failures},
            )
            return SubmissionResult(
                state=SubmissionState.PARTIALLY_FAILED,
                request=request,
                pricing=pricing,
                line_ids=line_ids,
                failures=failures,
                error=error,
                history=history,
            )

        history.append(SubmissionState.COMMITTED)
        logger.info(
            msg=f"Request submitted successfully: {request_id}",
            extra={"request_id": request_id, "lines": len(line_ids)},
        )
        return SubmissionResult(
            state=SubmissionState.COMMITTED,
            request=request,
            pricing=pricing,
            line_ids=line_ids,
            history=history,
        )

    # ============================================
    # HELPER METHODS
    # ============================================

    async def _create_line(self, request_id: str, line) -> Dict[str, Any]:
        try:
            return await self.store.create(
                LINES_TABLE,
                {
                    "request_id": request_id,
                    "service_id": line.service_id,
                    "quantity": line.quantity,
                    "estimated_cost": float(PricingService.to_currency(line.line_cost)),
                },
            )
        except StoreError as e:
            raise StoreWriteError(
                "create_line", LINES_TABLE, getattr(e, "reason", e.message), line.service_id
            ) from e

    @staticmethod
    def _build_request_record(draft: RequestDraft, pricing: PricingResult) -> Dict[str, Any]:
        return {
            "customer_name": draft.customer_name,
            "customer_email": draft.customer_email,
            "customer_phone": draft.customer_phone,
            "pickup_address": draft.pickup_address,
            "pickup_date": draft.pickup_date,
            "pickup_time_slot": draft.pickup_time_slot,
            "special_instructions": draft.special_instructions,
            "status": RequestStatus.PENDING.value,
            "total_estimated_cost": float(PricingService.to_currency(pricing.total)),
        }

    @staticmethod
    def _rejected(
        history: List[SubmissionState],
        errors: Dict[str, str] = None,
        error: Exception = None,
        pricing: PricingResult = None,
    ) -> SubmissionResult:
        history.append(SubmissionState.REJECTED)
        return SubmissionResult(
            state=SubmissionState.REJECTED,
            errors=errors or {},
            error=error,
            pricing=pricing,
            history=history,
        )
