"""
Laundry Request Admin Service

Back office operations on submitted requests: listing with filters,
detail view, single and batch status / notes updates, CSV export.

Batch updates write every request concurrently and report per-request
outcomes; one failure never aborts or rolls back the others.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from database.store import RecordNotFoundError, Store, StoreError, StoreWriteError
from logger import logger
from modules.notifications import (
    NotificationError,
    NotificationResult,
    StatusNotificationService,
)
from modules.pricing import PricingService

from .laundry_request_schema import RequestFilters, RequestStatus, STATUS_SEQUENCE
from .request_export_service import to_csv
from .services.request_submission_service import LINES_TABLE, REQUESTS_TABLE


SERVICES_TABLE = "laundry_services"


@dataclass
class BatchUpdateResult:
    succeeded: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "failed": [
                {"request_id": request_id, "reason": reason}
                for request_id, reason in self.failed
            ],
        }


@dataclass
class UpdateResult:
    request: Dict[str, Any]
    status_changed: bool = False
    notification: Optional[NotificationResult] = None
    notification_error: Optional[NotificationError] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"request": self.request, "status_changed": self.status_changed}
        if self.notification is not None:
            data["notification_sent"] = self.notification.success
        if self.notification_error is not None:
            data["warning"] = f"Status updated but email failed: {self.notification_error.reason}"
        return data


def filter_requests(
    requests: Iterable[Dict[str, Any]],
    status: str = "all",
    pickup_date: Optional[date] = None,
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Status and pickup date must match exactly. The search term matches
    name, email and id case-insensitively and the phone as a substring.
    """
    term = (search or "").strip().lower()
    wanted_date = pickup_date.isoformat() if pickup_date else None

    filtered = []
    for request in requests:
        if status != "all" and request.get("status") != status:
            continue
        if wanted_date and str(request.get("pickup_date")) != wanted_date:
            continue
        if term and not (
            term in (request.get("customer_name") or "").lower()
            or term in (request.get("customer_email") or "").lower()
            or term in (request.get("customer_phone") or "")
            or term in str(request.get("id") or "").lower()
        ):
            continue
        filtered.append(request)

    return filtered


def is_backward_move(old_status: str, new_status: str) -> bool:
    if old_status not in STATUS_SEQUENCE or new_status not in STATUS_SEQUENCE:
        return False
    return STATUS_SEQUENCE.index(new_status) < STATUS_SEQUENCE.index(old_status)


class LaundryRequestService:
    """
    Usage:
        service = LaundryRequestService(store)
        result = await service.batch_update(ids, RequestStatus.CONFIRMED)
    """

    def __init__(self, store: Store, notifier: StatusNotificationService = None):
        self.store = store
        self.notifier = notifier or StatusNotificationService()

    # ============================================
    # READS
    # ============================================

    async def list_requests(self, filters: RequestFilters = None) -> List[Dict[str, Any]]:
        filters = filters or RequestFilters()
        requests = await self.store.read(
            REQUESTS_TABLE, order_by="created_at", descending=True
        )
        return filter_requests(
            requests,
            status=filters.status,
            pickup_date=filters.pickup_date,
            search=filters.search,
        )

    async def get_request_details(self, request_id: str) -> Dict[str, Any]:
        """
        The request with its lines. Each line shows the snapshot cost next
        to what the service would cost at today's catalog price.
        """
        request = await self.store.read_one(REQUESTS_TABLE, request_id)
        lines = await self.store.read(LINES_TABLE, filters={"request_id": request["id"]})

        service_ids = sorted({line["service_id"] for line in lines})
        services = await asyncio.gather(
            *[self._read_service(service_id) for service_id in service_ids]
        )
        service_map = {
            service_id: service
            for service_id, service in zip(service_ids, services)
        }

        detail_lines = []
        for line in lines:
            service = service_map.get(line["service_id"])
            current_cost = (
                PricingService.compute_line(service, line["quantity"]) if service else None
            )
            detail_lines.append(
                {
                    **line,
                    "service_name": service["name"] if service else "Unknown service",
                    "unit_price": (
                        float(PricingService.resolve_unit_price(service)) if service else None
                    ),
                    "current_cost": (
                        float(PricingService.to_currency(current_cost))
                        if current_cost is not None
                        else None
                    ),
                }
            )

        return {**request, "lines": detail_lines}

    async def _read_service(self, service_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.store.read_one(SERVICES_TABLE, service_id)
        except RecordNotFoundError:
            logger.warning(msg=f"Request line references missing service {service_id}")
            return None

    async def export_requests(self, filters: RequestFilters = None) -> str:
        return to_csv(await self.list_requests(filters))

    # ============================================
    # WRITES
    # ============================================

    async def update_one(
        self,
        request_id: str,
        status: Optional[RequestStatus] = None,
        internal_notes: Optional[str] = None,
    ) -> UpdateResult:
        """
        Update status and/or internal notes of one request.

        When the status actually changes the customer is notified. A failed
        notification is reported on the result and does not undo the write.
        Store failures raise StoreError.
        """
        current = await self.store.read_one(REQUESTS_TABLE, request_id)

        patch = {}
        if status is not None:
            patch["status"] = RequestStatus(status).value
        if internal_notes is not None:
            patch["internal_notes"] = internal_notes

        if not patch:
            return UpdateResult(request=current)

        new_status = patch.get("status")
        if new_status and is_backward_move(current["status"], new_status):
            logger.warning(
                msg=f"Request {request_id} moved back from {current['status']} to {new_status}",
                extra={"request_id": request_id},
            )

        try:
            updated = await self.store.update(REQUESTS_TABLE, request_id, patch)
        except RecordNotFoundError:
            raise
        except StoreError as e:
            raise StoreWriteError(
                "update_request", REQUESTS_TABLE, getattr(e, "reason", e.message), request_id
            ) from e

        status_changed = bool(new_status) and new_status != current["status"]
        result = UpdateResult(request=updated, status_changed=status_changed)

        if status_changed:
            notification = await self.notifier.notify(
                customer_email=updated["customer_email"],
                request_id=updated["id"],
                new_status=new_status,
                pickup_date=updated["pickup_date"],
                pickup_time_slot=updated["pickup_time_slot"],
                total_cost=updated.get("total_estimated_cost") or 0,
                special_instructions=updated.get("special_instructions"),
                customer_name=updated.get("customer_name"),
            )
            result.notification = notification
            if not notification.success:
                result.notification_error = NotificationError(
                    updated["id"], notification.error or "unknown error"
                )

        logger.info(
            msg=f"Request {request_id} updated: {sorted(patch)}",
            extra={"request_id": request_id},
        )
        return result

    async def batch_update(
        self,
        request_ids: Iterable[str],
        new_status: RequestStatus,
        note_patch: Optional[str] = None,
    ) -> BatchUpdateResult:
        """
        Set the same status (and optionally notes) on many requests.

        Writes run concurrently; outcomes are reported per id in the order
        the ids were given, duplicates collapsed. Successful writes stand
        even when others fail.
        """
        ids = list(dict.fromkeys(str(request_id) for request_id in request_ids))

        patch = {"status": RequestStatus(new_status).value}
        if note_patch:
            patch["internal_notes"] = note_patch

        outcomes = await asyncio.gather(
            *[self.store.update(REQUESTS_TABLE, request_id, patch) for request_id in ids],
            return_exceptions=True,
        )

        result = BatchUpdateResult()
        for request_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, Exception):
                result.failed.append((request_id, getattr(outcome, "reason", str(outcome))))
            else:
                result.succeeded.append(request_id)

        if result.failed:
            logger.warning(
                msg=f"Batch update: {len(result.succeeded)} updated, {len(result.failed)} failed",
                extra={"failed": result.failed},
            )
        else:
            logger.info(msg=f"Batch update: {len(result.succeeded)} requests set to {patch['status']}")

        return result
