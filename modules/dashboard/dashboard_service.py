"""
Admin Dashboard

At-a-glance numbers for the back office. Everything is computed in memory
from plain store reads; the summary is rebuilt on every call.
"""

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from config import DASHBOARD_PENDING_LIMIT, DASHBOARD_RECENT_LIMIT
from database.store import Store
from logger import logger
from modules.laundry_requests.laundry_request_schema import RequestStatus
from modules.pricing import PricingService
from utils.datetime import business_today, start_of_month, to_business_date

from .dashboard_schema import DashboardSummaryModel, MostRequestedServiceModel


REQUESTS_TABLE = "laundry_requests"
LINES_TABLE = "request_services"
SERVICES_TABLE = "laundry_services"


def most_requested(
    lines: Iterable[Dict[str, Any]], services: Iterable[Dict[str, Any]]
) -> Optional[MostRequestedServiceModel]:
    """Service with the highest total quantity; ties go to the name first alphabetically"""
    totals = Counter()
    for line in lines:
        totals[str(line["service_id"])] += int(line.get("quantity") or 0)

    if not totals:
        return None

    names = {str(service["id"]): service["name"] for service in services}
    service_id, quantity = min(
        totals.items(),
        key=lambda item: (-item[1], names.get(item[0], "Unknown service")),
    )
    return MostRequestedServiceModel(
        service_id=service_id,
        name=names.get(service_id, "Unknown service"),
        total_quantity=quantity,
    )


def summarize(
    requests: Iterable[Dict[str, Any]],
    lines: Iterable[Dict[str, Any]],
    services: Iterable[Dict[str, Any]],
    today: date,
) -> DashboardSummaryModel:
    """
    requests are expected newest first, the way the store returns them
    for the dashboard.
    """
    requests = list(requests)
    today_iso = today.isoformat()
    month_start = start_of_month(today)

    pending = [r for r in requests if r.get("status") == RequestStatus.PENDING.value]
    pending.sort(key=lambda r: str(r.get("pickup_date") or ""))

    revenue = Decimal("0")
    for request in requests:
        created = to_business_date(request.get("created_at"))
        if created is not None and created >= month_start:
            revenue += Decimal(str(request.get("total_estimated_cost") or 0))

    return DashboardSummaryModel(
        pending_count=len(pending),
        today_count=sum(1 for r in requests if str(r.get("pickup_date")) == today_iso),
        month_revenue=float(PricingService.to_currency(revenue)),
        most_requested_service=most_requested(lines, services),
        pending_requests=pending[:DASHBOARD_PENDING_LIMIT],
        recent_requests=requests[:DASHBOARD_RECENT_LIMIT],
    )


class DashboardService:

    def __init__(self, store: Store):
        self.store = store

    async def get_summary(self, today: date = None) -> DashboardSummaryModel:
        today = today or business_today()

        requests = await self.store.read(
            REQUESTS_TABLE, order_by="created_at", descending=True
        )
        lines = await self.store.read(LINES_TABLE)
        services = await self.store.read(SERVICES_TABLE)

        summary = summarize(requests, lines, services, today)
        logger.info(
            msg=f"Dashboard summary built: {summary.pending_count} pending, "
            f"{summary.today_count} today"
        )
        return summary
