"""
Request CSV Export

Serialises laundry requests to CSV for the back office. Every field is
quoted and embedded quotes are doubled, so values containing quotes,
commas or line breaks survive a parse round-trip unchanged.
"""

import csv
import io
from datetime import datetime
from typing import Any, Dict, Iterable, List

from logger import logger
from modules.pricing import PricingService


CSV_HEADERS = [
    "ID",
    "Customer Name",
    "Customer Email",
    "Customer Phone",
    "Pickup Date",
    "Pickup Time",
    "Pickup Address",
    "Status",
    "Total Cost",
    "Special Instructions",
    "Internal Notes",
    "Created At",
]


def _format_created_at(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    try:
        return datetime.fromisoformat(str(value)).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return str(value)


def request_to_row(request: Dict[str, Any]) -> List[str]:
    total = request.get("total_estimated_cost")
    return [
        str(request.get("id") or ""),
        request.get("customer_name") or "",
        request.get("customer_email") or "",
        request.get("customer_phone") or "",
        str(request.get("pickup_date") or ""),
        request.get("pickup_time_slot") or "",
        request.get("pickup_address") or "",
        request.get("status") or "",
        f"{PricingService.to_currency(total if total is not None else 0):.2f}",
        request.get("special_instructions") or "",
        request.get("internal_notes") or "",
        _format_created_at(request.get("created_at")),
    ]


def to_csv(requests: Iterable[Dict[str, Any]]) -> str:
    """Header row plus one row per request, in the order given"""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(CSV_HEADERS)

    count = 0
    for request in requests:
        writer.writerow(request_to_row(request))
        count += 1

    csv_content = output.getvalue()
    output.close()

    logger.info(msg=f"Exported {count} requests to CSV, size={len(csv_content)} chars")
    return csv_content


def parse_csv(content: str) -> List[Dict[str, str]]:
    """Read an export back into header -> value dictionaries"""
    reader = csv.DictReader(io.StringIO(content, newline=""))
    return [dict(row) for row in reader]


def generate_file_name() -> str:
    timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    return f"laundry_requests_{timestamp}.csv"
