import asyncio
import os
import tempfile
import uuid
from datetime import date, datetime, timedelta, timezone

# must be set before config / database are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "laundry-tests", "test.log"))

import pytest

from database.store import RecordNotFoundError, Store, StoreWriteError
from modules.laundry_requests.laundry_request_schema import RequestDraft


TODAY = date(2025, 3, 10)


class FakeStore(Store):
    """
    In-memory store.

    `events` records ("start"|"end", operation, table, detail) for every
    call so tests can check ordering. `fail_when(operation, table, value)`
    returns a reason string to make that call fail.
    """

    def __init__(self, tables=None, fail_when=None):
        self.tables = {name: list(rows) for name, rows in (tables or {}).items()}
        self.events = []
        self.fail_when = fail_when
        self._clock = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    def _next_created_at(self) -> str:
        self._clock += timedelta(minutes=1)
        return self._clock.isoformat()

    async def _enter(self, operation, table, detail):
        self.events.append(("start", operation, table, detail))
        await asyncio.sleep(0)
        if self.fail_when:
            reason = self.fail_when(operation, table, detail)
            if reason:
                self.events.append(("fail", operation, table, detail))
                raise StoreWriteError(operation, table, reason, detail.get("id") if isinstance(detail, dict) else detail)

    def _exit(self, operation, table, detail):
        self.events.append(("end", operation, table, detail))

    def _find(self, table, record_id):
        for row in self.tables.get(table, []):
            if row["id"] == str(record_id):
                return row
        raise RecordNotFoundError(table, record_id)

    async def create(self, table, record):
        await self._enter("create", table, record)
        row = {"id": str(uuid.uuid4()), "created_at": self._next_created_at(), **record}
        self.tables.setdefault(table, []).append(row)
        self._exit("create", table, record)
        return dict(row)

    async def update(self, table, record_id, patch):
        await self._enter("update", table, record_id)
        row = self._find(table, record_id)
        row.update(patch)
        self._exit("update", table, record_id)
        return dict(row)

    async def read(self, table, filters=None, order_by=None, descending=False, limit=None):
        rows = [
            dict(row)
            for row in self.tables.get(table, [])
            if all(str(row.get(k)) == str(v) for k, v in (filters or {}).items())
        ]
        if order_by:
            rows.sort(key=lambda row: str(row.get(order_by) or ""), reverse=descending)
        return rows[:limit] if limit else rows

    async def read_one(self, table, record_id):
        return dict(self._find(table, record_id))

    async def delete(self, table, record_id):
        await self._enter("delete", table, record_id)
        row = self._find(table, record_id)
        self.tables[table].remove(row)
        self._exit("delete", table, record_id)


def make_service(name, price_per_item=None, price_per_pound=None, is_active=True, service_id=None):
    return {
        "id": service_id or str(uuid.uuid4()),
        "created_at": "2025-01-01T00:00:00+00:00",
        "name": name,
        "description": None,
        "price_per_item": price_per_item,
        "price_per_pound": price_per_pound,
        "is_active": is_active,
    }


def make_request(status="pending", pickup_date="2025-03-12", created_at="2025-03-02T10:00:00+00:00", **fields):
    record = {
        "id": str(uuid.uuid4()),
        "created_at": created_at,
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "555-123-4567",
        "pickup_address": "12 Main Street, Springfield",
        "pickup_date": pickup_date,
        "pickup_time_slot": "morning",
        "special_instructions": None,
        "status": status,
        "total_estimated_cost": 10.0,
        "internal_notes": None,
    }
    record.update(fields)
    return record


@pytest.fixture
def services():
    return [
        make_service("Wash & Fold", price_per_item=2.50),
        make_service("Dry Cleaning", price_per_item=8.00),
        make_service("Bulk Wash", price_per_pound=1.25),
    ]


@pytest.fixture
def valid_draft():
    return RequestDraft(
        customer_name="Jane Doe",
        customer_email="Jane@Example.com",
        customer_phone="(555) 123-4567",
        pickup_address="12 Main Street, Springfield",
        pickup_date="2025-03-12",
        pickup_time_slot="Morning",
        special_instructions="Leave at the door",
    )


@pytest.fixture
def store():
    return FakeStore()
