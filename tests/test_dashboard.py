import asyncio

from modules.dashboard.dashboard_service import DashboardService, most_requested, summarize

from conftest import TODAY, FakeStore, make_request, make_service


def line(service_id, quantity):
    return {"id": f"line-{service_id}-{quantity}", "request_id": "r", "service_id": service_id, "quantity": quantity}


def test_counts_and_revenue():
    requests = [
        make_request(status="pending", pickup_date="2025-03-10", total_estimated_cost=10.0,
                     created_at="2025-03-09T15:00:00+00:00"),
        make_request(status="confirmed", pickup_date="2025-03-10", total_estimated_cost=20.5,
                     created_at="2025-03-05T15:00:00+00:00"),
        # late evening Feb 28 in New York
        make_request(status="completed", pickup_date="2025-03-01", total_estimated_cost=99.0,
                     created_at="2025-03-01T03:00:00+00:00"),
        make_request(status="pending", pickup_date="2025-03-11", total_estimated_cost=None,
                     created_at="2025-02-20T15:00:00+00:00"),
    ]

    summary = summarize(requests, [], [], TODAY)

    assert summary.pending_count == 2
    assert summary.today_count == 2
    assert summary.month_revenue == 30.5
    assert summary.most_requested_service is None


def test_pending_sorted_by_pickup_date_and_capped():
    requests = [make_request(pickup_date=f"2025-04-{day:02d}") for day in range(30, 0, -1)]
    requests += [make_request(pickup_date=f"2025-05-{day:02d}") for day in range(1, 31)]

    summary = summarize(requests, [], [], TODAY)

    assert summary.pending_count == 60
    assert len(summary.pending_requests) == 50
    dates = [r["pickup_date"] for r in summary.pending_requests]
    assert dates == sorted(dates)
    assert dates[0] == "2025-04-01"


def test_recent_requests_keep_store_order():
    requests = [make_request(customer_name=f"Customer {i}") for i in range(12)]

    summary = summarize(requests, [], [], TODAY)

    assert summary.recent_requests == requests[:10]


def test_most_requested_service_by_total_quantity():
    wash = make_service("Wash & Fold", 2.5)
    dry = make_service("Dry Cleaning", 8)
    lines = [line(wash["id"], 2), line(dry["id"], 3), line(wash["id"], 2)]

    top = most_requested(lines, [wash, dry])

    assert top.name == "Wash & Fold"
    assert top.total_quantity == 4


def test_most_requested_tie_goes_to_name_order():
    wash = make_service("Wash & Fold", 2.5)
    dry = make_service("Dry Cleaning", 8)

    top = most_requested([line(wash["id"], 3), line(dry["id"], 3)], [wash, dry])

    assert top.name == "Dry Cleaning"


def test_get_summary_reads_the_store():
    wash = make_service("Wash & Fold", 2.5)
    older = make_request(created_at="2025-03-02T10:00:00+00:00")
    newer = make_request(created_at="2025-03-04T10:00:00+00:00", pickup_date="2025-03-10")
    store = FakeStore(
        tables={
            "laundry_requests": [older, newer],
            "request_services": [line(wash["id"], 5)],
            "laundry_services": [wash],
        }
    )

    summary = asyncio.run(DashboardService(store).get_summary(today=TODAY))

    assert summary.today_count == 1
    assert summary.recent_requests[0]["id"] == newer["id"]
    assert summary.most_requested_service.total_quantity == 5
    assert summary.month_revenue == 20.0
