from modules.laundry_requests.request_export_service import (
    CSV_HEADERS,
    generate_file_name,
    parse_csv,
    to_csv,
)

from conftest import make_request


def test_instructions_with_quote_and_comma_survive_round_trip():
    request = make_request(special_instructions='Use "gentle" cycle, no bleach')

    rows = parse_csv(to_csv([request]))

    assert rows[0]["Special Instructions"] == 'Use "gentle" cycle, no bleach'


def test_multiline_notes_survive_round_trip():
    request = make_request(internal_notes="Line one\nLine two")

    rows = parse_csv(to_csv([request]))

    assert rows[0]["Internal Notes"] == "Line one\nLine two"


def test_every_field_is_quoted():
    content = to_csv([make_request()])

    header, row = content.splitlines()
    assert header == ",".join(f'"{name}"' for name in CSV_HEADERS)
    assert row.startswith('"') and row.endswith('"')


def test_row_values_in_column_order():
    request = make_request(
        total_estimated_cost=None,
        created_at="2025-03-02T10:05:09+00:00",
    )

    row = parse_csv(to_csv([request]))[0]

    assert list(row) == CSV_HEADERS
    assert row["ID"] == request["id"]
    assert row["Pickup Time"] == "morning"
    assert row["Total Cost"] == "0.00"
    assert row["Special Instructions"] == ""
    assert row["Created At"] == "2025-03-02 10:05:09"


def test_export_is_deterministic():
    requests = [make_request(), make_request(status="completed")]

    assert to_csv(requests) == to_csv(requests)


def test_empty_export_has_header_only():
    assert parse_csv(to_csv([])) == []
    assert to_csv([]).count("\n") == 1


def test_file_name():
    name = generate_file_name()

    assert name.startswith("laundry_requests_")
    assert name.endswith(".csv")
