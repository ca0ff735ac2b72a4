from decimal import Decimal

import pytest

from modules.pricing import MAX_AMOUNT, PricingService

from conftest import make_service


WASH_AND_FOLD = make_service("Wash & Fold", price_per_item=2.50, service_id="wash")
BULK = make_service("Bulk Wash", price_per_pound=1.25, service_id="bulk")
UNPRICED = make_service("Alterations", service_id="alter")


@pytest.mark.parametrize("quantity", [0, 1, 3, 17])
def test_line_cost_is_quantity_times_price(quantity):
    assert PricingService.compute_line(WASH_AND_FOLD, quantity) == quantity * Decimal("2.5")


@pytest.mark.parametrize("quantity", [-1, "abc", None, float("nan"), float("inf"), True, ""])
def test_invalid_quantities_cost_nothing(quantity):
    assert PricingService.compute_line(WASH_AND_FOLD, quantity) == 0


def test_fractional_quantity_is_truncated():
    assert PricingService.coerce_quantity("2.9") == 2
    assert PricingService.coerce_quantity(" 4 ") == 4


def test_per_item_price_wins_over_per_pound():
    both = make_service("Both", price_per_item=3, price_per_pound=1)
    assert PricingService.resolve_unit_price(both) == Decimal("3")
    assert PricingService.pricing_mode(both) == "per_item"


def test_per_pound_and_unpriced_services():
    assert PricingService.resolve_unit_price(BULK) == Decimal("1.25")
    assert PricingService.pricing_mode(BULK) == "per_pound"
    assert PricingService.resolve_unit_price(UNPRICED) == Decimal("0")
    assert PricingService.pricing_mode(UNPRICED) == "unpriced"


def test_wash_and_fold_four_items():
    result = PricingService.compute_total([WASH_AND_FOLD], {"wash": 4})

    assert len(result.lines) == 1
    assert result.lines[0].line_cost == Decimal("10.00")
    assert result.total == Decimal("10.00")
    assert result.to_dict()["total"] == 10.0


def test_total_sums_non_zero_lines_only():
    result = PricingService.compute_total(
        [WASH_AND_FOLD, BULK, UNPRICED],
        {"wash": 2, "bulk": 0, "alter": -3, "unknown": 5},
    )

    assert [line.service_id for line in result.lines] == ["wash"]
    assert result.total == sum(line.line_cost for line in result.lines)


def test_total_keeps_full_precision_until_snapshot():
    third = make_service("Odd", price_per_pound="0.333", service_id="odd")
    result = PricingService.compute_total([third], {"odd": 3})

    assert result.total == Decimal("0.999")
    assert PricingService.to_currency(result.total) == Decimal("1.00")


def test_format_currency():
    assert PricingService.format_currency(10) == "$10.00"
    assert PricingService.format_currency(None) == "$0.00"
    assert PricingService.format_currency(1234.5) == "$1,234.50"


def test_to_currency_handles_huge_amounts():
    amount = PricingService.to_currency(Decimal("1e30"))

    assert amount == Decimal("1e30")
    assert amount.as_tuple().exponent == -2
    assert PricingService.to_currency(Decimal("1e30")) > MAX_AMOUNT


@pytest.mark.parametrize("value", ["abc", None, float("nan"), float("inf")])
def test_to_currency_of_non_numbers_is_zero(value):
    assert PricingService.to_currency(value) == Decimal("0.00")


def test_huge_quantity_line_does_not_raise():
    line = PricingService.compute_line(WASH_AND_FOLD, "1e30")

    assert line > MAX_AMOUNT
