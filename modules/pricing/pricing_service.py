"""
Pricing Service

Turns a catalog of services and the quantities a customer selected into
per-line costs and a grand total.

Pure computation: no I/O and no state. The same calculation backs the
request form estimate, the submission snapshot and the admin detail view.

Arithmetic stays in full Decimal precision. Values are only rounded to
cents when they are snapshotted into a record or formatted for display.
"""

import math
from dataclasses import dataclass, field
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping

from config import CURRENCY_SYMBOL


CENTS = Decimal("0.01")

# most units of one service on a single request
MAX_QUANTITY = 999

# largest amount the Numeric(10, 2) money columns hold
MAX_AMOUNT = Decimal("99999999.99")


@dataclass(frozen=True)
class LineCost:
    """Cost of one selected service"""

    service_id: str
    service_name: str
    quantity: int
    unit_price: Decimal
    line_cost: Decimal
    pricing_mode: str  # "per_item" | "per_pound" | "unpriced"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_id": self.service_id,
            "service_name": self.service_name,
            "quantity": self.quantity,
            "unit_price": float(PricingService.to_currency(self.unit_price)),
            "line_cost": float(PricingService.to_currency(self.line_cost)),
            "pricing_mode": self.pricing_mode,
        }


@dataclass(frozen=True)
class PricingResult:
    """Lines with quantity > 0 and their total"""

    lines: List[LineCost] = field(default_factory=list)
    total: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total": float(PricingService.to_currency(self.total)),
        }


def _attr(service: Any, key: str, default: Any = None) -> Any:
    """Read a field from a record dict or a model / schema object"""
    if isinstance(service, Mapping):
        return service.get(key, default)
    return getattr(service, key, default)


class PricingService:
    """
    Usage:
        result = PricingService.compute_total(services, {"svc1": 4})
        result.total  # Decimal("10.0")
    """

    # ============================================
    # QUANTITY / PRICE RESOLUTION
    # ============================================

    @staticmethod
    def coerce_quantity(quantity: Any) -> int:
        """
        Coerce a requested quantity to a non-negative integer.

        Negative, non-numeric, NaN and infinite input become 0. Fractions
        are truncated. Never raises.
        """
        if quantity is None or isinstance(quantity, bool):
            return 0

        try:
            value = Decimal(str(quantity).strip())
        except (InvalidOperation, ValueError):
            return 0

        if not value.is_finite() or value <= 0:
            return 0

        return int(value)

    @staticmethod
    def resolve_unit_price(service: Any) -> Decimal:
        """Per-item price, else per-pound price, else 0"""
        for key in ("price_per_item", "price_per_pound"):
            price = _attr(service, key)
            if price is None or price == "":
                continue
            try:
                value = Decimal(str(price))
            except (InvalidOperation, ValueError):
                continue
            if value.is_finite():
                return value
        return Decimal("0")

    @staticmethod
    def pricing_mode(service: Any) -> str:
        if _attr(service, "price_per_item") not in (None, ""):
            return "per_item"
        if _attr(service, "price_per_pound") not in (None, ""):
            return "per_pound"
        return "unpriced"

    # ============================================
    # MAIN CALCULATION METHODS
    # ============================================

    @staticmethod
    def compute_line(service: Any, quantity: Any) -> Decimal:
        """quantity × unit price; invalid quantities cost 0"""
        qty = PricingService.coerce_quantity(quantity)
        return qty * PricingService.resolve_unit_price(service)

    @staticmethod
    def compute_total(
        services: Iterable[Any], quantities: Mapping[str, Any]
    ) -> PricingResult:
        """
        Price every service with a quantity > 0.

        Services are matched to quantities by id; ids in `quantities` that
        are not in `services` are ignored.
        """
        lines = []
        total = Decimal("0")

        for service in services:
            service_id = str(_attr(service, "id"))
            qty = PricingService.coerce_quantity(quantities.get(service_id))
            if qty == 0:
                continue

            unit_price = PricingService.resolve_unit_price(service)
            line_cost = qty * unit_price
            total += line_cost

            lines.append(
                LineCost(
                    service_id=service_id,
                    service_name=_attr(service, "name", ""),
                    quantity=qty,
                    unit_price=unit_price,
                    line_cost=line_cost,
                    pricing_mode=PricingService.pricing_mode(service),
                )
            )

        return PricingResult(lines=lines, total=total)

    # ============================================
    # SNAPSHOT / PRESENTATION
    # ============================================

    @staticmethod
    def to_currency(value: Any) -> Decimal:
        """Round to cents for snapshots; non-numeric and non-finite values become 0"""
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return Decimal("0.00")
        if not amount.is_finite():
            return Decimal("0.00")

        # enough precision for every digit left of the cents
        context = Context(prec=max(28, amount.adjusted() + 3))
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP, context=context)

    @staticmethod
    def format_currency(value: Any) -> str:
        amount = value if value is not None else 0
        if isinstance(amount, float) and not math.isfinite(amount):
            amount = 0
        return f"{CURRENCY_SYMBOL}{PricingService.to_currency(amount):,.2f}"
