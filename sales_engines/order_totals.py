"""
Order Aggregator - totals for a whole sale.

Pure functions with deterministic behavior. No I/O, no cached state: the
sale form calls ``aggregate`` again after every change and the new result
fully replaces the previous one.

Algorithm:
    1. subtotal = round2(round2(sum of goods line totals)
                         + round2(sum of service line totals))
    2. order discount against the subtotal (percent or fixed, clamped)
    3. additional costs summed as entered (no discount applies to them)
    4. grand total = round2(subtotal - order discount + additional costs)
    5. remaining = grand total - paid amount, NOT clamped; a negative
       remaining is an overpayment and is reported as such
    6. base total = grand total converted at the sale's exchange rate

Usage:
    from sales_engines.order_totals import AdditionalCost, SaleLine, aggregate
    from sales_kernel.domain.dtos import DiscountDescriptor

    totals = aggregate(
        lines=[SaleLine(product_id=1, unit_id=1, unit_price="100", quantity="3",
                        discount=DiscountDescriptor.percent(10))],
        order_discount=DiscountDescriptor.fixed(50),
        additional_costs=[AdditionalCost("shipping", "20")],
        currency="AFN",
    )
    totals.grand_total  # Money: 240.00 AFN
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from sales_engines.discount import line_subtotal, line_total
from sales_engines.discount import order_discount as compute_order_discount
from sales_engines.tracer import traced_engine
from sales_kernel.domain.dtos import DiscountDescriptor, SaleType
from sales_kernel.domain.values import ZERO, Currency, ExchangeRate, Money, round2, to_decimal
from sales_kernel.logging_config import get_logger

logger = get_logger("engines.order_totals")

_ONE = Decimal("1")


def _decimal_or_zero(value: Any) -> Decimal:
    number = to_decimal(value)
    return ZERO if number is None else number


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class SaleLine:
    """
    One goods row of a sale.

    ``batch_id`` is the purchase line of the chosen batch, if any.
    """

    product_id: int | None = None
    unit_id: int | None = None
    unit_price: Decimal = ZERO
    quantity: Decimal = ZERO
    sale_type: SaleType = SaleType.RETAIL
    batch_id: int | None = None
    discount: DiscountDescriptor | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit_price", _decimal_or_zero(self.unit_price))
        object.__setattr__(self, "quantity", _decimal_or_zero(self.quantity))
        object.__setattr__(self, "sale_type", SaleType(self.sale_type))

    @property
    def subtotal(self) -> Decimal:
        return line_subtotal(self.unit_price, self.quantity)

    @property
    def total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity, self.discount)


@dataclass(frozen=True)
class ServiceLine:
    """One service row of a sale. No batch or channel pricing applies."""

    service_id: int | None = None
    name: str = ""
    price: Decimal = ZERO
    quantity: Decimal = ZERO
    discount: DiscountDescriptor | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", _decimal_or_zero(self.price))
        object.__setattr__(self, "quantity", _decimal_or_zero(self.quantity))

    @property
    def subtotal(self) -> Decimal:
        return line_subtotal(self.price, self.quantity)

    @property
    def total(self) -> Decimal:
        return line_total(self.price, self.quantity, self.discount)


@dataclass(frozen=True)
class AdditionalCost:
    """A flat cost added to the order (shipping, packing...)."""

    name: str
    amount: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _decimal_or_zero(self.amount))


@dataclass(frozen=True)
class OrderTotals:
    """
    Derived totals of a sale. Never stored; recomputed on every change.

    Attributes:
        line_totals: Net total of each goods line, in input order
        service_line_totals: Net total of each service line, in input order
        subtotal: Sum of line totals after line discounts
        order_discount: The descriptor that produced order_discount_amount
        order_discount_amount: Order-level discount
        additional_costs_total: Sum of additional costs
        grand_total: Payable total
        paid_amount: Amount paid so far
        remaining_amount: grand_total - paid_amount (may be negative)
        exchange_rate: Rate used for base_total
        base_total: grand_total in the base currency
    """

    line_totals: tuple[Decimal, ...]
    service_line_totals: tuple[Decimal, ...]
    subtotal: Money
    order_discount: DiscountDescriptor | None
    order_discount_amount: Money
    additional_costs_total: Money
    grand_total: Money
    paid_amount: Money
    remaining_amount: Money
    exchange_rate: Decimal
    base_total: Money

    @property
    def is_overpaid(self) -> bool:
        return self.remaining_amount.is_negative

    @property
    def total_after_order_discount(self) -> Money:
        """Subtotal less the order discount, before additional costs."""
        return self.subtotal - self.order_discount_amount


# ============================================================================
# Core Aggregation
# ============================================================================


def _effective_rate(exchange_rate: Any) -> Decimal:
    rate = to_decimal(exchange_rate)
    if rate is None or rate <= ZERO:
        logger.warning("order_totals_invalid_exchange_rate", extra={
            "exchange_rate": str(exchange_rate),
            "fallback_rate": "1",
        })
        return _ONE
    return rate


@traced_engine(
    "order_totals",
    "1.0",
    fingerprint_fields=(
        "lines", "service_lines", "order_discount", "additional_costs", "paid_amount",
    ),
)
def aggregate(
    lines: Sequence[SaleLine] = (),
    service_lines: Sequence[ServiceLine] = (),
    order_discount: DiscountDescriptor | None = None,
    additional_costs: Sequence[AdditionalCost] = (),
    paid_amount: Any = ZERO,
    *,
    currency: str | Currency = "AFN",
    exchange_rate: Any = _ONE,
    base_currency: str | Currency | None = None,
) -> OrderTotals:
    """
    Compute the totals of a sale.

    Pure function - no side effects, no I/O, deterministic output. Raises
    only for an invalid currency code.

    Args:
        lines: Goods lines
        service_lines: Service lines
        order_discount: Manual order discount or the one granted by a code
        additional_costs: Flat costs added after the order discount
        paid_amount: Amount already paid
        currency: Sale currency
        exchange_rate: Sale currency -> base currency (invalid values fall
            back to 1)
        base_currency: Base currency; defaults to the sale currency

    Returns:
        OrderTotals
    """
    t0 = time.monotonic()
    sale_currency = Currency(currency) if isinstance(currency, str) else currency
    logger.debug("order_totals_started", extra={
        "currency": sale_currency.code,
        "line_count": len(lines),
        "service_line_count": len(service_lines),
        "additional_cost_count": len(additional_costs),
        "has_order_discount": order_discount is not None,
    })

    line_totals = tuple(line.total for line in lines)
    service_line_totals = tuple(line.total for line in service_lines)

    goods_total = round2(sum(line_totals, ZERO))
    services_total = round2(sum(service_line_totals, ZERO))
    subtotal = round2(goods_total + services_total)

    discount_amount = compute_order_discount(subtotal, order_discount)
    costs_total = sum((cost.amount for cost in additional_costs), ZERO)
    grand_total = round2(subtotal - discount_amount + costs_total)

    paid = _decimal_or_zero(paid_amount)
    remaining = grand_total - paid

    rate = _effective_rate(exchange_rate)
    grand_money = Money(amount=grand_total, currency=sale_currency)
    conversion = ExchangeRate(
        from_currency=sale_currency,
        to_currency=base_currency or sale_currency,
        rate=rate,
    )

    result = OrderTotals(
        line_totals=line_totals,
        service_line_totals=service_line_totals,
        subtotal=Money(amount=subtotal, currency=sale_currency),
        order_discount=order_discount,
        order_discount_amount=Money(amount=discount_amount, currency=sale_currency),
        additional_costs_total=Money(amount=costs_total, currency=sale_currency),
        grand_total=grand_money,
        paid_amount=Money(amount=paid, currency=sale_currency),
        remaining_amount=Money(amount=remaining, currency=sale_currency),
        exchange_rate=rate,
        base_total=conversion.convert(grand_money),
    )

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.debug("order_totals_completed", extra={
        "currency": sale_currency.code,
        "line_count": len(line_totals),
        "service_line_count": len(service_line_totals),
        "subtotal": str(subtotal),
        "order_discount_amount": str(discount_amount),
        "additional_costs_total": str(costs_total),
        "grand_total": str(grand_total),
        "remaining_amount": str(remaining),
        "overpaid": remaining < ZERO,
        "duration_ms": duration_ms,
    })
    return result
