"""
Line Discount Calculator - discount amount and net total for one sale line.

Pure functions with no I/O. Never raises on numeric input: bad or
negative values are clamped, so totals are always well-defined.

Rounding: every discount amount and every total is rounded to two places
half-up (``round2``). The amount is rounded first and then subtracted, and
the difference is rounded again. This double rounding matches the totals
already printed on stored invoices and must not be collapsed into a single
rounding step.

Usage:
    from sales_engines.discount import line_total
    from sales_kernel.domain.dtos import DiscountDescriptor

    line_total(Decimal("100"), Decimal("3"), DiscountDescriptor.percent(10))
    # Decimal("270.00")
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sales_kernel.domain.dtos import DiscountDescriptor, DiscountKind
from sales_kernel.domain.values import MAX_SUBTOTAL_EXPONENT, ZERO, round2, to_decimal

_HUNDRED = Decimal("100")


def _non_negative(value: Any) -> Decimal:
    number = to_decimal(value)
    if number is None or number < ZERO:
        return ZERO
    return number


def clamp_percent(value: Decimal) -> Decimal:
    """Clamp a percentage into [0, 100]."""
    return min(_HUNDRED, max(ZERO, value))


def line_subtotal(unit_price: Any, quantity: Any) -> Decimal:
    """unit_price * quantity, with negative or non-numeric inputs as zero."""
    return _non_negative(unit_price) * _non_negative(quantity)


def line_discount(subtotal: Any, discount: DiscountDescriptor | None) -> Decimal:
    """
    Discount amount for a line subtotal.

    Returns 0 when the subtotal is not positive, when there is no
    descriptor, or when its value is missing, non-numeric or negative.
    A fixed discount never exceeds the subtotal.
    """
    base = to_decimal(subtotal, MAX_SUBTOTAL_EXPONENT)
    if base is None or base <= ZERO or discount is None or discount.value is None:
        return ZERO

    value = discount.value
    if discount.kind == DiscountKind.PERCENT:
        return round2(base * clamp_percent(value) / _HUNDRED)
    if discount.kind == DiscountKind.FIXED:
        if value <= ZERO:
            return ZERO
        return round2(min(value, base))
    return ZERO


def line_total(
    unit_price: Any,
    quantity: Any,
    discount: DiscountDescriptor | None = None,
) -> Decimal:
    """Net line total after the line discount; always >= 0."""
    subtotal = line_subtotal(unit_price, quantity)
    amount = line_discount(subtotal, discount)
    return round2(subtotal - amount)


def order_discount(subtotal: Any, discount: DiscountDescriptor | None) -> Decimal:
    """
    Order-level discount amount against the order subtotal.

    No descriptor or a value <= 0 means no discount. Percent clamps at 100;
    a fixed amount never exceeds the subtotal.
    """
    if discount is None or discount.value is None or discount.value <= ZERO:
        return ZERO
    return line_discount(subtotal, discount)
