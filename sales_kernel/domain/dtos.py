"""
DTOs -- Frozen data shapes shared by selectors, engines and services.

Selectors build these from ORM rows; engines consume them. Nothing here
performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sales_kernel.domain.values import ZERO, to_decimal


class SaleType(str, Enum):
    """Pricing channel selected per sale line."""

    RETAIL = "retail"
    WHOLESALE = "wholesale"


class DiscountKind(str, Enum):
    """How a discount value is interpreted."""

    PERCENT = "percent"
    FIXED = "fixed"


@dataclass(frozen=True)
class DiscountDescriptor:
    """
    A discount to apply against a subtotal.

    ``value`` is coerced to Decimal; anything non-numeric becomes None,
    which the calculators treat as "no discount".
    """

    kind: DiscountKind
    value: Decimal | None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", DiscountKind(self.kind))
        object.__setattr__(self, "value", to_decimal(self.value))

    @classmethod
    def percent(cls, value: Any) -> DiscountDescriptor:
        return cls(kind=DiscountKind.PERCENT, value=value)

    @classmethod
    def fixed(cls, value: Any) -> DiscountDescriptor:
        return cls(kind=DiscountKind.FIXED, value=value)

    @classmethod
    def from_form(cls, kind: str | None, value: Any) -> DiscountDescriptor | None:
        """
        Build a descriptor from raw form fields.

        An empty or unrecognised kind means the user picked no discount.
        """
        if not kind:
            return None
        try:
            discount_kind = DiscountKind(str(kind).strip().lower())
        except ValueError:
            return None
        return cls(kind=discount_kind, value=value)


@dataclass(frozen=True)
class BatchSnapshot:
    """
    Read-only view of one stock batch (lot) of a product.

    ``batch_id`` identifies the purchase line the batch came from.
    ``per_price`` is the purchase cost and the fallback for a missing
    channel price.
    """

    batch_id: int
    product_id: int
    per_price: Decimal
    remaining_quantity: Decimal = ZERO
    retail_price: Decimal | None = None
    wholesale_price: Decimal | None = None
    purchase_date: date | None = None
    expiry_date: date | None = None
    batch_number: str | None = None

    def __post_init__(self) -> None:
        per_price = to_decimal(self.per_price)
        if per_price is None:
            raise ValueError(f"per_price must be numeric, got {self.per_price!r}")
        object.__setattr__(self, "per_price", per_price)
        object.__setattr__(
            self, "remaining_quantity", to_decimal(self.remaining_quantity) or ZERO
        )
        for attr in ("retail_price", "wholesale_price"):
            val = getattr(self, attr)
            if val is not None:
                object.__setattr__(self, attr, to_decimal(val))


@dataclass(frozen=True)
class DiscountCodeSnapshot:
    """A stored discount code as seen by the validator."""

    code: str
    kind: DiscountKind
    value: Decimal
    min_purchase: Decimal = ZERO
    valid_from: date | None = None
    valid_to: date | None = None
    max_uses: int | None = None
    use_count: int = 0
    code_id: UUID | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", DiscountKind(self.kind))
        object.__setattr__(self, "value", to_decimal(self.value) or ZERO)
        object.__setattr__(self, "min_purchase", to_decimal(self.min_purchase) or ZERO)

    @property
    def descriptor(self) -> DiscountDescriptor:
        """The order discount this code grants."""
        return DiscountDescriptor(kind=self.kind, value=self.value)
