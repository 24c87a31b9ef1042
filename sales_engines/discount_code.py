"""
Discount Code Check - decide whether a stored code applies to a sale.

Pure function over a ``DiscountCodeSnapshot``; the lookup itself is done
by the caller (see ``sales_services.discount_code_service``). The result
carries a rejection reason instead of raising so callers can choose how
to surface it.

Checks run in a fixed order and the first failure wins:
    1. the code exists
    2. on_date >= valid_from (when set)
    3. on_date <= valid_to (when set)
    4. subtotal >= min_purchase
    5. use_count < max_uses (when set)

A successful check never increments ``use_count``; that happens when the
sale is committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from sales_engines.tracer import traced_engine
from sales_kernel.domain.dtos import DiscountCodeSnapshot, DiscountDescriptor
from sales_kernel.domain.values import MAX_SUBTOTAL_EXPONENT, ZERO, to_decimal
from sales_kernel.logging_config import get_logger

logger = get_logger("engines.discount_code")


class DiscountCodeRejection(str, Enum):
    NOT_FOUND = "not_found"
    NOT_ACTIVE = "not_active"
    EXPIRED = "expired"
    MINIMUM_NOT_MET = "minimum_not_met"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class DiscountCodeCheck:
    """Outcome of a discount code check."""

    accepted: bool
    code: str | None = None
    descriptor: DiscountDescriptor | None = None
    rejection: DiscountCodeRejection | None = None
    snapshot: DiscountCodeSnapshot | None = None

    @classmethod
    def accept(cls, snapshot: DiscountCodeSnapshot) -> DiscountCodeCheck:
        return cls(
            accepted=True,
            code=snapshot.code,
            descriptor=snapshot.descriptor,
            snapshot=snapshot,
        )

    @classmethod
    def reject(
        cls,
        rejection: DiscountCodeRejection,
        snapshot: DiscountCodeSnapshot | None = None,
    ) -> DiscountCodeCheck:
        return cls(
            accepted=False,
            code=snapshot.code if snapshot is not None else None,
            rejection=rejection,
            snapshot=snapshot,
        )


def _rejection_for(
    snapshot: DiscountCodeSnapshot | None,
    subtotal: Decimal,
    on_date: date,
) -> DiscountCodeRejection | None:
    if snapshot is None:
        return DiscountCodeRejection.NOT_FOUND
    if snapshot.valid_from is not None and on_date < snapshot.valid_from:
        return DiscountCodeRejection.NOT_ACTIVE
    if snapshot.valid_to is not None and on_date > snapshot.valid_to:
        return DiscountCodeRejection.EXPIRED
    if subtotal < snapshot.min_purchase:
        return DiscountCodeRejection.MINIMUM_NOT_MET
    if snapshot.max_uses is not None and snapshot.use_count >= snapshot.max_uses:
        return DiscountCodeRejection.EXHAUSTED
    return None


@traced_engine(
    "discount_code", "1.0", fingerprint_fields=("snapshot", "subtotal", "on_date"),
)
def check_discount_code(
    snapshot: DiscountCodeSnapshot | None,
    subtotal: Any,
    on_date: date,
) -> DiscountCodeCheck:
    """
    Check a discount code against the current order subtotal.

    A non-numeric subtotal counts as zero. The validity window is
    inclusive on both ends and compared by calendar date.
    """
    amount = to_decimal(subtotal, MAX_SUBTOTAL_EXPONENT)
    if amount is None:
        amount = ZERO

    rejection = _rejection_for(snapshot, amount, on_date)
    if rejection is None:
        result = DiscountCodeCheck.accept(snapshot)
    else:
        result = DiscountCodeCheck.reject(rejection, snapshot)

    logger.debug("discount_code_checked", extra={
        "discount_code": result.code,
        "accepted": result.accepted,
        "rejection": rejection.value if rejection else None,
        "subtotal": str(amount),
        "on_date": on_date.isoformat(),
    })
    return result
