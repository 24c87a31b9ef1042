"""
Batch Price Resolver - pick a stock batch and its unit price for a sale line.

Pure functions with deterministic behavior. No I/O.

Batches arrive from the inventory side already ordered oldest-first; the
resolver never reorders them. The first batch is the default selection.
Its channel price (retail or wholesale) is the unit price, falling back to
the purchase cost ``per_price`` when the channel price is missing.

Usage:
    from sales_engines.batch_pricing import resolve_price
    from sales_kernel.domain.dtos import BatchSnapshot, SaleType

    batches = [
        BatchSnapshot(batch_id=1, product_id=7, per_price=Decimal("6"),
                      retail_price=Decimal("10"), wholesale_price=Decimal("8")),
        BatchSnapshot(batch_id=2, product_id=7, per_price=Decimal("7"),
                      retail_price=Decimal("12"), wholesale_price=Decimal("9")),
    ]
    price = resolve_price(batches, SaleType.WHOLESALE)
    price.batch_id    # 1
    price.unit_price  # Decimal("8")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from sales_engines.tracer import traced_engine
from sales_kernel.domain.dtos import BatchSnapshot, SaleType
from sales_kernel.logging_config import get_logger

logger = get_logger("engines.batch_pricing")


@dataclass(frozen=True)
class BatchPrice:
    """The batch chosen for a line and the unit price it implies."""

    batch_id: int
    unit_price: Decimal
    sale_type: SaleType
    used_fallback: bool = False


def _batch_price(batch: BatchSnapshot, sale_type: SaleType) -> BatchPrice:
    channel_price = (
        batch.retail_price if sale_type == SaleType.RETAIL else batch.wholesale_price
    )
    return BatchPrice(
        batch_id=batch.batch_id,
        unit_price=batch.per_price if channel_price is None else channel_price,
        sale_type=sale_type,
        used_fallback=channel_price is None,
    )


def price_for_batch(batch: BatchSnapshot, sale_type: SaleType | str) -> Decimal:
    """
    Unit price of one batch for a sale channel.

    The purchase cost is only a fallback; it is never discounted or read
    as a margin.
    """
    return _batch_price(batch, SaleType(sale_type)).unit_price


@traced_engine("batch_pricing", "1.0", fingerprint_fields=("batches", "sale_type"))
def resolve_price(
    batches: Sequence[BatchSnapshot],
    sale_type: SaleType | str,
) -> BatchPrice | None:
    """
    Default batch selection and price for a freshly chosen product.

    Returns None when there are no batches; the caller then keeps whatever
    unit price the line already has.
    """
    channel = SaleType(sale_type)
    if not batches:
        logger.debug("batch_price_no_batches", extra={"sale_type": channel.value})
        return None

    result = _batch_price(batches[0], channel)
    logger.debug("batch_price_resolved", extra={
        "batch_id": result.batch_id,
        "sale_type": channel.value,
        "unit_price": str(result.unit_price),
        "used_fallback": result.used_fallback,
        "batch_count": len(batches),
    })
    return result


def reprice_for_batch(
    batches: Sequence[BatchSnapshot],
    batch_id: int | None,
    sale_type: SaleType | str,
) -> BatchPrice | None:
    """
    Price of a specific batch already chosen for a line.

    Used when the user picks a different batch, and when the sale type of a
    line with a chosen batch changes: the selection stays the same and only
    the price follows. Returns None when the batch is not in the list.
    """
    if batch_id is None:
        return None
    channel = SaleType(sale_type)
    for batch in batches:
        if batch.batch_id == batch_id:
            return _batch_price(batch, channel)

    logger.warning("batch_price_unknown_batch", extra={
        "batch_id": batch_id,
        "offered_batch_ids": [b.batch_id for b in batches],
    })
    return None
