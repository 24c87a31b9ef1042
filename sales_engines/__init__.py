"""
Module: sales_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    pricing engines. This is the import surface for sales_services and
    the quote script.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sales_kernel.domain, sales_kernel.exceptions and
    sales_kernel.logging_config (and sibling engine modules).
    MUST NOT import sales_services or touch the database.

Invariants enforced:
    - Purity: engines never read the clock. The discount code check takes
      ``on_date`` from its caller.
    - Decimal-only arithmetic, rounded with ``round2`` (half-up, 0.01).
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Engine entry points are wrapped with ``@traced_engine`` (see
    ``sales_engines.tracer``), emitting SALES_ENGINE_TRACE records.

Usage:
    from sales_engines import aggregate, resolve_price, line_total
"""

from sales_kernel.logging_config import get_logger

logger = get_logger("engines")

from sales_engines.batch_pricing import (
    BatchPrice,
    price_for_batch,
    reprice_for_batch,
    resolve_price,
)
from sales_engines.discount import (
    clamp_percent,
    line_discount,
    line_subtotal,
    line_total,
    order_discount,
)
from sales_engines.discount_code import (
    DiscountCodeCheck,
    DiscountCodeRejection,
    check_discount_code,
)
from sales_engines.order_totals import (
    AdditionalCost,
    OrderTotals,
    SaleLine,
    ServiceLine,
    aggregate,
)
from sales_engines.sale_validation import (
    FindingReason,
    LineKind,
    SaleValidationFinding,
    ensure_sale_submittable,
    validate_sale_for_commit,
)
from sales_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Batch pricing
    "BatchPrice",
    "price_for_batch",
    "reprice_for_batch",
    "resolve_price",
    # Discount
    "clamp_percent",
    "line_discount",
    "line_subtotal",
    "line_total",
    "order_discount",
    # Discount codes
    "DiscountCodeCheck",
    "DiscountCodeRejection",
    "check_discount_code",
    # Order totals
    "AdditionalCost",
    "OrderTotals",
    "SaleLine",
    "ServiceLine",
    "aggregate",
    # Sale validation
    "FindingReason",
    "LineKind",
    "SaleValidationFinding",
    "ensure_sale_submittable",
    "validate_sale_for_commit",
    # Tracing
    "compute_input_fingerprint",
    "traced_engine",
]
