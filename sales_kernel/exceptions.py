"""
Typed exception hierarchy for the sales kernel.

Callers catch by type and read structured attributes instead of parsing
messages. Every class carries a machine-readable ``code``.

    SalesKernelError (base)
    |
    +-- DiscountCodeError
    |   +-- DiscountCodeNotFoundError
    |   +-- DiscountCodeNotActiveError
    |   +-- DiscountCodeExpiredError
    |   +-- DiscountCodeMinimumNotMetError
    |   +-- DiscountCodeExhaustedError
    |   +-- DuplicateDiscountCodeError
    |   +-- InvalidDiscountCodeError
    |
    +-- BatchError
    |   +-- BatchNotFoundError
    |
    +-- SaleError
        +-- SaleValidationError
        +-- SaleLineNotFoundError

Error codes:

Category        | Code                          | When raised
----------------|-------------------------------|------------------------------------
Discount code   | DISCOUNT_CODE_NOT_FOUND       | No code with that name
                | DISCOUNT_CODE_NOT_ACTIVE      | Today is before valid_from
                | DISCOUNT_CODE_EXPIRED         | Today is after valid_to
                | DISCOUNT_CODE_MINIMUM_NOT_MET | Subtotal below min_purchase
                | DISCOUNT_CODE_EXHAUSTED       | use_count reached max_uses
                | DUPLICATE_DISCOUNT_CODE       | Code name already stored
                | INVALID_DISCOUNT_CODE         | Bad admin input (empty, bad kind)
----------------|-------------------------------|------------------------------------
Batch           | BATCH_NOT_FOUND               | Picked batch not offered for product
----------------|-------------------------------|------------------------------------
Sale            | SALE_VALIDATION_FAILED        | Sale not submittable
                | SALE_LINE_NOT_FOUND           | Line index out of range

Pure arithmetic in ``sales_engines`` never raises these; numeric edge cases
are clamped instead.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any


class SalesKernelError(Exception):
    """
    Base exception for all sales kernel errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "SALES_KERNEL_ERROR"


# Discount-code exceptions


class DiscountCodeError(SalesKernelError):
    """Base exception for discount code failures."""

    code: str = "DISCOUNT_CODE_ERROR"


class DiscountCodeNotFoundError(DiscountCodeError):
    """No discount code with the given name exists."""

    code: str = "DISCOUNT_CODE_NOT_FOUND"

    def __init__(self, discount_code: str):
        self.discount_code = discount_code
        super().__init__(f"Discount code not found: {discount_code}")


class DiscountCodeNotActiveError(DiscountCodeError):
    """The code's validity window has not started yet."""

    code: str = "DISCOUNT_CODE_NOT_ACTIVE"

    def __init__(self, discount_code: str, valid_from: date, on_date: date):
        self.discount_code = discount_code
        self.valid_from = str(valid_from)
        self.on_date = str(on_date)
        super().__init__(
            f"Discount code {discount_code} is valid from {valid_from}, "
            f"not on {on_date}"
        )


class DiscountCodeExpiredError(DiscountCodeError):
    """The code's validity window has ended."""

    code: str = "DISCOUNT_CODE_EXPIRED"

    def __init__(self, discount_code: str, valid_to: date, on_date: date):
        self.discount_code = discount_code
        self.valid_to = str(valid_to)
        self.on_date = str(on_date)
        super().__init__(
            f"Discount code {discount_code} expired on {valid_to}"
        )


class DiscountCodeMinimumNotMetError(DiscountCodeError):
    """Order subtotal is below the code's minimum purchase amount."""

    code: str = "DISCOUNT_CODE_MINIMUM_NOT_MET"

    def __init__(self, discount_code: str, min_purchase: Decimal, subtotal: Decimal):
        self.discount_code = discount_code
        self.min_purchase = str(min_purchase)
        self.subtotal = str(subtotal)
        super().__init__(
            f"Discount code {discount_code} requires a minimum purchase of "
            f"{min_purchase}, subtotal is {subtotal}"
        )


class DiscountCodeExhaustedError(DiscountCodeError):
    """The code has reached its usage cap."""

    code: str = "DISCOUNT_CODE_EXHAUSTED"

    def __init__(self, discount_code: str, max_uses: int, use_count: int):
        self.discount_code = discount_code
        self.max_uses = max_uses
        self.use_count = use_count
        super().__init__(
            f"Discount code {discount_code} has been used {use_count} of "
            f"{max_uses} times"
        )


class DuplicateDiscountCodeError(DiscountCodeError):
    """A discount code with the same name is already stored."""

    code: str = "DUPLICATE_DISCOUNT_CODE"

    def __init__(self, discount_code: str):
        self.discount_code = discount_code
        super().__init__(f"Discount code already exists: {discount_code}")


class InvalidDiscountCodeError(DiscountCodeError):
    """Administrative input for a discount code is invalid."""

    code: str = "INVALID_DISCOUNT_CODE"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid discount code {field}: {reason}")


# Batch exceptions


class BatchError(SalesKernelError):
    """Base exception for batch selection errors."""

    code: str = "BATCH_ERROR"


class BatchNotFoundError(BatchError):
    """The chosen batch is not among the batches offered for the product."""

    code: str = "BATCH_NOT_FOUND"

    def __init__(self, product_id: Any, batch_id: Any):
        self.product_id = product_id
        self.batch_id = batch_id
        super().__init__(
            f"Batch {batch_id} is not available for product {product_id}"
        )


# Sale exceptions


class SaleError(SalesKernelError):
    """Base exception for sale-level errors."""

    code: str = "SALE_ERROR"


class SaleValidationError(SaleError):
    """
    The sale is not submittable.

    ``findings`` holds the individual validation findings so the caller can
    surface one message per offending line.
    """

    code: str = "SALE_VALIDATION_FAILED"

    def __init__(self, findings: tuple[Any, ...]):
        self.findings = findings
        self.finding_count = len(findings)
        reasons = "; ".join(str(f) for f in findings)
        super().__init__(f"Sale is not submittable: {reasons}")


class SaleLineNotFoundError(SaleError):
    """Line index is outside the draft's line list."""

    code: str = "SALE_LINE_NOT_FOUND"

    def __init__(self, line_kind: str, index: int):
        self.line_kind = line_kind
        self.index = index
        super().__init__(f"No {line_kind} line at index {index}")
