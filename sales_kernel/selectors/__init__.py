"""Selectors for the sales kernel (read side)."""

from sales_kernel.selectors.batch_selector import BatchSelector
from sales_kernel.selectors.discount_code_selector import (
    DiscountCodeSelector,
    normalize_code,
)

__all__ = [
    "BatchSelector",
    "DiscountCodeSelector",
    "normalize_code",
]
