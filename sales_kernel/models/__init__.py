"""ORM models for the sales kernel."""

from sales_kernel.models.batch import ProductBatchModel
from sales_kernel.models.discount_code import SaleDiscountCodeModel

__all__ = [
    "ProductBatchModel",
    "SaleDiscountCodeModel",
]
