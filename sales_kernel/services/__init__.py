"""Services for the sales kernel (write side)."""

from sales_kernel.services.base import BaseService

__all__ = [
    "BaseService",
]
