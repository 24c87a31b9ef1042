"""
Pure domain layer.

Data transfer objects and value types with NO dependencies on the ORM,
the database, the clock or any I/O. All objects are immutable.
"""

from sales_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from sales_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from sales_kernel.domain.dtos import (
    BatchSnapshot,
    DiscountCodeSnapshot,
    DiscountDescriptor,
    DiscountKind,
    SaleType,
)
from sales_kernel.domain.values import (
    Currency,
    ExchangeRate,
    Money,
    round2,
    to_decimal,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "CurrencyInfo",
    "CurrencyRegistry",
    "BatchSnapshot",
    "DiscountCodeSnapshot",
    "DiscountDescriptor",
    "DiscountKind",
    "SaleType",
    "Currency",
    "ExchangeRate",
    "Money",
    "round2",
    "to_decimal",
]
