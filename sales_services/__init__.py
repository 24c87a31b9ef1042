"""
sales_services -- Package init and public API.

Responsibility:
    Stateful orchestration over the pure pricing engines: the sale draft
    that backs the sale form, discount code administration and checks, and
    the event channel the form subscribes to.

Architecture position:
    Services -- the only layer that holds database sessions or reads the
    clock.

    Dependency direction:
        sales_services/ -> sales_engines/  (allowed)
        sales_services/ -> sales_kernel/   (allowed)
        sales_engines/  -> sales_services/ (FORBIDDEN)
        sales_kernel/   -> sales_services/ (FORBIDDEN)
"""

from sales_kernel.logging_config import get_logger

logger = get_logger("services")

from sales_services.discount_code_service import DiscountCodeService
from sales_services.events import DISCOUNT_CODE_REJECTED, TOTALS_CHANGED, SaleEventBus
from sales_services.sale_draft import (
    DiscountCodeRejectedEvent,
    SaleDraft,
    SelectionTicket,
)

__all__ = [
    "DISCOUNT_CODE_REJECTED",
    "DiscountCodeRejectedEvent",
    "DiscountCodeService",
    "SaleDraft",
    "SaleEventBus",
    "SelectionTicket",
    "TOTALS_CHANGED",
]
