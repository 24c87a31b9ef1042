"""
Module: sales_kernel.models.discount_code
Responsibility: ORM persistence for sale discount codes (coupons).  A code
    grants a percent or fixed order discount, optionally limited by a
    minimum purchase, a validity window and a usage cap.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - code is unique and stored trimmed and upper-cased (service layer).
    - use_count only grows, and only when a sale using the code commits.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import BigInteger, Date, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from sales_kernel.db.base import Base


class SaleDiscountCodeModel(Base):
    """Persistent storage for a discount code."""

    __tablename__ = "sale_discount_codes"

    code: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
    )

    # "percent" or "fixed"
    kind: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    value: Mapped[Decimal] = mapped_column(
        Numeric(18, 4),
        nullable=False,
    )

    min_purchase: Mapped[Decimal] = mapped_column(
        Numeric(18, 4),
        nullable=False,
        default=Decimal("0"),
    )

    valid_from: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    valid_to: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    max_uses: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
    )

    use_count: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<SaleDiscountCode {self.code}: {self.kind} {self.value} "
            f"used={self.use_count}/{self.max_uses}>"
        )
