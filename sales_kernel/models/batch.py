"""
Module: sales_kernel.models.batch
Responsibility: ORM persistence for product stock batches (lots).  Each row
    is the stock received on one purchase line, with its own cost, channel
    prices, remaining quantity and optional expiry.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - purchase_item_id is unique: one batch per purchase line.
    - (product_id, purchase_date, purchase_item_id) index supports the
      oldest-first ordering the sale form relies on.

Non-goals:
    - The pricing core never writes to this table.  Purchases create rows
      and sale commits decrement remaining_quantity elsewhere.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import BigInteger, Date, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from sales_kernel.db.base import Base


class ProductBatchModel(Base):
    """Persistent storage for a product batch."""

    __tablename__ = "product_batches"

    __table_args__ = (
        Index("idx_batch_product_fifo", "product_id", "purchase_date", "purchase_item_id"),
    )

    purchase_item_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
    )

    purchase_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    product_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    batch_number: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    purchase_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    expiry_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    # Purchase cost per unit; fallback for missing channel prices
    per_price: Mapped[Decimal] = mapped_column(
        Numeric(18, 4),
        nullable=False,
    )

    retail_price: Mapped[Decimal | None] = mapped_column(
        Numeric(18, 4),
        nullable=True,
    )

    wholesale_price: Mapped[Decimal | None] = mapped_column(
        Numeric(18, 4),
        nullable=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(18, 4),
        nullable=False,
    )

    remaining_quantity: Mapped[Decimal] = mapped_column(
        Numeric(18, 4),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<ProductBatch {self.purchase_item_id}: product={self.product_id} "
            f"remaining={self.remaining_quantity} @ {self.per_price}>"
        )
