"""
Module: sales_kernel.selectors.batch_selector
Responsibility: Read-only access to a product's stock batches, in the order
    the sale form offers them (oldest first).
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Only batches with remaining stock are returned.
    - Ordering is purchase_date ascending, then purchase_item_id ascending,
      so ties on the same day stay deterministic.

Failure modes:
    - Returns an empty list when the product has no stock; never raises on
      absence of data.
"""

from sqlalchemy import select

from sales_kernel.domain.dtos import BatchSnapshot
from sales_kernel.logging_config import get_logger
from sales_kernel.models.batch import ProductBatchModel
from sales_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.batch")


class BatchSelector(BaseSelector[ProductBatchModel]):
    """Batch provider for the sale form."""

    def get_batches(self, product_id: int) -> list[BatchSnapshot]:
        """All in-stock batches for a product, oldest first."""
        stmt = (
            select(ProductBatchModel)
            .where(
                ProductBatchModel.product_id == product_id,
                ProductBatchModel.remaining_quantity > 0,
            )
            .order_by(
                ProductBatchModel.purchase_date.asc(),
                ProductBatchModel.purchase_item_id.asc(),
            )
        )
        rows = self.session.execute(stmt).scalars().all()

        logger.debug("batches_loaded", extra={
            "product_id": product_id,
            "batch_count": len(rows),
        })
        return [self._to_dto(row) for row in rows]

    def get_batch(self, batch_id: int) -> BatchSnapshot | None:
        """A single batch by its purchase line id, or None."""
        stmt = select(ProductBatchModel).where(
            ProductBatchModel.purchase_item_id == batch_id
        )
        row = self.session.execute(stmt).scalar_one_or_none()
        return self._to_dto(row) if row is not None else None

    @staticmethod
    def _to_dto(row: ProductBatchModel) -> BatchSnapshot:
        return BatchSnapshot(
            batch_id=row.purchase_item_id,
            product_id=row.product_id,
            per_price=row.per_price,
            remaining_quantity=row.remaining_quantity,
            retail_price=row.retail_price,
            wholesale_price=row.wholesale_price,
            purchase_date=row.purchase_date,
            expiry_date=row.expiry_date,
            batch_number=row.batch_number,
        )
