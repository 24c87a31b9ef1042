"""
Module: sales_kernel.selectors.discount_code_selector
Responsibility: Read-only access to stored discount codes.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Lookups normalize the code (trim + upper-case) the same way the
      service stores it, so "  summer10 " finds "SUMMER10".
"""

from uuid import UUID

from sqlalchemy import select

from sales_kernel.domain.dtos import DiscountCodeSnapshot
from sales_kernel.models.discount_code import SaleDiscountCodeModel
from sales_kernel.selectors.base import BaseSelector


def normalize_code(code: str | None) -> str:
    """Canonical stored form of a discount code."""
    return (code or "").strip().upper()


class DiscountCodeSelector(BaseSelector[SaleDiscountCodeModel]):
    """Read side of the discount code store."""

    def get_by_code(self, code: str) -> DiscountCodeSnapshot | None:
        normalized = normalize_code(code)
        if not normalized:
            return None
        stmt = select(SaleDiscountCodeModel).where(
            SaleDiscountCodeModel.code == normalized
        )
        row = self.session.execute(stmt).scalar_one_or_none()
        return self.to_dto(row) if row is not None else None

    def get(self, code_id: UUID) -> DiscountCodeSnapshot | None:
        row = self.session.get(SaleDiscountCodeModel, code_id)
        return self.to_dto(row) if row is not None else None

    def list_codes(self, search: str | None = None) -> list[DiscountCodeSnapshot]:
        """All codes ordered by name, optionally filtered by a substring."""
        stmt = select(SaleDiscountCodeModel).order_by(SaleDiscountCodeModel.code.asc())
        needle = normalize_code(search)
        if needle:
            stmt = stmt.where(SaleDiscountCodeModel.code.contains(needle))
        return [self.to_dto(row) for row in self.session.execute(stmt).scalars().all()]

    @staticmethod
    def to_dto(row: SaleDiscountCodeModel) -> DiscountCodeSnapshot:
        return DiscountCodeSnapshot(
            code_id=row.id,
            code=row.code,
            kind=row.kind,
            value=row.value,
            min_purchase=row.min_purchase,
            valid_from=row.valid_from,
            valid_to=row.valid_to,
            max_uses=row.max_uses,
            use_count=row.use_count,
        )
