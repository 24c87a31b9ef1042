"""
DiscountCodeService - store-backed discount code administration and checks.

Responsibility:
    Create, update and delete discount codes; validate a code entered on a
    sale against the current subtotal; record a use when the sale commits.

Architecture position:
    Services -- may import sales_kernel and sales_engines. Flushes, never
    commits; the caller owns the transaction.

Invariants enforced:
    - Codes are stored trimmed and upper-cased and are unique.
    - ``validate_code`` never changes ``use_count``; only ``record_use`` does,
      and it refuses to go past ``max_uses``.
    - Validity windows are compared against the injected clock's date.

Failure modes:
    - DiscountCodeNotFoundError / NotActive / Expired / MinimumNotMet /
      Exhausted from ``validate_code``, so callers can tell them apart.
    - DuplicateDiscountCodeError on create or rename to an existing code.
    - InvalidDiscountCodeError for empty codes, unknown kinds, negative
      values or an inverted validity window.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from sales_engines.discount_code import DiscountCodeRejection, check_discount_code
from sales_kernel.domain.clock import Clock, SystemClock
from sales_kernel.domain.dtos import DiscountCodeSnapshot, DiscountDescriptor, DiscountKind
from sales_kernel.domain.values import MAX_SUBTOTAL_EXPONENT, ZERO, to_decimal
from sales_kernel.exceptions import (
    DiscountCodeExhaustedError,
    DiscountCodeExpiredError,
    DiscountCodeMinimumNotMetError,
    DiscountCodeNotActiveError,
    DiscountCodeNotFoundError,
    DuplicateDiscountCodeError,
    InvalidDiscountCodeError,
)
from sales_kernel.logging_config import get_logger
from sales_kernel.models.discount_code import SaleDiscountCodeModel
from sales_kernel.selectors.discount_code_selector import (
    DiscountCodeSelector,
    normalize_code,
)
from sales_kernel.services.base import BaseService

logger = get_logger("services.discount_code")

_UNSET: Any = object()


def _require_code(code: str | None) -> str:
    normalized = normalize_code(code)
    if not normalized:
        raise InvalidDiscountCodeError("code", "must not be empty")
    return normalized


def _require_kind(kind: Any) -> DiscountKind:
    try:
        return DiscountKind(str(kind).strip().lower())
    except ValueError:
        raise InvalidDiscountCodeError(
            "kind", f"must be 'percent' or 'fixed', got {kind!r}"
        ) from None


def _require_amount(field: str, value: Any) -> Decimal:
    amount = to_decimal(value)
    if amount is None:
        raise InvalidDiscountCodeError(field, f"must be numeric, got {value!r}")
    if amount < ZERO:
        raise InvalidDiscountCodeError(field, "must not be negative")
    return amount


def _require_max_uses(max_uses: int | None) -> int | None:
    if max_uses is None:
        return None
    if isinstance(max_uses, bool) or not isinstance(max_uses, int) or max_uses < 0:
        raise InvalidDiscountCodeError(
            "max_uses", f"must be a non-negative integer, got {max_uses!r}"
        )
    return max_uses


def _require_window(valid_from: date | None, valid_to: date | None) -> None:
    if valid_from is not None and valid_to is not None and valid_from > valid_to:
        raise InvalidDiscountCodeError(
            "valid_to", f"{valid_to} is before valid_from {valid_from}"
        )


class DiscountCodeService(BaseService[SaleDiscountCodeModel]):
    """
    Service for discount codes.

    All public methods return DiscountCodeSnapshot DTOs or descriptors,
    not ORM rows.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._selector = DiscountCodeSelector(session)

    def _get_row(self, code_id: UUID) -> SaleDiscountCodeModel:
        row = self.session.get(SaleDiscountCodeModel, code_id)
        if row is None:
            raise DiscountCodeNotFoundError(str(code_id))
        return row

    # =========================================================================
    # Administration
    # =========================================================================

    def create_code(
        self,
        code: str,
        kind: DiscountKind | str,
        value: Any,
        min_purchase: Any = ZERO,
        valid_from: date | None = None,
        valid_to: date | None = None,
        max_uses: int | None = None,
    ) -> DiscountCodeSnapshot:
        """
        Store a new discount code.

        Raises:
            InvalidDiscountCodeError: If any field is invalid.
            DuplicateDiscountCodeError: If the code already exists.
        """
        normalized = _require_code(code)
        discount_kind = _require_kind(kind)
        amount = _require_amount("value", value)
        minimum = _require_amount("min_purchase", min_purchase)
        uses = _require_max_uses(max_uses)
        _require_window(valid_from, valid_to)

        if self._selector.get_by_code(normalized) is not None:
            raise DuplicateDiscountCodeError(normalized)

        row = SaleDiscountCodeModel(
            code=normalized,
            kind=discount_kind.value,
            value=amount,
            min_purchase=minimum,
            valid_from=valid_from,
            valid_to=valid_to,
            max_uses=uses,
            use_count=0,
            created_at=self._clock.now(),
        )
        self.session.add(row)
        self.session.flush()

        logger.info("discount_code_created", extra={
            "discount_code": normalized,
            "kind": discount_kind.value,
            "value": str(amount),
            "min_purchase": str(minimum),
            "max_uses": uses,
        })
        return DiscountCodeSelector.to_dto(row)

    def update_code(
        self,
        code_id: UUID,
        *,
        code: str = _UNSET,
        kind: DiscountKind | str = _UNSET,
        value: Any = _UNSET,
        min_purchase: Any = _UNSET,
        valid_from: date | None = _UNSET,
        valid_to: date | None = _UNSET,
        max_uses: int | None = _UNSET,
    ) -> DiscountCodeSnapshot:
        """
        Update the given fields of a stored code.

        Omitted fields keep their value; passing None for ``valid_from``,
        ``valid_to`` or ``max_uses`` clears the limit. ``use_count`` is not
        editable here.
        """
        row = self._get_row(code_id)

        if code is not _UNSET:
            normalized = _require_code(code)
            existing = self._selector.get_by_code(normalized)
            if existing is not None and existing.code_id != row.id:
                raise DuplicateDiscountCodeError(normalized)
            row.code = normalized
        if kind is not _UNSET:
            row.kind = _require_kind(kind).value
        if value is not _UNSET:
            row.value = _require_amount("value", value)
        if min_purchase is not _UNSET:
            row.min_purchase = _require_amount("min_purchase", min_purchase)
        if max_uses is not _UNSET:
            row.max_uses = _require_max_uses(max_uses)

        new_from = row.valid_from if valid_from is _UNSET else valid_from
        new_to = row.valid_to if valid_to is _UNSET else valid_to
        _require_window(new_from, new_to)
        row.valid_from = new_from
        row.valid_to = new_to

        self.session.flush()
        logger.info("discount_code_updated", extra={
            "code_id": str(row.id),
            "discount_code": row.code,
        })
        return DiscountCodeSelector.to_dto(row)

    def delete_code(self, code_id: UUID) -> None:
        """Delete a stored code. Raises DiscountCodeNotFoundError if absent."""
        row = self._get_row(code_id)
        self.session.delete(row)
        self.session.flush()
        logger.info("discount_code_deleted", extra={
            "code_id": str(code_id),
            "discount_code": row.code,
        })

    # =========================================================================
    # Sale-time checks
    # =========================================================================

    def validate_code(self, code: str, subtotal: Any) -> DiscountDescriptor:
        """
        Check a code entered on a sale against the order subtotal.

        Args:
            code: Code as typed; trimmed and upper-cased before lookup.
            subtotal: Current order subtotal.

        Returns:
            The order discount descriptor the code grants.

        Raises:
            DiscountCodeNotFoundError: No such code.
            DiscountCodeNotActiveError: Today is before valid_from.
            DiscountCodeExpiredError: Today is after valid_to.
            DiscountCodeMinimumNotMetError: Subtotal below min_purchase.
            DiscountCodeExhaustedError: use_count reached max_uses.
        """
        normalized = normalize_code(code)
        snapshot = self._selector.get_by_code(normalized)
        on_date = self._clock.today()
        result = check_discount_code(snapshot, subtotal, on_date)

        if result.accepted:
            logger.info("discount_code_accepted", extra={
                "discount_code": normalized,
                "kind": result.descriptor.kind.value,
                "value": str(result.descriptor.value),
            })
            return result.descriptor

        logger.info("discount_code_rejected", extra={
            "discount_code": normalized,
            "rejection": result.rejection.value,
            "subtotal": str(subtotal),
        })
        raise self._rejection_error(normalized, result.rejection, snapshot, subtotal, on_date)

    @staticmethod
    def _rejection_error(
        code: str,
        rejection: DiscountCodeRejection,
        snapshot: DiscountCodeSnapshot | None,
        subtotal: Any,
        on_date: date,
    ) -> Exception:
        if rejection == DiscountCodeRejection.NOT_FOUND:
            return DiscountCodeNotFoundError(code)
        if rejection == DiscountCodeRejection.NOT_ACTIVE:
            return DiscountCodeNotActiveError(code, snapshot.valid_from, on_date)
        if rejection == DiscountCodeRejection.EXPIRED:
            return DiscountCodeExpiredError(code, snapshot.valid_to, on_date)
        if rejection == DiscountCodeRejection.MINIMUM_NOT_MET:
            return DiscountCodeMinimumNotMetError(
                code,
                snapshot.min_purchase,
                to_decimal(subtotal, MAX_SUBTOTAL_EXPONENT) or ZERO,
            )
        return DiscountCodeExhaustedError(code, snapshot.max_uses, snapshot.use_count)

    def record_use(self, code: str) -> DiscountCodeSnapshot:
        """
        Count one use of a code. Called when the sale using it is committed.

        Raises:
            DiscountCodeNotFoundError: No such code.
            DiscountCodeExhaustedError: The cap is already reached.
        """
        normalized = normalize_code(code)
        snapshot = self._selector.get_by_code(normalized)
        if snapshot is None:
            raise DiscountCodeNotFoundError(normalized)

        row = self._get_row(snapshot.code_id)
        if row.max_uses is not None and row.use_count >= row.max_uses:
            raise DiscountCodeExhaustedError(normalized, row.max_uses, row.use_count)

        row.use_count += 1
        self.session.flush()
        logger.info("discount_code_used", extra={
            "discount_code": normalized,
            "use_count": row.use_count,
            "max_uses": row.max_uses,
        })
        return DiscountCodeSelector.to_dto(row)
