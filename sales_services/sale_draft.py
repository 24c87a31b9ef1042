"""
SaleDraft -- in-memory state of the sale form.

Responsibility:
    Holds the lines, service lines, additional costs, order discount and
    payment of a sale being entered, and recomputes its totals from
    scratch (``sales_engines.order_totals.aggregate``) after every change.

Architecture position:
    Services -- orchestrates pure engines with two injected collaborators:
    a batch provider (``get_batches(product_id)``, e.g. BatchSelector) and
    a discount code validator (``validate_code(code, subtotal)``, e.g.
    DiscountCodeService). Totals are published on an injected
    SaleEventBus; there is no global hook.

Invariants enforced:
    - No cached totals: ``totals()`` always runs the aggregator.
    - Product selection is last-write-wins. A batch list that arrives for
      a selection that has since been replaced is discarded, never merged.
    - Changing the sale type of a line with a chosen batch re-prices from
      that batch and keeps the selection.
    - A rejected discount code leaves the order discount unchanged.

Failure modes:
    - SaleLineNotFoundError for an index outside the line lists.
    - BatchNotFoundError when choosing a batch not offered for the line.
    - DiscountCodeError subclasses propagate from ``apply_discount_code``.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from typing import Any, Protocol, Sequence

from sales_engines.batch_pricing import reprice_for_batch, resolve_price
from sales_engines.order_totals import (
    AdditionalCost,
    OrderTotals,
    SaleLine,
    ServiceLine,
    aggregate,
)
from sales_engines.sale_validation import (
    SaleValidationFinding,
    ensure_sale_submittable,
    validate_sale_for_commit,
)
from sales_kernel.domain.dtos import BatchSnapshot, DiscountDescriptor, SaleType
from sales_kernel.domain.values import ZERO
from sales_kernel.exceptions import (
    BatchNotFoundError,
    DiscountCodeError,
    SaleLineNotFoundError,
)
from sales_kernel.logging_config import get_logger
from sales_kernel.selectors.discount_code_selector import normalize_code
from sales_services.events import DISCOUNT_CODE_REJECTED, TOTALS_CHANGED, SaleEventBus

logger = get_logger("services.sale_draft")


class BatchProvider(Protocol):
    def get_batches(self, product_id: int) -> Sequence[BatchSnapshot]: ...


class DiscountCodeValidator(Protocol):
    def validate_code(self, code: str, subtotal: Any) -> DiscountDescriptor: ...


@dataclass(frozen=True)
class SelectionTicket:
    """Identifies one pending product selection on one goods line."""

    line_key: int
    product_id: int
    sequence: int


@dataclass
class _GoodsRow:
    key: int
    line: SaleLine
    batches: tuple[BatchSnapshot, ...] = ()
    pending: int | None = None


@dataclass(frozen=True)
class DiscountCodeRejectedEvent:
    code: str
    error: DiscountCodeError


class SaleDraft:
    """
    Mutable sale form state with derived totals.

    Line indices are 0-based positions in the current line lists.
    """

    def __init__(
        self,
        *,
        batch_provider: BatchProvider | None = None,
        code_validator: DiscountCodeValidator | None = None,
        event_bus: SaleEventBus | None = None,
        currency: str = "AFN",
        exchange_rate: Any = 1,
        base_currency: str | None = None,
        default_sale_type: SaleType | str = SaleType.RETAIL,
    ):
        self._batch_provider = batch_provider
        self._code_validator = code_validator
        self.event_bus = event_bus or SaleEventBus()
        self.currency = currency
        self.exchange_rate = exchange_rate
        self.base_currency = base_currency
        self.default_sale_type = SaleType(default_sale_type)

        self._rows: list[_GoodsRow] = []
        self._service_lines: list[ServiceLine] = []
        self._additional_costs: list[AdditionalCost] = []
        self.order_discount: DiscountDescriptor | None = None
        self.discount_code: str | None = None
        self.paid_amount: Any = ZERO

        self._keys = itertools.count(1)
        self._sequence = itertools.count(1)

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def lines(self) -> tuple[SaleLine, ...]:
        return tuple(row.line for row in self._rows)

    @property
    def service_lines(self) -> tuple[ServiceLine, ...]:
        return tuple(self._service_lines)

    @property
    def additional_costs(self) -> tuple[AdditionalCost, ...]:
        return tuple(self._additional_costs)

    def batches_for(self, index: int) -> tuple[BatchSnapshot, ...]:
        """Batches offered for the product on a goods line."""
        return self._row(index).batches

    def totals(self) -> OrderTotals:
        return aggregate(
            self.lines,
            self.service_lines,
            self.order_discount,
            self.additional_costs,
            self.paid_amount,
            currency=self.currency,
            exchange_rate=self.exchange_rate,
            base_currency=self.base_currency,
        )

    def validate(self) -> tuple[SaleValidationFinding, ...]:
        return validate_sale_for_commit(self.lines, self.service_lines)

    def ensure_submittable(self) -> None:
        ensure_sale_submittable(self.lines, self.service_lines)

    # =========================================================================
    # Line management
    # =========================================================================

    def _row(self, index: int) -> _GoodsRow:
        if not 0 <= index < len(self._rows):
            raise SaleLineNotFoundError("goods", index)
        return self._rows[index]

    def _changed(self) -> OrderTotals:
        totals = self.totals()
        self.event_bus.publish(TOTALS_CHANGED, totals)
        return totals

    def add_line(
        self,
        product_id: int | None = None,
        unit_id: int | None = None,
        unit_price: Any = ZERO,
        quantity: Any = 1,
        sale_type: SaleType | str | None = None,
        discount: DiscountDescriptor | None = None,
    ) -> int:
        """Append a goods line and return its index."""
        line = SaleLine(
            product_id=product_id,
            unit_id=unit_id,
            unit_price=unit_price,
            quantity=quantity,
            sale_type=sale_type or self.default_sale_type,
            discount=discount,
        )
        self._rows.append(_GoodsRow(key=next(self._keys), line=line))
        self._changed()
        return len(self._rows) - 1

    def remove_line(self, index: int) -> None:
        self._row(index)
        del self._rows[index]
        self._changed()

    def add_service_line(
        self,
        service_id: int | None = None,
        name: str = "",
        price: Any = ZERO,
        quantity: Any = 1,
        discount: DiscountDescriptor | None = None,
    ) -> int:
        self._service_lines.append(ServiceLine(
            service_id=service_id,
            name=name,
            price=price,
            quantity=quantity,
            discount=discount,
        ))
        self._changed()
        return len(self._service_lines) - 1

    def remove_service_line(self, index: int) -> None:
        if not 0 <= index < len(self._service_lines):
            raise SaleLineNotFoundError("service", index)
        del self._service_lines[index]
        self._changed()

    def add_additional_cost(self, name: str, amount: Any) -> int:
        self._additional_costs.append(AdditionalCost(name=name, amount=amount))
        self._changed()
        return len(self._additional_costs) - 1

    def remove_additional_cost(self, index: int) -> None:
        if not 0 <= index < len(self._additional_costs):
            raise SaleLineNotFoundError("additional_cost", index)
        del self._additional_costs[index]
        self._changed()

    # =========================================================================
    # Product and batch selection
    # =========================================================================

    def select_product(self, index: int, product_id: int) -> bool:
        """
        Choose the product of a goods line and auto-select its oldest batch.

        Returns True when a batch was selected. With no batches the line
        keeps its manually entered price.
        """
        ticket = self.begin_product_selection(index, product_id)
        batches: Sequence[BatchSnapshot] = ()
        if self._batch_provider is not None:
            batches = self._batch_provider.get_batches(product_id)
        self.complete_product_selection(ticket, batches)
        return self._row(index).line.batch_id is not None

    def begin_product_selection(self, index: int, product_id: int) -> SelectionTicket:
        """
        Set the product of a line and open a selection awaiting batches.

        Any earlier pending selection on the line becomes stale.
        """
        row = self._row(index)
        sequence = next(self._sequence)
        row.line = replace(row.line, product_id=product_id, batch_id=None)
        row.batches = ()
        row.pending = sequence
        self._changed()
        return SelectionTicket(line_key=row.key, product_id=product_id, sequence=sequence)

    def complete_product_selection(
        self,
        ticket: SelectionTicket,
        batches: Sequence[BatchSnapshot],
    ) -> bool:
        """
        Deliver the batches fetched for a selection.

        Returns False, changing nothing, when the ticket is stale: the line
        was removed or a newer selection was started on it.
        """
        row = next((r for r in self._rows if r.key == ticket.line_key), None)
        if row is None or row.pending != ticket.sequence:
            logger.info("product_selection_discarded", extra={
                "product_id": ticket.product_id,
                "sequence": ticket.sequence,
                "line_removed": row is None,
            })
            return False

        row.pending = None
        row.batches = tuple(batches)
        price = resolve_price(row.batches, row.line.sale_type)
        if price is not None:
            row.line = replace(row.line, batch_id=price.batch_id, unit_price=price.unit_price)

        logger.info("product_selected", extra={
            "product_id": ticket.product_id,
            "batch_count": len(row.batches),
            "batch_id": row.line.batch_id,
            "unit_price": str(row.line.unit_price),
        })
        self._changed()
        return True

    def choose_batch(self, index: int, batch_id: int) -> None:
        """Pick a specific batch for a line and take its price."""
        row = self._row(index)
        price = reprice_for_batch(row.batches, batch_id, row.line.sale_type)
        if price is None:
            raise BatchNotFoundError(row.line.product_id, batch_id)
        row.line = replace(row.line, batch_id=price.batch_id, unit_price=price.unit_price)
        self._changed()

    def set_sale_type(self, index: int, sale_type: SaleType | str) -> None:
        """Change the pricing channel; a chosen batch is re-priced, not re-selected."""
        row = self._row(index)
        channel = SaleType(sale_type)
        line = replace(row.line, sale_type=channel)
        price = reprice_for_batch(row.batches, line.batch_id, channel)
        if price is not None:
            line = replace(line, unit_price=price.unit_price)
        row.line = line
        self._changed()

    # =========================================================================
    # Field edits
    # =========================================================================

    def set_unit_price(self, index: int, unit_price: Any) -> None:
        row = self._row(index)
        row.line = replace(row.line, unit_price=unit_price)
        self._changed()

    def set_quantity(self, index: int, quantity: Any) -> None:
        row = self._row(index)
        row.line = replace(row.line, quantity=quantity)
        self._changed()

    def set_line_discount(self, index: int, discount: DiscountDescriptor | None) -> None:
        row = self._row(index)
        row.line = replace(row.line, discount=discount)
        self._changed()

    def set_order_discount(self, discount: DiscountDescriptor | None) -> None:
        """Set a manual order discount. Any applied discount code is dropped."""
        self.order_discount = discount
        self.discount_code = None
        self._changed()

    def set_paid_amount(self, amount: Any) -> None:
        self.paid_amount = amount
        self._changed()

    def apply_discount_code(self, code: str) -> DiscountDescriptor:
        """
        Validate a discount code against the current subtotal and apply it.

        On failure the order discount and code stay as they were, a
        ``discount_code_rejected`` event is published and the error is
        re-raised.
        """
        if self._code_validator is None:
            raise ValueError("SaleDraft has no discount code validator")

        normalized = normalize_code(code)
        subtotal = self.totals().subtotal.amount
        try:
            descriptor = self._code_validator.validate_code(normalized, subtotal)
        except DiscountCodeError as exc:
            self.event_bus.publish(
                DISCOUNT_CODE_REJECTED,
                DiscountCodeRejectedEvent(code=normalized, error=exc),
            )
            raise

        self.order_discount = descriptor
        self.discount_code = normalized
        self._changed()
        return descriptor
