"""
Sale Validation - checks a sale must pass before it can be committed.

Pure functions. ``validate_sale_for_commit`` collects every finding so the
form can mark each offending line at once; ``ensure_sale_submittable``
raises ``SaleValidationError`` carrying those findings.

Rules:
    - the sale has at least one goods or service line
    - goods line: product and unit chosen, unit_price > 0, quantity > 0
    - service line: service chosen, non-empty name, price >= 0, quantity > 0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from sales_engines.order_totals import SaleLine, ServiceLine
from sales_kernel.domain.values import ZERO
from sales_kernel.exceptions import SaleValidationError
from sales_kernel.logging_config import get_logger

logger = get_logger("engines.sale_validation")


class LineKind(str, Enum):
    ORDER = "order"
    GOODS = "goods"
    SERVICE = "service"


class FindingReason(str, Enum):
    NO_LINES = "no_lines"
    MISSING_PRODUCT = "missing_product"
    MISSING_UNIT = "missing_unit"
    NON_POSITIVE_PRICE = "non_positive_price"
    NEGATIVE_PRICE = "negative_price"
    NON_POSITIVE_QUANTITY = "non_positive_quantity"
    MISSING_SERVICE = "missing_service"
    MISSING_NAME = "missing_name"


@dataclass(frozen=True)
class SaleValidationFinding:
    """
    One reason a sale cannot be committed.

    ``line_number`` is 1-based within its line kind; it is None for
    findings about the sale as a whole.
    """

    line_kind: LineKind
    line_number: int | None
    reason: FindingReason

    def __str__(self) -> str:
        if self.line_number is None:
            return f"{self.line_kind.value}: {self.reason.value}"
        return f"{self.line_kind.value} line {self.line_number}: {self.reason.value}"


def _goods_findings(number: int, line: SaleLine) -> list[SaleValidationFinding]:
    findings = []
    if line.product_id is None:
        findings.append(FindingReason.MISSING_PRODUCT)
    if line.unit_id is None:
        findings.append(FindingReason.MISSING_UNIT)
    if line.unit_price <= ZERO:
        findings.append(FindingReason.NON_POSITIVE_PRICE)
    if line.quantity <= ZERO:
        findings.append(FindingReason.NON_POSITIVE_QUANTITY)
    return [SaleValidationFinding(LineKind.GOODS, number, reason) for reason in findings]


def _service_findings(number: int, line: ServiceLine) -> list[SaleValidationFinding]:
    findings = []
    if line.service_id is None:
        findings.append(FindingReason.MISSING_SERVICE)
    if not (line.name or "").strip():
        findings.append(FindingReason.MISSING_NAME)
    if line.price < ZERO:
        findings.append(FindingReason.NEGATIVE_PRICE)
    if line.quantity <= ZERO:
        findings.append(FindingReason.NON_POSITIVE_QUANTITY)
    return [SaleValidationFinding(LineKind.SERVICE, number, reason) for reason in findings]


def validate_sale_for_commit(
    lines: Sequence[SaleLine],
    service_lines: Sequence[ServiceLine] = (),
) -> tuple[SaleValidationFinding, ...]:
    """All findings for a sale, goods lines first. Empty means submittable."""
    if not lines and not service_lines:
        return (SaleValidationFinding(LineKind.ORDER, None, FindingReason.NO_LINES),)

    findings: list[SaleValidationFinding] = []
    for number, line in enumerate(lines, start=1):
        findings.extend(_goods_findings(number, line))
    for number, line in enumerate(service_lines, start=1):
        findings.extend(_service_findings(number, line))
    return tuple(findings)


def ensure_sale_submittable(
    lines: Sequence[SaleLine],
    service_lines: Sequence[ServiceLine] = (),
) -> None:
    """Raise SaleValidationError if the sale has any finding."""
    findings = validate_sale_for_commit(lines, service_lines)
    if findings:
        logger.info("sale_validation_failed", extra={
            "finding_count": len(findings),
            "findings": [str(f) for f in findings],
        })
        raise SaleValidationError(findings)
