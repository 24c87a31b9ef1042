"""
Tests for sale validation before commit.
"""

import pytest

from sales_engines.order_totals import SaleLine, ServiceLine
from sales_engines.sale_validation import (
    FindingReason,
    LineKind,
    SaleValidationFinding,
    ensure_sale_submittable,
    validate_sale_for_commit,
)
from sales_kernel.exceptions import SaleValidationError


def _valid_goods(**overrides) -> SaleLine:
    fields = {"product_id": 1, "unit_id": 2, "unit_price": "10", "quantity": "1"}
    fields.update(overrides)
    return SaleLine(**fields)


def _valid_service(**overrides) -> ServiceLine:
    fields = {"service_id": 3, "name": "Repair", "price": "0", "quantity": "1"}
    fields.update(overrides)
    return ServiceLine(**fields)


class TestValidateSaleForCommit:
    """Tests for validate_sale_for_commit."""

    def test_valid_sale_has_no_findings(self):
        assert validate_sale_for_commit([_valid_goods()], [_valid_service()]) == ()

    def test_service_only_sale_is_valid(self):
        assert validate_sale_for_commit([], [_valid_service()]) == ()

    def test_empty_sale(self):
        findings = validate_sale_for_commit([], [])

        assert findings == (
            SaleValidationFinding(LineKind.ORDER, None, FindingReason.NO_LINES),
        )

    def test_goods_line_findings_are_numbered_from_one(self):
        findings = validate_sale_for_commit(
            [_valid_goods(), _valid_goods(product_id=None, quantity="0")],
        )

        assert findings == (
            SaleValidationFinding(LineKind.GOODS, 2, FindingReason.MISSING_PRODUCT),
            SaleValidationFinding(LineKind.GOODS, 2, FindingReason.NON_POSITIVE_QUANTITY),
        )

    def test_goods_price_must_be_positive(self):
        findings = validate_sale_for_commit([_valid_goods(unit_price="0", unit_id=None)])

        reasons = {f.reason for f in findings}
        assert reasons == {FindingReason.MISSING_UNIT, FindingReason.NON_POSITIVE_PRICE}

    def test_service_price_zero_allowed_negative_not(self):
        findings = validate_sale_for_commit(
            [], [_valid_service(price="-1", name="  ", service_id=None)],
        )

        assert [f.reason for f in findings] == [
            FindingReason.MISSING_SERVICE,
            FindingReason.MISSING_NAME,
            FindingReason.NEGATIVE_PRICE,
        ]
        assert all(f.line_kind == LineKind.SERVICE and f.line_number == 1 for f in findings)

    def test_finding_str(self):
        finding = SaleValidationFinding(LineKind.GOODS, 3, FindingReason.MISSING_UNIT)

        assert str(finding) == "goods line 3: missing_unit"

    def test_whole_order_finding_is_not_a_goods_finding(self):
        (finding,) = validate_sale_for_commit([], [])

        assert finding.line_kind == LineKind.ORDER
        assert finding.line_kind != LineKind.GOODS
        assert str(finding) == "order: no_lines"


class TestEnsureSaleSubmittable:
    """Tests for ensure_sale_submittable."""

    def test_passes_for_valid_sale(self):
        ensure_sale_submittable([_valid_goods()])

    def test_raises_with_findings(self):
        with pytest.raises(SaleValidationError) as exc_info:
            ensure_sale_submittable([_valid_goods(quantity="-2")])

        err = exc_info.value
        assert err.code == "SALE_VALIDATION_FAILED"
        assert err.finding_count == 1
        assert err.findings[0].reason == FindingReason.NON_POSITIVE_QUANTITY
