"""
Tests for DiscountCodeSelector.
"""

from decimal import Decimal

from sales_kernel.domain.dtos import DiscountKind
from sales_kernel.selectors.discount_code_selector import DiscountCodeSelector, normalize_code
from sales_services.discount_code_service import DiscountCodeService


def _seed(session, clock):
    service = DiscountCodeService(session, clock=clock)
    service.create_code("summer10", "percent", "10")
    service.create_code("WINTER5", "fixed", "5", min_purchase="50")
    service.create_code("SUMMERXL", "percent", "20")
    return service


class TestNormalizeCode:
    def test_trims_and_upper_cases(self):
        assert normalize_code("  summer10 ") == "SUMMER10"

    def test_none_is_empty(self):
        assert normalize_code(None) == ""


class TestDiscountCodeSelector:
    """Tests for lookups and listing."""

    def test_get_by_code_normalizes(self, session, deterministic_clock):
        _seed(session, deterministic_clock)

        snapshot = DiscountCodeSelector(session).get_by_code(" Summer10 ")

        assert snapshot.code == "SUMMER10"
        assert snapshot.kind == DiscountKind.PERCENT
        assert snapshot.value == Decimal("10")

    def test_get_by_code_missing(self, session):
        assert DiscountCodeSelector(session).get_by_code("NOPE") is None

    def test_get_by_code_blank(self, session):
        assert DiscountCodeSelector(session).get_by_code("   ") is None

    def test_get_by_id(self, session, deterministic_clock):
        created = _seed(session, deterministic_clock).create_code("ONE", "fixed", "1")

        assert DiscountCodeSelector(session).get(created.code_id).code == "ONE"

    def test_list_ordered_by_code(self, session, deterministic_clock):
        _seed(session, deterministic_clock)

        codes = [c.code for c in DiscountCodeSelector(session).list_codes()]

        assert codes == ["SUMMER10", "SUMMERXL", "WINTER5"]

    def test_list_with_search(self, session, deterministic_clock):
        _seed(session, deterministic_clock)

        codes = [c.code for c in DiscountCodeSelector(session).list_codes("summer")]

        assert codes == ["SUMMER10", "SUMMERXL"]
