"""
Tests for DiscountCodeService.

Covers:
- Administration: create, update, delete, with normalization and checks
- validate_code: typed error per rejection, descriptor on success
- record_use: commit-time use counting
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from sales_kernel.domain.dtos import DiscountDescriptor, DiscountKind
from sales_kernel.exceptions import (
    DiscountCodeError,
    DiscountCodeExhaustedError,
    DiscountCodeExpiredError,
    DiscountCodeMinimumNotMetError,
    DiscountCodeNotActiveError,
    DiscountCodeNotFoundError,
    DuplicateDiscountCodeError,
    InvalidDiscountCodeError,
)
from sales_kernel.selectors.discount_code_selector import DiscountCodeSelector
from sales_services.discount_code_service import DiscountCodeService


@pytest.fixture
def service(session, deterministic_clock):
    return DiscountCodeService(session, clock=deterministic_clock)


# =============================================================================
# Administration
# =============================================================================


class TestCreateCode:
    """Tests for create_code."""

    def test_stores_normalized_code(self, service):
        created = service.create_code("  summer10 ", "Percent", "10", min_purchase="100")

        assert created.code == "SUMMER10"
        assert created.kind == DiscountKind.PERCENT
        assert created.value == Decimal("10")
        assert created.min_purchase == Decimal("100")
        assert created.use_count == 0
        assert created.code_id is not None

    def test_duplicate_rejected(self, service):
        service.create_code("SUMMER10", "percent", "10")

        with pytest.raises(DuplicateDiscountCodeError) as exc_info:
            service.create_code("summer10", "fixed", "5")

        assert exc_info.value.discount_code == "SUMMER10"

    def test_empty_code_rejected(self, service):
        with pytest.raises(InvalidDiscountCodeError) as exc_info:
            service.create_code("   ", "percent", "10")

        assert exc_info.value.field == "code"

    def test_unknown_kind_rejected(self, service):
        with pytest.raises(InvalidDiscountCodeError) as exc_info:
            service.create_code("X", "bogo", "10")

        assert exc_info.value.field == "kind"

    @pytest.mark.parametrize("field,kwargs", [
        ("value", {"value": "-1"}),
        ("value", {"value": "ten"}),
        ("min_purchase", {"value": "1", "min_purchase": "-5"}),
        ("max_uses", {"value": "1", "max_uses": -1}),
    ])
    def test_invalid_amounts_rejected(self, service, field, kwargs):
        with pytest.raises(InvalidDiscountCodeError) as exc_info:
            service.create_code("X", "fixed", **kwargs)

        assert exc_info.value.field == field

    def test_inverted_window_rejected(self, service):
        with pytest.raises(InvalidDiscountCodeError):
            service.create_code(
                "X", "fixed", "1",
                valid_from=date(2026, 2, 1), valid_to=date(2026, 1, 1),
            )


class TestUpdateCode:
    """Tests for update_code."""

    def test_updates_given_fields_only(self, service):
        created = service.create_code("A", "percent", "10", max_uses=3)

        updated = service.update_code(created.code_id, value="15", valid_to=date(2026, 6, 30))

        assert updated.value == Decimal("15")
        assert updated.valid_to == date(2026, 6, 30)
        assert updated.max_uses == 3
        assert updated.kind == DiscountKind.PERCENT

    def test_none_clears_limit(self, service):
        created = service.create_code("A", "percent", "10", max_uses=3)

        assert service.update_code(created.code_id, max_uses=None).max_uses is None

    def test_rename_to_existing_rejected(self, service):
        service.create_code("A", "percent", "10")
        b = service.create_code("B", "percent", "10")

        with pytest.raises(DuplicateDiscountCodeError):
            service.update_code(b.code_id, code="a")

    def test_rename_to_itself_allowed(self, service):
        a = service.create_code("A", "percent", "10")

        assert service.update_code(a.code_id, code=" a ").code == "A"

    def test_unknown_id(self, service):
        with pytest.raises(DiscountCodeNotFoundError):
            service.update_code(uuid4(), value="1")


class TestDeleteCode:
    """Tests for delete_code."""

    def test_deletes(self, service, session):
        created = service.create_code("A", "percent", "10")

        service.delete_code(created.code_id)

        assert DiscountCodeSelector(session).get_by_code("A") is None

    def test_unknown_id(self, service):
        with pytest.raises(DiscountCodeNotFoundError):
            service.delete_code(uuid4())


# =============================================================================
# Sale-time checks
# =============================================================================


class TestValidateCode:
    """Tests for validate_code (clock fixed at 2026-01-01)."""

    def test_accepted_returns_descriptor(self, service):
        service.create_code("SUMMER10", "percent", "10", min_purchase="100")

        descriptor = service.validate_code(" summer10", Decimal("150"))

        assert descriptor == DiscountDescriptor.percent(10)

    def test_does_not_increment_use_count(self, service, session):
        service.create_code("SUMMER10", "percent", "10", max_uses=1)

        service.validate_code("SUMMER10", Decimal("150"))
        service.validate_code("SUMMER10", Decimal("150"))

        assert DiscountCodeSelector(session).get_by_code("SUMMER10").use_count == 0

    def test_not_found(self, service):
        with pytest.raises(DiscountCodeNotFoundError) as exc_info:
            service.validate_code("nope", Decimal("150"))

        assert exc_info.value.discount_code == "NOPE"
        assert exc_info.value.code == "DISCOUNT_CODE_NOT_FOUND"

    def test_not_active(self, service):
        service.create_code("LATER", "percent", "10", valid_from=date(2026, 1, 2))

        with pytest.raises(DiscountCodeNotActiveError) as exc_info:
            service.validate_code("LATER", Decimal("150"))

        assert exc_info.value.valid_from == "2026-01-02"
        assert exc_info.value.on_date == "2026-01-01"

    def test_expired(self, service):
        service.create_code("OLD", "percent", "10", valid_to=date(2025, 12, 31))

        with pytest.raises(DiscountCodeExpiredError):
            service.validate_code("OLD", Decimal("150"))

    def test_valid_on_last_day(self, service):
        service.create_code("LAST", "percent", "10", valid_to=date(2026, 1, 1))

        assert service.validate_code("LAST", Decimal("150")).kind == DiscountKind.PERCENT

    def test_minimum_not_met(self, service):
        service.create_code("BIG", "fixed", "20", min_purchase="100")

        with pytest.raises(DiscountCodeMinimumNotMetError) as exc_info:
            service.validate_code("BIG", Decimal("99.99"))

        assert Decimal(exc_info.value.min_purchase) == Decimal("100")
        assert exc_info.value.subtotal == "99.99"

    def test_exhausted(self, service):
        created = service.create_code("ONCE", "fixed", "5", max_uses=1)
        service.record_use(created.code)

        with pytest.raises(DiscountCodeExhaustedError):
            service.validate_code("ONCE", Decimal("150"))

    def test_clock_drives_window(self, session, deterministic_clock):
        service = DiscountCodeService(session, clock=deterministic_clock)
        service.create_code("JAN", "percent", "5", valid_to=date(2026, 1, 31))

        deterministic_clock.set_time(datetime(2026, 2, 1, 0, 0, tzinfo=timezone.utc))

        with pytest.raises(DiscountCodeExpiredError):
            service.validate_code("JAN", Decimal("10"))

    def test_all_rejections_share_base_class(self, service):
        with pytest.raises(DiscountCodeError):
            service.validate_code("missing", Decimal("1"))


class TestRecordUse:
    """Tests for record_use."""

    def test_increments(self, service):
        service.create_code("A", "percent", "10", max_uses=2)

        assert service.record_use("a").use_count == 1
        assert service.record_use("A").use_count == 2

    def test_refuses_past_cap(self, service):
        service.create_code("A", "percent", "10", max_uses=1)
        service.record_use("A")

        with pytest.raises(DiscountCodeExhaustedError):
            service.record_use("A")

    def test_unknown_code(self, service):
        with pytest.raises(DiscountCodeNotFoundError):
            service.record_use("missing")
