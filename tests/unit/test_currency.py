"""
Tests for currency validation.

Currency codes are validated at the domain boundary; unknown codes are
rejected rather than carried through a sale.
"""

import pytest

from sales_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from sales_kernel.domain.values import Currency


class TestCurrencyRegistry:
    """Tests for CurrencyRegistry."""

    def test_valid_codes_accepted(self):
        for code in ["AFN", "USD", "EUR", "PKR", "IRR"]:
            assert CurrencyRegistry.is_valid(code)
            assert CurrencyRegistry.validate(code) == code

    def test_lowercase_codes_normalized(self):
        assert CurrencyRegistry.validate(" afn ") == "AFN"

    @pytest.mark.parametrize("code", ["", "US", "USDX", "XYZ", None])
    def test_invalid_codes_rejected(self, code):
        assert not CurrencyRegistry.is_valid(code)
        with pytest.raises(ValueError):
            CurrencyRegistry.validate(code)

    def test_get_info(self):
        info = CurrencyRegistry.get_info("AFN")

        assert info == CurrencyInfo("AFN", 2, "Afghan Afghani")

    def test_get_info_unknown(self):
        assert CurrencyRegistry.get_info("XYZ") is None

    def test_all_codes_contains_base_currency(self):
        assert "AFN" in CurrencyRegistry.all_codes()


class TestCurrency:
    """Tests for the Currency value object."""

    def test_normalizes_code(self):
        assert Currency("usd").code == "USD"

    def test_invalid_code_raises(self):
        with pytest.raises(ValueError, match="ISO 4217"):
            Currency("ABC")

    def test_name(self):
        assert Currency("AFN").name == "Afghan Afghani"

    def test_equality(self):
        assert Currency("AFN") == Currency("afn")
