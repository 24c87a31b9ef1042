"""
Unit tests for Money, ExchangeRate and decimal handling.

Verifies:
- Form input conversion to Decimal
- Half-up rounding
- Float constructor prohibition
- Currency mixing rules
"""

from decimal import Decimal

import pytest

from sales_kernel.domain.values import (
    Currency,
    ExchangeRate,
    Money,
    round2,
    to_decimal,
)


class TestToDecimal:
    """Tests for to_decimal."""

    def test_string(self):
        assert to_decimal("100.50") == Decimal("100.50")

    def test_string_with_whitespace(self):
        assert to_decimal("  7 ") == Decimal("7")

    def test_int(self):
        assert to_decimal(3) == Decimal("3")

    def test_float_goes_through_str(self):
        """0.1 becomes Decimal("0.1"), not its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [None, True, "", "abc", "NaN", "Infinity"])
    def test_unusable_values_are_none(self, value):
        assert to_decimal(value) is None

    def test_magnitude_cap(self):
        assert to_decimal("9.99e99") == Decimal("9.99e99")
        assert to_decimal("1e100") is None
        assert to_decimal(Decimal("-1e120")) is None

    def test_wider_limit_for_subtotals(self):
        assert to_decimal("1e200", max_exponent=1000) == Decimal("1e200")


class TestRound2:
    """Tests for round2."""

    def test_half_up(self):
        assert round2(Decimal("0.005")) == Decimal("0.01")

    def test_negative_rounds_away_from_zero(self):
        assert round2(Decimal("-0.005")) == Decimal("-0.01")

    def test_deterministic(self):
        values = [round2(Decimal("123.455")) for _ in range(100)]
        assert len(set(values)) == 1

    @pytest.mark.parametrize("value,expected", [
        ("1e26", "100000000000000000000000000.00"),
        ("1e30", "1000000000000000000000000000000.00"),
        ("123456789012345678901234567890.125", "123456789012345678901234567890.13"),
    ])
    def test_beyond_default_precision(self, value, expected):
        """Amounts wider than the 28-digit default context still round."""
        result = round2(Decimal(value))

        assert result == Decimal(expected)
        assert result.as_tuple().exponent == -2


class TestMoney:
    """Tests for the Money value object."""

    def test_of(self):
        money = Money.of("10.50", "afn")

        assert money.amount == Decimal("10.50")
        assert money.currency == Currency("AFN")

    def test_float_rejected(self):
        with pytest.raises(ValueError, match="float"):
            Money.of(10.5, "USD")

    def test_invalid_amount_rejected(self):
        with pytest.raises(ValueError):
            Money.of("ten", "USD")

    def test_zero(self):
        assert Money.zero("USD").is_zero

    def test_add_and_subtract(self):
        a = Money.of("10.00", "USD")
        b = Money.of("2.50", "USD")

        assert a + b == Money.of("12.50", "USD")
        assert a - b == Money.of("7.50", "USD")
        assert (b - a).is_negative

    def test_negation(self):
        assert -Money.of("5", "USD") == Money.of("-5", "USD")

    def test_mixed_currency_arithmetic_rejected(self):
        with pytest.raises(ValueError, match="different currencies"):
            Money.of("1", "USD") + Money.of("1", "AFN")

    def test_comparison(self):
        assert Money.of("1", "USD") < Money.of("2", "USD")
        assert Money.of("2", "USD") >= Money.of("2.00", "USD")

    def test_str(self):
        assert str(Money.of("3.20", "AFN")) == "3.20 AFN"


class TestExchangeRate:
    """Tests for the ExchangeRate value object."""

    def test_convert_rounds_half_up(self):
        rate = ExchangeRate.of("USD", "AFN", "70.125")

        assert rate.convert(Money.of("1.00", "USD")) == Money.of("70.13", "AFN")

    def test_rate_must_be_positive(self):
        with pytest.raises(ValueError, match="positive"):
            ExchangeRate.of("USD", "AFN", "0")

    def test_rate_must_be_numeric(self):
        with pytest.raises(ValueError):
            ExchangeRate.of("USD", "AFN", "abc")

    def test_convert_checks_source_currency(self):
        rate = ExchangeRate.of("USD", "AFN", "70")

        with pytest.raises(ValueError):
            rate.convert(Money.of("1", "EUR"))
