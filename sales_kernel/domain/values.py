"""
Values -- Immutable, self-validating domain value objects.

Responsibility:
    Provides the value types used by the pricing engines and the totals
    they produce: Currency, Money and ExchangeRate, plus the two numeric
    helpers every engine shares (``to_decimal`` and ``round2``).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    No outward dependencies except sales_kernel.domain.currency.

Invariants enforced:
    - Money amounts are always Decimal, never float.
    - Currency codes are validated at construction time.
    - ``round2`` is the one rounding rule for sale arithmetic: two decimal
      places, half-up.

Failure modes:
    - ValueError on construction with invalid amounts, currencies or rates.
    - ValueError when arithmetic mixes different currencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from sales_kernel.domain.currency import CurrencyRegistry

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

# Inputs of magnitude 10**MAX_AMOUNT_EXPONENT or more are not amounts.
MAX_AMOUNT_EXPONENT = 100
# Subtotals are products and sums of inputs, so they get a wider limit.
MAX_SUBTOTAL_EXPONENT = 1000


def to_decimal(value: Any, max_exponent: int = MAX_AMOUNT_EXPONENT) -> Decimal | None:
    """
    Convert form input to Decimal.

    Returns None for None, booleans, non-numeric strings, non-finite
    values and magnitudes of 10**max_exponent or more.
    Floats go through ``str`` so 0.1 becomes Decimal("0.1").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite() or result.adjusted() >= max_exponent:
        return None
    return result


def round2(value: Decimal) -> Decimal:
    """
    Round to two decimal places, half-up.

    Precision is widened to fit the integer digits, so large amounts round
    instead of raising InvalidOperation.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Validated and upper-cased on construction.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if isinstance(self.code, str) else ""
        if not CurrencyRegistry.is_valid(normalized):
            raise ValueError(f"Invalid ISO 4217 currency code: {self.code}")
        object.__setattr__(self, "code", normalized)

    @property
    def name(self) -> str:
        info = CurrencyRegistry.get_info(self.code)
        return info.name if info else self.code

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Pairs a Decimal amount with its Currency. Arithmetic and comparison
    refuse to mix currencies. Money never rounds on its own; the engines
    round explicitly with ``round2``.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            if isinstance(self.amount, float):
                raise ValueError(f"Money amount must not be a float: {self.amount!r}")
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except (InvalidOperation, ValueError) as e:
                raise ValueError(f"Invalid amount: {self.amount}") from e

        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """Factory method for creating Money."""
        return cls(amount=amount, currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=ZERO, currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == ZERO

    @property
    def is_negative(self) -> bool:
        return self.amount < ZERO

    def _check_currency(self, other: Money, op: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {op} Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __neg__(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """
    Exchange rate between two currencies.

    1 unit of ``from_currency`` = ``rate`` units of ``to_currency``. A sale
    recorded in a foreign currency carries one of these to derive its
    base-currency amount.
    """

    from_currency: Currency
    to_currency: Currency
    rate: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.from_currency, str):
            object.__setattr__(self, "from_currency", Currency(self.from_currency))
        if isinstance(self.to_currency, str):
            object.__setattr__(self, "to_currency", Currency(self.to_currency))

        rate = to_decimal(self.rate)
        if rate is None:
            raise ValueError(f"Invalid exchange rate: {self.rate}")
        if rate <= ZERO:
            raise ValueError(f"Exchange rate must be positive: {self.rate}")
        object.__setattr__(self, "rate", rate)

    @classmethod
    def of(
        cls,
        from_currency: str | Currency,
        to_currency: str | Currency,
        rate: Decimal | str | int,
    ) -> ExchangeRate:
        return cls(from_currency=from_currency, to_currency=to_currency, rate=rate)

    def convert(self, money: Money) -> Money:
        """Convert money into ``to_currency``, rounded with ``round2``."""
        if money.currency != self.from_currency:
            raise ValueError(
                f"Money currency {money.currency} doesn't match "
                f"rate from_currency {self.from_currency}"
            )
        return Money(amount=round2(money.amount * self.rate), currency=self.to_currency)

    def __str__(self) -> str:
        return f"{self.from_currency}/{self.to_currency} = {self.rate}"
