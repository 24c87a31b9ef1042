"""Currency -- ISO 4217 registry for the currencies a shop may trade in."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str


class CurrencyRegistry:
    """Registry of accepted ISO 4217 currencies."""

    # Afghani first; the rest are the currencies the sale and payment
    # forms offer for foreign-currency sales and exchange.
    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        "AFN": CurrencyInfo("AFN", 2, "Afghan Afghani"),
        "USD": CurrencyInfo("USD", 2, "US Dollar"),
        "EUR": CurrencyInfo("EUR", 2, "Euro"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling"),
        "IRR": CurrencyInfo("IRR", 2, "Iranian Rial"),
        "PKR": CurrencyInfo("PKR", 2, "Pakistani Rupee"),
        "INR": CurrencyInfo("INR", 2, "Indian Rupee"),
        "CNY": CurrencyInfo("CNY", 2, "Chinese Yuan"),
        "AED": CurrencyInfo("AED", 2, "UAE Dirham"),
        "SAR": CurrencyInfo("SAR", 2, "Saudi Riyal"),
        "TRY": CurrencyInfo("TRY", 2, "Turkish Lira"),
        "RUB": CurrencyInfo("RUB", 2, "Russian Ruble"),
        "UZS": CurrencyInfo("UZS", 2, "Uzbekistan Sum"),
        "TJS": CurrencyInfo("TJS", 2, "Tajikistani Somoni"),
        "TMT": CurrencyInfo("TMT", 2, "Turkmenistan Manat"),
        "KZT": CurrencyInfo("KZT", 2, "Kazakhstani Tenge"),
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
        "IQD": CurrencyInfo("IQD", 3, "Iraqi Dinar"),
        "OMR": CurrencyInfo("OMR", 3, "Omani Rial"),
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is accepted."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def validate(cls, code: str) -> str:
        """Validate and normalize a currency code."""
        if not code or not isinstance(code, str):
            raise ValueError(f"Invalid currency code: {code!r}")

        normalized = code.upper().strip()
        if len(normalized) != 3:
            raise ValueError(f"Currency code must be 3 characters: {code!r}")
        if normalized not in cls._CURRENCIES:
            raise ValueError(f"Invalid ISO 4217 currency code: {code!r}")
        return normalized

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all accepted currency codes."""
        return frozenset(cls._CURRENCIES.keys())
