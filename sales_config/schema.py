"""
Sales configuration schema.

Frozen dataclasses the YAML configuration is parsed into by
``sales_config.loader``. Only ``sales_config.get_active_config()`` hands
these out at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from sales_kernel.domain.dtos import SaleType

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PricingConfig:
    """Defaults applied to a new sale."""

    currency: str = "AFN"
    base_currency: str = "AFN"
    exchange_rate: Decimal = Decimal("1")
    default_sale_type: SaleType = SaleType.RETAIL


@dataclass(frozen=True)
class DatabaseConfig:
    url: str = "sqlite:///sales.db"
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SalesConfig:
    """
    Complete sales configuration.

    ``checksum`` is the SHA-256 of the parsed YAML document and identifies
    the exact configuration a process ran with.
    """

    config_id: str
    version: int
    pricing: PricingConfig = field(default_factory=PricingConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    checksum: str = ""
