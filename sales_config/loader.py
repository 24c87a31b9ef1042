"""
Configuration Loader (``sales_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen dataclasses
of ``sales_config.schema``. Runtime callers go through
``sales_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Required keys (``config_id``, ``version``) raise ``KeyError`` when
  missing; optional sections fall back to schema defaults.
* Amounts are parsed as ``Decimal``, never float.
* ``compute_checksum`` is deterministic for identical documents.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from sales_config.schema import DatabaseConfig, LoggingConfig, PricingConfig, SalesConfig
from sales_kernel.domain.currency import CurrencyRegistry
from sales_kernel.domain.dtos import SaleType


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, field_name: str) -> Decimal:
    """Parse a Decimal from YAML without going through float arithmetic."""
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"{field_name}: cannot parse decimal from {value!r}") from e


def _parse_currency(value: Any, field_name: str) -> str:
    code = str(value).strip().upper()
    if not CurrencyRegistry.is_valid(code):
        raise ValueError(f"{field_name}: unknown currency code {value!r}")
    return code


def parse_pricing(data: dict[str, Any]) -> PricingConfig:
    """Parse the ``pricing`` section."""
    currency = _parse_currency(data.get("currency", "AFN"), "pricing.currency")
    rate = parse_decimal(data.get("exchange_rate", "1"), "pricing.exchange_rate")
    if rate <= 0:
        raise ValueError(f"pricing.exchange_rate must be positive, got {rate}")
    return PricingConfig(
        currency=currency,
        base_currency=_parse_currency(
            data.get("base_currency", currency), "pricing.base_currency"
        ),
        exchange_rate=rate,
        default_sale_type=SaleType(data.get("default_sale_type", SaleType.RETAIL.value)),
    )


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    """Parse the ``database`` section."""
    defaults = DatabaseConfig()
    return DatabaseConfig(
        url=data.get("url", defaults.url),
        echo=bool(data.get("echo", defaults.echo)),
        pool_size=int(data.get("pool_size", defaults.pool_size)),
        max_overflow=int(data.get("max_overflow", defaults.max_overflow)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    level = str(data.get("level", "INFO")).upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"logging.level: unknown level {level!r}")
    return LoggingConfig(level=level)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_config(data: dict[str, Any]) -> SalesConfig:
    """Parse a whole configuration document."""
    return SalesConfig(
        config_id=data["config_id"],
        version=int(data["version"]),
        pricing=parse_pricing(data.get("pricing") or {}),
        database=parse_database(data.get("database") or {}),
        logging=parse_logging(data.get("logging") or {}),
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> SalesConfig:
    return parse_config(load_yaml_file(path))
