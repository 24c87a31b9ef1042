"""
sales_config -- single public entrypoint for sales configuration.

Responsibility:
    ``get_active_config()`` is the only way runtime code obtains
    configuration (default currency, exchange rate, default sale type,
    database URL, log level). YAML loading lives in ``sales_config.loader``.

Architecture position:
    Configuration -- sits beside ``sales_kernel``; the kernel never imports
    from this package.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``KeyError`` / ``ValueError`` -- required keys missing or invalid.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``SALES_CONFIG_TRACE`` log entry with the config id, version and
    checksum.
"""

from __future__ import annotations

from pathlib import Path

from sales_config.loader import load_config
from sales_config.schema import DatabaseConfig, LoggingConfig, PricingConfig, SalesConfig
from sales_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration file
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | str | None = None) -> SalesConfig:
    """
    The public configuration entrypoint.

    Args:
        path: Override path to a configuration file. Defaults to
            sales_config/sets/default.yaml.

    Returns:
        SalesConfig
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config = load_config(config_path)

    _logger.info(
        "SALES_CONFIG_TRACE",
        extra={
            "trace_type": "SALES_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "currency": config.pricing.currency,
            "default_sale_type": config.pricing.default_sale_type.value,
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DatabaseConfig",
    "LoggingConfig",
    "PricingConfig",
    "SalesConfig",
    "get_active_config",
]
