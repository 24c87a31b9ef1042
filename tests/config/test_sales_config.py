"""Tests for sales_config: YAML loading, defaults and the config trace log."""
from __future__ import annotations

from decimal import Decimal

import pytest

from sales_config import DEFAULT_CONFIG_PATH, get_active_config
from sales_config.loader import compute_checksum, parse_config
from sales_kernel.domain.dtos import SaleType


def _write(tmp_path, text):
    path = tmp_path / "sales.yaml"
    path.write_text(text)
    return path


class TestDefaultConfig:
    """The shipped default configuration."""

    def test_default_file_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_default_values(self):
        config = get_active_config()

        assert config.config_id == "SALES-DEFAULT"
        assert config.version == 1
        assert config.pricing.currency == "AFN"
        assert config.pricing.base_currency == "AFN"
        assert config.pricing.exchange_rate == Decimal("1")
        assert config.pricing.default_sale_type == SaleType.RETAIL
        assert config.database.url == "sqlite:///sales.db"
        assert config.logging.level == "INFO"
        assert len(config.checksum) == 64

    def test_emits_trace(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "SALES_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["config_id"] == "SALES-DEFAULT"
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["default_sale_type"] == "retail"


class TestCustomConfig:
    """Loading a configuration file from an explicit path."""

    def test_custom_file(self, tmp_path):
        path = _write(tmp_path, (
            "config_id: SHOP-2\n"
            "version: 3\n"
            "pricing:\n"
            "  currency: usd\n"
            "  base_currency: AFN\n"
            "  exchange_rate: '70.555'\n"
            "  default_sale_type: wholesale\n"
            "logging:\n"
            "  level: debug\n"
        ))

        config = get_active_config(path)

        assert config.config_id == "SHOP-2"
        assert config.version == 3
        assert config.pricing.currency == "USD"
        assert config.pricing.base_currency == "AFN"
        assert config.pricing.exchange_rate == Decimal("70.555")
        assert config.pricing.default_sale_type == SaleType.WHOLESALE
        assert config.logging.level == "DEBUG"

    def test_missing_sections_use_defaults(self, tmp_path):
        config = get_active_config(_write(tmp_path, "config_id: MIN\nversion: 1\n"))

        assert config.pricing.currency == "AFN"
        assert config.pricing.base_currency == "AFN"
        assert config.database.pool_size == 5

    def test_base_currency_defaults_to_currency(self, tmp_path):
        config = get_active_config(_write(
            tmp_path, "config_id: X\nversion: 1\npricing:\n  currency: EUR\n",
        ))

        assert config.pricing.base_currency == "EUR"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")


class TestInvalidConfig:
    """Required keys and value checks."""

    def test_missing_config_id(self):
        with pytest.raises(KeyError):
            parse_config({"version": 1})

    def test_missing_version(self):
        with pytest.raises(KeyError):
            parse_config({"config_id": "X"})

    @pytest.mark.parametrize("pricing", [
        {"currency": "XYZ"},
        {"exchange_rate": "0"},
        {"exchange_rate": "-2"},
        {"exchange_rate": "abc"},
        {"default_sale_type": "bulk"},
    ])
    def test_invalid_pricing(self, pricing):
        with pytest.raises(ValueError):
            parse_config({"config_id": "X", "version": 1, "pricing": pricing})

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            parse_config({"config_id": "X", "version": 1, "logging": {"level": "LOUD"}})


class TestChecksum:
    def test_deterministic_regardless_of_key_order(self):
        a = {"config_id": "X", "version": 1, "pricing": {"currency": "AFN"}}
        b = {"pricing": {"currency": "AFN"}, "version": 1, "config_id": "X"}

        assert compute_checksum(a) == compute_checksum(b)

    def test_changes_with_content(self):
        assert compute_checksum({"version": 1}) != compute_checksum({"version": 2})
