#!/usr/bin/env python3
"""
Quote a sale: compute its totals from a YAML sale document.

Usage:
    python scripts/quote_sale.py sale.yaml
    python scripts/quote_sale.py sale.yaml --database
    python scripts/quote_sale.py sale.yaml --database-url sqlite:///shop.db

Sale document (all sections optional):

    currency: AFN
    exchange_rate: "1"
    lines:
      - {product_id: 1, unit_id: 1, unit_price: "100", quantity: 3,
         sale_type: retail, discount: {kind: percent, value: 10}}
    service_lines:
      - {service_id: 4, name: Delivery, price: "150", quantity: 1}
    order_discount: {kind: fixed, value: 50}
    additional_costs:
      - {name: shipping, amount: "20"}
    paid_amount: "0"
    discount_code: SUMMER10

With --database, ``discount_code`` is checked against the codes stored in
the configured database (``database`` section of the sales configuration);
--database-url points at another database. An accepted code replaces
``order_discount``. Without either the code is ignored with a warning.

Prints the totals as JSON. Exit status 1 when the sale document cannot be
read or is malformed, the discount code is rejected, or --strict is given
and the sale is not submittable.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from sales_config import get_active_config
from sales_engines import (
    AdditionalCost,
    OrderTotals,
    SaleLine,
    ServiceLine,
    aggregate,
    validate_sale_for_commit,
)
from sales_kernel.domain.dtos import DiscountDescriptor
from sales_kernel.exceptions import SalesKernelError
from sales_kernel.logging_config import configure_logging, get_logger

logger = get_logger("scripts.quote_sale")


class SaleDocumentError(ValueError):
    """The sale document does not have the expected shape."""


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SaleDocumentError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def _rows(document: dict[str, Any], key: str) -> list[dict[str, Any]]:
    rows = document.get(key) or []
    if not isinstance(rows, list):
        raise SaleDocumentError(f"{key}: expected a list, got {type(rows).__name__}")
    return [_mapping(row, f"{key}[{i}]") for i, row in enumerate(rows)]


def _descriptor(data: Any, where: str) -> DiscountDescriptor | None:
    if not data:
        return None
    data = _mapping(data, where)
    return DiscountDescriptor.from_form(data.get("kind"), data.get("value"))


def parse_sale_document(document: dict[str, Any], default_sale_type: str) -> dict[str, Any]:
    """
    Turn a raw sale document into aggregate() arguments.

    Raises:
        SaleDocumentError: a section or row is not a mapping or list.
    """
    lines = [
        SaleLine(
            product_id=item.get("product_id"),
            unit_id=item.get("unit_id"),
            unit_price=item.get("unit_price", 0),
            quantity=item.get("quantity", 0),
            sale_type=item.get("sale_type") or default_sale_type,
            batch_id=item.get("batch_id"),
            discount=_descriptor(item.get("discount"), f"lines[{i}].discount"),
        )
        for i, item in enumerate(_rows(document, "lines"))
    ]
    service_lines = [
        ServiceLine(
            service_id=item.get("service_id"),
            name=item.get("name", ""),
            price=item.get("price", 0),
            quantity=item.get("quantity", 0),
            discount=_descriptor(item.get("discount"), f"service_lines[{i}].discount"),
        )
        for i, item in enumerate(_rows(document, "service_lines"))
    ]
    costs = [
        AdditionalCost(name=item.get("name", ""), amount=item.get("amount", 0))
        for item in _rows(document, "additional_costs")
    ]
    return {
        "lines": lines,
        "service_lines": service_lines,
        "order_discount": _descriptor(document.get("order_discount"), "order_discount"),
        "additional_costs": costs,
        "paid_amount": document.get("paid_amount", 0),
    }


def totals_to_dict(totals: OrderTotals) -> dict[str, Any]:
    """JSON-ready view of OrderTotals; amounts as strings."""
    return {
        "currency": totals.grand_total.currency.code,
        "line_totals": [str(t) for t in totals.line_totals],
        "service_line_totals": [str(t) for t in totals.service_line_totals],
        "subtotal": str(totals.subtotal.amount),
        "order_discount_amount": str(totals.order_discount_amount.amount),
        "additional_costs_total": str(totals.additional_costs_total.amount),
        "grand_total": str(totals.grand_total.amount),
        "paid_amount": str(totals.paid_amount.amount),
        "remaining_amount": str(totals.remaining_amount.amount),
        "overpaid": totals.is_overpaid,
        "exchange_rate": str(totals.exchange_rate),
        "base_currency": totals.base_total.currency.code,
        "base_total": str(totals.base_total.amount),
    }


def build_quote(
    document: dict[str, Any],
    *,
    currency: str,
    exchange_rate: Any,
    base_currency: str,
    default_sale_type: str,
    code_validator: Any = None,
) -> dict[str, Any]:
    """
    Compute the quote for a sale document.

    ``code_validator`` is anything with ``validate_code(code, subtotal)``;
    its typed errors propagate. A malformed document raises ValueError
    (SaleDocumentError for its shape, ValueError for values such as an
    unknown currency or sale type).
    """
    document = _mapping(document, "sale document")
    args = parse_sale_document(document, default_sale_type)
    kwargs = {
        "currency": document.get("currency") or currency,
        "exchange_rate": document.get("exchange_rate", exchange_rate),
        "base_currency": base_currency,
    }

    code = document.get("discount_code")
    if code:
        code = str(code)
        if code_validator is None:
            logger.warning("quote_discount_code_ignored", extra={"discount_code": code})
        else:
            subtotal = aggregate(**args, **kwargs).subtotal.amount
            args["order_discount"] = code_validator.validate_code(code, subtotal)

    totals = aggregate(**args, **kwargs)
    result = totals_to_dict(totals)
    result["findings"] = [
        str(f) for f in validate_sale_for_commit(args["lines"], args["service_lines"])
    ]
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compute sale totals from a YAML sale document.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("sale", type=Path, help="Path to the YAML sale document")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Sales configuration file (default: sales_config/sets/default.yaml)",
    )
    parser.add_argument(
        "--database",
        action="store_true",
        help="Check discount_code against the configured database",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Check discount_code against this database instead of the configured one",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit 1 when the sale is not submittable",
    )
    args = parser.parse_args(argv)

    config = get_active_config(args.config)
    configure_logging(level=config.logging.level, stream=sys.stderr)

    if not args.sale.exists():
        print(f"ERROR: Sale document not found: {args.sale}", file=sys.stderr)
        return 1
    try:
        with open(args.sale) as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        print(f"ERROR: Sale document is not valid YAML: {exc}", file=sys.stderr)
        return 1

    quote_kwargs = {
        "currency": config.pricing.currency,
        "exchange_rate": config.pricing.exchange_rate,
        "base_currency": config.pricing.base_currency,
        "default_sale_type": config.pricing.default_sale_type.value,
    }

    try:
        if args.database or args.database_url:
            from sales_kernel.db.engine import init_engine_from_url, reset_engine, session_scope
            from sales_services.discount_code_service import DiscountCodeService

            db = config.database
            init_engine_from_url(
                args.database_url or db.url,
                echo=db.echo,
                pool_size=db.pool_size,
                max_overflow=db.max_overflow,
            )
            try:
                with session_scope() as session:
                    result = build_quote(
                        document,
                        code_validator=DiscountCodeService(session),
                        **quote_kwargs,
                    )
            finally:
                reset_engine()
        else:
            result = build_quote(document, **quote_kwargs)
    except SalesKernelError as exc:
        print(json.dumps({"error": exc.code, "message": str(exc)}), file=sys.stderr)
        return 1
    except ValueError as exc:
        logger.warning("quote_invalid_sale_document", extra={"error": str(exc)})
        print(
            json.dumps({"error": "INVALID_SALE_DOCUMENT", "message": str(exc)}),
            file=sys.stderr,
        )
        return 1

    print(json.dumps(result, indent=2))
    if args.strict and result["findings"]:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
