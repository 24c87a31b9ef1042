"""
Pytest fixtures for the sales pricing test suite.

Provides:
- In-memory SQLite sessions (tables created per test)
- Deterministic clock
- Structured log capture
- Batch and discount code builders
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest
from sqlalchemy.orm import Session

from sales_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from sales_kernel.domain.clock import DeterministicClock
from sales_kernel.domain.dtos import BatchSnapshot
from sales_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from sales_kernel.models.batch import ProductBatchModel

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture sales_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            aggregate(...)
            logs = captured_logs()
            assert any(r["message"] == "order_totals_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("sales_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session() -> Session:
    """Fresh in-memory SQLite database and session per test."""
    init_engine_from_url("sqlite://")
    create_tables()
    s = get_session()
    yield s
    s.rollback()
    s.close()
    drop_tables()
    reset_engine()


# =============================================================================
# Time
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock fixed at 2026-01-01 12:00 UTC."""
    return DeterministicClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


# =============================================================================
# Builders
# =============================================================================


@pytest.fixture
def make_batch():
    """Build a BatchSnapshot with sensible defaults."""

    def _make(
        batch_id: int,
        retail: str | None = "10",
        wholesale: str | None = "8",
        per_price: str = "6",
        product_id: int = 7,
        remaining: str = "5",
        purchase_date: date = date(2025, 6, 1),
    ) -> BatchSnapshot:
        return BatchSnapshot(
            batch_id=batch_id,
            product_id=product_id,
            per_price=Decimal(per_price),
            remaining_quantity=Decimal(remaining),
            retail_price=Decimal(retail) if retail is not None else None,
            wholesale_price=Decimal(wholesale) if wholesale is not None else None,
            purchase_date=purchase_date,
        )

    return _make


@pytest.fixture
def store_batch(session):
    """Persist a ProductBatchModel row and return it."""

    def _store(
        purchase_item_id: int,
        product_id: int = 7,
        purchase_date: date = date(2025, 6, 1),
        per_price: str = "6",
        retail: str | None = "10",
        wholesale: str | None = "8",
        remaining: str = "5",
        expiry_date: date | None = None,
        batch_number: str | None = None,
    ) -> ProductBatchModel:
        row = ProductBatchModel(
            purchase_item_id=purchase_item_id,
            purchase_id=purchase_item_id // 10 + 1,
            product_id=product_id,
            batch_number=batch_number,
            purchase_date=purchase_date,
            expiry_date=expiry_date,
            per_price=Decimal(per_price),
            retail_price=Decimal(retail) if retail is not None else None,
            wholesale_price=Decimal(wholesale) if wholesale is not None else None,
            amount=Decimal(remaining),
            remaining_quantity=Decimal(remaining),
        )
        session.add(row)
        session.flush()
        return row

    return _store
