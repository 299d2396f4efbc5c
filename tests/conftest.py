"""
Pytest fixtures for the budget proration test suite.

Provides:
- Session-wide structured logging and per-test LogContext isolation
- captured_logs: budget_kernel log records parsed from JSON
- Deterministic clock and engine factory
- SQLite in-memory database session for the persistence adapter
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from budget_engines.proration import ProrationEngine
from budget_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from budget_kernel.domain.budget import BudgetRecord
from budget_kernel.domain.clock import DeterministicClock
from budget_kernel.domain.repository import InMemoryBudgetRepository
from budget_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
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
    Capture budget_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            engine.total_amount(start, end)
            logs = captured_logs()
            assert any(r["message"] == "total_amount_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("budget_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Engine fixtures
# =============================================================================


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2024-01-15 12:00 UTC."""
    return DeterministicClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_engine(fixed_clock):
    """
    Build a ProrationEngine over an in-memory snapshot.

    Usage::

        engine = make_engine(("202308", 31), ("202309", 300))
    """

    def _make(*budgets, calendar=None, clock=None):
        records = [
            b if isinstance(b, BudgetRecord) else BudgetRecord(b[0], Decimal(b[1]))
            for b in budgets
        ]
        return ProrationEngine(
            InMemoryBudgetRepository(records),
            calendar=calendar,
            clock=clock or fixed_clock,
        )

    return _make


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite schema per test."""
    init_engine_from_url("sqlite://")
    create_tables()
    session = get_session()
    yield session
    session.close()
    drop_tables()
    reset_engine()
