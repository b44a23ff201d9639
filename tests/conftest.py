"""
Pytest configuration and shared fixtures for querydiff tests.
Provides row set builders, an isolated metrics registry and env cleanup.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from prometheus_client import CollectorRegistry

from querydiff.rowset import RowSet, Side
from querydiff.utils.metrics import ComparisonMetrics


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "requires_driver: needs a database driver importable")


@pytest.fixture(autouse=True)
def clear_connection_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer connection strings out of tests."""
    monkeypatch.delenv("QUERYDIFF_MSSQL_CONNECTION", raising=False)
    monkeypatch.delenv("QUERYDIFF_PGSQL_CONNECTION", raising=False)


@pytest.fixture
def make_rowset():
    """Build a RowSet from native values."""
    def _make(columns, rows, side=Side.LEFT, label=""):
        return RowSet.from_values(columns, rows, side, label)
    return _make


@pytest.fixture
def customers_left() -> RowSet:
    return RowSet.from_values(
        ["id", "name", "balance", "created"],
        [
            [1, "Alice", Decimal("10.50"), datetime(2024, 1, 1, 9, 0)],
            [2, "Bob", Decimal("0.00"), datetime(2024, 1, 2, 9, 0)],
            [3, "Carol", None, datetime(2024, 1, 3, 9, 0)],
        ],
        Side.LEFT,
        "MSSQL",
    )


@pytest.fixture
def customers_right() -> RowSet:
    return RowSet.from_values(
        ["id", "name", "balance", "created"],
        [
            [1, "Alice", Decimal("10.50"), datetime(2024, 1, 1, 9, 0)],
            [2, "Bobby", Decimal("0.00"), datetime(2024, 1, 2, 9, 0)],
            [4, "Dave", Decimal("5.00"), datetime(2024, 1, 4, 9, 0)],
        ],
        Side.RIGHT,
        "PgSQL",
    )


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh Prometheus registry, isolated from the global one."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> ComparisonMetrics:
    return ComparisonMetrics(registry=registry)
