"""Root pytest configuration and shared fixtures.

Provides common test fixtures used across all test modules:
- as_of: the frozen reporting moment (2025-08-14 12:00 UTC, inside Q3 2025)
- example_funds: the two-fund Luxembourg/Ireland portfolio managed by Acme
- make_fund / make_direct: factories with sensible defaults
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

import pytest

from portfolio_risk.risk.holdings import DirectHolding, FundHolding


@pytest.fixture
def as_of() -> datetime:
    """Reporting moment used by every time-dependent test."""
    return datetime(2025, 8, 14, 12, 0, 0)


@pytest.fixture
def make_fund() -> Callable[..., FundHolding]:
    """Return a factory for FundHolding with neutral defaults.

    Usage::

        def test_something(make_fund):
            fund = make_fund("f1", nav=500_000.0, manager="Acme")
    """
    def _make(fund_id: str = "f1", **overrides: Any) -> FundHolding:
        fields: dict[str, Any] = {
            "id": fund_id,
            "name": f"Fund {fund_id}",
            "manager": None,
            "domicile": None,
            "commitment": 0.0,
            "paid_in": 0.0,
            "nav": 0.0,
            "vintage": None,
        }
        fields.update(overrides)
        return FundHolding(**fields)
    return _make


@pytest.fixture
def make_direct() -> Callable[..., DirectHolding]:
    """Return a factory for DirectHolding."""
    def _make(holding_id: str = "d1", **overrides: Any) -> DirectHolding:
        fields: dict[str, Any] = {"id": holding_id, "name": None, "current_value": None}
        fields.update(overrides)
        return DirectHolding(**fields)
    return _make


@pytest.fixture
def example_funds(make_fund) -> list[FundHolding]:
    """Fund A (Luxembourg) and Fund B (Ireland), both managed by Acme."""
    return [
        make_fund(
            "fund-a",
            name="Fund A",
            manager="Acme",
            domicile="Luxembourg",
            commitment=1_000_000.0,
            paid_in=600_000.0,
            nav=700_000.0,
        ),
        make_fund(
            "fund-b",
            name="Fund B",
            manager="Acme",
            domicile="Ireland",
            commitment=500_000.0,
            paid_in=500_000.0,
            nav=800_000.0,
        ),
    ]
