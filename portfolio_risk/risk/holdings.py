"""Input data model for the risk engine.

Read-only snapshot records supplied per report request by the upstream
data-access layer: fund holdings, direct holdings, capital-call events and
distribution events. Records are never mutated by the engine.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union

from portfolio_risk.core.utils.quarters import coerce_datetime

DateLike = Union[date, datetime, str, None]


def to_number(value: Any) -> float:
    """Return value as a finite float, or 0.0 for None/non-numeric input."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def clamp_amount(value: Any) -> float:
    """Non-negative numeric amount; negatives and garbage become 0.0."""
    return max(to_number(value), 0.0)


@dataclass(frozen=True)
class FundHolding:
    """A limited-partner position in a fund.

    ``paid_in <= commitment`` is assumed to be validated upstream.
    """

    id: str
    name: str
    manager: str | None
    domicile: str | None
    commitment: float
    paid_in: float
    nav: float
    vintage: int | None
    asset_class: str | None = None
    sector: str | None = None
    base_currency: str | None = None
    leverage: float | None = None
    tvpi: float | None = None
    dpi: float | None = None
    irr: float | None = None

    @property
    def unfunded(self) -> float:
        return max(to_number(self.commitment) - to_number(self.paid_in), 0.0)


@dataclass(frozen=True)
class DirectHolding:
    """A direct (non-fund) investment."""

    id: str
    name: str | None
    current_value: float | None
    investment_amount: float | None = None
    asset_class: str | None = None
    sector: str | None = None
    geography: str | None = None
    currency: str | None = None
    investment_type: str | None = None

    @property
    def value(self) -> float:
        """Current value when set and non-zero, else investment amount, else 0."""
        return to_number(self.current_value) or to_number(self.investment_amount)


@dataclass(frozen=True)
class CapitalCallEvent:
    """A capital call notice issued by a fund."""

    id: str
    fund_id: str
    amount: float
    due_date: DateLike = None
    upload_date: DateLike = None
    payment_status: str | None = None

    @property
    def effective_date(self) -> datetime | None:
        """Due date when usable, otherwise the upload date."""
        return coerce_datetime(self.due_date) or coerce_datetime(self.upload_date)


@dataclass(frozen=True)
class DistributionEvent:
    """A distribution paid by a fund."""

    id: str
    fund_id: str
    amount: float
    distribution_date: DateLike = None

    @property
    def effective_date(self) -> datetime | None:
        return coerce_datetime(self.distribution_date)
