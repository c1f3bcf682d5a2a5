"""Trailing cash-flow history by fiscal quarter.

Reconstructs the last N quarters (default 8, ending with the current
quarter) of capital calls and distributions from dated events, with
cumulative running totals. Events dated after ``as_of`` belong to the
forecast and are ignored here; undated events are skipped.

All functions are pure computation -- no I/O or database access.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

import structlog

from portfolio_risk.core.defaults import HISTORY_QUARTERS
from portfolio_risk.core.utils.quarters import quarter_buckets, quarter_key, quarter_of
from portfolio_risk.risk.holdings import CapitalCallEvent, DistributionEvent, clamp_amount

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LiquiditySchedulePoint:
    """Cash flows for one quarter.

    Attributes:
        period: Quarter label, e.g. ``"Q3 2025"``.
        capital_calls: Sum of (non-negative) capital calls.
        distributions: Sum of (non-negative) distributions.
        net: distributions - capital_calls.
    """

    period: str
    capital_calls: float
    distributions: float
    net: float


@dataclass(frozen=True)
class RiskHistoryPoint(LiquiditySchedulePoint):
    """Historical quarter with running totals since the window start."""

    cumulative_calls: float = 0.0
    cumulative_distributions: float = 0.0


def build_historical_series(
    capital_calls: Sequence[CapitalCallEvent],
    distributions: Sequence[DistributionEvent],
    as_of: datetime,
    quarters: int = HISTORY_QUARTERS,
) -> list[RiskHistoryPoint]:
    """Bucket past events into the trailing ``quarters`` quarters.

    Args:
        capital_calls: Capital call events; effective date is due date,
            falling back to upload date.
        distributions: Distribution events.
        as_of: Reporting moment. The last bucket is the quarter containing it.
        quarters: Number of trailing quarters.

    Returns:
        Exactly ``quarters`` RiskHistoryPoint, oldest first.
    """
    buckets = quarter_buckets(as_of, quarters, "backward")
    calls: dict[str, float] = {b.key: 0.0 for b in buckets}
    dists: dict[str, float] = {b.key: 0.0 for b in buckets}
    skipped = 0

    for event in capital_calls:
        event_date = event.effective_date
        if event_date is None:
            skipped += 1
            continue
        if event_date > as_of:
            continue
        key = quarter_key(quarter_of(event_date))
        if key in calls:
            calls[key] += clamp_amount(event.amount)

    for event in distributions:
        event_date = event.effective_date
        if event_date is None:
            skipped += 1
            continue
        if event_date > as_of:
            continue
        key = quarter_key(quarter_of(event_date))
        if key in dists:
            dists[key] += clamp_amount(event.amount)

    if skipped:
        logger.debug("undated_events_skipped", series="history", count=skipped)

    history: list[RiskHistoryPoint] = []
    cumulative_calls = 0.0
    cumulative_distributions = 0.0
    for bucket in buckets:
        cumulative_calls += calls[bucket.key]
        cumulative_distributions += dists[bucket.key]
        history.append(
            RiskHistoryPoint(
                period=bucket.label,
                capital_calls=calls[bucket.key],
                distributions=dists[bucket.key],
                net=dists[bucket.key] - calls[bucket.key],
                cumulative_calls=cumulative_calls,
                cumulative_distributions=cumulative_distributions,
            )
        )

    return history


def average_quarterly_flows(history: Sequence[LiquiditySchedulePoint]) -> tuple[float, float]:
    """Mean (capital_calls, distributions) per quarter; (0, 0) when empty."""
    if not history:
        return 0.0, 0.0
    n = len(history)
    return (
        sum(p.capital_calls for p in history) / n,
        sum(p.distributions for p in history) / n,
    )
