"""Forward liquidity schedule and summary liquidity metrics.

Projects capital calls and distributions over the next N quarters (default
8, starting with the current quarter) in two passes:

1. Explicitly dated future events are placed into their quarter; events
   beyond the horizon are dropped.
2. Unfunded commitment not covered by scheduled calls is spread over the
   quarters with no scheduled call, front-loaded, at
   ``max(historical average call, unscheduled / N)`` per quarter. Quarters
   with no scheduled distribution receive the historical average
   distribution, or a fixed share of fund NAV when there is no history.

All functions are pure computation -- no I/O or database access.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

import structlog

from portfolio_risk.core.defaults import (
    COVERAGE_SENTINEL,
    DEFAULT_DEPLOYMENT_YEARS,
    DEFAULT_DISTRIBUTION_RATE,
    FORECAST_QUARTERS,
    PENDING_CALL_WINDOW_DAYS,
)
from portfolio_risk.core.utils.quarters import (
    coerce_datetime,
    quarter_buckets,
    quarter_key,
    quarter_of,
)
from portfolio_risk.risk.cashflow_history import (
    LiquiditySchedulePoint,
    average_quarterly_flows,
)
from portfolio_risk.risk.holdings import (
    CapitalCallEvent,
    DistributionEvent,
    FundHolding,
    clamp_amount,
    to_number,
)

logger = structlog.get_logger(__name__)

_SECONDS_PER_DAY = 86_400.0


@dataclass(frozen=True)
class LiquiditySummary:
    """Near-term liquidity metrics derived from the forward schedule.

    Attributes:
        pending_calls: Explicit calls due within the pending-call window.
        next_12_month_calls: Calls in the first 4 forecast quarters.
        next_12_month_distributions: Distributions in the first 4 quarters.
        next_24_month_calls: Calls across all forecast quarters.
        next_24_month_distributions: Distributions across all forecast quarters.
        recommended_reserve: total commitment * policy target buffer.
        reserve_gap: Shortfall of reserve + distributions against calls.
        liquidity_coverage: (reserve + distributions) / calls, or the
            sentinel when no calls are projected.
        average_quarterly_call: next_12_month_calls / 4.
        deployment_years: Years to call all unfunded capital at the
            projected annual pace.
        schedule: The forward schedule, oldest first.
    """

    pending_calls: float
    next_12_month_calls: float
    next_12_month_distributions: float
    next_24_month_calls: float
    next_24_month_distributions: float
    recommended_reserve: float
    reserve_gap: float
    liquidity_coverage: float
    average_quarterly_call: float
    deployment_years: float
    schedule: tuple[LiquiditySchedulePoint, ...]


def coverage_ratio(
    available: float,
    obligations: float,
    sentinel: float = COVERAGE_SENTINEL,
) -> float:
    """available / obligations, or ``sentinel`` when there are no obligations."""
    if obligations <= 0:
        return sentinel
    return available / max(obligations, 1.0)


def build_forward_schedule(
    funds: Sequence[FundHolding],
    capital_calls: Sequence[CapitalCallEvent],
    distributions: Sequence[DistributionEvent],
    history: Sequence[LiquiditySchedulePoint],
    as_of: datetime,
    quarters: int = FORECAST_QUARTERS,
    distribution_rate: float = DEFAULT_DISTRIBUTION_RATE,
) -> list[LiquiditySchedulePoint]:
    """Project capital calls and distributions for the next ``quarters`` quarters.

    Args:
        funds: Fund holdings; unfunded commitment drives unscheduled calls.
        capital_calls: Capital call events.
        distributions: Distribution events.
        history: Trailing quarterly history used for the average call and
            distribution pace.
        as_of: Reporting moment; events dated before it are ignored.
        quarters: Forecast horizon in quarters.
        distribution_rate: Quarterly share of fund NAV assumed distributed
            when there is no distribution history.

    Returns:
        Exactly ``quarters`` LiquiditySchedulePoint, oldest first.
    """
    buckets = quarter_buckets(as_of, quarters, "forward")
    calls: dict[str, float] = {b.key: 0.0 for b in buckets}
    dists: dict[str, float] = {b.key: 0.0 for b in buckets}

    # Pass 1: explicitly dated future events
    for event in capital_calls:
        event_date = event.effective_date
        if event_date is None or event_date < as_of:
            continue
        key = quarter_key(quarter_of(event_date))
        if key in calls:
            calls[key] += clamp_amount(event.amount)

    for event in distributions:
        event_date = event.effective_date
        if event_date is None or event_date < as_of:
            continue
        key = quarter_key(quarter_of(event_date))
        if key in dists:
            dists[key] += clamp_amount(event.amount)

    # Pass 2: spread unscheduled commitments and default distributions
    avg_call, avg_distribution = average_quarterly_flows(history)
    remaining_commitment = sum(f.unfunded for f in funds)
    scheduled_calls = sum(calls.values())
    unscheduled_calls = max(remaining_commitment - scheduled_calls, 0.0)
    default_quarterly_call = max(avg_call, unscheduled_calls / max(len(buckets), 1))
    if avg_distribution > 0:
        default_quarterly_distribution = avg_distribution
    else:
        total_nav = sum(to_number(f.nav) for f in funds)
        default_quarterly_distribution = max(total_nav * distribution_rate, 0.0)

    allocated = 0.0
    for bucket in buckets:
        if calls[bucket.key] == 0.0 and unscheduled_calls > 0:
            allocation = min(default_quarterly_call, unscheduled_calls)
            calls[bucket.key] += allocation
            unscheduled_calls -= allocation
            allocated += allocation
        if dists[bucket.key] == 0.0:
            dists[bucket.key] = default_quarterly_distribution

    if allocated > 0:
        logger.debug(
            "unscheduled_calls_allocated",
            remaining_commitment=remaining_commitment,
            scheduled_calls=scheduled_calls,
            allocated=allocated,
            default_quarterly_call=default_quarterly_call,
        )

    return [
        LiquiditySchedulePoint(
            period=bucket.label,
            capital_calls=calls[bucket.key],
            distributions=dists[bucket.key],
            net=dists[bucket.key] - calls[bucket.key],
        )
        for bucket in buckets
    ]


def pending_calls_within(
    capital_calls: Sequence[CapitalCallEvent],
    as_of: datetime,
    window_days: int = PENDING_CALL_WINDOW_DAYS,
) -> float:
    """Sum explicit calls whose due date is between now and ``window_days`` ahead.

    Only the due date counts here; calls known only by upload date are not
    treated as pending.
    """
    total = 0.0
    for event in capital_calls:
        due = coerce_datetime(event.due_date)
        if due is None:
            continue
        days_until_due = (due - as_of).total_seconds() / _SECONDS_PER_DAY
        if 0 <= days_until_due <= window_days:
            total += clamp_amount(event.amount)
    return total


def _sum_first(schedule: Sequence[LiquiditySchedulePoint], count: int) -> tuple[float, float]:
    head = schedule[:count]
    return (
        sum(p.capital_calls for p in head),
        sum(p.distributions for p in head),
    )


def summarize_liquidity(
    schedule: Sequence[LiquiditySchedulePoint],
    capital_calls: Sequence[CapitalCallEvent],
    total_commitment: float,
    unfunded_commitments: float,
    target_liquidity_buffer: float,
    as_of: datetime,
    pending_window_days: int = PENDING_CALL_WINDOW_DAYS,
    sentinel: float = COVERAGE_SENTINEL,
) -> LiquiditySummary:
    """Derive the liquidity summary from a forward schedule.

    Args:
        schedule: Output of build_forward_schedule().
        capital_calls: Capital call events, for the pending-call figure.
        total_commitment: Sum of fund commitments.
        unfunded_commitments: Total commitment not yet paid in.
        target_liquidity_buffer: Reserve as a fraction of total commitment.
        as_of: Reporting moment.
        pending_window_days: Horizon of the pending-call figure in days.
        sentinel: Coverage reported when no calls are projected.

    Returns:
        LiquiditySummary with every field finite.
    """
    next_12_calls, next_12_distributions = _sum_first(schedule, 4)
    next_24_calls, next_24_distributions = _sum_first(schedule, 8)
    reserve = to_number(total_commitment) * target_liquidity_buffer

    if next_12_calls > 0:
        # Years to deploy unfunded capital at the projected annual call pace
        deployment_years = unfunded_commitments / max(next_12_calls, 1.0)
    elif unfunded_commitments > 0:
        deployment_years = DEFAULT_DEPLOYMENT_YEARS
    else:
        deployment_years = 0.0

    return LiquiditySummary(
        pending_calls=pending_calls_within(capital_calls, as_of, pending_window_days),
        next_12_month_calls=next_12_calls,
        next_12_month_distributions=next_12_distributions,
        next_24_month_calls=next_24_calls,
        next_24_month_distributions=next_24_distributions,
        recommended_reserve=reserve,
        reserve_gap=max(next_12_calls - (reserve + next_12_distributions), 0.0),
        liquidity_coverage=coverage_ratio(reserve + next_12_distributions, next_12_calls, sentinel),
        average_quarterly_call=next_12_calls / 4,
        deployment_years=deployment_years,
        schedule=tuple(schedule),
    )
