"""Unit tests for the forward liquidity schedule and liquidity summary.

Covers dated-event placement, front-loaded allocation of unscheduled
commitments, default distributions, pending calls, and the coverage
sentinel when no calls are projected.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from portfolio_risk.risk.cashflow_history import LiquiditySchedulePoint
from portfolio_risk.risk.holdings import CapitalCallEvent, DistributionEvent
from portfolio_risk.risk.liquidity_forecaster import (
    build_forward_schedule,
    coverage_ratio,
    pending_calls_within,
    summarize_liquidity,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fund(make_fund):
    """One fund with 600K unfunded and 500K NAV."""
    return make_fund("f1", commitment=1_000_000.0, paid_in=400_000.0, nav=500_000.0)


def _history(call: float, distribution: float, quarters: int = 8) -> list[LiquiditySchedulePoint]:
    return [
        LiquiditySchedulePoint(
            period=f"H{i}", capital_calls=call, distributions=distribution, net=distribution - call
        )
        for i in range(quarters)
    ]


# ---------------------------------------------------------------------------
# Forward schedule
# ---------------------------------------------------------------------------


class TestForwardSchedule:
    def test_eight_quarters_from_current(self, fund, as_of: datetime) -> None:
        schedule = build_forward_schedule([fund], [], [], [], as_of)
        assert len(schedule) == 8
        assert schedule[0].period == "Q3 2025"
        assert schedule[-1].period == "Q2 2027"

    def test_unfunded_spread_evenly_without_history(self, fund, as_of: datetime) -> None:
        schedule = build_forward_schedule([fund], [], [], [], as_of)
        assert [p.capital_calls for p in schedule] == pytest.approx([75_000.0] * 8)
        assert sum(p.capital_calls for p in schedule) == pytest.approx(600_000.0)

    def test_dated_call_placed_and_quarter_skipped(self, fund, as_of: datetime) -> None:
        calls = [CapitalCallEvent(id="c1", fund_id="f1", amount=100_000.0, due_date="2025-10-15")]
        schedule = build_forward_schedule([fund], calls, [], [], as_of)
        by_period = {p.period: p.capital_calls for p in schedule}

        assert by_period["Q4 2025"] == pytest.approx(100_000.0)
        # 500K unscheduled at 62.5K per open quarter; 7 open quarters
        assert by_period["Q3 2025"] == pytest.approx(62_500.0)
        assert by_period["Q2 2027"] == pytest.approx(62_500.0)

    def test_allocation_is_front_loaded(self, fund, as_of: datetime) -> None:
        """Historical pace of 200K/quarter exhausts 600K in three quarters."""
        schedule = build_forward_schedule([fund], [], [], _history(200_000.0, 0.0), as_of)
        assert [p.capital_calls for p in schedule] == pytest.approx(
            [200_000.0, 200_000.0, 200_000.0, 0.0, 0.0, 0.0, 0.0, 0.0]
        )

    def test_past_events_ignored(self, fund, as_of: datetime) -> None:
        calls = [CapitalCallEvent(id="c1", fund_id="f1", amount=100_000.0, due_date="2025-08-01")]
        with_past = build_forward_schedule([fund], calls, [], [], as_of)
        without = build_forward_schedule([fund], [], [], [], as_of)
        assert with_past == without

    def test_events_beyond_horizon_dropped(self, make_fund, as_of: datetime) -> None:
        funded = make_fund("f1", commitment=100.0, paid_in=100.0, nav=0.0)
        calls = [CapitalCallEvent(id="c1", fund_id="f1", amount=50_000.0, due_date="2030-01-01")]
        schedule = build_forward_schedule([funded], calls, [], [], as_of)
        assert sum(p.capital_calls for p in schedule) == 0.0

    def test_default_distribution_is_share_of_nav(self, fund, as_of: datetime) -> None:
        schedule = build_forward_schedule([fund], [], [], [], as_of)
        assert [p.distributions for p in schedule] == pytest.approx([10_000.0] * 8)

    def test_historical_distribution_pace_preferred(self, fund, as_of: datetime) -> None:
        schedule = build_forward_schedule([fund], [], [], _history(0.0, 30_000.0), as_of)
        assert schedule[0].distributions == pytest.approx(30_000.0)

    def test_dated_distribution_kept(self, fund, as_of: datetime) -> None:
        dists = [DistributionEvent(id="d1", fund_id="f1", amount=70_000.0, distribution_date="2026-02-01")]
        by_period = {
            p.period: p.distributions for p in build_forward_schedule([fund], [], dists, [], as_of)
        }
        assert by_period["Q1 2026"] == pytest.approx(70_000.0)
        assert by_period["Q2 2026"] == pytest.approx(10_000.0)

    def test_no_funds_gives_zero_schedule(self, as_of: datetime) -> None:
        schedule = build_forward_schedule([], [], [], [], as_of)
        assert all(p.capital_calls == 0.0 and p.distributions == 0.0 for p in schedule)


# ---------------------------------------------------------------------------
# Pending calls and coverage
# ---------------------------------------------------------------------------


class TestPendingCalls:
    def test_only_calls_due_within_window(self, as_of: datetime) -> None:
        calls = [
            CapitalCallEvent(id="c1", fund_id="f1", amount=100_000.0, due_date=as_of + timedelta(days=30)),
            CapitalCallEvent(id="c2", fund_id="f1", amount=200_000.0, due_date=as_of + timedelta(days=120)),
            CapitalCallEvent(id="c3", fund_id="f1", amount=300_000.0, due_date=as_of - timedelta(days=5)),
            CapitalCallEvent(id="c4", fund_id="f1", amount=400_000.0, upload_date=as_of + timedelta(days=10)),
        ]
        assert pending_calls_within(calls, as_of) == pytest.approx(100_000.0)

    def test_window_is_configurable(self, as_of: datetime) -> None:
        calls = [
            CapitalCallEvent(id="c1", fund_id="f1", amount=200_000.0, due_date=as_of + timedelta(days=120)),
        ]
        assert pending_calls_within(calls, as_of, window_days=180) == pytest.approx(200_000.0)


class TestCoverageRatio:
    def test_ratio(self) -> None:
        assert coverage_ratio(300.0, 200.0) == pytest.approx(1.5)

    def test_sentinel_without_obligations(self) -> None:
        assert coverage_ratio(300.0, 0.0) == pytest.approx(5.0)
        assert coverage_ratio(0.0, 0.0, sentinel=9.0) == pytest.approx(9.0)


class TestSummarizeLiquidity:
    def test_summary_from_schedule(self, fund, as_of: datetime) -> None:
        schedule = build_forward_schedule([fund], [], [], [], as_of)
        summary = summarize_liquidity(
            schedule,
            [],
            total_commitment=1_000_000.0,
            unfunded_commitments=600_000.0,
            target_liquidity_buffer=0.15,
            as_of=as_of,
        )
        assert summary.next_12_month_calls == pytest.approx(300_000.0)
        assert summary.next_12_month_distributions == pytest.approx(40_000.0)
        assert summary.next_24_month_calls == pytest.approx(600_000.0)
        assert summary.recommended_reserve == pytest.approx(150_000.0)
        assert summary.reserve_gap == pytest.approx(110_000.0)
        assert summary.liquidity_coverage == pytest.approx(190_000.0 / 300_000.0)
        assert summary.average_quarterly_call == pytest.approx(75_000.0)
        assert summary.deployment_years == pytest.approx(2.0)
        assert len(summary.schedule) == 8

    def test_sentinel_when_no_calls(self, as_of: datetime) -> None:
        summary = summarize_liquidity(
            [], [], total_commitment=0.0, unfunded_commitments=0.0,
            target_liquidity_buffer=0.15, as_of=as_of,
        )
        assert summary.liquidity_coverage == pytest.approx(5.0)
        assert summary.reserve_gap == 0.0
        assert summary.deployment_years == 0.0

    def test_default_deployment_years_without_projected_calls(self, as_of: datetime) -> None:
        summary = summarize_liquidity(
            [], [], total_commitment=500_000.0, unfunded_commitments=100_000.0,
            target_liquidity_buffer=0.15, as_of=as_of,
        )
        assert summary.deployment_years == pytest.approx(3.0)
