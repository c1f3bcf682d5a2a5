"""Portfolio risk report pipeline.

RiskEngine is the single entry point that turns a holdings snapshot into a
RiskReport. It runs, in order: input normalization, exposure aggregation,
trailing cash-flow history, forward liquidity forecast, policy evaluation,
risk scoring and scenario stress testing. The reporting moment ``as_of`` is
an explicit input so identical inputs always give identical reports.

All functions are pure computation -- no I/O or database access.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from portfolio_risk.core.config import Settings, settings as default_settings
from portfolio_risk.core.defaults import RiskPolicyConfig, ScenarioConfig
from portfolio_risk.core.utils.logging_config import get_logger
from portfolio_risk.core.utils.quarters import coerce_datetime
from portfolio_risk.risk.asset_class import infer_fund_asset_class
from portfolio_risk.risk.cashflow_history import RiskHistoryPoint, build_historical_series
from portfolio_risk.risk.exposures import ExposureSet, aggregate_exposures
from portfolio_risk.risk.holdings import (
    CapitalCallEvent,
    DirectHolding,
    DistributionEvent,
    FundHolding,
)
from portfolio_risk.risk.liquidity_forecaster import (
    LiquiditySummary,
    build_forward_schedule,
    summarize_liquidity,
)
from portfolio_risk.risk.metrics import PortfolioMetrics, compute_portfolio_metrics
from portfolio_risk.risk.normalizer import AssetClassInference, normalize_holdings
from portfolio_risk.risk.policy import PolicyBreach, PolicyEvaluator
from portfolio_risk.risk.risk_scorer import RiskScores, calculate_risk_scores
from portfolio_risk.risk.scenario_engine import ScenarioEngine, ScenarioResult

logger = get_logger("risk.engine")


@dataclass(frozen=True)
class RiskReport:
    """Complete portfolio risk report.

    Attributes:
        as_of: Reporting moment the time buckets are anchored on.
        metrics: Portfolio totals.
        exposures: Six-dimension exposure breakdowns.
        liquidity: Liquidity summary including the forward schedule.
        risk_scores: Sub-scores and overall score.
        scenarios: One result per stress scenario.
        policy_breaches: Detected policy breaches.
        history: Trailing quarterly cash-flow history.
    """

    as_of: datetime
    metrics: PortfolioMetrics
    exposures: ExposureSet
    liquidity: LiquiditySummary
    risk_scores: RiskScores
    scenarios: tuple[ScenarioResult, ...]
    policy_breaches: tuple[PolicyBreach, ...]
    history: tuple[RiskHistoryPoint, ...]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return {
            "asOf": self.as_of.isoformat(),
            "metrics": _camel_record(asdict(self.metrics)),
            "exposures": {
                _to_camel(name): [_camel_record(asdict(e)) for e in breakdown.entries]
                for name, breakdown in self.exposures.items()
            },
            "liquidity": _camel_record(asdict(self.liquidity)),
            "riskScores": {
                **_camel_record(asdict(self.risk_scores)),
                "riskLevel": self.risk_scores.risk_level.value,
            },
            "scenarios": [_camel_record(asdict(s)) for s in self.scenarios],
            "policyBreaches": [_camel_record(asdict(b)) for b in self.policy_breaches],
            "history": {
                "trailingQuarters": [_camel_record(asdict(p)) for p in self.history],
            },
        }


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _camel_record(record: dict[str, Any]) -> dict[str, Any]:
    """camelCase the field names of one record; label-keyed dicts keep their keys."""
    out: dict[str, Any] = {}
    for key, value in record.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, (list, tuple)):
            value = [_camel_record(v) if isinstance(v, dict) else v for v in value]
        out[_to_camel(key)] = value
    return out


class RiskEngine:
    """Orchestrates the risk components into a single RiskReport.

    Args:
        config: Engine settings (bucket counts, windows, sentinel).
        infer_asset_class: Asset-class inference for funds without a tag.
    """

    def __init__(
        self,
        config: Settings | None = None,
        infer_asset_class: AssetClassInference = infer_fund_asset_class,
    ) -> None:
        self.config = config or default_settings
        self.infer_asset_class = infer_asset_class

    def generate_report(
        self,
        funds: Sequence[FundHolding],
        direct_investments: Sequence[DirectHolding],
        capital_calls: Sequence[CapitalCallEvent] | None = None,
        distributions: Sequence[DistributionEvent] | None = None,
        policy: RiskPolicyConfig | Mapping[str, Any] | None = None,
        scenario_configs: Sequence[ScenarioConfig | Mapping[str, Any]] | None = None,
        as_of: datetime | None = None,
    ) -> RiskReport:
        """Generate a risk report for one holdings snapshot.

        Args:
            funds: Fund holdings.
            direct_investments: Direct holdings.
            capital_calls: Capital call events (optional).
            distributions: Distribution events (optional).
            policy: Complete or partial policy; merged over the defaults.
            scenario_configs: Stress scenarios; None runs DEFAULT_SCENARIOS.
            as_of: Reporting moment. Read from the clock once when omitted.

        Returns:
            RiskReport with no NaN or infinite values.
        """
        cfg = self.config
        capital_calls = list(capital_calls or [])
        distributions = list(distributions or [])
        as_of = self._resolve_as_of(as_of)
        normalized_policy = RiskPolicyConfig.from_partial(policy)

        # Step 1: Normalize and aggregate exposures
        assets = normalize_holdings(funds, direct_investments, self.infer_asset_class)
        exposures = aggregate_exposures(assets)
        metrics = compute_portfolio_metrics(funds, direct_investments, exposures)

        # Step 2: Trailing history and forward schedule
        history = build_historical_series(
            capital_calls, distributions, as_of, quarters=cfg.history_quarters
        )
        schedule = build_forward_schedule(
            funds,
            capital_calls,
            distributions,
            history,
            as_of,
            quarters=cfg.forecast_quarters,
            distribution_rate=cfg.default_distribution_rate,
        )
        liquidity = summarize_liquidity(
            schedule,
            capital_calls,
            total_commitment=metrics.total_commitment,
            unfunded_commitments=metrics.unfunded_commitments,
            target_liquidity_buffer=normalized_policy.target_liquidity_buffer,
            as_of=as_of,
            pending_window_days=cfg.pending_call_window_days,
            sentinel=cfg.coverage_sentinel,
        )

        # Step 3: Policy breaches
        breaches = PolicyEvaluator(normalized_policy).evaluate(
            metrics, exposures, liquidity, funds
        )

        # Step 4: Scores
        risk_scores = calculate_risk_scores(
            exposures, liquidity, breaches, normalized_policy, funds, metrics.total_paid_in
        )

        # Step 5: Scenarios
        scenarios = ScenarioEngine(scenario_configs, sentinel=cfg.coverage_sentinel).run_all(
            metrics.total_portfolio, liquidity
        )

        logger.info(
            "risk_report_generated",
            as_of=as_of.isoformat(),
            total_portfolio=metrics.total_portfolio,
            overall_risk_score=risk_scores.overall,
            risk_level=risk_scores.risk_level.value,
            n_breaches=len(breaches),
            n_scenarios=len(scenarios),
        )

        return RiskReport(
            as_of=as_of,
            metrics=metrics,
            exposures=exposures,
            liquidity=liquidity,
            risk_scores=risk_scores,
            scenarios=tuple(scenarios),
            policy_breaches=tuple(breaches),
            history=tuple(history),
        )

    @staticmethod
    def _resolve_as_of(as_of: Any) -> datetime:
        if as_of is not None:
            resolved = coerce_datetime(as_of)
            if resolved is not None:
                return resolved
            logger.warning("invalid_as_of_ignored", as_of=repr(as_of))
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def format_report(self, report: RiskReport) -> str:
        """Format a RiskReport as plain text for terminal display.

        Uses ASCII box drawing for compatibility. Sections: Portfolio Summary,
        Risk Scores, Exposures, Liquidity Schedule, Scenarios, Policy
        Breaches.

        Args:
            report: RiskReport to format.

        Returns:
            Multi-line formatted string.
        """
        lines: list[str] = []
        sep = "=" * 72
        m = report.metrics
        scores = report.risk_scores
        liq = report.liquidity

        # Header
        lines.append(sep)
        lines.append(f"  PORTFOLIO RISK REPORT  |  {report.as_of.strftime('%Y-%m-%d %H:%M:%S UTC')}")
        lines.append(
            f"  Risk Level: {scores.risk_level.value}  |  "
            f"Portfolio Value: {m.total_portfolio:,.2f}"
        )
        lines.append(sep)

        # Portfolio summary
        lines.append("")
        lines.append("  Portfolio Summary")
        lines.append("  " + "-" * 68)
        lines.append(f"  {'Total commitment':<36} {m.total_commitment:>18,.2f}")
        lines.append(f"  {'Paid-in capital':<36} {m.total_paid_in:>18,.2f}")
        lines.append(f"  {'Unfunded commitments':<36} {m.unfunded_commitments:>18,.2f}")
        lines.append(f"  {'Funds held':<36} {m.number_of_funds:>18}")

        # Risk scores
        lines.append("")
        lines.append("  Risk Scores")
        lines.append("  " + "-" * 68)
        for name in ("concentration", "liquidity", "performance", "policy", "overall"):
            value = getattr(scores, name)
            bar_len = min(int(value / 5), 20)
            bar = "#" * bar_len + "." * (20 - bar_len)
            lines.append(f"  {name.title():<36} {value:>8.1f}  [{bar}]")

        # Exposures (top 3 per dimension)
        lines.append("")
        lines.append("  Top Exposures")
        lines.append("  " + "-" * 68)
        for dimension, breakdown in report.exposures.items():
            for entry in breakdown.entries[:3]:
                lines.append(
                    f"  {dimension:<14} {entry.name[:28]:<28} "
                    f"{entry.amount:>14,.0f} {entry.percentage:>8.1f}%"
                )

        # Liquidity
        lines.append("")
        lines.append("  Liquidity")
        lines.append("  " + "-" * 68)
        lines.append(
            f"  Coverage: {liq.liquidity_coverage:.2f}x  |  "
            f"Reserve: {liq.recommended_reserve:,.0f}  |  "
            f"Gap: {liq.reserve_gap:,.0f}"
        )
        lines.append(
            f"  {'Quarter':<12} {'Calls':>16} {'Distributions':>16} {'Net':>16}"
        )
        for point in liq.schedule:
            lines.append(
                f"  {point.period:<12} {point.capital_calls:>16,.0f} "
                f"{point.distributions:>16,.0f} {point.net:>16,.0f}"
            )

        # Scenarios
        lines.append("")
        lines.append("  Stress Scenarios")
        lines.append("  " + "-" * 68)
        lines.append(
            f"  {'Scenario':<20} {'Projected NAV':>16} {'Gap':>14} {'Coverage':>10}"
        )
        for sr in report.scenarios:
            lines.append(
                f"  {sr.name[:20]:<20} {sr.projected_nav:>16,.0f} "
                f"{sr.liquidity_gap:>14,.0f} {sr.coverage_ratio:>9.2f}x"
            )

        # Policy breaches
        if report.policy_breaches:
            lines.append("")
            lines.append("  Policy Breaches")
            lines.append("  " + "-" * 68)
            for breach in report.policy_breaches:
                lines.append(f"  [{breach.severity.value:<8}] {breach.message}")

        lines.append("")
        lines.append(sep)

        return "\n".join(lines)


def compute_risk_report(
    funds: Sequence[FundHolding],
    direct_investments: Sequence[DirectHolding],
    capital_calls: Sequence[CapitalCallEvent] | None = None,
    distributions: Sequence[DistributionEvent] | None = None,
    policy: RiskPolicyConfig | Mapping[str, Any] | None = None,
    scenario_configs: Sequence[ScenarioConfig | Mapping[str, Any]] | None = None,
    *,
    as_of: datetime | None = None,
    infer_asset_class: AssetClassInference = infer_fund_asset_class,
) -> RiskReport:
    """Compute a RiskReport with default engine settings.

    Convenience wrapper around ``RiskEngine(...).generate_report(...)``.
    """
    engine = RiskEngine(infer_asset_class=infer_asset_class)
    return engine.generate_report(
        funds,
        direct_investments,
        capital_calls=capital_calls,
        distributions=distributions,
        policy=policy,
        scenario_configs=scenario_configs,
        as_of=as_of,
    )


def build_snapshot_summary(report: RiskReport) -> dict[str, Any]:
    """Flatten a report into the record a persistence layer stores per snapshot.

    Returns:
        Dict with scores, totals, coverage, asset-class and geography
        exposures and breaches, all JSON-compatible.
    """
    return {
        "asOf": report.as_of.isoformat(),
        "overallRiskScore": report.risk_scores.overall,
        "concentrationRiskScore": report.risk_scores.concentration,
        "liquidityRiskScore": report.risk_scores.liquidity,
        "totalPortfolio": report.metrics.total_portfolio,
        "unfundedCommitments": report.metrics.unfunded_commitments,
        "liquidityCoverage": report.liquidity.liquidity_coverage,
        "concentrationByAsset": [
            {"name": e.name, "amount": e.amount, "percentage": e.percentage}
            for e in report.exposures.asset_class.entries
        ],
        "concentrationByGeo": [
            {"name": e.name, "amount": e.amount, "percentage": e.percentage}
            for e in report.exposures.geography.entries
        ],
        "policyBreaches": [
            {
                "dimension": b.dimension.value,
                "label": b.label,
                "current": b.current,
                "limit": b.limit,
                "severity": b.severity.value,
                "message": b.message,
            }
            for b in report.policy_breaches
        ],
    }
