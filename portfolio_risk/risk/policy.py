"""Policy compliance checks with severity grading.

Compares every exposure entry, single-fund NAV share, the unfunded
commitment ratio, liquidity coverage and average fund leverage against a
RiskPolicyConfig and emits a PolicyBreach for each violation. Coverage is a
minimum-type threshold (breach when below the limit); all other checks are
maximum-type.

Severity is graded on the ratio current/limit (limit/current for minimum
checks):

    (1.0, 1.2] -> MEDIUM, (1.2, 1.4] -> HIGH, > 1.4 -> CRITICAL

All functions are pure computation and never raise.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from portfolio_risk.core.defaults import (
    CRITICAL_SEVERITY_RATIO,
    HIGH_SEVERITY_RATIO,
    MEDIUM_SEVERITY_RATIO,
    MIN_LIMIT_DENOMINATOR,
    RiskPolicyConfig,
)
from portfolio_risk.core.enums import BreachDimension, Severity
from portfolio_risk.risk.exposures import ExposureSet
from portfolio_risk.risk.holdings import FundHolding, to_number
from portfolio_risk.risk.liquidity_forecaster import LiquiditySummary
from portfolio_risk.risk.metrics import PortfolioMetrics

logger = structlog.get_logger(__name__)

# Exposure dimension -> (breach dimension, policy field), in check order.
EXPOSURE_LIMITS: tuple[tuple[str, BreachDimension, str], ...] = (
    ("asset_class", BreachDimension.ASSET_CLASS, "max_asset_class_exposure"),
    ("geography", BreachDimension.GEOGRAPHY, "max_geography_exposure"),
    ("vintage", BreachDimension.VINTAGE, "max_vintage_exposure"),
    ("manager", BreachDimension.MANAGER, "max_manager_exposure"),
    ("sector", BreachDimension.SECTOR, "max_sector_exposure"),
    ("currency", BreachDimension.CURRENCY, "max_currency_exposure"),
)


@dataclass(frozen=True)
class PolicyBreach:
    """A detected violation of a policy threshold.

    Attributes:
        dimension: Policy dimension the breach belongs to.
        label: What breached, e.g. a manager name or ``"Liquidity Coverage"``.
        current: Observed value.
        limit: Configured threshold.
        severity: MEDIUM, HIGH or CRITICAL.
        message: Human-readable description.
    """

    dimension: BreachDimension
    label: str
    current: float
    limit: float
    severity: Severity
    message: str


def grade_severity(current: float, limit: float, minimum: bool = False) -> Severity:
    """Grade how far ``current`` is past ``limit``.

    Args:
        current: Observed value.
        limit: Threshold value.
        minimum: True for minimum-type thresholds (breach when below).

    Returns:
        Severity.LOW when the limit is not breached, otherwise the tier of
        the excess ratio.
    """
    if minimum:
        if current <= 0:
            return Severity.CRITICAL if limit > 0 else Severity.LOW
        ratio = limit / current
    else:
        ratio = current / max(limit, MIN_LIMIT_DENOMINATOR)

    if ratio > CRITICAL_SEVERITY_RATIO:
        return Severity.CRITICAL
    if ratio > HIGH_SEVERITY_RATIO:
        return Severity.HIGH
    if ratio > MEDIUM_SEVERITY_RATIO:
        return Severity.MEDIUM
    return Severity.LOW


class PolicyEvaluator:
    """Evaluates a portfolio against policy thresholds.

    Args:
        policy: Complete or partial policy; missing fields take the defaults.
    """

    def __init__(self, policy: RiskPolicyConfig | Mapping[str, Any] | None = None) -> None:
        self.policy = RiskPolicyConfig.from_partial(policy)

    @staticmethod
    def _exceeded(
        dimension: BreachDimension, label: str, current: float, limit: float
    ) -> PolicyBreach:
        # A strict excess is at least MEDIUM even if the ratio rounds to 1.0.
        severity = grade_severity(current, limit)
        if severity is Severity.LOW:
            severity = Severity.MEDIUM
        return PolicyBreach(
            dimension=dimension,
            label=label,
            current=current,
            limit=limit,
            severity=severity,
            message=f"{label} at {current:.1f}% exceeds policy limit of {limit:g}%",
        )

    def check_exposures(self, exposures: ExposureSet) -> list[PolicyBreach]:
        """Breaches for every exposure entry above its dimension limit."""
        breaches: list[PolicyBreach] = []
        for dimension_name, dimension, limit_field in EXPOSURE_LIMITS:
            limit = getattr(self.policy, limit_field)
            for entry in getattr(exposures, dimension_name).entries:
                if entry.percentage > limit:
                    breaches.append(self._exceeded(dimension, entry.name, entry.percentage, limit))
        return breaches

    def check_single_funds(
        self, funds: Sequence[FundHolding], total_portfolio: float
    ) -> list[PolicyBreach]:
        """Breaches for funds whose NAV share exceeds the single-fund limit."""
        limit = self.policy.max_single_fund_exposure
        breaches: list[PolicyBreach] = []
        for fund in funds:
            exposure_pct = to_number(fund.nav) / total_portfolio * 100.0 if total_portfolio > 0 else 0.0
            if exposure_pct > limit:
                breaches.append(self._exceeded(BreachDimension.FUND, fund.name, exposure_pct, limit))
        return breaches

    def check_unfunded(self, metrics: PortfolioMetrics) -> list[PolicyBreach]:
        limit = self.policy.max_unfunded_commitments
        unfunded_pct = metrics.unfunded_pct
        if unfunded_pct > limit:
            return [self._exceeded(BreachDimension.LIQUIDITY, "Unfunded Commitments", unfunded_pct, limit)]
        return []

    def check_liquidity_coverage(self, liquidity: LiquiditySummary) -> list[PolicyBreach]:
        """Breach when coverage falls strictly below the policy minimum."""
        limit = self.policy.min_liquidity_coverage
        coverage = liquidity.liquidity_coverage
        if coverage >= limit:
            return []
        severity = grade_severity(coverage, limit, minimum=True)
        if severity is Severity.LOW:
            severity = Severity.MEDIUM
        return [
            PolicyBreach(
                dimension=BreachDimension.LIQUIDITY,
                label="Liquidity Coverage",
                current=coverage,
                limit=limit,
                severity=severity,
                message=(
                    f"Liquidity coverage {coverage:.2f}x is below policy "
                    f"minimum of {limit:.2f}x"
                ),
            )
        ]

    def check_leverage(self, funds: Sequence[FundHolding]) -> list[PolicyBreach]:
        """Breach when average fund leverage exceeds the portfolio limit.

        Compared in percent (leverage * 100) so the message reads like the
        exposure checks.
        """
        if not funds:
            return []
        avg_leverage = sum(max(to_number(f.leverage), 0.0) for f in funds) / len(funds)
        limit = self.policy.max_portfolio_leverage
        if avg_leverage > limit:
            return [
                self._exceeded(
                    BreachDimension.LEVERAGE, "Portfolio Leverage", avg_leverage * 100.0, limit * 100.0
                )
            ]
        return []

    def evaluate(
        self,
        metrics: PortfolioMetrics,
        exposures: ExposureSet,
        liquidity: LiquiditySummary,
        funds: Sequence[FundHolding],
    ) -> list[PolicyBreach]:
        """Run every check and return the breaches in check order.

        ``enable_policy_violation_alerts`` gates the exposure, single-fund
        and leverage checks; ``enable_liquidity_alerts`` gates the unfunded
        and coverage checks.

        Args:
            metrics: Portfolio totals.
            exposures: Six-dimension exposure breakdowns.
            liquidity: Liquidity summary.
            funds: Fund holdings.

        Returns:
            List of PolicyBreach; empty when compliant.
        """
        cfg = self.policy
        breaches: list[PolicyBreach] = []

        if cfg.enable_policy_violation_alerts:
            breaches.extend(self.check_exposures(exposures))
            breaches.extend(self.check_single_funds(funds, metrics.total_portfolio))
        if cfg.enable_liquidity_alerts:
            breaches.extend(self.check_unfunded(metrics))
            breaches.extend(self.check_liquidity_coverage(liquidity))
        if cfg.enable_policy_violation_alerts:
            breaches.extend(self.check_leverage(funds))

        if breaches:
            logger.info(
                "policy_breaches_detected",
                n_breaches=len(breaches),
                n_critical=sum(1 for b in breaches if b.severity is Severity.CRITICAL),
            )
        return breaches
