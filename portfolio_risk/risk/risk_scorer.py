"""Composite risk scoring.

Combines concentration, liquidity, performance and policy signals into four
0-100 sub-scores (higher = riskier) and an overall score equal to their
arithmetic mean.

Sub-score formulas:
- concentration: min(100, top asset class % * 0.7 + top manager % * 0.3)
- liquidity: 30 - min(30, (coverage - minimum) * 10) when coverage meets
  the policy minimum, else 70 + min(30, (minimum - coverage) * 40)
- performance: 20 when paid-in weighted TVPI meets the target, else
  50 + min(30, shortfall / target * 100)
- policy: min(100, breach count * 15)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from portfolio_risk.core.defaults import MIN_LIMIT_DENOMINATOR, RiskPolicyConfig
from portfolio_risk.core.enums import RiskLevel
from portfolio_risk.risk.exposures import ExposureSet
from portfolio_risk.risk.holdings import FundHolding, to_number
from portfolio_risk.risk.liquidity_forecaster import LiquiditySummary
from portfolio_risk.risk.policy import PolicyBreach

CONCENTRATION_ASSET_CLASS_WEIGHT = 0.7
CONCENTRATION_MANAGER_WEIGHT = 0.3
LIQUIDITY_COMPLIANT_BASE = 30.0
LIQUIDITY_COMPLIANT_SLOPE = 10.0
LIQUIDITY_SHORTFALL_BASE = 70.0
LIQUIDITY_SHORTFALL_SLOPE = 40.0
PERFORMANCE_ON_TARGET = 20.0
PERFORMANCE_SHORTFALL_BASE = 50.0
SCORE_BAND = 30.0
POLICY_POINTS_PER_BREACH = 15.0


@dataclass(frozen=True)
class RiskScores:
    """Sub-scores and overall risk score, each in [0, 100], one decimal."""

    concentration: float
    liquidity: float
    performance: float
    policy: float
    overall: float

    @property
    def risk_level(self) -> RiskLevel:
        if self.overall < 30:
            return RiskLevel.LOW
        if self.overall < 50:
            return RiskLevel.MODERATE
        if self.overall < 70:
            return RiskLevel.HIGH
        return RiskLevel.CRITICAL


def _clamp_score(value: float) -> float:
    return round(min(max(value, 0.0), 100.0), 1)


def concentration_score(exposures: ExposureSet) -> float:
    top_asset_class = exposures.asset_class.top
    top_manager = exposures.manager.top
    score = (
        (top_asset_class.percentage if top_asset_class else 0.0) * CONCENTRATION_ASSET_CLASS_WEIGHT
        + (top_manager.percentage if top_manager else 0.0) * CONCENTRATION_MANAGER_WEIGHT
    )
    return min(100.0, score)


def liquidity_score(coverage: float, minimum_coverage: float) -> float:
    if coverage >= minimum_coverage:
        return LIQUIDITY_COMPLIANT_BASE - min(
            SCORE_BAND, (coverage - minimum_coverage) * LIQUIDITY_COMPLIANT_SLOPE
        )
    return LIQUIDITY_SHORTFALL_BASE + min(
        SCORE_BAND, (minimum_coverage - coverage) * LIQUIDITY_SHORTFALL_SLOPE
    )


def weighted_tvpi(funds: Sequence[FundHolding], total_paid_in: float) -> float:
    """Paid-in weighted TVPI; funds without a TVPI count as 0."""
    weighted = sum(to_number(f.tvpi) * to_number(f.paid_in) for f in funds)
    return weighted / max(total_paid_in, 1.0)


def performance_score(tvpi: float, target_tvpi: float) -> float:
    if tvpi >= target_tvpi:
        return PERFORMANCE_ON_TARGET
    shortfall = max(target_tvpi - tvpi, 0.0)
    return PERFORMANCE_SHORTFALL_BASE + min(
        SCORE_BAND, shortfall / max(target_tvpi, MIN_LIMIT_DENOMINATOR) * 100.0
    )


def policy_score(breaches: Sequence[PolicyBreach]) -> float:
    return min(100.0, len(breaches) * POLICY_POINTS_PER_BREACH)


def calculate_risk_scores(
    exposures: ExposureSet,
    liquidity: LiquiditySummary,
    breaches: Sequence[PolicyBreach],
    policy: RiskPolicyConfig,
    funds: Sequence[FundHolding],
    total_paid_in: float,
) -> RiskScores:
    """Compute the four sub-scores and their mean.

    Sub-scores are clamped to [0, 100] and rounded to one decimal before
    averaging, so ``overall`` is the mean of the reported sub-scores.

    Args:
        exposures: Six-dimension exposure breakdowns.
        liquidity: Liquidity summary (for coverage).
        breaches: Detected policy breaches.
        policy: Complete policy configuration.
        funds: Fund holdings (for weighted TVPI).
        total_paid_in: Sum of fund paid-in capital.

    Returns:
        RiskScores.
    """
    concentration = _clamp_score(concentration_score(exposures))
    liquidity_sub = _clamp_score(
        liquidity_score(liquidity.liquidity_coverage, policy.min_liquidity_coverage)
    )
    performance = _clamp_score(
        performance_score(weighted_tvpi(funds, total_paid_in), policy.min_acceptable_tvpi)
    )
    policy_sub = _clamp_score(policy_score(breaches))
    overall = _clamp_score((concentration + liquidity_sub + performance + policy_sub) / 4)

    return RiskScores(
        concentration=concentration,
        liquidity=liquidity_sub,
        performance=performance,
        policy=policy_sub,
        overall=overall,
    )
