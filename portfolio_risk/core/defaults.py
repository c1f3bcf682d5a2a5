"""Default labels, thresholds, and scenario definitions for the risk engine.

Every fallback the engine applies lives here so defaulting is auditable in
one place: the labels given to holdings with missing attributes, the
complete default policy threshold set, the default stress scenarios, the
severity tier cut-offs, and the sentinel ratios used in place of infinity.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

# ---------------------------------------------------------------------------
# Fallback labels
# ---------------------------------------------------------------------------

UNKNOWN_LABEL = "Unknown"
DIRECT_HOLDINGS_LABEL = "Direct Holdings"
DIRECT_VINTAGE_LABEL = "Direct"
DIRECT_ASSET_CLASS_LABEL = "Direct Investments"
MULTI_STRATEGY_LABEL = "Multi-Strategy"
GENERALIST_SECTOR_LABEL = "Generalist"
DEFAULT_CURRENCY = "USD"

# ---------------------------------------------------------------------------
# Severity tiers (ratio of current value to limit)
# ---------------------------------------------------------------------------

MEDIUM_SEVERITY_RATIO = 1.0
HIGH_SEVERITY_RATIO = 1.2
CRITICAL_SEVERITY_RATIO = 1.4

# Floor for limit denominators so a zero limit grades as CRITICAL, not inf.
MIN_LIMIT_DENOMINATOR = 0.0001

# ---------------------------------------------------------------------------
# Liquidity constants
# ---------------------------------------------------------------------------

COVERAGE_SENTINEL = 5.0
HISTORY_QUARTERS = 8
FORECAST_QUARTERS = 8
PENDING_CALL_WINDOW_DAYS = 90
DEFAULT_DISTRIBUTION_RATE = 0.02
# Deployment horizon assumed when unfunded capital exists but no calls are projected.
DEFAULT_DEPLOYMENT_YEARS = 3.0


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


def _coerce_number(value: Any) -> float | None:
    """Return value as a finite float, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _coerce_flag(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "false", "0", "no"):
        return value.strip().lower() in ("true", "1", "yes")
    return None


# ---------------------------------------------------------------------------
# Policy thresholds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskPolicyConfig:
    """Complete set of policy thresholds and alert toggles.

    Exposure limits are percentages (25.0 = 25%). Leverage limits are
    ratios (0.5 = 50%). ``target_liquidity_buffer`` is the fraction of total
    commitment held as a recommended reserve.

    Attributes:
        max_single_fund_exposure: Max NAV share of any single fund (%).
        max_geography_exposure: Max share of any one domicile/geography (%).
        max_sector_exposure: Max share of any one sector (%).
        max_vintage_exposure: Max share of any one vintage year (%).
        max_manager_exposure: Max share of any one manager (%).
        max_asset_class_exposure: Max share of any one asset class (%).
        max_unfunded_commitments: Max unfunded share of total commitment (%).
        min_liquidity_reserve: Minimum liquidity reserve (%).
        min_liquidity_coverage: Minimum liquidity coverage ratio (x).
        target_liquidity_buffer: Reserve as a fraction of total commitment.
        max_portfolio_leverage: Max average fund leverage (ratio).
        min_number_of_funds: Minimum number of funds held.
        target_diversification_score: Target diversification score (0-1).
        min_acceptable_tvpi: Minimum acceptable paid-in weighted TVPI (x).
        min_acceptable_dpi: Minimum acceptable DPI (x).
        min_acceptable_irr: Minimum acceptable IRR (%).
        max_currency_exposure: Max share of any one currency (%).
        max_leverage_ratio: Max leverage ratio of any single fund (x).
        enable_policy_violation_alerts: Emit exposure/fund/leverage breaches.
        enable_performance_alerts: Performance alerting toggle.
        enable_liquidity_alerts: Emit coverage/unfunded breaches.
    """

    max_single_fund_exposure: float = 25.0
    max_geography_exposure: float = 40.0
    max_sector_exposure: float = 35.0
    max_vintage_exposure: float = 30.0
    max_manager_exposure: float = 20.0
    max_asset_class_exposure: float = 35.0
    max_unfunded_commitments: float = 50.0
    min_liquidity_reserve: float = 10.0
    min_liquidity_coverage: float = 1.5
    target_liquidity_buffer: float = 0.15
    max_portfolio_leverage: float = 0.5
    min_number_of_funds: float = 5.0
    target_diversification_score: float = 0.7
    min_acceptable_tvpi: float = 1.5
    min_acceptable_dpi: float = 0.5
    min_acceptable_irr: float = 10.0
    max_currency_exposure: float = 30.0
    max_leverage_ratio: float = 2.0
    enable_policy_violation_alerts: bool = True
    enable_performance_alerts: bool = True
    enable_liquidity_alerts: bool = True

    @classmethod
    def from_partial(
        cls, overrides: RiskPolicyConfig | Mapping[str, Any] | None = None
    ) -> RiskPolicyConfig:
        """Merge a partial policy over the complete default set.

        Keys may be snake_case (``max_manager_exposure``) or camelCase
        (``maxManagerExposure``). Unknown keys, ``None`` values and values of
        the wrong type are ignored, leaving the default in place.
        """
        if overrides is None:
            return cls()
        if isinstance(overrides, RiskPolicyConfig):
            return overrides

        by_key = {_normalize_key(f.name): f for f in fields(cls)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            f = by_key.get(_normalize_key(str(key)))
            if f is None or value is None:
                continue
            if f.name.startswith("enable_"):
                flag = _coerce_flag(value)
                if flag is not None:
                    changes[f.name] = flag
            else:
                number = _coerce_number(value)
                if number is not None:
                    changes[f.name] = number
        return replace(cls(), **changes)

    @classmethod
    def from_env(cls, prefix: str = "RISK_POLICY_") -> RiskPolicyConfig:
        """Create a policy from ``RISK_POLICY_*`` environment variables.

        Falls back to dataclass defaults when env vars are not set, e.g.
        ``RISK_POLICY_MAX_MANAGER_EXPOSURE=25``.
        """
        overrides = {
            f.name: os.environ[prefix + f.name.upper()]
            for f in fields(cls)
            if prefix + f.name.upper() in os.environ
        }
        return cls.from_partial(overrides)


DEFAULT_POLICY = RiskPolicyConfig()


# ---------------------------------------------------------------------------
# Stress scenarios
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScenarioConfig:
    """Parametrized liquidity stress scenario.

    Attributes:
        name: Human-readable scenario name.
        nav_shock: Fractional NAV move, e.g. -0.22 for a 22% markdown.
        call_multiplier: Scale factor applied to next-12-month capital calls.
        distribution_multiplier: Scale factor applied to next-12-month
            distributions.
    """

    name: str
    nav_shock: float = 0.0
    call_multiplier: float = 1.0
    distribution_multiplier: float = 1.0

    @classmethod
    def from_partial(
        cls, raw: ScenarioConfig | Mapping[str, Any], index: int = 0
    ) -> ScenarioConfig:
        """Build a scenario from a possibly incomplete mapping.

        Missing or non-numeric fields take the neutral default (no shock,
        unit multipliers); a missing name becomes ``Scenario {index + 1}``.
        """
        if isinstance(raw, ScenarioConfig):
            return raw

        by_key = {_normalize_key(str(k)): v for k, v in raw.items()}

        def _number(key: str, default: float) -> float:
            number = _coerce_number(by_key.get(key))
            return default if number is None else number

        name = by_key.get("name")
        return cls(
            name=str(name) if name else f"Scenario {index + 1}",
            nav_shock=_number("navshock", 0.0),
            call_multiplier=_number("callmultiplier", 1.0),
            distribution_multiplier=_number("distributionmultiplier", 1.0),
        )


DEFAULT_SCENARIOS: tuple[ScenarioConfig, ...] = (
    ScenarioConfig(name="Base Case", nav_shock=-0.08, call_multiplier=1.0, distribution_multiplier=1.0),
    ScenarioConfig(name="Downside", nav_shock=-0.22, call_multiplier=1.25, distribution_multiplier=0.75),
    ScenarioConfig(name="Severe Stress", nav_shock=-0.40, call_multiplier=1.5, distribution_multiplier=0.5),
)
