"""Liquidity stress scenarios.

Applies parametrized shocks (NAV markdown, capital-call multiplier,
distribution multiplier) to the forecaster's next-12-month totals and
reports stressed NAV, liquidity gap and coverage per scenario.

Scenarios are independent and advisory only. Each result is a pure
function of the scenario and the already-computed totals.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from portfolio_risk.core.defaults import COVERAGE_SENTINEL, DEFAULT_SCENARIOS, ScenarioConfig
from portfolio_risk.risk.liquidity_forecaster import LiquiditySummary

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScenarioResult:
    """Result of applying one scenario.

    Attributes:
        name: Scenario name.
        nav_shock: Applied NAV shock.
        call_multiplier: Applied capital-call multiplier.
        distribution_multiplier: Applied distribution multiplier.
        projected_nav: total portfolio * (1 + nav_shock).
        projected_calls: next-12-month calls * call_multiplier.
        projected_distributions: next-12-month distributions * multiplier.
        liquidity_gap: Shortfall of distributions + reserve against calls.
        coverage_ratio: (distributions + reserve) / calls, or the sentinel
            when no calls are projected.
    """

    name: str
    nav_shock: float
    call_multiplier: float
    distribution_multiplier: float
    projected_nav: float
    projected_calls: float
    projected_distributions: float
    liquidity_gap: float
    coverage_ratio: float


def resolve_scenarios(
    scenario_configs: Sequence[ScenarioConfig | Mapping[str, Any]] | None,
) -> list[ScenarioConfig]:
    """Complete caller-supplied scenarios, or return the defaults for None."""
    if scenario_configs is None:
        return list(DEFAULT_SCENARIOS)
    return [ScenarioConfig.from_partial(raw, i) for i, raw in enumerate(scenario_configs)]


class ScenarioEngine:
    """Runs liquidity stress scenarios.

    Args:
        scenarios: Scenarios to run. Defaults to DEFAULT_SCENARIOS.
        sentinel: Coverage reported when stressed calls are zero.
    """

    def __init__(
        self,
        scenarios: Sequence[ScenarioConfig | Mapping[str, Any]] | None = None,
        sentinel: float = COVERAGE_SENTINEL,
    ) -> None:
        self.scenarios = resolve_scenarios(scenarios)
        self.sentinel = sentinel

    def run_scenario(
        self,
        scenario: ScenarioConfig,
        total_portfolio: float,
        liquidity: LiquiditySummary,
    ) -> ScenarioResult:
        """Apply a single scenario.

        Args:
            scenario: The scenario to apply.
            total_portfolio: Current total portfolio value.
            liquidity: Liquidity summary supplying next-12-month totals and
                the recommended reserve.

        Returns:
            ScenarioResult.
        """
        reserve = liquidity.recommended_reserve
        projected_calls = liquidity.next_12_month_calls * scenario.call_multiplier
        projected_distributions = (
            liquidity.next_12_month_distributions * scenario.distribution_multiplier
        )
        available = projected_distributions + reserve

        return ScenarioResult(
            name=scenario.name,
            nav_shock=scenario.nav_shock,
            call_multiplier=scenario.call_multiplier,
            distribution_multiplier=scenario.distribution_multiplier,
            projected_nav=total_portfolio * (1 + scenario.nav_shock),
            projected_calls=projected_calls,
            projected_distributions=projected_distributions,
            liquidity_gap=max(projected_calls - available, 0.0),
            coverage_ratio=(
                available / projected_calls if projected_calls > 0 else self.sentinel
            ),
        )

    def run_all(
        self,
        total_portfolio: float,
        liquidity: LiquiditySummary,
    ) -> list[ScenarioResult]:
        """Run every configured scenario, in configuration order."""
        results = [
            self.run_scenario(scenario, total_portfolio, liquidity)
            for scenario in self.scenarios
        ]
        stressed = [r.name for r in results if r.liquidity_gap > 0]
        if stressed:
            logger.info("scenario_liquidity_gaps", scenarios=stressed)
        return results

    def worst_case(self, results: list[ScenarioResult]) -> ScenarioResult:
        """Return the scenario with the lowest coverage ratio.

        Raises:
            ValueError: If results list is empty.
        """
        if not results:
            raise ValueError("Cannot determine worst case from empty results list")
        return min(results, key=lambda r: r.coverage_ratio)
