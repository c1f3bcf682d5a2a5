"""Portfolio-level totals shared by the evaluator, scorer and scenarios."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from portfolio_risk.risk.exposures import ExposureSet
from portfolio_risk.risk.holdings import DirectHolding, FundHolding, to_number


@dataclass(frozen=True)
class PortfolioMetrics:
    """Portfolio totals.

    Attributes:
        total_portfolio: Fund NAV plus direct holding value.
        total_fund_nav: Sum of fund NAV.
        total_direct_value: Sum of direct holding value.
        total_commitment: Sum of fund commitments.
        total_paid_in: Sum of fund paid-in capital.
        unfunded_commitments: max(total_commitment - total_paid_in, 0).
        number_of_funds: Count of fund holdings.
        asset_class_concentration: Asset class -> amount.
        geography_concentration: Geography -> amount.
    """

    total_portfolio: float
    total_fund_nav: float
    total_direct_value: float
    total_commitment: float
    total_paid_in: float
    unfunded_commitments: float
    number_of_funds: int
    asset_class_concentration: dict[str, float] = field(default_factory=dict)
    geography_concentration: dict[str, float] = field(default_factory=dict)

    @property
    def unfunded_pct(self) -> float:
        """Unfunded share of total commitment in percent (0 with no commitment)."""
        if self.total_commitment <= 0:
            return 0.0
        return self.unfunded_commitments / self.total_commitment * 100.0


def compute_portfolio_metrics(
    funds: Sequence[FundHolding],
    direct_holdings: Sequence[DirectHolding],
    exposures: ExposureSet,
) -> PortfolioMetrics:
    total_fund_nav = sum(to_number(f.nav) for f in funds)
    total_direct_value = sum(d.value for d in direct_holdings)
    total_commitment = sum(to_number(f.commitment) for f in funds)
    total_paid_in = sum(to_number(f.paid_in) for f in funds)

    return PortfolioMetrics(
        total_portfolio=total_fund_nav + total_direct_value,
        total_fund_nav=total_fund_nav,
        total_direct_value=total_direct_value,
        total_commitment=total_commitment,
        total_paid_in=total_paid_in,
        unfunded_commitments=max(total_commitment - total_paid_in, 0.0),
        number_of_funds=len(funds),
        asset_class_concentration=dict(exposures.asset_class.amounts),
        geography_concentration=dict(exposures.geography.amounts),
    )
