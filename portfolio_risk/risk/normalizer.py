"""Input normalizer: project funds and direct holdings onto one asset shape.

Every holding becomes a NormalizedAsset carrying an amount and the six
dimension labels the exposure aggregator groups by. Missing attributes get
the fallback labels from ``portfolio_risk.core.defaults``. Pure projection.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from portfolio_risk.core.defaults import (
    DEFAULT_CURRENCY,
    DIRECT_HOLDINGS_LABEL,
    DIRECT_VINTAGE_LABEL,
    GENERALIST_SECTOR_LABEL,
    UNKNOWN_LABEL,
)
from portfolio_risk.risk.asset_class import (
    infer_fund_asset_class,
    map_investment_type_to_asset_class,
)
from portfolio_risk.risk.holdings import DirectHolding, FundHolding, to_number

AssetClassInference = Callable[[str | None, str | None], str]


@dataclass(frozen=True)
class NormalizedAsset:
    """Uniform view of a holding for exposure aggregation."""

    amount: float
    asset_class: str
    geography: str
    manager: str
    vintage: str
    currency: str
    sector: str


def resolve_fund_asset_class(
    fund: FundHolding,
    infer_asset_class: AssetClassInference = infer_fund_asset_class,
) -> str:
    """Explicit asset class when present, otherwise the inferred one."""
    return fund.asset_class or infer_asset_class(fund.name, fund.manager)


def resolve_direct_asset_class(holding: DirectHolding) -> str:
    return holding.asset_class or map_investment_type_to_asset_class(holding.investment_type)


def _vintage_label(vintage: int | None) -> str:
    if vintage is None or isinstance(vintage, bool):
        return UNKNOWN_LABEL
    try:
        return str(int(vintage))
    except (TypeError, ValueError):
        return UNKNOWN_LABEL


def normalize_fund(
    fund: FundHolding,
    infer_asset_class: AssetClassInference = infer_fund_asset_class,
) -> NormalizedAsset:
    return NormalizedAsset(
        amount=to_number(fund.nav),
        asset_class=resolve_fund_asset_class(fund, infer_asset_class),
        geography=fund.domicile or UNKNOWN_LABEL,
        manager=fund.manager or UNKNOWN_LABEL,
        vintage=_vintage_label(fund.vintage),
        currency=fund.base_currency or DEFAULT_CURRENCY,
        sector=fund.sector or GENERALIST_SECTOR_LABEL,
    )


def normalize_direct(holding: DirectHolding) -> NormalizedAsset:
    return NormalizedAsset(
        amount=holding.value,
        asset_class=resolve_direct_asset_class(holding),
        geography=holding.geography or DIRECT_HOLDINGS_LABEL,
        manager=holding.name or DIRECT_HOLDINGS_LABEL,
        vintage=DIRECT_VINTAGE_LABEL,
        currency=holding.currency or DEFAULT_CURRENCY,
        sector=holding.sector or DIRECT_HOLDINGS_LABEL,
    )


def normalize_holdings(
    funds: Sequence[FundHolding],
    direct_holdings: Sequence[DirectHolding],
    infer_asset_class: AssetClassInference = infer_fund_asset_class,
) -> list[NormalizedAsset]:
    """Project funds then direct holdings onto NormalizedAsset, in input order.

    Args:
        funds: Fund holdings; amount is NAV.
        direct_holdings: Direct holdings; amount is current value or cost.
        infer_asset_class: Called with (name, manager) for funds lacking an
            explicit asset class.

    Returns:
        One NormalizedAsset per input holding.
    """
    assets = [normalize_fund(f, infer_asset_class) for f in funds]
    assets.extend(normalize_direct(d) for d in direct_holdings)
    return assets
