"""Focus scoping: restrict a holdings snapshot before running the engine.

A focus selects the whole portfolio, a single fund, or one asset class.
Capital calls and distributions follow the retained funds, so a focused
report never sees cash flows of funds outside the focus.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import structlog

from portfolio_risk.core.defaults import RiskPolicyConfig, ScenarioConfig
from portfolio_risk.core.enums import FocusMode
from portfolio_risk.core.utils.logging_config import report_context
from portfolio_risk.risk.asset_class import infer_fund_asset_class
from portfolio_risk.risk.holdings import (
    CapitalCallEvent,
    DirectHolding,
    DistributionEvent,
    FundHolding,
)
from portfolio_risk.risk.normalizer import (
    AssetClassInference,
    resolve_direct_asset_class,
    resolve_fund_asset_class,
)
from portfolio_risk.risk.risk_engine import RiskEngine, RiskReport

logger = structlog.get_logger(__name__)

ALL_SENTINEL = "all"
PORTFOLIO_FOCUS_LABEL = "Entire portfolio"


class FocusError(ValueError):
    """Raised when a focus selection cannot be resolved."""


@dataclass(frozen=True)
class PortfolioSnapshot:
    """The holdings and cash-flow events of one portfolio at a point in time."""

    funds: tuple[FundHolding, ...] = ()
    direct_investments: tuple[DirectHolding, ...] = ()
    capital_calls: tuple[CapitalCallEvent, ...] = ()
    distributions: tuple[DistributionEvent, ...] = ()


@dataclass(frozen=True)
class FocusedSnapshot:
    """A snapshot restricted to a focus, with its display label."""

    mode: FocusMode
    label: str
    snapshot: PortfolioSnapshot
    fund_id: str | None = None
    asset_class: str | None = None
    fund_ids: frozenset[str] = field(default_factory=frozenset)


def apply_focus(
    snapshot: PortfolioSnapshot,
    mode: FocusMode | str = FocusMode.PORTFOLIO,
    fund_id: str | None = None,
    asset_class: str | None = None,
    infer_asset_class: AssetClassInference = infer_fund_asset_class,
) -> FocusedSnapshot:
    """Restrict a snapshot to the requested focus.

    Args:
        snapshot: Full portfolio snapshot.
        mode: ``portfolio``, ``fund`` or ``assetClass``.
        fund_id: Fund to keep in fund mode; ``"all"`` keeps every holding.
        asset_class: Asset class to keep in assetClass mode; ``"all"`` or
            None keeps every holding.
        infer_asset_class: Inference used for funds without an asset class.

    Returns:
        FocusedSnapshot.

    Raises:
        FocusError: If the mode is unknown, or fund mode names no fund or an
            unknown one.
    """
    try:
        mode = FocusMode(mode)
    except ValueError as exc:
        raise FocusError(f"Unknown focus mode: {mode!r}") from exc

    funds = list(snapshot.funds)
    direct = list(snapshot.direct_investments)
    label = PORTFOLIO_FOCUS_LABEL

    if mode is FocusMode.FUND and fund_id == ALL_SENTINEL:
        fund_id = None
    elif mode is FocusMode.FUND:
        if not fund_id:
            raise FocusError("Fund focus requires a fund_id")
        selected = next((f for f in funds if f.id == fund_id), None)
        if selected is None:
            raise FocusError(f"Fund not found: {fund_id}")
        funds = [selected]
        direct = []
        label = selected.name
    elif mode is FocusMode.ASSET_CLASS and asset_class and asset_class != ALL_SENTINEL:
        funds = [f for f in funds if resolve_fund_asset_class(f, infer_asset_class) == asset_class]
        direct = [d for d in direct if resolve_direct_asset_class(d) == asset_class]
        label = f"{asset_class} exposure"

    fund_ids = frozenset(f.id for f in funds)
    focused = PortfolioSnapshot(
        funds=tuple(funds),
        direct_investments=tuple(direct),
        capital_calls=tuple(c for c in snapshot.capital_calls if c.fund_id in fund_ids),
        distributions=tuple(d for d in snapshot.distributions if d.fund_id in fund_ids),
    )

    logger.debug(
        "focus_applied",
        mode=mode.value,
        label=label,
        n_funds=len(focused.funds),
        n_direct=len(focused.direct_investments),
    )

    return FocusedSnapshot(
        mode=mode,
        label=label,
        snapshot=focused,
        fund_id=fund_id if mode is FocusMode.FUND else None,
        asset_class=asset_class if mode is FocusMode.ASSET_CLASS else None,
        fund_ids=fund_ids,
    )


def compute_focused_report(
    snapshot: PortfolioSnapshot,
    mode: FocusMode | str = FocusMode.PORTFOLIO,
    fund_id: str | None = None,
    asset_class: str | None = None,
    policy: RiskPolicyConfig | Mapping[str, Any] | None = None,
    scenario_configs: Sequence[ScenarioConfig | Mapping[str, Any]] | None = None,
    *,
    as_of: datetime | None = None,
    engine: RiskEngine | None = None,
) -> tuple[FocusedSnapshot, RiskReport]:
    """Apply a focus, then run the engine on the focused snapshot."""
    engine = engine or RiskEngine()
    focused = apply_focus(snapshot, mode, fund_id, asset_class, engine.infer_asset_class)
    with report_context(focus=focused.mode.value, focus_label=focused.label):
        report = engine.generate_report(
            focused.snapshot.funds,
            focused.snapshot.direct_investments,
            capital_calls=focused.snapshot.capital_calls,
            distributions=focused.snapshot.distributions,
            policy=policy,
            scenario_configs=scenario_configs,
            as_of=as_of,
        )
    return focused, report
