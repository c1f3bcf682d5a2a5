"""Pydantic v2 request schemas for the portfolio risk API.

Request bodies use camelCase field names on the wire (``paidIn``,
``dueDate``) and validate into the engine's immutable holding records.
Responses are produced by ``RiskReport.to_dict()`` and
``build_snapshot_summary()``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from portfolio_risk.core.enums import FocusMode
from portfolio_risk.core.utils.quarters import coerce_datetime
from portfolio_risk.risk.focus import (
    FocusedSnapshot,
    PortfolioSnapshot,
    compute_focused_report,
)
from portfolio_risk.risk.holdings import (
    CapitalCallEvent,
    DirectHolding,
    DistributionEvent,
    FundHolding,
)
from portfolio_risk.risk.risk_engine import RiskEngine, RiskReport


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Unparseable event dates are treated as absent rather than rejected.
EventDate = Annotated[Optional[datetime], BeforeValidator(coerce_datetime)]


# =====================================================================
# HOLDINGS AND EVENTS
# =====================================================================


class FundHoldingIn(_CamelModel):
    """A fund position in a risk report request."""

    id: str
    name: str
    manager: Optional[str] = None
    domicile: Optional[str] = None
    commitment: float = 0.0
    paid_in: float = 0.0
    nav: float = 0.0
    vintage: Optional[int] = None
    asset_class: Optional[str] = None
    sector: Optional[str] = None
    base_currency: Optional[str] = None
    leverage: Optional[float] = None
    tvpi: Optional[float] = None
    dpi: Optional[float] = None
    irr: Optional[float] = None

    def to_domain(self) -> FundHolding:
        return FundHolding(**self.model_dump())


class DirectHoldingIn(_CamelModel):
    """A direct investment in a risk report request."""

    id: str
    name: Optional[str] = None
    current_value: Optional[float] = None
    investment_amount: Optional[float] = None
    asset_class: Optional[str] = None
    sector: Optional[str] = None
    geography: Optional[str] = None
    currency: Optional[str] = None
    investment_type: Optional[str] = None

    def to_domain(self) -> DirectHolding:
        return DirectHolding(**self.model_dump())


class CapitalCallIn(_CamelModel):
    id: str
    fund_id: str
    amount: float = 0.0
    due_date: EventDate = None
    upload_date: EventDate = None
    payment_status: Optional[str] = None

    def to_domain(self) -> CapitalCallEvent:
        return CapitalCallEvent(**self.model_dump())


class DistributionIn(_CamelModel):
    id: str
    fund_id: str
    amount: float = 0.0
    distribution_date: EventDate = None

    def to_domain(self) -> DistributionEvent:
        return DistributionEvent(**self.model_dump())


class ScenarioIn(_CamelModel):
    """A stress scenario; omitted fields take neutral values."""

    name: Optional[str] = None
    nav_shock: Optional[float] = None
    call_multiplier: Optional[float] = None
    distribution_multiplier: Optional[float] = None


# =====================================================================
# REQUEST MODELS
# =====================================================================


class RiskReportRequest(_CamelModel):
    """Request body for POST /risk/report.

    ``policy`` is a partial threshold mapping merged over the defaults;
    ``scenarios`` replaces the default scenario set when given.
    """

    funds: list[FundHoldingIn] = Field(default_factory=list)
    direct_investments: list[DirectHoldingIn] = Field(default_factory=list)
    capital_calls: list[CapitalCallIn] = Field(default_factory=list)
    distributions: list[DistributionIn] = Field(default_factory=list)
    policy: Optional[dict[str, Any]] = None
    scenarios: Optional[list[ScenarioIn]] = None
    as_of: Optional[datetime] = None
    mode: FocusMode = FocusMode.PORTFOLIO
    fund_id: Optional[str] = None
    asset_class: Optional[str] = None

    def _scenario_configs(self) -> Optional[list[dict[str, Any]]]:
        if self.scenarios is None:
            return None
        return [s.model_dump(exclude_none=True) for s in self.scenarios]

    def to_snapshot(self) -> PortfolioSnapshot:
        return PortfolioSnapshot(
            funds=tuple(f.to_domain() for f in self.funds),
            direct_investments=tuple(d.to_domain() for d in self.direct_investments),
            capital_calls=tuple(c.to_domain() for c in self.capital_calls),
            distributions=tuple(d.to_domain() for d in self.distributions),
        )

    def to_engine_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``compute_risk_report``; the focus is applied by ``compute()``."""
        snapshot = self.to_snapshot()
        return {
            "funds": list(snapshot.funds),
            "direct_investments": list(snapshot.direct_investments),
            "capital_calls": list(snapshot.capital_calls),
            "distributions": list(snapshot.distributions),
            "policy": self.policy,
            "scenario_configs": self._scenario_configs(),
            "as_of": self.as_of,
        }

    def compute(self, engine: RiskEngine | None = None) -> tuple[FocusedSnapshot, RiskReport]:
        """Run the engine on the requested focus of this request's snapshot."""
        return compute_focused_report(
            self.to_snapshot(),
            self.mode,
            fund_id=self.fund_id,
            asset_class=self.asset_class,
            policy=self.policy,
            scenario_configs=self._scenario_configs(),
            as_of=self.as_of,
            engine=engine,
        )
