"""Risk computation package -- exposures, liquidity, policy, scores and scenarios."""

from portfolio_risk.risk.cashflow_history import (
    LiquiditySchedulePoint,
    RiskHistoryPoint,
    build_historical_series,
)
from portfolio_risk.risk.exposures import (
    ExposureBreakdown,
    ExposureEntry,
    ExposureSet,
    aggregate_exposures,
)
from portfolio_risk.risk.focus import (
    FocusError,
    FocusedSnapshot,
    PortfolioSnapshot,
    apply_focus,
    compute_focused_report,
)
from portfolio_risk.risk.holdings import (
    CapitalCallEvent,
    DirectHolding,
    DistributionEvent,
    FundHolding,
)
from portfolio_risk.risk.liquidity_forecaster import LiquiditySummary
from portfolio_risk.risk.metrics import PortfolioMetrics
from portfolio_risk.risk.normalizer import NormalizedAsset, normalize_holdings
from portfolio_risk.risk.policy import PolicyBreach, PolicyEvaluator
from portfolio_risk.risk.risk_engine import (
    RiskEngine,
    RiskReport,
    build_snapshot_summary,
    compute_risk_report,
)
from portfolio_risk.risk.risk_scorer import RiskScores, calculate_risk_scores
from portfolio_risk.risk.scenario_engine import ScenarioEngine, ScenarioResult

__all__ = [
    "CapitalCallEvent",
    "DirectHolding",
    "DistributionEvent",
    "ExposureBreakdown",
    "ExposureEntry",
    "ExposureSet",
    "FocusError",
    "FocusedSnapshot",
    "FundHolding",
    "LiquiditySchedulePoint",
    "LiquiditySummary",
    "NormalizedAsset",
    "PolicyBreach",
    "PolicyEvaluator",
    "PortfolioMetrics",
    "PortfolioSnapshot",
    "RiskEngine",
    "RiskHistoryPoint",
    "RiskReport",
    "RiskScores",
    "ScenarioEngine",
    "ScenarioResult",
    "aggregate_exposures",
    "apply_focus",
    "build_historical_series",
    "build_snapshot_summary",
    "calculate_risk_scores",
    "compute_focused_report",
    "compute_risk_report",
    "normalize_holdings",
]
