"""Asset-class inference for holdings without an explicit tag.

Funds are classified by keyword search over their name and manager; direct
holdings are classified from the upstream investment-type code. Both are
injectable collaborators of the input normalizer.
"""

from __future__ import annotations

from portfolio_risk.core.defaults import DIRECT_ASSET_CLASS_LABEL, MULTI_STRATEGY_LABEL

# Order matters: the first label with a matching keyword wins.
FUND_ASSET_CLASS_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Venture Capital", ("venture", "tech", "innovation", "startup")),
    ("Growth Equity", ("growth", "expansion", "scale")),
    ("Private Credit", ("credit", "debt", "mezzanine", "direct lending")),
    ("Infrastructure", ("infrastructure", "transport", "energy", "renewable")),
    ("Real Estate", ("real estate", "property", "urban", "residential", "logistics")),
    ("Buyout", ("buyout", "capital partners", "equity partners")),
)

INVESTMENT_TYPE_ASSET_CLASSES: dict[str, str] = {
    "PRIVATE_EQUITY": "Private Equity",
    "PRIVATE_DEBT": "Private Credit",
    "PRIVATE_CREDIT": "Private Credit",
    "PUBLIC_EQUITY": "Public Equity",
    "REAL_ESTATE": "Real Estate",
    "REAL_ASSETS": "Real Assets",
    "CASH": "Cash & Equivalents",
}


def infer_fund_asset_class(name: str | None, manager: str | None) -> str:
    """Infer a fund's asset class from its name and manager.

    Args:
        name: Fund name.
        manager: Manager name.

    Returns:
        The first matching label from FUND_ASSET_CLASS_KEYWORDS, or
        ``"Multi-Strategy"`` when nothing matches.
    """
    source = f"{name or ''} {manager or ''}".lower()
    for label, keywords in FUND_ASSET_CLASS_KEYWORDS:
        if any(keyword in source for keyword in keywords):
            return label
    return MULTI_STRATEGY_LABEL


def map_investment_type_to_asset_class(investment_type: str | None) -> str:
    """Map a direct investment type code to an asset-class label."""
    if not investment_type:
        return DIRECT_ASSET_CLASS_LABEL
    return INVESTMENT_TYPE_ASSET_CLASSES.get(investment_type, DIRECT_ASSET_CLASS_LABEL)
