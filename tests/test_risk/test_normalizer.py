"""Unit tests for asset-class inference and the input normalizer.

Covers keyword inference order, investment-type mapping, fallback labels
for missing attributes, and injection of a custom inference function.
"""

from __future__ import annotations

import pytest

from portfolio_risk.risk.asset_class import (
    infer_fund_asset_class,
    map_investment_type_to_asset_class,
)
from portfolio_risk.risk.normalizer import (
    normalize_direct,
    normalize_fund,
    normalize_holdings,
)

# ---------------------------------------------------------------------------
# Asset-class inference
# ---------------------------------------------------------------------------


class TestInferFundAssetClass:
    @pytest.mark.parametrize(
        "name, manager, expected",
        [
            ("Alpha Venture Fund I", None, "Venture Capital"),
            ("Northwind Growth Fund", "Northwind", "Growth Equity"),
            ("Harbor Fund III", "Harbor Debt Advisors", "Private Credit"),
            ("Meridian Renewable Power", None, "Infrastructure"),
            ("Cityline Property Fund", None, "Real Estate"),
            ("Oak Buyout Fund VI", None, "Buyout"),
            ("Fund A", "Acme", "Multi-Strategy"),
        ],
    )
    def test_keyword_inference(self, name, manager, expected) -> None:
        assert infer_fund_asset_class(name, manager) == expected

    def test_first_matching_label_wins(self) -> None:
        """'tech' (Venture Capital) is checked before 'growth'."""
        assert infer_fund_asset_class("Summit Tech Growth", None) == "Venture Capital"

    def test_case_insensitive(self) -> None:
        assert infer_fund_asset_class("GLOBAL INFRASTRUCTURE", None) == "Infrastructure"

    def test_missing_name_and_manager(self) -> None:
        assert infer_fund_asset_class(None, None) == "Multi-Strategy"


class TestInvestmentTypeMapping:
    def test_known_codes(self) -> None:
        assert map_investment_type_to_asset_class("PRIVATE_EQUITY") == "Private Equity"
        assert map_investment_type_to_asset_class("PRIVATE_DEBT") == "Private Credit"
        assert map_investment_type_to_asset_class("CASH") == "Cash & Equivalents"

    def test_unknown_or_missing_code(self) -> None:
        assert map_investment_type_to_asset_class("ART") == "Direct Investments"
        assert map_investment_type_to_asset_class(None) == "Direct Investments"


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalizeFund:
    def test_full_record(self, make_fund) -> None:
        fund = make_fund(
            nav=500_000.0,
            manager="Acme",
            domicile="Luxembourg",
            vintage=2019,
            asset_class="Buyout",
            sector="Healthcare",
            base_currency="EUR",
        )
        asset = normalize_fund(fund)
        assert asset.amount == pytest.approx(500_000.0)
        assert asset.asset_class == "Buyout"
        assert asset.geography == "Luxembourg"
        assert asset.manager == "Acme"
        assert asset.vintage == "2019"
        assert asset.currency == "EUR"
        assert asset.sector == "Healthcare"

    def test_fallback_labels(self, make_fund) -> None:
        asset = normalize_fund(make_fund(name="Fund A", nav=1.0))
        assert asset.geography == "Unknown"
        assert asset.manager == "Unknown"
        assert asset.vintage == "Unknown"
        assert asset.currency == "USD"
        assert asset.sector == "Generalist"
        assert asset.asset_class == "Multi-Strategy"

    def test_custom_inference_used_only_without_tag(self, make_fund) -> None:
        calls = []

        def infer(name, manager):
            calls.append((name, manager))
            return "Custom"

        untagged = make_fund("f1", name="Fund One", manager="M1")
        tagged = make_fund("f2", asset_class="Buyout")
        assets = normalize_holdings([untagged, tagged], [], infer)

        assert [a.asset_class for a in assets] == ["Custom", "Buyout"]
        assert calls == [("Fund One", "M1")]


class TestNormalizeDirect:
    def test_fallback_labels(self, make_direct) -> None:
        asset = normalize_direct(make_direct(investment_amount=250_000.0))
        assert asset.amount == pytest.approx(250_000.0)
        assert asset.geography == "Direct Holdings"
        assert asset.manager == "Direct Holdings"
        assert asset.vintage == "Direct"
        assert asset.currency == "USD"
        assert asset.sector == "Direct Holdings"
        assert asset.asset_class == "Direct Investments"

    def test_current_value_preferred_over_cost(self, make_direct) -> None:
        holding = make_direct(current_value=300_000.0, investment_amount=250_000.0)
        assert normalize_direct(holding).amount == pytest.approx(300_000.0)

    def test_zero_current_value_falls_back_to_cost(self, make_direct) -> None:
        holding = make_direct(current_value=0.0, investment_amount=250_000.0)
        assert normalize_direct(holding).amount == pytest.approx(250_000.0)

    def test_investment_type_drives_asset_class(self, make_direct) -> None:
        holding = make_direct(name="Co-invest X", investment_type="PRIVATE_EQUITY", current_value=1.0)
        asset = normalize_direct(holding)
        assert asset.asset_class == "Private Equity"
        assert asset.manager == "Co-invest X"

    def test_funds_first_then_direct(self, make_fund, make_direct) -> None:
        assets = normalize_holdings(
            [make_fund(nav=1.0, manager="Acme")],
            [make_direct(name="Direct One", current_value=2.0)],
        )
        assert [a.manager for a in assets] == ["Acme", "Direct One"]
