"""Unit tests for the risk report request schemas."""

from __future__ import annotations

from datetime import datetime

import pytest
from portfolio_risk.api.schemas import FundHoldingIn, RiskReportRequest
from portfolio_risk.core.enums import FocusMode
from portfolio_risk.risk.risk_engine import compute_risk_report


@pytest.fixture
def payload() -> dict:
    return {
        "funds": [
            {
                "id": "fund-a",
                "name": "Fund A",
                "manager": "Acme",
                "domicile": "Luxembourg",
                "commitment": 1_000_000,
                "paidIn": 600_000,
                "nav": 700_000,
                "baseCurrency": "EUR",
            },
            {
                "id": "fund-b",
                "name": "Fund B",
                "manager": "Acme",
                "domicile": "Ireland",
                "commitment": 500_000,
                "paidIn": 500_000,
                "nav": 800_000,
            },
        ],
        "directInvestments": [
            {"id": "d1", "name": "Co-invest", "currentValue": 250_000, "investmentType": "PRIVATE_EQUITY"}
        ],
        "capitalCalls": [
            {"id": "c1", "fundId": "fund-a", "amount": 50_000, "dueDate": "2025-09-01T00:00:00Z"}
        ],
        "distributions": [
            {"id": "x1", "fundId": "fund-b", "amount": 10_000, "distributionDate": "2025-05-01"}
        ],
        "policy": {"maxManagerExposure": 100},
        "scenarios": [{"navShock": -0.1}],
        "asOf": "2025-08-14T12:00:00",
    }


class TestRiskReportRequest:
    def test_camel_case_parsing(self, payload) -> None:
        request = RiskReportRequest.model_validate(payload)
        assert request.funds[0].paid_in == pytest.approx(600_000.0)
        assert request.funds[0].base_currency == "EUR"
        assert request.direct_investments[0].investment_type == "PRIVATE_EQUITY"
        assert request.capital_calls[0].fund_id == "fund-a"
        assert request.mode is FocusMode.PORTFOLIO

    def test_snake_case_accepted(self) -> None:
        fund = FundHoldingIn(id="f1", name="Fund", paid_in=10.0)
        assert fund.to_domain().paid_in == pytest.approx(10.0)

    def test_negative_amounts_clamped_in_report(self, payload) -> None:
        payload["capitalCalls"][0]["amount"] = -5
        payload["distributions"][0]["amount"] = -1_000
        payload["scenarios"] = [{"callMultiplier": -2}]
        request = RiskReportRequest.model_validate(payload)
        assert request.capital_calls[0].amount == pytest.approx(-5.0)

        report = compute_risk_report(**request.to_engine_kwargs())
        assert report.liquidity.pending_calls == 0.0
        assert all(p.capital_calls >= 0 for p in report.history)
        assert all(p.distributions >= 0 for p in report.history)
        assert report.scenarios[0].call_multiplier == pytest.approx(-2.0)

    def test_unparseable_dates_treated_as_absent(self, payload) -> None:
        payload["capitalCalls"][0]["dueDate"] = "not a date"
        payload["distributions"][0]["distributionDate"] = ""
        request = RiskReportRequest.model_validate(payload)
        assert request.capital_calls[0].due_date is None
        assert request.distributions[0].distribution_date is None

        report = compute_risk_report(**request.to_engine_kwargs())
        assert report.liquidity.pending_calls == 0.0

    def test_aware_due_date_normalized_to_utc(self, payload) -> None:
        payload["capitalCalls"][0]["dueDate"] = "2025-09-01T02:00:00+02:00"
        request = RiskReportRequest.model_validate(payload)
        assert request.capital_calls[0].due_date == datetime(2025, 9, 1, 0, 0)

    def test_engine_kwargs(self, payload) -> None:
        kwargs = RiskReportRequest.model_validate(payload).to_engine_kwargs()
        assert kwargs["scenario_configs"] == [{"nav_shock": -0.1}]
        assert kwargs["policy"] == {"maxManagerExposure": 100}

        report = compute_risk_report(**kwargs)
        assert report.as_of == datetime(2025, 8, 14, 12, 0)
        assert report.metrics.total_portfolio == pytest.approx(1_750_000.0)
        assert [s.name for s in report.scenarios] == ["Scenario 1"]
        assert report.liquidity.pending_calls == pytest.approx(50_000.0)

    def test_focus_fields(self, payload) -> None:
        payload.update({"mode": "fund", "fundId": "fund-b"})
        request = RiskReportRequest.model_validate(payload)
        assert request.mode is FocusMode.FUND

        focused, report = request.compute()
        assert focused.label == "Fund B"
        assert report.metrics.total_portfolio == pytest.approx(800_000.0)
        assert report.liquidity.pending_calls == 0.0

    def test_compute_asset_class_focus(self, payload) -> None:
        payload.update({"mode": "assetClass", "assetClass": "Private Equity"})
        focused, report = RiskReportRequest.model_validate(payload).compute()
        assert focused.label == "Private Equity exposure"
        assert [s.name for s in report.scenarios] == ["Scenario 1"]

    def test_compute_fund_all_is_whole_portfolio(self, payload) -> None:
        payload.update({"mode": "fund", "fundId": "all"})
        focused, report = RiskReportRequest.model_validate(payload).compute()
        assert focused.label == "Entire portfolio"
        assert report.metrics.total_portfolio == pytest.approx(1_750_000.0)
