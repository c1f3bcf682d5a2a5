"""Unit tests for engine settings, policy merging, and scenario completion."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from portfolio_risk.core.config import Settings
from portfolio_risk.core.defaults import (
    DEFAULT_POLICY,
    DEFAULT_SCENARIOS,
    RiskPolicyConfig,
    ScenarioConfig,
)


class TestSettings:
    def test_defaults(self) -> None:
        cfg = Settings()
        assert cfg.history_quarters == 8
        assert cfg.forecast_quarters == 8
        assert cfg.pending_call_window_days == 90
        assert cfg.coverage_sentinel == pytest.approx(5.0)
        assert cfg.default_distribution_rate == pytest.approx(0.02)

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RISK_ENGINE_FORECAST_QUARTERS", "12")
        monkeypatch.setenv("RISK_ENGINE_LOG_LEVEL", "DEBUG")
        cfg = Settings()
        assert cfg.forecast_quarters == 12
        assert cfg.log_level == "DEBUG"

    def test_forecast_horizon_must_cover_twelve_months(self) -> None:
        with pytest.raises(ValidationError):
            Settings(forecast_quarters=2)


class TestRiskPolicyConfig:
    def test_default_thresholds(self) -> None:
        assert DEFAULT_POLICY.max_manager_exposure == pytest.approx(20.0)
        assert DEFAULT_POLICY.max_asset_class_exposure == pytest.approx(35.0)
        assert DEFAULT_POLICY.min_liquidity_coverage == pytest.approx(1.5)
        assert DEFAULT_POLICY.target_liquidity_buffer == pytest.approx(0.15)
        assert DEFAULT_POLICY.enable_liquidity_alerts is True

    def test_none_gives_defaults(self) -> None:
        assert RiskPolicyConfig.from_partial(None) == DEFAULT_POLICY

    def test_partial_camel_and_snake_keys(self) -> None:
        policy = RiskPolicyConfig.from_partial(
            {"maxManagerExposure": 25, "max_geography_exposure": "45"}
        )
        assert policy.max_manager_exposure == pytest.approx(25.0)
        assert policy.max_geography_exposure == pytest.approx(45.0)
        assert policy.max_sector_exposure == DEFAULT_POLICY.max_sector_exposure

    def test_invalid_values_keep_defaults(self) -> None:
        policy = RiskPolicyConfig.from_partial(
            {
                "maxManagerExposure": "abc",
                "maxSectorExposure": None,
                "maxVintageExposure": float("nan"),
                "enableLiquidityAlerts": "maybe",
                "unknownThreshold": 3,
            }
        )
        assert policy == DEFAULT_POLICY

    def test_toggle_override(self) -> None:
        policy = RiskPolicyConfig.from_partial({"enableLiquidityAlerts": False})
        assert policy.enable_liquidity_alerts is False
        assert policy.enable_policy_violation_alerts is True

    def test_instance_passes_through(self) -> None:
        custom = RiskPolicyConfig(max_manager_exposure=60.0)
        assert RiskPolicyConfig.from_partial(custom) is custom

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RISK_POLICY_MAX_MANAGER_EXPOSURE", "25")
        monkeypatch.setenv("RISK_POLICY_ENABLE_LIQUIDITY_ALERTS", "false")
        policy = RiskPolicyConfig.from_env()
        assert policy.max_manager_exposure == pytest.approx(25.0)
        assert policy.enable_liquidity_alerts is False
        assert policy.max_geography_exposure == DEFAULT_POLICY.max_geography_exposure


class TestScenarioConfig:
    def test_default_scenarios(self) -> None:
        assert [s.name for s in DEFAULT_SCENARIOS] == ["Base Case", "Downside", "Severe Stress"]
        severe = DEFAULT_SCENARIOS[2]
        assert severe.nav_shock == pytest.approx(-0.40)
        assert severe.call_multiplier == pytest.approx(1.5)
        assert severe.distribution_multiplier == pytest.approx(0.5)

    def test_missing_fields_are_neutral(self) -> None:
        scenario = ScenarioConfig.from_partial({"navShock": -0.1}, index=2)
        assert scenario.name == "Scenario 3"
        assert scenario.nav_shock == pytest.approx(-0.1)
        assert scenario.call_multiplier == pytest.approx(1.0)
        assert scenario.distribution_multiplier == pytest.approx(1.0)
