"""Unit tests for structured logging helpers."""

from __future__ import annotations

import structlog

from portfolio_risk.core.utils.logging_config import get_logger, report_context


class TestReportContext:
    def test_binds_fields_for_block(self) -> None:
        with report_context(focus="fund", focus_label="Fund B"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["focus"] == "fund"
            assert bound["focus_label"] == "Fund B"
        assert "focus" not in structlog.contextvars.get_contextvars()

    def test_none_values_not_bound(self) -> None:
        with report_context(focus="portfolio", focus_label=None):
            bound = structlog.contextvars.get_contextvars()
            assert "focus_label" not in bound


def test_get_logger_emits_report_event() -> None:
    logger = get_logger("risk.engine")
    with structlog.testing.capture_logs() as logs:
        logger.info("risk_report_generated", n_breaches=0)
    assert logs == [
        {
            "event": "risk_report_generated",
            "logger_name": "risk.engine",
            "n_breaches": 0,
            "log_level": "info",
        }
    ]
