"""Structured logging for the portfolio risk engine.

Every engine module emits key-value events through structlog. The report
pipeline uses these event names:

- ``risk_report_generated`` (info): one per report, with total portfolio,
  overall score, risk level and breach/scenario counts.
- ``policy_breaches_detected`` (info): breach count and critical count.
- ``scenario_liquidity_gaps`` (info): names of scenarios with a positive
  liquidity gap.
- ``unscheduled_calls_allocated`` / ``undated_events_skipped`` (debug):
  forecast and history bookkeeping.
- ``focus_applied`` (debug): the focus label and retained holding counts.
- ``invalid_as_of_ignored`` (warning): an unparseable reporting moment was
  replaced by the clock.

``report_context()`` binds the focus of the report being built to every
event emitted inside it. The minimum level comes from ``settings.log_level``
(``RISK_ENGINE_LOG_LEVEL``).
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from portfolio_risk.core.config import settings

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure structlog processors once.

    Safe to call multiple times -- only the first invocation takes effect.

    Args:
        level: Minimum log level name. Defaults to ``settings.log_level``.
    """
    global _configured
    if _configured:
        return

    level_name = (level or settings.log_level).upper()
    min_level = logging.getLevelName(level_name)
    if not isinstance(min_level, int):
        min_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a bound logger with the given name.

    Ensures logging is configured before returning.

    Args:
        name: Logger name, typically the module name.

    Returns:
        A structlog BoundLogger instance bound with the given name.
    """
    configure_logging()
    return structlog.get_logger(logger_name=name)


@contextmanager
def report_context(**fields: object) -> Iterator[None]:
    """Bind report-scoped fields (e.g. ``focus``, ``focus_label``) for the block.

    Fields with a None value are not bound.
    """
    bound = {key: value for key, value in fields.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield
