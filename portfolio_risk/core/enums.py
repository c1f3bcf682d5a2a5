"""Shared enumerations used across the risk engine.

All enums use the (str, Enum) mixin pattern so their values are
serializable strings, compatible with JSON output and downstream storage.
"""

from enum import Enum


class BreachDimension(str, Enum):
    """Policy dimension a breach was detected on."""

    FUND = "FUND"
    ASSET_CLASS = "ASSET_CLASS"
    GEOGRAPHY = "GEOGRAPHY"
    SECTOR = "SECTOR"
    VINTAGE = "VINTAGE"
    MANAGER = "MANAGER"
    CURRENCY = "CURRENCY"
    LIQUIDITY = "LIQUIDITY"
    LEVERAGE = "LEVERAGE"


class Severity(str, Enum):
    """Severity tier of a policy breach.

    Thresholds (ratio of current value to limit):
    - LOW: ratio <= 1.0 (not reported)
    - MEDIUM: 1.0 < ratio <= 1.2
    - HIGH: 1.2 < ratio <= 1.4
    - CRITICAL: ratio > 1.4
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class FocusMode(str, Enum):
    """Scope a risk report is computed over."""

    PORTFOLIO = "portfolio"
    FUND = "fund"
    ASSET_CLASS = "assetClass"


class RiskLevel(str, Enum):
    """Bucketed overall risk score.

    Thresholds:
    - LOW: overall < 30
    - MODERATE: 30 <= overall < 50
    - HIGH: 50 <= overall < 70
    - CRITICAL: overall >= 70
    """

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"
