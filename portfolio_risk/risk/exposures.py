"""Exposure aggregation across the six concentration dimensions.

Groups normalized assets by asset class, geography, manager, vintage,
currency and sector, and converts each dimension's totals into a list of
percentage-of-dimension-total entries sorted by amount. Key sets are
open-ended (driven by the data), so each breakdown is an ordered list of
entries plus a name -> amount mapping for lookups.

All functions are pure computation -- no I/O or shared state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from portfolio_risk.core.defaults import UNKNOWN_LABEL
from portfolio_risk.risk.holdings import clamp_amount
from portfolio_risk.risk.normalizer import NormalizedAsset

DIMENSIONS: tuple[str, ...] = (
    "asset_class",
    "geography",
    "manager",
    "vintage",
    "currency",
    "sector",
)


@dataclass(frozen=True)
class ExposureEntry:
    """Share of one dimension value.

    Attributes:
        name: Dimension value, e.g. a manager name or ``"Luxembourg"``.
        amount: Summed positive amount.
        percentage: amount / dimension total * 100 (0.0 when total is 0).
    """

    name: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class ExposureBreakdown:
    """Exposure entries for one dimension, largest first."""

    entries: tuple[ExposureEntry, ...] = ()
    amounts: dict[str, float] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return sum(e.amount for e in self.entries)

    @property
    def top(self) -> ExposureEntry | None:
        return self.entries[0] if self.entries else None


@dataclass(frozen=True)
class ExposureSet:
    """Breakdowns for all six dimensions."""

    asset_class: ExposureBreakdown
    geography: ExposureBreakdown
    manager: ExposureBreakdown
    vintage: ExposureBreakdown
    currency: ExposureBreakdown
    sector: ExposureBreakdown

    def items(self) -> list[tuple[str, ExposureBreakdown]]:
        return [(name, getattr(self, name)) for name in DIMENSIONS]


def build_exposure(
    assets: Iterable[NormalizedAsset],
    key: Callable[[NormalizedAsset], str],
) -> ExposureBreakdown:
    """Group assets by ``key`` and compute each group's share.

    Assets with a zero or negative amount contribute to neither the
    numerator nor the denominator. Blank keys are grouped as ``"Unknown"``.

    Args:
        assets: Normalized assets.
        key: Extracts the dimension value from an asset.

    Returns:
        ExposureBreakdown with entries sorted by amount descending (ties keep
        first-seen order).
    """
    totals: dict[str, float] = {}
    grand_total = 0.0

    for asset in assets:
        amount = clamp_amount(asset.amount)
        if amount == 0.0:
            continue
        name = key(asset) or UNKNOWN_LABEL
        grand_total += amount
        totals[name] = totals.get(name, 0.0) + amount

    entries = sorted(
        (
            ExposureEntry(
                name=name,
                amount=amount,
                percentage=(amount / grand_total) * 100.0 if grand_total > 0 else 0.0,
            )
            for name, amount in totals.items()
        ),
        key=lambda e: e.amount,
        reverse=True,
    )

    return ExposureBreakdown(
        entries=tuple(entries),
        amounts={e.name: e.amount for e in entries},
    )


def aggregate_exposures(assets: Iterable[NormalizedAsset]) -> ExposureSet:
    """Build the breakdown for every dimension in DIMENSIONS."""
    assets = list(assets)
    return ExposureSet(
        **{
            dimension: build_exposure(assets, lambda a, d=dimension: getattr(a, d))
            for dimension in DIMENSIONS
        }
    )
