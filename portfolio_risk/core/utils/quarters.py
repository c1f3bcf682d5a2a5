"""Fiscal quarter bucketing and event date coercion.

Quarters are calendar quarters represented as ``pandas.Period`` objects
(freq ``Q-DEC``), which gives exact boundaries and quarter arithmetic
without month bookkeeping.

Examples::

    >>> from datetime import datetime
    >>> quarter_key(quarter_of(datetime(2025, 8, 14)))
    '2025-Q3'
    >>> [b.key for b in quarter_buckets(datetime(2025, 2, 1), 3, "backward")]
    ['2024-Q3', '2024-Q4', '2025-Q1']
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Literal

import pandas as pd

QUARTER_FREQ = "Q"


@dataclass(frozen=True)
class QuarterBucket:
    """One calendar quarter.

    Attributes:
        period: The pandas quarterly Period.
        key: Sortable key, e.g. ``"2025-Q3"``.
        label: Display label, e.g. ``"Q3 2025"``.
        start: First instant of the quarter.
        end: Last instant of the quarter.
    """

    period: pd.Period
    key: str
    label: str
    start: datetime
    end: datetime


def coerce_datetime(value: Any) -> datetime | None:
    """Coerce an event date into a naive UTC datetime.

    Accepts ``datetime`` (aware values are converted to UTC), ``date``,
    ``pandas.Timestamp`` and ISO-8601 strings. Anything else, including
    unparseable strings and NaT, yields None.
    """
    if value is None or value is pd.NaT or isinstance(value, bool):
        return None

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            value = pd.Timestamp(stripped)
        except (ValueError, TypeError, OverflowError):
            return None
        if value is pd.NaT:
            return None

    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    return None


def quarter_of(moment: datetime | date) -> pd.Period:
    """Return the calendar quarter containing ``moment``."""
    return pd.Period(pd.Timestamp(moment), freq=QUARTER_FREQ)


def quarter_key(period: pd.Period) -> str:
    return f"{period.year}-Q{period.quarter}"


def quarter_label(period: pd.Period) -> str:
    return f"Q{period.quarter} {period.year}"


def quarter_buckets(
    anchor: datetime | date,
    count: int,
    direction: Literal["forward", "backward"],
) -> list[QuarterBucket]:
    """Build ``count`` consecutive quarters in chronological order.

    ``forward`` starts at the anchor's quarter and moves ahead; ``backward``
    ends at the anchor's quarter. The anchor quarter is included either way.

    Args:
        anchor: Reference moment, normally the report's ``as_of``.
        count: Number of quarters to build.
        direction: ``"forward"`` or ``"backward"``.

    Returns:
        List of QuarterBucket sorted oldest first.
    """
    current = quarter_of(anchor)
    if direction == "forward":
        periods = [current + i for i in range(count)]
    else:
        periods = [current - i for i in reversed(range(count))]

    return [
        QuarterBucket(
            period=p,
            key=quarter_key(p),
            label=quarter_label(p),
            start=p.start_time.to_pydatetime(),
            end=(p + 1).start_time.to_pydatetime() - timedelta(microseconds=1),
        )
        for p in periods
    ]
