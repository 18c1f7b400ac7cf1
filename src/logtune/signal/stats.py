"""Descriptive statistics over one metric of a record list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from logtune.parsing.types import is_number

if TYPE_CHECKING:
    from logtune.parsing.types import LogRecord


@dataclass(frozen=True, slots=True)
class MetricStats:
    """Population statistics of one metric.

    Attributes:
        mean: Arithmetic mean.
        std: Population standard deviation (ddof=0).
        min: Smallest value.
        max: Largest value.
        count: Number of records carrying a numeric value.
    """

    mean: float
    std: float
    min: float
    max: float
    count: int


def metric_values(records: list[LogRecord], metric: str) -> np.ndarray:
    """Return the numeric values of *metric*, skipping records without one."""
    values = [record.get(metric) for record in records]
    return np.array([float(v) for v in values if is_number(v)], dtype=np.float64)  # type: ignore[arg-type]


def metric_stats(records: list[LogRecord], metric: str) -> MetricStats:
    """Compute mean, std, min and max of *metric*.

    Returns all zeros when no record carries a numeric value.
    """
    values = metric_values(records, metric)
    if values.size == 0:
        return MetricStats(mean=0.0, std=0.0, min=0.0, max=0.0, count=0)
    return MetricStats(
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        count=int(values.size),
    )


def value_domain(
    records: list[LogRecord],
    metric: str,
    round_digits: int = 6,
) -> tuple[float, float]:
    """Return a padded ``(low, high)`` axis range for *metric*.

    The range is widened by 10% of the span on both sides, or by 0.1 when
    every value is equal. ``(0.0, 1.0)`` when there are no values.
    """
    values = metric_values(records, metric)
    if values.size == 0:
        return 0.0, 1.0
    low = float(np.min(values))
    high = float(np.max(values))
    span = high - low
    padding = 0.1 if span == 0 else span * 0.1
    return round(low - padding, round_digits), round(high + padding, round_digits)
