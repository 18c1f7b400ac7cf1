"""Footer statistics recomputed from an edited record list.

Training logs end with three summary blocks: the per-metric average over
all epochs, the last epoch, and the best epoch. After an edit these are
stale, so they are recomputed here and written back by the rewriter.

Best-epoch policy:
    target  = first of ``config.accuracy_metrics`` present in the data,
              else the first numeric metric
    minimize when the target starts with ``config.loss_prefix``, else maximize
    ties    -> earliest epoch; records without the target are skipped
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from logtune.parsing.types import RESERVED_KEYS, is_number

if TYPE_CHECKING:
    from collections.abc import Sequence

    from logtune.config import LogTuneConfig
    from logtune.parsing.types import LogRecord

_DEFAULT_ACCURACY_METRICS = ("ACC", "NMI", "F1", "ARI", "PUR")
_DEFAULT_LOSS_PREFIX = "L_"


@dataclass(frozen=True, slots=True)
class FooterStats:
    """Recomputed footer values.

    Attributes:
        averages: Metric -> mean over all records, missing values as 0.
        final: The last record, or None for no data.
        best: The best record under the best-epoch policy, or None.
        target_metric: Metric the best record was chosen by.
        minimize: True if the target is a loss term.
    """

    averages: dict[str, float] = field(default_factory=dict)
    final: LogRecord | None = None
    best: LogRecord | None = None
    target_metric: str | None = None
    minimize: bool = False


def numeric_metrics(records: Sequence[LogRecord]) -> list[str]:
    """Return every field with a numeric value somewhere, first-seen order."""
    seen: dict[str, None] = {}
    for record in records:
        for key, value in record.items():
            if key not in RESERVED_KEYS and is_number(value):
                seen[key] = None
    return list(seen)


def footer_metrics(records: Sequence[LogRecord]) -> list[str]:
    """Fields averaged in the footer: those of the first record, minus epoch/step."""
    if not records:
        return []
    return [key for key in records[0] if key not in RESERVED_KEYS]


def compute_averages(records: Sequence[LogRecord], metrics: Sequence[str]) -> dict[str, float]:
    """Mean of each metric over the whole record list.

    A record without a numeric value for a metric contributes 0, and the
    divisor is always ``len(records)``.
    """
    averages: dict[str, float] = {}
    if not records:
        return averages
    for metric in metrics:
        values = [float(r[metric]) if is_number(r.get(metric)) else 0.0 for r in records]  # type: ignore[arg-type]
        averages[metric] = float(np.mean(values))
    return averages


def select_target_metric(
    metrics: Sequence[str],
    accuracy_metrics: Sequence[str] = _DEFAULT_ACCURACY_METRICS,
) -> str | None:
    """Pick the metric that decides the best epoch."""
    for name in accuracy_metrics:
        if name in metrics:
            return name
    return metrics[0] if metrics else None


def select_best(
    records: Sequence[LogRecord],
    metric: str,
    minimize: bool,
) -> LogRecord | None:
    """Return the first record with the extreme value of *metric*.

    Falls back to the first record when none carries the metric, and to
    None for an empty list.
    """
    if not records:
        return None
    values = np.array(
        [float(r[metric]) if is_number(r.get(metric)) else np.nan for r in records],  # type: ignore[arg-type]
        dtype=np.float64,
    )
    if np.all(np.isnan(values)):
        return records[0]
    # nanarg* return the first index of the extreme value.
    idx = int(np.nanargmin(values) if minimize else np.nanargmax(values))
    return records[idx]


def summarize(
    records: Sequence[LogRecord],
    config: LogTuneConfig | None = None,
) -> FooterStats:
    """Compute the average, final and best footer values for *records*.

    Args:
        records: Epoch-ordered records.
        config: Supplies the accuracy metric priority and loss prefix.

    Returns:
        FooterStats; all empty/None for an empty list.
    """
    if not records:
        return FooterStats()

    accuracy = config.accuracy_metrics if config is not None else _DEFAULT_ACCURACY_METRICS
    loss_prefix = config.loss_prefix if config is not None else _DEFAULT_LOSS_PREFIX

    metrics = numeric_metrics(records)
    target = select_target_metric(metrics, accuracy)
    minimize = bool(target and target.startswith(loss_prefix))
    best = select_best(records, target, minimize) if target else records[0]

    return FooterStats(
        averages=compute_averages(records, footer_metrics(records)),
        final=records[-1],
        best=best,
        target_metric=target,
        minimize=minimize,
    )
