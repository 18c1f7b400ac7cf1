"""Input contract for the chart renderer.

Rendering itself lives outside this package. A renderer receives the
epoch-ordered records, a group of metric names and optional colors; any
metric the data never carries is dropped rather than drawn empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from logtune.parsing.types import is_number

if TYPE_CHECKING:
    from collections.abc import Sequence

    from logtune.parsing.types import LogRecord


@dataclass(frozen=True, slots=True)
class ChartGroup:
    """A set of metrics drawn on one chart.

    Attributes:
        title: Chart heading.
        metrics: Metric names, in legend order.
        colors: Optional per-metric colors, aligned with ``metrics``.
        description: Optional one-line hint shown under the title.
    """

    title: str
    metrics: tuple[str, ...]
    colors: tuple[str, ...] = ()
    description: str = ""

    def color_of(self, metric: str) -> str | None:
        try:
            idx = self.metrics.index(metric)
        except ValueError:
            return None
        return self.colors[idx] if idx < len(self.colors) else None


@dataclass(frozen=True, slots=True)
class Series:
    """One drawable line: epochs, values (NaN for gaps) and a color."""

    metric: str
    epochs: np.ndarray
    values: np.ndarray
    color: str | None = None


CHART_GROUPS: tuple[ChartGroup, ...] = (
    ChartGroup(
        "Clustering Metrics",
        ("ACC", "NMI", "ARI", "F1", "PUR"),
        ("#2563eb", "#9333ea", "#db2777", "#dc2626", "#ea580c"),
        "Core performance indicators (0-1 range).",
    ),
    ChartGroup("Learning Rate", ("lr",), ("#059669",), "Learning rate schedule."),
    ChartGroup(
        "Parameters",
        ("gate", "temp_f", "temp_l"),
        ("#d97706", "#7c3aed", "#4f46e5"),
        "Gate ramping and temperatures.",
    ),
    ChartGroup(
        "Loss Decomposition (Main)",
        ("L_total", "L_feat", "L_cross"),
        ("#1e293b", "#3b82f6", "#ef4444"),
        "Dominant loss terms.",
    ),
    ChartGroup(
        "Loss Decomposition (Auxiliary)",
        ("L_cluster", "L_recon", "L_uncert", "L_hn", "L_reg"),
        ("#f59e0b", "#10b981", "#8b5cf6", "#ec4899", "#6366f1"),
        "Regularization and auxiliary terms.",
    ),
    ChartGroup(
        "Routing: Scale",
        ("neg_per_anchor", "U_size"),
        ("#dc2626", "#0ea5e9"),
        "Per-anchor and per-batch counts.",
    ),
    ChartGroup(
        "Routing: Ratios",
        ("safe_ratio", "FN_ratio", "HN_ratio"),
        ("#22c55e", "#ef4444", "#f97316"),
        "Routing ratios (0-1).",
    ),
    ChartGroup(
        "Distributions",
        ("u_mean", "u_p50", "gamma_mean"),
        ("#f97316", "#fbbf24", "#8b5cf6"),
        "Uncertainty and gamma statistics.",
    ),
)


def visible_metrics(records: Sequence[LogRecord], metrics: Sequence[str]) -> list[str]:
    """Return the metrics that at least one record carries, in input order."""
    return [m for m in metrics if any(m in record for record in records)]


def chart_series(records: Sequence[LogRecord], group: ChartGroup) -> list[Series]:
    """Build the drawable series for *group*, omitting absent metrics."""
    epochs = np.array([int(r["epoch"]) for r in records], dtype=np.int64)
    series: list[Series] = []
    for metric in visible_metrics(records, group.metrics):
        values = np.array(
            [float(r[metric]) if is_number(r.get(metric)) else np.nan for r in records],  # type: ignore[arg-type]
            dtype=np.float64,
        )
        series.append(Series(metric, epochs, values, group.color_of(metric)))
    return series


def ungrouped_metrics(keys: Sequence[str], groups: Sequence[ChartGroup] = CHART_GROUPS) -> list[str]:
    """Metrics present in the log that no chart group covers."""
    grouped = {m for group in groups for m in group.metrics}
    return [k for k in keys if k not in grouped]
