"""Signal editing subsystem for logtune.

Pure transforms over one metric of an epoch-ordered record list:
eased interpolation, seeded correlated jitter and constant offset, plus
the window, point-write and statistics helpers an editor needs.
"""

from logtune.signal.base import EditOperation, EditResult
from logtune.signal.easing import EasingRegistry
from logtune.signal.operations import GenerateOperation, JitterOperation, OffsetOperation
from logtune.signal.registry import OperationRegistry
from logtune.signal.rng import SeededRandom
from logtune.signal.stats import MetricStats, metric_stats, value_domain
from logtune.signal.window import resolve_range, set_point, value_from_pixel

__all__ = [
    "EasingRegistry",
    "EditOperation",
    "EditResult",
    "GenerateOperation",
    "JitterOperation",
    "MetricStats",
    "OffsetOperation",
    "OperationRegistry",
    "SeededRandom",
    "metric_stats",
    "resolve_range",
    "set_point",
    "value_domain",
    "value_from_pixel",
]
