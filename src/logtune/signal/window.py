"""Helpers that turn editor gestures into index windows and point writes.

The editing shell speaks in epochs and screen coordinates; the operations
speak in list indices and values. These functions bridge the two without
holding any state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from logtune.signal.base import DEFAULT_ROUND_DIGITS, EditResult

if TYPE_CHECKING:
    from logtune.parsing.types import LogRecord

# Vertical plot margins of the default chart, in pixels.
DEFAULT_MARGIN = (5.0, 5.0)


def resolve_range(
    records: list[LogRecord],
    start_epoch: int | None,
    end_epoch: int | None,
) -> tuple[int, int]:
    """Map an inclusive epoch window onto an inclusive index window.

    The start index is the first record with ``epoch >= start_epoch`` and the
    end index the last record with ``epoch <= end_epoch``. A missing bound
    selects the whole list. A start beyond the last epoch falls back to
    index 0.

    Args:
        records: Epoch-ordered records.
        start_epoch: First epoch of the window, or None.
        end_epoch: Last epoch of the window, or None.

    Returns:
        ``(start_idx, end_idx)``; ``(0, 0)`` for an empty list.
    """
    if not records:
        return 0, 0
    if start_epoch is None or end_epoch is None:
        return 0, len(records) - 1

    start_idx = next(
        (i for i, record in enumerate(records) if record["epoch"] >= start_epoch),
        0,
    )
    end_idx = next(
        (i for i, record in enumerate(records) if record["epoch"] > end_epoch),
        len(records),
    )
    return start_idx, end_idx - 1


def set_point(
    records: list[LogRecord],
    metric: str,
    epoch: int,
    value: float,
    round_digits: int = DEFAULT_ROUND_DIGITS,
) -> EditResult:
    """Overwrite one record's *metric*, as a drag-to-draw stroke does.

    Args:
        records: Epoch-ordered records; not modified.
        metric: Field to write.
        epoch: Epoch of the record to change.
        value: New value, rounded to *round_digits*.

    Returns:
        EditResult; ``points`` is 0 when *epoch* is not in *records*.
    """
    diagnostics: dict[str, object] = {"kind": "draw", "metric": metric, "points": 0}
    updated = list(records)
    for idx, record in enumerate(records):
        if record["epoch"] == epoch:
            updated[idx] = {**record, metric: round(value, round_digits)}
            diagnostics.update(points=1, start_epoch=epoch, end_epoch=epoch)
            break
    return EditResult(records=updated, diagnostics=diagnostics)


def value_from_pixel(
    pixel_y: float,
    height: float,
    domain: tuple[float, float],
    margin: tuple[float, float] = DEFAULT_MARGIN,
    round_digits: int = DEFAULT_ROUND_DIGITS,
) -> float:
    """Convert a vertical chart coordinate into a metric value.

    The y axis is inverted: the top of the plot area is ``domain[1]``.
    Coordinates outside the plot area clamp to the domain bounds.

    Args:
        pixel_y: Pointer y position relative to the chart container.
        height: Chart container height.
        domain: ``(min, max)`` of the visible value axis.
        margin: ``(top, bottom)`` plot margins.

    Returns:
        The value under the pointer.
    """
    top, bottom = margin
    area = height - top - bottom
    if area <= 0:
        return round(domain[1], round_digits)
    normalized = min(1.0, max(0.0, (pixel_y - top) / area))
    low, high = domain
    return round(high - normalized * (high - low), round_digits)
