"""Data types for the edit logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EditRecord:
    """Immutable record of one applied edit.

    Attributes:
        timestamp_ns: Wall-clock time of the edit (nanoseconds since epoch).
        duration_ms: Time spent applying the edit (milliseconds).
        kind: Operation kind (``generate``, ``jitter``, ``offset``, ``draw``).
        metric: Field that was edited.
        start_epoch: First epoch written, or -1 if nothing was written.
        end_epoch: Last epoch written, or -1 if nothing was written.
        points: Number of values written.
        mean_delta: Mean of new minus old values over the window.
        max_abs_delta: Largest absolute change in the window.
        history_index: Session history cursor after the edit.
    """

    # Timing
    timestamp_ns: int
    duration_ms: float

    # Operation
    kind: str
    metric: str
    start_epoch: int
    end_epoch: int
    points: int

    # Effect
    mean_delta: float
    max_abs_delta: float

    # Session
    history_index: int
