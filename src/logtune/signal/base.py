"""Base classes for signal edit operations.

An operation describes one transform of one metric over an inclusive
index window of an epoch-ordered record list. Operations are pydantic
models so their parameters are validated once, at construction; applying
one never mutates the input list or its records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from logtune.parsing.types import is_number

if TYPE_CHECKING:
    from logtune.parsing.types import LogRecord

DEFAULT_ROUND_DIGITS = 6


@dataclass(frozen=True, slots=True)
class EditResult:
    """Result of applying an edit operation.

    Attributes:
        records: New record list. Untouched records are shared with the input;
            touched records are fresh copies.
        diagnostics: Additional info (kind, metric, window, points written).
    """

    records: list[LogRecord]
    diagnostics: dict[str, Any]

    @property
    def points(self) -> int:
        return int(self.diagnostics.get("points", 0))


def numeric_or_zero(value: object) -> float:
    """Read a stored field as a float, treating missing/non-numeric as 0."""
    if is_number(value):
        return float(value)  # type: ignore[arg-type]
    return 0.0


class EditOperation(BaseModel, ABC):
    """Abstract base for generate / jitter / offset operations.

    Subclasses set ``kind``, optionally raise ``min_span`` and implement
    ``transform()``, which maps the original values of the window to the
    new ones. Windows narrower than ``min_span`` are a no-op.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ClassVar[str] = ""
    min_span: ClassVar[int] = 0

    metric: str = Field(min_length=1, description="Field to rewrite")
    start_idx: int = Field(description="First index of the window (inclusive)")
    end_idx: int = Field(description="Last index of the window (inclusive)")

    @abstractmethod
    def transform(self, originals: list[float]) -> list[float]:
        """Return the new values for the window.

        Args:
            originals: Current values of the window, missing values as 0.

        Returns:
            One value per input position, unrounded.
        """

    def apply(
        self,
        records: list[LogRecord],
        round_digits: int = DEFAULT_ROUND_DIGITS,
    ) -> EditResult:
        """Apply the operation to *records*.

        The window is clamped to the list bounds. Every written value is
        rounded to *round_digits* decimals.

        Args:
            records: Epoch-ordered records; not modified.
            round_digits: Decimal digits kept on written values.

        Returns:
            EditResult with the new records and diagnostics.
        """
        start = max(self.start_idx, 0)
        end = min(self.end_idx, len(records) - 1)
        diagnostics: dict[str, Any] = {
            "kind": self.kind,
            "metric": self.metric,
            "start_idx": start,
            "end_idx": end,
            "points": 0,
        }
        if not records or end - start < self.min_span:
            return EditResult(records=list(records), diagnostics=diagnostics)

        window = records[start : end + 1]
        originals = [numeric_or_zero(record.get(self.metric)) for record in window]
        values = self.transform(originals)

        updated = list(records)
        for offset, value in enumerate(values):
            updated[start + offset] = {
                **records[start + offset],
                self.metric: round(value, round_digits),
            }

        deltas = [new - old for new, old in zip(values, originals)]
        diagnostics.update(
            points=len(values),
            start_epoch=window[0]["epoch"],
            end_epoch=window[-1]["epoch"],
            mean_delta=sum(deltas) / len(deltas),
            max_abs_delta=max(abs(d) for d in deltas),
        )
        return EditResult(records=updated, diagnostics=diagnostics)
