"""Data types for the log parsing subsystem."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np

from logtune.exceptions import EmptyLogError

Value = Union[float, int, str]
LogRecord = dict[str, Value]

# Keys every record may carry that are never treated as metrics.
RESERVED_KEYS: frozenset[str] = frozenset({"epoch", "step"})


def is_number(value: object) -> bool:
    """Return True for int/float values (bool excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class ParsedLog:
    """Result of parsing one log text.

    Attributes:
        args: Argument name -> raw string, from the first args line only.
        data: One record per epoch, ascending by epoch, no duplicates.
        keys: Every field name seen on a merged line, first-seen order,
            excluding ``epoch`` and ``step``.
    """

    args: dict[str, str] = field(default_factory=dict)
    data: list[LogRecord] = field(default_factory=list)
    keys: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no tagged line carried a usable epoch."""
        return not self.data

    @property
    def epochs(self) -> list[int]:
        return [int(record["epoch"]) for record in self.data]

    def require_data(self) -> ParsedLog:
        """Return self, or raise if the parse produced no records.

        Raises:
            EmptyLogError: If ``data`` is empty.
        """
        if self.is_empty:
            raise EmptyLogError(
                "No valid metrics found in the log. Ensure lines contain "
                "a metric or route tag with an epoch field."
            )
        return self

    def series(self, metric: str) -> np.ndarray:
        """Return *metric* as a float array aligned with ``data``.

        Records without a numeric value for *metric* contribute NaN.
        """
        values = [record.get(metric) for record in self.data]
        return np.array(
            [float(v) if is_number(v) else np.nan for v in values],  # type: ignore[arg-type]
            dtype=np.float64,
        )
