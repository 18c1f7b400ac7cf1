"""Headless editing session: the state an interactive editor keeps.

Ties the subsystems together for one log buffer:
    text -> parse -> records -> [operations, strokes, undo/redo] -> rewrite -> text

The session owns its record list and history; settings (selected metric,
epoch window, active tool and its parameters) are an explicit value passed
to ``apply()`` or stored on the session, never ambient state.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from logtune.config import LogTuneConfig
from logtune.exceptions import EditOperationError
from logtune.logging.logger import EditLogger
from logtune.logging.types import EditRecord
from logtune.parsing.parser import LogParser
from logtune.parsing.types import is_number
from logtune.rewriting.rewriter import LogRewriter
from logtune.signal.base import EditResult
from logtune.signal.registry import OperationRegistry
from logtune.signal.stats import metric_stats, value_domain
from logtune.signal.window import resolve_range, set_point

if TYPE_CHECKING:
    from collections.abc import Iterable

    from logtune.parsing.types import LogRecord, ParsedLog
    from logtune.rewriting.rewriter import RewriteResult
    from logtune.signal.base import EditOperation
    from logtune.signal.stats import MetricStats

logger = logging.getLogger("logtune")

# Settings fields that are not operation parameters.
_WINDOW_FIELDS = frozenset({"tool", "range_start", "range_end"})


class SessionSettings(BaseModel):
    """Editor state that drives the next operation.

    Field names match the operation parameters they feed, so any registered
    operation picks up the fields it declares.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    metric: str = ""
    range_start: int | None = None
    range_end: int | None = None
    tool: str = "generate"

    # generate
    start_value: float = 0.0
    end_value: float = 1.0
    easing: str = "linear"

    # jitter
    seed: int = 12345
    amplitude: float = 0.05
    correlation: float = Field(default=0.0, ge=0.0, le=0.99)

    # offset
    offset: float = 0.0

    @field_validator("tool")
    @classmethod
    def _known_tool(cls, value: str) -> str:
        try:
            OperationRegistry.get(value)
        except KeyError as exc:
            raise ValueError(exc.args[0]) from exc
        return value


def _snapshot(records: Iterable[LogRecord]) -> list[LogRecord]:
    return [dict(record) for record in records]


class History:
    """Bounded stack of record snapshots with a cursor.

    ``push()`` drops everything after the cursor (the redo tail), appends,
    and evicts the oldest snapshot beyond *capacity*.
    """

    def __init__(self, capacity: int = 20) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._snapshots: list[list[LogRecord]] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def reset(self, records: Iterable[LogRecord]) -> None:
        """Discard all snapshots and start over from *records*."""
        self._snapshots = [_snapshot(records)]
        self._index = 0

    def push(self, records: Iterable[LogRecord]) -> None:
        del self._snapshots[self._index + 1 :]
        self._snapshots.append(_snapshot(records))
        if len(self._snapshots) > self._capacity:
            del self._snapshots[0]
        self._index = len(self._snapshots) - 1

    def current(self) -> list[LogRecord]:
        return _snapshot(self._snapshots[self._index])

    def undo(self) -> list[LogRecord] | None:
        """Move the cursor back; None when already at the oldest snapshot."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self.current()

    def redo(self) -> list[LogRecord] | None:
        """Move the cursor forward; None when already at the newest snapshot."""
        if not self.can_redo:
            return None
        self._index += 1
        return self.current()


class EditSession:
    """One log buffer under edit.

    Args:
        text: The full log text.
        config: Optional configuration; defaults are loaded if omitted.

    Raises:
        EmptyLogError: If *text* yields no epoch records.
    """

    def __init__(self, text: str, config: LogTuneConfig | None = None) -> None:
        self._config = config if config is not None else LogTuneConfig()
        self._parser = LogParser(self._config)
        self._rewriter = LogRewriter(self._config)
        self._edit_logger = EditLogger(self._config)

        self._text = text
        self._parsed = self._parser.parse(text).require_data()
        self._records: list[LogRecord] = _snapshot(self._parsed.data)
        self._history = History(self._config.history_capacity)
        self._history.reset(self._records)
        self._touched: dict[str, None] = {}

        epochs = self._parsed.epochs
        self.settings = SessionSettings(
            metric=self._parsed.keys[0] if self._parsed.keys else "",
            range_start=epochs[0],
            range_end=epochs[-1],
        )
        self.sync_generation_bounds()

    # --- State ---

    @property
    def text(self) -> str:
        return self._text

    @property
    def records(self) -> list[LogRecord]:
        return _snapshot(self._records)

    @property
    def parsed(self) -> ParsedLog:
        return self._parsed

    @property
    def history(self) -> History:
        return self._history

    @property
    def edit_logger(self) -> EditLogger:
        return self._edit_logger

    @property
    def touched_metrics(self) -> list[str]:
        return list(self._touched)

    def window(self, settings: SessionSettings | None = None) -> tuple[int, int]:
        """Index window of the settings' epoch range."""
        settings = settings or self.settings
        return resolve_range(self._records, settings.range_start, settings.range_end)

    def stats(self, metric: str | None = None) -> MetricStats:
        return metric_stats(self._records, metric or self.settings.metric)

    def domain(self, metric: str | None = None) -> tuple[float, float]:
        return value_domain(self._records, metric or self.settings.metric, self._config.round_digits)

    def sync_generation_bounds(self) -> SessionSettings:
        """Copy the current values at the window ends into the generate bounds.

        Ends without a numeric value keep the previous bound.
        """
        start_idx, end_idx = self.window()
        metric = self.settings.metric
        update: dict[str, float] = {}
        digits = self._config.round_digits
        for name, idx in (("start_value", start_idx), ("end_value", end_idx)):
            if not 0 <= idx < len(self._records):
                continue
            value = self._records[idx].get(metric)
            if is_number(value):
                update[name] = round(float(value), digits)
        if update:
            self.settings = self.settings.model_copy(update=update)
        return self.settings

    # --- Edits ---

    def build_operation(self, settings: SessionSettings | None = None) -> EditOperation:
        """Build the active tool's operation from *settings*.

        Raises:
            EditOperationError: If the metric is absent from every record or
                the settings do not form a valid operation.
        """
        settings = settings or self.settings
        if not any(settings.metric in record for record in self._records):
            raise EditOperationError(f"Metric '{settings.metric}' not found in the log")
        klass = OperationRegistry.get(settings.tool)
        start_idx, end_idx = self.window(settings)
        params = {
            name: getattr(settings, name)
            for name in klass.model_fields
            if name in SessionSettings.model_fields and name not in _WINDOW_FIELDS
        }
        return OperationRegistry.build(
            settings.tool, start_idx=start_idx, end_idx=end_idx, **params
        )

    def apply(self, settings: SessionSettings | None = None) -> EditResult:
        """Run the active tool over the window and record a history entry.

        A no-op result (degenerate window) leaves history untouched.
        """
        started = time.perf_counter()
        operation = self.build_operation(settings)
        result = operation.apply(self._records, self._config.round_digits)
        self._commit(result, started)
        return result

    def draw(self, points: Iterable[tuple[int, float]], metric: str | None = None) -> EditResult:
        """Write a drag-to-draw stroke as a single history entry.

        Args:
            points: ``(epoch, value)`` pairs in stroke order; later points for
                the same epoch win. Unknown epochs are skipped.
            metric: Field to draw on; defaults to the selected metric.
        """
        started = time.perf_counter()
        metric = metric or self.settings.metric
        records = self._records
        written: list[int] = []
        for epoch, value in points:
            step = set_point(records, metric, epoch, value, self._config.round_digits)
            records = step.records
            if step.points:
                written.append(epoch)
        diagnostics: dict[str, object] = {"kind": "draw", "metric": metric, "points": len(written)}
        if written:
            diagnostics.update(start_epoch=min(written), end_epoch=max(written))
        result = EditResult(records=records, diagnostics=diagnostics)
        self._commit(result, started)
        return result

    def set_point(self, epoch: int, value: float, metric: str | None = None) -> EditResult:
        return self.draw([(epoch, value)], metric)

    def _commit(self, result: EditResult, started: float) -> None:
        metric = str(result.diagnostics.get("metric", ""))
        if result.points:
            self._records = result.records
            self._history.push(self._records)
            self._touched[metric] = None

        self._edit_logger.log_edit(
            EditRecord(
                timestamp_ns=time.time_ns(),
                duration_ms=(time.perf_counter() - started) * 1000.0,
                kind=str(result.diagnostics.get("kind", "")),
                metric=metric,
                start_epoch=int(result.diagnostics.get("start_epoch", -1)),  # type: ignore[call-overload]
                end_epoch=int(result.diagnostics.get("end_epoch", -1)),  # type: ignore[call-overload]
                points=result.points,
                mean_delta=float(result.diagnostics.get("mean_delta", 0.0)),  # type: ignore[arg-type]
                max_abs_delta=float(result.diagnostics.get("max_abs_delta", 0.0)),  # type: ignore[arg-type]
                history_index=self._history.index,
            )
        )

    def undo(self) -> bool:
        records = self._history.undo()
        if records is None:
            return False
        self._records = records
        return True

    def redo(self) -> bool:
        records = self._history.redo()
        if records is None:
            return False
        self._records = records
        return True

    # --- Persistence ---

    def save(self) -> RewriteResult:
        """Rewrite the log text with the current records.

        Only metrics edited during this session are rewritten. The session
        text and its parse are replaced by the result, so later saves build
        on it. Records and history are kept at full precision.
        """
        result = self._rewriter.rewrite(self._text, self._records, self._touched)
        self._text = result.text
        self._parsed = self._parser.parse(result.text)
        logger.info(
            "Saved session: %d epochs rewritten, fields: %s",
            len(result.modified_epochs),
            ", ".join(result.modified_keys) or "(none)",
        )
        return result
