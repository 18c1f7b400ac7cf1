"""Diagnostic logger for applied edits.

Uses the standard ``logging`` module with the ``"logtune"`` logger.
No ``print()`` statements. Supports three verbosity levels and an
in-memory diagnostic mode for post-hoc review of an editing session.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from logtune.config import LogTuneConfig
    from logtune.logging.types import EditRecord

logger = logging.getLogger("logtune")


class EditLogger:
    """Per-edit diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per edit (kind, metric, epoch window,
        points, deltas).

        ``"full"``: Full JSON dump of all record fields.
    """

    def __init__(self, config: LogTuneConfig) -> None:
        """Initialize the logger from configuration.

        Args:
            config: Configuration providing ``log_level`` and ``diagnostic_mode``.
        """
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[EditRecord] = []

    def log_edit(self, record: EditRecord) -> None:
        """Log a single applied edit.

        Args:
            record: Immutable record of the edit.
        """
        if self._diagnostic_mode:
            self._records.append(record)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.info(
                "edit=%s metric=%s epochs=%d..%d points=%d mean_delta=%.6f "
                "max_delta=%.6f history=%d%s",
                record.kind,
                record.metric,
                record.start_epoch,
                record.end_epoch,
                record.points,
                record.mean_delta,
                record.max_abs_delta,
                record.history_index,
                "" if record.points else " [NO-OP]",
            )
        elif self._log_level == "full":
            logger.info("edit_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[EditRecord]:
        """Return all stored records (requires ``diagnostic_mode=True``).

        Returns:
            List of all EditRecord instances logged so far.
            Empty if diagnostic_mode is False.
        """
        return list(self._records)

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored records.

        Returns:
            Dictionary with aggregate stats, or empty dict if no records.
        """
        if not self._records:
            return {}

        n = len(self._records)
        noop_count = sum(1 for r in self._records if r.points == 0)
        return {
            "total_edits": n,
            "total_points": sum(r.points for r in self._records),
            "edits_by_kind": dict(Counter(r.kind for r in self._records)),
            "metrics_edited": sorted({r.metric for r in self._records}),
            "mean_abs_delta": sum(abs(r.mean_delta) for r in self._records) / n,
            "max_abs_delta": max(r.max_abs_delta for r in self._records),
            "mean_duration_ms": sum(r.duration_ms for r in self._records) / n,
            "noop_count": noop_count,
            "noop_rate": noop_count / n,
        }
