"""Format-preserving rewriter: edited records -> updated log text.

Pipeline:
    1. Per-epoch lines: every tagged line whose ``epoch`` has an edited
       record gets its allow-listed ``key=<number>`` tokens substituted.
    2. Look-back: the line right before a metric-tagged line is treated as an
       untagged duplicate summary when it has '=' and no tag, and gets the
       same substitution.
    3. Footers: the lines after the average / final / best markers get the
       recomputed statistics; the best marker's own ``Epoch <n>`` is updated.

Only numeric token text of allow-listed keys ever changes. Line count,
line order and every other byte are preserved; an empty allow-list
returns the input unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from logtune.config import LogTuneConfig
from logtune.parsing.parser import epoch_of
from logtune.parsing.tokenizer import KEY_NUMBER_PATTERN, tokenize
from logtune.parsing.types import RESERVED_KEYS, is_number
from logtune.rewriting.formatting import format_to_match
from logtune.rewriting.summary import summarize

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from logtune.parsing.types import LogRecord, Value

logger = logging.getLogger("logtune")

_BEST_EPOCH = re.compile(r"Epoch \d+")


@dataclass(frozen=True, slots=True)
class RewriteResult:
    """Result of a rewrite.

    Attributes:
        text: The updated log text.
        modified_epochs: Epochs whose lines were rewritten, first-seen order.
        modified_keys: The effective allow-list, sorted.
    """

    text: str
    modified_epochs: list[int] = field(default_factory=list)
    modified_keys: list[str] = field(default_factory=list)


class LogRewriter:
    """Writes edited record values back into the original log text.

    Stateless apart from configuration; safe to reuse across logs.
    """

    def __init__(self, config: LogTuneConfig | None = None) -> None:
        """Initialize with tag, marker and formatting settings.

        Args:
            config: Configuration providing tags, footer markers and
                exponent digits. Defaults to a config loaded from the
                environment.
        """
        self._config = config if config is not None else LogTuneConfig()

    def _is_tagged(self, line: str) -> bool:
        return any(tag in line for tag in self._config.tags)

    def substitute(
        self,
        line: str,
        values: Mapping[str, Value],
        allowed: frozenset[str],
    ) -> str:
        """Replace allow-listed numeric tokens on *line* with *values*.

        Tokens whose key is not allowed, has no new value, or has a
        non-numeric new value are left byte-for-byte as they were.
        """
        digits = self._config.exponent_digits

        def replace(match: re.Match[str]) -> str:
            key, old = match.group(1), match.group(2)
            new = values.get(key)
            if key not in allowed or not is_number(new):
                return match.group(0)
            return f"{key}={format_to_match(float(new), old, digits)}"  # type: ignore[arg-type]

        return KEY_NUMBER_PATTERN.sub(replace, line)

    def rewrite(
        self,
        original: str,
        modified: Sequence[LogRecord],
        modified_keys: Iterable[str],
    ) -> RewriteResult:
        """Produce updated text for *modified* records.

        Args:
            original: The full log text the records were parsed from.
            modified: Edited records, ascending by epoch.
            modified_keys: Fields the caller changed. Nothing outside this
                set is rewritten; ``epoch`` and ``step`` never are.

        Returns:
            RewriteResult with the new text and the epochs touched. Epochs
            absent from *original* are skipped silently.
        """
        allowed = frozenset(modified_keys) - RESERVED_KEYS
        if not allowed:
            return RewriteResult(text=original)

        lines = original.split("\n")
        by_epoch = {int(record["epoch"]): record for record in modified}
        touched: dict[int, None] = {}
        args_marker = self._config.args_marker

        for i, line in enumerate(lines):
            if args_marker in line or not self._is_tagged(line):
                continue
            epoch = epoch_of(tokenize(line).get("epoch"))
            record = by_epoch.get(epoch) if epoch is not None else None
            if record is None:
                continue

            touched[epoch] = None  # type: ignore[index]
            lines[i] = self.substitute(line, record, allowed)

            if i > 0 and self._config.metric_tag in line:
                prev = lines[i - 1]
                if "=" in prev and not self._is_tagged(prev):
                    lines[i - 1] = self.substitute(prev, record, allowed)

        self._rewrite_footers(lines, modified, allowed)

        logger.info(
            "Rewrote %d epochs for fields: %s",
            len(touched),
            ", ".join(sorted(allowed)),
        )
        return RewriteResult(
            text="\n".join(lines),
            modified_epochs=list(touched),
            modified_keys=sorted(allowed),
        )

    def _rewrite_footers(
        self,
        lines: list[str],
        modified: Sequence[LogRecord],
        allowed: frozenset[str],
    ) -> None:
        """Update the average / final / best footer blocks in place."""
        stats = summarize(modified, self._config)
        config = self._config
        last = len(lines) - 1

        for i, line in enumerate(lines):
            if config.average_marker in line and i < last:
                lines[i + 1] = self.substitute(lines[i + 1], stats.averages, allowed)

            if config.final_marker in line and i < last and stats.final is not None:
                lines[i + 1] = self.substitute(lines[i + 1], stats.final, allowed)

            if config.best_marker in line and stats.best is not None:
                if stats.target_metric in allowed:
                    lines[i] = _BEST_EPOCH.sub(f"Epoch {stats.best['epoch']}", line, count=1)
                if i < last:
                    lines[i + 1] = self.substitute(lines[i + 1], stats.best, allowed)
                logger.debug(
                    "Best epoch %s by %s (%s)",
                    stats.best["epoch"],
                    stats.target_metric,
                    "min" if stats.minimize else "max",
                )


def update_log_content(
    original: str,
    modified: Sequence[LogRecord],
    modified_keys: Iterable[str],
    config: LogTuneConfig | None = None,
) -> RewriteResult:
    """Rewrite *original* with a one-off LogRewriter.

    Args:
        original: The full log text.
        modified: Edited records, ascending by epoch.
        modified_keys: Allow-list of fields that may change.
        config: Optional configuration.

    Returns:
        The RewriteResult.
    """
    return LogRewriter(config).rewrite(original, modified, modified_keys)
