"""Log parser: full training-log text -> ParsedLog.

Two independent passes share one walk over the lines:

    1. Args: the first line carrying the args marker is split into a
       name -> raw string mapping. Later args lines are ignored.
    2. Data: every line carrying one of the three tags is tokenized; a
       token set with an integral ``epoch`` is merged into that epoch's
       record, field by field, last write wins.

Lines without a tag (plain summaries, footers, free text) never reach the
tokenizer. A log with no usable tagged line yields an empty ``data`` list;
that is a result, not an exception.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from logtune.config import LogTuneConfig
from logtune.parsing.tokenizer import tokenize
from logtune.parsing.types import RESERVED_KEYS, ParsedLog, is_number

if TYPE_CHECKING:
    from logtune.parsing.types import LogRecord, Value

logger = logging.getLogger("logtune")

_QUOTES = "'\""


def epoch_of(value: Value | None) -> int | None:
    """Return the record key for an ``epoch`` token, or None if unusable."""
    if not is_number(value):
        return None
    number = float(value)  # type: ignore[arg-type]
    if not number.is_integer():
        return None
    return int(number)


def parse_args_line(line: str, marker: str) -> dict[str, str]:
    """Split an args dump line into a name -> raw value mapping.

    The content between the marker (plus an opening parenthesis, if any)
    and the last ``)`` on the line is split on ``", "``. Each piece is split
    on its first ``=``; keys are trimmed, values trimmed and unquoted.
    Pieces with an empty key or value are skipped.

    Args:
        line: A line known to contain *marker*.
        marker: The args marker, e.g. ``"Args: Namespace"``.

    Returns:
        Mapping of argument names to raw string values.
    """
    start = line.index(marker) + len(marker)
    if line[start : start + 1] == "(":
        start += 1
    end = line.rfind(")")
    if end < start:
        end = len(line)

    args: dict[str, str] = {}
    for piece in line[start:end].split(", "):
        key, sep, value = piece.partition("=")
        key = key.strip()
        value = value.strip().strip(_QUOTES).strip()
        if sep and key and value:
            args[key] = value
    return args


class LogParser:
    """Parses training-log text into per-epoch records.

    The parser holds only its configuration; every ``parse()`` call works on
    fresh local state, so one instance can be reused across logs.
    """

    def __init__(self, config: LogTuneConfig | None = None) -> None:
        """Initialize with the tag and marker settings from *config*.

        Args:
            config: Configuration providing tags and the args marker.
                Defaults to a config loaded from the environment.
        """
        self._config = config if config is not None else LogTuneConfig()

    def is_tagged(self, line: str) -> bool:
        """True if *line* carries any of the per-epoch data tags."""
        return any(tag in line for tag in self._config.tags)

    def parse(self, text: str) -> ParsedLog:
        """Parse the whole log.

        Args:
            text: Complete log contents, newline-delimited.

        Returns:
            ParsedLog with args, epoch-sorted records and the metric key set.
            ``ParsedLog.is_empty`` reports a log with no usable records.
        """
        marker = self._config.args_marker
        args: dict[str, str] | None = None
        records: dict[int, LogRecord] = {}
        # dict as an insertion-ordered set.
        keys: dict[str, None] = {}
        tagged_lines = 0

        for line in text.split("\n"):
            if marker in line:
                if args is None:
                    args = parse_args_line(line, marker)
                continue

            if not self.is_tagged(line):
                continue
            tagged_lines += 1

            tokens = tokenize(line)
            epoch = epoch_of(tokens.get("epoch"))
            if epoch is None:
                continue

            record = records.setdefault(epoch, {"epoch": epoch})
            record.update(tokens)
            record["epoch"] = epoch
            for key in tokens:
                if key not in RESERVED_KEYS:
                    keys[key] = None

        data = [records[epoch] for epoch in sorted(records)]
        result = ParsedLog(args=args or {}, data=data, keys=list(keys))

        if result.is_empty:
            logger.warning(
                "No epoch records found (%d tagged lines scanned)", tagged_lines
            )
        else:
            logger.debug(
                "Parsed %d epochs (%d..%d), %d metrics, %d args",
                len(data),
                data[0]["epoch"],
                data[-1]["epoch"],
                len(result.keys),
                len(result.args),
            )
        return result


def parse_log(text: str, config: LogTuneConfig | None = None) -> ParsedLog:
    """Parse *text* with a one-off LogParser.

    Args:
        text: Complete log contents.
        config: Optional configuration; defaults are loaded if omitted.

    Returns:
        The ParsedLog for *text*.
    """
    return LogParser(config).parse(text)
