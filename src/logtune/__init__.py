"""logtune: parse, edit and rewrite training-run logs.

Extracts per-epoch metric series from free-form training logs, applies
reproducible signal edits (eased interpolation, correlated jitter, offset)
and writes the edits back into the original text with every token's
numeric notation and the footer summaries kept consistent.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("logtune")
except PackageNotFoundError:
    __version__ = "0.0.0"

from logtune.config import LogTuneConfig, resolve_config, validate_overrides
from logtune.exceptions import (
    ConfigValidationError,
    EditOperationError,
    EmptyLogError,
    LogTuneError,
)
from logtune.parsing import LogParser, ParsedLog, parse_log, tokenize
from logtune.rewriting import LogRewriter, RewriteResult, format_to_match, update_log_content
from logtune.session import EditSession, History, SessionSettings
from logtune.signal import (
    EasingRegistry,
    EditResult,
    GenerateOperation,
    JitterOperation,
    OffsetOperation,
    OperationRegistry,
    SeededRandom,
)

__all__ = [
    "ConfigValidationError",
    "EasingRegistry",
    "EditOperationError",
    "EditResult",
    "EditSession",
    "EmptyLogError",
    "GenerateOperation",
    "History",
    "JitterOperation",
    "LogParser",
    "LogRewriter",
    "LogTuneConfig",
    "LogTuneError",
    "OffsetOperation",
    "OperationRegistry",
    "ParsedLog",
    "RewriteResult",
    "SeededRandom",
    "SessionSettings",
    "__version__",
    "format_to_match",
    "parse_log",
    "resolve_config",
    "tokenize",
    "update_log_content",
    "validate_overrides",
]
