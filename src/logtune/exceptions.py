"""Exception hierarchy for logtune.

All exceptions derive from LogTuneError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.

Malformed log text never raises: the parser and rewriter report problems
through sentinel values (empty results, unchanged text). These exceptions
cover caller mistakes and explicit boundary checks only.
"""


class LogTuneError(Exception):
    """Base exception for all logtune errors."""


class ConfigValidationError(LogTuneError):
    """Configuration field validation failed.

    Raised when overrides contain unknown keys, attempt to override
    non-overridable fields, or fail type validation.
    """


class EmptyLogError(LogTuneError):
    """The log yielded no epoch records.

    Raised only by explicit boundary checks such as
    ``ParsedLog.require_data()``; ``parse_log()`` itself returns an empty
    result instead.
    """


class EditOperationError(LogTuneError):
    """An edit operation could not be built or applied.

    Raised when operation parameters fail validation (e.g., a correlation
    outside [0, 0.99]) or the target metric is missing.
    """
