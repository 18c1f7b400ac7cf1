"""Diagnostic logging subsystem for logtune.

Provides immutable per-edit records and a configurable logger that
supports none/summary/full verbosity and in-memory diagnostic mode.
"""

from logtune.logging.logger import EditLogger
from logtune.logging.types import EditRecord

__all__ = [
    "EditLogger",
    "EditRecord",
]
