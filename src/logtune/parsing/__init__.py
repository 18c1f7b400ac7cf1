"""Log parsing subsystem for logtune.

Turns training-log text into per-epoch records: a line tokenizer for
``key=value`` pairs, the parser that merges tagged lines by epoch, and the
ParsedLog result type.
"""

from logtune.parsing.parser import LogParser, epoch_of, parse_args_line, parse_log
from logtune.parsing.tokenizer import parse_value, tokenize
from logtune.parsing.types import RESERVED_KEYS, LogRecord, ParsedLog, is_number

__all__ = [
    "RESERVED_KEYS",
    "LogParser",
    "LogRecord",
    "ParsedLog",
    "epoch_of",
    "is_number",
    "parse_args_line",
    "parse_log",
    "parse_value",
    "tokenize",
]
