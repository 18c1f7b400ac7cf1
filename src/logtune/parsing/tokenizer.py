"""Line tokenizer shared by the parser and the rewriter.

A line contributes every non-overlapping ``name=value`` token it contains.
Values are kept as numbers when their leading characters form one, and as
the literal string otherwise. The rewriter relies on the same key pattern
so both sides agree on what a field is.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from logtune.parsing.types import Value

# Extraction: value is a run of number-ish characters or a bare word.
TOKEN_PATTERN = re.compile(r"(\w+)=([-\d.eE]+|\w+)", re.ASCII)

# Rewriting: only well-formed numbers are candidates for substitution.
NUMBER_PATTERN = r"[-+]?(?:\d*\.?\d+|\d+\.?\d*)(?:[eE][-+]?\d+)?"
KEY_NUMBER_PATTERN = re.compile(rf"(\w+)=({NUMBER_PATTERN})", re.ASCII)

# Longest numeric prefix, mirroring how a lenient float reader behaves:
# "1.5e" -> 1.5, "3-4" -> 3, "e5" -> no number.
_NUMERIC_PREFIX = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?", re.ASCII)


def parse_value(text: str) -> Value:
    """Convert a token value to int, float, or keep it as a string.

    Args:
        text: The raw value substring.

    Returns:
        ``int`` for integer-shaped prefixes, ``float`` for decimal or
        exponent prefixes, the original string when no numeric prefix exists.
    """
    match = _NUMERIC_PREFIX.match(text)
    if match is None:
        return text
    number = match.group(0)
    if "." in number or "e" in number or "E" in number:
        return float(number)
    return int(number)


def tokenize(line: str) -> dict[str, Value]:
    """Extract all ``key=value`` pairs from one line.

    Later occurrences of the same key on a line overwrite earlier ones.

    Args:
        line: A single line of log text (no newline handling is done).

    Returns:
        Mapping from key to parsed value. Empty when nothing matches.
    """
    return {key: parse_value(raw) for key, raw in TOKEN_PATTERN.findall(line)}
