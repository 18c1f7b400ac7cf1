"""Render a number in the notation of an existing token.

Given ``value`` and the token text it replaces (``reference``):

    reference has an exponent  -> exponent form, fixed mantissa digits,
                                  reference's exponent letter, sign style
                                  and exponent width
    reference has a '.'        -> same number of decimals
    otherwise                  -> integer, halves rounded up

So ``format_to_match(0.5, "0.0101") == "0.5000"`` and
``format_to_match(0.000123, "1.5e-04") == "1.230000e-04"``.
"""

from __future__ import annotations

import math
import re

_EXPONENT_SPLIT = re.compile(r"[eE]")


def _format_exponent(value: float, reference: str, digits: int) -> str:
    mantissa, exponent = f"{value:.{digits}e}".split("e")
    exp = int(exponent)
    parts = _EXPONENT_SPLIT.split(reference, maxsplit=1)
    ref_exp = parts[1] if len(parts) > 1 else ""
    letter = "E" if "E" in reference else "e"
    if exp < 0:
        sign = "-"
    elif ref_exp[:1] in ("+", "-"):
        sign = "+"
    else:
        sign = ""
    width = max(1, len(ref_exp.lstrip("+-")))
    return f"{mantissa}{letter}{sign}{abs(exp):0{width}d}"


def format_to_match(value: float, reference: str, exponent_digits: int = 6) -> str:
    """Format *value* the way *reference* is formatted.

    Args:
        value: The new number.
        reference: The token text being replaced, e.g. ``"0.0101"``.
        exponent_digits: Mantissa digits used for exponent notation.

    Returns:
        The new token text. Non-finite values return *reference* unchanged.
    """
    if not math.isfinite(value):
        return reference
    if "e" in reference or "E" in reference:
        return _format_exponent(value, reference, exponent_digits)
    if "." in reference:
        decimals = len(reference.split(".", 1)[1])
        return f"{value:.{decimals}f}"
    return str(math.floor(value + 0.5))
