"""
Numeric parsing helpers shared by parsers.
"""

import math
import re

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def leading_int(text: str) -> int | None:
    """
    Parse the integer at the start of the first whitespace-delimited token.

    "45.31 W" -> 45, "2100 MHz" -> 2100, "N/A" -> None.
    """
    tokens = text.split()
    if not tokens:
        return None
    match = _LEADING_INT.match(tokens[0])
    if match is None:
        return None
    return int(match.group(1))
