"""Numeric coercion shared by parsing, classification and reshaping.

A textual cell is treated as a number only when the whole trimmed string is a
decimal real-number literal with a finite value. The same rule is applied
everywhere a value may be read as numeric, so a column that the classifier
reports as numeric is also summed by the reshaper.
"""

from __future__ import annotations

import math
import re

Scalar = int | float | str

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


def _is_number(value: object) -> bool:
    """Return True for real numbers (booleans are not numbers here)."""

    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_number(text: str) -> int | float | None:
    """Parse a numeric string.

    Args:
        text: Raw cell text.

    Returns:
        An int when the value is integral, a float otherwise, or None when the
        text is not a complete, finite decimal number.
    """

    stripped = text.strip()
    if not stripped or _NUMBER_RE.match(stripped) is None:
        return None
    value = float(stripped)
    if not math.isfinite(value):
        return None
    if value.is_integer():
        return int(value)
    return value


def coerce_scalar(value: str) -> Scalar:
    """Coerce a string cell to a number when it is numeric.

    Args:
        value: String cell value.

    Returns:
        The parsed number, or the string unchanged when it is not numeric.
    """

    parsed = parse_number(value)
    if parsed is None:
        return value
    return parsed


def is_numeric(value: object) -> bool:
    """Return True when a value is a number or a numeric-coercible string."""

    if _is_number(value):
        return not (isinstance(value, float) and not math.isfinite(value))
    if isinstance(value, str):
        return parse_number(value) is not None
    return False


def to_number(value: object) -> int | float:
    """Return the numeric value of a cell, or 0 when it is not numeric."""

    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return value  # type: ignore[return-value]
    if isinstance(value, str):
        parsed = parse_number(value)
        if parsed is not None:
            return parsed
    return 0


def format_scalar(value: object) -> str:
    """Format a scalar as label text.

    Integral floats render without a trailing `.0` so that series labels are
    stable regardless of how the number was produced.
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
