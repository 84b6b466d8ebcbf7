"""Numeric formatting for markup output.

LaTeX syntax is locale-insensitive, so every number written into the
markup goes through these helpers instead of locale-aware formatting:
- Lengths: shortest decimal form with a '.' separator and no exponent
  (1 -> "1", 0.75 -> "0.75", 1e-05 -> "0.00001")
- Pie slices: integer percentage truncated toward zero
"""

import math
from decimal import Decimal


def format_inches(value: float | int) -> str:
    """Format a length for a geometry option, always with a '.' separator."""
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        raise ValueError(f"Cannot format non-finite length: {value}")
    if float(value) == int(value):
        return str(int(value))
    # Shortest round-tripping digits, written without an exponent.
    return format(Decimal(repr(float(value))), "f")


def pie_percentage(value: int, total: int) -> int:
    """Share of ``value`` in ``total`` as a whole percentage.

    Truncates instead of rounding, so the slices of a pie may sum to less
    than 100 (three equal slices give 33 each).

    Raises ZeroDivisionError when ``total`` is 0.
    """
    if total == 0:
        raise ZeroDivisionError("Pie chart total is zero")
    quotient = abs(100 * value) // abs(total)
    return quotient if (value < 0) == (total < 0) else -quotient
