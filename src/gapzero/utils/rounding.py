"""Half-up rounding for scores and salaries."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2).

    The builtin ``round`` uses banker's rounding, which would turn a
    keyword score of 82.5 into 82.
    """
    return math.floor(value + 0.5)
