"""
Rounding for reported figures.

Results are quoted rounded half up (2.5 -> 3, 0.125 -> 0.13), the way
spreadsheets and calculators show them. The built-in round() rounds
half to even instead.
"""

import math


def round_half_up(value: float, places: int = 0) -> float:
    """Round value to `places` decimals, ties going towards +infinity."""
    if not math.isfinite(value):
        return value
    scale = 10 ** places
    return math.floor(value * scale + 0.5) / scale
