"""Cost curve helpers."""

import math


def round_half_up(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals with halves rounded up (0.125 -> 0.13)."""
    scale = 10 ** places
    return math.floor(value * scale + 0.5) / scale


def bump_cost(value: float, rate: float) -> float:
    """Grow a cost geometrically by ``rate`` and round to cents."""
    return round_half_up(value * (1 + rate), 2)
