import math
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded towards positive infinity."""
    return int(math.floor(value + 0.5))


def round_probability(value: float) -> float:
    return round_half_up(value * 100) / 100


def round_value(value: float, decimals: int = 2) -> float:
    """Fixed-decimal rounding of the exact binary value, halves away from zero."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
