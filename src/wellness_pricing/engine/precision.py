"""
Fixed-precision rounding used at every step of a calculation.

Rounds the shortest decimal representation of a float, so 1.005 rounds to
1.01 rather than the 1.00 that binary rounding would give. Ties go toward
positive infinity.
"""
from decimal import Decimal, ROUND_HALF_UP, ROUND_HALF_DOWN


def round_half_up(value: float, places: int = 2) -> float:
    """Round to `places` decimals, ties toward +infinity."""
    d = Decimal(repr(float(value)))
    mode = ROUND_HALF_UP if d >= 0 else ROUND_HALF_DOWN
    quantum = Decimal(1).scaleb(-places)
    # + 0.0 folds -0.0 into 0.0
    return float(d.quantize(quantum, rounding=mode)) + 0.0


def round_count(value: float) -> int:
    """Round an appointment count to a whole number."""
    return int(round_half_up(value, 0))
