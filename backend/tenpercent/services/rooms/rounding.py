"""Single rounding policy for money and clock values.

Values are rounded half-to-even on their shortest decimal representation,
so ``round_to(0.3 - 0.1, 2) == 0.2`` instead of inheriting binary noise.
"""

import math
from decimal import Decimal, ROUND_HALF_EVEN

SHARE_PLACES = 6
BALANCE_PLACES = 6
AVERAGE_PLACES = 3
TIMER_PLACES = 2


def round_to(value: float, places: int) -> float:
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_EVEN))
