"""Display-only price and yield metrics derived from raw reads."""

from __future__ import annotations

import math

from ..constants import SECONDS_PER_WEEK


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics instead of raising on zero.

    ``x / 0`` yields a signed infinity and ``0 / 0`` yields NaN, which is
    what the dashboard displays for an empty pool or farm.
    """
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def pool_price(reserve0: int, reserve1: int) -> float:
    """Price of token1 in token0 units from the pair reserves (float, lossy)."""
    return ieee_divide(float(reserve0), float(reserve1))


def estimate_apr(price: float, reward_rate: int, total_supply: int) -> float:
    """Weekly reward emission relative to the staked supply.

    Evaluated literally as ``(p * (rate * week)) / (p * supply)`` in floats,
    so a zero ``price`` gives NaN even though ``p`` cancels algebraically.
    """
    numerator = price * (float(reward_rate) * SECONDS_PER_WEEK)
    denominator = price * float(total_supply)
    return ieee_divide(numerator, denominator)
