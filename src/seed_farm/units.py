from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .constants import BALANCE_DISPLAY_PLACES, TOKEN_DECIMALS
from .exceptions import InvalidAmount

_DECIMAL_NUMERAL = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")


def _quantize_half_up(value: Decimal, places: int) -> str:
    exponent = Decimal(1).scaleb(-places)
    return f"{value.quantize(exponent, rounding=ROUND_HALF_UP):f}"


def to_display(
    raw: int,
    decimals: int = TOKEN_DECIMALS,
    places: int = BALANCE_DISPLAY_PLACES,
) -> str:
    """Format a raw on-chain amount as a fixed-point decimal string.

    Args:
        raw: Integer amount expressed with ``decimals`` decimal places.
        decimals: Decimal precision of ``raw``.
        places: Fractional digits to keep, rounded half-up.

    Returns:
        Plain decimal string, e.g. ``"1234.500"``.

    Notes:
        - Uses ``Decimal`` with a context wide enough for the whole value,
          so large supplies are never rounded through a float.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(abs(raw))) + decimals + places + 1)
        value = Decimal(raw).scaleb(-decimals)
        return _quantize_half_up(value, places)


def format_ratio(value: float, places: int, exact: bool = False) -> str:
    """Format a float metric (price, APR) with a fixed number of places.

    By default the shortest repr of ``value`` is rounded, so ``1.005``
    shows as ``"1.01"``. With ``exact`` the full binary value is rounded
    instead (``"1.00"``, since 1.005 is stored as 1.00499...).

    Degenerate ratios render the way the dapp shows them: ``NaN``,
    ``Infinity`` or ``-Infinity``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, 400)
        decimal = Decimal(value) if exact else Decimal(repr(value))
        return _quantize_half_up(decimal, places)


def to_raw(text: str, decimals: int = TOKEN_DECIMALS) -> int:
    """Parse a human decimal string into a raw on-chain amount.

    Digits beyond ``decimals`` fractional places are truncated.

    Raises:
        InvalidAmount: If ``text`` is not a non-negative decimal numeral.
    """
    if not isinstance(text, str):
        raise InvalidAmount(repr(text))
    candidate = text.strip()
    if not _DECIMAL_NUMERAL.match(candidate):
        raise InvalidAmount(text)

    whole, _, fraction = candidate.partition(".")
    fraction = fraction[:decimals].ljust(decimals, "0")
    return int(whole or "0") * 10**decimals + int(fraction or "0")
