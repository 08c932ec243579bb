"""Display helpers for charges reported in nano-USD."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional, Union

NANO = Decimal(1_000_000_000)
_SIGNIFICANT_DIGITS = 6
_FRACTION_DIGITS = 6


def nano_to_usd(nano_usd: Union[str, int, Decimal, None]) -> Optional[Decimal]:
    if nano_usd is None:
        return None
    try:
        value = Decimal(str(nano_usd).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value / NANO


def format_cost(nano_usd: Union[str, int, Decimal, None], *, full_precision: bool = False) -> str:
    """Render a nano-USD amount as dollars.

    By default the amount keeps six significant digits; with
    *full_precision* it keeps six digits after the point instead.
    """
    cost = nano_to_usd(nano_usd)
    if cost is None:
        return "-"

    if full_precision:
        places = _FRACTION_DIGITS
    elif cost == 0:
        places = _SIGNIFICANT_DIGITS - 1
    else:
        places = _SIGNIFICANT_DIGITS - 1 - cost.adjusted()

    with localcontext() as ctx:
        # room for every integer digit plus the kept fraction
        ctx.prec = max(ctx.prec, cost.adjusted() + places + 2)
        rounded = cost.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        return f"{sign}${abs(rounded):,.{max(places, 0)}f}"


__all__ = ["NANO", "format_cost", "nano_to_usd"]
