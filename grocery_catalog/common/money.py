"""
Money Utilities

Conversion of catalog prices (float pounds) to integer pence and back
to a display string.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from numbers import Real
from typing import Any

from .constants import CURRENCY_SYMBOL, PENCE_PER_POUND


def to_pence(price: Any) -> int:
    """
    Convert a price in pounds to whole pence.

    Zero, missing, and non-numeric values all give 0. Rounding is
    half away from zero on the decimal value of the float's shortest
    repr, so 1.005 becomes 101 rather than the 100 that binary
    floating point arithmetic (1.005 * 100 == 100.49999...) would give.

    Args:
        price: Raw price value from the catalog document

    Returns:
        Price in pence
    """
    if isinstance(price, bool) or not isinstance(price, Real) or not price:
        return 0

    try:
        pounds = Decimal(repr(float(price)))
    except (InvalidOperation, OverflowError, ValueError):
        return 0

    if not pounds.is_finite():
        return 0

    pence = (pounds * PENCE_PER_POUND).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(pence)


def format_pence(pence: int) -> str:
    """
    Format pence as a currency string.

    Args:
        pence: Amount in pence

    Returns:
        String like "£1.20" (negative amounts as "-£1.20")
    """
    sign = "-" if pence < 0 else ""
    pounds, rest = divmod(abs(pence), PENCE_PER_POUND)
    return f"{sign}{CURRENCY_SYMBOL}{pounds}.{rest:02d}"
