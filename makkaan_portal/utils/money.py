"""Lenient numeric coercion for currency and percentage fields"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any

ZERO = Decimal(0)


def to_amount(value: Any) -> Decimal:
    """Coerce a stored or submitted number to Decimal; malformed input becomes 0"""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip() or "0")
        except InvalidOperation:
            return ZERO
    return amount if amount.is_finite() else ZERO


def to_count(value: Any) -> int:
    """Coerce to a whole number, truncating fractions; malformed input becomes 0"""
    return int(to_amount(value))


def round_half_up(value: Decimal) -> Decimal:
    """Round to a whole currency unit, halves away from zero"""
    with localcontext() as ctx:
        # quantize needs every integer digit to fit in the context precision
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return value.quantize(Decimal(1), rounding=ROUND_HALF_UP)
