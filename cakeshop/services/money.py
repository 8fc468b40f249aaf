"""
Money Utilities - Decimal helpers for cart prices.

Catalog prices arrive as decimal strings ("450.00"), cart snapshots as
numbers. Everything is normalized to Decimal before arithmetic.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, localcontext
from typing import Union

Numeric = Union[str, int, float, Decimal, None]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Parsed amounts at or above 10**19 are out of range
MAX_AMOUNT_EXPONENT = 18

ZERO = Decimal("0")


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None,
        unparseable, NaN or infinite. Parsed (non-Decimal) values at or
        above 10**19 also count as zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    try:
        if isinstance(value, float):
            # Via str to avoid binary float artifacts
            result = Decimal(str(value))
        elif isinstance(value, str):
            result = Decimal(value.strip())
        else:
            result = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO

    if not result.is_finite() or (result and result.adjusted() > MAX_AMOUNT_EXPONENT):
        return ZERO
    return result


def round_money(value: Numeric) -> Decimal:
    """
    Round monetary value to 2 places (ROUND_HALF_UP).

    Decimal results of cart arithmetic (sums, products) may exceed the
    default 28-digit context; precision is widened so quantize never traps.
    """
    amount = to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Numeric, factor: Numeric) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def to_float(value: Numeric) -> float:
    """
    Convert Decimal to float for JSON responses.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def to_str(value: Numeric) -> str:
    """Serialize a monetary value as a fixed 2-place decimal string."""
    return str(round_money(value))


def format_money(value: Numeric, symbol: str = "₹") -> str:
    """Format monetary value for display, e.g. ₹1,600.00"""
    return f"{symbol}{round_money(value):,.2f}"
