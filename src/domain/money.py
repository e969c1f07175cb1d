"""Money helpers

All amounts are ``Decimal`` values quantized to the currency unit. Binary
floats are never used for arithmetic; a float input is converted through its
string form so ``0.1`` stays ``0.1``.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from src.domain.errors import InvalidAmount

CURRENCY_UNIT = Decimal("0.01")
ZERO = Decimal("0.00")
# Numeric(18, 2) columns hold 16 integer digits
MAX_AMOUNT = Decimal("1E16")

AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike) -> Decimal:
    """Parse ``value`` into a quantized Decimal.

    Raises:
        InvalidAmount: for None, booleans, non-numeric strings, NaN, infinity
            or magnitudes a Numeric(18, 2) column cannot store
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {value!r}")
    try:
        amount = quantize(amount)
    except InvalidOperation:
        # more significant digits than the decimal context carries
        amount = None
    if amount is None or abs(amount) >= MAX_AMOUNT:
        raise InvalidAmount("Amount is too large", reason=f"|amount| must be below {MAX_AMOUNT:f}")
    return amount


def quantize(amount: Decimal) -> Decimal:
    return amount.quantize(CURRENCY_UNIT, rounding=ROUND_HALF_UP)


def require_non_negative(value: AmountLike, field: str = "amount") -> Decimal:
    amount = to_amount(value)
    if amount < 0:
        raise InvalidAmount(f"{field} cannot be negative", reason=f"{field}={amount}")
    return amount


def require_positive(value: AmountLike, field: str = "amount") -> Decimal:
    amount = to_amount(value)
    if amount <= 0:
        raise InvalidAmount(f"{field} must be greater than 0", reason=f"{field}={amount}")
    return amount


def add(a: Decimal, b: Decimal) -> Decimal:
    return quantize(a + b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return quantize(a - b)


def compare(a: Decimal, b: Decimal) -> int:
    """Return -1, 0 or 1 like the classic cmp()"""
    return (a > b) - (a < b)


def is_zero(amount: Decimal) -> bool:
    return quantize(amount) == ZERO


def is_positive(amount: Decimal) -> bool:
    return quantize(amount) > ZERO
