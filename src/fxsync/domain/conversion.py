# src/fxsync/domain/conversion.py
"""
Conversion Engine - Cross-Currency Arithmetic

Converts an amount between two currencies whose rates are both quoted
against the same base currency: the amount is first expressed in the base
currency, then in the target currency.

Rounding is ROUND_HALF_UP (half away from zero) to 2 fractional digits.

Files that USE this module:
- fxsync.application.query_service (convert for live and historical requests)
- tests.test_conversion (unit tests)

Files that this module USES:
- fxsync.domain.errors (InvalidRateError, InvalidAmountError)
"""
from decimal import Decimal, InvalidOperation, Overflow, ROUND_HALF_UP, localcontext

from fxsync.domain.errors import InvalidAmountError, InvalidRateError

CENT = Decimal("0.01")

# Wider than the default 28 digits so quantizing to cents sees the exact quotient
_WORKING_PRECISION = 34


def to_decimal(value) -> Decimal:
    """Coerce int, str, float or Decimal to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _check_rate(name: str, rate: Decimal) -> None:
    if not rate.is_finite() or rate <= 0:
        raise InvalidRateError(f"{name} must be a positive number, got {rate}")


def convert(from_rate: Decimal, to_rate: Decimal, amount: Decimal) -> Decimal:
    """
    Convert ``amount`` from one currency to another via the common base.

    Args:
        from_rate: Units of the source currency per 1 base unit
        to_rate: Units of the target currency per 1 base unit
        amount: Amount in the source currency

    Returns:
        Converted amount with exactly 2 fractional digits

    Raises:
        InvalidRateError: If either rate is zero, negative or not finite
        InvalidAmountError: If the result has more digits than the working precision
    """
    from_rate = to_decimal(from_rate)
    to_rate = to_decimal(to_rate)
    amount = to_decimal(amount)
    _check_rate("from_rate", from_rate)
    _check_rate("to_rate", to_rate)

    with localcontext() as ctx:
        ctx.prec = _WORKING_PRECISION
        try:
            amount_in_base = amount / from_rate
            result = amount_in_base * to_rate
            return result.quantize(CENT, rounding=ROUND_HALF_UP)
        except (InvalidOperation, Overflow) as e:
            raise InvalidAmountError(f"Amount {amount} is too large to convert") from e
