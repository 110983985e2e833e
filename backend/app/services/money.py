"""Conversion between displayed amounts and stored minor units.

Prices are persisted as integers in the currency's smallest unit (cents for
USD/EUR, whole yen for JPY). Rounding happens in decimal arithmetic so a value
like ``9.995`` rounds the way a person reading it expects, not the way its
binary float approximation would.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from app.constants import lookup_currency
from app.exceptions import InvalidAmountError

Amount = Decimal | int | float | str


def as_decimal(amount: Amount) -> Decimal:
    """Read any accepted amount as a finite Decimal or raise InvalidAmountError."""
    if isinstance(amount, bool):
        raise InvalidAmountError(amount)
    try:
        # str() first: floats go through their shortest repr, not their binary value
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation:
        raise InvalidAmountError(amount) from None
    if not value.is_finite():
        raise InvalidAmountError(amount)
    return value


def quantize_amount(value: Decimal, digits: int) -> Decimal:
    # Widen precision so large amounts keep every integer digit.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + digits + 2)
        return value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def to_minor_units(amount: Amount, currency: str) -> int:
    """Convert a displayed amount to the integer stored in the database.

    The amount is fixed to the currency's number of fractional digits
    (half-up) and the decimal point is dropped: ``10.99 USD -> "10.99" -> 1099``.
    """
    value = as_decimal(amount)
    if value < 0:
        raise InvalidAmountError(amount)
    digits = lookup_currency(currency).minor_unit_digits
    fixed = quantize_amount(value, digits)
    return int(format(fixed, "f").replace(".", ""))


def from_minor_units(amount: int, currency: str) -> Decimal:
    """Convert a stored integer back to its displayed amount."""
    if isinstance(amount, bool) or int(amount) != amount or amount < 0:
        raise InvalidAmountError(amount)
    digits = lookup_currency(currency).minor_unit_digits
    # Built from the digit tuple so no context rounding applies
    return Decimal((0, Decimal(int(amount)).as_tuple().digits, -digits))


def format_decimal(amount: Amount, currency: str) -> str:
    """Render an amount ja-JP style: symbol prefix, comma grouping, fixed digits."""
    config = lookup_currency(currency)
    value = quantize_amount(as_decimal(amount), config.minor_unit_digits)
    sign = "-" if value < 0 else ""
    return f"{sign}{config.symbol}{value.copy_abs():,.{config.minor_unit_digits}f}"


def format_from_minor_units(amount: int, currency: str) -> str:
    return format_decimal(from_minor_units(amount, currency), currency)
