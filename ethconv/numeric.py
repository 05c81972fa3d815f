"""
Exact decimal parsing and formatting for token amounts.

This module derives arbitrary-precision decimal values from byte sequences or
token text and renders them with a fixed number of fractional digits, without
ever passing through binary floating point.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from decimal import Decimal, Context, InvalidOperation, ROUND_DOWN
from typing import Callable, Mapping

# @formatter:off

# Constants ------------------------------------------------------------------------------------------------------------

MIN_PRECISION = 100         # Enough for 2**256 with 18 fractional digits
PRECISION_MARGIN = 40       # Extra digits above the operand's own length

# @formatter:on

# Methods --------------------------------------------------------------------------------------------------------------

def decimal_context(*values: Decimal) -> Context:
    """
    Return a Decimal context wide enough to keep arithmetic on values exact.

    The precision grows with the number of digits of the operands so that
    scaling by powers of ten and quantizing never round silently.
    """
    digits = 0
    for value in values:
        if value.is_finite():
            sign, coeff, exponent = value.as_tuple()
            digits += len(coeff) + abs(exponent)
    return Context(prec=max(MIN_PRECISION, digits + PRECISION_MARGIN), rounding=ROUND_DOWN)


def to_decimal(text: str | None) -> Decimal | None:
    """
    Parse text into a finite Decimal.

    Returns None for None, empty strings, malformed numbers, NaN and infinities.

    Examples:
        >>> to_decimal("1.50")
        Decimal('1.50')
        >>> to_decimal("abc") is None
        True
    """
    if not text:
        return None
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def bytes_to_decimal(
        data: bytes,
        forms: Mapping[str, Callable[[bytes], Decimal | str | None]],
        token: str,
) -> Decimal | None:
    """
    Derive the decimal value of a parsed token.

    Prefers the encoding-supplied ``decimal`` form, which reads the byte
    sequence and returns a Decimal or its text, and falls back to the original
    token text with grouping commas removed. Returns None when neither yields
    a finite number.

    Args:
        data: Canonical byte sequence of the token.
        forms: Forms map of the encoding that parsed the token.
        token: Raw token text.
    """
    extractor = forms.get("decimal")
    value = extractor(data) if extractor is not None else None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if value is None:
        value = token
    return to_decimal(value.replace(",", ""))


def format_value(value: Decimal | int, decimals: int, allow_trailing_zeros: bool = False) -> str:
    """
    Format a number with at most ``decimals`` fractional digits.

    The value is truncated toward zero, never rounded up. Exact zero is always
    rendered as "0". Unless allow_trailing_zeros is set, trailing fractional
    zeros and a dangling decimal point are removed.

    Args:
        value: Number to format.
        decimals: Number of fractional digits to keep, non-negative.
        allow_trailing_zeros: Keep the fixed-width fractional part.

    Returns:
        Plain positional notation, never exponent notation.

    Raises:
        ValueError: If decimals is negative.

    Examples:
        >>> format_value(Decimal("1.500000000"), 9)
        '1.5'
        >>> format_value(5, 2, allow_trailing_zeros=True)
        '5.00'
        >>> format_value(Decimal("0.0000001"), 2)
        '0'
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    value = Decimal(value)
    if value.is_zero():
        return "0"

    ctx = decimal_context(value)
    quantum = Decimal(1).scaleb(-decimals)
    truncated = value.copy_abs().quantize(quantum, rounding=ROUND_DOWN, context=ctx)

    result = f"{truncated:f}"
    if not allow_trailing_zeros and "." in result:
        result = result.rstrip("0")
    result = result.rstrip(".")

    if value.is_signed() and not truncated.is_zero():
        result = "-" + result
    return result


def format_usd(value: Decimal | int) -> str:
    """
    Format a dollar amount with exactly two decimals, e.g. "$5.00", "$0.00" or "-$1.50".
    """
    value = Decimal(value)
    if value.is_zero():
        return "$0.00"
    amount = format_value(value, 2, allow_trailing_zeros=True)
    if amount.startswith("-"):
        return "-$" + amount[1:]
    return "$" + amount
