#
# Ethconv Denomination Units
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from enum import StrEnum, unique
from typing import Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .encodings import FormsMap
from .numeric import decimal_context, format_usd, format_value

# @formatter:off

USD = "usd"


@unique
class Denomination(StrEnum):
    """
    Ether denominations, in increasing order of size.

    Attributes:
        WEI (str)   : Smallest unit, 10⁰ wei
        GWEI (str)  : 10⁹ wei
        ETHER (str) : 10¹⁸ wei
    """
    WEI = "wei"
    GWEI = "gwei"
    ETHER = "ether"

    @property
    def exponent(self) -> int:
        """Power of ten of this denomination expressed in wei."""
        return _exponents[self]


_exponents = {
    Denomination.WEI: 0,
    Denomination.GWEI: 9,
    Denomination.ETHER: 18,
}

# @formatter:on

# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Conversion:
    """
    A conversion from a source denomination to a target unit.

    The target is either another Denomination or USD. The value is scaled by
    10**shift, multiplied by the exchange rate for USD targets, and reduced to
    the target's decimals. Conversions to wei round half up to an integer,
    every other reduction truncates toward zero.
    """

    source: Denomination
    target: str

    @property
    def is_usd(self) -> bool:
        return self.target == USD

    @property
    def shift(self) -> int:
        if self.is_usd:
            return self.source.exponent - Denomination.ETHER.exponent
        return self.source.exponent - Denomination(self.target).exponent

    @property
    def decimals(self) -> int:
        """Fractional digits shown for the target: cents for USD, down to one wei otherwise."""
        if self.is_usd:
            return 2
        return Denomination(self.target).exponent

    @property
    def rounding(self) -> str:
        return ROUND_HALF_UP if self.target == Denomination.WEI else ROUND_DOWN

    def apply(self, value: Decimal, rate: Decimal) -> str:
        """Convert a value in the source denomination and format it for display."""
        ctx = decimal_context(value, rate)
        scaled = ctx.multiply(value, Decimal(1).scaleb(self.shift))
        if self.is_usd:
            return format_usd(ctx.multiply(scaled, rate))
        if self.rounding == ROUND_HALF_UP:
            scaled = scaled.quantize(Decimal(1).scaleb(-self.decimals), rounding=ROUND_HALF_UP, context=ctx)
        return format_value(scaled, self.decimals)


class UnitConverter:
    """
    Cross-denomination converter reading the USD rate through an accessor.

    The accessor is called once per USD conversion, so a converter built over
    PriceCache.get always sees the latest refreshed rate without holding any
    mutable state itself.

    Examples:
        >>> converter = UnitConverter(lambda: Decimal("2000"))
        >>> converter.convert(Decimal("1500000000"), "gwei", "ether")
        '1.5'
        >>> converter.convert(Decimal("1.5"), "ether", "usd")
        '$3000.00'
    """

    def __init__(self, rate: Callable[[], Decimal] | Decimal | int = 0):
        if callable(rate):
            self._rate = rate
        else:
            fixed = Decimal(rate)
            self._rate = lambda: fixed

    @property
    def rate(self) -> Decimal:
        """Current USD per ether rate."""
        return Decimal(self._rate())

    def convert(self, value: Decimal, source: Denomination | str, target: str) -> str:
        """
        Convert a value between denominations or to USD.

        Raises:
            ValueError: If source or target are not known units, or if target equals source.
        """
        conversion = _conversion(Denomination(source), str(target))
        return conversion.apply(Decimal(value), self.rate)

    def forms_map(
            self,
            source: Denomination | str,
            decimal_of: Callable[[bytes], Decimal | None],
    ) -> FormsMap:
        """
        Build the conversion table of one denomination section.

        Keys are target units in display order: the two other denominations, then USD.
        Each function reads the byte sequence through decimal_of and returns None
        when no decimal value can be derived.
        """
        source = Denomination(source)
        return {
            conversion.target: self._form(conversion, decimal_of)
            for conversion in conversions(source)
        }

    def _form(
            self,
            conversion: Conversion,
            decimal_of: Callable[[bytes], Decimal | None],
    ) -> Callable[[bytes], str | None]:
        def form(data: bytes) -> str | None:
            value = decimal_of(data)
            if value is None:
                return None
            return conversion.apply(value, self.rate)

        return form


# Methods --------------------------------------------------------------------------------------------------------------

def conversions(source: Denomination | str) -> tuple[Conversion, ...]:
    """Conversions of a denomination in display order: other denominations first, then USD."""
    source = Denomination(source)
    targets = [str(d) for d in Denomination if d != source] + [USD]
    return tuple(Conversion(source, target) for target in targets)


def unit_names() -> tuple[str, ...]:
    """All unit names that can appear in a report."""
    return tuple(str(d) for d in Denomination) + (USD,)


def _conversion(source: Denomination, target: str) -> Conversion:
    target = target.strip().lower()
    if target not in unit_names() or target == source:
        raise ValueError(f"cannot convert {source} to {target!r}")
    return Conversion(source, target)
