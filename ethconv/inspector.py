"""
Token inspection: pick an encoding, convert to bytes and render the report.

An Inspector tries every configured encoding in order and keeps the LAST one
that parses the token, so later entries of the encoding list take precedence
over earlier ones. The winning encoding's bytes and forms map feed the
denomination conversions of the report.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from decimal import Decimal
from functools import partial
from typing import Callable, Iterable, Self

# Local ----------------------------------------------------------------------------------------------------------------
from .config import Endianness, InspectorConfig
from .encodings import FormsMap, InputHandler, create_handler
from .numeric import bytes_to_decimal
from .report import format_report
from .units import Denomination, UnitConverter

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

class Inspector:
    """
    Converts tokens into denomination reports.

    Args:
        encodings: Encoding identifiers in trial order. Unknown ones are skipped.
        units: Denomination sections to display. Unknown ones are skipped.
        endianness: "big" or "little" byte order of the token.
        rate: USD per ether, either a fixed number or an accessor such as PriceCache.get.

    Examples:
        >>> Inspector(["hex"]).inspect("0x3b9aca00").splitlines()[3]
        'Gwei:   1'
    """

    def __init__(
            self,
            encodings: Iterable[str] = ("hex", "decimal"),
            units: Iterable[str] = ("wei", "gwei", "ether"),
            endianness: Endianness | str = Endianness.BIG,
            rate: Callable[[], Decimal] | Decimal | int = 0,
    ):
        self.encodings = _as_tuple(encodings)
        self.units = _as_tuple(units)
        self.endianness = Endianness.parse(endianness)
        self.converter = UnitConverter(rate)

    @classmethod
    def from_config(cls, config: InspectorConfig, rate: Callable[[], Decimal] | Decimal | int = 0) -> Self:
        return cls(config.encodings, config.units, config.endianness, rate)

    @property
    def sections(self) -> tuple[Denomination, ...]:
        """Configured denominations that exist, in report order."""
        wanted = {str(u).strip().lower() for u in self.units}
        return tuple(d for d in Denomination if d in wanted)

    def match(self, token: str) -> tuple[InputHandler, bytes] | None:
        """
        Find the encoding of a token.

        Returns:
            The last matching handler and the token bytes, or None if no encoding parses it.
        """
        result = None
        for encoding in self.encodings:
            handler = create_handler(encoding)
            if handler is None:
                logger.debug("Skipping unknown encoding %r", encoding)
                continue

            parsed = handler.parse(token)
            if parsed is None:
                continue

            result = handler, handler.convert(parsed, self.endianness.little)
        return result

    def inspect(self, token: str) -> str | None:
        """
        Render the conversion report of a token, or None if there is nothing to show.
        """
        sections = self.sections
        if not self.encodings or not sections:
            return None

        matched = self.match(token)
        if matched is None:
            return None

        handler, data = matched
        logger.debug("Token %r parsed as %s: %s", token, handler.encoding, data.hex())

        decimal_of = partial(bytes_to_decimal, forms=handler.forms_map(), token=token)
        forms: dict[Denomination, FormsMap] = {
            denomination: self.converter.forms_map(denomination, decimal_of)
            for denomination in sections
        }
        return format_report(token, data, forms)


# Methods --------------------------------------------------------------------------------------------------------------

def inspect(
        token: str,
        encodings: Iterable[str],
        endianness: Endianness | str = Endianness.BIG,
        units: Iterable[str] = ("wei", "gwei", "ether"),
        rate: Callable[[], Decimal] | Decimal | int = 0,
) -> str | None:
    """
    Render the conversion report of a token with a one-off Inspector.

    Examples:
        >>> report = inspect("1000000000000000000", ["decimal"])
        >>> "Ether:  1" in report.splitlines()
        True
    """
    return Inspector(encodings, units, endianness, rate).inspect(token)


def _as_tuple(values: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(values, str):
        return (values,)
    return tuple(values)
