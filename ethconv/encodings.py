#
# Ethconv Input Encodings
#

# Standard library -----------------------------------------------------------------------------------------------------
import base64
import binascii
import math
import re
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import StrEnum, unique
from typing import Any, Callable

# @formatter:off

FormsMap = dict[str, Callable[[bytes], str | Decimal | None]]


@unique
class Encoding(StrEnum):
    """
    Input encodings a token can be parsed from.

    Attributes:
        HEX (str)     : Hexadecimal digits, optional 0x prefix - 0xff, DEADBEEF
        DECIMAL (str) : Signed decimal with optional fraction and comma grouping - -1,000.5
        BINARY (str)  : Binary digits, optional 0b prefix - 0b1010
        OCTAL (str)   : Octal digits, optional 0o prefix - 0o755, 123
        BASE64 (str)  : Standard Base64 alphabet with padding - /w==
    """
    HEX = "hex"
    DECIMAL = "decimal"
    BINARY = "binary"
    OCTAL = "octal"
    BASE64 = "base64"

# @formatter:on

# Classes --------------------------------------------------------------------------------------------------------------

class InputHandler(ABC):
    """
    Parser and byte converter for a single input encoding.

    Handlers are stateless: parse() validates a token and returns an intermediate
    value or None, convert() turns that value into a canonical byte sequence.
    """

    encoding: Encoding

    @abstractmethod
    def parse(self, token: str) -> Any | None:
        """Return the intermediate value of a fully matching token, or None."""

    @abstractmethod
    def convert(self, parsed: Any, little_endian: bool = False) -> bytes:
        """Convert a parsed value into bytes, least significant byte first if little_endian."""

    def forms_map(self) -> FormsMap:
        """Unit name to conversion function table of this encoding."""
        return {"decimal": _big_endian_value}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RadixHandler(InputHandler):
    """
    Base handler for positional digit strings with an optional radix prefix.

    When digits line up on byte boundaries (hex, binary) the byte length is derived
    from the digit count, so leading zero digits of the token are kept and an
    odd-length hex string gets an implicit leading zero nibble. Octal digits never
    line up with bytes, so octal values get their minimal byte length.
    """

    radix: int
    bits_per_digit: int
    prefix: str
    pattern: re.Pattern

    def parse(self, token: str) -> str | None:
        if not isinstance(token, str):
            return None
        digits = token[len(self.prefix):] if token[:len(self.prefix)].lower() == self.prefix else token
        if not self.pattern.fullmatch(digits):
            return None
        return digits

    def convert(self, parsed: str, little_endian: bool = False) -> bytes:
        value = int(parsed, self.radix)
        if 8 % self.bits_per_digit:
            size = max(1, (value.bit_length() + 7) // 8)
        else:
            size = max(1, math.ceil(len(parsed) * self.bits_per_digit / 8))
        data = value.to_bytes(size, "big")
        return data[::-1] if little_endian else data


class HexHandler(RadixHandler):
    encoding = Encoding.HEX
    radix = 16
    bits_per_digit = 4
    prefix = "0x"
    pattern = re.compile(r"[0-9a-fA-F]+")

    def convert(self, parsed: str, little_endian: bool = False) -> bytes:
        if len(parsed) % 2:
            parsed = "0" + parsed
        data = bytes.fromhex(parsed)
        return data[::-1] if little_endian else data


class BinaryHandler(RadixHandler):
    encoding = Encoding.BINARY
    radix = 2
    bits_per_digit = 1
    prefix = "0b"
    pattern = re.compile(r"[01]+")


class OctalHandler(RadixHandler):
    encoding = Encoding.OCTAL
    radix = 8
    bits_per_digit = 3
    prefix = "0o"
    pattern = re.compile(r"[0-7]+")


class DecimalHandler(InputHandler):
    """
    Signed decimal numbers, optionally with a fraction and comma grouping.

    Provides no decimal form: the value is taken from the token text itself,
    since fractional amounts have no byte representation.
    """

    encoding = Encoding.DECIMAL
    pattern = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?")

    def parse(self, token: str) -> Decimal | None:
        if not isinstance(token, str):
            return None
        text = token.replace(",", "")
        if not self.pattern.fullmatch(text):
            return None
        return Decimal(text)

    def convert(self, parsed: Decimal, little_endian: bool = False) -> bytes:
        magnitude = abs(int(parsed))
        data = magnitude.to_bytes(max(1, (magnitude.bit_length() + 7) // 8), "big")
        return data[::-1] if little_endian else data

    def forms_map(self) -> FormsMap:
        return {}


class Base64Handler(InputHandler):
    encoding = Encoding.BASE64
    pattern = re.compile(r"[A-Za-z0-9+/]+={0,2}")

    def parse(self, token: str) -> bytes | None:
        if not isinstance(token, str) or len(token) % 4 or not self.pattern.fullmatch(token):
            return None
        try:
            data = base64.b64decode(token, validate=True)
        except (binascii.Error, ValueError):
            return None
        return data or None

    def convert(self, parsed: bytes, little_endian: bool = False) -> bytes:
        return parsed[::-1] if little_endian else bytes(parsed)


# @formatter:off
_handlers: dict[Encoding, InputHandler] = {
    Encoding.HEX:     HexHandler(),
    Encoding.DECIMAL: DecimalHandler(),
    Encoding.BINARY:  BinaryHandler(),
    Encoding.OCTAL:   OctalHandler(),
    Encoding.BASE64:  Base64Handler(),
}
# @formatter:on


# Methods --------------------------------------------------------------------------------------------------------------

def create_handler(encoding: Encoding | str) -> InputHandler | None:
    """
    Return the handler of an encoding identifier, or None if it is unknown.

    Identifiers are matched case-insensitively, so "HEX" and "Hex" resolve to the
    same handler as Encoding.HEX.
    """
    try:
        return _handlers[Encoding(str(encoding).strip().lower())]
    except ValueError:
        return None


def _big_endian_value(data: bytes) -> Decimal | None:
    # Decimal(int) has no digit limit, unlike str(int)
    if not data:
        return None
    return Decimal(int.from_bytes(data, "big"))
