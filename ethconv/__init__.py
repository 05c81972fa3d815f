"""
Ethconv: inspect numeric tokens as wei, gwei, ether and USD amounts.

A token such as ``0xff``, ``1,000,000,000`` or ``/w==`` is parsed in one of
several encodings, turned into a canonical byte sequence and rendered as a
plain-text report of exact denomination conversions.
"""

from .config import Endianness, InspectorConfig, load_config
from .encodings import Encoding, InputHandler, create_handler
from .inspector import Inspector, inspect
from .numeric import bytes_to_decimal, format_usd, format_value, to_decimal
from .price import PriceCache, PriceRefresher, fetch_eth_price
from .report import TOOL_NAME, format_report
from .units import Denomination, UnitConverter

__all__ = [
    'Denomination',
    'Encoding',
    'Endianness',
    'InputHandler',
    'Inspector',
    'InspectorConfig',
    'PriceCache',
    'PriceRefresher',
    'TOOL_NAME',
    'UnitConverter',
    'bytes_to_decimal',
    'create_handler',
    'fetch_eth_price',
    'format_report',
    'format_usd',
    'format_value',
    'inspect',
    'load_config',
    'to_decimal',
]
