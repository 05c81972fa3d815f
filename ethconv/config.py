"""
Inspector settings and their TOML loader.

Settings live under an ``[ethconv]`` table with an optional ``[ethconv.price]``
subtable:

    [ethconv]
    encodings = ["hex", "decimal"]
    units = ["wei", "gwei", "ether"]
    endianness = "big"

    [ethconv.price]
    url = "https://api.coingecko.com/api/v3/simple/price?ids=ethereum&vs_currencies=usd"
    refresh_interval = 300
    timeout = 10
"""

# Standard library -----------------------------------------------------------------------------------------------------
import os
from dataclasses import dataclass, replace
from enum import StrEnum, unique
from typing import Any, Mapping, Self

# Third-party ----------------------------------------------------------------------------------------------------------
import toml

# Local ----------------------------------------------------------------------------------------------------------------
from .price import DEFAULT_FETCH_TIMEOUT_SEC, DEFAULT_PRICE_URL, DEFAULT_REFRESH_INTERVAL_SEC

CONFIG_TABLE = "ethconv"


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Endianness(StrEnum):
    BIG = "big"
    LITTLE = "little"

    @classmethod
    def parse(cls, value: "Endianness | str") -> "Endianness":
        """
        Parse an endianness name, case-insensitive.

        Accepts "big", "little" and the long forms "Big Endian", "little-endian".

        Raises:
            ValueError: If value names no endianness.
        """
        text = str(value).strip().lower().replace("-", " ").replace("_", " ")
        text = text.removesuffix(" endian")
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"endianness must be 'big' or 'little', got {value!r}") from None

    @property
    def little(self) -> bool:
        return self is Endianness.LITTLE


@dataclass(frozen=True)
class InspectorConfig:
    """
    Settings supplied by the host: encodings to try, units to show and price feed options.

    Attributes:
        encodings: Encoding identifiers in trial order; the last match wins.
        units: Denomination sections to display.
        endianness: Byte order applied when converting tokens to bytes.
        price_url: Endpoint of the ETH/USD price feed.
        refresh_interval: Seconds between price refreshes.
        fetch_timeout: Socket timeout of a single price fetch, seconds.
    """

    encodings: tuple[str, ...] = ("hex", "decimal")
    units: tuple[str, ...] = ("wei", "gwei", "ether")
    endianness: Endianness = Endianness.BIG
    price_url: str = DEFAULT_PRICE_URL
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL_SEC
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT_SEC

    def __post_init__(self):
        object.__setattr__(self, "encodings", _str_tuple(self.encodings, "encodings"))
        object.__setattr__(self, "units", _str_tuple(self.units, "units"))
        object.__setattr__(self, "endianness", Endianness.parse(self.endianness))
        _validate_positive(self.refresh_interval, "refresh_interval")
        _validate_positive(self.fetch_timeout, "fetch_timeout")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Self:
        """
        Build a config from the contents of an ``[ethconv]`` table.

        Missing keys keep their defaults.

        Raises:
            ValueError: If a value is invalid or a key is unknown.
        """
        data = dict(data or {})
        price = dict(data.pop("price", None) or {})

        unknown = set(data) - {"encodings", "units", "endianness"}
        unknown |= {f"price.{k}" for k in set(price) - {"url", "refresh_interval", "timeout"}}
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(sorted(unknown))}")

        kwargs = {k: data[k] for k in ("encodings", "units", "endianness") if k in data}
        if "url" in price:
            kwargs["price_url"] = str(price["url"])
        if "refresh_interval" in price:
            kwargs["refresh_interval"] = _number(price["refresh_interval"], "price.refresh_interval")
        if "timeout" in price:
            kwargs["fetch_timeout"] = _number(price["timeout"], "price.timeout")
        return cls(**kwargs)

    def merge(self, **overrides) -> Self:
        """Return a copy with the overrides that are not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


# Methods --------------------------------------------------------------------------------------------------------------

def load_config(path: str | os.PathLike[str]) -> InspectorConfig:
    """
    Load settings from the ``[ethconv]`` table of a TOML file.

    A file without that table yields the default config.

    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If the file is not valid TOML or holds invalid settings.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        document = toml.load(os.fspath(path))
    except toml.TomlDecodeError as e:
        raise ValueError(f"invalid TOML in {path}: {e}") from e

    return InspectorConfig.from_dict(document.get(CONFIG_TABLE))


# Private helper methods -----------------------------------------------------------------------------------------------

def _str_tuple(value: Any, name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    try:
        return tuple(str(v) for v in value)
    except TypeError:
        raise ValueError(f"{name} must be a list of strings, got {value!r}") from None


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return float(value)


def _validate_positive(value: float, name: str) -> None:
    """Validate that a parameter is positive."""
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
