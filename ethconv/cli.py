"""
Command line interface of the token inspector.

Usage:
    python -m ethconv 0xff
    python -m ethconv 1,500,000,000 -e decimal --fetch-rate
    python -m ethconv 0001 -e hex --endianness little --rate 3000
"""

# Standard library -----------------------------------------------------------------------------------------------------
import argparse
import logging
import sys
from typing import Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .config import Endianness, InspectorConfig, load_config
from .encodings import Encoding
from .inspector import Inspector
from .price import PriceCache, PriceRefresher, fetch_eth_price
from .units import Denomination


# Methods --------------------------------------------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ethconv",
        description="Show a numeric token as wei, gwei, ether and USD amounts.",
    )
    parser.add_argument("tokens", nargs="+", help="Tokens to inspect (hex, decimal, binary, octal, base64)")
    parser.add_argument(
        "-e", "--encodings", nargs="+", metavar="ENC",
        help=f"Encodings to try in order, the last match wins ({', '.join(Encoding)})",
    )
    parser.add_argument(
        "-u", "--units", nargs="+", metavar="UNIT",
        help=f"Sections to display ({', '.join(Denomination)})",
    )
    parser.add_argument("--endianness", choices=[str(e) for e in Endianness], help="Byte order of the token")
    parser.add_argument("--config", "-c", help="TOML file with an [ethconv] table")

    rate = parser.add_mutually_exclusive_group()
    rate.add_argument("--rate", type=float, help="USD per ether used for the Usd lines (default: 0)")
    rate.add_argument("--fetch-rate", action="store_true", help="Fetch the current USD per ether rate once")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the CLI.

    Returns:
        0 if every token produced a report, 1 if some did not, 2 on invalid options.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else InspectorConfig()
        config = config.merge(encodings=args.encodings, units=args.units, endianness=args.endianness)
        cache = PriceCache(args.rate if args.rate is not None else 0)
    except (OSError, ValueError) as e:
        print(f"ethconv: {e}", file=sys.stderr)
        return 2

    if args.fetch_rate:
        refresher = PriceRefresher(
            cache,
            fetch=lambda: fetch_eth_price(config.price_url, config.fetch_timeout),
            interval_sec=config.refresh_interval,
        )
        refresher.refresh()

    inspector = Inspector.from_config(config, rate=cache.get)

    status = 0
    for token in args.tokens:
        report = inspector.inspect(token)
        if report is None:
            print(f"ethconv: no configured encoding matches {token!r}", file=sys.stderr)
            status = 1
            continue
        print(report)
    return status
