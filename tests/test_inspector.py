"""
Test suite for token inspection end to end: encoding dispatch, endianness,
unit selection and the rendered report.
"""

# Common Libraries -----------------------------------------------------------------------------------------------------
from decimal import Decimal, localcontext

import pytest

# Local ----------------------------------------------------------------------------------------------------------------

from ethconv.config import InspectorConfig
from ethconv.inspector import Inspector, inspect
from ethconv.price import PriceCache

REPORT_0XFF = (
    "EthConverter: 0xff\n"
    "\n"
    "Wei\n"
    "Gwei:   0.000000255\n"
    "Ether:  0.000000000000000255\n"
    "Usd:    $0.00\n"
    "\n"
    "Gwei\n"
    "Wei:    255000000000\n"
    "Ether:  0.000000255\n"
    "Usd:    $0.00\n"
    "\n"
    "Ether\n"
    "Wei:    255000000000000000000\n"
    "Gwei:   255000000000\n"
    "Usd:    $0.00\n"
)


def section(report: str, title: str) -> list[str]:
    """Lines of one report section, without its title."""
    lines = report.split("\n")
    start = lines.index(title) + 1
    end = lines.index("", start)
    return lines[start:end]


# Tests ----------------------------------------------------------------------------------------------------------------

class TestReport:
    def test_hex_report(self):
        """Render the full report of a hex token at a zero rate."""
        assert inspect("0xff", ["hex"], "big", ["wei", "gwei", "ether"]) == REPORT_0XFF

    def test_one_ether_in_wei(self):
        report = inspect("1000000000000000000", ["decimal"])
        assert "Ether:  1" in section(report, "Wei")

    def test_decimal_with_grouping_and_fraction(self):
        report = inspect("1,500,000,000", ["decimal"])
        assert section(report, "Wei") == ["Gwei:   1.5", "Ether:  0.0000000015", "Usd:    $0.00"]
        assert section(report, "Gwei") == ["Wei:    1500000000000000000", "Ether:  1.5", "Usd:    $0.00"]
        assert section(report, "Ether") == [
            "Wei:    1500000000000000000000000000",
            "Gwei:   1500000000000000000",
            "Usd:    $0.00",
        ]

    def test_base64_matches_hex(self):
        """The same bytes give the same conversions whatever the encoding."""
        report = inspect("/w==", ["base64"])
        assert report == REPORT_0XFF.replace("0xff", "/w==")

    def test_zero(self):
        report = inspect("0x0", ["hex"])
        assert section(report, "Ether") == ["Wei:    0", "Gwei:   0", "Usd:    $0.00"]

    def test_rate(self):
        report = inspect("1", ["decimal"], rate=Decimal(2000))
        assert "Usd:    $2000.00" in section(report, "Ether")
        assert "Usd:    $0.00" in section(report, "Wei")


class TestDispatch:
    @pytest.mark.parametrize(
        "encodings, gwei_line",
        [
            pytest.param(["decimal", "octal"], "Gwei:   0.000000083", id="octal-last"),
            pytest.param(["octal", "decimal"], "Gwei:   0.000000123", id="decimal-last"),
            pytest.param(["decimal", "hex"], "Gwei:   0.000000291", id="hex-last"),
        ],
    )
    def test_last_match_wins(self, encodings, gwei_line):
        """The last configured encoding that parses the token determines the result."""
        report = inspect("123", encodings)
        assert section(report, "Wei")[0] == gwei_line

    def test_non_matching_later_encoding_keeps_match(self):
        report = inspect("0xff", ["hex", "decimal"])
        assert report == REPORT_0XFF

    def test_unknown_encoding_skipped(self):
        assert inspect("0xff", ["float", "hex", "utf8"]) == REPORT_0XFF

    @pytest.mark.parametrize(
        "token, endianness, gwei_line",
        [
            pytest.param("0x0100", "big", "Gwei:   0.000000256", id="big"),
            pytest.param("0x0100", "little", "Gwei:   0.000000001", id="little"),
            pytest.param("0x0100", "Little Endian", "Gwei:   0.000000001", id="long-name"),
        ],
    )
    def test_endianness(self, token, endianness, gwei_line):
        """Little endian reverses the token's byte order."""
        report = inspect(token, ["hex"], endianness)
        assert section(report, "Wei")[0] == gwei_line

    @pytest.mark.parametrize("endianness", ["big", "little"])
    def test_octal_endianness(self, endianness):
        """Octal values get no padding byte, so a one-byte value reads the same in both orders."""
        report = inspect("123", ["octal"], endianness)
        assert section(report, "Wei")[0] == "Gwei:   0.000000083"

    def test_long_token(self):
        """Values beyond the int-to-str digit limit keep every digit."""
        digits = "f" * 4000
        report = inspect("0x" + digits, ["hex"], units=["wei"])
        gwei = section(report, "Wei")[0].removeprefix("Gwei:   ")
        with localcontext(prec=10000):
            assert Decimal(gwei).scaleb(9) == Decimal(int(digits, 16))


class TestNoResult:
    @pytest.mark.parametrize(
        "token, encodings, units",
        [
            pytest.param("0xff", [], ["wei"], id="no-encodings"),
            pytest.param("0xff", ["hex"], [], id="no-units"),
            pytest.param("0xff", ["hex"], ["usd", "btc"], id="no-known-units"),
            pytest.param("xyz", ["hex", "decimal"], ["wei"], id="no-match"),
            pytest.param("0xff", ["float"], ["wei"], id="only-unknown-encodings"),
        ],
    )
    def test_no_result(self, token, encodings, units):
        assert inspect(token, encodings, units=units) is None

    @pytest.mark.parametrize("token", ["", " ", "0x", "--1", "1.2.3", "====", "\x00", "0o8"])
    def test_malformed_tokens(self, token):
        """Malformed tokens never raise."""
        assert inspect(token, ["hex", "decimal", "binary", "octal", "base64"]) is None


class TestInspector:
    def test_units_filter_sections(self):
        report = Inspector(["hex"], units=["ether"]).inspect("0xff")
        assert report.startswith("EthConverter: 0xff\n\nEther\n")
        assert "\nWei\n" not in report
        assert "\nGwei\n" not in report

    def test_sections_keep_report_order(self):
        inspector = Inspector(units=["ether", "WEI", "usd"])
        assert [str(s) for s in inspector.sections] == ["wei", "ether"]

    def test_single_string_lists(self):
        inspector = Inspector("hex", "wei")
        assert inspector.encodings == ("hex",)
        assert [str(s) for s in inspector.sections] == ["wei"]

    def test_reads_price_cache(self):
        """A rate accessor sees refreshed prices without rebuilding the inspector."""
        cache = PriceCache()
        inspector = Inspector(["decimal"], units=["ether"], rate=cache.get)
        assert "Usd:    $0.00" in section(inspector.inspect("2"), "Ether")
        cache.set(1234.5)
        assert "Usd:    $2469.00" in section(inspector.inspect("2"), "Ether")

    def test_from_config(self):
        config = InspectorConfig(encodings=("octal",), units=("wei",), endianness="little")
        inspector = Inspector.from_config(config, rate=Decimal(1))
        assert inspector.encodings == ("octal",)
        assert inspector.endianness.little
        assert section(inspector.inspect("0o777"), "Wei")[0] == "Gwei:   0.000065281"

    def test_invalid_endianness(self):
        with pytest.raises(ValueError, match=r"(?i).*endianness.*"):
            Inspector(endianness="middle")

    def test_match(self):
        handler, data = Inspector(["decimal", "hex"]).match("0x10")
        assert handler.encoding == "hex"
        assert data == b"\x10"
        assert Inspector(["decimal"]).match("0x10") is None
