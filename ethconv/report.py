"""
Plain-text report of denomination conversions.

The report is the only output format of the package and is meant for direct
display, e.g. in an editor tooltip:

    EthConverter: 0xff

    Wei
    Gwei:   0.000000255
    Ether:  0.000000000000000255
    Usd:    $0.00

Each section lists the conversions of one source denomination. Values are
column-aligned on the longest unit name across all sections.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Iterable, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .encodings import FormsMap
from .units import Denomination, conversions

TOOL_NAME = "EthConverter"


# Methods --------------------------------------------------------------------------------------------------------------

def label_width(sections: Iterable[Denomination] = tuple(Denomination)) -> int:
    """Length of the longest unit name of all conversions in sections."""
    return max(
        (len(conversion.target) for section in sections for conversion in conversions(section)),
        default=0,
    )


def format_entry(unit: str, value: str, width: int) -> str:
    """
    Format one aligned report line, e.g. ``"Gwei:   0.000000255"``.
    """
    return f"{unit.capitalize()}:  {' ' * (width - len(unit))}{value}"


def format_section(title: str, values: Mapping[str, str | None], width: int) -> str:
    """
    Format a section title followed by its non-empty entries, in mapping order.
    """
    lines = [title]
    lines += [format_entry(unit, value, width) for unit, value in values.items() if value]
    return "\n".join(lines) + "\n"


def format_report(
        token: str,
        data: bytes,
        sections: Mapping[Denomination, FormsMap],
) -> str:
    """
    Render the conversion report of a token.

    Args:
        token: Original token shown in the header line.
        data: Canonical byte sequence passed to every conversion function.
        sections: Forms map per source denomination. Sections are always
            rendered in Wei, Gwei, Ether order; missing ones are skipped.

    Returns:
        Newline-terminated multi-line report.
    """
    width = label_width()
    message = f"{TOOL_NAME}: {token}\n"
    for denomination in Denomination:
        forms = sections.get(denomination)
        if forms is None:
            continue
        values = {unit: func(data) for unit, func in forms.items()}
        message += "\n" + format_section(denomination.capitalize(), values, width)
    return message
