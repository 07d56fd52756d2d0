"""
Numeric cell parsing for spreadsheet imports.

Spreadsheets maintained by Korean operators write audience sizes with unit
suffixes ("3.1만" = 31,000, "1.3천" = 1,300) and thousands separators
("1,234"). Both helpers here are pure and never raise on bad input; they
return None when no number can be read.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional


UNIT_MULTIPLIERS = {
    "만": 10000,
    "천": 1000,
}

# "31000", "3.1만", ".5천"
UNIT_NUMBER_PATTERN = re.compile(r'^(\d*\.?\d+)\s*(만|천)?$')

# Leading decimal literal, the way a lenient float parser reads "12.5%" as 12.5
DECIMAL_PREFIX_PATTERN = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?')


def _strip_separators(text: str) -> str:
    return text.strip().replace(',', '')


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_decimal(text: Optional[str]) -> Optional[Decimal]:
    """
    Read the leading decimal number of a string.

    Thousands separators are removed first. Trailing text after the number
    is ignored ("4.5%" -> 4.5).

    Args:
        text: Raw cell text

    Returns:
        The number as a Decimal, or None when the text does not start with one
    """
    if text is None:
        return None

    match = DECIMAL_PREFIX_PATTERN.match(_strip_separators(text))
    if not match:
        return None

    try:
        value = Decimal(match.group(0))
    except InvalidOperation:
        return None

    if not value.is_finite():
        return None
    return value


def parse_korean_number(text: Optional[str]) -> Optional[int]:
    """
    Parse a count written with an optional Korean unit suffix.

    Examples:
        "3.1만"  -> 31000
        "1.3천"  -> 1300
        "1,234"  -> 1234
        "0"      -> 0
        "abc"    -> None

    Args:
        text: Raw cell text

    Returns:
        Integer value rounded to the nearest whole number, or None if the
        text holds no readable number
    """
    if text is None:
        return None

    cleaned = _strip_separators(text)
    match = UNIT_NUMBER_PATTERN.match(cleaned)
    if match:
        number, unit = match.groups()
        value = Decimal(number)
        if unit:
            value *= UNIT_MULTIPLIERS[unit]
    else:
        value = parse_decimal(cleaned)
        if value is None:
            return None

    try:
        return round_half_up(value)
    except InvalidOperation:
        # More integer digits than the decimal context can hold
        return None
