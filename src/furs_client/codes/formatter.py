"""
FURS Code Formatter
Codec primitives for the 60-digit fiscal payload

This module provides the building blocks shared by the QR, PDF417 and
Code128 encodings:
- Hexadecimal ZOI to fixed-width decimal conversion
- Issue timestamp to ``YYMMDDHHMMSS`` formatting
- Digit-sum control character
"""

import re
from datetime import datetime
from typing import Union

from furs_client.exceptions import InvalidTaxNumberError, ValidationError
from furs_client.utils.identifiers import DateInput, parse_datetime


ZOI_PATTERN = re.compile(r"^[0-9a-fA-F]{32}$")
HEX_PATTERN = re.compile(r"^[0-9a-fA-F]+$")
TAX_NUMBER_PATTERN = re.compile(r"^[0-9]{8}$")
DIGITS_PATTERN = re.compile(r"^[0-9]*$")
WHITESPACE_PATTERN = re.compile(r"\s+")


class Defaults:
    """Field widths of the fiscal payload"""
    ZOI_DECIMAL_WIDTH = 39
    TAX_NUMBER_WIDTH = 8
    DATE_TIME_WIDTH = 12
    BODY_LENGTH = 59
    PAYLOAD_LENGTH = 60
    MAX_TAX_NUMBER = 99999999


def hex_to_decimal_padded(hex_value: str, width: int = Defaults.ZOI_DECIMAL_WIDTH) -> str:
    """
    Convert a hexadecimal string to a zero-padded decimal string

    Whitespace is ignored and case does not matter. A value whose decimal
    form is longer than ``width`` is returned unpadded and untruncated.

    Args:
        hex_value: Hexadecimal digits (32 characters for a ZOI)
        width: Minimum width of the result

    Returns:
        Decimal digits, left-padded with ``0``

    Raises:
        ValidationError: If the input contains non-hexadecimal characters
    """
    clean = WHITESPACE_PATTERN.sub("", hex_value)

    # int(..., 16) also accepts "0x" prefixes and underscores
    if not HEX_PATTERN.fullmatch(clean):
        raise ValidationError(
            f"Invalid hexadecimal value: {hex_value!r}",
            field="zoi",
            invariant="^[0-9a-fA-F]+$",
        )

    return str(int(clean, 16)).zfill(width)


def format_date_for_code(value: DateInput) -> str:
    """
    Format an issue timestamp as ``YYMMDDHHMMSS``

    Naive datetimes are read as local wall-clock time and used as-is.
    Aware datetimes are converted to the process's local timezone first.
    Strings are parsed as ISO-8601.

    Raises:
        ValidationError: If a string cannot be parsed
    """
    moment = validate_issue_date_time(value)

    if moment.tzinfo is not None:
        moment = moment.astimezone()

    return moment.strftime("%y%m%d%H%M%S")


def calculate_control_character(digits: str) -> str:
    """
    Calculate the control character of a digit string

    Returns:
        ``str(sum(digits) % 10)``

    Raises:
        ValidationError: If any character is not an ASCII digit
    """
    if not DIGITS_PATTERN.fullmatch(digits):
        raise ValidationError(
            "Control character input must contain only digits",
            field="payload",
            invariant="^[0-9]*$",
        )

    return str(sum(int(digit) for digit in digits) % 10)


def format_tax_number(tax_number: Union[int, str]) -> str:
    """
    Render a tax number as 8 zero-padded digits

    Raises:
        InvalidTaxNumberError: If the value is negative, not numeric, or
            longer than 8 digits
    """
    if isinstance(tax_number, bool):
        raise InvalidTaxNumberError()

    if isinstance(tax_number, int):
        if tax_number < 0 or tax_number > Defaults.MAX_TAX_NUMBER:
            raise InvalidTaxNumberError()
        return f"{tax_number:08d}"

    if isinstance(tax_number, str) and DIGITS_PATTERN.fullmatch(tax_number) and tax_number:
        rendered = tax_number.zfill(Defaults.TAX_NUMBER_WIDTH)
        if TAX_NUMBER_PATTERN.fullmatch(rendered):
            return rendered

    raise InvalidTaxNumberError()


def validate_zoi(zoi: str) -> bool:
    """Check that a ZOI is 32 hexadecimal characters"""
    return isinstance(zoi, str) and bool(ZOI_PATTERN.fullmatch(zoi))


def validate_tax_number(tax_number: Union[int, str]) -> bool:
    """Check that a tax number is exactly 8 digits without padding"""
    if isinstance(tax_number, bool) or not isinstance(tax_number, (int, str)):
        return False
    return bool(TAX_NUMBER_PATTERN.fullmatch(str(tax_number)))


def validate_issue_date_time(value: DateInput) -> datetime:
    """
    Parse an issue timestamp, raising ``ValidationError`` when it is invalid
    """
    try:
        return parse_datetime(value)
    except ValueError as e:
        raise ValidationError(
            f"Invalid issue date/time format: {value!r}",
            field="issue_date_time",
            invariant="ISO-8601",
        ) from e
