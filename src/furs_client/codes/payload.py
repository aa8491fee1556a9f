"""
Fiscal payload construction

Builds and validates the 60-digit payload encoded into every FURS code:

    [39-digit decimal ZOI][8-digit tax number][YYMMDDHHMMSS][control digit]
"""

from dataclasses import dataclass
from typing import Dict, Union

from furs_client.codes.formatter import (
    DIGITS_PATTERN,
    Defaults,
    calculate_control_character,
    format_date_for_code,
    format_tax_number,
    hex_to_decimal_padded,
    validate_zoi,
)
from furs_client.exceptions import InvalidPayloadLengthError, InvalidZoiError, ValidationError
from furs_client.utils.identifiers import DateInput


_ZOI_END = Defaults.ZOI_DECIMAL_WIDTH
_TAX_END = _ZOI_END + Defaults.TAX_NUMBER_WIDTH
_DATE_END = _TAX_END + Defaults.DATE_TIME_WIDTH


@dataclass(frozen=True)
class FiscalPayload:
    """
    Immutable 60-digit fiscal payload and its components

    Attributes:
        value: The full 60-digit payload
        zoi_decimal: ZOI as 39 decimal digits
        tax_number: Tax number as 8 digits
        date_time: Issue timestamp as ``YYMMDDHHMMSS``
        control_character: Checksum digit
    """
    value: str
    zoi_decimal: str
    tax_number: str
    date_time: str
    control_character: str

    @classmethod
    def parse(cls, value: str) -> "FiscalPayload":
        """
        Validate a payload string and split it into components

        Raises:
            InvalidPayloadLengthError: If value is not 60 ASCII digits
            ValidationError: If the control digit does not match
        """
        validate_payload(value)
        return cls(
            value=value,
            zoi_decimal=value[:_ZOI_END],
            tax_number=value[_ZOI_END:_TAX_END],
            date_time=value[_TAX_END:_DATE_END],
            control_character=value[_DATE_END:],
        )

    @property
    def body(self) -> str:
        """The 59 digits covered by the control character"""
        return self.value[:Defaults.BODY_LENGTH]

    def components(self) -> Dict[str, str]:
        return {
            "zoi_decimal": self.zoi_decimal,
            "tax_number": self.tax_number,
            "date_time": self.date_time,
            "control_character": self.control_character,
        }

    def __str__(self) -> str:
        return self.value


def validate_payload(value: str) -> str:
    """
    Check that value is a well-formed fiscal payload

    Returns:
        The payload unchanged

    Raises:
        InvalidPayloadLengthError: If value is not exactly 60 ASCII digits
        ValidationError: If the last digit is not the checksum of the first 59
    """
    if (
        not isinstance(value, str)
        or len(value) != Defaults.PAYLOAD_LENGTH
        or not DIGITS_PATTERN.fullmatch(value)
    ):
        raise InvalidPayloadLengthError()

    expected = calculate_control_character(value[:Defaults.BODY_LENGTH])
    if value[Defaults.BODY_LENGTH] != expected:
        raise ValidationError(
            f"Invalid control character: expected {expected}, "
            f"got {value[Defaults.BODY_LENGTH]}",
            field="payload",
            invariant="payload[59] == sum(payload[:59]) % 10",
        )

    return value


class FiscalPayloadBuilder:
    """
    Composes the 60-digit fiscal payload from a ZOI, tax number and timestamp

    Example:
        >>> builder = FiscalPayloadBuilder()
        >>> payload = builder.build(
        ...     'a7e5f55e1dbb48b799268e1a6d8618a3',
        ...     12345678,
        ...     datetime(2015, 8, 15, 10, 13, 32),
        ... )
        >>> payload.value
        '223175087923687075112234402528973166755123456781508151013321'
    """

    def build(
        self,
        zoi_hex: str,
        tax_number: Union[int, str],
        issue_instant: DateInput,
    ) -> FiscalPayload:
        """
        Build the fiscal payload

        Args:
            zoi_hex: ZOI as 32 hexadecimal characters
            tax_number: Tax number in the range 0..99999999
            issue_instant: Invoice issue timestamp

        Returns:
            FiscalPayload

        Raises:
            InvalidZoiError: If zoi_hex is not 32 hexadecimal characters
            InvalidTaxNumberError: If the tax number does not render to 8 digits
            ValidationError: If the issue timestamp cannot be parsed
        """
        if not validate_zoi(zoi_hex):
            raise InvalidZoiError()

        zoi_decimal = hex_to_decimal_padded(zoi_hex, Defaults.ZOI_DECIMAL_WIDTH)
        tax_str = format_tax_number(tax_number)
        date_str = format_date_for_code(issue_instant)

        body = f"{zoi_decimal}{tax_str}{date_str}"
        if len(body) != Defaults.BODY_LENGTH:
            raise ValidationError(
                f"Payload body must be {Defaults.BODY_LENGTH} digits, got {len(body)}",
                field="payload",
                invariant="len(body) == 59",
            )

        control = calculate_control_character(body)

        return FiscalPayload(
            value=f"{body}{control}",
            zoi_decimal=zoi_decimal,
            tax_number=tax_str,
            date_time=date_str,
            control_character=control,
        )


def format_code_data(
    zoi_hex: str,
    tax_number: Union[int, str],
    issue_instant: DateInput,
) -> str:
    """Build the 60-digit payload string"""
    return FiscalPayloadBuilder().build(zoi_hex, tax_number, issue_instant).value
