"""
Code Formatter Unit Tests
"""

from datetime import datetime, timezone

import pytest

from furs_client.codes.formatter import (
    calculate_control_character,
    format_date_for_code,
    format_tax_number,
    hex_to_decimal_padded,
    validate_tax_number,
    validate_zoi,
)
from furs_client.exceptions import InvalidTaxNumberError, ValidationError


ZOI_1 = "a7e5f55e1dbb48b799268e1a6d8618a3"
ZOI_2 = "3024e56bf1ddd2e7eeb5715c6859a913"


class TestHexToDecimalPadded:
    """Tests for hex_to_decimal_padded"""

    def test_known_zoi(self):
        """Should convert ZOI to its 39-digit decimal form"""
        assert hex_to_decimal_padded(ZOI_1) == "223175087923687075112234402528973166755"

    def test_pads_with_leading_zero(self):
        """Should left-pad short decimal values"""
        assert hex_to_decimal_padded(ZOI_2) == "063994519708649896901260100447252359443"

    @pytest.mark.parametrize("zoi", [ZOI_1, ZOI_2, "0" * 32, "f" * 32])
    def test_round_trip(self, zoi: str):
        """Should always give 39 digits that convert back to the ZOI"""
        decimal = hex_to_decimal_padded(zoi, 39)
        assert len(decimal) == 39
        assert format(int(decimal), "032x") == zoi

    def test_case_and_whitespace_insensitive(self):
        """Should ignore case and whitespace"""
        messy = " A7E5F55E 1DBB48B7\n99268E1A6D8618A3 "
        assert hex_to_decimal_padded(messy) == hex_to_decimal_padded(ZOI_1)

    def test_does_not_truncate(self):
        """Should return longer values untouched"""
        assert hex_to_decimal_padded("ffff", 2) == "65535"

    def test_custom_width(self):
        assert hex_to_decimal_padded("ff", 5) == "00255"

    @pytest.mark.parametrize("value", ["xyz", "0xff", "f_f", ""])
    def test_invalid_hex(self, value: str):
        """Should reject non-hexadecimal input"""
        with pytest.raises(ValidationError):
            hex_to_decimal_padded(value)


class TestFormatDateForCode:
    """Tests for format_date_for_code"""

    def test_naive_datetime(self):
        """Should use naive datetime fields as local wall-clock time"""
        assert format_date_for_code(datetime(2015, 8, 15, 10, 13, 32)) == "150815101332"

    def test_iso_string(self):
        """Should parse ISO strings without offset as local time"""
        assert format_date_for_code("2015-08-15T10:13:32") == "150815101332"

    def test_zero_padding(self):
        assert format_date_for_code(datetime(2009, 1, 2, 3, 4, 5)) == "090102030405"

    def test_aware_datetime_uses_local_zone(self):
        """Should convert aware datetimes to the local timezone"""
        moment = datetime(2015, 8, 15, 10, 13, 32, tzinfo=timezone.utc)
        expected = moment.astimezone().strftime("%y%m%d%H%M%S")
        assert format_date_for_code(moment) == expected

    def test_zulu_string(self):
        """Should read a trailing Z as UTC"""
        moment = datetime(2015, 8, 15, 10, 13, 32, tzinfo=timezone.utc)
        expected = moment.astimezone().strftime("%y%m%d%H%M%S")
        assert format_date_for_code("2015-08-15T10:13:32Z") == expected

    def test_invalid_string(self):
        with pytest.raises(ValidationError) as exc_info:
            format_date_for_code("not a date")
        assert exc_info.value.field == "issue_date_time"


class TestCalculateControlCharacter:
    """Tests for calculate_control_character"""

    def test_digit_sum_modulo_ten(self):
        assert calculate_control_character("123") == "6"
        assert calculate_control_character("99") == "8"
        assert calculate_control_character("55") == "0"

    def test_known_payload_body(self):
        body = "22317508792368707511223440252897316675512345678150815101332"
        assert calculate_control_character(body) == "1"

    def test_empty_string(self):
        assert calculate_control_character("") == "0"

    @pytest.mark.parametrize("value", ["12a", "1 2", "١٢", "12\n"])
    def test_rejects_non_digits(self, value: str):
        """Should reject anything but ASCII digits"""
        with pytest.raises(ValidationError):
            calculate_control_character(value)


class TestTaxNumber:
    """Tests for tax number helpers"""

    def test_format_pads_to_eight_digits(self):
        assert format_tax_number(12345678) == "12345678"
        assert format_tax_number(1234) == "00001234"
        assert format_tax_number(0) == "00000000"
        assert format_tax_number("1234") == "00001234"

    @pytest.mark.parametrize("value", [-1, 100000000, "123456789", "12ab", "", True, 1.5])
    def test_format_rejects_invalid(self, value):
        with pytest.raises(InvalidTaxNumberError):
            format_tax_number(value)

    def test_validate_tax_number(self):
        assert validate_tax_number(12345678) is True
        assert validate_tax_number("12345678") is True
        assert validate_tax_number(1234567) is False
        assert validate_tax_number(123456789) is False
        assert validate_tax_number(True) is False
        assert validate_tax_number(None) is False


class TestValidateZoi:
    """Tests for validate_zoi"""

    def test_valid(self):
        assert validate_zoi(ZOI_1) is True
        assert validate_zoi(ZOI_1.upper()) is True

    @pytest.mark.parametrize("value", [ZOI_1[:-1], ZOI_1 + "0", "g" * 32, ZOI_1 + "\n", None])
    def test_invalid(self, value):
        assert validate_zoi(value) is False
