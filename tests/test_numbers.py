# =============================================================================
# test_numbers.py - Numeric Literal Normalizer Tests
# =============================================================================
# Tests for converting literal operands to fixed-width hex digit strings.
#
# Test coverage includes:
#   - Hex (0x), binary (0b), legacy ($), octal (leading 0) and decimal
#   - Zero padding and truncation to the requested width
#   - Case-insensitivity
#   - Invalid literals
# =============================================================================

import pytest

from chip8_sdk.assembler.numbers import normalize_number, parse_number
from chip8_sdk.errors import InvalidNumberError


# =============================================================================
# Format Tests
# =============================================================================

class TestFormats:
    """Each literal format converts to the expected hex digits."""

    def test_hex(self):
        assert normalize_number("0xFF", 2) == "FF"

    def test_hex_address(self):
        assert normalize_number("0x1FF", 3) == "1FF"

    def test_hex_lowercase_digits(self):
        assert normalize_number("0x2a", 2) == "2A"

    def test_binary(self):
        assert normalize_number("0b101", 2) == "05"

    def test_binary_full_byte(self):
        assert normalize_number("0B11110000", 2) == "F0"

    def test_legacy_is_hex(self):
        """$ literals are hex digits passed through."""
        assert normalize_number("$2A", 2) == "2A"

    def test_octal(self):
        assert normalize_number("017", 2) == "0F"

    def test_zero(self):
        assert normalize_number("0", 2) == "00"

    def test_decimal(self):
        assert normalize_number("12", 2) == "0C"

    def test_decimal_address(self):
        assert normalize_number("512", 3) == "200"


# =============================================================================
# Width Tests
# =============================================================================

class TestWidth:
    """Results always have exactly the requested number of digits."""

    def test_pads_short_values(self):
        assert normalize_number("0x2", 3) == "002"

    def test_single_nibble(self):
        assert normalize_number("5", 1) == "5"

    def test_hex_truncates_leading_digits(self):
        assert normalize_number("0x1FF", 2) == "FF"

    def test_decimal_wraps_modulo_width(self):
        assert normalize_number("256", 2) == "00"

    def test_binary_wraps_modulo_width(self):
        assert normalize_number("0b100000001", 2) == "01"

    @pytest.mark.parametrize("token", ["0x7", "0b111", "$7", "07", "7"])
    def test_every_format_has_exact_width(self, token):
        assert normalize_number(token, 4) == "0007"


# =============================================================================
# Error Tests
# =============================================================================

class TestInvalidNumbers:
    """Tokens that are not literals raise InvalidNumberError."""

    @pytest.mark.parametrize("token", [
        "LOOP",     # identifier
        "V1",       # register
        "0x",       # prefix without digits
        "0xZZ",     # bad hex digits
        "0b102",    # bad binary digit
        "$",        # legacy prefix without digits
        "08",       # leading zero means octal
        "0x-1",     # sign inside literal
        "0X0X12",   # repeated hex prefix
        "0B0B1",    # repeated binary prefix
        "0x\u0663",  # non-ASCII digit
        "$\u0663",
        "0x1_0",    # digit separator
        "",
    ])
    def test_rejected(self, token):
        with pytest.raises(InvalidNumberError):
            normalize_number(token, 2)

    def test_error_names_token(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            normalize_number("FOO", 2)
        assert exc_info.value.token == "FOO"
        assert "Invalid number: FOO" in str(exc_info.value)


class TestParseNumber:
    """parse_number returns the plain integer value."""

    def test_values(self):
        assert parse_number("0x200") == 0x200
        assert parse_number("0b1010") == 10
        assert parse_number("$FF") == 255
        assert parse_number("0777") == 511
        assert parse_number("42") == 42
