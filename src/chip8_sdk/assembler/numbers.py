"""
CHIP-8 Numeric Literal Normalizer
=================================

Converts a literal operand token into a fixed-width, uppercase string of hex
digits ready to be spliced into an opcode template.

Number Formats
--------------

| Format      | Prefix   | Example | 2-nibble result |
|-------------|----------|---------|-----------------|
| Hexadecimal | 0x       | 0x7F    | 7F              |
| Binary      | 0b       | 0b1010  | 0A              |
| Legacy hex  | $        | $7F     | 7F              |
| Octal       | 0        | 017     | 0F              |
| Decimal     | (none)   | 12      | 0C              |

Width handling
--------------
The result always has exactly ``width`` digits. Short values are padded
with leading zeros; long values keep only their low ``width`` nibbles
(``0x1FF`` at width 2 is ``FF``). Ranges are not checked beyond that.
"""

from chip8_sdk.assembler.tokens import TokenKind, classify, has_radix_digits
from chip8_sdk.errors import InvalidNumberError


# Kind -> (prefix length, radix)
_RADIX: dict[TokenKind, tuple[int, int]] = {
    TokenKind.HEX: (2, 16),
    TokenKind.BINARY: (2, 2),
    TokenKind.LEGACY: (1, 16),
    TokenKind.OCTAL: (0, 8),
    TokenKind.DECIMAL: (0, 10),
}


def parse_number(token: str) -> int:
    """
    Parse a literal token into its integer value.

    Args:
        token: Literal in any supported format (case-insensitive)

    Returns:
        The value of the literal

    Raises:
        InvalidNumberError: If the token is not a valid literal
    """
    kind = classify(token)
    if kind not in _RADIX:
        raise InvalidNumberError(token)

    skip, radix = _RADIX[kind]
    digits = token[skip:]
    # int() would also accept signs, underscores, a second prefix and
    # non-ASCII digits
    if not has_radix_digits(digits, radix):
        raise InvalidNumberError(token)

    return int(digits, radix)


def normalize_number(token: str, width: int) -> str:
    """
    Normalize a literal token to exactly ``width`` uppercase hex digits.

    Args:
        token: Literal in any supported format
        width: Number of hex digits (nibbles) in the result

    Returns:
        The value modulo 16**width, zero-padded to ``width`` digits

    Raises:
        InvalidNumberError: If the token is not a valid literal

    Example:
        >>> normalize_number("0xFF", 2)
        'FF'
        >>> normalize_number("0b101", 2)
        '05'
        >>> normalize_number("0x1FF", 2)
        'FF'
    """
    value = parse_number(token) % (16 ** width)
    return f"{value:0{width}X}"
