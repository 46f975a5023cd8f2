"""
CHIP-8 Operand Token Classifier
===============================

CHIP-8 assembly carries no type annotations: a bare token such as ``V3``,
``0x2A``, ``0b101``, ``$FF``, ``017`` or ``12`` is a register or a literal
depending only on its leading characters. This module classifies a token
once, so the number normalizer, the register validator, the preprocessor
and the encoder all agree on what a token is.

Token Kinds
-----------

| Kind     | Prefix / shape            | Example  | Value |
|----------|---------------------------|----------|-------|
| HEX      | 0x                        | 0x2A     | 42    |
| BINARY   | 0b                        | 0b101    | 5     |
| LEGACY   | $ (hex digits follow)     | $2A      | 42    |
| OCTAL    | leading 0, octal digits   | 017, 0   | 15, 0 |
| DECIMAL  | digits, no leading 0      | 12       | 12    |
| REGISTER | V                         | V3, VF   | 3, 15 |
| INVALID  | anything else             | LOOP     |       |

Classification is case-insensitive. A token is classified by its shape
only; whether the digits are valid for the radix is checked when the
token is converted (``0XZZ`` is HEX and fails in the normalizer).
"""

from enum import Enum, auto


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Category of an operand token, decided from its prefix characters."""
    HEX = auto()
    BINARY = auto()
    LEGACY = auto()
    OCTAL = auto()
    DECIMAL = auto()
    REGISTER = auto()
    INVALID = auto()

    @property
    def is_numeric(self) -> bool:
        """True for every literal kind that the number normalizer accepts."""
        return self in NUMERIC_KINDS

    def __str__(self) -> str:
        return self.name.lower()


NUMERIC_KINDS = frozenset({
    TokenKind.HEX,
    TokenKind.BINARY,
    TokenKind.LEGACY,
    TokenKind.OCTAL,
    TokenKind.DECIMAL,
})

# Prefix string -> kind, tested in order
_PREFIXES: tuple[tuple[str, TokenKind], ...] = (
    ("0X", TokenKind.HEX),
    ("0B", TokenKind.BINARY),
    ("$", TokenKind.LEGACY),
    ("V", TokenKind.REGISTER),
)

OCTAL_DIGITS = frozenset("01234567")
DECIMAL_DIGITS = frozenset("0123456789")
HEX_DIGITS = "0123456789ABCDEF"


# =============================================================================
# Classification
# =============================================================================

def classify(token: str) -> TokenKind:
    """
    Classify an operand token by its prefix.

    Args:
        token: A single whitespace-free token (any case)

    Returns:
        The TokenKind of the token

    Example:
        >>> classify("0x1FF")
        <TokenKind.HEX: 1>
        >>> classify("v3")
        <TokenKind.REGISTER: 6>
        >>> classify("LOOP")
        <TokenKind.INVALID: 7>
    """
    text = token.upper()
    if not text:
        return TokenKind.INVALID

    for prefix, kind in _PREFIXES:
        if text.startswith(prefix):
            return kind

    if all(c in DECIMAL_DIGITS for c in text):
        if text[0] == "0":
            # A leading zero means octal, so 08 is neither octal nor decimal
            if all(c in OCTAL_DIGITS for c in text):
                return TokenKind.OCTAL
            return TokenKind.INVALID
        return TokenKind.DECIMAL

    return TokenKind.INVALID


def is_register(token: str) -> bool:
    """True if the token has the register shape (leading V)."""
    return classify(token) is TokenKind.REGISTER


def is_numeric(token: str) -> bool:
    """True if the token has the shape of any numeric literal."""
    return classify(token).is_numeric


def has_radix_digits(digits: str, radix: int) -> bool:
    """True if ``digits`` is non-empty and only uses ASCII digits of ``radix``."""
    allowed = HEX_DIGITS[:radix] + HEX_DIGITS[10:radix].lower()
    return bool(digits) and all(c in allowed for c in digits)
