"""
CHIP-8 register operands.

The CHIP-8 has sixteen 8-bit general purpose registers, V0 through VF,
addressed by a single nibble in the opcode.
"""

from chip8_sdk.assembler.tokens import TokenKind, classify, has_radix_digits
from chip8_sdk.errors import InvalidRegisterError

REGISTER_COUNT = 16

# Register used by the offset jump (JP V0, nnn)
JUMP_BASE_REGISTER = "V0"


def normalize_register(token: str) -> str:
    """
    Convert a register token to its single uppercase hex digit.

    Args:
        token: Register name such as "V3" or "vf"

    Returns:
        One hex digit, "0" through "F"

    Raises:
        InvalidRegisterError: If the token does not start with V, the rest
            is not hex, or it names a register above VF
    """
    if classify(token) is not TokenKind.REGISTER:
        raise InvalidRegisterError(token)

    digits = token[1:]
    if not has_radix_digits(digits, 16):
        raise InvalidRegisterError(token)

    number = int(digits, 16)

    if number >= REGISTER_COUNT:
        raise InvalidRegisterError(token, hint="registers are V0 to VF")

    return f"{number:X}"
