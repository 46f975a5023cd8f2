"""
CHIP-8 Instruction Set Definition
=================================

This module defines the CHIP-8 instruction set as opcode templates keyed by
mnemonic and operand shape. Every CHIP-8 instruction is one 16-bit word,
written here as four hex nibbles.

Operand Shapes
--------------
Each operand of an instruction is reduced to a shape before lookup:

- **R**: a register, V0-VF
- **N**: an immediate (literal number or resolved label address)
- **I, B, F, ST, DT, K**: reserved identifiers used by the LD family

Opcode Templates
----------------
Templates use the usual CHIP-8 notation, one character per nibble:

- ``x``: first register operand
- ``y``: second register operand
- ``n``: immediate; a run of ``n`` sets its width (``nnn`` is a 12-bit
  address, ``nn`` a byte, ``n`` a nibble)
- ``0``-``9``, ``A``-``F``: constant nibbles

Example: ``("ADD", ("R", "N"))`` maps to ``7xnn``, so ``ADD V3, 0x10``
encodes as ``7310``.

Reference
---------
- Cowgod's Chip-8 Technical Reference, section 3.1
"""

from dataclasses import dataclass

from chip8_sdk.assembler.tokens import TokenKind, classify


# =============================================================================
# Operand Shapes
# =============================================================================

REGISTER = "R"
IMMEDIATE = "N"

# Identifiers that stand for themselves in LD operands
RESERVED_OPERANDS = frozenset({"I", "B", "F", "ST", "DT", "K"})


def operand_shape(token: str) -> str:
    """
    Reduce an operand token to its shape for table lookup.

    Reserved identifiers are their own shape; registers are R; anything
    else is treated as an immediate and validated when it is converted.
    """
    if token in RESERVED_OPERANDS:
        return token
    if classify(token) is TokenKind.REGISTER:
        return REGISTER
    return IMMEDIATE


# =============================================================================
# Opcode Information
# =============================================================================

@dataclass(frozen=True)
class OpcodeInfo:
    """
    One encoding of a mnemonic.

    Attributes:
        mnemonic: Instruction name
        shape: Operand shapes, in source order
        template: Four-nibble template (see module docstring)
    """
    mnemonic: str
    shape: tuple[str, ...]
    template: str

    @property
    def immediate_width(self) -> int:
        """Number of nibbles taken by the immediate operand (0 if none)."""
        return self.template.count("n")

    @property
    def syntax(self) -> str:
        """Human-readable form for hints, e.g. 'SE Vx, nn'."""
        operands = []
        registers = iter("xy")
        for shape in self.shape:
            if shape == REGISTER:
                operands.append(f"V{next(registers)}")
            elif shape == IMMEDIATE:
                operands.append("n" * self.immediate_width)
            else:
                operands.append(shape)
        if not operands:
            return self.mnemonic
        return f"{self.mnemonic} {', '.join(operands)}"

    def __repr__(self) -> str:
        return f"OpcodeInfo({self.syntax!r} -> {self.template})"


def _op(mnemonic: str, shape: tuple[str, ...], template: str) -> tuple[tuple[str, tuple[str, ...]], OpcodeInfo]:
    return (mnemonic, shape), OpcodeInfo(mnemonic, shape, template)


R, N = REGISTER, IMMEDIATE

# =============================================================================
# Opcode Table
# =============================================================================
# Key: (mnemonic, operand shapes)
# Value: OpcodeInfo
# =============================================================================

OPCODE_TABLE: dict[tuple[str, tuple[str, ...]], OpcodeInfo] = dict([
    # System and flow control
    _op("CLS", (), "00E0"),             # Clear display
    _op("RET", (), "00EE"),             # Return from subroutine
    _op("SYS", (N,), "0nnn"),           # Machine code routine (ignored by interpreters)
    _op("JP", (N,), "1nnn"),            # Jump
    _op("JP", (R, N), "Bnnn"),          # Jump to V0 + nnn
    _op("CALL", (N,), "2nnn"),          # Call subroutine

    # Conditional skips
    _op("SE", (R, N), "3xnn"),          # Skip if Vx == nn
    _op("SE", (R, R), "5xy0"),          # Skip if Vx == Vy
    _op("SNE", (R, N), "4xnn"),         # Skip if Vx != nn
    _op("SNE", (R, R), "9xy0"),         # Skip if Vx != Vy
    _op("SKP", (R,), "Ex9E"),           # Skip if key Vx pressed
    _op("SKNP", (R,), "ExA1"),          # Skip if key Vx not pressed

    # Arithmetic and logic
    _op("ADD", (R, N), "7xnn"),         # Vx += nn
    _op("ADD", (R, R), "8xy4"),         # Vx += Vy, VF = carry
    _op("OR", (R, R), "8xy1"),
    _op("AND", (R, R), "8xy2"),
    _op("XOR", (R, R), "8xy3"),
    _op("SUB", (R, R), "8xy5"),         # Vx -= Vy, VF = not borrow
    _op("SHR", (R,), "8x06"),
    _op("SUBN", (R, R), "8xy7"),        # Vx = Vy - Vx, VF = not borrow
    _op("SHL", (R,), "8x0E"),
    _op("RND", (R, N), "Cxnn"),         # Vx = random byte AND nn

    # Loads
    _op("LD", (R, N), "6xnn"),
    _op("LD", (R, R), "8xy0"),
    _op("LD", ("I", N), "Annn"),
    _op("LD", ("I", R), "Fx55"),        # Store V0..Vx at I
    _op("LD", ("B", R), "Fx33"),        # BCD of Vx at I
    _op("LD", ("F", R), "Fx29"),        # I = font sprite for digit Vx
    _op("LD", ("ST", R), "Fx18"),       # Sound timer = Vx
    _op("LD", ("DT", R), "Fx15"),       # Delay timer = Vx
    _op("LD", (R, "DT"), "Fx07"),       # Vx = delay timer
    _op("LD", (R, "K"), "Fx0A"),        # Wait for key, store in Vx
    _op("LD", (R, "I"), "Fx65"),        # Load V0..Vx from I

    # Display
    _op("DRW", (R, R, N), "Dxyn"),      # Draw n-byte sprite at (Vx, Vy)
])

del R, N

# Every mnemonic the assembler recognises
MNEMONICS: frozenset[str] = frozenset(mnemonic for mnemonic, _ in OPCODE_TABLE)

# Size of every CHIP-8 instruction in bytes
INSTRUCTION_SIZE = 2


# =============================================================================
# Lookup Functions
# =============================================================================

def is_mnemonic(token: str) -> bool:
    """True if the token names a CHIP-8 instruction."""
    return token.upper() in MNEMONICS


def get_opcode_info(mnemonic: str, shape: tuple[str, ...]) -> OpcodeInfo | None:
    """Look up the encoding for an exact mnemonic and operand shape."""
    return OPCODE_TABLE.get((mnemonic, shape))


def get_encodings(mnemonic: str, arity: int | None = None) -> list[OpcodeInfo]:
    """
    All encodings of a mnemonic, optionally limited to one operand count.

    Args:
        mnemonic: Instruction name
        arity: Number of operands, or None for every form

    Returns:
        Matching OpcodeInfo entries in table order
    """
    return [
        info for (name, shape), info in OPCODE_TABLE.items()
        if name == mnemonic and (arity is None or len(shape) == arity)
    ]
