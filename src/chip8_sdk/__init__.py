"""
CHIP-8 SDK - Assembler Toolchain for the CHIP-8 Virtual Machine
===============================================================

This package provides an assembler for CHIP-8, the interpreted 8-bit virtual
machine of the late 1970s: sixteen 8-bit registers V0-VF, a 12-bit address
space, and programs loaded at 0x200.

Main Components
---------------
- **assembler**: CHIP-8 assembler (c8asm)
    Converts assembly source into a listing of hex instruction words

Quick Start
-----------
Assemble a program:
    >>> from chip8_sdk import Assembler
    >>> asm = Assembler()
    >>> result = asm.assemble_file("game.c8s")
    >>> print(result.listing())

Or use the command-line tool:
    $ c8asm game.c8s

Reference Documentation
-----------------------
- Cowgod's Chip-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM

Version History
---------------
1.0.0 - Initial release with labels, aliases and the full instruction set
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_sdk.assembler import Assembler, AssemblyResult, assemble, assemble_file
from chip8_sdk.errors import (
    Chip8Error,
    AssemblerError,
    UnknownInstructionError,
    InvalidRegisterError,
    InvalidNumberError,
    UnknownLabelError,
    IllegalOperandError,
    MalformedDirectiveError,
    OrphanLineError,
    DuplicateLabelError,
    AddressOverflowError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "Chip8Error",
    "AssemblerError",
    "UnknownInstructionError",
    "InvalidRegisterError",
    "InvalidNumberError",
    "UnknownLabelError",
    "IllegalOperandError",
    "MalformedDirectiveError",
    "OrphanLineError",
    "DuplicateLabelError",
    "AddressOverflowError",
]
