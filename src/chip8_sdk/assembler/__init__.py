"""
CHIP-8 Assembler
================

This package provides an assembler for the CHIP-8 virtual machine. It turns
line-oriented assembly source into the 16-bit instruction words (and raw
data bytes) it encodes, printed as hex.

Main Components
---------------
- **Preprocessor**: Strips comments, collects aliases and labels, assigns
  label addresses
- **classify**: Decides from its prefix what kind of operand a token is
- **normalize_number**: Converts literals to fixed-width hex digits
- **normalize_register**: Converts V0-VF to a single hex digit
- **encode**: Encodes one line using the opcode table
- **Assembler**: Runs the whole pipeline and collects per-line errors

Assembly Process
----------------
1. **Preprocessing** (one pass plus two address scans):
   - Normalize lines, record ``:ALIAS`` and ``: LABEL`` directives
   - Size each label: 2 bytes per instruction, 1 per data token
   - Place START at 0x200, then the other labels in declaration order

2. **Encoding** (one call per line):
   - Substitute aliases and label addresses
   - Encode raw data lines byte by byte
   - Look up the opcode template by mnemonic and operand shape

Example Usage
-------------
>>> from chip8_sdk.assembler import assemble
>>> result = assemble('''
... :ALIAS COUNT V3
... : START
...     LD COUNT, 5
... ''')
>>> result.words
['6305']
"""

from chip8_sdk.assembler.assembler import (
    Assembler,
    AssemblyResult,
    EncodedLine,
    LineError,
    assemble,
    assemble_file,
)
from chip8_sdk.assembler.encoder import encode, encode_line, substitute
from chip8_sdk.assembler.numbers import normalize_number, parse_number
from chip8_sdk.assembler.opcodes import MNEMONICS, OPCODE_TABLE, OpcodeInfo
from chip8_sdk.assembler.preprocessor import (
    BASE_ADDRESS,
    Alias,
    JumpLabel,
    OrphanPolicy,
    Preprocessor,
    Program,
    SourceLine,
    preprocess,
)
from chip8_sdk.assembler.registers import normalize_register
from chip8_sdk.assembler.tokens import TokenKind, classify

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "EncodedLine",
    "LineError",
    "assemble",
    "assemble_file",
    # Preprocessor
    "Preprocessor",
    "Program",
    "SourceLine",
    "Alias",
    "JumpLabel",
    "OrphanPolicy",
    "BASE_ADDRESS",
    "preprocess",
    # Operands
    "TokenKind",
    "classify",
    "normalize_number",
    "parse_number",
    "normalize_register",
    # Encoder
    "encode",
    "encode_line",
    "substitute",
    # Opcodes
    "MNEMONICS",
    "OPCODE_TABLE",
    "OpcodeInfo",
]
