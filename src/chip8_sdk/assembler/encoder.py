"""
CHIP-8 Instruction Encoder
==========================

Encodes one preprocessed line into its hex representation: four hex digits
for an instruction, two per byte for a raw data line.

Encoding a line takes three steps:

1. **Substitution**: each token that exactly matches an alias is replaced
   by the alias target; each token that exactly matches a label name is
   replaced by the label address as a hex literal (``0X202``).
2. **Special shapes**: ``: NAME`` or ``:NAME`` encodes the label address as a data
   word; a line starting with a numeric literal is raw data.
3. **Dispatch**: the mnemonic and operand shapes select an opcode template
   from the opcode table, which is filled in with register nibbles and
   normalized immediates.

Example
-------
>>> from chip8_sdk.assembler.preprocessor import preprocess
>>> program = preprocess('''
... : START
...     LD V1, 0x20
...     JP START
... ''')
>>> encode_line(program.lines[0], program.aliases, program.labels)
'6120'
>>> encode_line(program.lines[1], program.aliases, program.labels)
'1200'
"""

import difflib
from typing import Iterable, Mapping

from chip8_sdk.assembler.numbers import normalize_number
from chip8_sdk.assembler.opcodes import (
    IMMEDIATE,
    REGISTER,
    OpcodeInfo,
    get_encodings,
    get_opcode_info,
    operand_shape,
)
from chip8_sdk.assembler.preprocessor import (
    ALIAS_DIRECTIVE,
    LABEL_DELIMITER,
    Alias,
    JumpLabel,
    SourceLine,
    label_names,
    resolve_alias,
)
from chip8_sdk.assembler.registers import JUMP_BASE_REGISTER, normalize_register
from chip8_sdk.assembler.tokens import TokenKind, classify
from chip8_sdk.errors import (
    IllegalOperandError,
    InvalidNumberError,
    UnknownInstructionError,
    UnknownLabelError,
)

HEX_PREFIX = "0X"
DATA_BYTE_WIDTH = 2
ADDRESS_WIDTH = 3


# =============================================================================
# Substitution
# =============================================================================

def substitute(tokens: Iterable[str], aliases: Iterable[Alias],
               labels: Mapping[str, JumpLabel],
               line_index: int | None = None) -> list[str]:
    """
    Apply alias and label substitution to every token.

    A token is rewritten by at most one alias, the latest declared one that
    matches, so an alias target is never expanded again. Only aliases
    declared before ``line_index`` apply; with no index, all of them do.
    Label names become hex literals of their address.
    """
    active = [
        alias for alias in aliases
        if line_index is None or alias.index < line_index
    ]
    result = []
    for token in tokens:
        token = resolve_alias(token, active)
        label = labels.get(token)
        if label is not None:
            token = HEX_PREFIX + label.address_hex
        result.append(token)
    return result


def _similar_labels(name: str, labels: Mapping[str, JumpLabel]) -> list[str]:
    return difflib.get_close_matches(name, list(labels), n=3)


# =============================================================================
# Special Line Shapes
# =============================================================================

def encode_label_data(name: str, labels: Mapping[str, JumpLabel]) -> str:
    """
    Encode a label address as a data word ("0" + three address digits).

    Raises:
        UnknownLabelError: If the label does not exist
    """
    label = labels.get(name)
    if label is None:
        raise UnknownLabelError(name, similar_labels=_similar_labels(name, labels))
    return "0" + label.address_hex


def encode_data(tokens: list[str]) -> str:
    """
    Encode a raw data line, one byte per token.

    Raises:
        InvalidNumberError: If a token is not a literal
    """
    return "".join(normalize_number(token, DATA_BYTE_WIDTH) for token in tokens)


# =============================================================================
# Instruction Dispatch
# =============================================================================

def _select_encoding(mnemonic: str, operands: list[str]) -> OpcodeInfo:
    """Find the opcode entry for a mnemonic and its operands."""
    shape = tuple(operand_shape(op) for op in operands)

    # The offset jump only exists for V0
    if mnemonic == "JP" and len(operands) == 2:
        first = operands[0]
        if shape[0] != REGISTER or normalize_register(first) != normalize_register(JUMP_BASE_REGISTER):
            raise IllegalOperandError(mnemonic, first)

    info = get_opcode_info(mnemonic, shape)
    if info is not None:
        return info

    candidates = get_encodings(mnemonic, len(operands))
    if len(candidates) == 1:
        # Single form: let operand conversion report what is wrong
        return candidates[0]

    forms = get_encodings(mnemonic)
    hint = None
    if forms:
        hint = f"{mnemonic} supports: " + "; ".join(info.syntax for info in forms)
    raise UnknownInstructionError(mnemonic, hint=hint)


def _immediate(token: str, width: int, labels: Mapping[str, JumpLabel]) -> str:
    try:
        return normalize_number(token, width)
    except InvalidNumberError:
        # An identifier in an address slot is most likely a misspelt label
        if width == ADDRESS_WIDTH and classify(token) is TokenKind.INVALID and token[:1].isalpha():
            raise UnknownLabelError(token, similar_labels=_similar_labels(token, labels)) from None
        raise


def encode_instruction(tokens: list[str], labels: Mapping[str, JumpLabel] | None = None) -> str:
    """
    Encode a substituted instruction line.

    Args:
        tokens: Mnemonic followed by operands, already substituted
        labels: Label table, used for error hints

    Returns:
        Four uppercase hex digits

    Raises:
        UnknownInstructionError: Mnemonic or operand shape not supported
        IllegalOperandError: Offset jump through a register other than V0
        InvalidRegisterError: Bad register operand
        InvalidNumberError: Bad immediate operand
        UnknownLabelError: Unresolved name used as an address
    """
    labels = labels or {}
    mnemonic, operands = tokens[0], tokens[1:]
    info = _select_encoding(mnemonic, operands)

    registers = []
    immediate = None
    for token, shape in zip(operands, info.shape):
        if shape == REGISTER:
            registers.append(normalize_register(token))
        elif shape == IMMEDIATE:
            immediate = _immediate(token, info.immediate_width, labels)

    fields = {"x": iter(registers[:1]), "y": iter(registers[1:2]), "n": iter(immediate or "")}
    return "".join(next(fields[c]) if c in fields else c for c in info.template)


# =============================================================================
# Line Encoding
# =============================================================================

def encode(tokens: list[str], aliases: Iterable[Alias] = (),
           labels: Mapping[str, JumpLabel] | None = None,
           line_index: int | None = None) -> str:
    """
    Encode one line given as normalized tokens.

    Args:
        tokens: Upper-cased tokens of the line
        aliases: Alias table
        labels: Label table with addresses assigned
        line_index: Source line of the tokens; aliases declared later are
            not applied

    Returns:
        Hex string: four digits for an instruction, two per data byte

    Raises:
        AssemblerError subclass describing the first problem on the line
    """
    labels = labels or {}
    if not tokens:
        raise UnknownInstructionError("")

    if tokens[0].startswith(LABEL_DELIMITER) and tokens[0] != ALIAS_DIRECTIVE:
        names = label_names(tokens)
        if len(names) == 1 and names[0]:
            return encode_label_data(names[0], labels)

    tokens = substitute(tokens, aliases, labels, line_index)

    if classify(tokens[0]).is_numeric:
        return encode_data(tokens)

    return encode_instruction(tokens, labels)


def encode_line(line: SourceLine, aliases: Iterable[Alias] = (),
                labels: Mapping[str, JumpLabel] | None = None) -> str:
    """Encode a preprocessed SourceLine."""
    return encode(line.tokens, aliases, labels, line.index)
