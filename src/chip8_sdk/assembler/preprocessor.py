"""
CHIP-8 Assembly Preprocessor
============================

The preprocessor turns raw source text into a Program: the normalized line
list, the alias table and the label table with every label's address
resolved. The encoder never sees a directive and never computes an address.

Source Format
-------------
- ``;`` starts a comment that runs to the end of the line
- commas and whitespace both separate operands
- everything is case-insensitive (lines are upper-cased)

Directives start with ``:``::

    :ALIAS COUNT V3     ; every later COUNT token becomes V3
    : LOOP              ; open the label LOOP

Every instruction or data line belongs to the most recently opened label.
A line whose first token is a mnemonic is one 2-byte instruction; any other
line is raw data, one byte per token::

    : START
        CLS             ; 2 bytes at 0x200
        JP LOOP         ; 2 bytes at 0x202
    : SPRITE
        0xF0 0x90 0xF0  ; 3 bytes at 0x204

Address Assignment
------------------
Labels are laid out back to back from 0x200. ``START`` always comes first,
wherever it appears in the file; the others follow in declaration order.
Two scans do this: the first places START, the second places the rest.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from chip8_sdk.assembler.opcodes import INSTRUCTION_SIZE, is_mnemonic
from chip8_sdk.errors import (
    AddressOverflowError,
    DuplicateLabelError,
    MalformedDirectiveError,
    OrphanLineError,
    SourceLocation,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

COMMENT_DELIMITER = ";"
LABEL_DELIMITER = ":"
ALIAS_DIRECTIVE = ":ALIAS"

# Interpreters load programs at 0x200; 0x000-0x1FF held the interpreter itself
BASE_ADDRESS = 0x200
MAX_ADDRESS = 0xFFF

# Label placed at BASE_ADDRESS regardless of where it is declared
ENTRY_LABEL = "START"

DATA_BYTE_SIZE = 1


class OrphanPolicy(Enum):
    """What to do with lines that appear before the first label."""
    REJECT = "reject"      # raise OrphanLineError
    DISCARD = "discard"    # drop the line and log a warning


# =============================================================================
# Program Data Model
# =============================================================================

@dataclass(frozen=True)
class SourceLine:
    """
    One normalized source line.

    Attributes:
        index: 0-based line number in the source file
        text: Comment-stripped, comma-stripped, upper-cased text
    """
    index: int
    text: str

    @property
    def tokens(self) -> list[str]:
        return self.text.split()

    @property
    def is_directive(self) -> bool:
        return self.text.startswith(LABEL_DELIMITER)

    def size(self, aliases: Sequence["Alias"] = ()) -> int:
        """
        Bytes this line occupies in the program.

        The first token is resolved through ``aliases`` before deciding
        between a 2-byte instruction and raw data, since the encoder
        substitutes it the same way.
        """
        tokens = self.tokens
        if is_mnemonic(resolve_alias(tokens[0], aliases)):
            return INSTRUCTION_SIZE
        return DATA_BYTE_SIZE * len(tokens)


@dataclass(frozen=True)
class Alias:
    """
    Literal token substitution declared with :ALIAS.

    Attributes:
        source: Token to replace
        target: Replacement token
        index: Source line of the directive; only later lines are affected
    """
    source: str
    target: str
    index: int = -1


@dataclass
class JumpLabel:
    """
    A named run of instructions and data.

    Attributes:
        name: Label name (upper-cased)
        address: Absolute address, None until addresses are assigned
        size: Bytes occupied by the label's lines
        lines: The lines belonging to the label, in source order
        index: Source line of the label directive
    """
    name: str
    address: Optional[int] = None
    size: int = 0
    lines: list[SourceLine] = field(default_factory=list)
    index: int = 0

    def add_line(self, line: SourceLine, size: int) -> None:
        self.lines.append(line)
        self.size += size

    @property
    def address_hex(self) -> str:
        """Address as three uppercase hex digits."""
        if self.address is None:
            raise ValueError(f"label {self.name} has no address yet")
        return f"{self.address:03X}"

    @property
    def end(self) -> int:
        """First address after the label."""
        if self.address is None:
            raise ValueError(f"label {self.name} has no address yet")
        return self.address + self.size


@dataclass
class Program:
    """
    The preprocessed form of a source file.

    Attributes:
        lines: Instruction and data lines in source order (no directives)
        aliases: Alias table in declaration order
        labels: Label table in declaration order
        warnings: Lines dropped under OrphanPolicy.DISCARD
    """
    lines: list[SourceLine] = field(default_factory=list)
    aliases: list[Alias] = field(default_factory=list)
    labels: dict[str, JumpLabel] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Total program size in bytes."""
        return sum(label.size for label in self.labels.values())

    def layout(self) -> list[JumpLabel]:
        """Labels in address order."""
        return sorted(self.labels.values(), key=lambda label: label.address)

    def symbol_table(self) -> dict[str, int]:
        """Label name -> address."""
        return {name: label.address for name, label in self.labels.items()}


# =============================================================================
# Scan State
# =============================================================================

@dataclass(frozen=True)
class NoActiveLabel:
    """No label directive seen yet."""


@dataclass(frozen=True)
class ActiveLabel:
    """Lines are attached to the named label."""
    name: str


ScanState = Union[NoActiveLabel, ActiveLabel]


# =============================================================================
# Preprocessor
# =============================================================================

def normalize_line(raw: str) -> str:
    """
    Normalize one raw source line.

    Strips the comment, replaces commas with spaces, collapses whitespace
    and upper-cases. Returns an empty string for blank or comment-only lines.
    """
    text = raw.split(COMMENT_DELIMITER, 1)[0]
    text = text.replace(",", " ")
    return " ".join(text.split()).upper()


def resolve_alias(token: str, aliases: Sequence[Alias]) -> str:
    """Replace a token by the target of the latest matching alias, if any."""
    for alias in reversed(aliases):
        if token == alias.source:
            return alias.target
    return token


def label_names(tokens: Sequence[str]) -> list[str]:
    """Names following the label delimiter in ": NAME" or ":NAME"."""
    if tokens[0] == LABEL_DELIMITER:
        return list(tokens[1:])
    return [tokens[0][len(LABEL_DELIMITER):], *tokens[1:]]


class Preprocessor:
    """
    Builds a Program from source text.

    Attributes:
        filename: Name used in error locations
        orphan_policy: Handling of lines before the first label
    """

    def __init__(self, filename: str = "<input>",
                 orphan_policy: OrphanPolicy = OrphanPolicy.REJECT):
        self.filename = filename
        self.orphan_policy = orphan_policy

    def _location(self, line: SourceLine) -> SourceLocation:
        return SourceLocation(self.filename, line.index)

    def process(self, source: str) -> Program:
        """
        Preprocess a complete source text.

        Args:
            source: Assembly source

        Returns:
            The Program with all label addresses assigned

        Raises:
            MalformedDirectiveError: Directive with the wrong token count
            OrphanLineError: Code before the first label (REJECT policy)
            DuplicateLabelError: Label declared twice
            AddressOverflowError: Program does not fit in 12 bits
        """
        program = Program()
        state: ScanState = NoActiveLabel()

        for index, raw in enumerate(source.splitlines()):
            text = normalize_line(raw)
            if not text:
                continue
            line = SourceLine(index, text)

            if line.is_directive:
                state = self._directive(line, program, state)
            else:
                self._body_line(line, program, state)

        assign_addresses(program.labels, filename=self.filename)

        logger.debug(
            "Preprocessed %d lines: %d aliases, %d labels, %d bytes",
            len(program.lines), len(program.aliases),
            len(program.labels), program.size,
        )
        return program

    def _directive(self, line: SourceLine, program: Program,
                   state: ScanState) -> ScanState:
        """Handle a ':' line, returning the new scan state."""
        tokens = line.tokens

        if tokens[0] == ALIAS_DIRECTIVE:
            if len(tokens) != 3:
                raise MalformedDirectiveError(
                    line.text, "expected ':ALIAS <name> <replacement>'",
                    location=self._location(line), source_line=line.text,
                )
            alias = Alias(tokens[1], tokens[2], line.index)
            program.aliases.append(alias)
            logger.debug("Alias %s -> %s", alias.source, alias.target)
            return state

        names = label_names(tokens)
        if len(names) != 1:
            raise MalformedDirectiveError(
                line.text, "expected ': <label>'",
                location=self._location(line), source_line=line.text,
            )

        name = names[0]
        if name in program.labels:
            original = program.labels[name]
            raise DuplicateLabelError(
                name,
                original_location=SourceLocation(self.filename, original.index),
                location=self._location(line), source_line=line.text,
            )

        program.labels[name] = JumpLabel(name, index=line.index)
        logger.debug("Label %s opened at line %d", name, line.index)
        return ActiveLabel(name)

    def _body_line(self, line: SourceLine, program: Program,
                   state: ScanState) -> None:
        """Attach an instruction or data line to the active label."""
        if isinstance(state, NoActiveLabel):
            if self.orphan_policy is OrphanPolicy.REJECT:
                raise OrphanLineError(
                    line.text, location=self._location(line), source_line=line.text,
                )
            message = f"{self._location(line)}: discarding line outside of any label: {line.text}"
            program.warnings.append(message)
            logger.warning("%s", message)
            return

        # Every alias in the table so far was declared above this line
        program.labels[state.name].add_line(line, line.size(program.aliases))
        program.lines.append(line)


# =============================================================================
# Address Assignment
# =============================================================================

def assign_addresses(labels: dict[str, JumpLabel], base: int = BASE_ADDRESS,
                     filename: str = "<input>") -> int:
    """
    Lay labels out back to back starting at ``base``.

    The entry label is placed first; the others follow in declaration order.

    Args:
        labels: Label table in declaration order (modified in place)
        base: Address of the first label

    Returns:
        The first address after the last label

    Raises:
        AddressOverflowError: A label starts or ends beyond the 12-bit
            address space
    """
    cursor = base

    entry = labels.get(ENTRY_LABEL)
    if entry is not None:
        entry.address = cursor
        cursor += entry.size

    for label in labels.values():
        if label is entry:
            continue
        label.address = cursor
        cursor += label.size

    for label in labels.values():
        last = label.end - 1 if label.size else label.address
        if last > MAX_ADDRESS:
            raise AddressOverflowError(
                label.name, label.address, size=label.size,
                location=SourceLocation(filename, label.index),
            )
        logger.debug("Label %s at 0x%03X (%d bytes)", label.name, label.address, label.size)

    return cursor


def preprocess(source: str, filename: str = "<input>",
               orphan_policy: OrphanPolicy = OrphanPolicy.REJECT) -> Program:
    """
    Convenience function to preprocess source text.

    Returns:
        The Program with aliases collected and label addresses assigned
    """
    return Preprocessor(filename, orphan_policy).process(source)
