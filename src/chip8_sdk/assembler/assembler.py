"""
CHIP-8 Assembler - Main Interface
=================================

This module provides the main Assembler class, which is the primary interface
for assembling CHIP-8 source code. It runs the preprocessor once, then
encodes the program line by line.

Example Usage
-------------
>>> from chip8_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... : START
...     CLS
... : LOOP
...     JP LOOP
... ''')
>>> result.words
['00E0', '1202']
>>> print(result.listing())
 CLS                            | 00E0
 JP LOOP                        | 1202

Command-Line Usage
------------------
The assembler can also be invoked from the command line:

    $ c8asm game.c8s -o game.lst -s game.sym

Options:
    -o, --output FILE      Write the listing to FILE instead of stdout
    -s, --symbols FILE     Write the label table
    --fail-fast            Stop at the first bad line
    --allow-orphans        Drop lines before the first label instead of failing
    -v, --verbose          Debug logging
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from chip8_sdk.assembler.encoder import encode_line
from chip8_sdk.assembler.preprocessor import (
    OrphanPolicy,
    Preprocessor,
    Program,
    SourceLine,
)
from chip8_sdk.errors import (
    AssemblerError,
    ErrorCollector,
    SourceLocation,
    TooManyErrors,
)

logger = logging.getLogger(__name__)

# Width of the source column in listings
LISTING_COLUMN_WIDTH = 30


# =============================================================================
# Assembly Results
# =============================================================================

@dataclass(frozen=True)
class EncodedLine:
    """A source line together with its encoding."""
    line: SourceLine
    code: str

    def format(self) -> str:
        return f" {self.line.text:{LISTING_COLUMN_WIDTH}} | {self.code}"


@dataclass(frozen=True)
class LineError:
    """A source line that could not be encoded."""
    line: SourceLine
    error: AssemblerError

    def format(self) -> str:
        return f"Error on line {self.line.index} ({self.line.text}) | {self.error.message}"


@dataclass
class AssemblyResult:
    """
    Outcome of assembling one source.

    Attributes:
        program: The preprocessed program
        encoded: Successfully encoded lines, in source order
        errors: Lines that failed to encode, in source order
    """
    program: Program
    encoded: list[EncodedLine] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def words(self) -> list[str]:
        """Encoded hex strings, in source order."""
        return [entry.code for entry in self.encoded]

    @property
    def hex(self) -> str:
        """All encoded output concatenated."""
        return "".join(self.words)

    def entries(self) -> list[EncodedLine | LineError]:
        """Encoded lines and errors interleaved in source order."""
        merged: list[EncodedLine | LineError] = [*self.encoded, *self.errors]
        return sorted(merged, key=lambda entry: entry.line.index)

    def listing(self) -> str:
        """One formatted line per processed source line, errors included."""
        return "\n".join(entry.format() for entry in self.entries())


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main CHIP-8 assembler class.

    Attributes:
        orphan_policy: Handling of lines before the first label
        fail_fast: Stop at the first line that fails to encode
        max_errors: Error limit when collecting errors
    """

    def __init__(self, orphan_policy: OrphanPolicy = OrphanPolicy.REJECT,
                 fail_fast: bool = False,
                 max_errors: int = 100):
        """
        Initialize the assembler.

        Args:
            orphan_policy: REJECT (default) fails on lines before the first
                label; DISCARD drops them with a warning
            fail_fast: If True, stop encoding at the first bad line. Otherwise
                every line is encoded and all errors are reported together.
            max_errors: Maximum errors collected before giving up
        """
        self._orphan_policy = orphan_policy
        self._fail_fast = fail_fast
        self._max_errors = max_errors
        self._errors = ErrorCollector(max_errors=max_errors)
        self._result: Optional[AssemblyResult] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source code from a string.

        Preprocessing errors (malformed directives, orphan lines, duplicate
        labels) are raised, since no line can be placed without a complete
        label table. Encoding errors are line-local and collected.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The AssemblyResult

        Raises:
            AssemblerError: If preprocessing fails
        """
        self._errors.clear()
        self._result = None

        program = Preprocessor(filename, self._orphan_policy).process(source)
        result = AssemblyResult(program)
        for warning in program.warnings:
            self._errors.add_warning(warning)

        for line in program.lines:
            try:
                code = encode_line(line, program.aliases, program.labels)
            except AssemblerError as e:
                e.at(SourceLocation(filename, line.index), line.text)
                result.errors.append(LineError(line, e))
                logger.debug("Line %d failed: %s", line.index, e.message)
                try:
                    self._errors.add(e)
                except TooManyErrors:
                    logger.warning("Too many errors (%d), stopping", self._max_errors)
                    break
                if self._fail_fast:
                    break
                continue

            result.encoded.append(EncodedLine(line, code))

        logger.debug(
            "Encoded %d lines (%d bytes), %d errors",
            len(result.encoded), len(result.hex) // 2, len(result.errors),
        )

        self._result = result
        return result

    def assemble_file(self, filepath: str | Path) -> AssemblyResult:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If preprocessing fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        logger.debug("Assembling %s", filepath)
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _require_result(self) -> AssemblyResult:
        if self._result is None:
            raise AssemblerError("nothing has been assembled yet")
        return self._result

    def get_program(self) -> Program:
        return self._require_result().program

    def get_words(self) -> list[str]:
        return self._require_result().words

    def get_symbols(self) -> dict[str, int]:
        """
        Get the label table.

        Returns:
            Dictionary mapping label names to addresses, in declaration order
        """
        return self._require_result().program.symbol_table()

    def get_listing(self) -> str:
        return self._require_result().listing()

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write the listing (source column, " | ", encoding) to a file.

        Args:
            filepath: Output file path
        """
        Path(filepath).write_text(self.get_listing() + "\n")
        logger.debug("Wrote listing to %s", filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write the label table, one label per line in address order.

        Format:
            START                          $200   2 bytes
        """
        program = self.get_program()
        lines = [
            f"{label.name:{LISTING_COLUMN_WIDTH}} ${label.address_hex}  {label.size:3d} bytes"
            for label in program.layout()
        ]
        Path(filepath).write_text("\n".join(lines) + "\n")
        logger.debug("Wrote %d symbols to %s", len(lines), filepath)

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        return self._errors.has_errors()

    def get_errors(self) -> list[AssemblerError]:
        return list(self._errors.errors)

    def get_error_report(self) -> str:
        return self._errors.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             orphan_policy: OrphanPolicy = OrphanPolicy.REJECT) -> AssemblyResult:
    """
    Convenience function to assemble source code.

    Raises:
        AssemblerError: If preprocessing fails
    """
    asm = Assembler(orphan_policy=orphan_policy)
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path,
                  orphan_policy: OrphanPolicy = OrphanPolicy.REJECT) -> AssemblyResult:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If preprocessing fails
        FileNotFoundError: If source file not found
    """
    asm = Assembler(orphan_policy=orphan_policy)
    return asm.assemble_file(filepath)
