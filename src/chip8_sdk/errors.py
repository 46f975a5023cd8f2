"""
CHIP-8 SDK Error Hierarchy
==========================

This module defines the exception hierarchy for the CHIP-8 SDK.
All exceptions inherit from Chip8Error, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
└── AssemblerError (assembler-related)
    ├── UnknownInstructionError - mnemonic/operand shape not in the table
    ├── InvalidRegisterError - operand is not a V0-VF register
    ├── InvalidNumberError - operand is not a recognised literal
    ├── UnknownLabelError - reference to an undefined label
    ├── IllegalOperandError - operand not allowed for this mnemonic
    ├── MalformedDirectiveError - directive with the wrong token count
    ├── OrphanLineError - code before the first label directive
    ├── DuplicateLabelError - label defined more than once
    ├── AddressOverflowError - label placed beyond the 12-bit address space
    └── TooManyErrors - error collector limit reached

Error messages follow this format:
    filename:line: error: description
        source_line_text
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 SDK errors.

    Example:
        try:
            assembler.assemble_file("game.c8s")
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line index (0-based, as printed in listings)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Chip8Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The normalized source text of the failing line (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            game.c8s:12: error: unknown label 'LOPO'
                JP LOPO
            hint: did you mean 'LOOP'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(self.message)

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def at(self, location: SourceLocation, source_line: str) -> "AssemblerError":
        """
        Attach source context to an error raised without it.

        The encoder works on bare token lists; the assembler knows which
        line it was encoding and fills the location in afterwards.
        """
        self.location = location
        self.source_line = source_line
        self.args = (self._format_message(),)
        return self


class UnknownInstructionError(AssemblerError):
    """
    Mnemonic, operand count, or operand shape not in the opcode table.

    Examples:
        NOP          ; no such mnemonic
        CLS V0       ; CLS takes no operands
    """

    def __init__(self, mnemonic: str, **kwargs):
        self.mnemonic = mnemonic
        super().__init__(f"Unknown instruction: {mnemonic}", **kwargs)


class InvalidRegisterError(AssemblerError):
    """
    Operand is not a register in the range V0-VF.

    Example:
        SHR 5        ; needs a register
        SHR V10      ; only sixteen registers exist
    """

    def __init__(self, token: str, **kwargs):
        self.token = token
        super().__init__(f"Invalid register: {token}", **kwargs)


class InvalidNumberError(AssemblerError):
    """Operand cannot be read as a hex, binary, legacy, octal or decimal literal."""

    def __init__(self, token: str, **kwargs):
        self.token = token
        super().__init__(f"Invalid number: {token}", **kwargs)


class UnknownLabelError(AssemblerError):
    """
    Reference to a label that was never declared.

    Similar label names are offered as a hint to help catch typos.
    """

    def __init__(
        self,
        name: str,
        similar_labels: Optional[list[str]] = None,
        **kwargs,
    ):
        self.name = name
        self.similar_labels = similar_labels or []

        if "hint" not in kwargs and self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            kwargs["hint"] = f"did you mean {suggestions}?"

        super().__init__(f"Unknown label: {name}", **kwargs)


class IllegalOperandError(AssemblerError):
    """
    Operand is well formed but not allowed for this mnemonic.

    Example:
        JP V1, 0x300 ; the offset jump only exists for V0
    """

    def __init__(self, mnemonic: str, token: str, **kwargs):
        self.mnemonic = mnemonic
        self.token = token
        kwargs.setdefault("hint", f"use V0 for {mnemonic} with an offset")
        super().__init__(f"{token} not available for {mnemonic}", **kwargs)


class MalformedDirectiveError(AssemblerError):
    """
    Directive line with the wrong number of tokens.

    Examples:
        :ALIAS COUNT          ; missing replacement
        : LOOP EXTRA          ; label names are a single token
    """

    def __init__(self, line: str, reason: str = "", **kwargs):
        self.line = line
        message = f"Malformed directive: {line}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, **kwargs)


class OrphanLineError(AssemblerError):
    """
    Code or data appearing before the first label directive.

    Every byte of a program belongs to a label so it can be placed; lines
    without one have no address.
    """

    def __init__(self, line: str, **kwargs):
        self.line = line
        kwargs.setdefault("hint", "add a label directive such as ': START' above it")
        super().__init__(f"Line outside of any label: {line}", **kwargs)


class DuplicateLabelError(AssemblerError):
    """Label declared more than once."""

    def __init__(
        self,
        name: str,
        original_location: Optional[SourceLocation] = None,
        **kwargs,
    ):
        self.name = name
        self.original_location = original_location
        if original_location:
            kwargs.setdefault("hint", f"'{name}' was first defined at {original_location}")
        super().__init__(f"Duplicate label: {name}", **kwargs)


class AddressOverflowError(AssemblerError):
    """Label placed or running past the end of the 12-bit address space."""

    def __init__(self, name: str, address: int, size: int = 0, **kwargs):
        self.name = name
        self.address = address
        self.size = size
        if size:
            message = (
                f"Label {name} at 0x{address:X} ({size} bytes) runs past "
                f"the 12-bit address space"
            )
        else:
            message = f"Label {name} at 0x{address:X} is outside the 12-bit address space"
        super().__init__(message, **kwargs)


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The assembler uses this to keep encoding after a bad line, so every
    broken line of a program is reported in one run.

    Example:
        collector = ErrorCollector(max_errors=100)

        try:
            for line in program.lines:
                ...
                collector.add(error)
        except TooManyErrors:
            pass

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"Too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def report(self) -> str:
        """
        Format all errors and warnings for display.

        Returns:
            Formatted string with all errors, warnings and a summary line
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()


class TooManyErrors(AssemblerError):
    """
    Raised when too many errors have been encountered.

    Stops encoding a source file that is fundamentally broken instead of
    reporting one error per line.
    """

    def __init__(self, message: str = "Too many errors"):
        super().__init__(message)
