"""
BRISC Assembler Error Hierarchy
===============================

This module defines the exception hierarchy for the BRISC assembler.
All exceptions inherit from BriscError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
BriscError (base)
└── AssemblerError (assembly-related)
    ├── LexError - malformed token in source
    ├── ParseError - arity/kind mismatch, unknown mnemonic, bad register
    ├── DuplicateLabelError - label declared more than once
    ├── UnresolvedLabelError - reference to a label never declared
    └── EncodingRangeError - value too large for its instruction field
        └── ProgramSizeError - program does not fit instruction memory

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class BriscError(Exception):
    """
    Base exception for all BRISC assembler errors.

        try:
            assembler.assemble_file("program.basm")
        except BriscError as e:
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
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(BriscError):
    """
    Base exception for all assembly errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
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

    @property
    def line(self) -> Optional[int]:
        """Line number the error originated from, if known."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.basm:4:8: error: undefined label 'lop'
                jz r0, lop
                       ^
            hint: did you mean 'loop'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexError(AssemblerError):
    """
    A word in the source matches no token grammar.

    Examples:
        - Malformed numeric literal (12ab)
        - Label declaration with an invalid name (3:)
        - Unexpected character ($5)
    """

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            message or f"invalid token '{text}'",
            location=location,
            source_line=source_line,
        )


class ParseError(AssemblerError):
    """
    The token stream does not form a valid statement.

    Raised for unknown mnemonics, wrong operand count or kind, missing
    separators and register indices outside the machine's range.
    """
    pass


class DuplicateLabelError(AssemblerError):
    """
    Label declared more than once.

    Includes the location of the original declaration when available.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first declared at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnresolvedLabelError(AssemblerError):
    """
    Reference to a label that is never declared.

    Raised once the whole file has been scanned. Similarly named labels
    are offered as a hint to catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class EncodingRangeError(AssemblerError):
    """
    A literal or resolved address does not fit its instruction field.

    Values are never truncated; the whole assembly fails instead.
    """
    pass


class ProgramSizeError(EncodingRangeError):
    """
    The program has more instructions than the instruction memory holds.
    """

    def __init__(self, count: int, maximum: int):
        self.count = count
        self.maximum = maximum
        super().__init__(
            f"program has {count} instructions, maximum is {maximum}",
            hint="split the program or raise max_instructions",
        )
