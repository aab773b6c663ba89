"""
BRISC Assembly Language Lexer
=============================

This module implements the lexer (tokenizer) for BRISC assembly language.
It converts one line of source text into a stream of classified tokens.
Lines are independent: the lexer keeps no state from one line to the next.

Token Types
-----------
- MNEMONIC: First identifier on a line (after any label declarations)
- REGISTER: r0, r1, ... (index not range-checked here)
- IMMEDIATE: Decimal integer with optional sign (12, -3, +7)
- LABEL_DEF: Label declaration (loop:)
- LABEL: Identifier used as an operand (a label reference)
- COMMA: Operand separator
- EOL: End of line (always the last token)

Comments
--------
Everything from a semicolon to the end of the line is ignored.

Example
-------
>>> from brisc_asm.assembler.lexer import Lexer
>>> for token in Lexer("loop: jz r0, loop  ; spin", 3).tokenize():
...     print(token)
Token(LABEL_DEF, 'loop', 3:1)
Token(MNEMONIC, 'jz', 3:7)
Token(REGISTER, 0, 3:10)
Token(COMMA, 3:12)
Token(LABEL, 'loop', 3:14)
Token(EOL, 3:20)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator
import re

from brisc_asm.errors import LexError, SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for BRISC assembly language."""

    # Structural tokens
    COMMA = auto()       # Operand separator
    EOL = auto()         # End of line

    # Values
    MNEMONIC = auto()    # Instruction name
    REGISTER = auto()    # r<index>
    IMMEDIATE = auto()   # Integer literal
    LABEL_DEF = auto()   # name:
    LABEL = auto()       # Label reference


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        value: Register index or integer for REGISTER/IMMEDIATE, name for
            MNEMONIC/LABEL/LABEL_DEF, None for COMMA/EOL
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes one line of BRISC assembly source.

    Words are separated by whitespace and commas. A colon ends a word, so
    `loop:add r0, r1` lexes the same as `loop: add r0, r1`. Each word is
    then classified against the token grammars; a word that matches none
    of them is a LexError.

    Usage:
        lexer = Lexer(line_text, line_number, filename)
        tokens = list(lexer.tokenize())
    """

    REGISTER_PATTERN = re.compile(r"r([0-9]+)")
    IMMEDIATE_PATTERN = re.compile(r"[+-]?[0-9]+")
    IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

    COMMENT_CHAR = ";"
    SEPARATOR_CHAR = ","
    LABEL_SUFFIX = ":"

    def __init__(self, line: str, line_number: int = 1, filename: str = "<input>"):
        """
        Initialize the lexer with one line of source.

        Args:
            line: Source text of the line (a trailing newline is ignored)
            line_number: 1-based line number for locations
            filename: Name of the source file (for error messages)
        """
        self.line = line.rstrip("\r\n")
        self.line_number = line_number
        self.filename = filename

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens for the line.

        Each call starts again from the beginning of the line and keeps its
        own position, so several generators over one Lexer are independent.

        Yields:
            Token objects, always ending with an EOL token

        Raises:
            LexError: If a word matches no token grammar
        """
        pos = 0
        expect_mnemonic = True

        while pos < len(self.line):
            char = self.line[pos]

            if char.isspace():
                pos += 1
                continue

            if char == self.COMMENT_CHAR:
                break

            if char == self.SEPARATOR_CHAR:
                yield self._make_token(TokenType.COMMA, None, pos + 1)
                pos += 1
                continue

            end = self._word_end(pos)
            token = self._classify(self.line[pos:end], pos + 1, expect_mnemonic)
            if token.type != TokenType.LABEL_DEF:
                expect_mnemonic = False
            pos = end
            yield token

        yield self._make_token(TokenType.EOL, None, pos + 1)

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(self, token_type: TokenType, value: str | int | None, column: int) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=self.line_number,
            column=column,
            filename=self.filename,
        )

    def _error(self, text: str, column: int, message: str | None = None) -> LexError:
        location = SourceLocation(self.filename, self.line_number, column)
        return LexError(text, location, source_line=self.line, message=message)

    # =========================================================================
    # Word Scanning
    # =========================================================================

    def _word_end(self, start: int) -> int:
        """Return the index just past the word starting at `start`."""
        pos = start
        while pos < len(self.line):
            char = self.line[pos]
            if char.isspace() or char in (self.COMMENT_CHAR, self.SEPARATOR_CHAR):
                break
            pos += 1
            if char == self.LABEL_SUFFIX:
                break
        return pos

    def _parse_int(self, digits: str, word: str, column: int) -> int:
        try:
            return int(digits)
        except ValueError:
            # int() refuses strings past the interpreter's digit limit
            raise self._error(word, column, f"malformed integer literal '{word}'") from None

    def _classify(self, word: str, column: int, expect_mnemonic: bool) -> Token:
        """
        Classify one word.

        Args:
            word: The word text
            column: 1-based column of its first character
            expect_mnemonic: True while no instruction name has been seen on
                this line, so a bare identifier names the instruction.
        """
        if word.endswith(self.LABEL_SUFFIX):
            name = word[:-1]
            if not self.IDENTIFIER_PATTERN.fullmatch(name):
                raise self._error(word, column, f"invalid label name '{name}'")
            return self._make_token(TokenType.LABEL_DEF, name, column)

        if match := self.REGISTER_PATTERN.fullmatch(word):
            index = self._parse_int(match.group(1), word, column)
            return self._make_token(TokenType.REGISTER, index, column)

        if self.IMMEDIATE_PATTERN.fullmatch(word):
            return self._make_token(TokenType.IMMEDIATE, self._parse_int(word, word, column), column)

        if self.IDENTIFIER_PATTERN.fullmatch(word):
            token_type = TokenType.MNEMONIC if expect_mnemonic else TokenType.LABEL
            return self._make_token(token_type, word, column)

        if word[:1] in "+-0123456789":
            raise self._error(word, column, f"malformed integer literal '{word}'")
        raise self._error(word, column)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize_source(source: str, filename: str = "<input>") -> Iterator[Token]:
    """
    Tokenize a whole source text line by line.

    Args:
        source: Assembly source text
        filename: Source filename for locations

    Yields:
        Tokens for every line, each line ending with EOL
    """
    for line_number, line in enumerate(source.split("\n"), start=1):
        yield from Lexer(line, line_number, filename).tokenize()
