"""
BRISC Assembly Language Parser
==============================

This module implements the parser for BRISC assembly language. It turns
the token stream of each source line into Instruction records and fills
the SymbolTable with label declarations.

Line Grammar
------------
```
line     := label_def* [instruction] EOL
label_def:= NAME ':'
instruction := MNEMONIC [operand (',' operand)*]
operand  := REGISTER | IMMEDIATE | LABEL
```

Operand Rules
-------------
| Mnemonic                       | Operands                     |
|--------------------------------|------------------------------|
| nop                            | (none)                       |
| add, sub, and, or, xor, sr, sl | register, register           |
| inv                            | register                     |
| ldi                            | register, immediate          |
| in, out                        | register, immediate or alias |
| jz, jlt                        | register, immediate or label |
| j                              | immediate or label           |

Label Resolution
----------------
Parsing is a single linear scan. Label declarations are entered into the
symbol table as they are met, bound to the address of the next
instruction. Label operands are kept by name. Only once the whole source
has been scanned are the references checked, so a label may be used
before or after its declaration. Program.resolve() then substitutes the
addresses.
"""

from dataclasses import dataclass, replace
from difflib import get_close_matches
from typing import Iterable, Iterator, Optional
import logging

from brisc_asm.assembler.lexer import Lexer, Token, TokenType
from brisc_asm.assembler.symbols import SymbolTable
from brisc_asm.config import AssemblerConfig
from brisc_asm.cpu import (
    MNEMONICS,
    NUM_REGISTERS,
    InstructionFormat,
    InstructionInfo,
    Opcode,
    OperandKind,
    device_table,
    get_instruction_info,
    is_valid_register,
)
from brisc_asm.errors import ParseError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass(frozen=True)
class Operand:
    """
    Instruction operand.

    Attributes:
        kind: REGISTER, IMMEDIATE or LABEL
        value: Register index, integer value, or label name
        location: Where the operand appears in source
    """
    kind: OperandKind
    value: int | str
    location: SourceLocation

    def __str__(self) -> str:
        if self.kind == OperandKind.REGISTER:
            return f"r{self.value}"
        return str(self.value)


@dataclass(frozen=True)
class Statement:
    """
    Base class for all parsed statements.

    Every statement has a source location for error reporting.
    """
    location: SourceLocation


@dataclass(frozen=True)
class LabelDef(Statement):
    """
    Label declaration.

    Attributes:
        name: Label name without the colon
        address: Address of the next instruction, or the end-of-program
            address when no instruction follows
    """
    name: str
    address: int


@dataclass(frozen=True)
class Instruction(Statement):
    """
    Machine instruction statement.

    Attributes:
        mnemonic: Instruction mnemonic as written
        opcode: 4-bit opcode
        operands: Operands in source order
        address: Word index of the instruction
        source_line: Full text of the source line
    """
    mnemonic: str
    opcode: Opcode
    operands: tuple[Operand, ...]
    address: int
    source_line: str = ""

    @property
    def info(self) -> InstructionInfo:
        return get_instruction_info(self.mnemonic)

    @property
    def text(self) -> str:
        """Source line with comment and surrounding whitespace removed."""
        return self.source_line.split(Lexer.COMMENT_CHAR, 1)[0].strip()

    @property
    def is_resolved(self) -> bool:
        return all(op.kind != OperandKind.LABEL for op in self.operands)

    def __str__(self) -> str:
        if not self.operands:
            return self.mnemonic
        return f"{self.mnemonic} " + ", ".join(str(op) for op in self.operands)


# =============================================================================
# Program
# =============================================================================

@dataclass(frozen=True)
class Program:
    """
    Ordered, immutable sequence of instructions.

    Attributes:
        instructions: Instructions in address order
        labels: Label declarations in source order
    """
    instructions: tuple[Instruction, ...] = ()
    labels: tuple[LabelDef, ...] = ()

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    @property
    def end_address(self) -> int:
        """Address one past the last instruction."""
        return len(self.instructions)

    @property
    def is_resolved(self) -> bool:
        return all(inst.is_resolved for inst in self.instructions)

    def references(self) -> Iterator[tuple[Instruction, Operand]]:
        """Yield every label operand with its instruction, in program order."""
        for inst in self.instructions:
            for operand in inst.operands:
                if operand.kind == OperandKind.LABEL:
                    yield inst, operand

    def check_references(self, symbols: SymbolTable) -> None:
        """
        Verify that every label operand names a declared label.

        Raises:
            UnresolvedLabelError: For the first undeclared reference
        """
        for inst, operand in self.references():
            symbols.resolve(operand.value, operand.location, inst.source_line)

    def resolve(self, symbols: SymbolTable) -> "Program":
        """
        Return a copy with every label operand replaced by its address.

        Raises:
            UnresolvedLabelError: For the first undeclared reference
        """
        resolved = []
        for inst in self.instructions:
            if inst.is_resolved:
                resolved.append(inst)
                continue
            operands = tuple(
                replace(
                    op,
                    kind=OperandKind.IMMEDIATE,
                    value=symbols.resolve(op.value, op.location, inst.source_line),
                )
                if op.kind == OperandKind.LABEL else op
                for op in inst.operands
            )
            resolved.append(replace(inst, operands=operands))
        return Program(tuple(resolved), self.labels)


# =============================================================================
# Parser Implementation
# =============================================================================

def _describe(token: Token) -> str:
    """Describe a token for error messages."""
    if token.type == TokenType.EOL:
        return "end of line"
    if token.type == TokenType.COMMA:
        return "','"
    if token.type == TokenType.REGISTER:
        return f"register 'r{token.value}'"
    if token.type == TokenType.IMMEDIATE:
        return f"immediate '{token.value}'"
    if token.type == TokenType.LABEL_DEF:
        return f"label declaration '{token.value}:'"
    if token.type == TokenType.LABEL:
        return f"label '{token.value}'"
    return f"'{token.value}'"


def _operand_count(count: int) -> str:
    return f"{count} operand" if count == 1 else f"{count} operands"


class Parser:
    """
    Parses BRISC assembly source into a Program and a SymbolTable.

    A Parser can be reused; each call to parse() starts from empty state.

    Usage:
        parser = Parser("program.basm")
        program, symbols = parser.parse(source.split("\\n"))
    """

    def __init__(self, filename: str = "<input>", config: Optional[AssemblerConfig] = None):
        """
        Initialize the parser.

        Args:
            filename: Source filename for error reporting
            config: Assembler configuration (defaults used when None)
        """
        self._filename = filename
        self._config = config or AssemblerConfig()
        self._symbols = SymbolTable()
        self._instructions: list[Instruction] = []
        self._labels: list[LabelDef] = []
        self._tokens: list[Token] = []
        self._pos = 0
        self._source_line = ""

    def parse(self, lines: Iterable[str]) -> tuple[Program, SymbolTable]:
        """
        Parse all source lines.

        Args:
            lines: Source lines in order (line numbers start at 1)

        Returns:
            The Program (label operands still unresolved) and the
            SymbolTable holding every declaration

        Raises:
            LexError: If a line contains a malformed token
            ParseError: If a line is not a valid statement
            DuplicateLabelError: If a label is declared twice
            UnresolvedLabelError: If a referenced label is never declared
        """
        self._symbols = SymbolTable()
        self._instructions = []
        self._labels = []

        for line_number, line in enumerate(lines, start=1):
            lexer = Lexer(line, line_number, self._filename)
            self._tokens = list(lexer.tokenize())
            self._pos = 0
            self._source_line = lexer.line
            self._parse_line()

        program = Program(tuple(self._instructions), tuple(self._labels))
        program.check_references(self._symbols)

        logger.debug(
            "parsed %s: %d instructions, %d labels",
            self._filename, len(program), len(self._symbols),
        )
        return program, self._symbols

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._current()
        if token.type != TokenType.EOL:
            self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        if self._check(*types):
            return self._advance()
        return None

    def _error(self, message: str, token: Token, hint: Optional[str] = None) -> ParseError:
        return ParseError(message, token.location, hint=hint, source_line=self._source_line)

    # =========================================================================
    # Line Parsing
    # =========================================================================

    def _parse_line(self) -> None:
        """Parse leading label declarations and an optional instruction."""
        while label := self._match(TokenType.LABEL_DEF):
            self._define_label(label)

        if self._check(TokenType.EOL):
            return

        if not self._check(TokenType.MNEMONIC):
            token = self._current()
            raise self._error(f"expected an instruction, found {_describe(token)}", token)

        self._instructions.append(self._parse_instruction())

    def _define_label(self, token: Token) -> None:
        name = token.value
        if Lexer.REGISTER_PATTERN.fullmatch(name):
            raise self._error(
                f"label name '{name}' collides with a register name", token
            )

        address = len(self._instructions)
        self._symbols.define(name, address, token.location, self._source_line)
        self._labels.append(LabelDef(location=token.location, name=name, address=address))

    # =========================================================================
    # Instruction Parsing
    # =========================================================================

    def _parse_instruction(self) -> Instruction:
        mnemonic_token = self._advance()
        mnemonic = mnemonic_token.value

        info = get_instruction_info(mnemonic)
        if info is None:
            similar = get_close_matches(mnemonic, sorted(MNEMONICS), n=3, cutoff=0.6)
            if not similar and mnemonic.lower() in MNEMONICS:
                similar = [mnemonic.lower()]
            hint = None
            if similar:
                hint = "did you mean " + ", ".join(f"'{s}'" for s in similar) + "?"
            raise self._error(f"unknown mnemonic '{mnemonic}'", mnemonic_token, hint=hint)

        operands = []
        for position, kinds in enumerate(info.operands):
            if position > 0:
                self._expect_separator(info, position)
            operands.append(self._parse_operand(info, kinds, position))

        if not self._check(TokenType.EOL):
            token = self._current()
            if token.type == TokenType.COMMA and info.arity and self._peek_type() == TokenType.EOL:
                raise self._error("trailing ',' after last operand", token)
            raise self._error(
                f"'{mnemonic}' takes {_operand_count(info.arity)}, "
                f"found extra {_describe(token)}",
                token,
            )

        return Instruction(
            location=mnemonic_token.location,
            mnemonic=mnemonic,
            opcode=info.opcode,
            operands=tuple(operands),
            address=len(self._instructions),
            source_line=self._source_line,
        )

    def _peek_type(self) -> TokenType:
        return self._tokens[min(self._pos + 1, len(self._tokens) - 1)].type

    def _expect_separator(self, info: InstructionInfo, position: int) -> None:
        token = self._current()
        if token.type == TokenType.COMMA:
            self._advance()
            return
        if token.type == TokenType.EOL:
            raise self._error(
                f"'{info.mnemonic}' expects {_operand_count(info.arity)}, found {position}",
                token,
            )
        raise self._error(f"expected ',' between operands, found {_describe(token)}", token)

    def _parse_operand(
        self,
        info: InstructionInfo,
        kinds: frozenset[OperandKind],
        position: int,
    ) -> Operand:
        """Parse the operand at `position` and check it against `kinds`."""
        token = self._current()

        if token.type == TokenType.EOL:
            raise self._error(
                f"'{info.mnemonic}' expects {_operand_count(info.arity)}, found {position}",
                token,
            )
        if token.type == TokenType.COMMA:
            raise self._error(f"expected an operand, found {_describe(token)}", token)

        self._advance()

        if token.type == TokenType.REGISTER and OperandKind.REGISTER in kinds:
            if not is_valid_register(token.value):
                raise self._error(
                    f"register 'r{token.value}' out of range (r0-r{NUM_REGISTERS - 1})",
                    token,
                )
            return Operand(OperandKind.REGISTER, token.value, token.location)

        if token.type == TokenType.IMMEDIATE and OperandKind.IMMEDIATE in kinds:
            return Operand(OperandKind.IMMEDIATE, token.value, token.location)

        if token.type == TokenType.LABEL:
            if info.format == InstructionFormat.REG_IO and OperandKind.IMMEDIATE in kinds:
                return self._parse_device_alias(info, token)
            if OperandKind.LABEL in kinds:
                return Operand(OperandKind.LABEL, token.value, token.location)

        if token.type == TokenType.LABEL_DEF:
            raise self._error(
                f"label declaration '{token.value}:' must start the line", token
            )

        expected = " or ".join(str(kind) for kind in sorted(kinds, key=lambda k: k.value))
        raise self._error(
            f"operand {position + 1} of '{info.mnemonic}' must be {expected}, "
            f"found {_describe(token)}",
            token,
        )

    def _parse_device_alias(self, info: InstructionInfo, token: Token) -> Operand:
        """Turn a symbolic source/sink name into its numeric id."""
        table = device_table(info.mnemonic)
        device = "source" if info.mnemonic == "in" else "sink"
        if token.value not in table:
            raise self._error(
                f"unknown {device} '{token.value}'",
                token,
                hint=f"known {device}s: " + ", ".join(table),
            )
        return Operand(OperandKind.IMMEDIATE, table[token.value], token.location)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    filename: str = "<input>",
    config: Optional[AssemblerConfig] = None,
) -> tuple[Program, SymbolTable]:
    """
    Convenience function to parse assembly source.

    Args:
        source: Assembly source text
        filename: Source filename for error messages
        config: Assembler configuration

    Returns:
        The parsed Program and its SymbolTable
    """
    return Parser(filename, config).parse(source.split("\n"))
