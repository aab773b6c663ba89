"""
BRISC Code Generator
====================

This module turns a parsed Program into BRISC machine words.

Assembly is two-pass:

Pass 1 (Symbol Collection)
--------------------------
Done by the parser: a linear scan that assigns one address per
instruction and records every label declaration in the SymbolTable.

Pass 2 (Code Generation)
------------------------
- Check the program fits instruction memory
- Resolve label operands through the SymbolTable
- Range-check every immediate, jump target and device id
- Pack each instruction into one 16-bit word

Nothing is emitted until every instruction has been encoded, so a failed
run never leaves partial output behind.

Output Formats
--------------
- Raw binary: big-endian 16-bit words, no header, no padding
- Listing file with addresses, words and source
- Symbol table file
"""

from pathlib import Path
from typing import Optional
import logging
import struct

from brisc_asm.assembler.parser import Instruction, Program
from brisc_asm.assembler.symbols import SymbolTable
from brisc_asm.config import AssemblerConfig
from brisc_asm.cpu import (
    IMM_MASK,
    IMM_MAX,
    IMM_MIN,
    IO_ID_MAX,
    IO_ID_SHIFT,
    OPCODE_SHIFT,
    REG_A_SHIFT,
    REG_B_SHIFT,
    InstructionFormat,
    device_ids,
    device_table,
)
from brisc_asm.errors import EncodingRangeError, ProgramSizeError

logger = logging.getLogger(__name__)


class CodeGenerator:
    """
    Generates BRISC machine words from a parsed Program.

    Usage:
        program, symbols = parse_source(source)
        codegen = CodeGenerator(config)
        words = codegen.generate(program, symbols)
        codegen.write_binary("output.bin")
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        """
        Initialize the code generator.

        Args:
            config: Assembler configuration (defaults used when None)
        """
        self._config = config or AssemblerConfig()
        self._words: tuple[int, ...] = ()
        self._program = Program()
        self._symbols = SymbolTable()

    # =========================================================================
    # Main Entry Point
    # =========================================================================

    def generate(self, program: Program, symbols: SymbolTable) -> tuple[int, ...]:
        """
        Encode every instruction of a program.

        Args:
            program: Parsed program (label operands may be unresolved)
            symbols: Symbol table produced while parsing

        Returns:
            One 16-bit word per instruction, in address order

        Raises:
            ProgramSizeError: If the program exceeds max_instructions
            UnresolvedLabelError: If a label operand was never declared
            EncodingRangeError: If a value does not fit its field
        """
        maximum = self._config.max_instructions
        if len(program) > maximum:
            raise ProgramSizeError(len(program), maximum)

        resolved = program.resolve(symbols)
        words = tuple(self._encode(inst) for inst in resolved)

        self._program = resolved
        self._symbols = symbols
        self._words = words
        logger.debug("encoded %d words", len(words))
        return words

    # =========================================================================
    # Instruction Encoding
    # =========================================================================

    def _encode(self, inst: Instruction) -> int:
        """Pack one resolved instruction into its word."""
        fmt = inst.info.format
        values = [op.value for op in inst.operands]
        word = int(inst.opcode) << OPCODE_SHIFT

        if fmt == InstructionFormat.NONE:
            return word

        if fmt == InstructionFormat.TARGET:
            return word | self._check_target(inst, 0)

        word |= values[0] << REG_A_SHIFT

        if fmt == InstructionFormat.REG:
            return word
        if fmt == InstructionFormat.REG_REG:
            return word | (values[1] << REG_B_SHIFT)
        if fmt == InstructionFormat.REG_IMM:
            return word | (self._check_immediate(inst, 1) & IMM_MASK)
        if fmt == InstructionFormat.REG_IO:
            return word | (self._check_device(inst, 1) << IO_ID_SHIFT)
        if fmt == InstructionFormat.REG_TARGET:
            return word | self._check_target(inst, 1)

        raise EncodingRangeError(
            f"no encoding for '{inst.mnemonic}'", inst.location, source_line=inst.source_line
        )

    def _range_error(
        self,
        inst: Instruction,
        index: int,
        message: str,
        hint: Optional[str] = None,
    ) -> EncodingRangeError:
        return EncodingRangeError(
            message,
            inst.operands[index].location,
            hint=hint,
            source_line=inst.source_line,
        )

    def _check_immediate(self, inst: Instruction, index: int) -> int:
        value = inst.operands[index].value
        if not IMM_MIN <= value <= IMM_MAX:
            raise self._range_error(
                inst, index,
                f"immediate {value} out of range ({IMM_MIN}..{IMM_MAX})",
            )
        return value

    def _check_target(self, inst: Instruction, index: int) -> int:
        value = inst.operands[index].value
        limit = self._config.max_instructions - 1
        if not 0 <= value <= limit:
            raise self._range_error(
                inst, index,
                f"jump target {value} out of range (0..{limit})",
            )
        return value

    def _check_device(self, inst: Instruction, index: int) -> int:
        value = inst.operands[index].value
        device = "source" if inst.mnemonic == "in" else "sink"
        if not 0 <= value <= IO_ID_MAX:
            raise self._range_error(
                inst, index,
                f"{device} id {value} out of range (0..{IO_ID_MAX})",
            )
        if self._config.strict_io and value not in device_ids(inst.mnemonic):
            known = ", ".join(
                f"{name}={id_}" for name, id_ in device_table(inst.mnemonic).items()
            )
            raise self._range_error(
                inst, index,
                f"no {device} with id {value}",
                hint=f"known {device}s: {known}",
            )
        return value

    # =========================================================================
    # Output Access
    # =========================================================================

    def get_words(self) -> tuple[int, ...]:
        """Return the generated words."""
        return self._words

    def get_code(self) -> bytes:
        """Return the generated words as a big-endian byte image."""
        return struct.pack(f">{len(self._words)}H", *self._words)

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of label names to addresses."""
        return self._symbols.as_dict()

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, words and source lines,
            followed by the symbol table.
        """
        lines = []
        lines.append("BRISC Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr  Code  Line  Source")
        lines.append("-" * 60)
        for inst, word in zip(self._program, self._words):
            lines.append(
                f"${inst.address:02X}   {word:04X}  {inst.location.line:4d}  {inst.text}"
            )
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, address in sorted(self.get_symbols().items()):
            lines.append(f"{name:20s} = ${address:02X}")
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Output File Writing
    # =========================================================================

    def write_binary(self, filepath: str | Path) -> None:
        """Write the raw big-endian word image."""
        code = self.get_code()
        with open(filepath, "wb") as f:
            f.write(code)
        logger.debug("wrote %d bytes to %s", len(code), filepath)

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.get_listing())

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line)
        """
        with open(filepath, "w", encoding="utf-8") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by brisc-asm\n")
            for name, address in sorted(self.get_symbols().items()):
                f.write(f"{name} ${address:02X}\n")
