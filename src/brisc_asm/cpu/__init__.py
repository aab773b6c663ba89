"""
BRISC CPU Package
=================

Instruction set definitions used by the assembler: opcodes, operand
rules, register range, word layout and the device tables for `in`/`out`.

Usage:
    from brisc_asm.cpu import (
        Opcode,
        OPCODE_TABLE,
        get_instruction_info,
    )
"""

from brisc_asm.cpu.brisc import (
    # Machine constants
    WORD_BITS,
    WORD_BYTES,
    WORD_MASK,
    NUM_REGISTERS,
    OPCODE_SHIFT,
    REG_A_SHIFT,
    REG_B_SHIFT,
    IO_ID_SHIFT,
    FIELD_MASK,
    IMM_MASK,
    IMM_MIN,
    IMM_MAX,
    IO_ID_MAX,
    # Core types
    Opcode,
    OperandKind,
    InstructionFormat,
    InstructionInfo,
    # Instruction database
    OPCODE_TABLE,
    OPCODE_TO_INFO,
    MNEMONICS,
    JUMP_INSTRUCTIONS,
    IO_INSTRUCTIONS,
    # Devices
    SOURCES,
    SINKS,
    # Lookup functions
    get_instruction_info,
    is_valid_register,
    device_table,
    device_ids,
)

__all__ = [
    "WORD_BITS",
    "WORD_BYTES",
    "WORD_MASK",
    "NUM_REGISTERS",
    "OPCODE_SHIFT",
    "REG_A_SHIFT",
    "REG_B_SHIFT",
    "IO_ID_SHIFT",
    "FIELD_MASK",
    "IMM_MASK",
    "IMM_MIN",
    "IMM_MAX",
    "IO_ID_MAX",
    "Opcode",
    "OperandKind",
    "InstructionFormat",
    "InstructionInfo",
    "OPCODE_TABLE",
    "OPCODE_TO_INFO",
    "MNEMONICS",
    "JUMP_INSTRUCTIONS",
    "IO_INSTRUCTIONS",
    "SOURCES",
    "SINKS",
    "get_instruction_info",
    "is_valid_register",
    "device_table",
    "device_ids",
]
