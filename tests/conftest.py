"""
BRISC Assembler - Test Configuration
====================================

Shared fixtures for the assembler test suite.

It provides:
- A word decoder used to check encodings from the other direction
- A helper that writes a source file into a temporary directory
"""

from pathlib import Path

import pytest

from brisc_asm.cpu import (
    FIELD_MASK,
    IMM_MASK,
    IO_ID_SHIFT,
    OPCODE_SHIFT,
    OPCODE_TO_INFO,
    REG_A_SHIFT,
    REG_B_SHIFT,
    InstructionFormat,
    Opcode,
)


def decode_word(word: int) -> tuple[str, tuple]:
    """
    Decode one instruction word into (mnemonic, operands).

    Registers come back as "rN" strings, immediates, ids and targets as
    ints. ldi immediates are sign-extended.
    """
    info = OPCODE_TO_INFO[Opcode((word >> OPCODE_SHIFT) & FIELD_MASK)]
    ra = f"r{(word >> REG_A_SHIFT) & FIELD_MASK}"
    low = word & IMM_MASK

    fmt = info.format
    if fmt == InstructionFormat.NONE:
        operands = ()
    elif fmt == InstructionFormat.REG:
        operands = (ra,)
    elif fmt == InstructionFormat.REG_REG:
        operands = (ra, f"r{(word >> REG_B_SHIFT) & FIELD_MASK}")
    elif fmt == InstructionFormat.REG_IMM:
        operands = (ra, low - 0x100 if low & 0x80 else low)
    elif fmt == InstructionFormat.REG_IO:
        operands = (ra, (word >> IO_ID_SHIFT) & FIELD_MASK)
    elif fmt == InstructionFormat.REG_TARGET:
        operands = (ra, low)
    else:
        operands = (low,)
    return info.mnemonic, operands


@pytest.fixture
def decode():
    """Fixture: the word decoder."""
    return decode_word


@pytest.fixture
def write_source(tmp_path):
    """
    Fixture: write assembly source to a file under tmp_path.

    Returns a function (text, name="program.basm") -> Path.
    """
    def _write(text: str, name: str = "program.basm") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
