"""
BRISC Instruction Set Definition
================================

This module defines the BRISC instruction set: opcodes, operand rules,
the register file and the fixed 16-bit word layout shared by every
instruction.

Word Layout
-----------
Every instruction is one 16-bit word, written big-endian:

```
 15   12 11    8 7     4 3     0
+-------+-------+-------+-------+
| opcode|  rA   |     imm8      |   REG_IMM, REG_TARGET, TARGET
| opcode|  rA   |  rB   |   0   |   REG_REG
| opcode|  rA   |  id   |   0   |   REG_IO
| opcode|  rA   |   0   |   0   |   REG
| opcode|   0   |   0   |   0   |   NONE
+-------+-------+-------+-------+
```

Unused fields are always zero. `j` has no register operand, so its rA
field is zero.

Operand Kinds
-------------
| Kind      | Syntax   | Example |
|-----------|----------|---------|
| REGISTER  | r0..r15  | r3      |
| IMMEDIATE | [+-]digits | -12   |
| LABEL     | name     | loop    |

Devices
-------
`in` reads from a source, `out` writes to a sink. Both take a numeric id
in the 4-bit id field. The SOURCES and SINKS tables name the devices on
the reference board; they double as symbolic aliases in source code.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

WORD_BITS = 16
WORD_BYTES = WORD_BITS // 8
WORD_MASK = (1 << WORD_BITS) - 1

NUM_REGISTERS = 16

OPCODE_SHIFT = 12
REG_A_SHIFT = 8
REG_B_SHIFT = 4
IO_ID_SHIFT = 4
FIELD_MASK = 0xF
IMM_MASK = 0xFF

# ldi stores a signed byte
IMM_MIN = -128
IMM_MAX = 127

# in/out ids use a 4-bit field
IO_ID_MAX = FIELD_MASK


# =============================================================================
# Opcodes
# =============================================================================

class Opcode(IntEnum):
    """
    4-bit opcode values.

    Opcode 4 is unassigned on the reference machine.
    """
    NOP = 0
    ADD = 1
    LDI = 2
    SUB = 3
    AND = 5
    OR = 6
    INV = 7
    XOR = 8
    SR = 9
    SL = 10
    IN = 11
    OUT = 12
    JZ = 13
    JLT = 14
    J = 15


class OperandKind(Enum):
    """Kinds of value an operand position may hold."""
    REGISTER = auto()
    IMMEDIATE = auto()
    LABEL = auto()

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return self.name.lower()


class InstructionFormat(Enum):
    """How an instruction's operands are packed into its word."""
    NONE = auto()        # nop
    REG_REG = auto()     # add rA, rB
    REG = auto()         # inv rA
    REG_IMM = auto()     # ldi rA, imm8
    REG_IO = auto()      # in rA, source
    REG_TARGET = auto()  # jz rA, target
    TARGET = auto()      # j target


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Static description of one mnemonic.

    Attributes:
        mnemonic: Source spelling (lowercase)
        opcode: 4-bit opcode
        format: Word layout used for the operands
        operands: Allowed operand kinds, one entry per operand position
        description: One-line summary for listings and help
    """
    mnemonic: str
    opcode: Opcode
    format: InstructionFormat
    operands: tuple[frozenset[OperandKind], ...]
    description: str

    @property
    def arity(self) -> int:
        """Number of operands the instruction takes."""
        return len(self.operands)


_REG = frozenset({OperandKind.REGISTER})
_IMM = frozenset({OperandKind.IMMEDIATE})
_TARGET = frozenset({OperandKind.IMMEDIATE, OperandKind.LABEL})


def _alu(mnemonic: str, opcode: Opcode, description: str) -> InstructionInfo:
    return InstructionInfo(mnemonic, opcode, InstructionFormat.REG_REG, (_REG, _REG), description)


# Key: mnemonic as written in source
OPCODE_TABLE: dict[str, InstructionInfo] = {
    "nop": InstructionInfo("nop", Opcode.NOP, InstructionFormat.NONE, (), "no operation"),
    "add": _alu("add", Opcode.ADD, "rA = rA + rB"),
    "sub": _alu("sub", Opcode.SUB, "rA = rA - rB"),
    "and": _alu("and", Opcode.AND, "rA = rA & rB"),
    "or": _alu("or", Opcode.OR, "rA = rA | rB"),
    "xor": _alu("xor", Opcode.XOR, "rA = rA ^ rB"),
    "sr": _alu("sr", Opcode.SR, "rA = rA >> rB"),
    "sl": _alu("sl", Opcode.SL, "rA = rA << rB"),
    "inv": InstructionInfo("inv", Opcode.INV, InstructionFormat.REG, (_REG,), "rA = ~rA"),
    "ldi": InstructionInfo(
        "ldi", Opcode.LDI, InstructionFormat.REG_IMM, (_REG, _IMM), "rA = imm8"
    ),
    "in": InstructionInfo(
        "in", Opcode.IN, InstructionFormat.REG_IO, (_REG, _IMM), "rA = source"
    ),
    "out": InstructionInfo(
        "out", Opcode.OUT, InstructionFormat.REG_IO, (_REG, _IMM), "sink = rA"
    ),
    "jz": InstructionInfo(
        "jz", Opcode.JZ, InstructionFormat.REG_TARGET, (_REG, _TARGET),
        "jump to target if rA == 0",
    ),
    "jlt": InstructionInfo(
        "jlt", Opcode.JLT, InstructionFormat.REG_TARGET, (_REG, _TARGET),
        "jump to target if rA < 0",
    ),
    "j": InstructionInfo("j", Opcode.J, InstructionFormat.TARGET, (_TARGET,), "jump to target"),
}

# Reverse lookup used by listings and tests
OPCODE_TO_INFO: dict[Opcode, InstructionInfo] = {
    info.opcode: info for info in OPCODE_TABLE.values()
}


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

MNEMONICS: frozenset[str] = frozenset(OPCODE_TABLE)

JUMP_INSTRUCTIONS: frozenset[str] = frozenset({
    m for m, info in OPCODE_TABLE.items()
    if info.format in (InstructionFormat.REG_TARGET, InstructionFormat.TARGET)
})

IO_INSTRUCTIONS: frozenset[str] = frozenset({"in", "out"})


# =============================================================================
# Sources and Sinks
# =============================================================================

# Input devices readable with `in`
SOURCES: dict[str, int] = {
    "SW": 0,
    "SWITCHES": 0,
    "BTNC": 1,
    "BTNU": 2,
    "BTNL": 3,
    "BTNR": 4,
    "BTND": 5,
    "COUNTER": 6,
}

# Output devices writable with `out`
SINKS: dict[str, int] = {
    "SEG_RIGHT": 0,
    "SEG_LEFT": 1,
}


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up instruction information by mnemonic.

    Mnemonics are case-sensitive; only the lowercase spelling is valid.

    Returns:
        InstructionInfo if found, None if the mnemonic is unknown
    """
    return OPCODE_TABLE.get(mnemonic)


def is_valid_register(index: int) -> bool:
    """Check that a register index exists on the machine."""
    return 0 <= index < NUM_REGISTERS


def device_table(mnemonic: str) -> dict[str, int]:
    """
    Return the alias table for an I/O mnemonic.

    Args:
        mnemonic: "in" or "out"

    Returns:
        SOURCES for `in`, SINKS for `out`
    """
    return SOURCES if mnemonic == "in" else SINKS


def device_ids(mnemonic: str) -> frozenset[int]:
    """Return the ids wired up on the reference board for `in`/`out`."""
    return frozenset(device_table(mnemonic).values())
