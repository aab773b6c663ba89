"""
BRISC Assembler
===============

This module provides the assembler for the BRISC teaching processor. It
converts BRISC assembly source into a flat binary of 16-bit instruction
words, ready to be loaded into the processor's instruction memory.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **Lexer**: Tokenizes one source line into tokens
- **Parser**: Parses tokens into instructions and label declarations
- **SymbolTable**: Label name to address mapping for one run
- **CodeGenerator**: Encodes instructions into machine words

Assembly Process
----------------
1. **Parsing (Lexer + Parser)**:
   - Tokenize each line
   - Assign one address per instruction, record labels
   - Check every label reference once the whole file is scanned

2. **Code Generation (CodeGenerator)**:
   - Resolve label operands to addresses
   - Range-check immediates, jump targets and device ids
   - Pack each instruction into one big-endian word

Example Usage
-------------
>>> from brisc_asm.assembler import Assembler
>>> asm = Assembler()
>>> code = asm.assemble_string('''
... start:
...     in r0, SW
...     out r0, SEG_RIGHT
...     j start
... ''')
>>> code.hex()
'b000c000f000'
"""

from brisc_asm.assembler.assembler import Assembler, assemble, assemble_file
from brisc_asm.assembler.lexer import Lexer, Token, TokenType, tokenize_source
from brisc_asm.assembler.parser import (
    Parser,
    Statement,
    Instruction,
    LabelDef,
    Operand,
    Program,
    parse_source,
)
from brisc_asm.assembler.symbols import Symbol, SymbolTable
from brisc_asm.assembler.codegen import CodeGenerator
from brisc_asm.cpu import (
    InstructionFormat,
    InstructionInfo,
    OPCODE_TABLE,
    MNEMONICS,
    JUMP_INSTRUCTIONS,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize_source",
    # Parser
    "Parser",
    "Statement",
    "Instruction",
    "LabelDef",
    "Operand",
    "Program",
    "parse_source",
    # Symbols
    "Symbol",
    "SymbolTable",
    # Code generator
    "CodeGenerator",
    # Opcodes
    "InstructionFormat",
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONICS",
    "JUMP_INSTRUCTIONS",
]
