"""
BRISC Assembler - Toolchain for the BRISC Teaching Processor
============================================================

BRISC is a small 16-bit RISC processor built for digital design courses.
It has sixteen registers, a 32-word instruction memory, a handful of
input sources (switches, buttons, a counter) and two seven-segment
output sinks.

This package turns BRISC assembly source (.basm) into the flat binary
image loaded into instruction memory.

Quick Start
-----------
Assemble a program:
    >>> from brisc_asm import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("blink.basm")
    >>> asm.write_binary("blink.bin")

Or use the command-line tool:
    $ assemble blink.basm -o blink.bin -l blink.lst

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from brisc_asm.assembler import Assembler, assemble, assemble_file
from brisc_asm.config import AssemblerConfig
from brisc_asm.errors import (
    BriscError,
    SourceLocation,
    AssemblerError,
    LexError,
    ParseError,
    DuplicateLabelError,
    UnresolvedLabelError,
    EncodingRangeError,
    ProgramSizeError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "AssemblerConfig",
    # Exception hierarchy
    "BriscError",
    "SourceLocation",
    "AssemblerError",
    "LexError",
    "ParseError",
    "DuplicateLabelError",
    "UnresolvedLabelError",
    "EncodingRangeError",
    "ProgramSizeError",
]
