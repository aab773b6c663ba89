"""
BRISC Assembler - Main Interface
================================

This module provides the main Assembler class, the primary interface for
assembling BRISC source code. It coordinates the lexer, parser and code
generator to produce a flat binary of 16-bit instruction words.

Example Usage
-------------
>>> from brisc_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> code = asm.assemble_string('''
...     ldi r0, 3
... loop:
...     jz r0, done
...     j loop
... done:
...     nop
... ''')
>>> len(code)
8
>>> asm.get_symbols()
{'loop': 1, 'done': 3}

Command-Line Usage
------------------
The assembler can also be invoked from the command line:

    $ assemble program.basm -o program.bin -l program.lst -s program.sym

Options:
    -o, --output-path FILE  Output binary (default: input with .bin suffix)
    -l, --listing FILE      Generate listing file
    -s, --symbols FILE      Generate symbol file
    --strict-io             Only accept known source/sink ids
    --max-instructions N    Instruction memory size in words
    -v, --verbose           Verbose output
"""

from pathlib import Path
from typing import Optional
import logging

from brisc_asm.assembler.codegen import CodeGenerator
from brisc_asm.assembler.parser import parse_source
from brisc_asm.config import AssemblerConfig

logger = logging.getLogger(__name__)

BINARY_SUFFIX = ".bin"


class Assembler:
    """
    Main BRISC assembler class.

    Each assemble_* call is an independent run with its own symbol table.
    A run either completes and replaces the previous output, or raises on
    its first error and leaves the assembler with no output at all.

    Attributes:
        config: Configuration applied to every run
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        """
        Initialize the assembler.

        Args:
            config: Assembler configuration (defaults used when None)

        Raises:
            ValueError: If the configuration is invalid
        """
        self.config = config or AssemblerConfig()
        self.config.validate()
        self._codegen = CodeGenerator(self.config)

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        The assembly pipeline is:
        1. Parse source into a Program and SymbolTable (lexer -> parser)
        2. Resolve labels and encode words (code generator)

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Big-endian machine code, two bytes per instruction

        Raises:
            AssemblerError: On the first error found
        """
        self._codegen = CodeGenerator(self.config)
        codegen = CodeGenerator(self.config)

        logger.debug("assembling %s", filename)
        program, symbols = parse_source(source, filename, self.config)
        codegen.generate(program, symbols)

        self._codegen = codegen
        code = codegen.get_code()
        logger.debug("generated %d bytes for %s", len(code), filename)
        return code

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Big-endian machine code

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))

    @staticmethod
    def default_output_path(input_path: str | Path) -> Path:
        """Return the binary path next to the input: same stem, .bin suffix."""
        return Path(input_path).with_suffix(BINARY_SUFFIX)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """Get the generated machine code."""
        return self._codegen.get_code()

    def get_words(self) -> tuple[int, ...]:
        """Get the generated instruction words."""
        return self._codegen.get_words()

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping label names to addresses
        """
        return self._codegen.get_symbols()

    def get_listing(self) -> str:
        """Get the assembly listing as a string."""
        return self._codegen.get_listing()

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write raw binary output (instruction words only, no header).

        Args:
            filepath: Output file path
        """
        self._codegen.write_binary(filepath)

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        Args:
            filepath: Output file path
        """
        self._codegen.write_listing(filepath)
        logger.debug("wrote listing to %s", filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Args:
            filepath: Output file path
        """
        self._codegen.write_symbols(filepath)
        logger.debug("wrote symbols to %s", filepath)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(
    source: str,
    filename: str = "<input>",
    config: Optional[AssemblerConfig] = None,
) -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        config: Assembler configuration

    Returns:
        Generated machine code

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(config).assemble_string(source, filename)


def assemble_file(filepath: str | Path, config: Optional[AssemblerConfig] = None) -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file
        config: Assembler configuration

    Returns:
        Generated machine code

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(config).assemble_file(filepath)
