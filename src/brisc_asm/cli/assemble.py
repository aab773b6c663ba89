"""
assemble - BRISC Assembler Command-Line Interface
=================================================

This module implements the command-line interface for the BRISC
assembler.

Usage Examples
--------------
Basic assembly (writes blink.bin next to the source):
    $ assemble blink.basm

With output file:
    $ assemble blink.basm -o build/blink.bin

Generate all output files:
    $ assemble blink.basm -o blink.bin -l blink.lst -s blink.sym

Only accept the devices wired on the board:
    $ assemble --strict-io blink.basm

Verbose mode:
    $ assemble -v blink.basm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from brisc_asm import __version__
from brisc_asm.assembler import Assembler
from brisc_asm.cli.errors import handle_cli_exception
from brisc_asm.config import MAX_ADDRESSABLE_INSTRUCTIONS, AssemblerConfig

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def check_output_paths(input_file: Path, outputs: list[Optional[Path]]) -> None:
    """
    Refuse output paths that would overwrite the source file.

    Raises:
        click.BadParameter: If an output path names the input file
    """
    source = input_file.resolve()
    for path in outputs:
        if path is not None and path.resolve() == source:
            raise click.BadParameter(f"output file {path} would overwrite the input file")


def write_outputs(
    asm: Assembler,
    output_file: Path,
    listing: Optional[Path],
    symbols: Optional[Path],
) -> None:
    """
    Write the binary and any requested listing and symbol files.

    Either every file is written, or the ones already written are removed
    and the error is re-raised.
    """
    writers = [(output_file, asm.write_binary)]
    if listing:
        writers.append((listing, asm.write_listing))
    if symbols:
        writers.append((symbols, asm.write_symbols))

    written: list[Path] = []
    try:
        for path, write in writers:
            write(path)
            written.append(path)
    except OSError:
        for path in written:
            path.unlink(missing_ok=True)
        raise


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output binary file (default: input with .bin suffix)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--strict-io",
    is_flag=True,
    help="Reject in/out ids that are not wired on the board",
)
@click.option(
    "--max-instructions",
    type=click.IntRange(1, MAX_ADDRESSABLE_INSTRUCTIONS),
    default=None,
    help="Instruction memory size in words (default: 32)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="assemble")
def main(
    input_file: Path,
    output_path: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    strict_io: bool,
    max_instructions: Optional[int],
    verbose: bool,
) -> None:
    """
    Assemble BRISC source code into an instruction memory image.

    INPUT_FILE is the assembly source file (.basm) to assemble.

    The output is a flat binary of big-endian 16-bit words, one per
    instruction. Nothing is written if assembly fails.

    \b
    Examples:
        assemble blink.basm              # Outputs blink.bin
        assemble blink.basm -o out.bin   # Specify output file
        assemble -l blink.lst blink.basm # Also write a listing
    """
    setup_logging(verbose)

    config = AssemblerConfig.from_env()
    if strict_io:
        config.strict_io = True
    if max_instructions is not None:
        config.max_instructions = max_instructions

    output_file = output_path or Assembler.default_output_path(input_file)

    try:
        check_output_paths(input_file, [output_file, listing, symbols])
        asm = Assembler(config)
        logger.debug(
            "max_instructions=%d strict_io=%s", config.max_instructions, config.strict_io
        )
        asm.assemble_file(input_file)

        write_outputs(asm, output_file, listing, symbols)

        if verbose:
            click.echo(f"Wrote {len(asm.get_code())} bytes to {output_file}")
            click.echo(f"Defined {len(asm.get_symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
