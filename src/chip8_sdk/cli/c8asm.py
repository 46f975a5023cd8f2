"""
c8asm - CHIP-8 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the CHIP-8 assembler.

Usage Examples
--------------
Basic assembly (listing on stdout):
    $ c8asm game.c8s

Listing and label table to files:
    $ c8asm game.c8s -o game.lst -s game.sym

Stop at the first bad line:
    $ c8asm --fail-fast game.c8s

Verbose mode:
    $ c8asm -v game.c8s

Output Format
-------------
One line per instruction or data line, the normalized source in a fixed
30-column field followed by its encoding::

     CLS                            | 00E0
     JP LOOP                        | 1202

A line that cannot be encoded is reported in place::

    Error on line 7 (LD V1 FOO) | Invalid number: FOO

Exit status is 0 on success, 1 if any line failed, 2 for bad arguments.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from chip8_sdk import __version__
from chip8_sdk.assembler import Assembler, OrphanPolicy
from chip8_sdk.cli.errors import ExitCode, handle_cli_exception

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the listing to a file instead of stdout",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the label table (name, address, size)",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    help="Stop at the first line that cannot be encoded",
)
@click.option(
    "--allow-orphans",
    is_flag=True,
    help="Discard lines before the first label instead of failing",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop after this many errors",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8asm")
def main(
    input_file: Path,
    output: Optional[Path],
    symbols: Optional[Path],
    fail_fast: bool,
    allow_orphans: bool,
    max_errors: int,
    verbose: bool,
) -> None:
    """
    Assemble CHIP-8 source code.

    INPUT_FILE is the assembly source file to assemble.

    Prints each instruction or data line with its hex encoding. Labels
    are laid out from 0x200 with START first.

    \b
    Examples:
        c8asm game.c8s                 # Listing on stdout
        c8asm game.c8s -o game.lst     # Listing to a file
        c8asm game.c8s -s game.sym     # Also write the label table
    """
    setup_logging(verbose)

    policy = OrphanPolicy.DISCARD if allow_orphans else OrphanPolicy.REJECT
    asm = Assembler(orphan_policy=policy, fail_fast=fail_fast, max_errors=max_errors)

    try:
        logger.debug("Assembling %s", input_file)
        result = asm.assemble_file(input_file)

        if output:
            asm.write_listing(output)
            logger.info("Wrote listing to %s", output)
        else:
            for entry in result.entries():
                click.echo(entry.format())

        if symbols:
            asm.write_symbols(symbols)
            logger.info("Wrote symbols to %s", symbols)

        if verbose:
            program = result.program
            click.echo(
                f"Assembly complete: {len(program.lines)} lines, "
                f"{program.size} bytes, {len(program.labels)} labels",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")

    if asm.has_errors():
        if output or verbose:
            click.echo(asm.get_error_report(), err=True)
        sys.exit(ExitCode.BUILD_ERROR)


if __name__ == "__main__":
    main()
