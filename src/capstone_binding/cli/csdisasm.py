"""
csdisasm - Capstone Disassembler Command-Line Interface
=======================================================

This module implements a command-line disassembler on top of the binding.
It reads a raw binary file and prints one line per decoded instruction.

Usage Examples
--------------
Disassemble 32-bit x86 code:
    $ csdisasm code.bin --arch x86 --mode 32

With base address:
    $ csdisasm code.bin --arch x86 --mode 64 --address 0x401000

Thumb code on a big-endian ARM:
    $ csdisasm code.bin --arch arm --mode thumb --mode big-endian

AT&T syntax, first 20 instructions:
    $ csdisasm code.bin --arch x86 --mode 32 --syntax att --count 20

Machine-readable output:
    $ csdisasm code.bin --arch arm64 --json -o listing.json

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from capstone_binding import __version__
from capstone_binding.cli.errors import ExitCode, handle_cli_exception
from capstone_binding.constants import (
    ARCH_NAMES,
    MODE_NAMES,
    SYNTAX_NAMES,
    OptionType,
    OptionValue,
    parse_arch,
    parse_mode,
)
from capstone_binding.engine import Engine


def parse_address(text: str) -> int:
    """
    Parse an address given as hex (0x or $ prefix) or decimal.

    Raises:
        click.BadParameter: If the text is not a number
    """
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        elif text.startswith("$"):
            return int(text[1:], 16)
        else:
            return int(text)
    except ValueError:
        raise click.BadParameter(f"invalid address '{text}'", param_hint="--address")


def format_hex_dump(data: bytes, base_address: int) -> list[str]:
    """Format data as commented hex dump lines, 16 bytes per line."""
    lines = ["; Hex dump:", "; " + "-" * 60]
    for i in range(0, len(data), 16):
        chunk = data[i:i+16]
        hex_str = " ".join(f"{b:02x}" for b in chunk)
        ascii_str = "".join(
            chr(b) if 0x20 <= b < 0x7F else "."
            for b in chunk
        )
        lines.append(f"; 0x{base_address + i:08x}: {hex_str:<48} {ascii_str}")
    lines.append("; " + "-" * 60)
    return lines


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
    help="Output file (default: stdout)",
)
@click.option(
    "-A", "--arch",
    type=click.Choice(sorted(ARCH_NAMES), case_sensitive=False),
    required=True,
    help="Target architecture",
)
@click.option(
    "-m", "--mode",
    "modes",
    type=click.Choice(list(MODE_NAMES), case_sensitive=False),
    multiple=True,
    help="Mode flag; repeat to combine (e.g. --mode thumb --mode big-endian)",
)
@click.option(
    "-a", "--address",
    type=str,
    default="0",
    help="Base address for disassembly (hex with 0x prefix or decimal). Default: 0",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=0,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "-s", "--syntax",
    type=click.Choice(list(SYNTAX_NAMES), case_sensitive=False),
    default=None,
    help="Assembly syntax (x86 only: intel, att, masm)",
)
@click.option(
    "--skipdata",
    is_flag=True,
    help="Skip over undecodable bytes instead of stopping",
)
@click.option(
    "--unsigned",
    is_flag=True,
    help="Print immediate operands as unsigned",
)
@click.option(
    "--hex",
    "show_hex",
    is_flag=True,
    help="Include hex dump before disassembly",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only mnemonic and operand)",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Write instructions as JSON",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="csdisasm")
def main(
    input_file: Path,
    output: Optional[Path],
    arch: str,
    modes: Tuple[str, ...],
    address: str,
    count: int,
    syntax: Optional[str],
    skipdata: bool,
    unsigned: bool,
    show_hex: bool,
    no_bytes: bool,
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a raw binary file with Capstone.

    INPUT_FILE is the binary file to disassemble.

    Examples:

        # 32-bit x86 at 0x1000
        csdisasm code.bin --arch x86 --mode 32 --address 0x1000

        # ARM Thumb, first 10 instructions
        csdisasm code.bin --arch arm --mode thumb --count 10
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        base_address = parse_address(address)
        target_arch = parse_arch(arch)
        target_mode = parse_mode(modes)

        data = input_file.read_bytes()
        if len(data) == 0:
            click.echo(f"Error: {input_file} is empty", err=True)
            sys.exit(ExitCode.INVALID_ARGS)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Base address: 0x{base_address:x}", err=True)

        with Engine(target_arch, target_mode) as engine:
            if syntax is not None:
                engine.set_option(OptionType.SYNTAX, SYNTAX_NAMES[syntax.lower()])
            if skipdata:
                engine.set_option(OptionType.SKIPDATA, OptionValue.ON)
            if unsigned:
                engine.set_option(OptionType.UNSIGNED, OptionValue.ON)

            instructions = engine.disassemble(data, address=base_address, count=count)

        # Build output
        if as_json:
            result = json.dumps([insn.to_dict() for insn in instructions], indent=2) + "\n"
        else:
            output_lines = [
                f"; Disassembly of {input_file.name}",
                f"; Size: {len(data)} bytes",
                f"; Base address: 0x{base_address:x}",
                f"; Architecture: {target_arch.name}, mode 0x{int(target_mode):x}",
                "",
            ]

            if show_hex:
                output_lines.extend(format_hex_dump(data, base_address))
                output_lines.append("")

            for insn in instructions:
                if no_bytes:
                    line = f"0x{insn.address:08x}: {insn.mnemonic}"
                    if insn.op_str:
                        line += f" {insn.op_str}"
                    output_lines.append(line)
                else:
                    output_lines.append(str(insn))

            decoded_size = sum(insn.size for insn in instructions)
            if decoded_size < len(data) and count == 0:
                output_lines.append(
                    f"; stopped at 0x{base_address + decoded_size:x}: "
                    f"{len(data) - decoded_size} byte(s) not decoded"
                )

            result = "\n".join(output_lines) + "\n"

        # Write output
        if output:
            output.write_text(result, encoding='utf-8')
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(instructions)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
