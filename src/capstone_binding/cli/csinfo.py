"""
csinfo - Capstone Library Information
=====================================

Prints the version of the loaded Capstone library, where it was loaded
from, and which architectures it was built with.

Usage Examples
--------------
    $ csinfo
    $ csinfo --json
    $ csinfo --library /opt/capstone/lib/libcapstone.so
"""

import json
from pathlib import Path
from typing import Optional

import click

from capstone_binding import __version__
from capstone_binding.cli.errors import handle_cli_exception
from capstone_binding.constants import Arch
from capstone_binding.metadata import is_diet, is_x86_reduced, supports, version_string
from capstone_binding.native import get_library, load_library


@click.command()
@click.option(
    "-l", "--library",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Load this shared library instead of searching for one",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print information as JSON",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="csinfo")
def main(library: Optional[Path], as_json: bool, verbose: bool) -> None:
    """Show Capstone library version and architecture support."""
    try:
        lib = load_library(str(library)) if library else get_library()

        support = {arch.name: supports(arch, lib) for arch in Arch}
        info = {
            "binding_version": __version__,
            "library_version": version_string(lib),
            "library_path": lib.path,
            "diet": is_diet(lib),
            "x86_reduce": is_x86_reduced(lib),
            "architectures": support,
        }

        if as_json:
            click.echo(json.dumps(info, indent=2))
            return

        click.echo(f"Capstone {info['library_version']} ({info['library_path']})")
        click.echo(f"Binding version: {__version__}")
        if info["diet"]:
            click.echo("Diet build: mnemonic and operand text unavailable")
        if info["x86_reduce"]:
            click.echo("X86 reduced instruction set")
        click.echo("")
        click.echo("Architectures:")
        for name, supported in support.items():
            mark = "yes" if supported else "no"
            click.echo(f"  {name:<8} {mark}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
