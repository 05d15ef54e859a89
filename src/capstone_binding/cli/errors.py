"""
Exit Codes for csdisasm and csinfo
==================================

Both commands wrap their body in a single try block and pass whatever
escapes it to handle_cli_exception(). Binding errors (a native status,
a closed engine, a library that cannot be loaded) are reported as engine
errors; bad arguments and unreadable files as usage errors.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Process exit status of the command-line tools."""
    SUCCESS = 0
    ENGINE_ERROR = 1     # CapstoneBindingError and subclasses
    INVALID_ARGS = 2     # Bad option value, missing or unreadable input
    INTERNAL_ERROR = 3   # Anything else (a bug in the tool)


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Print ``error`` on stderr and exit with the matching ExitCode.

    EngineError messages already carry the native code and the library's
    own description, so they are printed unchanged. Only unexpected
    exceptions get a traceback, and only with --verbose.

    Args:
        error: Exception raised by the command body
        verbose: Print a traceback for INTERNAL_ERROR
        error_type: Prefix for binding errors, e.g. "Disassembly" gives
            "Disassembly error: ..."
    """
    from capstone_binding.errors import CapstoneBindingError

    if isinstance(error, CapstoneBindingError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.ENGINE_ERROR)

    elif isinstance(error, (click.BadParameter, ValueError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
