"""
Unified CLI Error Handling
==========================

Maps isx2gb exceptions to messages and exit codes for the command line.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes of the isx2gb command."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Malformed ISX, unsupported size, overflow, bad patch
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


# Hints printed after specific conversion errors
_HINTS = {
    "RegionOverflowError": "records marked '!' above do not fit their bank or RAM window",
    "UnsupportedRomSizeError": "only ROMs up to 16 Mbit (128 banks) can be converted",
    "PatchBoundaryError": "the ROM being patched is smaller than the ISX layout",
}


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised while running a command and exit.

    Conversion errors are expected outcomes of bad input and are printed
    as a single line (plus a hint where one helps). Anything else is an
    internal error; its traceback is printed in verbose mode.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from isx2gb.errors import ISXError

    if isinstance(error, ISXError):
        click.echo(f"Error: {error}", err=True)
        hint = _HINTS.get(type(error).__name__)
        if hint:
            click.echo(f"Hint: {hint}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        # Bad arguments, missing or unreadable files
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
