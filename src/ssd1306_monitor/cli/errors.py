"""
Unified CLI Error Handling
==========================

Provides consistent error messages and exit codes for the command-line
entry points.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from ssd1306_monitor.errors import DeviceSpecError, DisplayError, InvalidArgumentError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    DEVICE_ERROR = 1     # Bus not present, write failed, display rejected
    INVALID_ARGS = 2     # Malformed device spec or option value
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Device")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, (DeviceSpecError, InvalidArgumentError, click.BadParameter)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, DisplayError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.DEVICE_ERROR)

    elif isinstance(error, ValueError):
        # Duplicate devices and similar configuration mistakes
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, PermissionError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.DEVICE_ERROR)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
