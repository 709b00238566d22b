"""
CLI Error Handling
==================

Maps driver exceptions to messages and exit codes.
"""

import logging
import sys
from enum import IntEnum
from typing import NoReturn

import click

from fastbasic.errors import FastBasicError, TargetLoadError


logger = logging.getLogger(__name__)

PROGRAM_NAME = "fastbasic"


class ExitCode(IntEnum):
    """Exit codes of the driver."""
    SUCCESS = 0
    FAILURE = 1          # Invalid arguments, target, translate, assemble or link error
    INTERNAL_ERROR = 3   # Unexpected internal error (a translator may also return 3)


def show_error(message: str) -> None:
    """Print a one-line error message with the program prefix."""
    click.echo(f"{PROGRAM_NAME}: {message}", err=True)


def handle_cli_exception(error: Exception) -> NoReturn:
    """
    Report an exception and exit with the matching status.

    Args:
        error: The exception that was raised

    Raises:
        SystemExit: Always
    """
    if isinstance(error, TargetLoadError):
        # Already names the target or file, shown as is
        click.echo(error.message, err=True)
        sys.exit(error.exit_status)

    elif isinstance(error, FastBasicError):
        show_error(error.message)
        sys.exit(error.exit_status)

    else:
        show_error(f"internal error: {error}")
        logger.debug("internal error", exc_info=error)
        sys.exit(ExitCode.INTERNAL_ERROR)
