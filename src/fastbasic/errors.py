"""
FastBasic Driver Error Hierarchy
================================

This module defines the exception hierarchy for the build driver.
All exceptions inherit from FastBasicError, allowing the command-line
front end to catch every driver failure with a single except clause.

Exception Hierarchy
-------------------
FastBasicError (base)
├── ArgumentError - malformed or unknown option, missing input
├── TargetLoadError - target definition could not be loaded
└── BuildError (pipeline stage failures)
    ├── TranslateError - BASIC translator returned non-zero
    ├── AssembleError - external assembler returned non-zero
    └── LinkError - external linker returned non-zero

Exit Status
-----------
Every exception carries the process exit status the driver should
terminate with. It is 1 for everything except TranslateError, which
propagates the translator's own status.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class FastBasicError(Exception):
    """
    Base exception for all driver errors.

    Attributes:
        message: The error description
        exit_status: Process exit status to report (default 1)
    """

    def __init__(self, message: str, exit_status: int = 1):
        self.message = message
        self.exit_status = exit_status
        super().__init__(message)


# =============================================================================
# Argument and Target Errors
# =============================================================================

class ArgumentError(FastBasicError):
    """
    Invalid command line.

    Raised by the option parser for unknown options, invalid option
    values, duplicate '-o' options and a missing input file. No pipeline
    stage is run when this error is raised.
    """
    pass


class TargetLoadError(FastBasicError):
    """
    Target definition could not be loaded.

    The message is shown to the user verbatim, without the program
    prefix, since it already names the offending target or file.
    """

    def __init__(self, message: str, target: Optional[str] = None):
        self.target = target
        super().__init__(message)


# =============================================================================
# Pipeline Stage Errors
# =============================================================================

class BuildError(FastBasicError):
    """
    Base exception for pipeline stage failures.

    Attributes:
        path: The input file of the failing job (optional)
    """

    def __init__(self, message: str, path: Optional[str] = None, exit_status: int = 1):
        self.path = path
        super().__init__(message, exit_status=exit_status)


class TranslateError(BuildError):
    """
    The BASIC translator reported a failure.

    The translator prints its own diagnostics, so the exit status it
    returned is propagated unchanged.
    """

    def __init__(self, path: str, status: int):
        self.status = status
        super().__init__(
            f"can't compile file '{path}'",
            path=path,
            exit_status=status if status > 0 else 1,
        )


class AssembleError(BuildError):
    """The external assembler exited with a non-zero status."""

    def __init__(self, path: str, status: int):
        self.status = status
        super().__init__("can't assemble file", path=path)


class LinkError(BuildError):
    """
    The external linker exited with a non-zero status.

    The message matches AssembleError so scripts matching on the
    driver's output keep working.
    """

    def __init__(self, path: str, status: int):
        self.status = status
        super().__init__("can't assemble file", path=path)
