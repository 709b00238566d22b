"""
Toolchain Helpers
=================

Low-level helpers shared by the driver stages:

- File name manipulation (extension substitution and detection)
- Search path list parsing
- External tool invocation through a single capability object
- Best-effort file removal

External Tools
--------------
Every external program (assembler, linker, translator) is described by a
ToolInvocation: a display name, the program to execute and its argument
vector. Calling run() executes it through a runner function, which by
default is a blocking subprocess call. Tests replace the runner to record
invocations without starting any process.

Copyright (c) 2017-2025 Daniel Serpell & Contributors
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Sequence


logger = logging.getLogger(__name__)

# Exit status reported when a program cannot be started at all
EXIT_NOT_FOUND = 127


# =============================================================================
# File Name Helpers
# =============================================================================

def _basename_start(name: str) -> int:
    """Index of the first character of the last path component."""
    seps = [name.rfind(os.sep)]
    if os.altsep:
        seps.append(name.rfind(os.altsep))
    return max(seps) + 1


def add_extension(name: str, ext: str) -> str:
    """
    Replace the extension of a file name, or append one if it has none.

    Only the last path component is considered, and a leading dot in it
    (hidden files) is not treated as an extension separator.

    Args:
        name: File name, optionally with directories
        ext: New extension including the dot (e.g. ".asm")

    Returns:
        The file name with the new extension.

    Examples:
        add_extension("foo.bas", ".asm")     → "foo.asm"
        add_extension("out", ".o")           → "out.o"
        add_extension("dir.v2/game", ".o")   → "dir.v2/game.o"
    """
    start = _basename_start(name)
    dot = name.rfind(".")
    if dot <= start:
        return name + ext
    return name[:dot] + ext


def get_extension_lower(name: str) -> str:
    """
    Return the lowercase extension of a file name, without the dot.

    Returns an empty string when the last path component has no extension.
    """
    start = _basename_start(name)
    dot = name.rfind(".")
    if dot <= start:
        return ""
    return name[dot + 1:].lower()


def parse_path_list(text: str) -> list[str]:
    """
    Split a colon-separated directory list.

    Empty elements are kept, so "a::b" gives ["a", "", "b"] and the
    empty string gives [""].
    """
    return text.split(":")


# =============================================================================
# External Tool Invocation
# =============================================================================

ToolRunner = Callable[[str, Sequence[str]], int]


def run_process(program: str, argv: Sequence[str]) -> int:
    """
    Run an external program and wait for it to finish.

    The program inherits the driver's standard streams so its own
    diagnostics reach the user directly.

    Args:
        program: Program name (looked up in PATH) or path
        argv: Arguments, not including the program name

    Returns:
        The program's exit status, or EXIT_NOT_FOUND if it could not
        be started.
    """
    try:
        completed = subprocess.run([program, *argv])
    except OSError as e:
        logger.error("can't execute '%s': %s", program, e)
        return EXIT_NOT_FOUND
    return completed.returncode


@dataclass
class ToolInvocation:
    """
    One call of an external tool.

    Attributes:
        name: Short name used in log messages (e.g. "ca65")
        program: Program to execute
        argv: Arguments, not including the program name
        runner: Function executing the program (default: run_process)
    """
    name: str
    program: str
    argv: list[str] = field(default_factory=list)
    runner: ToolRunner = run_process

    def run(self) -> int:
        """Execute the tool and return its exit status."""
        logger.debug("exec %s: %s %s", self.name, self.program, " ".join(self.argv))
        status = self.runner(self.program, self.argv)
        if status:
            logger.debug("%s exited with status %d", self.name, status)
        return status


# =============================================================================
# File Removal
# =============================================================================

def remove_file(path: str) -> bool:
    """
    Delete a file, ignoring failures.

    Returns:
        True if the file was removed.
    """
    try:
        os.remove(path)
    except OSError as e:
        logger.debug("can't remove '%s': %s", path, e)
        return False
    logger.debug("removed '%s'", path)
    return True
