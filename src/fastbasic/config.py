"""
FastBasic Driver - Environment Configuration
============================================

Installation layout and external program names. Configuration can come from:
- Default values (defined here)
- Environment variables

The environment is read once at startup, before any argument is parsed,
and is then treated as read-only for the rest of the run.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class DriverEnvironment:
    """
    Process-wide settings of the build driver.

    Attributes:
        home: Installation root. Library, linker config, assembler include
              files and default search folders are resolved against it.
        ca65: Assembler program name or path
        ld65: Linker program name or path
        translator: BASIC translator program name or path
        log_level: Logging level for library modules
        share_dirs: Extra data roots searched after the installation root
    """

    home: Path = field(default_factory=Path.cwd)
    ca65: str = "ca65"
    ld65: str = "ld65"
    translator: str = "fastbasic-translate"
    log_level: int = logging.WARNING
    share_dirs: list[Path] = field(
        default_factory=lambda: [Path(sys.prefix) / "share" / "fastbasic"]
    )

    @classmethod
    def from_env(cls, program: Optional[str] = None) -> "DriverEnvironment":
        """
        Create a DriverEnvironment from environment variables.

        Environment variables (all optional):
            FASTBASIC_HOME: Installation root
            FASTBASIC_CA65: Assembler program
            FASTBASIC_LD65: Linker program
            FASTBASIC_TRANSLATOR: BASIC translator program
            FASTBASIC_LOG_LEVEL: Logging level name (DEBUG, INFO, ...)

        Args:
            program: Path of the running program (argv[0]). When
                     FASTBASIC_HOME is not set, its directory is the
                     installation root.

        Returns:
            DriverEnvironment with values from environment variables
        """
        env = cls()

        if home := os.environ.get("FASTBASIC_HOME"):
            env.home = Path(home)
        elif program:
            env.home = Path(program).resolve().parent

        if ca65 := os.environ.get("FASTBASIC_CA65"):
            env.ca65 = ca65
        if ld65 := os.environ.get("FASTBASIC_LD65"):
            env.ld65 = ld65
        if translator := os.environ.get("FASTBASIC_TRANSLATOR"):
            env.translator = translator

        if level := os.environ.get("FASTBASIC_LOG_LEVEL"):
            value = logging.getLevelName(level.upper())
            if isinstance(value, int):
                env.log_level = value

        return env

    def compiler_path(self, name: str) -> str:
        """Resolve a file name shipped with the compiler against the installation root."""
        return str(self.home / name)

    def default_search_path(self, subfolder: str) -> list[str]:
        """
        Default folders searched for target or syntax files.

        Args:
            subfolder: Folder below each data root ("" for the root itself)

        Returns:
            Ordered list of directories, duplicates removed.
        """
        paths: list[str] = []
        for root in [self.home, *self.share_dirs]:
            path = str(root / subfolder) if subfolder else str(root)
            if path not in paths:
                paths.append(path)
        return paths
