"""
Target Definitions
==================

A target describes one platform the compiler can produce programs for
(e.g. Atari with floating point, Atari integer-only, Apple II). It
supplies:

- the runtime library linked into every program
- the linker configuration file
- the default extension of the produced binary
- extra assembler arguments
- the syntax definition files used by the BASIC translator

Target File Format
------------------
A target named NAME is read from the first "NAME.tgt" file found in the
target search path. The file is line oriented; '#' starts a comment:

    # Atari 8-bit, floating point version
    include  atari-base
    library  fastbasic-fp.lib
    config   fastbasic.cfg
    extension xex
    ca65     -tatari -DFASTBASIC_FP
    syntax   basic.syn atari-fp.syn

"include" loads another target first, so derived targets only list what
they change. "library", "config" and "extension" replace the inherited
value; "ca65" and "syntax" append to it.

Resolution
----------
resolve_target() combines a loaded TargetDef with the build configuration
to get the effective library and linker config paths and the executable
name, and appends the target's assembler arguments to the configured ones.

Copyright (c) 2017-2025 Daniel Serpell & Contributors
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from fastbasic.config import DriverEnvironment
from fastbasic.errors import TargetLoadError
from fastbasic.options import BuildConfig
from fastbasic.pipeline import BuildPlan
from fastbasic.toolchain import add_extension


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

TARGET_SUFFIX = ".tgt"

# Keys every fully loaded target must define
REQUIRED_KEYS = ("library", "config", "extension")

# Folder below the installation root holding assembler include files
ASMINC_FOLDER = "asminc"


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class TargetDef:
    """
    A loaded target definition.

    Attributes:
        name: Target name
        library: Runtime library file name
        linker_config: Linker configuration file name
        binary_extension: Default executable extension, with the dot
        asm_args: Extra assembler arguments
        syntax_files: Resolved paths of the syntax definition files
    """
    name: str
    library: str
    linker_config: str
    binary_extension: str
    asm_args: tuple[str, ...] = ()
    syntax_files: tuple[str, ...] = ()


class TargetLoader(Protocol):
    """Anything able to load a target definition by name."""

    def load(
        self,
        target_path: Sequence[str],
        syntax_path: Sequence[str],
        name: str,
    ) -> TargetDef:
        ...


@dataclass
class _TargetFields:
    """Values collected while reading a target and its includes."""
    library: Optional[str] = None
    config: Optional[str] = None
    extension: Optional[str] = None
    asm_args: list[str] = field(default_factory=list)
    syntax_files: list[str] = field(default_factory=list)


# =============================================================================
# Target File Loader
# =============================================================================

def find_file(search_path: Sequence[str], name: str) -> Optional[str]:
    """Return the first existing "<dir>/<name>" in the search path."""
    for folder in search_path:
        candidate = os.path.join(folder, name) if folder else name
        if os.path.isfile(candidate):
            return candidate
    return None


def _normalize_extension(ext: str) -> str:
    return ext if ext.startswith(".") else "." + ext


class TargetFileLoader:
    """
    Loads targets from ".tgt" files.

    Example:
        loader = TargetFileLoader()
        tgt = loader.load(["/usr/share/fastbasic"], ["/usr/share/fastbasic/syntax"],
                          "atari-fp")
        print(tgt.library)
    """

    def load(
        self,
        target_path: Sequence[str],
        syntax_path: Sequence[str],
        name: str,
    ) -> TargetDef:
        """
        Load a target and everything it includes.

        Raises:
            TargetLoadError: If a file is missing, malformed, or the
                             target is incomplete
        """
        fields = _TargetFields()
        self._read_target(target_path, syntax_path, name, fields, [])

        for key in REQUIRED_KEYS:
            if getattr(fields, key) is None:
                raise TargetLoadError(f"target '{name}' does not define '{key}'", target=name)

        return TargetDef(
            name=name,
            library=fields.library,
            linker_config=fields.config,
            binary_extension=_normalize_extension(fields.extension),
            asm_args=tuple(fields.asm_args),
            syntax_files=tuple(fields.syntax_files),
        )

    def _read_target(
        self,
        target_path: Sequence[str],
        syntax_path: Sequence[str],
        name: str,
        fields: _TargetFields,
        stack: list[str],
    ) -> None:
        if name in stack:
            raise TargetLoadError(f"recursive include of target '{name}'", target=name)

        filename = find_file(target_path, name + TARGET_SUFFIX)
        if filename is None:
            raise TargetLoadError(f"can't find target '{name}'", target=name)

        logger.debug("reading target file '%s'", filename)
        try:
            with open(filename, encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise TargetLoadError(f"can't read target file '{filename}': {e}", target=name)

        stack.append(name)
        for lineno, line in enumerate(lines, start=1):
            words = line.split("#", 1)[0].split()
            if not words:
                continue
            key, values = words[0], words[1:]

            if key == "include":
                for included in values:
                    self._read_target(target_path, syntax_path, included, fields, stack)
            elif key in ("library", "config", "extension"):
                if len(values) != 1:
                    raise TargetLoadError(
                        f"{filename}:{lineno}: '{key}' needs exactly one value", target=name
                    )
                setattr(fields, key, values[0])
            elif key == "ca65":
                fields.asm_args.extend(values)
            elif key == "syntax":
                for syntax_name in values:
                    path = find_file(syntax_path, syntax_name)
                    if path is None:
                        raise TargetLoadError(
                            f"can't find syntax file '{syntax_name}'", target=name
                        )
                    fields.syntax_files.append(path)
            else:
                raise TargetLoadError(
                    f"{filename}:{lineno}: invalid target directive '{key}'", target=name
                )
        stack.pop()


def load_target(
    target_path: Sequence[str],
    syntax_path: Sequence[str],
    name: str,
) -> TargetDef:
    """Load a target with the default file loader."""
    return TargetFileLoader().load(target_path, syntax_path, name)


# =============================================================================
# Resolution Against the Build Configuration
# =============================================================================

@dataclass(frozen=True)
class ResolvedTarget:
    """
    A target combined with the build configuration.

    Attributes:
        target: The loaded target definition
        library_path: Runtime library passed last to the linker
        linker_config: Linker config file ('-C' override or target's)
        asminc_dir: Assembler include directory
    """
    target: TargetDef
    library_path: str
    linker_config: str
    asminc_dir: str


def resolve_target(
    config: BuildConfig,
    plan: BuildPlan,
    env: DriverEnvironment,
    loader: Optional[TargetLoader] = None,
) -> ResolvedTarget:
    """
    Load the configured target and apply it to the build.

    Updates config in place: the target's assembler arguments are appended
    to config.asm_args and, when the build links and no executable name
    was given, config.exe_name is derived from the first linked file.

    Args:
        config: BuildConfig from the option parser
        plan: BuildPlan from the option parser
        env: Process environment (installation root)
        loader: Target loader (default: TargetFileLoader)

    Returns:
        ResolvedTarget with the effective paths.

    Raises:
        TargetLoadError: If the target cannot be loaded
    """
    loader = loader or TargetFileLoader()
    target = loader.load(config.target_path, config.syntax_path, config.target)

    library_path = env.compiler_path(target.library)
    linker_config = config.linker_config or env.compiler_path(target.linker_config)
    config.asm_args.extend(target.asm_args)

    if plan.link_files and not config.exe_name:
        config.exe_name = add_extension(plan.link_files[0], target.binary_extension)

    logger.debug(
        "target '%s': library=%s config=%s exe=%s",
        target.name, library_path, linker_config, config.exe_name,
    )
    return ResolvedTarget(
        target=target,
        library_path=library_path,
        linker_config=linker_config,
        asminc_dir=env.compiler_path(ASMINC_FOLDER),
    )
