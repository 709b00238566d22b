"""
FastBasic - Build Driver for the FastBasic Toolchain
====================================================

This package implements the command-line driver that turns BASIC programs
for 8-bit computers into native binaries. The driver itself does not parse
BASIC or generate machine code; it orchestrates the tools that do:

    BASIC source ──translator──▶ assembly ──ca65──▶ object ──ld65──▶ binary

Main Components
---------------
- **options**: command-line parsing into a BuildConfig and BuildPlan
- **files**: file role classification and derived file names
- **pipeline**: ordered translate/assemble/link work lists
- **target**: target definition loading and resolution
- **executor**: sequential, fail-fast pipeline execution
- **tempfiles**: intermediate file cleanup after a successful build

Quick Start
-----------
    $ fastbasic -t:atari-fp game.bas

Programmatic:
    >>> from fastbasic.options import parse_arguments
    >>> parsed = parse_arguments(["-o", "game.xex", "game.bas"])
    >>> parsed.plan.bas_jobs
    [FileJob(input='game.bas', output='game.asm')]
"""

__version__ = "4.7.0"
__author__ = "FastBasic Contributors"

from fastbasic.errors import (
    FastBasicError,
    ArgumentError,
    TargetLoadError,
    BuildError,
    TranslateError,
    AssembleError,
    LinkError,
)
from fastbasic.options import BuildConfig, ParsedArguments, Action, parse_arguments
from fastbasic.pipeline import BuildPlan, FileJob, PipelineBuilder
from fastbasic.files import FileRole, ClassifiedFile, classify_file
from fastbasic.target import TargetDef, TargetFileLoader, ResolvedTarget, load_target, resolve_target
from fastbasic.executor import PipelineExecutor
from fastbasic.tempfiles import TempFileSet

__all__ = [
    "__version__",
    "__author__",
    # Errors
    "FastBasicError",
    "ArgumentError",
    "TargetLoadError",
    "BuildError",
    "TranslateError",
    "AssembleError",
    "LinkError",
    # Options
    "BuildConfig",
    "ParsedArguments",
    "Action",
    "parse_arguments",
    # Pipeline
    "BuildPlan",
    "FileJob",
    "PipelineBuilder",
    "FileRole",
    "ClassifiedFile",
    "classify_file",
    # Targets
    "TargetDef",
    "TargetFileLoader",
    "ResolvedTarget",
    "load_target",
    "resolve_target",
    # Execution
    "PipelineExecutor",
    "TempFileSet",
]
