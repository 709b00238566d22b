"""
fastbasic - FastBasic Build Driver
==================================

This module implements the ``fastbasic`` command, which builds a program for
an 8-bit target from BASIC sources, assembly sources and object files:

    .bas files:  translate → ca65 → ld65
    .asm files:  ca65 → ld65
    .o files:    ld65

Usage Examples
--------------
Build a program for the default target:
    $ fastbasic game.bas

Integer-only Atari target, custom output name:
    $ fastbasic -t:atari-int -o GAME.XEX game.bas

Only translate to assembly:
    $ fastbasic -c game.bas

Link BASIC with hand-written assembly:
    $ fastbasic game.bas sound.asm extra.o

Keep intermediate files and write listing/label files:
    $ fastbasic -keep game.bas

Option Parsing
--------------
The FastBasic option syntax ("-t:name", "-ls=40", "-keep") is not GNU style,
so click does not parse the arguments itself. The command receives the raw
argument list and hands it to fastbasic.options.parse_arguments().

Exit Codes
----------
0 - Success, or version/help shown
1 - Invalid arguments, target error, assemble or link error
N - The translator's exit status when translation fails
3 - Internal error

A translator exiting with 3 is indistinguishable from an internal error by
status alone; the message printed on stderr tells them apart.

Copyright (c) 2017-2025 Daniel Serpell & Contributors
"""

import logging
import sys
from typing import Optional, Sequence

import click

from fastbasic import __version__
from fastbasic.cli.errors import handle_cli_exception
from fastbasic.config import DriverEnvironment
from fastbasic.executor import PipelineExecutor
from fastbasic.options import Action, ParsedArguments, parse_arguments
from fastbasic.target import TargetLoader, resolve_target
from fastbasic.toolchain import ToolRunner
from fastbasic.translator import ExternalTranslator, Translator


logger = logging.getLogger(__name__)


HELP_TEXT = """\
Usage: fastbasic [options] <input.bas> [<file.asm>...]

Options:
 -d\t\tenable parser debug options (only useful to debug parser)
 -n\t\tdon't run the optimizer, produces same code as 6502 version
 -prof\t\tshow token usage statistics
 -s:<name>\tplace code into given segment
 -t:<target>\tselect compiler target ('atari-fp', 'atari-int', etc.)
 -l\t\twrite a long BASIC listing of the parsed source
 -l:<extension>\tspecify the extension of the BASIC listing
 -ls:<num>\twrite a shortened/abbreviated BASIC listing with num columns
 -c\t\tonly compile to assembler, don't produce binary
 -keep\t\tkeep intermediate files on compilation
 -g\t\tsave listing and label files after compilation
 -C:<name>\tselect linker config file name
 -S:<addr>\tselect binary starting address
 -X:<opt>\tpass option to the assembler
 -DL:<sym=val>\tdefine linker symbol with given value
 -syntax-path:<dirs>\tcolon-separated folders with syntax files
 -target-path:<dirs>\tcolon-separated folders with target files
 -o <name>\tselect output file name
 -v\t\tshow version and exit
 -h\t\tshow this help

You can pass multiple basic, assembly and object files to be linked together"""


def version_text() -> str:
    return f"FastBasic driver {__version__}"


def setup_logging(level: int) -> None:
    """Configure logging for library modules."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if level <= logging.DEBUG else "%(message)s",
    )


# =============================================================================
# Build
# =============================================================================

def build(
    parsed: ParsedArguments,
    env: DriverEnvironment,
    translator: Optional[Translator] = None,
    runner: Optional[ToolRunner] = None,
    loader: Optional[TargetLoader] = None,
) -> None:
    """
    Resolve the target and run the build pipeline.

    Args:
        parsed: Result of parse_arguments() with Action.BUILD
        env: Process environment
        translator: BASIC translator (default: ExternalTranslator)
        runner: Runs ca65/ld65 (default: subprocess)
        loader: Target loader (default: TargetFileLoader)

    Raises:
        TargetLoadError: If the target cannot be loaded
        BuildError: If a pipeline stage fails
    """
    config, plan = parsed.config, parsed.plan
    target = resolve_target(config, plan, env, loader)

    if translator is None:
        translator = ExternalTranslator(env.translator, config, runner)

    executor = PipelineExecutor(config, plan, target, translator, env=env, runner=runner)
    executor.run()


def run(
    args: Sequence[str],
    env: DriverEnvironment,
    translator: Optional[Translator] = None,
    runner: Optional[ToolRunner] = None,
    loader: Optional[TargetLoader] = None,
) -> None:
    """Parse the arguments and perform the requested action."""
    parsed = parse_arguments(args, env)

    if parsed.action is Action.VERSION:
        click.echo(version_text(), err=True)
        return
    if parsed.action is Action.HELP:
        click.echo(version_text(), err=True)
        click.echo(HELP_TEXT, err=True)
        return

    build(parsed, env, translator=translator, runner=runner, loader=loader)


# =============================================================================
# CLI Definition
# =============================================================================

class RawArgumentsCommand(click.Command):
    """Click command passing its arguments through unparsed as 'args'."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.params["args"] = tuple(args)
        return []


@click.command(cls=RawArgumentsCommand, add_help_option=False)
def main(args: tuple[str, ...]) -> None:
    """
    Build a program from BASIC, assembly and object files.

    Run with -h for the list of options.
    """
    env = DriverEnvironment.from_env(sys.argv[0])
    setup_logging(env.log_level)
    logger.debug("arguments: %s", list(args))

    try:
        run(args, env)
    except Exception as e:
        handle_cli_exception(e)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
