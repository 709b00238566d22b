"""
Option Parser
=============

Turns the driver's command line into a BuildConfig and a BuildPlan in a
single left-to-right scan. File arguments are classified as soon as they
are seen, so options that affect file handling ('-o', '-c') only apply to
files that come after them.

Option Syntax
-------------
The driver keeps the traditional FastBasic option style instead of GNU
long options: values are attached to the option with ':' or '=', as in
"-t:atari-int" or "-ls=40". The only exception is '-o', which takes its
value either attached ("-ogame.xex") or as the next argument
("-o game.xex").

Each token is handled by the first matching rule:

1. The value of a preceding bare '-o'
2. An exact flag from FLAG_HANDLERS ('-d', '-n', '-c', ...)
3. The empty string (always an error)
4. A prefixed option from PREFIX_HANDLERS ('-t:', '-ls:', '-o', ...)
5. Any other '-' token (unknown option)
6. A file name

Output Name Quirk
-----------------
A name given with '-o' replaces the base name of the derived files of the
first BASIC or assembly file that follows it only. Later files derive
their names from their own source names. The name also becomes the
executable name.

Copyright (c) 2017-2025 Daniel Serpell & Contributors
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from fastbasic.config import DriverEnvironment
from fastbasic.errors import ArgumentError
from fastbasic.pipeline import BuildPlan, PipelineBuilder
from fastbasic.toolchain import parse_path_list


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_TARGET = "default"
DEFAULT_LISTING_EXT = ".list"
DEFAULT_ASM_ARGS = ("-g",)

# Listing width used by a bare '-ls'
DEFAULT_LISTING_WIDTH = 120
MIN_LISTING_WIDTH = 1
MAX_LISTING_WIDTH = 256

OPTION_SEPARATORS = (":", "=")

# Integer syntax accepted by '-ls:', same as C's strtol with base 0:
# decimal, 0x-prefixed hexadecimal and 0-prefixed octal.
_C_INTEGER = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


# =============================================================================
# Build Configuration
# =============================================================================

@dataclass
class BuildConfig:
    """
    Options collected from the command line.

    Attributes:
        debug: Enable translator parser debugging ('-d')
        optimize: Run the translator's optimizer (off with '-n')
        show_stats: Print token usage statistics ('-prof')
        listing: Write a listing of the parsed BASIC source
        listing_width: Column limit of a minimized listing, None for an
                       expanded listing
        listing_ext: Extension of the listing file, with the dot
        segment: Segment to place generated code in, None for default
        target: Target definition name
        one_step: Only translate to assembly ('-c')
        keep_temps: Keep intermediate files ('-keep')
        do_listing: Write assembler listing and linker label files ('-g')
        linker_config: Linker config file overriding the target's
        asm_args: Extra assembler arguments, in order
        link_args: Extra linker arguments, in order
        output_name: Name given with '-o'
        exe_name: Executable file name
        syntax_path: Folders searched for syntax definition files
        target_path: Folders searched for target definition files
    """
    debug: bool = False
    optimize: bool = True
    show_stats: bool = False
    listing: bool = False
    listing_width: Optional[int] = None
    listing_ext: str = DEFAULT_LISTING_EXT
    segment: Optional[str] = None
    target: str = DEFAULT_TARGET
    one_step: bool = False
    keep_temps: bool = False
    do_listing: bool = False
    linker_config: Optional[str] = None
    asm_args: list[str] = field(default_factory=lambda: list(DEFAULT_ASM_ARGS))
    link_args: list[str] = field(default_factory=list)
    output_name: Optional[str] = None
    exe_name: Optional[str] = None
    syntax_path: list[str] = field(default_factory=list)
    target_path: list[str] = field(default_factory=list)

    @property
    def minimized_listing(self) -> bool:
        """True if the listing is column-limited."""
        return self.listing_width is not None


class Action(Enum):
    """What the driver should do after parsing."""
    BUILD = "build"
    VERSION = "version"
    HELP = "help"


@dataclass
class ParsedArguments:
    """
    Result of parsing the command line.

    For Action.VERSION and Action.HELP the scan stopped at the flag, so
    config and plan only reflect the arguments before it.
    """
    action: Action
    config: BuildConfig
    plan: BuildPlan


# =============================================================================
# Parser State and Handlers
# =============================================================================

class _ParserState:
    """Mutable state of one scan over the arguments."""

    def __init__(self, config: BuildConfig):
        self.config = config
        self.builder = PipelineBuilder()
        # Set while an '-o' name waits for the next BASIC or assembly file
        self.output_pending = False
        # Set after a bare '-o' until its value arrives
        self.next_is_output = False
        self.output_seen = False
        self.action = Action.BUILD

    def set_output_name(self, name: str) -> None:
        self.config.output_name = name
        if not self.config.exe_name:
            self.config.exe_name = name


FlagHandler = Callable[[_ParserState], None]
PrefixHandler = Callable[[_ParserState, str], None]


def _flag_debug(state: _ParserState) -> None:
    state.config.debug = True


def _flag_no_optimize(state: _ParserState) -> None:
    state.config.optimize = False


def _flag_stats(state: _ParserState) -> None:
    state.config.show_stats = True


def _flag_version(state: _ParserState) -> None:
    state.action = Action.VERSION


def _flag_help(state: _ParserState) -> None:
    state.action = Action.HELP


def _flag_one_step(state: _ParserState) -> None:
    state.config.one_step = True


def _flag_listing(state: _ParserState) -> None:
    state.config.listing = True


def _flag_short_listing(state: _ParserState) -> None:
    state.config.listing = True
    state.config.listing_width = DEFAULT_LISTING_WIDTH


def _flag_keep(state: _ParserState) -> None:
    # Kept intermediates are only useful with their listings
    state.config.keep_temps = True
    state.config.do_listing = True


def _flag_debug_files(state: _ParserState) -> None:
    state.config.do_listing = True


def parse_c_integer(text: str) -> Optional[int]:
    """
    Parse an integer the way C's strtol does with base 0.

    The whole string must be consumed. Returns None on failure.

    Examples:
        "40" → 40, "0x28" → 40, "050" → 40, "40x" → None
    """
    match = _C_INTEGER.fullmatch(text)
    if match is None:
        return None
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    return -value if sign == "-" else value


def _opt_listing_ext(state: _ParserState, value: str) -> None:
    if not value or value.lower() == "bas":
        raise ArgumentError("invalid BASIC listing extension")
    state.config.listing = True
    state.config.listing_ext = "." + value


def _opt_listing_width(state: _ParserState, value: str) -> None:
    width = parse_c_integer(value)
    if width is None or not MIN_LISTING_WIDTH <= width <= MAX_LISTING_WIDTH:
        raise ArgumentError(
            f"'-ls' option needs line length from {MIN_LISTING_WIDTH} to {MAX_LISTING_WIDTH}"
        )
    state.config.listing = True
    state.config.listing_width = width


def _opt_output(state: _ParserState, value: str) -> None:
    if state.output_seen:
        raise ArgumentError("multiple '-o' option for the same file")
    state.output_seen = True
    state.output_pending = True
    if value:
        state.set_output_name(value)
    else:
        state.next_is_output = True


def _opt_segment(state: _ParserState, value: str) -> None:
    if not value or '"' in value:
        raise ArgumentError("invalid segment name")
    state.config.segment = value


def _opt_target(state: _ParserState, value: str) -> None:
    if not value or '"' in value:
        raise ArgumentError("invalid compiler target name")
    state.config.target = value


def _opt_linker_config(state: _ParserState, value: str) -> None:
    state.config.linker_config = value


def _opt_asm_arg(state: _ParserState, value: str) -> None:
    state.config.asm_args.append(value)


def _opt_start_addr(state: _ParserState, value: str) -> None:
    state.config.link_args.extend(["--start-addr", value])


def _opt_define(state: _ParserState, value: str) -> None:
    state.config.link_args.extend(["--define", value])


def _opt_syntax_path(state: _ParserState, value: str) -> None:
    state.config.syntax_path = parse_path_list(value)


def _opt_target_path(state: _ParserState, value: str) -> None:
    state.config.target_path = parse_path_list(value)


FLAG_HANDLERS: dict[str, FlagHandler] = {
    "-d": _flag_debug,
    "-n": _flag_no_optimize,
    "-prof": _flag_stats,
    "-v": _flag_version,
    "-c": _flag_one_step,
    "-l": _flag_listing,
    "-ls": _flag_short_listing,
    "-h": _flag_help,
    "-keep": _flag_keep,
    "-g": _flag_debug_files,
}


def _with_separators(name: str) -> tuple[str, ...]:
    return tuple(name + sep for sep in OPTION_SEPARATORS)


# Checked in order; the first matching prefix wins
PREFIX_HANDLERS: list[tuple[tuple[str, ...], PrefixHandler]] = [
    (_with_separators("-l"), _opt_listing_ext),
    (_with_separators("-ls"), _opt_listing_width),
    (("-o",), _opt_output),
    (_with_separators("-s"), _opt_segment),
    (_with_separators("-t"), _opt_target),
    (_with_separators("-C"), _opt_linker_config),
    (_with_separators("-X"), _opt_asm_arg),
    (_with_separators("-S"), _opt_start_addr),
    (_with_separators("-DL"), _opt_define),
    (_with_separators("-syntax-path"), _opt_syntax_path),
    (_with_separators("-target-path"), _opt_target_path),
]


def _find_prefix_handler(arg: str) -> Optional[tuple[PrefixHandler, str]]:
    """Return the handler for a prefixed option and the option's value."""
    for prefixes, handler in PREFIX_HANDLERS:
        for prefix in prefixes:
            if arg.startswith(prefix):
                return handler, arg[len(prefix):]
    return None


# =============================================================================
# Public Interface
# =============================================================================

def parse_arguments(
    args: Sequence[str],
    env: Optional[DriverEnvironment] = None,
) -> ParsedArguments:
    """
    Parse the driver's command line.

    Args:
        args: Command-line arguments, without the program name
        env: Process environment supplying the default search paths

    Returns:
        ParsedArguments with the action, build configuration and plan.

    Raises:
        ArgumentError: If an option is invalid or no input file is given
    """
    env = env or DriverEnvironment()
    config = BuildConfig(
        syntax_path=env.default_search_path("syntax"),
        target_path=env.default_search_path(""),
    )
    state = _ParserState(config)

    for arg in args:
        if state.next_is_output:
            state.set_output_name(arg)
            state.next_is_output = False
            continue

        flag = FLAG_HANDLERS.get(arg)
        if flag is not None:
            flag(state)
            if state.action is not Action.BUILD:
                return ParsedArguments(state.action, config, state.builder.plan)
            continue

        if not arg:
            raise ArgumentError("invalid argument, try -h for help")

        found = _find_prefix_handler(arg)
        if found is not None:
            handler, value = found
            handler(state, value)
            continue

        if arg.startswith("-"):
            raise ArgumentError(f"invalid option '{arg}', try -h for help")

        pending = config.output_name if state.output_pending else None
        if state.builder.add_file(arg, one_step=config.one_step, output_name=pending):
            state.output_pending = False

    if state.builder.plan.is_empty:
        raise ArgumentError("missing input file name")
    if state.next_is_output:
        raise ArgumentError("option '-o' must supply a file name")

    logger.debug("parsed configuration: %s", config)
    return ParsedArguments(Action.BUILD, config, state.builder.plan)
