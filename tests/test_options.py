"""
Tests for the option parser
===========================

These tests verify that parse_arguments() builds the right configuration
and work lists, and rejects invalid command lines with the same messages
as the original driver.
"""

from dataclasses import fields
from pathlib import Path

import pytest

from fastbasic.config import DriverEnvironment
from fastbasic.errors import ArgumentError
from fastbasic.options import (
    DEFAULT_LISTING_WIDTH,
    Action,
    BuildConfig,
    parse_arguments,
    parse_c_integer,
)
from fastbasic.pipeline import FileJob


def parse(*args):
    return parse_arguments(list(args), DriverEnvironment(home=Path("/fb"), share_dirs=[]))


def changed_fields(config: BuildConfig) -> dict:
    """Fields of config that differ from a default BuildConfig."""
    default = parse("x.bas").config
    return {
        f.name: getattr(config, f.name)
        for f in fields(BuildConfig)
        if getattr(config, f.name) != getattr(default, f.name)
    }


# =============================================================================
# Flags Without Parameters
# =============================================================================

class TestFlags:
    """Each flag sets exactly its own fields."""

    @pytest.mark.parametrize("flag, expected", [
        ("-d", {"debug": True}),
        ("-n", {"optimize": False}),
        ("-prof", {"show_stats": True}),
        ("-c", {"one_step": True}),
        ("-l", {"listing": True}),
        ("-ls", {"listing": True, "listing_width": DEFAULT_LISTING_WIDTH}),
        ("-keep", {"keep_temps": True, "do_listing": True}),
        ("-g", {"do_listing": True}),
    ])
    def test_flag_sets_only_its_fields(self, flag, expected):
        config = parse(flag, "x.bas").config
        assert changed_fields(config) == expected

    def test_defaults(self):
        config = parse("x.bas").config
        assert config.optimize is True
        assert config.target == "default"
        assert config.listing_ext == ".list"
        assert config.asm_args == ["-g"]
        assert config.link_args == []
        assert config.syntax_path == ["/fb/syntax"]
        assert config.target_path == ["/fb"]

    def test_version_stops_parsing(self):
        """Arguments after -v are not examined."""
        parsed = parse("-v", "-bogus")
        assert parsed.action is Action.VERSION

    def test_help_stops_parsing(self):
        parsed = parse("-h")
        assert parsed.action is Action.HELP

    def test_help_does_not_need_input(self):
        assert parse("-d", "-h").action is Action.HELP


# =============================================================================
# Listing Options
# =============================================================================

class TestListingOptions:
    """Tests for -l:<ext> and -ls:<n>."""

    @pytest.mark.parametrize("arg", ["-ls:0", "-ls:257", "-ls:abc", "-ls:", "-ls=12x", "-ls:-5"])
    def test_invalid_width(self, arg):
        with pytest.raises(ArgumentError, match="'-ls' option needs line length from 1 to 256"):
            parse(arg, "x.bas")

    @pytest.mark.parametrize("arg, width", [
        ("-ls:1", 1),
        ("-ls:256", 256),
        ("-ls=40", 40),
        ("-ls:0x28", 40),
    ])
    def test_valid_width(self, arg, width):
        config = parse(arg, "x.bas").config
        assert config.listing is True
        assert config.listing_width == width
        assert config.minimized_listing

    @pytest.mark.parametrize("arg", ["-l:bas", "-l:BAS", "-l=Bas", "-l:"])
    def test_invalid_extension(self, arg):
        with pytest.raises(ArgumentError, match="invalid BASIC listing extension"):
            parse(arg, "x.bas")

    def test_valid_extension(self):
        config = parse("-l:lst", "x.bas").config
        assert config.listing is True
        assert config.listing_ext == ".lst"
        assert not config.minimized_listing


class TestParseCInteger:
    """Tests for parse_c_integer()."""

    def test_bases(self):
        assert parse_c_integer("40") == 40
        assert parse_c_integer("0x28") == 40
        assert parse_c_integer("050") == 40
        assert parse_c_integer("0") == 0

    def test_sign_and_whitespace(self):
        assert parse_c_integer(" +7") == 7
        assert parse_c_integer("-7") == -7

    def test_rejects_trailing_text(self):
        assert parse_c_integer("40x") is None
        assert parse_c_integer("0x") is None
        assert parse_c_integer("08") is None
        assert parse_c_integer("") is None


# =============================================================================
# Valued Options
# =============================================================================

class TestValuedOptions:
    """Tests for options taking a value after ':' or '='."""

    @pytest.mark.parametrize("sep", [":", "="])
    def test_segment(self, sep):
        assert parse(f"-s{sep}BCODE", "x.bas").config.segment == "BCODE"

    @pytest.mark.parametrize("arg", ["-s:", '-s:BAD"NAME'])
    def test_invalid_segment(self, arg):
        with pytest.raises(ArgumentError, match="invalid segment name"):
            parse(arg, "x.bas")

    @pytest.mark.parametrize("sep", [":", "="])
    def test_target(self, sep):
        assert parse(f"-t{sep}atari-int", "x.bas").config.target == "atari-int"

    @pytest.mark.parametrize("arg", ["-t:", '-t:"a2"'])
    def test_invalid_target(self, arg):
        with pytest.raises(ArgumentError, match="invalid compiler target name"):
            parse(arg, "x.bas")

    def test_linker_config_verbatim(self):
        assert parse("-C:my cfg.cfg", "x.bas").config.linker_config == "my cfg.cfg"

    def test_assembler_args_appended_in_order(self):
        config = parse("-X:-DDEBUG", "-X=-v", "x.bas").config
        assert config.asm_args == ["-g", "-DDEBUG", "-v"]

    def test_linker_args(self):
        config = parse("-S:0x2000", "-DL:__STACK=32", "x.bas").config
        assert config.link_args == ["--start-addr", "0x2000", "--define", "__STACK=32"]

    def test_search_paths_replaced(self):
        config = parse(
            "-syntax-path:a:b", "-target-path=t1", "-target-path:t2:t3", "x.bas"
        ).config
        assert config.syntax_path == ["a", "b"]
        assert config.target_path == ["t2", "t3"]


# =============================================================================
# Output Name
# =============================================================================

class TestOutputName:
    """Tests for '-o' handling."""

    def test_separate_value(self):
        parsed = parse("-o", "out.bin", "foo.bas")
        assert parsed.plan.bas_jobs == [FileJob("foo.bas", "out.asm")]
        assert parsed.plan.asm_jobs == [FileJob("out.asm", "out.o")]
        assert parsed.plan.link_files == ["out.o"]
        assert parsed.config.exe_name == "out.bin"

    def test_attached_value(self):
        parsed = parse("-oout.bin", "foo.bas")
        assert parsed.config.output_name == "out.bin"
        assert parsed.config.exe_name == "out.bin"
        assert parsed.plan.bas_jobs == [FileJob("foo.bas", "out.asm")]

    def test_value_may_look_like_an_option(self):
        parsed = parse("-o", "-d", "foo.bas")
        assert parsed.config.output_name == "-d"
        assert parsed.config.debug is False

    def test_applies_to_next_file_only(self):
        parsed = parse("-o", "out", "foo.bas", "bar.bas")
        assert parsed.plan.bas_jobs == [
            FileJob("foo.bas", "out.asm"),
            FileJob("bar.bas", "bar.asm"),
        ]
        assert parsed.plan.link_files == ["out.o", "bar.o"]

    def test_object_files_do_not_consume_name(self):
        parsed = parse("-o", "game.xex", "lib.o", "sound.asm")
        assert parsed.plan.asm_jobs == [FileJob("sound.asm", "game.o")]
        assert parsed.plan.link_files == ["lib.o", "game.o"]

    def test_after_files(self):
        """An '-o' after all files only names the executable."""
        parsed = parse("foo.bas", "-o", "game.xex")
        assert parsed.plan.bas_jobs == [FileJob("foo.bas", "foo.asm")]
        assert parsed.config.exe_name == "game.xex"

    @pytest.mark.parametrize("args", [
        ("-o", "a", "-o", "b", "x.bas"),
        ("-oa", "-ob", "x.bas"),
        ("-o", "a", "x.bas", "-o", "b", "y.bas"),
    ])
    def test_multiple_output_options(self, args):
        with pytest.raises(ArgumentError, match="multiple '-o' option"):
            parse(*args)

    def test_missing_value(self):
        with pytest.raises(ArgumentError, match="option '-o' must supply a file name"):
            parse("x.bas", "-o")


# =============================================================================
# Files and Errors
# =============================================================================

class TestFilesAndErrors:
    """Tests for file routing and general argument errors."""

    def test_single_basic_file(self):
        plan = parse("foo.bas").plan
        assert plan.bas_jobs == [FileJob("foo.bas", "foo.asm")]
        assert plan.asm_jobs == [FileJob("foo.asm", "foo.o")]
        assert plan.link_files == ["foo.o"]

    def test_one_step(self):
        plan = parse("-c", "foo.bas").plan
        assert plan.bas_jobs == [FileJob("foo.bas", "foo.asm")]
        assert plan.asm_jobs == []
        assert plan.link_files == []

    def test_one_step_only_affects_later_files(self):
        plan = parse("a.bas", "-c", "b.bas").plan
        assert plan.asm_jobs == [FileJob("a.asm", "a.o")]
        assert plan.link_files == ["a.o"]

    def test_mixed_inputs(self):
        plan = parse("main.bas", "SOUND.ASM", "extra.OBJ").plan
        assert plan.bas_jobs == [FileJob("main.bas", "main.asm")]
        assert plan.asm_jobs == [
            FileJob("main.asm", "main.o"),
            FileJob("SOUND.ASM", "SOUND.o"),
        ]
        assert plan.link_files == ["main.o", "SOUND.o", "extra.OBJ"]

    def test_no_input(self):
        with pytest.raises(ArgumentError, match="missing input file name"):
            parse("-d", "-n")

    def test_empty_argument(self):
        with pytest.raises(ArgumentError, match="invalid argument, try -h for help"):
            parse("x.bas", "")

    @pytest.mark.parametrize("arg", ["-x", "-L", "-keepall", "--help", "-"])
    def test_unknown_option(self, arg):
        with pytest.raises(ArgumentError) as exc:
            parse(arg, "x.bas")
        assert exc.value.message == f"invalid option '{arg}', try -h for help"
        assert exc.value.exit_status == 1
