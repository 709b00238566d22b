"""
BASIC Translator Interface
==========================

The translator turns one BASIC source into assembly for the target. The
driver only needs a single operation from it:

    compile_file(source, output, syntax_files, listing_path) -> status

A status of 0 means success. The translator prints its own diagnostics.

ExternalTranslator runs a separate translator program with the options
from the build configuration:

    [-d] [-n] [-prof] [-s:SEG] [-l:LISTING | -ls:WIDTH:LISTING]
    [-syntax:FILE ...] SOURCE -o OUTPUT

This command line is the contract of this package, not the one of the
upstream FastBasic compiler, which links its translator in. A program set
through FASTBASIC_TRANSLATOR must accept it: listing and syntax options
carry their file names inline, and the listing width comes before the
listing path.
"""

from typing import Optional, Protocol, Sequence

from fastbasic.options import BuildConfig
from fastbasic.toolchain import ToolInvocation, ToolRunner, run_process


class Translator(Protocol):
    """Anything able to translate a BASIC source to assembly."""

    def compile_file(
        self,
        source: str,
        output: str,
        syntax_files: Sequence[str],
        listing_path: str,
    ) -> int:
        ...


class ExternalTranslator:
    """
    Translator running an external program.

    Attributes:
        program: Translator program name or path
        config: Build configuration supplying the translator options
        runner: Function executing the program
    """

    def __init__(
        self,
        program: str,
        config: BuildConfig,
        runner: Optional[ToolRunner] = None,
    ):
        self.program = program
        self.config = config
        self.runner = runner or run_process

    def build_argv(
        self,
        source: str,
        output: str,
        syntax_files: Sequence[str],
        listing_path: str,
    ) -> list[str]:
        """Translator arguments for one source file."""
        config = self.config
        argv: list[str] = []
        if config.debug:
            argv.append("-d")
        if not config.optimize:
            argv.append("-n")
        if config.show_stats:
            argv.append("-prof")
        if config.segment:
            argv.append(f"-s:{config.segment}")
        if config.listing:
            if config.minimized_listing:
                argv.append(f"-ls:{config.listing_width}:{listing_path}")
            else:
                argv.append(f"-l:{listing_path}")
        argv.extend(f"-syntax:{path}" for path in syntax_files)
        argv.extend([source, "-o", output])
        return argv

    def compile_file(
        self,
        source: str,
        output: str,
        syntax_files: Sequence[str],
        listing_path: str,
    ) -> int:
        tool = ToolInvocation(
            name="translate",
            program=self.program,
            argv=self.build_argv(source, output, syntax_files, listing_path),
            runner=self.runner,
        )
        return tool.run()
