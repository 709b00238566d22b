"""
Pipeline Executor
=================

Runs the three stages of a build in order:

1. Translate every BASIC source to assembly
2. Assemble every assembly file with ca65
3. Link all objects and the target library with ld65

The first failing job stops the build: later jobs and stages are not run
and no intermediate file is removed. Intermediate files are only removed
after the link (or the last stage in single-step mode) succeeded, and not
at all with '-keep'.

Progress is reported on stderr, one line per job:

    BAS compile 'game.bas' to 'game.asm'
    ASM assemble 'game.asm' to 'game.o'
    LINK game.xex

Copyright (c) 2017-2025 Daniel Serpell & Contributors
"""

import logging
from typing import Optional

import click

from fastbasic.config import DriverEnvironment
from fastbasic.errors import AssembleError, LinkError, TranslateError
from fastbasic.options import BuildConfig
from fastbasic.pipeline import BuildPlan, FileJob
from fastbasic.target import ResolvedTarget
from fastbasic.tempfiles import TempFileSet
from fastbasic.toolchain import ToolInvocation, ToolRunner, add_extension, run_process
from fastbasic.translator import Translator


logger = logging.getLogger(__name__)

ASM_LISTING_SUFFIX = ".lst"
LABEL_FILE_SUFFIX = ".lbl"


class PipelineExecutor:
    """
    Executes a BuildPlan.

    Attributes:
        config: Build configuration (after target resolution)
        plan: Work lists to execute
        target: Resolved target paths
        translator: BASIC translator
        temp_files: Intermediate files registered so far
    """

    def __init__(
        self,
        config: BuildConfig,
        plan: BuildPlan,
        target: ResolvedTarget,
        translator: Translator,
        env: Optional[DriverEnvironment] = None,
        runner: Optional[ToolRunner] = None,
    ):
        self.config = config
        self.plan = plan
        self.target = target
        self.translator = translator
        self.env = env or DriverEnvironment()
        self.runner = runner or run_process
        self.temp_files = TempFileSet()

    # -------------------------------------------------------------------------
    # Argument vectors
    # -------------------------------------------------------------------------

    def assembler_argv(self, job: FileJob) -> list[str]:
        """ca65 arguments for one assembly job."""
        argv = ["-I", self.target.asminc_dir, "-o", job.output]
        if self.config.do_listing:
            argv.extend(["-l", add_extension(job.output, ASM_LISTING_SUFFIX)])
        argv.extend(self.config.asm_args)
        argv.append(job.input)
        return argv

    def linker_argv(self) -> list[str]:
        """ld65 arguments for the link stage."""
        exe_name = self.config.exe_name
        argv = ["-C", self.target.linker_config, "-o", exe_name]
        if self.config.do_listing:
            argv.extend(["-Ln", add_extension(exe_name, LABEL_FILE_SUFFIX)])
        argv.extend(self.config.link_args)
        argv.extend(self.plan.link_files)
        argv.append(self.target.library_path)
        return argv

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def translate(self) -> None:
        """
        Translate all BASIC sources.

        Raises:
            TranslateError: On the first failing source
        """
        config = self.config
        for job in self.plan.bas_jobs:
            listing_path = add_extension(job.input, config.listing_ext)
            click.echo(f"BAS compile '{job.input}' to '{job.output}'", err=True)
            if config.listing:
                mode = "minimized" if config.minimized_listing else "expanded"
                click.echo(f"    with {mode} listing to '{listing_path}'", err=True)

            status = self.translator.compile_file(
                job.input, job.output, self.target.target.syntax_files, listing_path
            )
            if status:
                raise TranslateError(job.input, status)
            if not config.one_step:
                self.temp_files.add(job.output)

    def assemble(self) -> None:
        """
        Assemble all assembly files.

        Raises:
            AssembleError: On the first failing file
        """
        for job in self.plan.asm_jobs:
            click.echo(f"ASM assemble '{job.input}' to '{job.output}'", err=True)
            tool = ToolInvocation("ca65", self.env.ca65, self.assembler_argv(job), self.runner)
            status = tool.run()
            if status:
                raise AssembleError(job.input, status)
            if not self.config.one_step:
                self.temp_files.add(job.output)

    def link(self) -> None:
        """
        Link all objects into the executable, if there is anything to link.

        Raises:
            LinkError: If the linker fails
        """
        if not self.plan.needs_link:
            return
        click.echo(f"LINK {self.config.exe_name}", err=True)
        tool = ToolInvocation("ld65", self.env.ld65, self.linker_argv(), self.runner)
        status = tool.run()
        if status:
            raise LinkError(self.config.exe_name, status)

    def run(self) -> None:
        """
        Run all stages and remove intermediate files.

        Raises:
            BuildError: If any stage fails; intermediate files are kept
        """
        self.translate()
        self.assemble()
        self.link()
        removed = self.temp_files.cleanup(keep=self.config.keep_temps)
        logger.debug("build finished, %d intermediate files removed", removed)

