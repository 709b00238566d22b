"""
Pipeline Builder
================

Collects the work lists of a build from the classified file arguments:

    ┌──────────┐         ┌──────────┐         ┌──────────┐
    │ .bas file│────────▶│ .asm file│────────▶│  .o file │───┐
    └──────────┘translate└──────────┘  ca65   └──────────┘   │
                         ┌──────────┐         ┌──────────┐   │   ┌──────────┐
                         │ .asm file│────────▶│  .o file │───┼──▶│executable│
                         └──────────┘  ca65   └──────────┘   │   └──────────┘
                                              ┌──────────┐   │ ld65
                                              │  .o file │───┘
                                              └──────────┘

Each list keeps the command-line order of the files, which is also the
order the jobs run in and the order objects are passed to the linker.

In single-step mode ('-c') BASIC sources are only translated, and assembly
sources are assembled but not linked.

Copyright (c) 2017-2025 Daniel Serpell & Contributors
"""

import logging
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from fastbasic.files import ClassifiedFile, FileRole, classify_file, consumes_output_name


logger = logging.getLogger(__name__)


class FileJob(NamedTuple):
    """One translate or assemble step: input file to output file."""
    input: str
    output: str


@dataclass
class BuildPlan:
    """
    Ordered work lists of a build.

    Attributes:
        bas_jobs: BASIC source → assembly file
        asm_jobs: Assembly file → object file
        link_files: Objects passed to the linker
    """
    bas_jobs: list[FileJob] = field(default_factory=list)
    asm_jobs: list[FileJob] = field(default_factory=list)
    link_files: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True if no input file was added."""
        return not (self.bas_jobs or self.asm_jobs or self.link_files)

    @property
    def needs_link(self) -> bool:
        """True if the link stage has to run."""
        return bool(self.link_files)


class PipelineBuilder:
    """
    Builds a BuildPlan one file argument at a time.

    Example:
        builder = PipelineBuilder()
        builder.add_file("game.bas")
        builder.add_file("sound.asm")
        plan = builder.plan
    """

    def __init__(self, plan: Optional[BuildPlan] = None):
        self.plan = plan or BuildPlan()

    def add_file(
        self,
        name: str,
        one_step: bool = False,
        output_name: Optional[str] = None,
    ) -> bool:
        """
        Classify a file argument and append its jobs.

        Args:
            name: File name as given on the command line
            one_step: Stop after translation (no assemble/link for BASIC,
                      no link for assembly)
            output_name: Pending '-o' name, if any

        Returns:
            True if the pending output name was used by this file, in
            which case the caller must discard it.
        """
        classified = classify_file(name, output_name)
        self.add_classified(classified, one_step)
        return output_name is not None and consumes_output_name(classified.role)

    def add_classified(self, classified: ClassifiedFile, one_step: bool = False) -> None:
        """Append the jobs of an already classified file."""
        plan = self.plan

        if classified.role is FileRole.OBJECT:
            plan.link_files.append(classified.path)

        elif classified.role is FileRole.ASSEMBLY:
            plan.asm_jobs.append(FileJob(classified.path, classified.obj_path))
            if not one_step:
                plan.link_files.append(classified.obj_path)

        else:
            plan.bas_jobs.append(FileJob(classified.path, classified.asm_path))
            if not one_step:
                plan.asm_jobs.append(FileJob(classified.asm_path, classified.obj_path))
                plan.link_files.append(classified.obj_path)

        logger.debug("input '%s' classified as %s", classified.path, classified.role.name)
