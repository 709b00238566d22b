"""
Shared fixtures for the driver tests.

The external tools are replaced by fakes:
- FakeRunner records every ca65/ld65 call and creates the "-o" output file
- FakeTranslator records every translation and writes the assembly file
"""

from pathlib import Path
from typing import Sequence

import pytest

from fastbasic.config import DriverEnvironment
from fastbasic.target import TargetDef


class FakeRunner:
    """Stand-in for run_process() with per-program exit statuses."""

    def __init__(self, statuses: dict[str, int] | None = None):
        self.statuses = statuses or {}
        self.calls: list[tuple[str, list[str]]] = []

    def __call__(self, program: str, argv: Sequence[str]) -> int:
        argv = list(argv)
        self.calls.append((program, argv))
        status = self.statuses.get(program, 0)
        if status == 0 and "-o" in argv:
            Path(argv[argv.index("-o") + 1]).write_text("output\n")
        return status

    def programs(self) -> list[str]:
        return [program for program, _ in self.calls]

    def argv_for(self, program: str) -> list[list[str]]:
        return [argv for p, argv in self.calls if p == program]


class FakeTranslator:
    """Stand-in for the BASIC translator."""

    def __init__(self, status: int = 0):
        self.status = status
        self.calls: list[tuple[str, str, tuple[str, ...], str]] = []

    def compile_file(self, source, output, syntax_files, listing_path) -> int:
        self.calls.append((source, output, tuple(syntax_files), listing_path))
        if self.status == 0:
            Path(output).write_text("; translated\n")
        return self.status


class FakeLoader:
    """Target loader returning a fixed definition."""

    def __init__(self, target: TargetDef):
        self.target = target
        self.requests: list[tuple[list[str], list[str], str]] = []

    def load(self, target_path, syntax_path, name) -> TargetDef:
        self.requests.append((list(target_path), list(syntax_path), name))
        return self.target


@pytest.fixture
def env(tmp_path) -> DriverEnvironment:
    """Environment rooted at a temporary installation folder."""
    home = tmp_path / "install"
    home.mkdir()
    return DriverEnvironment(home=home, share_dirs=[])


@pytest.fixture
def atari_target() -> TargetDef:
    return TargetDef(
        name="default",
        library="fastbasic-fp.lib",
        linker_config="fastbasic.cfg",
        binary_extension=".xex",
        asm_args=("-tatari", "-DFASTBASIC_FP"),
        syntax_files=("basic.syn",),
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def loader(atari_target) -> FakeLoader:
    return FakeLoader(atari_target)


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    """Run the test inside an empty working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work
