"""
Temporary File Tracking
=======================

Intermediate files (assembly produced from BASIC, objects produced from
assembly) are registered as soon as the stage creating them succeeds.
They are removed only when the whole build succeeded; after a failure
they stay on disk so the failing stage's input can be inspected.

cleanup() is called explicitly at the end of a successful build and
nowhere else.
"""

import logging

from fastbasic.toolchain import remove_file


logger = logging.getLogger(__name__)


class TempFileSet:
    """Ordered set of intermediate files to remove after a successful build."""

    def __init__(self) -> None:
        self._paths: list[str] = []

    def add(self, path: str) -> None:
        """Register an intermediate file."""
        if path not in self._paths:
            logger.debug("temporary file '%s'", path)
            self._paths.append(path)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self):
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def cleanup(self, keep: bool = False) -> int:
        """
        Remove all registered files unless keep is set.

        Removal failures are ignored. The set is emptied in both cases.

        Returns:
            Number of files actually removed.
        """
        removed = 0
        if not keep:
            for path in self._paths:
                if remove_file(path):
                    removed += 1
        else:
            logger.debug("keeping %d temporary files", len(self._paths))
        self._paths.clear()
        return removed
