"""
File Classifier
===============

Maps a file argument to its role in the build pipeline and computes the
sibling file names produced by the later stages.

    .bas (or anything else)  →  BASIC source   →  .asm + .o
    .asm / .s                →  assembly       →  .o
    .o / .obj                →  object         →  (linked as is)

Extensions are compared case-insensitively. Files with an unknown
extension are treated as BASIC sources, since BASIC programs are often
saved without one.

When an output name was given with '-o', the derived names are built from
it instead of the source name (e.g. "-o game.xex src.bas" produces
"game.asm" and "game.o").
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastbasic.toolchain import add_extension, get_extension_lower


# =============================================================================
# Constants
# =============================================================================

OBJECT_EXTENSIONS = frozenset({"o", "obj"})
ASM_EXTENSIONS = frozenset({"s", "asm"})

ASM_SUFFIX = ".asm"
OBJECT_SUFFIX = ".o"


class FileRole(Enum):
    """Pipeline role of a file argument."""
    BASIC = "bas"
    ASSEMBLY = "asm"
    OBJECT = "obj"


# =============================================================================
# Classified Files
# =============================================================================

@dataclass(frozen=True)
class ClassifiedFile:
    """
    A file argument tagged with its role and derived sibling names.

    Attributes:
        role: Pipeline role of the file
        path: The file name as given on the command line
        asm_path: Assembly output (BASIC sources only)
        obj_path: Object output (BASIC and assembly sources), or the
                  file itself for objects
    """
    role: FileRole
    path: str
    asm_path: Optional[str] = None
    obj_path: Optional[str] = None


def detect_role(name: str) -> FileRole:
    """Determine the pipeline role of a file from its extension."""
    ext = get_extension_lower(name)
    if ext in OBJECT_EXTENSIONS:
        return FileRole.OBJECT
    if ext in ASM_EXTENSIONS:
        return FileRole.ASSEMBLY
    return FileRole.BASIC


def classify_file(name: str, output_name: Optional[str] = None) -> ClassifiedFile:
    """
    Classify a file argument and derive its sibling file names.

    Args:
        name: File name as given on the command line
        output_name: Pending '-o' name; replaces the base name of the
                     derived files. Ignored for object files.

    Returns:
        ClassifiedFile with the role-specific derived paths.

    Example:
        >>> classify_file("foo.bas")
        ClassifiedFile(role=<FileRole.BASIC: 'bas'>, path='foo.bas',
                       asm_path='foo.asm', obj_path='foo.o')
    """
    role = detect_role(name)

    if role is FileRole.OBJECT:
        return ClassifiedFile(role=role, path=name, obj_path=name)

    base = output_name if output_name is not None else name
    obj_path = add_extension(base, OBJECT_SUFFIX)

    if role is FileRole.ASSEMBLY:
        return ClassifiedFile(role=role, path=name, obj_path=obj_path)

    return ClassifiedFile(
        role=role,
        path=name,
        asm_path=add_extension(base, ASM_SUFFIX),
        obj_path=obj_path,
    )


def consumes_output_name(role: FileRole) -> bool:
    """True if a file of this role uses up a pending '-o' name."""
    return role is not FileRole.OBJECT
