"""Instruction protocol and the filesystem materializer."""

from parcel.materialize.filesystem import (
    DESCRIPTOR_FILENAME,
    SRC,
    FileSystem,
    MaterializeSummary,
)
from parcel.materialize.instructions import (
    AddToTree,
    CreateFile,
    CreateFolder,
    Instruction,
    InstructionReader,
    process_instructions,
)

__all__ = [
    "DESCRIPTOR_FILENAME",
    "SRC",
    "AddToTree",
    "CreateFile",
    "CreateFolder",
    "FileSystem",
    "Instruction",
    "InstructionReader",
    "MaterializeSummary",
    "process_instructions",
]
