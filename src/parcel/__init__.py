"""Parcel - Materialize an instruction stream into a synced project layout.

Usage:
    from parcel import AddToTree, CreateFile, CreateFolder, FileSystem, TreePartition

    fs = FileSystem.from_root("output/place")
    fs.apply(CreateFolder("ServerScriptService"))
    fs.apply(CreateFile("ServerScriptService/Main.server.lua", b"print('hi')"))
    fs.apply(AddToTree("ServerScriptService", TreePartition(path="ServerScriptService")))
    fs.finalize()

    for error in fs.get_errors():
        print(error)
"""

from parcel.convert import ConversionResult, run_conversion
from parcel.core.errors import ErrorKind, MaterializeError
from parcel.core.models import Project, TreePartition
from parcel.materialize import (
    AddToTree,
    CreateFile,
    CreateFolder,
    FileSystem,
    Instruction,
    InstructionReader,
    process_instructions,
)

__all__ = [
    "AddToTree",
    "ConversionResult",
    "CreateFile",
    "CreateFolder",
    "ErrorKind",
    "FileSystem",
    "Instruction",
    "InstructionReader",
    "MaterializeError",
    "Project",
    "TreePartition",
    "process_instructions",
    "run_conversion",
]

__version__ = "0.1.0"
