"""Filesystem materializer: applies instructions to an output directory.

Every generated file and folder lives under ``<root>/src``. The descriptor
(``default.project.json``) is written next to it, directly under ``<root>``.
Failures never propagate out of :meth:`FileSystem.apply` or
:meth:`FileSystem.finalize`; they are logged and collected as
:class:`MaterializeError` entries so a large job gets as far as it can.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from parcel.core.errors import ErrorKind, MaterializeError, atomic_write
from parcel.core.models import Project, TreePartition
from parcel.materialize.instructions import (
    AddToTree,
    CreateFile,
    CreateFolder,
    Instruction,
    InstructionReader,
)

logger = logging.getLogger(__name__)

SRC = "src"
DESCRIPTOR_FILENAME = "default.project.json"


@dataclass
class MaterializeSummary:
    """Counts for a materializer run."""

    branches: int = 0
    files_written: int = 0
    folders_created: int = 0
    errors: int = 0
    descriptor_path: Path | None = None  # None until a descriptor was written


def _prefixed(path: str) -> str:
    return str(PurePosixPath(SRC) / path)


def _reserved_key(name: str, partition: TreePartition) -> str | None:
    """Return the first ``$``-prefixed name in a branch, as a slash-joined key path.

    Descriptor attributes (``$className``, ``$path``, ...) share the key space
    with child names, so such names cannot be represented.
    """
    if name.startswith("$"):
        return name
    for child_name, child in partition.children.items():
        found = _reserved_key(child_name, child)
        if found is not None:
            return f"{name}/{found}"
    return None


class FileSystem(InstructionReader):
    """Stateful instruction sink bound to one output root."""

    def __init__(self, root: Path, project: Project | None = None) -> None:
        self.root = Path(root)
        self.source = self.root / SRC
        self.project = project if project is not None else Project()
        self.errors: list[MaterializeError] = []
        self._files_written = 0
        self._folders_created = 0
        self._descriptor_written = False

    @classmethod
    def from_root(cls, root: Path | str) -> FileSystem:
        """Create a materializer and eagerly create its source directory.

        A failure to create the directory is only warned about; later
        operations fail (and are recorded) on their own if it never appears.
        """
        fs = cls(Path(root))
        try:
            fs.source.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            logger.warning("Could not create source directory: %s", e)
        return fs

    @property
    def descriptor_path(self) -> Path:
        return self.root / DESCRIPTOR_FILENAME

    def get_errors(self) -> list[MaterializeError]:
        """Return every error recorded so far, in order."""
        return list(self.errors)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> MaterializeSummary:
        return MaterializeSummary(
            branches=len(self.project.tree),
            files_written=self._files_written,
            folders_created=self._folders_created,
            errors=len(self.errors),
            descriptor_path=self.descriptor_path if self._descriptor_written else None,
        )

    def _record(
        self,
        kind: ErrorKind,
        message: str,
        target: str = "",
        cause: Exception | None = None,
    ) -> None:
        error = MaterializeError(
            kind=kind,
            message=message,
            target=target,
            cause=str(cause) if cause is not None else "",
        )
        if kind in (ErrorKind.DUPLICATE, ErrorKind.RESERVED_NAME):
            logger.warning("%s", message)
        else:
            logger.error("%s", message)
        self.errors.append(error)

    # -- Instructions --

    def apply(self, instruction: Instruction) -> None:
        """Apply one instruction. Failures are recorded, never raised."""
        if isinstance(instruction, AddToTree):
            self._add_to_tree(instruction.name, instruction.partition)
        elif isinstance(instruction, CreateFile):
            self._create_file(instruction.filename, instruction.contents)
        elif isinstance(instruction, CreateFolder):
            self._create_folder(instruction.folder)
        else:
            raise TypeError(f"Unknown instruction: {instruction!r}")

    read_instruction = apply

    def _add_to_tree(self, name: str, partition: TreePartition) -> None:
        if name in self.project.tree:
            self._record(
                ErrorKind.DUPLICATE,
                f"Duplicate item in tree (skipping): {name}",
                target=name,
            )
            return

        reserved = _reserved_key(name, partition)
        if reserved is not None:
            self._record(
                ErrorKind.RESERVED_NAME,
                f"Reserved name in tree (skipping): {reserved}",
                target=name,
            )
            return

        # The stored tree never aliases the producer's objects.
        partition = copy.deepcopy(partition)

        # Only the partition and its direct children carry raw paths.
        if partition.path is not None:
            partition.path = _prefixed(partition.path)
        for child in partition.children.values():
            if child.path is not None:
                child.path = _prefixed(child.path)

        self.project.tree[name] = partition
        logger.debug("Added %s to tree", name)

    def _create_file(self, filename: str, contents: bytes) -> None:
        full_path = self.source / filename
        try:
            f = open(full_path, "wb")
        except (OSError, ValueError) as e:
            self._record(
                ErrorKind.IO,
                f"Failed to create file {filename!r}: {e}",
                target=filename,
                cause=e,
            )
            return

        with f:
            try:
                f.write(contents)
            except OSError as e:
                self._record(
                    ErrorKind.IO,
                    f"Failed to write to file {filename!r}: {e}",
                    target=filename,
                    cause=e,
                )
                return

        self._files_written += 1
        logger.debug("Wrote %s (%d bytes)", filename, len(contents))

    def _create_folder(self, folder: str) -> None:
        full_path = self.source / folder
        try:
            full_path.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            self._record(
                ErrorKind.IO,
                f"Failed to create folder {folder!r}: {e}",
                target=folder,
                cause=e,
            )
            return

        self._folders_created += 1
        logger.debug("Created folder %s", folder)

    # -- Finalize --

    def finalize(self) -> None:
        """Serialize the project and write the descriptor under the root.

        Calling it again re-serializes the current tree and overwrites the file.
        """
        try:
            data = self.project.to_json()
        except (TypeError, ValueError) as e:
            self._record(
                ErrorKind.SERIALIZE,
                f"Failed to serialize project: {e}",
                cause=e,
            )
            return

        try:
            atomic_write(self.descriptor_path, data)
        except OSError as e:
            self._record(
                ErrorKind.DESCRIPTOR_WRITE,
                f"Failed to write project file: {e}",
                target=DESCRIPTOR_FILENAME,
                cause=e,
            )
            return

        self._descriptor_written = True
        logger.info("Created %s", DESCRIPTOR_FILENAME)

    finish_instructions = finalize
