"""Parcel error types and utilities."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


def atomic_write(path: Path, content: bytes) -> None:
    """Write content to a file atomically using temp file + rename.

    Writes to a temporary file in the same directory, fsyncs it,
    then atomically replaces the target path.
    """
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        os.write(fd, content)
        os.fsync(fd)
        os.close(fd)
        os.replace(tmp, str(path))
    except BaseException:
        try:
            os.close(fd)
        except OSError:
            pass
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


class ErrorKind(str, Enum):
    """Categories of recoverable materializer failures."""

    DUPLICATE = "duplicate"
    RESERVED_NAME = "reserved_name"
    IO = "io"
    SERIALIZE = "serialize"
    DESCRIPTOR_WRITE = "descriptor_write"


@dataclass(frozen=True)
class MaterializeError:
    """A recorded failure. Never raised; collected in the materializer's error log."""

    kind: ErrorKind
    message: str  # human-readable summary
    target: str = ""  # branch name or path involved
    cause: str = ""  # underlying exception text

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "target": self.target,
            "cause": self.cause,
        }


class ParcelError(Exception):
    """Base exception for Parcel."""

    pass


class ConversionError(ParcelError):
    """A conversion job could not be started or completed."""

    pass


class InvalidFileExtensionError(ConversionError):
    """Input file does not have a supported extension."""

    pass


class FileOpenError(ConversionError):
    """Input file could not be opened."""

    pass


class DecodeError(ConversionError):
    """Input file could not be decoded into instructions."""

    pass


class ManifestError(DecodeError):
    """A line of an instruction manifest is malformed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class DirectoryCreateError(ConversionError):
    """Output directory could not be created."""

    pass
