"""Conversion driver: one instruction manifest in, one materialized project out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from parcel.core.errors import (
    DecodeError,
    DirectoryCreateError,
    FileOpenError,
    InvalidFileExtensionError,
    MaterializeError,
)
from parcel.core.logging import LogBuffer, attach_buffer, detach_buffer
from parcel.manifest import MANIFEST_EXTENSIONS, load_manifest
from parcel.materialize import FileSystem, MaterializeSummary, process_instructions

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of a conversion that ran to completion.

    ``success`` is True even when ``errors`` is non-empty; the materializer
    keeps going past individual failures, and callers surface them as warnings.
    """

    success: bool
    message: str
    output_path: Path | None = None
    errors: list[MaterializeError] = field(default_factory=list)
    summary: MaterializeSummary | None = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "output_path": str(self.output_path) if self.output_path else None,
            "errors": [e.to_dict() for e in self.errors],
        }


def run_conversion(
    input_path: str | Path,
    output_folder: str | Path,
    *,
    log_buffer: LogBuffer | None = None,
) -> ConversionResult:
    """Materialize the manifest at ``input_path`` into ``output_folder/<stem>``.

    Raises a ConversionError subclass if the job cannot start. Everything
    that goes wrong after that is collected in ``ConversionResult.errors``.
    """
    handler = attach_buffer(log_buffer) if log_buffer is not None else None
    try:
        return _do_conversion(Path(input_path), Path(output_folder))
    finally:
        if handler is not None:
            detach_buffer(handler)


def _do_conversion(input_path: Path, output_folder: Path) -> ConversionResult:
    logger.info("Starting conversion...")
    logger.info("Input file: %s", input_path)
    logger.info("Output folder: %s", output_folder)

    if input_path.suffix.lower() not in MANIFEST_EXTENSIONS:
        logger.info("Error: Invalid file extension")
        supported = ", ".join(sorted(MANIFEST_EXTENSIONS))
        raise InvalidFileExtensionError(
            f"Invalid file extension. Only {supported} files are supported."
        )

    logger.info("Reading instruction manifest...")
    try:
        instructions = load_manifest(input_path)
    except DecodeError:
        raise
    except UnicodeDecodeError as e:
        raise DecodeError(f"Failed to decode file: {e}") from e
    except OSError as e:
        raise FileOpenError(f"Failed to open file: {e}") from e

    stem = input_path.stem or "project"
    output_path = output_folder / stem

    logger.info("Creating output directory: %s", output_path)
    try:
        output_path.mkdir(parents=True, exist_ok=True)
    except (OSError, ValueError) as e:
        raise DirectoryCreateError(f"Failed to create output directory: {e}") from e

    logger.info("Processing %d instructions...", len(instructions))
    filesystem = FileSystem.from_root(output_path)
    process_instructions(instructions, filesystem)

    if filesystem.has_errors():
        logger.warning("Conversion finished with %d error(s)", len(filesystem.errors))
    else:
        logger.info("Conversion completed successfully!")
    logger.info("Output saved to: %s", output_path)

    return ConversionResult(
        success=True,
        message=f"Successfully converted to {output_path}",
        output_path=output_path,
        errors=filesystem.get_errors(),
        summary=filesystem.summary(),
    )
