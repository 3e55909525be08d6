"""Instruction manifests: JSON Lines encoding of an instruction stream.

One JSON object per line, discriminated by ``type``::

    {"type": "CreateFolder", "folder": "ServerScriptService"}
    {"type": "CreateFile", "filename": "ServerScriptService/Main.server.lua", "contents": "print(1)"}
    {"type": "CreateFile", "filename": "logo.png", "contents_base64": "iVBORw0..."}
    {"type": "AddToTree", "name": "ServerScriptService",
     "partition": {"path": "ServerScriptService", "class_name": "ServerScriptService"}}

Blank lines are skipped.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from parcel.core.errors import ManifestError
from parcel.core.models import TreePartition
from parcel.materialize.instructions import AddToTree, CreateFile, CreateFolder, Instruction

MANIFEST_EXTENSIONS = {".jsonl"}


def _require_str(obj: dict, key: str, line: int) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise ManifestError(f"'{key}' must be a string", line)
    return value


def _decode_contents(obj: dict, line: int) -> bytes:
    if "contents_base64" in obj:
        encoded = _require_str(obj, "contents_base64", line)
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ManifestError(f"invalid base64 contents: {e}", line) from e
    if "contents" in obj:
        text = _require_str(obj, "contents", line)
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ManifestError(f"contents are not valid UTF-8 text: {e.reason}", line) from e
    return b""


def decode_instruction(obj: Any, line: int | None = None) -> Instruction:
    """Turn one decoded manifest object into an Instruction."""
    if not isinstance(obj, dict):
        raise ManifestError("instruction must be a JSON object", line)

    kind = obj.get("type")
    if kind == "AddToTree":
        name = _require_str(obj, "name", line)
        try:
            partition = TreePartition.from_dict(obj.get("partition", {}))
        except TypeError as e:
            raise ManifestError(str(e), line) from e
        return AddToTree(name=name, partition=partition)
    if kind == "CreateFile":
        return CreateFile(
            filename=_require_str(obj, "filename", line),
            contents=_decode_contents(obj, line),
        )
    if kind == "CreateFolder":
        return CreateFolder(folder=_require_str(obj, "folder", line))

    raise ManifestError(f"unknown instruction type: {kind!r}", line)


def encode_instruction(instruction: Instruction) -> dict[str, Any]:
    """Inverse of :func:`decode_instruction`.

    File contents that are valid UTF-8 are stored as text, anything else as base64.
    """
    if isinstance(instruction, AddToTree):
        return {
            "type": "AddToTree",
            "name": instruction.name,
            "partition": instruction.partition.to_manifest(),
        }
    if isinstance(instruction, CreateFile):
        data: dict[str, Any] = {"type": "CreateFile", "filename": instruction.filename}
        try:
            data["contents"] = instruction.contents.decode("utf-8")
        except UnicodeDecodeError:
            data["contents_base64"] = base64.b64encode(instruction.contents).decode("ascii")
        return data
    if isinstance(instruction, CreateFolder):
        return {"type": "CreateFolder", "folder": instruction.folder}
    raise TypeError(f"Unknown instruction: {instruction!r}")


def iter_manifest(lines: Iterable[str]) -> Iterator[Instruction]:
    """Decode manifest lines lazily. Raises ManifestError on the first bad line."""
    for lineno, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text:
            continue
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestError(f"invalid JSON: {e.msg}", lineno) from e
        yield decode_instruction(obj, lineno)


def load_manifest(path: str | Path) -> list[Instruction]:
    """Read and fully decode a manifest file."""
    with open(path, encoding="utf-8") as f:
        return list(iter_manifest(f))


def dump_manifest(instructions: Iterable[Instruction], path: str | Path) -> int:
    """Write instructions to ``path`` as JSON Lines. Returns the count written."""
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for instruction in instructions:
            f.write(json.dumps(encode_instruction(instruction), ensure_ascii=False) + "\n")
            count += 1
    return count
