"""Shared test fixtures for Parcel."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from parcel.config import reset_settings
from parcel.core.models import TreePartition
from parcel.materialize import AddToTree, CreateFile, CreateFolder, FileSystem


@pytest.fixture
def output_root(tmp_path):
    """Fresh output root for each test (not created yet)."""
    return tmp_path / "place"


@pytest.fixture
def filesystem(output_root):
    return FileSystem.from_root(output_root)


@pytest.fixture
def unwritable_root(tmp_path):
    """A root whose parent is a regular file, so nothing can be created under it."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return blocker / "place"


@pytest.fixture
def sample_instructions():
    """A small place: one scripted service, one metadata-only branch."""
    return [
        CreateFolder("ServerScriptService"),
        CreateFile("ServerScriptService/Main.server.lua", b"print('hello')\n"),
        CreateFolder("ReplicatedStorage/Modules"),
        CreateFile("ReplicatedStorage/Modules/Util.lua", b"return {}\n"),
        AddToTree(
            "ServerScriptService",
            TreePartition(path="ServerScriptService", class_name="ServerScriptService"),
        ),
        AddToTree(
            "ReplicatedStorage",
            TreePartition(
                class_name="ReplicatedStorage",
                children={"Modules": TreePartition(path="ReplicatedStorage/Modules")},
            ),
        ),
        AddToTree("Lighting", TreePartition(class_name="Lighting", ignore_unknown_instances=True)),
    ]


@pytest.fixture
def write_manifest(tmp_path):
    """Write raw manifest objects (or strings) as a .jsonl file and return its path."""

    def _write(lines, name: str = "place.jsonl") -> Path:
        path = tmp_path / name
        text = "\n".join(line if isinstance(line, str) else json.dumps(line) for line in lines)
        path.write_text(text + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Isolate tests from PARCEL_* environment and cached settings."""
    for key in ("PARCEL_OUTPUT_DIR", "PARCEL_VERBOSE", "PARCEL_LOG_BUFFER_SIZE"):
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def read_descriptor():
    """Load the default.project.json written under a root."""

    def _read(root: Path) -> dict:
        return json.loads((root / "default.project.json").read_text(encoding="utf-8"))

    return _read
