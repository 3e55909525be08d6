"""Core data models for Parcel: descriptor tree and project."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

ROOT_CLASS_NAME = "DataModel"


@dataclass
class TreePartition:
    """A node of the descriptor tree, optionally backed by a filesystem path."""

    path: str | None = None
    children: dict[str, TreePartition] = field(default_factory=dict)
    class_name: str | None = None
    ignore_unknown_instances: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize present fields only; children are inlined under their names, sorted."""
        data: dict[str, Any] = {}
        if self.class_name is not None:
            data["$className"] = self.class_name
        if self.ignore_unknown_instances is not None:
            data["$ignoreUnknownInstances"] = self.ignore_unknown_instances
        if self.path is not None:
            data["$path"] = self.path
        for name in sorted(self.children):
            data[name] = self.children[name].to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> TreePartition:
        """Build a partition from its manifest form (plain keys, nested ``children``)."""
        if not isinstance(data, dict):
            raise TypeError(f"partition must be an object, got {type(data).__name__}")
        children = data.get("children", {})
        if not isinstance(children, dict):
            raise TypeError("partition children must be an object")
        for key in ("path", "class_name"):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise TypeError(f"partition {key} must be a string")
        ignore = data.get("ignore_unknown_instances")
        if ignore is not None and not isinstance(ignore, bool):
            raise TypeError("partition ignore_unknown_instances must be a boolean")
        return cls(
            path=data.get("path"),
            children={name: cls.from_dict(child) for name, child in children.items()},
            class_name=data.get("class_name"),
            ignore_unknown_instances=data.get("ignore_unknown_instances"),
        )

    def to_manifest(self) -> dict[str, Any]:
        """Inverse of :meth:`from_dict`."""
        data: dict[str, Any] = {}
        if self.path is not None:
            data["path"] = self.path
        if self.class_name is not None:
            data["class_name"] = self.class_name
        if self.ignore_unknown_instances is not None:
            data["ignore_unknown_instances"] = self.ignore_unknown_instances
        if self.children:
            data["children"] = {name: child.to_manifest() for name, child in self.children.items()}
        return data


@dataclass
class Project:
    """The descriptor's root: a display name plus the top-level branches."""

    name: str = "project"
    tree: dict[str, TreePartition] = field(default_factory=dict)

    def branch_names(self) -> list[str]:
        return sorted(self.tree)

    def to_dict(self) -> dict[str, Any]:
        """Descriptor document: ``$className`` first, then branches sorted by name."""
        data: dict[str, Any] = {"$className": ROOT_CLASS_NAME}
        for name in self.branch_names():
            data[name] = self.tree[name].to_dict()
        return data

    def to_json(self) -> bytes:
        """Pretty-printed UTF-8 descriptor.

        Raises UnicodeEncodeError (or TypeError/ValueError) when a path or
        name cannot be encoded.
        """
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")
