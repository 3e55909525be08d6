"""Instruction protocol between a tree-walking producer and a materializer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Union

from parcel.core.models import TreePartition


@dataclass
class AddToTree:
    """Register a new top-level branch of the descriptor tree."""

    name: str
    partition: TreePartition = field(default_factory=TreePartition)


@dataclass
class CreateFile:
    """Write a leaf file under the source directory."""

    filename: str
    contents: bytes = b""


@dataclass
class CreateFolder:
    """Ensure a directory exists under the source directory."""

    folder: str


Instruction = Union[AddToTree, CreateFile, CreateFolder]


class InstructionReader(ABC):
    """Abstract sink for an instruction stream."""

    @abstractmethod
    def read_instruction(self, instruction: Instruction) -> None:
        """Apply a single instruction."""
        ...

    @abstractmethod
    def finish_instructions(self) -> None:
        """Called once after the last instruction."""
        ...


def process_instructions(instructions: Iterable[Instruction], reader: InstructionReader) -> None:
    """Feed every instruction to ``reader`` in order, then finish it."""
    for instruction in instructions:
        reader.read_instruction(instruction)
    reader.finish_instructions()
