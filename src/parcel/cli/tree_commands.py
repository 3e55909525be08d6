"""Tree command: parcel tree."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.markup import escape
from rich.tree import Tree

from parcel.cli.main import console
from parcel.materialize import DESCRIPTOR_FILENAME


def _add_partition(node: Tree, name: str, partition: dict) -> None:
    label = f"[bold]{escape(name)}[/bold]"
    class_name = partition.get("$className")
    if class_name:
        label += f" [dim]({escape(class_name)})[/dim]"
    path = partition.get("$path")
    if path:
        label += f" [cyan]→ {escape(path)}[/cyan]"
    branch = node.add(label)
    for key, value in partition.items():
        if key.startswith("$") or not isinstance(value, dict):
            continue
        _add_partition(branch, key, value)


@click.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
def tree(project_dir: str):
    """Show the descriptor tree of a materialized project.

    PROJECT_DIR is a conversion output folder containing default.project.json.
    """
    descriptor = Path(project_dir) / DESCRIPTOR_FILENAME
    if not descriptor.exists():
        console.print(f"[red]Error:[/red] descriptor not found: {escape(str(descriptor))}")
        sys.exit(1)

    try:
        data = json.loads(descriptor.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        console.print(f"[red]Error reading descriptor:[/red] {escape(str(e))}")
        sys.exit(1)

    root = Tree(f"[bold cyan]{escape(str(data.get('$className', '?')))}[/bold cyan]")
    branches = [k for k in data if not k.startswith("$")]
    for name in branches:
        if isinstance(data[name], dict):
            _add_partition(root, name, data[name])

    console.print(root)
    console.print(f"[dim]{len(branches)} top-level branch(es)[/dim]")
