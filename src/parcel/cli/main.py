"""Parcel CLI main entry point and shared utilities."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.group()
@click.version_option(package_name="parcel", prog_name="parcel")
def main():
    """Parcel: materialize instruction streams into a synced project layout."""
    pass


def cli():
    """Entrypoint that loads .env before running the CLI."""
    from dotenv import load_dotenv

    load_dotenv()
    main()


# Import subcommand modules to register commands
from parcel.cli.convert_commands import convert  # noqa: E402
from parcel.cli.tree_commands import tree  # noqa: E402

# Register commands
main.add_command(convert)
main.add_command(tree)
