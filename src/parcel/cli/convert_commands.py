"""Convert command: parcel convert."""

from __future__ import annotations

import json
import sys
import time

import click
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from parcel.cli.main import console
from parcel.config import get_settings
from parcel.core.errors import ConversionError
from parcel.core.logging import LogBuffer, Verbosity, setup_logging
from parcel.convert import ConversionResult, run_conversion


def _summary_table(result: ConversionResult, elapsed: float) -> Table:
    table = Table(title="Conversion Summary", box=box.ROUNDED)
    table.add_column("Metric", style="bold", no_wrap=True)
    table.add_column("Value", justify="right")

    summary = result.summary
    if summary is not None:
        table.add_row("Branches", str(summary.branches))
        table.add_row("Files written", f"[green]{summary.files_written}[/green]")
        table.add_row("Folders created", f"[cyan]{summary.folders_created}[/cyan]")
        error_style = "yellow" if summary.errors else "dim"
        table.add_row("Errors", f"[{error_style}]{summary.errors}[/{error_style}]")
        descriptor = escape(str(summary.descriptor_path)) if summary.descriptor_path else "[red]not written[/red]"
        table.add_row("Descriptor", descriptor)
    table.add_row("Time", f"{elapsed:.2f}s")
    return table


@click.command()
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.option("--output", "-o", "output_dir", default=None, help="Output folder (default: PARCEL_OUTPUT_DIR or .)")
@click.option("--verbose", "-v", count=True, help="Verbosity level: -v per-instruction debug logging")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
def convert(input_path: str, output_dir: str | None, verbose: int, as_json: bool):
    """Materialize an instruction manifest into a project directory.

    INPUT_PATH is a .jsonl manifest. The project is written to
    OUTPUT/<manifest stem>/ with content under src/ and the
    default.project.json descriptor beside it.
    """
    settings = get_settings()
    verbosity = Verbosity(min(max(verbose, int(settings.verbose)), Verbosity.VERBOSE))
    if not as_json:
        setup_logging(verbosity)

    output = output_dir if output_dir is not None else str(settings.output_dir)
    log_buffer = LogBuffer(max_entries=settings.buffer_limit)

    if not as_json:
        console.print(
            Panel(
                f"[bold]Input:[/bold] {input_path}\n"
                f"[bold]Output:[/bold] {output}",
                title="[bold cyan]Parcel Convert[/bold cyan]",
                border_style="cyan",
            )
        )

    start_time = time.time()
    try:
        result = run_conversion(input_path, output, log_buffer=log_buffer)
    except ConversionError as e:
        if as_json:
            click.echo(json.dumps({"success": False, "message": str(e)}))
        else:
            console.print(f"[red]Conversion failed:[/red] {escape(str(e))}")
        sys.exit(1)
    elapsed = time.time() - start_time

    if as_json:
        data = result.to_dict()
        data["logs"] = [entry.to_dict() for entry in log_buffer.entries()]
        click.echo(json.dumps(data, indent=2))
        return

    console.print(_summary_table(result, elapsed))
    console.print(f"[green]{result.message}[/green]")

    if result.errors:
        console.print(f"\n[yellow]Completed with {len(result.errors)} warning(s):[/yellow]")
        for error in result.errors:
            console.print(f"  [yellow]![/yellow] {escape(str(error))}", highlight=False)
