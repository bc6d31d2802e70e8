#!/usr/bin/env python3
"""
LifeMetrics CLI Main Application

Typer-based command-line interface for querying personal-data records with
the LifeMetrics filter engine.
"""

import sys
from typing import Optional

import typer
from rich.console import Console

from lifemetrics.cli import __version__
from lifemetrics.cli.commands import config, operators, people, query

console = Console()

# Create main Typer application
app = typer.Typer(
    name="lifemetrics",
    help="Filter, search and sort personal-data records",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Add commands
app.command("query")(query.query)
app.command("operators")(operators.operators)
app.command("people")(people.people)
app.add_typer(config.app, name="config", help="Create, show and validate configuration files")


def version_callback(value: bool):
    """Show version information."""
    if value:
        console.print(f"[bold cyan]LifeMetrics[/bold cyan] version [green]{__version__}[/green]")
        console.print("Declarative filtering, search and sorting for personal data")
        raise typer.Exit()


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit"
    ),
):
    """
    LifeMetrics - filter, search and sort personal-data records

    [bold]Quick Start:[/bold]

    • Query records: [cyan]lifemetrics query todos.json -w status:not_equals:Done[/cyan]
    • Operators per type: [cyan]lifemetrics operators date[/cyan]
    • People in a title: [cyan]lifemetrics people "Lunch w/ Alex" --people people.json[/cyan]
    • Example config: [cyan]lifemetrics config init[/cyan]
    """
    pass


def main():
    """Entry point for the lifemetrics console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
