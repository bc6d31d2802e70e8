"""
Config Command

Commands for creating, inspecting and validating LifeMetrics configuration
files.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from lifemetrics.cli.config_utils import load_config_from_cli, print_config_summary
from lifemetrics.cli.error_handling import handle_error
from lifemetrics.cli.utils import console, print_header
from lifemetrics.core.config import ConfigManager
from lifemetrics.core.exceptions import LifeMetricsError

app = typer.Typer(
    name="config",
    help="Create, show and validate configuration files",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

PROFILES = ("default", "todos", "notion")


@app.command("init")
def config_init(
    output: Annotated[str, typer.Option("--output", "-o", help="File to write")] = "lifemetrics.yaml",
    profile: Annotated[str, typer.Option("--profile", help="Example profile: default, todos or notion")] = "default",
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file")] = False,
):
    """
    Write an example configuration file.

    [bold cyan]Examples:[/bold cyan]

    • [green]lifemetrics config init[/green]
    • [green]lifemetrics config init --profile notion -o notion.yaml[/green]
    """
    if profile not in PROFILES:
        console.print(f"[red]Unknown profile '{profile}' (available: {', '.join(PROFILES)})[/red]")
        raise typer.Exit(1)

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[red]{output} already exists; use --force to overwrite[/red]")
        raise typer.Exit(1)

    ConfigManager().create_example_config(output_path, profile=profile)
    console.print(f"[green]✓ Wrote {profile} configuration to {output}[/green]")


@app.command("show")
def config_show(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file path")] = None,
):
    """Show the effective configuration after files and environment are merged."""
    app_config = load_config_from_cli(config_file=config)
    print_header("LifeMetrics Configuration", config or "default search paths")
    print_config_summary(app_config)
    console.print(yaml.safe_dump(app_config.model_dump(mode='json'), default_flow_style=False), markup=False)


@app.command("validate")
def config_validate(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file path")] = None,
):
    """Validate a configuration file, including its filter groups."""
    manager = ConfigManager(config_file=config)
    try:
        app_config = manager.load_config()
    except LifeMetricsError as e:
        handle_error(e)

    warnings = manager.validate_config(app_config)
    if warnings:
        console.print("[yellow]Configuration warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  • {warning}")
        raise typer.Exit(1)

    console.print("[bold green]✓ Configuration is valid[/bold green]")


@app.command("schema")
def config_schema(
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Write the schema to a file")] = None,
):
    """Print the JSON schema of the configuration file."""
    schema = ConfigManager().generate_schema(Path(output) if output else None)
    if output:
        console.print(f"[green]✓ Wrote schema to {output}[/green]")
    else:
        console.file.write(json.dumps(schema, indent=2) + "\n")
