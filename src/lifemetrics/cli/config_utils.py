"""
Configuration Utilities for CLI Commands

Shared utilities for handling configuration in CLI commands including
conversion helpers, validation, and display functions.
"""

from typing import Any, Dict, Optional

from rich.panel import Panel

from lifemetrics.cli.error_handling import console as error_console, handle_error
from lifemetrics.cli.utils import console, summarize_config
from lifemetrics.core.config import AppConfig, ConfigManager
from lifemetrics.core.exceptions import LifeMetricsError


def load_config_from_cli(
    config_file: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None
) -> AppConfig:
    """
    Load configuration from CLI arguments with proper error handling.

    Args:
        config_file: Optional path to configuration file
        cli_args: Dictionary of CLI arguments to override config

    Returns:
        Validated AppConfig instance

    Raises:
        typer.Exit: If configuration is invalid
    """
    try:
        config_manager = ConfigManager(config_file=config_file)
        app_config = config_manager.load_config(cli_args=cli_args or {})
    except LifeMetricsError as e:
        handle_error(e)

    warnings = config_manager.validate_config(app_config)
    if warnings:
        error_console.print("[yellow]Configuration warnings:[/yellow]")
        for warning in warnings:
            error_console.print(f"  • {warning}")
        error_console.print()

    return app_config


def build_cli_args(**kwargs: Any) -> Dict[str, Any]:
    """
    Build the CLI arguments dictionary passed to ConfigManager.load_config().

    Returns:
        Dictionary of non-None CLI arguments (empty lists are dropped too)
    """
    return {key: value for key, value in kwargs.items() if value is not None and value != []}


def print_config_summary(config: AppConfig, target: Optional[str] = None) -> None:
    """Print a summary of the effective configuration."""
    lines = []
    if target:
        lines.append(f"Target: [cyan]{target}[/cyan]")

    lines.extend(summarize_config({
        "Record source": config.filters.source,
        "Filter groups": len(config.filters.groups) or None,
        "Search": config.filters.search,
        "Search fields": ", ".join(config.filters.search_fields),
        "Sort": f"{config.filters.sort_key} {config.filters.sort_direction or ''}".strip()
        if config.filters.sort_key else None,
        "Strict": "enabled" if config.filters.strict else None,
        "Output": config.output.format,
    }))

    console.print(Panel(
        "\n".join(lines),
        title="[bold]Configuration[/bold]",
        border_style="green"
    ))
