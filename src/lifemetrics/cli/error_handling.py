"""
Error display for CLI commands.
"""

import logging

import typer
from rich.console import Console
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from lifemetrics.core.exceptions import LifeMetricsError

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def handle_error(err: LifeMetricsError) -> None:
    """Print a LifeMetricsError with its suggestions and exit with status 1."""
    logger.debug(f"Error details: {err.get_debug_info()}")

    console.print()
    console.print(Panel(
        Text(err.message),
        title=f"[bold red]Error {err.error_code.value}[/bold red]",
        border_style="red",
        expand=False
    ))

    problems = getattr(err, 'problems', None)
    if problems:
        for problem in problems:
            console.print(f"  • {problem}")

    if err.suggestions:
        console.print("\n[bold green]Suggested solutions:[/bold green]")
        for i, suggestion in enumerate(err.suggestions, 1):
            suggestion_text = Text(f"{i}. {suggestion.action}: {suggestion.description}\n")
            if suggestion.command:
                suggestion_text.append("   Run: ", style="bold")
                suggestion_text.append(suggestion.command, style="cyan")
            console.print(Padding(suggestion_text, (0, 1)))

    if err.context.correlation_id:
        console.print(Padding(f"Trace ID: [yellow]{err.context.correlation_id}[/yellow]", (1, 0, 0, 0)))

    raise typer.Exit(code=1)
