"""
Operators Command

Lists which filter operators each property type accepts.
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from lifemetrics.cli.utils import console, print_header, print_json
from lifemetrics.filters.operators import filter_needs_value, get_available_operators, get_operator_label
from lifemetrics.filters.properties import PROPERTY_TYPE_DISPLAY_NAMES, PropertyType, parse_property_type


def operators(
    property_type: Annotated[Optional[str], typer.Argument(help="Property type, e.g. number or multi_select")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print as JSON")] = False,
):
    """
    Show the filter operators available for property types.

    [bold cyan]Examples:[/bold cyan]

    • All types: [green]lifemetrics operators[/green]
    • One type: [green]lifemetrics operators date[/green]
    """
    if property_type is None:
        _show_all(json_output)
        return

    resolved = parse_property_type(property_type)
    if resolved is None:
        available = ", ".join(t.value for t in PropertyType)
        console.print(f"[red]Unknown property type '{property_type}'[/red]")
        console.print(f"[dim]Available types: {available}[/dim]")
        raise typer.Exit(1)

    available_ops = get_available_operators(resolved)

    if json_output:
        print_json({
            "property_type": resolved.value,
            "operators": [
                {"operator": op.value, "label": get_operator_label(op), "needs_value": filter_needs_value(op)}
                for op in available_ops
            ],
        })
        return

    print_header(f"{PROPERTY_TYPE_DISPLAY_NAMES[resolved]} operators", f"Property type: {resolved.value}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Operator")
    table.add_column("Label")
    table.add_column("Needs value")
    for op in available_ops:
        table.add_row(op.value, get_operator_label(op), "yes" if filter_needs_value(op) else "no")
    console.print(table)


def _show_all(json_output: bool) -> None:
    if json_output:
        print_json({t.value: [op.value for op in get_available_operators(t)] for t in PropertyType})
        return

    print_header("Filter operators", "Operators available per property type")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Property type")
    table.add_column("Operators")
    for property_type in PropertyType:
        table.add_row(
            property_type.value,
            ", ".join(op.value for op in get_available_operators(property_type))
        )
    console.print(table)
