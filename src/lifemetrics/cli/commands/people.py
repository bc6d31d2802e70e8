"""
People Command

Shows which people a calendar event title refers to.
"""

from typing import Annotated

import typer
from rich.table import Table

from lifemetrics.cli.error_handling import handle_error
from lifemetrics.cli.utils import console, load_people, print_header, print_json
from lifemetrics.core.exceptions import LifeMetricsError
from lifemetrics.people import (
    extract_names_from_title,
    find_person_name_positions,
    match_people_to_names,
)


def people(
    title: Annotated[str, typer.Argument(help="Calendar event title, e.g. 'Coffee w/ John'")],
    people_file: Annotated[str, typer.Option("--people", "-p", help="JSON/YAML file of people")],
    json_output: Annotated[bool, typer.Option("--json", help="Print as JSON")] = False,
):
    """
    Match the people named in an event title.

    [bold cyan]Examples:[/bold cyan]

    • [green]lifemetrics people "Dinner with Sarah & Mike" --people people.json[/green]
    """
    try:
        collection = load_people(people_file)
    except LifeMetricsError as e:
        handle_error(e)

    names = extract_names_from_title(title)
    matched = match_people_to_names(names, collection)
    positions = {id(p.person): p for p in find_person_name_positions(title, matched)}

    if json_output:
        print_json({
            "title": title,
            "names": names,
            "people": [
                {
                    **person.to_dict(),
                    "start_index": positions[id(person)].start_index if id(person) in positions else None,
                    "end_index": positions[id(person)].end_index if id(person) in positions else None,
                }
                for person in matched
            ],
        })
        return

    print_header("People", title)

    if not names:
        console.print("[yellow]The title does not name anyone (no 'w/' or 'with').[/yellow]")
        return

    console.print(f"Names: [cyan]{', '.join(names)}[/cyan]")

    if not matched:
        console.print("[yellow]No matching people.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Person")
    table.add_column("Matched as")
    table.add_column("Position")
    for person in matched:
        position = positions.get(id(person))
        table.add_row(
            person.name,
            position.matched_name if position else "",
            f"{position.start_index}-{position.end_index}" if position else ""
        )
    console.print(table)
