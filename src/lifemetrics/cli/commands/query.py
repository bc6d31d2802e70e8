"""
Query Command

Filter, search and sort a JSON or YAML record collection from the command
line using the same filter groups a filter builder produces.
"""

import json
import logging
from typing import Annotated, Any, Dict, List, Optional

import typer

from lifemetrics.cli.config_utils import build_cli_args, load_config_from_cli, print_config_summary
from lifemetrics.cli.error_handling import handle_error
from lifemetrics.cli.utils import (
    console,
    load_records,
    load_structured_file,
    print_header,
    print_json,
    render_records_table,
    setup_cli_logging,
)
from lifemetrics.core.exceptions import ConfigurationError, ErrorCode, FilterValidationError, LifeMetricsError
from lifemetrics.filters.factory import FilterFactory
from lifemetrics.utils import parse_date

logger = logging.getLogger(__name__)


def parse_where(expression: str) -> Dict[str, Any]:
    """
    Parse an inline filter ``property:operator[:value]``.

    The value is read as JSON when possible (numbers, booleans, lists) and
    kept as a plain string otherwise.
    """
    parts = expression.split(":", 2)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise FilterValidationError(
            f"Invalid filter '{expression}', expected property:operator[:value]",
            error_code=ErrorCode.VALIDATION_INVALID_INPUT
        )

    value: Any = None
    if len(parts) == 3:
        try:
            value = json.loads(parts[2])
        except ValueError:
            value = parts[2]

    return {"property": parts[0], "operator": parts[1], "value": value}


def narrow_groups(groups: List[Dict[str, Any]], inline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    AND inline filters into every configured group.

    Groups are ORed together, so the inline filters are appended to each AND
    group. An OR group is split into one AND group per filter first.
    """
    if not groups:
        return [{"operator": "and", "filters": inline}]

    narrowed = []
    for group in groups:
        filters = list(group.get("filters") or [])
        operator = str(group.get("operator") or "and").lower()
        if operator == "and" or len(filters) <= 1:
            narrowed.append({**group, "operator": "and", "filters": filters + inline})
        else:
            narrowed.extend({"operator": "and", "filters": [f] + inline} for f in filters)
    return narrowed


def query(
    records_file: Annotated[str, typer.Argument(help="JSON or YAML file holding the records")],

    # Configuration
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file path")] = None,

    # Filtering
    filters: Annotated[Optional[str], typer.Option("--filters", "-f", help="JSON/YAML file with filter groups")] = None,
    where: Annotated[Optional[List[str]], typer.Option("--where", "-w", help="Inline filter property:operator[:value] (repeatable, all must match)")] = None,
    source: Annotated[Optional[str], typer.Option("--source", help="Record shape: flat or notion")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict", help="Reject illegal operators instead of warning")] = None,
    now: Annotated[Optional[str], typer.Option("--now", help="Reference time for relative date filters")] = None,

    # Search and sort
    search: Annotated[Optional[str], typer.Option("--search", "-s", help="Free-text search query")] = None,
    fields: Annotated[Optional[List[str]], typer.Option("--field", help="Field to search (repeatable)")] = None,
    sort: Annotated[Optional[str], typer.Option("--sort", help="Property to sort by")] = None,
    direction: Annotated[Optional[str], typer.Option("--direction", "-d", help="Sort direction: asc or desc")] = None,

    # Output
    json_output: Annotated[bool, typer.Option("--json", help="Print matching records as JSON")] = False,
    columns: Annotated[Optional[List[str]], typer.Option("--column", help="Column to show (repeatable)")] = None,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Maximum rows to show (0 = all)")] = None,
    verbose: Annotated[Optional[bool], typer.Option("--verbose", "-v", help="Enable verbose output")] = None,
    debug: Annotated[Optional[bool], typer.Option("--debug", help="Enable debug logging")] = None,
):
    """
    Filter, search and sort a record collection.

    [bold cyan]Examples:[/bold cyan]

    • Open todos: [green]lifemetrics query todos.json -w status:not_equals:Done[/green]
    • Saved filters: [green]lifemetrics query todos.json --filters groups.yaml --sort due[/green]
    • Notion export: [green]lifemetrics query pages.json --source notion -w Date:past_week[/green]
    • Search: [green]lifemetrics query habits.yaml -s coffee --field title --json[/green]
    """
    cli_args = build_cli_args(
        verbose=verbose,
        debug=debug,
        source=source,
        strict=strict,
        search=search,
        search_fields=fields,
        sort_key=sort,
        sort_direction=direction,
        output_format="json" if json_output else None,
        columns=columns,
        max_rows=limit,
    )
    app_config = load_config_from_cli(config_file=config, cli_args=cli_args)
    setup_cli_logging(app_config.verbose, app_config.debug)

    reference = None
    if now is not None:
        reference = parse_date(now)
        if reference is None:
            raise typer.BadParameter(f"Cannot parse date '{now}'", param_hint="--now")

    try:
        records = load_records(records_file)
        logger.info(f"Loaded {len(records)} records from {records_file}")

        filter_config = app_config.filters
        groups = list(filter_config.groups)
        if filters:
            loaded = load_structured_file(filters)
            state = FilterFactory.create_filter_state(loaded)
            groups = [group.to_dict() for group in state.groups]
        if where:
            groups = narrow_groups(groups, [parse_where(expression) for expression in where])
        updates = {"groups": groups}
        if sort and not filter_config.sort_direction:
            updates["sort_direction"] = "asc"
        filter_config = filter_config.model_copy(update=updates)

        query_args = FilterFactory.create_from_config(filter_config)
        engine = FilterFactory.create_engine(filter_config)
        view = engine.run(records, now=reference, **query_args)
    except ValueError as e:
        handle_error(ConfigurationError(str(e), error_code=ErrorCode.CONFIG_INVALID_VALUE, cause=e))
    except LifeMetricsError as e:
        handle_error(e)

    if app_config.output.format == "json":
        print_json(view)
        return

    print_header("Query Results", f"{len(view)} of {len(records)} records from {records_file}")
    if app_config.verbose:
        print_config_summary(app_config, target=records_file)

    if not view:
        console.print("[yellow]No records match.[/yellow]")
        return

    console.print(render_records_table(
        view,
        engine.adapter,
        columns=app_config.output.columns,
        max_rows=app_config.output.max_rows
    ))
    if app_config.output.max_rows and len(view) > app_config.output.max_rows:
        console.print(f"[dim]Showing {app_config.output.max_rows} of {len(view)} records[/dim]")
