"""
CLI Utilities

Shared utilities for CLI commands including file loading, logging setup,
and rich formatting.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from lifemetrics.core.exceptions import ErrorCode, RecordLoadError
from lifemetrics.filters.properties import FLAT_ADAPTER, RecordAdapter, get_field
from lifemetrics.people import Person
from lifemetrics.utils import coerce_text

console = Console()

# Keys under which API responses wrap their record lists
RECORD_LIST_KEYS = ('results', 'records', 'items')


def setup_cli_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route log output through rich on stderr."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )


def load_structured_file(path: str) -> Any:
    """
    Load a JSON or YAML file.

    Files ending in ``.json`` are parsed as JSON, everything else as YAML
    (which also accepts JSON).

    Raises:
        RecordLoadError: If the file is missing or cannot be parsed
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise RecordLoadError(
            f"File not found: {path}",
            error_code=ErrorCode.RECORDS_FILE_NOT_FOUND,
            file_path=str(path)
        )

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if file_path.suffix.lower() == '.json':
                return json.load(f)
            return yaml.safe_load(f)
    except (IOError, ValueError, yaml.YAMLError) as e:
        raise RecordLoadError(
            f"Could not parse {path}: {e}",
            error_code=ErrorCode.RECORDS_INVALID_FORMAT,
            file_path=str(path),
            cause=e
        )


def load_records(path: str) -> List[Any]:
    """
    Load a record collection.

    Accepts a top-level list, or a mapping wrapping the list under
    ``results`` (Notion query responses), ``records`` or ``items``.

    Raises:
        RecordLoadError: If the file does not hold a collection
    """
    data = load_structured_file(path)

    if isinstance(data, dict):
        for key in RECORD_LIST_KEYS:
            if isinstance(data.get(key), list):
                return data[key]

    if not isinstance(data, list):
        raise RecordLoadError(
            f"{path} does not contain a list of records",
            error_code=ErrorCode.RECORDS_NOT_A_COLLECTION,
            file_path=str(path)
        )
    return data


def load_people(path: str) -> List[Person]:
    """Load a people collection (list of mappings with name and nicknames)."""
    entries = load_records(path)
    people = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get('name'):
            raise RecordLoadError(
                f"Every person in {path} needs a 'name'",
                error_code=ErrorCode.RECORDS_INVALID_FORMAT,
                file_path=str(path)
            )
        people.append(Person.from_dict(entry))
    return people


def default_columns(records: Sequence[Any], adapter: RecordAdapter) -> List[str]:
    """Column names taken from the first record."""
    if not records:
        return []
    first = records[0]
    if adapter is FLAT_ADAPTER:
        if isinstance(first, dict):
            return list(first.keys())
        return list(vars(first).keys()) if hasattr(first, '__dict__') else []
    properties = get_field(first, 'properties')
    return list(properties.keys()) if isinstance(properties, dict) else []


def render_records_table(
    records: Sequence[Any],
    adapter: RecordAdapter,
    columns: Optional[Sequence[str]] = None,
    max_rows: int = 0,
    title: Optional[str] = None
) -> Table:
    """Build a rich table of records; ``max_rows`` of 0 shows every row."""
    columns = list(columns) if columns else default_columns(records, adapter)

    table = Table(title=title, show_header=True, header_style="bold cyan")
    for column in columns:
        table.add_column(column)

    shown = records if not max_rows else records[:max_rows]
    for record in shown:
        table.add_row(*[coerce_text(adapter.value(record, column, None)) for column in columns])

    return table


def print_header(title: str, subtitle: Optional[str] = None) -> None:
    """Print a formatted header for CLI output."""
    if subtitle:
        header_text = f"[bold cyan]{title}[/bold cyan]\n[dim]{subtitle}[/dim]"
    else:
        header_text = f"[bold cyan]{title}[/bold cyan]"

    console.print(Panel(header_text, border_style="cyan"))


def print_json(data: Any) -> None:
    """Write machine-readable JSON to stdout, without rich wrapping."""
    console.file.write(json.dumps(data, indent=2, default=str) + "\n")


def summarize_config(values: Dict[str, Any]) -> List[str]:
    """Format non-empty settings as ``key: value`` lines."""
    return [f"{key}: [cyan]{value}[/cyan]" for key, value in values.items() if value not in (None, [], "")]
