"""
Free-text search over records.

A record's searchable text comes from, in order of preference: a caller
supplied text getter, the values of a caller supplied list of fields, or
every value on the record.
"""

from typing import Any, Callable, Iterable, List, Optional, Sequence

from lifemetrics.filters.properties import FLAT_ADAPTER, RecordAdapter
from lifemetrics.utils import coerce_text

TextGetter = Callable[[Any], str]


def searchable_text(
    record: Any,
    search_fields: Optional[Sequence[str]] = None,
    text_getter: Optional[TextGetter] = None,
    adapter: Optional[RecordAdapter] = None
) -> List[str]:
    """
    Collect the text segments a search query is matched against.

    Args:
        record: Record to read
        search_fields: Field names to search instead of every value
        text_getter: Function producing the full searchable text of a record
        adapter: How to read property values

    Returns:
        List of text segments; a query matches if any segment contains it
    """
    if text_getter is not None:
        return [text_getter(record) or ""]

    adapter = adapter or FLAT_ADAPTER
    if search_fields:
        return [coerce_text(adapter.value(record, field, None)) for field in search_fields]

    return [coerce_text(value) for value in adapter.values(record)]


def matches_search(
    record: Any,
    query: str,
    search_fields: Optional[Sequence[str]] = None,
    text_getter: Optional[TextGetter] = None,
    adapter: Optional[RecordAdapter] = None
) -> bool:
    """Case-insensitive substring test of ``query`` against a record."""
    if not query or not query.strip():
        return True

    needle = query.lower()
    segments = searchable_text(record, search_fields=search_fields, text_getter=text_getter, adapter=adapter)
    return any(needle in segment.lower() for segment in segments)


def apply_search(
    records: Iterable[Any],
    query: Optional[str],
    search_fields: Optional[Sequence[str]] = None,
    text_getter: Optional[TextGetter] = None,
    adapter: Optional[RecordAdapter] = None
) -> List[Any]:
    """
    Keep the records whose searchable text contains ``query``.

    An empty or whitespace-only query keeps every record.
    """
    if not query or not query.strip():
        return list(records)

    return [
        record for record in records
        if matches_search(record, query, search_fields=search_fields, text_getter=text_getter, adapter=adapter)
    ]
