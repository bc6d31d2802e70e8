"""
Stable sorting with nulls last.

Records with a None sort key always go to the end, whichever the
direction. Numbers compare numerically, strings by a collation key that
ignores case and accents, and anything else by its lowercased string form.
Records with equal keys keep their input order in both directions.
"""

import unicodedata
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Optional, Tuple

from lifemetrics.filters.base import SortConfig, SortDirection
from lifemetrics.filters.properties import FLAT_ADAPTER, RecordAdapter
from lifemetrics.utils import coerce_text

ValueGetter = Callable[[Any, str], Any]


def collation_key(text: str) -> Tuple[str, str]:
    """
    Sort key approximating locale-aware collation.

    Accents are stripped and case is folded for the primary comparison;
    the raw text breaks ties so the ordering stays total.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def compare_values(left: Any, right: Any) -> int:
    """Ascending three-way comparison of two non-null sort keys."""
    if _is_number(left) and _is_number(right):
        return _cmp(left, right)
    if isinstance(left, str) and isinstance(right, str):
        return _cmp(collation_key(left), collation_key(right))
    return _cmp(coerce_text(left).lower(), coerce_text(right).lower())


def apply_sort(
    records: Iterable[Any],
    config: Optional[SortConfig],
    value_getter: Optional[ValueGetter] = None,
    adapter: Optional[RecordAdapter] = None
) -> List[Any]:
    """
    Sort records by ``config.key``.

    Args:
        records: Records to sort; never mutated
        config: Sort configuration; no key or no direction keeps input order
        value_getter: Function (record, key) -> sort value
        adapter: How to read property values when no value_getter is given

    Returns:
        New sorted list
    """
    records = list(records)
    if config is None or not config.is_active:
        return records

    if value_getter is None:
        adapter = adapter or FLAT_ADAPTER
        value_getter = lambda record, key: adapter.value(record, key, None)

    keyed = [(value_getter(record, config.key), record) for record in records]
    present = [(value, record) for value, record in keyed if value is not None]
    missing = [record for value, record in keyed if value is None]

    if config.direction == SortDirection.DESC:
        comparator = lambda a, b: compare_values(b[0], a[0])
    else:
        comparator = lambda a, b: compare_values(a[0], b[0])

    present.sort(key=cmp_to_key(comparator))
    return [record for _, record in present] + missing


def next_sort_config(current: Optional[SortConfig], key: str) -> SortConfig:
    """
    Sort state after a column header click.

    Clicking the same column cycles ascending, descending, unsorted.
    Clicking a different column starts at ascending.
    """
    if current is None or current.key != key:
        return SortConfig(key=key, direction=SortDirection.ASC)
    if current.direction == SortDirection.ASC:
        return SortConfig(key=key, direction=SortDirection.DESC)
    if current.direction == SortDirection.DESC:
        return SortConfig(key=key, direction=None)
    return SortConfig(key=key, direction=SortDirection.ASC)
